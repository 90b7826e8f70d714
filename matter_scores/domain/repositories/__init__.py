"""
Repositories Package

This package contains interfaces defining repository contracts
for data access operations. Specific implementations are provided
by the infrastructure layer.
"""

from .device_observation_repository import IDeviceObservationRepository
from .device_score_repository import IDeviceScoreRepository

__all__ = ["IDeviceObservationRepository", "IDeviceScoreRepository"]
