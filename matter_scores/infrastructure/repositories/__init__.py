"""
Repositories Package - Infrastructure Layer

This package contains concrete implementations of the repository
interfaces defined in the domain layer. These implementations
handle the details of data persistence.
"""

from .device_observation_repository import DeviceObservationRepository
from .device_score_repository import DeviceScoreRepository

__all__ = ["DeviceObservationRepository", "DeviceScoreRepository"]
