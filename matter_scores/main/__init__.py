"""
Composition root for the scoring service.

Wires the registry, scorer, capability detector and Mongo repositories into
the three ways the service runs:

- ``app``: the FastAPI score and capability API (``matter-scores-api``)
- ``worker``: Celery workers refreshing the score cache (``matter-scores-worker``)
- ``cli``: offline scoring of an endpoint dump and cache rebuilds
  (``matter-scores``)

Settings come from ``config`` and the shared dependency container from
``container``.
"""

from .config import AppSettings, get_settings
from .container import AppContainer, get_container, init_container

__all__ = [
    "AppSettings",
    "get_settings",
    "AppContainer",
    "init_container",
    "get_container",
]
