"""Domain port for loading the capability catalog."""

from __future__ import annotations

from typing import Protocol

from matter_scores.domain.entities.capability import CapabilityCatalog


class ICapabilityCatalogLoader(Protocol):
    """Supplies the user-facing capability definitions."""

    def load(self) -> CapabilityCatalog:
        ...
