"""Domain port for loading device-type and cluster specifications."""

from __future__ import annotations

from typing import List, Protocol, Tuple

from matter_scores.domain.entities.registry import ClusterSpec, DeviceTypeSpec


class ISpecificationLoader(Protocol):
    """Supplies every specification record the registry is built from."""

    def load(self) -> Tuple[List[DeviceTypeSpec], List[ClusterSpec]]:
        """Return all device-type and cluster specifications.

        Raises:
            RegistryLoadError: If the source cannot be read or parsed.
        """
        ...
