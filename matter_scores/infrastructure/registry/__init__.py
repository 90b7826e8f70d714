"""
Registry package - Infrastructure Layer

YAML-backed loaders for the specification registry and the capability
catalog. Seed data ships with the package under ``data/``.
"""

from matter_scores.infrastructure.registry.yaml_loaders import (
    YamlCapabilityCatalogLoader,
    YamlSpecificationLoader,
)

__all__ = ["YamlCapabilityCatalogLoader", "YamlSpecificationLoader"]
