from __future__ import annotations

import pytest

from matter_scores.domain.entities.capability import ClusterRole
from matter_scores.domain.entities.errors import RegistryLoadError
from matter_scores.domain.entities.registry import CommandDirection
from matter_scores.domain.services.specification_registry import SpecificationRegistry
from matter_scores.infrastructure.registry import (
    YamlCapabilityCatalogLoader,
    YamlSpecificationLoader,
)


def test_bundled_specifications_load() -> None:
    registry = SpecificationRegistry.from_loader(YamlSpecificationLoader())

    light = registry.get_device_type(256)
    assert light is not None
    assert light.name == "On/Off Light"
    assert light.mandatory_server == (3, 4, 6, 98)
    assert light.spec_version == "1.0"

    thermostat_weights = registry.get_scoring_weights(769)
    assert thermostat_weights.key_client_clusters == (514, 1026)
    assert thermostat_weights.key_client_bonus == 0.1

    assert registry.has_feature(513, "SCH", 8) is True
    responses = [
        command
        for command in registry.get_cluster(513).commands
        if command.direction == CommandDirection.SERVER_TO_CLIENT
    ]
    assert [command.name for command in responses] == ["GetWeeklyScheduleResponse"]


def test_bundled_capability_catalog_loads() -> None:
    catalog = YamlCapabilityCatalogLoader().load()

    assert catalog.categories[0] == ("power", "Power & Energy")
    assert dict(catalog.categories)["lighting"] == "Lighting"
    assert "on_off" in catalog.relevant_capabilities("lighting")
    assert catalog.relevant_capabilities(None) == ()

    by_key = {definition.key: definition for definition in catalog.capabilities}
    scheduling = by_key["scheduling"]
    assert scheduling.triggers[0].cluster_id == 513
    assert scheduling.triggers[0].role == ClusterRole.SERVER
    assert scheduling.triggers[0].features == ("SCH", "MSCH")
    assert dict(by_key["on_off"].actions)[1] == "Turn on"


def test_custom_specification_files(tmp_path) -> None:
    device_types = tmp_path / "device_types.yaml"
    device_types.write_text(
        "device_types:\n"
        "  - id: 300\n"
        "    name: Custom\n"
        "    spec_version: 1.3\n"
        "    mandatory_server: [6]\n"
        "    scoring_weights: {optionalServerWeight: 0}\n",
        encoding="utf-8",
    )
    clusters = tmp_path / "clusters.yaml"
    clusters.write_text(
        "clusters:\n"
        "  - id: 6\n"
        "    name: On/Off\n"
        "    commands:\n"
        "      - {id: 1, name: On}\n"
        "    features:\n"
        "      - {bit: 0, code: LT, name: Lighting}\n",
        encoding="utf-8",
    )

    types, cluster_specs = YamlSpecificationLoader(device_types, clusters).load()

    assert types[0].id == 300
    assert types[0].hex_id == "0x012C"
    assert types[0].spec_version == "1.3"
    assert types[0].weights().optional_server == 0.0
    assert cluster_specs[0].commands[0].direction == CommandDirection.CLIENT_TO_SERVER
    assert cluster_specs[0].feature("LT").mask == 1


def test_empty_file_yields_nothing(tmp_path) -> None:
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")

    types, clusters = YamlSpecificationLoader(empty, empty).load()

    assert types == []
    assert clusters == []


def test_missing_file_raises_registry_error(tmp_path) -> None:
    loader = YamlSpecificationLoader(device_types_path=tmp_path / "absent.yaml")

    with pytest.raises(RegistryLoadError) as exc:
        loader.load()
    assert "absent.yaml" in exc.value.message


def test_non_mapping_document_raises(tmp_path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")

    with pytest.raises(RegistryLoadError):
        YamlCapabilityCatalogLoader(path).load()


def test_invalid_yaml_raises(tmp_path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("capabilities: [unterminated\n", encoding="utf-8")

    with pytest.raises(RegistryLoadError):
        YamlCapabilityCatalogLoader(path).load()


def test_malformed_entry_raises(tmp_path) -> None:
    path = tmp_path / "device_types.yaml"
    path.write_text("device_types:\n  - id: 300\n", encoding="utf-8")

    with pytest.raises(RegistryLoadError) as exc:
        YamlSpecificationLoader(device_types_path=path).load()
    assert "error" in exc.value.details


def test_capability_without_label_raises(tmp_path) -> None:
    path = tmp_path / "capabilities.yaml"
    path.write_text(
        "capabilities:\n  on_off:\n    clusters: [{id: 6}]\n", encoding="utf-8"
    )

    with pytest.raises(RegistryLoadError):
        YamlCapabilityCatalogLoader(path).load()


def test_custom_catalog_keeps_file_order(tmp_path) -> None:
    path = tmp_path / "capabilities.yaml"
    path.write_text(
        "categories:\n"
        "  zeta: Zeta\n"
        "  alpha: Alpha\n"
        "capabilities:\n"
        "  b_cap:\n"
        "    label: B\n"
        "    category: zeta\n"
        "    clusters:\n"
        "      - {id: 1030, role: client}\n"
        "      - {role: server}\n"
        "  a_cap:\n"
        "    label: A\n"
        "device_type_relevant_capabilities:\n"
        "  lighting: [b_cap]\n",
        encoding="utf-8",
    )

    catalog = YamlCapabilityCatalogLoader(path).load()

    assert [key for key, _ in catalog.categories] == ["zeta", "alpha"]
    assert [c.key for c in catalog.capabilities] == ["b_cap", "a_cap"]
    assert len(catalog.capabilities[0].triggers) == 1
    assert catalog.capabilities[0].triggers[0].role == ClusterRole.CLIENT
    assert catalog.capabilities[1].category == "other"
    assert catalog.relevant_capabilities("lighting") == ("b_cap",)
