"""Tests for configuration management."""

import json

import pytest
import yaml

from chromlift.core.exceptions import ConfigurationError
from chromlift.utils.config import (
    create_default_configuration, load_configuration, merge_configurations,
    save_configuration, validate_configuration_schema
)


def test_default_configuration_is_valid():
    result = validate_configuration_schema(create_default_configuration())
    assert result.is_valid
    assert result.warnings == []


@pytest.mark.parametrize("suffix", [".yaml", ".json"])
def test_save_and_load(tmp_path, suffix):
    path = tmp_path / f"config{suffix}"
    config = create_default_configuration()
    config["assembly"]["target"] = "T2T-CHM13"

    save_configuration(config, path)

    assert load_configuration(path) == config


def test_partial_file_is_filled_from_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"assembly": {"source": "GRCh38", "target": "GRCh37"}}))

    config = load_configuration(path)

    assert config["assembly"] == {"source": "GRCh38", "target": "GRCh37"}
    assert config["provider"]["species"] == "human"
    assert config["output"]["format"] == "json"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_configuration(path) == create_default_configuration()


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_configuration(tmp_path / "nope.yaml")


def test_unsupported_suffix(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[x]")
    with pytest.raises(ConfigurationError, match="Unsupported"):
        load_configuration(path)


def test_unparseable_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(ConfigurationError, match="parsing"):
        load_configuration(path)


@pytest.mark.parametrize("override", [
    {"provider": {"timeout": -1}},
    {"provider": {"timeout": "soon"}},
    {"logging": {"level": "LOUD"}},
    {"assembly": {"source": ""}},
    {"output": "bed"},
])
def test_invalid_values_are_rejected(override):
    with pytest.raises(ConfigurationError):
        merge_configurations(create_default_configuration(), override)


def test_identical_assemblies_warn():
    config = create_default_configuration()
    config["assembly"]["target"] = "GRCh37"
    result = validate_configuration_schema(config)
    assert result.is_valid
    assert "identical" in result.warnings[0]


def test_merge_is_recursive():
    merged = merge_configurations(create_default_configuration(), {"provider": {"species": "mouse"}})
    assert merged["provider"]["species"] == "mouse"
    assert merged["provider"]["server"] == "https://rest.ensembl.org"


def test_save_rejects_unknown_suffix(tmp_path):
    with pytest.raises(ConfigurationError):
        save_configuration(create_default_configuration(), tmp_path / "config.txt")


def test_load_reports_path_on_invalid_values(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"logging": {"level": "LOUD"}}))
    with pytest.raises(ConfigurationError) as excinfo:
        load_configuration(path)
    assert excinfo.value.config_path == path
