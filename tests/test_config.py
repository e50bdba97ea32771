"""Tests for tabproj.config: loading parse configurations."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from tabproj.config import ParseConfig, load_config


class TestParseConfig:
    def test_defaults(self):
        config = ParseConfig()
        assert config.projections == {}
        assert config.json_schema is None

    def test_schema_alias_and_field_name(self):
        assert ParseConfig(schema=True).json_schema is True
        assert ParseConfig(json_schema={"type": "string"}).json_schema == {"type": "string"}

    def test_projection_order_preserved(self):
        config = ParseConfig(projections={"b": "/b", "a": "/a", "c": "/c"})
        assert list(config.projections) == ["b", "a", "c"]

    def test_invalid_pointer_rejected(self):
        with pytest.raises(ValidationError, match="projection 'fieldA'"):
            ParseConfig(projections={"fieldA": "locationa"})


class TestLoadConfig:
    def test_load(self, bee_config_path, bee_schema):
        config = load_config(bee_config_path)
        assert config.projections["BeeLoc"] == "/locationa"
        assert config.json_schema == bee_schema

    def test_unknown_keys_ignored(self, bee_config_path):
        config = load_config(bee_config_path)
        assert not hasattr(config, "delimiter")

    def test_null_schema(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"schema": None, "projections": {}}))
        assert load_config(path).json_schema is None

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ValidationError):
            load_config(path)
