"""Shared fixtures: a small nested schema and a parse config using it."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tabproj.config import ParseConfig


def _build_bee_schema() -> dict:
    """Object schema with a required integer, and a nested object.

    Contains:
    - /locationa (integer, required)
    - /bee (object, required) with /bee/loc (string)
    - /bee/rock (object) with /bee/rock/flower (boolean)
    """
    return {
        "type": "object",
        "properties": {
            "locationa": {"type": "integer"},
            "bee": {
                "type": "object",
                "properties": {
                    "loc": {"type": "string"},
                    "rock": {
                        "type": "object",
                        "properties": {
                            "flower": {"type": "boolean"},
                        },
                    },
                },
            },
        },
        "required": ["locationa", "bee"],
    }


@pytest.fixture
def bee_schema() -> dict:
    return _build_bee_schema()


@pytest.fixture
def bee_config(bee_schema: dict) -> ParseConfig:
    """Config with one override to a missing location and one shadowing a derived name."""
    return ParseConfig(
        projections={
            "fieldA": "/locationa",
            "fieldB": "/b/loc",
            "BeeLoc": "/locationa",
        },
        schema=bee_schema,
    )


@pytest.fixture
def bee_config_path(tmp_path: Path, bee_schema: dict) -> Path:
    """The bee config written to disk, with extra parser keys that are ignored."""
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "delimiter": ",",
                "projections": {
                    "fieldA": "/locationa",
                    "fieldB": "/b/loc",
                    "BeeLoc": "/locationa",
                },
                "schema": bee_schema,
            }
        )
    )
    return path
