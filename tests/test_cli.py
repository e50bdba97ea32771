"""Tests for tabproj.cli: the projections and lookup commands."""

from __future__ import annotations

import json

from click.testing import CliRunner

from tabproj.cli import main


class TestProjectionsCommand:
    def test_prints_table(self, bee_config_path):
        result = CliRunner().invoke(main, ["projections", str(bee_config_path)])
        assert result.exit_code == 0, result.output
        table = json.loads(result.stdout)
        assert table["beeloc"]["target_location"] == "/locationa"
        assert table["fieldb"]["possible_types"] is None
        assert table["bee rock flower"] == {
            "target_location": "/bee/rock/flower",
            "must_exist": False,
            "possible_types": ["boolean"],
        }

    def test_schema_error(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"schema": {"$ref": "#/nowhere"}}))
        result = CliRunner().invoke(main, ["projections", str(path)])
        assert result.exit_code == 1
        assert "cannot process json schema" in result.output

    def test_invalid_config(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"projections": {"a": "no-slash"}}))
        result = CliRunner().invoke(main, ["projections", str(path)])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_missing_file(self, tmp_path):
        result = CliRunner().invoke(main, ["projections", str(tmp_path / "absent.json")])
        assert result.exit_code == 2


class TestLookupCommand:
    def test_mapped_headers(self, bee_config_path):
        result = CliRunner().invoke(main, ["lookup", str(bee_config_path), "Bee Loc", "LOCATIONA"])
        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert lines[0] == "'Bee Loc' -> /bee/loc: string"
        assert lines[1] == "'LOCATIONA' -> /locationa: integer (required)"

    def test_unresolved_projection_has_unknown_types(self, bee_config_path):
        result = CliRunner().invoke(main, ["lookup", str(bee_config_path), "fieldB"])
        assert result.exit_code == 0
        assert "'fieldB' -> /b/loc: unknown" in result.stdout

    def test_unmapped_header_exits_1(self, bee_config_path):
        result = CliRunner().invoke(main, ["lookup", str(bee_config_path), "Flower"])
        assert result.exit_code == 1
        assert "'Flower' -> 'flower': (unmapped)" in result.stdout

    def test_log_level_option(self, bee_config_path):
        result = CliRunner().invoke(
            main, ["--log-level", "debug", "lookup", str(bee_config_path), "bee"]
        )
        assert result.exit_code == 0
