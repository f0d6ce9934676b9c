"""Tests for AdminKit CLI commands."""

import json

import pytest
from click.testing import CliRunner

from adminkit.cli.main import cli


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv("ADMINKIT_METADATA_PATH", raising=False)
    return CliRunner()


@pytest.fixture
def broken_metadata(tmp_path):
    """A YAML entity whose tenant rules name a field it does not declare."""
    entities = tmp_path / "entities"
    entities.mkdir()
    (entities / "supplier.yaml").write_text(
        "entity: supplier\n"
        "fields:\n"
        "  - name: name\n"
        "    required: true\n"
        "tenantRules:\n"
        "  requiredFields: [name, code]\n"
    )
    return tmp_path


class TestEntitiesList:
    def test_lists_builtins(self, runner):
        result = runner.invoke(cli, ["entities", "list"])
        assert result.exit_code == 0
        assert "DISPLAY NAME" in result.output
        assert "itemAttribute" in result.output
        assert "before_create" in result.output
        assert "6 entities" in result.output

    def test_includes_yaml_entities(self, runner, broken_metadata):
        result = runner.invoke(
            cli, ["--metadata-path", str(broken_metadata), "entities", "list"]
        )
        assert result.exit_code == 0
        assert "supplier" in result.output
        assert "7 entities" in result.output


class TestEntitiesValidate:
    def test_builtins_are_valid(self, runner):
        result = runner.invoke(cli, ["entities", "validate"])
        assert result.exit_code == 0
        assert "✓ category" in result.output
        assert "All entities are valid" in result.output

    def test_reports_problems(self, runner, broken_metadata):
        result = runner.invoke(
            cli, ["--metadata-path", str(broken_metadata), "entities", "validate"]
        )
        assert result.exit_code == 1
        assert "✗ supplier" in result.output
        assert "unknown field 'code'" in result.output

    def test_metadata_path_from_env(self, runner, broken_metadata):
        result = runner.invoke(
            cli,
            ["entities", "validate"],
            env={"ADMINKIT_METADATA_PATH": str(broken_metadata)},
        )
        assert result.exit_code == 1

    def test_missing_metadata_path(self, runner, tmp_path):
        result = runner.invoke(
            cli, ["--metadata-path", str(tmp_path / "nowhere"), "entities", "validate"]
        )
        assert result.exit_code == 2


class TestEntitiesJson:
    def test_routes(self, runner):
        result = runner.invoke(cli, ["entities", "routes"])
        assert result.exit_code == 0
        routes = json.loads(result.output)
        assert len(routes) == 6
        assert routes[0]["name"] == "organization"

    def test_endpoints(self, runner):
        result = runner.invoke(cli, ["entities", "endpoints"])
        endpoints = json.loads(result.output)
        assert endpoints[3]["routes"]["create"] == "POST /api/item"

    def test_navigation(self, runner):
        result = runner.invoke(cli, ["entities", "navigation"])
        sections = json.loads(result.output)
        assert sections[-1]["name"] == "Administration"

    def test_form(self, runner):
        result = runner.invoke(cli, ["entities", "form", "user"])
        assert result.exit_code == 0
        form = json.loads(result.output)
        assert form["title"] == "Users"
        assert form["sections"][0]["title"] == "Profile"

    def test_form_unknown_entity(self, runner):
        result = runner.invoke(cli, ["entities", "form", "gadget"])
        assert result.exit_code == 1
        assert "Entity 'gadget' is not registered" in result.output


class TestCLIEntryPoint:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "AdminKit" in result.output
        assert "entities" in result.output

    def test_entities_help(self, runner):
        result = runner.invoke(cli, ["entities", "--help"])
        assert result.exit_code == 0
        assert "validate" in result.output
