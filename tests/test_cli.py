"""Tests for the command line interface."""

import json

import pytest
from click.testing import CliRunner

from formforge.cli import cli


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        f"""
[database]
path = "{(tmp_path / 'cli.db').as_posix()}"

[log]
file = "{(tmp_path / 'logs' / 'formforge.log').as_posix()}"
level = "WARNING"
"""
    )
    return str(path)


@pytest.fixture
def invoke(config_path):
    runner = CliRunner()

    def _invoke(*args, **kwargs):
        return runner.invoke(cli, ["-c", config_path, *args], obj={}, **kwargs)

    return _invoke


@pytest.fixture
def definition(invoke):
    assert invoke("brand", "create", "acme").exit_code == 0
    result = invoke("config", "create", "1", "checkout")
    assert result.exit_code == 0
    return "1", "1"


def test_init_config_writes_file(tmp_path, monkeypatch):
    monkeypatch.setenv("FORMFORGE_LOG__FILE", str(tmp_path / "formforge.log"))
    runner = CliRunner()
    target = tmp_path / "new.toml"

    result = runner.invoke(cli, ["-c", str(target), "init-config", str(target)], obj={})

    assert result.exit_code == 0
    assert target.exists()
    assert "[database]" in target.read_text()


def test_init_config_refuses_overwrite(tmp_path, monkeypatch):
    monkeypatch.setenv("FORMFORGE_LOG__FILE", str(tmp_path / "formforge.log"))
    runner = CliRunner()
    target = tmp_path / "existing.toml"
    target.write_text("")

    result = runner.invoke(cli, ["-c", str(target), "init-config", str(target)], obj={})

    assert result.exit_code != 0
    assert "already exists" in result.output


def test_brand_create_and_list(invoke):
    assert invoke("brand", "create", "acme").exit_code == 0
    assert invoke("brand", "create", "globex").exit_code == 0

    result = invoke("brand", "list")

    assert result.exit_code == 0
    assert "1\tacme" in result.output
    assert "2\tglobex" in result.output


def test_duplicate_brand_reports_error(invoke):
    invoke("brand", "create", "acme")
    result = invoke("brand", "create", "acme")

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_config_create_starts_at_version_one(invoke, definition):
    result = invoke("config", "list", "1")

    assert result.exit_code == 0
    assert "1\tcheckout\t1\t1" in result.output


def test_config_create_with_description(invoke):
    invoke("brand", "create", "acme")
    result = invoke("config", "create", "1", "payment", "--description", "Payment page")
    assert result.exit_code == 0

    listed = invoke("config", "list", "1")
    assert "1\tpayment\t1\t1\tPayment page" in listed.output


def test_field_add_creates_versions(invoke, definition):
    result = invoke(
        "field", "add", *definition,
        "--name", "size", "--type", "select", "--options", "S, M, L", "--required",
    )
    assert result.exit_code == 0
    assert "saved as version 2" in result.output

    listed = invoke("field", "list", *definition)
    fields = [json.loads(line) for line in listed.output.splitlines() if line.startswith("{")]
    assert fields == [
        {"name": "size", "type": "select", "label": "size", "options": "S, M, L", "required": True}
    ]


def test_field_add_without_options_fails(invoke, definition):
    result = invoke("field", "add", *definition, "--name", "size", "--type", "radio")

    assert result.exit_code == 1
    assert "needs at least one option" in result.output


def test_field_edit_and_delete(invoke, definition):
    invoke("field", "add", *definition, "--name", "age")

    edited = invoke("field", "edit", *definition, "age", "--name", "years", "--type", "number")
    assert edited.exit_code == 0
    assert "saved as version 3" in edited.output

    deleted = invoke("field", "delete", *definition, "years")
    assert deleted.exit_code == 0
    assert "saved as version 4" in deleted.output

    missing = invoke("field", "delete", *definition, "years")
    assert missing.exit_code == 1
    assert "not found" in missing.output


def test_versions_and_activate(invoke, definition):
    invoke("field", "add", *definition, "--name", "a")
    invoke("field", "add", *definition, "--name", "b")

    result = invoke("config", "activate", *definition, "2")
    assert result.exit_code == 0

    versions = invoke("config", "versions", *definition)
    lines = [line for line in versions.output.splitlines() if line[:1].isdigit()]
    assert [line.split("\t")[0] for line in lines] == ["3", "2", "1"]
    assert lines[1].split("\t")[1] == "*"

    missing = invoke("config", "activate", *definition, "8")
    assert missing.exit_code == 1
    assert "Available versions: 3, 2, 1" in missing.output


def test_export_active_version_to_file(invoke, definition, tmp_path):
    invoke("field", "add", *definition, "--name", "agree", "--type", "checkbox")
    output = tmp_path / "out.json"

    first = invoke("config", "export", *definition, "-o", str(output))
    assert first.exit_code == 0
    doc = json.loads(output.read_text())
    assert doc == {
        "name": "checkout",
        "schema": {"type": "object", "properties": {}},
        "uiSchema": {},
        "formData": {},
    }

    invoke("config", "activate", *definition, "2")
    invoke("config", "export", *definition, "-o", str(output))
    assert json.loads(output.read_text())["formData"] == {"agree": False}


def test_rename_and_delete(invoke, definition):
    renamed = invoke("config", "rename", *definition, "payment")
    assert renamed.exit_code == 0
    assert "Renamed to payment" in renamed.output

    deleted = invoke("config", "delete", *definition, "--yes")
    assert deleted.exit_code == 0

    listed = invoke("config", "list", "1")
    assert "payment" not in listed.output
