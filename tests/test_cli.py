"""
Tests for the smartspace CLI.

The language provider is swapped for the keyword identifier so command
outcomes don't depend on langdetect.
"""

import json

import pytest
from typer.testing import CliRunner

from smartspace.cli import app
from smartspace.errors import EMPTY_TEXT_MESSAGE, LANGUAGE_UNSUPPORTED_MESSAGE
from smartspace.providers.base import ProviderRegistry


@pytest.fixture(autouse=True)
def keyword_registry(monkeypatch, identifier):
    registry = ProviderRegistry()
    registry.register_language("langdetect", lambda: identifier)
    monkeypatch.setattr("smartspace.api.get_registry", lambda: registry)
    return registry


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli(runner, tmp_path):
    """Invoke the CLI against a temporary store."""
    store = tmp_path / "store"

    def invoke(*args, input=None):
        return runner.invoke(app, ["--store", str(store), *args], input=input)
    invoke.store = store
    return invoke


class TestSpaces:

    def test_create_and_list(self, cli):
        result = cli("create", "Reading")
        assert result.exit_code == 0
        assert "Created space 'Reading'" in result.output

        result = cli("list")
        assert "Reading  [Learning, Private Cloud Compute]" in result.output

    def test_create_with_options(self, cli):
        result = cli("--json", "create", "Job", "--type", "work", "--mode", "on-device")

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["type"] == "Work"
        assert data["mode"] == "On-device"

    def test_bad_choice(self, cli):
        result = cli("create", "Odd", "--type", "hobby")
        assert result.exit_code != 0

    def test_duplicate_name(self, cli):
        cli("create", "Café")
        result = cli("create", "cafe")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_list_empty(self, cli):
        assert "No spaces yet." in cli("list").output

    def test_show(self, cli):
        cli("create", "Reading")
        result = cli("show", "reading")
        assert result.exit_code == 0
        assert "Type: Learning" in result.output
        assert "No blocks yet." in result.output

    def test_unknown_space(self, cli):
        result = cli("show", "Nowhere")
        assert result.exit_code == 1
        assert "No space named 'Nowhere'" in result.output

    def test_store_from_env(self, runner, tmp_path):
        store = tmp_path / "env-store"
        result = runner.invoke(app, ["create", "Env"], env={"SMARTSPACE_STORE_PATH": str(store)})
        assert result.exit_code == 0
        assert (store / "spaces.db").exists()


class TestImport:

    def test_mixed_batch(self, cli, tmp_path, english_text, spanish_text):
        cli("create", "Reading")
        good = tmp_path / "fox.txt"
        bad = tmp_path / "hola.txt"
        good.write_text(english_text, encoding="utf-8")
        bad.write_text(spanish_text, encoding="utf-8")

        result = cli("import", "Reading", str(good), str(bad))

        assert result.exit_code == 1
        assert "Imported fox.txt as" in result.output
        assert f"Skipped hola.txt: {LANGUAGE_UNSUPPORTED_MESSAGE}" in result.output

        listing = cli("attachments", "Reading")
        assert "fox.txt" in listing.output
        assert "English" in listing.output
        assert "hola.txt" not in listing.output

    def test_json_report(self, cli, tmp_path, english_text):
        cli("create", "Reading")
        good = tmp_path / "fox.txt"
        good.write_text(english_text, encoding="utf-8")

        result = cli("--json", "import", "Reading", str(good))

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data[0]["admitted"] is True
        assert data[0]["attachment"]["language_code"] == "en"
        assert data[0]["attachment"]["file_present"] is True


class TestPaste:

    def test_paste_argument(self, cli, english_text):
        cli("create", "Reading")
        result = cli("paste", "Reading", english_text)
        assert result.exit_code == 0
        assert "-pasted.txt" in result.output
        assert "Pasted text.txt" in cli("attachments", "Reading").output

    def test_paste_stdin(self, cli, english_text):
        cli("create", "Reading")
        result = cli("paste", "Reading", input=english_text)
        assert result.exit_code == 0

    def test_empty_paste(self, cli):
        cli("create", "Reading")
        result = cli("paste", "Reading", "   ")
        assert result.exit_code == 1
        assert EMPTY_TEXT_MESSAGE in result.output
        assert not (cli.store / "Attachments").exists()


class TestRemoval:

    def _import_one(self, cli, tmp_path, english_text):
        cli("create", "Reading")
        path = tmp_path / "fox.txt"
        path.write_text(english_text, encoding="utf-8")
        data = json.loads(cli("--json", "import", "Reading", str(path)).output)
        return data[0]["attachment"]["stored_file_name"]

    def test_remove(self, cli, tmp_path, english_text):
        stored = self._import_one(cli, tmp_path, english_text)

        result = cli("remove", "Reading", stored)

        assert result.exit_code == 0
        assert f"Removed {stored}" in result.output
        assert not (cli.store / "Attachments" / stored).exists()
        assert "No attachments yet." in cli("attachments", "Reading").output

    def test_remove_unknown(self, cli, tmp_path, english_text):
        self._import_one(cli, tmp_path, english_text)
        result = cli("remove", "Reading", "nope.txt")
        assert result.exit_code == 1

    def test_missing_file_flagged(self, cli, tmp_path, english_text):
        stored = self._import_one(cli, tmp_path, english_text)
        (cli.store / "Attachments" / stored).unlink()

        assert "[file missing]" in cli("attachments", "Reading").output

    def test_delete_requires_confirmation(self, cli, tmp_path, english_text):
        self._import_one(cli, tmp_path, english_text)

        result = cli("delete", "Reading", input="n\n")

        assert result.exit_code == 1
        assert "Reading" in cli("list").output

    def test_delete(self, cli, tmp_path, english_text):
        stored = self._import_one(cli, tmp_path, english_text)

        result = cli("delete", "Reading", "--yes")

        assert result.exit_code == 0
        assert "1 attachment(s)" in result.output
        assert not (cli.store / "Attachments" / stored).exists()
        assert "No spaces yet." in cli("list").output
