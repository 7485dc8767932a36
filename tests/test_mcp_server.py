"""Tests for the MCP command server."""
import json

from jdnotes.exceptions import StorageError
from jdnotes.models.schema import AIProvider

EXPECTED_TOOLS = {
    "get_database_path",
    "get_database_url",
    "get_database_info",
    "copy_database_to",
    "change_database_location",
    "get_config_path",
    "get_ai_settings",
    "save_ai_settings",
    "export_database_json",
    "import_database_json",
    "import_from_indexeddb",
}


class TestToolRegistration:

    def test_all_commands_registered(self, mcp_server):
        registered = {tool.name for tool in mcp_server.mcp._tool_manager.list_tools()}

        assert EXPECTED_TOOLS <= registered


class TestDatabaseTools:

    def test_get_database_path(self, get_tool, app_dir):
        assert get_tool("get_database_path")() == str(app_dir / "jdnotes.db")

    def test_get_database_url(self, get_tool, app_dir):
        assert get_tool("get_database_url")() == f"sqlite:{app_dir / 'jdnotes.db'}"

    def test_get_database_info_returns_json(self, get_tool, store):
        store.default_database_path().write_bytes(b"x" * 1_048_576)

        info = json.loads(get_tool("get_database_info")())

        assert info["exists"] is True
        assert info["size"] == 1_048_576
        assert info["size_formatted"] == "1.00 MB"
        assert info["is_custom"] is False

    def test_change_database_location(self, get_tool, store, tmp_path):
        store.default_database_path().write_bytes(b"data")

        result = get_tool("change_database_location")(new_dir=str(tmp_path / "moved"))

        assert result == str(tmp_path / "moved" / "jdnotes.db")
        assert store.load().database_path == result

    def test_change_database_location_error_is_descriptive(self, get_tool, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        result = get_tool("change_database_location")(new_dir=str(blocker / "sub"))

        assert result.startswith("Error: Failed to create target directory")

    def test_copy_database_to_without_database(self, get_tool, tmp_path):
        result = get_tool("copy_database_to")(new_path=str(tmp_path / "copy.db"))

        assert result == "Error: Current database file does not exist"

    def test_copy_database_to(self, get_tool, store, tmp_path):
        store.default_database_path().write_bytes(b"data")
        target = tmp_path / "copy.db"

        result = get_tool("copy_database_to")(new_path=str(target))

        assert "copied" in result
        assert target.read_bytes() == b"data"

    def test_get_config_path(self, get_tool, app_dir):
        assert get_tool("get_config_path")() == str(app_dir / "config.json")


class TestAISettingsTools:

    def test_defaults(self, get_tool):
        settings = json.loads(get_tool("get_ai_settings")())

        assert settings == {
            "provider": "OpenAICompatible",
            "base_url": "https://api.deepseek.com/v1",
            "api_key": "",
            "model": "deepseek-chat",
        }

    def test_save_then_get(self, get_tool, store):
        result = get_tool("save_ai_settings")(
            base_url="https://api.anthropic.com/v1",
            api_key="sk-ant",
            model="claude",
            provider="Anthropic",
        )

        assert result == "AI settings saved"
        assert store.get_ai_settings().provider == AIProvider.ANTHROPIC
        assert json.loads(get_tool("get_ai_settings")())["api_key"] == "sk-ant"

    def test_invalid_provider_is_rejected(self, get_tool, store):
        result = get_tool("save_ai_settings")(
            base_url="https://x/v1", api_key="", model="m", provider="Unknown"
        )

        assert result.startswith("Error: Invalid input")
        assert not store.config_path().exists()


class TestImportExportTools:

    def test_export(self, get_tool):
        exported = json.loads(get_tool("export_database_json")())

        assert exported["version"] == "1.0"

    def test_import_database_json(self, get_tool):
        summary = json.loads(get_tool("import_database_json")(
            json_data=json.dumps({
                "version": "1.0",
                "exported_at": "2024-01-01T00:00:00Z",
                "notes": [],
                "chat_messages": [],
            })
        ))

        assert summary == {"notes_count": 0, "messages_count": 0}

    def test_import_database_json_error(self, get_tool):
        result = get_tool("import_database_json")(json_data="not json")

        assert result.startswith("Error: JSON parse failed")

    def test_import_from_indexeddb(self, get_tool):
        result = json.loads(get_tool("import_from_indexeddb")(
            data={"notes": [{"title": "a"}], "chatMessages": [{}, {}]}
        ))

        assert result == {"success": True, "notes_imported": 1, "messages_imported": 2}


class TestErrorFormatting:

    def test_domain_error_message_is_passed_through(self, mcp_server):
        error = StorageError("Failed to copy database file: disk full", operation="copy_database")

        assert mcp_server.format_error_response(error) == (
            "Error: Failed to copy database file: disk full"
        )

    def test_unexpected_error_gets_reference(self, mcp_server):
        result = mcp_server.format_error_response(RuntimeError("boom"))

        assert result.startswith("Error: An unexpected error occurred (ref: ")
        assert "boom" not in result
