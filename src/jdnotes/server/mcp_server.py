"""MCP server exposing the JD Notes backend commands over stdio."""

import logging
import uuid
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from jdnotes import commands
from jdnotes.config import config
from jdnotes.exceptions import JDNotesError
from jdnotes.models.schema import AIProvider, AISettings
from jdnotes.storage.config_store import ConfigStore

logger = logging.getLogger(__name__)


class JDNotesMcpServer:
    """MCP server for the JD Notes presentation layer."""

    def __init__(self, store: Optional[ConfigStore] = None):
        """Initialize the MCP server.

        Args:
            store: Configuration store to serve. Defaults to one rooted at the
                   platform application-data directory.
        """
        self.mcp = FastMCP(config.server_name)
        self.store = store or ConfigStore()
        self._register_tools()
        logger.info("JD Notes command server initialized")

    def format_error_response(self, error: Exception) -> str:
        """Format an error response in a consistent way.

        Domain errors carry a description of the failing step and are passed
        through. Anything else is logged with a reference id.
        """
        error_id = str(uuid.uuid4())[:8]

        if isinstance(error, JDNotesError):
            logger.error(
                f"[{error.code.name}] [{error_id}]: {error.message}",
                extra={"error_details": error.details},
            )
            return f"Error: {error.message}"
        elif isinstance(error, ValueError):
            first_line = str(error).splitlines()[0] if str(error) else ""
            logger.error(f"Validation error [{error_id}]: {str(error)}")
            return f"Error: Invalid input: {first_line} (ref: {error_id})"
        elif isinstance(error, OSError):
            logger.error(f"File system error [{error_id}]: {str(error)}", exc_info=True)
            return f"Error: A file system error occurred: {error} (ref: {error_id})"
        else:
            logger.error(f"Unexpected error [{error_id}]: {str(error)}", exc_info=True)
            return f"Error: An unexpected error occurred (ref: {error_id})"

    def _register_tools(self) -> None:
        """Register MCP tools."""
        store = self.store

        # ========== Database location ==========

        @self.mcp.tool(name="get_database_path")
        def get_database_path() -> str:
            """Get the absolute path of the database file in use."""
            try:
                return commands.get_database_path(store)
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="get_database_url")
        def get_database_url() -> str:
            """Get the sqlite: connection URL of the database file in use."""
            try:
                return commands.get_database_url(store)
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="get_database_info")
        def get_database_info() -> str:
            """Get path, existence, size and whether a custom location is configured.

            Returns a JSON object with path, exists, size, size_formatted and is_custom.
            """
            try:
                return commands.get_database_info(store).model_dump_json()
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="copy_database_to")
        def copy_database_to(new_path: str) -> str:
            """Copy the database file to another path without changing the configuration.

            Args:
                new_path: Destination file path
            """
            try:
                commands.copy_database_to(store, new_path)
                return f"Database copied to: {new_path}"
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="change_database_location")
        def change_database_location(new_dir: str) -> str:
            """Copy the database into a directory and use it from now on.

            The current config is backed up first. A database already at the
            destination is kept as jdnotes.db.backup. The old file is not deleted.

            Args:
                new_dir: Directory that will hold the database file
            """
            try:
                return commands.change_database_location(store, new_dir)
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="get_config_path")
        def get_config_path() -> str:
            """Get the path of the configuration file."""
            try:
                return commands.get_config_path(store)
            except Exception as e:
                return self.format_error_response(e)

        # ========== AI settings ==========

        @self.mcp.tool(name="get_ai_settings")
        def get_ai_settings() -> str:
            """Get the AI provider settings as a JSON object."""
            try:
                return commands.get_ai_settings(store).model_dump_json()
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="save_ai_settings")
        def save_ai_settings(
            base_url: str,
            api_key: str,
            model: str,
            provider: str = AIProvider.OPENAI_COMPATIBLE.value,
        ) -> str:
            """Save the AI provider settings.

            Args:
                base_url: API base URL
                api_key: API key (may be empty for local providers)
                model: Model name
                provider: One of OpenAICompatible, Anthropic, Google, Ollama
            """
            try:
                settings = AISettings(
                    provider=provider, base_url=base_url, api_key=api_key, model=model
                )
                commands.save_ai_settings(store, settings)
                return "AI settings saved"
            except Exception as e:
                return self.format_error_response(e)

        # ========== Import / export ==========

        @self.mcp.tool(name="export_database_json")
        def export_database_json() -> str:
            """Get the JSON export envelope. Records are filled in by the caller."""
            try:
                return commands.export_database_json()
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="import_database_json")
        def import_database_json(json_data: str) -> str:
            """Validate an export document and report how many records it holds.

            Args:
                json_data: Export document as JSON text
            """
            try:
                return commands.import_database_json(json_data).model_dump_json()
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="import_from_indexeddb")
        def import_from_indexeddb(data: Any) -> str:
            """Report how many notes and chat messages a browser-storage dump holds.

            Args:
                data: Dump object (or its JSON text) with optional notes and chatMessages arrays
            """
            try:
                return commands.import_from_indexeddb(data).model_dump_json()
            except Exception as e:
                return self.format_error_response(e)

    def run(self) -> None:
        """Run the MCP server on stdio."""
        self.mcp.run()
