"""
Integration tests for MCP tool discovery, session startup and agent workflows.

These tests verify:
1. All 6 tools are exposed via MCP
2. Server instructions and tool descriptions guide agents
3. Opening a session starts indexing the working directory
4. Queries before the first build lands fail with a clear message
5. A typical orient -> outline -> search session works end to end
"""

import asyncio
import pytest
from typing import List

from fastmcp import Client
from fastmcp.exceptions import ToolError

from codeindex_mcp.mcp.server import (
    mcp,
    session_lifespan,
    reindex as reindex_tool,
    code_search as code_search_tool,
    code_outline as code_outline_tool,
    code_map as code_map_tool,
    index_status as index_status_tool,
)
from codeindex_mcp.mcp.state import get_state, reset_state


EXPECTED_TOOLS = [
    "code_search",
    "code_outline",
    "code_map",
    "reindex",
    "index_status",
    "list_supported_languages",
]


# =============================================================================
# Helper Functions
# =============================================================================

def reindex(**kwargs):
    """Helper to run async reindex function synchronously."""
    return asyncio.run(reindex_tool.fn(**kwargs))


async def _open_session_and_wait(timeout: float = 30.0):
    """Enter the session lifespan and wait until its initial build settles."""
    async with session_lifespan(mcp):
        waited = 0.0
        while get_state().indexing and waited < timeout:
            await asyncio.sleep(0.05)
            waited += 0.05
    return get_state()


# =============================================================================
# Tool Discovery Tests
# =============================================================================

class TestToolDiscovery:
    """Test that all 6 tools are properly exposed via MCP."""

    def test_all_six_tools_registered(self):
        """Verify all 6 tools are registered with FastMCP."""
        # Access FastMCP's internal tool registry
        registered_tools = list(mcp._tool_manager._tools.keys())

        for tool_name in EXPECTED_TOOLS:
            assert tool_name in registered_tools, f"Tool '{tool_name}' not registered"

        assert len(registered_tools) == 6, f"Expected 6 tools, got {len(registered_tools)}"

    def test_tools_list_via_client(self, tmp_path, session_cache, monkeypatch):
        """tools/list over an in-memory client returns every tool with a schema."""
        monkeypatch.chdir(tmp_path)

        async def list_tools() -> List:
            async with Client(mcp) as client:
                return await client.list_tools()

        tools = asyncio.run(list_tools())

        assert sorted(t.name for t in tools) == sorted(EXPECTED_TOOLS)
        for tool in tools:
            assert tool.inputSchema is not None, f"Tool {tool.name} missing inputSchema"

    def test_search_schema_exposes_filters(self, tmp_path, session_cache, monkeypatch):
        monkeypatch.chdir(tmp_path)

        async def search_schema():
            async with Client(mcp) as client:
                tools = await client.list_tools()
            return next(t for t in tools if t.name == "code_search").inputSchema

        properties = asyncio.run(search_schema())["properties"]
        for name in ("query", "kind", "scope", "exported", "limit"):
            assert name in properties


# =============================================================================
# Server Instructions / Descriptions
# =============================================================================

class TestToolDescriptions:
    """Descriptions tell agents when to reach for each tool."""

    def _description(self, name: str) -> str:
        return mcp._tool_manager._tools[name].description

    def test_every_tool_has_a_description(self):
        for name in EXPECTED_TOOLS:
            assert len(self._description(name)) > 20, f"Tool {name} description too short"

    def test_search_description_lists_match_modes(self):
        description = self._description("code_search").lower()
        for mode in ("exact", "prefix", "substring"):
            assert mode in description

    def test_map_description_says_use_first(self):
        assert "FIRST" in self._description("code_map")

    def test_instructions_mention_structure(self):
        instructions = mcp.instructions.lower()
        assert "outline" in instructions
        assert "map" in instructions


# =============================================================================
# Session Startup
# =============================================================================

class TestSessionStartup:
    """Opening a session indexes the working directory in the background."""

    def test_session_indexes_cwd(self, git_project, session_cache, monkeypatch):
        monkeypatch.chdir(git_project)

        state = asyncio.run(_open_session_and_wait())

        assert state.status == "ready"
        assert state.codebase_path == git_project.resolve()
        assert state.index.search("NewServer")[0].file == "cmd/main.go"

    def test_session_outside_repository_records_error(self, tmp_path, session_cache, monkeypatch):
        plain = tmp_path / "plain"
        plain.mkdir()
        monkeypatch.chdir(plain)

        state = asyncio.run(_open_session_and_wait())

        assert state.status == "error"
        with pytest.raises(ToolError, match="Index failed"):
            code_search_tool.fn(query="anything")

    def test_session_does_not_start_second_build(self, git_project, session_cache, monkeypatch):
        monkeypatch.chdir(git_project)
        get_state().begin_build(git_project / "elsewhere")

        async def enter():
            async with session_lifespan(mcp):
                await asyncio.sleep(0)

        asyncio.run(enter())

        assert get_state().status == "building"
        assert get_state().codebase_path == git_project / "elsewhere"

    def test_closing_session_mid_build_records_error(self, git_project, session_cache, monkeypatch):
        monkeypatch.chdir(git_project)

        async def open_and_close():
            async with session_lifespan(mcp):
                pass

        asyncio.run(open_and_close())

        state = get_state()
        assert state.status == "error"
        assert "cancelled" in state.error
        with pytest.raises(ToolError, match="cancelled"):
            code_search_tool.fn(query="hello")

        result = asyncio.run(reindex_tool.fn(path=str(git_project)))
        assert result["success"]
        assert get_state().status == "ready"

    def test_cancelled_reindex_releases_build(self, git_project, session_cache, monkeypatch):
        async def stalled_build(*args, **kwargs):
            await asyncio.sleep(60)

        monkeypatch.setattr("codeindex_mcp.mcp.server.build_index", stalled_build)

        async def start_and_cancel():
            task = asyncio.create_task(reindex_tool.fn(path=str(git_project)))
            await asyncio.sleep(0.01)
            assert get_state().status == "building"
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(start_and_cancel())

        assert get_state().status == "error"
        assert get_state().begin_build(git_project)


class TestBuildingStateErrors:
    """Queries issued while the first build runs report 'still building'."""

    @pytest.mark.parametrize("call", [
        lambda: code_search_tool.fn(query="x"),
        lambda: code_outline_tool.fn(path="src"),
        lambda: code_map_tool.fn(),
    ])
    def test_queries_while_building(self, tmp_path, call):
        get_state().begin_build(tmp_path)
        with pytest.raises(ToolError, match="still building"):
            call()

    def test_status_while_building(self, tmp_path):
        get_state().begin_build(tmp_path)
        assert index_status_tool.fn()["status"] == "building"


# =============================================================================
# Integration: Combined Workflow Tests
# =============================================================================

class TestCombinedWorkflow:
    """Test complete agent workflows across the tools."""

    def test_typical_agent_session(self, git_project, session_cache):
        """Orient with the map, drill in with outline, then locate a symbol."""
        result = reindex(path=str(git_project))
        assert result["success"] is True

        overview = code_map_tool.fn()
        assert "lib/ - 2 files, 2 exports (User, Point)" in overview.splitlines()

        outline = code_outline_tool.fn(path="lib/shapes.rs")
        assert outline.splitlines() == [
            "lib/shapes.rs",
            "  class Point  exported",
            "    method new(x: i32) -> Self",
        ]

        hit = code_search_tool.fn(query="point")
        assert hit.startswith("class      Point  lib/shapes.rs:1  exported")

        status = index_status_tool.fn()
        assert status["status"] == "ready"
        assert status["stats"]["symbols"] == result["symbols"]

    def test_session_survives_restart_via_cache(self, git_project, session_cache):
        """A fresh session on an unchanged repository restores the cached index."""
        first = reindex(path=str(git_project))

        reset_state()
        get_state().cache = session_cache
        second = reindex(path=str(git_project))

        assert second["symbols"] == first["symbols"]
        assert second["languages"] == first["languages"]

    def test_edit_then_reindex(self, git_project, session_cache):
        reindex(path=str(git_project))
        (git_project / "lib" / "shapes.rs").write_text("pub fn area(r: f64) -> f64 { r * r }\n")

        reindex()

        assert "function   area(r: f64) -> f64  lib/shapes.rs:1  exported" == code_search_tool.fn(query="area")
        assert code_search_tool.fn(query="Point") == 'No symbols found matching "Point"'
