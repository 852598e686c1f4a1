"""
Request sequences of the per-tool routines.
"""

from pathlib import Path
from typing import Any, Dict

import pytest
from mcp.types import CallToolResult, ImageContent

from conftest import FakeSession, text_result
from toolprobe.tools import (
    calculator,
    cmdexec,
    codeanalysis,
    filesearch,
    findcallers,
    findfunc,
    funcdef,
    linecount,
    patch,
    rag,
    screenshot,
    searchreplace,
    shell,
    spellcheck,
    stats,
    webfetch,
    websearch,
    workspace,
    workspace_integration,
)
from toolprobe.tools.base import ProbeContext
from toolprobe.utils.errors import ResourceReadError, ToolCallError


def record_paths(session: FakeSession, key: str) -> Dict[str, bool]:
    """Record whether the path in arguments[key] existed when each call was made."""
    seen: Dict[str, bool] = {}

    def on_call(tool: str, arguments: Dict[str, Any]) -> None:
        if key in arguments:
            seen[arguments[key]] = Path(arguments[key]).exists()

    session.on_call = on_call
    return seen


class TestSimpleRoutines:
    """Routines without fixtures."""

    @pytest.mark.asyncio
    async def test_calculator(self, probe_context: ProbeContext, fake_session: FakeSession):
        await calculator.run(probe_context)
        assert fake_session.tool_calls("calculator") == [
            {"operation": "add", "a": 5.0, "b": 3.0},
            {"operation": "subtract", "a": 10.0, "b": 4.0},
            {"operation": "multiply", "a": 6.0, "b": 7.0},
            {"operation": "divide", "a": 20.0, "b": 5.0},
        ]

    @pytest.mark.asyncio
    async def test_filesearch(self, probe_context: ProbeContext, fake_session: FakeSession):
        await filesearch.run(probe_context)
        calls = fake_session.tool_calls("filesearch")
        assert [c["recursive"] for c in calls] == [False, True, True]
        assert calls[2]["content_pattern"] == "func.*\\("

    @pytest.mark.asyncio
    async def test_cmdexec_continues_after_failure(self, probe_context: ProbeContext, fake_session: FakeSession):
        fake_session.fail = lambda tool, arguments: arguments["command"] == "dir"
        await cmdexec.run(probe_context)
        calls = fake_session.tool_calls("cmdexec")
        assert [c["command"] for c in calls] == ["echo Hello, World!", "dir", "cd", "ping -n 10 127.0.0.1"]
        assert calls[3]["timeout"] == 2.0

    @pytest.mark.asyncio
    async def test_codeanalysis(self, probe_context: ProbeContext, fake_session: FakeSession):
        await codeanalysis.run(probe_context)
        assert [c["operation"] for c in fake_session.tool_calls("codeanalysis")] == [
            "analyze_file", "analyze_directory", "find_issues", "suggest_improvements"
        ]

    @pytest.mark.asyncio
    async def test_websearch(self, probe_context: ProbeContext, fake_session: FakeSession):
        await websearch.run(probe_context)
        assert [(c["engine"], c["num_results"]) for c in fake_session.tool_calls("websearch")] == [
            ("duckduckgo", 5.0), ("bing", 3.0)
        ]

    @pytest.mark.asyncio
    async def test_webfetch(self, probe_context: ProbeContext, fake_session: FakeSession):
        fake_session.respond = lambda tool, arguments: text_result("x" * 2000)
        await webfetch.run(probe_context)
        calls = fake_session.tool_calls("webfetch")
        assert len(calls) == 5
        assert calls[0]["strip_html"] is True
        assert calls[3]["url"] == "golang.org"

    @pytest.mark.asyncio
    async def test_stats_failure_fails_routine(self, probe_context: ProbeContext, fake_session: FakeSession):
        fake_session.fail = lambda tool, arguments: True
        with pytest.raises(ToolCallError):
            await stats.run(probe_context)
        assert fake_session.tool_calls("stats") == [{}]

    @pytest.mark.asyncio
    async def test_screenshot(self, probe_context: ProbeContext, fake_session: FakeSession):
        fake_session.respond = lambda tool, arguments: CallToolResult(content=[
            ImageContent(type="image", data="aGVsbG8=", mimeType="image/png")
        ])
        await screenshot.run(probe_context)
        calls = fake_session.tool_calls("screenshot")
        assert [c["area"] for c in calls] == ["full", "region"]
        assert calls[1]["width"] == 400.0


class TestFileFixtureRoutines:
    """Routines that create a single temp file."""

    @pytest.mark.asyncio
    async def test_linecount(self, probe_context: ProbeContext, fake_session: FakeSession, temp_dir: Path):
        seen = record_paths(fake_session, "file_path")
        await linecount.run(probe_context)

        path = str(temp_dir / "mcp_test_linecount.txt")
        assert seen == {path: True}
        assert not Path(path).exists()
        flags = [(c["count_lines"], c["count_words"], c["count_chars"]) for c in fake_session.tool_calls("linecount")]
        assert flags == [(True, False, False), (False, True, False), (False, False, True), (True, True, True)]

    def test_linecount_fixture_counts(self):
        text = linecount.TEST_CONTENT
        assert len(text.splitlines()) == 5
        assert len(text.split()) == 20
        assert len(text) == 93

    @pytest.mark.asyncio
    async def test_searchreplace(self, probe_context: ProbeContext, fake_session: FakeSession, temp_dir: Path):
        await searchreplace.run(probe_context)
        calls = fake_session.tool_calls("searchreplace")
        assert [c["preview"] for c in calls] == [True, True, False]
        assert calls[1]["use_regex"] is True
        assert calls[0]["file_pattern"] == "mcp_test_search_replace.txt"
        assert calls[0]["directory"] == str(temp_dir)
        assert not (temp_dir / "mcp_test_search_replace.txt").exists()

    @pytest.mark.asyncio
    async def test_patch(self, probe_context: ProbeContext, fake_session: FakeSession, temp_dir: Path):
        await patch.run(probe_context)
        calls = fake_session.tool_calls("patch")
        assert [c["dry_run"] for c in calls] == [True, False]
        assert all(c["strip_level"] == 0.0 for c in calls)
        assert all(c["target_directory"] == str(temp_dir) for c in calls)
        assert "\tThis is the last line of the file." in calls[0]["patch_content"]
        assert not (temp_dir / patch.FILE_NAME).exists()


class TestWorkspaceRoutines:
    """Routines built on workspace sessions."""

    @pytest.mark.asyncio
    async def test_workspace(self, probe_context: ProbeContext, fake_session: FakeSession):
        fake_session.fail = lambda tool, arguments: arguments.get("session_id") == "nonexistent-session"
        fake_session.resource_texts = {"workspace://info": "1 session"}

        await workspace.run(probe_context)

        assert [c["operation"] for c in fake_session.tool_calls("workspace")] == [
            "get", "initialize", "get", "list"
        ]
        assert fake_session.reads == ["workspace://info"]

    @pytest.mark.asyncio
    async def test_workspace_error_result_counts_as_expected(
        self, probe_context: ProbeContext, fake_session: FakeSession
    ):
        fake_session.respond = lambda tool, arguments: (
            text_result("no such session", is_error=True)
            if arguments.get("session_id") == "nonexistent-session" else None
        )
        fake_session.resource_texts = {"workspace://info": "1 session"}
        await workspace.run(probe_context)
        assert len(fake_session.tool_calls("workspace")) == 4

    @pytest.mark.asyncio
    async def test_workspace_initialize_failure(self, probe_context: ProbeContext, fake_session: FakeSession):
        fake_session.fail = lambda tool, arguments: arguments["operation"] == "initialize"
        with pytest.raises(ToolCallError):
            await workspace.run(probe_context)
        assert len(fake_session.tool_calls("workspace")) == 2

    @pytest.mark.asyncio
    async def test_workspace_resource_failure(self, probe_context: ProbeContext, fake_session: FakeSession):
        with pytest.raises(ResourceReadError):
            await workspace.run(probe_context)

    @pytest.mark.asyncio
    async def test_rag(self, probe_context: ProbeContext, fake_session: FakeSession, temp_dir: Path):
        await rag.run(probe_context)
        init = fake_session.calls[0]
        assert init == ("workspace", {
            "operation": "initialize",
            "root_dir": str(temp_dir),
            "user_task": "Testing the enhanced RAG tool",
            "session_id": "rag-test-session",
        })
        calls = fake_session.tool_calls("rag")
        assert [c["operation"] for c in calls] == ["index", "query", "query", "query", "query"]
        assert all(c["session_id"] == "rag-test-session" for c in calls)

    @pytest.mark.asyncio
    async def test_rag_needs_workspace(self, probe_context: ProbeContext, fake_session: FakeSession):
        fake_session.fail = lambda tool, arguments: tool == "workspace"
        with pytest.raises(ToolCallError):
            await rag.run(probe_context)
        assert fake_session.tool_calls("rag") == []

    @pytest.mark.asyncio
    async def test_shell(self, probe_context: ProbeContext, fake_session: FakeSession):
        closed = set()

        def fail(tool: str, arguments: Dict[str, Any]) -> bool:
            if tool != "shell":
                return False
            if arguments["operation"] == "close":
                closed.add(arguments["session_id"])
                return False
            return (
                "session_id" not in arguments
                or arguments["operation"] == "invalid_operation"
                or arguments["session_id"] in closed
            )

        fake_session.fail = fail
        await shell.run(probe_context)

        workspace_calls = fake_session.tool_calls("workspace")
        assert len(workspace_calls) == 1
        assert workspace_calls[0]["session_id"].startswith("shell-test-session-")

        calls = fake_session.tool_calls("shell")
        assert len(calls) == 10 + 3 + 6 + 6
        assert calls[0]["shell_type"] == "bash"
        assert calls[10]["session_id"] in closed
        assert "session_id" not in calls[11]
        assert calls[12]["operation"] == "invalid_operation"
        assert calls[13]["shell_type"] == "powershell"
        assert calls[13]["session_id"].startswith("shell-test-powershell-")
        assert calls[19]["shell_type"] == "cmd"
        assert all(c["timeout"] == 5.0 for c in calls if c["operation"] == "execute" and "session_id" in c)


class TestSourceTreeRoutines:
    """Routines that create a temp directory of source files."""

    @pytest.mark.asyncio
    async def test_findcallers(self, probe_context: ProbeContext, fake_session: FakeSession, temp_dir: Path):
        seen = record_paths(fake_session, "search_directory")
        await findcallers.run(probe_context)

        test_dir = temp_dir / "mcp_test_findcallers"
        assert seen == {str(test_dir): True}
        assert not test_dir.exists()
        calls = fake_session.tool_calls("findcallers")
        assert [c.get("language") for c in calls] == ["Go", None, None]
        assert [c["use_relative_paths"] for c in calls] == [False, False, True]

    @pytest.mark.asyncio
    async def test_findfunc(self, probe_context: ProbeContext, fake_session: FakeSession, temp_dir: Path):
        seen = record_paths(fake_session, "file_path")
        await findfunc.run(probe_context)

        calls = fake_session.tool_calls("findfunc")
        assert len(calls) == 5
        assert calls[2]["package_name"] == "calculator"
        assert calls[4]["use_relative_paths"] is False

        definition = fake_session.tool_calls("funcdef")
        go_file = str(temp_dir / "mcp_test_findfunc" / "test_go.go")
        assert definition == [{
            "operation": "get",
            "function_name": "calculateSum",
            "file_path": go_file,
            "language": "Go",
        }]
        assert seen == {go_file: True}

    @pytest.mark.asyncio
    async def test_findfunc_follow_up_skipped_on_failure(
        self, probe_context: ProbeContext, fake_session: FakeSession
    ):
        fake_session.fail = lambda tool, arguments: (
            tool == "findfunc" and arguments["use_relative_paths"] is False
        )
        await findfunc.run(probe_context)
        assert fake_session.tool_calls("funcdef") == []

    @pytest.mark.asyncio
    async def test_funcdef(self, probe_context: ProbeContext, fake_session: FakeSession, temp_dir: Path):
        seen = record_paths(fake_session, "file_path")
        await funcdef.run(probe_context)

        calls = fake_session.tool_calls("funcdef")
        assert [c["operation"] for c in calls] == [
            "get", "get", "get", "get", "replace", "get", "replace", "get"
        ]
        assert calls[1]["include_prototype"] is True
        assert "bonus := 5" in calls[4]["replacement_content"]
        assert all(seen.values())
        assert not (temp_dir / "mcp_test_funcdef").exists()

    @pytest.mark.asyncio
    async def test_funcdef_variants(self, probe_context: ProbeContext, fake_session: FakeSession, temp_dir: Path):
        seen = record_paths(fake_session, "file_path")
        await funcdef.run_comments(probe_context)
        await funcdef.run_strings(probe_context)
        await funcdef.run_complex(probe_context)

        calls = fake_session.tool_calls("funcdef")
        assert len(calls) == 6 + 4 + 3
        assert [c["function_name"] for c in calls[6:]] == ["processStrings"] * 4 + ["processComplexStrings"] * 3
        assert all(seen.values())
        assert "newVar := 42" in calls[11]["replacement_content"]

    def test_string_fixtures_keep_escapes(self):
        go_source = funcdef.STRING_FIXTURE_FILES["test_go_strings.go"]
        assert '\\"escaped quotes\\"' in go_source
        assert "`This raw string has braces" in go_source
        complex_source = funcdef.COMPLEX_FIXTURE_FILES["test_complex_strings.go"]
        assert "\\\\{ \\\\}" in complex_source

    @pytest.mark.asyncio
    async def test_spellcheck(self, probe_context: ProbeContext, fake_session: FakeSession, temp_dir: Path):
        await spellcheck.run(probe_context)
        calls = fake_session.tool_calls("spellcheck")
        assert len(calls) == 4
        assert calls[1]["check_strings"] is False
        assert calls[2]["custom_dictionary"] == ["speling", "coment"]
        assert calls[3]["path"].endswith("test_identifiers.go")
        assert "recursive" not in calls[3]
        assert not (temp_dir / "mcp_test_spellcheck").exists()


class TestWorkspaceIntegration:
    """Tools with and without a workspace session."""

    @pytest.mark.asyncio
    async def test_sequence(self, probe_context: ProbeContext, fake_session: FakeSession, temp_dir: Path):
        seen = record_paths(fake_session, "file_path")
        fake_session.fail = lambda tool, arguments: tool == "rag"

        await workspace_integration.run(probe_context)

        assert [tool for tool, _ in fake_session.calls] == [
            "linecount", "patch", "workspace", "linecount", "patch", "rag"
        ]
        fixture = temp_dir / workspace_integration.FILE_NAME
        assert seen == {str(fixture): True}
        assert not fixture.exists()

        patches = fake_session.tool_calls("patch")
        assert "session_id" not in patches[0]
        assert patches[1]["session_id"] == "test-session-1"
        assert "+Line 3 (modified with workspace)" in patches[1]["patch_content"]
        assert patches[0]["patch_content"].startswith(
            "--- test_workspace_integration.txt\t2025-04-11 18:35:35.000000000 -0500\n"
        )
        assert fake_session.tool_calls("linecount")[1]["session_id"] == "test-session-1"

    @pytest.mark.asyncio
    async def test_workspace_failure_stops(self, probe_context: ProbeContext, fake_session: FakeSession):
        fake_session.fail = lambda tool, arguments: tool == "workspace"
        with pytest.raises(ToolCallError):
            await workspace_integration.run(probe_context)
        assert [tool for tool, _ in fake_session.calls] == ["linecount", "patch", "workspace"]
