"""
Workspace integration routine.

Checks that linecount, patch and rag behave the same with and without a
workspace session. Only the workspace initialization is allowed to fail the
routine; every other step is logged and the next one runs.
"""

from typing import Any, Dict

from .base import ProbeContext, call_tool, fixture_file, log_first_text, logger


FILE_NAME = "test_workspace_integration.txt"
FILE_CONTENT = "Line 1\nLine 2\nLine 3\nLine 4\nLine 5\n"
SESSION_ID = "test-session-1"

PATCH_TIMESTAMP = "2025-04-11 18:35:35.000000000 -0500"


def build_patch(file_name: str, replacement: str) -> str:
    return (
        f"--- {file_name}\t{PATCH_TIMESTAMP}\n"
        f"+++ {file_name}\t{PATCH_TIMESTAMP}\n"
        "@@ -1,5 +1,5 @@\n"
        " Line 1\n"
        " Line 2\n"
        "-Line 3\n"
        f"+{replacement}\n"
        " Line 4\n"
        " Line 5"
    )


async def _step(ctx: ProbeContext, description: str, tool: str, arguments: Dict[str, Any]) -> None:
    logger.info("running_integration_test", step=description)
    result = await call_tool(ctx, tool, arguments)
    if result is None:
        logger.warning("integration_step_failed", step=description)
        return
    logger.info("integration_step_succeeded", step=description)
    log_first_text(result, "Result")


async def run(ctx: ProbeContext) -> None:
    with fixture_file(ctx.workdir / FILE_NAME, FILE_CONTENT) as path:
        counts = {
            "file_path": str(path),
            "count_lines": True,
            "count_words": True,
            "count_chars": True,
        }
        patch = {
            "target_directory": str(ctx.workdir),
            "dry_run": True,
        }

        await _step(ctx, "linecount without workspace", "linecount", counts)
        await _step(ctx, "patch without workspace", "patch", {
            **patch,
            "patch_content": build_patch(FILE_NAME, "Line 3 (modified)"),
        })

        logger.info("running_integration_test", step="initialize workspace")
        result = await call_tool(ctx, "workspace", {
            "operation": "initialize",
            "root_dir": ".",
            "user_task": "Testing workspace integration",
            "session_id": SESSION_ID,
        }, required=True)
        logger.info("workspace_initialized", session_id=SESSION_ID)
        log_first_text(result, "Result")

        await _step(ctx, "linecount with workspace", "linecount", {**counts, "session_id": SESSION_ID})
        await _step(ctx, "patch with workspace", "patch", {
            **patch,
            "patch_content": build_patch(FILE_NAME, "Line 3 (modified with workspace)"),
            "session_id": SESSION_ID,
        })
        await _step(ctx, "rag without workspace", "rag", {
            "operation": "index",
            "repo_path": ".",
            "file_patterns": ["*.go", "*.md"],
        })
