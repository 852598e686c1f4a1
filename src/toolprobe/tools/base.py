"""
Shared plumbing for tool test routines.

Every routine builds a list of ToolCase argument maps, sends them with
run_cases() and logs the first content item of each result. A failed call
is logged and the next case runs.
"""

import asyncio
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from mcp import ClientSession
from mcp.shared.exceptions import McpError
from mcp.types import CallToolResult, ImageContent, TextContent

from ..utils.errors import ErrorContext, FixtureError, ToolCallError
from ..utils.logging import get_logger


logger = get_logger("toolprobe.tools")


@dataclass
class ToolCase:
    """A named argument map for one tools/call request."""
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ProbeContext:
    """Everything a test routine needs to talk to the server."""
    session: ClientSession
    workdir: Path = field(default_factory=Path.cwd)
    delay_scale: float = 1.0
    truncate_at: int = 500
    temp_root: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))

    async def pause(self, seconds: float) -> None:
        """Sleep between cases, scaled by delay_scale."""
        delay = seconds * self.delay_scale
        if delay > 0:
            await asyncio.sleep(delay)

    def session_stamp(self) -> str:
        """Timestamp suffix for per-run session IDs."""
        return datetime.now().strftime("%Y%m%d-%H%M%S")


async def call_tool_raw(
    ctx: ProbeContext,
    tool: str,
    arguments: Optional[Mapping[str, Any]] = None
) -> CallToolResult:
    """
    Send one tools/call request.

    Raises:
        ToolCallError: the call failed, whether the server answered with a
            JSON-RPC error or the SDK rejected the result
    """
    logger.debug("calling_tool", tool=tool, arguments=dict(arguments or {}))
    try:
        return await ctx.session.call_tool(tool, arguments=dict(arguments or {}))
    except McpError as e:
        raise ToolCallError(
            tool,
            f"Failed to call {tool}: {e}",
            context=ErrorContext(component="tools", operation="call_tool"),
            cause=e,
            error_code=e.error.code
        ) from e
    except Exception as e:
        raise ToolCallError(
            tool,
            f"Failed to call {tool}: {e}",
            context=ErrorContext(component="tools", operation="call_tool"),
            cause=e,
            error_type=type(e).__name__
        ) from e


async def call_tool(
    ctx: ProbeContext,
    tool: str,
    arguments: Optional[Mapping[str, Any]] = None,
    required: bool = False
) -> Optional[CallToolResult]:
    """
    Send one tools/call request, logging a failure instead of raising.

    Args:
        required: Re-raise ToolCallError instead of returning None

    Returns:
        The result, or None when the call failed
    """
    try:
        return await call_tool_raw(ctx, tool, arguments)
    except ToolCallError as e:
        logger.error("tool_call_failed", tool=tool, error=str(e.cause or e))
        if required:
            raise
        return None


def first_text(result: Optional[CallToolResult]) -> Optional[str]:
    """Text of the first content item, if it is a text item."""
    if result is None or not result.content:
        return None
    item = result.content[0]
    if isinstance(item, TextContent):
        return item.text
    return None


def truncate(text: str, limit: Optional[int]) -> str:
    """Cut text down to limit characters, marking the cut."""
    if limit is not None and len(text) > limit:
        return text[:limit] + "... [truncated]"
    return text


def log_first_text(
    result: Optional[CallToolResult],
    label: str,
    limit: Optional[int] = None
) -> Optional[str]:
    """Log the first text content item of a result under label."""
    text = first_text(result)
    if text is not None:
        logger.info(
            "tool_result",
            label=label,
            is_error=bool(result.isError),
            text=truncate(text, limit)
        )
    return text


def log_content_items(result: Optional[CallToolResult], label: str) -> List[str]:
    """Log every content item of a result; returns the item kinds seen."""
    kinds = []
    if result is None:
        return kinds
    for index, item in enumerate(result.content):
        if isinstance(item, TextContent):
            logger.info("tool_result", label=f"{label} (text)", text=item.text)
            kinds.append("text")
        elif isinstance(item, ImageContent):
            logger.info(
                "tool_result_image",
                label=label,
                index=index,
                mime_type=item.mimeType,
                size=len(item.data)
            )
            kinds.append("image")
        else:
            logger.warning(
                "tool_result_unknown_content",
                label=label,
                index=index,
                content_type=type(item).__name__
            )
            kinds.append("unknown")
    return kinds


async def run_cases(
    ctx: ProbeContext,
    tool: str,
    cases: Sequence[ToolCase],
    label: str,
    delay: float = 0.0,
    limit: Optional[int] = None
) -> List[Optional[CallToolResult]]:
    """
    Send each case to tool and log its first text item.

    Failed calls are logged and yield None; the loop always continues.
    """
    results = []
    for case in cases:
        logger.info("running_test_case", tool=tool, case=case.name)
        result = await call_tool(ctx, tool, case.arguments)
        log_first_text(result, label, limit)
        results.append(result)
        await ctx.pause(delay)
    return results


@contextmanager
def fixture_file(path: Path, content: str) -> Iterator[Path]:
    """Write a fixture file and remove it afterwards."""
    try:
        path.write_text(content)
    except OSError as e:
        raise FixtureError(f"Failed to create test file: {e}", path=str(path), cause=e) from e

    logger.info("fixture_created", path=str(path))
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.info("fixture_removed", path=str(path))


def log_final_content(path: Path) -> str:
    """Log a fixture's content after the server has modified it."""
    try:
        content = path.read_text()
    except OSError as e:
        raise FixtureError(f"Failed to read modified file: {e}", path=str(path), cause=e) from e
    logger.info("fixture_final_content", path=str(path), content=content)
    return content


@contextmanager
def fixture_tree(directory: Path, files: Mapping[str, str]) -> Iterator[Path]:
    """Create a directory of fixture files and remove it afterwards."""
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FixtureError(f"Failed to create test directory: {e}", path=str(directory), cause=e) from e

    logger.info("fixture_created", path=str(directory))
    try:
        for filename, content in files.items():
            file_path = directory / filename
            try:
                file_path.write_text(content)
            except OSError as e:
                raise FixtureError(
                    f"Failed to create test file {filename}: {e}",
                    path=str(file_path),
                    cause=e
                ) from e
            logger.debug("fixture_file_written", path=str(file_path))
        yield directory
    finally:
        shutil.rmtree(directory, ignore_errors=True)
        logger.info("fixture_removed", path=str(directory))


__all__ = [
    'ToolCase',
    'ProbeContext',
    'call_tool_raw',
    'call_tool',
    'first_text',
    'truncate',
    'log_first_text',
    'log_content_items',
    'run_cases',
    'fixture_file',
    'log_final_content',
    'fixture_tree',
]
