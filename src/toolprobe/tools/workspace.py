"""Workspace tool routine."""

from ..resources import read_text_resource
from ..utils.errors import ResourceReadError, ToolCallError
from .base import ProbeContext, call_tool_raw, first_text, log_first_text, logger


SESSION_ID = "test-session-1"
WORKSPACE_RESOURCE = "workspace://info"


async def run(ctx: ProbeContext) -> None:
    """
    Walk a workspace session through its lifecycle.

    Reading an unknown session is expected to fail; every later step must
    succeed or the routine fails.
    """
    logger.info("running_test_case", tool="workspace", case="Get workspace info without initialization")
    try:
        result = await call_tool_raw(ctx, "workspace", {
            "operation": "get",
            "session_id": "nonexistent-session",
        })
    except ToolCallError as e:
        logger.info("expected_failure", case="workspace get without initialization", error=str(e.cause or e))
    else:
        if result.isError:
            logger.info("expected_failure", case="workspace get without initialization", error=first_text(result))
        else:
            logger.warning("unexpected_success", case="workspace get without initialization")
            log_first_text(result, "Result")

    logger.info("running_test_case", tool="workspace", case="Initialize workspace")
    result = await call_tool_raw(ctx, "workspace", {
        "operation": "initialize",
        "root_dir": ".",
        "user_task": "Testing the workspace tool",
        "session_id": SESSION_ID,
    })
    log_first_text(result, "Workspace result")

    logger.info("running_test_case", tool="workspace", case="Get workspace info")
    result = await call_tool_raw(ctx, "workspace", {
        "operation": "get",
        "session_id": SESSION_ID,
    })
    log_first_text(result, "Workspace result")

    logger.info("running_test_case", tool="workspace", case="List sessions")
    result = await call_tool_raw(ctx, "workspace", {"operation": "list"})
    log_first_text(result, "Workspace result")

    logger.info("reading_resource", uri=WORKSPACE_RESOURCE)
    try:
        text = await read_text_resource(ctx.session, WORKSPACE_RESOURCE)
    except ResourceReadError:
        logger.error("resource_read_failed", uri=WORKSPACE_RESOURCE)
        raise
    if text is not None:
        logger.info("resource_content", label="Workspace Info", text=text)
