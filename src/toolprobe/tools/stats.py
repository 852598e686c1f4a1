"""Server statistics tool routine."""

from .base import ProbeContext, call_tool, log_first_text, logger


async def run(ctx: ProbeContext) -> None:
    logger.info("running_test_case", tool="stats", case="Server statistics")
    result = await call_tool(ctx, "stats", {}, required=True)
    log_first_text(result, "Stats")
