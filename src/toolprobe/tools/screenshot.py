"""Screenshot tool routine."""

from .base import ProbeContext, ToolCase, call_tool, log_content_items, logger


CASES = [
    ToolCase("Full screen screenshot", {"area": "full", "format": "png"}),
    ToolCase("Region screenshot", {
        "area": "region",
        "x": 100.0,
        "y": 100.0,
        "width": 400.0,
        "height": 300.0,
        "format": "png",
    }),
]


async def run(ctx: ProbeContext) -> None:
    """Capture the screen; results mix text and image items, so log all of them."""
    for case in CASES:
        logger.info("running_test_case", tool="screenshot", case=case.name)
        result = await call_tool(ctx, "screenshot", case.arguments)
        log_content_items(result, "Screenshot result")
        await ctx.pause(1.0)
