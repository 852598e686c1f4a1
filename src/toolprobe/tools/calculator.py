"""Calculator tool routine."""

from .base import ProbeContext, call_tool, log_first_text, logger


OPERATIONS = [
    ("add", 5.0, 3.0),
    ("subtract", 10.0, 4.0),
    ("multiply", 6.0, 7.0),
    ("divide", 20.0, 5.0),
]


async def run(ctx: ProbeContext) -> None:
    """Run each arithmetic operation once."""
    for op, a, b in OPERATIONS:
        logger.info("running_test_case", tool="calculator", case=op)
        result = await call_tool(ctx, "calculator", {"operation": op, "a": a, "b": b})
        log_first_text(result, f"Calculator {op}")
