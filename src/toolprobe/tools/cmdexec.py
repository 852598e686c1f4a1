"""Command execution tool routine."""

from .base import ProbeContext, ToolCase, run_cases


CASES = [
    ToolCase("Simple echo command", {"command": "echo Hello, World!", "timeout": 5.0}),
    ToolCase("Directory listing", {"command": "dir", "timeout": 5.0}),
    ToolCase("Current working directory", {"command": "cd", "timeout": 5.0}),
    # ~10s command against a 2s limit
    ToolCase("Test timeout functionality", {"command": "ping -n 10 127.0.0.1", "timeout": 2.0}),
]


async def run(ctx: ProbeContext) -> None:
    await run_cases(ctx, "cmdexec", CASES, "Command execution", delay=0.5)
