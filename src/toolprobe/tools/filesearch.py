"""File search tool routine."""

from .base import ProbeContext, ToolCase, run_cases


CASES = [
    ToolCase("Basic directory listing", {
        "directory": ".",
        "pattern": "*.go",
        "recursive": False,
    }),
    ToolCase("Recursive search", {
        "directory": ".",
        "pattern": "*.go",
        "recursive": True,
    }),
    ToolCase("Content search", {
        "directory": ".",
        "pattern": "*.go",
        "recursive": True,
        "content_pattern": "func.*\\(",
    }),
]


async def run(ctx: ProbeContext) -> None:
    await run_cases(ctx, "filesearch", CASES, "File search", delay=0.5)
