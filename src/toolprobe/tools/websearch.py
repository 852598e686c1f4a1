"""Web search tool routine."""

from .base import ProbeContext, ToolCase, run_cases


CASES = [
    ToolCase("Basic search", {
        "query": "golang programming",
        "num_results": 5.0,
        "engine": "duckduckgo",
        "safe_search": True,
    }),
    ToolCase("Alternative search engine", {
        "query": "artificial intelligence",
        "num_results": 3.0,
        "engine": "bing",
        "safe_search": True,
    }),
]


async def run(ctx: ProbeContext) -> None:
    await run_cases(ctx, "websearch", CASES, "Web search", delay=1.0)
