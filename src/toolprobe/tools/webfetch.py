"""Web fetch tool routine."""

from .base import ProbeContext, ToolCase, run_cases


CASES = [
    ToolCase("Fetch with HTML stripped", {
        "url": "https://example.com",
        "include_images": False,
        "strip_html": True,
        "timeout": 10.0,
    }),
    ToolCase("Fetch HTML page", {
        "url": "https://example.com",
        "include_images": False,
        "timeout": 10.0,
    }),
    ToolCase("Fetch with images", {
        "url": "https://en.wikipedia.org/wiki/Main_Page",
        "include_images": True,
        "timeout": 15.0,
    }),
    ToolCase("Fetch with default scheme", {
        "url": "golang.org",
        "include_images": False,
        "timeout": 10.0,
    }),
    ToolCase("Fetch with error (invalid URL)", {
        "url": "https://this-domain-does-not-exist-12345.com",
        "include_images": False,
        "timeout": 5.0,
    }),
]


async def run(ctx: ProbeContext) -> None:
    """Fetch pages, logging at most ctx.truncate_at characters of each."""
    await run_cases(ctx, "webfetch", CASES, "Web fetch", delay=2.0, limit=ctx.truncate_at)
