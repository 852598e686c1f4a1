"""Search and replace tool routine."""

from pathlib import Path

from .base import ProbeContext, ToolCase, fixture_file, log_final_content, run_cases


TEST_CONTENT = """This is a test file for search and replace.
It contains multiple lines of text.
We will search for specific patterns and replace them.
This line has the word 'test' in it twice for testing.
The end of the test file."""


def build_cases(path: Path) -> list:
    def replace(pattern: str, replacement: str, use_regex: bool, preview: bool, case_sensitive: bool) -> dict:
        return {
            "directory": str(path.parent),
            "file_pattern": path.name,
            "search_pattern": pattern,
            "replacement": replacement,
            "use_regex": use_regex,
            "recursive": False,
            "preview": preview,
            "case_sensitive": case_sensitive,
        }

    return [
        ToolCase("Simple string replacement (preview)", replace("test", "EXAMPLE", False, True, True)),
        ToolCase("Regex replacement (preview)", replace("t[a-z]{3}", "MATCH", True, True, False)),
        ToolCase("Actual replacement", replace("line", "ROW", False, False, True)),
    ]


async def run(ctx: ProbeContext) -> None:
    """Preview two replacements, apply a third and show the file afterwards."""
    with fixture_file(ctx.temp_root / "mcp_test_search_replace.txt", TEST_CONTENT) as path:
        await run_cases(ctx, "searchreplace", build_cases(path), "Search replace", delay=0.5)
        log_final_content(path)
