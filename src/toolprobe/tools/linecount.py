"""Line count tool routine."""

from .base import ProbeContext, ToolCase, fixture_file, logger, run_cases


# 5 lines, 20 words, 93 characters
TEST_CONTENT = (
    "This is line one.\n"
    "This is line two.\n"
    "This is line three.\n"
    "This is line four.\n"
    "This is line five."
)


def build_cases(file_path: str) -> list:
    def counts(lines: bool, words: bool, chars: bool) -> dict:
        return {
            "file_path": file_path,
            "count_lines": lines,
            "count_words": words,
            "count_chars": chars,
        }

    return [
        ToolCase("Count lines only", counts(True, False, False)),
        ToolCase("Count words only", counts(False, True, False)),
        ToolCase("Count characters only", counts(False, False, True)),
        ToolCase("Count all (lines, words, characters)", counts(True, True, True)),
    ]


async def run(ctx: ProbeContext) -> None:
    with fixture_file(ctx.temp_root / "mcp_test_linecount.txt", TEST_CONTENT) as path:
        logger.info("fixture_content", path=str(path), content=TEST_CONTENT)
        await run_cases(ctx, "linecount", build_cases(str(path)), "Line count")
