"""Patch tool routine."""

from .base import ProbeContext, ToolCase, fixture_file, log_final_content, logger, run_cases


FILE_NAME = "mcp_test_patch.txt"

ORIGINAL_CONTENT = """This is a test file for patching.
It contains multiple lines of text.
This line will be modified.
This line will be removed.
This is the last line of the file."""

# Context lines are tab-prefixed.
PATCH_CONTENT = f"""--- {FILE_NAME}
+++ {FILE_NAME}
@@ -1,5 +1,6 @@
\tThis is a test file for patching.
\tIt contains multiple lines of text.
-This line will be modified.
-This line will be removed.
+This line has been modified.
+This is a new line that was added.
+Another new line was added here.
\tThis is the last line of the file."""


def build_cases(target_directory: str) -> list:
    def apply(dry_run: bool) -> dict:
        return {
            "patch_content": PATCH_CONTENT,
            "target_directory": target_directory,
            "strip_level": 0.0,
            "dry_run": dry_run,
        }

    return [
        ToolCase("Dry run patch", apply(True)),
        ToolCase("Apply patch", apply(False)),
    ]


async def run(ctx: ProbeContext) -> None:
    """Dry-run then apply a unified diff against a temp file."""
    with fixture_file(ctx.temp_root / FILE_NAME, ORIGINAL_CONTENT) as path:
        logger.info("fixture_content", path=str(path), content=ORIGINAL_CONTENT)
        await run_cases(ctx, "patch", build_cases(str(ctx.temp_root)), "Patch", delay=0.5)
        log_final_content(path)
