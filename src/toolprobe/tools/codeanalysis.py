"""Code analysis tool routine."""

from .base import ProbeContext, ToolCase, run_cases


CASES = [
    ToolCase("Analyze file", {
        "operation": "analyze_file",
        "file_path": "cmd/mcp-server/main.go",
    }),
    ToolCase("Analyze directory", {
        "operation": "analyze_directory",
        "directory_path": "pkg/calculator",
        "file_patterns": ["*.go"],
        "recursive": True,
    }),
    ToolCase("Find issues", {
        "operation": "find_issues",
        "target_path": "pkg/test/test.go",
        "issue_types": ["complexity", "comments"],
        "severity": "medium",
    }),
    ToolCase("Suggest improvements", {
        "operation": "suggest_improvements",
        "target_path": "pkg/serverinfo/serverinfo.go",
        "improvement_types": ["readability", "maintainability"],
    }),
]


async def run(ctx: ProbeContext) -> None:
    await run_cases(ctx, "codeanalysis", CASES, "Code analysis", delay=1.0)
