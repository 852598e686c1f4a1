"""Find function tool routine, followed by a funcdef lookup on the match."""

from pathlib import Path
from typing import List

from .base import ProbeContext, ToolCase, call_tool, fixture_tree, log_first_text, logger, run_cases


FIXTURE_DIR = "mcp_test_findfunc"

FIXTURE_FILES = {
    "test_go.go": '''package main

import (
    "fmt"
)

// calculateSum calculates the sum of two numbers
func calculateSum(a, b int) int {
    return a + b
}

func main() {
    result := calculateSum(10, 20)
    fmt.Println("Result:", result)
}
''',
    "test_js.js": '''// JavaScript test file
function calculateSum(a, b) {
    return a + b;
}

// Test the function
const result = calculateSum(5, 10);
console.log("Result:", result);
''',
    "test_py.py": '''# Python test file
def calculateSum(a, b):
    """Calculate the sum of two numbers."""
    return a + b

# Test the function
result = calculateSum(5, 10)
print("Result:", result)
''',
    "test_go_package.go": '''package calculator

// calculateSum calculates the sum of two numbers
func calculateSum(a, b int) int {
    return a + b
}

// multiplyNumbers multiplies two numbers
func multiplyNumbers(a, b int) int {
    return a * b
}
''',
}


def build_cases(search_dir: Path) -> List[ToolCase]:
    base = {"search_directory": str(search_dir), "use_relative_paths": True}
    return [
        ToolCase("Find function in all languages",
                 {**base, "function_name": "calculateSum"}),
        ToolCase("Find function in Go only",
                 {**base, "function_name": "calculateSum", "language": "Go"}),
        ToolCase("Find function with package filter",
                 {**base, "function_name": "calculateSum", "package_name": "calculator"}),
        ToolCase("Find function that doesn't exist",
                 {**base, "function_name": "nonExistentFunction"}),
    ]


async def run(ctx: ProbeContext) -> None:
    with fixture_tree(ctx.temp_root / FIXTURE_DIR, FIXTURE_FILES) as test_dir:
        await run_cases(ctx, "findfunc", build_cases(test_dir), "Find function")

        logger.info("testing_findfunc_with_funcdef")
        result = await call_tool(ctx, "findfunc", {
            "function_name": "calculateSum",
            "search_directory": str(test_dir),
            "language": "Go",
            "use_relative_paths": False,
        })
        if result is None or not result.content:
            return
        log_first_text(result, "Find function")

        # The match is not parsed; test_go.go is known to define it.
        result = await call_tool(ctx, "funcdef", {
            "operation": "get",
            "function_name": "calculateSum",
            "file_path": str(test_dir / "test_go.go"),
            "language": "Go",
        })
        log_first_text(result, "Function definition")
