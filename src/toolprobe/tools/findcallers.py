"""Find callers tool routine."""

from pathlib import Path
from typing import List

from .base import ProbeContext, ToolCase, fixture_tree, run_cases


FIXTURE_DIR = "mcp_test_findcallers"

FIXTURE_FILES = {
    "main.go": '''package main

import (
    "fmt"
)

func main() {
    // Call the target function
    result := calculateTotal(10, 20)
    fmt.Println("Result:", result)
}

func calculateTotal(a, b int) int {
    return a + b
}
''',
    "utils.go": '''package main

// Helper function that calls calculateTotal
func processNumbers(numbers []int) int {
    sum := 0
    for _, num := range numbers {
        sum += num
    }
    return calculateTotal(sum, 0)
}
''',
    "test.js": '''// JavaScript test file
function testFunction() {
    // Call the target function
    const result = calculateTotal(5, 10);
    console.log("Result:", result);
}

function calculateTotal(a, b) {
    return a + b;
}
''',
}


def build_cases(search_dir: Path) -> List[ToolCase]:
    base = {
        "function_name": "calculateTotal",
        "search_directory": str(search_dir),
        "recursive": True,
    }
    return [
        ToolCase("Find callers of calculateTotal in Go files",
                 {**base, "language": "Go", "use_relative_paths": False}),
        ToolCase("Find callers of calculateTotal in all languages",
                 {**base, "use_relative_paths": False}),
        ToolCase("Find callers with relative paths",
                 {**base, "use_relative_paths": True}),
    ]


async def run(ctx: ProbeContext) -> None:
    with fixture_tree(ctx.temp_root / FIXTURE_DIR, FIXTURE_FILES) as test_dir:
        await run_cases(ctx, "findcallers", build_cases(test_dir), "Find callers")
