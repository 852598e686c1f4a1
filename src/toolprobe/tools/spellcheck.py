"""Spellcheck tool routine."""

from pathlib import Path
from typing import List

from .base import ProbeContext, ToolCase, fixture_tree, run_cases


FIXTURE_FILES = {
    "test_comments.go": '''package main

import (
    "fmt"
)

// This is a coment with a speling mistake
func main() {
    // Another coment with a mispelled word
    fmt.Println("Hello, World!")
}
''',
    "test_strings.go": '''package main

import (
    "fmt"
)

func main() {
    // String with spelling mistakes
    message := "This is a mesage with a speling mistake"
    fmt.Println(message)
}
''',
    "test_identifiers.go": '''package main

import (
    "fmt"
)

func main() {
    // Variable with spelling mistake
    userAcount := "John"
    fmt.Println(userAcount)

    // Function with spelling mistake
    displayMessge("Hello")
}

func displayMessge(text string) {
    fmt.Println(text)
}
''',
}


def build_cases(test_dir: Path) -> List[ToolCase]:
    def check(path: Path, comments=True, strings=True, identifiers=True, recursive=True, **extra) -> dict:
        arguments = {
            "path": str(path),
            "check_comments": comments,
            "check_strings": strings,
            "check_identifiers": identifiers,
            "use_relative_paths": True,
        }
        if recursive:
            arguments["recursive"] = True
        arguments.update(extra)
        return arguments

    return [
        ToolCase("Check all types", check(test_dir)),
        ToolCase("Check comments only", check(test_dir, strings=False, identifiers=False)),
        ToolCase("Check with custom dictionary",
                 check(test_dir, custom_dictionary=["speling", "coment"])),
        ToolCase("Check specific file",
                 check(test_dir / "test_identifiers.go", recursive=False)),
    ]


async def run(ctx: ProbeContext) -> None:
    with fixture_tree(ctx.temp_root / "mcp_test_spellcheck", FIXTURE_FILES) as test_dir:
        await run_cases(ctx, "spellcheck", build_cases(test_dir), "Spellcheck")
