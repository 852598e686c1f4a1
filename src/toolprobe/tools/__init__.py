"""
Test routine registry.

Each selector maps to one routine plus the remote tools it needs; a routine is
only run when all of them are listed by the server.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Tuple

from ..utils.errors import UnknownToolError
from . import (
    calculator,
    cmdexec,
    codeanalysis,
    filesearch,
    findcallers,
    findfunc,
    funcdef,
    linecount,
    patch,
    rag,
    screenshot,
    searchreplace,
    shell,
    spellcheck,
    stats,
    webfetch,
    websearch,
    workspace,
    workspace_integration,
)
from .base import ProbeContext


RoutineFunc = Callable[[ProbeContext], Awaitable[None]]


@dataclass(frozen=True)
class Routine:
    """A selectable test routine."""
    name: str
    run: RoutineFunc
    requires: Tuple[str, ...]
    description: str = ""

    def missing_tools(self, available) -> List[str]:
        """Remote tools this routine needs that the server did not list."""
        return [tool for tool in self.requires if tool not in available]


ROUTINES: Dict[str, Routine] = {
    routine.name: routine
    for routine in (
        Routine("workspace", workspace.run, ("workspace",), "workspace session lifecycle"),
        Routine("calculator", calculator.run, ("calculator",), "four arithmetic operations"),
        Routine("filesearch", filesearch.run, ("filesearch",), "pattern and content search"),
        Routine("cmdexec", cmdexec.run, ("cmdexec",), "one-shot command execution"),
        Routine("shell", shell.run, ("workspace", "shell"), "persistent bash, PowerShell and CMD sessions"),
        Routine("searchreplace", searchreplace.run, ("searchreplace",), "preview and apply replacements"),
        Routine("screenshot", screenshot.run, ("screenshot",), "full screen and region captures"),
        Routine("websearch", websearch.run, ("websearch",), "search engine queries"),
        Routine("webfetch", webfetch.run, ("webfetch",), "page fetching"),
        Routine("rag", rag.run, ("workspace", "rag"), "repository indexing and queries"),
        Routine("codeanalysis", codeanalysis.run, ("codeanalysis",), "file and directory analysis"),
        Routine("patch", patch.run, ("patch",), "unified diff dry run and apply"),
        Routine("linecount", linecount.run, ("linecount",), "line, word and character counts"),
        Routine("findcallers", findcallers.run, ("findcallers",), "call site lookup"),
        Routine("findfunc", findfunc.run, ("findfunc", "funcdef"), "function definition lookup"),
        Routine("funcdef", funcdef.run, ("funcdef",), "get and replace functions"),
        Routine("funcdef_comments", funcdef.run_comments, ("funcdef",), "funcdef with braces in comments"),
        Routine("funcdef_strings", funcdef.run_strings, ("funcdef",), "funcdef with braces in string literals"),
        Routine("funcdef_complex", funcdef.run_complex, ("funcdef",), "funcdef with raw and escaped strings"),
        Routine("spellcheck", spellcheck.run, ("spellcheck",), "comment, string and identifier spelling"),
        Routine("stats", stats.run, ("stats",), "server statistics"),
        Routine(
            "workspace_integration",
            workspace_integration.run,
            ("workspace", "linecount", "patch", "rag"),
            "tools with and without a workspace session"
        ),
    )
}

# Order for the "all" selector; workspace first, integration last.
DEFAULT_ORDER: Tuple[str, ...] = (
    "workspace",
    "calculator",
    "filesearch",
    "cmdexec",
    "shell",
    "searchreplace",
    "screenshot",
    "websearch",
    "webfetch",
    "rag",
    "codeanalysis",
    "patch",
    "linecount",
    "findcallers",
    "findfunc",
    "funcdef",
    "spellcheck",
    "stats",
    "workspace_integration",
)

ALL_SELECTOR = "all"


def get_routine(selector: str) -> Routine:
    """Look up a routine by selector."""
    try:
        return ROUTINES[selector]
    except KeyError:
        raise UnknownToolError(selector) from None


def selectors() -> List[str]:
    """Every valid --tool value."""
    return list(ROUTINES) + [ALL_SELECTOR]


__all__ = [
    'Routine',
    'ROUTINES',
    'DEFAULT_ORDER',
    'ALL_SELECTOR',
    'ProbeContext',
    'get_routine',
    'selectors',
]
