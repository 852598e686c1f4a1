"""Persistent shell session tool routine."""

from typing import List

from ..utils.errors import ToolCallError
from .base import (
    ProbeContext,
    ToolCase,
    call_tool,
    call_tool_raw,
    first_text,
    log_first_text,
    logger,
    run_cases,
)


def _execute(session_id: str, command: str) -> dict:
    return {
        "operation": "execute",
        "session_id": session_id,
        "command": command,
        "timeout": 5.0,
    }


def bash_cases(session_id: str) -> List[ToolCase]:
    return [
        ToolCase("Initialize bash shell session", {
            "operation": "initialize",
            "session_id": session_id,
            "shell_type": "bash",
        }),
        ToolCase("Execute simple echo command",
                 _execute(session_id, "echo Hello from persistent bash shell!")),
        ToolCase("Execute command that returns non-zero exit code",
                 _execute(session_id, "ls /nonexistent_directory && echo Success || echo 'Failed with exit code: $?'")),
        ToolCase("Execute command that generates stderr",
                 _execute(session_id, "cat /nonexistent_file 2>&1")),
        ToolCase("Set environment variable to test state persistence",
                 _execute(session_id, "export TEST_VAR='This is a persistent environment variable'")),
        ToolCase("Echo environment variable to verify state persistence",
                 _execute(session_id, "echo $TEST_VAR")),
        ToolCase("Execute multi-line command",
                 _execute(session_id, "for i in {1..3}; do\n  echo \"Line $i\"\ndone")),
        ToolCase("Execute command with stdin input simulation",
                 _execute(session_id, "cat << EOF\nThis is line 1\nThis is line 2\nThis is line 3\nEOF")),
        ToolCase("Check bash shell session status", {
            "operation": "status",
            "session_id": session_id,
        }),
        ToolCase("Close bash shell session", {
            "operation": "close",
            "session_id": session_id,
        }),
    ]


def error_cases(session_id: str) -> List[ToolCase]:
    return [
        ToolCase("Try to use closed session",
                 _execute(session_id, "echo This should fail because session is closed")),
        ToolCase("Missing required parameter", {
            "operation": "execute",
            "command": "echo Missing session_id",
        }),
        ToolCase("Invalid operation", {
            "operation": "invalid_operation",
            "session_id": session_id,
        }),
    ]


def powershell_cases(session_id: str) -> List[ToolCase]:
    return [
        ToolCase("Initialize PowerShell session", {
            "operation": "initialize",
            "session_id": session_id,
            "shell_type": "powershell",
        }),
        ToolCase("Execute simple echo command in PowerShell",
                 _execute(session_id, "Write-Host 'Hello from PowerShell!'")),
        ToolCase("Execute command that returns non-zero exit code in PowerShell",
                 _execute(session_id, "Get-Item NonExistentFile.txt -ErrorAction Stop; "
                                      "if (-not $?) { Write-Host \"Command failed with exit code: $LASTEXITCODE\" }")),
        ToolCase("Set environment variable in PowerShell",
                 _execute(session_id, "$env:PS_TEST_VAR = 'PowerShell environment variable'")),
        ToolCase("Echo environment variable in PowerShell",
                 _execute(session_id, "Write-Host $env:PS_TEST_VAR")),
        ToolCase("Close PowerShell session", {
            "operation": "close",
            "session_id": session_id,
        }),
    ]


def cmd_cases(session_id: str) -> List[ToolCase]:
    return [
        ToolCase("Initialize CMD session", {
            "operation": "initialize",
            "session_id": session_id,
            "shell_type": "cmd",
        }),
        ToolCase("Execute simple echo command in CMD",
                 _execute(session_id, "echo Hello from CMD shell!")),
        ToolCase("Execute command that returns non-zero exit code in CMD",
                 _execute(session_id, "dir /nonexistent && echo Success || echo Failed with exit code %errorlevel%")),
        ToolCase("Set environment variable in CMD",
                 _execute(session_id, "set CMD_TEST_VAR=CMD environment variable")),
        ToolCase("Echo environment variable in CMD",
                 _execute(session_id, "echo %CMD_TEST_VAR%")),
        ToolCase("Close CMD session", {
            "operation": "close",
            "session_id": session_id,
        }),
    ]


async def run_error_cases(ctx: ProbeContext, cases: List[ToolCase]) -> None:
    """Send requests the server should reject; a rejection is the pass case."""
    for case in cases:
        logger.info("running_test_case", tool="shell", case=case.name)
        try:
            result = await call_tool_raw(ctx, "shell", case.arguments)
        except ToolCallError as e:
            logger.info("expected_error_received", case=case.name, error=str(e.cause or e))
        else:
            if result.isError:
                logger.info("expected_error_received", case=case.name, error=first_text(result))
            else:
                logger.warning("unexpected_success", case=case.name, text=first_text(result))
        await ctx.pause(0.5)


async def run(ctx: ProbeContext) -> None:
    stamp = ctx.session_stamp()
    session_id = f"shell-test-session-{stamp}"

    logger.info("initializing_workspace", purpose="shell", session_id=session_id)
    result = await call_tool(ctx, "workspace", {
        "operation": "initialize",
        "root_dir": str(ctx.workdir),
        "user_task": "Testing the shell tool",
        "session_id": session_id,
    }, required=True)
    log_first_text(result, "Workspace initialization")

    logger.info("testing_shell", shell="bash")
    await run_cases(ctx, "shell", bash_cases(session_id), "Bash shell", delay=1.0)
    await run_error_cases(ctx, error_cases(session_id))

    logger.info("testing_shell", shell="powershell")
    await run_cases(ctx, "shell", powershell_cases(f"shell-test-powershell-{stamp}"), "PowerShell", delay=1.0)

    logger.info("testing_shell", shell="cmd")
    await run_cases(ctx, "shell", cmd_cases(f"shell-test-cmd-{stamp}"), "CMD", delay=1.0)
