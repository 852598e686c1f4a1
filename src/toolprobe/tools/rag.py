"""Retrieval-augmented generation (RAG) tool routine."""

from .base import ProbeContext, ToolCase, call_tool, log_first_text, logger, run_cases


SESSION_ID = "rag-test-session"


def build_cases() -> list:
    def query(text: str) -> dict:
        return {
            "operation": "query",
            "repo_path": ".",
            "session_id": SESSION_ID,
            "query": text,
            "num_results": 3.0,
        }

    return [
        ToolCase("Index repository", {
            "operation": "index",
            "repo_path": ".",
            "session_id": SESSION_ID,
            "file_patterns": ["*.go", "*.md"],
        }),
        ToolCase("Query repository - General query",
                 query("how to implement a service")),
        ToolCase("Query repository - Function name query",
                 query("Show me the findHunkLocation function in patch.go")),
        ToolCase("Query repository - Exact function signature query",
                 query("func findHunkLocation(lines []string, hunk Hunk) int")),
        ToolCase("Query repository - Function extraction test",
                 query("extractSnippet function in rag package")),
    ]


async def run(ctx: ProbeContext) -> None:
    """Index the working directory inside a workspace session, then query it."""
    logger.info("initializing_workspace", purpose="rag", session_id=SESSION_ID)
    result = await call_tool(ctx, "workspace", {
        "operation": "initialize",
        "root_dir": str(ctx.workdir),
        "user_task": "Testing the enhanced RAG tool",
        "session_id": SESSION_ID,
    }, required=True)
    log_first_text(result, "Workspace initialization")

    await run_cases(ctx, "rag", build_cases(), "RAG", delay=1.0)
