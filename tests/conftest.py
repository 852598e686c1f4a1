"""
Pytest configuration and shared fixtures for toolprobe tests.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Generator, Iterable, List, Mapping, Optional, Tuple

import pytest
from mcp.shared.exceptions import McpError
from mcp.types import (
    CallToolResult,
    ErrorData,
    Implementation,
    InitializeResult,
    ListResourcesResult,
    ListToolsResult,
    ReadResourceResult,
    Resource,
    ServerCapabilities,
    TextContent,
    TextResourceContents,
    Tool,
    ToolsCapability,
)

from toolprobe.tools.base import ProbeContext
from toolprobe.utils.config import ProbeConfig


def text_result(text: str, is_error: bool = False) -> CallToolResult:
    """Build a single-item text result."""
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def mcp_error(message: str, code: int = -32603) -> McpError:
    """Build the error the SDK raises for a JSON-RPC error response."""
    return McpError(ErrorData(code=code, message=message))


class FakeSession:
    """
    Stand-in for mcp.ClientSession.

    Records every tools/call and resources/read request. A call fails with
    McpError when fail(tool, arguments) is true, or with whatever
    raise_on(tool, arguments) returns; otherwise respond(tool, arguments)
    supplies the result, defaulting to a "<tool> ok" text item.
    """

    def __init__(
        self,
        tools: Iterable[str] = (),
        resources: Optional[Mapping[str, str]] = None,
        resource_texts: Optional[Mapping[str, str]] = None,
        fail: Optional[Callable[[str, Dict[str, Any]], bool]] = None,
        respond: Optional[Callable[[str, Dict[str, Any]], Optional[CallToolResult]]] = None,
    ):
        self.tools = list(tools)
        self.resources = dict(resources or {})
        self.resource_texts = dict(resource_texts or {})
        self.fail = fail or (lambda tool, arguments: False)
        self.respond = respond or (lambda tool, arguments: None)
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.reads: List[str] = []
        self.initialized = False
        self.on_call: Optional[Callable[[str, Dict[str, Any]], None]] = None
        self.raise_on: Optional[Callable[[str, Dict[str, Any]], Optional[Exception]]] = None

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None

    async def initialize(self) -> InitializeResult:
        self.initialized = True
        return InitializeResult(
            protocolVersion="2024-11-05",
            capabilities=ServerCapabilities(tools=ToolsCapability(listChanged=False)),
            serverInfo=Implementation(name="fake-server", version="1.0.0"),
        )

    async def list_resources(self) -> ListResourcesResult:
        return ListResourcesResult(resources=[
            Resource(uri=uri, name=name) for uri, name in self.resources.items()
        ])

    async def list_tools(self) -> ListToolsResult:
        return ListToolsResult(tools=[
            Tool(name=name, description=f"{name} tool", inputSchema={"type": "object"})
            for name in self.tools
        ])

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> CallToolResult:
        arguments = dict(arguments or {})
        self.calls.append((name, arguments))
        if self.on_call is not None:
            self.on_call(name, arguments)
        if self.raise_on is not None:
            error = self.raise_on(name, arguments)
            if error is not None:
                raise error
        if self.fail(name, arguments):
            raise mcp_error(f"{name} failed")
        return self.respond(name, arguments) or text_result(f"{name} ok")

    async def read_resource(self, uri) -> ReadResourceResult:
        key = str(uri).rstrip("/")
        self.reads.append(key)
        if key not in self.resource_texts:
            raise mcp_error(f"Resource not found: {key}", code=-32002)
        return ReadResourceResult(contents=[
            TextResourceContents(uri=uri, mimeType="text/plain", text=self.resource_texts[key])
        ])

    def tool_calls(self, tool: str) -> List[Dict[str, Any]]:
        """Arguments of every call made to tool, in order."""
        return [arguments for name, arguments in self.calls if name == tool]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fake_session() -> FakeSession:
    """A session that lists no tools and answers every call."""
    return FakeSession()


@pytest.fixture
def probe_context(fake_session: FakeSession, temp_dir: Path) -> ProbeContext:
    """Routine context with pauses disabled and fixtures under temp_dir."""
    return ProbeContext(
        session=fake_session,
        workdir=temp_dir,
        delay_scale=0.0,
        truncate_at=500,
        temp_root=temp_dir,
    )


@pytest.fixture
def probe_config(temp_dir: Path) -> ProbeConfig:
    """Configuration with pauses disabled."""
    return ProbeConfig(delay_scale=0.0, workdir=temp_dir)
