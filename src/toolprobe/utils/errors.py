"""
Error types for the MCP tool probe.

This module provides:
- A small exception hierarchy rooted at ProbeError
- Error categories for grouping failures in log output
- Structured error dictionaries for JSON logging
- Unwrapping of anyio/asyncio exception groups
"""

from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
import signal


class ErrorCategory(Enum):
    """Error categories for classification."""
    CONFIGURATION = "configuration"
    NETWORK = "network"
    PROTOCOL = "protocol"
    TOOL = "tool"
    FIXTURE = "fixture"
    USER_INPUT = "user_input"
    SYSTEM = "system"


@dataclass
class ErrorContext:
    """Context information for an error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    component: Optional[str] = None
    operation: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class ProbeError(Exception):
    """Base exception for all probe errors."""

    code: str = "PROBE_ERROR"
    default_message: str = "An error occurred while probing the MCP server"
    category: ErrorCategory = ErrorCategory.SYSTEM

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        cause: Optional[BaseException] = None,
        **metadata
    ):
        self.message = message or self.default_message
        self.context = context or ErrorContext()
        self.context.metadata.update(metadata)
        self.cause = cause
        super().__init__(self.message)

    def get_suggestions(self) -> List[str]:
        """Get error resolution suggestions."""
        return []

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "cause": repr(self.cause) if self.cause else None,
                "suggestions": self.get_suggestions(),
                "context": {
                    "timestamp": self.context.timestamp.isoformat(),
                    "component": self.context.component,
                    "operation": self.context.operation,
                    "metadata": self.context.metadata,
                },
            }
        }


class ConfigurationError(ProbeError):
    """Configuration errors."""
    code = "CONFIG_ERROR"
    default_message = "Configuration error"
    category = ErrorCategory.CONFIGURATION

    def get_suggestions(self) -> List[str]:
        return [
            "Check your configuration file syntax",
            "Check TOOLPROBE_* environment variables",
        ]


class ServerConnectionError(ProbeError):
    """The streaming connection to the server could not be opened or was lost."""
    code = "CONNECTION_ERROR"
    default_message = "Could not connect to the MCP server"
    category = ErrorCategory.NETWORK

    def get_suggestions(self) -> List[str]:
        return [
            "Verify the server is running",
            "Check the --server URL points at the SSE endpoint",
        ]


class InitializationError(ProbeError):
    """The initialize handshake failed."""
    code = "INITIALIZATION_ERROR"
    default_message = "Could not initialize the MCP session"
    category = ErrorCategory.PROTOCOL


class ToolCallError(ProbeError):
    """A tools/call request failed."""
    code = "TOOL_CALL_ERROR"
    default_message = "Tool call failed"
    category = ErrorCategory.TOOL

    def __init__(self, tool: str, message: Optional[str] = None, **kwargs):
        self.tool = tool
        super().__init__(message or f"Tool call failed: {tool}", tool=tool, **kwargs)


class ResourceReadError(ProbeError):
    """A resources/read request failed."""
    code = "RESOURCE_READ_ERROR"
    default_message = "Resource read failed"
    category = ErrorCategory.PROTOCOL

    def __init__(self, uri: str, message: Optional[str] = None, **kwargs):
        self.uri = uri
        super().__init__(message or f"Failed to read resource: {uri}", uri=uri, **kwargs)


class FixtureError(ProbeError):
    """A local test fixture could not be created."""
    code = "FIXTURE_ERROR"
    default_message = "Failed to create test fixture"
    category = ErrorCategory.FIXTURE


class UnknownToolError(ProbeError):
    """The requested tool selector has no test routine."""
    code = "UNKNOWN_TOOL"
    default_message = "Unknown tool"
    category = ErrorCategory.USER_INPUT

    def __init__(self, selector: str, **kwargs):
        self.selector = selector
        super().__init__(f"unknown tool: {selector}", selector=selector, **kwargs)


class ProbeTimeoutError(ProbeError):
    """The client-wide deadline expired."""
    code = "TIMEOUT_ERROR"
    default_message = "Client timeout reached"
    category = ErrorCategory.SYSTEM


class ShutdownRequested(ProbeError):
    """A termination signal cancelled the run."""
    code = "SHUTDOWN_REQUESTED"
    default_message = "Interrupted by signal"
    category = ErrorCategory.SYSTEM

    def __init__(self, signum: int, **kwargs):
        self.signum = signum
        try:
            name = signal.Signals(signum).name
        except ValueError:
            name = str(signum)
        self.signal_name = name
        super().__init__(f"Received signal: {name}", signal=name, **kwargs)


def first_leaf_exception(exc: BaseException) -> BaseException:
    """Return the first leaf of a (possibly nested) exception group."""
    while isinstance(exc, BaseExceptionGroup) and exc.exceptions:
        exc = exc.exceptions[0]
    return exc


__all__ = [
    'ErrorCategory',
    'ErrorContext',
    'ProbeError',
    'ConfigurationError',
    'ServerConnectionError',
    'InitializationError',
    'ToolCallError',
    'ResourceReadError',
    'FixtureError',
    'UnknownToolError',
    'ProbeTimeoutError',
    'ShutdownRequested',
    'first_leaf_exception',
]
