"""Resource reads against the MCP server."""

from typing import Optional

from mcp import ClientSession
from mcp.shared.exceptions import McpError
from mcp.types import TextResourceContents
from pydantic import AnyUrl

from .utils.errors import ErrorContext, ResourceReadError
from .utils.logging import get_logger


logger = get_logger("toolprobe.resources")

SERVER_INFO_URI = "server://info"


async def read_text_resource(session: ClientSession, uri: str) -> Optional[str]:
    """
    Read a resource and return the text of its first item.

    Returns:
        The text, or None when the first item is not text

    Raises:
        ResourceReadError: the server answered with a JSON-RPC error
    """
    try:
        result = await session.read_resource(AnyUrl(uri))
    except McpError as e:
        raise ResourceReadError(
            uri,
            f"Failed to read {uri}: {e}",
            context=ErrorContext(component="resources", operation="read_resource"),
            cause=e
        ) from e

    if result.contents and isinstance(result.contents[0], TextResourceContents):
        return result.contents[0].text
    return None


async def read_server_info(session: ClientSession) -> Optional[str]:
    """Read and log the server info resource."""
    try:
        text = await read_text_resource(session, SERVER_INFO_URI)
    except ResourceReadError as e:
        logger.error("server_info_read_failed", error=str(e.cause or e))
        raise

    if text is not None:
        logger.info("resource_content", label="Server Info", text=text)
    return text


__all__ = [
    'SERVER_INFO_URI',
    'read_text_resource',
    'read_server_info',
]
