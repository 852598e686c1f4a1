"""
Probe client for an MCP server reachable over SSE.

This module provides:
- Connection bootstrap and the initialize handshake
- Resource and tool listing
- Dispatch of one routine or the whole ordered suite
- Per-routine timing and a run summary
"""

import time
from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from mcp import ClientSession
from mcp.client.sse import sse_client
from mcp.types import Resource, Tool

from .resources import SERVER_INFO_URI, read_server_info
from .tools import ALL_SELECTOR, DEFAULT_ORDER, get_routine
from .tools.base import ProbeContext
from .utils.config import ProbeConfig
from .utils.errors import (
    ErrorContext,
    InitializationError,
    ProbeError,
    ResourceReadError,
    ServerConnectionError,
    first_leaf_exception,
)
from .utils.logging import console, get_logger


logger = get_logger("toolprobe.client")


@dataclass
class RoutineOutcome:
    """Result of one routine in an "all" run."""
    name: str
    passed: bool
    duration: float
    error: Optional[str] = None


@dataclass
class RunSummary:
    """Totals for an "all" run."""
    outcomes: List[RoutineOutcome] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    duration: float = 0.0

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def successful(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.passed)

    @property
    def failed(self) -> int:
        return self.total - self.successful


class ProbeClient:
    """Connects to one MCP server and runs test routines against it."""

    def __init__(self, config: ProbeConfig):
        self.config = config

    async def run(self, selector: Optional[str] = None) -> Optional[RunSummary]:
        """
        Connect, run the selected routine(s) and disconnect.

        Raises:
            ServerConnectionError: the SSE stream could not be opened or broke
            InitializationError: the handshake failed
            ProbeError: a routine failed in single-tool mode
        """
        selector = selector or self.config.tool
        url = self.config.server_url
        logger.info("connecting", server_url=url)

        try:
            async with AsyncExitStack() as stack:
                read, write = await stack.enter_async_context(sse_client(
                    url,
                    timeout=self.config.connect_timeout,
                    sse_read_timeout=self.config.sse_read_timeout,
                ))
                session = await stack.enter_async_context(ClientSession(read, write))
                return await self.run_session(session, selector)
        except ProbeError:
            raise
        except Exception as e:
            # sse_client runs inside an anyio task group, so errors arrive grouped
            leaf = first_leaf_exception(e)
            if isinstance(leaf, ProbeError):
                raise leaf from None
            raise ServerConnectionError(
                f"Failed to connect to {url}: {leaf}",
                context=ErrorContext(component="client", operation="connect"),
                cause=leaf,
                server_url=url
            ) from e

    async def run_session(self, session: ClientSession, selector: str) -> Optional[RunSummary]:
        """Handshake, list, run and read server info over an open session."""
        await self.initialize(session)
        resources, tools = await self.list_resources_and_tools(session)
        tool_names = {tool.name for tool in tools}

        ctx = ProbeContext(
            session=session,
            workdir=self.config.workdir,
            delay_scale=self.config.delay_scale,
            truncate_at=self.config.truncate_at,
        )
        summary = await self.run_selected(ctx, selector, tool_names)
        await self.read_server_info_if_available(session, resources)
        return summary

    async def initialize(self, session: ClientSession) -> None:
        """Perform the initialize handshake."""
        try:
            result = await session.initialize()
        except Exception as e:
            leaf = first_leaf_exception(e)
            raise InitializationError(
                f"Failed to initialize client: {leaf}",
                context=ErrorContext(component="client", operation="initialize"),
                cause=leaf
            ) from e

        logger.info(
            "connected",
            server_name=result.serverInfo.name,
            server_version=result.serverInfo.version,
            protocol_version=result.protocolVersion,
        )
        logger.info(
            "server_capabilities",
            capabilities=result.capabilities.model_dump(exclude_none=True),
        )

    async def list_resources_and_tools(
        self,
        session: ClientSession
    ) -> Tuple[List[Resource], List[Tool]]:
        """
        List resources, then tools.

        A failed listing is logged and treated as empty.
        """
        resources: List[Resource] = []
        tools: List[Tool] = []

        try:
            resources = (await session.list_resources()).resources
        except Exception as e:
            logger.error("list_resources_failed", error=str(first_leaf_exception(e)))
        logger.info("available_resources", count=len(resources))
        for resource in resources:
            logger.info("resource", entry=f"{resource.name} ({resource.uri})")

        try:
            tools = (await session.list_tools()).tools
        except Exception as e:
            logger.error("list_tools_failed", error=str(first_leaf_exception(e)))
        logger.info("available_tools", count=len(tools))
        for tool in tools:
            logger.info("tool", entry=f"{tool.name}: {tool.description or ''}")

        return resources, tools

    async def run_selected(
        self,
        ctx: ProbeContext,
        selector: str,
        tool_names: Set[str]
    ) -> Optional[RunSummary]:
        """
        Run one routine, or every routine for the "all" selector.

        Raises:
            UnknownToolError: no routine has this selector
        """
        if selector == ALL_SELECTOR:
            return await self.run_all(ctx, tool_names)

        routine = get_routine(selector)
        missing = routine.missing_tools(tool_names)
        if missing:
            logger.warning("tool_not_found_on_server", tool=selector, missing=missing)
            return None

        logger.info("testing_tool", tool=selector)
        await routine.run(ctx)
        return None

    async def run_all(
        self,
        ctx: ProbeContext,
        tool_names: Set[str],
        order: Sequence[str] = DEFAULT_ORDER
    ) -> RunSummary:
        """Run every available routine in order and log a summary."""
        logger.info("testing_all_tools", count=len(order))
        summary = RunSummary()
        start = time.monotonic()

        for name in order:
            routine = get_routine(name)
            missing = routine.missing_tools(tool_names)
            if missing:
                logger.info("skipping_tool", tool=name, reason="not available on server", missing=missing)
                summary.skipped.append(name)
                continue

            console.rule(f"TESTING {name}")
            routine_start = time.monotonic()
            try:
                await routine.run(ctx)
            except ProbeError as e:
                duration = time.monotonic() - routine_start
                logger.error("tool_test_failed", tool=name, duration=round(duration, 3), error=str(e))
                summary.outcomes.append(RoutineOutcome(name, False, duration, str(e)))
            else:
                duration = time.monotonic() - routine_start
                logger.info("tool_test_passed", tool=name, duration=round(duration, 3))
                summary.outcomes.append(RoutineOutcome(name, True, duration))

        summary.duration = time.monotonic() - start

        console.rule("TEST SUMMARY")
        logger.info(
            "test_summary",
            total=summary.total,
            successful=summary.successful,
            failed=summary.failed,
            duration=round(summary.duration, 3),
        )
        return summary

    async def read_server_info_if_available(
        self,
        session: ClientSession,
        resources: Sequence[Resource]
    ) -> None:
        """Read server://info when the server lists it."""
        if not any(str(resource.uri).rstrip("/") == SERVER_INFO_URI for resource in resources):
            logger.info("server_info_not_found")
            return

        logger.info("reading_server_info")
        try:
            await read_server_info(session)
        except ResourceReadError as e:
            logger.warning("server_info_unavailable", error=str(e))


__all__ = [
    'ProbeClient',
    'RunSummary',
    'RoutineOutcome',
]
