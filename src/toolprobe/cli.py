"""
Command-line front end.

Exit codes: 0 success, 1 fatal connection/handshake/timeout failure or a
failed routine in single-tool mode, 2 configuration or usage error, 130
interrupted by a signal.
"""

import argparse
import asyncio
import sys
from typing import Any, Dict, List, Optional

from . import __version__
from .client import ProbeClient
from .tools import ALL_SELECTOR, get_routine, selectors
from .utils.config import ProbeConfig, load_config
from .utils.errors import (
    ConfigurationError,
    ProbeError,
    ShutdownRequested,
    UnknownToolError,
)
from .utils.logging import console, get_logger, setup_logging
from .utils.shutdown import CancellationScope


logger = get_logger("toolprobe.cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcp-toolprobe",
        description="Smoke-test the tools of an MCP server over SSE",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--server", dest="server_url", help="MCP server SSE URL (default: http://localhost:8080)")
    parser.add_argument("--timeout", type=float, help="Client timeout in seconds, 0 disables (default: 60)")
    parser.add_argument("--tool", choices=selectors(), metavar="TOOL",
                        help=f"Tool to test, or '{ALL_SELECTOR}' (default: calculator)")
    parser.add_argument("--config", help="JSON, YAML or TOML config file")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        type=str.upper, help="Log level")
    parser.add_argument("--json-logs", action="store_true", default=None, help="Render logs as JSON")
    parser.add_argument("--log-dir", help="Also write rotating log files here")
    parser.add_argument("--delay-scale", type=float,
                        help="Multiplier for the pauses between test cases, 0 disables them")
    parser.add_argument("--list-tools", action="store_true", help="List tool selectors and exit")
    return parser


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Turn parsed arguments into config overrides; unset flags are left out."""
    overrides: Dict[str, Any] = {
        "server_url": args.server_url,
        "timeout": args.timeout,
        "tool": args.tool,
        "delay_scale": args.delay_scale,
    }
    logging_overrides = {
        key: value
        for key, value in (
            ("level", args.log_level),
            ("json_output", args.json_logs),
            ("directory", args.log_dir),
        )
        if value is not None
    }
    if logging_overrides:
        overrides["logging"] = logging_overrides
    return overrides


def list_selectors() -> None:
    for selector in selectors():
        if selector == ALL_SELECTOR:
            console.print(f"{selector:24} every routine in the default order")
        else:
            console.print(f"{selector:24} {get_routine(selector).description}")


async def probe(config: ProbeConfig) -> int:
    """Run the probe under the client deadline and signal handlers."""
    client = ProbeClient(config)
    scope = CancellationScope(timeout=config.timeout)

    try:
        await scope.run(client.run(config.tool))
    except ShutdownRequested as e:
        logger.warning("interrupted", signal=e.signal_name)
        return EXIT_INTERRUPTED
    except UnknownToolError as e:
        logger.error("probe_failed", **e.to_dict()["error"])
        return EXIT_USAGE
    except ProbeError as e:
        logger.error("probe_failed", **e.to_dict()["error"])
        return EXIT_FAILURE

    logger.info("client_finished")
    return EXIT_OK


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, load configuration and run the probe."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_tools:
        list_selectors()
        return EXIT_OK

    try:
        config = load_config(args.config, build_overrides(args))
        if config.tool != ALL_SELECTOR:
            get_routine(config.tool)
    except (ConfigurationError, UnknownToolError) as e:
        console.print(f"Configuration error: {e}", markup=False)
        return EXIT_USAGE

    setup_logging(
        app_name=config.app_name,
        log_level=config.logging.level,
        log_dir=config.logging.directory,
        enable_json=config.logging.json_output,
    )
    logger.debug("configuration", config=config.model_dump(mode="json"))

    return asyncio.run(probe(config))


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
