"""MCP stdio server exposing GitLab tools.

This module implements the main loop that reads JSON-RPC requests from stdin,
routes them to the tool registry, and writes responses to stdout. Logging and
diagnostics go to stderr so stdout carries protocol messages only.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Optional, Set, TextIO

from . import __version__
from .config import GitLabConfig
from .diagnostics import diagnose_configuration
from .gitlab_client import GitLabClient
from .protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    MCP_PROTOCOL_VERSION,
    METHOD_INITIALIZE,
    METHOD_NOT_FOUND,
    METHOD_PING,
    METHOD_TOOLS_CALL,
    METHOD_TOOLS_LIST,
    PARSE_ERROR,
    SERVER_NAME,
    JsonRpcRequest,
    create_error_response,
    create_success_response,
    parse_jsonrpc_request,
)
from .tools import ToolError, ToolRegistry, build_registry

logger = logging.getLogger(__name__)


class McpServer:
    """MCP server routing JSON-RPC requests to GitLab tools.

    Args:
        config: Server configuration
        client: GitLab client (default: one built from ``config``)
        registry: Tool registry (default: every GitLab tool bound to ``client``)
    """

    def __init__(
        self,
        config: GitLabConfig,
        client: Optional[GitLabClient] = None,
        registry: Optional[ToolRegistry] = None,
    ):
        self.config = config
        self.client = client if client is not None else GitLabClient(config)
        self.registry = registry if registry is not None else build_registry(self.client)

    def server_info(self) -> dict:
        return {
            "protocolVersion": MCP_PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    async def process_line(self, line: str) -> Optional[dict]:
        """Process a single line of input containing a JSON-RPC request.

        Args:
            line: JSON string containing JSON-RPC request

        Returns:
            JSON-RPC response as dictionary, or None for notifications
        """
        try:
            request = parse_jsonrpc_request(line)

        except json.JSONDecodeError as e:
            # MCP forbids null ids: use 0 when the request id is unknown
            return create_error_response(
                request_id=0,
                code=PARSE_ERROR,
                message="Parse error",
                data={"detail": str(e)},
            ).to_dict()

        except ValueError as e:
            return create_error_response(
                request_id=0,
                code=INVALID_REQUEST,
                message="Invalid Request",
                data={"detail": str(e)},
            ).to_dict()

        return await self.process_request(request)

    async def process_request(self, request: JsonRpcRequest) -> Optional[dict]:
        """Dispatch a parsed request to its method handler.

        Args:
            request: Parsed JSON-RPC request

        Returns:
            JSON-RPC response as dictionary, or None for notifications
        """
        if request.is_notification:
            logger.debug(f"Notification received: {request.method}")
            return None

        params = request.params or {}

        try:
            if request.method == METHOD_INITIALIZE:
                result: Any = self.server_info()

            elif request.method == METHOD_PING:
                result = {}

            elif request.method == METHOD_TOOLS_LIST:
                result = {"tools": self.registry.list_tools()}

            elif request.method == METHOD_TOOLS_CALL:
                name = params.get("name")
                if not isinstance(name, str) or not name:
                    return create_error_response(
                        request.id,
                        INVALID_PARAMS,
                        "Invalid params: 'name' must be a non-empty string",
                    ).to_dict()
                result = await self.registry.call_tool(name, params.get("arguments"))

            else:
                return create_error_response(
                    request.id, METHOD_NOT_FOUND, f"Method not found: {request.method}"
                ).to_dict()

            return create_success_response(request.id, result).to_dict()

        except Exception as e:
            logger.exception(f"Internal error handling {request.method}")
            return create_error_response(
                request.id, INTERNAL_ERROR, f"Internal error: {str(e)}"
            ).to_dict()

    async def _handle_line(self, line: str, stdout: TextIO) -> None:
        response = await self.process_line(line)
        if response is None:
            return
        stdout.write(json.dumps(response, ensure_ascii=False) + "\n")
        stdout.flush()

    async def run_stdio_loop(
        self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None
    ):
        """Run main stdio loop - read from stdin, write to stdout.

        Each request runs as its own task so a slow GitLab call does not
        block later requests. The loop ends at EOF once in-flight requests
        have completed.

        Args:
            stdin: Input stream (default: sys.stdin)
            stdout: Output stream (default: sys.stdout)
        """
        if stdin is None:
            stdin = sys.stdin
        if stdout is None:
            stdout = sys.stdout

        loop = asyncio.get_running_loop()
        pending: Set[asyncio.Task] = set()

        try:
            while True:
                line = await loop.run_in_executor(None, stdin.readline)
                if not line:
                    break

                line = line.strip()
                if not line:
                    continue

                task = asyncio.create_task(self._handle_line(line, stdout))
                pending.add(task)
                task.add_done_callback(pending.discard)
                task.add_done_callback(_log_task_failure)

            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        finally:
            await self.client.close()

    async def run(self):
        """Run server with default stdin/stdout."""
        logger.info(
            f"GitLab MCP Server running on stdio ({len(self.registry)} tools, "
            f"{self.config.base_url})"
        )
        await self.run_stdio_loop()


def _log_task_failure(task: asyncio.Task) -> None:
    """Retrieve and log the exception of a finished request task."""
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error(
            f"Failed to handle request: {error}",
            exc_info=(type(error), error, error.__traceback__),
        )


def configure_logging(level: str) -> None:
    """Send log output to stderr at the configured level."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    if level != "debug":
        logging.getLogger("httpx").setLevel(logging.WARNING)


async def async_main(env_file: Optional[str] = None):  # pragma: no cover
    """Async main entry point for the server executable."""
    from .config import load_config

    try:
        config = load_config(env_file=env_file)
    except ValueError as e:
        print(f"Configuration Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    configure_logging(config.log_level)

    try:
        server = McpServer(config)
    except ToolError as e:
        print(f"Configuration Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    await server.run()


def main():  # pragma: no cover
    """Synchronous wrapper for CLI entry point with argument parsing."""
    parser = argparse.ArgumentParser(
        description="GitLab MCP Server - GitLab REST API tools over stdio",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--diagnose",
        action="store_true",
        help="Run configuration diagnostics and exit",
    )

    parser.add_argument(
        "--env-file",
        type=str,
        metavar="PATH",
        help="Path to a .env file (default: ./.env if present)",
    )

    args = parser.parse_args()

    if args.diagnose:
        try:
            result = diagnose_configuration(env_file=args.env_file)
        except ValueError as e:
            print(f"Configuration Error: {str(e)}", file=sys.stderr)
            sys.exit(1)
        print(result.format_output())
        sys.exit(0 if result.connectivity_status == "success" else 1)

    try:
        asyncio.run(async_main(env_file=args.env_file))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
