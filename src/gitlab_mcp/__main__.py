"""Entry point for running the server with ``python -m gitlab_mcp``."""

import sys


def main():
    """Main entry point for the GitLab MCP server."""
    from gitlab_mcp.server import main as server_main

    return server_main()


if __name__ == "__main__":
    sys.exit(main())
