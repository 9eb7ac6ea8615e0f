"""Command-line entry point: ``python -m fiber_inspector_mcp``."""

import argparse

from .config import ServerConfig


def main() -> None:
    parser = argparse.ArgumentParser(description="Fiber inspector MCP server")
    parser.add_argument("--hook", dest="hook_path", help="Debug hook to attach to, as 'module:attribute'")
    parser.add_argument("--transport", choices=["stdio", "sse", "http"], help="MCP transport (default: stdio)")
    parser.add_argument("--host", help="Bind address for sse/http transports")
    parser.add_argument("--port", type=int, help="Port for sse/http transports")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")

    args = parser.parse_args()

    # Command-line flags override FIBER_INSPECTOR_* settings
    overrides = {key: value for key, value in vars(args).items() if value is not None}
    config = ServerConfig(**overrides)  # type: ignore[arg-type]

    from .server import run

    run(config)


if __name__ == "__main__":
    main()
