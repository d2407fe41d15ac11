"""HTTP control server for an indicator light.

Run as: delux-server --config config.yaml
"""

import argparse
import asyncio
import sys

from ..control.server import DEFAULT_HOST, DEFAULT_PORT, ControlServer
from ..controller import Controller
from ..errors import DeluxError
from ..log import configure_logging
from .common import add_common_arguments, close_sink, create_sink, load_cli_config


async def run_server(args: argparse.Namespace) -> None:
    """Run the control server until cancelled."""
    config = load_cli_config(args.config)
    sink = create_sink(args.mock)

    controller = Controller(config, sink, asyncio.get_running_loop())
    server = ControlServer(controller, host=args.host, port=args.port)

    await server.start()

    # Keep running until interrupted
    try:
        while True:
            await asyncio.sleep(1)
    except asyncio.CancelledError:
        pass
    finally:
        await server.stop()
        close_sink(sink)


def main():
    """Entry point for delux-server command."""
    parser = argparse.ArgumentParser(
        description="HTTP control server for a Luxafor indicator light"
    )
    parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"Host to bind to (default: {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port to listen on (default: {DEFAULT_PORT})",
    )
    add_common_arguments(parser)

    args = parser.parse_args()
    configure_logging(args.debug)

    print("=" * 60)
    print("  Delux Control Server")
    print("=" * 60)
    print()
    print(f"  Status:  http://{args.host}:{args.port}/status")
    print()
    print("=" * 60)

    try:
        asyncio.run(run_server(args))
    except KeyboardInterrupt:
        print("\n[CONTROL] Shutting down...")
    except (DeluxError, FileNotFoundError, ImportError) as e:
        print(f"[CONTROL] Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
