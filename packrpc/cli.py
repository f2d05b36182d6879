"""Command line front end: start a TCP RPC server or call one."""

from __future__ import annotations

import sys
from typing import Sequence

from .tcp_client import TcpClient, TcpMultiClient
from .tcp_server import TcpServer

DEFAULT_PORT = 5555
HOST = "127.0.0.1"

USAGE = (
    "TCP RPC test\n"
    "Command line options:\n"
    "  --server [port]                      invoke RPC server\n"
    "  --client [port [port [port [...]]]]  invoke RPC client\n"
)


def _add(a, b):
    return a + b


def _print(message):
    print(f">> {message}", flush=True)


def run_server(port: int) -> None:
    """Serve ``add`` and ``print`` on ``port`` until interrupted."""
    try:
        with TcpServer(port) as server:
            server.bind("add", _add)
            server.bind("print", _print)
            server.run()
    except Exception as err:
        print(f"RPC server failed: {err}", file=sys.stderr)


def run_client(port: int) -> None:
    """Call ``add`` and ``print`` on the server at ``port``."""
    try:
        with TcpClient(HOST, port) as client:
            result = client.call("add", 3, 4)
            print(f"Result: {result}")
            client.call("print", "Hello, world !", void=True)
    except Exception as err:
        print(f"RPC call failed: {err}", file=sys.stderr)


def run_multi_client(ports: Sequence[int]) -> None:
    """Call ``add`` and ``print`` on every server in ``ports``."""
    try:
        with TcpMultiClient(HOST, ports) as client:
            results = client.call("add", 4, 5)
            print("Result:")
            for result in results:
                print(f"  {result}")
            client.call("print", "Hello, many worlds !", void=True)
    except Exception as err:
        print(f"RPC call failed: {err}", file=sys.stderr)


def _parse_port(text: str) -> int:
    port = int(text)
    if not 0 <= port <= 0xFFFF:
        raise ValueError(text)
    return port


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    mode = args[0] if args else None

    if mode == "--server":
        port = DEFAULT_PORT
        if len(args) > 1:
            try:
                port = _parse_port(args[1])
            except ValueError:
                print(f"Invalid port number: {args[1]}", file=sys.stderr)
                return 0
        run_server(port)
        return 0

    if mode == "--client":
        ports = []
        for text in args[1:] or [str(DEFAULT_PORT)]:
            try:
                ports.append(_parse_port(text))
            except ValueError:
                print(f"Invalid port number: {text}", file=sys.stderr)
                return 0
        if len(ports) == 1:
            run_client(ports[0])
        else:
            run_multi_client(ports)
        return 0

    sys.stderr.write(USAGE)
    return 1


if __name__ == "__main__":
    sys.exit(main())