import threading

import pytest

from packrpc.cli import main, run_client, run_multi_client, run_server
from packrpc.tcp import server_socket
from packrpc.tcp_server import TcpServer


@pytest.fixture
def serve():
    started = []

    def start():
        server = TcpServer(0)
        server.bind("add", lambda a, b: a + b)
        server.bind("print", lambda message: None)
        thread = threading.Thread(target=server.run, daemon=True)
        thread.start()
        started.append((server, thread))
        return server

    yield start
    for server, thread in started:
        server.close()
        thread.join(timeout=5)


def _dead_port():
    listener = server_socket(0)
    port = listener.getsockname()[1]
    listener.close()
    return port


def test_no_arguments_prints_usage(capsys):
    assert main([]) == 1
    err = capsys.readouterr().err
    assert err.startswith("TCP RPC test\n")
    assert "--server [port]" in err


def test_unknown_option_prints_usage(capsys):
    assert main(["--bogus"]) == 1
    assert "--client [port [port [port [...]]]]" in capsys.readouterr().err


def test_server_with_invalid_port(capsys):
    assert main(["--server", "abc"]) == 0
    assert capsys.readouterr().err == "Invalid port number: abc\n"


def test_client_with_invalid_port(capsys):
    assert main(["--client", "nope"]) == 0
    assert capsys.readouterr().err == "Invalid port number: nope\n"


def test_client_rejects_out_of_range_port(capsys):
    assert main(["--client", "70000"]) == 0
    assert capsys.readouterr().err == "Invalid port number: 70000\n"


def test_run_client_prints_result(serve, capsys):
    server = serve()
    run_client(server.port)
    assert capsys.readouterr().out == "Result: 7\n"


def test_main_client_with_one_port(serve, capsys):
    server = serve()
    assert main(["--client", str(server.port)]) == 0
    assert capsys.readouterr().out == "Result: 7\n"


def test_run_multi_client_prints_each_result(serve, capsys):
    servers = [serve(), serve()]
    run_multi_client([s.port for s in servers])
    assert capsys.readouterr().out == "Result:\n  9\n  9\n"


def test_main_client_with_several_ports(serve, capsys):
    servers = [serve(), serve(), serve()]
    assert main(["--client", *(str(s.port) for s in servers)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Result:"
    assert len(lines) == 4
    assert len(set(lines[1:])) == 1


def test_run_client_reports_connection_failure(capsys):
    run_client(_dead_port())
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "RPC call failed: connect() failed\n"


def test_run_server_reports_busy_port(capsys):
    listener = server_socket(0)
    try:
        run_server(listener.getsockname()[1])
    finally:
        listener.close()
    assert capsys.readouterr().err == "RPC server failed: bind() failed\n"