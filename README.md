# packrpc

packrpc is a small remote procedure call library. It does not depend on any
particular transport. Calls and responses are encoded as MessagePack arrays:

- a call is `[call_id, func_id, *args]`
- a response is `[call_id, result]`

When a bound function returns `None`, the server sends back an empty response.
A caller that marks its call as `void` does not wait for any response.

## Installation

```
pip install .
```

## Core API

### Server

`packrpc.server.Server` holds a registry of named functions:

```python
from packrpc.server import Server

server = Server()
server.bind("add", lambda a, b: a + b)
server.bind("zero", lambda: 0.0)
```

- `bind(func_id, func)` registers `func` under a name. If the name is already bound, the existing binding is kept.
- `unbind(func_id)` removes a binding. Nothing happens if the name was not bound.
- `handle_call(buffer)` decodes a call, runs the function, and returns the packed response. It returns `b""` when the function returned `None`.
- `handle_call` raises `packrpc.errors.ServerError` in two cases:
  - the buffer is malformed;
  - the call names a function that has not been bound.
- An exception raised by the bound function itself propagates unchanged.

### Client

`packrpc.client.Client` builds call buffers and matches each response to the call that is still waiting for it:

```python
from packrpc.client import Client

client = Client()
future, buffer, call_id = client.call("add", 90, 21)

response = server.handle_call(buffer)
client.ingest_resp(response, True)
assert future.result() == 111
```

- `call(func_id, *args, void=False)` returns `(future, buffer, call_id)`. The future is a `concurrent.futures.Future`. With `void=True` the future already holds `None` and no response is expected.
- `multi_call(func_id, *args, void=False)` is for a call answered by several servers. Its future resolves to a list of every result once the response ingested with `last=True` arrives.
- `cancel(call_id, exc)` fails a pending call with `exc`, for example after a timeout. It returns `False` if no call with that id is pending.
- `ingest_resp(buffer, last=True)` delivers one response. It raises `packrpc.errors.ClientError` in two cases:
  - the buffer is malformed;
  - the call id is unknown, which includes a call that has already been cancelled.
- `packrpc.client.serialize_call(call_id, func_id, *args)` packs a call buffer directly.

Call ids start from the current Unix time and increase by one for each call, wrapping at 32 bits.

### Errors

`ClientError` and `ServerError` both derive from `packrpc.errors.RpcError`, which is a `RuntimeError`.

## Transports

### In-process

`packrpc.null_transport.NullClient` passes each call straight to a `Server` in the same process:

```python
from packrpc.null_transport import NullClient

client = NullClient(server)
print(client.call("add", 3, 4))   # 7
client.call("log", "hello", void=True)   # returns None
```

Errors raised while the server handles the call propagate to the caller.

### TCP

Each message on the wire is a 4-byte big-endian length followed by the MessagePack payload. The helpers for this are in `packrpc.tcp`:

- `client_socket(host, port)` connects to an IPv4 address.
- `server_socket(port)` listens on all IPv4 interfaces.
- `send_buffer(sock, data)` sends one framed message.
- `recv_buffer(sock)` receives one framed message. It returns `b""` if the connection closed first.

Socket setup failures raise `RpcError`.

`packrpc.tcp_server.TcpServer(port)` is a `Server` that listens on a TCP port:

- `run()` accepts connections until `close()` is called. Each connection is served on its own thread.
- The `port` attribute holds the port actually bound, which is useful when you pass `0`.
- If a call fails on the server, for example because the function is unknown or the function raises, the server closes that connection.

`packrpc.tcp_client` provides two clients:

- `TcpClient(host, port)` calls one server. If the server closes the connection without answering, `call` raises `ClientError("client: no response")`.
- `TcpMultiClient(host, ports)` sends every call to all of the listed servers. It returns their results as a list, in the order the ports were given. At least one port is required.

The clients and the server have `close()` methods and work as context managers.

## Command line

The `packrpc` command runs a demo server or client on `127.0.0.1`:

```
packrpc --server [port]
packrpc --client [port]
packrpc --client port port [port ...]
```

- The server provides `add` and `print`.
- With one port or none, the client calls `add(3, 4)`, prints the result, and then calls `print` without waiting for a response.
- With two or more ports, the client calls `add(4, 5)` on every server and prints each result.
- The default port is 5555.
- An invalid port number is reported on stderr.
- Running the command without `--server` or `--client` prints usage and exits with status 1.

## Limitations

- Errors raised on the server are not sent back to the client. Over TCP the client only sees the connection close.
- The TCP clients have no timeouts. A call waits until the server answers or the connection closes.
- Only IPv4 addresses are supported.