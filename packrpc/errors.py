"""Exception hierarchy shared by the RPC client and server."""


class RpcError(RuntimeError):
    """Base class for every error raised by the RPC layer."""


class ClientError(RpcError):
    """Raised by the client side, e.g. on a malformed or unexpected response."""


class ServerError(RpcError):
    """Raised by the server side, e.g. on a call to an unregistered function."""