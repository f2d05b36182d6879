"""Transport-agnostic MessagePack RPC with in-process and TCP transports."""

__version__ = "0.1.0"