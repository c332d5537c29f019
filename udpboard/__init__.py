"""A small UDP message board: in-memory store, server and interactive client."""

__version__ = "0.1.0"
__all__ = ["protocol", "store", "server", "client"]