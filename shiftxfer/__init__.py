"""TCP file transfer server and client with a byte-shift cipher."""

__version__ = "0.1.0"
__all__ = ["cipher", "server", "client"]