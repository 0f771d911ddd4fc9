"""A RESP codec, a small Redis-compatible server, thread-safe counters and a CLI toolbox."""

__version__ = "0.1.0"