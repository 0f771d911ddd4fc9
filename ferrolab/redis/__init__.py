"""An in-memory Redis-compatible store, its commands and a TCP server."""