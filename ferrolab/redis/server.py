"""A small Redis-compatible TCP server."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging

from ferrolab.resp.decoder import decode
from ferrolab.resp.frames import NotComplete, RespFrame, encode

from .backend import Backend
from .commands import parse_command

log = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 6379
_READ_SIZE = 4096


def handle_request(frame: RespFrame, backend: Backend) -> RespFrame:
    """Run the command carried by ``frame`` and return the reply frame."""
    command = parse_command(frame)
    log.info("Executing command: %r", command)
    return command.execute(backend)


def _next_frame(buffer: bytearray) -> RespFrame | None:
    try:
        return decode(buffer)
    except NotComplete:
        return None


async def handle_connection(
    reader: asyncio.StreamReader, writer, backend: Backend
) -> None:
    """Serve requests from one client until it closes the connection."""
    buffer = bytearray()
    try:
        while True:
            frame = _next_frame(buffer)
            if frame is None:
                chunk = await reader.read(_READ_SIZE)
                if not chunk:
                    return
                buffer.extend(chunk)
                continue
            log.info("Received frame: %r", frame)
            response = handle_request(frame, backend)
            log.info("Sending response: %r", response)
            writer.write(encode(response))
            await writer.drain()
    finally:
        writer.close()
        with contextlib.suppress(Exception):
            await writer.wait_closed()


async def serve(
    host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, backend: Backend | None = None
) -> None:
    """Listen on ``host:port`` and serve clients until cancelled."""
    shared = backend if backend is not None else Backend()

    async def on_connection(reader, writer) -> None:
        peer = writer.get_extra_info("peername")
        log.info("Accept connection from: %s", peer)
        try:
            await handle_connection(reader, writer, shared)
        except Exception as exc:
            log.warning("handle error for %s : %r", peer, exc)
        else:
            log.info("Connection from %s exited", peer)

    server = await asyncio.start_server(on_connection, host, port)
    log.info("Simple-Redis-Server is listening on %s:%s", host, port)
    async with server:
        await server.serve_forever()


def main(argv=None) -> int:
    """Run the server from the command line."""
    parser = argparse.ArgumentParser(description="Simple Redis-compatible server")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    try:
        asyncio.run(serve(args.host, args.port))
    except KeyboardInterrupt:
        pass
    return 0