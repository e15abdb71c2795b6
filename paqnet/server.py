"""Server that receives messages and packages from one client."""

from __future__ import annotations

import argparse
import logging
import socket
import struct
import sys
from pathlib import Path

from paqnet.protocol import INT_SIZE, OpCode, decode_message, decode_values

PORT = 4444
LOG_FILE = "log.log"
LOGGER_NAME = "Servidor"

_INT = struct.Struct("<i")
_FORMAT = "[%(levelname)s] %(asctime)s %(name)s - %(message)s"
_LOG = logging.getLogger(LOGGER_NAME)


class ClientDisconnected(Exception):
    """Raised when the client closes the connection."""


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    chunks = []
    remaining = size
    while remaining:
        chunk = sock.recv(remaining)
        if not chunk:
            raise ClientDisconnected("connection closed by peer")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _recv_int(sock: socket.socket) -> int:
    return _INT.unpack(_recv_exact(sock, INT_SIZE))[0]


def start_server(host: str = "", port: int = PORT) -> socket.socket:
    """Return an IPv4 TCP socket listening on ``host``:``port``."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(socket.SOMAXCONN)
    except OSError:
        sock.close()
        raise
    _LOG.debug("Listo para escuchar a mi cliente")
    return sock


def wait_client(server_sock: socket.socket) -> socket.socket:
    """Accept one client connection."""
    client, _ = server_sock.accept()
    _LOG.info("Se conecto un cliente!")
    return client


def receive_operation(sock: socket.socket) -> int:
    """Read the next op code; close the socket if the client has gone."""
    try:
        return _recv_int(sock)
    except ClientDisconnected:
        sock.close()
        raise


def receive_buffer(sock: socket.socket) -> bytes:
    """Read a size-prefixed payload."""
    size = _recv_int(sock)
    if size < 0:
        raise ValueError(f"negative payload size {size}")
    return _recv_exact(sock, size)


def receive_message(sock: socket.socket) -> str:
    """Read and log a MESSAGE payload."""
    text = decode_message(receive_buffer(sock))
    _LOG.info("Me llego el mensaje %s", text)
    return text


def receive_packet(sock: socket.socket) -> list[str]:
    """Read a PACKAGE payload and return its values."""
    return decode_values(receive_buffer(sock))


def serve(client_sock: socket.socket, logger: logging.Logger | None = None) -> None:
    """Handle frames from the client until it disconnects."""
    log = logger or _LOG
    while True:
        try:
            op_code = receive_operation(client_sock)
            if op_code == OpCode.MESSAGE:
                receive_message(client_sock)
            elif op_code == OpCode.PACKAGE:
                values = receive_packet(client_sock)
                log.info("Me llegaron los siguientes valores:")
                for value in values:
                    log.info("%s", value)
            else:
                log.warning("Operacion desconocida. No quieras meter la pata")
        except ClientDisconnected:
            log.error("el cliente se desconecto. Terminando servidor")
            client_sock.close()
            return


def _configure_logger(path: str | Path) -> list[logging.Handler]:
    _LOG.setLevel(logging.DEBUG)
    formatter = logging.Formatter(_FORMAT)
    handlers: list[logging.Handler] = [
        logging.FileHandler(path, encoding="utf-8"),
        logging.StreamHandler(sys.stdout),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        _LOG.addHandler(handler)
    return handlers


def main(argv: list[str] | None = None) -> int:
    """Serve one client; return 1 once it disconnects."""
    parser = argparse.ArgumentParser(description="Receive messages and packages from a client.")
    parser.add_argument("--host", default="", help="address to bind")
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    parser.add_argument("--log", default=LOG_FILE, help="log file")
    args = parser.parse_args(argv)

    handlers = _configure_logger(args.log)
    try:
        with start_server(args.host, args.port) as server_sock:
            _LOG.info("Servidor listo para recibir al cliente")
            client = wait_client(server_sock)
            serve(client, _LOG)
        return 1
    finally:
        for handler in handlers:
            handler.close()
            _LOG.removeHandler(handler)


if __name__ == "__main__":
    sys.exit(main())