"""Client that reads the console and sends a message and a package."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

from paqnet.config import ConfigError, load_config
from paqnet.protocol import Packet, encode_message

LOGGER_NAME = "LOGGER_TP0"
LOG_FILE = "top0_logger.log"
CONFIG_FILE = "cliente.config"
CONSOLE_PROMPT = "[Console] ~> "
PACKAGE_PROMPT = "[Package] ~>"

_FORMAT = "[%(levelname)s] %(asctime)s %(name)s - %(message)s"


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def setup_logger(path: str | Path = LOG_FILE) -> logging.Logger:
    """Return the client logger, writing to ``path`` and to the console."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    _close_handlers(logger)
    formatter = logging.Formatter(_FORMAT)
    for handler in (logging.FileHandler(path, encoding="utf-8"), logging.StreamHandler(sys.stdout)):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def read_lines(prompt: str, input_func: Callable[[str], str] | None = None) -> Iterator[str]:
    """Yield lines typed by the user until an empty line or end of input."""
    ask = input_func or input
    while True:
        try:
            line = ask(prompt)
        except EOFError:
            return
        if not line:
            return
        yield line


def create_connection(ip: str, port: str | int) -> socket.socket:
    """Open a TCP connection to ``ip``:``port`` over IPv4."""
    family, kind, proto, _, address = socket.getaddrinfo(
        ip, port, socket.AF_INET, socket.SOCK_STREAM
    )[0]
    sock = socket.socket(family, kind, proto)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    return sock


def send_message(message: str, sock: socket.socket) -> None:
    """Send ``message`` as a MESSAGE frame."""
    sock.sendall(encode_message(message))


def send_packet(packet: Packet, sock: socket.socket) -> None:
    """Send ``packet`` as one frame."""
    sock.sendall(packet.serialize())


def read_console(
    logger: logging.Logger, input_func: Callable[[str], str] | None = None
) -> list[str]:
    """Log every line typed until an empty one; return the lines."""
    lines = []
    for line in read_lines(CONSOLE_PROMPT, input_func):
        logger.info("leido ~> %s", line)
        lines.append(line)
    return lines


def build_packet(input_func: Callable[[str], str] | None = None) -> Packet:
    """Build a package from lines typed until an empty one."""
    packet = Packet()
    for line in read_lines(PACKAGE_PROMPT, input_func):
        packet.add(line)
    return packet


def main(argv: list[str] | None = None) -> int:
    """Run the client; return the process exit status."""
    parser = argparse.ArgumentParser(description="Send a message and a package to the server.")
    parser.add_argument("--config", default=CONFIG_FILE, help="configuration file")
    parser.add_argument("--log", default=LOG_FILE, help="log file")
    args = parser.parse_args(argv)

    logger = setup_logger(args.log)
    try:
        logger.info("Logger instanciado exitosamente.")
        try:
            config = load_config(args.config)
        except ConfigError:
            logger.error("No se pudo instanciar la configuracion del cliente")
            return 1
        logger.info("Configuracion del cliente instanciada exitosamente.")

        try:
            ip, port, value = config["IP"], config["PUERTO"], config["CLAVE"]
        except KeyError as exc:
            logger.error("Falta la clave %s en la configuracion", exc.args[0])
            return 1

        read_console(logger)

        with create_connection(ip, port) as sock:
            send_message(value, sock)
            send_packet(build_packet(), sock)
        return 0
    finally:
        _close_handlers(logger)


if __name__ == "__main__":
    sys.exit(main())