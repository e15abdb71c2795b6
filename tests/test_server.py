import logging
import socket
import struct
import threading
import time

import pytest

from paqnet.protocol import OpCode, Packet, encode_message
from paqnet.server import (
    ClientDisconnected,
    main,
    receive_buffer,
    receive_message,
    receive_operation,
    receive_packet,
    serve,
    start_server,
    wait_client,
)


@pytest.fixture
def pair():
    left, right = socket.socketpair()
    yield left, right
    left.close()
    right.close()


def test_receive_operation_and_message(pair):
    left, right = pair
    left.sendall(encode_message("hola"))
    assert receive_operation(right) == OpCode.MESSAGE
    assert receive_message(right) == "hola"


def test_receive_operation_disconnected(pair):
    left, right = pair
    left.close()
    with pytest.raises(ClientDisconnected):
        receive_operation(right)
    assert right.fileno() == -1


def test_receive_buffer_returns_payload(pair):
    left, right = pair
    left.sendall(struct.pack("<i", 3) + b"abc")
    assert receive_buffer(right) == b"abc"


def test_receive_buffer_truncated(pair):
    left, right = pair
    left.sendall(struct.pack("<i", 10) + b"abc")
    left.close()
    with pytest.raises(ClientDisconnected):
        receive_buffer(right)


def test_receive_packet_values(pair):
    left, right = pair
    packet = Packet()
    for value in ["uno", "dos"]:
        packet.add(value)
    left.sendall(packet.serialize())
    assert receive_operation(right) == OpCode.PACKAGE
    assert receive_packet(right) == ["uno", "dos"]


def test_serve_handles_all_frames(pair, caplog):
    left, right = pair
    packet = Packet()
    packet.add("alfa")
    packet.add("beta")
    left.sendall(encode_message("hola") + packet.serialize() + struct.pack("<i", 7))
    left.close()
    with caplog.at_level(logging.DEBUG, logger="Servidor"):
        serve(right)
    messages = caplog.messages
    assert "Me llego el mensaje hola" in messages
    assert messages.index("alfa") < messages.index("beta")
    assert "Operacion desconocida. No quieras meter la pata" in messages
    assert messages[-1] == "el cliente se desconecto. Terminando servidor"


def test_start_server_and_wait_client():
    with start_server("127.0.0.1", 0) as server_sock:
        port = server_sock.getsockname()[1]
        with socket.create_connection(("127.0.0.1", port)) as client:
            accepted = wait_client(server_sock)
            with accepted:
                client.sendall(encode_message("hola"))
                assert receive_operation(accepted) == OpCode.MESSAGE
                assert receive_message(accepted) == "hola"


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_main_serves_one_client(tmp_path):
    port = _free_port()
    log = tmp_path / "server.log"
    result = []
    thread = threading.Thread(
        target=lambda: result.append(
            main(["--host", "127.0.0.1", "--port", str(port), "--log", str(log)])
        )
    )
    thread.start()

    deadline = time.monotonic() + 5
    while True:
        try:
            client = socket.create_connection(("127.0.0.1", port))
            break
        except ConnectionRefusedError:
            if time.monotonic() > deadline:
                raise
            time.sleep(0.05)
    with client:
        client.sendall(encode_message("hola"))
    thread.join(5)

    assert result == [1]
    text = log.read_text(encoding="utf-8")
    assert "Me llego el mensaje hola" in text
    assert "el cliente se desconecto. Terminando servidor" in text