# paqnet

A small TCP client and server that talk a simple binary protocol.

Every frame starts with two little-endian signed 32-bit integers, the
operation code and the payload size, followed by the payload:

- `MESSAGE` (0): the payload is one NUL-terminated UTF-8 string.
- `PACKAGE` (1): the payload is a run of values, each written as a
  little-endian 32-bit length followed by that many bytes. Text values are
  sent NUL-terminated.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
paqnet-server [--host HOST] [--port PORT] [--log FILE]
```

By default the server listens on all addresses at port 4444 and writes its
log to `log.log` as well as to the console. It accepts one client and logs
each message it receives and each value of each package. Frames with an
unknown operation code are logged as a warning and the server keeps
reading. When the client disconnects, the server logs an error and exits
with status 1.

## Running the client

The client reads its settings from a file of `KEY=VALUE` lines (blank lines
and lines starting with `#` are ignored). By default that file is
`cliente.config` in the current directory:

```
IP=127.0.0.1
PUERTO=4444
CLAVE=hello
```

Then start it:

```
paqnet-client [--config FILE] [--log FILE]
```

The client:

1. Prompts `[Console] ~> ` and logs every line you type, until you enter an
   empty line or end of input.
2. Connects to `IP`:`PUERTO` over IPv4 and sends the value of `CLAVE` as a
   message.
3. Prompts `[Package] ~>` and collects lines until you enter an empty line
   or end of input, then sends them all to the server as one package.

It logs to the console and, by default, to `top0_logger.log`. If the
configuration file cannot be read, or lacks `IP`, `PUERTO` or `CLAVE`, it
logs an error and exits with status 1.

## Using the protocol from Python

```python
from paqnet.protocol import OpCode, Packet, decode_values, encode_message, serialize

packet = Packet()
packet.add("first")
packet.add("second")
frame = packet.serialize()            # bytes ready to send

message_frame = encode_message("hello")
raw_frame = serialize(OpCode.MESSAGE, b"hi\0")

values = decode_values(packet.payload)  # ["first", "second"]
```

`decode_values` raises `ValueError` when a payload is truncated or a value
size overruns it. `decode_message` returns the text of a message payload
up to its first NUL.

On the receiving side, `paqnet.server` offers `start_server`,
`wait_client`, `receive_operation`, `receive_buffer`, `receive_message`,
`receive_packet` and `serve`; a closed connection is reported by raising
`ClientDisconnected`. `paqnet.config` offers `parse_config` and
`load_config`, which raise `ConfigError` on bad input.

## Limits

The server handles a single client and then stops; it does not accept
further connections or keep any received data.