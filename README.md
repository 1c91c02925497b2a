# shiftxfer

A small file transfer service over TCP. A server offers one file. A client
asks the server which port to download from, fetches the file from that port,
and restores the original bytes. The file travels lightly obscured by a
byte-shift cipher. Every byte is moved up by one on the way out and down by
one on the way back, wrapping around at 256. This is obfuscation, not
security.

## How it works

The server listens on two ports at once:

- the control port, 27015 by default;
- the data port, 27016 by default.

When the host is an IPv6 address, the default `::`, the server also accepts
IPv4 clients wherever the platform allows it.

Each connection starts with a single request byte. The server treats both
ports the same way:

- `1` asks for the data port. The reply is a 4-byte little-endian signed
  integer.
- `2` starts the download. The server enciphers the source file into a
  temporary work file. It sends that file line by line, with each piece padded
  with NUL bytes to 1024 bytes. It then deletes the work file and closes the
  connection.
- Any other byte closes the connection without a reply.

Each connection is handled on its own thread. Downloads are served one at a
time.

The client cuts each 1024-byte record at its first NUL byte. This means
files that themselves contain NUL bytes are not carried faithfully.

## Installation

```
pip install .
```

No third-party libraries are needed.

## Command line

Start the server in the directory that holds the file to share. By default
that file is `send1.txt`.

```
shiftxfer-server
```

The server accepts these options:

- `--source`: the file to serve.
- `--host`: the address to listen on. The default is `::`.
- `--port`: the control port.
- `--data-port`: the data port.
- `--work-path`: the temporary enciphered file. The default is `encripted.txt`.

The server runs until it is interrupted with Ctrl-C.

Then, from another terminal, fetch the file:

```
shiftxfer-client
```

The client works in four steps:

1. It connects to `127.0.0.1`, or to `::1` when given `-6`/`--ipv6`.
2. It asks the control port for the data port.
3. It downloads the enciphered file to `--encrypted`. The default is
   `recvEncripted.txt`.
4. It deciphers that file into `--output`, by default `recv.txt`, and
   removes the temporary copy.

`--host` sets any other server address, and `--port` sets the control port.
The client exits with status 1 if a network error occurs.

## Library use

The cipher works on bytes and on files:

```python
from shiftxfer.cipher import encipher, decipher, encipher_file, decipher_file

scrambled = encipher(b"hello")
assert decipher(scrambled) == b"hello"

encipher_file("notes.txt", "notes.enc")   # returns the number of bytes written
decipher_file("notes.enc", "notes.out")
```

A server can be run from code. Used as a context manager, it binds on entry
and shuts down cleanly on exit. If a port is given as 0, it is replaced by the
port that was actually bound:

```python
from shiftxfer.server import FileServer

with FileServer(
    source="send1.txt",
    host="::",
    control_port=27015,
    data_port=27016,
    work_path="encripted.txt",
) as server:
    server.serve_forever()
```

`FileServer.start()` and `FileServer.close()` are available for manual
control. The module also offers these lower-level helpers:

- `accept_any(sockets)` accepts a connection from whichever listening socket
  is ready first.
- `send_port(conn, port)` sends a port to a connection.
- `send_file(conn, path)` sends a file as padded records.

A client can fetch the file in one call:

```python
from shiftxfer.client import fetch

fetch("::1", 27015, "recvEncripted.txt", "recv.txt")
```

The steps are also available one at a time:

- `request_port(host, port)` returns the data port announced by the server.
- `download(host, port, encrypted_path, output_path)` fetches and deciphers
  from a known data port.
- `receive_to_file(sock, path)` reads padded records from a connected socket
  into a file.

## What it does not do

- A server offers exactly one file. A client cannot choose among files or
  list them.
- There is no authentication.
- Transfers cannot be resumed.
- There is no integrity check beyond what TCP provides.

## Running the tests

```
pip install .[test]
pytest
```