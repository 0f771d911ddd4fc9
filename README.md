# ferrolab

A collection of small, self-contained tools:

- **A RESP codec** (`ferrolab.resp`) for the Redis serialization protocol:
  simple strings, errors, integers, booleans, doubles, nulls, bulk strings,
  arrays, maps and sets.
- **A tiny Redis-compatible server** (`ferrolab.redis`) that understands
  `get`, `set`, `hget`, `hset` and `hgetall`, backed by an in-memory store.
- **Concurrency helpers** (`ferrolab.concurrency`): a dot product and two
  thread-safe metric counters.
- **A command-line toolbox** (`ferrolab.rcli`): CSV conversion, password
  generation, Base64, text signing and encryption, and a small file server.

## Installation

```
pip install .
```

Run the tests with:

```
pip install ".[test]"
pytest
```

## The Redis server

```
ferrolab-redis
ferrolab-redis --host 127.0.0.1 --port 6380
```

By default the server listens on `0.0.0.0:6379`. Any RESP client can talk to
it:

```
redis-cli set hello world
redis-cli get hello
redis-cli hset map field value
redis-cli hgetall map
```

Command names are matched in lower case. A command the server does not
recognise (including an upper-case name such as `SET`) is answered with
`+OK`. A missing key or field is answered with a RESP null (`_`), and
`hgetall` on a missing hash with an empty array. A request that is not an
array, or whose arguments are wrong, ends the connection.

## Working with RESP frames

Python values stand in for the simple RESP types: `int` for integers, `bool`
for booleans and `float` for doubles. The other types are classes in
`ferrolab.resp.frames`: `SimpleString`, `SimpleError`, `BulkString`,
`NullBulkString`, `RespNull`, `RespNullArray`, `RespArray`, `RespSet` and
`RespMap` (string keys, kept in key order).

```python
from ferrolab.resp.frames import BulkString, RespArray, encode
from ferrolab.resp.decoder import decode

wire = encode(RespArray([BulkString(b"set"), BulkString(b"hello"), BulkString(b"world")]))
# b"*3\r\n$3\r\nset\r\n$5\r\nhello\r\n$5\r\nworld\r\n"

buf = bytearray(wire)
frame = decode(buf)   # removes the frame's bytes from the front of buf
```

Integers are written with an explicit sign (`:+123\r\n`); doubles use
exponent notation when their magnitude is above `1e8` or below `1e-8`.

When the buffer holds only part of a frame, `decode` raises `NotComplete`
and leaves the buffer untouched, so more bytes can be appended and decoding
retried. Every error raised by the codec derives from `RespError`.

The decoder also offers one function per frame type (`decode_simple_string`,
`decode_integer`, `decode_bulk_string`, `decode_array`, `decode_map`, …) and
`expect_length(buf)`, which reports how many bytes the frame at the front of
a buffer takes.

## Executing commands directly

```python
from ferrolab.redis.backend import Backend
from ferrolab.redis.commands import parse_command

backend = Backend()
command = parse_command(frame)
reply = command.execute(backend)
```

`parse_command` raises `InvalidCommand` or `InvalidArgument` (both
`CommandError`) for malformed requests. `ferrolab.redis.server.handle_request`
does the same in one call.

## Dot products and metrics

```python
from ferrolab.concurrency.vector import dot_product

dot_product([1, 2, 3], [4, 5, 6])   # 32; sequences of different length raise ValueError
```

```python
from ferrolab.concurrency.metrics import AmapMetrics, CmapMetrics

fixed = AmapMetrics(["req.page.1", "req.page.2"])
fixed.inc("req.page.1")       # unknown names raise KeyError

dynamic = CmapMetrics()
dynamic.inc("call.thread.worker.0")
dynamic.dec("call.thread.worker.0")
print(dynamic.snapshot())     # {'call.thread.worker.0': 0}
print(dynamic)                # one "name: count" line per counter
```

## The command-line toolbox

```
ferrolab-rcli --help
```

Sub-commands:

- `csv` – convert a CSV file with a header row to JSON or YAML
  (`--input`, `--output`, `--format json|yaml`, `--delimiter`, a space by
  default). Without `--output` the result goes to `rcli/output.<format>`.
- `genpass` – print a random password (`--length`, 16 by default; each class
  can be turned off with `--no-uppercase`, `--no-lowercase`, `--no-numbers`,
  `--no-symbol`) and a rough 0–4 strength score on standard error.
- `base64 encode` / `base64 decode` – `--format standard|urlsafe`, reading
  `--input` (a file, or `-` for standard input, the default).
- `text sign` / `text verify` – keyed BLAKE3 or Ed25519 signatures
  (`--format blake3|ed25519`); signatures are unpadded URL-safe Base64, and
  `verify` prints `true` or `false`.
- `text generate` – write a new BLAKE3 key (`blake3.txt`) or an Ed25519 key
  pair (`ed25519.sk`, `ed25519.pk`) into the `--output` directory.
- `text encrypt` / `text decrypt` – ChaCha20-Poly1305 with a 32-byte key file
  (`--key`) and a 12-byte nonce file (`--nonce`); ciphertext is standard
  Base64 and is passed to `decrypt` with `--sig`. A ciphertext that fails
  authentication decrypts to nothing.
- `http server` – serve a directory (`--path`, `.` by default) on
  `127.0.0.1` (`--port`, 8331 by default). `/<path>` shows a file as text or a
  directory as a list of links to its files; `/tower/<path>` serves files as
  they are.

Examples:

```
ferrolab-rcli genpass --length 24
ferrolab-rcli base64 encode --input notes.txt --format urlsafe
ferrolab-rcli text generate --format ed25519 --output keys
ferrolab-rcli text sign --input notes.txt --key keys/ed25519.sk --format ed25519
ferrolab-rcli http server --path . --port 8331
```

The same functions are available from Python: `ferrolab.rcli.b64`
(`encode_base64`, `decode_base64`), `ferrolab.rcli.csvconv` (`convert_csv`),
`ferrolab.rcli.genpass` (`generate_password`), `ferrolab.rcli.text`
(`sign_text`, `verify_text`, `generate_key`, `encrypt_text`, `decrypt_text`,
and the `Blake3Signer`, `Ed25519Signer` and `Ed25519Verifier` classes),
`ferrolab.rcli.blake3` (`hash_bytes`, `keyed_hash`) and
`ferrolab.rcli.http_server` (`render_path`, `serve_directory`).

## What it does not do

- The server keeps everything in memory: there is no persistence, no key
  expiry, no deletion and no commands beyond the five listed above.
- `ferrolab.concurrency` has no matrix type; it offers only `dot_product`
  and the two counter classes.
- There is no support for attaching structured error codes to exceptions.