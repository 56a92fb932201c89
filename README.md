# relayproxy

Components for building an HTTP/1.x proxy that can pipe response bodies
through an external command. Everything is pure Python with no third-party
dependencies.

## Modules

- `relayproxy.method_parser`: `MethodParser` reads a request line one
  character at a time and recognises `GET`, `HEAD`, `POST`, `PUT` and
  `DELETE` (as `Method` members) when followed by a space. Empty lines before
  the method are skipped.
- `relayproxy.target_parser`: `TargetParser` reads the request target up to
  the space that ends it and keeps the whole `target`, the `host` and the
  `port` (80 by default). It handles absolute form, authority form and origin
  form.
- `relayproxy.version_parser`: `VersionParser` reads `HTTP/<major>.<minor>`
  and its line end; `version` is a `(major, minor)` tuple.
- `relayproxy.host_header_parser`: `HostHeaderParser` skips header lines until
  it finds `Host`, then splits its value into `host` and `port`. It accepts
  host names, IPv4 addresses and bracketed IPv6 literals.
- `relayproxy.headers_parser`: `HeadersParser` filters a header block as it is
  relayed. It lower-cases header names and drops `keep-alive`, `connection`
  and `upgrade`. With `transformation_on=True` it also drops `trailer`, and in
  responses `transfer-encoding` and `content-length`. It matches
  `Content-Type` against a `MediaRange` and notes chunked transfer coding and
  identity content coding. At the end of the block it appends
  `connection: close`, and for a transformed response also
  `transfer-encoding: chunked`.
- `relayproxy.unchunk_parser`: `UnchunkParser` decodes a chunked body into a
  bounded output buffer. Use `feed()` and `take()`.
- `relayproxy.transform`: `encode_chunk()` and `last_chunk()` frame bytes in
  chunked coding. `TransformProcess` runs a command under `/bin/sh -c` with
  `HTTPD_VERSION=1.0.0` in its environment, over non-blocking pipes.
- `relayproxy.media_range`: `MediaRange` holds a comma-separated list of media
  types. It matches a `Content-Type` one character at a time; `*` in an entry
  matches anything from that point on.
- `relayproxy.metrics`: `Metrics` counts concurrent connections, historic
  accesses and transferred bytes. `TimeTags` records when each `ResourceId`
  last changed.
- `relayproxy.selector`: `Selector` dispatches read and write readiness to
  `Handler` callbacks. It also runs `handle_block` callbacks for work finished
  on other threads and reported through `notify_block()`.
- `relayproxy.stm`: `StateMachine` runs the `StateDefinition` callbacks of its
  current state and moves to whichever state they return.

## Installing

```
pip install .
```

## Examples

```python
from relayproxy.method_parser import Method, MethodParser
from relayproxy.transform import encode_chunk, last_chunk
from relayproxy.unchunk_parser import UnchunkParser

parser = MethodParser()
parser.parse("GET /index.html HTTP/1.1")
assert parser.method is Method.GET

body = encode_chunk(b"hello") + last_chunk()
assert body == b"5\r\nhello\r\n0\r\n\r\n"

decoder = UnchunkParser()
decoder.feed(body)
assert decoder.take() == b"hello"
```

Filtering a request's headers:

```python
from relayproxy.headers_parser import HeadersParser

headers = HeadersParser(is_request=True)
headers.feed("GET / HTTP/1.1\r\nHost: a\r\nConnection: keep-alive\r\n\r\n")
assert headers.done
assert headers.take_output() == (
    "GET / HTTP/1.1\r\nhost: a\r\nconnection: close\r\n\r\n"
)
```

## What it does not do

The package is a set of components, not a running proxy. There is no command
to start, no code that listens on ports or accepts connections, no
configuration or command-line options, and no management protocol. The
metrics and time tags are kept in memory for a caller to read. To get a
working proxy, you combine `Selector`, `StateMachine`, the parsers and
`TransformProcess` in your own code.

## Running the tests

```
pip install .[test]
pytest
```