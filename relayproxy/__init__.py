"""HTTP proxy components: request and header parsers, chunked coding, media ranges, metrics, selector, state machine and body transformation."""

__version__ = "1.0.0"