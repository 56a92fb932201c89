[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "relayproxy"
version = "1.0.0"
description = "Building blocks for an HTTP proxy: incremental request and header parsers, chunked coding, media-range matching, an event selector, a state machine and body transformation through a shell command."
requires-python = ">=3.10"
keywords = ["http", "proxy", "parser", "chunked", "selector", "state-machine"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Proxy Servers",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["relayproxy"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
