import pytest

from relayproxy.host_header_parser import HostHeaderParser, HostState


def parsed(data):
    parser = HostHeaderParser()
    consumed = parser.parse(data)
    return parser, consumed


def test_host_name_without_port():
    data = "Host: example.com\r\n"
    parser, consumed = parsed(data)
    assert parser.found is True
    assert parser.host == "example.com"
    assert parser.port is None
    assert consumed == len(data)


def test_host_name_with_port_and_lower_case_name():
    parser, _ = parsed("host:example.com:8080\r\n")
    assert parser.found is True
    assert parser.host == "example.com"
    assert parser.port == 8080


def test_ipv6_with_port():
    parser, _ = parsed("Host: [::1]:8080\r\n")
    assert parser.found is True
    assert parser.host == "::1"
    assert parser.port == 8080


def test_ipv6_without_port():
    parser, _ = parsed("HOST: [::1]\r\n")
    assert parser.found is True
    assert parser.host == "::1"
    assert parser.port is None


def test_host_after_other_headers():
    data = "Accept: */*\r\nHostname: other\r\nHost: example.com\r\nX-A: b\r\n"
    parser, consumed = parsed(data)
    assert parser.found is True
    assert parser.host == "example.com"
    assert consumed == data.index("X-A")


def test_trailing_whitespace_is_allowed():
    parser, _ = parsed("Host: example.com \t \r\n")
    assert parser.found is True
    assert parser.host == "example.com"


def test_bare_line_feed_ends_header():
    parser, _ = parsed("Host: example.com\n")
    assert parser.found is True
    assert parser.host == "example.com"


@pytest.mark.parametrize(
    "data",
    [
        "Host: example.com:80a\r\n",
        "Host: example.com:\r\n",
        "Host: example.com x\r\n",
        "Host: [::1]x\r\n",
        "Host: example.com\rX",
    ],
)
def test_malformed_values_are_errors(data):
    parser, _ = parsed(data)
    assert parser.error is True
    assert parser.found is False


def test_no_host_header():
    parser, consumed = parsed("Accept: */*\r\n\r\n")
    assert parser.found is False
    assert parser.host is None
    assert parser.state is HostState.START
    assert consumed == len("Accept: */*\r\n\r\n")


def test_feed_after_completion_is_refused():
    parser, _ = parsed("Host: example.com\r\n")
    assert parser.feed("X") is False
    assert parser.found is True
    assert parser.host == "example.com"


def test_carriage_return_keeps_parser_waiting():
    parser = HostHeaderParser()
    parser.parse("Host: example.com")
    assert parser.feed("\r") is True
    assert parser.state is HostState.FINISH
    assert parser.found is False
    assert parser.feed("\n") is False
    assert parser.found is True


def test_characters_read_counts_every_feed():
    parser = HostHeaderParser()
    data = "Host: a\r\n"
    parser.parse(data)
    parser.feed("x")
    assert parser.characters_read == len(data) + 1