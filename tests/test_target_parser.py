import pytest

from relayproxy.target_parser import DEFAULT_PORT, TargetParser, TargetState


def parsed(data):
    parser = TargetParser()
    consumed = parser.parse(data)
    return parser, consumed


def test_absolute_form():
    data = "http://example.com/index.html HTTP/1.1"
    parser, consumed = parsed(data)
    assert parser.done is True
    assert parser.host == "example.com"
    assert parser.port == DEFAULT_PORT
    assert parser.target == "http://example.com/index.html"
    assert consumed == data.index(" ") + 1


def test_default_port_is_http():
    parser = TargetParser()
    assert parser.port == 80
    parser.parse("http://example.com/ HTTP/1.1")
    assert parser.port == 80


def test_absolute_form_with_port():
    parser, _ = parsed("http://example.com:8080/ HTTP/1.1")
    assert parser.host == "example.com"
    assert parser.port == 8080


def test_absolute_form_port_without_path():
    parser, _ = parsed("http://example.com:8080 HTTP/1.1")
    assert parser.host == "example.com"
    assert parser.port == 8080


def test_origin_form_has_no_host():
    parser, _ = parsed("/index.html HTTP/1.1")
    assert parser.done is True
    assert parser.host == ""
    assert parser.port == DEFAULT_PORT
    assert parser.target == "/index.html"


def test_authority_form():
    parser, _ = parsed("example.com:443 HTTP/1.1")
    assert parser.host == "example.com"
    assert parser.port == 443
    assert parser.target == "example.com:443"


def test_userinfo_is_dropped():
    parser, _ = parsed("http://user@example.com:81/ HTTP/1.1")
    assert parser.host == "example.com"
    assert parser.port == 81


def test_port_followed_by_garbage_falls_back_to_default():
    parser, _ = parsed("http://example.com:8080x/ HTTP/1.1")
    assert parser.host == "example.com"
    assert parser.port == DEFAULT_PORT


def test_line_feed_before_space_is_error():
    parser = TargetParser()
    for char in "/index.html":
        assert parser.feed(char) is True
    assert parser.feed("\n") is False
    assert parser.error is True
    assert parser.state is TargetState.ERROR


@pytest.mark.parametrize("terminal", ["/a ", "/a\n"])
def test_feed_after_stop_changes_nothing(terminal):
    parser, _ = parsed(terminal)
    target = parser.target
    assert parser.feed("z") is False
    assert parser.target == target
    assert parser.characters_read == len(terminal) + 1


def test_target_grows_while_parsing():
    parser = TargetParser()
    parser.parse("http://exa")
    assert parser.target == "http://exa"
    assert parser.host == "exa"
    assert parser.state is TargetState.DOUBLE_SLASH