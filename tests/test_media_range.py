from relayproxy.media_range import MatchResult, MediaRange
from relayproxy.metrics import ResourceId, TimeTags


class FakeClock:
    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


def feed(media_range, mime):
    return [media_range.match_at(i, c) for i, c in enumerate(mime)]


def test_splits_on_commas():
    mr = MediaRange("text/html,image/*")
    assert mr.types == ("text/html", "image/*")
    assert len(mr) == 2


def test_whitespace_after_comma_dropped_but_not_before():
    mr = MediaRange("a/b ,\t c/d")
    assert list(mr) == ["a/b ", "c/d"]


def test_add_appends():
    mr = MediaRange("text/html")
    mr.add("text/plain, application/json")
    assert mr.types == ("text/html", "text/plain", "application/json")


def test_string_form_round_trips():
    text = "text/html, image/*"
    assert str(MediaRange(text)) == text


def test_string_form_skips_leading_semicolon():
    assert str(MediaRange(";, text/html")) == "text/html"


def test_exact_match_all_yes():
    mr = MediaRange("text/html")
    assert all(result is MatchResult.YES for result in feed(mr, "text/html"))


def test_mismatch_turns_to_no():
    mr = MediaRange("text/html")
    results = feed(mr, "text/plain")
    assert all(r is MatchResult.YES for r in results[:5])
    assert all(r is MatchResult.NO for r in results[5:])


def test_wildcard_matches_all():
    mr = MediaRange("image/*")
    results = feed(mr, "image/png")
    assert results[len("image/")] is MatchResult.ALL


def test_one_candidate_is_enough():
    mr = MediaRange("text/html, text/plain")
    results = feed(mr, "text/plain")
    assert results[-1] is MatchResult.YES


def test_reset_restores_candidates():
    mr = MediaRange("text/html")
    feed(mr, "image/png")
    assert mr.match_at(0, "t") is MatchResult.NO
    mr.reset()
    assert mr.match_at(0, "t") is MatchResult.YES


def test_copy_is_independent_and_fresh():
    original = MediaRange("text/html")
    feed(original, "xxxx")
    duplicate = original.copy()
    assert duplicate.types == original.types
    assert duplicate.match_at(0, "t") is MatchResult.YES
    duplicate.add("image/png")
    assert original.types == ("text/html",)


def test_add_updates_mime_time_tag():
    clock = FakeClock(1)
    tags = TimeTags(clock)
    mr = MediaRange("text/html", time_tags=tags)
    clock.now = 42
    mr.add("image/png")
    assert tags.get(ResourceId.MIME) == 42
    assert tags.get(ResourceId.COMMAND) == 1