"""Tests for waypoint.routing.patterns — placeholder registry and compilation."""

import pytest

from waypoint.errors import ConfigurationError
from waypoint.routing.patterns import BUILTIN_PATTERNS, PatternRegistry, has_placeholder


class TestBuiltins:
    def test_builtin_tokens_present(self) -> None:
        for token in (":all", ":any", ":id", ":int", ":number", ":float", ":bool",
                      ":string", ":slug", ":uuid", ":date"):
            assert token in BUILTIN_PATTERNS

    def test_redefining_builtin_raises(self) -> None:
        patterns = PatternRegistry()
        with pytest.raises(ConfigurationError) as exc_info:
            patterns.define(":id", "[a-z]+")
        assert str(exc_info.value) == ":id pattern cannot be changed."

    def test_redefining_builtin_without_colon_raises(self) -> None:
        patterns = PatternRegistry()
        with pytest.raises(ConfigurationError):
            patterns.define("uuid", ".*")

    def test_builtins_view(self) -> None:
        assert PatternRegistry().builtins is BUILTIN_PATTERNS

    def test_builtin_unchanged_after_rejection(self) -> None:
        patterns = PatternRegistry()
        with pytest.raises(ConfigurationError):
            patterns.define(":int", "x")
        assert patterns.get(":int") == r"\d+"


class TestCustomPatterns:
    def test_define_and_get(self) -> None:
        patterns = PatternRegistry()
        patterns.define(":hex", "[0-9a-f]+")
        assert patterns.get(":hex") == "[0-9a-f]+"
        assert patterns.get("hex") == "[0-9a-f]+"
        assert ":hex" in patterns

    def test_redefine_custom_replaces(self) -> None:
        patterns = PatternRegistry()
        patterns.define(":code", "[A-Z]{2}")
        patterns.define(":code", "[A-Z]{3}")
        regex, _ = patterns.compile("/c/:code")
        assert regex.match("/c/ABC")
        assert not regex.match("/c/AB")

    def test_define_many_is_all_or_nothing(self) -> None:
        patterns = PatternRegistry()
        with pytest.raises(ConfigurationError):
            patterns.define_many({":lang": "[a-z]{2}", ":slug": ".*"})
        assert ":lang" not in patterns
        assert dict(patterns.custom) == {}

    def test_unknown_token_is_absent(self) -> None:
        assert PatternRegistry().get(":nope") is None
        assert ":nope" not in PatternRegistry()


class TestCompile:
    def test_placeholder_detection(self) -> None:
        assert has_placeholder("/users/:id")
        assert not has_placeholder("/users")

    def test_id_matches_digits_only(self) -> None:
        regex, count = PatternRegistry().compile("/users/:id")
        assert count == 1
        assert regex.match("/users/42").group("p0") == "42"
        assert regex.match("/users/abc") is None

    def test_anchored_both_ends(self) -> None:
        regex, _ = PatternRegistry().compile("/users/:id")
        assert regex.match("/users/42/extra") is None
        assert regex.match("/prefix/users/42") is None

    def test_any_stops_at_slash(self) -> None:
        regex, _ = PatternRegistry().compile("/files/:any")
        assert regex.match("/files/report.pdf")
        assert regex.match("/files/a/b") is None

    def test_all_spans_slashes(self) -> None:
        regex, _ = PatternRegistry().compile("/files/:all")
        assert regex.match("/files/a/b/c").group("p0") == "a/b/c"

    def test_literal_dot_is_escaped(self) -> None:
        regex, _ = PatternRegistry().compile("/feed.xml/:id")
        assert regex.match("/feed.xml/1")
        assert regex.match("/feedxxml/1") is None

    def test_date_keeps_capture_positions(self) -> None:
        regex, count = PatternRegistry().compile("/archive/:date/:id")
        assert count == 2
        found = regex.match("/archive/2024-02-29/7")
        assert found.group("p0") == "2024-02-29"
        assert found.group("p1") == "7"

    def test_custom_fragment_with_groups(self) -> None:
        patterns = PatternRegistry()
        patterns.define(":pair", "(a|b)-(c|d)")
        regex, count = patterns.compile("/x/:pair/:id")
        assert count == 2
        found = regex.match("/x/a-d/9")
        assert found.group("p0") == "a-d"
        assert found.group("p1") == "9"

    def test_unknown_token_stays_literal(self) -> None:
        regex, count = PatternRegistry().compile("/x/:unknown")
        assert count == 0
        assert regex.match("/x/:unknown")
        assert regex.match("/x/value") is None

    def test_compile_memo_invalidated_on_define(self) -> None:
        patterns = PatternRegistry()
        regex, count = patterns.compile("/t/:tag")
        assert count == 0
        patterns.define(":tag", "[a-z]+")
        regex, count = patterns.compile("/t/:tag")
        assert count == 1
        assert regex.match("/t/python")

    def test_resolve_returns_body(self) -> None:
        body = PatternRegistry().resolve("/u/:id")
        assert body == r"/u/(?P<p0>\d+)"
