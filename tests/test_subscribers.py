"""Tests for wildcard subscriber matching."""

from __future__ import annotations

from chainwire.core.handle import ServiceHandle
from chainwire.core.subscribers import SubscriberMatcher, candidate_queries


def _resolver(calls: list[str]):
    def resolve(name: str) -> ServiceHandle:
        calls.append(name)
        return ServiceHandle(object(), type_name=name.title(), service_name=name)

    return resolve


def test_candidate_queries_go_from_broad_to_exact() -> None:
    assert candidate_queries("a.b.c") == ["*", "a.*", "a.b.*", "a.b.c"]
    assert candidate_queries("single") == ["*", "single"]


def test_full_name_wildcard_does_not_match_itself() -> None:
    matcher = SubscriberMatcher(_resolver([]), {"a.b.*": ["deep"], "a.*": ["shallow"]})

    assert matcher.names_for("a.b") == ("shallow",)
    assert matcher.names_for("a.b.c") == ("shallow", "deep")


def test_names_are_deduplicated_in_first_seen_order() -> None:
    matcher = SubscriberMatcher(
        _resolver([]),
        {"a.b": ["log", "auth"], "*": ["log"], "a.*": ["metrics", "log"]},
    )

    assert matcher.names_for("a.b") == ("log", "metrics", "auth")


def test_resolution_is_memoized_per_service_name() -> None:
    calls: list[str] = []
    matcher = SubscriberMatcher(_resolver(calls), {"*": ["log"]})

    first = matcher.subscribers_for("a.b")
    second = matcher.subscribers_for("a.b")
    matcher.subscribers_for("a.c")

    assert first is second
    assert calls == ["log", "log"]


def test_adding_subscribers_appends_and_resets_cache() -> None:
    calls: list[str] = []
    matcher = SubscriberMatcher(_resolver(calls), {"a.*": ["first"]})
    matcher.subscribers_for("a.b")

    matcher.add({"a.*": ["second"], "a.b": "third"})

    assert matcher.queries == {"a.*": ["first", "second"], "a.b": ["third"]}
    assert [h.service_name for h in matcher.subscribers_for("a.b")] == [
        "first",
        "second",
        "third",
    ]
