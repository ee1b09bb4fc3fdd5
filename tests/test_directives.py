"""Tests for directive declarations and parsing."""

from __future__ import annotations

import pytest

from chainwire.core.directives import (
    DirectiveDeclaration,
    DirectiveParser,
    Inject,
    declarations_of,
    init,
    param,
)
from chainwire.core.errors import ConfigurationError
from chainwire.core.models import Directive, DirectiveKind


def _parse(kind: DirectiveKind, reference: str) -> Directive:
    declaration = DirectiveDeclaration(kind=kind, reference=reference)
    return DirectiveParser().parse(declaration, owner="Owner", member="member")


def test_reference_with_literal_arguments() -> None:
    directive = _parse(DirectiveKind.PARAM, '~db.query("users", 10, {"active": true})')

    assert directive.target == "db.query"
    assert directive.args == ("users", 10, {"active": True})
    assert not directive.injects_container


def test_marker_prefix_is_accepted_when_it_matches() -> None:
    directive = _parse(DirectiveKind.SET, "@set ~db.connection")

    assert directive == Directive(kind=DirectiveKind.SET, target="db.connection")


def test_marker_prefix_must_match_kind() -> None:
    with pytest.raises(ConfigurationError, match="Owner.member"):
        _parse(DirectiveKind.PARAM, "@set ~db.connection")


def test_empty_reference_injects_container() -> None:
    assert _parse(DirectiveKind.PARAM, "~").injects_container
    assert _parse(DirectiveKind.PARAM, "~()").injects_container


def test_malformed_literal_names_owner_and_member() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        _parse(DirectiveKind.SET, "~db.connection(not-json)")

    assert "Owner.member" in str(excinfo.value)
    assert "not-json" in str(excinfo.value)


def test_unbalanced_reference_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        _parse(DirectiveKind.PARAM, "~db.connection(1")


def test_python_values_bypass_literal_parsing() -> None:
    declaration = DirectiveDeclaration(
        kind=DirectiveKind.INIT, reference="cache.warm", values=(["a", "b"],)
    )
    directive = DirectiveParser().parse(declaration, owner="Owner", member="init")

    assert directive.target == "cache.warm"
    assert directive.args == (["a", "b"],)


def test_stacked_decorators_keep_declaration_order() -> None:
    class Example:
        @param("~first")
        @param("~second")
        @param("~")
        def __init__(self, first, second, registry) -> None:
            pass

        @init("~warm.up")
        @param("~third")
        def init_things(self, third) -> None:
            pass

    constructor = declarations_of(Example.__init__)
    assert [d.reference for d in constructor] == ["~first", "~second", "~"]
    assert [d.kind for d in declarations_of(Example.init_things)] == [
        DirectiveKind.INIT,
        DirectiveKind.PARAM,
    ]


def test_init_decorator_requires_init_method() -> None:
    with pytest.raises(TypeError):

        class Example:
            @init("~warm.up")
            def setup(self) -> None:
                pass


def test_inline_and_python_arguments_are_exclusive() -> None:
    with pytest.raises(TypeError):
        param("~db.query(1)", 2)


def test_inject_reports_missing_injection() -> None:
    class Example:
        connection = Inject("~db.connection")

    assert isinstance(Example.connection, Inject)
    assert Example.connection.name == "connection"
    with pytest.raises(AttributeError, match="Example.connection"):
        _ = Example().connection
