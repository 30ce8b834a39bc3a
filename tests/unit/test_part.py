"""Unit tests for Part member resolution, decoration and partial rendering."""

from types import SimpleNamespace
from typing import Any

import pytest

from vista import Context, Decorator, Part, Scope, UnsupportedMemberAccess


class AuthorPart(Part):
    """Part for article authors."""


class ArticlePart(Part):
    """Part with decorated attributes."""

    def headline(self) -> str:
        return self._value["title"].upper()


ArticlePart.decorate("author", as_=AuthorPart)
ArticlePart.decorate("title")


class TestMemberResolution:
    """Tests for the attribute resolution chain."""

    def test_forwards_attributes_to_value(self) -> None:
        """Test that unknown attributes reach the wrapped value."""
        part = Part(name="user", value=SimpleNamespace(email="jane@doe.org"))

        assert part.email == "jane@doe.org"

    def test_forwards_method_calls_with_arguments(self) -> None:
        """Test that methods are called on the value with all arguments."""
        part = Part(name="tags", value="a,b,c")

        assert part.split(",", 1) == ["a", "b,c"]
        assert part.upper() == "A,B,C"

    def test_value_properties_are_evaluated_once(self) -> None:
        """Test that forwarding reads a value property a single time."""
        reads: list[str] = []

        class Profile:
            @property
            def email(self) -> str:
                reads.append("email")
                return "jane@doe.org"

        part = Part(name="profile", value=Profile())

        assert part.email == "jane@doe.org"
        assert reads == ["email"]

    def test_value_members_win_over_convenience_names(self) -> None:
        """Test that a value attribute named like an accessor is forwarded."""
        part = Part(name="setting", value=SimpleNamespace(value=42))

        assert part.value == 42

    def test_convenience_accessors(self, render_context: Context) -> None:
        """Test context, value and render accessors."""
        raw = {"name": "Jane"}
        part = Part(name="user", value=raw, context=render_context)

        assert part.value is raw
        assert part.context is render_context
        assert part.render == part._render

    def test_own_methods_take_precedence(self) -> None:
        """Test that methods defined on the part class are used directly."""
        part = ArticlePart(name="article", value={"title": "hello"})

        assert part.headline() == "HELLO"

    def test_unsupported_member_raises(self) -> None:
        """Test that unresolvable members raise UnsupportedMemberAccess."""
        part = Part(name="user", value={"name": "Jane"})

        with pytest.raises(UnsupportedMemberAccess) as exc_info:
            part.nickname

        assert exc_info.value.member == "nickname"
        assert exc_info.value.part_name == "user"
        assert "nickname" in str(exc_info.value)
        assert "user" in str(exc_info.value)

    def test_unsupported_member_is_attribute_error(self) -> None:
        """Test that hasattr() and getattr() defaults keep working."""
        part = Part(name="user", value={"name": "Jane"})

        assert not hasattr(part, "nickname")
        assert getattr(part, "nickname", "fallback") == "fallback"

    def test_dunder_lookups_are_not_forwarded(self) -> None:
        """Test that protocol probes do not reach the wrapped value."""
        part = Part(name="title", value="plain")

        assert not hasattr(part, "__html__")


class TestDecoratedAttributes:
    """Tests for lazily decorated attributes."""

    def test_decorates_declared_attribute(self, render_context: Context) -> None:
        """Test that declared attributes are decorated with their options."""
        part = ArticlePart(
            name="article",
            value={"title": "x", "author": {"name": "Jane"}},
            context=render_context,
        )

        author = part.author

        assert isinstance(author, AuthorPart)
        assert author._name == "author"
        assert author._value == {"name": "Jane"}
        assert author._context is render_context

    def test_decorates_object_attributes(self, render_context: Context) -> None:
        """Test that attributes are read from non-mapping values too."""
        part = ArticlePart(
            name="article",
            value=SimpleNamespace(title="x", author="Jane"),
            context=render_context,
        )

        assert isinstance(part.author, AuthorPart)
        assert str(part.author) == "Jane"

    def test_decorator_called_once_per_attribute(
        self,
        render_context: Context,
        recording_decorator: Any,
    ) -> None:
        """Test that repeated access reuses the memoized value."""
        part = ArticlePart(name="article", value={"title": "x"}, context=render_context)

        first = part.title
        second = part.title

        assert first is second
        assert len(recording_decorator.calls) == 1
        name, value, context, options = recording_decorator.calls[0]
        assert (name, value, context, options) == ("title", "x", render_context, {})

    def test_falsy_attributes_are_not_decorated(
        self,
        render_context: Context,
        recording_decorator: Any,
    ) -> None:
        """Test that None and empty values pass through untouched."""
        part = ArticlePart(
            name="article",
            value={"title": "", "author": None},
            context=render_context,
        )

        assert part.title == ""
        assert part.author is None
        assert part.author is None
        assert recording_decorator.calls == []

    def test_subclass_snapshots_declarations(self) -> None:
        """Test that subclasses copy declarations made before they exist."""

        class BasePart(Part):
            pass

        BasePart.decorate("comments")

        class DerivedPart(BasePart):
            pass

        BasePart.decorate("tags")
        DerivedPart.decorate("likes")

        assert set(DerivedPart.decorated_attributes) == {"comments", "likes"}
        assert set(BasePart.decorated_attributes) == {"comments", "tags"}
        assert "comments" not in Part.decorated_attributes


class TestEquality:
    """Tests for part equality."""

    def test_equal_triples_are_equal(self, render_context: Context) -> None:
        """Test equality over name, value and context."""
        first = ArticlePart(name="article", value={"title": "x"}, context=render_context)
        second = ArticlePart(name="article", value={"title": "x"}, context=render_context)

        first.title  # populate the decoration cache

        assert first == second
        assert hash(first) == hash(second)

    def test_subtype_does_not_affect_equality(self) -> None:
        """Test that parts of different classes compare by triple only."""
        context = Context()

        assert Part(name="a", value=1, context=context) == AuthorPart(
            name="a", value=1, context=context
        )

    @pytest.mark.parametrize(
        "other",
        [
            Part(name="b", value=1),
            Part(name="a", value=2),
            Part(name="a", value=1, context=Context(options="other")),
        ],
    )
    def test_differing_triples_are_not_equal(self, other: Part) -> None:
        """Test that any differing component breaks equality."""
        assert Part(name="a", value=1) != other

    def test_not_equal_to_raw_value(self) -> None:
        """Test that a part is not equal to the value it wraps."""
        assert Part(name="a", value=1) != 1


class TestValueProtocol:
    """Tests for delegated container and string protocols."""

    def test_str_uses_value(self) -> None:
        """Test that string conversion delegates to the value."""
        assert str(Part(name="count", value=3)) == "3"

    def test_container_protocol(self) -> None:
        """Test len(), iteration, subscripting and membership."""
        part = Part(name="letters", value=["a", "b"])

        assert len(part) == 2
        assert list(part) == ["a", "b"]
        assert part[1] == "b"
        assert "a" in part

    def test_truthiness_follows_value(self) -> None:
        """Test that bool() delegates to the value."""
        assert not Part(name="empty", value=[])
        assert Part(name="full", value=[1])


class TestNew:
    """Tests for re-wrapping parts."""

    def test_new_defaults_to_same_class_name_value(self, render_context: Context) -> None:
        """Test that new() keeps class, name, value and context."""
        part = ArticlePart(name="article", value={"title": "x"}, context=render_context)

        copy = part.new()

        assert type(copy) is ArticlePart
        assert copy == part
        assert copy is not part

    def test_new_with_class_and_overrides(self, render_context: Context) -> None:
        """Test that new() accepts another class, name and value."""
        part = Part(name="article", value={"author": "Jane"}, context=render_context)

        author = part.new(AuthorPart, name="author", value="Jane")

        assert type(author) is AuthorPart
        assert (author._name, author._value) == ("author", "Jane")
        assert author._context is render_context

    def test_new_forwards_options(self, render_context: Context) -> None:
        """Test that extra options reach the new part's constructor."""

        class HighlightedPart(Part):
            def __init__(self, name: str, value: Any, context: Any = None, color: str = "") -> None:
                super().__init__(name, value, context)
                self.color = color

        part = Part(name="word", value="vista", context=render_context)

        highlighted = part.new(HighlightedPart, color="yellow")

        assert highlighted.color == "yellow"
        assert highlighted._value == "vista"


class TestRender:
    """Tests for partial rendering from a part."""

    def test_render_passes_self_as_local(
        self,
        render_context: Context,
        recording_renderer: Any,
    ) -> None:
        """Test that the part is available under its own name."""
        part = Part(name="user", value={"name": "Jane"}, context=render_context)

        output = part.render("row", label="Name")

        assert output == "rendered"
        name, scope, block = recording_renderer.partials[0]
        assert name == "row"
        assert isinstance(scope, Scope)
        assert dict(scope.locals) == {"label": "Name", "user": part}
        assert scope.context is render_context
        assert block is None

    def test_render_with_alias_and_block(
        self,
        render_context: Context,
        recording_renderer: Any,
    ) -> None:
        """Test the as_ alias and block forwarding."""
        part = Part(name="user", value={"name": "Jane"}, context=render_context)

        def block() -> str:
            return "inner"

        part._render("card", as_="person", caller=block)

        name, scope, forwarded = recording_renderer.partials[0]
        assert name == "card"
        assert dict(scope.locals) == {"person": part}
        assert forwarded is block

    def test_render_uses_context_renderer(self) -> None:
        """Test that partials go through the context's current renderer."""
        calls: list[str] = []

        class EchoRenderer:
            def partial(self, name: str, scope: Scope, block: Any = None) -> str:
                calls.append(name)
                return f"<{name}>"

        context = Context().for_rendering(EchoRenderer(), Decorator())
        part = Part(name="user", value="jane", context=context)

        assert part.render("badge") == "<badge>"
        assert calls == ["badge"]
