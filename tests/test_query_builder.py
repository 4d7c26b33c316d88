"""Tests for query compilation."""

import re
from datetime import datetime

import pytest
from graphql import parse
from pydantic import BaseModel, ConfigDict, Field

from gql_shape.core.errors import ShapeError
from gql_shape.core.global_id import ID
from gql_shape.core.query_builder import Query, QueryVariable, compile_field
from gql_shape.core.shape import Shape, ShapeField, shape
from gql_shape.core.writer import Writer
from starwars_shapes import (
    ConnectionQuery,
    DroidQuery,
    HeroQuery,
    Human,
    HumanQuery,
    PilotQuery,
)


# =============================================================================
# Fixtures
# =============================================================================


class Broken:
    """Renderer that always fails."""

    @classmethod
    def render_graphql(cls, writer, name):
        raise RuntimeError("cannot render")


class HalfBroken:
    """Renderer that writes a line and then fails."""

    @classmethod
    def render_graphql(cls, writer, name):
        writer.println(name)
        raise ValueError("gave up")


class Aliased:
    """Renderer that writes its own scope."""

    @classmethod
    def render_graphql(cls, writer, name):
        writer.scope(f"ship: {name}", lambda: writer.println("id"))


def nested(depth: int) -> type[Shape]:
    """Root shape with ``depth`` levels of nesting under it."""
    current = shape("Leaf", ShapeField("Name", str))
    for i in range(depth):
        current = shape(f"Level{i}", ShapeField("Value", int), ShapeField("Child", current))
    return current


# =============================================================================
# Tests: Query text
# =============================================================================


class TestCompile:
    """Tests for Query.compile."""

    def test_arguments(self):
        expected = (
            "{\n"
            '  human(id: "1000") {\n'
            "    name\n"
            "    height(unit: FOOT)\n"
            "  }\n"
            "}\n"
        )
        assert Query("", HumanQuery).compile() == expected

    def test_hidden_fields(self):
        expected = (
            "{\n"
            '  human(id: "1000") {\n'
            "    name\n"
            "    height(unit: FOOT)\n"
            "    starship\n"
            "  }\n"
            "}\n"
        )
        assert Query("", PilotQuery).compile() == expected

    def test_variables(self):
        query = Query("HeroNameAndFriends", HeroQuery).define_variable("episode", "Episode")
        expected = (
            "query HeroNameAndFriends($episode: Episode) {\n"
            "  hero(episode: $episode) {\n"
            "    name\n"
            "    friends {\n"
            "      name\n"
            "    }\n"
            "  }\n"
            "}\n"
        )
        assert query.compile() == expected

    def test_connection(self):
        expected = (
            "{\n"
            "  hero {\n"
            "    name\n"
            '    friendsConnection(first:2 after:"Y3Vyc29yMQ==") {\n'
            "      edges {\n"
            "        node {\n"
            "          name\n"
            "        }\n"
            "        cursor\n"
            "      }\n"
            "      totalCount\n"
            "      pageInfo {\n"
            "        hasNextPage\n"
            "        hasPreviousPage\n"
            "        startCursor\n"
            "        endCursor\n"
            "      }\n"
            "    }\n"
            "  }\n"
            "}\n"
        )
        assert Query("", ConnectionQuery).compile() == expected

    def test_name_normalization(self):
        text = Query("", DroidQuery).compile()
        assert "    id\n" in text
        assert "    photoUrl\n" in text
        assert "    primaryFunction\n" in text

    def test_named_query_without_variables(self):
        text = Query("Human", HumanQuery).compile()
        assert text.startswith("query Human {\n")

    def test_multiple_variables(self):
        query = (
            Query("Q", HumanQuery)
            .define_variable("id", "ID!")
            .define_variable("unit", "LengthUnit")
        )
        assert query.compile().startswith("query Q($id: ID!, $unit: LengthUnit) {\n")

    def test_variables_ignored_for_anonymous_query(self):
        query = Query("", HumanQuery).define_variable("id", "ID!")
        assert query.compile().startswith("{\n")

    def test_root_instance(self):
        assert Query("", HumanQuery()).compile() == Query("", HumanQuery).compile()

    def test_marshal(self):
        assert Query("", HumanQuery).marshal() == Query("", HumanQuery).compile().encode()

    def test_declaration_order(self):
        Root = shape("Root", ShapeField("Zeta", int), ShapeField("Alpha", int), ShapeField("Zeta2", int))
        lines = Query("", Root).compile().splitlines()
        assert lines[1:4] == ["  zeta", "  alpha", "  zeta2"]

    def test_no_deduplication(self):
        Root = shape(
            "Root",
            ShapeField("Hero", str, "episode: JEDI", attr="jedi"),
            ShapeField("Hero", str, "episode: EMPIRE", attr="empire"),
        )
        text = Query("", Root).compile()
        assert text == "{\n  hero(episode: JEDI)\n  hero(episode: EMPIRE)\n}\n"

    @pytest.mark.parametrize(
        "root",
        [ConnectionQuery, DroidQuery, HeroQuery, HumanQuery, PilotQuery],
    )
    def test_output_parses(self, root):
        query = Query("Test", root).define_variable("episode", "Episode")
        parse(query.compile())


class TestCompileErrors:
    """Tests for invalid roots."""

    def test_empty_shape(self):
        Empty = shape("Empty")
        with pytest.raises(ShapeError, match="query object must be a non-empty struct"):
            Query("", Empty).compile()

    @pytest.mark.parametrize("root", [str, list[Human], "human", None, 3])
    def test_not_a_shape(self, root):
        with pytest.raises(ShapeError, match="non-empty struct"):
            Query("", root).compile()


class TestScalarLeaves:
    """Properties of shapes with only scalar fields."""

    def test_one_line_per_field(self):
        Root = shape(
            "Root",
            ShapeField("Name", str),
            ShapeField("Mass", float, "unit: KILOGRAM"),
            ShapeField("Alive", bool),
            ShapeField("DroidID", ID),
        )
        lines = Query("", Root).compile().splitlines()
        assert lines == ["{", "  name", "  mass(unit: KILOGRAM)", "  alive", "  droidId", "}"]


class TestScopeBalancing:
    """Brace and indentation properties for nested shapes."""

    @pytest.mark.parametrize("depth", [0, 1, 3, 7])
    def test_braces_balanced(self, depth):
        text = Query("", nested(depth)).compile()
        assert text.count("{") == text.count("}")
        assert text.count("{") == depth + 1

    @pytest.mark.parametrize("depth", [1, 4])
    def test_indentation_per_level(self, depth):
        text = Query("", nested(depth)).compile()
        level = 0
        for line in text.splitlines():
            stripped = line.lstrip(" ")
            if stripped == "}":
                level -= 1
            indent = len(line) - len(stripped)
            assert indent == 2 * level
            if stripped.endswith("{"):
                level += 1
        assert level == 0

    def test_ends_with_newline(self):
        assert Query("", nested(2)).compile().endswith("}\n")


# =============================================================================
# Tests: Walker rules
# =============================================================================


class TestCompileField:
    """Tests for compile_field decision rules."""

    def test_scalar_leaf(self):
        w = Writer()
        compile_field(w, "name", str)
        assert w.getvalue() == "name\n"

    def test_list_renders_like_element(self):
        as_list, single = Writer(), Writer()
        compile_field(as_list, "friends", list[Human])
        compile_field(single, "friends", Human)
        assert as_list.getvalue() == single.getvalue()
        assert "[" not in as_list.getvalue()

    def test_list_of_scalars(self):
        w = Writer()
        compile_field(w, "appearsIn", list[str])
        assert w.getvalue() == "appearsIn\n"

    def test_custom_renderer(self):
        w = Writer()
        w.level = 1
        compile_field(w, "starship", Aliased)
        assert w.getvalue() == "  ship: starship {\n    id\n  }\n"

    def test_failing_renderer_dropped(self):
        Root = shape(
            "Root",
            ShapeField("Name", str),
            ShapeField("Ship", Broken),
            ShapeField("Height", float),
        )
        assert Query("", Root).compile() == "{\n  name\n  height\n}\n"

    def test_partial_output_discarded(self):
        Root = shape("Root", ShapeField("Name", str), ShapeField("Ship", HalfBroken))
        assert Query("", Root).compile() == "{\n  name\n}\n"

    def test_failing_renderer_in_list(self):
        Root = shape("Root", ShapeField("Ships", list[Broken]), ShapeField("Name", str))
        assert Query("", Root).compile() == "{\n  name\n}\n"

    def test_failing_renderer_logged(self, caplog):
        Root = shape("Root", ShapeField("Ship", Broken), ShapeField("Name", str))
        with caplog.at_level("DEBUG", logger="gql_shape.core.query_builder"):
            Query("", Root).compile()
        assert "ship" in caplog.text
        assert "cannot render" in caplog.text


# =============================================================================
# Tests: Variables and request bodies
# =============================================================================


class EpisodeFilter(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    episode: str
    first_n: int | None = Field(default=None, alias="firstN")
    after_cursor: str | None = Field(default=None, alias="afterCursor")


class TestQueryVariable:
    """Tests for QueryVariable."""

    def test_str(self):
        assert str(QueryVariable("episode", "Episode")) == "$episode: Episode"

    def test_define_variable_chains(self):
        query = Query("Q", HumanQuery)
        assert query.define_variable("a", "Int") is query
        assert query.variables == [QueryVariable("a", "Int")]


class TestRequestBody:
    """Tests for Query.request_body."""

    def test_query_only(self):
        body = Query("", HumanQuery).request_body()
        assert body == {"query": Query("", HumanQuery).compile()}

    def test_operation_name(self):
        body = Query("HeroNameAndFriends", HeroQuery).request_body()
        assert body["operationName"] == "HeroNameAndFriends"

    def test_plain_values(self):
        body = Query("Q", HeroQuery).request_body({"episode": "JEDI", "first": 2})
        assert body["variables"] == {"episode": "JEDI", "first": 2}

    def test_skips_none(self):
        body = Query("Q", HeroQuery).request_body({"episode": "JEDI", "after": None})
        assert body["variables"] == {"episode": "JEDI"}

    def test_pydantic_model(self):
        filt = EpisodeFilter(episode="JEDI", first_n=2)
        body = Query("Q", HeroQuery).request_body({"filter": filt})
        assert body["variables"] == {"filter": {"episode": "JEDI", "firstN": 2}}

    def test_list_of_models(self):
        filters = [EpisodeFilter(episode="JEDI"), EpisodeFilter(episode="EMPIRE", after_cursor="x")]
        body = Query("Q", HeroQuery).request_body({"filters": filters})
        assert body["variables"]["filters"] == [
            {"episode": "JEDI"},
            {"episode": "EMPIRE", "afterCursor": "x"},
        ]

    def test_registered_scalars_serialized(self):
        body = Query("Q", HeroQuery).request_body({"since": datetime(2024, 1, 15, 10, 30)})
        assert body["variables"] == {"since": "2024-01-15T10:30:00"}

    def test_query_text_matches_compile(self):
        query = Query("HeroNameAndFriends", HeroQuery).define_variable("episode", "Episode")
        assert re.match(r"query HeroNameAndFriends\(\$episode: Episode\)", query.request_body()["query"])
