"""Command-line interface for gql-shape."""

import importlib
import json
import logging

import click

from .core.binder import unmarshal
from .core.errors import DecodeError, ShapeError
from .core.global_id import decode_global_id
from .core.query_builder import Query
from .core.shape import Shape, is_shape


def load_shape(reference: str) -> type[Shape]:
    """Import a shape from a ``module:Attribute`` reference."""
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise click.BadParameter(f"expected module:Attribute, got {reference!r}", param_hint="--shape")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name}: {e}", param_hint="--shape") from e

    target = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise click.BadParameter(f"{module_name} has no attribute {attr}", param_hint="--shape") from e

    if isinstance(target, Shape):
        target = type(target)
    if not is_shape(target):
        raise click.BadParameter(f"{reference} is not a Shape subclass", param_hint="--shape")
    return target


def parse_variable(value: str) -> tuple[str, str]:
    """Parse a ``name:Type`` variable declaration."""
    name, sep, type_name = value.partition(":")
    name = name.strip().lstrip("$")
    type_name = type_name.strip()
    if not sep or not name or not type_name:
        raise click.BadParameter(f"expected name:Type, got {value!r}", param_hint="--var")
    return name, type_name


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


shape_option = click.option(
    "--shape",
    "-s",
    required=True,
    help="Shape to use, as module:Attribute (e.g. myapp.queries:HeroQuery).",
)
verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)


@click.group()
@click.version_option(package_name="gql-shape")
def main():
    """Shape-driven GraphQL queries for Python.

    Compile shapes into query text, bind responses back onto them and
    decode opaque global IDs.
    """
    pass


@main.command("compile")
@shape_option
@click.option("--name", "-n", default="", help="Query name (anonymous if omitted).")
@click.option(
    "--var",
    "variables",
    multiple=True,
    help="Variable declaration as name:Type, e.g. episode:Episode. Repeatable.",
)
@click.option(
    "--request",
    is_flag=True,
    help="Print a JSON request body instead of the bare query text.",
)
@click.option(
    "--values",
    default=None,
    help="JSON object of variable values to include with --request.",
)
@verbose_option
def compile_command(shape: str, name: str, variables: tuple[str, ...], request: bool, values: str | None, verbose: bool):
    """Compile a shape into GraphQL query text.

    Examples:

        gql-shape compile -s myapp.queries:HeroQuery

        gql-shape compile -s myapp.queries:HeroQuery -n HeroNameAndFriends --var episode:Episode
    """
    setup_logging(verbose)
    query = Query(name, load_shape(shape))
    for v in variables:
        query.define_variable(*parse_variable(v))

    try:
        if request:
            variable_values = _parse_values(values)
            click.echo(json.dumps(query.request_body(variable_values), indent=2))
        else:
            click.echo(query.compile(), nl=False)
    except ShapeError as e:
        raise click.ClickException(str(e)) from e


def _parse_values(values: str | None) -> dict | None:
    if values is None:
        return None
    try:
        parsed = json.loads(values)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e}", param_hint="--values") from e
    if not isinstance(parsed, dict):
        raise click.BadParameter("expected a JSON object", param_hint="--values")
    return parsed


@main.command()
@shape_option
@click.option(
    "--response",
    "-r",
    type=click.File("rb"),
    default="-",
    help="Response JSON file ('-' for stdin).",
)
@verbose_option
def bind(shape: str, response, verbose: bool):
    """Bind a GraphQL JSON response onto a shape and print it.

    Examples:

        gql-shape bind -s myapp.queries:HeroQuery -r response.json

        curl ... | gql-shape bind -s myapp.queries:HeroQuery
    """
    setup_logging(verbose)
    shape_type = load_shape(shape)
    try:
        obj = unmarshal(response.read(), shape_type())
    except DecodeError as e:
        raise click.ClickException(str(e)) from e
    click.echo(json.dumps(obj.to_dict(), indent=2, default=str))


@main.command("decode-id")
@click.argument("token")
@verbose_option
def decode_id(token: str, verbose: bool):
    """Decode an opaque global ID token into its numeric id.

    Example:

        gql-shape decode-id SHVtYW46MTAwMA==
    """
    setup_logging(verbose)
    try:
        click.echo(decode_global_id(token))
    except DecodeError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    main()
