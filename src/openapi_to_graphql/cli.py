"""CLI entry point for openapi-to-graphql."""

from pathlib import Path

import click
from pydantic import ValidationError

from openapi_to_graphql.convert import translate_file
from openapi_to_graphql.errors import TranslationError
from openapi_to_graphql.generator.printer import dump_manifest, print_sdl
from openapi_to_graphql.logging import configure_logging
from openapi_to_graphql.options import TranslationOptions, load_options

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _options(config_path: Path | None, **overrides) -> TranslationOptions:
    """Merge the config file with CLI flags, reporting bad values as usage errors."""
    try:
        return load_options(config_path, **overrides)
    except (ValidationError, ValueError) as e:
        raise click.BadParameter(str(e), param_hint="--config / options") from e


def _translate(doc_path: Path, options: TranslationOptions):
    try:
        return translate_file(doc_path, options)
    except TranslationError as e:
        raise click.ClickException(f"{type(e).__name__}: {e}") from e


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    envvar="OPENAPI_TO_GRAPHQL_LOG_LEVEL",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging verbosity.",
)
def main(log_level: str):
    """OpenAPI to GraphQL: translate REST API descriptions into GraphQL schemas."""
    configure_logging(log_level)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the GraphQL SDL.")
@click.option("--name", "source_name", default=None, help="Name of the source API.")
@click.option("--bindings", "bindings_path", default=None, type=click.Path(path_type=Path), help="Also write resolver bindings as JSON.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML file with translation options.")
@click.option("--body-argument", default=None, help="Argument name for request bodies.")
@click.option("--custom-scalars/--no-custom-scalars", default=None, help="Map date-time, byte and int64 to custom scalars.")
@click.option("--include-unreferenced", is_flag=True, default=None, help="Also emit component schemas no operation uses.")
def convert(
    doc_path: Path,
    output: Path,
    source_name: str | None,
    bindings_path: Path | None,
    config_path: Path | None,
    body_argument: str | None,
    custom_scalars: bool | None,
    include_unreferenced: bool | None,
):
    """Translate an OpenAPI/Swagger document into a GraphQL schema file."""
    options = _options(
        config_path,
        source_name=source_name,
        body_argument_name=body_argument,
        custom_scalars=custom_scalars,
        include_unreferenced_schemas=include_unreferenced,
    )

    click.echo(f"Translating {doc_path} ({options.source_name})...")
    result = _translate(doc_path, options)
    click.echo(f"Mapped {len(result.bindings)} operations.")

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(print_sdl(result.schema), encoding="utf-8")
    click.echo(f"Schema saved to {output}")

    if bindings_path is not None:
        bindings_path.parent.mkdir(parents=True, exist_ok=True)
        bindings_path.write_text(dump_manifest(result), encoding="utf-8")
        click.echo(f"Bindings saved to {bindings_path}")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML file with translation options.")
def operations(doc_path: Path, config_path: Path | None):
    """List the root fields a document translates to."""
    options = _options(config_path)
    result = _translate(doc_path, options)
    for binding in result.bindings:
        click.echo(f"{binding.root:<9} {binding.field:<30} {binding.method} {binding.path}")
