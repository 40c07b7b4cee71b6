"""Developer CLI for inspecting registered document classes.

The target module is imported so that its registration code runs against the
process-wide registry; the named document class is then looked up there.
"""

import importlib
import json
import sys

import structlog
import typer

from docmap.errors import DocmapError
from docmap.services.factory import DocumentClassFactory
from docmap.services.registry import default_registry

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    logger_factory=lambda name: structlog.PrintLogger(file=sys.stderr),
    wrapper_class=structlog.BoundLogger,
    context_class=dict,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

app = typer.Typer(
    name="docmap",
    help="""Inspect document classes registered with docmap.

Examples:

  # Print the schema of a registered document class
  docmap schema myapp.documents:Gift

  # List the nested document classes it depends on
  docmap dependencies myapp.documents:Gift""",
    rich_markup_mode="markdown",
)


def _load_factory(target: str) -> DocumentClassFactory:
    module_name, _, type_id = target.partition(":")
    if not module_name or not type_id:
        logger.error("invalid_target", target=target)
        typer.echo("Target must look like 'package.module:SchemaName'.")
        raise typer.Exit(1)

    try:
        importlib.import_module(module_name)
    except ImportError as exc:
        logger.error("module_import_failed", module=module_name, error=str(exc))
        raise typer.Exit(1) from exc

    try:
        return default_registry().get(type_id)
    except DocmapError as exc:
        logger.error("document_class_not_found", type_id=type_id, error=exc.message)
        raise typer.Exit(1) from exc


@app.command()
def schema(
    target: str = typer.Argument(
        ...,
        help="Module and schema name, e.g. myapp.documents:Gift",
    ),
    indent: int = typer.Option(
        2,
        "--indent",
        "-i",
        help="JSON indentation",
    ),
) -> None:
    """Print a registered document class' schema as JSON."""
    factory = _load_factory(target)
    typer.echo(json.dumps(factory.get_schema().to_dict(), indent=indent))


@app.command()
def dependencies(
    target: str = typer.Argument(
        ...,
        help="Module and schema name, e.g. myapp.documents:Gift",
    ),
) -> None:
    """List nested document classes a registered class depends on."""
    factory = _load_factory(target)
    for type_id in factory.get_dependency_document_classes():
        typer.echo(type_id)


@app.command(name="list")
def list_classes(
    module: str = typer.Argument(
        ...,
        help="Module whose import registers document classes",
    ),
) -> None:
    """List every registered document class after importing a module."""
    try:
        importlib.import_module(module)
    except ImportError as exc:
        logger.error("module_import_failed", module=module, error=str(exc))
        raise typer.Exit(1) from exc

    registry = default_registry()
    for type_id in registry.type_ids():
        factory = registry.get(type_id)
        typer.echo(f"{type_id}\t{factory.document_class.__module__}.{factory.document_class.__qualname__}")


@app.command()
def version() -> None:
    """Show version information."""
    from docmap import __version__

    typer.echo(f"docmap {__version__}")
