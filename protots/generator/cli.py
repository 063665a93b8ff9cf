"""Command-line interface for protots code generation."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.tree import Tree

from protots.generator.errors import GeneratorError
from protots.generator.namespace import NamespaceInfo, build_namespace
from protots.generator.plugin import (
    generate,
    parse_descriptor_set,
    request_from_descriptor_set,
    run,
)

logger = logging.getLogger("protots")

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _setup_logging(level: str) -> None:
    """Send log records to stderr; stdout may carry the protoc response."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(level.upper())
    logger.propagate = False


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="PROTOC_GEN_TS_LOG_LEVEL",
    help="Log level for diagnostics on stderr",
)
def cli(log_level: str) -> None:
    """Protots TypeScript code generator."""
    _setup_logging(log_level)


@cli.command()
@click.option(
    "--input", "-i", "input_file", required=True, help="Descriptor set (protoc --descriptor_set_out)"
)
@click.option("--output", "-o", "output_path", default=".", help="Output directory")
@click.option(
    "--file", "-f", "files", multiple=True, help="File to generate (default: every file in the set)"
)
@click.option("--grpc", "gen_service", is_flag=True, default=False, help="Generate service clients")
@click.option("--library-import", default=None, help="Import path for the runtime library")
@click.option("--debug", is_flag=True, default=False, help="Trace field reads/writes in generated code")
def gen(
    input_file: str,
    output_path: str,
    files: tuple[str, ...],
    gen_service: bool,
    library_import: str | None,
    debug: bool,
) -> None:
    """Generate TypeScript from a descriptor set."""
    params = []
    if gen_service:
        params.append("plugin=grpc")
    if library_import is not None:
        params.append(f"library_import={library_import}")

    try:
        descriptor_set = parse_descriptor_set(Path(input_file).read_bytes())
        request = request_from_descriptor_set(
            descriptor_set, list(files) or None, parameter=",".join(params)
        )
        response = generate(request, debug=debug)
    except (GeneratorError, OSError) as e:
        logger.error("%s", e)
        sys.exit(1)

    for generated in response.file:
        target = Path(output_path) / generated.name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(generated.content, encoding="utf-8")
        click.echo(f"Generated {target}")


@cli.command()
@click.option(
    "--input", "-i", "input_file", required=True, help="Descriptor set (protoc --descriptor_set_out)"
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_file: str, output_json: bool) -> None:
    """Display the namespace tree of a descriptor set."""
    try:
        descriptor_set = parse_descriptor_set(Path(input_file).read_bytes())
    except (GeneratorError, OSError) as e:
        logger.error("%s", e)
        sys.exit(1)

    snapshot = build_namespace(list(descriptor_set.file)).describe()
    if output_json:
        click.echo(snapshot.to_json(indent=2))
    else:
        Console().print(_tree(snapshot))


def _tree(node: NamespaceInfo, parent: Tree | None = None) -> Tree:
    """Render a namespace snapshot as a rich tree."""
    label = f"[bold cyan]{node.name}[/bold cyan] [dim]{node.kind}[/dim]"
    if node.file:
        label += f" [green]{node.file}[/green]"
    branch = Tree(label) if parent is None else parent.add(label)
    for name in node.enums:
        branch.add(f"[yellow]enum[/yellow] {name}")
    for child in node.children:
        _tree(child, branch)
    return branch


@click.command()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="PROTOC_GEN_TS_LOG_LEVEL",
)
@click.option(
    "--dump",
    "dump_file",
    default=None,
    envvar="PROTOC_GEN_TS_DUMP",
    help="Write the raw request to this file before generating",
)
def protoc_plugin(log_level: str, dump_file: str | None) -> None:
    """Protoc plugin: CodeGeneratorRequest on stdin, CodeGeneratorResponse on stdout."""
    _setup_logging(log_level)
    data = sys.stdin.buffer.read()

    if dump_file:
        logger.info("Writing request from protoc to: %s", dump_file)
        Path(dump_file).write_bytes(data)

    try:
        out = run(data)
    except GeneratorError as e:
        logger.error("%s", e)
        sys.exit(1)

    sys.stdout.buffer.write(out)
    sys.stdout.buffer.flush()


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
