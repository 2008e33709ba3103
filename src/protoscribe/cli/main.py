"""Command-line interface for protoscribe."""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from .._namespace_resolver import package_name_from, resolve_file_paths
from ..compiler import compile_program
from ..config import ConfigError, load_config
from ..exceptions import IRLoadError, ProtoscribeError
from ..ir import load_program
from ._helpers import configure_logging, console, print_error, print_success

app = typer.Typer(help="Compile schema IR programs to proto3 files")

IROption = Annotated[
    Path,
    typer.Option(..., "--ir", "-i", help="Path to the IR program (JSON)"),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        ...,
        "--config",
        "-c",
        help="Path to config file (pyproject.toml or protoscribe.toml)",
    ),
]

PackageStructuredOption = Annotated[
    bool | None,
    typer.Option(
        ...,
        "--package-structured/--flat",
        help="Write one folder per package segment instead of a flat folder",
    ),
]


@app.command(name="compile")
def compile_ir(  # noqa: PLR0913
    ir: IROption,
    output: Annotated[
        Path | None,
        typer.Option(..., "--output", "-o", help="Output directory"),
    ] = None,
    package_structured: PackageStructuredOption = None,
    dump: Annotated[
        bool,
        typer.Option(..., "--dump", help="Write the whole program to one file"),
    ] = False,
    dump_file: Annotated[
        str | None,
        typer.Option(..., "--dump-file", help="Name of the dump file"),
    ] = None,
    references: Annotated[
        bool,
        typer.Option(
            ...,
            "--references",
            help="Comment each type with its original source name",
        ),
    ] = False,
    config: ConfigOption = None,
    verbose: Annotated[
        bool, typer.Option(..., "--verbose", "-v", help="Log debug output")
    ] = False,
) -> None:
    """Compile an IR program to proto3 schema files.

    Examples:
        # One file per namespace, nested by package
        protoscribe compile -i program.json -o protos --package-structured

        # Everything in a single file for inspection
        protoscribe compile -i program.json -o protos --dump
    """
    configure_logging(verbose)

    try:
        compiler_config = load_config(
            config,
            output_path=output,
            package_structured=package_structured,
            dump_mode=dump or None,
            dump_file_name=dump_file,
            include_references=references or None,
        )
        program = load_program(ir)
        written = compile_program(program, compiler_config)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except IRLoadError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except ProtoscribeError as e:
        print_error(f"Compilation failed: {e}")
        raise typer.Exit(1) from e

    for path in written:
        console.print(f"[dim]  • {path}[/dim]")
    print_success(
        f"Wrote {len(written)} proto file(s) to {compiler_config.output_path}"
    )


@app.command()
def paths(
    ir: IROption,
    package_structured: PackageStructuredOption = None,
) -> None:
    """Show the package and output path of every namespace."""
    try:
        program = load_program(ir)
        file_paths = resolve_file_paths(
            program.namespaces, package_structured=bool(package_structured)
        )
    except ProtoscribeError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    if not file_paths:
        console.print("[yellow]No namespaces in program[/yellow]")
        return

    table = Table(title="Namespaces")
    table.add_column("Namespace", style="cyan")
    table.add_column("Package", style="green")
    table.add_column("Path")

    for name, path in file_paths.items():
        table.add_row(name, package_name_from(name), path.as_posix())

    console.print(table)


if __name__ == "__main__":
    app()
