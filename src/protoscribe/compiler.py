"""Emission of proto3 files for a whole IR program.

A compiler runs exactly once. It either writes one file per namespace, with
package declarations and imports, or collapses the program into a single dump
file meant for inspection.
"""

import logging
from collections.abc import Iterable
from enum import StrEnum
from pathlib import Path, PurePosixPath
from typing import Self

from ._comparator import sort_key
from ._namespace_resolver import resolve_file_paths, resolve_imports
from .config import CompilerConfig
from .exceptions import CompilerStateError, OutputWriteError
from .ir import IRNamespace, IRProgram, IRTypeNode
from .proto3_schema import (
    MessageScope,
    Proto3SchemaGenerator,
    enums_then_classes,
    interleaved_by_name,
)

logger = logging.getLogger(__name__)

_START_SPACER = "//----- Begin {0} -----"
_END_SPACER = "//----- End {0} -----"
_SPACER = "//------------------------------"


class CompilerState(StrEnum):
    """Lifecycle of a compiler run."""

    IDLE = "idle"
    DUMP_ALL = "dump_all"
    PER_NAMESPACE_EMIT = "per_namespace_emit"
    DONE = "done"


def public_types(namespace: IRNamespace) -> list[IRTypeNode]:
    """Get the enums and classes of a namespace that are not private."""
    return [
        node for node in (*namespace.enums, *namespace.classes) if not node.is_private
    ]


class Proto3Compiler:
    """Writes an IR program as proto3 schema files.

    Example:
        ```python
        config = CompilerConfig(output_path=Path("protos"), package_structured=True)
        written = Proto3Compiler(program, config).compile()
        ```
    """

    def __init__(self: Self, program: IRProgram, config: CompilerConfig) -> None:
        """Initialize the compiler.

        Args:
            program: Program to compile. It is not modified.
            config: Output settings.
        """
        self.program = program
        self.config = config
        self.generator = Proto3SchemaGenerator(
            include_references=config.include_references
        )
        self.state = CompilerState.IDLE
        self._file_paths: dict[str, PurePosixPath] = {}

    @property
    def file_paths(self: Self) -> dict[str, PurePosixPath]:
        """Namespace name to output path, once per-namespace emission started."""
        return dict(self._file_paths)

    def compile(self: Self) -> list[Path]:
        """Write all output files.

        Returns:
            Paths of the written files, in writing order.

        Raises:
            CompilerStateError: If the compiler already ran.
            OutputWriteError: If a directory or file cannot be written. Files
                written before the failure are kept.
            NamespaceCollisionError: If two namespaces share an output path.
        """
        if self.state is not CompilerState.IDLE:
            raise CompilerStateError(f"Compiler already ran (state: {self.state})")

        logger.info("Writing proto files to folder `%s`", self.config.output_path)
        try:
            if self.config.dump_mode:
                self.state = CompilerState.DUMP_ALL
                return [self._dump()]

            self.state = CompilerState.PER_NAMESPACE_EMIT
            return self._emit_namespaces()
        finally:
            self.state = CompilerState.DONE

    def _dump(self: Self) -> Path:
        target = self.config.output_path / self.config.dump_file_name
        lines = self.generator.header_lines()

        for namespace in self.program.namespaces:
            lines.append(_START_SPACER.format(namespace.name))
            lines.append("")
            lines.extend(
                self.generator.types_to_lines(
                    enums_then_classes(public_types(namespace)),
                    MessageScope(namespace.name),
                )
            )
            lines.append("")
            lines.append(_END_SPACER.format(namespace.name))
            lines.append(_SPACER)

        self._write(target, lines)
        return target

    def _emit_namespaces(self: Self) -> list[Path]:
        self._file_paths = resolve_file_paths(
            self.program.namespaces, self.config.package_structured
        )
        namespaces = {ns.name: ns for ns in self.program.namespaces}

        written: list[Path] = []
        for name, relative_path in self._file_paths.items():
            namespace = namespaces[name]
            target = self.config.output_path.joinpath(*relative_path.parts)

            lines = self.generator.header_lines(namespace)
            lines.extend(self.generator.import_lines(self._import_paths(namespace)))
            lines.extend(
                self.generator.types_to_lines(
                    interleaved_by_name(public_types(namespace)),
                    MessageScope(namespace.name),
                )
            )

            self._write(target, lines)
            written.append(target)

        return written

    def _import_paths(self: Self, namespace: IRNamespace) -> list[PurePosixPath]:
        paths: list[PurePosixPath] = []
        for name in sorted(resolve_imports(namespace), key=sort_key):
            path = self._file_paths.get(name)
            if path is None:
                logger.warning(
                    "Namespace `%s` references unknown namespace `%s`; "
                    "import skipped",
                    namespace.name,
                    name,
                )
                continue
            paths.append(path)
        return paths

    def _write(self: Self, target: Path, lines: Iterable[str]) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("w", encoding="utf-8", newline="\n") as stream:
                stream.writelines(f"{line}\n" for line in lines)
        except OSError as e:
            raise OutputWriteError(target, e.strerror or str(e)) from e

        logger.debug("Wrote %s", target)


def compile_program(program: IRProgram, config: CompilerConfig) -> list[Path]:
    """Compile a program with a fresh compiler.

    Args:
        program: Program to compile.
        config: Output settings.

    Returns:
        Paths of the written files.
    """
    return Proto3Compiler(program, config).compile()
