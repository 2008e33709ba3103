"""Shared fixtures for protoscribe tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from protoscribe import (
    FieldLabel,
    FieldType,
    IRClass,
    IRClassProperty,
    IREnum,
    IREnumProperty,
    IRNamespace,
    IRProgram,
    PropertyOptions,
    TypeReference,
)
from protoscribe.proto3_schema import MessageScope, Proto3SchemaGenerator

FieldFactory = Callable[..., IRClassProperty]
EnumFactory = Callable[..., IREnum]


def _make_field(
    name: str,
    order: int,
    field_type: FieldType = FieldType.INT32,
    *,
    repeated: bool = False,
    packed: bool = True,
    ref: TypeReference | None = None,
) -> IRClassProperty:
    return IRClassProperty(
        name=name,
        type=FieldType.TYPE_REFERENCE if ref else field_type,
        referenced_type=ref,
        options=PropertyOptions(
            label=FieldLabel.REPEATED if repeated else FieldLabel.SINGULAR,
            property_order=order,
            is_packed=packed,
        ),
    )


def _make_enum(name: str, *values: tuple[str, int], is_private: bool = False) -> IREnum:
    return IREnum(
        short_name=name,
        original_name=f"Source.{name}",
        properties=[IREnumProperty(name=key, value=value) for key, value in values],
        is_private=is_private,
    )


@pytest.fixture
def make_field() -> FieldFactory:
    """Factory for message fields."""
    return _make_field


@pytest.fixture
def make_enum() -> EnumFactory:
    """Factory for enums built from (name, value) pairs."""
    return _make_enum


@pytest.fixture
def generator() -> Proto3SchemaGenerator:
    """Create a proto3 schema generator."""
    return Proto3SchemaGenerator()


@pytest.fixture
def scope() -> MessageScope:
    """Top-level scope of the "Game.Core" namespace."""
    return MessageScope("Game.Core")


@pytest.fixture
def program() -> IRProgram:
    """Two namespaces, one referencing types of the other."""
    core = IRNamespace(
        name="Game.Core",
        enums=[
            _make_enum("Status", ("OK", 0), ("FAILED", 1)),
            _make_enum("Beta", ("FIRST", 1)),
            _make_enum("Hidden", ("NONE", 0), is_private=True),
        ],
        classes=[
            IRClass(
                short_name="Alpha",
                original_name="Source.Alpha",
                properties=[_make_field("Value", 1)],
            ),
            IRClass(short_name="Internal", is_private=True),
        ],
    )
    net = IRNamespace(
        name="Game.Net",
        classes=[
            IRClass(
                short_name="Packet",
                original_name="Source.Net.Packet",
                properties=[
                    _make_field(
                        "Status",
                        1,
                        ref=TypeReference(namespace="Game.Core", path="Status"),
                    ),
                    _make_field(
                        "Alpha",
                        2,
                        ref=TypeReference(namespace="Game.Core", path="Alpha"),
                        repeated=True,
                    ),
                ],
            ),
        ],
    )
    return IRProgram(namespaces=[core, net])


@pytest.fixture
def program_file(tmp_path: Path, program: IRProgram) -> Path:
    """Write the sample program to a JSON file."""
    path = tmp_path / "program.json"
    path.write_text(program.model_dump_json(indent=2), encoding="utf-8")
    return path
