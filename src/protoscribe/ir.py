"""Intermediate representation of schema entities.

The IR is built upstream (for example from reflected assembly metadata) and is
only read by the compiler. All models are frozen; a program can be loaded from
its JSON form with ``IRProgram.model_validate_json``.
"""

from enum import StrEnum
from pathlib import Path
from typing import Annotated, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .exceptions import IRLoadError


class FieldLabel(StrEnum):
    """Cardinality of a message field."""

    SINGULAR = "singular"
    REPEATED = "repeated"


class FieldType(StrEnum):
    """Declared type of a message field."""

    DOUBLE = "double"
    FLOAT = "float"
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    SINT32 = "sint32"
    SINT64 = "sint64"
    FIXED32 = "fixed32"
    FIXED64 = "fixed64"
    SFIXED32 = "sfixed32"
    SFIXED64 = "sfixed64"
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"
    TYPE_REFERENCE = "type_reference"


class _IRModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TypeReference(_IRModel):
    """Link from a field to a message or enum, possibly in another namespace.

    Attributes:
        namespace: Name of the namespace owning the referenced type.
        path: Dotted path of the type inside that namespace, e.g. "Outer.Inner".
    """

    namespace: str
    path: str

    @property
    def scope(self: Self) -> tuple[str, ...]:
        """Path segments of the referenced type."""
        return tuple(self.path.split("."))


class PropertyOptions(_IRModel):
    """Wire options of a message field."""

    label: FieldLabel = FieldLabel.SINGULAR
    property_order: int
    is_packed: bool = True


class IRClassProperty(_IRModel):
    """A message field."""

    name: str = Field(min_length=1)
    type: FieldType
    referenced_type: TypeReference | None = None
    options: PropertyOptions

    @model_validator(mode="after")
    def check_reference(self: Self) -> Self:
        """Require a referenced type exactly when the field type is a reference."""
        if self.type is FieldType.TYPE_REFERENCE and self.referenced_type is None:
            raise ValueError(f"Field '{self.name}' references no type")
        if self.type is not FieldType.TYPE_REFERENCE and self.referenced_type:
            raise ValueError(
                f"Field '{self.name}' of scalar type '{self.type}' "
                "cannot reference another type"
            )
        return self


class IREnumProperty(_IRModel):
    """A single enum value. Equal values across properties denote aliases."""

    name: str
    value: int


class IREnum(_IRModel):
    """An enum type."""

    kind: Literal["enum"] = "enum"
    short_name: str
    original_name: str = ""
    properties: list[IREnumProperty] = Field(default_factory=list)
    is_private: bool = False


class IRClass(_IRModel):
    """A message type.

    Attributes:
        short_name: Name used in the schema.
        original_name: Fully qualified name in the source library.
        properties: Fields in declaration order.
        private_types: Nested messages and enums.
        is_private: Whether the type is nested inside another message.
    """

    kind: Literal["class"] = "class"
    short_name: str
    original_name: str = ""
    properties: list[IRClassProperty] = Field(default_factory=list)
    private_types: list["IRTypeNode"] = Field(default_factory=list)
    is_private: bool = False


IRTypeNode = Annotated[IRClass | IREnum, Field(discriminator="kind")]

IRClass.model_rebuild()


class IRNamespace(_IRModel):
    """A group of types emitted into one file and one package."""

    name: str = Field(min_length=1)
    classes: list[IRClass] = Field(default_factory=list)
    enums: list[IREnum] = Field(default_factory=list)


class IRProgram(_IRModel):
    """Root of the IR: an ordered collection of namespaces."""

    namespaces: list[IRNamespace] = Field(default_factory=list)

    def get_namespace(self: Self, name: str) -> IRNamespace | None:
        """Get a namespace by name.

        Args:
            name: Namespace name.

        Returns:
            The namespace, or None if the program has none with that name.
        """
        for namespace in self.namespaces:
            if namespace.name == name:
                return namespace
        return None


def load_program(path: Path) -> IRProgram:
    """Load an IR program from a JSON file.

    Args:
        path: JSON file produced by the IR front end.

    Returns:
        The validated program.

    Raises:
        IRLoadError: If the file cannot be read or does not describe a program.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise IRLoadError(f"Cannot read IR file {path}: {e}") from e

    try:
        return IRProgram.model_validate_json(content)
    except ValidationError as e:
        raise IRLoadError(f"Invalid IR in {path}: {e}") from e
