"""Protocol Buffer 3 schema text generation from the IR."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import PurePath
from typing import Self, assert_never

from ._comparator import sort_key, sorted_by_name
from ._namespace_resolver import package_name_from, resolve_package_name
from ._oneof import extract_oneof
from .ir import (
    FieldLabel,
    IRClass,
    IRClassProperty,
    IREnum,
    IREnumProperty,
    IRNamespace,
    IRTypeNode,
)

logger = logging.getLogger(__name__)

INDENT = "\t"
BANNER = "protoscribe compiled unit"
AUTO_INVALID_SUFFIX = "AUTO_INVALID"


@dataclass(frozen=True)
class MessageScope:
    """Lexical position of a message while it is being emitted.

    Attributes:
        namespace: Name of the namespace being emitted.
        path: Names of the enclosing messages, outermost first.
    """

    namespace: str
    path: tuple[str, ...] = ()

    def enter(self: Self, message_name: str) -> "MessageScope":
        """Return the scope inside the named message."""
        return MessageScope(self.namespace, (*self.path, message_name))


def enums_then_classes(nodes: Iterable[IRTypeNode]) -> list[IRTypeNode]:
    """Order types as all enums by name, followed by all classes by name."""
    nodes = list(nodes)
    enums = [node for node in nodes if isinstance(node, IREnum)]
    classes = [node for node in nodes if isinstance(node, IRClass)]
    return [
        *sorted_by_name(enums, lambda node: node.short_name),
        *sorted_by_name(classes, lambda node: node.short_name),
    ]


def interleaved_by_name(nodes: Iterable[IRTypeNode]) -> list[IRTypeNode]:
    """Order enums and classes together by name."""
    return sorted_by_name(nodes, lambda node: node.short_name)


def has_enum_alias(enum: IREnum) -> bool:
    """Check whether two or more enum properties share a value."""
    values = [prop.value for prop in enum.properties]
    return len(set(values)) < len(values)


def split_zero_property(
    enum: IREnum,
) -> tuple[IREnumProperty, list[IREnumProperty]]:
    """Separate the zero-valued property of an enum from the others.

    Proto3 requires the first enum value to be zero. The first property with
    value 0 is used. When there is none, a ``{EnumName}_AUTO_INVALID`` property
    is synthesized; it is not added to the enum.

    Args:
        enum: Enum to inspect.

    Returns:
        The zero property and the remaining properties in declaration order.
    """
    remaining = list(enum.properties)
    for index, prop in enumerate(remaining):
        if prop.value == 0:
            return remaining.pop(index), remaining

    logger.debug("Synthesizing zero value for enum %s", enum.short_name)
    zero = IREnumProperty(name=f"{enum.short_name}_{AUTO_INVALID_SUFFIX}", value=0)
    return zero, remaining


def _property_order(prop: IRClassProperty) -> int:
    return prop.options.property_order


class Proto3SchemaGenerator:
    """Renders IR namespaces, messages and enums as proto3 text lines."""

    def __init__(self: Self, include_references: bool = False) -> None:
        """Initialize the generator.

        Args:
            include_references: Whether to write a comment naming the original
                source type above each enum and message.
        """
        self.include_references = include_references

    def header_lines(self: Self, namespace: IRNamespace | None = None) -> list[str]:
        """Build the file header.

        Args:
            namespace: Namespace of the file, or None for a dump file, which
                declares no package.

        Returns:
            List of string lines.
        """
        lines = ['syntax = "proto3";']
        if namespace is not None:
            lines.append(f"package {resolve_package_name(namespace)};")
        lines.append("")
        lines.append(f"// {BANNER}")
        lines.append("")
        return lines

    def import_lines(self: Self, paths: Iterable[PurePath]) -> list[str]:
        """Build the import statements, ordered byte-wise, and a blank line."""
        formatted = sorted((path.as_posix() for path in paths), key=sort_key)
        lines = [f'import "{path}";' for path in formatted]
        lines.append("")
        return lines

    def types_to_lines(
        self: Self,
        nodes: Iterable[IRTypeNode],
        scope: MessageScope,
        prefix: str = "",
    ) -> list[str]:
        """Render a sequence of enums and messages in the given order.

        Args:
            nodes: Types to render.
            scope: Scope the types are declared in.
            prefix: Current indentation.

        Returns:
            List of string lines.
        """
        lines: list[str] = []
        for node in nodes:
            match node:
                case IREnum():
                    lines.extend(self.enum_to_lines(node, prefix))
                case IRClass():
                    lines.extend(self.message_to_lines(node, scope, prefix))
                case _:
                    assert_never(node)
        return lines

    def enum_to_lines(self: Self, enum: IREnum, prefix: str = "") -> list[str]:
        """Render an enum.

        The zero value comes first, then the other values by ascending value.
        Value names are prefixed with the enum name since proto enum values
        share the scope of the enclosing package or message.

        Args:
            enum: Enum to render.
            prefix: Current indentation.

        Returns:
            List of string lines.
        """
        inner = prefix + INDENT
        lines = self._reference_lines(enum, prefix)
        lines.append(f"{prefix}enum {enum.short_name} {{")

        if has_enum_alias(enum):
            lines.append(f"{inner}option allow_alias = true;")

        zero, remaining = split_zero_property(enum)
        for prop in (zero, *sorted(remaining, key=lambda prop: prop.value)):
            lines.append(f"{inner}{enum.short_name}_{prop.name} = {prop.value};")

        lines.append(f"{prefix}}}")
        lines.append("")
        return lines

    def message_to_lines(
        self: Self, cls: IRClass, scope: MessageScope, prefix: str = ""
    ) -> list[str]:
        """Render a message, its nested types and its fields.

        Args:
            cls: Message to render.
            scope: Scope enclosing the message.
            prefix: Current indentation.

        Returns:
            List of string lines.
        """
        inner = prefix + INDENT
        scope = scope.enter(cls.short_name)
        view = extract_oneof(cls)

        lines = self._reference_lines(cls, prefix)
        lines.append(f"{prefix}message {cls.short_name} {{")
        lines.extend(
            self.types_to_lines(enums_then_classes(view.private_types), scope, inner)
        )

        fields = sorted(view.flat_fields, key=_property_order)
        split = len(fields)
        if view.oneof_group:
            threshold = min(_property_order(prop) for prop in view.oneof_group)
            split = sum(1 for prop in fields if _property_order(prop) < threshold)

        before, after = fields[:split], fields[split:]

        lines.extend(self.field_to_string(prop, scope, inner) for prop in before)
        if view.oneof_group:
            lines.extend(self._oneof_to_lines(view.oneof_group, scope, inner))
        lines.extend(self.field_to_string(prop, scope, inner) for prop in after)

        lines.append(f"{prefix}}}")
        lines.append("")
        return lines

    def _oneof_to_lines(
        self: Self,
        group: Sequence[IRClassProperty],
        scope: MessageScope,
        prefix: str,
    ) -> list[str]:
        lines = [f"{prefix}oneof message {{"]
        lines.extend(
            self.field_to_string(prop, scope, prefix + INDENT, in_oneof=True)
            for prop in sorted(group, key=_property_order)
        )
        lines.append(f"{prefix}}}")
        return lines

    def field_to_string(
        self: Self,
        prop: IRClassProperty,
        scope: MessageScope,
        prefix: str = "",
        in_oneof: bool = False,
    ) -> str:
        """Render one field line.

        Proto3 has no required/optional keywords, so only repeated fields carry
        a label. Field names keep their original spelling apart from a lower
        case first letter. Repeated fields default to packed in proto3; an
        explicit ``[packed=false]`` is only written for oneof members.

        Args:
            prop: Field to render.
            scope: Scope of the enclosing message.
            prefix: Current indentation.
            in_oneof: Whether the field is part of the oneof block.

        Returns:
            The field line.
        """
        opts = prop.options
        is_repeated = opts.label is FieldLabel.REPEATED

        label = "repeated " if is_repeated else ""
        type_name = self.type_to_string(prop, scope)
        field_name = prop.name[:1].lower() + prop.name[1:]

        packed = ""
        if in_oneof and is_repeated and not opts.is_packed:
            packed = " [packed=false]"

        return (
            f"{prefix}{label}{type_name} {field_name} = "
            f"{opts.property_order}{packed};"
        )

    def type_to_string(self: Self, prop: IRClassProperty, scope: MessageScope) -> str:
        """Get the type name of a field as seen from the enclosing message.

        Scalars use their proto keyword. References into the same namespace
        drop the message scope they share with the enclosing message.
        References into another namespace are fully qualified with its package
        and a leading dot, so package lookup starts at the root.

        Args:
            prop: Field whose type is named.
            scope: Scope of the enclosing message.

        Returns:
            Type name.
        """
        ref = prop.referenced_type
        if ref is None:
            return prop.type.value

        if ref.namespace != scope.namespace:
            return f".{package_name_from(ref.namespace)}.{ref.path}"

        target = ref.scope
        shared = 0
        for own, other in zip(scope.path, target[:-1], strict=False):
            if own != other:
                break
            shared += 1
        return ".".join(target[shared:])

    def _reference_lines(self: Self, node: IRTypeNode, prefix: str) -> list[str]:
        if self.include_references and node.original_name:
            return [f"{prefix}// ref: {node.original_name}"]
        return []
