"""Oneof group derivation from a marker enum.

Messages decompiled from generated C# code carry a nested enum named
``MessageOneofCase`` listing the fields of their oneof. The view built here
pulls those fields out of the flat field list and hides the marker enum. The
class itself is never modified.
"""

from dataclasses import dataclass

from .ir import IRClass, IRClassProperty, IREnum, IRTypeNode

ONEOF_MARKER = "MessageOneofCase"


@dataclass(frozen=True)
class OneofView:
    """Fields and nested types of a message as they are emitted.

    Attributes:
        flat_fields: Fields outside of the oneof, in declaration order.
        oneof_group: Oneof members, in marker enum order.
        private_types: Nested types without the marker enum.
    """

    flat_fields: tuple[IRClassProperty, ...]
    oneof_group: tuple[IRClassProperty, ...] = ()
    private_types: tuple[IRTypeNode, ...] = ()


def _is_marker(node: IRTypeNode) -> bool:
    return isinstance(node, IREnum) and node.short_name == ONEOF_MARKER


def extract_oneof(cls: IRClass) -> OneofView:
    """Split the fields of a message into flat fields and its oneof group.

    Only the first marker enum is used to build the group. Any further marker
    enum is dropped from the view without grouping its fields. When several
    fields share a marker name, the first one joins the group.

    Args:
        cls: Message to inspect.

    Returns:
        The derived view.
    """
    marker = next((node for node in cls.private_types if _is_marker(node)), None)
    private_types = tuple(node for node in cls.private_types if not _is_marker(node))

    if not isinstance(marker, IREnum):
        return OneofView(tuple(cls.properties), (), private_types)

    remaining = list(cls.properties)
    group: list[IRClassProperty] = []
    for case in marker.properties:
        index = next(
            (i for i, prop in enumerate(remaining) if prop.name == case.name), None
        )
        if index is not None:
            group.append(remaining.pop(index))

    return OneofView(tuple(remaining), tuple(group), private_types)
