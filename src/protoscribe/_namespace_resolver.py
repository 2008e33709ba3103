"""Mapping of namespaces to proto packages, file paths and imports.

All helpers are pure: configuration such as the package-structured flag is
passed explicitly.
"""

from collections.abc import Iterable, Iterator
from pathlib import PurePosixPath

from .exceptions import NamespaceCollisionError
from .ir import FieldType, IRClass, IRNamespace

PROTO_EXTENSION = ".proto"


def package_name_from(namespace_name: str) -> str:
    """Convert a namespace name to a dotted proto package name.

    Args:
        namespace_name: Namespace name, e.g. "Bnet.Protocol.Account".

    Returns:
        Package name, e.g. "bnet.protocol.account".
    """
    return ".".join(part.lower() for part in namespace_name.split(".") if part)


def resolve_package_name(namespace: IRNamespace) -> str:
    """Get the proto package name of a namespace."""
    return package_name_from(namespace.name)


def resolve_file_path(
    namespace: IRNamespace, package_structured: bool
) -> PurePosixPath:
    """Get the output path of a namespace, relative to the output root.

    Args:
        namespace: Namespace to map.
        package_structured: Nest files in one directory per package segment
            (True) or place every file in the output root (False).

    Returns:
        Relative path including the ``.proto`` extension.
    """
    package = resolve_package_name(namespace)
    if package_structured:
        *folders, file_stem = package.split(".")
        return PurePosixPath(*folders, file_stem + PROTO_EXTENSION)
    return PurePosixPath(package + PROTO_EXTENSION)


def resolve_file_paths(
    namespaces: Iterable[IRNamespace],
    package_structured: bool,
) -> dict[str, PurePosixPath]:
    """Map every namespace to its output path.

    Args:
        namespaces: Namespaces in emission order.
        package_structured: See ``resolve_file_path``.

    Returns:
        Namespace name to relative path, in the order of ``namespaces``.

    Raises:
        NamespaceCollisionError: If two namespaces share an output path.
    """
    paths: dict[str, PurePosixPath] = {}
    owners: dict[PurePosixPath, str] = {}

    for namespace in namespaces:
        path = resolve_file_path(namespace, package_structured)
        if path in owners:
            raise NamespaceCollisionError(path, owners[path], namespace.name)
        owners[path] = namespace.name
        paths[namespace.name] = path

    return paths


def iter_classes(classes: Iterable[IRClass]) -> Iterator[IRClass]:
    """Yield the given classes and all classes nested inside them."""
    for cls in classes:
        yield cls
        yield from iter_classes(
            nested for nested in cls.private_types if isinstance(nested, IRClass)
        )


def resolve_imports(namespace: IRNamespace) -> set[str]:
    """Find the namespaces referenced by fields of a namespace.

    Args:
        namespace: Namespace to scan, including nested messages.

    Returns:
        Names of referenced namespaces, excluding ``namespace`` itself.
    """
    imports: set[str] = set()
    for cls in iter_classes(namespace.classes):
        for prop in cls.properties:
            if prop.type is FieldType.TYPE_REFERENCE and prop.referenced_type:
                imports.add(prop.referenced_type.namespace)

    imports.discard(namespace.name)
    return imports
