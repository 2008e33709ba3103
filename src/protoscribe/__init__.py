"""protoscribe - deterministic proto3 schema emission from a schema IR.

A package for rendering namespaces, messages and enums recovered from
compiled code into byte-stable proto3 files.
"""

from ._version import __version__
from .compiler import CompilerState, Proto3Compiler, compile_program
from .config import CompilerConfig, ConfigError, load_config
from .exceptions import (
    CompilerStateError,
    IRLoadError,
    NamespaceCollisionError,
    OutputWriteError,
    ProtoscribeError,
)
from .ir import (
    FieldLabel,
    FieldType,
    IRClass,
    IRClassProperty,
    IREnum,
    IREnumProperty,
    IRNamespace,
    IRProgram,
    IRTypeNode,
    PropertyOptions,
    TypeReference,
    load_program,
)
from .proto3_schema import Proto3SchemaGenerator

__all__ = [
    "CompilerConfig",
    "CompilerState",
    "CompilerStateError",
    "ConfigError",
    "FieldLabel",
    "FieldType",
    "IRClass",
    "IRClassProperty",
    "IREnum",
    "IREnumProperty",
    "IRLoadError",
    "IRNamespace",
    "IRProgram",
    "IRTypeNode",
    "NamespaceCollisionError",
    "OutputWriteError",
    "PropertyOptions",
    "Proto3Compiler",
    "Proto3SchemaGenerator",
    "ProtoscribeError",
    "TypeReference",
    "__version__",
    "compile_program",
    "load_config",
    "load_program",
]
