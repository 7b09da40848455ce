"""Reflection over classes, methods and constructors."""

from steprunner.reflection.descriptor import (
    ClassDescriptor,
    ConstructorInfo,
    MethodInfo,
    MethodKind,
)
from steprunner.reflection.inspector import describe, expect, type_name

__all__ = [
    "ClassDescriptor",
    "ConstructorInfo",
    "MethodInfo",
    "MethodKind",
    "describe",
    "expect",
    "type_name",
]
