"""Class descriptors: read-only views of a class's methods and constructors."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional


class MethodKind(str, Enum):
    """How a method is bound when looked up on an instance."""

    INSTANCE = "instance"
    CLASS = "class"
    STATIC = "static"


@dataclass(frozen=True)
class MethodInfo:
    """A method declared by a class."""

    name: str
    parameter_types: tuple[str, ...] = ()
    declaring_class: str = ""
    return_type: str = "object"
    is_public: bool = True
    kind: MethodKind = MethodKind.INSTANCE
    expected: Optional[type[BaseException]] = None

    @property
    def arity(self) -> int:
        """Number of parameters, excluding the bound instance or class."""
        return len(self.parameter_types)


@dataclass(frozen=True)
class ConstructorInfo:
    """A way of constructing instances of a class."""

    parameter_types: tuple[str, ...] = ()
    is_public: bool = True
    factory: Optional[Callable[..., Any]] = field(default=None, compare=False)

    @property
    def arity(self) -> int:
        return len(self.parameter_types)


@dataclass(frozen=True)
class ClassDescriptor:
    """Reflected metadata for a class and its supertypes."""

    name: str
    qualified_name: str
    bases: tuple["ClassDescriptor", ...] = ()
    declared_methods: tuple[MethodInfo, ...] = ()
    constructors: tuple[ConstructorInfo, ...] = ()
    is_abstract: bool = False
    target: Optional[type] = field(default=None, compare=False)

    def lineage(self) -> tuple["ClassDescriptor", ...]:
        """Return this class followed by all of its supertypes, most-derived first.

        The order is the C3 linearisation of ``bases``, the same order Python
        uses for method resolution.
        """
        return tuple(_linearize(self))

    def all_methods(self) -> list[MethodInfo]:
        """Return the methods declared anywhere in the hierarchy.

        A method overridden in a subclass appears once for each class that
        declares it.
        """
        methods = []
        for descriptor in self.lineage():
            methods.extend(descriptor.declared_methods)
        return methods

    def is_subtype_of(self, qualified_name: str) -> bool:
        """Check whether this class is, or inherits from, the named class."""
        return any(d.qualified_name == qualified_name for d in self.lineage())

    def no_args_constructor(self) -> Optional[ConstructorInfo]:
        """Return the zero-argument constructor, if the class has one."""
        for constructor in self.constructors:
            if constructor.arity == 0:
                return constructor
        return None

    def __str__(self) -> str:
        return self.qualified_name


def _linearize(descriptor: ClassDescriptor) -> list[ClassDescriptor]:
    sequences = [_linearize(base) for base in descriptor.bases]
    sequences.append(list(descriptor.bases))
    result = [descriptor]

    while True:
        sequences = [seq for seq in sequences if seq]
        if not sequences:
            return result

        for seq in sequences:
            head = seq[0]
            in_tail = any(
                head.qualified_name == other.qualified_name
                for s in sequences
                for other in s[1:]
            )
            if not in_tail:
                break
        else:
            raise TypeError(
                f"Cannot create a consistent method resolution order for {descriptor}"
            )

        result.append(head)
        for seq in sequences:
            if seq[0].qualified_name == head.qualified_name:
                del seq[0]
