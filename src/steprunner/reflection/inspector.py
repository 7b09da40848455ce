"""Build class descriptors from live Python classes."""

import inspect
from typing import Any, Optional

from steprunner.reflection.descriptor import (
    ClassDescriptor,
    ConstructorInfo,
    MethodInfo,
    MethodKind,
)

EXPECTED_ATTRIBUTE = "__steprunner_expected__"


def expect(exception: type[BaseException]):
    """Mark a test method as passing only if it raises ``exception``.

    Example:
        class ParserTest(unittest.TestCase):
            @expect(ValueError)
            def test_rejects_garbage(self):
                parse("garbage")
    """

    def decorator(func):
        setattr(func, EXPECTED_ATTRIBUTE, exception)
        return func

    return decorator


def describe(cls: type) -> ClassDescriptor:
    """Describe a class and its whole supertype chain.

    Introspection is read-only and nothing is cached between calls.
    """
    if not inspect.isclass(cls):
        raise TypeError(f"Expected a class, got {cls!r}")
    return _describe(cls, {})


def _describe(cls: type, seen: dict[type, ClassDescriptor]) -> ClassDescriptor:
    if cls in seen:
        return seen[cls]

    qualified_name = type_name(cls)
    descriptor = ClassDescriptor(
        name=cls.__name__,
        qualified_name=qualified_name,
        bases=tuple(_describe(base, seen) for base in cls.__bases__),
        declared_methods=tuple(_declared_methods(cls, qualified_name)),
        constructors=tuple(_constructors(cls)),
        is_abstract=inspect.isabstract(cls),
        target=cls,
    )
    seen[cls] = descriptor
    return descriptor


def _declared_methods(cls: type, qualified_name: str) -> list[MethodInfo]:
    methods = []
    for name, member in vars(cls).items():
        if isinstance(member, classmethod):
            func, kind = member.__func__, MethodKind.CLASS
        elif isinstance(member, staticmethod):
            func, kind = member.__func__, MethodKind.STATIC
        elif inspect.isfunction(member):
            func, kind = member, MethodKind.INSTANCE
        else:
            continue

        signature = inspect.signature(func)
        parameters = list(signature.parameters.values())
        if kind is not MethodKind.STATIC and parameters:
            # Drop self / cls
            parameters = parameters[1:]

        methods.append(
            MethodInfo(
                name=name,
                parameter_types=tuple(_parameter_type(p) for p in parameters),
                declaring_class=qualified_name,
                return_type=_annotation_name(signature.return_annotation),
                is_public=not name.startswith("_"),
                kind=kind,
                expected=_expected_exception(func),
            )
        )
    return methods


def _constructors(cls: type) -> list[ConstructorInfo]:
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        # No introspectable signature, e.g. some builtins
        return []

    parameters = list(signature.parameters.values())
    constructors = [
        ConstructorInfo(
            parameter_types=tuple(_parameter_type(p) for p in parameters),
            factory=cls,
        )
    ]
    if parameters and all(_is_optional(p) for p in parameters):
        constructors.append(ConstructorInfo(parameter_types=(), factory=cls))
    return constructors


def _is_optional(parameter: inspect.Parameter) -> bool:
    return parameter.default is not inspect.Parameter.empty or parameter.kind in (
        inspect.Parameter.VAR_POSITIONAL,
        inspect.Parameter.VAR_KEYWORD,
    )


def _parameter_type(parameter: inspect.Parameter) -> str:
    name = _annotation_name(parameter.annotation)
    if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
        return "*" + name
    if parameter.kind is inspect.Parameter.VAR_KEYWORD:
        return "**" + name
    return name


def _annotation_name(annotation: Any) -> str:
    if annotation is inspect.Parameter.empty or annotation is inspect.Signature.empty:
        return "object"
    if annotation is None:
        return "None"
    if isinstance(annotation, str):
        return annotation
    if inspect.isclass(annotation):
        return type_name(annotation)
    return repr(annotation)


def _expected_exception(func: Any) -> Optional[type[BaseException]]:
    expected = getattr(func, EXPECTED_ATTRIBUTE, None)
    if expected is not None:
        return expected
    if getattr(func, "__unittest_expecting_failure__", False):
        return Exception
    return None


def type_name(cls: type) -> str:
    """Return the dotted name of a class, omitting the builtins module."""
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"
