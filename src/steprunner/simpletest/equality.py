"""A set that keeps one element per equivalence class."""

from typing import Callable, Generic, Iterable, Iterator, TypeVar

from steprunner.simpletest.method import TestMethod

T = TypeVar("T")

EqualityStrategy = Callable[[T, T], bool]


class SignatureEqualityStrategy:
    """Treats test methods with the same name and parameter types as equal."""

    def __call__(self, a: TestMethod, b: TestMethod) -> bool:
        return a.signature == b.signature


class EqualitySet(Generic[T]):
    """Insertion-ordered collection holding at most one element per equivalence class.

    Equivalence is decided by the injected strategy rather than by ``__eq__``
    and ``__hash__``. The first element added for a class is kept; later
    equal elements are discarded.
    """

    def __init__(self, strategy: EqualityStrategy, items: Iterable[T] = ()):
        self.strategy = strategy
        self._members: list[T] = []
        for item in items:
            self.add(item)

    def add(self, item: T) -> bool:
        """Add an item unless an equal one is present. Returns True if added."""
        if item in self:
            return False
        self._members.append(item)
        return True

    def __contains__(self, item: object) -> bool:
        return any(self.strategy(member, item) for member in self._members)

    def __iter__(self) -> Iterator[T]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def to_list(self) -> list[T]:
        """Return the members in insertion order."""
        return list(self._members)
