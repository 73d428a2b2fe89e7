"""Ordered collection of values keyed by their ``id`` attribute."""

from typing import Any, Dict, Generic, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class IdentifiedArray(Generic[T]):
    """An ordered map of elements keyed by ``element.id``.

    Iteration and integer indexing follow the element order; lookups by id
    are O(1). Ids are unique: building an array from elements that repeat an
    id raises ``ValueError`` (use ``deduplicated`` for untrusted input).

    Instances are treated as values by the reducers: every mutating helper is
    applied to a ``copy()``.
    """

    def __init__(self, elements: Iterable[T] = ()) -> None:
        self._elements: Dict[Any, T] = {}
        for element in elements:
            if element.id in self._elements:  # type: ignore[attr-defined]
                raise ValueError(f"Duplicate id in identified array: {element.id}")  # type: ignore[attr-defined]
            self._elements[element.id] = element  # type: ignore[attr-defined]

    @classmethod
    def deduplicated(cls, elements: Iterable[T]) -> "IdentifiedArray[T]":
        """Builds an array keeping the first element seen for every id."""
        array: IdentifiedArray[T] = cls()
        for element in elements:
            array._elements.setdefault(element.id, element)  # type: ignore[attr-defined]
        return array

    def copy(self) -> "IdentifiedArray[T]":
        array: IdentifiedArray[T] = type(self)()
        array._elements = dict(self._elements)
        return array

    @property
    def ids(self) -> List[Any]:
        return list(self._elements)

    @property
    def elements(self) -> List[T]:
        return list(self._elements.values())

    def get(self, element_id: Any) -> Optional[T]:
        return self._elements.get(element_id)

    def index_of(self, element_id: Any) -> Optional[int]:
        for index, key in enumerate(self._elements):
            if key == element_id:
                return index
        return None

    def upsert(self, element: T) -> bool:
        """Replaces the element with the same id in place, or appends it.

        Returns:
            True if the element was appended, False if it replaced one.
        """
        inserted = element.id not in self._elements  # type: ignore[attr-defined]
        self._elements[element.id] = element  # type: ignore[attr-defined]
        return inserted

    def remove(self, element_id: Any) -> Optional[T]:
        return self._elements.pop(element_id, None)

    def ids_at(self, offsets: Iterable[int]) -> List[Any]:
        """Resolves positional offsets to ids, in ascending offset order.

        Raises:
            IndexError: If an offset is outside the array.
        """
        keys = self.ids
        resolved = []
        for offset in sorted(set(offsets)):
            if not 0 <= offset < len(keys):
                raise IndexError(f"Offset {offset} out of range for {len(keys)} elements")
            resolved.append(keys[offset])
        return resolved

    def sorted(self, key: Any) -> "IdentifiedArray[T]":
        return type(self)(sorted(self._elements.values(), key=key))

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._elements

    def __getitem__(self, offset: int) -> T:
        return self.elements[offset]

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._elements.values()))

    def __len__(self) -> int:
        return len(self._elements)

    def __bool__(self) -> bool:
        return bool(self._elements)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IdentifiedArray):
            return self.elements == other.elements
        return NotImplemented

    def __repr__(self) -> str:
        return f"IdentifiedArray({self.elements!r})"
