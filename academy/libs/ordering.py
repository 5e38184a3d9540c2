from typing import Any, Mapping, Sequence, TypeVar

T = TypeVar("T")


def move(items: Sequence[T], source: int, destination: int) -> list[T]:
    """Remove the item at ``source`` and reinsert it at ``destination``."""
    size = len(items)
    if not 0 <= source < size:
        raise ValueError(f"source index {source} out of range for {size} items")
    if not 0 <= destination < size:
        raise ValueError(f"destination index {destination} out of range for {size} items")
    result = list(items)
    moved = result.pop(source)
    result.insert(destination, moved)
    return result


def _get(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item[name]
    return getattr(item, name)


def renumber(items: Sequence[Any]) -> list[dict]:
    """Batch payload with positions 1..N in list order."""
    return [
        {
            "id": str(_get(item, "id")),
            "position": index,
            "type": getattr(_get(item, "type"), "value", _get(item, "type")),
        }
        for index, item in enumerate(items, start=1)
    ]


def reorder(items: Sequence[Any], source: int, destination: int) -> list[dict]:
    return renumber(move(items, source, destination))
