import pytest

from academy.core.enum import ContentType
from academy.libs.ordering import move, renumber, reorder

ITEMS = [
    {"id": f"id-{i}", "type": ContentType.CHAPTER if i % 2 else ContentType.QUIZ}
    for i in range(5)
]


def test_move_forward_and_backward():
    assert move(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]
    assert move(["a", "b", "c", "d"], 3, 0) == ["d", "a", "b", "c"]
    assert move(["a", "b"], 1, 1) == ["a", "b"]


def test_every_move_renumbers_one_to_n():
    for source in range(len(ITEMS)):
        for destination in range(len(ITEMS)):
            payload = reorder(ITEMS, source, destination)
            assert [p["position"] for p in payload] == [1, 2, 3, 4, 5]
            assert sorted(p["id"] for p in payload) == sorted(i["id"] for i in ITEMS)
            assert payload[destination]["id"] == ITEMS[source]["id"]


def test_renumber_emits_type_values():
    payload = renumber(ITEMS[:2])
    assert payload == [
        {"id": "id-0", "position": 1, "type": "quiz"},
        {"id": "id-1", "position": 2, "type": "chapter"},
    ]


@pytest.mark.parametrize("source,destination", [(-1, 0), (0, 5), (5, 0)])
def test_out_of_range_raises(source, destination):
    with pytest.raises(ValueError):
        move(ITEMS, source, destination)
