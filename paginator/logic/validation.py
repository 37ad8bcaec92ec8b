"""Shape validation for selection and order request bodies.

Bodies are accepted as plain JSON values so that malformed shapes surface as
``InvalidInputError`` (HTTP 400) rather than framework validation errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Union

from paginator.logic.errors import InvalidInputError

INVALID_FORMAT = "Invalid data format"


@dataclass(frozen=True)
class MoveCommand:
    from_id: int
    to_id: int


@dataclass(frozen=True)
class ReplaceCommand:
    order: List[int]


def is_item_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def require_id_list(value: Any, field: str) -> List[int]:
    """Return ``value`` as a list of ids or raise InvalidInputError."""
    if not isinstance(value, list):
        raise InvalidInputError(INVALID_FORMAT, {"field": field})
    bad = [v for v in value if not is_item_id(v)]
    if bad:
        raise InvalidInputError(
            f"{field} must contain only positive integer ids",
            {"field": field, "invalidValues": bad[:10]},
        )
    return list(value)


def parse_selection_payload(payload: Any) -> List[int]:
    if not isinstance(payload, dict):
        raise InvalidInputError(INVALID_FORMAT, {"field": "selectedIds"})
    return require_id_list(payload.get("selectedIds"), "selectedIds")


def parse_order_payload(payload: Any) -> Union[MoveCommand, ReplaceCommand]:
    """Classify an order body as a single move or a bulk replace.

    A body carrying both ``fromId`` and ``toId`` is a move; otherwise a
    non-empty ``order`` array is a replace.
    """
    if not isinstance(payload, dict):
        raise InvalidInputError(INVALID_FORMAT)
    from_id = payload.get("fromId")
    to_id = payload.get("toId")
    if from_id is not None and to_id is not None:
        if not (is_item_id(from_id) and is_item_id(to_id)):
            raise InvalidInputError(
                "fromId and toId must be positive integer ids",
                {"fromId": from_id, "toId": to_id},
            )
        return MoveCommand(from_id=from_id, to_id=to_id)
    order = payload.get("order")
    if isinstance(order, list) and order:
        return ReplaceCommand(order=require_id_list(order, "order"))
    raise InvalidInputError(INVALID_FORMAT)


__all__ = [
    "INVALID_FORMAT",
    "MoveCommand",
    "ReplaceCommand",
    "is_item_id",
    "require_id_list",
    "parse_selection_payload",
    "parse_order_payload",
]
