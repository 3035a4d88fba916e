"""Order bookkeeping for sibling entities (columns in a board, tasks in a column).

Two rules, nothing else:

* a new sibling is appended: ``max(order of existing siblings) + 1``, or 0 when there are none;
* a moved task gets the destination index written literally into ``order`` (and the destination
  column when it changes). Other siblings are never renumbered, so orders can have gaps and,
  after repeated moves, duplicates. Readers sort ties by creation time.
"""
import uuid
from typing import Callable


def next_order(max_order: int | None) -> int:
    if max_order is None:
        max_order = -1
    return max_order + 1


def resolve_move(
    current_column_id: uuid.UUID,
    destination_column_id: uuid.UUID | None,
    destination_order: int | None,
    append_order: Callable[[uuid.UUID], int],
) -> dict:
    """Return the field updates a move applies to the moved task.

    ``append_order`` is only called when the task changes column without an explicit order, in
    which case it lands at the end of the destination column.
    """
    updates = {}
    changes_column = (
        destination_column_id is not None and destination_column_id != current_column_id
    )

    if changes_column:
        updates["column_id"] = destination_column_id
        if destination_order is None:
            destination_order = append_order(destination_column_id)

    if destination_order is not None:
        updates["order"] = destination_order

    return updates
