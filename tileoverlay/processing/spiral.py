"""
Outside-in rectangular spiral ordering of a correction queue.

Painting in this order draws the outline of a template first, so partial
progress is recognisable straight away.
"""

from collections import defaultdict
from typing import Iterator, Sequence

import structlog

from .diff import DiffEntry


def spiral_coordinates(width: int, height: int) -> Iterator[tuple[int, int]]:
    """
    Yield every (x, y) of a width x height rectangle, clockwise from the
    top-left corner and shrinking inwards.
    """
    top, bottom = 0, height - 1
    left, right = 0, width - 1

    while top <= bottom and left <= right:
        for x in range(left, right + 1):
            yield x, top
        top += 1

        for y in range(top, bottom + 1):
            yield right, y
        right -= 1

        if top <= bottom:
            for x in range(right, left - 1, -1):
                yield x, bottom
            bottom -= 1

        if left <= right:
            for y in range(bottom, top - 1, -1):
                yield left, y
            left += 1


def order(entries: Sequence[DiffEntry], width: int, height: int) -> list[DiffEntry]:
    """
    Reorder diff entries into spiral order over the template's rectangle.

    Parameters
    ----------
    entries : Sequence[DiffEntry]
        Corrections for a single template.
    width : int
        Template width.
    height : int
        Template height.

    Returns
    -------
    list[DiffEntry]
        A permutation of ``entries``. Entries sharing a template coordinate
        keep their relative order; entries outside the rectangle (which a
        correct diff never produces) follow in row-major order.
    """

    if len(entries) <= 1:
        return list(entries)

    log = structlog.get_logger()
    log = log.bind(entries=len(entries), width=width, height=height)

    pending: dict[tuple[int, int], list[DiffEntry]] = defaultdict(list)

    for entry in entries:
        pending[(entry.template_x, entry.template_y)].append(entry)

    ordered = []

    for coordinate in spiral_coordinates(width, height):
        found = pending.pop(coordinate, None)

        if found is not None:
            ordered.extend(found)

        if not pending:
            break

    if pending:
        log.warning("spiral.outside_bounds", remaining=len(pending))
        for coordinate in sorted(pending, key=lambda c: (c[1], c[0])):
            ordered.extend(pending[coordinate])

    log.debug("spiral.ordered")

    return ordered
