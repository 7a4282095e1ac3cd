import random

import pytest

from tileoverlay.processing.diff import DiffEntry
from tileoverlay.processing.spiral import order, spiral_coordinates


def entry(x, y, slot=1):
    return DiffEntry(tile_pixel_x=x, tile_pixel_y=y, template_x=x, template_y=y, slot=slot)


def coordinates(entries):
    return [(e.template_x, e.template_y) for e in entries]


def test_empty_and_singleton_unchanged():
    assert order([], 5, 5) == []

    single = entry(3, 2)
    assert order([single], 5, 5) == [single]


def test_two_by_two_is_clockwise_from_top_left():
    entries = [entry(0, 0), entry(1, 0), entry(0, 1), entry(1, 1)]

    assert coordinates(order(entries, 2, 2)) == [(0, 0), (1, 0), (1, 1), (0, 1)]


def test_three_by_three_spirals_inwards():
    entries = [entry(x, y) for y in range(3) for x in range(3)]

    assert coordinates(order(entries, 3, 3)) == [
        (0, 0),
        (1, 0),
        (2, 0),
        (2, 1),
        (2, 2),
        (1, 2),
        (0, 2),
        (0, 1),
        (1, 1),
    ]


def test_missing_coordinates_are_skipped():
    entries = [entry(1, 1), entry(0, 0), entry(2, 2)]

    assert coordinates(order(entries, 3, 3)) == [(0, 0), (2, 2), (1, 1)]


@pytest.mark.parametrize("width,height", [(1, 1), (1, 7), (7, 1), (4, 6), (6, 4), (5, 5)])
def test_spiral_visits_every_coordinate_once(width, height):
    visited = list(spiral_coordinates(width, height))

    assert len(visited) == width * height
    assert set(visited) == {(x, y) for x in range(width) for y in range(height)}


@pytest.mark.parametrize("width,height", [(1, 9), (9, 1), (8, 5), (13, 13)])
def test_order_is_a_permutation_independent_of_input_order(width, height):
    rng = random.Random(width * 100 + height)
    present = [
        (x, y) for x in range(width) for y in range(height) if rng.random() < 0.6
    ]
    entries = [entry(x, y, slot=rng.randint(1, 63)) for x, y in present]

    shuffled = entries[:]
    rng.shuffle(shuffled)

    ordered = order(entries, width, height)

    assert sorted(ordered) == sorted(entries)
    assert order(shuffled, width, height) == ordered


def test_shared_coordinates_keep_input_order():
    first = entry(0, 0, slot=1)
    second = entry(0, 0, slot=2)

    assert order([entry(1, 0), first, second], 2, 1) == [first, second, entry(1, 0)]


def test_entries_outside_rectangle_are_kept():
    inside = entry(0, 0)
    outside = entry(5, 5)

    assert order([outside, inside], 2, 2) == [inside, outside]
