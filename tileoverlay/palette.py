"""
The fixed colour palette of the canvas, and the reverse lookup used to
turn template colours into paintable slots.
"""

from typing import Iterable

import numpy as np
from pydantic import BaseModel


class PaletteEntry(BaseModel, frozen=True):
    slot: int
    name: str
    rgb: tuple[int, int, int]


COLOR_PALETTE = [
    PaletteEntry(slot=slot, name=name, rgb=rgb)
    for slot, (name, rgb) in enumerate(
        [
            ("Transparent", (0, 0, 0)),
            ("Black", (0, 0, 0)),
            ("Dark Gray", (60, 60, 60)),
            ("Gray", (120, 120, 120)),
            ("Light Gray", (210, 210, 210)),
            ("White", (255, 255, 255)),
            ("Deep Red", (96, 0, 24)),
            ("Red", (237, 28, 36)),
            ("Orange", (255, 127, 39)),
            ("Gold", (246, 170, 9)),
            ("Yellow", (249, 221, 59)),
            ("Light Yellow", (255, 250, 188)),
            ("Dark Green", (14, 185, 104)),
            ("Green", (19, 230, 123)),
            ("Light Green", (135, 255, 94)),
            ("Dark Teal", (12, 129, 110)),
            ("Teal", (16, 174, 166)),
            ("Light Teal", (19, 225, 190)),
            ("Dark Blue", (40, 80, 158)),
            ("Blue", (64, 147, 228)),
            ("Cyan", (96, 247, 242)),
            ("Indigo", (107, 80, 246)),
            ("Light Indigo", (153, 177, 251)),
            ("Dark Purple", (120, 12, 153)),
            ("Purple", (170, 56, 185)),
            ("Light Purple", (224, 159, 249)),
            ("Dark Pink", (203, 0, 122)),
            ("Pink", (236, 31, 128)),
            ("Light Pink", (243, 141, 169)),
            ("Dark Brown", (104, 70, 52)),
            ("Brown", (149, 104, 42)),
            ("Beige", (248, 178, 119)),
            ("Medium Gray", (170, 170, 170)),
            ("Dark Red", (165, 14, 30)),
            ("Light Red", (250, 128, 114)),
            ("Dark Orange", (228, 92, 26)),
            ("Light Tan", (214, 181, 148)),
            ("Dark Goldenrod", (156, 132, 49)),
            ("Goldenrod", (197, 173, 49)),
            ("Light Goldenrod", (232, 212, 95)),
            ("Dark Olive", (74, 107, 58)),
            ("Olive", (90, 148, 74)),
            ("Light Olive", (132, 197, 115)),
            ("Dark Cyan", (15, 121, 159)),
            ("Light Cyan", (187, 250, 242)),
            ("Light Blue", (125, 199, 255)),
            ("Dark Indigo", (77, 49, 184)),
            ("Dark Slate Blue", (74, 66, 132)),
            ("Slate Blue", (122, 113, 196)),
            ("Light Slate Blue", (181, 174, 241)),
            ("Light Brown", (219, 164, 99)),
            ("Dark Beige", (209, 128, 81)),
            ("Light Beige", (255, 197, 165)),
            ("Dark Peach", (155, 82, 73)),
            ("Peach", (209, 128, 120)),
            ("Light Peach", (250, 182, 164)),
            ("Dark Tan", (123, 99, 82)),
            ("Tan", (156, 132, 107)),
            ("Dark Slate", (51, 57, 65)),
            ("Slate", (109, 117, 141)),
            ("Light Slate", (179, 185, 209)),
            ("Dark Stone", (109, 100, 63)),
            ("Stone", (148, 140, 107)),
            ("Light Stone", (205, 197, 158)),
        ]
    )
]
"Ordered canvas palette. Slot 0 is transparent and is never painted."


def pack_rgb(rgb: np.ndarray) -> np.ndarray:
    """
    Pack the last (length 3) axis of an RGB array into single integers.
    """
    rgb = np.asarray(rgb, dtype=np.int64)
    return (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]


class PaletteIndex:
    """
    Reverse lookup from an exact RGB triple to its palette slot.

    Built once from an ordered palette and read-only afterwards. The
    transparent slot (0) is not indexed, and when two entries share an
    RGB value the lower slot wins.
    """

    entries: tuple[PaletteEntry, ...]

    def __init__(self, entries: Iterable[PaletteEntry] = COLOR_PALETTE):
        self.entries = tuple(entries)
        self._lookup: dict[tuple[int, int, int], int] = {}

        for entry in self.entries:
            if entry.slot == 0:
                continue
            self._lookup.setdefault(tuple(entry.rgb), entry.slot)

        keys = sorted(
            (int(pack_rgb(np.array(rgb))), slot) for rgb, slot in self._lookup.items()
        )
        self._packed = np.array([k for k, _ in keys], dtype=np.int64)
        self._slots = np.array([s for _, s in keys], dtype=np.int64)

    def __len__(self) -> int:
        return len(self._lookup)

    def lookup(self, r: int, g: int, b: int) -> int | None:
        return self._lookup.get((int(r), int(g), int(b)))

    def lookup_array(self, rgb: np.ndarray) -> np.ndarray:
        """
        Vectorised lookup.

        Parameters
        ----------
        rgb : np.ndarray
            Array with a trailing axis of length 3.

        Returns
        -------
        np.ndarray
            Slots with the shape of ``rgb[..., 0]``; 0 where the colour is
            not in the palette.
        """
        packed = pack_rgb(rgb)

        if len(self._packed) == 0:
            return np.zeros(packed.shape, dtype=np.int64)

        index = np.clip(np.searchsorted(self._packed, packed), 0, len(self._packed) - 1)
        found = self._packed[index] == packed

        return np.where(found, self._slots[index], 0)

    def rgb(self, slot: int) -> tuple[int, int, int]:
        for entry in self.entries:
            if entry.slot == slot:
                return entry.rgb

        raise KeyError(f"Slot {slot} not in palette")
