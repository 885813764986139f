"""Bank of known marker signatures (radius ratios) and identification against it."""

from __future__ import annotations

import math
import re
from typing import Sequence

_THRESHOLD = 0.6

_ID_THREE_CROWNS: tuple[tuple[float, ...], ...] = (
    (2.000000, 1.666667, 1.428571, 1.250000, 1.111111),
    (2.222222, 1.666667, 1.428571, 1.250000, 1.111111),
    (2.222222, 1.818182, 1.428571, 1.250000, 1.111111),
    (2.500000, 1.818182, 1.428571, 1.250000, 1.111111),
    (2.222222, 1.818182, 1.538462, 1.250000, 1.111111),
    (2.500000, 1.818182, 1.538462, 1.250000, 1.111111),
    (2.500000, 2.000000, 1.538462, 1.250000, 1.111111),
    (2.857143, 2.000000, 1.538462, 1.250000, 1.111111),
    (2.222222, 1.818182, 1.538462, 1.333333, 1.111111),
    (2.500000, 1.818182, 1.538462, 1.333333, 1.111111),
    (2.500000, 2.000000, 1.538462, 1.333333, 1.111111),
    (2.857143, 2.000000, 1.538462, 1.333333, 1.111111),
    (2.500000, 2.000000, 1.666667, 1.333333, 1.111111),
    (2.857143, 2.000000, 1.666667, 1.333333, 1.111111),
    (2.857143, 2.222222, 1.666667, 1.333333, 1.111111),
    (3.333333, 2.222222, 1.666667, 1.333333, 1.111111),
    (2.222222, 1.818182, 1.538462, 1.333333, 1.176471),
    (2.500000, 1.818182, 1.538462, 1.333333, 1.176471),
    (2.500000, 2.000000, 1.538462, 1.333333, 1.176471),
    (2.857143, 2.000000, 1.538462, 1.333333, 1.176471),
    (2.500000, 2.000000, 1.666667, 1.333333, 1.176471),
    (2.857143, 2.000000, 1.666667, 1.333333, 1.176471),
    (2.857143, 2.222222, 1.666667, 1.333333, 1.176471),
    (3.333333, 2.222222, 1.666667, 1.333333, 1.176471),
    (2.500000, 2.000000, 1.666667, 1.428571, 1.176471),
    (2.857143, 2.000000, 1.666667, 1.428571, 1.176471),
    (2.857143, 2.222222, 1.666667, 1.428571, 1.176471),
    (3.333333, 2.222222, 1.666667, 1.428571, 1.176471),
    (2.857143, 2.222222, 1.818182, 1.428571, 1.176471),
    (3.333333, 2.222222, 1.818182, 1.428571, 1.176471),
    (3.333333, 2.500000, 1.818182, 1.428571, 1.176471),
    (4.000000, 2.500000, 1.818182, 1.428571, 1.176471),
)

_ID_FOUR_CROWNS: tuple[tuple[float, ...], ...] = (
    (2.272727, 1.923077, 1.666667, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.500000, 1.923077, 1.666667, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.500000, 2.083333, 1.666667, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.777778, 2.083333, 1.666667, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.500000, 2.083333, 1.785714, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.777778, 2.083333, 1.785714, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.777778, 2.272727, 1.785714, 1.470588, 1.315789, 1.190476, 1.086957),
    (3.125000, 2.272727, 1.785714, 1.470588, 1.315789, 1.190476, 1.086957),
    (2.500000, 2.083333, 1.785714, 1.562500, 1.315789, 1.190476, 1.086957),
    (2.777778, 2.083333, 1.785714, 1.562500, 1.315789, 1.190476, 1.086957),
    (2.777778, 2.272727, 1.785714, 1.562500, 1.315789, 1.190476, 1.086957),
    (3.125000, 2.272727, 1.785714, 1.562500, 1.315789, 1.190476, 1.086957),
    (2.777778, 2.272727, 1.923077, 1.562500, 1.315789, 1.190476, 1.086957),
    (3.125000, 2.272727, 1.923077, 1.562500, 1.315789, 1.190476, 1.086957),
    (3.125000, 2.500000, 1.923077, 1.562500, 1.315789, 1.190476, 1.086957),
    (3.571429, 2.500000, 1.923077, 1.562500, 1.315789, 1.190476, 1.086957),
    (2.500000, 2.083333, 1.785714, 1.562500, 1.388889, 1.190476, 1.086957),
    (2.777778, 2.083333, 1.785714, 1.562500, 1.388889, 1.190476, 1.086957),
    (2.777778, 2.272727, 1.785714, 1.562500, 1.388889, 1.190476, 1.086957),
    (3.125000, 2.272727, 1.785714, 1.562500, 1.388889, 1.190476, 1.086957),
    (2.777778, 2.272727, 1.923077, 1.562500, 1.388889, 1.190476, 1.086957),
    (3.125000, 2.272727, 1.923077, 1.562500, 1.388889, 1.190476, 1.086957),
    (3.125000, 2.500000, 1.923077, 1.562500, 1.388889, 1.190476, 1.086957),
    (3.571429, 2.500000, 1.923077, 1.562500, 1.388889, 1.190476, 1.086957),
    (2.777778, 2.272727, 1.923077, 1.666667, 1.388889, 1.190476, 1.086957),
    (3.125000, 2.272727, 1.923077, 1.666667, 1.388889, 1.190476, 1.086957),
    (3.125000, 2.500000, 1.923077, 1.666667, 1.388889, 1.190476, 1.086957),
    (3.571429, 2.500000, 1.923077, 1.666667, 1.388889, 1.190476, 1.086957),
    (3.125000, 2.500000, 2.083333, 1.666667, 1.388889, 1.190476, 1.086957),
    (3.571429, 2.500000, 2.083333, 1.666667, 1.388889, 1.190476, 1.086957),
    (3.571429, 2.777778, 2.083333, 1.666667, 1.388889, 1.190476, 1.086957),
    (4.166667, 2.777778, 2.083333, 1.666667, 1.388889, 1.190476, 1.086957),
    (2.500000, 2.083333, 1.785714, 1.562500, 1.388889, 1.250000, 1.086957),
    (2.777778, 2.083333, 1.785714, 1.562500, 1.388889, 1.250000, 1.086957),
    (2.777778, 2.272727, 1.785714, 1.562500, 1.388889, 1.250000, 1.086957),
    (3.125000, 2.272727, 1.785714, 1.562500, 1.388889, 1.250000, 1.086957),
    (2.777778, 2.272727, 1.923077, 1.562500, 1.388889, 1.250000, 1.086957),
    (3.125000, 2.272727, 1.923077, 1.562500, 1.388889, 1.250000, 1.086957),
    (3.125000, 2.500000, 1.923077, 1.562500, 1.388889, 1.250000, 1.086957),
    (3.571429, 2.500000, 1.923077, 1.562500, 1.388889, 1.250000, 1.086957),
    (2.777778, 2.272727, 1.923077, 1.666667, 1.388889, 1.250000, 1.086957),
    (3.125000, 2.272727, 1.923077, 1.666667, 1.388889, 1.250000, 1.086957),
    (3.125000, 2.500000, 1.923077, 1.666667, 1.388889, 1.250000, 1.086957),
    (3.571429, 2.500000, 1.923077, 1.666667, 1.388889, 1.250000, 1.086957),
    (3.125000, 2.500000, 2.083333, 1.666667, 1.388889, 1.250000, 1.086957),
    (3.571429, 2.500000, 2.083333, 1.666667, 1.388889, 1.250000, 1.086957),
    (3.571429, 2.777778, 2.083333, 1.666667, 1.388889, 1.250000, 1.086957),
    (4.166667, 2.777778, 2.083333, 1.666667, 1.388889, 1.250000, 1.086957),
    (2.777778, 2.272727, 1.923077, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.125000, 2.272727, 1.923077, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.125000, 2.500000, 1.923077, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.571429, 2.500000, 1.923077, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.125000, 2.500000, 2.083333, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.571429, 2.500000, 2.083333, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.571429, 2.777778, 2.083333, 1.666667, 1.470588, 1.250000, 1.086957),
    (4.166667, 2.777778, 2.083333, 1.666667, 1.470588, 1.250000, 1.086957),
    (3.125000, 2.500000, 2.083333, 1.785714, 1.470588, 1.250000, 1.086957),
    (3.571429, 2.500000, 2.083333, 1.785714, 1.470588, 1.250000, 1.086957),
    (3.571429, 2.777778, 2.083333, 1.785714, 1.470588, 1.250000, 1.086957),
    (4.166667, 2.777778, 2.083333, 1.785714, 1.470588, 1.250000, 1.086957),
    (3.571429, 2.777778, 2.272727, 1.785714, 1.470588, 1.250000, 1.086957),
    (4.166667, 2.777778, 2.272727, 1.785714, 1.470588, 1.250000, 1.086957),
    (4.166667, 3.125000, 2.272727, 1.785714, 1.470588, 1.250000, 1.086957),
    (5.000000, 3.125000, 2.272727, 1.785714, 1.470588, 1.250000, 1.086957),
    (2.500000, 2.083333, 1.785714, 1.562500, 1.388889, 1.250000, 1.136364),
    (2.777778, 2.083333, 1.785714, 1.562500, 1.388889, 1.250000, 1.136364),
    (2.777778, 2.272727, 1.785714, 1.562500, 1.388889, 1.250000, 1.136364),
    (3.125000, 2.272727, 1.785714, 1.562500, 1.388889, 1.250000, 1.136364),
    (2.777778, 2.272727, 1.923077, 1.562500, 1.388889, 1.250000, 1.136364),
    (3.125000, 2.272727, 1.923077, 1.562500, 1.388889, 1.250000, 1.136364),
    (3.125000, 2.500000, 1.923077, 1.562500, 1.388889, 1.250000, 1.136364),
    (3.571429, 2.500000, 1.923077, 1.562500, 1.388889, 1.250000, 1.136364),
    (2.777778, 2.272727, 1.923077, 1.666667, 1.388889, 1.250000, 1.136364),
    (3.125000, 2.272727, 1.923077, 1.666667, 1.388889, 1.250000, 1.136364),
    (3.125000, 2.500000, 1.923077, 1.666667, 1.388889, 1.250000, 1.136364),
    (3.571429, 2.500000, 1.923077, 1.666667, 1.388889, 1.250000, 1.136364),
    (3.125000, 2.500000, 2.083333, 1.666667, 1.388889, 1.250000, 1.136364),
    (3.571429, 2.500000, 2.083333, 1.666667, 1.388889, 1.250000, 1.136364),
    (3.571429, 2.777778, 2.083333, 1.666667, 1.388889, 1.250000, 1.136364),
    (4.166667, 2.777778, 2.083333, 1.666667, 1.388889, 1.250000, 1.136364),
    (2.777778, 2.272727, 1.923077, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.125000, 2.272727, 1.923077, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.125000, 2.500000, 1.923077, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.571429, 2.500000, 1.923077, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.125000, 2.500000, 2.083333, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.571429, 2.500000, 2.083333, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.571429, 2.777778, 2.083333, 1.666667, 1.470588, 1.250000, 1.136364),
    (4.166667, 2.777778, 2.083333, 1.666667, 1.470588, 1.250000, 1.136364),
    (3.125000, 2.500000, 2.083333, 1.785714, 1.470588, 1.250000, 1.136364),
    (3.571429, 2.500000, 2.083333, 1.785714, 1.470588, 1.250000, 1.136364),
    (3.571429, 2.777778, 2.083333, 1.785714, 1.470588, 1.250000, 1.136364),
    (4.166667, 2.777778, 2.083333, 1.785714, 1.470588, 1.250000, 1.136364),
    (3.571429, 2.777778, 2.272727, 1.785714, 1.470588, 1.250000, 1.136364),
    (4.166667, 2.777778, 2.272727, 1.785714, 1.470588, 1.250000, 1.136364),
    (4.166667, 3.125000, 2.272727, 1.785714, 1.470588, 1.250000, 1.136364),
    (5.000000, 3.125000, 2.272727, 1.785714, 1.470588, 1.250000, 1.136364),
    (2.777778, 2.272727, 1.923077, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.125000, 2.272727, 1.923077, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.125000, 2.500000, 1.923077, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.571429, 2.500000, 1.923077, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.125000, 2.500000, 2.083333, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.571429, 2.500000, 2.083333, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.571429, 2.777778, 2.083333, 1.666667, 1.470588, 1.315789, 1.136364),
    (4.166667, 2.777778, 2.083333, 1.666667, 1.470588, 1.315789, 1.136364),
    (3.125000, 2.500000, 2.083333, 1.785714, 1.470588, 1.315789, 1.136364),
    (3.571429, 2.500000, 2.083333, 1.785714, 1.470588, 1.315789, 1.136364),
    (3.571429, 2.777778, 2.083333, 1.785714, 1.470588, 1.315789, 1.136364),
    (4.166667, 2.777778, 2.083333, 1.785714, 1.470588, 1.315789, 1.136364),
    (3.571429, 2.777778, 2.272727, 1.785714, 1.470588, 1.315789, 1.136364),
    (4.166667, 2.777778, 2.272727, 1.785714, 1.470588, 1.315789, 1.136364),
    (4.166667, 3.125000, 2.272727, 1.785714, 1.470588, 1.315789, 1.136364),
    (5.000000, 3.125000, 2.272727, 1.785714, 1.470588, 1.315789, 1.136364),
    (3.125000, 2.500000, 2.083333, 1.785714, 1.562500, 1.315789, 1.136364),
    (3.571429, 2.500000, 2.083333, 1.785714, 1.562500, 1.315789, 1.136364),
    (3.571429, 2.777778, 2.083333, 1.785714, 1.562500, 1.315789, 1.136364),
    (4.166667, 2.777778, 2.083333, 1.785714, 1.562500, 1.315789, 1.136364),
    (3.571429, 2.777778, 2.272727, 1.785714, 1.562500, 1.315789, 1.136364),
    (4.166667, 2.777778, 2.272727, 1.785714, 1.562500, 1.315789, 1.136364),
    (4.166667, 3.125000, 2.272727, 1.785714, 1.562500, 1.315789, 1.136364),
    (5.000000, 3.125000, 2.272727, 1.785714, 1.562500, 1.315789, 1.136364),
    (3.571429, 2.777778, 2.272727, 1.923077, 1.562500, 1.315789, 1.136364),
    (4.166667, 2.777778, 2.272727, 1.923077, 1.562500, 1.315789, 1.136364),
    (4.166667, 3.125000, 2.272727, 1.923077, 1.562500, 1.315789, 1.136364),
    (5.000000, 3.125000, 2.272727, 1.923077, 1.562500, 1.315789, 1.136364),
    (4.166667, 3.125000, 2.500000, 1.923077, 1.562500, 1.315789, 1.136364),
    (5.000000, 3.125000, 2.500000, 1.923077, 1.562500, 1.315789, 1.136364),
    (5.000000, 3.571429, 2.500000, 1.923077, 1.562500, 1.315789, 1.136364),
    (6.250000, 3.571429, 2.500000, 1.923077, 1.562500, 1.315789, 1.136364),
)

_FRACTION = re.compile(r"(\d+)\s*/\s*(\d+)")
_NUMBER = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


class IdentificationError(RuntimeError):
    """Raised when no bank entry lies close enough to a measured marker."""


def _divide(num: int, den: int) -> float:
    if den == 0:
        return math.nan if num == 0 else math.inf
    return num / den


def parse_bank_line(line: str) -> list[float]:
    """Parse the numbers on one bank line.

    Each item is either a fraction ``p/q`` of unsigned integers or a decimal
    number; items are separated by whitespace. Parsing stops at the first item
    that is neither, and the values read until then are returned.
    """
    values: list[float] = []
    pos = 0
    length = len(line)
    while True:
        while pos < length and line[pos].isspace():
            pos += 1
        if pos >= length:
            break
        match = _FRACTION.match(line, pos)
        if match:
            values.append(_divide(int(match.group(1)), int(match.group(2))))
            pos = match.end()
            continue
        match = _NUMBER.match(line, pos)
        if match:
            values.append(float(match.group(0)))
            pos = match.end()
            continue
        break
    return values


class MarkersBank:
    """The radius-ratio signatures of every known marker."""

    def __init__(self, n_crowns):
        if n_crowns == 3:
            table = _ID_THREE_CROWNS
        elif n_crowns == 4:
            table = _ID_FOUR_CROWNS
        else:
            table = ()
        self.markers: list[list[float]] = [list(row) for row in table]

    @classmethod
    def from_file(cls, path) -> "MarkersBank":
        """Build a bank holding only the signatures read from ``path``."""
        bank = cls(0)
        bank.read(path)
        return bank

    def read(self, path) -> None:
        """Append the signatures of every non-empty line of ``path``."""
        try:
            with open(path, encoding="utf-8") as handle:
                lines = handle.read().splitlines()
        except OSError as exc:
            raise OSError(f"Unable to open the bank file: {path}") from exc
        for line in lines:
            values = parse_bank_line(line)
            if values:
                self.markers.append(values)

    def identify(self, marker: Sequence[float]) -> int:
        """Return the 1-based index of the closest signature.

        Distances are Euclidean over the common prefix of both vectors; the
        first of equally close signatures wins. Raises IdentificationError
        when the closest one lies farther than 0.6.
        """
        best_index = 0
        best_norm = math.inf
        for index, row in enumerate(self.markers):
            norm = math.sqrt(sum((m - r) * (m - r) for m, r in zip(marker, row)))
            if norm < best_norm:
                best_norm = norm
                best_index = index
        if best_norm > _THRESHOLD:
            raise IdentificationError("Unable to identify marker")
        return best_index + 1

    def __len__(self) -> int:
        return len(self.markers)