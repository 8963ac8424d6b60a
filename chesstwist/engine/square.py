from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional


BOARD_SIZE = 8


@dataclass(frozen=True, order=True)
class Square:
    """Board coordinate.

    Attributes:
        file (int): Column 0..7, file 0 is the a-file.
        rank (int): Row 0..7, rank 0 is White's back rank.

    Raises:
        ValueError: If either coordinate is outside the board.
    """

    file: int
    rank: int

    def __post_init__(self) -> None:
        if not (0 <= self.file < BOARD_SIZE and 0 <= self.rank < BOARD_SIZE):
            raise ValueError(f"square out of range: ({self.file}, {self.rank})")

    def offset(self, dfile: int, drank: int) -> Optional["Square"]:
        """Return the square shifted by (dfile, drank), or None if off the board."""
        f = self.file + dfile
        r = self.rank + drank
        if 0 <= f < BOARD_SIZE and 0 <= r < BOARD_SIZE:
            return Square(f, r)
        return None

    def __repr__(self) -> str:
        return f"Square({self.file}, {self.rank})"


def all_squares() -> Iterator[Square]:
    """Yield the 64 squares rank by rank, starting at (0, 0)."""
    for rank in range(BOARD_SIZE):
        for file in range(BOARD_SIZE):
            yield Square(file, rank)


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


def squares_between(a: Square, b: Square) -> Iterator[Square]:
    """Yield the squares strictly between two squares on a shared line.

    Args:
        a (Square): Start square (excluded).
        b (Square): End square (excluded).

    Raises:
        ValueError: If the squares do not share a file, rank or diagonal.
    """
    df = b.file - a.file
    dr = b.rank - a.rank
    if df and dr and abs(df) != abs(dr):
        raise ValueError(f"{a!r} and {b!r} are not aligned")
    df, dr = _sign(df), _sign(dr)
    f = a.file + df
    r = a.rank + dr
    while (f, r) != (b.file, b.rank):
        yield Square(f, r)
        f += df
        r += dr
