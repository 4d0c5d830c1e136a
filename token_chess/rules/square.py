"""
A square on the board

(placed in its own module as the rules engine, the game and the request models all need it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase

from token_chess.core.exceptions import InvalidRequestError

# Chess board is always 8x8.
BOARD_DIMENSIONS = (8, 8)


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    num_files, num_ranks = BOARD_DIMENSIONS
    if len(square) != 2:
        return False

    file_char, rank_char = square[0], square[1]
    if file_char not in ascii_lowercase[:num_files]:
        return False

    if not rank_char.isdigit():
        return False

    return 1 <= int(rank_char) <= num_ranks


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if not is_valid_square(sq):
            raise InvalidRequestError(f"Cannot interpret {sq!r} as a square name.")
        file = ord(sq[0]) - ord("a") + 1
        rank = int(sq[1])
        return cls(file, rank)

    @classmethod
    def from_coords(cls, row: int, col: int) -> Square:
        """
        Screen coordinates: row 0 is the top of the board (rank 8), col 0 is the a-file.

        ex) (row=4, col=4) --> e4
        """
        num_files, num_ranks = BOARD_DIMENSIONS
        if not (0 <= row < num_ranks and 0 <= col < num_files):
            raise InvalidRequestError(f"Coordinates ({row}, {col}) lie outside the board.")
        return cls(file=col + 1, rank=num_ranks - row)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def __str__(self) -> str:
        return self.to_algebraic()
