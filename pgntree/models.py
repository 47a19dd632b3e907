from dataclasses import dataclass, field
from typing import Optional, Union

FEN_START_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
FEN_EMPTY_POSITION = "8/8/8/8/8/8/8/8"

WHITE = "w"
BLACK = "b"


@dataclass
class Header:
    name: str
    value: str


@dataclass(eq=False)
class Move:
    """
    One ply of movetext, exactly as written: `move` is kept verbatim
    (e.g. "e4!?" or a malformed "Nf9"), `move_number` is only set where
    the notation carried one (1. e4 → 1, e5 → None, 2... Nc6 → 2).

    A move doesn't know its position or container; PgnManager keeps those
    in side tables keyed by the move object itself, so equality is identity
    here: two moves with the same text are still different nodes.
    """

    move: str
    move_number: Optional[int] = None
    comments: list[str] = field(default_factory=list)
    variations: list["Variation"] = field(default_factory=list)
    nags: list[int] = field(default_factory=list)

    def __repr__(self):
        num = f"{self.move_number}." if self.move_number else ""
        return f"<Move {num}{self.move} ({len(self.variations)} var)>"


@dataclass(eq=False)
class Variation:
    """
    An alternative to the move it hangs from (its anchor), branching from
    the position *before* the anchor was played.
    """

    moves: list[Move] = field(default_factory=list)
    result: Optional[str] = None
    # comments that come before the first move, e.g. ({or} 2.f4 exf4)
    comments: list[str] = field(default_factory=list)

    def __repr__(self):
        first = self.moves[0].move if self.moves else "empty"
        return f"<Variation {first} +{max(len(self.moves) - 1, 0)}>"


@dataclass(eq=False)
class Document:
    """Parsed game: headers, free comments, the mainline and the result."""

    headers: list[Header] = field(default_factory=list)
    comments_above_header: list[str] = field(default_factory=list)
    comments: list[str] = field(default_factory=list)
    moves: list[Move] = field(default_factory=list)
    result: str = "*"

    def header(self, name: str) -> Optional[str]:
        for header in self.headers:
            if header.name == name:
                return header.value
        return None


# anything holding an ordered list of moves: the mainline or a variation
Container = Union[Document, Variation]
