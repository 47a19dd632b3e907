import logging
import re
from dataclasses import dataclass
from typing import Optional

import chess

from pgntree import settings
from pgntree.models import BLACK, FEN_START_POSITION, WHITE, Document

logger = logging.getLogger(__name__)

# trailing annotation glyphs, e.g. the !? of e4!?
ANNOTATION_RE = re.compile(r"[!?]+$")

LONG_ALGEBRAIC_RE = re.compile(
    r"""(?x)
    ^([a-h][1-8])   # from
    [-x]?           # e2-e4, e4xd5
    ([a-h][1-8])    # to
    =?([qrbnQRBN])? # promotion
    $"""
)


@dataclass(frozen=True)
class PlayedMove:
    fen: str  # position after the move
    turn: str  # side to move after the move
    san: str  # canonical notation for the move actually played
    uci: str


def color_of_turn(turn: chess.Color) -> str:
    return WHITE if turn == chess.WHITE else BLACK


def opposite(color: str) -> str:
    return BLACK if color == WHITE else WHITE


def side_to_move(fen: str) -> str:
    return color_of_turn(chess.Board(fen).turn)


def fullmove_number(fen: str) -> int:
    return chess.Board(fen).fullmove_number


def parse_move(board: chess.Board, text: str, strict: bool) -> chess.Move:
    """
    Strict: the text must be SAN as python-chess understands it (which
    already tolerates a missing or superfluous +/#, and 0-0 for O-O).

    Permissive: annotation glyphs are dropped before trying SAN again, and
    long algebraic moves (e2e4, e2-e4, e7e8=Q) are accepted.

    Raises ValueError (python-chess's own move errors are ValueErrors) when
    the move can't be played.
    """
    if strict:
        return board.parse_san(text)

    cleaned = ANNOTATION_RE.sub("", text.strip())
    try:
        return board.parse_san(cleaned)
    except ValueError:
        pass

    if m := LONG_ALGEBRAIC_RE.match(cleaned):
        from_sq, to_sq, promotion = m.groups()
        return board.parse_uci(f"{from_sq}{to_sq}{(promotion or '').lower()}")

    raise ValueError(f"invalid move: {text!r}")


def play_move(fen: str, text: str, strict: bool = True) -> Optional[PlayedMove]:
    board = chess.Board(fen)
    try:
        move = parse_move(board, text, strict)
    except ValueError:
        return None

    san = board.san(move)
    board.push(move)
    return PlayedMove(
        fen=board.fen(),
        turn=color_of_turn(board.turn),
        san=san,
        uci=move.uci(),
    )


def apply_move(fen: str, text: str) -> Optional[PlayedMove]:
    """Strict first, then permissive (unless disabled); None if both fail."""
    played = play_move(fen, text, strict=True)
    if played is None and settings.PERMISSIVE_MOVES:
        played = play_move(fen, text, strict=False)
    return played


def starting_fen(document: Document) -> str:
    fen = document.header("FEN")
    if not fen:
        return FEN_START_POSITION

    try:
        chess.Board(fen)
    except ValueError as e:
        # the start position will work for many games and is easy to spot if wrong
        logger.warning("Invalid FEN header, using start position: %s - %s", fen, e)
        return FEN_START_POSITION

    return fen.strip()
