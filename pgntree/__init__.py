from pgntree.errors import EmptyGame, InvalidMove, NotFound, ParseError, PgnError
from pgntree.manager import PgnManager
from pgntree.models import (
    BLACK,
    FEN_EMPTY_POSITION,
    FEN_START_POSITION,
    WHITE,
    Document,
    Header,
    Move,
    Variation,
)
from pgntree.serializer import render_pgn
from pgntree.tokenizer import parse_pgn

__all__ = [
    "PgnManager",
    "parse_pgn",
    "render_pgn",
    "Document",
    "Header",
    "Move",
    "Variation",
    "FEN_START_POSITION",
    "FEN_EMPTY_POSITION",
    "WHITE",
    "BLACK",
    "PgnError",
    "EmptyGame",
    "NotFound",
    "InvalidMove",
    "ParseError",
]
