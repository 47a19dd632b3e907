import chess

from pgntree.models import Move

SIMPLE_PGN = """\
[Event "Test Game"]
[Site "Test Site"]
[Date "2023.01.01"]
[Round "1"]
[White "Player1"]
[Black "Player2"]
[Result "1-0"]

1. e4 e5 2. Nf3 Nc6 3. Bb5 a6 4. Ba4 Nf6 5. O-O Be7 1-0"""

VARIATION_PGN = """\
[Event "Test Game"]
[Site "Test Site"]
[Date "2023.01.01"]
[Round "1"]
[White "Player1"]
[Black "Player2"]
[Result "1-0"]

1. e4 e5 2. Nf3 (2. f4 exf4 3. Nf3) 2... Nc6 3. Bb5 a6 1-0"""

EMPTY_PGN = """\
[Event "Test Game"]
[Site "Test Site"]
[Date "2023.01.01"]
[Round "1"]
[White "Player1"]
[Black "Player2"]
[Result "*"]

*"""


def fen_after(*sans: str, fen: str = chess.STARTING_FEN) -> str:
    """Reference FEN after playing `sans` from `fen` with a plain chess.Board."""
    board = chess.Board(fen)
    for san in sans:
        board.push_san(san)
    return board.fen()


def get_sans(moves: list[Move]) -> list[str]:
    return [move.move for move in moves]


def walk_forward(manager, move=None) -> list[str]:
    """
    Follow next_move() from `move` (or from the start) until it stops
    moving, returning the move texts along the way.
    """
    move = manager.next_move(move)
    walked = [move.move]
    while manager.has_next(move):
        move = manager.next_move(move)
        walked.append(move.move)
    return walked
