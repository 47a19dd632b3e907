import logging
from typing import Optional, Union

from pgntree import rules, settings
from pgntree.errors import EmptyGame, InvalidMove, NotFound
from pgntree.linearize import InvalidMoveRecord, TreeIndex, linearize
from pgntree.models import WHITE, Container, Document, Header, Move, Variation
from pgntree.serializer import render_pgn
from pgntree.tokenizer import parse_pgn

logger = logging.getLogger(__name__)

# a Move, its 1-based place in the move order, or None (0) for "no move yet"
MoveRef = Union[Move, int, None]


class PgnManager:
    """
    Navigation, position lookup and editing over one PGN game.

    The move order is depth-first with variations first: a move's variations
    are listed (recursively) before the move itself is played, e.g.

        1. e4 e5 2. Nf3 (2. f4 exf4) 2... Nc6

        order: e4, e5, Nf3, f4, exf4, Nc6

    next_move()/previous_move() don't follow that order blindly; they stay
    inside a variation and climb back out to the anchor (the move the
    variation is an alternative to) at its edges.

    Every edit rebuilds the whole index and regenerates `pgn`.
    """

    def __init__(self, pgn: str):
        self._pgn = pgn
        self.document: Document = parse_pgn(pgn)
        self.index: TreeIndex = linearize(self.document)

    def __repr__(self):
        return f"<PgnManager {len(self.index.order)} moves>"

    @property
    def pgn(self) -> str:
        return self._pgn

    @property
    def headers(self) -> list[Header]:
        return self.document.headers

    @property
    def moves(self) -> list[Move]:
        return list(self.index.order)

    @property
    def start_fen(self) -> str:
        return self.index.start_fen

    @property
    def invalid_moves(self) -> list[InvalidMoveRecord]:
        return list(self.index.invalid_moves)

    def mainline(self) -> list[Move]:
        return list(self.document.moves)

    # lookups -----------------------------------------------------------------

    def move_at(self, position: int) -> Move:
        if not 1 <= position <= len(self.index.order):
            raise NotFound(f"No move at position {position}")
        return self.index.order[position - 1]

    def order_of(self, move: Optional[Move]) -> int:
        if move is None:
            return 0
        return self.index.order_of.get(move, 0)

    def first(self) -> Move:
        if not self.index.order:
            raise EmptyGame()
        return self.index.order[0]

    def last(self) -> Move:
        """Last move of the mainline (not of the move order)."""
        if not self.index.order:
            raise EmptyGame()
        return self.document.moves[-1]

    def _get(self, ref: MoveRef, action: str) -> Move:
        if ref is None or (isinstance(ref, int) and ref == 0):
            raise InvalidMove(f"Invalid 'move' parameter while {action}")
        if isinstance(ref, int):
            return self.move_at(ref)
        if ref not in self.index.order_of:
            raise InvalidMove(f"Unknown move while {action}: {ref!r}")
        return ref

    def _get_optional(self, ref: MoveRef, action: str) -> Optional[Move]:
        if ref is None or (isinstance(ref, int) and ref == 0):
            return None
        return self._get(ref, action)

    # navigation --------------------------------------------------------------

    def next_move(self, ref: MoveRef = None) -> Move:
        """
        The move after `ref`, or `ref` itself when there is nothing after
        it; compare with `is` to tell the two apart. No move (None or 0)
        gives the first move.
        """
        if not self.index.order:
            raise EmptyGame()
        move = self._get_optional(ref, "getting next move")
        if move is None:
            return self.first()

        order = self.index.order
        if move is self.document.moves[-1] or move is order[-1]:
            return move

        # order_of is 1-based, so this is the next entry in the move order
        next_in_order = order[self.index.order_of[move]]

        container = self.index.parents[move]
        slot = self.index.slots[move]
        if slot < len(container.moves) - 1:
            return container.moves[slot + 1]

        # end of a variation: continue after its anchor
        anchor = self.index.anchors.get(container)
        if anchor is not None:
            return self.next_move(anchor)

        return next_in_order

    def has_next(self, ref: MoveRef = None) -> bool:
        move = self._get_optional(ref, "checking for next move")
        if move is None:
            return True
        return self.next_move(move) is not move

    def previous_move(self, ref: MoveRef) -> Optional[Move]:
        """
        The move before `ref`, or None for the first mainline move.

        Stepping back from the first move of a variation lands on the
        variation's anchor itself, not on the move before the anchor. That
        isn't the mirror image of next_move() (which continues *after* the
        anchor), but it's what existing callers rely on.
        """
        if not self.index.order:
            raise EmptyGame()
        move = self._get(ref, "getting previous move")

        position = self.index.order_of[move]
        previous_in_order = self.index.order[position - 2] if position > 1 else None

        container = self.index.parents[move]
        slot = self.index.slots[move]
        if slot > 0:
            return container.moves[slot - 1]

        anchor = self.index.anchors.get(container)
        if anchor is not None:
            return anchor

        return previous_in_order

    # per-move info -----------------------------------------------------------

    def container_of(self, ref: MoveRef) -> Container:
        """The Variation holding the move, or the Document for mainline moves."""
        move = self._get(ref, "getting container")
        return self.index.parents[move]

    def parent_variation_of(self, ref: MoveRef) -> Optional[Variation]:
        move = self._get(ref, "getting parent variation")
        container = self.index.parents[move]
        return container if isinstance(container, Variation) else None

    def color_of(self, ref: MoveRef) -> str:
        move = self._get(ref, "getting move color")
        return self.index.positions[move].color

    def fen_of(self, ref: MoveRef) -> str:
        move = self._get(ref, "getting fen")
        return self.index.positions[move].fen

    def fen_before(self, ref: MoveRef) -> str:
        move = self._get_optional(ref, "getting fen before move")
        if move is None:
            return self.index.start_fen

        container = self.index.parents[move]
        slot = self.index.slots[move]
        if slot > 0:
            return self.index.positions[container.moves[slot - 1]].fen

        anchor = self.index.anchors.get(container)
        if anchor is not None:
            return self.fen_before(anchor)

        return self.index.start_fen

    # editing -----------------------------------------------------------------

    def insert_move(
        self, ref: MoveRef, text: str, result: Optional[str] = None
    ) -> Move:
        """
        Play `text` (SAN, or long algebraic like e2e4) after `ref`.

        At the end of a line the move just extends it. If `ref` already has
        a continuation, the new move becomes a one-move variation on that
        continuation instead, so nothing already in the game moves around.
        With no `ref` (None or 0) the new move is the first move, which
        means a variation on the current first move if there is one.

        Raises InvalidMove, leaving everything as it was, if the move can't
        be played.
        """
        result = settings.DEFAULT_RESULT if result is None else result
        current = self._get_optional(ref, "inserting a move")

        if current is None:
            fen = self.index.start_fen
            container: Container = self.document
            following = self.document.moves[0] if self.document.moves else None
        else:
            fen = self.index.positions[current].fen
            container = self.index.parents[current]
            slot = self.index.slots[current]
            following = None
            if slot < len(container.moves) - 1:
                # the same move next_move(current) gives us
                following = container.moves[slot + 1]

        played = rules.apply_move(fen, text)
        if played is None:
            raise InvalidMove("Invalid move")

        starts_line = following is not None or not container.moves
        new_move = Move(move=played.san)
        if (
            rules.opposite(played.turn) == WHITE
            or starts_line
            or current.comments
            or current.variations
        ):
            new_move.move_number = rules.fullmove_number(fen)

        if following is None:
            container.moves.append(new_move)
        else:
            following.variations.append(Variation(moves=[new_move], result=result))

        logger.debug("Inserted %s (%s) after %r", played.san, played.uci, current)
        self._rebuild()
        return new_move

    def delete_move(self, ref: MoveRef) -> None:
        """
        Delete a move and everything after it in the same line. Variations
        hanging off earlier moves of that line are left alone.
        """
        try:
            move = self._get(ref, "deleting a move")
        except NotFound as e:
            raise InvalidMove(str(e)) from e

        container = self.index.parents[move]
        slot = self.index.slots[move]
        removed = container.moves[slot:]
        del container.moves[slot:]

        # an empty variation "()" isn't valid movetext
        if not container.moves and isinstance(container, Variation):
            self.index.anchors[container].variations.remove(container)

        logger.debug("Deleted %d moves starting with %r", len(removed), move)
        self._rebuild()

    def _rebuild(self):
        self.index = linearize(self.document)
        self._pgn = render_pgn(self.document, self.color_of)
