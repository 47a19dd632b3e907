import logging
from dataclasses import dataclass, field

from pgntree import rules, settings
from pgntree.models import Container, Document, Move, Variation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    fen: str  # after the move (unchanged if the move couldn't be played)
    turn: str  # side to move next
    color: str  # side to move *before* the move, i.e. who played it


@dataclass
class InvalidMoveRecord:
    move: Move
    fen: str  # position the move was tried against


@dataclass
class TreeIndex:
    """
    Everything we know about a Document that isn't in the tree itself.

    All tables are keyed by node identity and are rebuilt from scratch on
    every linearize() call; nothing is updated in place, so a node that
    drops out of the tree drops out of the index with the next rebuild.
    """

    start_fen: str
    order: list[Move] = field(default_factory=list)  # depth-first, variations first
    order_of: dict[Move, int] = field(default_factory=dict)  # 1-based
    positions: dict[Move, Position] = field(default_factory=dict)
    parents: dict[Move, Container] = field(default_factory=dict)
    slots: dict[Move, int] = field(default_factory=dict)  # index in parent.moves
    anchors: dict[Variation, Move] = field(default_factory=dict)
    invalid_moves: list[InvalidMoveRecord] = field(default_factory=list)


def linearize(document: Document) -> TreeIndex:
    start_fen = rules.starting_fen(document)
    index = TreeIndex(start_fen=start_fen)
    turn = rules.side_to_move(start_fen)
    start = Position(fen=start_fen, turn=turn, color=rules.opposite(turn))

    walk(document, start, index)
    return index


def walk(container: Container, position: Position, index: TreeIndex):
    """
    `position` is the position before container.moves[0]. Each variation of
    a move branches from the same position the move itself is played from,
    so we visit variations first and only then play the move.
    """
    for slot, move in enumerate(container.moves):
        index.order.append(move)
        index.order_of[move] = len(index.order)
        index.parents[move] = container
        index.slots[move] = slot

        for variation in move.variations:
            index.anchors[variation] = move
            walk(variation, position, index)

        mover = position.turn
        played = rules.apply_move(position.fen, move.move)
        if played is None:
            # keep going from the pre-move position so the rest of the tree
            # stays navigable; the move text is left as is
            index.invalid_moves.append(InvalidMoveRecord(move, position.fen))
            if settings.LOG_INVALID_MOVES:
                logger.warning("Invalid move: %s (%s)", move.move, position.fen)
            position = Position(fen=position.fen, turn=mover, color=mover)
        else:
            position = Position(fen=played.fen, turn=played.turn, color=mover)

        index.positions[move] = position
