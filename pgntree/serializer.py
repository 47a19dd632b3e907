from typing import Callable

from pgntree.models import BLACK, Document, Move, Variation


def wrap_comment(comment: str) -> str:
    """
    Every comment comes back as a {brace} comment, ; line comments included.
    A brace comment can't hold "}", so any "}" in the text (only possible
    in a ; comment) is written as "]" and the text changes on re-parsing.
    """
    return "{" + comment.replace("}", "]") + "}"


def escape_header_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def render_pgn(document: Document, color_of: Callable[[Move], str]) -> str:
    """
    Regenerate PGN text from a Document.

    `color_of` tells us who played a move ("w" or "b"); black moves that
    carry a move number get the "N..." form. Everything else is written
    back exactly as it is in the tree, so parse → render → parse gives the
    same moves in the same order.
    """
    lines: list[str] = []

    if document.comments_above_header:
        lines.extend(wrap_comment(c) for c in document.comments_above_header)
        lines.append("")

    if document.headers:
        for header in document.headers:
            lines.append(f'[{header.name} "{escape_header_value(header.value)}"]')
        lines.append("")

    if document.comments:
        lines.extend(wrap_comment(c) for c in document.comments)
        lines.append("")

    if movetext := render_moves(document.moves, color_of):
        lines.append(movetext)

    lines.append(document.result)

    return "\n".join(lines)


def render_moves(moves: list[Move], color_of: Callable[[Move], str]) -> str:
    parts: list[str] = []

    for move in moves:
        if move.move_number is not None:
            number = f"{move.move_number}."
            if color_of(move) == BLACK:
                number += ".."
            parts.append(number)

        parts.append(move.move)
        parts.extend(f"${nag}" for nag in move.nags)
        parts.extend(wrap_comment(c) for c in move.comments)

        for variation in move.variations:
            parts.append(f"({render_variation(variation, color_of)})")

    return " ".join(parts)


def render_variation(variation: Variation, color_of: Callable[[Move], str]) -> str:
    parts = [wrap_comment(c) for c in variation.comments]
    if movetext := render_moves(variation.moves, color_of):
        parts.append(movetext)
    if variation.result:
        parts.append(variation.result)
    return " ".join(parts)
