import logging

from pgntree import settings
from pgntree.linearize import linearize
from pgntree.models import BLACK, FEN_START_POSITION, WHITE
from pgntree.tests import VARIATION_PGN, fen_after, get_sans
from pgntree.tokenizer import parse_pgn

AFTER_E4 = fen_after("e4")


def test_order_visits_variations_before_playing_on():
    index = linearize(parse_pgn(VARIATION_PGN))
    assert get_sans(index.order) == [
        "e4", "e5", "Nf3", "f4", "exf4", "Nf3", "Nc6", "Bb5", "a6",
    ]  # fmt: skip
    assert [index.order_of[m] for m in index.order] == list(range(1, 10))


def test_parents_slots_and_anchors():
    document = parse_pgn(VARIATION_PGN)
    index = linearize(document)
    nf3 = document.moves[2]
    variation = nf3.variations[0]

    assert index.anchors == {variation: nf3}
    for slot, move in enumerate(document.moves):
        assert index.parents[move] is document
        assert index.slots[move] == slot
    for slot, move in enumerate(variation.moves):
        assert index.parents[move] is variation
        assert index.slots[move] == slot


def test_variation_branches_from_position_before_anchor():
    document = parse_pgn(VARIATION_PGN)
    index = linearize(document)
    e5, nf3 = document.moves[1], document.moves[2]
    f4, exf4, nf3_in_variation = nf3.variations[0].moves

    assert index.positions[e5].fen == fen_after("e4", "e5")
    assert index.positions[nf3].fen == fen_after("e4", "e5", "Nf3")
    assert index.positions[f4].fen == fen_after("e4", "e5", "f4")
    assert index.positions[exf4].fen == fen_after("e4", "e5", "f4", "exf4")
    assert index.positions[nf3_in_variation].fen == fen_after(
        "e4", "e5", "f4", "exf4", "Nf3"
    )
    # the mainline carries on from after 2.Nf3, not from the variation
    nc6 = document.moves[3]
    assert index.positions[nc6].fen == fen_after("e4", "e5", "Nf3", "Nc6")

    assert index.positions[f4].color == WHITE
    assert index.positions[f4].turn == BLACK
    assert index.positions[exf4].color == BLACK


def test_sibling_variations_share_the_branch_position():
    document = parse_pgn("1. e4 e5 2. Nf3 (2. f4) (2. Nc3) (2. d4 exd4) Nc6 *")
    index = linearize(document)
    f4, nc3, d4 = (v.moves[0] for v in document.moves[2].variations)

    assert index.positions[f4].fen == fen_after("e4", "e5", "f4")
    assert index.positions[nc3].fen == fen_after("e4", "e5", "Nc3")
    assert index.positions[d4].fen == fen_after("e4", "e5", "d4")
    assert get_sans(index.order) == [
        "e4", "e5", "Nf3", "f4", "Nc3", "d4", "exd4", "Nc6",
    ]  # fmt: skip


def test_nested_variation_branches_from_its_own_anchor():
    document = parse_pgn("1. e4 e5 (1... c5 2. Nf3 (2. c3 d5) d6) 2. Nf3 *")
    index = linearize(document)
    sicilian = document.moves[1].variations[0]
    c3, d5 = sicilian.moves[1].variations[0].moves
    d6 = sicilian.moves[2]

    assert index.positions[c3].fen == fen_after("e4", "c5", "c3")
    assert index.positions[d5].fen == fen_after("e4", "c5", "c3", "d5")
    assert index.positions[d6].fen == fen_after("e4", "c5", "Nf3", "d6")
    assert get_sans(index.order) == ["e4", "e5", "c5", "Nf3", "c3", "d5", "d6", "Nf3"]


def test_start_position_from_fen_header():
    pgn = f'[SetUp "1"]\n[FEN "{AFTER_E4}"]\n\n1... c5 2. Nf3 *'
    document = parse_pgn(pgn)
    index = linearize(document)
    c5, nf3 = document.moves

    assert index.start_fen == AFTER_E4
    assert index.positions[c5].color == BLACK
    assert index.positions[c5].fen == fen_after("c5", fen=AFTER_E4)
    assert index.positions[nf3].fen == fen_after("c5", "Nf3", fen=AFTER_E4)
    assert index.invalid_moves == []


def test_default_start_position():
    index = linearize(parse_pgn("*"))
    assert index.start_fen == FEN_START_POSITION
    assert index.order == []


def test_invalid_move_keeps_previous_position(caplog):
    document = parse_pgn("1. e4 e5 2. Nf9 Nc6 *")
    with caplog.at_level(logging.WARNING):
        index = linearize(document)
    e5, nf9, nc6 = document.moves[1:]

    assert index.positions[nf9].fen == index.positions[e5].fen
    assert index.positions[nf9].color == WHITE
    assert [r.move for r in index.invalid_moves] == [nf9, nc6]  # still white to move
    assert index.invalid_moves[0].fen == fen_after("e4", "e5")
    assert "Invalid move: Nf9" in caplog.text
    # nothing is lost
    assert get_sans(index.order) == ["e4", "e5", "Nf9", "Nc6"]


def test_invalid_move_logging_can_be_silenced(monkeypatch, caplog):
    monkeypatch.setattr(settings, "LOG_INVALID_MOVES", False)
    with caplog.at_level(logging.WARNING):
        index = linearize(parse_pgn("1. e4 e5 2. Nf9 *"))
    assert len(index.invalid_moves) == 1
    assert "Invalid move" not in caplog.text


def test_annotated_moves_are_played_permissively():
    document = parse_pgn("1. e4!? e5?! 2. Nf3!! *")
    index = linearize(document)
    assert index.invalid_moves == []
    assert index.positions[document.moves[2]].fen == fen_after("e4", "e5", "Nf3")
    # the text stays as written
    assert get_sans(document.moves) == ["e4!?", "e5?!", "Nf3!!"]


def test_linearize_is_deterministic():
    document = parse_pgn(VARIATION_PGN)
    first, second = linearize(document), linearize(document)
    assert first.order == second.order
    assert [first.positions[m] for m in first.order] == [
        second.positions[m] for m in second.order
    ]
