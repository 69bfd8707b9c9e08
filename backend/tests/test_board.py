import itertools

import pytest

from app.services.games.board import (
    DRAW,
    IN_PROGRESS,
    WIN,
    WINNING_LINES,
    Marker,
    empty_board,
    evaluate,
    serialize_board,
)

X, O = Marker.X, Marker.O


def test_empty_board_is_in_progress():
    outcome = evaluate(empty_board())
    assert outcome.kind == IN_PROGRESS
    assert outcome.winner is None
    assert not outcome.is_terminal


@pytest.mark.parametrize('line', WINNING_LINES)
@pytest.mark.parametrize('marker', [X, O])
def test_every_line_wins(line, marker):
    board = empty_board()
    for idx in line:
        board[idx] = marker
    outcome = evaluate(board)
    assert outcome.kind == WIN
    assert outcome.winner is marker
    assert outcome.line == line


def test_scenario_top_row_win():
    board = [X, X, X, O, O, None, None, None, None]
    outcome = evaluate(board)
    assert outcome.kind == WIN
    assert outcome.winner is X


def test_full_board_without_line_is_draw():
    board = [X, O, X,
             X, O, O,
             O, X, X]
    assert evaluate(board).kind == DRAW


def test_full_board_with_line_is_win_not_draw():
    board = [X, X, X,
             O, O, X,
             X, O, O]
    assert evaluate(board).winner is X


def test_rows_are_scanned_before_columns():
    # Synthetic boards where more than one line is complete
    board = [X, X, X,
             X, None, None,
             X, None, None]
    assert evaluate(board).line == (0, 1, 2)

    board = [X, X, X,
             None, None, None,
             O, O, O]
    outcome = evaluate(board)
    assert outcome.winner is X
    assert outcome.line == (0, 1, 2)


def test_evaluate_is_total_over_all_boards():
    for cells in itertools.product([None, X, O], repeat=9):
        outcome = evaluate(list(cells))
        if outcome.kind == WIN:
            a, b, c = outcome.line
            assert cells[a] == cells[b] == cells[c] == outcome.winner
        elif outcome.kind == DRAW:
            assert None not in cells
        else:
            assert None in cells


def test_wrong_size_board_is_rejected():
    with pytest.raises(ValueError):
        evaluate([None] * 8)


def test_serialize_board_uses_plain_strings():
    assert serialize_board([X, None, O] + [None] * 6) == ['X', None, 'O'] + [None] * 6
    assert X.other is O and O.other is X
