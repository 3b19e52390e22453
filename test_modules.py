"""
Tests for the engine modules: grid, win checker, round engine,
computer player and game aggregator.

Usage:
    pytest test_modules.py
"""

import random

import pytest

from engine.config import GameConfig
from engine.grid import Grid, Side, Winner, GameStateError, is_valid_location
from engine.win_checker import WinChecker
from engine.round_engine import RoundEngine
from engine.computer_player import ComputerPlayer
from engine.game import Game, Round, GameRecord
from engine.game_aggregator import GameAggregator, utc_now_iso


X, O = "X", "O"


def make_game(winners=(), num_rounds=3, **kwargs) -> Game:
    """Game with finished rounds for the given winners."""
    rounds = [Round(board=Grid().snapshot(), winner=Winner(w)) for w in winners]
    return Game(num_rounds=num_rounds, human_token=X, computer_token=O, rounds=rounds, **kwargs)


ALL_CELLS = [(r, c) for r in range(3) for c in range(3)]

DRAW_BOARD = [
    [X, O, X],
    [X, O, O],
    [O, X, X],
]


# ==================== GRID ====================

def test_config_defaults():
    config = GameConfig()
    assert config.BOARD_SIZE == 3
    assert config.TOTAL_CELLS == 9
    assert config.HUMAN_TOKEN != config.COMPUTER_TOKEN


def test_new_grid_is_empty():
    grid = Grid()
    assert grid.filled_count() == 0
    assert not grid.is_full()
    assert grid.get_empty_cells() == ALL_CELLS


def test_empty_cells_are_row_major():
    grid = Grid.from_rows([
        [X, None, O],
        [None, X, None],
        [O, None, None],
    ])
    assert grid.get_empty_cells() == [(0, 1), (1, 0), (1, 2), (2, 1), (2, 2)]


def test_place_marks_cell():
    grid = Grid()
    grid.place((1, 2), X)
    assert grid.get((1, 2)) == X
    assert not grid.is_empty((1, 2))
    assert grid.filled_count() == 1


def test_place_on_occupied_cell_raises():
    grid = Grid()
    grid.place((0, 0), X)
    with pytest.raises(ValueError):
        grid.place((0, 0), O)
    assert grid.get((0, 0)) == X


@pytest.mark.parametrize("location", [(3, 0), (0, -1), (1,), "ab", None, (1.0, 1)])
def test_place_rejects_bad_location(location):
    with pytest.raises(ValueError):
        Grid().place(location, X)


@pytest.mark.parametrize("token", ["", None, 5])
def test_place_rejects_bad_token(token):
    with pytest.raises(ValueError):
        Grid().place((0, 0), token)


def test_grid_shape_is_checked():
    with pytest.raises(ValueError):
        Grid.from_rows([[None, None], [None, None]])


def test_is_valid_location():
    assert is_valid_location((0, 2))
    assert is_valid_location([2, 2])
    assert not is_valid_location((2, 3))


def test_copy_and_snapshot_are_independent():
    grid = Grid()
    grid.place((0, 0), X)
    copy = grid.copy()
    snapshot = grid.snapshot()

    grid.place((1, 1), O)

    assert copy.get((1, 1)) is None
    assert snapshot[1][1] is None
    assert snapshot[0][0] == X


def test_render_shows_tokens():
    grid = Grid.from_rows([[X, None, None], [None, O, None], [None, None, None]])
    text = grid.render()
    assert "│ X │" in text
    assert "│ O │" in text
    assert len(text.splitlines()) == 8


def test_side_opposite():
    assert Side.HUMAN.opposite() == Side.COMPUTER
    assert Side.COMPUTER.opposite() == Side.HUMAN


# ==================== WIN CHECKER ====================

@pytest.mark.parametrize("line", WinChecker.WINNING_LINES)
@pytest.mark.parametrize("token", [X, O])
def test_every_line_wins(line, token):
    grid = Grid()
    for location in line:
        grid.place(location, token)

    checker = WinChecker()
    assert checker.check_winner(grid) == token
    assert checker.get_winning_line(grid) == line
    assert checker.has_won(grid, token)


def test_empty_grid_has_no_winner():
    checker = WinChecker()
    assert checker.check_winner(Grid()) is None
    assert checker.get_winning_line(Grid()) is None


def test_mixed_line_is_not_a_win():
    grid = Grid.from_rows([[X, X, O], [None, None, None], [None, None, None]])
    assert WinChecker().check_winner(grid) is None


def test_has_won_is_per_token():
    grid = Grid.from_rows([[None, O, None], [X, O, X], [None, O, None]])
    checker = WinChecker()
    assert checker.has_won(grid, O)
    assert not checker.has_won(grid, X)


def test_eight_lines_in_fixed_order():
    lines = WinChecker.WINNING_LINES
    assert len(lines) == 8
    assert lines[0] == ((0, 0), (0, 1), (0, 2))
    assert lines[3] == ((0, 0), (1, 0), (2, 0))
    assert lines[6] == ((0, 0), (1, 1), (2, 2))
    assert lines[7] == ((0, 2), (1, 1), (2, 0))


def test_two_winning_lines_reports_first():
    # Not reachable in legal play, but must not crash
    grid = Grid.from_rows([[O, O, O], [None, None, None], [X, X, X]])
    checker = WinChecker()
    assert checker.check_winner(grid) == O
    assert checker.get_winning_line(grid) == ((0, 0), (0, 1), (0, 2))


def test_row_checked_before_column():
    grid = Grid.from_rows([[X, X, X], [X, O, O], [X, O, O]])
    assert WinChecker().get_winning_line(grid) == ((0, 0), (0, 1), (0, 2))


# ==================== ROUND ENGINE ====================

def test_empty_grid_round_not_over():
    assert not RoundEngine().is_round_over(Grid())


def test_top_row_is_human_win():
    grid = Grid.from_rows([[X, X, X], [None, None, None], [None, None, None]])
    engine = RoundEngine()
    assert engine.is_round_over(grid)
    assert engine.round_winner(grid, make_game()) == Winner.HUMAN


def test_diagonal_is_computer_win():
    grid = Grid.from_rows([[O, X, X], [None, O, None], [X, None, O]])
    engine = RoundEngine()
    assert engine.is_round_over(grid)
    assert engine.round_winner(grid, make_game()) == Winner.COMPUTER


def test_full_grid_without_line_is_draw():
    grid = Grid.from_rows(DRAW_BOARD)
    engine = RoundEngine()
    assert engine.is_round_over(grid)
    assert engine.round_winner(grid, make_game()) == Winner.DRAW


def test_full_grid_with_line_is_win_not_draw():
    grid = Grid.from_rows([[X, O, X], [O, X, O], [O, X, X]])
    engine = RoundEngine()
    assert grid.is_full()
    assert engine.round_winner(grid, make_game()) == Winner.HUMAN


def test_round_over_iff_winner_or_full():
    rng = random.Random(7)
    engine = RoundEngine()
    checker = WinChecker()

    for _ in range(200):
        grid = Grid.from_rows([[rng.choice([X, O, None]) for _ in range(3)] for _ in range(3)])
        expected = checker.check_winner(grid) is not None or grid.filled_count() == 9
        assert engine.is_round_over(grid) == expected


def test_round_winner_in_progress_raises():
    grid = Grid.from_rows([[X, None, None], [None, O, None], [None, None, None]])
    with pytest.raises(GameStateError):
        RoundEngine().round_winner(grid, make_game())


def test_round_winner_follows_configured_tokens():
    grid = Grid.from_rows([["cat", "cat", "cat"], [None, None, None], [None, None, None]])
    game = Game(human_token="dog", computer_token="cat")
    assert RoundEngine().round_winner(grid, game) == Winner.COMPUTER


# ==================== COMPUTER PLAYER ====================

def test_choose_move_on_empty_grid_is_a_cell():
    player = ComputerPlayer(rng=random.Random(0))
    assert player.choose_move(Grid()) in ALL_CELLS


def test_choose_move_only_picks_empty_cells():
    grid = Grid.from_rows([[X, O, X], [None, O, None], [X, None, O]])
    player = ComputerPlayer(rng=random.Random(3))
    empty = set(grid.get_empty_cells())

    for _ in range(50):
        assert player.choose_move(grid) in empty


def test_choose_move_single_empty_cell():
    grid = Grid.from_rows([[X, O, X], [X, O, O], [O, X, None]])
    for seed in range(10):
        assert ComputerPlayer(rng=random.Random(seed)).choose_move(grid) == (2, 2)


def test_choose_move_full_grid_returns_none():
    grid = Grid.from_rows(DRAW_BOARD)
    assert ComputerPlayer(rng=random.Random(0)).choose_move(grid) is None


def test_choose_move_uses_injected_rng():
    class LastChoice:
        def choice(self, seq):
            return seq[-1]

    grid = Grid.from_rows([[None, X, None], [O, None, None], [None, None, X]])
    assert ComputerPlayer(rng=LastChoice()).choose_move(grid) == (2, 1)


def test_choose_move_is_reproducible_with_seed():
    moves_a = [ComputerPlayer(rng=random.Random(42)).choose_move(Grid()) for _ in range(3)]
    moves_b = [ComputerPlayer(rng=random.Random(42)).choose_move(Grid()) for _ in range(3)]
    assert moves_a == moves_b


def test_choose_move_covers_all_cells():
    player = ComputerPlayer(rng=random.Random(1))
    seen = {player.choose_move(Grid()) for _ in range(500)}
    assert seen == set(ALL_CELLS)


# ==================== GAME ====================

def test_game_rejects_equal_tokens():
    with pytest.raises(ValueError):
        Game(human_token="X", computer_token="X")


@pytest.mark.parametrize("num_rounds", [0, -1, 1.5])
def test_game_rejects_bad_round_count(num_rounds):
    with pytest.raises(ValueError):
        Game(num_rounds=num_rounds)


def test_game_accepts_side_as_string():
    game = Game(next_player="computer")
    assert game.next_player == Side.COMPUTER
    assert game.is_computer_turn()


def test_game_token_mapping():
    game = make_game()
    assert game.token_for(Side.HUMAN) == X
    assert game.token_for(Side.COMPUTER) == O
    assert game.side_for(X) == Side.HUMAN
    assert game.side_for(O) == Side.COMPUTER
    assert game.side_for(None) is None


# ==================== GAME AGGREGATOR ====================

def test_game_not_over_after_two_of_three():
    assert not GameAggregator().is_game_over(make_game(["human", "computer"]))


def test_game_over_human_wins():
    game = make_game(["human", "computer", "human"])
    aggregator = GameAggregator()
    assert aggregator.is_game_over(game)
    assert aggregator.game_winner(game) == Winner.HUMAN


def test_game_over_computer_wins():
    game = make_game(["computer", "draw", "draw"])
    assert GameAggregator().game_winner(game) == Winner.COMPUTER


def test_draw_rounds_count_for_nobody():
    game = make_game(["human", "computer", "draw"])
    assert GameAggregator().game_winner(game) == Winner.DRAW


@pytest.mark.parametrize("wins", [0, 1, 2, 3])
def test_equal_counts_are_a_draw(wins):
    winners = ["human"] * wins + ["computer"] * wins + ["draw"]
    game = make_game(winners, num_rounds=len(winners))
    assert GameAggregator().game_winner(game) == Winner.DRAW


def test_game_winner_in_progress_raises():
    with pytest.raises(GameStateError):
        GameAggregator().game_winner(make_game(["human"]))


def test_finalize_game_builds_record():
    game = make_game(["human", "human", "computer"], start_date_time="2024-05-01T10:00:00.000Z")
    aggregator = GameAggregator(
        id_factory=lambda: "game-1",
        clock=lambda: "2024-05-01T10:05:00.000Z"
    )

    record = aggregator.finalize_game(game)

    assert isinstance(record, GameRecord)
    assert record.id == "game-1"
    assert record.winner == Winner.HUMAN
    assert record.finish_date_time == "2024-05-01T10:05:00.000Z"
    assert record.start_date_time == "2024-05-01T10:00:00.000Z"
    assert record.num_rounds == 3
    assert record.human_token == X
    assert record.computer_token == O
    assert record.rounds == tuple(game.rounds)


def test_finalize_game_record_is_a_snapshot():
    game = make_game(["draw", "draw", "draw"])
    record = GameAggregator(id_factory=lambda: "g", clock=lambda: "t").finalize_game(game)

    game.rounds.clear()
    game.current_squares.place((0, 0), X)

    assert len(record.rounds) == 3
    assert record.current_squares[0][0] is None
    with pytest.raises(AttributeError):
        record.winner = Winner.HUMAN


def test_finalize_game_fresh_ids():
    game = make_game(["human", "human", "human"])
    aggregator = GameAggregator()
    first = aggregator.finalize_game(game)
    second = aggregator.finalize_game(game)
    assert first.id != second.id


def test_finalize_game_in_progress_raises():
    with pytest.raises(GameStateError):
        GameAggregator().finalize_game(make_game(["human"]))


def test_record_to_dict():
    game = make_game(["human", "computer", "computer"])
    record = GameAggregator(id_factory=lambda: "abc", clock=lambda: "now").finalize_game(game)
    data = record.to_dict()

    assert data["id"] == "abc"
    assert data["winner"] == "computer"
    assert data["finishDateTime"] == "now"
    assert [r["winner"] for r in data["rounds"]] == ["human", "computer", "computer"]
    assert data["currentSquares"] == [[None] * 3] * 3


def test_utc_now_iso_format():
    stamp = utc_now_iso()
    assert stamp.endswith("Z")
    assert "T" in stamp
    # 2024-01-01T12:00:00.000Z
    assert len(stamp) == 24


# ==================== EMPTY MARK AND BOARD SIZE ====================

def test_empty_mark_never_wins_on_empty_grid():
    checker = WinChecker()
    assert not checker.has_won(Grid(), None)
    assert not checker.has_won(Grid(), "")


def test_empty_mark_never_wins_on_partial_grid():
    grid = Grid.from_rows([[X, None, O], [None, X, None], [O, None, None]])
    assert not WinChecker().has_won(grid, None)


def test_bool_is_not_a_location():
    assert not is_valid_location((True, False))
    assert not is_valid_location((0, True))
    with pytest.raises(ValueError):
        Grid().place((True, False), X)


def test_grid_follows_configured_board_size(monkeypatch):
    monkeypatch.setattr(GameConfig, "BOARD_SIZE", 4)
    grid = Grid()
    assert len(grid.cells) == 4
    assert all(len(row) == 4 for row in grid.cells)
    lines = grid.render().splitlines()
    assert lines[0] == "  0   1   2   3"
    assert lines[1] == "┌───┬───┬───┬───┐"
    assert len(lines) == 10


def test_computer_player_reads_debug_mode_at_runtime(monkeypatch, capsys):
    monkeypatch.setattr(GameConfig, "DEBUG_MODE", True)
    player = ComputerPlayer(rng=random.Random(0))
    assert player.debug
    player.choose_move(Grid())
    assert "Computer picked" in capsys.readouterr().out


def test_explicit_debug_overrides_config(monkeypatch):
    monkeypatch.setattr(GameConfig, "DEBUG_MODE", True)
    assert not ComputerPlayer(debug=False).debug
