from __future__ import annotations

import threading
import time

import pytest

from session import GameSession, ThreadTicker

from conftest import FixedPuzzleSource, make_puzzle


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_ticks_advance_timer(session_for, tickers) -> None:
    session = session_for(make_puzzle([0]))
    tickers[0].fire(3)
    assert session.state.timer_seconds == 3


def test_new_game_cancels_previous_ticker(session_for, tickers) -> None:
    session = session_for(make_puzzle([0]))
    tickers[0].fire(2)
    session.start_new_game("easy")
    assert tickers[0].stopped
    assert len(tickers) == 2 and not tickers[1].stopped
    assert session.state.timer_seconds == 0

    # A tick that was already in flight for the old game is discarded.
    tickers[0].callback()
    assert session.state.timer_seconds == 0
    tickers[1].fire()
    assert session.state.timer_seconds == 1


def test_timer_stops_on_win(session_for, tickers) -> None:
    session = session_for(make_puzzle([i for i in range(81) if i != 80]))
    tickers[0].fire(5)
    session.select_cell(8, 8)
    session.handle_input(9)
    assert tickers[0].stopped
    tickers[0].callback()
    assert session.state.timer_seconds == 5


def test_ticks_interleave_with_user_actions(session_for, tickers) -> None:
    session = session_for(make_puzzle([0]))
    session.select_cell(4, 4)
    tickers[0].fire()
    state = session.handle_input(6)
    assert state.timer_seconds == 1
    assert state.grid[40].value == 6


def test_close_stops_ticker(session_for, tickers) -> None:
    session = session_for(make_puzzle([0]))
    session.close()
    assert tickers[0].stopped
    assert not session.timer_running


def test_thread_ticker_fires_until_stopped() -> None:
    calls = []
    ticker = ThreadTicker(0.01)
    ticker.start(lambda: calls.append(1))
    assert _wait_for(lambda: len(calls) >= 2)
    ticker.stop()
    assert not ticker.running
    settled = len(calls)
    time.sleep(0.05)
    assert len(calls) == settled


def test_thread_ticker_rejects_bad_interval_and_restart() -> None:
    with pytest.raises(ValueError):
        ThreadTicker(0)
    ticker = ThreadTicker(10)
    ticker.start(lambda: None)
    with pytest.raises(RuntimeError):
        ticker.start(lambda: None)
    ticker.stop()


def test_real_clock_with_concurrent_moves() -> None:
    session = GameSession(
        generator=FixedPuzzleSource(make_puzzle([0])),
        ticker_factory=lambda: ThreadTicker(0.005),
    )
    with session:
        session.start_new_game("easy")

        def play() -> None:
            for _ in range(50):
                session.select_cell(4, 4)
                session.handle_input(6)

        worker = threading.Thread(target=play)
        worker.start()
        worker.join()
        assert _wait_for(lambda: session.state.timer_seconds >= 2)
        assert len(session.state.history) == 50
    stopped_at = session.state.timer_seconds
    time.sleep(0.03)
    assert session.state.timer_seconds == stopped_at


class _BarrierSource:
    """Holds every caller until two of them are generating at once."""

    def __init__(self) -> None:
        self.barrier = threading.Barrier(2)

    def generate(self, empty_cells: int):
        self.barrier.wait(timeout=5)
        return make_puzzle([0])


def test_concurrent_new_games_leave_one_live_ticker(ticker_factory, tickers) -> None:
    session = GameSession(generator=_BarrierSource(), ticker_factory=ticker_factory)
    workers = [threading.Thread(target=session.start_new_game, args=("easy",)) for _ in range(2)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join(timeout=5)

    live = [t for t in tickers if t.started and not t.stopped]
    assert session.state.game_id == 2
    assert len(live) == 1
    assert session.timer_running
    live[0].fire()
    assert session.state.timer_seconds == 1

    session.close()
    assert [t for t in tickers if t.started and not t.stopped] == []
    assert not session.timer_running


def test_subscriber_starting_new_game_on_win_keeps_its_clock(session_for, tickers) -> None:
    session = session_for(make_puzzle([i for i in range(81) if i != 80]))
    seen = []

    def restart_on_win(state) -> None:
        if state.is_game_won and state.game_id == 1:
            session.start_new_game("easy")

    session.subscribe(restart_on_win)
    session.subscribe(lambda s: seen.append((s.game_id, s.is_game_won)))
    session.select_cell(8, 8)
    session.handle_input(9)

    assert seen == [(1, False), (1, True), (2, False)]
    assert tickers[0].stopped
    assert len(tickers) == 2 and not tickers[-1].stopped
    assert session.timer_running
    assert session.state.game_id == 2
    tickers[-1].fire(2)
    assert session.state.timer_seconds == 2


def test_prefilled_puzzle_starts_won_without_clock(session_for, tickers) -> None:
    session = session_for(make_puzzle(list(range(81))))
    assert session.state.is_game_won
    assert len(tickers) == 0
    assert not session.timer_running
