import pytest

from core.team import INITIAL_TEAM, Team
from core.turn_clock import Cue, InvalidBudget, Phase, TurnClock
from settings import BOOST_S, GRACE_S, REVIVE_S


def test_new_clock_waits_in_pre_game(clock, scheduler):
    assert clock.phase is Phase.PRE_GAME
    assert clock.active_team is INITIAL_TEAM is Team.B
    assert clock.remaining_seconds == 0
    assert scheduler.pending() == 0


def test_start_game_runs_initial_team(clock, cues, scheduler):
    clock.start_game(120, 90)
    assert clock.phase is Phase.RUNNING
    assert clock.active_team is Team.B
    assert clock.remaining_seconds == 90
    assert clock.budget(Team.A) == 120
    assert clock.budget(Team.B) == 90
    assert cues.cues == [Cue.TURN_START]
    assert scheduler.pending() == 1


@pytest.mark.parametrize("a, b", [(0, 120), (120, 601), (-5, 120), (601, 0)])
def test_start_game_rejects_out_of_range_budget(clock, cues, scheduler, a, b):
    with pytest.raises(InvalidBudget):
        clock.start_game(a, b)
    assert clock.phase is Phase.PRE_GAME
    assert clock.budget(Team.A) == 120
    assert clock.budget(Team.B) == 120
    assert cues.cues == []
    assert scheduler.pending() == 0


def test_invalid_budget_names_the_team(clock):
    with pytest.raises(InvalidBudget) as excinfo:
        clock.start_game(120, 601)
    assert excinfo.value.team is Team.B
    assert excinfo.value.seconds == 601
    assert isinstance(excinfo.value, ValueError)


def test_start_game_accepts_bounds(clock):
    clock.start_game(1, 600)
    assert clock.phase is Phase.RUNNING
    assert clock.remaining_seconds == 600


def test_start_game_ignored_while_running(running):
    running.start_game(30, 30)
    assert running.remaining_seconds == 120
    assert running.budget(Team.A) == 120


def test_ten_ticks_without_threshold_fire_no_cue(running, cues, advance):
    advance(10)
    assert running.remaining_seconds == 110
    assert running.phase is Phase.RUNNING
    assert cues.cues == []


def test_beep_fires_at_threshold(running, cues, advance):
    running.adjust_time(-59)          # 61 left
    advance()
    assert running.remaining_seconds == 60
    assert cues.cues == []
    advance()
    assert cues.cues == [Cue.BEEP]
    assert running.remaining_seconds == 59


def test_last_second_beeps_then_times_out(running, cues, scheduler, advance):
    running.adjust_time(-119)         # 1 left
    advance()
    assert cues.cues == [Cue.BEEP]
    assert running.remaining_seconds == 0
    assert running.phase is Phase.RUNNING
    advance()
    assert running.phase is Phase.TIMED_OUT
    assert cues.cues == [Cue.BEEP, Cue.TIMEOUT]
    assert scheduler.pending() == 0
    advance(5)
    assert running.phase is Phase.TIMED_OUT
    assert cues.cues == [Cue.BEEP, Cue.TIMEOUT]


def test_final_countdown_beeps_every_second(running, cues, advance):
    running.adjust_time(-115)         # 5 left
    advance(6)
    assert cues.cues == [Cue.BEEP] * 5 + [Cue.TIMEOUT]


def test_pause_and_resume_keep_remaining(running, advance, scheduler):
    running.adjust_time(-70)          # 50 left
    running.toggle_pause()
    assert running.phase is Phase.PAUSED
    assert running.paused_from_grace is False
    assert scheduler.pending() == 0
    advance(10)
    assert running.remaining_seconds == 50
    running.toggle_pause()
    assert running.phase is Phase.RUNNING
    assert running.remaining_seconds == 50
    advance()
    assert running.remaining_seconds == 49


def test_tap_while_running_starts_grace(running, cues):
    running.on_turn_area_tap()
    assert running.phase is Phase.GRACE
    assert running.remaining_seconds == GRACE_S
    assert running.active_team is Team.B
    assert cues.cues == [Cue.END_TURN_TAP]


def test_grace_pause_resumes_without_reset(running, advance, cues):
    running.on_turn_area_tap()
    advance(2)
    assert running.remaining_seconds == 3
    running.toggle_pause()
    assert running.phase is Phase.PAUSED
    assert running.paused_from_grace is True
    advance(10)
    assert running.remaining_seconds == 3
    running.toggle_pause()
    assert running.phase is Phase.GRACE
    assert running.remaining_seconds == 3
    assert running.paused_from_grace is False
    advance()
    assert running.remaining_seconds == 2
    assert cues.cues.count(Cue.GRACE_TICK) == 3


def test_tap_toggles_pause_during_grace(running):
    running.on_turn_area_tap()
    running.on_turn_area_tap()
    assert running.phase is Phase.PAUSED
    assert running.paused_from_grace is True
    running.on_turn_area_tap()
    assert running.phase is Phase.GRACE


def test_grace_expiry_hands_over(clock, cues, advance):
    clock.start_game(200, 120)
    cues.clear()
    clock.on_turn_area_tap()
    advance(GRACE_S)
    assert clock.phase is Phase.GRACE
    assert clock.remaining_seconds == 0
    assert cues.cues == [Cue.END_TURN_TAP] + [Cue.GRACE_TICK] * GRACE_S
    advance()
    assert clock.phase is Phase.RUNNING
    assert clock.active_team is Team.A
    assert clock.remaining_seconds == 200
    assert cues.cues[-1] is Cue.TURN_START
    advance()
    assert clock.remaining_seconds == 199


def test_timed_out_tap_enters_grace_without_tap_cue(running, cues, advance):
    running.adjust_time(-1000)
    advance()
    assert running.phase is Phase.TIMED_OUT
    cues.clear()
    running.on_turn_area_tap()
    assert running.phase is Phase.GRACE
    assert running.remaining_seconds == GRACE_S
    assert cues.cues == []


def test_adjust_time_clamps_at_zero(running):
    running.adjust_time(-70)
    running.adjust_time(-1000)
    assert running.remaining_seconds == 0


def test_adjust_time_while_paused(running):
    running.toggle_pause()
    running.adjust_time(30)
    assert running.remaining_seconds == 150
    assert running.phase is Phase.PAUSED


def test_adjust_time_ignored_outside_turn_countdown(clock, running):
    fresh = TurnClock(clock._scheduler)
    fresh.adjust_time(30)
    assert fresh.remaining_seconds == 0
    assert fresh.phase is Phase.PRE_GAME

    running.on_turn_area_tap()
    running.adjust_time(30)
    assert running.remaining_seconds == GRACE_S


def test_pause_ignored_in_pre_game_and_timeout(clock, advance):
    clock.toggle_pause()
    assert clock.phase is Phase.PRE_GAME
    clock.start_game(1, 1)
    advance(2)
    assert clock.phase is Phase.TIMED_OUT
    clock.toggle_pause()
    assert clock.phase is Phase.TIMED_OUT


def test_tap_ignored_in_pre_game(clock, cues):
    clock.on_turn_area_tap()
    assert clock.phase is Phase.PRE_GAME
    assert cues.cues == []


def test_boost_adds_to_live_turn(running):
    running.add_boost()
    assert running.remaining_seconds == 120 + BOOST_S
    running.toggle_pause()
    running.add_boost()
    assert running.remaining_seconds == 120 + 2 * BOOST_S
    assert running.phase is Phase.PAUSED


@pytest.mark.parametrize("setup", ["grace", "paused_grace", "timed_out"])
def test_boost_revives_same_team(running, cues, scheduler, advance, setup):
    if setup == "timed_out":
        running.adjust_time(-1000)
        advance()
    else:
        running.on_turn_area_tap()
        advance(2)
        if setup == "paused_grace":
            running.toggle_pause()
    cues.clear()

    running.add_boost()
    assert running.phase is Phase.RUNNING
    assert running.remaining_seconds == BOOST_S
    assert running.active_team is Team.B
    assert running.paused_from_grace is False
    assert cues.cues == [Cue.TURN_START]
    assert scheduler.pending() == 1
    advance()
    assert running.remaining_seconds == BOOST_S - 1


def test_boost_ignored_in_pre_game(clock, cues):
    clock.add_boost()
    assert clock.phase is Phase.PRE_GAME
    assert clock.remaining_seconds == 0
    assert cues.cues == []


def test_plus_thirty_on_live_turn(running):
    running.add_thirty_seconds_or_revive()
    assert running.remaining_seconds == 120 + REVIVE_S


def test_plus_thirty_revives_timed_out_team(running, cues, advance):
    running.adjust_time(-1000)
    advance()
    cues.clear()
    running.add_thirty_seconds_or_revive()
    assert running.phase is Phase.RUNNING
    assert running.active_team is Team.B
    assert running.remaining_seconds == REVIVE_S
    assert cues.cues == [Cue.TURN_START]


def test_plus_thirty_ignored_during_grace(running):
    running.on_turn_area_tap()
    running.add_thirty_seconds_or_revive()
    assert running.phase is Phase.GRACE
    assert running.remaining_seconds == GRACE_S


def test_open_settings_mid_turn_restarts_same_team(running, scheduler, advance):
    advance(3)
    running.open_settings()
    assert running.phase is Phase.PRE_GAME
    assert scheduler.pending() == 0
    advance(5)
    running.start_game(90, 100)
    assert running.active_team is Team.B
    assert running.remaining_seconds == 100


def test_open_settings_mid_grace_flips_on_start(running, advance):
    running.on_turn_area_tap()
    advance(2)
    running.open_settings()
    running.start_game(90, 100)
    assert running.active_team is Team.A
    assert running.remaining_seconds == 90
    running.open_settings()
    running.start_game(90, 100)
    assert running.active_team is Team.A


def test_open_settings_from_paused_grace_restarts_same_team(running):
    running.on_turn_area_tap()
    running.toggle_pause()
    running.open_settings()
    assert running.paused_from_grace is False
    running.start_game(90, 100)
    assert running.active_team is Team.B
    assert running.remaining_seconds == 100
    running.toggle_pause()
    running.toggle_pause()
    assert running.phase is Phase.RUNNING


def test_rejected_start_keeps_pending_flip(running):
    running.on_turn_area_tap()
    running.open_settings()
    with pytest.raises(InvalidBudget):
        running.start_game(0, 100)
    running.start_game(90, 100)
    assert running.active_team is Team.A


def test_open_settings_ignored_in_pre_game(clock):
    clock.open_settings()
    clock.start_game(60, 60)
    assert clock.active_team is Team.B


def test_swap_budgets_only_in_pre_game(clock):
    clock.start_game(60, 90)
    clock.swap_budgets()
    assert clock.budget(Team.A) == 60
    clock.open_settings()
    clock.swap_budgets()
    assert clock.budget(Team.A) == 90
    assert clock.budget(Team.B) == 60


def test_never_more_than_one_tick_armed(running, scheduler, advance):
    for _ in range(3):
        running.toggle_pause()
        running.toggle_pause()
        running.on_turn_area_tap()
        running.toggle_pause()
        running.toggle_pause()
        running.add_boost()
        assert scheduler.pending() <= 1
        advance()
        assert scheduler.pending() <= 1


def test_in_grace_covers_running_and_paused_grace(running):
    assert not running.in_grace
    running.on_turn_area_tap()
    assert running.in_grace
    running.toggle_pause()
    assert running.phase is Phase.PAUSED
    assert running.in_grace
    running.toggle_pause()
    running.add_boost()
    assert not running.in_grace
    running.toggle_pause()
    assert not running.in_grace


def test_tick_armed_reflects_phase(running):
    assert running.tick_armed
    running.toggle_pause()
    assert not running.tick_armed
