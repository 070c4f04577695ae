from datetime import date, datetime, timezone

import pytest

from exgo_finance.errors import NotFoundError, ValidationError
from exgo_finance.gamification import (
    BADGE_UNLOCK_XP,
    DEFAULT_BADGES,
    XP_VALUES,
    add_xp,
    complete_challenge,
    create_challenge,
    goal_milestone_xp,
    initial_state,
    level_for_xp,
    load_gamification,
    logging_days,
    record_logging_day,
    refresh_badges,
    save_gamification,
    set_badge_progress,
    settle_challenges,
    streak_from_transactions,
    update_challenge_progress,
    update_streak,
    xp_for_level,
)
from exgo_finance.models import GamificationState, Goal, StreakState, Transaction

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


def _goal(current, target=1000, goal_id='g1'):
    status = 'completed' if current >= target else 'active'
    return Goal(id=goal_id, name='Laptop', target_amount=target, currency='USD',
                created_at='2024-01-01T00:00:00.000Z', updated_at='2024-01-01T00:00:00.000Z',
                current_amount=current, status=status)


def _tx(tx_id, created_at):
    return Transaction(id=tx_id, type='expense', amount=5, created_at=created_at)


def _badge(state, badge_id):
    return next(badge for badge in state.badges if badge.id == badge_id)


def test_levels_follow_xp():
    assert xp_for_level(3) == 300
    assert level_for_xp(0) == 1
    assert level_for_xp(99) == 1
    assert level_for_xp(100) == 2
    assert level_for_xp(250) == 3

    state = add_xp(initial_state(), 120, NOW)
    assert state.level == 2
    assert state.to_dict()['level'] == {'xp': 120, 'level': 2}


def test_add_xp_rejects_negative_amounts():
    with pytest.raises(ValidationError):
        add_xp(initial_state(), -5)


def test_streak_counts_consecutive_days():
    streak = StreakState()
    for day in (1, 2, 3):
        streak = update_streak(streak, date(2024, 3, day))

    assert streak.current == 3
    assert update_streak(streak, date(2024, 3, 3)) == streak
    assert update_streak(streak, date(2024, 3, 1)) == streak

    broken = update_streak(streak, date(2024, 3, 6))
    assert broken.current == 1
    assert broken.best == 3


def test_skip_token_bridges_one_missed_day():
    streak = StreakState(current=5, best=5, skip_tokens=1, last_date=date(2024, 3, 5))

    bridged = update_streak(streak, date(2024, 3, 7))

    assert bridged.current == 6
    assert bridged.skip_tokens == 0
    assert update_streak(bridged, date(2024, 3, 9)).current == 1


def test_skip_token_earned_every_fourteen_days():
    streak = StreakState(current=13, best=13, last_date=date(2024, 3, 13))

    assert update_streak(streak, date(2024, 3, 14)).skip_tokens == 1


def test_streak_from_transactions_uses_local_days():
    transactions = [
        _tx('1', '2024-03-01T09:00:00'),
        _tx('2', '2024-03-01T21:00:00'),
        _tx('3', '2024-03-02T10:00:00'),
        _tx('4', 'not a date'),
        _tx('5', '2024-03-03T08:00:00'),
    ]

    assert logging_days(transactions) == [date(2024, 3, 1), date(2024, 3, 2), date(2024, 3, 3)]
    assert streak_from_transactions(transactions).current == 3


def test_logging_xp_is_awarded_once_per_day():
    state = record_logging_day(initial_state(), date(2024, 3, 1), NOW)
    again = record_logging_day(state, date(2024, 3, 1), NOW)

    assert state.xp == XP_VALUES['transaction_logged']
    assert again is state


def test_goal_badges_unlock_and_award_xp():
    state = refresh_badges(initial_state(), [_goal(850), _goal(100, goal_id='g2')], NOW)

    assert _badge(state, 'goal_50').unlocked_at == '2024-03-10T12:00:00.000+00:00'
    assert _badge(state, 'goal_80').unlocked
    assert not _badge(state, 'goal_100').unlocked
    assert _badge(state, 'goal_100').progress == 85
    assert state.xp == 2 * BADGE_UNLOCK_XP

    assert refresh_badges(state, [_goal(850)], NOW) is state


def test_completed_goal_unlocks_goal_master():
    state = refresh_badges(initial_state(), [_goal(1000)], NOW)

    assert _badge(state, 'goal_100').unlocked


def test_logging_badge_follows_streak():
    state = GamificationState(streak=StreakState(current=7, best=7, last_date=date(2024, 3, 7)),
                              badges=DEFAULT_BADGES)

    state = refresh_badges(state, now=NOW)

    assert _badge(state, 'logging_7').unlocked
    assert _badge(state, 'logging_30').progress == 7


def test_external_badge_progress():
    state = set_badge_progress(initial_state(), 'budget_1', 1, NOW)

    assert _badge(state, 'budget_1').unlocked
    assert _badge(state, 'budget_3').progress == 0
    with pytest.raises(NotFoundError):
        set_badge_progress(state, 'nope', 1)


def test_only_one_challenge_is_active():
    state, first = create_challenge(initial_state(), 'Log 20 days', 'logging', 20, '2024-03-01', '2024-03-31', NOW)
    state, second = create_challenge(state, 'No takeaway', 'no_spend', 7, '2024-03-10', '2024-03-17', NOW)

    assert [challenge.status for challenge in state.challenges] == ['expired', 'active']
    assert update_challenge_progress(state, first.id, 5, NOW) is state

    state = update_challenge_progress(state, second.id, 50, NOW)
    assert state.challenges[1].progress == 7


def test_complete_challenge_awards_xp_once():
    state, challenge = create_challenge(initial_state(), 'Save 100', 'save', 100, '2024-03-01', '2024-03-31', NOW)

    state = complete_challenge(state, challenge.id, NOW)
    state = complete_challenge(state, challenge.id, NOW)

    assert state.challenges[0].status == 'completed'
    assert state.xp == XP_VALUES['challenge_completed']


def test_settle_challenges_after_end_date():
    state, met = create_challenge(initial_state(), 'Save 100', 'save', 100, '2024-02-01', '2024-02-29', NOW)
    state = update_challenge_progress(state, met.id, 100, NOW)

    settled = settle_challenges(state, date(2024, 3, 1), NOW)
    assert settled.challenges[0].status == 'completed'
    assert settle_challenges(state, date(2024, 2, 29), NOW) is state

    state, _ = create_challenge(initial_state(), 'Save 100', 'save', 100, '2024-02-01', '2024-02-29', NOW)
    assert settle_challenges(state, date(2024, 3, 1), NOW).challenges[0].status == 'expired'


def test_challenge_dates_are_validated():
    with pytest.raises(ValidationError):
        create_challenge(initial_state(), 'Backwards', 'save', 10, '2024-03-10', '2024-03-01')


def test_goal_milestone_xp():
    assert goal_milestone_xp(_goal(400)) == 0
    assert goal_milestone_xp(_goal(500)) == XP_VALUES['goal_checkpoint_50']
    assert goal_milestone_xp(_goal(800)) == XP_VALUES['goal_checkpoint_80']
    assert goal_milestone_xp(_goal(1200)) == XP_VALUES['goal_completed']


def test_state_persists_to_json(tmp_path):
    path = tmp_path / 'gamification.json'
    assert load_gamification(path) == initial_state()

    state = record_logging_day(initial_state(), date(2024, 3, 1), NOW)
    state, _ = create_challenge(state, 'Log 20 days', 'logging', 20, '2024-03-01', '2024-03-31', NOW)
    save_gamification(state, path)

    assert load_gamification(path) == state


def test_corrupt_or_old_state_is_repaired(tmp_path):
    path = tmp_path / 'gamification.json'
    path.write_text('{"level": {"xp": -3}}', encoding='utf-8')
    assert load_gamification(path) == initial_state()

    path.write_text('{"level": {"xp": 40}, "badges": []}', encoding='utf-8')
    restored = load_gamification(path)
    assert restored.xp == 40
    assert len(restored.badges) == len(DEFAULT_BADGES)
