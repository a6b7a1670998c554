"""Unit tests for Daily Challenge System (progression/gamification/challenges.py)"""
import random
from datetime import date, timedelta

from progression.gamification.challenges import (
    CHALLENGE_POOL,
    assign_daily_challenges,
    format_challenges_display,
    get_challenge_template,
    needs_new_challenges,
)


def test_pool_has_eight_unique_templates():
    ids = [template.id for template in CHALLENGE_POOL]
    assert len(ids) == 8
    assert len(set(ids)) == 8


def test_assign_three_distinct_challenges():
    challenges = assign_daily_challenges(random.Random(1))

    assert len(challenges) == 3
    assert len({challenge.id for challenge in challenges}) == 3
    assert all(challenge.completed is False for challenge in challenges)
    assert all(get_challenge_template(challenge.id) is not None for challenge in challenges)


def test_assign_is_deterministic_for_seed():
    first = assign_daily_challenges(random.Random(42))
    second = assign_daily_challenges(random.Random(42))
    assert [c.id for c in first] == [c.id for c in second]


def test_assign_respects_count():
    assert len(assign_daily_challenges(random.Random(3), count=5)) == 5


def test_assign_does_not_touch_pool_order():
    before = [template.id for template in CHALLENGE_POOL]
    assign_daily_challenges(random.Random(7))
    assert [template.id for template in CHALLENGE_POOL] == before


def test_instances_are_independent_of_templates():
    challenge = assign_daily_challenges(random.Random(5))[0]
    challenge.completed = True

    assert not hasattr(get_challenge_template(challenge.id), "completed")
    assert assign_daily_challenges(random.Random(5))[0].completed is False


def test_get_challenge_template_unknown():
    assert get_challenge_template("swim_100km") is None


def test_needs_new_challenges():
    today = date(2024, 5, 15)
    current = assign_daily_challenges(random.Random(1))

    assert needs_new_challenges(None, today, []) is True
    assert needs_new_challenges(today, today, []) is True
    assert needs_new_challenges(today, today, current) is False
    assert needs_new_challenges(today - timedelta(days=1), today, current) is True


def test_format_challenges_display():
    challenges = assign_daily_challenges(random.Random(1))
    challenges[0].completed = True
    text = format_challenges_display(challenges)

    assert "✅" in text
    assert challenges[1].id in text
    assert format_challenges_display([]) == "No challenges assigned today."
