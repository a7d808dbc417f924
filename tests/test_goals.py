from datetime import date
from decimal import Decimal

import pytest

from moneytor.domain import Goal
from moneytor.errors import InsufficientFundsError, InvalidAmountError, InvalidGoalError
from moneytor.goals import crossed_milestones, deposit, evaluate_goal, withdraw

TODAY = date(2026, 10, 19)


def make_goal(target=5000, current=0, target_date=None, created_at=None, achieved=False):
    return Goal(
        id="g1",
        user_id="u1",
        name="New laptop",
        target_amount=target,
        current_amount=current,
        target_date=target_date,
        created_at=created_at,
        achieved=achieved,
    )


def test_percentage_and_remaining():
    p = evaluate_goal(make_goal(current=1250), TODAY)
    assert p.percentage == 25.0
    assert p.remaining_amount == 3750
    assert p.days_remaining is None
    assert p.status == "on_track"


def test_percentage_clamped_when_over_target():
    p = evaluate_goal(make_goal(current=7000), TODAY)
    assert p.percentage == 100.0
    assert p.remaining_amount == 0
    assert p.status == "achieved"


def test_achieved_flag_wins():
    p = evaluate_goal(make_goal(current=10, target_date=date(2026, 1, 1), achieved=True), TODAY)
    assert p.status == "achieved"


def test_overdue():
    p = evaluate_goal(make_goal(current=100, target_date=date(2026, 10, 10)), TODAY)
    assert p.days_remaining == -9
    assert p.status == "overdue"


def test_behind_when_progress_lags_elapsed_time():
    # half the time gone, a fifth of the money saved
    g = make_goal(current=1000, created_at=date(2026, 8, 1), target_date=date(2026, 12, 28))
    p = evaluate_goal(g, date(2026, 10, 15))
    assert p.status == "behind"


def test_on_track_when_progress_leads_elapsed_time():
    g = make_goal(current=4000, created_at=date(2026, 8, 1), target_date=date(2026, 12, 28))
    p = evaluate_goal(g, date(2026, 10, 15))
    assert p.status == "on_track"


def test_behind_fallback_without_creation_date():
    near = make_goal(current=4000, target_date=date(2026, 11, 1))
    far = make_goal(current=100, target_date=date(2027, 6, 1))
    assert evaluate_goal(near, TODAY).status == "behind"
    assert evaluate_goal(far, TODAY).status == "on_track"


def test_invalid_goal_raises():
    with pytest.raises(InvalidGoalError):
        evaluate_goal(make_goal(target=0), TODAY)


def test_deposit_completes_goal():
    result = deposit(make_goal(current=4000), 1500)
    assert result.goal.current_amount == 5500
    assert result.percentage == 100.0
    assert result.completed is True
    assert 100 in result.milestones
    assert evaluate_goal(result.goal, TODAY).status == "achieved"


def test_deposit_does_not_touch_original():
    g = make_goal(current=4000)
    deposit(g, 1500)
    assert g.current_amount == 4000


def test_deposit_on_already_achieved_goal_is_not_completed_again():
    result = deposit(make_goal(current=5000), 100)
    assert result.completed is False
    assert result.milestones == ()


def test_deposit_reports_single_milestone():
    result = deposit(make_goal(target=1000, current=480), 40)
    assert result.previous_percentage == 48.0
    assert result.percentage == 52.0
    assert result.milestones == (50,)


def test_deposit_crossing_several_milestones():
    result = deposit(make_goal(target=1000, current=100), 800)
    assert result.milestones == (25, 50, 75, 90)
    assert result.completed is False


def test_deposit_rejects_non_positive_amount():
    with pytest.raises(InvalidAmountError):
        deposit(make_goal(), 0)
    with pytest.raises(InvalidAmountError):
        deposit(make_goal(), -5)


def test_withdraw():
    result = withdraw(make_goal(target=1000, current=520), 40)
    assert result.goal.current_amount == 480
    assert result.milestones == (50,)
    assert result.completed is False


def test_withdraw_everything_leaves_zero():
    result = withdraw(make_goal(current=200), 200)
    assert result.goal.current_amount == 0


def test_withdraw_more_than_available():
    g = make_goal(current=200)
    with pytest.raises(InsufficientFundsError) as exc:
        withdraw(g, 500)
    assert exc.value.available == 200
    assert g.current_amount == 200


def test_withdraw_rejects_non_positive_amount():
    with pytest.raises(InvalidAmountError):
        withdraw(make_goal(current=200), 0)


def test_crossed_milestones_boundaries():
    assert crossed_milestones(48, 52) == (50,)
    assert crossed_milestones(50, 60) == ()
    assert crossed_milestones(40, 50) == (50,)
    assert crossed_milestones(52, 48) == (50,)
    assert crossed_milestones(0, 100) == (25, 50, 75, 90, 100)
    assert crossed_milestones(30, 30) == ()


def test_balance_never_negative_after_operations():
    g = make_goal(target=1000, current=0)
    for op, amount in (("d", 300), ("w", 100), ("d", 50), ("w", 250)):
        if op == "d":
            g = deposit(g, amount).goal
        else:
            g = withdraw(g, amount).goal
        assert g.current_amount >= 0
    assert g.current_amount == 0


def test_cent_deposits_reach_target_exactly():
    g = make_goal(target=850)
    for amount in (0.01, 787.06, 62.93):
        g = deposit(g, amount).goal
    assert g.current_amount == Decimal("850.00")
    assert evaluate_goal(g, TODAY).status == "achieved"


def test_cent_deposit_completes_goal():
    result = deposit(make_goal(target=850, current=787.07), 62.93)
    assert result.completed is True
    assert result.percentage == 100.0


def test_withdraw_full_cent_balance():
    g = make_goal(target=1000)
    for amount in (0.01, 787.06, 62.93):
        g = deposit(g, amount).goal
    result = withdraw(g, 850.00)
    assert result.goal.current_amount == 0


@pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf")])
def test_fund_operations_reject_non_finite_amounts(amount):
    g = make_goal(target=1000, current=10)
    with pytest.raises(InvalidAmountError):
        deposit(g, amount)
    with pytest.raises(InvalidAmountError):
        withdraw(g, amount)


@pytest.mark.parametrize("target", [float("nan"), float("inf")])
def test_non_finite_target_is_invalid(target):
    with pytest.raises(InvalidGoalError):
        evaluate_goal(make_goal(target=target), TODAY)
