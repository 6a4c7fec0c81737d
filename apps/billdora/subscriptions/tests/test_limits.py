from apps.billdora.subscriptions.limits import check_limit, get_limit, is_pro, is_starter
from apps.billdora.subscriptions.models import LimitType, Plan, PlanLimits


def _starter():
    return Plan(name="Starter", amount=0, limits=PlanLimits(projects=3, team_members=1, clients=5, invoices_per_month=10))


def test_no_plan_blocks_everything():
    res = check_limit(None, LimitType.PROJECTS, 0)
    assert res.allowed is False
    assert res.message == "Please select a plan to continue."

    res = check_limit(Plan(name="Legacy"), LimitType.CLIENTS, 0)
    assert res.allowed is False


def test_under_limit_is_allowed():
    res = check_limit(_starter(), LimitType.PROJECTS, 2)
    assert res.allowed is True
    assert res.limit == 3
    assert res.remaining == 1
    assert res.message is None


def test_at_limit_is_blocked_with_message():
    res = check_limit(_starter(), LimitType.INVOICES, 10)
    assert res.allowed is False
    assert res.remaining == 0
    assert res.message == (
        "You have reached the maximum of 10 invoices this month on the Starter plan. Upgrade to Professional for more."
    )


def test_unlimited_values():
    plan = Plan(name="Professional", amount=49, limits=PlanLimits(projects=-1, team_members=None))
    assert check_limit(plan, LimitType.PROJECTS, 10_000).allowed is True
    assert check_limit(plan, LimitType.TEAM_MEMBERS, 50).allowed is True
    assert get_limit(plan, LimitType.PROJECTS) == -1


def test_tiers():
    assert is_pro(Plan(name="Professional Annual", amount=490)) is True
    assert is_starter(Plan(name="Professional Annual", amount=490)) is False
    assert is_starter(None) is True
    assert is_starter(_starter()) is True
    assert is_starter(Plan(name="Team", amount=0)) is True
    assert is_starter(Plan(name="Team", amount=19)) is False
    assert is_pro(None) is False
