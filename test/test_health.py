"""
Tests for health factor evaluation and classification.
"""

import pytest

from lendbot.liquidation.exceptions import BatchCallError
from lendbot.liquidation.health import HEALTH_FACTOR_ONE, AccountHealthEvaluator, is_liquidatable, locate

from conftest import USER_A, USER_B, USER_C

POOL_1 = "0x0000000000000000000000000000000000000201"
POOL_2 = "0x0000000000000000000000000000000000000202"
USERS = [USER_A, USER_B, USER_C]


@pytest.mark.parametrize(
    "health_factor, expected",
    [
        (0, False),
        (1, True),
        (5 * 10**17, True),
        (HEALTH_FACTOR_ONE - 1, True),
        (HEALTH_FACTOR_ONE, False),
        (2 * HEALTH_FACTOR_ONE, False),
        (2**256 - 1, False),
    ],
)
def test_is_liquidatable(health_factor, expected):
    assert is_liquidatable(health_factor) is expected


def test_locate_matches_request_order(chain, pool_interface):
    pools = [POOL_1, POOL_2]
    evaluator = AccountHealthEvaluator(chain, pool_interface)
    requests = evaluator.build_health_requests(USERS, pools)

    assert len(requests) == len(USERS) * len(pools)
    for index, call in enumerate(requests):
        user, pool = locate(index, USERS, pools)
        assert pool == pools[index // len(USERS)]
        assert user == USERS[index % len(USERS)]
        assert call.target == pool
        assert chain._address_arg(call.call_data) == user


def test_all_healthy_yields_nothing(chain, pool_interface):
    for pool in (POOL_1, POOL_2):
        for user in USERS:
            chain.set_health(pool, user, 2 * HEALTH_FACTOR_ONE)

    evaluator = AccountHealthEvaluator(chain, pool_interface)

    assert evaluator.find_unhealthy(USERS, [POOL_1, POOL_2]) == []
    assert len(chain.batches) == 1
    assert len(chain.batches[0]) == 6


def test_unhealthy_entries_keep_scan_order_and_skip_zero(chain, pool_interface):
    chain.set_health(POOL_1, USER_A, 2 * HEALTH_FACTOR_ONE)
    chain.set_health(POOL_1, USER_C, 9 * 10**17)
    chain.set_health(POOL_2, USER_A, 5 * 10**17)
    # USER_B has no debt anywhere, health factor decodes as 0

    evaluator = AccountHealthEvaluator(chain, pool_interface)
    unhealthy = evaluator.find_unhealthy(USERS, [POOL_1, POOL_2])

    assert [(r.user, r.pool, r.health_factor) for r in unhealthy] == [
        (USER_C, POOL_1, 9 * 10**17),
        (USER_A, POOL_2, 5 * 10**17),
    ]
    assert unhealthy[1].health_score == 0.5
    assert unhealthy[1].total_debt_base == 10**18


def test_evaluate_returns_every_entry(chain, pool_interface):
    evaluator = AccountHealthEvaluator(chain, pool_interface)
    records = evaluator.evaluate(USERS, [POOL_1])
    assert [r.user for r in records] == USERS
    assert all(r.health_factor == 0 for r in records)


def test_no_users_makes_no_call(chain, pool_interface):
    evaluator = AccountHealthEvaluator(chain, pool_interface)
    assert evaluator.find_unhealthy([], [POOL_1]) == []
    assert chain.batches == []


def test_batch_failure_propagates(pool_interface):
    class FailingExecutor:
        def execute(self, calls):
            raise BatchCallError("execution reverted")

    evaluator = AccountHealthEvaluator(FailingExecutor(), pool_interface)
    with pytest.raises(BatchCallError):
        evaluator.find_unhealthy(USERS, [POOL_1])
