"""Tests for RetryPolicy."""

import pytest

from transfer.retry import RetryPolicy


def test_default_policy_retries_forever_without_delay():
    policy = RetryPolicy()

    assert policy.should_retry(1)
    assert policy.should_retry(10_000)
    assert policy.delay_for(1) == 0.0
    assert policy.delay_for(50) == 0.0


def test_bounded_policy_stops_at_max_attempts():
    policy = RetryPolicy(max_attempts=3)

    assert policy.should_retry(1)
    assert policy.should_retry(2)
    assert not policy.should_retry(3)


def test_exponential_backoff_is_capped():
    policy = RetryPolicy(initial_delay=0.5, backoff_multiplier=2, max_delay=3)

    assert policy.delay_for(1) == 0.5
    assert policy.delay_for(2) == 1.0
    assert policy.delay_for(3) == 2.0
    assert policy.delay_for(4) == 3
    assert policy.delay_for(10) == 3


@pytest.mark.parametrize("kwargs", [
    {'max_attempts': 0},
    {'initial_delay': -1},
    {'max_delay': -1},
    {'backoff_multiplier': 0.5},
])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)
