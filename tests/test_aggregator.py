"""Tests for the aggregator module."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from contrib_stats.aggregator import aggregate
from contrib_stats.models import User

users_strategy = st.builds(
    User,
    login=st.sampled_from(["alice", "bob", "carol", "dave", "erin"]),
    contributions=st.integers(min_value=0, max_value=500),
)
user_lists_strategy = st.lists(st.lists(users_strategy, max_size=6), max_size=6)


def test_aggregate_sums_and_ranks():
    result = aggregate([
        [User("A", 10), User("B", 5)],
        [User("B", 3), User("C", 7)],
        [User("A", 2)],
    ])
    assert result == [User("A", 12), User("B", 8), User("C", 7)]


def test_aggregate_empty_input():
    assert aggregate([]) == []
    assert aggregate([[], []]) == []


def test_aggregate_ties_sorted_by_login():
    result = aggregate([[User("zed", 4), User("amy", 4)], [User("bob", 4)]])
    assert [u.login for u in result] == ["amy", "bob", "zed"]


def test_aggregate_keeps_zero_contributions():
    result = aggregate([[User("alice", 0)], [User("alice", 0), User("bob", 1)]])
    assert result == [User("bob", 1), User("alice", 0)]


def test_aggregate_accepts_generators():
    result = aggregate(iter([User("a", i)] for i in range(3)))
    assert result == [User("a", 3)]


@given(user_lists=user_lists_strategy)
def test_aggregate_has_unique_logins_in_canonical_order(user_lists):
    result = aggregate(user_lists)
    logins = [u.login for u in result]
    assert len(logins) == len(set(logins))
    assert result == sorted(result, key=lambda u: (-u.contributions, u.login))


@given(user_lists=user_lists_strategy)
def test_aggregate_preserves_totals(user_lists):
    result = aggregate(user_lists)
    assert sum(u.contributions for u in result) == sum(u.contributions for users in user_lists for u in users)


@given(data=st.data(), user_lists=user_lists_strategy)
def test_aggregate_ignores_input_order(data, user_lists):
    shuffled = data.draw(st.permutations(user_lists))
    assert aggregate(shuffled) == aggregate(user_lists)


@given(user_lists=user_lists_strategy)
def test_aggregate_is_idempotent(user_lists):
    result = aggregate(user_lists)
    assert aggregate([[u] for u in result]) == result
    assert aggregate([result]) == result
