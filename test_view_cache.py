#!/usr/bin/env python3
"""
Quick test to verify the view cache stores, expires and invalidates by scope
"""
from utils.view_cache import (
    get_cached_response,
    invalidate_scope,
    invalidate_shift_views,
    org_scope,
    set_cached_response,
    user_scope,
)


def test_response_cache_round_trip():
    test_key = "user:user1:summary"
    test_data = {"total_recent_hours": 12.5}

    assert get_cached_response(test_key) is None

    set_cached_response(test_key, test_data)
    assert get_cached_response(test_key) == test_data


def test_expired_entries_are_dropped():
    set_cached_response("org:org1:active", ["shift"])

    assert get_cached_response("org:org1:active", ttl=-1) is None
    # Expiry removed it for good
    assert get_cached_response("org:org1:active") is None


def test_invalidate_scope_only_touches_that_scope():
    set_cached_response("user:user1:summary", 1)
    set_cached_response("user:user10:summary", 2)
    set_cached_response("org:org1:active", 3)

    assert invalidate_scope(user_scope("user1")) == 1

    assert get_cached_response("user:user1:summary") is None
    assert get_cached_response("user:user10:summary") == 2
    assert get_cached_response("org:org1:active") == 3


def test_shift_change_invalidates_user_org_and_admin_views():
    set_cached_response(f"{user_scope('user1')}:summary", 1)
    set_cached_response(f"{org_scope('org1')}:active", 2)
    set_cached_response(f"{org_scope(None)}:active", 3)
    set_cached_response(f"{org_scope('org2')}:active", 4)

    invalidate_shift_views("user1", "org1")

    assert get_cached_response(f"{user_scope('user1')}:summary") is None
    assert get_cached_response(f"{org_scope('org1')}:active") is None
    assert get_cached_response(f"{org_scope(None)}:active") is None
    assert get_cached_response(f"{org_scope('org2')}:active") == 4
