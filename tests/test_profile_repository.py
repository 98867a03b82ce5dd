from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from makeup_api.domain.exceptions import UsageStoreError
from makeup_api.infrastructure.db.repositories.profile_repository import SupabaseProfileRepository


class FakeQuery:
    def __init__(self, client: "FakeSupabaseClient", name: str):
        self._client = client
        self._name = name

    def update(self, values):
        self._client.calls.append(("update", self._name, values))
        return self

    def eq(self, column, value):
        self._client.calls.append(("eq", column, value))
        return self

    def execute(self):
        if self._client.fail:
            raise RuntimeError("connection reset")
        return SimpleNamespace(data=self._client.rpc_result)


class FakeSupabaseClient:
    def __init__(self, *, rpc_result=True, fail: bool = False):
        self.rpc_result = rpc_result
        self.fail = fail
        self.calls: list[tuple] = []

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params):
        self.calls.append(("rpc", name, params))
        return FakeQuery(self, name)


def test_reset_monthly_usage_zeroes_counter():
    client = FakeSupabaseClient()
    reset_at = datetime(2025, 6, 1, tzinfo=timezone.utc)

    SupabaseProfileRepository(client).reset_monthly_usage(user_id="user-1", reset_at=reset_at)

    assert client.calls == [
        ("update", "profiles", {"monthly_usage_count": 0, "usage_reset_date": "2025-06-01T00:00:00+00:00"}),
        ("eq", "id", "user-1"),
    ]


def test_increment_usage_count_calls_database_function():
    client = FakeSupabaseClient(rpc_result=True)

    assert SupabaseProfileRepository(client).increment_usage_count(user_id="user-1") is True
    assert client.calls == [("rpc", "increment_usage_count", {"p_user_id": "user-1"})]


def test_increment_usage_failure_is_wrapped():
    with pytest.raises(UsageStoreError):
        SupabaseProfileRepository(FakeSupabaseClient(fail=True)).increment_usage_count(user_id="user-1")
