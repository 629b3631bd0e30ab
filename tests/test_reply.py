"""
Tests for the reply outcome value.
"""

from __future__ import annotations

import pytest

from rzd_trains.errors import ServiceError
from rzd_trains.reply import ReplyOutcome, ReplyStatus


class TestReplyOutcome:

    def test_success_holds_value(self):
        reply = ReplyOutcome.success([1, 2])
        assert reply.succeeded
        assert reply.value == [1, 2]
        assert reply.error is None

    def test_empty_success_is_still_success(self):
        reply = ReplyOutcome.success([])
        assert reply.status is ReplyStatus.SUCCESS
        assert reply.value == []

    def test_failure_holds_error(self):
        error = ServiceError(["нет мест"])
        reply = ReplyOutcome.failure(error)
        assert reply.failed
        assert reply.error is error
        assert reply.value is None

    def test_not_ready(self):
        reply = ReplyOutcome.not_ready()
        assert reply.is_not_ready
        assert not reply.succeeded and not reply.failed

    def test_failure_requires_error(self):
        with pytest.raises(ValueError):
            ReplyOutcome(ReplyStatus.FAILURE)

    def test_success_rejects_error(self):
        with pytest.raises(ValueError):
            ReplyOutcome(ReplyStatus.SUCCESS, value=1, error=ServiceError(["x"]))
