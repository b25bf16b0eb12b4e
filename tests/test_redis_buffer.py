import pytest
import redis

from academy.adapters.cache import redis_proctoring_buffer as adapter
from academy.adapters.cache.redis_proctoring_buffer import RedisProctoringCounterBuffer
from academy.domain.assessment.errors import InvalidStateError
from libs.redis import proctoring_buffer
from libs.redis.proctoring_buffer import (
    COUNTER_BUFFER_TTL,
    ProctoringBufferClosed,
    buffer_proctoring_event,
    close_proctoring_buffer,
    get_proctoring_buffer,
    reopen_proctoring_buffer,
)


class StubRedis:
    def __init__(self, eval_result=None, hash_data=None, error=None):
        self.eval_result = eval_result
        self.hash_data = hash_data or {}
        self.error = error
        self.eval_calls = []

    def eval(self, script, numkeys, *args):
        self.eval_calls.append((numkeys, args))
        if self.error is not None:
            raise self.error
        return self.eval_result

    def hgetall(self, key):
        if self.error is not None:
            raise self.error
        return self.hash_data


@pytest.fixture
def use_redis(monkeypatch):
    def _use(stub):
        monkeypatch.setattr(proctoring_buffer, "get_redis_client", lambda: stub)
        return stub
    return _use


class TestBufferFunctions:
    def test_without_redis_everything_falls_back(self):
        assert buffer_proctoring_event(1, "tab_switches") == (False, {})
        assert get_proctoring_buffer(1) is None
        assert close_proctoring_buffer(1) is None
        assert reopen_proctoring_buffer(1, {"tab_switches": 1}) is False

    def test_increment_returns_buffered_hash(self, use_redis):
        stub = use_redis(StubRedis(eval_result=["tab_switches", "3", "look_aways", "1"]))

        ok, counters = buffer_proctoring_event(7, "tab_switches", 2)

        assert ok is True
        assert counters == {"tab_switches": 3, "look_aways": 1}
        numkeys, args = stub.eval_calls[0]
        assert numkeys == 2
        assert args[:4] == ("proctoring:7:counters", "proctoring:7:closed", "tab_switches", 2)

    def test_increment_after_close(self, use_redis):
        use_redis(StubRedis(eval_result=-1))
        with pytest.raises(ProctoringBufferClosed):
            buffer_proctoring_event(7, "tab_switches")

    def test_redis_errors_fall_back(self, use_redis):
        use_redis(StubRedis(error=redis.ConnectionError("down")))
        assert buffer_proctoring_event(7, "tab_switches") == (False, {})
        assert get_proctoring_buffer(7) is None
        assert close_proctoring_buffer(7) is None

    def test_close_drains(self, use_redis):
        use_redis(StubRedis(eval_result=["mobile_detected", "2"]))
        assert close_proctoring_buffer(7) == {"mobile_detected": 2}

    def test_snapshot(self, use_redis):
        use_redis(StubRedis(hash_data={"head_tilts": "4"}))
        assert get_proctoring_buffer(7) == {"head_tilts": 4}

    def test_reopen_restores_drained_counts(self, use_redis):
        stub = use_redis(StubRedis(eval_result=1))

        assert reopen_proctoring_buffer(7, {"tab_switches": 2, "look_aways": 0}) is True

        numkeys, args = stub.eval_calls[0]
        assert numkeys == 2
        assert args == ("proctoring:7:counters", "proctoring:7:closed", COUNTER_BUFFER_TTL, "tab_switches", 2)

    def test_reopen_failure_is_reported(self, use_redis):
        use_redis(StubRedis(error=redis.ConnectionError("down")))
        assert reopen_proctoring_buffer(7, {"tab_switches": 2}) is False


class TestRedisCounterBufferAdapter:
    def test_unavailable_returns_none(self):
        assert RedisProctoringCounterBuffer().increment(1, "tab_switches", 1) is None

    def test_closed_buffer_maps_to_invalid_state(self, monkeypatch):
        def closed(*args, **kwargs):
            raise ProctoringBufferClosed("closed")

        monkeypatch.setattr(adapter, "buffer_proctoring_event", closed)
        with pytest.raises(InvalidStateError) as e:
            RedisProctoringCounterBuffer().increment(1, "tab_switches", 1)
        assert e.value.code == "session_finalized"

    def test_buffered_counters(self, monkeypatch):
        monkeypatch.setattr(adapter, "buffer_proctoring_event", lambda *a: (True, {"tab_switches": 5}))
        assert RedisProctoringCounterBuffer().increment(1, "tab_switches", 1) == {"tab_switches": 5}
