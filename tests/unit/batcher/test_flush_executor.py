"""
Unit tests for FlushExecutor: encoding, drop-on-failure, metrics.
"""

import pytest
from prometheus_client import REGISTRY

from ch_client import SinkTimeout, SinkUnavailable
from wallet_ingest.batcher import Batch, FlushExecutor, FlushTrigger


def _batch(*records: str, max_size: int = 10) -> Batch:
    b = Batch(max_size)
    for r in records:
        b.append(r)
    return b


def _sample(trigger: str, status: str) -> float:
    v = REGISTRY.get_sample_value(
        "ingest_flushes_total", {"trigger": trigger, "status": status}
    )
    return v or 0.0


@pytest.mark.asyncio
async def test_body_is_newline_joined_with_trailing_newline(recording_sink):
    records = ['{"a":1}', '{"b":"x y"}', '{"c":[1,2]}']
    sink = recording_sink()
    batch = _batch(*records)

    outcome = await FlushExecutor(sink).flush(batch, FlushTrigger.SIZE_REACHED)

    assert sink.bodies == ['{"a":1}\n{"b":"x y"}\n{"c":[1,2]}\n']
    assert outcome.ok
    assert outcome.rows == 3
    assert outcome.status_code == 200
    assert len(batch) == 0


@pytest.mark.asyncio
async def test_non_success_status_is_reported_and_batch_cleared(recording_sink):
    sink = recording_sink(statuses=[500])
    batch = _batch('{"a":1}', '{"a":2}')

    outcome = await FlushExecutor(sink).flush(batch, FlushTrigger.TIMER_ELAPSED)

    assert not outcome.ok
    assert outcome.status_code == 500
    assert "DB::Exception" in outcome.error
    assert len(batch) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("exc", [SinkTimeout("timed out"), SinkUnavailable("refused")])
async def test_transport_error_is_reported_and_batch_cleared(recording_sink, exc):
    sink = recording_sink(errors=[exc])
    batch = _batch('{"a":1}')

    outcome = await FlushExecutor(sink).flush(batch, FlushTrigger.TIMER_ELAPSED)

    assert not outcome.ok
    assert outcome.status_code is None
    assert type(exc).__name__ in outcome.error
    assert len(batch) == 0


@pytest.mark.asyncio
async def test_unexpected_error_propagates_but_still_clears():
    class BrokenSink:
        async def insert(self, body: str):
            raise RuntimeError("bug")

    batch = _batch('{"a":1}')
    with pytest.raises(RuntimeError):
        await FlushExecutor(BrokenSink()).flush(batch, FlushTrigger.SIZE_REACHED)
    assert len(batch) == 0


@pytest.mark.asyncio
async def test_empty_batch_rejected(recording_sink):
    with pytest.raises(ValueError):
        await FlushExecutor(recording_sink()).flush(Batch(5), FlushTrigger.TIMER_ELAPSED)


@pytest.mark.asyncio
async def test_metrics_recorded_per_trigger_and_status(recording_sink):
    before_ok = _sample("size", "success")
    before_fail = _sample("timer", "failure")

    sink = recording_sink(statuses=[200, 502])
    ex = FlushExecutor(sink)
    await ex.flush(_batch('{"a":1}'), FlushTrigger.SIZE_REACHED)
    await ex.flush(_batch('{"a":2}'), FlushTrigger.TIMER_ELAPSED)

    assert _sample("size", "success") == before_ok + 1
    assert _sample("timer", "failure") == before_fail + 1
    assert REGISTRY.get_sample_value("ingest_flush_latency_ms_count", {"trigger": "size"}) >= 1
