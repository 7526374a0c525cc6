"""Tests for the debounced AutoSaver."""

import asyncio
import logging

import pytest

from timesheet_mcp.budget.autosave import AutoSaver

DELAY = 0.05


class Recorder:
    """Save callable that records writes and the peak number in flight."""

    def __init__(self, pause: float = 0.0, fail: bool = False):
        self.saved: list[tuple[str, str]] = []
        self.pause = pause
        self.fail = fail
        self.in_flight = 0
        self.max_in_flight = 0
        self.started = asyncio.Event()

    async def __call__(self, key, payload):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.started.set()
        try:
            if self.pause:
                await asyncio.sleep(self.pause)
            if self.fail:
                raise RuntimeError("disk full")
            self.saved.append((key, payload))
        finally:
            self.in_flight -= 1


class TestAutoSaver:
    """Tests for AutoSaver scheduling, coalescing, and flushing."""

    def test_delay_must_be_positive(self):
        """Test a zero delay is rejected."""
        with pytest.raises(ValueError):
            AutoSaver(lambda key, payload: None, delay=0)

    @pytest.mark.asyncio
    async def test_burst_of_edits_writes_last_payload_once(self):
        """Test rapid edits collapse into a single write of the newest payload."""
        recorder = Recorder()
        saver = AutoSaver(recorder, delay=DELAY)

        for text in ("d", "dr", "dra", "draft"):
            saver.schedule("Acme|API", text)
            await asyncio.sleep(DELAY / 5)

        await asyncio.sleep(DELAY * 4)

        assert recorder.saved == [("Acme|API", "draft")]
        assert not saver.has_pending("Acme|API")

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        """Test each key keeps its own pending slot."""
        recorder = Recorder()
        saver = AutoSaver(recorder, delay=DELAY)

        saver.schedule("a", "1")
        saver.schedule("b", "2")
        await asyncio.sleep(DELAY * 4)

        assert sorted(recorder.saved) == [("a", "1"), ("b", "2")]

    @pytest.mark.asyncio
    async def test_sync_save_callable(self):
        """Test a plain function works as the save callable."""
        saved = []
        saver = AutoSaver(lambda key, payload: saved.append(payload), delay=DELAY)

        saver.schedule("k", "v")
        await saver.flush("k")

        assert saved == ["v"]

    @pytest.mark.asyncio
    async def test_flush_writes_immediately_and_only_once(self):
        """Test flush writes now and the timer does not write again."""
        recorder = Recorder()
        saver = AutoSaver(recorder, delay=10)

        saver.schedule("k", "v")
        await saver.flush("k")
        assert recorder.saved == [("k", "v")]

        await asyncio.sleep(DELAY)
        assert recorder.saved == [("k", "v")]

    @pytest.mark.asyncio
    async def test_flush_without_pending_is_noop(self):
        """Test flushing an unknown key does nothing."""
        recorder = Recorder()
        saver = AutoSaver(recorder, delay=DELAY)
        await saver.flush("missing")
        await saver.flush_all()
        assert recorder.saved == []

    @pytest.mark.asyncio
    async def test_edits_during_write_are_coalesced(self):
        """Test edits arriving mid-write produce one follow-up write."""
        recorder = Recorder(pause=DELAY * 2)
        saver = AutoSaver(recorder, delay=DELAY / 5)

        saver.schedule("k", "A")
        await recorder.started.wait()
        saver.schedule("k", "B")
        saver.schedule("k", "C")
        await asyncio.sleep(DELAY * 8)

        assert recorder.saved == [("k", "A"), ("k", "C")]
        assert recorder.max_in_flight == 1

    @pytest.mark.asyncio
    async def test_flush_waits_for_write_in_flight(self):
        """Test flush never overlaps a background write for the same key."""
        recorder = Recorder(pause=DELAY * 2)
        saver = AutoSaver(recorder, delay=DELAY / 5)

        saver.schedule("k", "A")
        await recorder.started.wait()
        saver.schedule("k", "B")
        await saver.flush("k")

        assert recorder.saved == [("k", "A"), ("k", "B")]
        assert recorder.max_in_flight == 1

        await asyncio.sleep(DELAY * 2)
        assert recorder.saved == [("k", "A"), ("k", "B")]

    @pytest.mark.asyncio
    async def test_flush_all(self):
        """Test flush_all writes every pending key."""
        recorder = Recorder()
        saver = AutoSaver(recorder, delay=10)

        saver.schedule("a", "1")
        saver.schedule("b", "2")
        await saver.flush_all()

        assert sorted(recorder.saved) == [("a", "1"), ("b", "2")]
        assert saver.pending_keys == []

    @pytest.mark.asyncio
    async def test_flush_propagates_save_error(self, caplog):
        """Test a failing save is logged and raised from flush."""
        saver = AutoSaver(Recorder(fail=True), delay=10)
        saver.schedule("k", "v")

        with caplog.at_level(logging.ERROR, logger="timesheet_mcp.budget.autosave"):
            with pytest.raises(RuntimeError, match="disk full"):
                await saver.flush("k")

        assert "Autosave failed for k" in caplog.text

    @pytest.mark.asyncio
    async def test_background_failure_surfaces_on_next_flush(self):
        """Test an error from a timed write is raised by the next flush."""
        saver = AutoSaver(Recorder(fail=True), delay=DELAY / 5)
        saver.schedule("k", "v")
        await asyncio.sleep(DELAY * 2)

        with pytest.raises(RuntimeError):
            await saver.flush("k")

        # reported once
        await saver.flush("k")

    @pytest.mark.asyncio
    async def test_newer_flushed_write_supersedes_earlier_failure(self, caplog):
        """Test flush does not raise an old background error once a newer draft is saved."""
        recorder = Recorder(fail=True)
        saver = AutoSaver(recorder, delay=DELAY / 5)
        saver.schedule("k", "A")
        await asyncio.sleep(DELAY * 2)

        recorder.fail = False
        saver.schedule("k", "B")
        with caplog.at_level(logging.WARNING, logger="timesheet_mcp.budget.autosave"):
            await saver.flush("k")

        assert recorder.saved == [("k", "B")]
        assert "superseded by a newer write" in caplog.text

    @pytest.mark.asyncio
    async def test_newer_background_write_clears_earlier_failure(self):
        """Test a successful timed write drops the error of an earlier one."""
        recorder = Recorder(fail=True)
        saver = AutoSaver(recorder, delay=DELAY / 5)
        saver.schedule("k", "A")
        await asyncio.sleep(DELAY * 2)

        recorder.fail = False
        saver.schedule("k", "B")
        await asyncio.sleep(DELAY * 2)

        await saver.flush("k")
        assert recorder.saved == [("k", "B")]


class TestAutoSaverBookkeeping:
    """Tests that per-key state does not outlive the drafts it tracks."""

    @pytest.mark.asyncio
    async def test_state_dropped_after_timed_writes(self):
        """Test keys are forgotten once their drafts are written."""
        recorder = Recorder()
        saver = AutoSaver(recorder, delay=DELAY / 5)

        for n in range(20):
            saver.schedule(f"task-{n}", "notes")
        await asyncio.sleep(DELAY * 2)

        assert len(recorder.saved) == 20
        assert saver.tracked_keys == []

    @pytest.mark.asyncio
    async def test_state_dropped_after_flush(self):
        """Test flush leaves no per-key state behind."""
        saver = AutoSaver(Recorder(), delay=10)
        saver.schedule("a", "1")
        saver.schedule("b", "2")

        await saver.flush("a")
        assert saver.tracked_keys == ["b"]

        await saver.flush_all()
        assert saver.tracked_keys == []

    @pytest.mark.asyncio
    async def test_failed_key_kept_until_reported(self):
        """Test a background failure keeps its key until flush raises it."""
        saver = AutoSaver(Recorder(fail=True), delay=DELAY / 5)
        saver.schedule("k", "v")
        await asyncio.sleep(DELAY * 2)

        assert saver.tracked_keys == ["k"]
        with pytest.raises(RuntimeError):
            await saver.flush("k")
        assert saver.tracked_keys == []
