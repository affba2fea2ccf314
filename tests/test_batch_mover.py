from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional
import sys
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from voicemover.discord.mover import BatchMover, DEFAULT_AUDIT_REASON


class _Recorder:
    def __init__(self) -> None:
        self.events: list[tuple] = []

    async def sleep(self, seconds: float) -> None:
        self.events.append(("sleep", seconds))


class _Member:
    def __init__(self, name: str, recorder: _Recorder, error: Optional[Exception] = None) -> None:
        self.name = name
        self._recorder = recorder
        self._error = error

    async def move_to(self, channel: Any, *, reason: Optional[str] = None) -> None:
        self._recorder.events.append(("move", self.name, channel.id, reason))
        if self._error is not None:
            raise self._error

    def __str__(self) -> str:
        return self.name


@dataclass
class _Channel:
    id: int
    name: str
    members: List[Any] = field(default_factory=list)


class BatchMoverTests(unittest.IsolatedAsyncioTestCase):
    def _channels(self, recorder: _Recorder, count: int, failing: tuple[int, ...] = ()):
        members = [
            _Member(f"m{index}", recorder, RuntimeError("left") if index in failing else None)
            for index in range(count)
        ]
        return _Channel(id=1, name="source", members=members), _Channel(id=2, name="destination")

    async def test_moves_every_member_in_listing_order(self) -> None:
        recorder = _Recorder()
        source, destination = self._channels(recorder, 3)
        mover = BatchMover(sleep=recorder.sleep)

        report = await mover.move_members(source, destination)

        moves = [event for event in recorder.events if event[0] == "move"]
        self.assertEqual([event[1] for event in moves], ["m0", "m1", "m2"])
        self.assertTrue(all(event[2] == 2 for event in moves))
        self.assertTrue(all(event[3] == DEFAULT_AUDIT_REASON for event in moves))
        self.assertEqual((report.attempted, report.moved, report.failed), (3, 3, 0))

    async def test_member_failure_does_not_stop_the_batch(self) -> None:
        recorder = _Recorder()
        source, destination = self._channels(recorder, 4, failing=(1,))
        mover = BatchMover(sleep=recorder.sleep)

        with self.assertLogs("voicemover.discord.mover", level="ERROR") as captured:
            report = await mover.move_members(source, destination)

        moves = [event for event in recorder.events if event[0] == "move"]
        self.assertEqual(len(moves), 4)
        self.assertEqual((report.attempted, report.moved, report.failed), (4, 3, 1))
        self.assertIn("Failed to move m1", captured.output[0])

    async def test_pauses_after_every_fifth_member_starting_with_the_first(self) -> None:
        recorder = _Recorder()
        source, destination = self._channels(recorder, 12, failing=(5,))
        mover = BatchMover(sleep=recorder.sleep, pace_seconds=0.25)

        with self.assertLogs("voicemover.discord.mover", level="ERROR"):
            await mover.move_members(source, destination)

        paced_after = []
        for position, event in enumerate(recorder.events):
            if event[0] == "sleep":
                self.assertEqual(event[1], 0.25)
                paced_after.append(recorder.events[position - 1][1])
        self.assertEqual(paced_after, ["m0", "m5", "m10"])

    async def test_membership_is_read_when_the_batch_runs(self) -> None:
        recorder = _Recorder()
        source, destination = self._channels(recorder, 1)
        mover = BatchMover(sleep=recorder.sleep)
        source.members.append(_Member("late", recorder))

        report = await mover.move_members(source, destination)

        self.assertEqual(report.attempted, 2)

    async def test_empty_source_moves_nobody(self) -> None:
        recorder = _Recorder()
        source, destination = self._channels(recorder, 0)

        report = await BatchMover(sleep=recorder.sleep).move_members(source, destination)

        self.assertEqual(recorder.events, [])
        self.assertEqual(report.attempted, 0)

    async def test_custom_audit_reason(self) -> None:
        recorder = _Recorder()
        source, destination = self._channels(recorder, 1)
        mover = BatchMover(audit_reason="Raid night", sleep=recorder.sleep)

        await mover.move_members(source, destination)

        self.assertEqual(recorder.events[0][3], "Raid night")

    def test_rejects_invalid_pacing(self) -> None:
        with self.assertRaises(ValueError):
            BatchMover(pace_every=0)
        with self.assertRaises(ValueError):
            BatchMover(pace_seconds=-1)


if __name__ == "__main__":
    unittest.main()
