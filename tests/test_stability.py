"""Tests for the replay stability heuristic."""

from types import SimpleNamespace
from pathlib import Path

from sc2_rsu.models import StableReplay
from sc2_rsu.stability import STABILITY_INTERVAL, VALID_REPLAY_SIZE, StabilityDetector

KIB = 1024


def scripted_stat(sizes):
    """Return a stat() replacement yielding *sizes*; None raises FileNotFoundError."""
    it = iter(sizes)
    calls = []

    def _stat(path):
        calls.append(path)
        size = next(it, sizes[-1])
        if size is None:
            raise FileNotFoundError(path)
        return SimpleNamespace(st_size=size)

    _stat.calls = calls
    return _stat


def make_detector(sizes):
    sleeps = []
    stat = scripted_stat(sizes)
    return StabilityDetector(sleep=sleeps.append, stat=stat), sleeps, stat


class TestDefaults:
    def test_constants(self):
        assert VALID_REPLAY_SIZE == 26 * 1024
        assert STABILITY_INTERVAL == 0.25


class TestWaitUntilStable:
    def test_stable_after_growth_stops(self):
        detector, sleeps, _ = make_detector([10 * KIB, 30 * KIB, 40 * KIB, 40 * KIB])

        result = detector.wait_until_stable(Path("a.SC2Replay"), max_checks=100)

        assert result == StableReplay(Path("a.SC2Replay"), 40 * KIB)
        assert sleeps == [0.25] * 4

    def test_single_non_growing_sample_above_threshold_ends_wait(self):
        detector, sleeps, _ = make_detector([30 * KIB, 30 * KIB])

        result = detector.wait_until_stable(Path("a.SC2Replay"), max_checks=100)

        assert result.size == 30 * KIB
        assert len(sleeps) == 2

    def test_shrinking_file_counts_as_stable(self):
        detector, _, _ = make_detector([40 * KIB, 30 * KIB])

        result = detector.wait_until_stable(Path("a.SC2Replay"), max_checks=100)

        assert result.size == 30 * KIB

    def test_never_crossing_threshold_never_terminates(self):
        detector, sleeps, _ = make_detector([1 * KIB, 5 * KIB, 5 * KIB, 26 * KIB])

        assert detector.wait_until_stable(Path("a.SC2Replay"), max_checks=500) is None
        assert len(sleeps) == 500

    def test_exactly_threshold_is_not_enough(self):
        detector, _, _ = make_detector([VALID_REPLAY_SIZE] * 3)

        assert detector.wait_until_stable(Path("a.SC2Replay"), max_checks=50) is None

    def test_stat_failures_are_retried(self):
        detector, _, stat = make_detector([None, None, 28 * KIB, None, 28 * KIB])

        result = detector.wait_until_stable(Path("a.SC2Replay"), max_checks=100)

        assert result.size == 28 * KIB
        assert len(stat.calls) == 5

    def test_missing_file_waits_until_bound(self):
        detector, _, _ = make_detector([None])

        assert detector.wait_until_stable(Path("gone.SC2Replay"), max_checks=20) is None

    def test_terminates_exactly_once_for_growing_sequences(self):
        for peak in (27 * KIB, 64 * KIB, 2 * 1024 * KIB):
            sizes = [0, 12 * KIB, peak // 2 + 27 * KIB, peak + 27 * KIB, peak + 27 * KIB]
            detector, sleeps, _ = make_detector(sizes)

            result = detector.wait_until_stable(Path("x.SC2Replay"), max_checks=100)

            assert result.size == peak + 27 * KIB
            assert len(sleeps) == len(sizes)

    def test_custom_interval_and_threshold(self):
        sleeps = []
        detector = StabilityDetector(
            interval=0.01,
            min_size=10,
            sleep=sleeps.append,
            stat=scripted_stat([11, 11]),
        )

        assert detector.wait_until_stable(Path("x"), max_checks=5).size == 11
        assert sleeps == [0.01, 0.01]


class TestRealFile:
    def test_stat_of_finished_file(self, tmp_path):
        replay = tmp_path / "Map.SC2Replay"
        replay.write_bytes(b"\0" * (40 * KIB))
        detector = StabilityDetector(sleep=lambda _: None)

        result = detector.wait_until_stable(replay, max_checks=10)

        assert result == StableReplay(replay, 40 * KIB)
