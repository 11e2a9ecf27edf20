"""Tests for pulseday.analytics.sedentary -- low-activity window sweep."""

from pulseday.analytics.sedentary import MAX_GAP_SEC, detect_sedentary_intervals
from pulseday.intervals import Interval

from tests.conftest import at, contiguous_buckets, step_bucket

THRESHOLD = 30.0  # steps/hour
MIN_DURATION = 1800.0  # 30 min


def detect(buckets, excluding=()):
    return detect_sedentary_intervals(buckets, THRESHOLD, MIN_DURATION, excluding)


class TestBasicSweep:
    def test_empty_input(self):
        assert detect([]) == []

    def test_single_qualifying_bucket(self):
        bucket = step_bucket("b", at(9), at(10), steps=10.0)
        assert detect([bucket]) == [Interval(at(9), at(10))]

    def test_contiguous_buckets_merge(self):
        buckets = contiguous_buckets("b", at(9), 6)
        assert detect(buckets) == [Interval(at(9), at(10))]

    def test_unsorted_input(self):
        buckets = contiguous_buckets("b", at(9), 6)
        assert detect(list(reversed(buckets))) == [Interval(at(9), at(10))]

    def test_too_short_dropped(self):
        buckets = contiguous_buckets("b", at(9), 2)  # 20 min
        assert detect(buckets) == []

    def test_too_active_dropped(self):
        # 60 min, 100 steps → 100 steps/hour
        buckets = contiguous_buckets("b", at(9), 6, steps=100.0 / 6)
        assert detect(buckets) == []

    def test_rate_at_threshold_kept(self):
        # 60 min, exactly 30 steps
        buckets = contiguous_buckets("b", at(9), 6, steps=5.0)
        assert detect(buckets) == [Interval(at(9), at(10))]


class TestGapBreak:
    def test_gap_over_limit_splits(self):
        first = contiguous_buckets("a", at(9), 4)  # 9:00-9:40
        second = contiguous_buckets("b", at(9, 46), 4)  # 9:46-10:26, 6 min gap
        result = detect(first + second)
        assert result == [Interval(at(9), at(9, 40)), Interval(at(9, 46), at(10, 26))]

    def test_gap_at_limit_merges(self):
        first = contiguous_buckets("a", at(9), 4)  # 9:00-9:40
        second = contiguous_buckets("b", at(9, 45), 4)  # exactly 300 s later
        assert MAX_GAP_SEC == 300.0
        assert detect(first + second) == [Interval(at(9), at(10, 25))]

    def test_buckets_across_gap_never_share_window(self):
        buckets = [
            step_bucket("a", at(8), at(9)),
            step_bucket("b", at(9, 10), at(10)),
            step_bucket("c", at(10, 20), at(11)),
        ]
        result = detect(buckets)
        assert len(result) == 3
        for iv in result:
            assert iv.duration <= 3600

    def test_gap_measured_from_previous_bucket_not_window_end(self):
        buckets = [
            step_bucket("long", at(9), at(10)),
            step_bucket("inner", at(9, 10), at(9, 20)),
            # 6 min after "inner" ends, although still inside "long"
            step_bucket("late", at(9, 26), at(9, 40)),
        ]
        result = detect(buckets)
        # First window closes at the gap; the 14-minute tail is too short
        assert result == [Interval(at(9), at(10))]

    def test_active_segment_does_not_poison_next_window(self):
        busy = contiguous_buckets("busy", at(8), 6, steps=500.0)
        quiet = contiguous_buckets("quiet", at(9, 10), 6)
        assert detect(busy + quiet) == [Interval(at(9, 10), at(10, 10))]


class TestSleepExclusion:
    def test_overlap_with_sleep_dropped(self):
        buckets = contiguous_buckets("b", at(1), 6)
        sleep = [Interval(at(0), at(1, 30))]
        assert detect(buckets, sleep) == []

    def test_adjacent_sleep_not_excluded(self):
        buckets = contiguous_buckets("b", at(7), 6)
        sleep = [Interval(at(0), at(7))]
        assert detect(buckets, sleep) == [Interval(at(7), at(8))]

    def test_no_emitted_interval_intersects_sleep(self):
        buckets = contiguous_buckets("b", at(0), 24 * 6)  # whole day, no gaps
        buckets += contiguous_buckets("c", at(30), 6)  # next day morning
        sleep = [Interval(at(1), at(6))]
        for iv in detect(buckets, sleep):
            assert not any(iv.intersects(s) for s in sleep)
