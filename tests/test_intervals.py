"""Tests for pulseday.intervals -- half-open interval helpers."""

from pulseday.intervals import Interval, contains_time, intersects_any

from tests.conftest import at


class TestInterval:
    def test_contains_start_not_end(self):
        iv = Interval(at(1), at(2))
        assert iv.contains(at(1))
        assert iv.contains(at(1, 30))
        assert not iv.contains(at(2))
        assert not iv.contains(at(0, 59))

    def test_duration_seconds(self):
        assert Interval(at(1), at(2, 30)).duration == 5400.0

    def test_overlap_intersects(self):
        a = Interval(at(1), at(3))
        b = Interval(at(2), at(4))
        assert a.intersects(b)
        assert b.intersects(a)

    def test_touching_does_not_intersect(self):
        a = Interval(at(1), at(2))
        b = Interval(at(2), at(3))
        assert not a.intersects(b)

    def test_nested_intersects(self):
        outer = Interval(at(0), at(10))
        inner = Interval(at(4), at(5))
        assert outer.intersects(inner)
        assert inner.intersects(outer)


class TestHelpers:
    def test_contains_time_any(self):
        intervals = [Interval(at(1), at(2)), Interval(at(5), at(6))]
        assert contains_time(intervals, at(5, 15))
        assert not contains_time(intervals, at(3))

    def test_contains_time_empty(self):
        assert not contains_time([], at(1))

    def test_intersects_any(self):
        others = [Interval(at(1), at(2)), Interval(at(5), at(6))]
        assert intersects_any(Interval(at(5, 30), at(7)), others)
        assert not intersects_any(Interval(at(2), at(5)), others)
        assert not intersects_any(Interval(at(2), at(5)), [])
