# tests/test_geometry.py
import unittest

from vscroll import VirtualColumn, VirtualItem
from vscroll.base import check_item_id
from vscroll.geometry import (
    EMPTY_AXIS,
    AxisWindow,
    SizeCache,
    clamp_index,
    compute_axis_window,
    fixed_slices,
    hysteresis_threshold,
    prefix_size,
    resolve_size,
    window_moved,
)


class TestSizeCache(unittest.TestCase):
    def test_empty_cache_has_no_mean(self):
        self.assertIsNone(SizeCache().mean())

    def test_mean_replaces_previous_measurement(self):
        cache = SizeCache()
        self.assertIsNone(cache.set("a", 10))
        cache.set("b", 30)
        self.assertEqual(cache.mean(), 20)
        self.assertEqual(cache.set("a", 50), 10)
        self.assertEqual(cache.mean(), 40)
        self.assertEqual(len(cache), 2)

    def test_negative_size_is_clamped(self):
        cache = SizeCache()
        with self.assertLogs("vscroll.geometry", level="WARNING"):
            cache.set(1, -5)
        self.assertEqual(cache.get(1), 0)

    def test_non_finite_size_is_ignored(self):
        cache = SizeCache()
        cache.set(1, 20)
        with self.assertLogs("vscroll.geometry", level="WARNING"):
            self.assertIsNone(cache.set(1, float('nan')))
            self.assertIsNone(cache.set(2, float('inf')))
        self.assertEqual(cache.get(1), 20)
        self.assertNotIn(2, cache)
        self.assertEqual(cache.mean(), 20)

    def test_clear(self):
        cache = SizeCache()
        cache.set(1, 10)
        cache.clear()
        self.assertNotIn(1, cache)
        self.assertIsNone(cache.mean())


class TestResolveSize(unittest.TestCase):
    def test_precedence(self):
        cache = SizeCache()
        item = VirtualItem(1, height=70)
        self.assertEqual(resolve_size(item, cache, 50), 70)
        cache.set(1, 90)
        self.assertEqual(resolve_size(item, cache, 50), 90)
        self.assertEqual(resolve_size(VirtualItem(2), cache, 50), 50)

    def test_column_clamp_skips_measured(self):
        cache = SizeCache()
        column = VirtualColumn("x", min_width=40, max_width=60)
        self.assertEqual(resolve_size(column, cache, 100), 60)
        cache.set("x", 200)
        self.assertEqual(resolve_size(column, cache, 100), 200)

    def test_prefix_size(self):
        items = [VirtualItem(i, height=i + 1) for i in range(5)]
        size_of = lambda item: item.height
        self.assertEqual(prefix_size(items, 0, size_of), 0)
        self.assertEqual(prefix_size(items, 3, size_of), 6)
        self.assertEqual(prefix_size(items, 99, size_of), 15)


class TestAxisWindow(unittest.TestCase):
    def test_empty_axis(self):
        self.assertEqual(compute_axis_window(0, 500, 50, 300, 7), EMPTY_AXIS)

    def test_plain_axis(self):
        self.assertEqual(compute_axis_window(1000, 0, 50, 300, 7), AxisWindow(0, 13, 6))

    def test_pinned_axis(self):
        window = compute_axis_window(
            100, 0, 50, 300, 7, leading_count=3, leading_size=150,
        )
        self.assertEqual(window, AxisWindow(3, 13, 3))

    def test_infinite_scroll(self):
        self.assertEqual(compute_axis_window(1000, float('inf'), 50, 300, 7), AxisWindow(1000, 1000, 6))

    def test_nan_scroll(self):
        self.assertEqual(compute_axis_window(1000, float('nan'), 50, 300, 7), AxisWindow(0, 13, 6))

    def test_infinite_container(self):
        self.assertEqual(compute_axis_window(100, 0, 50, float('inf'), 7), AxisWindow(0, 100, 100))

    def test_container_smaller_than_pinned_regions(self):
        window = compute_axis_window(
            100, 0, 50, 100, 0, leading_count=3, leading_size=150,
        )
        self.assertEqual(window.visible_count, 0)
        self.assertLessEqual(window.start, window.end)

    def test_fixed_slices_do_not_overlap(self):
        self.assertEqual(fixed_slices([1, 2, 3], 2, 2), ([1, 2], [3]))
        self.assertEqual(fixed_slices([1, 2, 3], 0, 0), ([], []))
        self.assertEqual(fixed_slices([], 2, 2), ([], []))

    def test_hysteresis_threshold(self):
        self.assertEqual(hysteresis_threshold(0), 1)
        self.assertEqual(hysteresis_threshold(1), 1)
        self.assertEqual(hysteresis_threshold(6), 3)
        self.assertEqual(hysteresis_threshold(7), 3)

    def test_window_moved(self):
        self.assertFalse(window_moved(AxisWindow(0, 15, 6), 0, 13))
        self.assertTrue(window_moved(AxisWindow(3, 13, 6), 0, 13))

    def test_clamp_index(self):
        self.assertEqual(clamp_index(-1, 10), 0)
        self.assertEqual(clamp_index(12, 10), 9)
        self.assertEqual(clamp_index(5, 0), 0)


class TestItems(unittest.TestCase):
    def test_ids_must_be_str_or_int(self):
        self.assertEqual(check_item_id("a"), "a")
        self.assertEqual(check_item_id(3), 3)
        with self.assertRaises(TypeError):
            check_item_id(True)
        with self.assertRaises(TypeError):
            VirtualItem(1.5)

    def test_column_fixed_side(self):
        self.assertEqual(VirtualColumn("a", fixed="left").fixed, "left")
        with self.assertRaises(ValueError):
            VirtualColumn("a", fixed="middle")

    def test_items_compare_by_value(self):
        self.assertEqual(VirtualItem(1, data="x"), VirtualItem(1, data="x"))
        self.assertNotEqual(VirtualItem(1, data="x"), VirtualItem(1, data="y"))


if __name__ == '__main__':
    unittest.main()
