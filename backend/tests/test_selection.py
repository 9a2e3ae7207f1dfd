"""Tests for the selection model — toggle, range, revalidation."""

import pytest

from tierfinder.services.selection import SelectionModel

VISIBLE = ["/a", "/b", "/c", "/d", "/e"]


@pytest.fixture
def sel():
    return SelectionModel()


class TestToggle:
    def test_adds_and_removes(self, sel):
        assert sel.toggle("/a") is True
        assert sel.toggle("/b") is True
        assert sel.paths == ["/a", "/b"]
        assert sel.toggle("/a") is False
        assert sel.paths == ["/b"]

    def test_sets_anchor(self, sel):
        sel.toggle("/c")
        assert sel.anchor == "/c"


def test_select_single_replaces(sel):
    sel.toggle("/a")
    sel.toggle("/b")
    sel.select_single("/d")
    assert sel.paths == ["/d"]
    assert sel.anchor == "/d"


class TestRange:
    def test_inclusive_span(self, sel):
        assert sel.select_range("/b", "/d", VISIBLE) == ["/b", "/c", "/d"]

    @pytest.mark.parametrize("a,b", [("/a", "/e"), ("/b", "/d"), ("/c", "/c"), ("/e", "/b")])
    def test_symmetric(self, a, b):
        forward = SelectionModel()
        backward = SelectionModel()
        assert set(forward.select_range(a, b, VISIBLE)) == set(backward.select_range(b, a, VISIBLE))

    def test_stale_anchor_degrades_to_single(self, sel):
        assert sel.select_range("/gone", "/c", VISIBLE) == ["/c"]
        assert sel.anchor == "/c"

    def test_missing_anchor_degrades_to_single(self, sel):
        assert sel.select_range(None, "/c", VISIBLE) == ["/c"]

    def test_target_not_visible_keeps_selection(self, sel):
        sel.select_single("/a")
        assert sel.select_range("/a", "/zzz", VISIBLE) == ["/a"]

    def test_extend_uses_stored_anchor(self, sel):
        sel.select_single("/b")
        assert sel.extend_to("/d", VISIBLE) == ["/b", "/c", "/d"]
        assert sel.anchor == "/b"


def test_select_all_and_clear(sel):
    sel.select_all(VISIBLE)
    assert len(sel) == 5
    assert sel.anchor == "/a"
    sel.clear()
    assert sel.is_empty
    assert sel.anchor is None


def test_revalidate_drops_missing_paths_and_anchor(sel):
    sel.select_range("/a", "/c", VISIBLE)
    sel.revalidate(["/b", "/c", "/d"])
    assert sel.paths == ["/b", "/c"]
    assert sel.anchor is None
    assert "/a" not in sel
