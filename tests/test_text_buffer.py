"""Tests for onyx.tui.text_buffer.TextEditBuffer."""

from __future__ import annotations

import random

from onyx.tui.text_buffer import TextEditBuffer
from onyx.tui.undo import UndoSnapshot


def _assert_valid(buf: TextEditBuffer) -> None:
    assert 0 <= buf.cursor <= len(buf.text)
    anchor = buf.selection_anchor
    if anchor is not None:
        assert 0 <= anchor <= len(buf.text)


class TestInsert:
    """Inserting text at the cursor."""

    def test_insert_into_empty_buffer(self) -> None:
        buf = TextEditBuffer()
        buf.insert("hello")
        assert buf.text == "hello"
        assert buf.cursor == 5

    def test_insert_in_the_middle(self) -> None:
        buf = TextEditBuffer("held")
        buf.move_left()
        buf.insert("l")
        assert buf.text == "helld"
        assert buf.cursor == 4

    def test_insert_replaces_selection(self) -> None:
        buf = TextEditBuffer("hello world")
        buf.select_all()
        buf.insert("x")
        assert buf.text == "x"
        assert buf.cursor == 1
        assert not buf.has_selection()

    def test_insert_multibyte_characters(self) -> None:
        buf = TextEditBuffer()
        buf.insert("\u00e9")
        buf.insert("中")
        assert buf.text == "\u00e9中"
        assert buf.cursor == 2
        buf.move_left()
        assert buf.cursor == 1
        buf.insert("a")
        assert buf.text == "\u00e9a中"


class TestDelete:
    """Backspace and delete."""

    def test_delete_before_removes_previous_char(self) -> None:
        buf = TextEditBuffer("abc")
        buf.delete_before()
        assert buf.text == "ab"
        assert buf.cursor == 2

    def test_delete_before_at_start_is_noop(self) -> None:
        buf = TextEditBuffer("abc")
        buf.move_home()
        buf.delete_before()
        assert buf.text == "abc"
        assert buf.cursor == 0

    def test_delete_after_removes_next_char(self) -> None:
        buf = TextEditBuffer("abc")
        buf.move_home()
        buf.delete_after()
        assert buf.text == "bc"
        assert buf.cursor == 0

    def test_delete_after_at_end_is_noop(self) -> None:
        buf = TextEditBuffer("abc")
        buf.delete_after()
        assert buf.text == "abc"

    def test_delete_removes_selection(self) -> None:
        buf = TextEditBuffer("hello world")
        buf.move_left(extend=True)
        buf.move_left(extend=True)
        buf.delete_after()
        assert buf.text == "hello wor"
        assert buf.cursor == 9
        assert not buf.has_selection()

    def test_delete_before_removes_whole_combining_sequence(self) -> None:
        buf = TextEditBuffer("ae\u0301")
        buf.delete_before()
        assert buf.text == "a"
        assert buf.cursor == 1

    def test_delete_before_wide_character(self) -> None:
        buf = TextEditBuffer("中文")
        buf.delete_before()
        assert buf.text == "中"
        assert buf.cursor == 1


class TestMovement:
    """Cursor movement and selection."""

    def test_move_left_and_right_clamp(self) -> None:
        buf = TextEditBuffer("ab")
        buf.move_right()
        assert buf.cursor == 2
        buf.move_left()
        buf.move_left()
        buf.move_left()
        assert buf.cursor == 0

    def test_move_steps_over_grapheme_cluster(self) -> None:
        buf = TextEditBuffer("e\u0301x")
        buf.move_home()
        buf.move_right()
        assert buf.cursor == 2

    def test_extend_sets_anchor_on_first_move(self) -> None:
        buf = TextEditBuffer("hello")
        buf.move_left(extend=True)
        assert buf.selection_anchor == 5
        assert buf.cursor == 4
        buf.move_left(extend=True)
        assert buf.selection_anchor == 5
        assert buf.selection_range() == (3, 5)
        assert buf.selected_text() == "lo"

    def test_plain_move_collapses_selection_to_edge(self) -> None:
        buf = TextEditBuffer("hello")
        buf.move_left(extend=True)
        buf.move_left(extend=True)
        buf.move_right()
        assert buf.cursor == 5
        assert not buf.has_selection()

        buf.move_left(extend=True)
        buf.move_left(extend=True)
        buf.move_left()
        assert buf.cursor == 3
        assert not buf.has_selection()

    def test_select_all(self) -> None:
        buf = TextEditBuffer("hello")
        buf.move_home()
        buf.select_all()
        assert buf.selection_range() == (0, 5)
        assert buf.cursor == 5

    def test_home_and_end(self) -> None:
        buf = TextEditBuffer("hello")
        buf.move_home()
        assert buf.cursor == 0
        buf.move_end()
        assert buf.cursor == 5


class TestReplaceAndTake:
    """Range replacement, take, snapshots."""

    def test_replace_range_places_cursor_after_replacement(self) -> None:
        buf = TextEditBuffer("say /co now")
        buf.replace_range(4, 7, "/config")
        assert buf.text == "say /config now"
        assert buf.cursor == 11

    def test_replace_range_clamps(self) -> None:
        buf = TextEditBuffer("abc")
        buf.replace_range(-5, 50, "x")
        assert buf.text == "x"
        assert buf.cursor == 1

    def test_take_returns_text_and_resets(self) -> None:
        buf = TextEditBuffer("hello")
        buf.select_all()
        assert buf.take() == "hello"
        assert buf.text == ""
        assert buf.cursor == 0
        assert not buf.has_selection()

    def test_snapshot_and_restore(self) -> None:
        buf = TextEditBuffer("hello")
        buf.move_left()
        snap = buf.snapshot()
        assert snap == UndoSnapshot(text="hello", cursor=4)
        buf.clear()
        buf.restore(snap)
        assert buf.text == "hello"
        assert buf.cursor == 4

    def test_restore_clamps_cursor(self) -> None:
        buf = TextEditBuffer()
        buf.restore(UndoSnapshot(text="ab", cursor=10))
        assert buf.cursor == 2


class TestCurrentWord:
    """Word extraction used by the command palette."""

    def test_current_word_at_start(self) -> None:
        assert TextEditBuffer("/co").current_word() == "/co"

    def test_current_word_after_space(self) -> None:
        buf = TextEditBuffer("hello /he")
        assert buf.current_word() == "/he"
        assert buf.word_start() == 6

    def test_current_word_empty_after_space(self) -> None:
        assert TextEditBuffer("hello ").current_word() == ""


class TestInvariants:
    """Cursor stays in range under random edit sequences."""

    def test_random_operations_keep_cursor_valid(self) -> None:
        rng = random.Random(1234)
        pieces = ["a", "\u00e9", "中", "e\u0301", " ", "\U0001f44d", "/"]
        buf = TextEditBuffer()
        for _ in range(2000):
            op = rng.randrange(9)
            if op == 0:
                buf.insert(rng.choice(pieces))
            elif op == 1:
                buf.delete_before()
            elif op == 2:
                buf.delete_after()
            elif op == 3:
                buf.move_left(extend=rng.random() < 0.5)
            elif op == 4:
                buf.move_right(extend=rng.random() < 0.5)
            elif op == 5:
                buf.move_home()
            elif op == 6:
                buf.move_end()
            elif op == 7:
                buf.select_all()
            else:
                buf.replace_range(rng.randrange(-2, 10), rng.randrange(-2, 10), rng.choice(pieces))
            _assert_valid(buf)
