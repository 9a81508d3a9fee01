"""Tests for the session state machine.

Drives ``Session`` with synthetic events and a recording renderer to check
commit/cancel transitions, keymap dispatch, literal input, pointer hits, and
the repaint requests issued after each state change.
"""

from __future__ import annotations

import unittest

from gridpick.elements import Element
from gridpick.events import Damage, KeyPress, OtherEvent, PointerRelease
from gridpick.filters import Include, Running
from gridpick.layout import GridGeometry
from gridpick.session import Cancelled, Committed, Session


class _RecordingRenderer:
    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []

    def redraw_all(self, layout, cursor) -> None:
        self.calls.append(("redraw_all", cursor))

    def redraw_cells(self, layout, positions, cursor) -> None:
        self.calls.append(("redraw_cells", tuple(positions)))

    def update_filter_bar(self, text: str, match_count: int) -> None:
        self.calls.append(("filter_bar", (text, match_count)))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


FRUIT_GEOMETRY = GridGeometry(viewport_width=3, viewport_height=1, cell_width=1, cell_height=1)
GRID_GEOMETRY = GridGeometry(viewport_width=5, viewport_height=5, cell_width=1, cell_height=1)


def _fruit_session() -> tuple[Session, _RecordingRenderer]:
    renderer = _RecordingRenderer()
    elements = [Element(display=name, payload=[name]) for name in ("apple", "banana", "apricot")]
    return Session(elements, FRUIT_GEOMETRY, renderer), renderer


def _grid_session(count: int = 13) -> tuple[Session, _RecordingRenderer]:
    renderer = _RecordingRenderer()
    elements = [Element(display=f"item{i}", payload=[str(i)]) for i in range(count)]
    return Session(elements, GRID_GEOMETRY, renderer), renderer


def _keys(*keys: str) -> list[KeyPress]:
    return [KeyPress(key=key, text=key if len(key) == 1 else "") for key in keys]


class SessionLifecycleTests(unittest.TestCase):
    def test_run_paints_before_first_event(self) -> None:
        session, renderer = _fruit_session()
        outcome = session.run(_keys("ESC"))
        self.assertEqual(outcome, Cancelled())
        self.assertEqual(renderer.names(), ["filter_bar", "redraw_all"])

    def test_enter_commits_element_under_cursor(self) -> None:
        session, _ = _fruit_session()
        self.assertEqual(session.run(_keys("ENTER")), Committed(["apple"]))

    def test_ctrl_c_cancels(self) -> None:
        session, _ = _fruit_session()
        self.assertEqual(session.run(_keys("CTRL_C")), Cancelled())

    def test_exhausted_event_source_cancels(self) -> None:
        session, _ = _fruit_session()
        self.assertEqual(session.run([]), Cancelled())

    def test_action_returning_none_keeps_running(self) -> None:
        renderer = _RecordingRenderer()
        calls: list[str] = []

        def ask_later() -> None:
            calls.append("asked")
            return None

        elements = [Element(display="lazy", action=ask_later), Element(display="eager", payload=["eager"])]
        session = Session(elements, FRUIT_GEOMETRY, renderer)
        outcome = session.run(_keys("ENTER", "RIGHT", "ENTER"))
        self.assertEqual(calls, ["asked"])
        self.assertEqual(outcome, Committed(["eager"]))

    def test_action_payload_wins_over_stored_payload(self) -> None:
        renderer = _RecordingRenderer()
        elements = [Element(display="x", payload=["stored"], action=lambda: ["computed"])]
        session = Session(elements, FRUIT_GEOMETRY, renderer)
        self.assertEqual(session.run(_keys("ENTER")), Committed(["computed"]))

    def test_enter_on_empty_filter_result_keeps_running(self) -> None:
        session, _ = _fruit_session()
        for event in _keys("z", "z"):
            session.handle(event)
        self.assertEqual(len(session.layout), 0)
        self.assertIsNone(session.handle(KeyPress("ENTER")))
        self.assertIsNone(session.outcome)

    def test_other_events_are_ignored(self) -> None:
        session, renderer = _fruit_session()
        self.assertIsNone(session.handle(OtherEvent("MOUSE_DRAG:1:1")))
        self.assertIsNone(session.handle(Damage(count=2)))
        self.assertEqual(renderer.calls, [])

    def test_damage_with_zero_count_repaints(self) -> None:
        session, renderer = _fruit_session()
        session.handle(Damage(count=0))
        self.assertEqual(renderer.names(), ["redraw_all", "filter_bar"])


class SessionNavigationTests(unittest.TestCase):
    def test_arrow_moves_cursor_and_redraws_two_cells(self) -> None:
        session, renderer = _grid_session()
        session.handle(KeyPress("RIGHT"))
        self.assertEqual(session.cursor, (1, 0))
        self.assertEqual(renderer.calls, [("redraw_cells", ((0, 0), (1, 0)))])

    def test_move_to_absent_cell_changes_nothing(self) -> None:
        session, renderer = _grid_session(count=3)
        session.handle(KeyPress("LEFT"))
        layout_before = session.layout
        filters_before = session.filters.filters()
        session.move(0, -1)
        self.assertEqual(session.cursor, (0, 0))
        self.assertIs(session.layout, layout_before)
        self.assertEqual(session.filters.filters(), filters_before)
        self.assertEqual(renderer.calls, [])

    def test_tab_cycles_ring_order(self) -> None:
        session, _ = _grid_session()
        for event in _keys("TAB", "TAB"):
            session.handle(event)
        self.assertEqual(session.cursor, (1, 0))
        session.handle(KeyPress("SHIFT_TAB"))
        self.assertEqual(session.cursor, (0, 1))

    def test_line_begin_and_end_keys(self) -> None:
        session, _ = _grid_session()
        session.handle(KeyPress("END"))
        self.assertEqual(session.cursor, (2, 0))
        session.handle(KeyPress("CTRL_A"))
        self.assertEqual(session.cursor, (-2, 0))

    def test_pointer_release_commits_clicked_cell(self) -> None:
        renderer = _RecordingRenderer()
        geometry = GridGeometry(viewport_width=48, viewport_height=3, cell_width=16, cell_height=3)
        elements = [Element(display=name, payload=[name]) for name in ("apple", "banana", "apricot")]
        session = Session(elements, geometry, renderer)
        # Layout: apple at (0, 0), banana at (1, 0), apricot at (-1, 0).
        self.assertEqual(session.handle(PointerRelease(x=40, y=1)), Committed(["banana"]))

    def test_pointer_release_outside_grid_keeps_running(self) -> None:
        session, _ = _fruit_session()
        self.assertIsNone(session.handle(PointerRelease(x=10, y=0)))
        self.assertIsNone(session.outcome)

    def test_custom_keymap_replaces_defaults(self) -> None:
        renderer = _RecordingRenderer()
        elements = [Element(display=f"item{i}") for i in range(13)]
        session = Session(elements, GRID_GEOMETRY, renderer, keymap={"ctrl+f": "move_right"})
        session.handle(KeyPress("CTRL_F"))
        self.assertEqual(session.cursor, (1, 0))
        session.handle(KeyPress("RIGHT"))
        self.assertEqual(session.cursor, (1, 0))


class SessionFilterTests(unittest.TestCase):
    def test_typing_filters_and_resets_cursor(self) -> None:
        session, renderer = _fruit_session()
        session.handle(KeyPress("RIGHT"))
        renderer.calls.clear()

        for event in _keys("a", "p"):
            session.handle(event)

        self.assertEqual([e.display for e in session.elements], ["apple", "apricot"])
        self.assertEqual(session.cursor, session.layout.start)
        self.assertEqual(
            renderer.calls[-2:],
            [("redraw_all", (0, 0)), ("filter_bar", ("ap", 2))],
        )

    def test_control_keys_without_binding_do_not_type(self) -> None:
        session, renderer = _fruit_session()
        session.handle(KeyPress("CTRL_G"))
        session.handle(KeyPress("F5"))
        session.handle(KeyPress("ALT_q"))
        self.assertEqual(session.filters.filters(), [])
        self.assertEqual(renderer.calls, [])

    def test_slash_commits_running_text(self) -> None:
        session, renderer = _fruit_session()
        for event in _keys("a", "p", "/"):
            session.handle(event)
        self.assertEqual(session.filters.filters(), [Include("ap")])
        self.assertEqual(renderer.calls[-1], ("filter_bar", ("ap/", 2)))

    def test_exclude_key(self) -> None:
        session, _ = _fruit_session()
        for event in _keys("a", "p", "CTRL_SLASH"):
            session.handle(event)
        self.assertEqual([e.display for e in session.elements], ["banana"])

    def test_backspace_materializes_committed_filter(self) -> None:
        session, _ = _fruit_session()
        for event in _keys("a", "p", "/", "BACKSPACE"):
            session.handle(event)
        self.assertEqual(session.filters.filters(), [Running("a")])
        session.handle(KeyPress("BACKSPACE"))
        self.assertEqual(session.filters.filters(), [])
        self.assertEqual(len(session.elements), 3)

    def test_ctrl_u_clears_typed_text(self) -> None:
        session, _ = _fruit_session()
        for event in _keys("a", "p", "r", "CTRL_U"):
            session.handle(event)
        self.assertEqual(session.filters.filters(), [])

    def test_noop_filter_operations_do_not_repaint(self) -> None:
        session, renderer = _fruit_session()
        session.handle(KeyPress("RIGHT"))
        renderer.calls.clear()
        for event in _keys("BACKSPACE", "/", "CTRL_U"):
            session.handle(event)
        self.assertEqual(renderer.calls, [])
        self.assertEqual(session.cursor, (1, 0))

    def test_empty_result_reports_zero_matches(self) -> None:
        session, renderer = _fruit_session()
        session.handle(KeyPress("q", "q"))
        self.assertEqual(renderer.calls[-1], ("filter_bar", ("q", 0)))

    def test_commit_after_filtering_uses_filtered_layout(self) -> None:
        session, _ = _fruit_session()
        events = _keys("b", "ENTER")
        self.assertEqual(session.run(events), Committed(["banana"]))


if __name__ == "__main__":
    unittest.main()
