"""Tests for panels and the panel manager: z-order, focus, move/resize gestures, expand/collapse, close."""

import pytest

from ...animation import Animator
from ..manager import PanelCloseAnimation, PanelManager
from ..panel import DRAG_Z, Panel, PanelContent


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

NS = 10**9  # nanoseconds per second

def _make_manager(n_panels=0, grid_size=20):
    manager = PanelManager(grid_size=grid_size, animator=Animator())
    panels = [manager.add(Panel(f"panel {k}")) for k in range(n_panels)]
    return manager, panels

def _check_z_invariant(manager):
    """z values are a permutation of 1..N; at most one focused panel, and it is on top."""
    zs = sorted(p.z for p in manager.panels)
    assert zs == list(range(1, len(manager.panels) + 1))
    focused = [p for p in manager.panels if p.focused]
    assert len(focused) <= 1
    if focused:
        assert focused[0].z == len(manager.panels)


class RecordingContent(PanelContent):
    def __init__(self):
        self.events = []

    def on_resize(self, width, height):
        self.events.append(("resize", width, height))

    def set_suppressed(self, suppressed):
        self.events.append(("suppressed", suppressed))

    def destroy(self):
        self.events.append(("destroy",))


# ---------------------------------------------------------------------------
# Tests: z-order and focus
# ---------------------------------------------------------------------------

class TestFocus:
    def test_add_focuses_new_panel(self):
        manager, (a, b, c) = _make_manager(3)
        assert manager.focused is c
        assert (a.z, b.z, c.z) == (1, 2, 3)
        _check_z_invariant(manager)

    def test_focus_demotes_panels_above(self):
        """Focusing the bottom panel: everything above moves down one step."""
        manager, (a, b, c) = _make_manager(3)
        manager.focus(a)
        assert (a.z, b.z, c.z) == (3, 1, 2)
        assert a.focused and not b.focused and not c.focused
        _check_z_invariant(manager)

    def test_focus_keeps_panels_below(self):
        manager, (a, b, c) = _make_manager(3)
        manager.focus(b)
        assert (a.z, b.z, c.z) == (1, 3, 2)
        _check_z_invariant(manager)

    def test_focus_top_is_noop(self):
        manager, (a, b, c) = _make_manager(3)
        manager.focus(c)
        assert (a.z, b.z, c.z) == (1, 2, 3)

    def test_invariant_under_many_focus_changes(self):
        manager, panels = _make_manager(5)
        for k in [3, 0, 4, 4, 1, 2, 0, 3]:
            manager.focus(panels[k])
            _check_z_invariant(manager)
            assert manager.focused is panels[k]

    def test_focus_foreign_panel_rejected(self):
        manager, _ = _make_manager(1)
        with pytest.raises(ValueError):
            manager.focus(Panel("stranger"))

    def test_add_twice_rejected(self):
        manager, (a,) = _make_manager(1)
        with pytest.raises(ValueError):
            manager.add(a)


class TestRemove:
    def test_remove_focuses_highest(self):
        manager, (a, b, c) = _make_manager(3)
        manager.focus(a)  # a=3, b=1, c=2
        manager.remove(a)
        assert manager.focused is c
        _check_z_invariant(manager)

    def test_remove_middle_closes_gap(self):
        manager, (a, b, c) = _make_manager(3)
        manager.remove(b)
        assert (a.z, c.z) == (1, 2)
        assert manager.focused is c
        _check_z_invariant(manager)

    def test_remove_last(self):
        manager, (a,) = _make_manager(1)
        manager.remove(a)
        assert manager.panels == []
        assert manager.focused is None

    def test_remove_releases_bindings_and_content(self):
        released = []
        content = RecordingContent()
        manager, _ = _make_manager(1)
        panel = manager.add(Panel("p", content=content))
        panel.bind(lambda: released.append("mouse"))
        panel.bind(lambda: released.append("keyboard"))
        manager.remove(panel)
        assert released == ["mouse", "keyboard"]
        assert not panel.has_bindings()
        assert ("destroy",) in content.events
        assert panel.closed and panel.manager is None


# ---------------------------------------------------------------------------
# Tests: move and resize
# ---------------------------------------------------------------------------

class TestMove:
    def test_grid_snap_scenario(self):
        """Dragging the header by (47, 23) on a 20 px grid lands at (40, 20)."""
        manager, (panel,) = _make_manager(1)
        panel.begin_move(100.0, 5.0)
        panel.move_to(147.0, 28.0)
        panel.end_move()
        assert (panel.x, panel.y) == (40, 20)

    def test_halfway_rounds_up(self):
        manager, (panel,) = _make_manager(1)
        panel.begin_move(0.0, 0.0)
        panel.move_to(10.0, -10.0)
        assert (panel.x, panel.y) == (20, 0)

    def test_manager_snaps_to_its_grid(self):
        manager, _ = _make_manager(0, grid_size=40)
        assert manager.snap(59) == 40
        assert manager.snap(60) == 80

    def test_elevated_during_drag(self):
        """While dragged, a panel is shown above everything; afterwards its z is restored."""
        manager, (a, b, c) = _make_manager(3)
        a.begin_move(0.0, 0.0)
        assert a.display_z == DRAG_Z
        assert manager.in_stacking_order()[-1] is a
        a.end_move()
        assert a.display_z == a.z == 3  # focused by the drag
        _check_z_invariant(manager)

    def test_drag_focuses(self):
        manager, (a, b) = _make_manager(2)
        a.begin_move(0.0, 0.0)
        assert manager.focused is a

    def test_move_suppresses_content_redraw(self):
        content = RecordingContent()
        manager, _ = _make_manager(0)
        panel = manager.add(Panel("p", content=content))
        panel.begin_move(0.0, 0.0)
        panel.move_to(50.0, 0.0)
        panel.end_move()
        assert content.events == [("suppressed", True), ("suppressed", False)]

    def test_move_without_begin_ignored(self):
        manager, (panel,) = _make_manager(1)
        assert not panel.move_to(100.0, 100.0)
        assert (panel.x, panel.y) == (0, 0)


class TestResize:
    def test_resize_snaps_delta(self):
        manager, _ = _make_manager(0)
        panel = manager.add(Panel("p", width=400, height=300))
        assert panel.begin_resize(500.0, 400.0)
        panel.resize_to(547.0, 371.0)
        panel.end_resize()
        assert (panel.width, panel.height) == (440, 280)

    def test_resize_respects_minimum(self):
        manager, _ = _make_manager(0)
        panel = manager.add(Panel("p", width=200, height=200, min_width=100, min_height=60))
        panel.begin_resize(0.0, 0.0)
        panel.resize_to(-1000.0, -1000.0)
        assert (panel.width, panel.height) == (100, 60)

    def test_resize_only_when_expanded(self):
        manager, _ = _make_manager(0)
        panel = manager.add(Panel("p", width=400, height=300))
        panel.toggle_expanded()
        assert not panel.begin_resize(0.0, 0.0)
        assert not panel.resize_to(100.0, 100.0)
        assert (panel.width, panel.height) == (400, 300)
        assert not panel.resize_handle_contains(399.0, 19.0)

    def test_resize_notifies_content(self):
        content = RecordingContent()
        manager, _ = _make_manager(0)
        panel = manager.add(Panel("p", width=400, height=300, header_height=20, content=content))
        panel.begin_resize(0.0, 0.0)
        panel.resize_to(40.0, 40.0)
        assert ("resize", 440, 320) in content.events


# ---------------------------------------------------------------------------
# Tests: expand/collapse
# ---------------------------------------------------------------------------

class TestExpand:
    def test_collapsed_height_is_header(self):
        panel = Panel("p", width=400, height=300, header_height=20)
        assert panel.rendered_height == 300
        assert not panel.toggle_expanded()
        assert panel.rendered_height == 20

    def test_size_and_position_preserved(self):
        panel = Panel("p", width=400, height=300, x=60, y=80)
        panel.toggle_expanded()
        panel.toggle_expanded()
        assert (panel.x, panel.y, panel.width, panel.height) == (60, 80, 400, 300)
        assert panel.rendered_height == 300

    def test_header_hit(self):
        panel = Panel("p", width=400, height=300, x=0, y=0, header_height=20)
        assert panel.header_contains(10.0, 10.0)
        assert not panel.header_contains(10.0, 30.0)
        assert panel.resize_handle_contains(395.0, 295.0)


# ---------------------------------------------------------------------------
# Tests: close
# ---------------------------------------------------------------------------

class TestClose:
    def test_two_stage_animation(self):
        manager, (a, b) = _make_manager(2)
        released = []
        b.bind(lambda: released.append(True))
        manager.close(b)
        (animation,) = manager.animator.animations
        assert isinstance(animation, PanelCloseAnimation)
        t0 = animation.t0

        manager.animator.render_frame(t=t0 + NS // 4)  # stage 1: body fading
        assert 0.0 < b.body_opacity < 1.0
        assert b.header_opacity == 1.0
        assert b in manager.panels

        manager.animator.render_frame(t=t0 + 3 * NS // 4)  # stage 2: header fading, collapsing
        assert b.body_opacity == 0.0
        assert 0.0 < b.header_opacity < 1.0
        assert 0.0 < b.collapse < 1.0
        assert b in manager.panels

        manager.animator.render_frame(t=t0 + 2 * NS)  # done
        assert b not in manager.panels
        assert released == [True]
        assert manager.focused is a
        assert manager.animator.animations == []

    def test_close_is_idempotent(self):
        manager, (a,) = _make_manager(1)
        manager.close(a)
        manager.close(a)
        assert len(manager.animator.animations) == 1

    def test_closing_panel_ignores_input(self):
        manager, (a,) = _make_manager(1)
        manager.close(a)
        a.begin_move(10.0, 10.0)
        assert not a.is_dragging()
        assert manager.panel_at(10.0, 10.0) is None
        assert a.toggle_expanded() is True  # unchanged

    def test_close_cancels_drag(self):
        manager, (a,) = _make_manager(1)
        a.begin_move(0.0, 0.0)
        manager.close(a)
        assert not a.elevated
        assert not a.is_dragging()

    def test_close_without_animation(self):
        manager, (a, b) = _make_manager(2)
        manager.close(b, animate=False)
        assert manager.panels == [a]
        assert manager.animator.animations == []

    def test_panel_at_topmost(self):
        manager, _ = _make_manager(0)
        a = manager.add(Panel("a", x=0, y=0, width=200, height=200))
        b = manager.add(Panel("b", x=100, y=100, width=200, height=200))
        assert manager.panel_at(150.0, 150.0) is b
        manager.focus(a)
        assert manager.panel_at(150.0, 150.0) is a
        assert manager.panel_at(250.0, 250.0) is b
        assert manager.panel_at(500.0, 500.0) is None
