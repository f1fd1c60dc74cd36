# Copyright (c) 2026 bootwidgets contributors
# SPDX-License-Identifier: ISC
#
# Focus navigation tests: key routing between the widget set and the focused
# widget, focus attributes, the focus callback, and posting/unposting.

import pytest

from bootforms import FormError
from bootterm import Key
from conftest import focused, send

NAV_KEYS = (Key.TAB, Key.BTAB, Key.UP, Key.DOWN, Key.PAGE_UP, Key.PAGE_DOWN)


def _screen(ws):
    """A screen of every widget kind. Returns (widgets, clicks)."""
    clicks = []
    label = ws.new_label(0, 0, "Options")
    check = ws.new_checkbox(1, 0)
    box = ws.new_textbox(2, 0, 10, "abc")
    # Options are registered, and so traversed, before the button
    sel = ws.new_select(3, 0, 10)
    sel.add_option(1, "one")
    sel.add_option(2, "two")
    button = ws.new_button(6, 0, 6, "OK", clicks.append, "ok")
    widgets = [label, check, box, sel, button]
    return widgets, clicks


def _focus_backs(ws):
    # Fields drawn with a focused attribute. Labels share one style for both.
    return [
        f
        for f in ws.fields
        if ws.widget_for(f).focused_attr != ws.widget_for(f).unfocused_attr
        and f.back is ws.widget_for(f).focused_attr
    ]


# ---------------------------------------------------------------------------
# Checkbox and button screen
# ---------------------------------------------------------------------------


def test_checkbox_button_walkthrough(ws):
    clicked = []
    check = ws.new_checkbox(0, 0)
    button = ws.new_button(1, 0, 6, "Go", lambda arg: clicked.append(arg), 42)
    ws.post()

    assert focused(ws) is check

    assert ws.process_key(Key.TAB)
    assert focused(ws) is button

    assert ws.process_key(ord("\n"))
    assert clicked == [42]

    assert ws.process_key(Key.BTAB)
    assert focused(ws) is check

    assert ws.process_key(ord(" "))
    assert check.get_value()


def test_focus_wraps(ws):
    a = ws.new_checkbox(0, 0)
    b = ws.new_checkbox(1, 0)
    ws.post()

    send(ws, Key.TAB, Key.TAB)
    assert focused(ws) is a
    send(ws, Key.UP)
    assert focused(ws) is b
    send(ws, Key.DOWN)
    assert focused(ws) is a


def test_labels_skipped(ws):
    widgets, _ = _screen(ws)
    label, check, box, sel, button = widgets
    ws.post()

    assert focused(ws) is check

    seen = []
    for _ in range(5):
        send(ws, Key.TAB)
        seen.append(ws.form.current_field)
    assert seen == [
        box.field,
        sel.options[0].field,
        sel.options[1].field,
        button.field,
        check.field,
    ]

    send(ws, Key.PAGE_DOWN)
    assert focused(ws) is button
    send(ws, Key.PAGE_UP)
    assert focused(ws) is check
    send(ws, Key.BTAB)
    assert focused(ws) is button


# ---------------------------------------------------------------------------
# Routing and focus attributes
# ---------------------------------------------------------------------------


def test_navigation_always_handled(ws):
    _screen(ws)
    ws.post()

    for key in NAV_KEYS * 3:
        assert ws.process_key(key)
        assert len(_focus_backs(ws)) == 1
        field = ws.form.current_field
        assert field.back is ws.widget_for(field).focused_attr


def test_focus_attributes(ws):
    a = ws.new_checkbox(0, 0)
    b = ws.new_textbox(1, 0, 10)
    assert a.field.back is a.unfocused_attr
    assert b.field.back is b.unfocused_attr

    ws.post()
    assert a.field.back is a.focused_attr
    assert b.field.back is b.unfocused_attr

    send(ws, Key.TAB)
    assert a.field.back is a.unfocused_attr
    assert b.field.back is b.focused_attr


def test_focus_drawn(ws, win):
    a = ws.new_checkbox(0, 0)
    ws.new_checkbox(1, 0)
    ws.post()
    assert win.style_at(0, 0) is a.focused_attr
    assert win.style_at(1, 0).standout is False

    send(ws, Key.TAB)
    assert win.style_at(0, 0) is a.unfocused_attr
    assert win.style_at(1, 0).standout


def test_unhandled_key_delegated(ws):
    check = ws.new_checkbox(0, 0)
    ws.post()
    assert not ws.process_key(ord("q"))
    assert not check.get_value()
    assert focused(ws) is check


def test_keys_need_posted_set(ws):
    ws.new_checkbox(0, 0)
    with pytest.raises(FormError):
        ws.process_key(Key.TAB)
    with pytest.raises(FormError):
        ws.process_key(ord(" "))


def test_focused_widget(ws):
    check = ws.new_checkbox(0, 0)
    assert ws.focused_widget() is None
    ws.post()
    assert ws.focused_widget() is check


# ---------------------------------------------------------------------------
# Focus callback
# ---------------------------------------------------------------------------


def test_focus_callback(ws):
    calls = []
    check = ws.new_checkbox(0, 0)
    box = ws.new_textbox(1, 0, 10)
    ws.set_widget_focus(lambda widget, arg: calls.append((widget, arg)), "arg")

    ws.post()
    assert calls == [(check, "arg")]

    send(ws, Key.TAB)
    assert calls[-1] == (box, "arg")

    # Non-navigation keys don't move the focus
    send(ws, "xyz")
    assert len(calls) == 2

    ws.set_widget_focus(None)
    send(ws, Key.TAB)
    assert len(calls) == 2


def test_focus_callback_on_single_field(ws):
    calls = []
    check = ws.new_checkbox(0, 0)
    ws.set_widget_focus(lambda widget, arg: calls.append(widget))
    ws.post()

    # Moving with only one selectable field lands on the same widget
    for key in NAV_KEYS:
        assert ws.process_key(key)
    assert calls == [check] * (1 + len(NAV_KEYS))


# ---------------------------------------------------------------------------
# Posting
# ---------------------------------------------------------------------------


def test_post_twice_fails(ws):
    ws.new_checkbox(0, 0)
    ws.post()
    with pytest.raises(FormError):
        ws.post()


def test_post_empty_set_fails(ws):
    with pytest.raises(FormError):
        ws.post()
    assert not ws.posted

    # A failed post leaves nothing connected
    check = ws.new_checkbox(0, 0)
    ws.post()
    assert focused(ws) is check


def test_unpost_unposted_fails(ws):
    with pytest.raises(FormError):
        ws.unpost()


def test_unpost_restores_focus(ws):
    widgets, _ = _screen(ws)
    box = widgets[2]
    ws.post()
    send(ws, Key.TAB)
    assert focused(ws) is box

    ws.unpost()
    assert not ws.posted
    assert box.field.form is None
    assert box.field.back is box.unfocused_attr

    ws.post()
    assert focused(ws) is box
    assert box.field.back is box.focused_attr


def test_post_puts_cursor_at_end(ws):
    box = ws.new_textbox(4, 2, 10, "abc")
    ws.post()
    assert ws.form.cursor_position() == (4, 5)
    send(ws, "d")
    assert box.get_value() == "abcd"


def test_post_skips_hidden_focus_field(ws):
    a = ws.new_checkbox(0, 0)
    b = ws.new_checkbox(1, 0)
    ws.post()
    send(ws, Key.TAB)
    ws.unpost()

    b.set_visible(False)
    ws.post()
    assert focused(ws) is a
    send(ws, Key.TAB)
    assert focused(ws) is a


def test_button_click_unposts(ws):
    """A click callback may change the screen around it."""

    def click(arg):
        ws.unpost()
        check.destroy()

    check = ws.new_checkbox(0, 0)
    button = ws.new_button(1, 0, 6, "Drop", click)
    ws.post()
    send(ws, Key.TAB, " ")

    assert not ws.posted
    assert ws.widgets == (button,)
    ws.post()
    assert focused(ws) is button
