# Copyright (c) 2026 bootwidgets contributors
# SPDX-License-Identifier: ISC
#
# Widget tests: creation and registration, the per-kind key handling of
# labels, checkboxes, text boxes, and buttons, geometry, visibility, moving,
# and destruction.

import pytest

from bootforms import O_ACTIVE, O_BLANK, O_EDIT, O_STATIC, O_WRAP, FormError
from bootterm import Key
from bootwidgets import (
    Button,
    Checkbox,
    Label,
    Textbox,
    Widget,
    key_is_select,
    style,
)
from conftest import focused, send

SELECT_KEYS = (ord(" "), ord("\r"), ord("\n"), Key.ENTER)


def test_key_is_select():
    for key in SELECT_KEYS:
        assert key_is_select(key)
    for key in (ord("x"), Key.TAB, Key.ESC, Key.DOWN):
        assert not key_is_select(key)


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


def test_factories_register_fields(ws):
    label = ws.new_label(0, 0, "Name:")
    box = ws.new_textbox(0, 6, 10, "x")
    check = ws.new_checkbox(1, 0)
    button = ws.new_button(2, 0, 6, "OK")

    assert isinstance(label, Label) and isinstance(box, Textbox)
    assert isinstance(check, Checkbox) and isinstance(button, Button)
    assert ws.fields == (label.field, box.field, check.field, button.field)
    assert ws.widgets == (label, box, check, button)
    for w in ws.widgets:
        assert ws.widget_for(w.field) is w
        assert w.base() is w
        assert isinstance(w.base(), Widget)


def test_constructors_are_factories(ws):
    label = Label(ws, 3, 4, "hi")
    assert ws.widget_for(label.field) is label
    assert label.position() == (3, 4)


def test_label(ws):
    label = ws.new_label(2, 3, "Kernel:")
    assert label.text == "Kernel:"
    assert label.field.buffer == "Kernel:"
    assert not label.field.opts & O_ACTIVE
    assert (label.height(), label.width()) == (1, 7)
    for key in SELECT_KEYS + (ord("a"),):
        assert not label.process_key(key)


def test_checkbox(ws):
    check = ws.new_checkbox(0, 0)
    assert not check.get_value()
    assert check.field.buffer == "[ ]"
    assert not check.field.opts & O_EDIT
    assert check.width() == 3

    assert not check.process_key(ord("x"))
    assert not check.get_value()

    assert check.process_key(ord(" "))
    assert check.get_value()
    assert check.field.buffer == "[*]"


def test_checkbox_toggle_is_involution(ws):
    """Two select keys give back the original value, for every select key and
    starting value."""
    for checked in (False, True):
        for key in SELECT_KEYS:
            check = ws.new_checkbox(0, 0, checked)
            assert check.process_key(key)
            assert check.get_value() is not checked
            assert check.process_key(key)
            assert check.get_value() is checked
            assert check.field.buffer == ("[*]" if checked else "[ ]")


def test_textbox_setup(ws):
    box = ws.new_textbox(0, 0, 20, "initial")
    assert box.field.buffer.startswith("initial")
    assert not box.field.opts & (O_STATIC | O_WRAP | O_BLANK)
    assert box.field.back == style("textbox")
    assert box.unfocused_attr.underline
    assert (box.height(), box.width()) == (1, 20)


def test_textbox_get_value_strips(ws):
    box = ws.new_textbox(0, 0, 20)
    box.field.set_buffer("   hello world   ")
    assert box.get_value() == "hello world"

    box.field.set_buffer("\t tabbed\t")
    assert box.get_value() == "tabbed"

    box.field.set_buffer("")
    assert box.get_value() == ""


def test_textbox_editing(ws):
    box = ws.new_textbox(0, 0, 20, "boot")
    ws.post()

    # Posting leaves the cursor at the end
    assert send(ws, "ed") == [True, True]
    assert box.get_value() == "booted"

    send(ws, Key.HOME, "re")
    assert box.get_value() == "rebooted"

    send(ws, Key.END, Key.BACKSPACE, Key.BACKSPACE)
    assert box.get_value() == "reboot"

    send(ws, Key.HOME, Key.DELETE, Key.RIGHT, Key.DELETE)
    assert box.get_value() == "eoot"

    send(ws, Key.LEFT, "z")
    assert box.get_value() == "zeoot"


def test_textbox_backspace_at_start(ws):
    """Backspace at the first position doesn't delete the character under
    the cursor."""
    box = ws.new_textbox(0, 0, 10, "abc")
    ws.post()
    send(ws, Key.HOME)
    assert ws.process_key(Key.BACKSPACE)
    assert box.get_value() == "abc"


def test_textbox_handles_every_key(ws):
    box = ws.new_textbox(0, 0, 10, "abc")
    ws.post()
    for key in (Key.ESC, Key.PAGE_UP + 1000, 0x07, Key.RESIZE):
        assert box.process_key(key)
    assert box.get_value() == "abc"


def test_textbox_needs_posted_set(ws):
    box = ws.new_textbox(0, 0, 10)
    with pytest.raises(FormError):
        box.process_key(ord("a"))


def test_textbox_longer_than_field(ws):
    box = ws.new_textbox(0, 0, 5)
    ws.post()
    send(ws, "console=ttyS0")
    assert box.get_value() == "console=ttyS0"


def test_button_text_centered(ws):
    assert ws.new_button(0, 0, 6, "OK").field.buffer == "[  OK  ]"
    assert ws.new_button(0, 0, 7, "OK").field.buffer == "[  OK   ]"
    assert ws.new_button(0, 0, 3, "Cancel").field.buffer == "[Can]"
    button = ws.new_button(0, 0, 6, "OK")
    assert button.width() == 6
    assert button.field.cols == 8
    assert not button.field.opts & O_EDIT


def test_button_click(ws):
    clicks = []
    button = ws.new_button(0, 0, 6, "OK", clicks.append, "arg")

    assert not button.process_key(ord("x"))
    assert clicks == []

    for key in SELECT_KEYS:
        assert button.process_key(key)
    assert clicks == ["arg"] * len(SELECT_KEYS)


def test_button_without_click(ws):
    """A button with no click callback handles nothing."""
    button = ws.new_button(0, 0, 6, "OK")
    for key in SELECT_KEYS:
        assert not button.process_key(key)
    assert button.field.buffer == "[  OK  ]"


# ---------------------------------------------------------------------------
# Geometry, visibility, moving
# ---------------------------------------------------------------------------


def test_move_updates_field_and_position(ws):
    box = ws.new_textbox(1, 2, 10)
    box.move(5, 7)
    assert box.position() == (5, 7)
    assert (box.y(), box.x()) == (5, 7)
    assert (box.field.y, box.field.x) == (5, 7)


def test_move_while_posted_fails(ws):
    check = ws.new_checkbox(0, 0)
    ws.post()
    with pytest.raises(FormError):
        check.move(1, 1)
    assert check.position() == (0, 0)


def test_set_visible(ws, win):
    label = ws.new_label(0, 0, "shown")
    check = ws.new_checkbox(1, 0)
    ws.post()
    assert win.text(0).startswith("shown")

    label.set_visible(False)
    assert not label.field.visible
    assert not win.text(0).startswith("shown")

    label.set_visible(True)
    assert win.text(0).startswith("shown")
    assert check.sub_focus_offset() == 0


# ---------------------------------------------------------------------------
# Destruction
# ---------------------------------------------------------------------------


def test_destroy_widget(ws):
    a = ws.new_checkbox(0, 0)
    b = ws.new_checkbox(1, 0)
    field = a.field
    a.destroy()

    assert ws.fields == (b.field,)
    assert ws.widgets == (b,)
    assert field.freed
    with pytest.raises(KeyError):
        ws.widget_for(field)


def test_destroy_while_posted_fails(ws):
    a = ws.new_checkbox(0, 0)
    ws.post()
    with pytest.raises(FormError):
        a.destroy()
    assert a.field in ws.registry


def test_destroyed_focus_field_not_restored(ws):
    a = ws.new_checkbox(0, 0)
    b = ws.new_checkbox(1, 0)
    ws.post()
    send(ws, Key.TAB)
    ws.unpost()

    b.destroy()
    ws.post()
    assert focused(ws) is a


def test_destroy_widgetset(ws):
    widgets = [ws.new_checkbox(i, 0) for i in range(3)]
    sel = ws.new_select(4, 0, 10)
    sel.add_option(1, "one")
    sel.add_option(2, "two")
    fields = ws.fields
    ws.post()

    ws.destroy()
    assert not ws.posted
    assert ws.fields == ()
    assert ws.widgets == ()
    assert len(ws.registry) == 0
    assert all(f.freed for f in fields)
    assert all(w.field.freed for w in widgets)


def test_destroy_twice(ws):
    a = ws.new_checkbox(0, 0)
    b = ws.new_checkbox(1, 0)
    a.destroy()
    a.destroy()
    assert ws.widgets == (b,)
    assert ws.fields == (b.field,)


def test_destroy_after_widgetset_destroy(ws):
    check = ws.new_checkbox(0, 0)
    sel = ws.new_select(1, 0, 10)
    sel.add_option(1, "one")
    ws.post()
    ws.destroy()

    check.destroy()
    sel.destroy()
    assert ws.widgets == ()
    assert len(ws.registry) == 0
