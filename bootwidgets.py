# Copyright (c) 2026 bootwidgets contributors
# SPDX-License-Identifier: ISC

"""
Overview
========

Widgets for text-mode boot menus: labels, checkboxes, text boxes,
single-choice selects, and buttons, laid out on one screen and driven by
integer key codes (see bootterm.Key).

All widgets of a screen belong to a WidgetSet. The set keeps the fields of
its widgets in a registry, posts them as one bootforms.Form onto a pair of
windows, and routes keys:

  Tab/Down           : Next field
  Shift-Tab/Up       : Previous field
  Page Up/Page Down  : First/last field

Other keys go to the widget that has the focus. Space and Enter toggle
checkboxes, pick select options, and click buttons. Text boxes take
Home/End/Left/Right/Backspace/Delete and printable characters.

Sample usage:

  def save(arg):
      ...

  ws = WidgetSet(win, win)
  ws.new_label(0, 0, "Autoboot:")
  autoboot = ws.new_checkbox(0, 12, True)
  ws.new_button(2, 0, 6, "Save", save)
  ws.post()

  while ...:
      if not ws.process_key(term.read_key()):
          ...  # Screen-level keys

A key the focused widget doesn't handle makes process_key() return False.
What happens then is up to the screen.


Styles
======

Each widget kind has an unfocused and a focused display attribute, named
'<kind>' and '<kind>-focus' ('label', 'checkbox', 'textbox', 'select',
'button'). The screen elements 'screen' and 'title' are there for screens
built on the widgets.

The built-in styles are 'default' (attributes only: standout for the
focused widget, underlined text boxes) and 'color'. The BOOTWIDGETS_STYLE
environment variable selects a built-in style and overrides elements of it:

  BOOTWIDGETS_STYLE="color button-focus=fg:white,bg:red,bold"

Assignments take a comma-separated list of fg:COLOR, bg:COLOR, bold,
underline, and standout. COLOR is a color name (red, brightred, ...), a
palette number, or #RRGGBB. The right-hand side may also name another
element to copy its style. A word without '=' includes a built-in style.
Bad definitions are ignored with a warning on stderr.
"""

import os
import re
import sys

from bootforms import (
    Field,
    Form,
    FormError,
    O_ACTIVE,
    O_BLANK,
    O_EDIT,
    O_STATIC,
    O_WRAP,
    REQ_BEG_FIELD,
    REQ_DEL_CHAR,
    REQ_END_FIELD,
    REQ_FIRST_FIELD,
    REQ_LAST_FIELD,
    REQ_LEFT_CHAR,
    REQ_NEXT_FIELD,
    REQ_PREV_FIELD,
    REQ_RIGHT_CHAR,
)
from bootterm import Color, Key, NAMED_COLORS, Style

_CHECKBOX_CHECKED = "[*]"
_CHECKBOX_UNCHECKED = "[ ]"

_SELECT_SELECTED = "(*)"
_SELECT_UNSELECTED = "( )"

# Field registry capacity of a new WidgetSet. Doubled as needed.
_INITIAL_FIELD_CAPACITY = 8

# Keys that move the focus between fields, and the form request for each
_NAV_REQUESTS = {
    Key.BTAB: REQ_PREV_FIELD,
    Key.UP: REQ_PREV_FIELD,
    Key.TAB: REQ_NEXT_FIELD,
    Key.DOWN: REQ_NEXT_FIELD,
    Key.PAGE_UP: REQ_FIRST_FIELD,
    Key.PAGE_DOWN: REQ_LAST_FIELD,
}

# Text box editing keys. Backspace is handled separately.
_TEXTBOX_REQUESTS = {
    Key.HOME: REQ_BEG_FIELD,
    Key.END: REQ_END_FIELD,
    Key.LEFT: REQ_LEFT_CHAR,
    Key.RIGHT: REQ_RIGHT_CHAR,
    Key.DELETE: REQ_DEL_CHAR,
}

_SELECT_KEYS = frozenset((ord(" "), ord("\r"), ord("\n"), Key.ENTER))


def key_is_select(key):
    """True for the keys that toggle, pick, or click: Space and Enter."""
    return key in _SELECT_KEYS


#
# Styling
#

_STYLES = {
    "default": """
    screen=
    title=bold
    label=
    label-focus=
    checkbox=
    checkbox-focus=standout
    textbox=underline
    textbox-focus=standout
    select=
    select-focus=standout
    button=
    button-focus=standout
    """,
    "color": """
    screen=fg:black,bg:white
    title=fg:blue,bg:white,bold
    label=fg:black,bg:white
    label-focus=label
    checkbox=fg:black,bg:white
    checkbox-focus=fg:white,bg:blue,bold
    textbox=fg:black,bg:white,underline
    textbox-focus=fg:white,bg:blue,bold
    select=checkbox
    select-focus=checkbox-focus
    button=fg:black,bg:white
    button-focus=fg:white,bg:blue,bold
    """,
}

# Dictionary mapping element names to bootterm.Style objects
_style = {}


def init_styles():
    """
    (Re)loads the style table: the 'default' style, then any assignments
    from the BOOTWIDGETS_STYLE environment variable. Widgets pick up their
    attributes when created, so this should run before building screens.
    """
    _style.clear()
    _parse_style("default", True)
    if "BOOTWIDGETS_STYLE" in os.environ:
        _parse_style(os.environ["BOOTWIDGETS_STYLE"], False)


def style(name):
    """Returns the bootterm.Style for the element 'name'."""
    if not _style:
        init_styles()
    return _style[name]


def _parse_style(style_str, parsing_default):
    # Parses a string of '<element>=<style>' assignments and built-in style
    # names. The parsing_default flag suppresses the warning for elements
    # that don't exist yet, which is how they get created.

    for sline in style_str.split():
        if "=" in sline:
            key, data = sline.split("=", 1)

            if key not in _style and not parsing_default:
                _warn("Ignoring non-existent style", key)
                continue

            if data in _style:
                _style[key] = _style[data]
            else:
                _style[key] = _style_from_def(data)

        elif sline in _STYLES:
            _parse_style(_STYLES[sline], parsing_default)

        else:
            _warn("Ignoring non-existent style template", sline)


def _style_from_def(style_def):
    fg = bg = Color.DEFAULT
    attrs = {"bold": False, "standout": False, "underline": False}

    for field in filter(None, style_def.split(",")):
        if field.startswith("fg:"):
            fg = _parse_color(field[3:])
        elif field.startswith("bg:"):
            bg = _parse_color(field[3:])
        elif field in attrs:
            attrs[field] = True
        else:
            _warn("Ignoring unknown style attribute", field)

    return Style(fg=fg, bg=bg, **attrs)


def _parse_color(color_def):
    if re.match("^#[A-Fa-f0-9]{6}$", color_def):
        return Color.rgb(
            int(color_def[1:3], 16), int(color_def[3:5], 16), int(color_def[5:7], 16)
        )

    if color_def in NAMED_COLORS:
        return NAMED_COLORS[color_def]

    try:
        num = int(color_def, 0)
    except ValueError:
        _warn("Ignoring color", color_def, "that's neither predefined nor a number")
        return Color.DEFAULT

    if not 0 <= num <= 255:
        _warn(f"Ignoring color {color_def} outside range 0..255")
        return Color.DEFAULT
    return Color.index(num)


def _warn(*args):
    print("bootwidgets warning: ", end="", file=sys.stderr)
    print(*args, file=sys.stderr)


#
# Field registry and widget set
#


class FieldRegistry:
    """
    Ordered list of the fields registered with a WidgetSet, kept in a slot
    array that always ends in a None terminator (the form layer reads fields
    up to the first None). The array doubles when the terminator slot would
    be needed for a field.
    """

    def __init__(self, capacity=_INITIAL_FIELD_CAPACITY):
        self._slots = [None] * capacity
        self._count = 0

    @property
    def capacity(self):
        return len(self._slots)

    def __len__(self):
        return self._count

    def __iter__(self):
        return iter(self._slots[: self._count])

    def __contains__(self, field):
        return any(f is field for f in self)

    def add(self, field):
        if self._count == len(self._slots) - 1:
            self._slots.extend([None] * len(self._slots))

        self._slots[self._count] = field
        self._count += 1
        self._slots[self._count] = None

    def remove(self, field):
        """
        Removes 'field' and closes the gap by shifting the following fields
        (and the terminator) one slot to the left. Returns False if the
        field isn't registered.
        """
        for i in range(self._count):
            if self._slots[i] is field:
                break
        else:
            return False

        self._slots[i : self._count] = self._slots[i + 1 : self._count + 1]
        self._count -= 1
        return True

    def array(self):
        """Returns the registered fields followed by the None terminator."""
        return self._slots[: self._count + 1]


class WidgetSet:
    """
    The widgets and fields of one screen.

    main_window/sub_window:
      bootterm.Region instances the form is bound to when posted. Fields
      are positioned relative to sub_window.

    form:
      The posted bootforms.Form, or None while the set isn't posted

    registry:
      FieldRegistry with the fields of all widgets in the set
    """

    def __init__(self, main_window, sub_window=None):
        self.main_window = main_window
        self.sub_window = sub_window if sub_window is not None else main_window
        self.form = None
        self.registry = FieldRegistry()

        # Maps each registered field to the widget that owns it
        self._owners = {}
        self._widgets = []

        self._widget_focus = None
        self._widget_focus_arg = None

        # Field that had the focus when the set was last unposted
        self._cur_field = None

    @property
    def posted(self):
        return self.form is not None

    @property
    def fields(self):
        return tuple(self.registry)

    @property
    def widgets(self):
        return tuple(self._widgets)

    def set_windows(self, main_window, sub_window=None):
        """Changes the windows used by the next post()."""
        self.main_window = main_window
        self.sub_window = sub_window if sub_window is not None else main_window

    def set_widget_focus(self, callback, arg=None):
        """
        Registers callback(widget, arg) to be called whenever a widget gets
        the focus, including when the set is posted. Pass None to remove it.
        """
        self._widget_focus = callback
        self._widget_focus_arg = arg

    def add_field(self, field, widget):
        """Registers 'field' as belonging to 'widget'."""
        self.registry.add(field)
        self._owners[field] = widget

    def remove_field(self, field):
        """Deregisters 'field'. Does nothing if it isn't registered."""
        if not self.registry.remove(field):
            return
        del self._owners[field]
        if field is self._cur_field:
            self._cur_field = None

    def widget_for(self, field):
        """Returns the widget that owns the registered field 'field'."""
        return self._owners[field]

    #
    # Factories
    #

    def new_label(self, y, x, text):
        return Label(self, y, x, text)

    def new_checkbox(self, y, x, checked=False):
        return Checkbox(self, y, x, checked)

    def new_textbox(self, y, x, length, text=""):
        return Textbox(self, y, x, length, text)

    def new_select(self, y, x, width):
        return Select(self, y, x, width)

    def new_button(self, y, x, size, text, click=None, arg=None):
        return Button(self, y, x, size, text, click, arg)

    #
    # Posting
    #

    def post(self):
        """
        Builds a form from the registered fields and posts it. The focus
        goes to the field that had it when the set was last unposted, if it
        can still take it, and to the first selectable field otherwise.
        """
        if self.form is not None:
            raise FormError("widget set is already posted")

        form = Form(self.registry.array())
        try:
            form.set_windows(self.main_window, self.sub_window)
            form.post()
        except FormError:
            form.free()
            raise
        self.form = form

        if (
            self._cur_field is not None
            and self._cur_field.selectable
            and self._cur_field in form.fields
        ):
            form.set_current_field(self._cur_field)
        form.driver(REQ_END_FIELD)

        field = form.current_field
        widget = self._owners[field]
        _focus_change(widget, field, True)
        widget.field_focus(field)
        if self._widget_focus:
            self._widget_focus(widget, self._widget_focus_arg)

    def unpost(self):
        """
        Unposts and frees the form. The focused field goes back to its
        unfocused attribute. The registry stays for a later post().
        """
        if self.form is None:
            raise FormError("widget set is not posted")

        field = self._cur_field = self.form.current_field
        _focus_change(self._owners[field], field, False)
        self.form.unpost()
        self.form.free()
        self.form = None

    def process_key(self, key):
        """
        Handles the key code 'key'. Navigation keys move the focus and are
        always handled. Other keys go to the focused widget, and the return
        value is whether it handled the key.
        """
        form = self._posted_form()

        field = form.current_field
        widget = self._owners[field]

        req = _NAV_REQUESTS.get(key)
        if req is None:
            return widget.process_key(key)

        _focus_change(widget, field, False)
        form.driver(req)
        # Put the cursor somewhere predictable, also for multi-field widgets
        form.driver(REQ_END_FIELD)

        field = form.current_field
        widget = self._owners[field]
        _focus_change(widget, field, True)
        widget.field_focus(field)
        if self._widget_focus:
            self._widget_focus(widget, self._widget_focus_arg)

        return True

    def focused_widget(self):
        """Returns the widget with the focus, or None if not posted."""
        if self.form is None:
            return None
        return self._owners[self.form.current_field]

    def destroy(self):
        """Unposts the set if posted, then destroys all its widgets."""
        if self.form is not None:
            self.unpost()
        for widget in list(reversed(self._widgets)):
            widget.destroy()
        self._cur_field = None

    def _posted_form(self):
        if self.form is None:
            raise FormError("widget set is not posted")
        return self.form


def _focus_change(widget, field, focused):
    field.set_back(widget.focused_attr if focused else widget.unfocused_attr)


#
# Widgets
#


class Widget:
    """
    Base class for widgets. A widget owns one or more fields in a WidgetSet
    and gives them behavior.

    Subclasses override process_key() to handle keys, and set_visible(),
    _move_fields(), field_focus(), and _own_fields() if they have more than
    the single field in 'field'.

    field:
      The widget's field, or None for widgets with several (Select)

    focused_attr/unfocused_attr:
      bootterm.Style for the field with and without the focus. Taken from
      the '<kind>-focus' and '<kind>' styles.
    """

    # Style element name. The focused style is '<name>-focus'.
    _style_name = None

    def __init__(self, widgetset, y, x, width, height):
        self.widgetset = widgetset
        self.field = None
        self.focused_attr = style(self._style_name + "-focus")
        self.unfocused_attr = style(self._style_name)

        self._y = y
        self._x = x
        self._width = width
        self._height = height
        self._focus_y = 0

        widgetset._widgets.append(self)

    def __repr__(self):
        return "<{} {}x{} at ({}, {})>".format(
            type(self).__name__, self._height, self._width, self._y, self._x
        )

    def _new_field(self, rows, cols, y, x):
        # Creates a field drawn in the unfocused style and registers it
        field = Field(rows, cols, y, x)
        field.set_back(self.unfocused_attr)
        self.widgetset.add_field(field, self)
        return field

    def _own_fields(self):
        return [self.field]

    def base(self):
        """Returns the widget as a plain Widget."""
        return self

    def process_key(self, key):
        """Returns True if the widget handled 'key'."""
        return False

    def set_visible(self, visible):
        self.field.set_visible(visible)

    def move(self, y, x):
        """Moves the widget to (y, x). The set must not be posted."""
        self._move_fields(y, x)
        self._y = y
        self._x = x

    def _move_fields(self, y, x):
        self.field.move(y, x)

    def field_focus(self, field):
        """Called when 'field' (one of ours) gets the focus."""

    def height(self):
        return self._height

    def width(self):
        return self._width

    def x(self):
        return self._x

    def y(self):
        return self._y

    def position(self):
        """Returns (y, x)."""
        return self._y, self._x

    def sub_focus_offset(self):
        """Row within the widget of the focused field."""
        return self._focus_y

    def destroy(self):
        """
        Deregisters and frees the widget's fields and removes the widget from
        its set. The set must not be posted. Does nothing if the widget has
        already been destroyed.
        """
        if self not in self.widgetset._widgets:
            return

        if self.widgetset.posted:
            raise FormError("can't destroy a widget while its set is posted")

        for field in self._own_fields():
            self.widgetset.remove_field(field)
            field.free()
        self.widgetset._widgets.remove(self)


class Label(Widget):
    """Static text. Never takes the focus."""

    _style_name = "label"

    def __init__(self, widgetset, y, x, text):
        super().__init__(widgetset, y, x, len(text), 1)
        self.text = text

        self.field = self._new_field(1, max(len(text), 1), y, x)
        self.field.opts_off(O_ACTIVE)
        self.field.set_buffer(text)


class Checkbox(Widget):
    """On/off toggle drawn as [*] or [ ]."""

    _style_name = "checkbox"

    def __init__(self, widgetset, y, x, checked=False):
        super().__init__(widgetset, y, x, len(_CHECKBOX_CHECKED), 1)
        self.checked = checked

        self.field = self._new_field(1, len(_CHECKBOX_CHECKED), y, x)
        self.field.opts_off(O_EDIT)
        self._set_buffer()

    def get_value(self):
        return self.checked

    def _set_buffer(self):
        self.field.set_buffer(
            _CHECKBOX_CHECKED if self.checked else _CHECKBOX_UNCHECKED
        )

    def process_key(self, key):
        if not key_is_select(key):
            return False

        self.checked = not self.checked
        self._set_buffer()
        return True


class Textbox(Widget):
    """
    Single-line text entry 'length' columns wide. Longer text scrolls
    horizontally.
    """

    _style_name = "textbox"

    def __init__(self, widgetset, y, x, length, text=""):
        super().__init__(widgetset, y, x, length, 1)

        self.field = self._new_field(1, length, y, x)
        self.field.opts_off(O_STATIC | O_WRAP | O_BLANK)
        self.field.set_buffer(text)

    def get_value(self):
        """Returns the text with leading and trailing whitespace removed."""
        return self.field.buffer.strip()

    def process_key(self, key):
        form = self.widgetset._posted_form()

        if key == Key.BACKSPACE:
            if form.driver(REQ_LEFT_CHAR):
                form.driver(REQ_DEL_CHAR)
        else:
            form.driver(_TEXTBOX_REQUESTS.get(key, key))

        # Text boxes swallow everything that isn't navigation
        return True


class SelectOption:
    """
    An entry in a Select.

    value:
      Caller-supplied integer returned by Select.get_value()

    text:
      Display text

    field:
      The option's field, one row below the previous option's
    """

    __slots__ = ("value", "text", "field")

    def __init__(self, value, text, field):
        self.value = value
        self.text = text
        self.field = field

    def __repr__(self):
        return f"<SelectOption {self.value} {self.text!r}>"


class Select(Widget):
    """
    A list of options of which exactly one is selected, one option per row.
    The height grows with each added option.

    options:
      List of SelectOption, top to bottom

    selected_option:
      Index in 'options' of the selected option. Only meaningful when there
      are options.
    """

    _style_name = "select"

    def __init__(self, widgetset, y, x, width):
        super().__init__(widgetset, y, x, width, 0)
        self.options = []
        self.selected_option = 0
        self._on_change = None
        self._on_change_arg = None

    def _own_fields(self):
        return [option.field for option in self.options]

    def _set_option_selected(self, option, selected):
        glyph = _SELECT_SELECTED if selected else _SELECT_UNSELECTED
        option.field.set_buffer(f"{glyph} {option.text}")

    def add_option(self, value, text, selected=False):
        """
        Appends an option below the existing ones. If 'selected' is True, the
        option replaces the current selection. The first option added is
        always selected, so that there's a selection whenever there are
        options.
        """
        if not self.options:
            selected = True
        elif selected:
            self._set_option_selected(self.options[self.selected_option], False)

        if selected:
            self.selected_option = len(self.options)

        field = self._new_field(1, self._width, self._y + len(self.options), self._x)
        field.opts_off(O_WRAP | O_EDIT)

        option = SelectOption(value, text, field)
        self.options.append(option)
        self._height = len(self.options)
        self._set_option_selected(option, selected)

    def get_value(self):
        """Returns the value of the selected option, or -1 if there are no
        options."""
        if not self.options:
            return -1
        return self.options[self.selected_option].value

    def on_change(self, callback, arg=None):
        """
        Registers callback(arg, value) to be called when the user picks a
        different option. 'value' is the new option's value.
        """
        self._on_change = callback
        self._on_change_arg = arg

    def drop_options(self):
        """Removes all options. The set must not be posted."""
        if self.widgetset.posted:
            raise FormError("can't drop options while the widget set is posted")

        for option in self.options:
            # Also forgets the field if it had the focus at the last unpost
            self.widgetset.remove_field(option.field)
            option.field.free()

        self.options = []
        self.selected_option = 0
        self._height = 0
        self._focus_y = 0

    def process_key(self, key):
        if not key_is_select(key):
            return False

        field = self.widgetset._posted_form().current_field
        for i, option in enumerate(self.options):
            if option.field is field:
                break
        else:
            return True

        if i == self.selected_option:
            return True

        self._set_option_selected(self.options[self.selected_option], False)
        self._set_option_selected(option, True)
        self.selected_option = i

        if self._on_change:
            self._on_change(self._on_change_arg, option.value)

        return True

    def set_visible(self, visible):
        for option in self.options:
            option.field.set_visible(visible)

    def _move_fields(self, y, x):
        for i, option in enumerate(self.options):
            option.field.move(y + i, x)

    def field_focus(self, field):
        for i, option in enumerate(self.options):
            if option.field is field:
                self._focus_y = i
                return


class Button(Widget):
    """
    Clickable text, drawn as the label centered between brackets in a
    'size'-column area. click(arg) is called on Space/Enter.
    """

    _style_name = "button"

    def __init__(self, widgetset, y, x, size, text, click=None, arg=None):
        super().__init__(widgetset, y, x, size, 1)
        self.click = click
        self.arg = arg

        self.field = self._new_field(1, size + 2, y, x)
        self.field.opts_off(O_EDIT)

        # Center the text, cutting it off if it doesn't fit
        text = text[:size]
        indent = (size - len(text)) // 2
        self.field.set_buffer("[" + (" " * indent + text).ljust(size) + "]")

    def process_key(self, key):
        if not self.click:
            return False

        if not key_is_select(key):
            return False

        self.click(self.arg)
        return True
