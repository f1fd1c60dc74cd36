# Copyright (c) 2026 bootwidgets contributors
# SPDX-License-Identifier: ISC

"""
Text-form primitives: fields and the forms that post them.

A Field is a rectangle of editable or display-only text at a fixed position.
A Form takes an ordered, None-terminated sequence of fields, is bound to a
main and a sub Region (see bootterm), and once posted keeps track of which
field has input focus and where the cursor is inside it. Requests such as
"next field" or "delete character" are fed to Form.driver(), which returns
True if the request was carried out and False if it was refused.

Misuse (posting a form twice, moving a field that belongs to a form, ...)
raises FormError.

Usage sketch:

  label = Field(1, 6, 0, 0)
  label.set_buffer("Name:")
  label.opts_off(O_ACTIVE)
  entry = Field(1, 20, 0, 7)

  form = Form([label, entry, None])
  form.set_windows(win, win)
  form.post()
  form.driver(ord("x"))
"""

from bootterm import STYLE_NORMAL, is_char

# Field option flags, all on for a new field
O_VISIBLE = 0x001  # Drawn when the form is posted
O_ACTIVE = 0x002  # Can receive focus (inactive fields are labels)
O_PUBLIC = 0x004  # Contents are shown while editing
O_EDIT = 0x008  # Contents can be changed
O_WRAP = 0x010  # Word-wrap in multi-line fields
O_BLANK = 0x020  # Typing at the first position clears the field
O_STATIC = 0x040  # Contents can't grow past the field size

_ALL_OPTS = O_VISIBLE | O_ACTIVE | O_PUBLIC | O_EDIT | O_WRAP | O_BLANK | O_STATIC

# Form requests. Numbered past the key codes in bootterm, so that a request
# is never mistaken for a character to insert.
_REQ_BASE = 0x120000

REQ_NEXT_FIELD = _REQ_BASE + 1
REQ_PREV_FIELD = _REQ_BASE + 2
REQ_FIRST_FIELD = _REQ_BASE + 3
REQ_LAST_FIELD = _REQ_BASE + 4
REQ_BEG_FIELD = _REQ_BASE + 5
REQ_END_FIELD = _REQ_BASE + 6
REQ_LEFT_CHAR = _REQ_BASE + 7
REQ_RIGHT_CHAR = _REQ_BASE + 8
REQ_DEL_CHAR = _REQ_BASE + 9


class FormError(Exception):
    """
    Exception raised for invalid use of fields and forms.
    """


class Field:
    """
    A rows x cols text area positioned at (y, x) within the form's sub
    window.

    The buffer holds the field's data; trailing padding is implicit, so
    'buffer' always returns at least rows*cols characters.

    form:
      The Form the field is connected to, or None. A field can belong to at
      most one form, and can't be moved or freed while connected.

    back:
      bootterm.Style the field is drawn with.
    """

    def __init__(self, rows, cols, y, x):
        if rows < 1 or cols < 1 or y < 0 or x < 0:
            raise FormError(f"bad field geometry {rows}x{cols} at ({y}, {x})")

        self.rows = rows
        self.cols = cols
        self.y = y
        self.x = x
        self.back = STYLE_NORMAL
        self.form = None
        self.freed = False

        self._opts = _ALL_OPTS
        self._text = ""

    def __repr__(self):
        return "<Field {}x{} at ({}, {}) {!r}>".format(
            self.rows, self.cols, self.y, self.x, self._text
        )

    @property
    def size(self):
        return self.rows * self.cols

    @property
    def buffer(self):
        return self._text.ljust(self.size)

    def set_buffer(self, text):
        """Replace the field contents. Static fields keep only what fits."""
        if self._opts & O_STATIC:
            text = text[: self.size]
        self._text = text.rstrip(" ")
        self._changed()

    def set_back(self, style):
        self.back = style
        self._changed()

    #
    # Options
    #

    @property
    def opts(self):
        return self._opts

    def set_opts(self, opts):
        self._opts = opts & _ALL_OPTS
        self._changed()

    def opts_on(self, opts):
        self.set_opts(self._opts | opts)

    def opts_off(self, opts):
        self.set_opts(self._opts & ~opts)

    @property
    def visible(self):
        return bool(self._opts & O_VISIBLE)

    @property
    def selectable(self):
        """True if the field can hold the input focus."""
        return (self._opts & (O_ACTIVE | O_VISIBLE)) == (O_ACTIVE | O_VISIBLE)

    def set_visible(self, visible):
        if visible:
            self.opts_on(O_VISIBLE)
        else:
            self.opts_off(O_VISIBLE)

    #
    # Lifetime
    #

    def move(self, y, x):
        if self.form is not None:
            raise FormError("can't move a field connected to a form")
        if y < 0 or x < 0:
            raise FormError(f"bad field position ({y}, {x})")
        self.y = y
        self.x = x

    def free(self):
        if self.form is not None:
            raise FormError("can't free a field connected to a form")
        self.freed = True

    def _changed(self):
        if self.form is not None:
            self.form.draw()


class Form:
    """
    An ordered group of fields that can be posted to a pair of windows.

    fields:
      Iterable of Field, read up to the first None

    The first selectable field is current initially.
    """

    def __init__(self, fields):
        connected = []
        for field in fields:
            if field is None:
                break
            if field.freed:
                raise FormError(f"{field!r} has been freed")
            if field.form is not None or field in connected:
                raise FormError(f"{field!r} is already connected to a form")
            connected.append(field)

        for field in connected:
            field.form = self

        self._fields = connected
        self.win = None
        self.sub = None
        self.posted = False

        self._current = next(
            (f for f in connected if f.selectable), connected[0] if connected else None
        )
        # Cursor index into the current field's data, and the index of the
        # leftmost data character shown for single-line fields
        self._col = 0
        self._hscroll = 0

    @property
    def fields(self):
        return tuple(self._fields)

    def set_windows(self, win, sub=None):
        """Bind the form to 'win', drawing fields relative to 'sub' (which
        defaults to 'win')."""
        if self.posted:
            raise FormError("can't change the windows of a posted form")
        self.win = win
        self.sub = sub if sub is not None else win

    def post(self):
        if self.posted:
            raise FormError("form is already posted")
        if not self._fields:
            raise FormError("form has no fields")
        if self.sub is None:
            raise FormError("form has no window")

        self.posted = True
        self.draw()

    def unpost(self):
        if not self.posted:
            raise FormError("form is not posted")
        self.sub.clear()
        self.posted = False

    def free(self):
        """Disconnect all fields. The form can't be used afterwards."""
        if self.posted:
            raise FormError("can't free a posted form")
        for field in self._fields:
            field.form = None
        self._fields = []
        self._current = None

    #
    # Current field and cursor
    #

    @property
    def current_field(self):
        return self._current

    def set_current_field(self, field):
        if field not in self._fields:
            raise FormError(f"{field!r} is not part of this form")
        if not field.selectable:
            raise FormError(f"{field!r} can't take the focus")
        self._set_current(field)
        self.draw()

    def _set_current(self, field):
        self._current = field
        self._col = 0
        self._hscroll = 0

    def cursor_position(self):
        """Return the (y, x) cursor position within the sub window."""
        f = self._current
        if f.rows == 1:
            return f.y, f.x + self._col - self._hscroll
        return f.y + self._col // f.cols, f.x + self._col % f.cols

    #
    # Requests
    #

    def driver(self, req):
        """
        Carries out the form request 'req' (one of the REQ_* constants) or
        inserts the character with code 'req' into the current field.

        Returns True if the request was carried out, and False if it was
        refused (e.g. moving left from the first position, or typing into a
        field without O_EDIT).
        """
        if not self.posted:
            raise FormError("form is not posted")

        handler = _FIELD_MOVES.get(req) or _EDITS.get(req)
        if handler:
            ok = handler(self)
        elif is_char(req) and chr(req).isprintable():
            ok = self._insert(chr(req))
        else:
            ok = False

        self._scroll_to_cursor()
        self.draw()
        return ok

    def _selectable_after(self, start, step):
        # Returns the first selectable field found by walking the field list
        # from index 'start' in direction 'step', wrapping around. The field
        # at 'start' itself is checked last.
        n = len(self._fields)
        for i in range(1, n + 1):
            field = self._fields[(start + step * i) % n]
            if field.selectable:
                return field
        return None

    def _move_to(self, field):
        if field is None:
            return False
        self._set_current(field)
        return True

    def _next_field(self):
        return self._move_to(
            self._selectable_after(self._fields.index(self._current), 1)
        )

    def _prev_field(self):
        return self._move_to(
            self._selectable_after(self._fields.index(self._current), -1)
        )

    def _first_field(self):
        return self._move_to(self._selectable_after(-1, 1))

    def _last_field(self):
        return self._move_to(self._selectable_after(0, -1))

    def _max_col(self):
        # Rightmost cursor index. Dynamic fields may hold more than fits.
        f = self._current
        if f._opts & O_STATIC:
            return f.size - 1
        return max(f.size - 1, len(f._text))

    def _beg_field(self):
        self._col = 0
        return True

    def _end_field(self):
        self._col = min(len(self._current._text), self._max_col())
        return True

    def _left_char(self):
        if self._col == 0:
            return False
        self._col -= 1
        return True

    def _right_char(self):
        if self._col >= self._max_col():
            return False
        self._col += 1
        return True

    def _del_char(self):
        f = self._current
        if not f._opts & O_EDIT:
            return False
        text = f._text
        if self._col < len(text):
            f._text = (text[: self._col] + text[self._col + 1 :]).rstrip(" ")
        return True

    def _insert(self, ch):
        f = self._current
        if not f._opts & O_EDIT:
            return False

        text = f._text
        if f._opts & O_BLANK and self._col == 0:
            text = ""

        text = text.ljust(self._col)
        text = (text[: self._col] + ch + text[self._col :]).rstrip(" ")
        if f._opts & O_STATIC and len(text) > f.size:
            return False

        f._text = text
        self._col = min(self._col + 1, self._max_col())
        return True

    def _scroll_to_cursor(self):
        f = self._current
        if f.rows != 1:
            return
        if self._col < self._hscroll:
            self._hscroll = self._col
        elif self._col >= self._hscroll + f.cols:
            self._hscroll = self._col - f.cols + 1

    #
    # Drawing
    #

    def draw(self):
        """Redraw all visible fields into the sub window. Does nothing while
        the form isn't posted."""
        if not self.posted:
            return

        self.sub.clear()
        for f in self._fields:
            if not f.visible:
                continue

            text = f.buffer
            if not f._opts & O_PUBLIC:
                text = " " * len(text)

            if f.rows == 1:
                start = self._hscroll if f is self._current else 0
                self.sub.write(f.y, f.x, text[start : start + f.cols], f.back)
            else:
                for row in range(f.rows):
                    line = text[row * f.cols : (row + 1) * f.cols]
                    self.sub.write(f.y + row, f.x, line, f.back)


_FIELD_MOVES = {
    REQ_NEXT_FIELD: Form._next_field,
    REQ_PREV_FIELD: Form._prev_field,
    REQ_FIRST_FIELD: Form._first_field,
    REQ_LAST_FIELD: Form._last_field,
}

_EDITS = {
    REQ_BEG_FIELD: Form._beg_field,
    REQ_END_FIELD: Form._end_field,
    REQ_LEFT_CHAR: Form._left_char,
    REQ_RIGHT_CHAR: Form._right_char,
    REQ_DEL_CHAR: Form._del_char,
}
