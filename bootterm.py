#!/usr/bin/env python3

# Copyright (c) 2026 bootwidgets contributors
# SPDX-License-Identifier: ISC

"""
bootterm -- terminal I/O for the boot menu widgets

Provides what the form and widget layers need from a terminal and nothing
more: display attributes (Style), integer key codes, rectangular cell
buffers (Region) that double as the "windows" a form is bound to, and a
Terminal that composites regions and decodes keyboard input.

Regions work without a Terminal, which is how the test suite renders forms.

Zero external dependencies. Uses termios/select/signal on Unix and msvcrt
with VT100 input on Windows 10+.
"""

import atexit
import codecs
import os
import shutil
import signal
import sys
import unicodedata

_IS_WINDOWS = os.name == "nt"

if not _IS_WINDOWS:
    import select
    import termios


# ---------------------------------------------------------------------------
# Colors and styles
# ---------------------------------------------------------------------------


class Color:
    """Terminal color: the terminal default, one of the 16 named colors, a
    256-color palette index, or 24-bit RGB."""

    __slots__ = ("kind", "value")

    def __init__(self, kind, value):
        self.kind = kind
        self.value = value

    @staticmethod
    def rgb(r, g, b):
        return Color("rgb", (r, g, b))

    @staticmethod
    def index(n):
        return Color("index", n)

    def sgr(self, background):
        """Return the SGR parameter selecting this color."""
        if self.kind == "default":
            return "49" if background else "39"
        if self.kind == "named":
            base = 40 if background else 30
            if self.value < 8:
                return str(base + self.value)
            return str(base + 60 + self.value - 8)
        prefix = "48" if background else "38"
        if self.kind == "index":
            return f"{prefix};5;{self.value}"
        return "{};2;{};{};{}".format(prefix, *self.value)

    def __eq__(self, other):
        if not isinstance(other, Color):
            return NotImplemented
        return self.kind == other.kind and self.value == other.value

    def __hash__(self):
        return hash((self.kind, self.value))

    def __repr__(self):
        return f"Color({self.kind!r}, {self.value!r})"


Color.DEFAULT = Color("default", None)

# Map color names to Color instances. Used by the style parser.
NAMED_COLORS = {}

for _i, _name in enumerate(
    ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")
):
    NAMED_COLORS[_name] = Color("named", _i)
    NAMED_COLORS["bright" + _name] = Color("named", _i + 8)
NAMED_COLORS["purple"] = NAMED_COLORS["magenta"]
NAMED_COLORS["brightpurple"] = NAMED_COLORS["brightmagenta"]
del _i, _name


class Style:
    """Immutable display attribute: colors plus bold/standout/underline.

    Standout is reverse video, which is what focused widgets use by default.
    """

    __slots__ = ("fg", "bg", "bold", "standout", "underline")

    def __init__(self, fg=None, bg=None, bold=False, standout=False, underline=False):
        self.fg = fg if fg is not None else Color.DEFAULT
        self.bg = bg if bg is not None else Color.DEFAULT
        self.bold = bold
        self.standout = standout
        self.underline = underline

    def sgr(self):
        """Return the SGR escape sequence for this style."""
        parts = ["0", self.fg.sgr(False), self.bg.sgr(True)]
        if self.bold:
            parts.append("1")
        if self.underline:
            parts.append("4")
        if self.standout:
            parts.append("7")
        return "\x1b[{}m".format(";".join(parts))

    def _key(self):
        return (self.fg, self.bg, self.bold, self.standout, self.underline)

    def __eq__(self, other):
        if not isinstance(other, Style):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        parts = []
        if self.fg != Color.DEFAULT:
            parts.append(f"fg={self.fg}")
        if self.bg != Color.DEFAULT:
            parts.append(f"bg={self.bg}")
        for attr in ("bold", "standout", "underline"):
            if getattr(self, attr):
                parts.append(attr)
        return "Style({})".format(", ".join(parts))


STYLE_NORMAL = Style()
STYLE_STANDOUT = Style(standout=True)


# ---------------------------------------------------------------------------
# Key codes
# ---------------------------------------------------------------------------

# Special keys are numbered past the last Unicode code point, so an int key
# is either a character (ord(ch)) or one of these, never both
_KEY_BASE = 0x110000


class Key:
    """Integer codes for keys that aren't characters."""

    DOWN = _KEY_BASE + 1
    UP = _KEY_BASE + 2
    LEFT = _KEY_BASE + 3
    RIGHT = _KEY_BASE + 4
    HOME = _KEY_BASE + 5
    END = _KEY_BASE + 6
    BACKSPACE = _KEY_BASE + 7
    DELETE = _KEY_BASE + 8
    PAGE_DOWN = _KEY_BASE + 9
    PAGE_UP = _KEY_BASE + 10
    ENTER = _KEY_BASE + 11
    BTAB = _KEY_BASE + 12
    RESIZE = _KEY_BASE + 13

    TAB = ord("\t")
    ESC = 0x1B


def is_char(key):
    """True if 'key' is a character code rather than a special key."""
    return 0 <= key < _KEY_BASE


# ---------------------------------------------------------------------------
# Character width
# ---------------------------------------------------------------------------


def char_width(ch):
    """Return the number of terminal cells 'ch' occupies (0, 1 or 2)."""
    o = ord(ch)

    if 0x20 <= o <= 0x7E:
        return 1

    if o < 0x20 or o == 0x7F:
        return 0

    if unicodedata.east_asian_width(ch) in ("W", "F"):
        return 2

    if unicodedata.category(ch).startswith("M"):
        return 0

    return 1


# ---------------------------------------------------------------------------
# Input decoding
# ---------------------------------------------------------------------------

_ESCAPE_SEQUENCES = {
    "\x1b[A": Key.UP,
    "\x1bOA": Key.UP,
    "\x1b[B": Key.DOWN,
    "\x1bOB": Key.DOWN,
    "\x1b[C": Key.RIGHT,
    "\x1bOC": Key.RIGHT,
    "\x1b[D": Key.LEFT,
    "\x1bOD": Key.LEFT,
    "\x1b[5~": Key.PAGE_UP,
    "\x1b[6~": Key.PAGE_DOWN,
    "\x1b[H": Key.HOME,
    "\x1bOH": Key.HOME,
    "\x1b[1~": Key.HOME,
    "\x1b[7~": Key.HOME,
    "\x1b[F": Key.END,
    "\x1bOF": Key.END,
    "\x1b[4~": Key.END,
    "\x1b[8~": Key.END,
    "\x1b[3~": Key.DELETE,
    "\x1b[Z": Key.BTAB,
    "\x1bOM": Key.ENTER,  # keypad Enter in application mode
}


def _build_trie(sequences):
    root = {}
    for seq, key in sequences.items():
        node = root
        for ch in seq[:-1]:
            node = node.setdefault(ch, {})
        node[seq[-1]] = key
    return root


_ESCAPE_TRIE = _build_trie(_ESCAPE_SEQUENCES)


class KeyDecoder:
    """Incremental decoder from terminal characters to key codes.

    feed() takes one character and returns a list of the keys it completed
    (usually zero or one; two when an escape sequence dead-ends). flush()
    is called when no more input arrives, and turns a dangling escape
    prefix into ESC.
    """

    def __init__(self):
        self._node = None

    @property
    def pending(self):
        """True while in the middle of an escape sequence."""
        return self._node is not None

    def feed(self, ch):
        if self._node is not None:
            nxt = self._node.get(ch)
            if nxt is None:
                # Dead end. The ESC stands on its own and 'ch' starts over.
                self._node = None
                return [Key.ESC] + self.feed(ch)

            if isinstance(nxt, dict):
                self._node = nxt
                return []

            self._node = None
            return [nxt]

        if ch == "\x1b":
            self._node = _ESCAPE_TRIE["\x1b"]
            return []

        if ch == "\x7f" or ch == "\x08":
            return [Key.BACKSPACE]

        # CR and LF both mean Enter
        if ch == "\r":
            return [ord("\n")]

        return [ord(ch)]

    def flush(self):
        if self._node is None:
            return []
        self._node = None
        return [Key.ESC]


def decode_keys(text):
    """Decode a complete string of terminal input into a list of key codes."""
    decoder = KeyDecoder()
    keys = []
    for ch in text:
        keys.extend(decoder.feed(ch))
    keys.extend(decoder.flush())
    return keys


# ---------------------------------------------------------------------------
# Region -- rectangular cell buffer
# ---------------------------------------------------------------------------


class Region:
    """Rectangular cell buffer with a screen position.

    Regions made by Terminal.region() are composited onto the screen by
    Terminal.update(). A Region built directly with terminal=None is a
    free-standing buffer, handy for rendering off-screen.
    """

    def __init__(self, terminal, height, width, y=0, x=0):
        self._terminal = terminal
        self._height = height
        self._width = width
        self._y = y
        self._x = x
        self._fill_style = STYLE_NORMAL
        self._cells = self._make_cells()

    def _make_cells(self):
        blank = (" ", self._fill_style)
        return [[blank] * self._width for _ in range(self._height)]

    @property
    def terminal(self):
        return self._terminal

    @property
    def height(self):
        return self._height

    @property
    def width(self):
        return self._width

    @property
    def y(self):
        return self._y

    @property
    def x(self):
        return self._x

    def close(self):
        """Detach from the terminal, if any."""
        if self._terminal:
            self._terminal._remove_region(self)
            self._terminal = None

    def resize(self, height, width):
        """Resize the region, clearing its contents."""
        self._height = height
        self._width = width
        self._cells = self._make_cells()

    def move(self, y, x):
        self._y = y
        self._x = x

    def clear(self):
        """Clear to spaces in the fill style."""
        self.fill(self._fill_style)

    def fill(self, style):
        """Paint the whole region with 'style' and remember it for clear()."""
        self._fill_style = style
        blank = (" ", style)
        for row in self._cells:
            row[:] = [blank] * len(row)

    def write(self, y, x, text, style=None):
        """Write 'text' at (y, x), clipped to the region. Returns the number
        of cells written."""
        if style is None:
            style = self._fill_style
        if not 0 <= y < self._height or x >= self._width:
            return 0

        row = self._cells[y]
        col = x
        written = 0
        for ch in text.expandtabs():
            w = char_width(ch)
            if not w:
                continue
            if col < 0:
                col += w
                continue
            if col + w > self._width:
                break

            row[col] = (ch, style)
            if w == 2:
                # Placeholder for the right half of a wide character
                row[col + 1] = ("", style)
            col += w
            written += w

        return written

    def text(self, y):
        """Return row 'y' as a string (wide characters counted once)."""
        return "".join(ch for ch, _ in self._cells[y])

    def style_at(self, y, x):
        return self._cells[y][x][1]


# ---------------------------------------------------------------------------
# Terminal
# ---------------------------------------------------------------------------


class Terminal:
    """Raw-mode terminal: alternate screen, region compositing, key input."""

    def __init__(self):
        if not _IS_WINDOWS:
            if not os.isatty(sys.stdin.fileno()):
                raise RuntimeError("stdin is not a terminal")
            if not os.isatty(sys.stdout.fileno()):
                raise RuntimeError("stdout is not a terminal")

        self._regions = []
        self._cursor = None
        self._resize_pending = False
        self._prev_frame = None
        self._pending = []
        self._keys = KeyDecoder()
        self._decoder = codecs.getincrementaldecoder("utf-8")("replace")

        sz = shutil.get_terminal_size()
        self._width = sz.columns
        self._height = sz.lines

        if _IS_WINDOWS:
            self._init_windows()
        else:
            self._init_unix()

        # Alternate screen, cursor hidden
        self._write("\x1b[?1049h\x1b[?25l")

    def _init_unix(self):
        fd = sys.stdin.fileno()
        self._old_termios = termios.tcgetattr(fd)

        mode = termios.tcgetattr(fd)
        # cbreak: no echo, no line buffering, keep ISIG so Ctrl-C works
        mode[3] &= ~(termios.ICANON | termios.ECHO | termios.IEXTEN)
        mode[1] &= ~(termios.IXON | termios.ICRNL | termios.INLCR | termios.IGNCR)
        mode[6][termios.VMIN] = 1
        mode[6][termios.VTIME] = 0
        termios.tcsetattr(fd, termios.TCSANOW, mode)

        self._old_sigwinch = signal.getsignal(signal.SIGWINCH)
        signal.signal(signal.SIGWINCH, self._sigwinch)

        self._poller = select.poll()
        self._poller.register(fd, select.POLLIN)

    def _init_windows(self):
        import ctypes
        from ctypes import wintypes

        kernel32 = ctypes.windll.kernel32
        self._kernel32 = kernel32
        self._stdin_handle = kernel32.GetStdHandle(-10)
        self._stdout_handle = kernel32.GetStdHandle(-11)

        self._old_out_mode = wintypes.DWORD()
        kernel32.GetConsoleMode(self._stdout_handle, ctypes.byref(self._old_out_mode))
        self._old_in_mode = wintypes.DWORD()
        kernel32.GetConsoleMode(self._stdin_handle, ctypes.byref(self._old_in_mode))

        # ENABLE_VIRTUAL_TERMINAL_PROCESSING on output, _INPUT on input with
        # ECHO/LINE/PROCESSED cleared
        kernel32.SetConsoleMode(self._stdout_handle, self._old_out_mode.value | 0x0004)
        if not kernel32.SetConsoleMode(
            self._stdin_handle, (self._old_in_mode.value | 0x0200) & ~0x0007
        ):
            raise RuntimeError("console does not support VT100 input")

    def close(self):
        """Restore the terminal."""
        self._write("\x1b[?25h\x1b[?1049l\x1b[0m")

        if _IS_WINDOWS:
            self._kernel32.SetConsoleMode(self._stdout_handle, self._old_out_mode)
            self._kernel32.SetConsoleMode(self._stdin_handle, self._old_in_mode)
        else:
            termios.tcsetattr(
                sys.stdin.fileno(), termios.TCSANOW, self._old_termios
            )
            signal.signal(signal.SIGWINCH, self._old_sigwinch)

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    def region(self, height, width, y=0, x=0):
        """Create a Region that is drawn by update(). Later regions are drawn
        on top of earlier ones."""
        r = Region(self, height, width, y, x)
        self._regions.append(r)
        return r

    def _remove_region(self, region):
        if region in self._regions:
            self._regions.remove(region)
        if self._cursor and self._cursor[0] is region:
            self._cursor = None

    def set_cursor(self, region, y, x):
        """Show the cursor at (y, x) within 'region'."""
        self._cursor = (region, y, x)

    def _sigwinch(self, signum, frame):
        self._resize_pending = True

    def _check_resize(self):
        if not self._resize_pending:
            return False
        self._resize_pending = False
        sz = shutil.get_terminal_size()
        self._width = sz.columns
        self._height = sz.lines
        self._prev_frame = None
        self._write("\x1b[2J")
        return True

    def _write(self, s):
        try:
            sys.stdout.buffer.write(s.encode("utf-8"))
            sys.stdout.buffer.flush()
        except OSError:
            pass

    def update(self):
        """Composite all regions and send the cells that changed since the
        last update."""
        h, w = self._height, self._width
        blank = (" ", STYLE_NORMAL)
        frame = [[blank] * w for _ in range(h)]

        for region in self._regions:
            for row in range(max(0, -region.y), min(region.height, h - region.y)):
                frame_row = frame[region.y + row]
                cells = region._cells[row]
                for col in range(max(0, -region.x), min(region.width, w - region.x)):
                    if cells[col][0]:
                        frame_row[region.x + col] = cells[col]

        out = []
        prev = self._prev_frame
        last_style = None
        last_pos = None
        for row in range(h):
            for col in range(w):
                cell = frame[row][col]
                if prev and prev[row][col] == cell:
                    continue

                ch, style = cell
                if last_pos != (row, col):
                    out.append(f"\x1b[{row + 1};{col + 1}H")
                if style != last_style:
                    out.append(style.sgr())
                    last_style = style
                out.append(ch)
                last_pos = (row, col + char_width(ch))

        if self._cursor:
            region, y, x = self._cursor
            out.append(f"\x1b[{region.y + y + 1};{region.x + x + 1}H\x1b[?25h")
        else:
            out.append("\x1b[?25l")

        self._write("".join(out))
        self._prev_frame = frame

    def read_key(self):
        """Block until a key is available and return its integer code."""
        while not self._pending:
            if self._check_resize():
                return Key.RESIZE
            if _IS_WINDOWS:
                self._read_windows()
            else:
                self._read_unix()
        return self._pending.pop(0)

    def _feed(self, chars):
        for ch in chars:
            self._pending.extend(self._keys.feed(ch))

    def _read_unix(self):
        fd = sys.stdin.fileno()
        try:
            data = os.read(fd, 1024)
        except InterruptedError:
            # SIGWINCH
            return
        if not data:
            raise EOFError("end of terminal input")
        self._feed(self._decoder.decode(data))

        # A lone ESC is only known to be one after a short wait
        if self._keys.pending and not self._poller.poll(25):
            self._pending.extend(self._keys.flush())

    def _read_windows(self):
        import msvcrt
        import time

        if msvcrt.kbhit():
            self._feed(msvcrt.getwch())
        elif self._keys.pending:
            self._pending.extend(self._keys.flush())
        else:
            time.sleep(0.01)


def run(fn):
    """Call fn(terminal) with the terminal in raw mode, restoring it on exit
    (including Ctrl-C). Returns what fn() returns, or None on Ctrl-C."""
    term = None
    try:
        term = Terminal()
        atexit.register(lambda: term.close() if term else None)
        return fn(term)
    except KeyboardInterrupt:
        return None
    finally:
        if term:
            term.close()
            term = None
