#!/usr/bin/env python3
"""Validate bootterm and bootwidgets on all platforms.

Checks the terminal-independent parts of bootterm (colors, styles, key
decoding), the Terminal lifecycle when a real console is available, and a
headless run of the boot option editor with style overrides.

Run from the project root: python .ci/validate-bootterm.py
"""

import os
import sys

# The script's directory (.ci/) is on the path, not the project root
sys.path.insert(0, os.getcwd())

_IS_WINDOWS = os.name == "nt"


def check_bootterm_units():
    """bootterm Color, Style, Key, key decoding -- no terminal required."""
    from bootterm import NAMED_COLORS, Color, Key, Style, decode_keys, is_char

    red = NAMED_COLORS["red"]
    assert red == Color("named", 1), "named color"
    assert Color.index(196) == Color.index(196), "index color equality"
    assert Color.rgb(255, 0, 0) != red, "rgb vs named differ"
    assert hash(red) == hash(NAMED_COLORS["red"]), "color hash stable"

    s1 = Style(fg=red)
    s2 = Style(fg=red, bold=True)
    assert s1 != s2, "bold changes style"
    assert s2.sgr() == "\x1b[0;31;49;1m", "bold red SGR"

    for name in ("black", "red", "green", "yellow", "blue", "magenta", "cyan"):
        assert "bright" + name in NAMED_COLORS, "missing bright" + name

    for attr in ("UP", "DOWN", "HOME", "END", "ENTER", "BTAB", "RESIZE"):
        assert not is_char(getattr(Key, attr)), "Key." + attr

    assert decode_keys("\x1b[A\x1b[Z\r") == [Key.UP, Key.BTAB, ord("\n")], "decode"
    assert decode_keys("\x1b") == [Key.ESC], "lone ESC"

    print("bootterm unit checks passed")


def _has_console():
    if not _IS_WINDOWS:
        return os.isatty(sys.stdin.fileno()) and os.isatty(sys.stdout.fileno())

    try:
        import ctypes
        from ctypes import wintypes

        kernel32 = ctypes.windll.kernel32
        handle = kernel32.GetStdHandle(-11)  # STD_OUTPUT_HANDLE
        if handle in (-1, 0, None):
            return False
        mode = wintypes.DWORD()
        return bool(kernel32.GetConsoleMode(handle, ctypes.byref(mode)))
    except (OSError, AttributeError):
        return False


def check_terminal_init():
    """Terminal init/close with a region and an update.

    Needs a TTY on Unix and a native console (cmd/powershell) on Windows.
    """
    from bootterm import STYLE_STANDOUT, Terminal

    if not _has_console():
        print("Terminal init/close skipped (no console)")
        return

    term = Terminal()
    try:
        assert term.width > 0 and term.height > 0, "terminal size"

        reg = term.region(3, 10, 1, 2)
        reg.write(0, 0, "boot", STYLE_STANDOUT)
        assert reg.text(0).startswith("boot"), "region write"
        term.set_cursor(reg, 0, 4)
        term.update()
        reg.close()
        term.update()
    finally:
        term.close()

    print("Terminal init/close passed")


def check_editor_headless():
    """The boot option editor on free-standing regions, with style overrides."""
    import bootwidgets
    from bootedit import BootEditor, BootOption
    from bootterm import NAMED_COLORS, Key, Region

    old_style = os.environ.get("BOOTWIDGETS_STYLE")
    os.environ["BOOTWIDGETS_STYLE"] = "color button-focus=fg:red,bg:white,bold"
    try:
        bootwidgets.init_styles()
        focus = bootwidgets.style("button-focus")
        assert focus.fg == NAMED_COLORS["red"], "BOOTWIDGETS_STYLE fg override"
        assert focus.bg == NAMED_COLORS["white"], "BOOTWIDGETS_STYLE bg override"

        editor = BootEditor(
            Region(None, 24, 80), Region(None, 20, 76), ["sda1"], BootOption("sda1")
        )
        ws = editor.widgetset
        ws.post()
        for key in (Key.DOWN, ord("/"), ord("k"), Key.PAGE_DOWN, Key.BTAB):
            ws.process_key(key)
        assert editor.ok.field.back == focus, "focused button style"

        editor.process_key(ord("\n"))
        assert editor.result() == BootOption("sda1", "/k"), "edited option"
        ws.destroy()
    finally:
        if old_style is None:
            del os.environ["BOOTWIDGETS_STYLE"]
        else:
            os.environ["BOOTWIDGETS_STYLE"] = old_style
        bootwidgets.init_styles()

    print("Headless editor + style validation passed")


if __name__ == "__main__":
    check_bootterm_units()
    check_terminal_init()
    check_editor_headless()
    print("All checks passed")
