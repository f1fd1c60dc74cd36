#!/usr/bin/env python3

# Copyright (c) 2026 bootwidgets contributors
# SPDX-License-Identifier: ISC

"""
Boot option editor.

Shows a screen for editing a boot option -- the device to boot from, the
kernel and initrd images, the kernel command line, and whether the option is
the default -- and prints the result.

Sample usage:

  $ bootedit --device sda1 --device sdb1 --kernel /boot/vmlinuz

[Tab]/[Shift-Tab] and the arrow keys move between fields. [Space]/[Enter]
picks the device under the cursor, toggles the checkbox, and activates
buttons. [ESC] cancels.

Nothing is written anywhere. The edited option is printed on stdout as
'name=value' lines, and the exit status is 1 if the edit was cancelled.

Display attributes can be customized with BOOTWIDGETS_STYLE; see the
bootwidgets module docstring.
"""

import argparse
import sys

import bootterm
from bootterm import Key
from bootwidgets import WidgetSet, style

# Column where the widgets start, right of the labels
_FIELD_X = 14

# Width of the device list and the text boxes
_FIELD_WIDTH = 40

_BUTTON_SIZE = 8

# Help line shown for the focused widget, by widget class name
_HELP = {
    "Select": "Pick the device with [Space] or [Enter]",
    "Textbox": "Type to edit. [Home]/[End]/[Left]/[Right] move the cursor",
    "Checkbox": "[Space] toggles",
    "Button": "[Enter] activates the button",
}


class BootOption:
    """
    A boot option as edited by BootEditor.

    device:
      Name of the device to boot from, or "" for none

    kernel/initrd:
      Image paths on the device

    args:
      Kernel command line

    is_default:
      True if the option should be booted automatically
    """

    __slots__ = ("device", "kernel", "initrd", "args", "is_default")

    def __init__(self, device="", kernel="", initrd="", args="", is_default=False):
        self.device = device
        self.kernel = kernel
        self.initrd = initrd
        self.args = args
        self.is_default = is_default

    def __eq__(self, other):
        if not isinstance(other, BootOption):
            return NotImplemented
        return all(getattr(self, a) == getattr(other, a) for a in self.__slots__)

    def __repr__(self):
        return "BootOption({})".format(
            ", ".join(f"{a}={getattr(self, a)!r}" for a in self.__slots__)
        )

    def __str__(self):
        lines = []
        for attr in self.__slots__:
            val = getattr(self, attr)
            if isinstance(val, bool):
                val = "y" if val else "n"
            lines.append(f"{attr}={val}")
        return "\n".join(lines)


class BootEditor:
    """
    The editor screen. The title and help line go in 'main', the widgets in
    'sub' (bootterm.Region instances, which may be free-standing).

    devices:
      List of device names to choose from

    option:
      BootOption with the initial values. A device not in 'devices' is
      added to the list.

    The screen is done once OK or Cancel has been activated (or ESC
    pressed). result() then returns the edited BootOption, or None after a
    cancel.
    """

    def __init__(self, main, sub, devices, option=None):
        self.main = main
        self.sub = sub
        self.done = False
        self.help_text = ""

        self._option = option or BootOption()
        self._devices = list(devices)
        if self._option.device and self._option.device not in self._devices:
            self._devices.append(self._option.device)
        self._result = None

        self.widgetset = WidgetSet(main, sub)
        self.widgetset.set_widget_focus(self._widget_focus)
        self._add_widgets()

    def _add_widgets(self):
        ws = self.widgetset
        opt = self._option

        y = 0
        ws.new_label(y, 0, "Device:")
        self.device = ws.new_select(y, _FIELD_X, _FIELD_WIDTH)
        for i, dev in enumerate(self._devices):
            self.device.add_option(i, dev, dev == opt.device)
        self.device.on_change(self._device_changed)
        y += max(self.device.height(), 1) + 1

        ws.new_label(y, 0, "Kernel:")
        self.kernel = ws.new_textbox(y, _FIELD_X, _FIELD_WIDTH, opt.kernel)
        y += 1

        ws.new_label(y, 0, "Initrd:")
        self.initrd = ws.new_textbox(y, _FIELD_X, _FIELD_WIDTH, opt.initrd)
        y += 1

        ws.new_label(y, 0, "Boot args:")
        self.args = ws.new_textbox(y, _FIELD_X, _FIELD_WIDTH, opt.args)
        y += 2

        ws.new_label(y, 0, "Default:")
        self.is_default = ws.new_checkbox(y, _FIELD_X, opt.is_default)
        y += 2

        self.ok = ws.new_button(y, _FIELD_X, _BUTTON_SIZE, "OK", self._finish, True)
        self.cancel = ws.new_button(
            y, _FIELD_X + _BUTTON_SIZE + 4, _BUTTON_SIZE, "Cancel", self._finish, False
        )

    def _device_changed(self, arg, value):
        self.help_text = f"Boot from {self._devices[value]}"

    def _widget_focus(self, widget, arg):
        self.help_text = _HELP.get(type(widget).__name__, "")

    def _finish(self, save):
        self.done = True
        if save:
            dev = self.device.get_value()
            self._result = BootOption(
                self._devices[dev] if dev >= 0 else "",
                self.kernel.get_value(),
                self.initrd.get_value(),
                self.args.get_value(),
                self.is_default.get_value(),
            )

    def result(self):
        return self._result

    def process_key(self, key):
        """Handles a key. Returns True if it did anything."""
        if key == Key.ESC:
            self._finish(False)
            return True
        return self.widgetset.process_key(key)

    def draw(self):
        """Draws the title and help line into the main window. The widgets
        draw themselves."""
        self.main.clear()
        self.main.write(0, 1, "Boot option editor", style("title"))
        self.main.write(self.main.height - 1, 1, self.help_text, style("screen"))


def edit(term, devices, option):
    """
    Runs the editor on the bootterm.Terminal 'term' until it's done, and
    returns the edited BootOption (None if cancelled).
    """
    main = term.region(term.height, term.width)
    main.fill(style("screen"))
    sub = term.region(1, 1, 2, 2)
    sub.fill(style("screen"))
    _resize(term, main, sub)

    editor = BootEditor(main, sub, devices, option)
    ws = editor.widgetset
    ws.post()
    try:
        while not editor.done:
            editor.draw()
            term.set_cursor(sub, *ws.form.cursor_position())
            term.update()

            key = term.read_key()
            if key == Key.RESIZE:
                ws.unpost()
                _resize(term, main, sub)
                ws.post()
            else:
                editor.process_key(key)
    finally:
        ws.destroy()
        sub.close()
        main.close()

    return editor.result()


def _resize(term, main, sub):
    # Gives the main window the whole screen and the widgets everything but a
    # two-cell border
    main.resize(term.height, term.width)
    sub.resize(max(term.height - 4, 1), max(term.width - 4, 1))


def main():
    parser = argparse.ArgumentParser(
        formatter_class=argparse.RawDescriptionHelpFormatter, description=__doc__
    )

    parser.add_argument(
        "--device",
        dest="devices",
        metavar="NAME",
        action="append",
        default=[],
        help="Device to offer (can be given several times)",
    )
    parser.add_argument(
        "--boot-device", default="", help="Initially selected device (default: first)"
    )
    parser.add_argument("--kernel", default="", help="Initial kernel image path")
    parser.add_argument("--initrd", default="", help="Initial initrd image path")
    parser.add_argument("--args", default="", help="Initial kernel command line")
    parser.add_argument(
        "--default",
        dest="is_default",
        action="store_true",
        help="Mark the option as the default initially",
    )

    args = parser.parse_args()

    if not args.devices and not args.boot_device:
        sys.exit("error: no devices given (use --device)")

    option = BootOption(
        args.boot_device, args.kernel, args.initrd, args.args, args.is_default
    )

    res = bootterm.run(lambda term: edit(term, args.devices, option))
    if res is None:
        sys.exit("Cancelled")
    print(res)


if __name__ == "__main__":
    main()
