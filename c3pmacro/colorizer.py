# -*- coding: utf-8; -*-
"""Colorize terminal output, using Colorama."""

__all__ = ["setcolor", "colorize", "ColorScheme",
           "Fore", "Back", "Style"]

from colorama import Back, Fore, Style  # type: ignore[import]
from colorama import init as colorama_init  # type: ignore[import]

colorama_init()


def setcolor(*colors, reset=True):
    """Set color for terminal display.

    Returns a string that, when printed into a terminal, sets the style
    and color.

    If `reset=True`, reset style and color before setting the requested
    style and color. If `reset=False`, augment current style and color.

    Each entry can also be a tuple (arbitrarily nested), which is useful
    for defining compound styles.

    **CAUTION**: The specified style and color remain in effect until another
    explicit call to `setcolor`. To reset, use `setcolor()`.
    """
    def _setcolor(color):
        if isinstance(color, (list, tuple)):
            return "".join(_setcolor(elt) for elt in color)
        return color
    out = [_setcolor(Style.RESET_ALL)] if reset else []
    out.append(_setcolor(colors))
    return "".join(out)


def colorize(text, *colors):
    """Colorize string `text` for terminal display.

    Always reset style and color at the start of `text`, as well as after it.

    Usage::

        print(colorize("I'm new here", Fore.GREEN))
        print(colorize("I'm bold and bluetiful", Style.BRIGHT, Fore.BLUE))
    """
    return "{}{}{}".format(setcolor(colors),
                           text,
                           setcolor())


class ColorScheme:
    """The color scheme for terminal output in `c3pmacro`.

    This is just a bunch of constants. To change the colors, simply assign new
    values to them. Changes take effect immediately for any new output.

    Don't replace the color scheme object itself; all the use sites
    from-import it.

    See `Fore`, `Back`, `Style` for valid values. To make a compound style,
    place the values into a tuple.
    """
    def __init__(self):
        # format_location, diagnostics
        self.SOURCEFILENAME = Style.BRIGHT
        self.ERROR = (Style.BRIGHT, Fore.RED)
        self.WARNING = (Style.BRIGHT, Fore.YELLOW)
        self.GREYEDOUT = Style.DIM

        # format_registry, trace output
        self.HEADING1 = (Style.BRIGHT, Fore.LIGHTBLUE_EX)
        self.HEADING2 = Fore.LIGHTBLUE_EX
        self.MACRONAME = Fore.BLUE
        self.MACROKIND = Fore.CYAN

        # runtests
        self.TESTHEADING = self.HEADING1
        self.TESTPASS = (Style.BRIGHT, Fore.GREEN)
        self.TESTFAIL = (Style.BRIGHT, Fore.RED)
        self.TESTERROR = (Style.BRIGHT, Fore.YELLOW)

ColorScheme = ColorScheme()  # type: ignore[assignment, misc]
