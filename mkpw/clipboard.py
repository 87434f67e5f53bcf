"""
mkpw.clipboard
Put generated passwords on the system clipboard through Qt.
"""

import logging
import os
import sys

logger = logging.getLogger(__name__)

# environment variables that let Qt reach a display server on Linux and the BSDs
_DISPLAY_VARIABLES = ("DISPLAY", "WAYLAND_DISPLAY", "QT_QPA_PLATFORM")


class ClipboardError(RuntimeError):
    pass


def _has_display() -> bool:
    if sys.platform.startswith(("win", "cygwin", "darwin")):
        return True
    return any(os.environ.get(name) for name in _DISPLAY_VARIABLES)


def write_to_clipboard(text: str) -> None:
    """
    Copy `text` to the clipboard (and the X11 primary selection where there is one).
    """
    # Qt aborts the whole process when no platform plugin can start
    if not _has_display():
        raise ClipboardError("Clipboard is unavailable: no display found (DISPLAY and WAYLAND_DISPLAY are unset).")

    try:
        from PySide6.QtGui import QClipboard, QGuiApplication
    except ImportError as e:
        raise ClipboardError(f"Clipboard support is unavailable: {e}") from e

    app = QGuiApplication.instance() or QGuiApplication([])
    clipboard: QClipboard = app.clipboard()
    if clipboard is None:
        raise ClipboardError("Could not access the clipboard.")

    clipboard.setText(text, mode=QClipboard.Mode.Clipboard)
    if clipboard.supportsSelection():
        clipboard.setText(text, mode=QClipboard.Mode.Selection)
    # let Qt hand the data to the platform clipboard before we return
    app.processEvents()
    logger.debug("Copied %d characters to the clipboard", len(text))
