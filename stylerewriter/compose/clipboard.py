from __future__ import annotations

from typing import Protocol

import pyperclip


class ClipboardError(RuntimeError):
    pass


class Clipboard(Protocol):
    def copy(self, text: str) -> None: ...


class SystemClipboard:
    def copy(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(str(exc)) from exc
