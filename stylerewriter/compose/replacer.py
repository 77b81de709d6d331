from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from stylerewriter.results import FailureKind

from .clipboard import Clipboard, ClipboardError, SystemClipboard
from .page import Capability, EditableRegion, HostDocument

logger = logging.getLogger(__name__)

VERIFY_PREFIX_CHARS = 30

_WHITESPACE = re.compile(r"\s+")


class ReplaceStrategy(str, Enum):
    SELECTION_INSERT = "selection-insert"
    VALUE_ASSIGNMENT = "value-assignment"
    CONTENT_ASSIGNMENT = "content-assignment"
    CLIPBOARD_HANDOFF = "clipboard-handoff"


@dataclass(frozen=True)
class ReplaceOutcome:
    strategy_used: ReplaceStrategy | None
    verified: bool
    failure: FailureKind | None = None

    @property
    def needs_manual_paste(self) -> bool:
        return self.failure is FailureKind.CLIPBOARD_FALLBACK_USED


def normalize_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def is_replacement_visible(actual: str, intended: str, before: str | None = None) -> bool:
    """True when the intended text's opening shows up in ``actual``.

    With ``before`` given, unchanged text only counts when it already equals
    the intended text.
    """
    wanted = normalize_text(intended)
    prefix = wanted[:VERIFY_PREFIX_CHARS]
    if not prefix:
        return False
    current = normalize_text(actual)
    if before is not None and current == normalize_text(before) and current != wanted:
        return False
    return prefix in current


class TextReplacer:
    """Writes text back into an editable region, most faithful strategy first."""

    def __init__(self, document: HostDocument, clipboard: Clipboard | None = None) -> None:
        self._document = document
        self._clipboard = clipboard or SystemClipboard()

    def replace(self, region: EditableRegion, new_text: str) -> ReplaceOutcome:
        if not (new_text or "").strip():
            return ReplaceOutcome(
                strategy_used=None,
                verified=False,
                failure=FailureKind.VALIDATION_ERROR,
            )

        try:
            before = region.read_text()
        except Exception as exc:
            logger.debug("Could not read region before replacing: %s", exc)
            before = None

        for strategy, apply in self._strategies_for(region):
            try:
                apply(region, new_text)
                visible = is_replacement_visible(region.read_text(), new_text, before)
            except Exception as exc:
                logger.debug("Strategy %s raised: %s", strategy.value, exc)
                continue
            if visible:
                return ReplaceOutcome(strategy_used=strategy, verified=True)
            logger.debug("Strategy %s did not verify", strategy.value)

        try:
            self._clipboard.copy(new_text)
        except ClipboardError as exc:
            logger.warning("Clipboard handoff failed: %s", exc)
            return ReplaceOutcome(
                strategy_used=None,
                verified=False,
                failure=FailureKind.TOTAL_FAILURE,
            )
        return ReplaceOutcome(
            strategy_used=ReplaceStrategy.CLIPBOARD_HANDOFF,
            verified=False,
            failure=FailureKind.CLIPBOARD_FALLBACK_USED,
        )

    def _strategies_for(
        self, region: EditableRegion
    ) -> list[tuple[ReplaceStrategy, Callable[[EditableRegion, str], None]]]:
        strategies = [(ReplaceStrategy.SELECTION_INSERT, self._select_and_insert)]
        if region.capability is Capability.VALUE_BEARING:
            strategies.append((ReplaceStrategy.VALUE_ASSIGNMENT, _assign_value))
        else:
            strategies.append((ReplaceStrategy.CONTENT_ASSIGNMENT, _assign_content))
        return strategies

    def _select_and_insert(self, region: EditableRegion, new_text: str) -> None:
        region.element.focus()
        self._document.exec_command("selectAll")
        self._document.exec_command("insertText", new_text)


def _assign_value(region: EditableRegion, new_text: str) -> None:
    region.element.value = new_text


def _assign_content(region: EditableRegion, new_text: str) -> None:
    region.element.text_content = new_text
