from .clipboard import Clipboard, ClipboardError, SystemClipboard
from .focus import find_candidates, is_editable, resolve
from .page import (
    Capability,
    ContentEditableRegion,
    EditableRegion,
    HostDocument,
    HostElement,
    ValueBearingRegion,
    region_for,
)
from .replacer import ReplaceOutcome, ReplaceStrategy, TextReplacer
from .session import RewriteSession, SessionOutcome
from .surface import ComposeWatch, SurfaceRegistry

__all__ = [
    "Capability",
    "Clipboard",
    "ClipboardError",
    "ComposeWatch",
    "ContentEditableRegion",
    "EditableRegion",
    "HostDocument",
    "HostElement",
    "ReplaceOutcome",
    "ReplaceStrategy",
    "RewriteSession",
    "SessionOutcome",
    "SurfaceRegistry",
    "SystemClipboard",
    "TextReplacer",
    "ValueBearingRegion",
    "find_candidates",
    "is_editable",
    "region_for",
    "resolve",
]
