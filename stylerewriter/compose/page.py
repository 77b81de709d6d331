"""Host page capabilities and the editable region variants built on them.

A host adapter (a browser driver bridge, or a fake page in tests) implements
``HostElement`` and ``HostDocument``. Any of their calls may raise when the
page changes underneath us; callers in this package treat that as a failed
step.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Protocol, Union


class HostElement(Protocol):
    tag_name: str
    is_content_editable: bool
    text_content: str
    value: str

    @property
    def parent(self) -> Optional["HostElement"]: ...

    @property
    def is_connected(self) -> bool: ...

    @property
    def is_visible(self) -> bool: ...

    @property
    def inner_text(self) -> str: ...

    def get_attribute(self, name: str) -> str | None: ...

    def contains(self, other: "HostElement") -> bool: ...

    def focus(self) -> None: ...


class HostDocument(Protocol):
    @property
    def active_element(self) -> HostElement | None: ...

    @property
    def selection_anchor(self) -> HostElement | None: ...

    def iter_elements(self) -> Iterator[HostElement]: ...

    def exec_command(self, command: str, value: str | None = None) -> bool: ...


class Capability(str, Enum):
    CONTENT_EDITABLE = "content-editable"
    VALUE_BEARING = "value-bearing"


VALUE_BEARING_TAGS = frozenset({"textarea", "input"})


@dataclass(frozen=True)
class ContentEditableRegion:
    element: HostElement
    capability = Capability.CONTENT_EDITABLE

    def read_text(self) -> str:
        return self.element.inner_text or self.element.text_content or ""


@dataclass(frozen=True)
class ValueBearingRegion:
    element: HostElement
    capability = Capability.VALUE_BEARING

    def read_text(self) -> str:
        return self.element.value or ""


EditableRegion = Union[ContentEditableRegion, ValueBearingRegion]


def region_for(element: HostElement) -> EditableRegion:
    if (element.tag_name or "").lower() in VALUE_BEARING_TAGS:
        return ValueBearingRegion(element)
    return ContentEditableRegion(element)
