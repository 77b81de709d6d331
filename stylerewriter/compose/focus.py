from __future__ import annotations

from .page import EditableRegion, HostDocument, HostElement, region_for

MESSAGE_BODY_HINT = "message"
LABEL_ATTRIBUTES = ("aria-label", "placeholder", "name")
EDITABLE_ATTRIBUTE_VALUES = frozenset({"", "true", "plaintext-only"})
FREE_TEXT_INPUT_TYPES = frozenset({"", "text", "email", "search", "url", "tel"})


def resolve(document: HostDocument) -> EditableRegion | None:
    """Pick the editable region the user is most likely composing in.

    Signals, strongest first: input focus (or a candidate ancestor of the
    focused node), the selection anchor, a message-body label, and finally
    the last candidate in document order. Reads page state only.
    """
    candidates = find_candidates(document)
    if not candidates:
        return None

    chosen = (
        _focused_candidate(document, candidates)
        or _selection_candidate(document, candidates)
        or _labelled_candidate(candidates)
        or candidates[-1]
    )
    return region_for(chosen)


def find_candidates(document: HostDocument) -> list[HostElement]:
    return [
        element
        for element in document.iter_elements()
        if is_editable(element)
        and not _inside_editing_host(element)
        and element.is_connected
        and element.is_visible
    ]


def is_editable(element: HostElement) -> bool:
    if element.get_attribute("disabled") is not None:
        return False
    if element.get_attribute("readonly") is not None:
        return False
    if element.is_content_editable:
        return True
    editable = element.get_attribute("contenteditable")
    if editable is not None and editable.strip().lower() in EDITABLE_ATTRIBUTE_VALUES:
        return True
    if (element.get_attribute("role") or "").lower() == "textbox":
        return True
    tag = (element.tag_name or "").lower()
    if tag == "textarea":
        return True
    if tag == "input":
        input_type = (element.get_attribute("type") or "").strip().lower()
        return input_type in FREE_TEXT_INPUT_TYPES
    return False


def _focused_candidate(
    document: HostDocument, candidates: list[HostElement]
) -> HostElement | None:
    node = document.active_element
    while node is not None:
        if _is_member(node, candidates):
            return node
        node = node.parent
    return None


def _selection_candidate(
    document: HostDocument, candidates: list[HostElement]
) -> HostElement | None:
    anchor = document.selection_anchor
    if anchor is None:
        return None
    # Innermost owner wins when candidates nest.
    for element in reversed(candidates):
        if element is anchor or element.contains(anchor):
            return element
    return None


def _labelled_candidate(candidates: list[HostElement]) -> HostElement | None:
    for element in candidates:
        for attribute in LABEL_ATTRIBUTES:
            label = element.get_attribute(attribute) or ""
            if MESSAGE_BODY_HINT in label.lower():
                return element
    return None


def _is_member(node: HostElement, candidates: list[HostElement]) -> bool:
    return any(node is candidate for candidate in candidates)


def _inside_editing_host(element: HostElement) -> bool:
    # Children of an editable box report is_content_editable too; only the
    # outermost editable element is the compose box.
    parent = element.parent
    if parent is None:
        return False
    if parent.is_content_editable:
        return True
    editable = parent.get_attribute("contenteditable")
    return editable is not None and editable.strip().lower() in EDITABLE_ATTRIBUTE_VALUES
