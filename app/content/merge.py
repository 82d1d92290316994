import copy
from enum import Enum
from typing import Any, Dict

from app.content import menu as menu_normalizer
from app.core.errors import PayloadError

MENU_SECTION = "menu"


class PayloadKind(str, Enum):
    SCALAR = "scalar"
    LIST = "list"
    MAP = "map"


def classify_payload(payload: Any) -> PayloadKind:
    """Decide whether a decoded JSON value is an array, an object, or a plain value."""
    if isinstance(payload, (list, tuple)):
        return PayloadKind.LIST
    if isinstance(payload, dict):
        return PayloadKind.MAP
    return PayloadKind.SCALAR


def recursive_merge(existing: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge `incoming` into a copy of `existing`.
    Objects present on both sides are merged key by key; any other value
    (arrays included) from `incoming` overwrites.
    """
    merged = dict(existing)
    for key, value in incoming.items():
        current = merged.get(key)
        if classify_payload(value) is PayloadKind.MAP and classify_payload(current) is PayloadKind.MAP:
            merged[key] = recursive_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def apply_section_update(
    document: Dict[str, Any],
    section: str,
    payload: Any,
    upgrade_legacy_quantity: bool = False,
) -> Dict[str, Any]:
    """
    Apply one section update to the document in place and return it.

    - `menu` always replaces the stored menu and is normalized first.
    - an array replaces the section.
    - an object is merged recursively into the section.
    - anything else replaces the section value.
    - with no section name an object payload is merged shallowly into the top level.
    """
    kind = classify_payload(payload)

    if not section:
        if kind is PayloadKind.MAP:
            for key, value in payload.items():
                document[key] = copy.deepcopy(value)
        return document

    if section == MENU_SECTION:
        if kind is PayloadKind.SCALAR:
            raise PayloadError("Menu content must be a list of sections")
        menu = menu_normalizer.normalize_menu(list(payload) if kind is PayloadKind.LIST else payload)
        if upgrade_legacy_quantity:
            menu_normalizer.upgrade_legacy_quantities(menu)
        document[section] = menu
        return document

    if kind is PayloadKind.LIST:
        document[section] = copy.deepcopy(list(payload))
    elif kind is PayloadKind.MAP:
        existing = document.get(section)
        if classify_payload(existing) is not PayloadKind.MAP:
            existing = {}
        document[section] = recursive_merge(existing, payload)
    else:
        document[section] = payload
    return document
