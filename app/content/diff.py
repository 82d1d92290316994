import json
from typing import Any, Dict, List, Optional


def section_key(section: Any) -> Optional[str]:
    """Sections are matched by `id`, falling back to `title`."""
    if not isinstance(section, dict):
        return None
    if section.get("id") not in (None, ""):
        return str(section["id"])
    if section.get("title") is not None:
        return str(section["title"])
    return None


def items_by_title(items: Any) -> Dict[str, Dict[str, Any]]:
    mapped: Dict[str, Dict[str, Any]] = {}
    if not isinstance(items, list):
        return mapped
    for item in items:
        if not isinstance(item, dict):
            continue
        title = str(item.get("title") or "").strip()
        if title:
            mapped[title] = item
    return mapped


def _text(item: Dict[str, Any], key: str) -> str:
    value = item.get(key)
    return "" if value is None else str(value)


def _quantities_key(item: Dict[str, Any]) -> str:
    if isinstance(item.get("quantities"), list):
        return json.dumps(item["quantities"])
    if item.get("quantity") is not None:
        return json.dumps(item["quantity"])
    return ""


def item_changes(incoming: Dict[str, Any], stored: Dict[str, Any]) -> List[str]:
    changes = []
    if _text(incoming, "price") != _text(stored, "price"):
        changes.append("price")
    if _text(incoming, "description") != _text(stored, "description"):
        changes.append("description")
    if _quantities_key(incoming) != _quantities_key(stored):
        changes.append("quantities")
    return changes


def diff_menus(incoming: List[Any], stored: Any) -> Dict[str, Dict[str, Any]]:
    """
    Compare a proposed menu with the stored one, section by section.
    Only sections present in the proposal are reported.
    """
    stored_sections: Dict[str, Dict[str, Any]] = {}
    for section in stored if isinstance(stored, list) else []:
        key = section_key(section)
        if key is not None:
            stored_sections[key] = section

    diff: Dict[str, Dict[str, Any]] = {}
    for section in incoming:
        key = section_key(section)
        if key is None:
            continue
        in_map = items_by_title(section.get("items"))
        st_map = items_by_title(stored_sections.get(key, {}).get("items"))

        added, changed = [], []
        for title, item in in_map.items():
            if title not in st_map:
                added.append(title)
                continue
            changes = item_changes(item, st_map[title])
            if changes:
                changed.append({"title": title, "changes": changes})
        removed = [title for title in st_map if title not in in_map]

        diff[key] = {"added": added, "removed": removed, "changed": changed}
    return diff
