import logging
from typing import Any, Dict, List

from app.content import menu as menu_normalizer
from app.content import store
from app.content.diff import diff_menus
from app.content.merge import apply_section_update
from app.core.config import settings
from app.core.errors import ContentValidationError

logger = logging.getLogger(__name__)


def save_section(section: str, payload: Any) -> str:
    """
    Main pipeline for an admin save.

    1. Read the stored document fresh from disk
    2. Merge or replace the named section (menu is normalized)
    3. Atomically rewrite the document
    4. Return the new `last_updated` timestamp

    Any validation error aborts before the write.
    """
    document = store.load_document()
    try:
        apply_section_update(
            document,
            section,
            payload,
            upgrade_legacy_quantity=settings.UPGRADE_LEGACY_QUANTITY,
        )
    except ContentValidationError as e:
        logger.warning("Rejected save of section %r: %s (section id %r)", section, e.message, e.section)
        raise

    timestamp = store.save_document(document)
    logger.info("Saved section %r at %s", section or "<top-level>", timestamp)
    return timestamp


def get_document() -> Dict[str, Any]:
    return store.load_document()


def preview_menu_diff(incoming: List[Any]) -> Dict[str, Dict[str, Any]]:
    stored = store.load_document().get("menu", [])
    return diff_menus(incoming, stored)


def migrate_content() -> Dict[str, Any]:
    """Apply the legacy menu cleanup to the stored document, writing only on change."""
    document = store.load_document()
    menu = document.get("menu")
    if not isinstance(menu, (list, dict)):
        return {"success": False, "changed": False, "message": "No menu present in content"}

    if not menu_normalizer.migrate_menu(menu):
        return {"success": True, "changed": False, "message": "No changes necessary; content already normalized."}

    timestamp = store.save_document(document)
    logger.info("Menu migration written at %s", timestamp)
    return {
        "success": True,
        "changed": True,
        "message": "Migration applied and content updated.",
        "timestamp": timestamp,
    }


def inspect_content() -> List[str]:
    menu = store.load_document().get("menu")
    if not isinstance(menu, (list, dict)):
        return []
    return menu_normalizer.inspect_menu(menu)
