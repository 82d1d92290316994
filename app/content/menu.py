import copy
import logging
from typing import Any, Dict, Iterator, List, Tuple, Union

from app.content.utils import NORMALIZED_PRICE_RE, is_blank, normalize_price, parse_quantity
from app.core.errors import (
    ContentValidationError,
    InvalidPriceError,
    InvalidQuantityError,
    QuantityBelowMinimumError,
)
from app.schemas import QuantityOption

logger = logging.getLogger(__name__)

WINGS_TENDERS = "wings-tenders"
ICE_CREAM_FLAVORS = "current-ice-cream-flavors"

Menu = Union[List[Any], Dict[str, Any]]


def _sections(menu: Menu) -> Iterator[Any]:
    return iter(menu.values() if isinstance(menu, dict) else menu)


def _items(section: Any) -> Iterator[Tuple[str, Any]]:
    """Yield (section_id, item) for every entry of a section's `items` list."""
    if not isinstance(section, dict) or not isinstance(section.get("items"), list):
        return
    section_id = str(section.get("id") or "")
    for item in section["items"]:
        yield section_id, item


def minimum_quantity(section_id: str) -> int:
    return 1 if section_id == WINGS_TENDERS else 0


def default_quantity(section_id: str) -> int:
    return 1 if section_id == WINGS_TENDERS else 0


def _title(item: Dict[str, Any]) -> str:
    title = item.get("title")
    return "unknown" if title is None else str(title)


def promote_short(item: Dict[str, Any]) -> bool:
    """Copy a non-blank `short` into a blank `description`. Returns True when changed."""
    if is_blank(item.get("description")) and not is_blank(item.get("short")):
        item["description"] = str(item["short"]).strip()
        return True
    return False


def _check_minimum(value: int, section_id: str, title: str, option: bool) -> None:
    if value >= minimum_quantity(section_id):
        return
    if section_id == WINGS_TENDERS:
        prefix = "Quantity option" if option else "Quantity"
        raise QuantityBelowMinimumError(
            f"{prefix} must be 1 or more for Wings & Tenders: {title}", section_id, title
        )
    label = "quantity option" if option else "quantity"
    raise QuantityBelowMinimumError(f"Invalid {label} for item: {title}", section_id, title)


def _normalize_option(option: Any, section_id: str, title: str) -> Dict[str, Any]:
    raw = option.get("value") if isinstance(option, dict) else option
    value = parse_quantity(raw)
    if value is None:
        raise InvalidQuantityError(f"Invalid quantity option for item: {title}", section_id, title)
    _check_minimum(value, section_id, title, option=True)

    price = ""
    if isinstance(option, dict) and option.get("price") is not None:
        price = normalize_price(option["price"])
        if price is None:
            raise InvalidPriceError(
                f"Invalid price for quantity option in item: {title}", section_id, title
            )

    label = option.get("label") if isinstance(option, dict) else None
    return QuantityOption(label="" if label is None else str(label), value=value, price=price).model_dump()


def normalize_item(item: Dict[str, Any], section_id: str) -> None:
    """Validate and normalize one menu item in place. Raises on the first bad field."""
    if section_id == ICE_CREAM_FLAVORS:
        # flavors are names only
        item.pop("price", None)
        return

    title = _title(item)
    promote_short(item)

    quantities = item.get("quantities")
    if quantities is not None:
        if not isinstance(quantities, list):
            raise InvalidQuantityError(f"Invalid quantity option for item: {title}", section_id, title)
        item["quantities"] = [_normalize_option(opt, section_id, title) for opt in quantities]
    elif item.get("quantity") is not None:
        value = parse_quantity(item["quantity"])
        if value is None:
            raise InvalidQuantityError(f"Invalid quantity for item: {title}", section_id, title)
        _check_minimum(value, section_id, title, option=False)
        item["quantity"] = value

    if item.get("price") is not None:
        price = normalize_price(item["price"])
        if price is None:
            raise InvalidPriceError(f"Invalid price for item: {title}", section_id, title)
        item["price"] = price


def backfill_quantities(menu: Menu) -> bool:
    """Give every item without `quantities`/`quantity` the section default."""
    changed = False
    for section in _sections(menu):
        for section_id, item in _items(section):
            if not isinstance(item, dict):
                continue
            if item.get("quantities") is None and item.get("quantity") is None:
                item["quantity"] = default_quantity(section_id)
                changed = True
    return changed


def normalize_menu(menu: Menu) -> Menu:
    """
    Validate and normalize a full replacement menu.

    Works on a deep copy so nothing is modified when an item is rejected.
    The first invalid item raises a ContentValidationError naming the item
    by title; sections that are not objects pass through unchanged.
    """
    result = copy.deepcopy(menu)
    for section in _sections(result):
        for section_id, item in _items(section):
            if not isinstance(item, dict):
                raise ContentValidationError(f"Invalid menu item in section: {section_id or 'unknown'}", section_id)
            normalize_item(item, section_id)
    backfill_quantities(result)
    return result


def upgrade_legacy_quantities(menu: Menu) -> bool:
    """Replace each numeric legacy `quantity` with a one-entry `quantities` list."""
    changed = False
    for section in _sections(menu):
        for _, item in _items(section):
            if not isinstance(item, dict) or item.get("quantities") is not None:
                continue
            if item.get("quantity") is None:
                continue
            value = parse_quantity(item["quantity"])
            if value is None:
                continue
            price = item.get("price")
            item["quantities"] = [
                QuantityOption(label="", value=value, price="" if price is None else str(price)).model_dump()
            ]
            del item["quantity"]
            changed = True
    return changed


def fix_prices(menu: Menu) -> bool:
    """Normalize item and option prices that parse as numbers; leave the rest alone."""
    changed = False
    for section in _sections(menu):
        for _, item in _items(section):
            if not isinstance(item, dict):
                continue
            targets = [item]
            if isinstance(item.get("quantities"), list):
                targets.extend(opt for opt in item["quantities"] if isinstance(opt, dict))
            for target in targets:
                if is_blank(target.get("price")):
                    continue
                price = normalize_price(target["price"])
                if price is not None and price != target["price"]:
                    target["price"] = price
                    changed = True
    return changed


def migrate_menu(menu: Menu) -> bool:
    """
    One-off cleanup of a stored menu: prices, legacy quantities,
    `short` promotion and quantity backfill. Returns True if anything changed.
    """
    changed = fix_prices(menu)
    changed = upgrade_legacy_quantities(menu) or changed
    for section in _sections(menu):
        for _, item in _items(section):
            if isinstance(item, dict):
                changed = promote_short(item) or changed
    changed = backfill_quantities(menu) or changed
    if changed:
        logger.info("Menu migration changed stored items")
    return changed


def inspect_menu(menu: Menu) -> List[str]:
    """List every item that is not in normalized form."""
    problems: List[str] = []
    for section in _sections(menu):
        if not isinstance(section, dict) or not isinstance(section.get("items"), list):
            continue
        section_id = section.get("id") or ""
        for idx, item in enumerate(section["items"]):
            if not isinstance(item, dict):
                problems.append(f"Section {section_id} item #{idx} is not an object")
                continue
            if item.get("quantities") is None and item.get("quantity") is None:
                problems.append(f"Section {section_id} item #{idx} missing quantities/quantity")
            if item.get("price") is not None and not NORMALIZED_PRICE_RE.match(str(item["price"])):
                problems.append(f"Section {section_id} item #{idx} price not normalized: {item['price']}")
            if not isinstance(item.get("quantities"), list):
                continue
            for qi, option in enumerate(item["quantities"]):
                option = option if isinstance(option, dict) else {}
                if option.get("value") is None:
                    problems.append(f"Section {section_id} item #{idx} qty #{qi} missing value")
                price = option.get("price")
                if price is None or price == "":
                    problems.append(f"Section {section_id} item #{idx} qty #{qi} missing price")
                elif not NORMALIZED_PRICE_RE.match(str(price)):
                    problems.append(f"Section {section_id} item #{idx} qty #{qi} price not normalized: {price}")
    return problems
