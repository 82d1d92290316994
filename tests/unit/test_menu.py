import pytest
from app.content import menu as menu_normalizer
from app.core.errors import (
    ContentValidationError,
    InvalidPriceError,
    InvalidQuantityError,
    QuantityBelowMinimumError,
)


def _section(section_id, *items):
    return {"id": section_id, "title": section_id.title(), "items": list(items)}


class TestNormalizeMenu:
    """Unit tests for menu validation and normalization"""

    def test_item_price_normalized(self):
        menu = [_section("sides", {"title": "Fries", "price": "$3"})]
        result = menu_normalizer.normalize_menu(menu)
        assert result[0]["items"][0]["price"] == "3.00"

    def test_invalid_item_price_rejected(self):
        menu = [_section("sides", {"title": "Fries", "price": "abc"})]
        with pytest.raises(InvalidPriceError) as exc:
            menu_normalizer.normalize_menu(menu)
        assert exc.value.message == "Invalid price for item: Fries"
        assert exc.value.section == "sides"
        assert exc.value.item == "Fries"
        assert exc.value.status_code == 400

    def test_input_not_mutated_on_failure(self):
        menu = [_section("sides", {"title": "Fries", "price": "3"}, {"title": "Bad", "price": "x"})]
        with pytest.raises(ContentValidationError):
            menu_normalizer.normalize_menu(menu)
        assert menu[0]["items"][0]["price"] == "3"
        assert "quantity" not in menu[0]["items"][0]

    def test_quantity_options_rewritten(self):
        item = {"title": "Wings", "quantities": [{"label": "6 pc", "value": "6", "price": "8", "extra": 1}]}
        result = menu_normalizer.normalize_menu([_section("wings-tenders", item)])
        assert result[0]["items"][0]["quantities"] == [{"label": "6 pc", "value": 6, "price": "8.00"}]

    def test_bare_quantity_option(self):
        result = menu_normalizer.normalize_menu([_section("sides", {"title": "Rolls", "quantities": ["2"]})])
        assert result[0]["items"][0]["quantities"] == [{"label": "", "value": 2, "price": ""}]

    def test_wings_option_minimum(self):
        item = {"title": "Tenders", "quantities": [{"value": 0, "price": "5.00"}]}
        with pytest.raises(QuantityBelowMinimumError) as exc:
            menu_normalizer.normalize_menu([_section("wings-tenders", item)])
        assert exc.value.message == "Quantity option must be 1 or more for Wings & Tenders: Tenders"

    def test_other_sections_allow_zero(self):
        item = {"title": "Soda", "quantities": [{"value": 0}]}
        result = menu_normalizer.normalize_menu([_section("drinks", item)])
        assert result[0]["items"][0]["quantities"][0]["value"] == 0

    def test_negative_option_rejected(self):
        item = {"title": "Soda", "quantities": [{"value": -1}]}
        with pytest.raises(QuantityBelowMinimumError) as exc:
            menu_normalizer.normalize_menu([_section("drinks", item)])
        assert exc.value.message == "Invalid quantity option for item: Soda"

    def test_non_numeric_option_rejected(self):
        item = {"title": "Soda", "quantities": [{"label": "big"}]}
        with pytest.raises(InvalidQuantityError):
            menu_normalizer.normalize_menu([_section("drinks", item)])

    def test_invalid_option_price(self):
        item = {"title": "Wings", "quantities": [{"value": 6, "price": "free"}]}
        with pytest.raises(InvalidPriceError) as exc:
            menu_normalizer.normalize_menu([_section("wings-tenders", item)])
        assert exc.value.message == "Invalid price for quantity option in item: Wings"

    def test_legacy_quantity_kept_as_int(self):
        result = menu_normalizer.normalize_menu([_section("sides", {"title": "Fries", "quantity": "2"})])
        item = result[0]["items"][0]
        assert item["quantity"] == 2
        assert "quantities" not in item

    def test_legacy_quantity_wings_minimum(self):
        with pytest.raises(QuantityBelowMinimumError) as exc:
            menu_normalizer.normalize_menu([_section("wings-tenders", {"title": "Wings", "quantity": 0})])
        assert exc.value.message == "Quantity must be 1 or more for Wings & Tenders: Wings"

    def test_legacy_quantity_invalid(self):
        with pytest.raises(InvalidQuantityError) as exc:
            menu_normalizer.normalize_menu([_section("sides", {"quantity": "lots"})])
        assert exc.value.message == "Invalid quantity for item: unknown"

    def test_ice_cream_flavor_price_removed(self):
        item = {"title": "Vanilla", "price": "not-a-price"}
        result = menu_normalizer.normalize_menu([_section("current-ice-cream-flavors", item)])
        stored = result[0]["items"][0]
        assert "price" not in stored
        assert stored["quantity"] == 0

    def test_short_promoted_to_description(self):
        item = {"title": "Burger", "short": "  Double patty  ", "description": ""}
        result = menu_normalizer.normalize_menu([_section("burgers", item)])
        stored = result[0]["items"][0]
        assert stored["description"] == "Double patty"
        assert stored["short"] == "  Double patty  "

    def test_existing_description_kept(self):
        item = {"title": "Burger", "short": "short", "description": "long"}
        result = menu_normalizer.normalize_menu([_section("burgers", item)])
        assert result[0]["items"][0]["description"] == "long"

    def test_default_quantity_backfill(self):
        menu = [_section("wings-tenders", {"title": "Wings"}), _section("sides", {"title": "Fries"})]
        result = menu_normalizer.normalize_menu(menu)
        assert result[0]["items"][0]["quantity"] == 1
        assert result[1]["items"][0]["quantity"] == 0

    def test_unknown_item_keys_preserved(self):
        item = {"title": "Fries", "image": "fries.jpg", "badge": "new"}
        result = menu_normalizer.normalize_menu([_section("sides", item)])
        assert result[0]["items"][0]["badge"] == "new"
        assert result[0]["items"][0]["image"] == "fries.jpg"

    def test_non_object_item_rejected(self):
        with pytest.raises(ContentValidationError):
            menu_normalizer.normalize_menu([_section("sides", "Fries")])

    def test_sections_without_items_pass_through(self):
        menu = [{"id": "notes", "title": "Notes", "details": ["Cash only"]}, "stray"]
        assert menu_normalizer.normalize_menu(menu) == menu


class TestLegacyMaintenance:
    """Unit tests for migration, price fixing and inspection helpers"""

    def test_upgrade_legacy_quantities(self):
        menu = [_section("sides", {"title": "Fries", "quantity": 2, "price": "3.00"})]
        assert menu_normalizer.upgrade_legacy_quantities(menu) is True
        item = menu[0]["items"][0]
        assert "quantity" not in item
        assert item["quantities"] == [{"label": "", "value": 2, "price": "3.00"}]

    def test_migrate_menu_reports_no_change(self):
        menu = [_section("sides", {"title": "Fries", "quantities": [{"label": "", "value": 1, "price": "3.00"}]})]
        assert menu_normalizer.migrate_menu(menu) is False

    def test_migrate_menu_full_cleanup(self):
        menu = [_section("sides", {"title": "Fries", "short": "Crispy", "price": "$3", "quantity": "1"})]
        assert menu_normalizer.migrate_menu(menu) is True
        item = menu[0]["items"][0]
        assert item["price"] == "3.00"
        assert item["description"] == "Crispy"
        assert item["quantities"] == [{"label": "", "value": 1, "price": "3.00"}]

    def test_fix_prices_leaves_invalid_alone(self):
        menu = [_section("sides", {"title": "Fries", "price": "market", "quantities": [{"value": 1, "price": "2.5"}]})]
        assert menu_normalizer.fix_prices(menu) is True
        item = menu[0]["items"][0]
        assert item["price"] == "market"
        assert item["quantities"][0]["price"] == "2.50"

    def test_inspect_menu(self):
        menu = [_section("sides", {"title": "Fries", "price": "3"}, {"title": "Rolls", "quantities": [{"value": 2}]})]
        problems = menu_normalizer.inspect_menu(menu)
        assert "Section sides item #0 missing quantities/quantity" in problems
        assert "Section sides item #0 price not normalized: 3" in problems
        assert "Section sides item #1 qty #0 missing price" in problems

    def test_inspect_normalized_menu_is_clean(self):
        menu = menu_normalizer.normalize_menu([_section("sides", {"title": "Fries", "price": "3"})])
        assert menu_normalizer.inspect_menu(menu) == []
