"""
Stock ledger tests.

Amounts are always read back with get_stock_amount(), which queries the
column directly instead of going through possibly stale ORM objects.
"""

import pytest

from lunishop.errors import ConflictError, InsufficientStockError, NotFoundError, ValidationError
from lunishop.extensions import db
from lunishop.services import catalog_service, inventory_service
from lunishop.services.inventory_service import get_stock_amount


class TestAddStock:

    def test_add_new_size(self, seed):
        inventory_service.add_stock_item(seed["main_outlet_id"], seed["boots_id"], 44, 3)
        assert get_stock_amount(seed["main_outlet_id"], seed["boots_id"], 44) == 3

    def test_zero_amount_is_allowed(self, seed):
        inventory_service.add_stock_item(seed["side_outlet_id"], seed["scarf_id"], 0, 0)
        assert get_stock_amount(seed["side_outlet_id"], seed["scarf_id"], 0) == 0

    def test_duplicate_triple_conflicts(self, seed):
        with pytest.raises(ConflictError, match="product stock already exists"):
            inventory_service.add_stock_item(seed["main_outlet_id"], seed["boots_id"], 42, 1)
        assert get_stock_amount(seed["main_outlet_id"], seed["boots_id"], 42) == 5

    def test_unknown_outlet(self, seed):
        with pytest.raises(NotFoundError):
            inventory_service.add_stock_item(999, seed["boots_id"], 42, 1)

    def test_unknown_product(self, seed):
        with pytest.raises(NotFoundError):
            inventory_service.add_stock_item(seed["main_outlet_id"], 999, 42, 1)

    def test_negative_amount_rejected(self, seed):
        with pytest.raises(ValidationError):
            inventory_service.add_stock_item(seed["side_outlet_id"], seed["boots_id"], 42, -1)


class TestDecrement:

    def test_takes_exact_amount(self, seed):
        inventory_service.decrement_stock(seed["main_outlet_id"], seed["boots_id"], 42, 2)
        db.session.commit()
        assert get_stock_amount(seed["main_outlet_id"], seed["boots_id"], 42) == 3

    def test_can_reach_zero(self, seed):
        inventory_service.decrement_stock(seed["main_outlet_id"], seed["boots_id"], 43, 1)
        db.session.commit()
        assert get_stock_amount(seed["main_outlet_id"], seed["boots_id"], 43) == 0

    def test_overdraw_refused_and_untouched(self, seed):
        with pytest.raises(InsufficientStockError) as exc_info:
            inventory_service.decrement_stock(seed["main_outlet_id"], seed["boots_id"], 42, 6)
        db.session.rollback()

        assert exc_info.value.details["available_amount"] == 5
        assert exc_info.value.details["requested_amount"] == 6
        assert get_stock_amount(seed["main_outlet_id"], seed["boots_id"], 42) == 5

    def test_missing_row_refused(self, seed):
        with pytest.raises(InsufficientStockError) as exc_info:
            inventory_service.decrement_stock(seed["side_outlet_id"], seed["boots_id"], 42, 1)
        db.session.rollback()
        assert exc_info.value.details["available_amount"] is None


class TestIncrement:

    def test_adds_back(self, seed):
        assert inventory_service.increment_stock(seed["main_outlet_id"], seed["scarf_id"], 0, 4)
        db.session.commit()
        assert get_stock_amount(seed["main_outlet_id"], seed["scarf_id"], 0) == 14

    def test_missing_row_reports_false(self, seed):
        assert not inventory_service.increment_stock(seed["side_outlet_id"], seed["scarf_id"], 0, 4)
        db.session.commit()
        assert get_stock_amount(seed["side_outlet_id"], seed["scarf_id"], 0) is None


class TestCorrections:

    def test_update_sets_absolute_amount(self, seed):
        inventory_service.update_stock_amount(seed["main_outlet_id"], seed["boots_id"], 42, 17)
        assert get_stock_amount(seed["main_outlet_id"], seed["boots_id"], 42) == 17

    def test_update_missing_row(self, seed):
        with pytest.raises(NotFoundError):
            inventory_service.update_stock_amount(seed["side_outlet_id"], seed["boots_id"], 42, 1)

    def test_delete_single_size(self, seed):
        removed = inventory_service.delete_stock_item(seed["main_outlet_id"], seed["boots_id"], 43)
        assert removed == 1
        assert get_stock_amount(seed["main_outlet_id"], seed["boots_id"], 43) is None
        assert get_stock_amount(seed["main_outlet_id"], seed["boots_id"], 42) == 5

    def test_delete_all_sizes(self, seed):
        removed = inventory_service.delete_stock_item(seed["main_outlet_id"], seed["boots_id"])
        assert removed == 2
        assert catalog_service.product_stock(seed["main_outlet_id"], seed["boots_id"]) == []

    def test_delete_nothing_matches(self, seed):
        with pytest.raises(NotFoundError):
            inventory_service.delete_stock_item(seed["side_outlet_id"], seed["boots_id"])


class TestLookups:

    def test_outlet_exists(self, seed):
        assert catalog_service.outlet_exists(seed["main_outlet_id"])
        assert not catalog_service.outlet_exists(999)

    def test_product_stock_sorted_by_size(self, seed):
        rows = catalog_service.product_stock(seed["main_outlet_id"], seed["boots_id"])
        assert [(row.size, row.amount) for row in rows] == [(42, 5), (43, 1)]

    def test_product_stock_absent_is_empty(self, seed):
        assert catalog_service.product_stock(seed["side_outlet_id"], seed["boots_id"]) == []
