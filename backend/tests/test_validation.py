"""
Car Store Backend — Payload Validation Unit Tests
===================================================

What:  Tests for app.validation (car create, car update, order create).
How:   Pure function calls; no database, no HTTP.

What we test:
    ✅ Valid payloads normalize into typed schemas
    ✅ Every violated field appears in the error map, keyed by path
    ✅ Update policy: non-empty, price and quantity required, no nulls
    ✅ Non-object bodies fail validation instead of raising anything else
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from app.exceptions import ValidationError
from app.schemas.car import CarCategory
from app.validation import (
    field_errors,
    validate_car,
    validate_car_update,
    validate_order,
)


class TestValidateCar:

    def test_valid_payload(self, car_payload):
        car = validate_car(car_payload)

        assert car.brand == "Toyota"
        assert car.category is CarCategory.SEDAN
        assert car.price == 20000
        assert car.quantity == 5

    def test_in_stock_derived_from_quantity(self, car_payload):
        assert validate_car(car_payload).to_record()["in_stock"] is True

        car_payload["quantity"] = 0
        assert validate_car(car_payload).to_record()["in_stock"] is False

    def test_explicit_in_stock_kept(self, car_payload):
        car_payload["inStock"] = False
        record = validate_car(car_payload).to_record()

        assert record["in_stock"] is False
        assert record["category"] == "Sedan"

    def test_whitespace_is_stripped(self, car_payload):
        car_payload["brand"] = "  Toyota  "
        assert validate_car(car_payload).brand == "Toyota"

    def test_empty_brand_and_negative_price(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_car({"brand": "", "price": -5})

        errors = exc_info.value.errors
        assert errors["brand"]["ruleName"] == "string_too_short"
        assert errors["price"]["ruleName"] == "greater_than_equal"
        # Every missing required field is reported too
        for field in ("model", "year", "category", "quantity"):
            assert errors[field]["ruleName"] == "missing"

    def test_blank_brand_rejected(self, car_payload):
        car_payload["brand"] = "   "
        with pytest.raises(ValidationError) as exc_info:
            validate_car(car_payload)
        assert "brand" in exc_info.value.errors

    @pytest.mark.parametrize("year", [1800, datetime.now(timezone.utc).year + 2])
    def test_year_out_of_range(self, car_payload, year):
        car_payload["year"] = year
        with pytest.raises(ValidationError) as exc_info:
            validate_car(car_payload)
        assert "Year must be between" in exc_info.value.errors["year"]["message"]

    def test_unknown_category(self, car_payload):
        car_payload["category"] = "Hatchback"
        with pytest.raises(ValidationError) as exc_info:
            validate_car(car_payload)
        assert exc_info.value.errors["category"]["ruleName"] == "enum"

    @pytest.mark.parametrize(
        "field,value",
        [("price", "20000"), ("price", True), ("quantity", True), ("quantity", "5"), ("inStock", 1)],
    )
    def test_numbers_and_booleans_are_not_coerced(self, car_payload, field, value):
        car_payload[field] = value
        with pytest.raises(ValidationError) as exc_info:
            validate_car(car_payload)
        assert list(exc_info.value.errors) == [field]

    def test_fractional_quantity(self, car_payload):
        car_payload["quantity"] = 2.5
        with pytest.raises(ValidationError) as exc_info:
            validate_car(car_payload)
        assert list(exc_info.value.errors) == ["quantity"]

    @pytest.mark.parametrize("payload", [None, [], "car", 42])
    def test_non_object_payload(self, payload):
        with pytest.raises(ValidationError) as exc_info:
            validate_car(payload)
        assert "body" in exc_info.value.errors


class TestValidateCarUpdate:

    def test_empty_payload(self):
        with pytest.raises(ValidationError, match="At least one field"):
            validate_car_update({})

    def test_missing_price_and_quantity(self):
        with pytest.raises(ValidationError, match="Price and quantity") as exc_info:
            validate_car_update({"brand": "Honda"})
        assert set(exc_info.value.errors) == {"price", "quantity"}

    def test_missing_quantity_only(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_car_update({"price": 1000})
        assert set(exc_info.value.errors) == {"quantity"}

    def test_null_price_counts_as_missing(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_car_update({"price": None, "quantity": 1})
        assert set(exc_info.value.errors) == {"price"}

    def test_zero_price_and_quantity_accepted(self):
        changes = validate_car_update({"price": 0, "quantity": 0}).to_changes()
        assert changes == {"price": 0, "quantity": 0, "in_stock": False}

    def test_partial_update(self):
        changes = validate_car_update(
            {"price": 19000, "quantity": 2, "category": "SUV"}
        ).to_changes()
        assert changes == {"price": 19000, "quantity": 2, "category": "SUV", "in_stock": True}

    def test_null_field_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_car_update({"price": 1, "quantity": 1, "brand": None})
        assert set(exc_info.value.errors) == {"brand"}

    def test_rule_violation(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_car_update({"price": 1, "quantity": -1})
        assert exc_info.value.errors["quantity"]["ruleName"] == "greater_than_equal"

    def test_numbers_are_not_coerced(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_car_update({"price": "19000", "quantity": True, "year": "2021"})
        assert set(exc_info.value.errors) == {"price", "quantity", "year"}


class TestValidateOrder:

    def test_valid_order(self):
        car_id = uuid4()
        order = validate_order({"email": "Buyer@Example.com", "car": str(car_id), "quantity": 2})

        assert order.car_id == car_id
        assert order.email == "buyer@example.com"
        assert order.quantity == 2

    def test_invalid_order(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_order({"email": "not-an-email", "car": "abc", "quantity": 0})

        errors = exc_info.value.errors
        assert errors["email"]["ruleName"] == "string_pattern_mismatch"
        assert errors["car"]["ruleName"] == "uuid_parsing"
        assert errors["quantity"]["ruleName"] == "greater_than_equal"

    @pytest.mark.parametrize("quantity", ["2", True, 1.5])
    def test_quantity_must_be_integer(self, quantity):
        with pytest.raises(ValidationError) as exc_info:
            validate_order({"email": "a@b.co", "car": str(uuid4()), "quantity": quantity})
        assert list(exc_info.value.errors) == ["quantity"]


def test_field_errors_keeps_first_error_per_path():
    details = field_errors([
        {"loc": ("price",), "msg": "first", "type": "a"},
        {"loc": ("price",), "msg": "second", "type": "b"},
        {"loc": ("specs", 0, "name"), "msg": "nested", "type": "c"},
        {"loc": (), "msg": "shape", "type": "model_type"},
    ])

    assert details == {
        "price": {"message": "first", "ruleName": "a"},
        "specs.0.name": {"message": "nested", "ruleName": "c"},
        "body": {"message": "shape", "ruleName": "model_type"},
    }
