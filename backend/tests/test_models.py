"""
Tests for Pydantic request models.

Tests: field constraints, camelCase aliases, defaults.
"""

import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest
from pydantic import ValidationError
from domain.enums import PaymentMethod
from models import (
    AddToCartRequest,
    AddressRequest,
    ProcessPaymentRequest,
    ProductCreateRequest,
    ReviewRequest,
)


class TestAddToCartRequest:

    @pytest.mark.unit
    def test_alias_and_python_name(self):
        assert AddToCartRequest(productId=3).product_id == 3
        assert AddToCartRequest(product_id=3, quantity=2).quantity == 2

    @pytest.mark.unit
    def test_default_quantity(self):
        assert AddToCartRequest(product_id=1).quantity == 1

    @pytest.mark.unit
    @pytest.mark.parametrize("quantity", [0, -1, 101])
    def test_quantity_bounds(self, quantity):
        with pytest.raises(ValidationError):
            AddToCartRequest(product_id=1, quantity=quantity)


class TestProductCreateRequest:

    @pytest.mark.unit
    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            ProductCreateRequest(name="X", price=0, stock_quantity=1, sku="X-1", category_id=1)

    @pytest.mark.unit
    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            ProductCreateRequest(name="X", price=1, stock_quantity=-1, sku="X-1", category_id=1)

    @pytest.mark.unit
    def test_active_by_default(self):
        req = ProductCreateRequest(name="X", price=1, stockQuantity=0, sku="X-1", categoryId=1)
        assert req.active is True


class TestProcessPaymentRequest:

    @pytest.mark.unit
    def test_method_parsed_to_enum(self):
        req = ProcessPaymentRequest(orderId=1, paymentMethod="PIX")
        assert req.payment_method is PaymentMethod.PIX
        assert req.card_number is None

    @pytest.mark.unit
    def test_unknown_method_rejected(self):
        with pytest.raises(ValidationError):
            ProcessPaymentRequest(order_id=1, payment_method="CRYPTO")

    @pytest.mark.unit
    def test_extra_card_fields_are_dropped(self):
        req = ProcessPaymentRequest(
            orderId=1, paymentMethod="CREDIT_CARD", cardNumber="4111111111111111", cvv="123"
        )
        assert req.card_number == "4111111111111111"
        assert "cvv" not in req.model_dump()


class TestAddressRequest:

    @pytest.mark.unit
    def test_default_flag(self):
        req = AddressRequest(
            street="Rua A", number="1", neighborhood="B", city="C", state="SP", zipCode="01001000"
        )
        assert req.is_default is False
        assert req.complement is None

    @pytest.mark.unit
    def test_state_length(self):
        with pytest.raises(ValidationError):
            AddressRequest(
                street="Rua A", number="1", neighborhood="B", city="C", state="SPX", zip_code="01001000"
            )


class TestReviewRequest:

    @pytest.mark.unit
    @pytest.mark.parametrize("rating", [1, 5])
    def test_rating_bounds_inclusive(self, rating):
        assert ReviewRequest(rating=rating).rating == rating

    @pytest.mark.unit
    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, rating):
        with pytest.raises(ValidationError):
            ReviewRequest(rating=rating)

    @pytest.mark.unit
    def test_comment_length(self):
        with pytest.raises(ValidationError):
            ReviewRequest(rating=3, comment="x" * 1001)
