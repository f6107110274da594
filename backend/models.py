"""
Pydantic models for request validation.

Field names are snake_case; camelCase aliases are accepted as well.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from domain.constants import MIN_RATING, MAX_RATING
from domain.enums import PaymentMethod


class ApiModel(BaseModel):
    """Shared base — allows construction by Python name or alias."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


# ── Catalog ─────────────────────────────────────────────────────────

class CategoryRequest(ApiModel):
    """Create or replace a category."""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)


class ProductCreateRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    price: float = Field(..., gt=0)
    stock_quantity: int = Field(..., alias="stockQuantity", ge=0)
    image_url: Optional[str] = Field(default=None, alias="imageUrl", max_length=500)
    sku: str = Field(..., min_length=1, max_length=50)
    category_id: int = Field(..., alias="categoryId", gt=0)
    active: bool = True


class ProductUpdateRequest(ApiModel):
    """Full replacement of a product's editable fields (SKU excluded)."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    price: float = Field(..., gt=0)
    stock_quantity: int = Field(..., alias="stockQuantity", ge=0)
    image_url: Optional[str] = Field(default=None, alias="imageUrl", max_length=500)
    category_id: int = Field(..., alias="categoryId", gt=0)
    active: bool = True


# ── Cart ────────────────────────────────────────────────────────────

class AddToCartRequest(ApiModel):
    product_id: int = Field(..., alias="productId", gt=0)
    quantity: int = Field(1, ge=1, le=100)


class UpdateCartItemRequest(ApiModel):
    quantity: int = Field(..., ge=1, le=100)


# ── Addresses ───────────────────────────────────────────────────────

class AddressRequest(ApiModel):
    """Create or replace a shipping address."""
    street: str = Field(..., min_length=1, max_length=200)
    number: str = Field(..., min_length=1, max_length=20)
    complement: Optional[str] = Field(default=None, max_length=100)
    neighborhood: str = Field(..., min_length=1, max_length=100)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=2, max_length=2, description="Two-letter state code")
    zip_code: str = Field(..., alias="zipCode", min_length=8, max_length=9)
    is_default: bool = Field(False, alias="isDefault")


# ── Orders & Payments ───────────────────────────────────────────────

class CreateOrderRequest(ApiModel):
    shipping_address_id: int = Field(..., alias="shippingAddressId", gt=0)


class ProcessPaymentRequest(ApiModel):
    order_id: int = Field(..., alias="orderId", gt=0)
    payment_method: PaymentMethod = Field(..., alias="paymentMethod")
    card_number: Optional[str] = Field(
        default=None,
        alias="cardNumber",
        max_length=25,
        description="Required for CREDIT_CARD / DEBIT_CARD",
    )


# ── Reviews ─────────────────────────────────────────────────────────

class ReviewRequest(ApiModel):
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: Optional[str] = Field(default=None, max_length=1000)
