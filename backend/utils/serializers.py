"""
ORM → JSON-ready dict conversion for API responses.

Only attributes that are eagerly loaded (columns or selectin relationships)
are read here.
"""
from datetime import datetime
from typing import Optional

from db_models import Address, Cart, Category, Order, Payment, Product, Review


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def category_dict(category: Category, product_count: Optional[int] = None) -> dict:
    data = {
        "id": category.id,
        "name": category.name,
        "description": category.description,
        "created_at": _iso(category.created_at),
    }
    if product_count is not None:
        data["product_count"] = product_count
    return data


def product_dict(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "stock_quantity": product.stock_quantity,
        "image_url": product.image_url,
        "sku": product.sku,
        "active": product.active,
        "category_id": product.category_id,
        "category_name": product.category.name if product.category else None,
        "created_at": _iso(product.created_at),
        "updated_at": _iso(product.updated_at),
    }


def cart_dict(cart: Cart) -> dict:
    return {
        "id": cart.id,
        "user_id": cart.user_id,
        "items": [
            {
                "id": item.id,
                "product_id": item.product.id,
                "product_name": item.product.name,
                "product_image_url": item.product.image_url,
                "price": item.product.price,
                "quantity": item.quantity,
                "subtotal": item.subtotal,
                "available_stock": item.product.stock_quantity,
            }
            for item in cart.items
        ],
        "total_amount": cart.total_amount,
        "total_items": cart.total_items,
    }


def address_dict(address: Address) -> dict:
    return {
        "id": address.id,
        "street": address.street,
        "number": address.number,
        "complement": address.complement,
        "neighborhood": address.neighborhood,
        "city": address.city,
        "state": address.state,
        "zip_code": address.zip_code,
        "is_default": address.is_default,
        "created_at": _iso(address.created_at),
    }


def order_dict(order: Order) -> dict:
    return {
        "id": order.id,
        "order_number": order.order_number,
        "user_id": order.user_id,
        "status": order.status,
        "total_amount": order.total_amount,
        "shipping_address": address_dict(order.shipping_address) if order.shipping_address else None,
        "items": [
            {
                "id": item.id,
                "product_id": item.product_id,
                "product_name": item.product.name if item.product else None,
                "quantity": item.quantity,
                "price": item.price,
                "subtotal": item.subtotal,
            }
            for item in order.items
        ],
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
    }


def payment_dict(payment: Payment) -> dict:
    return {
        "id": payment.id,
        "order_id": payment.order_id,
        "payment_method": payment.payment_method,
        "status": payment.status,
        "transaction_id": payment.transaction_id,
        "paid_at": _iso(payment.paid_at),
        "created_at": _iso(payment.created_at),
    }


def review_dict(review: Review) -> dict:
    return {
        "id": review.id,
        "product_id": review.product_id,
        "user_id": review.user_id,
        "user_name": review.user.name if review.user else None,
        "rating": review.rating,
        "comment": review.comment,
        "created_at": _iso(review.created_at),
    }
