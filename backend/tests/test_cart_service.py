"""
Unit tests for cart service.

Tests get-or-create, line merging with stock re-check, item ownership,
removal and clearing.
"""
import pytest

from domain.errors import BusinessRuleError, NotFoundError, PermissionDeniedError
from services import cart_service, catalog_service


@pytest.mark.asyncio
async def test_get_or_create_cart_is_idempotent(db_session, customer):
    first = await cart_service.get_or_create_cart(db_session, customer.id)
    second = await cart_service.get_or_create_cart(db_session, customer.id)
    assert first.id == second.id
    assert first.items == []


@pytest.mark.asyncio
async def test_cart_for_unknown_user(db_session):
    with pytest.raises(NotFoundError):
        await cart_service.get_or_create_cart(db_session, 4242)


@pytest.mark.asyncio
async def test_add_to_cart_and_totals(db_session, customer, product, second_product):
    await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=product.id, quantity=2)
    cart = await cart_service.add_to_cart(
        db_session, user_id=customer.id, product_id=second_product.id, quantity=1
    )
    await db_session.commit()

    assert len(cart.items) == 2
    assert cart.total_items == 3
    assert cart.total_amount == pytest.approx(49.90 * 2 + 199.99)


@pytest.mark.asyncio
async def test_add_same_product_merges_lines(db_session, customer, product):
    await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=product.id, quantity=2)
    cart = await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=product.id, quantity=3)

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 5


@pytest.mark.asyncio
async def test_merge_rechecks_stock_against_sum(db_session, customer, product):
    await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=product.id, quantity=6)
    with pytest.raises(BusinessRuleError) as exc_info:
        await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=product.id, quantity=5)
    assert exc_info.value.details["requested"] == 11

    cart = await cart_service.get_or_create_cart(db_session, customer.id)
    assert cart.items[0].quantity == 6


@pytest.mark.asyncio
async def test_add_more_than_stock_rejected(db_session, customer, product):
    with pytest.raises(BusinessRuleError) as exc_info:
        await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=product.id, quantity=11)
    assert "Insufficient stock" in exc_info.value.message


@pytest.mark.asyncio
async def test_add_inactive_product_rejected(db_session, customer, product):
    await catalog_service.soft_delete_product(db_session, product_id=product.id)
    with pytest.raises(BusinessRuleError):
        await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=product.id, quantity=1)


@pytest.mark.asyncio
async def test_add_missing_product(db_session, customer):
    with pytest.raises(NotFoundError):
        await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=999, quantity=1)


@pytest.mark.asyncio
async def test_add_non_positive_quantity(db_session, customer, product):
    with pytest.raises(BusinessRuleError):
        await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=product.id, quantity=0)


@pytest.mark.asyncio
async def test_update_cart_item(db_session, customer, product):
    cart = await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=product.id, quantity=1)
    item_id = cart.items[0].id

    cart = await cart_service.update_cart_item(db_session, user_id=customer.id, item_id=item_id, quantity=4)
    assert cart.items[0].quantity == 4

    with pytest.raises(BusinessRuleError):
        await cart_service.update_cart_item(db_session, user_id=customer.id, item_id=item_id, quantity=50)


@pytest.mark.asyncio
async def test_foreign_cart_item_forbidden(db_session, customer, other_customer, product):
    cart = await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=product.id, quantity=1)
    item_id = cart.items[0].id
    await db_session.commit()

    with pytest.raises(PermissionDeniedError):
        await cart_service.update_cart_item(db_session, user_id=other_customer.id, item_id=item_id, quantity=2)
    with pytest.raises(PermissionDeniedError):
        await cart_service.remove_cart_item(db_session, user_id=other_customer.id, item_id=item_id)


@pytest.mark.asyncio
async def test_missing_cart_item(db_session, customer):
    with pytest.raises(NotFoundError):
        await cart_service.remove_cart_item(db_session, user_id=customer.id, item_id=777)


@pytest.mark.asyncio
async def test_remove_and_clear(db_session, customer, product, second_product):
    await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=product.id, quantity=1)
    cart = await cart_service.add_to_cart(
        db_session, user_id=customer.id, product_id=second_product.id, quantity=1
    )
    first_id = cart.items[0].id

    cart = await cart_service.remove_cart_item(db_session, user_id=customer.id, item_id=first_id)
    assert [i.product_id for i in cart.items] == [second_product.id]

    cart = await cart_service.clear_cart(db_session, user_id=customer.id)
    await db_session.commit()
    assert cart.items == []
    assert cart.total_amount == 0
