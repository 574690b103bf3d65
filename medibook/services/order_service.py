from medibook.domain import OrderLine
from medibook.errors import MediBookError
from medibook.logging_config import get_logger

logger = get_logger(__name__)

LOGIN_REQUIRED = "Please login to place an order."
ADDRESS_REQUIRED = "Please enter a shipping address."
CART_EMPTY = "Please add items to your cart before placing an order."
ORDER_FAILED = "An error occurred while placing your order. Please try again."


def order_lines(cart):
    return [
        OrderLine(
            medicine_id=item.medicine.id,
            medicine_name=item.medicine.name,
            quantity=item.quantity,
            price_per_unit=item.medicine.price,
            total_price=item.medicine.price * item.quantity,
        )
        for item in cart.items
    ]


def place_order(store, session_ctx, cart, shipping_address):
    """
    Turn the cart into an order for the signed-in user.

    Preconditions are checked before the store is touched. On success the
    cart is cleared. Returns (order_id, error_message).
    """
    if not session_ctx.is_authenticated:
        return None, LOGIN_REQUIRED

    shipping_address = (shipping_address or "").strip()
    if not shipping_address:
        return None, ADDRESS_REQUIRED

    if cart.is_empty():
        return None, CART_EMPTY

    try:
        order_id = store.create_order(
            session_ctx.identity,
            shipping_address,
            cart.total,
            order_lines(cart),
        )
    except MediBookError as e:
        logger.error("order_failed", user_id=session_ctx.identity, error=str(e))
        return None, ORDER_FAILED

    cart.clear()
    return order_id, None
