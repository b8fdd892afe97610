"""
Derived dashboard values.

Pure functions over already-fetched collections. Nothing here is cached;
callers recompute on every read so the numbers never lag the collections.
"""
from dataclasses import dataclass

from .models import OrderStatus

LOW_STOCK_THRESHOLD = 5


def line_total(line):
    """price x qty for one cart line; a missing product or price counts as 0."""
    product = getattr(line, "product", None)
    price = getattr(product, "price", None) if product is not None else None
    if price is None:
        return 0
    return price * (line.qty or 0)


def cart_total(cart):
    if not cart:
        return 0
    return sum(line_total(line) for line in cart)


def cart_item_count(cart):
    """Number of distinct lines in the cart, not the sum of quantities."""
    return len(cart) if cart else 0


def active_cart_count(users):
    return sum(1 for user in users if user.cart_data)


def potential_revenue(users):
    return sum(cart_total(user.cart_data) for user in users)


def pending_order_count(orders):
    return sum(1 for order in orders if order.status == OrderStatus.PENDING)


def low_stock_count(inventory, threshold=LOW_STOCK_THRESHOLD):
    return sum(1 for item in inventory if item.stock < threshold)


@dataclass(frozen=True)
class DashboardStats:
    registered_users: int
    active_carts: int
    potential_revenue: float
    pending_orders: int
    low_stock_products: int


def dashboard_stats(inventory, users, orders):
    return DashboardStats(
        registered_users=len(users),
        active_carts=active_cart_count(users),
        potential_revenue=potential_revenue(users),
        pending_orders=pending_order_count(orders),
        low_stock_products=low_stock_count(inventory),
    )
