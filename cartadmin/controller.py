"""
Dashboard controller.

Owns the fetched collections, the active tab, the open detail views and
the notification slot. Everything runs on one asyncio loop. Gateway calls
are blocking boto3 round-trips, so they run on a worker thread and the
loop keeps serving operator input meanwhile. The periodic refresh is a
single task that lives only while the session gate is authorized.
"""
import asyncio
import logging
from dataclasses import dataclass

import aws_config
from .errors import AuthError, GatewayError, InvalidTransition, ValidationError
from .forms import OrderStatusForm, ProductForm, validated
from .gateway import normalize_delivery_date
from .metrics import dashboard_stats
from .models import InventoryItem, OrderStatus, can_transition
from .state import TAB_KEY

logger = logging.getLogger(__name__)

TABS = ("inventory", "customers", "orders")
DEFAULT_TAB = "inventory"


@dataclass(frozen=True)
class Notification:
    kind: str
    message: str


class Notifier:
    """
    One transient notification at a time. Showing a new one replaces the
    current one and restarts the dismissal timer.
    """

    def __init__(self, timeout=aws_config.NOTIFICATION_TIMEOUT):
        self.timeout = timeout
        self.current = None
        self._handle = None

    def show(self, kind, message):
        self._cancel()
        notification = Notification(kind, message)
        self.current = notification
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._handle = loop.call_later(self.timeout, self._expire, notification)
        return notification

    def success(self, message):
        return self.show("success", message)

    def warning(self, message):
        return self.show("warning", message)

    def error(self, message):
        return self.show("error", message)

    def dismiss(self):
        self._cancel()
        self.current = None

    def _cancel(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _expire(self, notification):
        if self.current is notification:
            self.current = None
            self._handle = None


def _decline(message):
    return False


async def _call(fn, *args):
    return await asyncio.to_thread(fn, *args)


class DashboardController:
    def __init__(self, gateway, gate, store, confirm=_decline, notifier=None,
                 refresh_interval=aws_config.REFRESH_INTERVAL):
        self.gateway = gateway
        self.gate = gate
        self.store = store
        # confirm(message) -> bool, asked before anything destructive
        self.confirm = confirm
        self.notifier = notifier or Notifier()
        self.refresh_interval = refresh_interval

        self.inventory = []
        self.users = []
        self.orders = []
        self.active_tab = DEFAULT_TAB
        self.selected_user = None
        self.selected_order = None

        self._timer = None
        self._unsubscribe = gate.subscribe(self._on_session_change)

    # -- lifecycle ---------------------------------------------------------

    @property
    def polling(self):
        return self._timer is not None and not self._timer.done()

    async def start(self):
        if not self.gate.is_authorized:
            logger.info("Not starting dashboard: no admin session")
            return False
        self.active_tab = self._restore_tab()
        await self.refresh()
        if not self.polling:
            self._timer = asyncio.get_running_loop().create_task(self._poll())
            logger.info("Refreshing every %ss", self.refresh_interval)
        return True

    async def stop(self):
        timer = self._cancel_timer()
        if timer is not None:
            try:
                await timer
            except asyncio.CancelledError:
                pass

    async def close(self):
        await self.stop()
        self._unsubscribe()
        self.notifier.dismiss()

    async def sign_in(self, username, password):
        try:
            admitted = self.gate.sign_in(username, password)
        except AuthError as e:
            self.notifier.error(f"Sign-in failed: {e}")
            return False
        if not admitted:
            self.notifier.error("This account is not allowed to manage the store.")
            return False
        return await self.start()

    async def sign_out(self):
        self.gate.sign_out()
        await self.stop()

    def _on_session_change(self, authorized):
        if not authorized:
            self._cancel_timer()
            self.inventory, self.users, self.orders = [], [], []
            self.selected_user = None
            self.selected_order = None

    def _cancel_timer(self):
        timer, self._timer = self._timer, None
        if timer is not None and not timer.done():
            timer.cancel()
            logger.info("Stopped periodic refresh")
            return timer
        return None

    async def _poll(self):
        while True:
            await asyncio.sleep(self.refresh_interval)
            try:
                await self.refresh()
            except Exception:
                logger.exception("Periodic refresh failed")

    # -- tabs --------------------------------------------------------------

    def _restore_tab(self):
        tab = self.store.get(TAB_KEY)
        return tab if tab in TABS else DEFAULT_TAB

    def select_tab(self, tab):
        if tab not in TABS:
            raise ValueError(f"Unknown tab: {tab!r}")
        self.active_tab = tab
        self.store.set(TAB_KEY, tab)

    # -- reads -------------------------------------------------------------

    async def _fetch(self, attr, loader):
        if not self.gate.is_authorized:
            return False
        try:
            data = await _call(loader)
        except GatewayError as e:
            logger.warning("Refreshing %s failed, keeping current view: %s", attr, e)
            return False
        # the session may have ended while the call was in flight
        if not self.gate.is_authorized:
            return False
        setattr(self, attr, list(data))
        return True

    async def refresh_inventory(self):
        return await self._fetch("inventory", self.gateway.list_inventory)

    async def refresh_customers(self):
        return await self._fetch("users", self.gateway.list_users_with_carts)

    async def refresh_orders(self):
        return await self._fetch("orders", self.gateway.list_orders)

    async def refresh(self):
        results = [
            await self.refresh_inventory(),
            await self.refresh_customers(),
            await self.refresh_orders(),
        ]
        return all(results)

    @property
    def stats(self):
        return dashboard_stats(self.inventory, self.users, self.orders)

    # -- inventory ---------------------------------------------------------

    async def add_product(self, data, image=None, filename=None):
        """
        Validate and insert a product. An uploaded image wins over the
        manual image link; if the upload fails the link is used instead.
        Returns the new id, or None.
        """
        self.gate.require()
        try:
            fields = dict(validated(ProductForm(data)))
        except ValidationError as e:
            self.notifier.error(f"Invalid product: {e}")
            return None

        image_warning = None
        if image:
            try:
                fields["image"] = await _call(self.gateway.upload_product_image, image, filename)
            except GatewayError as e:
                logger.warning("Image upload failed, using manual link %r: %s", fields["image"], e)
                if not fields["image"]:
                    image_warning = f"{fields['name']} added without an image: upload failed"

        try:
            item_id = await _call(self.gateway.insert_inventory_item, fields)
        except GatewayError as e:
            logger.error("Adding product %s failed: %s", fields["name"], e)
            self.notifier.error(f"Error adding product: {e.message}")
            return None

        item = InventoryItem(id=item_id, **fields)
        self.inventory = [item] + [i for i in self.inventory if i.id != item.id]
        await self.refresh_inventory()
        if image_warning:
            self.notifier.warning(image_warning)
        else:
            self.notifier.success(f"{item.name} added to the live catalog")
        return item_id

    async def scrap_product(self, item_id):
        self.gate.require()
        item = next((i for i in self.inventory if i.id == item_id), None)
        label = item.name if item else item_id
        if not self.confirm(f"Scrap {label}? This cannot be undone."):
            return False
        try:
            await _call(self.gateway.delete_inventory_item, item_id)
        except GatewayError as e:
            logger.error("Scrapping %s failed: %s", item_id, e)
            self.notifier.error(f"Could not scrap {label}: {e.message}")
            return False
        self.inventory = [i for i in self.inventory if i.id != item_id]
        await self.refresh_inventory()
        self.notifier.success(f"{label} scrapped")
        return True

    # -- customers ---------------------------------------------------------

    def inspect_cart(self, user_id):
        user = next((u for u in self.users if u.user_id == user_id), None)
        if user is None or not user.has_cart:
            return None
        self.selected_user = user
        return user

    def close_cart(self):
        self.selected_user = None

    # -- orders ------------------------------------------------------------

    def _order(self, order_id):
        return next((o for o in self.orders if o.id == order_id), None)

    def open_manifest(self, order_id):
        self.selected_order = self._order(order_id)
        return self.selected_order

    def close_manifest(self):
        self.selected_order = None

    async def set_order_status(self, order_id, status, delivery_date=None):
        self.gate.require()
        order = self._order(order_id)
        if order is None:
            self.notifier.error(f"Order {order_id} is not loaded")
            return False
        try:
            cleaned = validated(OrderStatusForm({
                "status": getattr(status, "value", status),
                "delivery_date": delivery_date if delivery_date is not None else "",
            }))
            target = OrderStatus(cleaned["status"])
            if not can_transition(order.status, target):
                raise InvalidTransition(OrderStatus(order.status).value, target.value)
        except ValidationError as e:
            self.notifier.error(str(e))
            return False

        if target is OrderStatus.REJECTED and not self.confirm(
                f"Reject order {order_id}? The customer will see it as rejected."):
            return False

        new_date = normalize_delivery_date(cleaned["delivery_date"])
        try:
            await _call(self.gateway.update_order_status, order_id, target.value, new_date)
        except GatewayError as e:
            logger.error("Updating order %s failed: %s", order_id, e)
            self.notifier.error(f"Could not update order: {e.message}")
            return False

        updated = order.model_copy(update={"status": target, "delivery_date": new_date})
        self.orders = [updated if o.id == order_id else o for o in self.orders]
        if self.selected_order is not None and self.selected_order.id == order_id:
            self.selected_order = updated
        await self.refresh_orders()
        self.notifier.success(f"Order {order_id} marked {target.value}")
        return True

    async def confirm_order(self, order_id, delivery_date):
        return await self.set_order_status(order_id, OrderStatus.CONFIRMED, delivery_date)

    async def ship_order(self, order_id):
        order = self._order(order_id)
        return await self.set_order_status(order_id, OrderStatus.SHIPPED,
                                           order.delivery_date if order else None)

    async def deliver_order(self, order_id):
        order = self._order(order_id)
        return await self.set_order_status(order_id, OrderStatus.DELIVERED,
                                           order.delivery_date if order else None)

    async def reject_order(self, order_id):
        return await self.set_order_status(order_id, OrderStatus.REJECTED)

    async def purge_order(self, order_id):
        """Hard-delete an order from the store."""
        self.gate.require()
        if not self.confirm(f"Permanently delete order {order_id}?"):
            return False
        try:
            await _call(self.gateway.delete_order, order_id)
        except GatewayError as e:
            logger.error("Deleting order %s failed: %s", order_id, e)
            self.notifier.error(f"Could not delete order: {e.message}")
            return False
        self.orders = [o for o in self.orders if o.id != order_id]
        if self.selected_order is not None and self.selected_order.id == order_id:
            self.selected_order = None
        await self.refresh_orders()
        self.notifier.success(f"Order {order_id} purged")
        return True
