"""
Remote data gateway: every call the dashboard makes to the backend.

Wraps the aws_lib clients for the document store (DynamoDB), the image
host (S3) and the identity provider (Cognito). Store and transport errors
surface as GatewayError, identity errors as AuthError.
"""
import logging
import mimetypes
import os
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as RecordError

import aws_config
from .errors import AuthError, GatewayError
from .models import Identity, InventoryItem, Order, OrderStatus, UserProfile

logger = logging.getLogger(__name__)

AWS_ERRORS = (ClientError, BotoCoreError)


def _now():
    return datetime.now(timezone.utc).isoformat()


def _timestamp(value):
    """Sort key for created_at: epoch seconds, 0 when missing or unparseable."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        seconds = float(value)
        # storefront clients write Date.now() milliseconds
        return seconds / 1000 if seconds > 1e11 else seconds
    try:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def _newest_first(docs):
    return sorted(docs, key=lambda d: _timestamp(d.get("created_at")), reverse=True)



def _parse_many(record, docs, collection):
    parsed = []
    for doc in docs:
        try:
            parsed.append(record.model_validate(doc))
        except RecordError as e:
            logger.warning("Skipping malformed %s document %r: %s",
                           collection, doc.get("id", doc.get("user_id")), e)
    return parsed


def normalize_delivery_date(value):
    """Blank strings become None; dates become ISO strings."""
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    value = str(value).strip()
    return value or None


class RemoteDataGateway:
    def __init__(self, ddb, s3, cognito, inventory_table=aws_config.INVENTORY_TABLE,
                 profiles_table=aws_config.PROFILES_TABLE, carts_table=aws_config.CARTS_TABLE,
                 orders_table=aws_config.ORDERS_TABLE, image_bucket=aws_config.PRODUCT_IMAGE_BUCKET):
        self.ddb = ddb
        self.s3 = s3
        self.cognito = cognito
        self.inventory_table = inventory_table
        self.profiles_table = profiles_table
        self.carts_table = carts_table
        self.orders_table = orders_table
        self.image_bucket = image_bucket

    def _call(self, operation, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except AWS_ERRORS as e:
            logger.debug("%s failed", operation, exc_info=True)
            raise GatewayError(operation, str(e)) from e

    # -- inventory ---------------------------------------------------------

    def list_inventory(self):
        docs = self._call("list_inventory", self.ddb.scan, self.inventory_table)
        return _parse_many(InventoryItem, _newest_first(docs), "inventory")

    def insert_inventory_item(self, fields):
        item_id = str(uuid.uuid4())
        row = {
            "id": item_id,
            "name": fields["name"],
            "category": fields["category"],
            "price": fields["price"],
            "stock": fields["stock"],
            "image": fields.get("image") or "",
            "desc": fields.get("desc") or "",
            "discount": fields.get("discount") or "",
            "created_at": _now(),
        }
        self._call("insert_inventory_item", self.ddb.put, self.inventory_table, row)
        logger.info("Inserted inventory item %s (%s)", item_id, row["name"])
        return item_id

    def delete_inventory_item(self, item_id):
        self._call("delete_inventory_item", self.ddb.delete,
                   self.inventory_table, {"id": item_id})
        logger.info("Deleted inventory item %s", item_id)

    # -- customers ---------------------------------------------------------

    def list_users_with_carts(self):
        profiles = self._call("list_users_with_carts", self.ddb.scan, self.profiles_table)
        carts = self._call("list_users_with_carts", self.ddb.scan, self.carts_table)
        carts_by_user = {c.get("user_id"): c for c in carts if c.get("user_id") is not None}

        joined = []
        for profile in profiles:
            doc = dict(profile)
            cart = carts_by_user.get(profile.get("user_id"))
            if cart is None:
                doc["cart_data"] = []
            else:
                doc["cart_data"] = cart.get("cart_data") or cart.get("items") or []
                doc["updated_at"] = cart.get("updated_at") or profile.get("updated_at")
            joined.append(doc)
        return _parse_many(UserProfile, joined, "profiles")

    # -- orders ------------------------------------------------------------

    def list_orders(self):
        docs = self._call("list_orders", self.ddb.scan, self.orders_table)
        return _parse_many(Order, _newest_first(docs), "orders")

    def update_order_status(self, order_id, new_status, delivery_date=None):
        values = {
            "status": OrderStatus(new_status).value,
            # a blank string is not a date; the store rejects it
            "delivery_date": normalize_delivery_date(delivery_date),
        }
        self._call("update_order_status", self.ddb.update,
                   self.orders_table, {"id": order_id}, values)
        logger.info("Order %s -> %s (delivery %s)", order_id, values["status"], values["delivery_date"])
        return values

    def delete_order(self, order_id):
        self._call("delete_order", self.ddb.delete, self.orders_table, {"id": order_id})
        logger.info("Deleted order %s", order_id)

    # -- images ------------------------------------------------------------

    def upload_product_image(self, data, filename=None, content_type=None):
        if not data:
            raise GatewayError("upload_product_image", "empty image")
        ext = os.path.splitext(filename)[1].lower() if filename else ""
        if content_type is None:
            content_type = (mimetypes.guess_type(filename)[0] if filename else None) or "application/octet-stream"
        key = f"products/{uuid.uuid4()}{ext}"
        url = self._call("upload_product_image", self.s3.put_bytes,
                         self.image_bucket, key, data, content_type)
        logger.info("Uploaded product image to %s", url)
        return url

    # -- identity ----------------------------------------------------------

    def sign_in(self, username, password):
        if not username or not password:
            raise AuthError("Sign-in cancelled")
        try:
            result = self.cognito.initiate_auth(username, password)
            token = result.get("AccessToken")
            if not token:
                raise AuthError("Identity provider did not issue a session")
            name, attrs = self.cognito.get_user_attributes(token)
        except AWS_ERRORS as e:
            raise AuthError(f"Sign-in failed: {e}") from e
        return Identity(username=name or username, email=attrs.get("email"), access_token=token)

    def sign_out(self, identity):
        if identity is None or not identity.access_token:
            return
        try:
            self.cognito.global_sign_out(identity.access_token)
        except AWS_ERRORS:
            logger.warning("Global sign-out failed for %s", identity.username, exc_info=True)


def build_gateway(session_factory=None):
    """Gateway wired to the configured AWS account."""
    return RemoteDataGateway(
        aws_config.dynamodb_client(session_factory),
        aws_config.s3_client(session_factory),
        aws_config.cognito_client(session_factory),
    )
