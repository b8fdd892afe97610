import pytest
from botocore.exceptions import ClientError

from cartadmin.app import configure

configure()

from aws_lib.cognito_client import CognitoClient  # noqa: E402
from aws_lib.dynamodb_client import DynamoDBClient  # noqa: E402
from aws_lib.s3_client import S3Client  # noqa: E402
from cartadmin.errors import AuthError, GatewayError  # noqa: E402
from cartadmin.gateway import RemoteDataGateway  # noqa: E402
from cartadmin.models import Identity, InventoryItem, Order, OrderStatus, UserProfile  # noqa: E402

ADMIN = "admin@circuitcart.in"


def client_error(code, operation="Operation", message="boom"):
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


# ---------------------------------------------------------------------------
# boto3-shaped fakes
# ---------------------------------------------------------------------------

class FakeTable:
    def __init__(self, name, key, exists=True, page_size=None):
        self.name = name
        self.key = key
        self.exists = exists
        self.page_size = page_size
        self.items = {}
        self.calls = []

    def _missing(self, key):
        return key[self.key] not in self.items

    def load(self):
        if not self.exists:
            raise client_error("ResourceNotFoundException", "DescribeTable")

    def wait_until_exists(self):
        self.exists = True

    def scan(self, **kwargs):
        self.calls.append(("scan", kwargs))
        rows = list(self.items.values())
        start = 0
        if "ExclusiveStartKey" in kwargs:
            last = kwargs["ExclusiveStartKey"][self.key]
            start = [r[self.key] for r in rows].index(last) + 1
        if self.page_size is None:
            return {"Items": rows[start:]}
        page = rows[start:start + self.page_size]
        resp = {"Items": page}
        if start + self.page_size < len(rows):
            resp["LastEvaluatedKey"] = {self.key: page[-1][self.key]}
        return resp

    def put_item(self, Item):
        self.calls.append(("put_item", Item))
        self.items[Item[self.key]] = dict(Item)
        return {}

    def get_item(self, Key):
        item = self.items.get(Key[self.key])
        return {"Item": item} if item else {}

    def update_item(self, Key, UpdateExpression, ConditionExpression,
                    ExpressionAttributeNames, ExpressionAttributeValues):
        self.calls.append(("update_item", Key, ExpressionAttributeNames, ExpressionAttributeValues))
        if self._missing(Key):
            raise client_error("ConditionalCheckFailedException", "UpdateItem")
        item = self.items[Key[self.key]]
        for alias, field in ExpressionAttributeNames.items():
            if alias.startswith("#f"):
                item[field] = ExpressionAttributeValues[":v" + alias[2:]]
        return {}

    def delete_item(self, Key, ConditionExpression, ExpressionAttributeNames):
        self.calls.append(("delete_item", Key, ConditionExpression))
        if self._missing(Key):
            raise client_error("ConditionalCheckFailedException", "DeleteItem")
        del self.items[Key[self.key]]
        return {}


class FakeDynamoResource:
    def __init__(self):
        self.tables = {}
        self.created = []

    def add_table(self, name, key, **kwargs):
        self.tables[name] = FakeTable(name, key, **kwargs)
        return self.tables[name]

    def Table(self, name):
        if name not in self.tables:
            return FakeTable(name, "id", exists=False)
        return self.tables[name]

    def create_table(self, TableName, AttributeDefinitions, KeySchema, BillingMode):
        self.created.append(TableName)
        table = self.add_table(TableName, KeySchema[0]["AttributeName"], exists=False)
        return table


class FakeS3:
    def __init__(self):
        self.objects = {}
        self.buckets = []
        self.created = []
        self.fail = False

    def put_object(self, Bucket, Key, Body, ContentType):
        if self.fail:
            raise client_error("AccessDenied", "PutObject")
        self.objects[(Bucket, Key)] = (Body, ContentType)
        return {}

    def list_buckets(self):
        return {"Buckets": [{"Name": b} for b in self.buckets]}

    def create_bucket(self, Bucket, **kwargs):
        self.created.append((Bucket, kwargs))
        self.buckets.append(Bucket)


class FakeCognito:
    def __init__(self):
        # username -> (password, email)
        self.users = {}
        self.signed_out = []

    def initiate_auth(self, ClientId, AuthFlow, AuthParameters):
        username = AuthParameters["USERNAME"]
        record = self.users.get(username)
        if record is None or record[0] != AuthParameters["PASSWORD"]:
            raise client_error("NotAuthorizedException", "InitiateAuth")
        return {"AuthenticationResult": {"AccessToken": f"token-{username}"}}

    def get_user(self, AccessToken):
        username = AccessToken[len("token-"):]
        return {
            "Username": username,
            "UserAttributes": [{"Name": "email", "Value": self.users[username][1]}],
        }

    def global_sign_out(self, AccessToken):
        self.signed_out.append(AccessToken)
        return {}


class FakeSession:
    def __init__(self):
        self.dynamodb = FakeDynamoResource()
        self.s3 = FakeS3()
        self.cognito = FakeCognito()

    def resource(self, service_name, **kwargs):
        assert service_name == "dynamodb"
        return self.dynamodb

    def client(self, service_name, **kwargs):
        return {"s3": self.s3, "cognito-idp": self.cognito}[service_name]


@pytest.fixture
def aws():
    session = FakeSession()
    for name, key in (("inventory", "id"), ("profiles", "user_id"),
                      ("carts", "user_id"), ("orders", "id")):
        session.dynamodb.add_table(name, key)
    return session


@pytest.fixture
def gateway(aws):
    factory = lambda: aws  # noqa: E731
    return RemoteDataGateway(
        DynamoDBClient(session_factory=factory),
        S3Client(region_name="ap-south-1", session_factory=factory),
        CognitoClient("test-client", session_factory=factory),
        inventory_table="inventory",
        profiles_table="profiles",
        carts_table="carts",
        orders_table="orders",
        image_bucket="cc-images",
    )


# ---------------------------------------------------------------------------
# In-memory gateway for the session gate and controller
# ---------------------------------------------------------------------------

class FakeGateway:
    def __init__(self, inventory=(), users=(), orders=()):
        self.inventory = [InventoryItem.model_validate(i) for i in inventory]
        self.users = [UserProfile.model_validate(u) for u in users]
        self.orders = [Order.model_validate(o) for o in orders]
        self.identities = {}
        self.fail = set()
        self.calls = []
        self.signed_out = []

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail:
            raise GatewayError(name, "backend unavailable")

    def reads(self):
        return [c[0] for c in self.calls if c[0].startswith("list_")]

    def list_inventory(self):
        self._record("list_inventory")
        return list(self.inventory)

    def list_users_with_carts(self):
        self._record("list_users_with_carts")
        return list(self.users)

    def list_orders(self):
        self._record("list_orders")
        return list(self.orders)

    def insert_inventory_item(self, fields):
        self._record("insert_inventory_item", fields)
        item_id = f"item-{len(self.inventory) + 1}"
        self.inventory.insert(0, InventoryItem(id=item_id, **fields))
        return item_id

    def delete_inventory_item(self, item_id):
        self._record("delete_inventory_item", item_id)
        self.inventory = [i for i in self.inventory if i.id != item_id]

    def update_order_status(self, order_id, status, delivery_date=None):
        self._record("update_order_status", order_id, status, delivery_date)
        self.orders = [
            o.model_copy(update={"status": OrderStatus(status), "delivery_date": delivery_date}) if o.id == order_id else o
            for o in self.orders
        ]

    def delete_order(self, order_id):
        self._record("delete_order", order_id)
        self.orders = [o for o in self.orders if o.id != order_id]

    def upload_product_image(self, data, filename=None):
        self._record("upload_product_image", filename)
        return f"https://cdn.example/{filename}"

    def sign_in(self, username, password):
        if username not in self.identities:
            raise AuthError("Sign-in cancelled")
        return Identity(username=username, email=self.identities[username],
                        access_token=f"token-{username}")

    def sign_out(self, identity):
        self.signed_out.append(identity.username)
