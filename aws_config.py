# aws_config.py
import os

from botocore.config import Config

from aws_lib.cognito_client import CognitoClient
from aws_lib.dynamodb_client import DynamoDBClient
from aws_lib.s3_client import S3Client

# -----------------------------
# AWS region & boto3 config
# -----------------------------
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")

# The dashboard never retries on its own; the operator re-clicks or waits
# for the next refresh tick.
boto3_config = Config(
    region_name=AWS_REGION,
    retries={"max_attempts": 1, "mode": "standard"}
)

# -----------------------------
# Store layout
# -----------------------------
INVENTORY_TABLE = os.getenv("DDB_INVENTORY_TABLE", "inventory")
PROFILES_TABLE = os.getenv("DDB_PROFILES_TABLE", "profiles")
CARTS_TABLE = os.getenv("DDB_CARTS_TABLE", "carts")
ORDERS_TABLE = os.getenv("DDB_ORDERS_TABLE", "orders")

# table name -> partition key
TABLE_KEYS = {
    INVENTORY_TABLE: "id",
    PROFILES_TABLE: "user_id",
    CARTS_TABLE: "user_id",
    ORDERS_TABLE: "id",
}

PRODUCT_IMAGE_BUCKET = os.getenv("S3_PRODUCT_IMAGE_BUCKET", "circuit-cart-product-images")

# -----------------------------
# Identity
# -----------------------------
COGNITO_CLIENT_ID = os.getenv("COGNITO_CLIENT_ID", "")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@circuitcart.in")

# -----------------------------
# Dashboard behaviour
# -----------------------------
STATE_FILE = os.getenv("DASHBOARD_STATE_FILE", os.path.expanduser("~/.circuit_cart_admin.json"))
REFRESH_INTERVAL = float(os.getenv("REFRESH_INTERVAL", "30"))
NOTIFICATION_TIMEOUT = float(os.getenv("NOTIFICATION_TIMEOUT", "3"))


# -----------------------------
# AWS clients/resources
# -----------------------------
def dynamodb_client(session_factory=None):
    return DynamoDBClient(AWS_REGION, config=boto3_config, session_factory=session_factory)

def s3_client(session_factory=None):
    return S3Client(AWS_REGION, config=boto3_config, session_factory=session_factory)

def cognito_client(session_factory=None):
    return CognitoClient(COGNITO_CLIENT_ID, AWS_REGION, config=boto3_config,
                         session_factory=session_factory)
