# infra_setup.py
import logging

from botocore.exceptions import ClientError

import aws_config

logger = logging.getLogger("infra_setup")


# --- DynamoDB Tables ---
def create_table(ddb, table_name, partition_key):
    """Create a DynamoDB table if it doesn't exist. Returns True if created."""
    resource = ddb.resource
    try:
        resource.Table(table_name).load()
        logger.info("Table '%s' already exists.", table_name)
        return False
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") != "ResourceNotFoundException":
            raise
    table = resource.create_table(
        TableName=table_name,
        AttributeDefinitions=[{"AttributeName": partition_key, "AttributeType": "S"}],
        KeySchema=[{"AttributeName": partition_key, "KeyType": "HASH"}],
        BillingMode="PAY_PER_REQUEST"
    )
    table.wait_until_exists()
    logger.info("Created table '%s' successfully.", table_name)
    return True


# --- S3 Bucket ---
def create_bucket(s3, bucket_name):
    """Create the product image bucket if it doesn't exist. Returns True if created."""
    client = s3.client
    existing_buckets = [b["Name"] for b in client.list_buckets().get("Buckets", [])]
    if bucket_name in existing_buckets:
        logger.info("S3 bucket '%s' already exists.", bucket_name)
        return False

    if s3.region_name == "us-east-1":
        client.create_bucket(Bucket=bucket_name)
    else:
        client.create_bucket(
            Bucket=bucket_name,
            CreateBucketConfiguration={"LocationConstraint": s3.region_name}
        )
    logger.info("Created S3 bucket '%s' in region '%s'.", bucket_name, s3.region_name)
    return True


def provision(session_factory=None):
    """Create every table and bucket the dashboard reads or writes."""
    ddb = aws_config.dynamodb_client(session_factory)
    s3 = aws_config.s3_client(session_factory)
    created = {}
    for table_name, key in aws_config.TABLE_KEYS.items():
        created[table_name] = create_table(ddb, table_name, key)
    created[aws_config.PRODUCT_IMAGE_BUCKET] = create_bucket(s3, aws_config.PRODUCT_IMAGE_BUCKET)
    return created


# --- Main setup ---
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    provision()
    logger.info("Infrastructure setup completed successfully.")
