from .base_client import AWSBaseClient
from decimal import Decimal

class DynamoDBClient(AWSBaseClient):
    def __init__(self, region_name="us-east-1", config=None, session_factory=None):
        super().__init__("dynamodb", region_name=region_name, config=config,
                         session_factory=session_factory)

    def _deserialize(self, value):
        """Convert DynamoDB data into plain Python types."""
        if isinstance(value, dict):
            return {k: self._deserialize(v) for k, v in value.items()}
        if isinstance(value, list):
            return [self._deserialize(v) for v in value]
        if isinstance(value, Decimal):
            return int(value) if value % 1 == 0 else float(value)
        return value

    def _serialize(self, data):
        """Recursively convert numbers to Decimal for DynamoDB writes."""
        if isinstance(data, dict):
            return {k: self._serialize(v) for k, v in data.items()}
        if isinstance(data, list):
            return [self._serialize(v) for v in data]
        if isinstance(data, bool):
            return data
        if isinstance(data, int):
            return Decimal(data)
        if isinstance(data, float):
            # via str so 19.99 stays 19.99 instead of the binary expansion
            return Decimal(str(data))
        return data

    @staticmethod
    def _must_exist(key):
        names = {f"#k{i}": name for i, name in enumerate(key)}
        condition = " AND ".join(f"attribute_exists({alias})" for alias in names)
        return condition, names

# CRUD

    def put(self, table, item):
        tbl = self.resource.Table(table)
        return tbl.put_item(Item=self._serialize(item))

    def scan(self, table):
        """Scan the whole table, following LastEvaluatedKey pages."""
        tbl = self.resource.Table(table)
        items = []
        kwargs = {}
        while True:
            resp = tbl.scan(**kwargs)
            items.extend(resp.get("Items", []))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key
        return [self._deserialize(i) for i in items]

    def update(self, table, key, values):
        """
        SET the given attributes on an existing item.
        Fails with ConditionalCheckFailedException if the item is missing.
        """
        tbl = self.resource.Table(table)
        condition, names = self._must_exist(key)
        assignments = []
        attr_values = {}
        for i, (field, value) in enumerate(values.items()):
            names[f"#f{i}"] = field
            attr_values[f":v{i}"] = self._serialize(value)
            assignments.append(f"#f{i} = :v{i}")
        return tbl.update_item(
            Key=key,
            UpdateExpression="SET " + ", ".join(assignments),
            ConditionExpression=condition,
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=attr_values,
        )

    def delete(self, table, key):
        """
        Delete an item from the DynamoDB table.
        Fails with ConditionalCheckFailedException if the item is missing.
        """
        tbl = self.resource.Table(table)
        condition, names = self._must_exist(key)
        return tbl.delete_item(
            Key=key,
            ConditionExpression=condition,
            ExpressionAttributeNames=names,
        )
