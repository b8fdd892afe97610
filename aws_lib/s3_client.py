from .base_client import AWSBaseClient

class S3Client(AWSBaseClient):
    def __init__(self, region_name="us-east-1", config=None, session_factory=None):
        super().__init__("s3", region_name=region_name, config=config,
                         session_factory=session_factory)

    def put_bytes(self, bucket, key, body, content_type="application/octet-stream"):
        """Store raw bytes and return the object's public HTTPS URL."""
        self.client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
        )
        return self.public_url(bucket, key)

    def public_url(self, bucket, key):
        return f"https://{bucket}.s3.{self.region_name}.amazonaws.com/{key}"
