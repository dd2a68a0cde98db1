import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from app.config import Settings
from app.storage.base import StorageDriver, StorageDriverError, StoredObject


class S3Storage(StorageDriver):
    def __init__(self, settings: Settings):
        options = {"region_name": settings.aws_region}
        # Empty credentials fall back to the default boto3 chain
        if settings.aws_access_key_id:
            options["aws_access_key_id"] = settings.aws_access_key_id
            options["aws_secret_access_key"] = settings.aws_secret_access_key
        if settings.s3_endpoint_url:
            # LocalStack and other S3-compatible endpoints need path-style addressing
            options["endpoint_url"] = settings.s3_endpoint_url
            options["config"] = Config(s3={"addressing_style": "path"})
        self.client = boto3.client("s3", **options)
        self.bucket_name = settings.bucket_name

    def list_objects(self, prefix=None):
        params = {"Bucket": self.bucket_name}
        if prefix:
            params["Prefix"] = prefix
        try:
            response = self.client.list_objects_v2(**params)
        except (BotoCoreError, ClientError) as e:
            raise StorageDriverError(str(e)) from e
        return response.get("Contents", [])

    def put_object(self, key: str, content: bytes, content_type: str) -> str:
        try:
            self.client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentType=content_type
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageDriverError(str(e)) from e
        return key

    def get_object(self, key: str) -> StoredObject:
        try:
            obj = self.client.get_object(Bucket=self.bucket_name, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageDriverError(str(e)) from e
        return StoredObject(
            key=key,
            body=obj["Body"],
            content_type=obj.get("ContentType") or "application/octet-stream",
            content_length=obj.get("ContentLength"),
        )
