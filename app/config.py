import os
from typing import List

from pydantic import BaseModel


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    storage_driver: str = "s3"
    bucket_name: str = "cc-bucket-2-3"

    # AWS S3
    aws_region: str = "us-east-1"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    s3_endpoint_url: str = ""

    # MinIO
    minio_endpoint: str = "localhost"
    minio_port: str = "9000"
    minio_access_key: str = ""
    minio_secret_key: str = ""
    minio_secure: bool = False

    # Local storage
    local_storage_path: str = "/tmp/object-storage"

    temp_dir: str = "temp"
    public_dir: str = "public"
    key_prefixes: List[str] = []
    upload_prefix: str = ""
    cors_origins: List[str] = ["*"]
    chunk_size: int = 64 * 1024

    log_level: str = "INFO"
    log_file: str = ""
    port: int = 3000


def load_settings() -> Settings:
    return Settings(
        storage_driver=os.getenv("STORAGE_DRIVER", "s3").lower(),
        bucket_name=os.getenv("S3_BUCKET_NAME", "cc-bucket-2-3"),
        aws_region=os.getenv("AWS_REGION", "us-east-1"),
        aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", ""),
        aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", ""),
        s3_endpoint_url=os.getenv("S3_ENDPOINT_URL", ""),
        minio_endpoint=os.getenv("MINIO_ENDPOINT", "localhost"),
        minio_port=os.getenv("MINIO_PORT", "9000"),
        minio_access_key=os.getenv("MINIO_ACCESS_KEY", ""),
        minio_secret_key=os.getenv("MINIO_SECRET_KEY", ""),
        minio_secure=os.getenv("MINIO_SECURE", "false").lower() == "true",
        local_storage_path=os.getenv("LOCAL_STORAGE_PATH", "/tmp/object-storage"),
        temp_dir=os.getenv("TEMP_DIR", "temp"),
        public_dir=os.getenv("PUBLIC_DIR", "public"),
        key_prefixes=_split(os.getenv("KEY_PREFIXES", "")),
        upload_prefix=os.getenv("UPLOAD_PREFIX", ""),
        cors_origins=_split(os.getenv("CORS_ORIGINS", "*")) or ["*"],
        chunk_size=int(os.getenv("CHUNK_SIZE", str(64 * 1024))),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("LOG_FILE", ""),
        port=int(os.getenv("PORT", "3000")),
    )
