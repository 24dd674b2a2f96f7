"""
Object storage service for resume files (S3 API; Cloudflare R2 via s3_endpoint_url).
Keys look like resumes/{user_id}/{timestamp}-{filename}; see services.file_keys.
Bytes never pass through the API for downloads - callers get presigned URLs instead.
"""
import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from prepup.app.core.config import settings
from prepup.app.core.exceptions import StorageError
from prepup.app.core.logging_config import get_logger

logger = get_logger("services.s3")

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def _get_s3_client():
    """Get configured S3 client."""
    if not settings.aws_access_key_id or not settings.aws_secret_access_key:
        raise StorageError("Object storage credentials not configured (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY)")
    return boto3.client(
        "s3",
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        region_name=settings.aws_region,
        endpoint_url=settings.s3_endpoint_url or None,
        config=Config(signature_version="s3v4"),
    )


def _error_parts(e: ClientError) -> tuple[str, str]:
    err = e.response.get("Error", {})
    return str(err.get("Code", "")), err.get("Message", str(e))


def put_object(
    key: str,
    file_buffer: bytes,
    mime_type: str = "application/octet-stream",
    metadata: dict[str, str] | None = None,
) -> dict:
    """
    Write bytes to the bucket under `key`.

    Args:
        key: Full object key (already namespaced by user)
        file_buffer: File content as bytes
        mime_type: Content type stored with the object
        metadata: Custom object metadata (originalFilename, uploadedBy, ...)

    Returns:
        dict with key, size
    """
    logger.info(
        "S3 upload started bucket=%s key=%s size_bytes=%d",
        settings.aws_bucket_name,
        key,
        len(file_buffer),
    )
    s3 = _get_s3_client()
    try:
        s3.put_object(
            Bucket=settings.aws_bucket_name,
            Key=key,
            Body=file_buffer,
            ContentType=mime_type,
            Metadata=metadata or {},
        )
    except ClientError as e:
        code, msg = _error_parts(e)
        logger.error(
            "S3 upload failed bucket=%s key=%s error_code=%s error_message=%s",
            settings.aws_bucket_name,
            key,
            code,
            msg,
        )
        raise StorageError(f"Failed to upload file - {code}") from e
    logger.info("S3 upload success bucket=%s key=%s", settings.aws_bucket_name, key)
    return {"key": key, "size": len(file_buffer)}


def head_object(key: str) -> dict | None:
    """Object metadata for `key`, or None when the object does not exist."""
    s3 = _get_s3_client()
    try:
        resp = s3.head_object(Bucket=settings.aws_bucket_name, Key=key)
    except ClientError as e:
        code, msg = _error_parts(e)
        if code in _MISSING_CODES:
            return None
        logger.error("S3 head failed key=%s error_code=%s error_message=%s", key, code, msg)
        raise StorageError(f"Failed to check file - {code}") from e
    return {
        "key": key,
        "size": resp.get("ContentLength", 0),
        "content_type": resp.get("ContentType"),
        "metadata": resp.get("Metadata") or {},
        "last_modified": resp.get("LastModified"),
    }


def list_objects(prefix: str, limit: int = 1000) -> dict:
    """List up to `limit` objects under `prefix`. Returns {objects, truncated}."""
    s3 = _get_s3_client()
    try:
        resp = s3.list_objects_v2(Bucket=settings.aws_bucket_name, Prefix=prefix, MaxKeys=limit)
    except ClientError as e:
        code, msg = _error_parts(e)
        logger.error("S3 list failed prefix=%s error_code=%s error_message=%s", prefix, code, msg)
        raise StorageError(f"Failed to list files - {code}") from e
    objects = [
        {
            "key": obj["Key"],
            "size": obj.get("Size", 0),
            "last_modified": obj.get("LastModified"),
        }
        for obj in resp.get("Contents", [])
    ]
    return {"objects": objects, "truncated": bool(resp.get("IsTruncated"))}


def generate_presigned_url(
    key: str,
    expiration: int | None = None,
    download_filename: str | None = None,
) -> str:
    """
    Generate a presigned GET URL for temporary access to an object.
    Default expiration from config (s3_presigned_url_expiration).
    With download_filename the response is served as an attachment.
    """
    exp = expiration if expiration is not None else settings.s3_presigned_url_expiration
    params = {"Bucket": settings.aws_bucket_name, "Key": key}
    if download_filename:
        params["ResponseContentDisposition"] = f'attachment; filename="{download_filename}"'
    s3 = _get_s3_client()
    try:
        return s3.generate_presigned_url("get_object", Params=params, ExpiresIn=exp)
    except ClientError as e:
        logger.warning("Presigned URL generation failed key=%s error=%s", key, e)
        raise StorageError("Failed to generate presigned URL") from e


def generate_presigned_upload_url(key: str, mime_type: str, expiration: int | None = None) -> str:
    """Presigned PUT URL so the browser can upload straight to the bucket."""
    exp = expiration if expiration is not None else settings.s3_upload_url_expiration
    s3 = _get_s3_client()
    try:
        return s3.generate_presigned_url(
            "put_object",
            Params={"Bucket": settings.aws_bucket_name, "Key": key, "ContentType": mime_type},
            ExpiresIn=exp,
        )
    except ClientError as e:
        logger.warning("Presigned upload URL generation failed key=%s error=%s", key, e)
        raise StorageError("Failed to generate presigned upload URL") from e
