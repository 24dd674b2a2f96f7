"""
File access service - presigned read URLs and listings scoped to the caller's key prefix.
"""
from prepup.app.core.config import settings
from prepup.app.core.logging_config import get_logger
from prepup.app.schemas.resume import PresignedUrlIn
from prepup.app.schemas.user import Identity
from prepup.app.services import s3_service
from prepup.app.services.file_keys import authorize_key, user_prefix

logger = get_logger("services.file")


def get_presigned_url(identity: Identity, body: PresignedUrlIn) -> dict:
    """
    Presigned GET URL for any object under the caller's prefix (previews etc.).
    Requested expiry is clamped to s3_presigned_url_max_expiration.
    """
    key = authorize_key(identity.user_id, body.file_key)
    expires_in = body.expires_in or settings.s3_presigned_url_expiration
    expires_in = min(expires_in, settings.s3_presigned_url_max_expiration)
    url = s3_service.generate_presigned_url(key, expires_in)
    logger.info("Presigned URL issued user_id=%s key=%s expires_in=%d", identity.user_id, key, expires_in)
    return {"presignedUrl": url, "fileKey": key, "expiresIn": expires_in}


def list_user_files(identity: Identity, limit: int) -> dict:
    listing = s3_service.list_objects(user_prefix(identity.user_id), limit)
    files = [
        {
            "key": obj["key"],
            "size": obj["size"],
            "lastModified": obj["last_modified"].isoformat() if obj["last_modified"] else None,
        }
        for obj in listing["objects"]
    ]
    return {"files": files, "truncated": listing["truncated"]}
