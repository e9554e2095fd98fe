"""
AWS S3 client utilities for audio asset storage.
"""
import logging
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from gameframe.core.config import settings

logger = logging.getLogger(__name__)


class AudioStorage:
    """S3 wrapper for the recorded key moment audio files."""

    def __init__(self, client=None, bucket: Optional[str] = None):
        self.client = client or boto3.client(
            "s3",
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            region_name=settings.AWS_REGION,
        )
        self.bucket = bucket or settings.AUDIO_BUCKET_NAME

    def team_prefix(self, team_id: str) -> str:
        """Key prefix under which all audio of a team is stored."""
        return f"{settings.AUDIO_PREFIX}/{team_id}"

    def generate_presigned_url(self, s3_key: str, expiration: int = 3600) -> Optional[str]:
        """
        Generate a presigned GET URL for an audio file.

        Args:
            s3_key: S3 object key (path)
            expiration: URL expiration time in seconds

        Returns:
            Presigned URL or None if error
        """
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": s3_key},
                ExpiresIn=expiration,
            )
        except ClientError as e:
            logger.warning("Could not presign %s: %s", s3_key, e)
            return None

    def delete_folder(self, prefix: str) -> bool:
        """
        Delete all files with a given prefix (folder).

        Args:
            prefix: S3 key prefix

        Returns:
            True if deleted successfully
        """
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            deleted = 0
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                objects = [{"Key": obj["Key"]} for obj in page.get("Contents", [])]
                if objects:
                    self.client.delete_objects(Bucket=self.bucket, Delete={"Objects": objects})
                    deleted += len(objects)
            logger.debug("Deleted %d audio files under %s", deleted, prefix)
            return True
        except ClientError as e:
            logger.warning("Failed to delete audio files under %s: %s", prefix, e)
            return False


_storage: Optional[AudioStorage] = None


def get_audio_storage() -> AudioStorage:
    """Lazily created process-wide storage client."""
    global _storage
    if _storage is None:
        _storage = AudioStorage()
    return _storage
