# 📄 File: app/shared/infrastructure/storage/object_store.py

# 🧭 Purpose (Layman Explanation):
# This file talks to the photo storage bucket: it hands out short-lived upload and
# download links, checks whether a photo arrived, deletes photos and lists a user's folder.

# 🧪 Purpose (Technical Summary):
# ObjectStore capability (abstract) plus the boto3-backed S3ObjectStore used for any
# S3-compatible provider (Supabase Storage, MinIO, R2, AWS). Blocking boto3 calls run in
# worker threads; provider failures surface as ObjectStoreUnavailableError. Also owns the
# per-user key namespace helpers and bucket provisioning (CORS + size policy).

# 🔗 Dependencies:
# - boto3 / botocore: S3 client, presigning, pagination
# - asyncio: to_thread offloading
# - app.shared.config.settings

# 🔄 Connected Modules / Calls From:
# Called by: upload service, plant service (photo URLs), orphan cleanup sweep,
# app.scripts.setup_storage (provisioning CLI)

import asyncio
import json
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.shared.config.settings import Settings, get_settings
from app.shared.core.exceptions import ObjectStoreUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectInfo:
    """Metadata returned by a HEAD on a stored object."""

    key: str
    size_bytes: int
    content_type: str


# =============================================================================
# KEY NAMESPACE
# =============================================================================

def user_prefix(user_id: str) -> str:
    return f"users/{user_id}/"


def build_object_key(user_id: str, filename: str) -> str:
    """
    Build a fresh object key inside the user's namespace.

    Format: ``users/<user_id>/<uuid4>_<url-escaped filename>``
    """
    return f"{user_prefix(user_id)}{uuid.uuid4()}_{quote(filename, safe='')}"


def key_belongs_to_user(key: str, user_id: str) -> bool:
    """True when ``key`` lives under the caller's ``users/<user_id>/`` prefix."""
    if not key or not user_id or ".." in key:
        return False
    return key.startswith(user_prefix(user_id))


# =============================================================================
# CAPABILITY
# =============================================================================

class ObjectStore(ABC):
    """
    Object store capability used by the upload lifecycle.

    Implementations must be safe to call concurrently from request handlers.
    """

    @abstractmethod
    async def presign_put(
        self,
        key: str,
        content_type: str,
        user_id: str
    ) -> Tuple[str, Dict[str, str]]:
        """
        Sign a direct PUT for ``key``.

        Returns:
            Tuple of (url, headers). The client must send exactly these headers,
            they are covered by the signature.
        """
        pass

    @abstractmethod
    async def presign_get(self, key: str) -> str:
        """Signed download URL for ``key``."""
        pass

    @abstractmethod
    async def head(self, key: str) -> Optional[ObjectInfo]:
        """Object metadata, or None when the object does not exist."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        pass

    @abstractmethod
    async def list_prefix(self, prefix: str) -> List[ObjectInfo]:
        """Every object under ``prefix`` (all pages)."""
        pass


# =============================================================================
# S3 IMPLEMENTATION
# =============================================================================

class S3ObjectStore(ObjectStore):
    """
    boto3 implementation for S3-compatible object storage.
    """

    def __init__(self, settings: Optional[Settings] = None, client=None):
        self.settings = settings or get_settings()
        self.bucket = self.settings.S3_BUCKET
        self.expiry_seconds = self.settings.PRESIGN_EXPIRY_SECONDS
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=self.settings.S3_ENDPOINT_URL,
                region_name=self.settings.S3_REGION,
                aws_access_key_id=self.settings.S3_ACCESS_KEY_ID or None,
                aws_secret_access_key=self.settings.S3_SECRET_ACCESS_KEY or None,
                config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
            )
            logger.info(f"S3 client created for bucket: {self.bucket}")
        return self._client

    async def _call(self, operation: str, func, *args, **kwargs):
        """Run a blocking boto3 call in a worker thread."""
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Object store operation '{operation}' failed: {e}")
            raise ObjectStoreUnavailableError(operation=operation) from e

    async def presign_put(
        self,
        key: str,
        content_type: str,
        user_id: str
    ) -> Tuple[str, Dict[str, str]]:
        params = {
            "Bucket": self.bucket,
            "Key": key,
            "ContentType": content_type,
            "ACL": "private",
            "Metadata": {"user": user_id},
        }
        url = await self._call(
            "presign_put",
            self.client.generate_presigned_url,
            "put_object",
            Params=params,
            ExpiresIn=self.expiry_seconds,
        )
        headers = {
            "Content-Type": content_type,
            "x-amz-acl": "private",
            "x-amz-meta-user": user_id,
        }
        return url, headers

    async def presign_get(self, key: str) -> str:
        return await self._call(
            "presign_get",
            self.client.generate_presigned_url,
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=self.expiry_seconds,
        )

    async def head(self, key: str) -> Optional[ObjectInfo]:
        try:
            response = await asyncio.to_thread(
                self.client.head_object, Bucket=self.bucket, Key=key
            )
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in ("404", "NoSuchKey", "NotFound"):
                return None
            logger.error(f"Object store operation 'head' failed for {key}: {e}")
            raise ObjectStoreUnavailableError(operation="head") from e
        except BotoCoreError as e:
            logger.error(f"Object store operation 'head' failed for {key}: {e}")
            raise ObjectStoreUnavailableError(operation="head") from e

        return ObjectInfo(
            key=key,
            size_bytes=int(response.get("ContentLength", 0)),
            content_type=str(response.get("ContentType", "")).lower(),
        )

    async def delete(self, key: str) -> None:
        await self._call("delete", self.client.delete_object, Bucket=self.bucket, Key=key)
        logger.debug(f"Deleted object: {key}")

    async def list_prefix(self, prefix: str) -> List[ObjectInfo]:
        def _list() -> List[ObjectInfo]:
            paginator = self.client.get_paginator("list_objects_v2")
            objects: List[ObjectInfo] = []
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for item in page.get("Contents", []):
                    objects.append(ObjectInfo(key=item["Key"], size_bytes=int(item.get("Size", 0)), content_type=""))
            return objects

        return await self._call("list_prefix", _list)

    # -------------------------------------------------------------------------
    # Provisioning
    # -------------------------------------------------------------------------

    async def configure_bucket_cors(self, origins: List[str]) -> None:
        """Allow browsers on ``origins`` to PUT/GET directly against the bucket."""
        cors = {
            "CORSRules": [
                {
                    "AllowedOrigins": origins,
                    "AllowedMethods": ["GET", "PUT", "POST", "HEAD"],
                    "AllowedHeaders": ["*"],
                    "ExposeHeaders": ["ETag"],
                    "MaxAgeSeconds": 3600,
                }
            ]
        }
        await self._call(
            "put_bucket_cors",
            self.client.put_bucket_cors,
            Bucket=self.bucket,
            CORSConfiguration=cors,
        )
        logger.info(f"Configured CORS for bucket {self.bucket}: {origins}")

    async def configure_bucket_policy(self, max_upload_bytes: int) -> None:
        """Deny object PUTs larger than ``max_upload_bytes``."""
        policy = build_size_limit_policy(self.bucket, max_upload_bytes)
        await self._call(
            "put_bucket_policy",
            self.client.put_bucket_policy,
            Bucket=self.bucket,
            Policy=json.dumps(policy),
        )
        logger.info(f"Configured upload size policy for bucket {self.bucket}: {max_upload_bytes} bytes")


def build_size_limit_policy(bucket: str, max_upload_bytes: int) -> Dict[str, object]:
    return {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Sid": "DenyLargeUploads",
                "Effect": "Deny",
                "Principal": "*",
                "Action": "s3:PutObject",
                "Resource": f"arn:aws:s3:::{bucket}/*",
                "Condition": {
                    "NumericGreaterThan": {"s3:content-length": max_upload_bytes}
                },
            }
        ],
    }


# Global object store instance
object_store: Optional[ObjectStore] = None


async def get_object_store() -> ObjectStore:
    """Get the object store (dependency injection)."""
    global object_store

    if object_store is None:
        object_store = S3ObjectStore()

    return object_store


async def cleanup_object_store() -> None:
    """Drop the cached object store client."""
    global object_store
    if object_store is not None:
        object_store = None
        logger.info("Object store client cleaned up")
