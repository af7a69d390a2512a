# 📄 File: app/scripts/setup_storage.py
# 🧭 Purpose (Layman Explanation):
# One-off setup command for the photo bucket: lets the web and mobile apps upload straight to
# it and refuses files bigger than the allowed size.
# 🧪 Purpose (Technical Summary):
# argparse CLI (`plantcare-setup-storage`) applying bucket CORS and the max-size bucket
# policy through S3ObjectStore. Exit code 1 when the object store rejects a call.
# 🔗 Dependencies:
# argparse, asyncio, app.shared.infrastructure.storage.object_store, settings
# 🔄 Connected Modules / Calls From:
# Deployment scripts, operators

"""
Provision the upload bucket.

Usage:
    plantcare-setup-storage
    plantcare-setup-storage --origins https://app.example.com --max-bytes 2097152
    plantcare-setup-storage --skip-policy
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from app.shared.config.settings import get_settings
from app.shared.core.exceptions import ObjectStoreUnavailableError
from app.shared.infrastructure.storage.object_store import S3ObjectStore
from app.shared.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Configure CORS and the upload size policy of the photo bucket.")
    parser.add_argument(
        "--origins",
        nargs="+",
        default=settings.cors_origins_list,
        help="Origins allowed to upload/download directly (defaults to CORS_ORIGINS)",
    )
    parser.add_argument(
        "--max-bytes",
        type=int,
        default=settings.MAX_UPLOAD_BYTES,
        help="Largest object PUT the bucket accepts (defaults to MAX_UPLOAD_BYTES)",
    )
    parser.add_argument("--skip-cors", action="store_true", help="Leave the bucket CORS rules untouched")
    parser.add_argument("--skip-policy", action="store_true", help="Leave the bucket policy untouched")
    return parser


async def provision(store: S3ObjectStore, origins: List[str], max_bytes: int, cors: bool = True, policy: bool = True) -> None:
    if cors:
        await store.configure_bucket_cors(origins)
    if policy:
        await store.configure_bucket_policy(max_bytes)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_format="text")

    if args.max_bytes <= 0:
        print("--max-bytes must be positive", file=sys.stderr)
        return 2

    store = S3ObjectStore()
    try:
        asyncio.run(provision(
            store,
            origins=args.origins,
            max_bytes=args.max_bytes,
            cors=not args.skip_cors,
            policy=not args.skip_policy,
        ))
    except ObjectStoreUnavailableError as exc:
        print(f"Bucket {store.bucket} could not be configured: {exc.message}", file=sys.stderr)
        return 1

    print(f"Bucket {store.bucket} configured")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
