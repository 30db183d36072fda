"""
Thin wrapper around the creatives bucket (S3-compatible Supabase storage).

Used to backfill `creative_hash` for ads stored without one:

    hashes = hash_missing_creatives(ads)     # {ad id: "f0e1d2c3b4a59687"}

Creatives are looked up as `<ad_archive_id>.<ext>` in the photo bucket, then
the video-preview bucket, then the public object URL.
"""
from typing import Dict, List, Optional
import io, logging, urllib.error, urllib.request

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from PIL import Image, UnidentifiedImageError

from . import config
from .keys import ad_key, get_phash_value
from .models import Ad
from .phash import creative_hash

log = logging.getLogger(__name__)


def storage_client():
    return boto3.client(
        "s3",
        endpoint_url=config.STORAGE_S3_ENDPOINT,
        aws_access_key_id=config.STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=config.STORAGE_SECRET_ACCESS_KEY,
        region_name=config.STORAGE_REGION,
    )


def _get_object(s3_client, bucket: str, key: str) -> Optional[bytes]:
    try:
        resp = s3_client.get_object(Bucket=bucket, Key=key)
        return resp["Body"].read()
    except (ClientError, BotoCoreError) as exc:
        log.debug("storage miss %s/%s (%s)", bucket, key, exc)
        return None


def _public_url(ad_archive_id: str) -> Optional[str]:
    if not (config.SUPABASE_URL and config.AD_BUCKET_PHOTO):
        return None
    base = config.SUPABASE_URL.rstrip("/")
    return f"{base}/storage/v1/object/public/{config.AD_BUCKET_PHOTO}/{ad_archive_id}.jpeg"


def _download(url: str) -> Optional[bytes]:
    try:
        with urllib.request.urlopen(url, timeout=15) as resp:
            return resp.read()
    except (urllib.error.URLError, ValueError) as exc:
        log.warning("public download failed %s (%s)", url, exc)
        return None


def fetch_creative(ad_archive_id: str, s3_client=None) -> Optional[bytes]:
    if not ad_archive_id:
        return None

    buckets = [b for b in (config.AD_BUCKET_PHOTO, config.AD_BUCKET_VIDEO_PREVIEW) if b]
    if buckets and s3_client is None:
        s3_client = storage_client()

    for bucket in buckets:
        for ext in config.CREATIVE_EXTENSIONS:
            data = _get_object(s3_client, bucket, f"{ad_archive_id}.{ext}")
            if data:
                log.info("creative %s found in %s (.%s)", ad_archive_id, bucket, ext)
                return data

    url = _public_url(ad_archive_id)
    return _download(url) if url else None


def hash_missing_creatives(ads: List[Ad], s3_client=None,
                           limit: Optional[int] = None) -> Dict:
    if limit is None:
        limit = config.HASH_BATCH_SIZE

    pending = [ad for ad in ads if ad.ad_archive_id and not get_phash_value(ad)]
    log.info("hash backfill: %d ads without a hash, processing up to %d",
             len(pending), limit)

    hashes = {}
    for ad in pending[:limit]:
        data = fetch_creative(ad.ad_archive_id, s3_client=s3_client)
        if not data:
            log.warning("no creative found for %s", ad.ad_archive_id)
            continue
        try:
            pil = Image.open(io.BytesIO(data))
            pil.load()
        except (UnidentifiedImageError, OSError) as exc:
            log.warning("bad creative %s (%s)", ad.ad_archive_id, exc)
            continue
        hashes[ad_key(ad)] = creative_hash(pil)
    return hashes
