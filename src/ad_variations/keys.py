"""
Exact-match grouping keys for ads.

`get_grouping_key(ad)` returns either
    "phash:<hash>"            – when the row carries a perceptual hash
    "<imageKey>|<textKey>"    – image host + folder, leading ad copy

Two ads with the same key are treated as variations of one creative.
"""
from __future__ import annotations
import re
from collections import defaultdict
from typing import Dict, List, Optional, Union
from urllib.parse import urlparse

from .models import Ad

PHASH_PREFIX = "phash:"
NO_IMAGE = "no-image"
NO_TEXT  = "no-text"
TEXT_KEY_LEN = 100

# tried in order, first non-blank wins
HASH_FIELDS = ("creative_phash", "creative_hash")

_WS = re.compile(r"\s+")


def ad_key(ad: Ad) -> Union[int, str, None]:
    """Identity used for per-ad maps: the numeric id, else the archive id."""
    return ad.id if ad.id is not None else ad.ad_archive_id


def get_image_key(image_url: str) -> str:
    try:
        parsed = urlparse(image_url)
        if not (parsed.scheme and parsed.hostname):
            raise ValueError(image_url)
        base_path = "/".join(parsed.path.split("/")[:-1])
        return f"{parsed.hostname}{base_path}"
    except ValueError:
        return "/".join(image_url.split("?")[0].split("/")[:-1])


def get_text_key(ad: Ad) -> str:
    raw = ad.text if ad.text is not None else ad.title
    if not raw:
        return NO_TEXT
    return _WS.sub(" ", raw[:TEXT_KEY_LEN]).strip()


def get_phash_value(ad: Ad) -> Optional[str]:
    for field in HASH_FIELDS:
        value = getattr(ad, field, None)
        if value is None:
            continue
        value = str(value).strip()
        if value:
            return value
    return None


def get_grouping_key(ad: Ad) -> str:
    ph = get_phash_value(ad)
    if ph:
        return PHASH_PREFIX + ph

    image_key = get_image_key(ad.image_url) if ad.image_url else NO_IMAGE
    return f"{image_key}|{get_text_key(ad)}"


def group_by_key(ads: List[Ad]) -> Dict[str, List[Ad]]:
    groups: Dict[str, List[Ad]] = defaultdict(list)
    for ad in ads:
        groups[get_grouping_key(ad)].append(ad)
    return dict(groups)
