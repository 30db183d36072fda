"""
High-level orchestration for the ad variation browser.
"""
from __future__ import annotations
import datetime, logging, statistics
from typing import Dict, List, Optional, TypeVar

from . import config
from .buckets import bucket_counts, matches_variation_bucket
from .dedup import build_phash_clusters_from_keys, phash_keys
from .keys import PHASH_PREFIX, ad_key, get_grouping_key, group_by_key
from .links import build_duplicate_groups
from .models import (Ad, FormatDistribution, VariationGroup, VariationRequest,
                     VariationResponse)
from .ranking import pick_representative, sort_groups

log = logging.getLogger(__name__)

T = TypeVar("T")


def chunk(items: List[T], size: int) -> List[List[T]]:
    return [items[i:i + size] for i in range(0, len(items), size)]


def _format(ad: Ad) -> str:
    return (ad.display_format or "").strip().upper()


def filter_by_creative_type(ads: List[Ad], creative_type: str) -> List[Ad]:
    if creative_type == "video":
        return [ad for ad in ads if _format(ad) == "VIDEO"]
    if creative_type == "image":
        return [ad for ad in ads if _format(ad) == "IMAGE"]
    return list(ads)


def format_distribution(ads: List[Ad]) -> FormatDistribution:
    fmt = [_format(ad) for ad in ads]
    dist = FormatDistribution(
        video=fmt.count("VIDEO"),
        static=fmt.count("IMAGE"),
        carousel=fmt.count("CAROUSEL"),
    )
    dist.other = len(ads) - dist.video - dist.static - dist.carousel
    return dist


def compute_variation_counts(ads: List[Ad], threshold: Optional[int] = None) -> Dict:
    """Related-ad count per ad: exact-key groups, with phash groups merged by cluster."""
    group_map = group_by_key(ads)
    clusters = build_phash_clusters_from_keys(phash_keys(group_map), group_map, threshold)

    counts = {}
    for ad in ads:
        key = get_grouping_key(ad)
        mapped = clusters.key_to_rep.get(key, key)
        if mapped.startswith(PHASH_PREFIX):
            size = clusters.rep_size.get(mapped) or len(group_map.get(mapped, [])) or 1
        else:
            size = len(group_map.get(key, [])) or 1
        counts[ad_key(ad)] = max(0, size - 1)
    return counts


def phash_groups(ads: List[Ad], threshold: Optional[int] = None) -> List[List[Ad]]:
    """Exact-key groups with visually similar phash groups folded together."""
    group_map = group_by_key(ads)
    clusters = build_phash_clusters_from_keys(phash_keys(group_map), group_map, threshold)

    groups, seen = [], set()
    for key, members in group_map.items():
        rep = clusters.key_to_rep.get(key)
        if rep is None:
            groups.append(members)
            continue
        if rep in seen:
            continue
        seen.add(rep)
        groups.append([ad for k in clusters.clusters[rep] for ad in group_map[k]])
    return groups


def variation_groups(ads: List[Ad], strategy: str = "links",
                     threshold: Optional[int] = None) -> List[List[Ad]]:
    if strategy == "phash":
        return phash_groups(ads, threshold)
    groups, _ = build_duplicate_groups(ads)
    return groups


def process_variations(req: VariationRequest, corr_id: str) -> VariationResponse:
    threshold = req.threshold if req.threshold is not None else config.PHASH_THRESHOLD

    # --- 1. subset ------------------------------------------------------------
    ads = filter_by_creative_type(req.ads, req.creative_type)
    log.info("%s %d/%d ads after creative_type=%s",
             corr_id, len(ads), len(req.ads), req.creative_type)

    # --- 2. grouping ------------------------------------------------------------
    groups = variation_groups(ads, req.strategy, threshold)
    log.info("%s %d groups via %s (threshold=%d)", corr_id, len(groups), req.strategy, threshold)

    # --- 3. representatives -----------------------------------------------------
    pairs = [(pick_representative(g), g) for g in groups]

    all_bucket_counts = bucket_counts(len(g) - 1 for g in groups)
    if req.bucket:
        pairs = [(rep, g) for rep, g in pairs
                 if matches_variation_bucket(len(g) - 1, req.bucket)]

    pairs = sort_groups(pairs, req.sort)

    # --- 4. page ----------------------------------------------------------------
    pages = chunk(pairs, req.page_size)
    total_pages = max(1, len(pages))
    page = min(req.page, total_pages)
    current = pages[page - 1] if pages else []

    out_groups = [
        VariationGroup(
            representative=rep,
            related_count=len(g) - 1,
            ad_ids=[ad_key(ad) for ad in g],
        )
        for rep, g in current
    ]

    # every ad counts its group's related ads, as in the analytics view
    avg = statistics.mean(len(g) - 1 for g in groups for _ in g) if ads else 0.0

    return VariationResponse(
        total_ads=len(ads),
        total_groups=len(groups),
        matching_groups=len(pairs),
        average_variation_count=round(avg, 1),
        bucket_counts=all_bucket_counts,
        format_distribution=format_distribution(ads),
        page=page,
        total_pages=total_pages,
        groups=out_groups,
        generated_at=datetime.datetime.now(datetime.timezone.utc).isoformat(),
    )
