"""
Duplicate groups from the free-text `duplicates_links` column.

Each token of an ad's `duplicates_links` is resolved against the ads passed
in: numeric id first, then exact ad_archive_id, then any ad_archive_id that
occurs inside the token (e.g. a full Ad Library URL). Groups are the
connected components, so they depend on which ads are in the subset.
"""
import logging
import re
from typing import Dict, List, Optional, Tuple, Union

from .keys import ad_key
from .models import Ad
from .unionfind import DisjointSet

log = logging.getLogger(__name__)

_SEP = re.compile(r"[,\s]+")

AdKey = Union[int, str, None]


def split_links(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [t for t in _SEP.split(text) if t]


def _as_int(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def resolve_link(token: str,
                 id_index: Dict[int, int],
                 archive_index: Dict[str, int]) -> Optional[int]:
    num = _as_int(token)
    if num is not None and num in id_index:
        return id_index[num]
    if token in archive_index:
        return archive_index[token]
    for archive_id, idx in archive_index.items():
        if archive_id in token:
            return idx
    return None


def build_duplicate_groups(ads: List[Ad]) -> Tuple[List[List[Ad]], Dict[AdKey, int]]:
    id_index: Dict[int, int] = {}
    archive_index: Dict[str, int] = {}
    for i, ad in enumerate(ads):
        num = _as_int(ad.id)
        if num is not None:
            id_index.setdefault(num, i)
        if ad.ad_archive_id:
            archive_index.setdefault(ad.ad_archive_id, i)

    ds = DisjointSet(len(ads))
    resolved = 0
    for i, ad in enumerate(ads):
        for token in split_links(ad.duplicates_links):
            j = resolve_link(token, id_index, archive_index)
            if j is not None:
                ds.union(i, j)
                resolved += 1

    groups = [[ads[i] for i in members] for members in ds.groups()]
    related: Dict[AdKey, int] = {}
    for group in groups:
        for ad in group:
            related[ad_key(ad)] = max(0, len(group) - 1)

    log.debug("duplicate links: %d ads, %d links resolved, %d groups",
              len(ads), resolved, len(groups))
    return groups, related


def group_index(groups: List[List[Ad]]) -> Dict[AdKey, List[Ad]]:
    """ad id → the group it belongs to."""
    return {ad_key(ad): group for group in groups for ad in group}
