"""
Perceptual-hash clustering of exact-match groups.

`build_phash_clusters_from_keys(keys, group_map, threshold)` expects:
    keys       = ["phash:<hex>", ...]       (order matters for representatives)
    group_map  = {key: [Ad, ...]}           (exact groups from keys.group_by_key)

Returns PhashClusters:
    clusters    – {rep_key: [member keys]}
    key_to_rep  – {key: rep_key}
    rep_size    – {rep_key: total ads across member groups}

Single linkage: A~B and B~C put A, B, C together even when A and C are far apart.
"""
import logging
from typing import Dict, List, Optional

from . import config
from .keys import PHASH_PREFIX
from .models import Ad, PhashClusters
from .phash import hamming_distance
from .unionfind import DisjointSet

log = logging.getLogger(__name__)


def _strip_prefix(key: str) -> str:
    return key[len(PHASH_PREFIX):] if key.startswith(PHASH_PREFIX) else key


def phash_keys(group_map: Dict[str, List[Ad]]) -> List[str]:
    return [k for k in group_map if k.startswith(PHASH_PREFIX)]


def build_phash_clusters_from_keys(
    keys: List[str],
    group_map: Optional[Dict[str, List[Ad]]] = None,
    threshold: Optional[int] = None,
) -> PhashClusters:
    if threshold is None:
        threshold = config.PHASH_THRESHOLD

    hashes = [_strip_prefix(k) for k in keys]
    ds = DisjointSet(len(keys))

    # O(n²), fine for the few hundred groups of one filtered view
    for i in range(len(hashes)):
        for j in range(i + 1, len(hashes)):
            dist = hamming_distance(hashes[i], hashes[j])
            if dist <= threshold:
                ds.union(i, j)

    result = PhashClusters()
    for members in ds.groups():
        member_keys = [keys[i] for i in members]
        rep = member_keys[0]
        result.clusters[rep] = member_keys
        size = 0
        for k in member_keys:
            result.key_to_rep[k] = rep
            size += len(group_map.get(k, [])) if group_map is not None else 1
        result.rep_size[rep] = size

    log.debug("phash clustering: %d keys -> %d clusters (t=%d)",
              len(keys), len(result.clusters), threshold)
    return result
