"""
Representative choice and ordering of variation groups.
"""
from __future__ import annotations
import datetime
from typing import Callable, Dict, List, Optional, Tuple

from .keys import ad_key
from .models import Ad

SORT_MODES = ("most_variations", "least_variations", "newest")
DEFAULT_SORT = "most_variations"
SORT_ALIASES = {"auto": DEFAULT_SORT}

_EPOCH_MIN = datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)


def created_ts(ad: Ad) -> datetime.datetime:
    """Parsed created_at; missing or unparseable values sort oldest."""
    raw = (ad.created_at or "").strip()
    if not raw:
        return _EPOCH_MIN
    try:
        ts = datetime.datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH_MIN
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=datetime.timezone.utc)
    return ts


def pick_representative(group: List[Ad]) -> Optional[Ad]:
    if not group:
        return None
    if len(group) == 1:
        return group[0]
    # max() keeps the first of equal timestamps
    return max(group, key=created_ts)


def resolve_sort(mode: Optional[str]) -> str:
    """Explicit modes pass through, "auto" is an alias; anything else gets the default."""
    if mode in SORT_MODES:
        return mode
    return SORT_ALIASES.get(mode, DEFAULT_SORT)


def _ordered(items: List, created: Callable, related: Callable, mode: Optional[str]) -> List:
    mode = resolve_sort(mode)
    newest_first = sorted(items, key=created, reverse=True)
    if mode == "newest":
        return newest_first
    # stable sort keeps newest-first inside equal counts
    return sorted(newest_first, key=related, reverse=(mode == "most_variations"))


def sort_representatives(reps: List[Ad],
                         related_counts: Dict,
                         mode: Optional[str] = "auto") -> List[Ad]:
    return _ordered(reps, created_ts,
                    lambda ad: related_counts.get(ad_key(ad), 0), mode)


def sort_groups(pairs: List[Tuple[Ad, List[Ad]]],
                mode: Optional[str] = "auto") -> List[Tuple[Ad, List[Ad]]]:
    """Order (representative, group) pairs; counts come from the group itself."""
    return _ordered(pairs,
                    lambda pair: created_ts(pair[0]),
                    lambda pair: max(0, len(pair[1]) - 1),
                    mode)
