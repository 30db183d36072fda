"""
Variation buckets shown as filter counts.

Buckets overlap at 5 related ads, and a creative without related ads is in
none of them.
"""
from typing import Dict, Iterable

VARIATION_BUCKETS = ("more_than_10", "5_10", "3_5", "less_than_3")


def matches_variation_bucket(count: int, bucket: str) -> bool:
    """`count` is the number of related ads (group size - 1)."""
    related = max(0, count)
    if bucket == "more_than_10":
        return related >= 11
    if bucket == "5_10":
        return 5 <= related <= 10
    if bucket == "3_5":
        return 3 <= related <= 5
    if bucket == "less_than_3":
        return 1 <= related <= 2
    return False


def matches_group_size_bucket(group_size: int, bucket: str) -> bool:
    return matches_variation_bucket(max(0, group_size - 1), bucket)


def bucket_counts(related_counts: Iterable[int]) -> Dict[str, int]:
    counts = dict.fromkeys(VARIATION_BUCKETS, 0)
    for related in related_counts:
        for bucket in VARIATION_BUCKETS:
            if matches_variation_bucket(related, bucket):
                counts[bucket] += 1
    return counts
