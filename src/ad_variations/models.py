from __future__ import annotations
from typing import Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

CreativeType = Literal["all", "video", "image"]
SortMode     = Literal["auto", "most_variations", "least_variations", "newest"]
Bucket       = Literal["more_than_10", "5_10", "3_5", "less_than_3"]
Strategy     = Literal["links", "phash"]

# -------- input -------------------------------------------------------------
class Ad(BaseModel):
    """One creative row as returned by the ads table; unknown columns are kept."""
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[int, str]] = None
    ad_archive_id: Optional[str] = None
    page_name: Optional[str] = None
    image_url: Optional[str] = None
    storage_path: Optional[str] = None
    text: Optional[str] = None
    title: Optional[str] = None
    display_format: Optional[str] = None
    created_at: Optional[str] = None
    duplicates_links: Optional[str] = None

    # perceptual hash aliases, see keys.HASH_FIELDS
    creative_phash: Optional[str] = None
    creative_hash: Optional[str] = None


class VariationRequest(BaseModel):
    ads: List[Ad] = Field(default_factory=list)
    strategy: Strategy = "links"
    creative_type: CreativeType = "all"
    sort: SortMode = "auto"
    bucket: Optional[Bucket] = None
    threshold: Optional[int] = Field(default=None, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=24, ge=1, le=500)


# -------- derived -----------------------------------------------------------
class PhashClusters(BaseModel):
    clusters: Dict[str, List[str]] = Field(default_factory=dict)
    key_to_rep: Dict[str, str] = Field(default_factory=dict)
    rep_size: Dict[str, int] = Field(default_factory=dict)


# -------- response ----------------------------------------------------------
class FormatDistribution(BaseModel):
    video: int = 0
    static: int = 0
    carousel: int = 0
    other: int = 0

class VariationGroup(BaseModel):
    representative: Ad
    related_count: int
    ad_ids: List[Union[int, str, None]] = []

class VariationResponse(BaseModel):
    total_ads: int
    total_groups: int
    matching_groups: int
    average_variation_count: float
    bucket_counts: Dict[str, int]
    format_distribution: FormatDistribution
    page: int
    total_pages: int
    groups: List[VariationGroup]
    generated_at: str
