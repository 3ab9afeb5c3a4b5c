from pydantic import BaseModel


class QualityMetadata(BaseModel):
    sample_count: int
    total_requested: int
    quality_percent: float  # sample_count / total_requested * 100
    min_value: float
    max_value: float
    last_updated: str  # ISO-8601 UTC


class RegionResult(BaseModel):
    """Value, label and metadata committed together onto a region."""
    value: float
    label: str
    metadata: QualityMetadata
