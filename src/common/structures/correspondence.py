from pydantic import BaseModel, Field


class Correspondence(BaseModel):
    """
    A claimed match between a point of the source cloud and a point of the target cloud.
    Duplicate indices are allowed within a list of correspondences.
    """
    source_index: int = Field()
    target_index: int = Field()

    # Informational only, residuals are recomputed from the point coordinates
    distance: float | None = Field(default=None)

    # Prior weight, multiplied into the robust weight. Zero excludes the pair.
    weight: float = Field(default=1.0)
