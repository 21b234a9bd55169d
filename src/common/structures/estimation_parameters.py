from .robust_kernel import Sigma, SigmaUnset
from pydantic import BaseModel, Field
from typing import Final, Literal


DEFAULT_RANK_TOLERANCE: Final[float] = 1e-9


class TransformationEstimationParameters(BaseModel):
    # Scale of the Welsch kernel. Unset means every pair is weighted equally.
    sigma: Sigma = Field(default_factory=SigmaUnset)

    # Scalar type of the returned transformation matrix. Computation itself is always in double precision.
    precision: Literal["float32", "float64"] = Field(default="float64")

    # The correlation matrix is considered rank-deficient (e.g. collinear points)
    # when its second singular value is at most this fraction of its first
    rank_tolerance: float = Field(default=DEFAULT_RANK_TOLERANCE)
