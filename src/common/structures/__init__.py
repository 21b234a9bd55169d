from .correspondence import Correspondence
from .estimation_parameters import \
    DEFAULT_RANK_TOLERANCE, \
    TransformationEstimationParameters
from .point_cloud import \
    PointCloud, \
    PointLike
from .robust_kernel import \
    Sigma, \
    SigmaAbstract, \
    SigmaAdaptive, \
    SigmaUnset, \
    SigmaValue
