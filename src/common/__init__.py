from .exceptions import \
    ConfigurationError, \
    DegenerateInputError, \
    InvalidParameterError, \
    NumericFailureError, \
    RegistrationError, \
    SizeMismatchError
from .math import MathUtils
from .serialization import IOUtils
from .structures import \
    DEFAULT_RANK_TOLERANCE, \
    Correspondence, \
    PointCloud, \
    PointLike, \
    Sigma, \
    SigmaAbstract, \
    SigmaAdaptive, \
    SigmaUnset, \
    SigmaValue, \
    TransformationEstimationParameters
