from .centroid import \
    compute_weighted_3d_centroid, \
    demean_points
from .correlation import \
    TransformationAssembler, \
    assemble_rigid_transformation, \
    compute_weighted_correlation, \
    get_transformation_from_correlation
from .transformation_estimation import TransformationEstimationPointToPointRobust
from .weighting import \
    as_sigma, \
    compute_square_distances, \
    compute_welsch_weights, \
    validate_sigma
