# Weighted variant of: Arun et al. Least square fitting of two 3D point sets (1987)
# Use mirroring solution proposed by Oomori et al.
# Oomori et al. Point cloud matching using singular value decomposition. (2016)
from src.common import \
    DEFAULT_RANK_TOLERANCE, \
    DegenerateInputError, \
    NumericFailureError
import numpy
from typing import Callable


# (rotation 3x3, translation 3, dtype) -> 4x4 transformation matrix
TransformationAssembler = Callable[[numpy.ndarray, numpy.ndarray, numpy.dtype], numpy.ndarray]


def assemble_rigid_transformation(
    rotation: numpy.ndarray,
    translation: numpy.ndarray,
    dtype: numpy.dtype
) -> numpy.ndarray:  # 4x4 transformation matrix, indexed by [row,col]
    matrix = numpy.identity(4, dtype=dtype)
    matrix[0:3, 0:3] = rotation
    matrix[0:3, 3] = translation[0:3].reshape(3)
    return matrix


def compute_weighted_correlation(
    source_demean: numpy.ndarray,  # [x/y/z][point_index]
    target_demean: numpy.ndarray,  # [x/y/z][point_index]
    weights: numpy.ndarray         # [point_index]
) -> numpy.ndarray:
    """
    H = sum_i w_i * src_i * tgt_i^T, a 3x3 matrix
    """
    return numpy.matmul(source_demean * weights, target_demean.transpose())


def get_transformation_from_correlation(
    source_demean: numpy.ndarray,
    centroid_source: numpy.ndarray,
    target_demean: numpy.ndarray,
    centroid_target: numpy.ndarray,
    weights: numpy.ndarray,
    rank_tolerance: float = DEFAULT_RANK_TOLERANCE,
    dtype: numpy.dtype | str = "float64",
    assembler: TransformationAssembler = assemble_rigid_transformation
) -> numpy.ndarray:  # 4x4 transformation matrix, indexed by [row,col]
    """
    Obtain the rigid transformation minimizing the weighted sum of squared residuals
    from the correlation matrix of the demeaned point sets.
    :param source_demean: source points minus centroid_source, as columns
    :param centroid_source: weighted centroid of the source points, homogeneous (4 elements)
    :param target_demean: target points minus centroid_target, as columns
    :param centroid_target: weighted centroid of the target points, homogeneous (4 elements)
    :param weights: one weight per column
    :param rank_tolerance: relative threshold on the second singular value, below which
        the rotation is not uniquely determined (e.g. collinear or coincident points)
    :param dtype: scalar type of the output matrix
    :param assembler: combines rotation and translation into the output matrix
    """
    correlation = compute_weighted_correlation(
        source_demean=source_demean,
        target_demean=target_demean,
        weights=weights)
    if not numpy.all(numpy.isfinite(correlation)):
        raise NumericFailureError("Correlation matrix contains non-finite values.")
    try:
        u, singular_values, vh = numpy.linalg.svd(correlation)
    except numpy.linalg.LinAlgError as e:
        raise NumericFailureError(f"Singular value decomposition failed: {str(e)}") from e
    if singular_values[0] <= 0.0 or singular_values[1] <= rank_tolerance * singular_values[0]:
        raise DegenerateInputError(
            "Point configuration does not determine a unique rotation "
            f"(singular values {singular_values.tolist()}). Points may be coincident or collinear.")

    v = vh.transpose()
    mirror_fix = numpy.identity(3, dtype="float64")
    if numpy.linalg.det(numpy.matmul(v, u.transpose())) < 0.0:
        mirror_fix[2, 2] = -1.0
    rotation = numpy.matmul(v, numpy.matmul(mirror_fix, u.transpose()))
    translation = centroid_target[0:3] - numpy.matmul(rotation, centroid_source[0:3])
    return assembler(rotation, translation, numpy.dtype(dtype))
