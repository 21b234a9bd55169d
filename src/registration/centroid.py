from src.common import SizeMismatchError
import numpy


def compute_weighted_3d_centroid(
    points: numpy.ndarray,   # [point_index][x/y/z]
    weights: numpy.ndarray,  # [point_index]
    centroid: numpy.ndarray,
    is_dense: bool = True
) -> int:
    """
    Compute the weighted 3D centroid of a set of points.
    :param points: input points
    :param weights: one non-negative weight per point
    :param centroid: output, array of 4 elements. Its last component is set to 1,
        which allows to transform the centroid with 4x4 matrices.
    :param is_dense: if False, points with a non-finite coordinate are skipped
    :return: number of valid (finite, positively weighted) points used to determine the centroid.
        If it is 0, centroid is not changed, and thus not valid.
    """
    points = numpy.asarray(points, dtype="float64")
    weights = numpy.asarray(weights, dtype="float64")
    if points.ndim != 2 or points.shape[1] < 3:
        raise SizeMismatchError(f"Expected points of shape (N, 3). Got {points.shape}.")
    if weights.shape != (points.shape[0],):
        raise SizeMismatchError(f"Expected {points.shape[0]} weights. Got shape {weights.shape}.")
    if centroid.shape != (4,):
        raise SizeMismatchError(f"Expected a centroid of shape (4,). Got {centroid.shape}.")

    valid_mask: numpy.ndarray = weights > 0.0
    if not is_dense:
        valid_mask &= numpy.all(numpy.isfinite(points[:, 0:3]), axis=1)
    valid_count: int = int(numpy.count_nonzero(valid_mask))
    if valid_count == 0:
        return 0
    valid_weights: numpy.ndarray = weights[valid_mask]
    weight_sum: float = float(numpy.sum(valid_weights))
    centroid[0:3] = numpy.matmul(valid_weights, points[valid_mask, 0:3]) / weight_sum
    centroid[3] = 1.0
    return valid_count


def demean_points(
    points: numpy.ndarray,   # [point_index][x/y/z]
    centroid: numpy.ndarray
) -> numpy.ndarray:  # [x/y/z][point_index]
    """
    Subtract the centroid from each point, returning the points as columns (3 x N).
    """
    points = numpy.asarray(points, dtype="float64")
    return (points[:, 0:3] - centroid[0:3]).transpose()
