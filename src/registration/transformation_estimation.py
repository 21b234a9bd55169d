from .centroid import \
    compute_weighted_3d_centroid, \
    demean_points
from .correlation import \
    TransformationAssembler, \
    assemble_rigid_transformation, \
    get_transformation_from_correlation
from .weighting import \
    as_sigma, \
    compute_square_distances, \
    compute_welsch_weights, \
    validate_sigma
from src.common import \
    DEFAULT_RANK_TOLERANCE, \
    Correspondence, \
    DegenerateInputError, \
    InvalidParameterError, \
    NumericFailureError, \
    PointCloud, \
    SigmaAbstract, \
    SizeMismatchError, \
    TransformationEstimationParameters
import logging
import numpy
from typing import Final, Sequence


logger = logging.getLogger(__name__)


_SUPPORTED_PRECISIONS: Final[tuple[str, ...]] = ("float32", "float64")

PointCloudInput = PointCloud | list[list[float]] | numpy.ndarray


class TransformationEstimationPointToPointRobust:
    """
    SVD-based estimation of the rigid transformation aligning corresponding points,
    minimizing the Welsch function of the residuals instead of the L2 norm.
    See Zhang, Yao, Deng. Fast and Robust Iterative Closest Point. (2022)

    The residual of each pair is the distance between the source and target points as given,
    so the caller (e.g. an iterative closest point loop) is expected to supply source points
    already positioned by its current estimate.

    Instances hold configuration only. If sigma is changed while an estimation is in progress
    on another thread, the caller is responsible for serializing access.
    """

    _sigma: SigmaAbstract
    _dtype: numpy.dtype
    _rank_tolerance: float
    _transformation_assembler: TransformationAssembler

    def __init__(
        self,
        sigma: SigmaAbstract | float | None = None,
        precision: str = "float64",
        rank_tolerance: float = DEFAULT_RANK_TOLERANCE,
        transformation_assembler: TransformationAssembler | None = None
    ):
        """
        :param sigma: Welsch scale. None (unset) weights all pairs equally.
        :param precision: "float32" or "float64", scalar type of the output matrix
        :param rank_tolerance: see TransformationEstimationParameters
        :param transformation_assembler: combines rotation and translation into the output matrix
        """
        if precision not in _SUPPORTED_PRECISIONS:
            raise InvalidParameterError(f"Precision must be one of {_SUPPORTED_PRECISIONS}. Got {precision}.")
        if not numpy.isfinite(rank_tolerance) or rank_tolerance < 0.0:
            raise InvalidParameterError(f"Rank tolerance must be finite and non-negative. Got {rank_tolerance}.")
        self._sigma = as_sigma(sigma)
        self._dtype = numpy.dtype(precision)
        self._rank_tolerance = rank_tolerance
        if transformation_assembler is None:
            transformation_assembler = assemble_rigid_transformation
        self._transformation_assembler = transformation_assembler

    @staticmethod
    def from_parameters(
        parameters: TransformationEstimationParameters,
        transformation_assembler: TransformationAssembler | None = None
    ) -> 'TransformationEstimationPointToPointRobust':
        return TransformationEstimationPointToPointRobust(
            sigma=parameters.sigma,
            precision=parameters.precision,
            rank_tolerance=parameters.rank_tolerance,
            transformation_assembler=transformation_assembler)

    def get_precision(self) -> numpy.dtype:
        return self._dtype

    def get_sigma(self) -> SigmaAbstract:
        return self._sigma.model_copy()

    def set_sigma(
        self,
        sigma: SigmaAbstract | float | None
    ) -> None:
        self._sigma = as_sigma(sigma)
        logger.debug(f"Sigma set to {self._sigma}.")

    def estimate_rigid_transformation(
        self,
        cloud_src: PointCloudInput,
        cloud_tgt: PointCloudInput
    ) -> numpy.ndarray:  # 4x4 transformation matrix, indexed by [row,col]
        """
        Points are paired by position, so both clouds must be of the same size.
        """
        cloud_src = _as_point_cloud(cloud_src)
        cloud_tgt = _as_point_cloud(cloud_tgt)
        if len(cloud_src) != len(cloud_tgt):
            raise SizeMismatchError(
                f"Number of source points ({len(cloud_src)}) differs from "
                f"number of target points ({len(cloud_tgt)}).")
        return self._estimate(
            source_points=cloud_src.points,
            source_is_dense=cloud_src.is_dense,
            target_points=cloud_tgt.points,
            target_is_dense=cloud_tgt.is_dense)

    def estimate_rigid_transformation_with_source_indices(
        self,
        cloud_src: PointCloudInput,
        indices_src: Sequence[int],
        cloud_tgt: PointCloudInput
    ) -> numpy.ndarray:  # 4x4 transformation matrix, indexed by [row,col]
        """
        The source point at indices_src[i] is paired with target point i.
        """
        cloud_src = _as_point_cloud(cloud_src)
        cloud_tgt = _as_point_cloud(cloud_tgt)
        index_array_src: numpy.ndarray = _validate_indices(indices_src, len(cloud_src), "indices_src")
        if len(index_array_src) != len(cloud_tgt):
            raise SizeMismatchError(
                f"Number of source indices ({len(index_array_src)}) differs from "
                f"number of target points ({len(cloud_tgt)}).")
        return self._estimate(
            source_points=cloud_src.points[index_array_src],
            source_is_dense=cloud_src.is_dense,
            target_points=cloud_tgt.points,
            target_is_dense=cloud_tgt.is_dense)

    def estimate_rigid_transformation_with_indices(
        self,
        cloud_src: PointCloudInput,
        indices_src: Sequence[int],
        cloud_tgt: PointCloudInput,
        indices_tgt: Sequence[int]
    ) -> numpy.ndarray:  # 4x4 transformation matrix, indexed by [row,col]
        """
        The source point at indices_src[i] is paired with the target point at indices_tgt[i].
        """
        cloud_src = _as_point_cloud(cloud_src)
        cloud_tgt = _as_point_cloud(cloud_tgt)
        index_array_src: numpy.ndarray = _validate_indices(indices_src, len(cloud_src), "indices_src")
        index_array_tgt: numpy.ndarray = _validate_indices(indices_tgt, len(cloud_tgt), "indices_tgt")
        if len(index_array_src) != len(index_array_tgt):
            raise SizeMismatchError(
                f"Number of source indices ({len(index_array_src)}) differs from "
                f"number of target indices ({len(index_array_tgt)}).")
        return self._estimate(
            source_points=cloud_src.points[index_array_src],
            source_is_dense=cloud_src.is_dense,
            target_points=cloud_tgt.points[index_array_tgt],
            target_is_dense=cloud_tgt.is_dense)

    def estimate_rigid_transformation_from_correspondences(
        self,
        cloud_src: PointCloudInput,
        cloud_tgt: PointCloudInput,
        correspondences: Sequence[Correspondence]
    ) -> numpy.ndarray:  # 4x4 transformation matrix, indexed by [row,col]
        """
        General case, the clouds need not be of the same size.
        The weight of each correspondence is multiplied into its robust weight.
        """
        cloud_src = _as_point_cloud(cloud_src)
        cloud_tgt = _as_point_cloud(cloud_tgt)
        index_array_src: numpy.ndarray = _validate_indices(
            [correspondence.source_index for correspondence in correspondences],
            len(cloud_src),
            "correspondences (source_index)")
        index_array_tgt: numpy.ndarray = _validate_indices(
            [correspondence.target_index for correspondence in correspondences],
            len(cloud_tgt),
            "correspondences (target_index)")
        prior_weights = numpy.array(
            [correspondence.weight for correspondence in correspondences],
            dtype="float64")
        if not numpy.all(numpy.isfinite(prior_weights)) or numpy.any(prior_weights < 0.0):
            raise InvalidParameterError("Correspondence weights must be finite and non-negative.")
        return self._estimate(
            source_points=cloud_src.points[index_array_src],
            source_is_dense=cloud_src.is_dense,
            target_points=cloud_tgt.points[index_array_tgt],
            target_is_dense=cloud_tgt.is_dense,
            prior_weights=prior_weights)

    def _estimate(
        self,
        source_points: numpy.ndarray,  # [pair_index][x/y/z]
        source_is_dense: bool,
        target_points: numpy.ndarray,  # [pair_index][x/y/z]
        target_is_dense: bool,
        prior_weights: numpy.ndarray | None = None
    ) -> numpy.ndarray:
        validate_sigma(self._sigma)
        pair_count: int = source_points.shape[0]
        if pair_count == 0:
            raise DegenerateInputError("No point pairs were provided.")

        # A pair is dropped (weight zero) if either of its points is not finite.
        # Coordinates of dropped pairs are zeroed.
        valid_mask = numpy.ones(pair_count, dtype=bool)
        if not source_is_dense:
            valid_mask &= numpy.all(numpy.isfinite(source_points), axis=1)
        if not target_is_dense:
            valid_mask &= numpy.all(numpy.isfinite(target_points), axis=1)
        valid_count: int = int(numpy.count_nonzero(valid_mask))
        if valid_count < pair_count:
            logger.warning(f"Ignoring {pair_count - valid_count} of {pair_count} point pairs with non-finite points.")
            source_points = numpy.where(valid_mask[:, numpy.newaxis], source_points, 0.0)
            target_points = numpy.where(valid_mask[:, numpy.newaxis], target_points, 0.0)

        square_distances = compute_square_distances(
            source_points=source_points,
            target_points=target_points)
        weights = compute_welsch_weights(
            square_distances=square_distances,
            sigma=self._sigma)
        if prior_weights is not None:
            weights = weights * prior_weights
        weights = numpy.where(valid_mask, weights, 0.0)
        weight_sum: float = float(numpy.sum(weights))
        if not numpy.isfinite(weight_sum):
            raise NumericFailureError("Weights contain non-finite values. Dense point clouds may contain invalid points.")
        if weight_sum <= 0.0:
            raise DegenerateInputError("All point pairs have zero weight.")
        weights = weights / weight_sum

        centroid_source = numpy.array([0.0, 0.0, 0.0, 1.0])
        centroid_target = numpy.array([0.0, 0.0, 0.0, 1.0])
        source_count: int = compute_weighted_3d_centroid(
            points=source_points,
            weights=weights,
            centroid=centroid_source,
            is_dense=source_is_dense)
        target_count: int = compute_weighted_3d_centroid(
            points=target_points,
            weights=weights,
            centroid=centroid_target,
            is_dense=target_is_dense)
        if source_count == 0 or target_count == 0:
            raise DegenerateInputError("No valid points contribute to the centroids.")

        transformation_matrix = get_transformation_from_correlation(
            source_demean=demean_points(source_points, centroid_source),
            centroid_source=centroid_source,
            target_demean=demean_points(target_points, centroid_target),
            centroid_target=centroid_target,
            weights=weights,
            rank_tolerance=self._rank_tolerance,
            dtype=self._dtype,
            assembler=self._transformation_assembler)
        logger.debug(
            f"Estimated transformation from {source_count} of {pair_count} point pairs "
            f"with sigma {self._sigma.parsable_type}.")
        return transformation_matrix


def _as_point_cloud(
    cloud: PointCloudInput
) -> PointCloud:
    if isinstance(cloud, PointCloud):
        return cloud
    return PointCloud(points=cloud)


def _validate_indices(
    indices: Sequence[int],
    point_count: int,
    label: str
) -> numpy.ndarray:
    index_array: numpy.ndarray = numpy.asarray(indices)
    if index_array.size == 0:
        return numpy.zeros(0, dtype=numpy.int64)
    if index_array.ndim != 1 or not numpy.issubdtype(index_array.dtype, numpy.integer):
        raise SizeMismatchError(f"{label} must be a flat sequence of integer indices.")
    if numpy.any(index_array < 0) or numpy.any(index_array >= point_count):
        raise SizeMismatchError(f"{label} contains indices outside of the range [0, {point_count}).")
    return index_array.astype(numpy.int64)
