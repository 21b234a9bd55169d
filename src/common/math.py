from .exceptions import \
    DegenerateInputError, \
    SizeMismatchError
import numpy
from scipy.spatial.transform import Rotation
from typing import Final


_DEFAULT_EPSILON: Final[float] = 0.0001


class MathUtils:
    """
    static class for reused math-related functions.
    """

    def __init__(self):
        raise RuntimeError("This class is not meant to be initialized.")

    @staticmethod
    def is_proper_rotation(
        matrix: numpy.ndarray,
        tolerance: float = _DEFAULT_EPSILON
    ) -> bool:
        """
        :param matrix: 3x3 rotation, or 4x4 transformation of which the upper-left 3x3 block is checked
        :return: True if the rotation is orthonormal with a determinant of +1 (i.e. not a reflection)
        """
        rotation: numpy.ndarray = numpy.asarray(matrix, dtype="float64")[0:3, 0:3]
        if not numpy.allclose(numpy.matmul(rotation.transpose(), rotation), numpy.identity(3), atol=tolerance):
            return False
        return abs(numpy.linalg.det(rotation) - 1.0) <= tolerance

    @staticmethod
    def register_corresponding_points(
        point_set_from: list[list[float]],
        point_set_to: list[list[float]],
        collinearity_do_check: bool = True,
        collinearity_zero_threshold: float = _DEFAULT_EPSILON
    ) -> numpy.ndarray:  # 4x4 transformation matrix, indexed by [row,col]
        """
        Unweighted least-squares rigid registration of points with known correspondence.
        Solution based on: Arun et al. Least square fitting of two 3D point sets (1987)
        Use mirroring solution proposed by Oomori et al.
        Oomori et al. Point cloud matching using singular value decomposition. (2016)
        :param point_set_from:
        :param point_set_to:
        :param collinearity_do_check: Reject point sets that do not span a plane.
        :param collinearity_zero_threshold: Threshold considered zero for the second singular value of the centered points
        """
        if len(point_set_from) != len(point_set_to):
            raise SizeMismatchError("Input point sets must be of identical length.")
        if len(point_set_from) < 3:
            raise DegenerateInputError("Input point sets must be of length 3 or higher.")
        points_from = numpy.asarray(point_set_from, dtype="float64")[:, 0:3]  # as rows
        points_to = numpy.asarray(point_set_to, dtype="float64")[:, 0:3]
        if collinearity_do_check:
            for points in (points_from, points_to):
                # second singular value of the centered points is zero iff they do not span a plane
                singular_values = numpy.linalg.svd(points - numpy.mean(points, axis=0), compute_uv=False)
                if singular_values[1] <= collinearity_zero_threshold:
                    raise DegenerateInputError("Input points appear to be collinear - please check the input.")

        centroid_from = numpy.mean(points_from, axis=0)
        centroid_to = numpy.mean(points_to, axis=0)
        covariance = numpy.matmul((points_from - centroid_from).transpose(), points_to - centroid_to)
        u, _, vh = numpy.linalg.svd(covariance)
        s = numpy.identity(3, dtype="float64")  # s will be the Oomori mirror fix
        s[2, 2] = numpy.sign(numpy.linalg.det(numpy.matmul(u, vh)))
        rotation = numpy.matmul(u, numpy.matmul(s, vh)).transpose()
        translation = centroid_to - numpy.matmul(rotation, centroid_from)
        matrix = numpy.identity(4, dtype="float64")
        matrix[0:3, 0:3] = rotation
        matrix[0:3, 3] = translation
        return matrix

    @staticmethod
    def rotation_difference_radians(
        matrix_a: numpy.ndarray,
        matrix_b: numpy.ndarray
    ) -> float:
        """
        Angle of the relative rotation between the rotation blocks of two transformations.
        """
        rotation_a: numpy.ndarray = numpy.asarray(matrix_a, dtype="float64")[0:3, 0:3]
        rotation_b: numpy.ndarray = numpy.asarray(matrix_b, dtype="float64")[0:3, 0:3]
        relative = numpy.matmul(rotation_a.transpose(), rotation_b)
        return float(numpy.linalg.norm(Rotation.from_matrix(relative).as_rotvec()))

    @staticmethod
    def translation_difference(
        matrix_a: numpy.ndarray,
        matrix_b: numpy.ndarray
    ) -> float:
        translation_a: numpy.ndarray = numpy.asarray(matrix_a, dtype="float64")[0:3, 3]
        translation_b: numpy.ndarray = numpy.asarray(matrix_b, dtype="float64")[0:3, 3]
        return float(numpy.linalg.norm(translation_a - translation_b))

    @staticmethod
    def transform_points(
        points: list[list[float]] | numpy.ndarray,  # [point_index][x/y/z]
        transformation: numpy.ndarray
    ) -> numpy.ndarray:
        point_array: numpy.ndarray = numpy.asarray(points, dtype="float64")[:, 0:3]
        transformation = numpy.asarray(transformation, dtype="float64")
        return numpy.matmul(point_array, transformation[0:3, 0:3].transpose()) + transformation[0:3, 3]
