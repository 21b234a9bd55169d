from ..exceptions import SizeMismatchError
import numpy
from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class PointLike(Protocol):
    """
    Minimal point-access capability: anything exposing x, y, and z coordinates.
    """
    x: float
    y: float
    z: float


class PointCloud:
    """
    Ordered set of 3D points, stored as an N x 3 array indexed by [point_index][x/y/z].
    A dense cloud is guaranteed by the caller to contain only finite coordinates,
    so validity checks are skipped for it.
    """
    points: numpy.ndarray
    is_dense: bool

    def __init__(
        self,
        points: list[list[float]] | numpy.ndarray,
        is_dense: bool | None = None
    ):
        """
        :param points: [point_index][x/y/z], a fourth (homogeneous) column is accepted and discarded.
        :param is_dense: If None, it is inferred from whether all coordinates are finite.
        """
        try:
            point_array: numpy.ndarray = numpy.array(points, dtype="float64")
        except ValueError as e:
            raise SizeMismatchError(f"Points could not be read as an array of coordinates: {str(e)}") from e
        if point_array.size == 0:
            point_array = point_array.reshape((0, 3))
        if point_array.ndim != 2 or point_array.shape[1] not in (3, 4):
            raise SizeMismatchError(f"Expected points of shape (N, 3) or (N, 4). Got {point_array.shape}.")
        self.points = point_array[:, 0:3]
        self.points.flags.writeable = False
        if is_dense is None:
            is_dense = bool(numpy.all(numpy.isfinite(self.points)))
        self.is_dense = is_dense

    def __len__(self) -> int:
        return self.points.shape[0]

    def finite_mask(self) -> numpy.ndarray:
        """
        Boolean array, True where all three coordinates of the point are finite.
        """
        return numpy.all(numpy.isfinite(self.points), axis=1)

    def is_finite(self, point_index: int) -> bool:
        return bool(numpy.all(numpy.isfinite(self.points[point_index])))

    @staticmethod
    def from_points(
        points: Iterable[PointLike],
        is_dense: bool | None = None
    ) -> 'PointCloud':
        return PointCloud(
            points=[[point.x, point.y, point.z] for point in points],
            is_dense=is_dense)
