from src.common import MathUtils
import numpy
from scipy.spatial.transform import Rotation
from typing import Final
from unittest import TestCase


EPSILON: Final[float] = 0.0001


class TestMathUtils(TestCase):

    def test_not_instantiable(self):
        with self.assertRaises(RuntimeError):
            MathUtils()

    def test_is_proper_rotation(self):
        rotation = Rotation.from_euler(seq="xyz", angles=[10, 20, 30], degrees=True).as_matrix()
        self.assertTrue(MathUtils.is_proper_rotation(rotation))
        transformation = numpy.identity(4)
        transformation[0:3, 0:3] = rotation
        transformation[0:3, 3] = [1.0, 2.0, 3.0]
        self.assertTrue(MathUtils.is_proper_rotation(transformation))

    def test_is_proper_rotation_rejects_reflection_and_scale(self):
        reflection = numpy.diag([1.0, 1.0, -1.0])
        self.assertFalse(MathUtils.is_proper_rotation(reflection))
        scaled = numpy.identity(3) * 2.0
        self.assertFalse(MathUtils.is_proper_rotation(scaled))

    def test_rotation_difference_radians(self):
        matrix_a = numpy.identity(4)
        matrix_b = numpy.identity(4)
        matrix_b[0:3, 0:3] = Rotation.from_euler(seq="y", angles=30, degrees=True).as_matrix()
        self.assertAlmostEqual(
            MathUtils.rotation_difference_radians(matrix_a, matrix_b),
            numpy.radians(30),
            delta=EPSILON)
        self.assertAlmostEqual(MathUtils.rotation_difference_radians(matrix_b, matrix_b), 0.0, delta=EPSILON)

    def test_translation_difference(self):
        matrix_a = numpy.identity(4)
        matrix_b = numpy.identity(4)
        matrix_b[0:3, 3] = [3.0, 4.0, 0.0]
        self.assertAlmostEqual(MathUtils.translation_difference(matrix_a, matrix_b), 5.0, delta=EPSILON)

    def test_transform_points(self):
        transformation = numpy.identity(4)
        transformation[0:3, 0:3] = Rotation.from_euler(seq="z", angles=90, degrees=True).as_matrix()
        transformation[0:3, 3] = [2.0, 0.0, 0.0]
        transformed = MathUtils.transform_points([[1.0, 0.0, 0.0], [0.0, 1.0, 5.0]], transformation)
        expected = [[2.0, 1.0, 0.0], [1.0, 0.0, 5.0]]
        for point_index in range(0, 2):
            for dimension_index in range(0, 3):
                self.assertAlmostEqual(
                    transformed[point_index][dimension_index],
                    expected[point_index][dimension_index],
                    delta=EPSILON)
