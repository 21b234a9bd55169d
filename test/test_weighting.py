from src.common import \
    InvalidParameterError, \
    SigmaAdaptive, \
    SigmaUnset, \
    SigmaValue
from src.registration import \
    as_sigma, \
    compute_square_distances, \
    compute_welsch_weights
import numpy
from typing import Final
import unittest


EPSILON: Final[float] = 1e-9


class TestWeighting(unittest.TestCase):

    def test_square_distances(self):
        source_points = numpy.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]])
        target_points = numpy.array([[3.0, 4.0, 0.0], [1.0, 1.0, 1.0]])
        square_distances = compute_square_distances(source_points, target_points)
        self.assertAlmostEqual(square_distances[0], 25.0, delta=EPSILON)
        self.assertAlmostEqual(square_distances[1], 0.0, delta=EPSILON)

    def test_unset_is_uniform(self):
        weights = compute_welsch_weights(numpy.array([0.0, 1.0, 1e6]), SigmaUnset())
        self.assertEqual(weights.tolist(), [1.0, 1.0, 1.0])

    def test_welsch_values(self):
        sigma = 2.0
        square_distances = numpy.array([0.0, 1.0, 4.0, 100.0])
        weights = compute_welsch_weights(square_distances, SigmaValue(value=sigma))
        for square_distance, weight in zip(square_distances, weights):
            self.assertAlmostEqual(weight, numpy.exp(-square_distance / (2.0 * sigma * sigma)), delta=EPSILON)
        self.assertEqual(weights[0], 1.0)
        self.assertTrue(numpy.all(numpy.diff(weights) < 0.0))  # larger residual, smaller weight
        self.assertTrue(numpy.all(weights > 0.0))

    def test_adaptive(self):
        square_distances = numpy.array([0.0, 9.0, 36.0])
        weights = compute_welsch_weights(square_distances, SigmaAdaptive())
        # sigma^2 = 36 / 9 = 4
        self.assertAlmostEqual(weights[1], numpy.exp(-9.0 / 8.0), delta=EPSILON)
        self.assertAlmostEqual(weights[2], numpy.exp(-36.0 / 8.0), delta=EPSILON)

    def test_adaptive_perfect_fit(self):
        weights = compute_welsch_weights(numpy.zeros(4), SigmaAdaptive())
        self.assertEqual(weights.tolist(), [1.0, 1.0, 1.0, 1.0])

    def test_invalid_sigma(self):
        for invalid_value in (0.0, -1.0, float("nan"), float("inf")):
            with self.assertRaises(InvalidParameterError):
                compute_welsch_weights(numpy.ones(3), SigmaValue(value=invalid_value))
            with self.assertRaises(InvalidParameterError):
                as_sigma(invalid_value)

    def test_as_sigma(self):
        self.assertIsInstance(as_sigma(None), SigmaUnset)
        self.assertIsInstance(as_sigma(SigmaAdaptive()), SigmaAdaptive)
        sigma = as_sigma(0.5)
        self.assertIsInstance(sigma, SigmaValue)
        self.assertEqual(sigma.value, 0.5)
        self.assertEqual(as_sigma(2).value, 2.0)
        with self.assertRaises(InvalidParameterError):
            as_sigma(True)
        with self.assertRaises(InvalidParameterError):
            as_sigma("0.5")
