from src.common import \
    InvalidParameterError, \
    SigmaAbstract, \
    SigmaAdaptive, \
    SigmaUnset, \
    SigmaValue
import numpy
from typing import Final


# In adaptive mode, sigma^2 = max(d^2) / 9, i.e. sigma is a third of the largest residual
_ADAPTIVE_SQUARE_SIGMA_DIVISOR: Final[float] = 9.0


def as_sigma(
    sigma: SigmaAbstract | float | None
) -> SigmaAbstract:
    """
    Normalize the accepted representations of sigma into a validated tagged variant.
    None means unset (uniform weighting), and a number means a fixed Welsch scale.
    """
    if sigma is None:
        return SigmaUnset()
    if isinstance(sigma, bool):
        raise InvalidParameterError("Sigma cannot be a boolean.")
    if isinstance(sigma, (int, float, numpy.integer, numpy.floating)):
        sigma = SigmaValue(value=float(sigma))
    if not isinstance(sigma, SigmaAbstract):
        raise InvalidParameterError(f"Unsupported sigma of type {type(sigma).__name__}.")
    validate_sigma(sigma)
    return sigma.model_copy()


def validate_sigma(
    sigma: SigmaAbstract
) -> None:
    if isinstance(sigma, SigmaValue):
        if not numpy.isfinite(sigma.value) or sigma.value <= 0.0:
            raise InvalidParameterError(f"Sigma must be a finite, positive value. Got {sigma.value}.")
    elif not isinstance(sigma, (SigmaUnset, SigmaAdaptive)):
        raise InvalidParameterError(f"Unsupported sigma of type {type(sigma).__name__}.")


def compute_square_distances(
    source_points: numpy.ndarray,  # [point_index][x/y/z]
    target_points: numpy.ndarray   # [point_index][x/y/z]
) -> numpy.ndarray:
    offsets: numpy.ndarray = numpy.asarray(target_points)[:, 0:3] - numpy.asarray(source_points)[:, 0:3]
    return numpy.einsum("ij,ij->i", offsets, offsets)


def compute_welsch_weights(
    square_distances: numpy.ndarray,
    sigma: SigmaAbstract
) -> numpy.ndarray:
    """
    Welsch weight w = exp(-d^2 / (2 sigma^2)) for each pair, given its squared residual d^2.
    Large residuals (likely mismatches) are attenuated relative to small ones.
    See Zhang, Yao, Deng. Fast and Robust Iterative Closest Point. (2022)
    """
    validate_sigma(sigma)
    square_distances = numpy.asarray(square_distances, dtype="float64")
    if isinstance(sigma, SigmaUnset):
        return numpy.ones(square_distances.shape, dtype="float64")
    square_sigma: float
    if isinstance(sigma, SigmaAdaptive):
        if square_distances.size == 0:
            return numpy.ones(square_distances.shape, dtype="float64")
        square_sigma = float(numpy.max(square_distances)) / _ADAPTIVE_SQUARE_SIGMA_DIVISOR
        if square_sigma <= 0.0:  # every pair already coincides
            return numpy.ones(square_distances.shape, dtype="float64")
    else:
        square_sigma = sigma.value * sigma.value
    return numpy.exp(-square_distances / (2.0 * square_sigma))
