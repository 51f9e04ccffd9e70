"""
Construction parameter checks for the gain controller
"""
import numpy as np
from typing import Tuple
from .errors import InvalidTargetRms, InvalidDistortionFactor


def _as_float32(value: float) -> np.float32:
    # out-of-range values become inf or 0, which the checks below reject
    with np.errstate(over='ignore', under='ignore'):
        return np.float32(value)


def is_valid_target_rms(target_rms: float) -> bool:
    # Frames are float32, so the value must stay positive and finite after the cast too
    if not (target_rms > 0 and np.isfinite(target_rms)):
        return False
    narrowed = _as_float32(target_rms)
    return bool(narrowed > 0 and np.isfinite(narrowed))


def is_valid_distortion_factor(distortion_factor: float) -> bool:
    if not (0.0 <= distortion_factor <= 1.0):
        return False
    return bool(0.0 <= _as_float32(distortion_factor) <= 1.0)


def validate_params(target_rms: float, distortion_factor: float) -> Tuple[float, float]:
    """
    Validate gain controller parameters

    Both values must be representable as float32, the native frame format.

    Args:
        target_rms: Desired output power reference, strictly positive and finite
        distortion_factor: Adaptation step size within [0.0, 1.0]

    Returns:
        Tuple of (target_rms, distortion_factor) as floats

    Raises:
        InvalidTargetRms: target_rms is non-positive, NaN, infinite, or leaves
            the float32 range
        InvalidDistortionFactor: distortion_factor is outside [0.0, 1.0] or NaN
    """
    if not is_valid_target_rms(target_rms):
        raise InvalidTargetRms(target_rms)
    if not is_valid_distortion_factor(distortion_factor):
        raise InvalidDistortionFactor(distortion_factor)
    return float(target_rms), float(distortion_factor)
