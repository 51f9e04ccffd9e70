"""
Single-channel digital automatic gain control
"""
import logging
import numpy as np
from typing import Optional
from dagc_shared import get_clean_logger
from .validation import validate_params

# Lower bound of the per-sample multiplicative step; keeps the gain from
# collapsing to zero or flipping sign on large power spikes
GAIN_STEP_FLOOR = 0.1


class MonoAgc:
    """
    Feedback AGC driving output sample power toward a target reference.

    For every sample the current gain is applied first, then (unless frozen)
    the gain is adapted from the power of the emitted sample:

        y = x_out ** 2 / target_rms
        z = 1 + distortion_factor * (1 - y)
        gain *= max(z, GAIN_STEP_FLOOR)

    Instances are not thread safe; frames must be fed in temporal order.
    """

    def __init__(self, target_rms: float, distortion_factor: float,
                 logger: Optional[logging.Logger] = None):
        """
        Create a gain controller

        Args:
            target_rms: Desired output power reference, strictly positive and finite
            distortion_factor: Adaptation step size within [0.0, 1.0]; values around
                1e-3..1e-4 adapt without audible distortion
            logger: Optional parent logger

        Raises:
            InvalidTargetRms: target_rms is non-positive, NaN or infinite
            InvalidDistortionFactor: distortion_factor is outside [0.0, 1.0]
        """
        self._target_rms, self._distortion_factor = validate_params(target_rms, distortion_factor)
        self._gain = 1.0
        self._frozen = False
        self.logger = get_clean_logger("mono_agc", logger)
        self.logger.debug(f"MonoAgc created: target_rms={self._target_rms}, "
                          f"distortion_factor={self._distortion_factor}")

    @property
    def target_rms(self) -> float:
        return self._target_rms

    @property
    def distortion_factor(self) -> float:
        return self._distortion_factor

    def freeze_gain(self, freeze: bool) -> None:
        """Suspend (True) or resume (False) gain adaptation"""
        freeze = bool(freeze)
        if freeze != self._frozen:
            self.logger.info(f"Gain {'frozen' if freeze else 'unfrozen'} at {self._gain:.6f}")
        self._frozen = freeze

    def is_gain_frozen(self) -> bool:
        return self._frozen

    def gain(self) -> float:
        return self._gain

    def process(self, samples) -> None:
        """
        Apply the gain to a frame in place, adapting it sample by sample.

        Args:
            samples: 1-D NumPy floating-point array or mutable sequence of floats.
                Arrays are processed in their own dtype, so float32 frames get
                float32 arithmetic. NaN/Inf samples are not filtered and propagate
                into the gain.
        """
        if isinstance(samples, np.ndarray):
            if not np.issubdtype(samples.dtype, np.floating):
                raise TypeError(f"Expected a floating-point frame, got dtype {samples.dtype}")
            if samples.ndim != 1:
                raise ValueError(f"Expected a mono (1-D) frame, got shape {samples.shape}")
            scalar = samples.dtype.type
        else:
            scalar = float

        n = len(samples)
        if n == 0:
            return

        gain = scalar(self._gain)

        with np.errstate(over='ignore', invalid='ignore', divide='ignore'):
            if self._frozen:
                if isinstance(samples, np.ndarray):
                    samples *= gain
                else:
                    for i in range(n):
                        samples[i] = samples[i] * gain
                return

            target_rms = scalar(self._target_rms)
            distortion_factor = scalar(self._distortion_factor)
            one = scalar(1.0)
            floor = scalar(GAIN_STEP_FLOOR)

            for i in range(n):
                x = samples[i] * gain
                samples[i] = x
                y = x * x / target_rms
                z = one + distortion_factor * (one - y)
                # NaN steps fall through unclamped
                gain = gain * (floor if z < floor else z)

        self._gain = float(gain)

    def __repr__(self) -> str:
        return (f"MonoAgc(target_rms={self._target_rms!r}, distortion_factor={self._distortion_factor!r}, "
                f"gain={self._gain!r}, frozen={self._frozen!r})")
