from dagc_core.errors import AgcError, InvalidTargetRms, InvalidDistortionFactor
from dagc_core.validation import validate_params
from dagc_core.mono_agc import MonoAgc, GAIN_STEP_FLOOR

__all__ = [
    'MonoAgc',
    'GAIN_STEP_FLOOR',
    'AgcError',
    'InvalidTargetRms',
    'InvalidDistortionFactor',
    'validate_params'
]
