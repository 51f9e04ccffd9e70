"""
Errors raised when constructing a gain controller
"""


class AgcError(ValueError):
    """Base class for invalid AGC construction parameters"""

    def __init__(self, value, message: str):
        super().__init__(message)
        self.value = value


class InvalidTargetRms(AgcError):
    """Target RMS is non-positive or non-finite"""

    def __init__(self, value):
        super().__init__(value, f"Invalid target RMS: {value} (must be positive and finite)")


class InvalidDistortionFactor(AgcError):
    """Distortion factor lies outside [0.0, 1.0]"""

    def __init__(self, value):
        super().__init__(value, f"Invalid distortion factor: {value} (must be within [0.0, 1.0])")
