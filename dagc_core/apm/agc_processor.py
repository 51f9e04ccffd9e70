"""
Automatic Gain Control (AGC) processor for frame-based audio pipelines
"""
import numpy as np
import logging
from typing import Any, Dict, Optional
from .base_processor import AudioProcessor
from ..mono_agc import MonoAgc


class AGCProcessor(AudioProcessor):
    """Adapts MonoAgc to int16/float frames, with optional silence gating"""

    def __init__(self, logger: logging.Logger, target_rms: float = 0.01,
                 distortion_factor: float = 0.0001,
                 silence_threshold_dbfs: Optional[float] = None):
        """
        Initialize AGC processor

        Args:
            logger: Logger instance
            target_rms: Desired output power reference (float scale, full scale = 1.0)
            distortion_factor: Adaptation step size within [0.0, 1.0]
            silence_threshold_dbfs: Freeze the gain for frames whose input RMS is
                below this level; None leaves freezing to the caller
        """
        super().__init__(logger, "AGC",
                         target_rms=target_rms, distortion_factor=distortion_factor,
                         silence_threshold_dbfs=silence_threshold_dbfs)
        self.target_rms = target_rms
        self.distortion_factor = distortion_factor
        self.silence_threshold_dbfs = silence_threshold_dbfs

        # Invalid parameters surface here rather than on the first frame
        self.agc = MonoAgc(target_rms, distortion_factor, logger)

        if silence_threshold_dbfs is not None:
            self.silence_threshold_linear = 10 ** (silence_threshold_dbfs / 20.0)
        else:
            self.silence_threshold_linear = None

    def initialize(self) -> None:
        """Initialize AGC processor"""
        gating = (f"{self.silence_threshold_dbfs}dBFS" if self.silence_threshold_dbfs is not None
                  else "off")
        self.logger.info(f"AGC initialized: target_rms={self.target_rms}, "
                         f"distortion_factor={self.distortion_factor}, silence_gate={gating}")

    def process(self, audio_data: np.ndarray) -> np.ndarray:
        """Apply automatic gain control"""
        self._ensure_initialized()

        if audio_data is None or len(audio_data) == 0:
            return audio_data

        original_dtype = audio_data.dtype
        audio_float = self._to_float32(audio_data)

        if self.silence_threshold_linear is not None:
            self.agc.freeze_gain(self._is_silence(audio_float))

        self.agc.process(audio_float)

        return self._from_float32(audio_float, original_dtype)

    def _is_silence(self, audio_float: np.ndarray) -> bool:
        current_rms = np.sqrt(np.mean(audio_float.astype(np.float64) ** 2))
        return bool(current_rms < self.silence_threshold_linear)

    def freeze_gain(self, freeze: bool) -> None:
        self.agc.freeze_gain(freeze)

    def is_gain_frozen(self) -> bool:
        return self.agc.is_gain_frozen()

    def gain(self) -> float:
        return self.agc.gain()

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info["gain"] = self.agc.gain()
        info["frozen"] = self.agc.is_gain_frozen()
        return info

    def reset_state(self) -> None:
        """Reset AGC state"""
        self.agc = MonoAgc(self.target_rms, self.distortion_factor, self.logger)
