"""
Frame processor base class and the chain that feeds host audio through it
"""
import logging
import numpy as np
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from dagc_shared import get_clean_logger

INT16_SCALE = 32768.0
INT16_MAX = 32767.0
# Samples above this fraction of full scale are soft clipped on the way back to int16
SOFT_CLIP_KNEE = 0.95


class AudioProcessor(ABC):
    """One stage of a frame pipeline, configured by keyword arguments"""

    def __init__(self, logger: logging.Logger, name: str, **kwargs):
        self.logger = get_clean_logger(name, logger)
        self.name = name
        self.config = kwargs
        self._initialized = False

    @abstractmethod
    def initialize(self) -> None:
        """Called once, before the first frame"""

    @abstractmethod
    def process(self, audio_data: np.ndarray) -> np.ndarray:
        """
        Process one frame

        Args:
            audio_data: int16 PCM or float samples

        Returns:
            Processed frame in the input dtype
        """

    @abstractmethod
    def reset_state(self) -> None:
        """Forget everything learned from previous frames"""

    def get_info(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "initialized": self._initialized,
            "config": self.config
        }

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()
            self._initialized = True

    @staticmethod
    def _to_float32(audio_data: np.ndarray) -> np.ndarray:
        """float32 copy of the frame; int16 is mapped to [-1.0, 1.0)"""
        if audio_data.dtype == np.int16:
            return audio_data.astype(np.float32) / np.float32(INT16_SCALE)
        return audio_data.astype(np.float32)

    @staticmethod
    def _from_float32(audio_float: np.ndarray, dtype: np.dtype) -> np.ndarray:
        if dtype != np.int16:
            return audio_float.astype(dtype)

        pcm = np.nan_to_num(audio_float.astype(np.float64) * INT16_SCALE)
        magnitude = np.abs(pcm)
        # tanh knee keeps boosted peaks from wrapping around
        pcm = np.where(magnitude > INT16_MAX * SOFT_CLIP_KNEE,
                       np.sign(pcm) * INT16_MAX * np.tanh(magnitude / INT16_MAX),
                       pcm)
        return np.round(np.clip(pcm, -INT16_SCALE, INT16_MAX)).astype(np.int16)


class AudioPipeline:
    """Runs frames through an ordered list of processors"""

    def __init__(self, logger: logging.Logger, name: str = "AudioPipeline"):
        self.logger = get_clean_logger(name, logger)
        self.name = name
        self.processors: List[AudioProcessor] = []

    def add_processor(self, processor: AudioProcessor) -> 'AudioPipeline':
        self.processors.append(processor)
        self.logger.info(f"Added processor '{processor.name}' to pipeline")
        return self

    def get_processor(self, processor_name: str) -> Optional[AudioProcessor]:
        return next((p for p in self.processors if p.name == processor_name), None)

    def process(self, audio_data: np.ndarray) -> np.ndarray:
        """
        Process a frame through every stage in order

        A failing stage is logged and ends the chain; the frame as produced
        by the stages before it is returned.
        """
        current_audio = audio_data
        for processor in self.processors:
            try:
                current_audio = processor.process(current_audio)
            except Exception as e:
                self.logger.error(f"Error in processor '{processor.name}': {e}", exc_info=True)
                break
            if current_audio is None:
                break
        return current_audio

    def process_chunk(self, audio_chunk: bytes) -> Optional[bytes]:
        """
        Process a raw int16 chunk; on a decoding error the chunk is returned untouched
        """
        try:
            processed = self.process(np.frombuffer(audio_chunk, dtype=np.int16))
        except Exception as e:
            self.logger.error(f"Error processing audio chunk: {e}", exc_info=True)
            return audio_chunk
        return None if processed is None else processed.tobytes()
