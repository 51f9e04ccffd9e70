from .base_processor import AudioProcessor, AudioPipeline
from .agc_processor import AGCProcessor

__all__ = ["AudioProcessor", "AudioPipeline", "AGCProcessor"]
