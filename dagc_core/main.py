import os
import logging
import numpy as np
import soundfile as sf
from typing import Any, Dict, Optional
from dagc_shared import setup_logging, get_clean_logger, get_config
from dagc_core.apm import AudioPipeline, AGCProcessor


def load_mono(file_path: str):
    """Load an audio file as a float32 mono signal"""
    audio, sample_rate = sf.read(file_path, dtype='float32', always_2d=False)
    if audio.ndim > 1:
        audio = np.mean(audio, axis=1).astype(np.float32)
    return audio, sample_rate


def process_file(logger: logging.Logger, input_path: str, output_path: str,
                 target_rms: float, distortion_factor: float,
                 silence_threshold_dbfs: Optional[float] = None,
                 frame_size: int = 480) -> Dict[str, Any]:
    """
    Run a recorded file through the AGC frame by frame and save the result

    Returns:
        Summary with frame/sample counts, final gain and number of frozen frames
    """
    logger = get_clean_logger("agc_demo", logger)

    if frame_size <= 0:
        raise ValueError(f"frame_size must be positive, got {frame_size}")

    audio, sample_rate = load_mono(input_path)
    logger.info(f"Loaded audio file: {len(audio)} samples at {sample_rate}Hz")

    agc_processor = AGCProcessor(
        logger,
        target_rms=target_rms,
        distortion_factor=distortion_factor,
        silence_threshold_dbfs=silence_threshold_dbfs
    )
    pipeline = AudioPipeline(logger, "AgcDemoPipeline")
    pipeline.add_processor(agc_processor)

    output = np.empty_like(audio)
    frame_count = 0
    frozen_frames = 0

    for start in range(0, len(audio), frame_size):
        frame = audio[start:start + frame_size]
        output[start:start + len(frame)] = pipeline.process(frame)
        if agc_processor.is_gain_frozen():
            frozen_frames += 1
        frame_count += 1

    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    sf.write(output_path, output, sample_rate)

    summary = {
        "frames": frame_count,
        "samples": len(audio),
        "sample_rate": sample_rate,
        "final_gain": agc_processor.gain(),
        "frozen_frames": frozen_frames
    }
    logger.info(f"Processed {frame_count} frames, final gain {summary['final_gain']:.4f}, "
                f"{frozen_frames} frozen frames; saved to {output_path}")
    return summary


def main():
    root_logger = setup_logging(level=get_config("logging.level"))
    logger = get_clean_logger("main", root_logger)

    process_file(
        logger,
        get_config("demo.input_path"),
        get_config("demo.output_path"),
        target_rms=get_config("agc.target_rms"),
        distortion_factor=get_config("agc.distortion_factor"),
        silence_threshold_dbfs=get_config("agc.silence_threshold_dbfs"),
        frame_size=get_config("demo.frame_size")
    )


if __name__ == "__main__":
    main()
