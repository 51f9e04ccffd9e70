"""Tests for the MonoAgc gain controller."""

import math
import numpy as np
import pytest
from unittest.mock import Mock
from dagc_core import MonoAgc, InvalidTargetRms, InvalidDistortionFactor, GAIN_STEP_FLOOR


def _reference_float32(frame, gain, target_rms, distortion_factor):
    """Straightforward float32 rendition of the feedback loop."""
    out = np.array(frame, dtype=np.float32)
    gain = np.float32(gain)
    target_rms = np.float32(target_rms)
    distortion_factor = np.float32(distortion_factor)
    one = np.float32(1.0)
    floor = np.float32(GAIN_STEP_FLOOR)
    for i in range(len(out)):
        x = out[i] * gain
        out[i] = x
        y = x * x / target_rms
        z = one + distortion_factor * (one - y)
        gain = gain * max(z, floor)
    return out, float(gain)


class TestMonoAgcConstruction:
    """Test cases for constructing a MonoAgc."""

    def test_initial_state(self):
        agc = MonoAgc(0.001, 0.0001)

        assert agc.gain() == 1.0
        assert agc.is_gain_frozen() is False
        assert agc.target_rms == 0.001
        assert agc.distortion_factor == 0.0001

    def test_invalid_target_rms(self):
        with pytest.raises(InvalidTargetRms) as exc_info:
            MonoAgc(-1.0, 0.5)
        assert exc_info.value.value == -1.0

    def test_invalid_distortion_factor(self):
        with pytest.raises(InvalidDistortionFactor) as exc_info:
            MonoAgc(1.0, 1.5)
        assert exc_info.value.value == 1.5

    @pytest.mark.parametrize("target_rms", [0.0, -1.0, math.nan, math.inf, -math.inf])
    def test_rejects_bad_target_rms(self, target_rms):
        with pytest.raises(InvalidTargetRms):
            MonoAgc(target_rms, 0.5)

    @pytest.mark.parametrize("distortion_factor", [-0.1, 1.1, math.nan])
    def test_rejects_bad_distortion_factor(self, distortion_factor):
        with pytest.raises(InvalidDistortionFactor):
            MonoAgc(0.5, distortion_factor)

    @pytest.mark.parametrize("target_rms", [1e-46, 1e39])
    def test_rejects_target_rms_lost_in_float32(self, target_rms):
        with pytest.raises(InvalidTargetRms):
            MonoAgc(target_rms, 0.5)

    def test_smallest_accepted_target_rms_keeps_gain_finite(self):
        agc = MonoAgc(1e-40, 0.5)
        agc.process(np.zeros(3, dtype=np.float32))

        assert agc.gain() == pytest.approx(1.5 ** 3, rel=1e-5)

    def test_construction_logged_at_debug(self):
        mock_logger = Mock()
        MonoAgc(0.001, 0.0001, logger=mock_logger)

        mock_logger.debug.assert_called_once()

    def test_repr(self):
        agc = MonoAgc(0.5, 0.25)
        assert repr(agc) == "MonoAgc(target_rms=0.5, distortion_factor=0.25, gain=1.0, frozen=False)"


class TestMonoAgcFreeze:
    """Test cases for freeze control."""

    def test_freeze_toggle(self):
        agc = MonoAgc(0.001, 0.0001)

        agc.freeze_gain(True)
        assert agc.is_gain_frozen() is True

        agc.freeze_gain(False)
        assert agc.is_gain_frozen() is False

    def test_freeze_logs_only_transitions(self):
        mock_logger = Mock()
        agc = MonoAgc(0.001, 0.0001, logger=mock_logger)

        agc.freeze_gain(True)
        agc.freeze_gain(True)
        agc.freeze_gain(False)

        assert mock_logger.info.call_count == 2

    def test_frozen_gain_unchanged_over_frames(self):
        agc = MonoAgc(0.01, 0.01)
        agc.process(np.array([0.3, -0.7, 0.1], dtype=np.float32))
        gain_before = agc.gain()
        assert gain_before != 1.0

        agc.freeze_gain(True)
        for _ in range(5):
            frame = np.array([0.5, 1.0, -0.2, 0.9], dtype=np.float32)
            expected = frame * np.float32(gain_before)
            agc.process(frame)

            assert agc.gain() == gain_before
            np.testing.assert_array_equal(frame, expected)

    def test_unfreeze_resumes_adaptation(self):
        agc = MonoAgc(0.001, 0.0001)
        agc.freeze_gain(True)
        agc.process([0.5, 1.0, -0.2])
        frozen_gain = agc.gain()

        agc.freeze_gain(False)
        agc.process([0.5, 1.0, -0.2])

        assert agc.gain() != frozen_gain


class TestMonoAgcProcess:
    """Test cases for the adaptation loop."""

    def test_end_to_end_scenario(self):
        agc = MonoAgc(0.001, 0.0001)
        assert agc.gain() == 1.0

        agc.freeze_gain(True)
        frame = [0.5, 1.0, -0.2]
        agc.process(frame)
        assert agc.gain() == 1.0
        assert frame == [0.5, 1.0, -0.2]

        agc.freeze_gain(False)
        agc.process([0.5, 1.0, -0.2])
        assert agc.gain() != 1.0

    def test_empty_frame_is_noop(self):
        agc = MonoAgc(0.01, 0.01)
        agc.process([0.2, 0.4])
        gain_before = agc.gain()

        agc.process([])
        agc.process(np.array([], dtype=np.float32))

        assert agc.gain() == gain_before
        assert agc.is_gain_frozen() is False

    def test_list_frame_values(self):
        agc = MonoAgc(1.0, 0.5)
        frame = [0.5, 2.0]

        agc.process(frame)

        # first sample: y = 0.25, z = 1.375
        assert frame[0] == 0.5
        assert frame[1] == pytest.approx(2.75)
        # second sample: z = 1 + 0.5 * (1 - 7.5625) < 0.1, clamped to the floor
        assert agc.gain() == pytest.approx(1.375 * 0.1)

    def test_gain_grows_below_target(self):
        agc = MonoAgc(0.5, 0.01)
        agc.process(np.full(100, 0.01, dtype=np.float32))
        assert agc.gain() > 1.0

    def test_gain_shrinks_above_target(self):
        agc = MonoAgc(0.001, 0.001)
        agc.process(np.full(100, 0.5, dtype=np.float32))
        assert 0.0 < agc.gain() < 1.0

    def test_float32_matches_reference(self):
        rng = np.random.default_rng(1234)
        frames = [rng.uniform(-0.5, 0.5, 480).astype(np.float32) for _ in range(4)]
        agc = MonoAgc(0.01, 0.001)

        gain = 1.0
        for frame in frames:
            expected, gain = _reference_float32(frame, gain, 0.01, 0.001)
            agc.process(frame)
            np.testing.assert_array_equal(frame, expected)
            assert agc.gain() == gain

    def test_processes_in_place(self):
        agc = MonoAgc(0.001, 0.0001)
        frame = np.array([0.5, 1.0, -0.2], dtype=np.float32)
        original = frame

        agc.process(frame)

        assert frame is original
        assert frame.dtype == np.float32

    def test_gain_stays_positive_on_spikes(self):
        agc = MonoAgc(0.001, 1.0)
        agc.process(np.array([1.0, -1.0, 1.0], dtype=np.float32))

        assert agc.gain() > 0.0
        # third sample lands below target: y = 0.1, z = 1.9
        assert agc.gain() == pytest.approx(0.1 * 0.1 * 1.9, rel=1e-5)

    def test_zero_frame_grows_gain(self):
        agc = MonoAgc(0.01, 0.1)
        frame = np.zeros(3, dtype=np.float32)

        agc.process(frame)

        np.testing.assert_array_equal(frame, np.zeros(3, dtype=np.float32))
        assert agc.gain() == pytest.approx(1.1 ** 3, rel=1e-5)

    def test_zero_distortion_factor_never_adapts(self):
        agc = MonoAgc(0.001, 0.0)
        agc.process(np.array([0.9, -0.9, 0.4], dtype=np.float32))
        assert agc.gain() == 1.0

    def test_nan_sample_propagates(self):
        agc = MonoAgc(0.01, 0.01)
        frame = np.array([0.1, np.nan, 0.1], dtype=np.float32)

        agc.process(frame)

        assert math.isnan(agc.gain())
        assert np.isnan(frame[1])
        assert np.isnan(frame[2])

    def test_determinism(self):
        rng = np.random.default_rng(7)
        frames = [rng.normal(0.0, 0.2, 256).astype(np.float32) for _ in range(6)]
        toggles = [False, False, True, False, True, False]

        outputs = []
        for _ in range(2):
            agc = MonoAgc(0.005, 0.001)
            run = []
            for frame, frozen in zip(frames, toggles):
                agc.freeze_gain(frozen)
                buffer = frame.copy()
                agc.process(buffer)
                run.append(buffer)
            outputs.append((run, agc.gain()))

        (run_a, gain_a), (run_b, gain_b) = outputs
        assert gain_a == gain_b
        for a, b in zip(run_a, run_b):
            assert a.tobytes() == b.tobytes()

    def test_rejects_integer_arrays(self):
        agc = MonoAgc(0.01, 0.01)
        with pytest.raises(TypeError):
            agc.process(np.array([1, 2, 3], dtype=np.int16))

    def test_rejects_multichannel_arrays(self):
        agc = MonoAgc(0.01, 0.01)
        with pytest.raises(ValueError):
            agc.process(np.zeros((4, 2), dtype=np.float32))
