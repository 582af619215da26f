"""Unit tests for pcmproc.dsp.waves module."""

import numpy as np
import pytest

from pcmproc.dsp.waves import WAVE_SIZE, WaveformType, gen_saw, gen_square, generate


class TestSaw:
    """Test the sawtooth generator."""

    def test_shape(self):
        """Test the saw is 1024 samples of 16-bit mono."""
        saw = gen_saw()
        assert saw.size == WAVE_SIZE == 1024
        assert saw.channels == 1
        assert saw.resolution == 16

    def test_key_samples(self):
        """Test the ramp endpoints of both halves."""
        saw = gen_saw()
        assert saw.data[0] == 0
        assert saw.data[511] == 32704
        assert saw.data[512] == -32768
        assert saw.data[1023] == -64

    def test_constant_step(self):
        """Test each half ramps in steps of 64."""
        steps = np.diff(gen_saw().data)
        assert np.all(steps[:511] == 64)
        assert np.all(steps[512:] == 64)

    def test_deterministic(self):
        """Test repeated calls produce independent, equal buffers."""
        a = gen_saw()
        b = gen_saw()
        assert a == b
        a.data[0] = 1
        assert b.data[0] == 0


class TestSquare:
    """Test the square wave generator."""

    def test_halves(self):
        """Test the square holds full scale for each half."""
        square = gen_square()
        assert square.size == 1024
        assert np.all(square.data[:512] == 32767)
        assert np.all(square.data[512:] == -32768)


class TestGenerate:
    """Test waveform selection by type."""

    @pytest.mark.parametrize(
        "waveform, expected", [(WaveformType.saw, gen_saw), (WaveformType.square, gen_square)]
    )
    def test_generate(self, waveform, expected):
        """Test each waveform type maps to its generator."""
        assert generate(waveform) == expected()
