from enum import Enum

import numpy as np

from pcmproc.types import PCMBuffer
from pcmproc.utils import assert_exhaustiveness

WAVE_SIZE = 1024
RAMP_STEP = 64


class WaveformType(str, Enum):
    saw = "saw"
    square = "square"


def gen_saw() -> PCMBuffer:
    """Generate a 1024-sample, 16-bit sawtooth.

    The first half ramps from 0 to 32704 and the second half from -32768 to
    -64, both in steps of 64.
    """
    ramp = np.arange(WAVE_SIZE // 2, dtype=np.int64) * RAMP_STEP
    return PCMBuffer(np.concatenate([ramp, ramp - 32768]), channels=1, resolution=16)


def gen_square() -> PCMBuffer:
    """Generate a 1024-sample, 16-bit square wave at full scale."""
    half = WAVE_SIZE // 2
    samples = np.concatenate(
        [np.full(half, 32767, dtype=np.int64), np.full(half, -32768, dtype=np.int64)]
    )
    return PCMBuffer(samples, channels=1, resolution=16)


def generate(waveform: WaveformType) -> PCMBuffer:
    if waveform == WaveformType.saw:
        return gen_saw()
    elif waveform == WaveformType.square:
        return gen_square()
    else:
        assert_exhaustiveness(waveform)
