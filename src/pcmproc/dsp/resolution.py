import logging

import numpy as np

from pcmproc.types import PCMBuffer, SampleArray, is_valid_resolution

logger = logging.getLogger(__name__)

# 8-bit WAV samples are unsigned, centered on this value
UNSIGNED_8BIT_OFFSET = 128


def reduce_samples(samples: SampleArray, resolution: int, new_resolution: int) -> SampleArray:
    """Shift signed samples down to a lower resolution with rounding.

    The most significant discarded bit (the round bit) decides the rounding
    direction: a set round bit rounds a non-negative value up, a clear round
    bit rounds a negative value down. Adjustments never push a value outside
    the signed range of the new resolution.

    Args:
        samples: Signed samples at the current resolution.
        resolution: Current bit depth.
        new_resolution: Target bit depth, lower than ``resolution``.

    Returns:
        Signed samples at the new resolution.
    """
    high = (1 << (new_resolution - 1)) - 1
    low = -1 - high

    shifted = samples >> (resolution - new_resolution - 1)
    round_bit = shifted & 1
    round_up = (round_bit == 1) & (shifted >= 0)
    round_down = (round_bit == 0) & (shifted < 0)

    reduced = shifted >> 1
    reduced = np.where(round_up & (reduced < high), reduced + 1, reduced)
    reduced = np.where(round_down & (reduced > low), reduced - 1, reduced)
    return reduced


def change_resolution(pcm: PCMBuffer, new_resolution: int) -> PCMBuffer:
    """Convert a buffer to a new bit depth.

    Resolutions outside 8..32 are ignored and the buffer is returned
    unchanged (as a copy). 8-bit data is treated as unsigned on the way in
    and written back as unsigned on the way out.

    Args:
        pcm: The source buffer; it is not modified.
        new_resolution: Target bit depth.

    Returns:
        A new buffer at the target resolution.
    """
    if not is_valid_resolution(new_resolution):
        logger.debug("Ignoring invalid resolution %d", new_resolution)
        new_resolution = pcm.resolution

    if new_resolution == pcm.resolution:
        return pcm.with_data(pcm.data)

    samples = pcm.data.copy()
    if pcm.resolution == 8:
        samples -= UNSIGNED_8BIT_OFFSET

    if new_resolution < pcm.resolution:
        samples = reduce_samples(samples, pcm.resolution, new_resolution)
    else:
        samples = samples << (new_resolution - pcm.resolution)

    if new_resolution == 8:
        samples = (samples + UNSIGNED_8BIT_OFFSET) & 0xFF

    return pcm.with_data(samples, resolution=new_resolution)
