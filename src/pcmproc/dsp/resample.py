"""Resampling by mean interpolation and floor decimation.

Growing a buffer repeatedly inserts the mean of each adjacent same-channel
pair until it is at least as long as the target, then decimates to the
exact target length. Shrinking a buffer decimates directly. No anti-aliasing
filter is applied in either direction.
"""

import logging

import numpy as np

from pcmproc.types import PCM_MAX, CapacityError, PCMBuffer, SampleArray

logger = logging.getLogger(__name__)


def _half(values: SampleArray) -> SampleArray:
    """Halve integers, truncating toward zero."""
    return np.where(values < 0, -(-values // 2), values // 2)


def interpolate_means(frames: SampleArray) -> SampleArray:
    """Insert the mean of every adjacent pair of frames between them.

    Each operand is narrowed to a signed 16-bit value and halved before the
    halves are summed, so the mean is ``a/2 + b/2`` rather than ``(a + b)/2``.
    The last frame has no successor and is carried through unchanged.

    Args:
        frames: Array of shape (size, channels).

    Returns:
        Array of shape (2 * size - 1, channels).
    """
    size, channels = frames.shape
    narrowed = frames.astype(np.int16).astype(np.int64)
    means = _half(narrowed[:-1]) + _half(narrowed[1:])

    expanded = np.empty((2 * size - 1, channels), dtype=np.int64)
    expanded[0::2] = frames
    expanded[1::2] = means
    return expanded


def decimate(frames: SampleArray, new_size: int) -> SampleArray:
    """Pick ``new_size`` equally spaced frames using a floor stride."""
    size = frames.shape[0]
    increment = size / new_size
    indices = np.floor(np.arange(new_size) * increment).astype(np.int64)
    indices = np.minimum(indices, size - 1)
    return frames[indices]


def change_size(pcm: PCMBuffer, new_size: int, *, strict: bool = False) -> PCMBuffer:
    """Resample a buffer to ``new_size`` samples per channel.

    Buffers with fewer than two samples per channel cannot be interpolated
    and are returned unchanged (as a copy).

    Args:
        pcm: The source buffer; it is not modified.
        new_size: Target number of samples per channel.
        strict: Raise CapacityError instead of clamping ``new_size`` to the
            buffer capacity.

    Returns:
        A new buffer with ``new_size`` samples per channel.

    Raises:
        CapacityError: If strict and the result would exceed PCM_MAX samples.
    """
    if new_size < 0:
        raise ValueError(f"new_size must be >= 0, got {new_size}")

    max_size = PCM_MAX // pcm.channels
    if new_size > max_size:
        if strict:
            raise CapacityError(new_size * pcm.channels)
        logger.warning("Clamping size %d to %d samples per channel", new_size, max_size)
        new_size = max_size

    if pcm.size < 2:
        return pcm.with_data(pcm.data)

    frames = pcm.frames()
    expansions = 0
    while frames.shape[0] < new_size:
        frames = interpolate_means(frames)
        expansions += 1

    if new_size == 0:
        resized = frames[:0]
    else:
        resized = decimate(frames, new_size)

    logger.debug(
        "Resized %d -> %d samples per channel (%d expansions)",
        pcm.size,
        new_size,
        expansions,
    )
    return pcm.with_data(resized.reshape(-1))
