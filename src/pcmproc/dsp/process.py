import logging

import numpy as np

from pcmproc.types import CHANNEL_LEFT, PCMBuffer, PCMError

logger = logging.getLogger(__name__)


def normalize(pcm: PCMBuffer, amplitude: float = 1.0) -> PCMBuffer:
    """Scale a buffer so its peak reaches a proportion of full scale.

    The peak absolute sample across all channels is mapped to
    ``amplitude * (2 ** (resolution - 1) - 1)``. Scaled samples are truncated
    toward zero and are not clipped, so amplitudes above 1.0 can leave the
    representable range.

    Args:
        pcm: The source buffer; it is not modified.
        amplitude: Target peak as a proportion of the maximum sample value.

    Returns:
        A new, normalized buffer. A silent buffer is returned unchanged.
    """
    max_value = (1 << (pcm.resolution - 1)) - 1
    peak = int(np.max(np.abs(pcm.data))) if pcm.total_samples else 0

    coeff = (max_value * amplitude) / peak if peak else 1.0
    scaled = np.trunc(pcm.data * coeff).astype(np.int64)
    return pcm.with_data(scaled)


def from_channel(pcm: PCMBuffer, channel: int = CHANNEL_LEFT) -> PCMBuffer:
    """Extract one channel as a new single-channel buffer.

    An out-of-range channel index selects the left channel (0).
    """
    if not 0 <= channel < pcm.channels:
        logger.debug(
            "Channel %d out of range for %d channels, using channel %d",
            channel,
            pcm.channels,
            CHANNEL_LEFT,
        )
        channel = CHANNEL_LEFT

    return PCMBuffer(pcm.frames()[:, channel], channels=1, resolution=pcm.resolution)


def find_window(pcm: PCMBuffer, start: int, length: int) -> PCMBuffer | None:
    """Copy ``length`` samples per channel beginning at ``start``.

    Returns:
        The window as a new buffer, or None if it does not fit inside the
        source buffer.
    """
    if start < 0 or length < 0 or start + length > pcm.size:
        logger.debug(
            "Window [%d, %d) does not fit in %d samples", start, start + length, pcm.size
        )
        return None

    offset = start * pcm.channels
    return pcm.with_data(pcm.data[offset : offset + length * pcm.channels])


def trim(pcm: PCMBuffer, start: int, length: int) -> PCMBuffer:
    """Copy ``length`` samples per channel beginning at ``start``.

    A window that does not fit inside the source yields an empty default
    buffer rather than a partial one.
    """
    window = find_window(pcm, start, length)
    return PCMBuffer() if window is None else window


def clone(pcm: PCMBuffer) -> PCMBuffer:
    """Deep copy a buffer."""
    return PCMBuffer(pcm.data.copy(), channels=pcm.channels, resolution=pcm.resolution)


def morph(start: PCMBuffer, end: PCMBuffer, scale: float) -> PCMBuffer:
    """Interpolate linearly from one waveform toward another.

    Each sample is ``start + (end - start) * scale``, truncated toward zero.
    Buffers of different lengths are morphed over the shorter length. The
    result takes the start buffer's channel count and resolution.

    Args:
        start: The waveform at scale 0.
        end: The waveform at scale 1.
        scale: Position between the two waveforms, normally in (0, 1).

    Returns:
        A new, morphed buffer.

    Raises:
        PCMError: If the buffers have different channel counts.
    """
    if start.channels != end.channels:
        raise PCMError(
            f"Cannot morph {start.channels}-channel data into {end.channels}-channel data"
        )

    count = min(start.size, end.size) * start.channels
    low = start.data[:count]
    high = end.data[:count]
    morphed = np.trunc(low + (high - low) * scale).astype(np.int64)
    return start.with_data(morphed)
