"""Core value types for PCM processing.

PCMBuffer holds channel-interleaved integer samples along with the channel
count and resolution (bit depth). Sample storage is always an ``int64`` array
so that intermediate values can exceed the nominal resolution's range without
wrapping.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

SampleArray: TypeAlias = NDArray[np.int64]

# Maximum number of stored samples (all channels) in a single buffer
PCM_MAX = 131072

CHANNEL_LEFT = 0
CHANNEL_RIGHT = 1

MIN_RESOLUTION = 8
MAX_RESOLUTION = 32
DEFAULT_RESOLUTION = 16


class PCMError(Exception):
    """Error raised by PCM buffer operations."""


class CapacityError(PCMError):
    """Raised in strict mode when a buffer would exceed PCM_MAX samples."""

    def __init__(self, requested: int, capacity: int = PCM_MAX) -> None:
        self.requested = requested
        self.capacity = capacity
        super().__init__(f"{requested} samples exceeds buffer capacity of {capacity}")


def is_valid_resolution(resolution: int) -> bool:
    """Check whether a resolution can be represented by a PCMBuffer."""
    return MIN_RESOLUTION <= resolution <= MAX_RESOLUTION


def fit_to_capacity(samples: SampleArray, channels: int, *, strict: bool = False) -> SampleArray:
    """Truncate interleaved samples to PCM_MAX and to a whole number of frames.

    Args:
        samples: Flat, channel-interleaved sample array.
        channels: Number of interleaved channels.
        strict: Raise CapacityError instead of truncating an oversized array.

    Returns:
        The (possibly shortened) sample array.

    Raises:
        CapacityError: If strict and the array holds more than PCM_MAX samples.
    """
    if len(samples) > PCM_MAX:
        if strict:
            raise CapacityError(len(samples))
        logger.warning(
            "Clamping %d samples to buffer capacity of %d", len(samples), PCM_MAX
        )
        samples = samples[: (PCM_MAX // channels) * channels]

    remainder = len(samples) % channels
    if remainder:
        samples = samples[: len(samples) - remainder]
    return samples


@dataclass(eq=False)
class PCMBuffer:
    """Channel-interleaved PCM samples with their resolution and channel count.

    8-bit data is unsigned and biased by 128 (the WAV convention); 16, 24 and
    32-bit data is signed.
    """

    data: SampleArray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))
    """Flat sample array, interleaved by channel."""

    channels: int = 1
    """Number of interleaved channels."""

    resolution: int = DEFAULT_RESOLUTION
    """Bit depth of each sample."""

    def __post_init__(self) -> None:
        if self.channels < 1:
            raise ValueError(f"channels must be >= 1, got {self.channels}")
        if not is_valid_resolution(self.resolution):
            raise ValueError(
                f"resolution must be between {MIN_RESOLUTION} and {MAX_RESOLUTION}, "
                f"got {self.resolution}"
            )
        samples = np.array(self.data, dtype=np.int64).reshape(-1)
        self.data = fit_to_capacity(samples, self.channels)

    @classmethod
    def from_samples(
        cls,
        samples: Iterable[int] | NDArray[np.integer],
        channels: int = 1,
        resolution: int = DEFAULT_RESOLUTION,
        *,
        strict: bool = False,
    ) -> "PCMBuffer":
        """Create a buffer from interleaved samples.

        Raises:
            CapacityError: If strict and the samples exceed PCM_MAX.
        """
        if not isinstance(samples, np.ndarray):
            samples = list(samples)
        array = np.array(samples, dtype=np.int64).reshape(-1)
        return cls(fit_to_capacity(array, channels, strict=strict), channels, resolution)

    @property
    def size(self) -> int:
        """Number of samples per channel."""
        return len(self.data) // self.channels

    @property
    def total_samples(self) -> int:
        """Number of stored samples across all channels."""
        return len(self.data)

    def frames(self) -> SampleArray:
        """Return a (size, channels) copy of the sample data."""
        return self.data.reshape(self.size, self.channels).copy()

    def with_data(
        self,
        samples: Iterable[int] | NDArray[np.integer],
        *,
        resolution: int | None = None,
        strict: bool = False,
    ) -> "PCMBuffer":
        """Return a new buffer with this buffer's shape settings and new sample data.

        ``samples`` is the flat, interleaved array; its length determines the
        new per-channel size.
        """
        return PCMBuffer.from_samples(
            samples,
            channels=self.channels,
            resolution=self.resolution if resolution is None else resolution,
            strict=strict,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PCMBuffer):
            return NotImplemented
        return (
            self.channels == other.channels
            and self.resolution == other.resolution
            and np.array_equal(self.data, other.data)
        )


@dataclass(frozen=True)
class WavMeta:
    """Metadata scanned from a WAV byte buffer.

    All fields are zero when the scan found nothing usable.
    """

    data_start: int = 0
    """Byte offset of the first PCM payload byte."""

    data_end: int = 0
    """Byte offset just past the PCM payload, as declared by the data chunk."""

    channels: int = 0
    resolution: int = 0

    @property
    def bytes_per_sample(self) -> int:
        return self.resolution // 8

    @property
    def sample_count(self) -> int:
        """Number of samples (all channels) in the declared payload."""
        if self.bytes_per_sample == 0 or self.data_end < self.data_start:
            return 0
        return (self.data_end - self.data_start) // self.bytes_per_sample

    @property
    def frame_count(self) -> int:
        """Number of samples per channel in the declared payload."""
        if self.channels == 0:
            return 0
        return self.sample_count // self.channels

    @property
    def is_empty(self) -> bool:
        return self.sample_count == 0


@dataclass
class ConvertParams:
    """Steps of a conversion pipeline; ``None`` skips a step."""

    resolution: int | None = None
    size: int | None = None
    amplitude: float | None = None
    channel: int | None = None
    start: int = 0
    length: int | None = None
