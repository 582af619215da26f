"""RIFF/WAV scanning, PCM extraction and encoding.

The scanner does not walk the RIFF chunk tree. It looks for the "fmt " and
"data" tags byte by byte and reads the fields it needs at fixed offsets from
the matched tag, which assumes the canonical 16-byte PCM format chunk.
Extended format chunks are not supported.
"""

import logging
import struct
from pathlib import Path

import numpy as np

from pcmproc.types import (
    PCM_MAX,
    CapacityError,
    PCMBuffer,
    WavMeta,
    is_valid_resolution,
)

logger = logging.getLogger(__name__)

# FourCC identifiers
RIFF_ID = b"RIFF"
WAVE_ID = b"WAVE"
FMT_ID = b"fmt "
DATA_ID = b"data"

WAVE_FORMAT_PCM = 1

# Field offsets from the last byte of the matched "fmt " tag
WAV_CHANNEL_OFFSET = 7
WAV_RESOLUTION_OFFSET = 19

# Offset from the last byte of the matched "data" tag to the first sample byte
WAV_DATA_OFFSET = 5

MIN_WAV_HEADER_SIZE = 44


class RiffError(Exception):
    """Error reading or writing RIFF files."""


def scan_wav_meta(data: bytes) -> WavMeta:
    """Scan a WAV byte buffer for its format and data chunk metadata.

    Two independent cursors track partial matches of the "fmt " and "data"
    tags. Scanning stops as soon as the channel count, resolution and data
    extent are all known.

    Args:
        data: Raw bytes of a WAV file.

    Returns:
        The scanned metadata. Every field is zero if the buffer is shorter
        than a WAV header or no chunk was found; check ``sample_count``.
    """
    size = len(data)
    if size < MIN_WAV_HEADER_SIZE:
        logger.debug("Buffer of %d bytes is too short for a WAV header", size)
        return WavMeta()

    channels = 0
    resolution = 0
    data_start = 0
    data_end = 0
    fmt_cursor = 0
    data_cursor = 0

    for i, byte in enumerate(data):
        if channels == 0 and byte == FMT_ID[fmt_cursor]:
            if fmt_cursor == 3:
                if i + WAV_CHANNEL_OFFSET < size:
                    channels = data[i + WAV_CHANNEL_OFFSET]
                if i + WAV_RESOLUTION_OFFSET < size:
                    resolution = data[i + WAV_RESOLUTION_OFFSET]
                fmt_cursor = 0
            else:
                fmt_cursor += 1
        else:
            fmt_cursor = 0

        if data_end == 0 and byte == DATA_ID[data_cursor]:
            if data_cursor == 3:
                # The length field occupies the four bytes after the tag
                if i + 4 < size:
                    data_start = i + WAV_DATA_OFFSET
                    data_end = data_start + struct.unpack_from("<I", data, i + 1)[0]
                data_cursor = 0
            else:
                data_cursor += 1
        else:
            data_cursor = 0

        if data_start and data_end and channels and resolution:
            break

    meta = WavMeta(
        data_start=data_start,
        data_end=data_end,
        channels=channels,
        resolution=resolution,
    )
    if meta.is_empty:
        logger.debug("No PCM payload found in %d byte buffer", size)
    return meta


def find_wav_meta(data: bytes) -> WavMeta | None:
    """Scan a WAV byte buffer, returning None if it holds no PCM payload."""
    meta = scan_wav_meta(data)
    return None if meta.is_empty else meta


def extract_pcm(
    meta: WavMeta,
    data: bytes,
    start: int = 0,
    count: int | None = None,
    *,
    strict: bool = False,
) -> PCMBuffer:
    """Decode a window of samples from a WAV byte buffer.

    Decoding begins at byte ``data_start + start * bytes_per_sample``. Each
    requested sample reads one little-endian value per channel. Bytes at or
    past the end of the payload are skipped, so trailing samples of a
    truncated file are under-filled rather than rejected.

    8-bit samples stay unsigned (0..255); wider samples are two's complement.

    Args:
        meta: Metadata from scan_wav_meta.
        data: The same byte buffer that was scanned.
        start: Offset of the first sample to decode, in samples.
        count: Number of samples per channel to decode (default: all).
        strict: Raise CapacityError instead of clamping an oversized request.

    Returns:
        A new PCMBuffer with the metadata's channel count and resolution, or
        an empty default buffer if the metadata is degenerate.
    """
    if meta.channels == 0 or not is_valid_resolution(meta.resolution):
        logger.debug("Cannot extract from degenerate metadata %s", meta)
        return PCMBuffer()
    if start < 0:
        raise ValueError(f"start must be >= 0, got {start}")

    channels = meta.channels
    bytes_per_sample = meta.bytes_per_sample
    if count is None:
        count = meta.frame_count
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")

    if count * channels > PCM_MAX:
        if strict:
            raise CapacityError(count * channels)
        logger.warning(
            "Clamping extraction of %d samples to buffer capacity of %d",
            count * channels,
            PCM_MAX,
        )
        count = PCM_MAX // channels

    first = meta.data_start + start * bytes_per_sample
    end = min(meta.data_end, len(data))
    needed = count * channels * bytes_per_sample

    # Missing bytes read as zero
    raw = np.zeros(needed, dtype=np.uint8)
    if first < end:
        available = np.frombuffer(data[first : min(end, first + needed)], dtype=np.uint8)
        raw[: len(available)] = available

    weights = np.left_shift(np.int64(1), 8 * np.arange(bytes_per_sample, dtype=np.int64))
    samples = raw.reshape(-1, bytes_per_sample).astype(np.int64) @ weights

    if bytes_per_sample > 1:
        bits = 8 * bytes_per_sample
        samples = np.where(samples >= 1 << (bits - 1), samples - (1 << bits), samples)

    return PCMBuffer(samples, channels=channels, resolution=meta.resolution)


def wav_to_pcm(data: bytes) -> PCMBuffer:
    """Scan and decode the entire PCM payload of a WAV byte buffer."""
    meta = scan_wav_meta(data)
    return extract_pcm(meta, data, 0, meta.frame_count)


def read_wav_bytes(file_path: Path | str) -> bytes:
    """Read the raw bytes of a WAV file.

    Raises:
        RiffError: If the file cannot be read.
    """
    file_path = Path(file_path)
    try:
        return file_path.read_bytes()
    except FileNotFoundError as e:
        raise RiffError(f"File not found: {file_path}") from e
    except OSError as e:
        raise RiffError(f"Cannot open file: {file_path}") from e


def read_wav_file(file_path: Path | str) -> PCMBuffer:
    """Read and decode a WAV file.

    Raises:
        RiffError: If the file cannot be read or carries no PCM payload.
    """
    data = read_wav_bytes(file_path)
    meta = find_wav_meta(data)
    if meta is None:
        raise RiffError(f"No PCM data found in {file_path}")
    return extract_pcm(meta, data, 0, meta.frame_count)


def encode_samples(pcm: PCMBuffer) -> bytes:
    """Encode a buffer's samples as little-endian bytes at its resolution."""
    bytes_per_sample = pcm.resolution // 8
    shifts = 8 * np.arange(bytes_per_sample, dtype=np.int64)
    byte_matrix = (pcm.data[:, np.newaxis] >> shifts) & 0xFF
    return byte_matrix.astype(np.uint8).tobytes()


def build_wav(pcm: PCMBuffer, sample_rate: int = 44100) -> bytes:
    """Build a canonical PCM WAV file from a buffer.

    The file holds a 16-byte "fmt " chunk followed by the "data" chunk, so it
    scans back with scan_wav_meta.

    Args:
        pcm: The samples to write.
        sample_rate: The sample rate in Hz.

    Returns:
        The complete WAV file as bytes.

    Raises:
        RiffError: If the resolution is not a whole number of bytes.
    """
    if pcm.resolution % 8:
        raise RiffError(f"Cannot write {pcm.resolution}-bit samples; use 8, 16, 24 or 32")

    bytes_per_sample = pcm.resolution // 8
    byte_rate = sample_rate * pcm.channels * bytes_per_sample
    block_align = pcm.channels * bytes_per_sample

    fmt_chunk = struct.pack(
        "<HHIIHH",
        WAVE_FORMAT_PCM,
        pcm.channels,
        sample_rate,
        byte_rate,
        block_align,
        pcm.resolution,
    )

    samples = encode_samples(pcm)
    data_size = len(samples)
    padding = data_size % 2

    # 4 (WAVE) + 8+16 (fmt chunk) + 8+data_size (data chunk)
    riff_size = 4 + 8 + 16 + 8 + data_size + padding

    wav = bytearray()

    wav.extend(RIFF_ID)
    wav.extend(struct.pack("<I", riff_size))
    wav.extend(WAVE_ID)

    wav.extend(FMT_ID)
    wav.extend(struct.pack("<I", 16))
    wav.extend(fmt_chunk)

    wav.extend(DATA_ID)
    wav.extend(struct.pack("<I", data_size))
    wav.extend(samples)
    if padding:
        wav.extend(b"\x00")

    return bytes(wav)


def write_wav_file(file_path: Path | str, pcm: PCMBuffer, sample_rate: int = 44100) -> None:
    """Write a buffer to disk as a canonical PCM WAV file.

    Raises:
        RiffError: If the file cannot be written.
    """
    file_path = Path(file_path)
    try:
        file_path.write_bytes(build_wav(pcm, sample_rate))
    except OSError as e:
        raise RiffError(f"Cannot write file: {file_path}") from e
