"""Integration tests running real WAV files through the processing chain."""

from pathlib import Path

import numpy as np
import soundfile as sf
from scipy.io import wavfile

from pcmproc import (
    change_resolution,
    change_size,
    from_channel,
    normalize,
    read_wav_file,
    scan_wav_meta,
    trim,
)
from pcmproc.format.riff import write_wav_file


def write_sine(path: Path, channels: int = 1, length: int = 2048) -> np.ndarray:
    """Write a 16-bit sine with scipy and return the samples written."""
    t = np.arange(length) / length
    mono = (np.sin(2 * np.pi * 4 * t) * 20000).astype(np.int16)
    samples = np.column_stack([mono, -mono]) if channels == 2 else mono
    wavfile.write(str(path), 44100, samples)
    return samples


class TestScipyFiles:
    """Test files written by scipy decode exactly."""

    def test_mono_16bit(self, tmp_path: Path):
        """Test a mono 16-bit file decodes to the samples written."""
        path = tmp_path / "sine.wav"
        samples = write_sine(path)

        meta = scan_wav_meta(path.read_bytes())
        assert meta.channels == 1
        assert meta.resolution == 16
        assert meta.sample_count == len(samples)

        pcm = read_wav_file(path)
        np.testing.assert_array_equal(pcm.data, samples.astype(np.int64))

    def test_stereo_16bit(self, tmp_path: Path):
        """Test a stereo file decodes to interleaved samples."""
        path = tmp_path / "stereo.wav"
        samples = write_sine(path, channels=2)

        pcm = read_wav_file(path)
        assert pcm.channels == 2
        assert pcm.size == len(samples)
        np.testing.assert_array_equal(pcm.data, samples.reshape(-1))

    def test_32bit(self, tmp_path: Path):
        """Test a 32-bit integer file decodes without overflow."""
        path = tmp_path / "int32.wav"
        samples = np.array([-2147483648, -1, 0, 1, 2147483647], dtype=np.int32)
        wavfile.write(str(path), 48000, samples)

        pcm = read_wav_file(path)
        assert pcm.resolution == 32
        np.testing.assert_array_equal(pcm.data, samples.astype(np.int64))


class TestProcessingChain:
    """Test the transforms chained the way a wavetable builder uses them."""

    def test_stereo_to_single_cycle(self, tmp_path: Path):
        """Test conforming a stereo recording to a 1024-sample 16-bit frame."""
        source = tmp_path / "stereo.wav"
        write_sine(source, channels=2, length=3000)

        pcm = read_wav_file(source)
        cycle = trim(pcm, 0, 750)
        left = from_channel(cycle, 0)
        resized = change_size(left, 1024)
        widened = change_resolution(resized, 24)
        conformed = change_resolution(normalize(widened, 0.9), 16)

        assert conformed.size == 1024
        assert conformed.channels == 1
        assert conformed.resolution == 16
        peak = int(np.max(np.abs(conformed.data)))
        assert abs(peak - int(32767 * 0.9)) <= 3

    def test_8bit_output_matches_soundfile(self, tmp_path: Path):
        """Test 8-bit output reads back through libsndfile."""
        source = tmp_path / "sine.wav"
        samples = write_sine(source)
        output = tmp_path / "sine_8bit.wav"

        reduced = change_resolution(read_wav_file(source), 8)
        write_wav_file(output, reduced)

        data, _ = sf.read(output, dtype="int16")
        np.testing.assert_array_equal(data, (reduced.data - 128) * 256)
        assert np.max(np.abs(data.astype(np.int64) - samples)) <= 512
