"""pcmproc - PCM audio processing.

This package parses the metadata and sample payload of WAV files and
provides deterministic integer transformations on the decoded samples:
bit-depth conversion, resampling, normalization, channel extraction,
trimming and morphing between waveforms.

Every transform takes a PCMBuffer and returns a new PCMBuffer; inputs are
never modified.

Example Usage
-------------
>>> from pcmproc import change_resolution, change_size, wav_to_pcm
>>>
>>> pcm = wav_to_pcm(open("sample.wav", "rb").read())
>>> if pcm.size:
...     pcm = change_resolution(change_size(pcm, 1024), 16)
"""

from pcmproc.dsp.process import clone, find_window, from_channel, morph, normalize, trim
from pcmproc.dsp.resample import change_size
from pcmproc.dsp.resolution import change_resolution
from pcmproc.dsp.waves import gen_saw, gen_square
from pcmproc.format import (
    RiffError,
    build_wav,
    extract_pcm,
    find_wav_meta,
    read_wav_file,
    scan_wav_meta,
    wav_to_pcm,
)
from pcmproc.types import (
    CHANNEL_LEFT,
    CHANNEL_RIGHT,
    PCM_MAX,
    CapacityError,
    PCMBuffer,
    PCMError,
    WavMeta,
)

__all__ = [
    # Types
    "PCMBuffer",
    "WavMeta",
    "PCM_MAX",
    "CHANNEL_LEFT",
    "CHANNEL_RIGHT",
    "PCMError",
    "CapacityError",
    # WAV
    "scan_wav_meta",
    "find_wav_meta",
    "extract_pcm",
    "wav_to_pcm",
    "read_wav_file",
    "build_wav",
    "RiffError",
    # Transforms
    "change_resolution",
    "change_size",
    "normalize",
    "from_channel",
    "trim",
    "find_window",
    "clone",
    "morph",
    # Generators
    "gen_saw",
    "gen_square",
]
