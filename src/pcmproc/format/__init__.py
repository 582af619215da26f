"""WAV container support.

The scanner locates the "fmt " and "data" chunks of a canonical PCM WAV file
by tag matching at fixed offsets rather than by walking the RIFF tree:

    +----------------------------------------+
    | RIFF Header ("WAVE")                   |
    +----------------------------------------+
    | fmt  chunk (16-byte canonical body)    |
    |   - channels at tag + 7                |
    |   - bits per sample at tag + 19        |
    +----------------------------------------+
    | data chunk                             |
    |   - 32-bit little-endian length        |
    |   - interleaved little-endian samples  |
    +----------------------------------------+

Example Usage
-------------
>>> from pcmproc.format import scan_wav_meta, extract_pcm
>>> data = open("sample.wav", "rb").read()
>>> meta = scan_wav_meta(data)
>>> if meta.sample_count:
...     pcm = extract_pcm(meta, data, 0, meta.frame_count)
"""

from pcmproc.format.riff import (
    RiffError,
    build_wav,
    extract_pcm,
    find_wav_meta,
    read_wav_bytes,
    read_wav_file,
    scan_wav_meta,
    wav_to_pcm,
    write_wav_file,
)

__all__ = [
    # Scanning
    "scan_wav_meta",
    "find_wav_meta",
    # Extraction
    "extract_pcm",
    "wav_to_pcm",
    "read_wav_bytes",
    "read_wav_file",
    # Writing
    "build_wav",
    "write_wav_file",
    "RiffError",
]
