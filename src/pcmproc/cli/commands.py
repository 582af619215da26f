from pathlib import Path
from typing import Annotated

import numpy as np
from cyclopts import App, Parameter
from rich.console import Console
from rich.table import Table

from pcmproc.cli.validators import (
    validate_amplitude,
    validate_non_negative_integer,
    validate_resolution,
)
from pcmproc.dsp.pipeline import convert as convert_pcm
from pcmproc.dsp.process import morph as morph_pcm
from pcmproc.dsp.waves import WaveformType
from pcmproc.dsp.waves import generate as generate_waveform
from pcmproc.format.riff import (
    RiffError,
    read_wav_bytes,
    read_wav_file,
    scan_wav_meta,
    write_wav_file,
)
from pcmproc.types import ConvertParams, PCMBuffer, PCMError

app = App(name="pcmproc", help="A utility for inspecting and converting PCM WAV files")
console = Console()


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(message, style="bold red")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(message, style="bold green")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(message, style="bold yellow")


def describe(pcm: PCMBuffer) -> str:
    return f"{pcm.size} samples x {pcm.channels} channel(s) at {pcm.resolution}-bit"


def save(output: Path, pcm: PCMBuffer, sample_rate: int) -> int:
    """Write a buffer to disk, reporting the outcome."""
    if pcm.size == 0:
        print_warning("Warning: result holds no samples")

    try:
        write_wav_file(output, pcm, sample_rate)
    except RiffError as e:
        print_error(f"Error writing output: {e}")
        return 1

    print_success(f"Wrote {describe(pcm)} to {output}")
    return 0


@app.command
def info(file: Path) -> int:
    """
    Display the metadata scanned from a WAV file.

    Parameters
    ----------
    file: Path
        The path to the .wav file
    """
    try:
        data = read_wav_bytes(file)
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    meta = scan_wav_meta(data)
    if meta.is_empty:
        print_error(f"Error: No PCM data found in {file}")
        return 1

    table = Table(title=str(file))
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Channels", str(meta.channels))
    table.add_row("Resolution", f"{meta.resolution}-bit")
    table.add_row("Data start", str(meta.data_start))
    table.add_row("Data end", str(meta.data_end))
    table.add_row("Samples", str(meta.sample_count))
    table.add_row("Samples per channel", str(meta.frame_count))
    if meta.data_end > len(data):
        table.add_row("Truncated", f"{meta.data_end - len(data)} bytes missing")
    console.print(table)
    return 0


@app.command
def convert(
    source: Path,
    output: Path = Path("converted.wav"),
    resolution: Annotated[int | None, Parameter(validator=validate_resolution)] = None,
    size: Annotated[int | None, Parameter(validator=validate_non_negative_integer)] = None,
    amplitude: Annotated[float | None, Parameter(validator=validate_amplitude)] = None,
    channel: int | None = None,
    start: Annotated[int, Parameter(validator=validate_non_negative_integer)] = 0,
    length: Annotated[int | None, Parameter(validator=validate_non_negative_integer)] = None,
    sample_rate: int = 44100,
) -> int:
    """
    Convert a WAV file and write the result as a canonical PCM WAV.

    Steps run in the order trim, channel, size, resolution, amplitude.

    Parameters
    ----------
    source: Path
        The .wav file to convert
    output: Path
        The output destination for the converted .wav file
    resolution: int | None
        Target bit depth (8-32)
    size: int | None
        Target number of samples per channel
    amplitude: float | None
        Normalize the peak to this proportion of full scale
    channel: int | None
        Keep only this channel (out-of-range values select channel 0)
    start: int
        First sample per channel of the trim window; without length the
        window runs to the end of the source
    length: int | None
        Number of samples per channel to keep, starting at start
    sample_rate: int
        The sample rate written to the output file in Hz
    """
    try:
        pcm = read_wav_file(source)
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    console.print(f"Read {describe(pcm)} from {source}")

    if start + (length or 0) > pcm.size:
        print_warning(f"Warning: trim window exceeds the {pcm.size} available samples")

    params = ConvertParams(
        resolution=resolution,
        size=size,
        amplitude=amplitude,
        channel=channel,
        start=start,
        length=length,
    )
    converted = convert_pcm(pcm, params)

    peak = int(np.max(np.abs(converted.data))) if converted.total_samples else 0
    console.print(f"Converted: {describe(converted)}, peak={peak}")
    return save(output, converted, sample_rate)


@app.command
def generate(
    waveform: WaveformType = WaveformType.saw,
    output: Path = Path("waveform.wav"),
    sample_rate: int = 44100,
) -> int:
    """
    Generate a 1024-sample, 16-bit reference waveform.

    Parameters
    ----------
    waveform: WaveformType
        The wave shape to generate
    output: Path
        The output destination for the .wav file
    sample_rate: int
        The sample rate written to the output file in Hz
    """
    console.print(f"Generating [cyan bold]{waveform.value}[/] waveform...")
    return save(output, generate_waveform(waveform), sample_rate)


@app.command
def morph(
    start: Path,
    end: Path,
    scale: float = 0.5,
    output: Path = Path("morph.wav"),
    sample_rate: int = 44100,
) -> int:
    """
    Write a waveform partway between two WAV files.

    Parameters
    ----------
    start: Path
        The waveform at scale 0
    end: Path
        The waveform at scale 1
    scale: float
        Position between the two waveforms, from 0.0 to 1.0
    output: Path
        The output destination for the morphed .wav file
    sample_rate: int
        The sample rate written to the output file in Hz
    """
    try:
        low = read_wav_file(start)
        high = read_wav_file(end)
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    if low.size != high.size:
        print_warning(
            f"Warning: lengths differ ({low.size} vs {high.size}), "
            "morphing over the shorter length"
        )

    try:
        morphed = morph_pcm(low, high, scale)
    except PCMError as e:
        print_error(f"Error: {e}")
        return 1

    return save(output, morphed, sample_rate)
