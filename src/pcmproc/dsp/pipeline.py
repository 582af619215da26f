from pcmproc.dsp.process import from_channel, normalize, trim
from pcmproc.dsp.resample import change_size
from pcmproc.dsp.resolution import change_resolution
from pcmproc.types import ConvertParams, PCMBuffer


def convert(pcm: PCMBuffer, params: ConvertParams) -> PCMBuffer:
    """Run a buffer through the steps configured in ``params``.

    Steps run in a fixed order: trim, channel extraction, resize, resolution
    change, normalization. Steps whose parameter is None are skipped. A
    non-zero start without a length trims through to the end of the buffer.

    Args:
        pcm: The source buffer; it is not modified.
        params: The pipeline configuration.

    Returns:
        The converted buffer.
    """
    result = pcm
    if params.length is not None:
        result = trim(result, params.start, params.length)
    elif params.start:
        result = trim(result, params.start, max(pcm.size - params.start, 0))
    if params.channel is not None:
        result = from_channel(result, params.channel)
    if params.size is not None:
        result = change_size(result, params.size)
    if params.resolution is not None:
        result = change_resolution(result, params.resolution)
    if params.amplitude is not None:
        result = normalize(result, params.amplitude)
    return result
