from pcmproc.types import MAX_RESOLUTION, MIN_RESOLUTION, is_valid_resolution


def validate_resolution(type_: object, resolution: int | None) -> None:
    """Validate that a resolution is within the supported bit depths."""
    if resolution is None:
        return

    if not is_valid_resolution(resolution):
        raise ValueError(
            f"Resolution must be between {MIN_RESOLUTION} and {MAX_RESOLUTION} bits"
        )


def validate_amplitude(type_: object, amplitude: float | None) -> None:
    if amplitude is None:
        return

    if amplitude <= 0.0:
        raise ValueError("Amplitude must be greater than 0.0")


def validate_non_negative_integer(type_: object, value: int | None) -> None:
    if value is not None and value < 0:
        raise ValueError("Value must not be negative")
