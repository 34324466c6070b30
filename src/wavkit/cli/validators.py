def validate_positive_integer(type_: object, value: int | None) -> None:
    """Validate that value is a positive integer."""
    if value is not None and value <= 0:
        raise ValueError("Value must be positive")


def validate_wav_suffix(type_: object, path: object) -> None:
    if str(path).lower().endswith((".wav", ".wave")):
        return
    raise ValueError("Output file must have a .wav or .wave extension")
