"""Normalizers applied to raw environment values before Settings validates them."""


def normalize_case(value: str | None, *, upper: bool) -> str | None:
    """
    Strip surrounding whitespace and fold the case, so `LOG_LEVEL= debug`
    reads as "DEBUG". None and non-string values are returned unchanged.
    """
    if not isinstance(value, str):
        return value
    value = value.strip()
    return value.upper() if upper else value.lower()
