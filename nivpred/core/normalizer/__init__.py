from .snapshot import NormalizedSnapshot, normalize_snapshot
from .units import age_to_months, clamp, parse_number, parse_oxygen_fraction

__all__ = [
    "NormalizedSnapshot",
    "age_to_months",
    "clamp",
    "normalize_snapshot",
    "parse_number",
    "parse_oxygen_fraction",
]
