from .datetimes import get_timezone, make_aware, to_iso_instant

__all__ = [
    "get_timezone",
    "make_aware",
    "to_iso_instant",
]
