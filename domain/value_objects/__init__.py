"""Domain value objects"""

from domain.value_objects.backend_mode import BackendMode
from domain.value_objects.units import (
    bytes_from_size_token,
    clamp_percent,
    parse_percent,
    parse_size_token,
)
from domain.value_objects.web_auth import Principal

__all__ = [
    "BackendMode",
    "Principal",
    "bytes_from_size_token",
    "clamp_percent",
    "parse_percent",
    "parse_size_token",
]
