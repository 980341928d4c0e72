"""
Encoded polyline codec (1e-5 degree precision).

Each coordinate delta is zigzag encoded and written as 5-bit groups offset
by 63, low group first, with 0x20 marking "more groups follow". Latitude and
longitude deltas strictly alternate.
"""
from __future__ import annotations

from typing import List, Sequence, Tuple

from runroute.core.models import Coordinate

_PRECISION = 1e5
_OFFSET = 63
_CONTINUATION = 0x20
_CHUNK_MASK = 0x1F


class PolylineDecodeError(ValueError):
    """Encoded path is malformed (truncated, bad character, out of range)."""


def _read_varint(encoded: str, index: int) -> Tuple[int, int]:
    """Read one zigzagged delta starting at ``index``; return (delta, next index)."""
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise PolylineDecodeError(f"Truncated polyline at offset {index}")
        b = ord(encoded[index]) - _OFFSET
        if b < 0 or b > 0x3F:
            raise PolylineDecodeError(
                f"Invalid polyline character {encoded[index]!r} at offset {index}"
            )
        index += 1
        result |= (b & _CHUNK_MASK) << shift
        shift += 5
        if b < _CONTINUATION:
            break
    return (result >> 1) ^ -(result & 1), index


def decode_polyline(encoded: str) -> List[Coordinate]:
    """
    Decode an encoded polyline into coordinates in travel order.

    Raises PolylineDecodeError rather than returning a partial path.
    """
    out: List[Coordinate] = []
    index = 0
    lat = 0
    lng = 0

    while index < len(encoded):
        dlat, index = _read_varint(encoded, index)
        dlng, index = _read_varint(encoded, index)
        lat += dlat
        lng += dlng
        try:
            out.append(Coordinate(latitude=lat / _PRECISION, longitude=lng / _PRECISION))
        except ValueError as e:
            raise PolylineDecodeError(
                f"Decoded point ({lat / _PRECISION}, {lng / _PRECISION}) out of range"
            ) from e

    return out


def encode_polyline(path: Sequence[Coordinate]) -> str:
    """Inverse of :func:`decode_polyline` (rounds to 1e-5 degrees)."""
    chunks: List[str] = []
    prev_lat = 0
    prev_lng = 0

    for c in path:
        lat_e5 = round(c.latitude * _PRECISION)
        lng_e5 = round(c.longitude * _PRECISION)

        for delta in (lat_e5 - prev_lat, lng_e5 - prev_lng):
            value = ~(delta << 1) if delta < 0 else (delta << 1)
            while value >= _CONTINUATION:
                chunks.append(chr((_CONTINUATION | (value & _CHUNK_MASK)) + _OFFSET))
                value >>= 5
            chunks.append(chr(value + _OFFSET))

        prev_lat = lat_e5
        prev_lng = lng_e5

    return "".join(chunks)
