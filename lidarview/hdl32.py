"""Decoding of HDL-32 data packets into XYZI points and whole sweeps."""

from __future__ import annotations

import math
import struct
import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional, Sequence

LASERS_PER_FIRING = 32
FIRINGS_PER_PACKET = 12
PACKET_SIZE = 1206
"""Bytes in one lidar data packet: 12 firings of 100 bytes plus a 6-byte tail."""

NUM_ROT_ANGLES = 36001
"""Rotational positions in hundredths of a degree, 0 to 360 inclusive."""

DISTANCE_RESOLUTION = 0.002
"""Metres per distance unit reported by the sensor."""

INITIAL_AZIMUTH = 65000
"""Azimuth remembered before the first firing; any real position is below it."""

_FIRING_SIZE = 100
_FIRING = struct.Struct("<HH" + "HB" * LASERS_PER_FIRING)
_TAIL = struct.Struct("<IBB")
_FLOAT32 = struct.Struct("<f")

_HDL32_VERTICAL_CORRECTIONS = (
    -30.67, -9.3299999, -29.33, -8, -28, -6.6700001, -26.67, -5.3299999,
    -25.33, -4, -24, -2.6700001, -22.67, -1.33, -21.33, 0,
    -20, 1.33, -18.67, 2.6700001, -17.33, 4, -16, 5.3299999,
    -14.67, 6.6700001, -13.33, 8, -12, 9.3299999, -10.67, 10.67,
)


def _to_radians(degrees: float) -> float:
    return degrees * math.pi / 180.0


def _float32(value: float) -> float:
    return _FLOAT32.unpack(_FLOAT32.pack(value))[0]


_COS_TABLE = tuple(math.cos((math.pi / 180.0) * (i / 100.0)) for i in range(NUM_ROT_ANGLES))
_SIN_TABLE = tuple(math.sin((math.pi / 180.0) * (i / 100.0)) for i in range(NUM_ROT_ANGLES))


class HDLBlock(IntEnum):
    """Block identifiers that open each firing."""

    BLOCK_0_TO_31 = 0xEEFF
    BLOCK_32_TO_63 = 0xDDFF


@dataclass(frozen=True)
class PointXYZI:
    """A point in metres with its return intensity, at single precision."""

    x: float
    y: float
    z: float
    i: float


@dataclass(frozen=True)
class LaserReturn:
    """Raw distance (in 2 mm units) and intensity of one laser return."""

    distance: int
    intensity: int


@dataclass(frozen=True)
class FiringData:
    """One firing: block identifier, rotational position and 32 returns."""

    block_identifier: int
    rotational_position: int
    returns: tuple[LaserReturn, ...]


@dataclass(frozen=True)
class DataPacket:
    """A decoded data packet."""

    firings: tuple[FiringData, ...]
    gps_timestamp: int
    mode: int
    sensor_type: int


@dataclass(frozen=True)
class LaserCorrection:
    """Calibration of one laser; angles in degrees, offsets in metres."""

    azimuth_correction: float = 0.0
    vertical_correction: float = 0.0
    distance_correction: float = 0.0
    vertical_offset_correction: float = 0.0
    horizontal_offset_correction: float = 0.0
    sin_vert_correction: float = 0.0
    cos_vert_correction: float = 1.0


def hdl32_corrections() -> list[LaserCorrection]:
    """Default corrections for 64 lasers: HDL-32 angles, then 32 neutral entries."""
    corrections = [
        LaserCorrection(
            vertical_correction=angle,
            sin_vert_correction=math.sin(_to_radians(angle)),
            cos_vert_correction=math.cos(_to_radians(angle)),
        )
        for angle in _HDL32_VERTICAL_CORRECTIONS
    ]
    corrections.extend(LaserCorrection() for _ in range(64 - LASERS_PER_FIRING))
    return corrections


def compute_xyzi(
    azimuth: int, laser_return: LaserReturn, correction: LaserCorrection
) -> PointXYZI:
    """Convert one return at ``azimuth`` (hundredths of a degree) to a point."""
    if not 0 <= azimuth <= 0xFFFF:
        raise ValueError(f"azimuth {azimuth} is not a 16-bit value")
    distance = laser_return.distance * DISTANCE_RESOLUTION

    if correction.azimuth_correction == 0:
        if azimuth >= NUM_ROT_ANGLES:
            raise ValueError(f"azimuth {azimuth} is beyond 360 degrees")
        cos_azimuth = _COS_TABLE[azimuth]
        sin_azimuth = _SIN_TABLE[azimuth]
    else:
        radians = _to_radians(azimuth / 100.0 - correction.azimuth_correction)
        cos_azimuth = math.cos(radians)
        sin_azimuth = math.sin(radians)

    distance += correction.distance_correction
    xy_distance = distance * correction.cos_vert_correction
    offset = correction.horizontal_offset_correction
    return PointXYZI(
        x=_float32(xy_distance * sin_azimuth - offset * cos_azimuth),
        y=_float32(xy_distance * cos_azimuth + offset * sin_azimuth),
        z=_float32(
            distance * correction.sin_vert_correction
            + correction.vertical_offset_correction
        ),
        i=float(laser_return.intensity),
    )


def parse_packet(data: bytes) -> DataPacket:
    """Decode a 1206-byte little-endian data packet."""
    if len(data) != PACKET_SIZE:
        raise ValueError(f"lidar packet must be {PACKET_SIZE} bytes, got {len(data)}")
    firings = []
    for offset in range(0, FIRINGS_PER_PACKET * _FIRING_SIZE, _FIRING_SIZE):
        block, rotation, *flat = _FIRING.unpack_from(data, offset)
        returns = tuple(
            LaserReturn(distance, intensity)
            for distance, intensity in zip(flat[0::2], flat[1::2])
        )
        firings.append(FiringData(block, rotation, returns))
    gps_timestamp, mode, sensor_type = _TAIL.unpack_from(
        data, FIRINGS_PER_PACKET * _FIRING_SIZE
    )
    return DataPacket(tuple(firings), gps_timestamp, mode, sensor_type)


class SweepAssembler:
    """Turns successive packets into points and gathers them into full sweeps.

    A sweep ends whenever the rotational position goes backwards.
    """

    def __init__(self, corrections: Optional[Iterable[LaserCorrection]] = None) -> None:
        chosen: Sequence[LaserCorrection] = (
            tuple(corrections) if corrections is not None else tuple(hdl32_corrections())
        )
        if len(chosen) < LASERS_PER_FIRING:
            raise ValueError(
                f"need at least {LASERS_PER_FIRING} corrections, got {len(chosen)}"
            )
        self._corrections = chosen
        self._last_azimuth = INITIAL_AZIMUTH
        self._current: list[PointXYZI] = []
        self._whole: list[PointXYZI] = []
        self._lock = threading.Lock()

    def feed(self, data: bytes) -> list[list[PointXYZI]]:
        """Add one packet; return the sweeps it completed, oldest first."""
        packet = parse_packet(data)
        completed: list[list[PointXYZI]] = []
        with self._lock:
            self._current = []
            for firing in packet.firings:
                if firing.rotational_position < self._last_azimuth:
                    completed.append(self._whole)
                    self._whole = []
                for laser_return, correction in zip(firing.returns, self._corrections):
                    point = compute_xyzi(firing.rotational_position, laser_return, correction)
                    self._current.append(point)
                    self._whole.append(point)
                self._last_azimuth = firing.rotational_position
        return completed

    def current_packet(self) -> list[PointXYZI]:
        """Points of the most recently fed packet."""
        with self._lock:
            return list(self._current)

    def whole_packet(self) -> list[PointXYZI]:
        """Points gathered so far in the sweep in progress."""
        with self._lock:
            return list(self._whole)