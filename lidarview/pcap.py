"""Reading packets from classic libpcap capture files."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from os import PathLike
from typing import BinaryIO, Iterator, Union

ETHERNET_UDP_HEADER_LENGTH = 42
"""Bytes of Ethernet, IPv4 and UDP headers ahead of a lidar payload."""

_ETHERTYPE_IPV4 = 0x0800
_ETHERTYPE_IPV6 = 0x86DD
_IPPROTO_UDP = 17

_GLOBAL_HEADER_LENGTH = 24
_RECORD_HEADER_LENGTH = 16

# magic bytes as stored in the file -> (struct byte order, nanosecond stamps)
_MAGICS = {
    b"\xd4\xc3\xb2\xa1": ("<", False),
    b"\xa1\xb2\xc3\xd4": (">", False),
    b"\x4d\x3c\xb2\xa1": ("<", True),
    b"\xa1\xb2\x3c\x4d": (">", True),
}


class PcapError(Exception):
    """The file is not a readable pcap capture."""


@dataclass(frozen=True)
class PcapPacket:
    """One captured frame with its timestamp and original wire length."""

    timestamp_sec: int
    timestamp_usec: int
    data: bytes
    length: int

    @property
    def timestamp(self) -> float:
        return self.timestamp_sec + self.timestamp_usec / 1_000_000


def _read_global_header(stream: BinaryIO, path) -> tuple[str, bool]:
    header = stream.read(_GLOBAL_HEADER_LENGTH)
    if len(header) < _GLOBAL_HEADER_LENGTH:
        raise PcapError(f"{path}: truncated pcap file header")
    try:
        return _MAGICS[header[:4]]
    except KeyError:
        raise PcapError(f"{path}: unknown file format") from None


def _records(stream: BinaryIO, order: str, nanoseconds: bool) -> Iterator[PcapPacket]:
    record = struct.Struct(order + "IIII")
    with stream:
        while True:
            header = stream.read(_RECORD_HEADER_LENGTH)
            if len(header) < _RECORD_HEADER_LENGTH:
                return
            sec, frac, captured, original = record.unpack(header)
            data = stream.read(captured)
            if len(data) < captured:
                return
            usec = frac // 1000 if nanoseconds else frac
            yield PcapPacket(sec, usec, data, original)


def read_pcap(path: Union[str, PathLike]) -> Iterator[PcapPacket]:
    """Open a capture and iterate over its packets.

    The file header is checked at once; a truncated record ends the
    iteration quietly.
    """
    stream = open(path, "rb")
    try:
        order, nanoseconds = _read_global_header(stream, path)
    except BaseException:
        stream.close()
        raise
    return _records(stream, order, nanoseconds)


def is_udp(frame: bytes) -> bool:
    """Whether an Ethernet frame carries a UDP datagram over IPv4 or IPv6."""
    if len(frame) < 14:
        return False
    ethertype = int.from_bytes(frame[12:14], "big")
    if ethertype == _ETHERTYPE_IPV4:
        return len(frame) > 23 and frame[23] == _IPPROTO_UDP
    if ethertype == _ETHERTYPE_IPV6:
        return len(frame) > 20 and frame[20] == _IPPROTO_UDP
    return False


def lidar_payloads(path: Union[str, PathLike]) -> Iterator[tuple[float, bytes]]:
    """Yield ``(timestamp, payload)`` for each UDP packet of a capture.

    The payload is the frame past its 42 header bytes, up to the packet's
    original length.
    """
    for packet in read_pcap(path):
        if not is_udp(packet.data) or packet.length < ETHERNET_UDP_HEADER_LENGTH:
            continue
        yield packet.timestamp, packet.data[ETHERNET_UDP_HEADER_LENGTH : packet.length]