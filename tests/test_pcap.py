import struct

import pytest

from lidarview.pcap import (
    ETHERNET_UDP_HEADER_LENGTH,
    PcapError,
    PcapPacket,
    is_udp,
    lidar_payloads,
    read_pcap,
)


def _global_header(order="<", nano=False):
    magic = 0xA1B23C4D if nano else 0xA1B2C3D4
    return struct.pack(order + "IHHiIII", magic, 2, 4, 0, 0, 65535, 1)


def _record(data, sec, frac, order="<", length=None):
    original = len(data) if length is None else length
    return struct.pack(order + "IIII", sec, frac, len(data), original) + data


def _frame(payload, ethertype=0x0800, proto=17):
    eth = b"\x02\x00\x00\x00\x00\x01" + b"\x02\x00\x00\x00\x00\x02" + ethertype.to_bytes(2, "big")
    if ethertype == 0x86DD:
        ip = bytes(6) + bytes([proto]) + bytes(33)
    else:
        ip = bytes([0x45]) + bytes(8) + bytes([proto]) + bytes(10)
    udp = bytes(8)
    return eth + ip + udp + payload


def _write(tmp_path, content):
    path = tmp_path / "capture.pcap"
    path.write_bytes(content)
    return path


def test_read_little_endian_packets(tmp_path):
    frames = [_frame(b"abc"), _frame(b"defg")]
    content = _global_header() + _record(frames[0], 10, 250) + _record(frames[1], 11, 0)
    packets = list(read_pcap(_write(tmp_path, content)))
    assert packets == [
        PcapPacket(10, 250, frames[0], len(frames[0])),
        PcapPacket(11, 0, frames[1], len(frames[1])),
    ]


def test_read_big_endian_packets(tmp_path):
    frame = _frame(b"xyz")
    content = _global_header(">") + _record(frame, 7, 9, ">")
    packets = list(read_pcap(_write(tmp_path, content)))
    assert [(p.timestamp_sec, p.timestamp_usec, p.data) for p in packets] == [(7, 9, frame)]


def test_nanosecond_stamps_become_microseconds(tmp_path):
    content = _global_header(nano=True) + _record(b"frame", 3, 1_500_000)
    (packet,) = read_pcap(_write(tmp_path, content))
    assert packet.timestamp_usec == 1500


def test_timestamp_property_combines_fields():
    packet = PcapPacket(2, 500_000, b"", 0)
    assert packet.timestamp == pytest.approx(2.5)


def test_truncated_record_ends_iteration(tmp_path):
    content = _global_header() + _record(b"first", 1, 0) + _record(b"second", 2, 0)[:-3]
    packets = list(read_pcap(_write(tmp_path, content)))
    assert [p.data for p in packets] == [b"first"]


def test_bad_magic_raises(tmp_path):
    content = b"\x00" * 24
    with pytest.raises(PcapError):
        read_pcap(_write(tmp_path, content))


def test_short_file_raises(tmp_path):
    with pytest.raises(PcapError):
        read_pcap(_write(tmp_path, b"\xd4\xc3\xb2\xa1"))


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_pcap(tmp_path / "absent.pcap")


@pytest.mark.parametrize(
    "frame, expected",
    [
        (_frame(b"p"), True),
        (_frame(b"p", proto=6), False),
        (_frame(b"p", ethertype=0x86DD), True),
        (_frame(b"p", ethertype=0x86DD, proto=6), False),
        (_frame(b"p", ethertype=0x0806), False),
        (b"\x00" * 10, False),
    ],
)
def test_is_udp(frame, expected):
    assert is_udp(frame) is expected


def test_lidar_payloads_strip_headers_and_skip_non_udp(tmp_path):
    udp_payload = bytes(range(100))
    content = (
        _global_header()
        + _record(_frame(udp_payload), 5, 0)
        + _record(_frame(b"tcp data", proto=6), 5, 10)
        + _record(_frame(b"second"), 6, 0)
    )
    result = list(lidar_payloads(_write(tmp_path, content)))
    assert result == [(5.0, udp_payload), (6.0, b"second")]


def test_lidar_payloads_follow_original_length(tmp_path):
    frame = _frame(b"0123456789")
    content = _global_header() + _record(frame, 1, 0, length=ETHERNET_UDP_HEADER_LENGTH + 4)
    result = list(lidar_payloads(_write(tmp_path, content)))
    assert result == [(1.0, b"0123")]


def test_lidar_payloads_skip_short_frames(tmp_path):
    frame = _frame(b"")[:30]
    content = _global_header() + _record(frame, 1, 0)
    assert list(lidar_payloads(_write(tmp_path, content))) == []