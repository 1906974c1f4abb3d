"""Threaded grabbing of HDL-32 packets from a pcap capture or a UDP port."""

from __future__ import annotations

import logging
import os
import queue
import select
import socket
import threading
from enum import Enum
from os import PathLike
from typing import Callable, Iterator, Optional, Union

from .hdl32 import PACKET_SIZE, PointXYZI, SweepAssembler
from .pcap import ETHERNET_UDP_HEADER_LENGTH, PcapPacket, is_udp, read_pcap

logger = logging.getLogger(__name__)

DEFAULT_PORT = 2368
_POLL_TIMEOUT = 1.0
_END = object()

SweepCallback = Callable[[list[PointXYZI]], None]


class ReadMode(Enum):
    """Where a grabber takes its packets from."""

    PCAP = 0
    SOCKET = 1
    NONE = 2


class GrabberError(Exception):
    """The grabber cannot open its source or cannot start."""


class LidarGrabber:
    """Reads lidar packets on one thread and turns them into sweeps on another.

    Each completed sweep is handed to every registered callback.
    """

    def __init__(
        self,
        pcap_file: Optional[Union[str, PathLike]] = None,
        ip_address: Optional[str] = None,
        port: int = DEFAULT_PORT,
    ) -> None:
        self.pcap_file = os.fspath(pcap_file) if pcap_file else None
        self.ip_address = ip_address or None
        self.port = port
        self._assembler = SweepAssembler()
        self._callbacks: list[SweepCallback] = []
        self._callbacks_lock = threading.Lock()
        self._packets: queue.Queue = queue.Queue()
        self._running = threading.Event()
        self._halt = threading.Event()
        self._reader: Optional[threading.Thread] = None
        self._processor: Optional[threading.Thread] = None
        self._socket: Optional[socket.socket] = None

        if self.pcap_file:
            self.mode = ReadMode.PCAP
        elif self.ip_address:
            self.mode = ReadMode.SOCKET
            self._socket = self._open_socket()
        else:
            self.mode = ReadMode.NONE

    def _open_socket(self) -> socket.socket:
        logger.info("Opening UDP socket: port %d", self.port)
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.bind(("", self.port))
            sock.setblocking(False)
        except OSError as exc:
            sock.close()
            raise GrabberError(f"cannot bind UDP port {self.port}: {exc}") from exc
        self.port = sock.getsockname()[1]
        logger.info("Velodyne socket fd is %d, port %d", sock.fileno(), self.port)
        return sock

    def register_callback(self, callback: SweepCallback) -> None:
        """Call ``callback`` with the points of every completed sweep."""
        with self._callbacks_lock:
            self._callbacks.append(callback)

    def start(self) -> None:
        """Start the reading and processing threads."""
        if self._running.is_set():
            raise GrabberError("grabber is already running")
        if self.mode is ReadMode.NONE:
            raise GrabberError("no pcap file or address to read from")
        if self.mode is ReadMode.PCAP:
            packets = read_pcap(self.pcap_file)
            reader = threading.Thread(target=self._read_pcap, args=(packets,), daemon=True)
        else:
            if self._socket is None:
                raise GrabberError("grabber socket is closed")
            reader = threading.Thread(target=self._read_socket, daemon=True)

        self._halt.clear()
        self._packets = queue.Queue()
        self._running.set()
        self._reader = reader
        self._processor = threading.Thread(target=self._process, daemon=True)
        self._reader.start()
        self._processor.start()

    def stop(self) -> None:
        """Wait for both threads to finish."""
        for thread in (self._reader, self._processor):
            if thread is not None:
                thread.join()
        self._reader = self._processor = None
        self._running.clear()

    def is_running(self) -> bool:
        return self._running.is_set()

    def current_packet(self) -> list[PointXYZI]:
        """Points of the packet processed last."""
        return self._assembler.current_packet()

    def whole_packet(self) -> list[PointXYZI]:
        """Points of the sweep being gathered."""
        return self._assembler.whole_packet()

    def close(self) -> None:
        """Interrupt reading, wait for the threads and release the socket."""
        self._halt.set()
        self.stop()
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def __enter__(self) -> "LidarGrabber":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _enqueue(self, payload: bytes) -> None:
        if len(payload) == PACKET_SIZE:
            self._packets.put(bytes(payload))

    def _read_pcap(self, packets: Iterator[PcapPacket]) -> None:
        last: Optional[tuple[int, int]] = None
        try:
            for packet in packets:
                if self._halt.is_set():
                    break
                if last is not None:
                    delay = (packet.timestamp_sec - last[0]) + (
                        packet.timestamp_usec - last[1]
                    ) / 1_000_000
                    if delay > 0 and self._halt.wait(delay):
                        break
                last = (packet.timestamp_sec, packet.timestamp_usec)
                if not is_udp(packet.data):
                    continue
                self._enqueue(packet.data[ETHERNET_UDP_HEADER_LENGTH : packet.length])
        finally:
            close = getattr(packets, "close", None)
            if close is not None:
                close()
            self._packets.put(_END)

    def _read_socket(self) -> None:
        sock = self._socket
        try:
            while sock is not None and not self._halt.is_set():
                try:
                    readable, _, errored = select.select([sock], [], [sock], _POLL_TIMEOUT)
                except (OSError, ValueError) as exc:
                    logger.warning("Velodyne port %d poll() error: %s", self.port, exc)
                    break
                if errored:
                    logger.error("Velodyne port %d poll() reports Velodyne error", self.port)
                    break
                if not readable:
                    logger.warning("Velodyne port %d poll() timeout", self.port)
                    break
                try:
                    data = sock.recv(PACKET_SIZE)
                except BlockingIOError:
                    continue
                except OSError as exc:
                    logger.error("recv failed from port %d: %s", self.port, exc)
                    break
                if len(data) == PACKET_SIZE:
                    self._enqueue(data)
                else:
                    logger.info(
                        "Incomplete Velodyne data packet read: %d bytes from port %d",
                        len(data),
                        self.port,
                    )
        finally:
            self._packets.put(_END)

    def _process(self) -> None:
        try:
            while True:
                item = self._packets.get()
                if item is _END:
                    break
                try:
                    sweeps = self._assembler.feed(item)
                except ValueError as exc:
                    logger.warning("Dropping malformed lidar packet: %s", exc)
                    continue
                if not sweeps:
                    continue
                with self._callbacks_lock:
                    callbacks = list(self._callbacks)
                for sweep in sweeps:
                    for callback in callbacks:
                        callback(list(sweep))
        finally:
            self._running.clear()