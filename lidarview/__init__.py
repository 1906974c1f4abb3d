"""HDL-32 lidar packet decoding, pcap replay and 3-D scene maths."""

__version__ = "0.1.0"