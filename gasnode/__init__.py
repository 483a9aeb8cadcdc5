"""Sensor node configuration, status pages, Wi-Fi handling, main loop and a small DEFLATE codec."""

__version__ = "0.1.0"