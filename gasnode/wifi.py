"""WiFi connection management: station and access-point modes, network scans."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from gasnode.config import AppConfig, NetMode, WifiMode

__all__ = [
    "NO_NETWORKS_FOUND",
    "PHY_MODES",
    "RECHECK_INTERVAL_MS",
    "DNS_PORT",
    "ScannedNetwork",
    "NetworkAddresses",
    "Radio",
    "WifiHandler",
    "format_scan_results",
    "format_mac",
]

log = logging.getLogger(__name__)

NO_NETWORKS_FOUND = "no networks found"
PHY_MODES = ("11B", "11G", "11N")
RECHECK_INTERVAL_MS = 500
DNS_PORT = 53
_MAX_TEXT_LENGTH = 63
_MAX_IP_LENGTH = 31


@dataclass(frozen=True)
class ScannedNetwork:
    """One network seen during a scan."""

    ssid: str
    rssi: int
    encrypted: bool


@dataclass(frozen=True)
class NetworkAddresses:
    """IPv4 settings of an interface, as dotted strings."""

    host: str
    gateway: str
    mask: str
    dns: str


class Radio(Protocol):
    """The WiFi hardware the handler drives."""

    def scan(self) -> Iterable[ScannedNetwork]: ...

    def turn_off(self, hostname: str) -> None: ...

    def start_station(
        self, hostname: str, ssid: str, password: str, static: NetworkAddresses | None
    ) -> None: ...

    def start_access_point(
        self, ssid: str, password: str, host: str, gateway: str, mask: str
    ) -> None: ...

    def start_dns(self, port: int) -> None: ...

    def process_dns_request(self) -> None: ...

    def is_connected(self) -> bool: ...

    def addresses(self) -> NetworkAddresses: ...

    def mac_address(self) -> bytes: ...

    def chip_id(self) -> int: ...

    def phy_mode(self) -> int: ...


def format_scan_results(networks) -> str:
    """Return the scan report: one numbered line per network, ``*`` if encrypted."""
    networks = list(networks)
    if not networks:
        return NO_NETWORKS_FOUND
    return "".join(
        f"{number:2d}: {net.ssid} ({net.rssi}){'*' if net.encrypted else ' '}\n"
        for number, net in enumerate(networks, start=1)
    )


def format_mac(mac) -> str:
    """Format a six-byte hardware address as upper-case colon-separated hex."""
    mac = bytes(mac)
    if len(mac) != 6:
        raise ValueError("a MAC address has exactly six bytes")
    return ":".join(f"{byte:02X}" for byte in mac)


class WifiHandler:
    """Brings the radio up in the configured mode and keeps the station connected."""

    ap_ssid_format = "GasNode-{chip_id:06X}"

    def __init__(self, radio, config: AppConfig):
        self.radio = radio
        self.config = config
        self.connected = False
        self.connect_counter = 0
        self.mac_address = ""
        self.scan_report = ""
        self._networks: list[str] = []
        self._last_check = 0

    # -- setup -------------------------------------------------------------

    def _radio_off(self) -> None:
        self.radio.turn_off(self.config.ota_hostname)

    def _start_station(self) -> None:
        config = self.config
        static = None
        if config.net_mode == NetMode.STATIC:
            static = NetworkAddresses(
                config.net_host, config.net_gateway, config.net_mask, config.net_dns
            )
        log.info("Starting WiFi in station mode, connecting to %s", config.wifi_ssid)
        self.radio.start_station(config.ota_hostname, config.wifi_ssid, config.wifi_password, static)

    def setup(self) -> None:
        """Scan for networks, then start station or access-point mode."""
        self.connected = False
        self._last_check = 0

        self._radio_off()
        self.scan_networks()
        self._radio_off()

        if self.is_in_station_mode():
            self._start_station()
        else:
            config = self.config
            config.wifi_ssid = self.ap_ssid_format.format(chip_id=self.radio.chip_id())
            log.info("Starting WiFi access point %s", config.wifi_ssid)
            self.radio.start_access_point(
                config.wifi_ssid,
                config.wifi_password,
                config.net_host,
                config.net_gateway,
                config.net_mask,
            )
            self.radio.start_dns(DNS_PORT)
            self.connected = True

        self.mac_address = format_mac(self.radio.mac_address())

    # -- running -----------------------------------------------------------

    def handle(self, timestamp) -> bool:
        """Poll the connection at most every 500 ms; return whether it is up."""
        if not self.is_in_station_mode():
            self.radio.process_dns_request()
            return self.connected

        if timestamp - self._last_check < RECHECK_INTERVAL_MS:
            return self.connected
        self._last_check = timestamp
        online = self.radio.is_connected()

        if self.connected:
            if online:
                return True
            log.warning("WiFi connection lost")
            self._radio_off()
            self._start_station()
            self.connected = False
        elif online:
            self.connect_counter += 1
            if self.config.net_mode == NetMode.DHCP:
                addresses = self.radio.addresses()
                self.config.net_host = addresses.host[:_MAX_TEXT_LENGTH]
                self.config.net_gateway = addresses.gateway[:_MAX_TEXT_LENGTH]
                self.config.net_mask = addresses.mask[:_MAX_TEXT_LENGTH]
                self.config.net_dns = addresses.dns[:_MAX_TEXT_LENGTH]
            log.info("WiFi connected to %s", self.config.wifi_ssid)
            self.connected = True

        return self.connected

    def is_in_station_mode(self) -> bool:
        return self.config.wifi_mode == WifiMode.STATION

    def is_connected(self) -> bool:
        return self.connected

    def is_ready(self) -> bool:
        return self.is_connected() and self.is_in_station_mode()

    # -- networks ----------------------------------------------------------

    def scan_networks(self) -> str:
        """Scan, remember the SSIDs seen and return the scan report."""
        networks = list(self.radio.scan())
        self._networks.extend(net.ssid for net in networks)
        self.scan_report = format_scan_results(networks)
        log.info("WiFi scan:\n%s", self.scan_report)
        return self.scan_report

    def scanned_networks(self) -> list[str]:
        """Return the SSIDs of every network seen so far."""
        return list(self._networks)

    # -- information -------------------------------------------------------

    @property
    def local_ip(self) -> str:
        return self.radio.addresses().host[:_MAX_IP_LENGTH]

    @property
    def phy_mode(self) -> str:
        mode = self.radio.phy_mode()
        if not 1 <= mode <= len(PHY_MODES):
            raise ValueError(f"unknown phy mode {mode}")
        return PHY_MODES[mode - 1]

    @property
    def hostname(self) -> str:
        return self.config.ota_hostname