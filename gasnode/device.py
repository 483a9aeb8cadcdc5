"""The main loop of the sensor node: button, status reports and services."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

__all__ = ["DEBOUNCE_MS", "REPORT_INTERVAL_MS", "Services", "Device"]

log = logging.getLogger(__name__)

DEBOUNCE_MS = 500
REPORT_INTERVAL_MS = 10000


class Services(Protocol):
    """The periodic tasks run while the network is up."""

    ota_running: bool
    upload_running: bool

    def handle_ota(self) -> None: ...

    def handle_telnet(self) -> None: ...

    def handle_web(self) -> None: ...

    def handle_sensors(self) -> None: ...

    def handle_mqtt(self) -> None: ...

    def handle_app(self, now: int) -> None: ...


class Device:
    """Runs one pass of the node's work per call to :meth:`loop`."""

    def __init__(self, wifi, calibrate: Callable[[], None], services):
        self.wifi = wifi
        self.calibrate = calibrate
        self.services = services
        self.button_pressed = False
        self.max_loop_time = 0
        self._debounce_timestamp = 0
        self._life_ticker = 0
        self._last_loop = 0

    def start(self, now) -> None:
        """Bring up the network and reset the loop timers."""
        self.button_pressed = False
        self.wifi.setup()
        self.max_loop_time = 0
        self._life_ticker = self._last_loop = now

    def button_interrupt(self, now) -> None:
        """Record a button press unless it falls within the debounce time."""
        if now - self._debounce_timestamp > DEBOUNCE_MS:
            self.button_pressed = True
            log.info("button pressed")
        self._debounce_timestamp = now

    def loop(self, now) -> None:
        """Run one iteration of the main loop at time ``now`` (milliseconds)."""
        self.max_loop_time = max(self.max_loop_time, now - self._last_loop)
        self._last_loop = now

        if self.button_pressed:
            log.info("calibrating after button press")
            self.calibrate()
            self.button_pressed = False

        if now - self._life_ticker >= REPORT_INTERVAL_MS:
            log.info("wifi is connected %s", self.wifi.is_connected())
            log.info("max loop time = %d", self.max_loop_time)
            self.max_loop_time = 0
            self._life_ticker = now

        services = self.services
        if self.wifi.handle(now):
            services.handle_ota()
            if not services.ota_running:
                services.handle_telnet()
                services.handle_web()
                if not services.upload_running:
                    services.handle_sensors()
                    services.handle_mqtt()

        services.handle_app(now)