"""Device configuration and how a submitted setup form is stored into it."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, fields
from enum import IntEnum

__all__ = [
    "WifiMode",
    "NetMode",
    "AppConfig",
    "store_config_value",
    "parse_config_form",
    "render_saved_arguments",
]

MAX_TEXT_LENGTH = 63
_ULONG_MASK = 0xFFFFFFFF

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class WifiMode(IntEnum):
    """Radio operating mode as stored in the configuration."""

    STATION = 1
    ACCESS_POINT = 2


class NetMode(IntEnum):
    """How the station obtains its IP settings."""

    STATIC = 1
    DHCP = 2


def _leading_int(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _leading_float(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def _parse_text(value: str | None, current: str) -> str:
    return (value or "")[:MAX_TEXT_LENGTH]


def _parse_int(value: str | None, current: int) -> int:
    return _leading_int(value) if value else 0


def _parse_ulong(value: str | None, current: int) -> int:
    return _leading_int(value) & _ULONG_MASK if value else 0


def _parse_float(value: str | None, current: float) -> float:
    return _leading_float(value) if value else 0.0


def _parse_bool(value: str | None, current: bool) -> bool:
    return value == "true" if value else current


def _text():
    return field(default="", metadata={"parse": _parse_text})


def _int():
    return field(default=0, metadata={"parse": _parse_int})


def _ulong():
    return field(default=0, metadata={"parse": _parse_ulong})


def _float():
    return field(default=0.0, metadata={"parse": _parse_float})


def _bool():
    return field(default=False, metadata={"parse": _parse_bool})


@dataclass
class AppConfig:
    """All settings editable from the setup page; zeroed by default."""

    admin_password: str = _text()

    ota_enabled: bool = _bool()
    ota_hostname: str = _text()
    ota_password: str = _text()

    wifi_mode: int = _int()
    wifi_ssid: str = _text()
    wifi_password: str = _text()

    net_mode: int = _int()
    net_host: str = _text()
    net_gateway: str = _text()
    net_mask: str = _text()
    net_dns: str = _text()

    mqtt_enabled: bool = _bool()
    mqtt_clientid: str = _text()
    mqtt_host: str = _text()
    mqtt_port: int = _int()
    mqtt_useauth: bool = _bool()
    mqtt_user: str = _text()
    mqtt_password: str = _text()
    mqtt_topic_temp_c: str = _text()
    mqtt_topic_temp_f: str = _text()
    mqtt_topic_humidity: str = _text()
    mqtt_topic_lpg: str = _text()
    mqtt_topic_co: str = _text()
    mqtt_topic_smoke: str = _text()
    mqtt_topic_json: str = _text()
    mqtt_sending_interval: int = _ulong()

    syslog_enabled: bool = _bool()
    syslog_host: str = _text()
    syslog_port: int = _int()
    syslog_app_name: str = _text()

    led_night_mode_enabled: bool = _bool()
    led_night_mode_timeout: int = _int()

    telnet_enabled: bool = _bool()

    offset_c: float = _float()
    offset_f: float = _float()
    factor_lpg: float = _float()
    factor_co: float = _float()
    factor_smoke: float = _float()


_PARSERS: dict[str, Callable] = {f.name: f.metadata["parse"] for f in fields(AppConfig)}


def store_config_value(config, name, value) -> None:
    """Store one submitted form value into ``config``; unknown names are ignored.

    Text is cut to 63 characters, numbers take their leading numeric part
    (0 when empty or unparsable), and an empty boolean leaves the setting alone.
    """
    parse = _PARSERS.get(name)
    if parse is not None:
        setattr(config, name, parse(value, getattr(config, name)))


def _stored_arguments(args: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    # The server appends the raw request body as a final argument; it is not a setting.
    return list(args)[:-1]


def parse_config_form(args) -> AppConfig:
    """Build a fresh configuration from the (name, value) pairs of a save request."""
    config = AppConfig()
    for name, value in _stored_arguments(args):
        store_config_value(config, name, value)
    return config


def render_saved_arguments(args) -> str:
    """List the stored arguments as numbered ``name = value`` lines."""
    return "".join(
        f"{number:2d}. {name} = {value}\n"
        for number, (name, value) in enumerate(_stored_arguments(args), start=1)
    )