"""Sensor status documents served by the web interface."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "APP_NAME",
    "ROOT_PAGE_SCRIPT",
    "SensorReadings",
    "json_status",
    "plain_status",
    "plain_value",
    "root_page_values",
    "root_page_title",
]

APP_NAME = "GasNode"

# Refreshes the read-only fields of the root page once a minute.
ROOT_PAGE_SCRIPT = (
    "<script>function getPowerState(){"
    "var tc=document.getElementById('pgid0'),"
    "tf=document.getElementById('pgid1'),"
    "hm=document.getElementById('pgid2');"
    "lp=document.getElementById('pgid3');"
    "co=document.getElementById('pgid4');"
    "sm=document.getElementById('pgid5');"
    "fetch('/api/json').then(resp=>resp.json()).then(function(o){"
    "tc.value=o.temp_c.toFixed(2)+'°C',"
    "tf.value=o.temp_f.toFixed(2)+'°F',"
    "hm.value=o.humidity.toFixed(1)+'%',"
    "lp.value=o.lpg.toFixed(8)+'ppm',"
    "co.value=o.co.toFixed(8)+'ppm',"
    "sm.value=o.smoke.toFixed(8)+'ppm';"
    "})}setInterval(getPowerState,6e4);</script>"
)


@dataclass(frozen=True)
class SensorReadings:
    """The latest values measured by the temperature and gas sensors."""

    temp_c: float = 0.0
    temp_f: float = 0.0
    humidity: float = 0.0
    lpg: float = 0.0
    co: float = 0.0
    smoke: float = 0.0


def json_status(readings: SensorReadings) -> str:
    """Return the readings as the JSON document of ``/api/json``."""
    r = readings
    return (
        "{"
        f'"temp_c":{r.temp_c:.2f},'
        f'"temp_f":{r.temp_f:.2f},'
        f'"humidity":{r.humidity:.1f},'
        f'"lpg":{r.lpg:.8f},'
        f'"co":{r.co:.8f},'
        f'"smoke":{r.smoke:.8f}'
        "}\r\n"
    )


def plain_status(readings: SensorReadings) -> str:
    """Return the readings as ``name=value`` lines for ``/api/plain``."""
    r = readings
    return (
        f"temp_c={r.temp_c:.2f}\n"
        f"temp_f={r.temp_f:.2f}\n"
        f"humidity={r.humidity:.1f}\n"
        f"lpg={r.lpg:.8f}\n"
        f"co={r.co:.8f}\n"
        f"smoke={r.smoke:.8f}\n"
    )


def plain_value(value) -> str:
    """Format a single reading for the ``/api/plain/<name>`` endpoints."""
    return f"{value:.8f}"


def root_page_values(readings: SensorReadings) -> list[tuple[str, str]]:
    """Return the (label, text) pairs shown on the root page, in field order."""
    r = readings
    return [
        ("Celsius", f"{r.temp_c:.2f}°C"),
        ("Fahrenheit", f"{r.temp_f:.2f}°F"),
        ("Humidity", f"{r.humidity:.1f}%"),
        ("LPG", f"{r.lpg:.8f}ppm"),
        ("CO", f"{r.co:.8f}ppm"),
        ("Smoke", f"{r.smoke:.8f}ppm"),
    ]


def root_page_title(hostname) -> str:
    """Return the title of the root page for the device's host name."""
    return f"{APP_NAME} - {hostname}"