import json

import pytest

from gasnode.status import (
    APP_NAME,
    ROOT_PAGE_SCRIPT,
    SensorReadings,
    json_status,
    plain_status,
    plain_value,
    root_page_title,
    root_page_values,
)

READINGS = SensorReadings(
    temp_c=21.5, temp_f=70.75, humidity=45.5, lpg=0.5, co=0.25, smoke=0.125
)


def test_json_status_round_trip():
    data = json.loads(json_status(READINGS))
    assert data == {
        "temp_c": 21.5,
        "temp_f": 70.75,
        "humidity": 45.5,
        "lpg": 0.5,
        "co": 0.25,
        "smoke": 0.125,
    }


def test_json_status_ends_with_crlf_and_keeps_key_order():
    text = json_status(READINGS)
    assert text.endswith("}\r\n")
    assert list(json.loads(text)) == ["temp_c", "temp_f", "humidity", "lpg", "co", "smoke"]


def test_json_status_precision():
    text = json_status(SensorReadings())
    assert '"temp_c":0.00,' in text
    assert '"humidity":0.0,' in text
    assert '"smoke":0.00000000}' in text


def test_plain_status_lines():
    lines = plain_status(READINGS).splitlines()
    parsed = dict(line.split("=") for line in lines)
    assert list(parsed) == ["temp_c", "temp_f", "humidity", "lpg", "co", "smoke"]
    assert float(parsed["temp_f"]) == 70.75
    assert float(parsed["smoke"]) == 0.125
    assert plain_status(READINGS).endswith("\n")


@pytest.mark.parametrize("value", [0.0, 0.5, 12.25, -3.0])
def test_plain_value_has_eight_decimals(value):
    text = plain_value(value)
    assert float(text) == value
    assert len(text.split(".")[1]) == 8


def test_plain_value_pinned():
    assert plain_value(0.5) == "0.50000000"


def test_root_page_values():
    values = root_page_values(READINGS)
    assert [label for label, _ in values] == [
        "Celsius",
        "Fahrenheit",
        "Humidity",
        "LPG",
        "CO",
        "Smoke",
    ]
    texts = dict(values)
    assert texts["Celsius"].endswith("°C")
    assert float(texts["Celsius"][:-2]) == 21.5
    assert texts["Humidity"].endswith("%")
    assert float(texts["Humidity"][:-1]) == 45.5
    assert float(texts["LPG"].removesuffix("ppm")) == 0.5


def test_root_page_title():
    assert root_page_title("sensor-1") == f"{APP_NAME} - sensor-1"


def test_root_page_script_reads_json_api():
    assert "fetch('/api/json')" in ROOT_PAGE_SCRIPT
    assert ROOT_PAGE_SCRIPT.count("getElementById") == 6