"""Maintenance pages: firmware and configuration uploads and their results."""

from __future__ import annotations

from datetime import datetime

__all__ = [
    "ERROR_UNDEFINED",
    "ERROR_FILE_SIZE_ZERO",
    "ERROR_INVALID_FILENAME",
    "ERROR_NOT_ENOUGH_MEMORY",
    "ERROR_WRONG_FILE_FORMAT",
    "FirmwareUpload",
    "ConfigUpload",
    "info_page_body",
    "firmware_result_body",
    "reset_firmware_body",
    "restore_config_body",
    "system_restart_body",
    "backup_content_disposition",
]

ERROR_UNDEFINED = "Undefined"
ERROR_FILE_SIZE_ZERO = "Firmware file size is zero"
ERROR_INVALID_FILENAME = "Invalid firmware filename"
ERROR_NOT_ENOUGH_MEMORY = "Not enough memory"
ERROR_WRONG_FILE_FORMAT = "Wrong file format"

_UPDATE_ERROR_SPACE = 4
_UPDATE_ERROR_MAGIC_BYTE = 10
_FIRMWARE_MAGIC = 0xE9
_SECTOR = 0x1000

_STARTED = datetime.now()
BUILD_DATE = f"{_STARTED:%b} {_STARTED.day:2d} {_STARTED.year}"
BUILD_TIME = f"{_STARTED:%H:%M:%S}"

_RESTARTING = "<h4 style='color: red'>Restarting System ... takes about 30s</h4></form>"

_JSON_ENDPOINTS = (
    ("api/info", "ESP8266 Info"),
    ("api/json", "HTTP_GET"),
    ("api/calibrate", "Calibrate MQ2 sensor"),
)
_PLAIN_ENDPOINTS = (
    ("api/plain", "HTTP_GET"),
    ("api/plain/temp_c", "Temperature Celsius"),
    ("api/plain/temp_f", "Temperature Fahrenheit"),
    ("api/plain/humidity", "Humidity"),
    ("api/plain/lpg", "LPG"),
    ("api/plain/co", "CO"),
    ("api/plain/smoke", "Smoke"),
)


def _legend(name: str) -> str:
    return f"<legend>{name}</legend>"


class FirmwareUpload:
    """Tracks one firmware upload and writes it into the update partition."""

    def __init__(self, pioenv_name, free_sketch_space):
        self.pioenv_name = pioenv_name
        self.free_sketch_space = free_sketch_space
        self.running = False
        self.failed = True
        self.error_message = ERROR_UNDEFINED
        self.total_size = 0
        self.progress = 0
        self._upload_error = True
        self._capacity: int | None = None
        self._update_error = 0
        self._image = bytearray()

    @property
    def firmware(self) -> bytes:
        """The image bytes accepted so far."""
        return bytes(self._image)

    def start(self, filename) -> None:
        """Begin an upload of ``filename``; only ``*.<pioenv>.bin`` is accepted."""
        self.running = True
        self._upload_error = False
        self.error_message = ERROR_UNDEFINED
        self.failed = True
        self.total_size = 0
        self.progress = 0
        self._capacity = None
        self._update_error = 0
        self._image.clear()

        if str(filename).endswith(f".{self.pioenv_name}.bin"):
            max_space = (self.free_sketch_space - _SECTOR) & 0xFFFFF000
            if max_space <= 0:
                self.error_message = ERROR_NOT_ENOUGH_MEMORY
                self._upload_error = True
                self.running = False
            else:
                self._capacity = max_space
        else:
            self.error_message = ERROR_INVALID_FILENAME
            self._upload_error = True
            self.running = False

    def _update_write(self, chunk: bytes) -> int:
        if self._capacity is None or self._update_error:
            return 0
        if not self._image and chunk and chunk[0] != _FIRMWARE_MAGIC:
            self._update_error = _UPDATE_ERROR_MAGIC_BYTE
            return 0
        if len(self._image) + len(chunk) > self._capacity:
            self._update_error = _UPDATE_ERROR_SPACE
            return 0
        self._image.extend(chunk)
        return len(chunk)

    def write(self, chunk, content_length) -> int:
        """Accept the next chunk and return the upload progress in percent."""
        if content_length <= 0:
            raise ValueError("content_length must be positive")
        chunk = bytes(chunk)
        self.total_size += len(chunk)
        self.progress = self.total_size * 100 // content_length

        if not self._upload_error and self._update_write(chunk) != len(chunk):
            self.running = False
            if self._update_error == _UPDATE_ERROR_SPACE:
                self.error_message = ERROR_NOT_ENOUGH_MEMORY
            if self._update_error == _UPDATE_ERROR_MAGIC_BYTE:
                self.error_message = ERROR_WRONG_FILE_FORMAT
        return self.progress

    def finish(self) -> bool:
        """Close the upload; return True when the new firmware is ready to boot."""
        self.running = False
        if self._update_error == _UPDATE_ERROR_MAGIC_BYTE:
            self.error_message = ERROR_WRONG_FILE_FORMAT

        if self._capacity is not None and not self._update_error:
            if not self._upload_error and self.total_size > 0:
                self.failed = False
            else:
                self.error_message = ERROR_FILE_SIZE_ZERO
        return not self.failed


class ConfigUpload:
    """Receives an uploaded configuration file and stores it at ``path``."""

    def __init__(self, path):
        self.path = path
        self.total_size = 0
        self._file = None

    def start(self, filename) -> str:
        """Open the target for writing; return the upload name with a leading slash."""
        name = str(filename)
        if not name.startswith("/"):
            name = "/" + name
        self.total_size = 0
        try:
            self._file = open(self.path, "wb")
        except OSError:
            self._file = None
        return name

    def write(self, chunk) -> None:
        """Append received bytes when the target could be opened."""
        chunk = bytes(chunk)
        self.total_size += len(chunk)
        if self._file is not None:
            self._file.write(chunk)

    def finish(self) -> int:
        """Close the target and return the upload size."""
        if self._file is None:
            raise OSError("500: couldn't upload file")
        self._file.close()
        self._file = None
        return self.total_size


def _links(local_ip: str, endpoints) -> list[str]:
    return [
        f"<p><a href='http://{local_ip}/{path}'>http://{local_ip}/{path}</a> - {text}</p>"
        for path, text in endpoints
    ]


def _flag(value) -> str:
    return "true" if value else "false"


def info_page_body(config, local_ip, app_name, version, pioenv) -> str:
    """Return the body of the info page."""
    parts = [
        "<form class='pure-form'>",
        _legend("Application"),
        f"<p>Name: {app_name}</p>"
        f"<p>Version: {version}</p>"
        f"<p>PlatformIO Environment: {pioenv}</p>",
        _legend("Build"),
        f"<p>Date: {BUILD_DATE}</p><p>Time: {BUILD_TIME}</p>",
        _legend("RESTful API"),
        "<p><b>JSON API</b> - Returns status in JSON format</p>",
        *_links(local_ip, _JSON_ENDPOINTS),
        "<p>&nbsp;</p>",
        "<p><b>Plain text API</b> - Returns status in plain text format</p>",
        *_links(local_ip, _PLAIN_ENDPOINTS),
        _legend("Services"),
        f"<p>OTA Enabled: {_flag(config.ota_enabled)}</p>",
        f"<p>MQTT Enabled: {_flag(config.mqtt_enabled)}</p>",
        f"<p>Telnet Enabled: {_flag(config.telnet_enabled)}</p>",
        "</form>",
    ]
    return "".join(parts)


def firmware_result_body(upload: FirmwareUpload) -> str:
    """Return the page body reporting the outcome of a firmware upload."""
    if upload.failed:
        return (
            "<form class='pure-form'>"
            + _legend("Firmware upload FAILED!")
            + f"<h4>ERROR: {upload.error_message}.</h4>"
        )
    return (
        "<form class='pure-form'>"
        + _legend("Firmware successfully uploaded.")
        + _RESTARTING
    )


def reset_firmware_body(choice) -> str:
    """Return the reset page body; only the choice ``"true"`` resets."""
    if choice == "true":
        message = "<h4>Resetting firmware... restart takes about 30sec.</h4>"
    else:
        message = (
            "If you really want to reset to system defaults, "
            "you must select 'Yes' on the maintenance page."
        )
    return "<form class='pure-form'>" + _legend("Reset Firmware.") + message + "</form>"


def restore_config_body() -> str:
    """Return the page body shown after a configuration restore."""
    return (
        "<form class='pure-form'>"
        + _legend("Configuration successfully restored.")
        + _RESTARTING
    )


def system_restart_body() -> str:
    """Return the page body shown before a restart."""
    return (
        "<form class='pure-form'>"
        + _legend("System restart.")
        + "<h4>Restart takes about 30sec.</h4>"
        + "</form>"
    )


def backup_content_disposition(filename) -> str:
    """Return the Content-Disposition header for a configuration download."""
    return f'attachment; filename="{filename}"'