# gasnode

The logic of a small networked gas and climate sensor node, as a library.
It has no third-party dependencies.

## Modules

- `gasnode.inflate` – a streaming raw DEFLATE decompressor. `Decompressor(source, dict_size=0)`
  yields output on demand through `decompress(size)` and `read_all()`; with a non-zero
  `dict_size` back-references are served from a ring buffer of that size. `inflate(data)`
  decompresses a whole stream. Malformed input raises `InflateError`, a reference past the
  ring buffer raises `DictionaryError`.
- `gasnode.gzipheader` – `parse_gzip_header(decompressor)` consumes a gzip header (the
  header CRC is skipped, not checked) and `gunzip(data)` decompresses the first member.
  A bad header raises `GzipHeaderError`.
- `gasnode.deflate` – `BitWriter` emits a single fixed-Huffman DEFLATE block from literals
  (`literal`) and back-references (`match`, split automatically when longer than 258);
  `encode_literals(data)` encodes bytes as literals only.
- `gasnode.config` – `AppConfig`, the device settings, with `WifiMode` and `NetMode`.
  `parse_config_form(args)` builds a fresh configuration from the `(name, value)` pairs of a
  save request, ignoring the last pair (the raw request body) and unknown names; text is cut
  to 63 characters, numbers take their leading numeric part, an empty boolean stays unset.
  `render_saved_arguments(args)` lists the stored pairs as numbered lines.
- `gasnode.status` – `SensorReadings` and its views: `json_status`, `plain_status`,
  `plain_value`, `root_page_values` and `root_page_title`.
- `gasnode.pages` – `FirmwareUpload` (accepts only `*.<env>.bin` files that start with the
  firmware magic byte and fit the free space) and `ConfigUpload` (stores an uploaded file at
  a path), plus the bodies of the info, firmware result, reset, restore and restart pages and
  `backup_content_disposition`.
- `gasnode.wifi` – `WifiHandler` drives any object that follows the `Radio` protocol: it scans,
  starts station or access-point mode, rechecks the station link at most every 500 ms,
  reconnects when it drops and copies DHCP addresses into the configuration.
  `format_scan_results` and `format_mac` format scan reports and hardware addresses.
- `gasnode.device` – `Device` runs one pass of the main loop per `loop(now)` call: it debounces
  the button (`button_interrupt`), calibrates after a press, logs a report every 10 s and runs
  the services while the network is up.

## Install

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Examples

Round trip through the codec:

```python
import gzip
import zlib
from gasnode.deflate import encode_literals
from gasnode.gzipheader import gunzip
from gasnode.inflate import inflate

raw = zlib.compress(b"hello hello hello")[2:-4]
assert inflate(raw) == b"hello hello hello"
assert inflate(encode_literals(b"abc")) == b"abc"
assert gunzip(gzip.compress(b"payload")) == b"payload"
```

Apply a submitted setup form:

```python
from gasnode.config import parse_config_form

config = parse_config_form([("ota_hostname", "gasnode"), ("mqtt_port", "1883"), ("submit", "")])
print(config.ota_hostname, config.mqtt_port)  # gasnode 1883
```

Report sensor readings:

```python
from gasnode.status import SensorReadings, json_status

print(json_status(SensorReadings(temp_c=21.5, temp_f=70.7, humidity=40.0)))
```

## What it does not do

- It renders no HTML templates: there is no setup page or maintenance page, and no
  `%name%` substitution. The page functions in `gasnode.pages` return body fragments only.
- It serves nothing over HTTP and has no command to run; wiring the views to a web server
  is left to the caller.
- It talks to no hardware. Radio, sensors and services are objects the caller supplies.
- It does not verify gzip or zlib checksums.