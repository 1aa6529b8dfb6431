from dataclasses import dataclass

# --- Defaults ---
# Connect and read timeout in seconds.
REQUEST_TIMEOUT = 360.0
CHARSET = "utf-8"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded; charset=UTF-8"
CONTENT_TYPE_JSON = "application/json; charset=UTF-8"
CONTENT_TYPE_OCTET_STREAM = "application/octet-stream"


@dataclass(frozen=True)
class ClientConfig:
    timeout: float | None = REQUEST_TIMEOUT
    charset: str = CHARSET
    verify_tls: bool = True
    max_workers: int | None = None
    debug: bool = False
