"""
Logging setup and access log entries.

Two loggers matter:

    minihttpd           everything the server does (startup, errors, debug)
    minihttpd.access    one line per completed exchange

The access logger can be routed separately:

    logging.getLogger("minihttpd.access").addHandler(file_handler)
"""

import json
import logging
from dataclasses import dataclass, asdict


logger = logging.getLogger("minihttpd.access")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger and the minihttpd logger level."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
    logging.getLogger("minihttpd").setLevel(numeric_level)


@dataclass
class RequestLog:
    """
    Structured log entry for one exchange.

    Fields:
        connection_id:  Connection identifier, matches the debug lines
        client_ip:      Peer address
        method, path, version:  From the request line ("-" if it didn't parse)
        status_code:    Status sent
        header_bytes:   Size of the header block
        body_bytes:     Body bytes actually written
        duration_ms:    Time from request read to last byte written
        timestamp:      When the exchange finished
    """

    connection_id: str
    client_ip: str
    method: str
    path: str
    version: str
    status_code: int
    header_bytes: int
    body_bytes: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        """Dictionary form for JSON log lines."""
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        """
        Common-log style line:

            127.0.0.1 - - [18/Oct/2026:10:00:00 +0000] "GET /a.gif HTTP/1.1" 200 5120 0.84ms
        """
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path} {self.version}" {self.status_code} '
            f'{self.body_bytes} {self.duration_ms:.2f}ms'
        )


def log_request(entry: RequestLog, log_format: str = "text") -> None:
    """Emit an access log entry in the configured format."""
    if log_format == "json":
        logger.info(json.dumps(entry.to_dict()))
    else:
        logger.info(entry.to_text())
