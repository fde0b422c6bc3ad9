# =============================================================================
# app/middleware/access_log.py - Access Log Stage
# =============================================================================
# Writes one line per request in Apache "combined" format to a file named
# after the current date (LOG_DIR/access-YYYYMMDD.log). Not installed under
# the test configuration.
# =============================================================================

import logging
import os
from datetime import datetime
from pathlib import Path

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

ACCESS_LOGGER_NAME = "app.access"
ACCESS_LOG_PATTERN = "access-%Y%m%d.log"


class DailyFileHandler(logging.FileHandler):
    """
    File handler whose file name follows the record date.

    The file is opened lazily on the first record and switched when the date
    in the file name pattern changes.
    """

    def __init__(self, directory: str | Path, pattern: str = ACCESS_LOG_PATTERN):
        self.directory = Path(directory)
        self.pattern = pattern
        self.directory.mkdir(parents=True, exist_ok=True)
        super().__init__(self.filename_for(datetime.now()), encoding="utf-8", delay=True)

    def filename_for(self, moment: datetime) -> str:
        return os.path.abspath(self.directory / moment.strftime(self.pattern))

    def emit(self, record: logging.LogRecord) -> None:
        filename = self.filename_for(datetime.fromtimestamp(record.created))
        if filename != self.baseFilename:
            if self.stream:
                self.stream.close()
                self.stream = None
            self.baseFilename = filename
        super().emit(record)


def build_access_logger(log_dir: str | Path) -> logging.Logger:
    """
    Point the access logger at a daily file in log_dir.

    Previously attached handlers are closed, so building the application
    twice in one process doesn't duplicate lines.
    """
    access_logger = logging.getLogger(ACCESS_LOGGER_NAME)
    for handler in list(access_logger.handlers):
        access_logger.removeHandler(handler)
        handler.close()

    handler = DailyFileHandler(log_dir)
    handler.setFormatter(logging.Formatter("%(message)s"))
    access_logger.addHandler(handler)
    access_logger.setLevel(logging.INFO)
    access_logger.propagate = False
    return access_logger


def format_combined(request: Request, response: Response, moment: datetime) -> str:
    """
    Format a request/response pair as an Apache combined log line.

    Example:
        203.0.113.7 - - [19/Oct/2026:10:00:00 +0000] "GET /v1/food HTTP/1.1" 200 42 "-" "curl/8.0"
    """
    client = request.client.host if request.client else "-"
    target = request.url.path
    if request.url.query:
        target += f"?{request.url.query}"
    http_version = request.scope.get("http_version", "1.1")
    timestamp = moment.astimezone().strftime("%d/%b/%Y:%H:%M:%S %z")
    length = response.headers.get("content-length", "-")
    referer = request.headers.get("referer", "-")
    user_agent = request.headers.get("user-agent", "-")
    return (
        f'{client} - - [{timestamp}] "{request.method} {target} HTTP/{http_version}" '
        f'{response.status_code} {length} "{referer}" "{user_agent}"'
    )


class AccessLogMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, access_logger: logging.Logger):
        super().__init__(app)
        self.access_logger = access_logger

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        self.access_logger.info(format_combined(request, response, datetime.now()))
        return response
