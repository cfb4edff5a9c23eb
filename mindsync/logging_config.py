# Import standard libraries for log formatting and request timing
import json
import logging
import time
import uuid

# Import Flask request-scoped objects
from flask import g, request

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"
REQUEST_ID_HEADER = "X-Request-ID"


class JSONFormatter(logging.Formatter):
    """One JSON object per line; production log shippers read this."""

    def format(self, record):
        fields = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None)
        if request_id:
            fields["request_id"] = request_id
        if record.exc_info and record.exc_info[0]:
            fields["exception"] = self.formatException(record.exc_info)
        return json.dumps(fields, default=str)


def _make_handler(log_format):
    """Stream handler with the JSON or the plain-text formatter."""
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT))
    # Marks the handler as ours so a second app does not stack another one
    handler.mindsync_owned = True
    return handler


def init_logging(app):
    """
    Set up logging for the MindSync app.

    - Root logger level and format come from ``LOG_LEVEL`` and ``LOG_FORMAT``.
    - Every request gets an id (taken from ``X-Request-ID`` when the caller
      sends one) which is echoed back in the response header.
    - Each ``/api/`` request is logged once as ``METHOD path status duration``.

    Args:
        app (Flask): The Flask application instance.
    """
    root = logging.getLogger()
    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    # Swap out only a handler installed by an earlier app; leave others alone
    for handler in list(root.handlers):
        if getattr(handler, "mindsync_owned", False):
            root.removeHandler(handler)
    root.addHandler(_make_handler(app.config.get("LOG_FORMAT", "text")))

    # The access log below replaces werkzeug's per-request lines
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    @app.before_request
    def start_request_timer():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        g.request_started = time.monotonic()

    @app.after_request
    def log_api_request(response):
        request_id = g.get("request_id", "-")
        response.headers[REQUEST_ID_HEADER] = request_id
        if request.path.startswith("/api/"):
            elapsed_ms = (time.monotonic() - g.get("request_started", time.monotonic())) * 1000
            app.logger.info(
                "%s %s %s %.0fms",
                request.method,
                request.path,
                response.status_code,
                elapsed_ms,
                extra={"request_id": request_id},
            )
        return response
