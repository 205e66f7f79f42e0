"""Structured JSON logging carrying the correlation id and looked-up wallet."""

import logging
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter

from bananodash.common.config import settings


trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")
wallet_ctx: ContextVar[str] = ContextVar("wallet", default="")

# httpx/httpcore log every outbound URL at INFO, wallet included.
CHATTY_LOGGERS = ("httpx", "httpcore")


class RequestContextFilter(logging.Filter):
    """Stamp each record with the service, correlation id and wallet in flight."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = settings.service_name
        record.trace_id = trace_id_ctx.get()
        record.wallet = wallet_ctx.get()
        return True


def configure_logging(level: str | None = None) -> None:
    """Route all logging through one stdout JSON handler.

    Safe to call more than once; later calls only adjust the level.
    """

    root = logging.getLogger()
    root.setLevel(level or settings.log_level)
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if getattr(root, "_bananodash_configured", False):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(
        JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(service_name)s %(trace_id)s %(wallet)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "ts"},
        )
    )
    root.handlers = [handler]
    root._bananodash_configured = True


logger = logging.getLogger("bananodash")
