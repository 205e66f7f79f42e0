"""Startup-time helpers for safe config logging."""

import os

from bananodash.common.config import settings
from bananodash.common.logging import logger


SECRET_MARKERS = ("KEY", "SECRET", "PASSWORD", "TOKEN")


def _effective_value(name: str) -> str:
    """Env value, else the loaded setting, redacted for secret-like names."""

    value = os.getenv(name)
    if value is None:
        field = name.lower()
        if field not in type(settings).model_fields:
            return "<unset>"
        value = f"{getattr(settings, field)} (settings)"
    if any(marker in name for marker in SECRET_MARKERS):
        return "<redacted>"
    return value


def log_startup_config(service_name: str, keys: list[str]) -> dict[str, str]:
    """Log selected startup config keys for quick troubleshooting."""

    config = {"service": service_name}
    for key in keys:
        config[key] = _effective_value(key)
    logger.info("startup_config=%s", config)
    return config
