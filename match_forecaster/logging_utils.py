"""Logging helpers for one-shot configuration warnings."""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

_warn_once_lock = threading.Lock()
_warned_keys: Dict[Any, bool] = {}


def warn_once(key: Any, msg: str, *args: Any, logger: Optional[logging.Logger] = None) -> bool:
    """Emit a warning once per key; later calls with the same key are dropped."""

    with _warn_once_lock:
        if key in _warned_keys:
            return False
        _warned_keys[key] = True

    target_logger = logger or logging.getLogger(__name__)
    target_logger.warning(msg, *args)
    return True


def reset_warn_once_cache() -> None:
    """Test helper to clear the warn-once registry."""

    with _warn_once_lock:
        _warned_keys.clear()
