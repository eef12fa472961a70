from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .diff import LogOrder

logger = logging.getLogger(__name__)

load_dotenv()


@dataclass(frozen=True)
class Settings:
    db_path: str
    board_path: Optional[str]
    dice_log_order: LogOrder
    log_level: str
    port: int
    debug: bool


def _flag(value: Optional[str]) -> bool:
    return (value or "0").lower() in ("1", "true", "yes", "on")


def parse_log_order(value: Optional[str]) -> LogOrder:
    try:
        return LogOrder((value or LogOrder.NEWEST_FIRST.value).strip().lower())
    except ValueError:
        logger.warning("unknown CHAUPAR_DICE_LOG_ORDER %r, using %s", value, LogOrder.NEWEST_FIRST.value)
        return LogOrder.NEWEST_FIRST


def load_settings() -> Settings:
    """Reads configuration from the environment (and a .env file, if present)."""
    try:
        port = int(os.getenv("PORT", "3000"))
    except ValueError:
        logger.warning("PORT is not a number, using 3000")
        port = 3000
    return Settings(
        db_path=os.getenv("CHAUPAR_DB", os.path.join("data", "chaupar.db")),
        board_path=os.getenv("CHAUPAR_BOARD") or None,
        dice_log_order=parse_log_order(os.getenv("CHAUPAR_DICE_LOG_ORDER")),
        log_level=os.getenv("CHAUPAR_LOG_LEVEL", "INFO").upper(),
        port=port,
        debug=_flag(os.getenv("FLASK_DEBUG", os.getenv("DEBUG"))),
    )
