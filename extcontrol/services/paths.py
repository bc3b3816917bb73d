from __future__ import annotations

import os
import sys
from pathlib import Path


DATA_DIR_ENV = "EXTCONTROL_DATA_DIR"


def app_root() -> Path:
    if getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS"):
        return Path(sys._MEIPASS) / "extcontrol"  # type: ignore[attr-defined]
    return Path(__file__).resolve().parents[1]


def templates_dir() -> Path:
    return app_root() / "templates"


def user_data_dir() -> Path:
    configured = (os.getenv(DATA_DIR_ENV) or "").strip()
    if configured:
        return Path(configured).expanduser()
    appdata = os.getenv("APPDATA")
    if appdata:
        return Path(appdata) / "ExternalControl"
    return Path.home() / ".extcontrol"


def default_settings_path() -> Path:
    return user_data_dir() / "program_node.ini"


def default_action_log_path() -> Path:
    return user_data_dir() / "logs" / "actions.log"
