"""xml_store - Central path and tuning configuration."""

import os
from pathlib import Path


def _env_flag(key: str, default: bool) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off", "")


USER_HOME = Path.home()
XML_STORE_HOME = Path(os.environ.get("XML_STORE_HOME") or USER_HOME / ".xml_store")

LOG_FILE = Path(os.environ.get("XML_STORE_LOG_FILE") or XML_STORE_HOME / "store.log")
LOG_ENABLED = _env_flag("XML_STORE_LOG", True)
LOG_TO_STDERR = _env_flag("XML_STORE_LOG_STDERR", False)

# Naming convention: <Record> lives in <Record>Database, stored as <Record>Database.xml
CONTAINER_SUFFIX = "Database"
DOCUMENT_EXTENSION = ".xml"
ARCHIVE_EXTENSION = ".db"

# Seconds between two scans of the workspace directory.
WATCH_INTERVAL = float(os.environ.get("XML_STORE_WATCH_INTERVAL", "0.2"))

MAX_UID_ATTEMPTS = 16
