"""Flex accounts - Central path configuration."""

import os
from pathlib import Path

USER_HOME = Path.home()
FLEX_HOME = Path(os.environ.get("FLEX_ACCOUNTS_HOME") or USER_HOME / ".flex")

ACCOUNTS_DIR = FLEX_HOME / "accounts"
MEDIA_DIR = FLEX_HOME / "media"
CONFIG_FILE = FLEX_HOME / "config.yaml"
LOG_FILE = FLEX_HOME / "accounts.log"

# Public URL prefix for account media (avatars).
MEDIA_BASE_URL = "/user/accounts"
