"""
Flex accounts - Logging Module
Provides centralized logging functionality for the record and account layers.
"""
import sys
from datetime import datetime

from . import conf

# =============================================================================
# CONFIGURATION
# =============================================================================

LOG = True  # Set to False to disable logging
LOG_TO_STDERR = False  # Account operations run inside host apps; keep stderr clean
first_line = True
# =============================================================================
# LOGGING
# =============================================================================

def store_log(message: str) -> None:
    """Append log message to the accounts log if LOG is enabled."""
    global first_line
    if not LOG:
        return
    if first_line:
        first_line = False
        store_log("--- New Accounts Session ---")
        store_log("Accounts folder: " + str(conf.ACCOUNTS_DIR))
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    log_line = f"[{timestamp}] {message}\n"
    if LOG_TO_STDERR:
        sys.stderr.write(log_line)
    conf.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    with open(conf.LOG_FILE, "a", encoding="utf-8") as f:
        f.write(log_line)


def store_log_print() -> None:
    """Print the contents of the log file to stdout."""
    if conf.LOG_FILE.exists():
        log_contents = conf.LOG_FILE.read_text(encoding="utf-8")
        if log_contents:
            print(log_contents, end="")
        else:
            print("[Accounts log is empty]")
    else:
        print("[Accounts log file does not exist]")


def store_log_clear() -> None:
    """Delete the log file."""
    if conf.LOG_FILE.exists():
        conf.LOG_FILE.unlink()
