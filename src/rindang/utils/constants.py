"""Application-wide constants."""

APP_NAME = "RINDANG"
APP_VERSION = "1.0.0"

# Offline sync
SYNC_OPERATIONS = ["create", "update", "delete"]
DEFAULT_MAX_RETRY_COUNT = 3

# Local cache bookkeeping columns (never sent to the remote store)
SYNCED_FLAG = "_synced"
PENDING_DELETE_FLAG = "_pending_delete"
LOCAL_ONLY_FIELDS = (SYNCED_FLAG, PENDING_DELETE_FLAG, "_localId")

# Calendar header labels
MONTHS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

# Offline record-level conflict strategies
CONFLICT_STRATEGIES = ["local_wins", "server_wins", "merge", "manual"]
