# folder_share/constants.py
# Fixed sharing policy and HTTP surface constants

from datetime import timedelta

# Shares stay fetchable (and deduplicable) for this long after publish.
SHARE_RETENTION: timedelta = timedelta(days=30)

PUBLISH_PATH: str = "/api/share/folder"

JSON_CONTENT_TYPE: str = "application/json"

# Blob keys live under this namespace in every backend.
BLOB_NAMESPACE: str = "folders"

MAX_FOLDER_NAME_LENGTH: int = 255
MAX_WORLDS_PER_FOLDER: int = 1000

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Max-Age": "86400",
}

RATE_LIMIT_WINDOW_SECONDS: int = 3600
