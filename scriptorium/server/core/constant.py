"""API-wide constants."""

PROJECT_NAME = "Scriptorium"
API_V1_STR = "/api/v1"
API_VERSION = "0.1.0"
SCHEMA_VERSION = "v1"

# Pagination
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Auth cookies
ACCESS_TOKEN_COOKIE = "token"
REFRESH_TOKEN_COOKIE = "refresh_token"

# Requests slower than this are logged as warnings by the request middleware
SLOW_REQUEST_MS = 1000
