"""Application constants."""

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/108.0.0.0 Safari/537.36"
)
DEFAULT_BASE_URL = "https://www.meteociel.fr/temps-reel"
COMMANDS = (
    "run",
    "lookup-station",
    "fetch-day",
)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
OUTPUT_HEADERS = ["locationId", "date", "temperatureMin", "temperatureMax"]
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "location",
    "begin",
    "end",
    "day",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
