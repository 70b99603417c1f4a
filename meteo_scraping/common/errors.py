"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class InputError(PipelineError):
    """Raised when the input workbook cannot be read."""

    error_code = "INPUT_ERROR"


class StageError(PipelineError):
    """Raised for stage failures that should halt in strict mode."""

    error_code = "STAGE_ERROR"


class SourceFetchError(StageError):
    """Raised when a day of observations cannot be fetched or parsed."""

    error_code = "SOURCE_FETCH_ERROR"


class StationLookupError(StageError):
    error_code = "STATION_LOOKUP_ERROR"


class EmptyRangeError(StageError):
    """Raised when no observation falls inside an interval."""

    error_code = "EMPTY_RANGE"


class MalformedTimestampError(PipelineError):
    error_code = "MALFORMED_TIMESTAMP"
