class SoilSageError(RuntimeError):
    """Base exception for pipeline failures."""

    code = "SERVER_ERROR"


class SourceUnavailableError(SoilSageError):
    """Telemetry source unreachable, non-success status or empty body."""

    code = "SOURCE_UNAVAILABLE"


class ConfigurationError(SoilSageError):
    """A required endpoint or secret is not configured."""

    code = "CONFIG_ERROR"


class InvalidRequestError(SoilSageError):
    """Invalid input from caller."""

    code = "VALIDATION_ERROR"


class DuplicateAggregateError(SoilSageError):
    """The day already has a daily aggregate."""

    code = "DUPLICATE_AGGREGATE"


class EmptySnapshotError(SourceUnavailableError):
    """The telemetry source answered without any data."""

    code = "NO_DATA"
