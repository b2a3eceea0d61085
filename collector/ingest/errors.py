"""Fetch error hierarchy."""


class FetchError(Exception):
    """Transient failure fetching or decoding a remote document."""


class ForecastParseError(FetchError):
    """The forecast page could not be parsed into a document."""


class ForecastStructureError(FetchError):
    """The forecast page did not contain exactly one day and one night block."""


class RealtimePayloadError(FetchError):
    """The realtime payload was not a ``var dataSK=`` wrapped JSON object."""


class CityDirectoryError(FetchError):
    """The city directory could not be fetched or decoded."""


class RetryExhaustedError(FetchError):
    """Every attempt for one identifier failed."""

    def __init__(
        self,
        identifier: str,
        attempts: int,
        last_error: BaseException,
        what: str = "data",
    ):
        self.identifier = identifier
        self.attempts = attempts
        self.last_error = last_error
        self.what = what
        super().__init__(
            f"Failed to get {what} for {identifier} after {attempts} attempts: "
            f"{describe_error(last_error)}"
        )


def describe_error(error: BaseException) -> str:
    return str(error) or type(error).__name__
