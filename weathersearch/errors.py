"""Error taxonomy for the weather search client."""


class WeatherSearchError(Exception):
    """Base class for all errors raised by weathersearch."""


class SuggestionServiceError(WeatherSearchError):
    """Raised when the geocoding service fails or returns a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidCoordinates(WeatherSearchError):
    """Raised when a selected suggestion does not parse to usable coordinates."""


class ForecastError(WeatherSearchError):
    """Base class for forecast fetch failures."""


class ForecastServiceError(ForecastError):
    """Transport failure or explicit error flag from the forecast service."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class IncompleteForecastData(ForecastError):
    """Forecast response arrived but is missing a required block."""


class ProjectionFailure(WeatherSearchError):
    """Daily window bounds could not be computed."""
