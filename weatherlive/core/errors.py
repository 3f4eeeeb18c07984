from __future__ import annotations


class WeatherLiveError(RuntimeError):
    """Base error for the weather pipeline."""


class CityValidationError(WeatherLiveError):
    def __init__(self) -> None:
        super().__init__("Please select a city.")


class TransportError(WeatherLiveError):
    """Raised when the weather query failed at the HTTP level."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Http Error: {status_code}")


class EmptyResponseError(WeatherLiveError):
    """Raised when the transport succeeded but returned a blank body."""

    def __init__(self) -> None:
        super().__init__("Unable to retrieve the http response")


class ImageFetchError(WeatherLiveError):
    """Icon retrieval failed. Never published, only logged."""
