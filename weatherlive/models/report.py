from __future__ import annotations

from typing import Any, Callable

Observer = Callable[[str, Any], None]

WEATHER_FIELDS: tuple[str, ...] = (
    "weather_description",
    "temperature",
    "temperature_feel_like",
    "humidity",
    "wind_direction",
    "wind_speed",
)
STATUS_FIELDS: tuple[str, ...] = ("active", "succeeded", "error")
PROPERTY_NAMES: tuple[str, ...] = WEATHER_FIELDS + STATUS_FIELDS


def _published(name: str) -> property:
    def fget(self: WeatherReport) -> Any:
        return self._values[name]

    def fset(self: WeatherReport, value: Any) -> None:
        self.publish(name, value)

    return property(fget, fset, doc=f"Observable ``{name}`` property.")


class WeatherReport:
    """Observable state of the most recent weather query.

    Every assignment goes through :meth:`publish`, which stores the value and
    notifies all subscribers synchronously, in subscription order. Observers
    receive ``(name, value)`` and may read any other property while being
    notified.
    """

    weather_description = _published("weather_description")
    temperature = _published("temperature")
    temperature_feel_like = _published("temperature_feel_like")
    humidity = _published("humidity")
    wind_direction = _published("wind_direction")
    wind_speed = _published("wind_speed")
    active = _published("active")
    succeeded = _published("succeeded")
    error = _published("error")

    def __init__(self) -> None:
        self._values: dict[str, Any] = {name: "" for name in WEATHER_FIELDS}
        self._values.update(active=False, succeeded=False, error="")
        self._observers: list[Observer] = []

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def publish(self, name: str, value: Any) -> None:
        if name not in self._values:
            raise AttributeError(f"Unknown weather property: {name}")
        self._values[name] = value
        for observer in list(self._observers):
            observer(name, value)

    def reset(self) -> None:
        for name in WEATHER_FIELDS:
            self.publish(name, "")
        self.active = False
        self.succeeded = False
        self.error = ""

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)
