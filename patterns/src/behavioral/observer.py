"""Observer pattern in two flavours.

``WeatherStation`` keeps a list of plain callables (event style).
``ObservableWeatherStation`` keeps observer objects with ``on_next``,
``on_error`` and ``on_completed`` and hands back a subscription that
unsubscribes when disposed or when its ``with`` block exits.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from patterns.src.registry import register_demo

Echo = Callable[[str], None]


@dataclass(frozen=True)
class WeatherData:
    temperature: float = 0.0
    humidity: float = 0.0
    pressure: float = 0.0


WeatherHandler = Callable[["WeatherStation", WeatherData], None]


# ============================================================================
# Event style
# ============================================================================


class WeatherStation:
    """Publishes measurements to subscribed handlers in subscription order."""

    def __init__(self):
        self._data = WeatherData()
        self._handlers: List[WeatherHandler] = []

    def subscribe(self, handler: WeatherHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: WeatherHandler) -> None:
        """Remove one registration of ``handler``; unknown handlers are ignored."""
        if handler in self._handlers:
            self._handlers.remove(handler)

    def set_measurements(self, temperature: float, humidity: float, pressure: float) -> None:
        self._data = replace(self._data, temperature=temperature, humidity=humidity, pressure=pressure)
        for handler in list(self._handlers):
            handler(self, self._data)


class CurrentConditionsDisplay:
    def __init__(self, station: WeatherStation, echo: Echo = print):
        self._echo = echo
        station.subscribe(self.on_weather_changed)

    def on_weather_changed(self, sender: WeatherStation, data: WeatherData) -> None:
        self._echo(f"Current conditions: {data.temperature:g}F degrees and {data.humidity:g}% humidity")


# ============================================================================
# Observable style
# ============================================================================


class WeatherObserver(ABC):
    @abstractmethod
    def on_next(self, value: WeatherData) -> None:
        ...

    @abstractmethod
    def on_error(self, error: Exception) -> None:
        ...

    @abstractmethod
    def on_completed(self) -> None:
        ...


class Subscription:
    """Handle returned by ``subscribe``; dispose it to stop notifications."""

    def __init__(self, observers: List[WeatherObserver], observer: WeatherObserver):
        self._observers = observers
        self._observer: Optional[WeatherObserver] = observer

    def dispose(self) -> None:
        if self._observer is not None and self._observer in self._observers:
            self._observers.remove(self._observer)
        self._observer = None

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()


class ObservableWeatherStation:
    def __init__(self):
        self._data = WeatherData()
        self._observers: List[WeatherObserver] = []

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def subscribe(self, observer: WeatherObserver) -> Subscription:
        """Register ``observer`` once; subscribing it again is a no-op."""
        if observer not in self._observers:
            self._observers.append(observer)
        return Subscription(self._observers, observer)

    def set_measurements(self, temperature: float, humidity: float, pressure: float) -> None:
        self._data = WeatherData(temperature, humidity, pressure)
        for observer in list(self._observers):
            observer.on_next(self._data)

    def report_error(self, error: Exception) -> None:
        for observer in list(self._observers):
            observer.on_error(error)

    def end_transmission(self) -> None:
        for observer in list(self._observers):
            observer.on_completed()
        self._observers.clear()


class StatisticsDisplay(WeatherObserver):
    """Running average, maximum and minimum temperature."""

    def __init__(self, echo: Echo = print):
        self._echo = echo
        self.max_temp = float("-inf")
        self.min_temp = float("inf")
        self._temp_sum = 0.0
        self._readings = 0

    @property
    def average(self) -> float:
        return self._temp_sum / self._readings if self._readings else 0.0

    def on_next(self, value: WeatherData) -> None:
        self._temp_sum += value.temperature
        self._readings += 1
        self.max_temp = max(self.max_temp, value.temperature)
        self.min_temp = min(self.min_temp, value.temperature)
        self._echo(f"Avg/Max/Min temperature = {self.average:g}/{self.max_temp:g}/{self.min_temp:g}")

    def on_error(self, error: Exception) -> None:
        self._echo(f"Error occurred: {error}")

    def on_completed(self) -> None:
        self._echo("Weather station has completed transmitting data")


@register_demo("observer", "Weather station with event handlers and observable subscriptions")
def run_demo() -> List[str]:
    lines: List[str] = []
    echo = lines.append
    readings = ((80, 65, 30.4), (82, 70, 29.2))

    echo("Using traditional events:")
    station = WeatherStation()
    CurrentConditionsDisplay(station, echo)
    for reading in readings:
        station.set_measurements(*reading)

    echo("Using observable:")
    observable = ObservableWeatherStation()
    with observable.subscribe(StatisticsDisplay(echo)):
        for reading in readings:
            observable.set_measurements(*reading)
        observable.end_transmission()

    return lines
