"""Open-Meteo forecast data models."""

from dataclasses import dataclass, field


def _check_parallel(block: str, **arrays: tuple) -> None:
    lengths = {name: len(values) for name, values in arrays.items()}
    if len(set(lengths.values())) > 1:
        raise ValueError(f"{block} arrays differ in length: {lengths}")


@dataclass(frozen=True)
class CurrentConditions:
    time: str
    temperature: float
    weather_code: int
    wind_speed: float


@dataclass(frozen=True)
class HourlyBlock:
    time: tuple[str, ...] = ()
    temperature: tuple[float, ...] = ()
    weather_code: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        _check_parallel(
            "hourly",
            time=self.time,
            temperature=self.temperature,
            weather_code=self.weather_code,
        )

    def __len__(self) -> int:
        return len(self.time)

    def head(self, limit: int) -> "HourlyBlock":
        return HourlyBlock(
            time=self.time[:limit],
            temperature=self.temperature[:limit],
            weather_code=self.weather_code[:limit],
        )


@dataclass(frozen=True)
class DailyBlock:
    time: tuple[str, ...] = ()
    weather_code: tuple[int, ...] = ()
    temperature_max: tuple[float, ...] = ()
    temperature_min: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        _check_parallel(
            "daily",
            time=self.time,
            weather_code=self.weather_code,
            temperature_max=self.temperature_max,
            temperature_min=self.temperature_min,
        )

    def __len__(self) -> int:
        return len(self.time)

    def slice(self, start: int, stop: int) -> "DailyBlock":
        """Slice all four arrays with the same bounds."""
        return DailyBlock(
            time=self.time[start:stop],
            weather_code=self.weather_code[start:stop],
            temperature_max=self.temperature_max[start:stop],
            temperature_min=self.temperature_min[start:stop],
        )


@dataclass(frozen=True)
class ForecastResult:
    latitude: float
    longitude: float
    timezone: str
    current: CurrentConditions
    hourly: HourlyBlock
    daily: DailyBlock
    utc_offset_seconds: int | None = None
    fetched_at: str = field(default="", compare=False)
