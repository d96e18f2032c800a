"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
import yaml

from weathersearch.config.schema import AppConfig
from weathersearch.ingest.forecast_fetcher import parse_forecast
from weathersearch.models.forecast import ForecastResult

GEO_URL = "https://test-geo.example.com/v1/search"
FORECAST_URL = "https://test-forecast.example.com/v1/forecast"

FIXTURE_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict:
    with open(FIXTURE_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def geocoding_payload() -> dict:
    return load_fixture("geocoding_spr.json")


@pytest.fixture
def forecast_payload() -> dict:
    return load_fixture("openmeteo_forecast_springfield.json")


@pytest.fixture
def forecast_result(forecast_payload: dict) -> ForecastResult:
    return parse_forecast(forecast_payload)


@pytest.fixture
def test_config_data() -> dict:
    """Config pointing at mocked endpoints with no debounce or retry delays."""
    return {
        "geocoding": {
            "base_url": GEO_URL,
            "debounce_ms": 0,
            "max_retries": 0,
            "retry_base_delay": 0.0,
        },
        "forecast": {
            "base_url": FORECAST_URL,
            "max_retries": 0,
            "retry_base_delay": 0.0,
        },
    }


@pytest.fixture
def test_config(test_config_data: dict) -> AppConfig:
    return AppConfig(**test_config_data)


@pytest.fixture
def config_yaml_path(tmp_path: Path, test_config_data: dict) -> Path:
    """Write the test config as YAML and return its path."""
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(test_config_data, f)
    return path
