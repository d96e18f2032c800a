"""Place search and weather forecast client for Open-Meteo."""

__version__ = "0.1.0"
