"""Example records for changeapply.

This package demonstrates library usage but is not part of the core API.
"""

from .weather_report import WeatherReport, new_weather_report

__all__ = [
    "WeatherReport",
    "new_weather_report",
]
