"""End-to-end weather report journey through the example record."""

import pytest

from changeapply import ChangesetError, apply_changes, apply_changes_with_modifier
from examples.weather_report import main, new_weather_report


def test_describe_before_and_after_update():
    report = new_weather_report("Dylan", "Clearwater", "Hot and sunny")
    assert report.describe().splitlines() == [
        "City: Clearwater",
        "Weather: Hot and sunny",
        "Last reported by: Dylan",
    ]

    apply_changes_with_modifier({"weather": "Thunderstorms"}, "Mr. Weatherdude", report)

    assert report.describe().splitlines() == [
        "City: Clearwater",
        "Weather: Thunderstorms",
        "Last reported by: Mr. Weatherdude",
    ]


def test_clearing_modifier_falls_back_to_creator():
    report = new_weather_report("Dylan", "Clearwater", "Hot and sunny")
    apply_changes_with_modifier({}, "Mr. Weatherdude", report)

    apply_changes({"modifiedBy": ""}, report)

    assert report.audit.modified_by is None
    assert report.audit.last_modified_by == "Dylan"


def test_rejected_update_keeps_report():
    report = new_weather_report("Dylan", "Clearwater", "Hot and sunny")

    with pytest.raises(ChangesetError):
        apply_changes_with_modifier(
            {"weather": "Hail", "windSpeed": 40}, "Mr. Weatherdude", report
        )

    assert report.weather == "Hot and sunny"
    assert report.audit.modified_by is None


def test_main_prints_both_reports(capsys):
    main()

    out = capsys.readouterr().out
    assert "Weather: Hot and sunny" in out
    assert "Making changes..." in out
    assert "Last reported by: Mr. Weatherdude" in out
