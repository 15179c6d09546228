"""Weather report example: attributed partial updates on an audited record."""

from dataclasses import dataclass

from changeapply import AuditFields, apply_changes_with_modifier, embedded, new_audit_fields, tag


@dataclass
class WeatherReport:
    audit: AuditFields = embedded(default_factory=AuditFields)
    city: str = tag("city", default="")
    weather: str = tag("weather", default="")

    def describe(self) -> str:
        return "\n".join(
            [
                f"City: {self.city}",
                f"Weather: {self.weather}",
                f"Last reported by: {self.audit.last_modified_by}",
            ]
        )


def new_weather_report(created_by: str, city: str, weather: str) -> WeatherReport:
    return WeatherReport(audit=new_audit_fields(created_by), city=city, weather=weather)


def main() -> None:
    report = new_weather_report("Dylan", "Clearwater", "Hot and sunny")
    print(report.describe())

    print()
    print("Making changes...")
    print()

    apply_changes_with_modifier({"weather": "Thunderstorms"}, "Mr. Weatherdude", report)
    print(report.describe())


if __name__ == "__main__":
    main()
