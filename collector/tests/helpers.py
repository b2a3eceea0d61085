"""Constants and markup builders shared by the tests."""

FORECAST_BASE = "https://test-forecast.example.com"
REALTIME_BASE = "https://test-realtime.example.com"
DIRECTORY_URL = "https://test-directory.example.com/city.js"


def make_forecast_page(blocks: int) -> str:
    """Minimal forecast page with ``blocks`` list items under #today."""
    items = "".join(
        f"<li><h1>{i}日</h1><p class=\"wea\">晴</p></li>" for i in range(blocks)
    )
    return (
        "<html><body><div id=\"today\"><div class=\"t\"><ul>"
        f"{items}"
        "</ul></div></div></body></html>"
    )
