"""Default endpoints and request identity for the weather.com.cn portal."""

DEFAULT_FORECAST_BASE_URL = "http://www.weather.com.cn"
DEFAULT_REALTIME_BASE_URL = "http://d1.weather.com.cn"
DEFAULT_CITY_DIRECTORY_URL = "https://j.i8tq.com/weather2020/search/city.js"

# The realtime endpoint refuses requests that don't look like they came
# from a browser on the forecast site.
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/87.0.4280.88 Safari/537.36"
)
DEFAULT_REFERER = "http://www.weather.com.cn/"
