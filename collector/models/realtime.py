"""Realtime observation record from the sk_2d endpoint.

The record is the decoded JSON object as-is: keys and string values are
exactly what the endpoint sent. Fields usually present: nameen, cityname,
city, temp, tempf, WD, wde, WS, wse, SD, sd, qy, njd, time, rain, rain24h,
aqi, aqi_pm25, weather, weathere, weathercode, limitnumber, date.
"""

from typing import Any, TypeAlias

RealtimeRecord: TypeAlias = dict[str, Any]
