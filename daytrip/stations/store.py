from __future__ import annotations

from pydantic import BaseModel


class Station(BaseModel):
    name: str
    latitude: float
    longitude: float
    line: str
    description: str | None = None


_stations: dict[str, Station] = {}


def _seed_stations() -> None:
    """Pre-seed the Anyang-area stations on import."""
    for station in (
        Station(name="명학", latitude=37.3844, longitude=126.9354, line="1호선"),
        Station(name="안양", latitude=37.4016, longitude=126.9228, line="1호선"),
        Station(name="관악", latitude=37.4192, longitude=126.9087, line="1호선"),
        Station(name="석수", latitude=37.4350, longitude=126.9022, line="1호선"),
        Station(name="범계", latitude=37.3897, longitude=126.9507, line="4호선"),
        Station(name="평촌", latitude=37.3943, longitude=126.9638, line="4호선"),
        Station(name="인덕원", latitude=37.4016, longitude=126.9767, line="4호선"),
    ):
        _stations[station.name] = station


def list_stations() -> list[Station]:
    return sorted(_stations.values(), key=lambda s: s.name)


def resolve_station(name: str | None) -> Station | None:
    """Look up a station by name; a trailing "역" is tolerated. ``None`` if unknown."""
    if not name:
        return None
    key = name.strip()
    if key not in _stations and key.endswith("역"):
        key = key[:-1]
    return _stations.get(key)


_seed_stations()
