import logging
from typing import Iterable, Protocol

from sqlalchemy import func
from sqlalchemy.orm import Session

from jobs_api.models.geoname import Geoname
from jobs_api.schemas.geoname import GeonameCreate

logger = logging.getLogger("jobs_api")


class Geocoder(Protocol):
    def geocode(self, location: str, state: str) -> dict | None: ...


class GeonameLookup:
    def __init__(self, db: Session):
        self.db = db

    def geocode(self, location: str, state: str) -> dict | None:
        if not location or not state:
            return None
        row = (
            self.db.query(Geoname)
            .filter(func.lower(Geoname.location) == location.strip().lower())
            .filter(func.upper(Geoname.state) == state.strip().upper())
            .first()
        )
        if not row:
            return None
        return {"lat": row.latitude, "lon": row.longitude}

    def import_geonames(self, records: Iterable[GeonameCreate]) -> int:
        # Last record wins for a repeated (location, state) pair, matched the way geocode matches.
        unique = {(r.location.strip().lower(), r.state.strip().upper()): r for r in records}
        count = 0
        for (key, state), record in unique.items():
            row = (
                self.db.query(Geoname)
                .filter(func.lower(Geoname.location) == key)
                .filter(Geoname.state == state)
                .first()
            )
            if row:
                row.latitude = record.latitude
                row.longitude = record.longitude
            else:
                self.db.add(Geoname(
                    location=record.location.strip(),
                    state=state,
                    latitude=record.latitude,
                    longitude=record.longitude,
                ))
            count += 1
        self.db.commit()
        logger.info("Imported %d geonames", count)
        return count
