from jobs_api.models.geoname import Geoname

__all__ = ["Geoname"]
