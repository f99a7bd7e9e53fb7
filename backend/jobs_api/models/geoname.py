from sqlalchemy import Column, Float, Integer, Text, UniqueConstraint
from jobs_api.database import Base


class Geoname(Base):
    __tablename__ = "geonames"
    __table_args__ = (UniqueConstraint("location", "state", name="uq_geonames_location_state"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    location = Column(Text, nullable=False, index=True)
    state = Column(Text, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
