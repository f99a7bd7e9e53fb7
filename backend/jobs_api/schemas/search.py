from pydantic import BaseModel, ConfigDict, Field


class SearchOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str | None = None
    organization_id: str | None = None
    source: str | None = None
    tags: str | None = None  # space-delimited
    lat_lon: str | None = None  # "lat,lon"
    size: int = Field(10, ge=0)
    from_: int = Field(0, ge=0, alias="from")
    sort_by: str = "timestamp"
    hl: bool = False

    @property
    def tag_set(self) -> set[str] | None:
        if not self.tags or not self.tags.strip():
            return None
        return set(self.tags.split())
