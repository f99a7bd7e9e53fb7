from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    elasticsearch_url: str = "http://localhost:9200"
    # Read once at process start and handed to each index client at construction.
    # Elasticsearch reserves ":" for cross-cluster names.
    index_name: str = "development-jobs"
    geonames_db_path: Path = Path("geonames.sqlite")
    # Resolved on the Elasticsearch node, not locally.
    synonyms_path: str = "analysis/synonyms.txt"
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000

    model_config = {"env_prefix": "JOBS_API_"}


settings = Settings()
