from pydantic_settings import BaseSettings

DEFAULT_PARTITIONS = [*"abcdefghijklmnopqrstuvwxyz", "0-9"]


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    firecrawl_api_key: str = ""
    firecrawl_base_url: str = "https://api.firecrawl.dev"
    directory_root: str = "https://amsclubs.ca"
    partitions: list[str] = DEFAULT_PARTITIONS
    batch_size: int = 5
    item_delay: float = 1.0
    page_delay: float = 1.0
    partition_delay: float = 2.0
    max_pages: int = 50
    request_timeout: float = 60.0
    log_level: str = "INFO"
