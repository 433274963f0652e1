from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    provider: str = "sms24"
    base_url: str = "https://sms24.me"
    list_path: str = "/en/numbers"
    listing_pages: int = 5
    page_delay_seconds: float = 2.0
    nav_attempts: int = 3
    nav_timeout_seconds: float = 30.0
    headless: bool = True
    cookie_file: str = ""
    debug_dir: str = "debug"
    cache_ttl_seconds: float = 30.0
    rate_limit_max: int = 25
    rate_limit_window_seconds: float = 10.0
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 4000
