from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Armed Lamp Control"
    timezone: str = "UTC"

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 8080

    # Logging
    log_level: str = "INFO"
    log_file: str = "armedlamp.log"  # empty = console only

    # Scheduling
    lamp_cron: str = Field(default="*/5 * * * *")
    heartbeat_stale_seconds: float = 360.0  # a bit more than one interval

    # What we control
    outlet_name: str = "Outlet Switch 1"
    location_name: Optional[str] = None   # None = first location
    camera_name: Optional[str] = None     # optional "dark outside" signal

    # Sunrise / sunset lookup
    sunrise_sunset_url: str = "https://api.sunrise-sunset.org/json"
    http_timeout_seconds: float = 10.0

    # Platform: only "sim" is bundled
    platform_mode: str = Field(default="sim")

    # Simulated location
    sim_location_name: str = "Home"
    sim_latitude: float = 47.6062
    sim_longitude: float = -122.3321


settings = Settings()
