# backend/healthcarer/config.py

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]


def _split_csv(raw: str) -> tuple[str, ...]:
    return tuple(p.strip() for p in raw.split(",") if p.strip())


class Settings(BaseSettings):
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout: float = 2.0
    redis_key_prefix: str = "healthcarer"

    # Catalogue dimensions, comma-separated in the environment
    carers: str = "Carer1,Carer2,Carer3"
    dates: str = "20250728,20250729,20250730"
    start_hour: int = 9
    end_hour: int = 15
    interval_minutes: int = 30

    init_workers: int = 16
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def carer_ids(self) -> tuple[str, ...]:
        return _split_csv(self.carers)

    @property
    def date_list(self) -> tuple[str, ...]:
        return _split_csv(self.dates)

    def catalogue_config(self) -> "CatalogueConfig":
        return CatalogueConfig(
            carers=self.carer_ids,
            dates=self.date_list,
            start_hour=self.start_hour,
            end_hour=self.end_hour,
            interval_minutes=self.interval_minutes,
        )


@dataclass(frozen=True)
class CatalogueConfig:
    """
    Dimensions of the bookable universe.

    Attributes:
        carers: Carer ids owning slots
        dates: Calendar dates as YYYYMMDD
        start_hour: First hour of the day (inclusive)
        end_hour: Last hour of the day (inclusive)
        interval_minutes: Slot step inside an hour, must divide 60
    """
    carers: tuple[str, ...] = ("Carer1", "Carer2", "Carer3")
    dates: tuple[str, ...] = ("20250728", "20250729", "20250730")
    start_hour: int = 9
    end_hour: int = 15
    interval_minutes: int = 30

    def __post_init__(self):
        """Validate configuration."""
        if self.interval_minutes <= 0 or 60 % self.interval_minutes:
            raise ValueError(f"interval_minutes must divide 60, got {self.interval_minutes}")
        if not 0 <= self.start_hour <= self.end_hour <= 23:
            raise ValueError(
                f"hours must satisfy 0 <= start_hour <= end_hour <= 23, "
                f"got {self.start_hour}..{self.end_hour}"
            )
        if not self.carers:
            raise ValueError("at least one carer is required")
        if not self.dates:
            raise ValueError("at least one date is required")
        for carer in self.carers:
            if not carer or "#" in carer:
                raise ValueError(f"invalid carer id: {carer!r}")
        for d in self.dates:
            if len(d) != 8 or not d.isdigit():
                raise ValueError(f"date must be YYYYMMDD, got {d!r}")
            datetime.strptime(d, "%Y%m%d")

    @property
    def slots_per_day(self) -> int:
        """
        Number of slots per carer per date.

        9..15 every 30 min → 14 slots
        """
        return (self.end_hour - self.start_hour + 1) * (60 // self.interval_minutes)

    @property
    def total_slots(self) -> int:
        return len(self.carers) * len(self.dates) * self.slots_per_day


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_catalogue_config() -> CatalogueConfig:
    """Catalogue configuration built from settings (singleton)."""
    return get_settings().catalogue_config()
