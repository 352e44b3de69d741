from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ch_client import ClickHouseConfig
from wallet_ingest.filtering import parse_targets


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore", frozen=True
    )

    NATS_URL: str = "nats://127.0.0.1:4222"
    NATS_SUBJECT: str = "WALLET.updates"

    CH_HTTP: str = "http://127.0.0.1:8123"
    CH_USER: str = "dev"
    CH_PASS: str = "dev"
    CH_DB: str = "default"
    CH_TABLE: str = "wallet_account_updates"
    CH_TIMEOUT_S: float = Field(10.0, gt=0)

    BATCH_SIZE: int = Field(200, gt=0)
    FLUSH_MS: int = Field(500, gt=0)

    TARGET_ADDRESSES: str = ""  # comma-separated base58; empty forwards everything
    DRAIN_ON_CLOSE: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    METRICS_PORT: Optional[int] = None

    @property
    def flush_interval(self) -> float:
        return self.FLUSH_MS / 1000.0

    @property
    def target_addresses(self) -> List[str]:
        return parse_targets(self.TARGET_ADDRESSES)

    def clickhouse_config(self) -> ClickHouseConfig:
        return {
            "base_url": self.CH_HTTP,
            "user": self.CH_USER,
            "password": self.CH_PASS,
            "database": self.CH_DB,
            "table": self.CH_TABLE,
            "timeout_s": self.CH_TIMEOUT_S,
        }

    def redacted(self) -> dict:
        data = self.model_dump()
        data["CH_PASS"] = "***" if self.CH_PASS else ""
        return data


@lru_cache()
def get_settings() -> Settings:
    return Settings()
