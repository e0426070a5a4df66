import os
from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    default_hours_per_day: float = Field(2.5, alias="PLANNER_DEFAULT_HOURS_PER_DAY", ge=0.0)
    default_light_day: Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"] = Field(
        "Wednesday",
        alias="PLANNER_DEFAULT_LIGHT_DAY",
    )
    item_id_prefix: str = Field("ci", alias="PLANNER_ITEM_ID_PREFIX", min_length=1)
    debug_endpoints: bool = Field(False, alias="PLANNER_DEBUG_ENDPOINTS")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise RuntimeError(f"Invalid planner configuration: {exc}") from exc
