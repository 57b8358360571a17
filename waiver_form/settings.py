from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    owner_name: str = Field(default="Rayvon Solomon")
    location_fallback: str = Field(default="Location unknown")
    # str.format template receiving `date`, e.g. "{date:%Y-%m-%d}"
    date_format: str = Field(default="{date.month}/{date.day}/{date.year}")
    # "load" freezes the current date when the form config is built, "render" re-reads it per call
    date_seed_mode: Literal["load", "render"] = Field(default="load")
    default_separator: str = Field(default="")
    multi_value_separator: str = Field(default=", ")
    unfilled_reference_policy: Literal["error", "empty", "placeholder"] = Field(default="error")
    unfilled_placeholder: str = Field(default="________")

    model_config = SettingsConfigDict(env_prefix="WAIVER_", case_sensitive=False)


settings = Settings()
