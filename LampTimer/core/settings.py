"""Runtime settings read from the environment."""
import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TICK_INTERVAL_MS = 1000


class LampSettings(BaseSettings):
	"""Runtime configuration sourced from LAMP_* environment variables and an optional .env file."""

	model_config = SettingsConfigDict(
		env_file=".env", env_file_encoding="utf-8", env_ignore_empty=True, extra="ignore"
	)

	complete_on_expiry: bool = Field(default=False, validation_alias="LAMP_COMPLETE_ON_EXPIRY")
	log_level: str = Field(default="INFO", validation_alias="LAMP_LOG_LEVEL")

	@field_validator("log_level")
	@classmethod
	def _normalize_log_level(cls, value: str) -> str:
		normalized = value.strip().upper()
		if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
			raise ValueError("LAMP_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG")
		return normalized


def load_settings() -> LampSettings:
	"""Build settings from the current environment."""
	return LampSettings()


def configure_logging(level: str) -> None:
	"""Configure root logging for the console runner."""
	logging.basicConfig(
		level=getattr(logging, level, logging.INFO),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
