from dotenv import load_dotenv
from dataclasses import dataclass
from typing import Tuple
from pathlib import Path
import json
import os

import yaml

from linkaudit.constants import (
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_PAGE_MAX_LINKS,
    DEFAULT_PROBE_RETRIES,
    DEFAULT_PROBE_TIMEOUT_MS,
    DEFAULT_RETRY_DELAY_MS,
    DEFAULT_TEXT_TIMEOUT_MS,
    DEFAULT_VISIBILITY_TIMEOUT_MS,
    SOCIAL_MEDIA_DOMAINS,
)

load_dotenv()  # Loads variables from .env file


class Settings:
    """
    Manages application settings loaded from environment variables.
    """
    BASE_URL = os.getenv("LINKAUDIT_BASE_URL")
    ENV = os.getenv("LINKAUDIT_ENV", "staging")
    LOG_LEVEL = os.getenv("LINKAUDIT_LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LINKAUDIT_LOG_FILE")
    USER_AGENT = os.getenv("LINKAUDIT_USER_AGENT")


settings = Settings()


@dataclass
class AuditConfig:
    """Budgets and allowlists for link classification."""

    # Probe budget per request
    probe_timeout_ms: int = DEFAULT_PROBE_TIMEOUT_MS
    max_redirects: int = DEFAULT_MAX_REDIRECTS

    # Transport failures are retried this many times before giving up
    probe_retries: int = DEFAULT_PROBE_RETRIES
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS

    # DOM budgets
    visibility_timeout_ms: int = DEFAULT_VISIBILITY_TIMEOUT_MS
    text_timeout_ms: int = DEFAULT_TEXT_TIMEOUT_MS

    # Cap for whole-page scans; section scans are unbounded unless asked
    page_max_links: int = DEFAULT_PAGE_MAX_LINKS

    # 1 = classify anchors one at a time
    max_concurrent: int = 1

    social_domains: Tuple[str, ...] = SOCIAL_MEDIA_DOMAINS

    @classmethod
    def from_env(cls) -> "AuditConfig":
        """Load configuration from environment variables.

        Environment variables should be prefixed with LINKAUDIT_
        e.g., LINKAUDIT_PROBE_TIMEOUT_MS=15000

        Returns:
            AuditConfig with values from environment
        """
        config = cls()
        prefix = "LINKAUDIT_"

        for field_name in config.__dataclass_fields__:
            env_key = f"{prefix}{field_name.upper()}"
            env_value = os.getenv(env_key)

            if env_value is not None:
                field_type = config.__dataclass_fields__[field_name].type
                try:
                    if field_type == int:
                        setattr(config, field_name, int(env_value))
                    elif field_name == "social_domains":
                        domains = tuple(
                            d.strip().lower() for d in env_value.split(",") if d.strip()
                        )
                        setattr(config, field_name, domains)
                except ValueError:
                    pass  # Keep default if conversion fails

        return config

    @classmethod
    def from_file(cls, path: str) -> "AuditConfig":
        """Load configuration from a JSON or YAML file.

        Values may sit at the top level or under an ``audit`` key.

        Args:
            path: Path to configuration file

        Returns:
            AuditConfig with values from file
        """
        config = cls()
        file_path = Path(path)

        if not file_path.exists():
            return config

        with open(file_path, 'r') as f:
            if file_path.suffix in ('.yaml', '.yml'):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        audit_config = data.get('audit', data)

        for field_name in config.__dataclass_fields__:
            if field_name in audit_config:
                value = audit_config[field_name]
                if field_name == 'social_domains':
                    value = tuple(str(d).lower() for d in value)
                setattr(config, field_name, value)

        return config

    def to_dict(self) -> dict:
        """Convert configuration to dictionary.

        Returns:
            Dictionary of all configuration values
        """
        return {
            field_name: (
                list(getattr(self, field_name))
                if field_name == 'social_domains'
                else getattr(self, field_name)
            )
            for field_name in self.__dataclass_fields__
        }


# Global default configuration instance
default_config = AuditConfig()
