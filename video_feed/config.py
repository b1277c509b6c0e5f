"""Configuration handling for the video feed collector."""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import yaml
from dotenv import load_dotenv

from video_feed.categories import CATEGORY_MAP, DEFAULT_CATEGORY

DEFAULT_USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/92.0.4515.107 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/93.0.4577.63 Safari/537.36",
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_6 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.0.3 Mobile/15E148 Safari/604.1",
]


@dataclass
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = True
    max_requests_per_minute: int = 60
    min_remaining_calls: int = 5
    sleep_buffer_sec: int = 2
    max_wait_sec: float = 30.0  # Upper bound on any single pacing sleep


@dataclass
class MonitoringConfig:
    """Monitoring configuration."""

    enable_prometheus: bool = False
    prometheus_port: int = 8000


@dataclass
class Config:
    """Application configuration combining environment variables and YAML config."""

    base_url: str = "https://www.reddit.com"
    default_category: str = DEFAULT_CATEGORY
    categories: Dict[str, List[str]] = field(
        default_factory=lambda: {name: list(subs) for name, subs in CATEGORY_MAP.items()}
    )
    window_size: int = 10
    page_limit: int = 50
    request_timeout_sec: float = 10.0
    max_retries: int = 30
    video_domain: str = "v.redd.it"
    user_agents: List[str] = field(default_factory=lambda: list(DEFAULT_USER_AGENTS))
    log_level: str = "INFO"
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    @classmethod
    def from_files(cls, config_path: Optional[str] = None, env_path: Optional[str] = None) -> "Config":
        """
        Load configuration from a YAML file and environment variables.

        Environment variables win over YAML values.

        Args:
            config_path: Optional path to YAML configuration file
            env_path: Optional path to .env file (defaults to .env in current directory)

        Returns:
            Config instance with merged configuration
        """
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        config = cls()

        if config_path and os.path.exists(config_path):
            with open(config_path, "r", encoding="utf-8") as file:
                yaml_config = yaml.safe_load(file)

            if yaml_config:
                for key, value in yaml_config.items():
                    if key in ("rate_limit", "monitoring"):
                        continue
                    if hasattr(config, key):
                        setattr(config, key, value)

                if isinstance(yaml_config.get("rate_limit"), dict):
                    rate_limit_config = RateLimitConfig()
                    for key, value in yaml_config["rate_limit"].items():
                        if hasattr(rate_limit_config, key):
                            setattr(rate_limit_config, key, value)
                    config.rate_limit = rate_limit_config

                if isinstance(yaml_config.get("monitoring"), dict):
                    monitoring_config = MonitoringConfig()
                    for key, value in yaml_config["monitoring"].items():
                        if hasattr(monitoring_config, key):
                            setattr(monitoring_config, key, value)
                    config.monitoring = monitoring_config

        config.base_url = os.getenv("VIDEO_FEED_BASE_URL", config.base_url).rstrip("/")
        config.default_category = os.getenv("VIDEO_FEED_DEFAULT_CATEGORY", config.default_category)
        config.log_level = os.getenv("VIDEO_FEED_LOG_LEVEL", config.log_level).upper()
        enable_prometheus = os.getenv("VIDEO_FEED_ENABLE_PROMETHEUS")
        if enable_prometheus is not None:
            config.monitoring.enable_prometheus = enable_prometheus.lower() == "true"

        return config

    def validate(self) -> List[str]:
        """
        Validate configuration and return a list of validation errors.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.base_url.startswith(("http://", "https://")):
            errors.append("base_url must be an http(s) URL")
        if not self.categories:
            errors.append("No categories configured")
        for name, subreddits in self.categories.items():
            if not subreddits:
                errors.append(f"Category '{name}' has no subreddits")
        if self.default_category not in self.categories:
            errors.append(f"default_category '{self.default_category}' is not a configured category")
        if self.window_size <= 0:
            errors.append("window_size must be greater than 0")
        if not 0 < self.page_limit <= 100:
            errors.append("page_limit must be between 1 and 100")
        if self.request_timeout_sec <= 0:
            errors.append("request_timeout_sec must be greater than 0")
        if self.max_retries < 0:
            errors.append("max_retries must not be negative")
        if not self.video_domain:
            errors.append("video_domain must be set")
        if not self.user_agents:
            errors.append("At least one user agent must be configured")
        if self.rate_limit.max_requests_per_minute <= 0:
            errors.append("rate_limit.max_requests_per_minute must be greater than 0")

        return errors
