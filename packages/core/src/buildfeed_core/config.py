import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from buildfeed_core.errors import ConfigurationError
from buildfeed_core.outcome import BuildOutcome

DEFAULT_TEMPLATES: dict = {
    "success": "%spassed the build at %s %s",
    "failure": "%sbroke the build at %s %s",
    "continuous_failure": "%sleft the build broken at %s %s",
    "recovered": "%sfixed the build at %s %s",
}

DEFAULT_NOTIFY: dict = {
    "success": False,
    "failure": True,
    "continuous_failure": True,
    "recovered": True,
}

DEFAULT_CONFIG: dict = {
    "templates": DEFAULT_TEMPLATES,
    "notify": DEFAULT_NOTIFY,
    "store": "config",  # config | sqlite | gist
    "timeout": 10,  # seconds per transport call
}

# Sections merged key by key rather than replaced wholesale.
_NESTED_SECTIONS = ("templates", "notify")


def load_config(config_path: str = ".buildfeed.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .buildfeed.yml in the current directory
      3. CLI argument overrides

    ``templates`` and ``notify`` merge per outcome, so a file that only sets
    ``notify: {success: true}`` keeps the default templates and other flags.
    """
    config = {**DEFAULT_CONFIG}
    for section in _NESTED_SECTIONS:
        config[section] = dict(DEFAULT_CONFIG[section])

    path = Path(config_path)
    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Could not parse {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"{config_path} must contain a mapping at the top level.")
        for key, value in file_config.items():
            if key in _NESTED_SECTIONS and isinstance(value, dict):
                config[key].update(value)
            else:
                config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Credentials come from the environment, never from the checked-in file.
    config["weibo_access_token"] = os.environ.get("WEIBO_ACCESS_TOKEN")
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config


def _to_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


@dataclass(frozen=True)
class NotificationSettings:
    """Per-job notification settings, passed explicitly into run_notification()."""

    templates: Mapping[BuildOutcome, Optional[str]] = field(default_factory=dict)
    notify: Mapping[BuildOutcome, bool] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: dict) -> "NotificationSettings":
        templates_cfg = config.get("templates") or {}
        notify_cfg = config.get("notify") or {}
        for section, value in (("templates", templates_cfg), ("notify", notify_cfg)):
            if not isinstance(value, Mapping):
                raise ConfigurationError(f"'{section}' must map outcome names to values, got {type(value).__name__}.")
        return cls(
            templates={outcome: templates_cfg.get(outcome.value) for outcome in BuildOutcome},
            notify={outcome: _to_bool(notify_cfg.get(outcome.value, False)) for outcome in BuildOutcome},
        )

    def should_notify(self, outcome: BuildOutcome) -> bool:
        return self.notify.get(outcome, False)
