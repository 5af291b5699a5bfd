"""Configuration loader for portage-maint."""

import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml

from portagemaint.errors import ConfigError


class ConfigLoader:
    """Loads YAML configuration files layered over the built-in defaults."""

    SUPPORTED_KEYS = {
        "sync_args",
        "update_args",
        "preserved_rebuild_args",
        "depclean_args",
        "revdep_rebuild_args",
        "perl_cleaner_args",
        "auto_abort",
        "verbosity",
        "nice",
        "error_email",
        "success_email",
        "tmp_dir",
        "debug",
        "mail_command",
        "log_file",
    }

    def __init__(self, logger=None):
        self.logger = logger

    def load(self, config_path: Optional[str], required: bool = True) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(os.path.expanduser(config_path))
        if not path.exists():
            if required:
                raise ConfigError(f"Config file not found: {config_path}")
            return {}

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ConfigError(f"Config file '{config_path}' must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(str(key) for key in unknown)
            raise ConfigError(f"Unknown configuration keys in '{config_path}': {unknown_list}")

        if self.logger:
            self.logger.debug("Loaded configuration from %s", path)
        return parsed

    def load_layers(
        self,
        optional_paths: Iterable[str],
        explicit_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Merge the optional layered files, then the explicit one, later wins."""
        merged: Dict[str, Any] = {}
        for config_path in optional_paths:
            merged.update(self.load(config_path, required=False))
        merged.update(self.load(explicit_path, required=True))
        return merged
