"""Configuration loader for pcactl.

Settings are read from ``puppet.conf``, chosen in this order:

1. An explicit path (reserved for the ``--config`` CLI flag).
2. The ``PCACTL_CONFIG_FILE`` environment variable.
3. ``puppet.conf`` inside the user-specific confdir
   (``/etc/puppetlabs/puppet`` when running as root).

A missing file is not an error; defaults apply. A file that exists but cannot
be read raises :class:`ConfigError`. Problems inside the file (unresolvable
``$name`` references, malformed durations) never raise; they are collected in
:attr:`PuppetConfig.errors` next to best-effort :attr:`PuppetConfig.settings`.
"""
from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from .defaults import SettingHooks
from .ini import MAIN_SECTION, ParsedConfig, RawSection, parse_text
from .settings import Settings, SettingsResolver

LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "PCACTL_"
CONFIG_ENV_VAR = f"{ENV_PREFIX}CONFIG_FILE"
CONFIG_FILE_NAME = "puppet.conf"
# Sections consulted for CA settings, later entries overriding earlier ones.
CA_SECTIONS = (MAIN_SECTION, "master")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be read."""


class PuppetConfig:
    """Resolved view of a ``puppet.conf`` file."""

    def __init__(
        self,
        config_path: str | os.PathLike[str] | None = None,
        *,
        env: Mapping[str, str] | None = None,
        hooks: SettingHooks | None = None,
    ) -> None:
        self.hooks = hooks or SettingHooks()
        resolved_env = dict(os.environ if env is None else env)
        self.config_path = determine_config_path(config_path, resolved_env, self.hooks)
        self.settings: Settings = {}
        self.errors: list[str] = []

    @property
    def exists(self) -> bool:
        """Return ``True`` when the selected config file is present."""
        return self.config_path.exists()

    def load(self) -> Settings:
        """Read, parse and resolve the config file, replacing prior results."""
        parsed = self._read_file()
        overrides = ca_overrides(parsed)
        self.settings, self.errors = SettingsResolver(self.hooks).resolve(overrides)
        for message in self.errors:
            LOGGER.warning("%s: %s", self.config_path, message)
        return self.settings

    def _read_file(self) -> ParsedConfig:
        LOGGER.debug("Reading config file %s", self.config_path)
        try:
            text = self.config_path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            LOGGER.debug("Config file %s not found; using defaults.", self.config_path)
            return {}
        except OSError as exc:
            raise ConfigError(f"Could not read config file {self.config_path}: {exc}") from exc
        return parse_text(text)


def determine_config_path(
    cli_override: str | os.PathLike[str] | None,
    env: Mapping[str, str],
    hooks: SettingHooks,
) -> Path:
    """Pick the config file path following the documented precedence."""
    if cli_override:
        return Path(cli_override).expanduser()
    if env.get(CONFIG_ENV_VAR):
        return Path(env[CONFIG_ENV_VAR]).expanduser()
    return Path(hooks.confdir()) / CONFIG_FILE_NAME


def ca_overrides(parsed: ParsedConfig) -> RawSection:
    """Merge the sections the CA reads into a single override mapping."""
    merged: RawSection = {}
    for section in CA_SECTIONS:
        merged.update(parsed.get(section, {}))
    return merged


def load_puppet_config(
    config_file: str | os.PathLike[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
    hooks: SettingHooks | None = None,
) -> PuppetConfig:
    """Build a :class:`PuppetConfig` and load it."""
    config = PuppetConfig(config_file, env=env, hooks=hooks)
    config.load()
    return config


__all__ = [
    "CA_SECTIONS",
    "CONFIG_ENV_VAR",
    "ConfigError",
    "PuppetConfig",
    "ca_overrides",
    "determine_config_path",
    "load_puppet_config",
]
