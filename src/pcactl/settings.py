"""Resolve ``puppet.conf`` overrides against the default table.

Resolution runs in three steps:

1. Overlay user values onto the default table.
2. Interpolate ``$name`` references until every setting is resolved or the
   pass budget (one pass per setting) is spent.
3. Apply per-setting transforms (``ca_ttl``, ``server_list`` and the derived
   ``subject_alt_names``).

Problems found along the way are collected into an error list returned next
to the settings; nothing here raises for bad input.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType

from .defaults import (
    Computed,
    DefaultSpec,
    Interpolated,
    Literal,
    SettingHooks,
    Unset,
    build_default_table,
)
from .interpolation import find_references, interpolate

LOGGER = logging.getLogger(__name__)

DURATION_PATTERN = re.compile(r"^([0-9]+)([smhdy]?)$")
DURATION_UNITS = {
    "": 1,
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 60 * 60 * 24,
    "y": 60 * 60 * 24 * 365,
}
ALT_NAME_PREFIX_PATTERN = re.compile(r"^[A-Z]+:")

Settings = dict[str, object]
ServerEntry = tuple[str, ...]


class SettingsResolver:
    """Turn a raw settings section into fully resolved settings."""

    def __init__(
        self,
        hooks: SettingHooks | None = None,
        *,
        table: Mapping[str, DefaultSpec] | None = None,
    ) -> None:
        self.hooks = hooks or SettingHooks()
        self.table = table if table is not None else build_default_table(self.hooks)

    def resolve(self, overrides: Mapping[str, str] | None = None) -> tuple[Settings, list[str]]:
        """Return ``(settings, errors)`` for the supplied *overrides*."""
        overrides = dict(overrides or {})
        errors: list[str] = []

        unknown = sorted(set(overrides) - set(self.table))
        if unknown:
            LOGGER.debug("Ignoring unrecognised settings: %s", ", ".join(unknown))

        templates = self._overlay(overrides)
        settings = self._interpolate_all(templates, errors)

        settings["ca_ttl"] = self._resolve_ttl(settings.get("ca_ttl"), errors)
        self._apply_server_list(settings)
        settings["subject_alt_names"] = self._subject_alt_names(
            settings.get("dns_alt_names") if "dns_alt_names" in overrides else None
        )
        return settings, errors

    def _overlay(self, overrides: Mapping[str, str]) -> dict[str, str | None]:
        templates: dict[str, str | None] = {}
        for name, spec in self.table.items():
            if name in overrides:
                templates[name] = overrides[name]
            else:
                templates[name] = _default_value(spec)
        return templates

    def _interpolate_all(
        self,
        templates: Mapping[str, str | None],
        errors: list[str],
    ) -> Settings:
        resolved: Settings = {
            name: None for name, template in templates.items() if template is None
        }
        pending = {name: template for name, template in templates.items() if template is not None}

        for _ in range(len(pending)):
            ready = [
                name
                for name, template in pending.items()
                if not (set(find_references(template)) - {name}) & pending.keys()
            ]
            if not ready:
                break
            snapshot = MappingProxyType(dict(resolved))
            for name in ready:
                resolved[name] = self._interpolate_one(pending.pop(name), snapshot, errors)
            if not pending:
                break

        if pending:
            LOGGER.debug("Circular references among settings: %s", ", ".join(sorted(pending)))
            snapshot = MappingProxyType(dict(resolved))
            for name, template in pending.items():
                resolved[name] = self._interpolate_one(template, snapshot, errors)

        return {name: resolved[name] for name in templates}

    @staticmethod
    def _interpolate_one(
        template: str,
        snapshot: Mapping[str, object],
        errors: list[str],
    ) -> str:
        value, problems = interpolate(template, snapshot)
        errors.extend(problems)
        return value

    @staticmethod
    def _resolve_ttl(value: object, errors: list[str]) -> int | None:
        if value is None:
            return None
        seconds = parse_duration(str(value))
        if seconds is None:
            errors.append(f"Could not parse ca_ttl value '{value}'")
        return seconds

    @staticmethod
    def _apply_server_list(settings: Settings) -> None:
        entries = parse_server_list(settings.get("server_list"))
        settings["server_list"] = entries
        if not entries:
            return

        first = entries[0]
        settings["server"] = settings["ca_server"] = first[0]
        if len(first) > 1:
            settings["masterport"] = settings["ca_port"] = first[1]

    def _subject_alt_names(self, dns_alt_names: object) -> str:
        if dns_alt_names is None:
            return ""
        return format_subject_alt_names(str(dns_alt_names), self.hooks.certname())


def _default_value(spec: DefaultSpec) -> str | None:
    if isinstance(spec, Literal):
        return spec.value
    if isinstance(spec, Interpolated):
        return spec.template
    if isinstance(spec, Computed):
        return spec.hook()
    if isinstance(spec, Unset):
        return None
    raise TypeError(f"Unsupported default spec: {spec!r}")


def parse_duration(value: str) -> int | None:
    """Convert ``5y`` style durations into seconds, ``None`` if malformed."""
    match = DURATION_PATTERN.match(value.strip())
    if not match:
        return None
    amount, unit = match.groups()
    return int(amount) * DURATION_UNITS[unit]


def parse_server_list(value: object) -> list[ServerEntry]:
    """Split ``host[:port],...`` into ordered ``(host,)``/``(host, port)`` tuples."""
    if not value:
        return []
    entries: list[ServerEntry] = []
    for raw_entry in str(value).split(","):
        entry = raw_entry.strip()
        if not entry:
            continue
        parts = tuple(part for part in entry.split(":") if part)
        if parts:
            entries.append(parts)
    return entries


def format_subject_alt_names(dns_alt_names: str, certname: str) -> str:
    """Render alt names as ``DNS:<certname>, DNS:foo, IP:...``."""
    names = [f"DNS:{certname}"]
    for raw_name in dns_alt_names.split(","):
        name = raw_name.strip()
        if not name:
            continue
        if ALT_NAME_PREFIX_PATTERN.match(name):
            names.append(name)
        else:
            names.append(f"DNS:{name}")
    return ", ".join(names)


def resolve_settings(
    overrides: Mapping[str, str] | None = None,
    *,
    hooks: SettingHooks | None = None,
) -> tuple[Settings, list[str]]:
    """Resolve *overrides* with a fresh :class:`SettingsResolver`."""
    return SettingsResolver(hooks).resolve(overrides)


__all__ = [
    "Settings",
    "SettingsResolver",
    "format_subject_alt_names",
    "parse_duration",
    "parse_server_list",
    "resolve_settings",
]
