"""Built-in default table for every recognised ``puppet.conf`` setting.

Each entry is one of four shapes:

* :class:`Literal` - a fixed default string.
* :class:`Interpolated` - a template referencing other settings via ``$name``.
* :class:`Computed` - a zero-argument hook evaluated at resolution time.
* :class:`Unset` - recognised, but without any default value.

Hooks are injected through :class:`SettingHooks` when the table is built so
tests (and embedding tools) can pin host-specific values such as the
certname without patching module globals.
"""
from __future__ import annotations

import os
import socket
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

SYSTEM_CONFDIR = "/etc/puppetlabs/puppet"
USER_CONFDIR = "~/.puppetlabs/etc/puppet"


@dataclass(frozen=True)
class Literal:
    """Fixed default value."""

    value: str


@dataclass(frozen=True)
class Interpolated:
    """Default expressed as a ``$name`` template over other settings."""

    template: str


@dataclass(frozen=True)
class Computed:
    """Default supplied by a hook at resolution time."""

    hook: Callable[[], str]


@dataclass(frozen=True)
class Unset:
    """Recognised setting without a default."""


DefaultSpec = Literal | Interpolated | Computed | Unset


def running_as_root() -> bool:
    """Return ``True`` when the effective user is root on a POSIX host."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def user_specific_confdir() -> str:
    """Return the conventional Puppet confdir for the current user."""
    if running_as_root():
        return SYSTEM_CONFDIR
    return str(Path(USER_CONFDIR).expanduser())


def default_certname() -> str:
    """Return the lower-cased fully qualified name of this host."""
    return socket.getfqdn().lower()


@dataclass(frozen=True)
class SettingHooks:
    """Host-specific callables used for computed defaults."""

    certname: Callable[[], str] = default_certname
    confdir: Callable[[], str] = user_specific_confdir


def build_default_table(hooks: SettingHooks | None = None) -> Mapping[str, DefaultSpec]:
    """Build a read-only default table wired to *hooks*."""
    hooks = hooks or SettingHooks()
    table: dict[str, DefaultSpec] = {
        "confdir": Computed(hooks.confdir),
        "vardir": Unset(),
        "ssldir": Interpolated("$confdir/ssl"),
        "certdir": Interpolated("$ssldir/certs"),
        "privatekeydir": Interpolated("$ssldir/private_keys"),
        "publickeydir": Interpolated("$ssldir/public_keys"),
        "requestdir": Interpolated("$ssldir/certificate_requests"),
        "hostcert": Interpolated("$certdir/$certname.pem"),
        "hostprivkey": Interpolated("$privatekeydir/$certname.pem"),
        "hostpubkey": Interpolated("$publickeydir/$certname.pem"),
        "localcacert": Interpolated("$certdir/ca.pem"),
        "hostcrl": Interpolated("$ssldir/crl.pem"),
        "cadir": Interpolated("$ssldir/ca"),
        "cacert": Interpolated("$cadir/ca_crt.pem"),
        "cakey": Interpolated("$cadir/ca_key.pem"),
        "capub": Interpolated("$cadir/ca_pub.pem"),
        "cacrl": Interpolated("$cadir/ca_crl.pem"),
        "csrdir": Interpolated("$cadir/requests"),
        "signeddir": Interpolated("$cadir/signed"),
        "serial": Interpolated("$cadir/serial"),
        "cert_inventory": Interpolated("$cadir/inventory.txt"),
        "certname": Computed(hooks.certname),
        "ca_name": Interpolated("Puppet CA: $certname"),
        "dns_alt_names": Literal(""),
        "ca_ttl": Literal("5y"),
        "server": Literal("puppet"),
        "server_list": Literal(""),
        "masterport": Literal("8140"),
        "ca_server": Interpolated("$server"),
        "ca_port": Interpolated("$masterport"),
        "environment": Literal("production"),
    }
    return MappingProxyType(table)


DEFAULT_TABLE = build_default_table()


def defaults() -> Mapping[str, DefaultSpec]:
    """Return the shared default table."""
    return DEFAULT_TABLE


__all__ = [
    "Computed",
    "DEFAULT_TABLE",
    "DefaultSpec",
    "Interpolated",
    "Literal",
    "SettingHooks",
    "Unset",
    "build_default_table",
    "default_certname",
    "defaults",
    "running_as_root",
    "user_specific_confdir",
]
