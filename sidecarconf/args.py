"""Sidecar configuration from command-line arguments and environment variables."""

from __future__ import annotations

import argparse
import os
import re
import sys
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from sidecarconf.peer import PeerArgs, PeerConfigError, PeerEntry, parse_peer_entry

_TRUE_WORDS = frozenset({"y", "yes", "t", "true", "on", "1"})
_FALSE_WORDS = frozenset({"n", "no", "f", "false", "off", "0"})
_UNSIGNED = re.compile(r"\+?[0-9]+")


def parse_bool(value: str) -> bool:
    """Interpret a boolean-ish word such as ``yes``, ``off`` or ``1``."""
    word = value.lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"invalid boolean value: {value!r}")


def _unsigned(bits: int) -> Callable[[str], int]:
    limit = 2**bits - 1

    def convert(value: str) -> int:
        if not _UNSIGNED.fullmatch(value) or int(value) > limit:
            raise ValueError(f"invalid u{bits} value: {value!r}")
        return int(value)

    convert.__name__ = f"u{bits}"
    return convert


_u64 = _unsigned(64)
_u32 = _unsigned(32)


def _peer_list(value: str) -> list[PeerEntry]:
    try:
        return [parse_peer_entry(part) for part in value.split(",")]
    except PeerConfigError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


@dataclass(frozen=True)
class ServerArgs:
    """HTTP server settings."""

    listen_addr: str = "0.0.0.0:8080"
    read_timeout_secs: int = 30
    write_timeout_secs: int = 30


@dataclass(frozen=True)
class PublisherArgs:
    """Publisher connection settings."""

    enabled: bool = False
    addr: str = ""
    reconnect_delay_secs: int = 5
    max_retries: int = 10


@dataclass(frozen=True)
class ChainArgs:
    """Single-chain configuration; one chain per sidecar."""

    id: int = 0
    name: str = ""
    rpc: str = ""
    builder_rpc: str = ""
    universal_bridge_mailbox_address: str = ""
    coordinator_key: str = ""

    def chain_id(self) -> int:
        """Return the chain id this sidecar manages."""
        return self.id

    def builder_rpc_url(self) -> str:
        """Return the builder RPC endpoint, falling back to the chain RPC."""
        return self.builder_rpc or self.rpc


@dataclass(frozen=True)
class LogArgs:
    """Logging settings."""

    level: str = "info"
    format: str = "json"


@dataclass(frozen=True)
class VerificationArgs:
    """Inbound verification hook settings."""

    enabled: bool = False
    url: str = ""
    timeout_ms: int = 2000


@dataclass(frozen=True)
class SidecarArgs:
    """Complete sidecar configuration."""

    server: ServerArgs = field(default_factory=ServerArgs)
    publisher: PublisherArgs = field(default_factory=PublisherArgs)
    chain: ChainArgs = field(default_factory=ChainArgs)
    peers: PeerArgs = field(default_factory=PeerArgs)
    log: LogArgs = field(default_factory=LogArgs)
    verification: VerificationArgs = field(default_factory=VerificationArgs)


class _Option(NamedTuple):
    section: str
    name: str
    flag: str
    env: str
    default: str
    convert: Callable[[str], Any]
    help: str
    boolean: bool = False

    @property
    def dest(self) -> str:
        return f"{self.section}__{self.name}"


_OPTIONS: tuple[_Option, ...] = (
    _Option("server", "listen_addr", "--server.listen-addr", "SIDECAR_LISTEN_ADDR",
            "0.0.0.0:8080", str, "HTTP listen address."),
    _Option("server", "read_timeout_secs", "--server.read-timeout-secs",
            "SIDECAR_READ_TIMEOUT_SECS", "30", _u64, "HTTP read timeout in seconds."),
    _Option("server", "write_timeout_secs", "--server.write-timeout-secs",
            "SIDECAR_WRITE_TIMEOUT_SECS", "30", _u64, "HTTP write timeout in seconds."),
    _Option("publisher", "enabled", "--publisher.enabled", "SIDECAR_PUBLISHER_ENABLED",
            "false", parse_bool, "Enable publisher connection.", boolean=True),
    _Option("publisher", "addr", "--publisher.addr", "SIDECAR_PUBLISHER_ADDR",
            "", str, "Publisher QUIC address."),
    _Option("publisher", "reconnect_delay_secs", "--publisher.reconnect-delay-secs",
            "SIDECAR_PUBLISHER_RECONNECT_DELAY_SECS", "5", _u64,
            "Reconnect delay in seconds."),
    _Option("publisher", "max_retries", "--publisher.max-retries",
            "SIDECAR_PUBLISHER_MAX_RETRIES", "10", _u32,
            "Maximum reconnection attempts."),
    _Option("chain", "id", "--chain.id", "SIDECAR_CHAIN_ID", "0", _u64,
            "Chain ID this sidecar manages."),
    _Option("chain", "name", "--chain.name", "SIDECAR_CHAIN_NAME", "", str, "Chain name."),
    _Option("chain", "rpc", "--chain.rpc", "SIDECAR_CHAIN_RPC", "", str,
            "Chain RPC endpoint."),
    _Option("chain", "builder_rpc", "--chain.builder-rpc", "SIDECAR_CHAIN_BUILDER_RPC",
            "", str, "Builder RPC endpoint; falls back to --chain.rpc when unset."),
    _Option("chain", "universal_bridge_mailbox_address",
            "--chain.universal-bridge-mailbox-address",
            "SIDECAR_UNIVERSAL_BRIDGE_MAILBOX_ADDRESS", "", str,
            "UniversalBridgeMailbox contract address."),
    _Option("chain", "coordinator_key", "--chain.coordinator-key",
            "SIDECAR_COORDINATOR_KEY", "", str,
            "Private key for signing local putInbox transactions."),
    _Option("log", "level", "--log.level", "SIDECAR_LOG_LEVEL", "info", str,
            "Log level: debug, info, warn, error."),
    _Option("log", "format", "--log.format", "SIDECAR_LOG_FORMAT", "json", str,
            "Log format: json or pretty."),
    _Option("verification", "enabled", "--verification.enabled",
            "SIDECAR_VERIFICATION_ENABLED", "false", parse_bool,
            "Enable the external verification hook before voting commit.", boolean=True),
    _Option("verification", "url", "--verification.url", "SIDECAR_VERIFICATION_URL",
            "", str, "Verification HTTP endpoint to call on inbound XTs."),
    _Option("verification", "timeout_ms", "--verification.timeout-ms",
            "SIDECAR_VERIFICATION_TIMEOUT_MS", "2000", _u64,
            "Request timeout in milliseconds."),
)

_PEERS_DEST = "peers"
_PEERS_ENV = "SIDECAR_PEERS"

_SECTIONS: dict[str, type] = {
    "server": ServerArgs,
    "publisher": PublisherArgs,
    "chain": ChainArgs,
    "log": LogArgs,
    "verification": VerificationArgs,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser for the sidecar."""
    parser = argparse.ArgumentParser(
        prog="sidecar",
        description="Sidecar cross-chain coordination layer.",
        allow_abbrev=False,
    )
    for option in _OPTIONS:
        help_text = f"{option.help} [env: {option.env}] [default: {option.default!r}]"
        if option.boolean:
            parser.add_argument(
                option.flag, dest=option.dest, nargs="?", const=True,
                type=option.convert, default=argparse.SUPPRESS, help=help_text,
            )
        else:
            parser.add_argument(
                option.flag, dest=option.dest, type=option.convert,
                default=argparse.SUPPRESS, help=help_text,
            )
    parser.add_argument(
        "--peer", dest=_PEERS_DEST, action="extend", type=_peer_list,
        metavar="CHAIN_ID=URL", default=argparse.SUPPRESS,
        help=f"Peer sidecar, repeatable or comma-delimited. [env: {_PEERS_ENV}]",
    )
    return parser


def _from_env(
    parser: argparse.ArgumentParser,
    env: Mapping[str, str],
    name: str,
    flag: str,
    convert: Callable[[str], Any],
) -> Any:
    raw = env.get(name)
    if not raw:
        return None
    try:
        return convert(raw)
    except (ValueError, argparse.ArgumentTypeError) as exc:
        parser.error(f"invalid value {raw!r} for {flag} (from {name}): {exc}")
    return None


def parse_args(
    argv: Sequence[str] | None = None, env: Mapping[str, str] | None = None
) -> SidecarArgs:
    """Parse arguments, then environment variables, then defaults, in that order."""
    if argv is None:
        argv = sys.argv[1:]
    if env is None:
        env = os.environ

    parser = build_parser()
    given = vars(parser.parse_args(list(argv)))

    sections: dict[str, dict[str, Any]] = {name: {} for name in _SECTIONS}
    for option in _OPTIONS:
        if option.dest in given:
            value = given[option.dest]
        else:
            value = _from_env(parser, env, option.env, option.flag, option.convert)
            if value is None:
                value = option.convert(option.default)
        sections[option.section][option.name] = value

    peers = given.get(_PEERS_DEST)
    if peers is None:
        peers = _from_env(parser, env, _PEERS_ENV, "--peer", _peer_list) or []

    built = {name: cls(**sections[name]) for name, cls in _SECTIONS.items()}
    return SidecarArgs(peers=PeerArgs(peers=tuple(peers)), **built)