# sidecarconf

Configuration for a cross-chain coordination sidecar, read from command-line
options and `SIDECAR_*` environment variables. A command-line option takes
precedence over its environment variable, which takes precedence over the
built-in default. An environment variable set to the empty string counts as
unset.

The package depends on nothing outside the standard library.

## Reading the configuration

```python
from sidecarconf.args import parse_args

args = parse_args(
    ["--chain.id", "77777", "--chain.rpc", "http://localhost:8545"],
    {"SIDECAR_LOG_LEVEL": "debug"},
)

args.server.listen_addr          # "0.0.0.0:8080"
args.chain.id                    # 77777
args.chain.chain_id()            # 77777
args.chain.builder_rpc_url()     # falls back to "http://localhost:8545"
args.log.level                   # "debug"
args.publisher.enabled           # False
```

`parse_args(argv=None, env=None)` takes the option list and a mapping of
environment variables; left out, they default to `sys.argv[1:]` and
`os.environ`. It returns a frozen `SidecarArgs` dataclass. An invalid option
or environment value makes the parser report the error and exit, as
`argparse` does.

`build_parser()` returns the underlying `argparse.ArgumentParser`.
`parse_bool(value)` accepts `y`, `yes`, `t`, `true`, `on`, `1` and `n`, `no`,
`f`, `false`, `off`, `0` in any letter case, and raises `ValueError` for
anything else. The boolean options `--publisher.enabled` and
`--verification.enabled` use it; given without a value they mean true.

Numeric options accept only unsigned integers: 64-bit for timeouts, delays and
the chain id, 32-bit for `--publisher.max-retries`.

| Group               | Class              | Options (environment variable, default)                                                                                                                                                                                                                                        |
|---------------------|--------------------|--------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------------|
| `args.server`       | `ServerArgs`       | `--server.listen-addr` (`SIDECAR_LISTEN_ADDR`, `0.0.0.0:8080`), `--server.read-timeout-secs` (`SIDECAR_READ_TIMEOUT_SECS`, 30), `--server.write-timeout-secs` (`SIDECAR_WRITE_TIMEOUT_SECS`, 30)                                                                                  |
| `args.publisher`    | `PublisherArgs`    | `--publisher.enabled` (`SIDECAR_PUBLISHER_ENABLED`, false), `--publisher.addr` (`SIDECAR_PUBLISHER_ADDR`, empty), `--publisher.reconnect-delay-secs` (`SIDECAR_PUBLISHER_RECONNECT_DELAY_SECS`, 5), `--publisher.max-retries` (`SIDECAR_PUBLISHER_MAX_RETRIES`, 10)               |
| `args.chain`        | `ChainArgs`        | `--chain.id` (`SIDECAR_CHAIN_ID`, 0), `--chain.name` (`SIDECAR_CHAIN_NAME`), `--chain.rpc` (`SIDECAR_CHAIN_RPC`), `--chain.builder-rpc` (`SIDECAR_CHAIN_BUILDER_RPC`), `--chain.universal-bridge-mailbox-address` (`SIDECAR_UNIVERSAL_BRIDGE_MAILBOX_ADDRESS`), `--chain.coordinator-key` (`SIDECAR_COORDINATOR_KEY`); all strings default to empty |
| `args.peers`        | `PeerArgs`         | `--peer CHAIN_ID=URL` (`SIDECAR_PEERS`), repeatable or comma separated                                                                                                                                                                                                        |
| `args.log`          | `LogArgs`          | `--log.level` (`SIDECAR_LOG_LEVEL`, `info`), `--log.format` (`SIDECAR_LOG_FORMAT`, `json`)                                                                                                                                                                                      |
| `args.verification` | `VerificationArgs` | `--verification.enabled` (`SIDECAR_VERIFICATION_ENABLED`, false), `--verification.url` (`SIDECAR_VERIFICATION_URL`, empty), `--verification.timeout-ms` (`SIDECAR_VERIFICATION_TIMEOUT_MS`, 2000)                                                                                 |

`ChainArgs.builder_rpc_url()` returns `builder_rpc`, or `rpc` when
`builder_rpc` is empty.

## Peers

Peer sidecars are keyed by destination chain ID:

```python
from sidecarconf.args import parse_args
from sidecarconf.peer import parse_peer_entry

args = parse_args(["--peer", "77777=http://sidecar-a:8090,88888=http://sidecar-b:8090"], {})
for peer in args.peers.entries():
    print(peer.chain_id, peer.addr)

parse_peer_entry("77777=http://sidecar-a:8090")
# PeerEntry(chain_id=77777, addr='http://sidecar-a:8090')
```

`parse_peer_entry` trims whitespace around the chain id and the address. A
malformed entry raises a subclass of `PeerConfigError` (itself a
`ValueError`): `MissingSeparatorError`, `EmptyChainIdError`,
`InvalidChainIdError` (not an unsigned 64-bit integer; the text is kept in
`.value`) or `EmptyAddressError`. On the command line or in `SIDECAR_PEERS`
such an entry is reported as a parser error.

`PeerArgs.entries()` returns the peers in the order given, and raises
`DuplicateChainIdError` (with `.chain_id`) when two peers name the same chain.

## What this package does not do

It only reads and validates configuration. It installs no command, starts no
HTTP server, opens no publisher connection and contacts no peers or RPC
endpoints; the values it returns are for a program that does.