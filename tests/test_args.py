import pytest

from sidecarconf.args import (
    ChainArgs,
    SidecarArgs,
    build_parser,
    parse_args,
    parse_bool,
)
from sidecarconf.peer import DuplicateChainIdError, PeerEntry


def test_default_args_are_valid():
    args = parse_args([], env={})
    assert args.server.listen_addr == "0.0.0.0:8080"
    assert args.publisher.enabled is False
    assert args.chain.id == 0
    assert args.log.level == "info"
    assert args.log.format == "json"
    assert args.verification.enabled is False
    assert args.verification.url == ""


def test_defaults_match_dataclass_defaults():
    assert parse_args([], env={}) == SidecarArgs()


def test_numeric_defaults():
    args = parse_args([], env={})
    assert args.server.read_timeout_secs == 30
    assert args.server.write_timeout_secs == 30
    assert args.publisher.reconnect_delay_secs == 5
    assert args.publisher.max_retries == 10
    assert args.verification.timeout_ms == 2000


def test_cli_args_override_defaults():
    args = parse_args(
        [
            "--server.listen-addr", "0.0.0.0:9090",
            "--chain.id", "77777",
            "--chain.rpc", "http://localhost:8545",
            "--publisher.enabled", "true",
            "--publisher.addr", "publisher:8080",
            "--log.level", "debug",
        ],
        env={},
    )
    assert args.server.listen_addr == "0.0.0.0:9090"
    assert args.chain.id == 77777
    assert args.chain.rpc == "http://localhost:8545"
    assert args.publisher.enabled is True
    assert args.publisher.addr == "publisher:8080"
    assert args.log.level == "debug"


def test_builder_rpc_falls_back_to_chain_rpc():
    args = parse_args(["--chain.rpc", "http://localhost:8545"], env={})
    assert args.chain.builder_rpc_url() == "http://localhost:8545"


def test_builder_rpc_preferred_when_set():
    chain = ChainArgs(rpc="http://a:1", builder_rpc="http://b:2")
    assert chain.builder_rpc_url() == "http://b:2"


def test_chain_id_method():
    assert ChainArgs(id=42).chain_id() == 42


def test_bool_flag_without_value_is_true():
    args = parse_args(["--verification.enabled", "--verification.url", "http://v"], env={})
    assert args.verification.enabled is True
    assert args.verification.url == "http://v"


@pytest.mark.parametrize(
    "word,expected",
    [("yes", True), ("On", True), ("1", True), ("T", True),
     ("no", False), ("OFF", False), ("0", False), ("f", False)],
)
def test_parse_bool(word, expected):
    assert parse_bool(word) is expected


def test_parse_bool_rejects_other_words():
    with pytest.raises(ValueError):
        parse_bool("maybe")


def test_invalid_bool_on_cli_exits():
    with pytest.raises(SystemExit) as info:
        parse_args(["--publisher.enabled", "maybe"], env={})
    assert info.value.code == 2


def test_env_values_used():
    env = {
        "SIDECAR_CHAIN_ID": "88888",
        "SIDECAR_PUBLISHER_ENABLED": "yes",
        "SIDECAR_LOG_FORMAT": "pretty",
        "SIDECAR_VERIFICATION_TIMEOUT_MS": "500",
    }
    args = parse_args([], env=env)
    assert args.chain.id == 88888
    assert args.publisher.enabled is True
    assert args.log.format == "pretty"
    assert args.verification.timeout_ms == 500


def test_cli_takes_precedence_over_env():
    args = parse_args(["--chain.id", "1"], env={"SIDECAR_CHAIN_ID": "2"})
    assert args.chain.id == 1


def test_invalid_env_value_exits():
    with pytest.raises(SystemExit) as info:
        parse_args([], env={"SIDECAR_CHAIN_ID": "abc"})
    assert info.value.code == 2


def test_negative_number_rejected():
    with pytest.raises(SystemExit):
        parse_args(["--server.read-timeout-secs=-1"], env={})


def test_max_retries_is_u32():
    with pytest.raises(SystemExit):
        parse_args(["--publisher.max-retries", str(2**32)], env={})
    assert parse_args(["--publisher.max-retries", str(2**32 - 1)], env={}).publisher.max_retries == 2**32 - 1


def test_unknown_option_exits():
    with pytest.raises(SystemExit):
        parse_args(["--nope"], env={})


def test_no_abbreviation():
    with pytest.raises(SystemExit):
        parse_args(["--log.lev", "debug"], env={})


def test_peer_entries_from_repeated_cli_args():
    args = parse_args(
        ["--peer", "77777=http://sidecar-a:8090", "--peer", "88888=http://sidecar-b:8090"],
        env={},
    )
    entries = args.peers.entries()
    assert len(entries) == 2
    assert entries[0].chain_id == 77777
    assert entries[0].addr == "http://sidecar-a:8090"
    assert entries[1].chain_id == 88888
    assert entries[1].addr == "http://sidecar-b:8090"


def test_no_peers_when_none_configured():
    assert parse_args([], env={}).peers.entries() == ()


def test_peer_entries_support_comma_delimited_values():
    args = parse_args(
        ["--peer", "77777=http://sidecar-a:8090,88888=http://sidecar-b:8090"], env={}
    )
    entries = args.peers.entries()
    assert len(entries) == 2
    assert entries[0].chain_id == 77777
    assert entries[1].chain_id == 88888


def test_peers_from_env():
    args = parse_args(
        [], env={"SIDECAR_PEERS": "77777=http://sidecar-a:8090,88888=http://sidecar-b:8090"}
    )
    assert args.peers.entries() == (
        PeerEntry(77777, "http://sidecar-a:8090"),
        PeerEntry(88888, "http://sidecar-b:8090"),
    )


def test_duplicate_peer_chain_ids_are_rejected():
    args = parse_args(
        ["--peer", "77777=http://sidecar-a:8090", "--peer", "77777=http://sidecar-b:8090"],
        env={},
    )
    with pytest.raises(DuplicateChainIdError) as info:
        args.peers.entries()
    assert info.value.chain_id == 77777


def test_invalid_peer_on_cli_exits():
    with pytest.raises(SystemExit) as info:
        parse_args(["--peer", "http://sidecar-a:8090"], env={})
    assert info.value.code == 2


def test_parser_program_name():
    assert build_parser().prog == "sidecar"