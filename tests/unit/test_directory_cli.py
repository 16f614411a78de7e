"""Tests for the scripts/directory.py operator CLI."""
import argparse
import json

import pytest
import requests

import scripts.directory as directory


@pytest.fixture
def cli_client(monkeypatch, client_factory, stub_adapter):
    """Route the CLI through a stub-backed client and capture its args."""
    seen = {}

    def fake_build(args):
        seen["args"] = args
        return client_factory()

    monkeypatch.setattr(directory, "build_client", fake_build)
    return seen


def test_find_prints_user(cli_client, stub_adapter, capsys):
    stub_adapter.queue((200, {"id": "u-1", "userName": "alice", "roles": ["analyst"]}))

    directory.main(["find", "--by", "email", "alice@example.com"])

    out = json.loads(capsys.readouterr().out)
    assert out["userName"] == "alice"
    assert out["roles"] == ["analyst"]
    assert "type=email" in stub_adapter.last.url


def test_find_prints_null_when_missing(cli_client, stub_adapter, capsys):
    stub_adapter.queue((200, b""))
    directory.main(["find", "ghost"])
    assert json.loads(capsys.readouterr().out) is None


def test_search_passes_params_and_pagination(cli_client, stub_adapter, capsys):
    stub_adapter.queue((200, [{"id": "u-1", "userName": "alice"}]))

    directory.main(["search", "--param", "search=ali", "--first", "0", "--max", "10"])

    out = json.loads(capsys.readouterr().out)
    assert [u["userName"] for u in out] == ["alice"]
    assert stub_adapter.last.url.endswith("/users/search?search=ali&skip=0&take=10")


def test_search_failure_exits_1(cli_client, stub_adapter, capsys):
    stub_adapter.queue(requests.ConnectionError("down"))
    with pytest.raises(SystemExit) as exc:
        directory.main(["search"])
    assert exc.value.code == 1
    assert "[search] Error" in capsys.readouterr().err


def test_count_prints_value(cli_client, stub_adapter, capsys):
    stub_adapter.queue((200, {"count": 7}))
    directory.main(["count", "--param", "search=*"])
    assert json.loads(capsys.readouterr().out) == {"count": 7}


def test_verify_prints_result(cli_client, stub_adapter, capsys):
    stub_adapter.queue((200, {"valid": True}))
    directory.main(["verify", "--username", "alice", "--password", "pw"])
    assert json.loads(capsys.readouterr().out) == {"valid": True}


def test_verify_requires_password(cli_client, monkeypatch):
    monkeypatch.delenv("REMOTE_VERIFY_PASSWORD", raising=False)
    with pytest.raises(SystemExit) as exc:
        directory.main(["verify", "--username", "alice"])
    assert exc.value.code == 2


def test_missing_url_exits_2(monkeypatch, capsys):
    monkeypatch.delenv("REMOTE_DIRECTORY_URL", raising=False)
    with pytest.raises(SystemExit) as exc:
        directory.main(["count"])
    assert exc.value.code == 2
    assert "[config] Error" in capsys.readouterr().err


def test_build_client_applies_overrides(monkeypatch):
    monkeypatch.delenv("REMOTE_DIRECTORY_URL", raising=False)
    args = argparse.Namespace(url="https://cli.example.com", trace=True)

    client = directory.build_client(args)

    assert client.search_user_url == "https://cli.example.com/users/search"
    assert client.tracer is not None
    client.close()


def test_parse_params_rejects_malformed_pair():
    with pytest.raises(argparse.ArgumentTypeError):
        directory._parse_params(["novalue"])
    assert directory._parse_params(["a=1", "b=x=y"]) == {"a": "1", "b": "x=y"}
