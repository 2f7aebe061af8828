from __future__ import annotations

import logging
from pathlib import Path

import pytest

import main as cli
from core.models import AccountRecord


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if any(isinstance(f, cli.ActorFilter) for f in handler.filters):
            handler.close()
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture()
def ad_env(monkeypatch) -> None:
    monkeypatch.setattr("utils.config.load_dotenv", lambda *_args, **_kwargs: False)
    monkeypatch.setenv("AD_SERVER", "ldap://dc")
    monkeypatch.setenv("AD_USERNAME", "svc")
    monkeypatch.setenv("AD_PASSWORD", "secret")
    monkeypatch.setenv("BASE_DN", "DC=corp")


def _install_fake_client(monkeypatch, source, connected: bool = True) -> None:
    class FakeClient:
        def __init__(self, *_args, **_kwargs) -> None:
            self.connection = object() if connected else None

        def __enter__(self):
            source.connection = self.connection
            return source

        def __exit__(self, *_exc) -> None:
            return None

    monkeypatch.setattr(cli, "ActiveDirectoryClient", FakeClient)


def test_parse_args_defaults() -> None:
    args = cli._parse_args([])
    assert args.log_level == "INFO"
    assert args.data_dir is None
    assert args.no_manager_cache is False


def test_parse_args_directories() -> None:
    args = cli._parse_args(["--data-dir", "d", "--backup-dir", "b", "--log-dir", "l", "--base-name", "N"])
    assert (args.data_dir, args.backup_dir, args.log_dir, args.base_name) == ("d", "b", "l", "N")


def test_missing_configuration_exits_non_zero(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr("utils.config.load_dotenv", lambda *_args, **_kwargs: False)
    for name in ("AD_SERVER", "AD_USERNAME", "AD_PASSWORD", "BASE_DN"):
        monkeypatch.delenv(name, raising=False)
    assert cli.main(["--log-dir", str(tmp_path / "logs")]) == 1


def test_successful_run_prints_path(ad_env, make_source, monkeypatch, tmp_path: Path, capsys) -> None:
    source = make_source(locked=[AccountRecord("u1", "Una", "One", currently_locked=True,
                                               lockout_time_raw=133500000000000000)])
    _install_fake_client(monkeypatch, source)

    code = cli.main(["--data-dir", str(tmp_path / "data"), "--log-dir", str(tmp_path / "logs")])

    assert code == 0
    printed = Path(capsys.readouterr().out.strip())
    assert printed.parent == tmp_path / "data"
    assert printed.name.startswith("LockedOutUsers_")
    assert printed.exists()
    assert (tmp_path / "data" / "backup").is_dir()


def test_source_failure_exits_non_zero(ad_env, make_source, monkeypatch, tmp_path: Path) -> None:
    _install_fake_client(monkeypatch, make_source(fail_queries=True))
    code = cli.main(["--data-dir", str(tmp_path / "data"), "--log-dir", str(tmp_path / "logs")])
    assert code == 1
    assert list((tmp_path / "data").glob("*.csv")) == []


def test_connection_failure_exits_non_zero(ad_env, make_source, monkeypatch, tmp_path: Path) -> None:
    _install_fake_client(monkeypatch, make_source(), connected=False)
    assert cli.main(["--data-dir", str(tmp_path / "data"), "--log-dir", str(tmp_path / "logs")]) == 1


def test_log_lines_carry_actor_and_severity(tmp_path: Path) -> None:
    log_file = Path(cli.setup_logging("INFO", tmp_path / "logs"))
    logging.getLogger("lockout").warning("lookup failed")
    for handler in logging.getLogger().handlers:
        handler.flush()

    line = log_file.read_text(encoding="utf-8").splitlines()[-1]
    parts = line.split(" ", 4)
    assert parts[3] == "WARNING"
    assert parts[4] == "lookup failed"
    assert parts[2] == cli.ActorFilter().actor
