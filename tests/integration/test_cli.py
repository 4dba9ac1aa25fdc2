"""
Integration Tests for the command line entry point
"""

import pytest

from zpool_status_exporter import __version__
from zpool_status_exporter.main import cli
from zpool_status_exporter.zpool.core.interfaces.command_executor import CommandResult

from tests.conftest import zpool_output
from tests.fixtures import zpool_status_samples as samples

pytestmark = pytest.mark.integration


@pytest.fixture
def patched_factory(mocker, service_factory):
    """Make the CLI build its services around the mock executor."""
    return mocker.patch(
        "zpool_status_exporter.main.create_service_factory", return_value=service_factory
    )


@pytest.fixture
def uvicorn_run(mocker):
    return mocker.patch("zpool_status_exporter.main.uvicorn.run")


class TestOneshot:

    def test_prints_metrics(self, capsys, not_root, patched_factory, mock_executor):
        mock_executor.execute_zpool.return_value = zpool_output(
            samples.with_timestamp(samples.SCRUB_REPAIRED)
        )

        assert cli(["--oneshot-test-print"]) == 0

        out = capsys.readouterr().out
        assert 'zpool_status_export_scan_state{pool="tank"} 10.0' in out
        assert 'zpool_status_export_scan_age{pool="tank"} 2.0' in out
        assert "# TYPE zpool_status_export_lookup gauge" in out

    def test_no_pools(self, capsys, not_root, patched_factory, mock_executor):
        mock_executor.execute_zpool.return_value = zpool_output(samples.NO_POOLS)

        assert cli(["--oneshot-test-print"]) == 0

        assert capsys.readouterr().out.startswith("# no pools reported\n")

    def test_parse_error(self, capsys, not_root, patched_factory, mock_executor):
        mock_executor.execute_zpool.return_value = zpool_output(samples.ZFS_DEVICE_ACCESS_DENIED)

        assert cli(["--oneshot-test-print"]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("# ERROR:\n# zpool requires access to /dev/zfs")


class TestServe:

    def test_starts_uvicorn(self, not_root, patched_factory, mock_executor, uvicorn_run):
        mock_executor.execute_zpool.return_value = zpool_output(samples.NEW_POOL)

        assert cli(["127.0.0.1:9101"]) == 0

        uvicorn_run.assert_called_once()
        kwargs = uvicorn_run.call_args.kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9101
        assert uvicorn_run.call_args.args[0].state.auth_rules is None

    def test_fails_fast_when_zpool_fails(self, not_root, patched_factory, mock_executor, uvicorn_run):
        mock_executor.execute_zpool.return_value = CommandResult(
            returncode=127, stdout="", stderr="Command not found: zpool"
        )

        assert cli([]) == 1

        uvicorn_run.assert_not_called()

    def test_fails_fast_on_parse_error(self, not_root, patched_factory, mock_executor, uvicorn_run):
        mock_executor.execute_zpool.return_value = zpool_output(samples.DEPTH_JUMP)

        assert cli([]) == 1

        uvicorn_run.assert_not_called()

    def test_loads_basic_auth(self, not_root, patched_factory, mock_executor, uvicorn_run, keys_file):
        mock_executor.execute_zpool.return_value = zpool_output(samples.NEW_POOL)

        assert cli(["--basic-auth-keys-file", str(keys_file)]) == 0

        app = uvicorn_run.call_args.args[0]
        assert len(app.state.auth_rules) == 2

    def test_invalid_keys_file(self, not_root, patched_factory, uvicorn_run, tmp_path):
        assert cli(["--basic-auth-keys-file", str(tmp_path / "missing")]) == 1

        uvicorn_run.assert_not_called()

    def test_invalid_listen_address(self, not_root, patched_factory):
        with pytest.raises(SystemExit) as exc_info:
            cli(["localhost"])
        assert exc_info.value.code == 2


class TestRootCheck:

    def test_refuses_root(self, mocker, patched_factory, mock_executor, uvicorn_run):
        mocker.patch("zpool_status_exporter.main.os.geteuid", return_value=0, create=True)

        assert cli([]) == 1

        mock_executor.execute_zpool.assert_not_awaited()
        uvicorn_run.assert_not_called()

    def test_allow_root(self, mocker, patched_factory, mock_executor, uvicorn_run):
        mocker.patch("zpool_status_exporter.main.os.geteuid", return_value=0, create=True)
        mock_executor.execute_zpool.return_value = zpool_output(samples.NEW_POOL)

        assert cli(["--allow-root"]) == 0

        uvicorn_run.assert_called_once()


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli(["--version"])
    assert exc_info.value.code == 0
    assert __version__ in capsys.readouterr().out
