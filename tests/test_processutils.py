import subprocess
import sys
from pathlib import Path

import pytest

from pyrtbuild.processutils import commandline_to_str, print_command, run_command

from .setup_mock_rtconfig import setup_mock_rtconfig


def test_failing_command_raises(tmp_path: Path):
    config = setup_mock_rtconfig([])
    with pytest.raises(subprocess.CalledProcessError) as excinfo:
        run_command(sys.executable, "-c", "raise SystemExit(7)", cwd=tmp_path, config=config)
    assert excinfo.value.returncode == 7
    assert excinfo.value.cwd == str(tmp_path)


def test_missing_binary_raises(tmp_path: Path):
    config = setup_mock_rtconfig([])
    with pytest.raises(subprocess.CalledProcessError) as excinfo:
        run_command([str(tmp_path / "does-not-exist")], config=config)
    assert b"does-not-exist" in excinfo.value.stderr


def test_pretend_does_not_run(tmp_path: Path, capfd: pytest.CaptureFixture):
    config = setup_mock_rtconfig(["--pretend"])
    marker = tmp_path / "marker"
    result = run_command([sys.executable, "-c", "raise SystemExit(1)"], config=config)
    assert result.returncode == 0
    run_command("touch", marker, config=config)
    assert not marker.exists()
    assert commandline_to_str(["touch", marker]) in capfd.readouterr().out


def test_quiet_hides_output(capfd: pytest.CaptureFixture):
    config = setup_mock_rtconfig(["--quiet"])
    run_command(sys.executable, "-c", "print('hello from child')", config=config)
    assert capfd.readouterr().out == ""
    config = setup_mock_rtconfig([])
    run_command(sys.executable, "-c", "print('hello from child')", config=config)
    out = capfd.readouterr().out
    assert "hello from child" in out
    assert "-c" in out


def test_print_command_verbose_only(capsys: pytest.CaptureFixture):
    config = setup_mock_rtconfig([])
    print_command("mkdir", "-p", "/some dir", print_verbose_only=True, config=config)
    assert capsys.readouterr().out == ""
    config = setup_mock_rtconfig(["--verbose"])
    print_command(["ar", "crs", "libfoo.a"], cwd="/tmp", print_verbose_only=True, config=config)
    assert capsys.readouterr().out == "cd /tmp && ar crs libfoo.a\n"
    print_command("mkdir", "-p", "/some dir", config=config)
    assert capsys.readouterr().out == "mkdir -p '/some dir'\n"
