import json
from pathlib import Path

import pytest

from pyrtbuild.builtins.sources import SoftFloatPolicy
from pyrtbuild.config.rtconfig import DEFAULT_ARCHIVE_NAME, DEFAULT_REPOSITORY_URL, RtBuildAction
from pyrtbuild.utils import ConfigurationError

from .setup_mock_rtconfig import setup_mock_rtconfig


def _write_config(path: Path, contents: dict) -> Path:
    path.write_text(json.dumps(contents), encoding="utf-8")
    return path


def test_defaults():
    config = setup_mock_rtconfig([])
    assert config.action is RtBuildAction.BUILD
    assert config.soft_float_policy is SoftFloatPolicy.PER_SUBVARIANT
    assert config.repository_url == DEFAULT_REPOSITORY_URL
    assert config.archive_name == DEFAULT_ARCHIVE_NAME
    assert config.target is None
    assert config.host is None
    assert config.target_path is None
    assert config.source_dir is None
    assert not config.pretend
    assert not config.skip_clone
    assert config.output_dir == Path.cwd() / "rtbuild-output"
    assert config.build_dir == config.output_dir / "obj"
    assert config.archive_path == config.output_dir / "libcompiler-rt.a"


def test_environment_fallbacks():
    config = setup_mock_rtconfig([], {"TARGET": "thumbv7em-none-eabihf", "HOST": "x86_64-unknown-linux-gnu",
                                      "RUST_TARGET_PATH": "/opt/target-specs", "OUT_DIR": "/tmp/out"})
    assert config.target == "thumbv7em-none-eabihf"
    assert config.host == "x86_64-unknown-linux-gnu"
    assert config.target_path == Path("/opt/target-specs")
    assert config.output_dir == Path("/tmp/out")
    assert config.build_dir == Path("/tmp/out/obj")
    assert config.is_cross_compiling
    assert config.environment["TARGET"] == "thumbv7em-none-eabihf"


def test_command_line_beats_environment():
    config = setup_mock_rtconfig(["--target", "thumbv6m-none-eabi", "-t", "thumbv7m-none-eabi",
                                  "--host", "thumbv7m-none-eabi"],
                                 {"TARGET": "thumbv7em-none-eabihf", "HOST": "x86_64-unknown-linux-gnu"})
    assert config.target == "thumbv7m-none-eabi"
    assert config.required_target == "thumbv7m-none-eabi"
    assert not config.is_cross_compiling


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        pytest.param([], RtBuildAction.BUILD, id="default"),
        pytest.param(["--build"], RtBuildAction.BUILD, id="build"),
        pytest.param(["--list-sources"], RtBuildAction.LIST_SOURCES, id="list-sources"),
        pytest.param(["--print-flags"], RtBuildAction.PRINT_FLAGS, id="print-flags"),
        pytest.param(["--dump-configuration"], RtBuildAction.DUMP_CONFIGURATION, id="dump-configuration"),
        pytest.param(["--action", "print-flags"], RtBuildAction.PRINT_FLAGS, id="action-name"),
        pytest.param(["--build", "--print-flags"], RtBuildAction.PRINT_FLAGS, id="last-one-wins"),
    ],
)
def test_actions(args: "list[str]", expected: RtBuildAction):
    assert setup_mock_rtconfig(args).action is expected


def test_soft_float_policy_option():
    config = setup_mock_rtconfig(["--soft-float-policy", "hard-float-suffix"])
    assert config.soft_float_policy is SoftFloatPolicy.HARD_FLOAT_SUFFIX
    with pytest.raises(KeyError, match="SoftFloatPolicy: use one of"):
        setup_mock_rtconfig(["--soft-float-policy", "sometimes"])


def test_bool_options():
    config = setup_mock_rtconfig(["--skip-clone", "-p", "-v", "--no-quiet"])
    assert config.skip_clone
    assert config.pretend
    assert config.verbose
    assert not config.quiet
    assert not setup_mock_rtconfig(["--skip-clone", "--no-skip-clone"]).skip_clone


def test_verbose_and_quiet_are_exclusive():
    with pytest.raises(ConfigurationError, match="mutually exclusive"):
        setup_mock_rtconfig(["--verbose", "--quiet"])


def test_missing_target():
    config = setup_mock_rtconfig([], {"HOST": "x86_64-unknown-linux-gnu"})
    with pytest.raises(ConfigurationError, match="^TARGET not set$"):
        _ = config.required_target


def test_missing_host():
    config = setup_mock_rtconfig(["--target", "thumbv6m-none-eabi"])
    with pytest.raises(ConfigurationError, match="^HOST not set$"):
        _ = config.is_cross_compiling


def test_paths_from_command_line_are_absolute():
    config = setup_mock_rtconfig(["--source-dir", "compiler-rt", "--build-dir", "~/obj"], {"HOME": "/home/user"})
    assert config.source_dir == Path.cwd() / "compiler-rt"
    assert config.build_dir.is_absolute()


def test_json_config(tmp_path: Path):
    config_file = _write_config(tmp_path / "rtbuild.json", {
        "target": "thumbv6m-none-eabi",
        "output-dir": "out",
        "soft-float-policy": "hard-float-suffix",
        "skip-clone": True,
    })
    config = setup_mock_rtconfig([], {"TARGET": "thumbv7em-none-eabihf"}, config_file=config_file)
    # JSON beats the environment, relative paths are resolved against the config file
    assert config.target == "thumbv6m-none-eabi"
    assert config.output_dir == tmp_path / "out"
    assert config.build_dir == tmp_path / "out" / "obj"
    assert config.soft_float_policy is SoftFloatPolicy.HARD_FLOAT_SUFFIX
    assert config.skip_clone
    # and the command line beats JSON
    config = setup_mock_rtconfig(["--target", "thumbv7m-none-eabi", "--output-dir", "/out"],
                                 config_file=config_file)
    assert config.target == "thumbv7m-none-eabi"
    assert config.output_dir == Path("/out")


def test_json_config_with_comments(tmp_path: Path):
    config_file = tmp_path / "rtbuild.json"
    config_file.write_text('{\n# comment\n  // another comment\n  "archive-name": "libbuiltins.a"\n}\n',
                           encoding="utf-8")
    config = setup_mock_rtconfig([], config_file=config_file)
    assert config.archive_name == "libbuiltins.a"


def test_json_config_errors(tmp_path: Path):
    with pytest.raises(ConfigurationError, match="^Option 'pretend' cannot be used in the config file ") as excinfo:
        setup_mock_rtconfig([], config_file=_write_config(tmp_path / "pretend.json", {"pretend": True}))
    assert excinfo.value.fixit_hint == "Pass --pretend on the command line instead"
    with pytest.raises(ConfigurationError, match="must contain a JSON object"):
        setup_mock_rtconfig([], config_file=_write_config(tmp_path / "list.json", ["target"]))
    with pytest.raises(ConfigurationError, match="does-not-exist.json does not exist") as excinfo:
        setup_mock_rtconfig([], config_file=tmp_path / "does-not-exist.json")
    assert "--config-file" in excinfo.value.fixit_hint
    bad_utf8 = tmp_path / "latin1.json"
    bad_utf8.write_bytes(b'{"archive-name": "\xe9"}')
    with pytest.raises(ConfigurationError, match="Could not read config file"):
        setup_mock_rtconfig([], config_file=bad_utf8)
    config = setup_mock_rtconfig([], config_file=_write_config(tmp_path / "bad-enum.json",
                                                               {"soft-float-policy": "sometimes"}))
    with pytest.raises(ConfigurationError, match="Invalid value for option 'soft-float-policy'"):
        _ = config.soft_float_policy


def test_unknown_json_key_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture):
    config = setup_mock_rtconfig([], config_file=_write_config(tmp_path / "unknown.json", {"jobs": 4}))
    assert config.archive_name == DEFAULT_ARCHIVE_NAME
    assert "Unknown config option 'jobs'" in capsys.readouterr().err


def test_dump_options():
    config = setup_mock_rtconfig(["--target", "thumbv6m-none-eabi"])
    options = config.loader.dump_options()
    assert options["target"] == "thumbv6m-none-eabi"
    assert options["soft-float-policy"] is SoftFloatPolicy.PER_SUBVARIANT
    assert options["skip-clone"] is False
