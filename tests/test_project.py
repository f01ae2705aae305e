import json
import os
import sys
from pathlib import Path

import pytest

from pyrtbuild.__main__ import main, real_main
from pyrtbuild.config.target_info import TargetDescriptor
from pyrtbuild.project import BuildCompilerRtBuiltins
from pyrtbuild.toolchain import ToolRole
from pyrtbuild.utils import ConfigurationError, FetchError

from .setup_mock_rtconfig import setup_mock_rtconfig, write_target_spec

M4_TARGET = "thumbv7em-none-eabihf"
HOST = "x86_64-unknown-linux-gnu"


def _cross_config(spec_dir: Path, *args: str, **environment: str):
    env = {"TARGET": M4_TARGET, "HOST": HOST, "RUST_TARGET_PATH": str(spec_dir), **environment}
    return setup_mock_rtconfig(["--pretend", *args], env)


def test_object_file_name():
    assert BuildCompilerRtBuiltins.object_file_name("arm/divsi3.S") == "arm/divsi3.o"
    assert BuildCompilerRtBuiltins.object_file_name("absvdi2.c") == "absvdi2.o"


def test_descriptor_from_config(spec_dir: Path, cortex_m4_spec: Path):
    project = BuildCompilerRtBuiltins(_cross_config(spec_dir))
    assert project.descriptor.has_spec
    assert project.descriptor.spec.path == cortex_m4_spec
    assert project.flags == ("-march=armv7e-m", "-mcpu=cortex-m4", "-mthumb", "-mfpu=fpv4-sp-d16")
    assert "arm/addsf3vfp.S" in project.sources


def test_cross_tools(spec_dir: Path, cortex_m4_spec: Path):
    project = BuildCompilerRtBuiltins(_cross_config(spec_dir, CC_thumbv7em_none_eabihf="clang"))
    assert project.tool(ToolRole.CC) == "clang"
    assert project.tool(ToolRole.AR) == "arm-none-eabi-ar"


def test_cross_tools_unresolved(spec_dir: Path):
    project = BuildCompilerRtBuiltins(_cross_config(spec_dir))
    assert not project.descriptor.has_spec
    with pytest.raises(ConfigurationError, match="^CC_thumbv7em_none_eabihf not set$"):
        project.tool(ToolRole.CC)


def test_native_tools_ignore_cross_overrides():
    env = {"TARGET": HOST, "HOST": HOST, "CC_x86_64_unknown_linux_gnu": "never-used-gcc"}
    project = BuildCompilerRtBuiltins(setup_mock_rtconfig(["--pretend"], env))
    assert project.tool(ToolRole.CC) == "cc"
    assert project.tool(ToolRole.AR) == "ar"
    env.update(CC="clang", AR="llvm-ar")
    project = BuildCompilerRtBuiltins(setup_mock_rtconfig(["--pretend"], env))
    assert project.tool(ToolRole.CC) == "clang"
    assert project.tool(ToolRole.AR) == "llvm-ar"


def test_explicit_descriptor_skips_lookup(spec_dir: Path, cortex_m4_spec: Path):
    project = BuildCompilerRtBuiltins(_cross_config(spec_dir), TargetDescriptor(M4_TARGET))
    assert not project.descriptor.has_spec


def test_pretend_cross_build(tmp_path: Path, spec_dir: Path, cortex_m4_spec: Path, capsys: pytest.CaptureFixture):
    src = tmp_path / "compiler-rt"
    out = tmp_path / "out"
    config = _cross_config(spec_dir, "-v", "--source-dir", str(src), "--output-dir", str(out))
    archive = BuildCompilerRtBuiltins(config).process()
    assert archive == out / "libcompiler-rt.a"
    # Nothing is executed with --pretend
    assert not src.exists()
    assert not out.exists()
    stdout = capsys.readouterr().out
    assert "git clone --depth 1 https://github.com/llvm-mirror/compiler-rt " + str(src) in stdout
    flags = "-march=armv7e-m -mcpu=cortex-m4 -mthumb -mfpu=fpv4-sp-d16"
    assert (f"arm-none-eabi-gcc {flags} -c -o {out}/obj/absvdi2.o {src}/lib/builtins/absvdi2.c") in stdout
    assert (f"arm-none-eabi-gcc {flags} -c -o {out}/obj/arm/addsf3vfp.o "
            f"{src}/lib/builtins/arm/addsf3vfp.S") in stdout
    assert "enable_execute_stack" not in stdout
    assert "adddf3vfp" not in stdout
    assert f"arm-none-eabi-ar crs {out}/libcompiler-rt.a {out}/obj/absvdi2.o" in stdout
    assert "Wrote " + str(archive) in stdout


def test_pretend_native_build(tmp_path: Path, capsys: pytest.CaptureFixture):
    src = tmp_path / "compiler-rt"
    (src / ".git").mkdir(parents=True)
    out = tmp_path / "out"
    env = {"TARGET": HOST, "HOST": HOST, "OUT_DIR": str(out), "CC": "clang"}
    config = setup_mock_rtconfig(["--pretend", "--verbose", "--source-dir", str(src)], env)
    BuildCompilerRtBuiltins(config).process()
    stdout = capsys.readouterr().out
    # The existing checkout is reused
    assert "git clone" not in stdout
    assert f"clang -c -o {out}/obj/absvdi2.o {src}/lib/builtins/absvdi2.c" in stdout
    assert f"{src}/lib/builtins/enable_execute_stack.c" in stdout
    assert "/arm/" not in stdout
    assert f"ar crs {out}/libcompiler-rt.a" in stdout


def test_temporary_checkout(spec_dir: Path, cortex_m4_spec: Path, capsys: pytest.CaptureFixture):
    BuildCompilerRtBuiltins(_cross_config(spec_dir)).process()
    stdout = capsys.readouterr().out
    assert "git clone --depth 1 https://github.com/llvm-mirror/compiler-rt /" in stdout
    assert "compiler-rt" in stdout


def test_quiet_build(spec_dir: Path, cortex_m4_spec: Path, capsys: pytest.CaptureFixture):
    BuildCompilerRtBuiltins(_cross_config(spec_dir, "--quiet")).process()
    assert capsys.readouterr().out == ""


def test_skip_clone_requires_checkout(tmp_path: Path, spec_dir: Path, cortex_m4_spec: Path):
    config = _cross_config(spec_dir, "--skip-clone", "--source-dir", str(tmp_path / "missing"))
    with pytest.raises(FetchError, match="Sources for .+ missing"):
        BuildCompilerRtBuiltins(config).process()


def test_list_sources(tmp_path: Path, capsys: pytest.CaptureFixture):
    real_main(["--list-sources", "--target", "i686-unknown-none"], {"XDG_CONFIG_HOME": str(tmp_path)})
    lines = capsys.readouterr().out.splitlines()
    assert "absvdi2.c" in lines
    assert "enable_execute_stack.c" not in lines
    assert not any(line.startswith("arm/") for line in lines)


def test_print_flags(tmp_path: Path, spec_dir: Path, cortex_m4_spec: Path, capsys: pytest.CaptureFixture):
    real_main(["--print-flags"], {"TARGET": M4_TARGET, "RUST_TARGET_PATH": str(spec_dir),
                                  "XDG_CONFIG_HOME": str(tmp_path)})
    assert capsys.readouterr().out == "-march=armv7e-m -mcpu=cortex-m4 -mthumb -mfpu=fpv4-sp-d16\n"


def test_print_flags_spec_in_working_directory(tmp_path: Path, capsys: pytest.CaptureFixture):
    write_target_spec(Path(os.getcwd()), "thumbv6m-none-eabi", arch="arm", os="none", cpu="cortex-m0")
    real_main(["--print-flags", "--target", "thumbv6m-none-eabi"], {"XDG_CONFIG_HOME": str(tmp_path)})
    assert capsys.readouterr().out == "-march=armv6-m -mcpu=cortex-m0 -mthumb\n"


def test_dump_configuration(tmp_path: Path, capsys: pytest.CaptureFixture):
    real_main(["--dump-configuration", "--target", M4_TARGET], {"XDG_CONFIG_HOME": str(tmp_path)})
    dumped = json.loads(capsys.readouterr().out)
    assert dumped["target"] == M4_TARGET
    assert dumped["soft-float-policy"] == "per-subvariant"
    assert dumped["archive-name"] == "libcompiler-rt.a"


def test_main_reports_configuration_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
                                           capsys: pytest.CaptureFixture):
    monkeypatch.setattr(sys, "argv", ["rtbuild", "--print-flags"])
    monkeypatch.delenv("TARGET", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert excinfo.value.code == 3
    stderr = capsys.readouterr().err
    assert "TARGET not set" in stderr
    assert "Possible solution: Pass --target or set the TARGET environment variable" in stderr


def test_main_reports_bad_target_spec(tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
                                      capsys: pytest.CaptureFixture):
    Path(os.getcwd(), "broken.json").write_text("{", encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["rtbuild", "--print-flags", "--target", "broken"])
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert excinfo.value.code == 3
    assert "Could not parse target specification" in capsys.readouterr().err


def test_main_reports_unreadable_target_spec(tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
                                             capsys: pytest.CaptureFixture):
    Path(os.getcwd(), "bad.json").write_bytes(b'{"arch": "\xff\xfe", "os": "none"}')
    monkeypatch.setattr(sys, "argv", ["rtbuild", "--print-flags", "--target", "bad"])
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert excinfo.value.code == 3
    assert "Could not read target specification" in capsys.readouterr().err


def test_main_reports_missing_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
                                          capsys: pytest.CaptureFixture):
    monkeypatch.setattr(sys, "argv", ["rtbuild", "--config-file", str(tmp_path / "missing.json"), "--list-sources"])
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert excinfo.value.code == 3
    err = capsys.readouterr().err
    assert "missing.json does not exist" in err
    assert "Possible solution: Pass an existing file to --config-file" in err
