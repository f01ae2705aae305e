from pathlib import Path

import pytest

from .setup_mock_rtconfig import write_target_spec


@pytest.fixture
def spec_dir(tmp_path: Path) -> Path:
    """A RUST_TARGET_PATH-style directory that is not the working directory"""
    result = tmp_path / "target-specs"
    result.mkdir()
    return result


@pytest.fixture
def cortex_m4_spec(spec_dir: Path) -> Path:
    return write_target_spec(spec_dir, "thumbv7em-none-eabihf", arch="arm", os="none", cpu="cortex-m4",
                             llvm_target="thumbv7em-none-eabihf", linker="arm-none-eabi-gcc")


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Target specs are looked up in the working directory first
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setenv("NO_COLOR", "1")
