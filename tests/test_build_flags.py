import pytest

from pyrtbuild.builtins.flags import compose_flags
from pyrtbuild.config.target_info import TargetDescriptor
from pyrtbuild.config.target_spec import TargetSpec


def _declared(name: str, **properties: str) -> TargetDescriptor:
    return TargetDescriptor(name, TargetSpec({k.replace("_", "-"): v for k, v in properties.items()}))


@pytest.mark.parametrize(
    ("descriptor", "expected"),
    [
        pytest.param(_declared("thumbv7em-none-eabihf", arch="arm", os="none", cpu="cortex-m4",
                               llvm_target="thumbv7em-none-eabihf"),
                     ("-march=armv7e-m", "-mcpu=cortex-m4", "-mthumb", "-mfpu=fpv4-sp-d16"), id="cortex-m4f"),
        pytest.param(_declared("thumbv7em-none-eabi", arch="arm", os="none", cpu="cortex-m4",
                               features="+soft-float"),
                     ("-march=armv7e-m", "-mcpu=cortex-m4", "-mthumb"), id="cortex-m4-soft-float"),
        pytest.param(_declared("thumbv7em-none-eabihf", arch="arm", os="none", cpu="cortex-m7"),
                     ("-march=armv7e-m", "-mcpu=cortex-m7", "-mthumb"), id="cortex-m7"),
        pytest.param(_declared("thumbv6m-none-eabi", arch="arm", os="none", cpu="cortex-m0"),
                     ("-march=armv6-m", "-mcpu=cortex-m0", "-mthumb"), id="cortex-m0"),
        pytest.param(_declared("thumbv7m-none-eabi", arch="arm", os="none", cpu="cortex-m3"),
                     ("-march=armv7-m", "-mcpu=cortex-m3", "-mthumb"), id="cortex-m3"),
        pytest.param(_declared("thumbv7m-none-eabi", arch="arm", os="none"),
                     ("-march=armv7-m", "-mthumb"), id="no-cpu"),
        pytest.param(TargetDescriptor("x86_64-unknown-linux-gnu"), (), id="x86_64-linux"),
        pytest.param(TargetDescriptor("armv7-unknown-linux-gnueabihf"), (), id="armv7-linux"),
        # Without a spec the name contains no "arm", so no -march flag is added
        pytest.param(TargetDescriptor("thumbv7em-none-eabihf"), ("-mthumb",), id="inferred-thumbv7em"),
        # The arch markers are only checked for ARM targets
        pytest.param(_declared("thumbv7m-none-eabi", arch="riscv32", os="none", cpu="generic"),
                     ("-mcpu=generic", "-mthumb"), id="non-arm-arch"),
    ],
)
def test_flags(descriptor: TargetDescriptor, expected: "tuple[str, ...]"):
    assert compose_flags(descriptor) == expected


def test_all_matching_arch_markers_are_added():
    descriptor = _declared("weird", arch="arm", os="none", llvm_target="armv6m-v7m-v7em-none-eabi")
    assert compose_flags(descriptor) == ("-march=armv6-m", "-march=armv7-m", "-march=armv7e-m")


def test_flags_are_deterministic():
    descriptor = _declared("thumbv7em-none-eabihf", arch="arm", os="none", cpu="cortex-m4")
    assert compose_flags(descriptor) == compose_flags(descriptor)
