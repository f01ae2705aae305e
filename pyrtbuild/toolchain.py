#
# Copyright (c) 2016 Alex Richardson
# All rights reserved.
#
# This software was developed by SRI International and the University of
# Cambridge Computer Laboratory under DARPA/AFRL contract FA8750-10-C-0237
# ("CTSRD"), as part of the DARPA CRASH research programme.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions
# are met:
# 1. Redistributions of source code must retain the above copyright
#    notice, this list of conditions and the following disclaimer.
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE AUTHOR AND CONTRIBUTORS ``AS IS'' AND
# ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED.  IN NO EVENT SHALL THE AUTHOR OR CONTRIBUTORS BE LIABLE
# FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL
# DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS
# OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION)
# HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT
# LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY
# OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF
# SUCH DAMAGE.
#
import typing
from enum import Enum

from .config.target_info import TargetDescriptor
from .utils import ConfigurationError

__all__ = ["ToolRole", "ToolchainResolver", "tool_environment_variable", "GCC_SUFFIX"]

GCC_SUFFIX = "gcc"


class ToolRole(Enum):
    AR = "AR"
    CC = "CC"

    def default_tool_name(self) -> str:
        if self is ToolRole.AR:
            return "ar"
        return "gcc"


def tool_environment_variable(role: ToolRole, target: str) -> str:
    """The per-target override variable, e.g. CC_thumbv7em_none_eabihf"""
    return role.value + "_" + target.replace("-", "_")


class ToolchainResolver:
    """
    Finds the archiver/compiler to use when cross-compiling. Native builds use the default toolchain and must not
    call resolve().
    """

    def __init__(self, environment: "typing.Mapping[str, str]") -> None:
        self.environment = environment

    def resolve(self, role: ToolRole, tool_name: str, descriptor: TargetDescriptor) -> str:
        tool_env = tool_environment_variable(role, descriptor.name)
        override = self.environment.get(tool_env)
        if override is not None:
            return override
        linker = descriptor.linker()
        if linker is not None and linker.endswith(GCC_SUFFIX):
            # arm-none-eabi-gcc -> arm-none-eabi-ar
            return linker[:-len(GCC_SUFFIX)] + tool_name
        raise ConfigurationError(tool_env + " not set",
                                 fixit_hint="Set " + tool_env + " or add a gcc-style \"linker\" entry to the "
                                            "target specification for " + descriptor.name)

    def resolve_default(self, role: ToolRole, descriptor: TargetDescriptor) -> str:
        return self.resolve(role, role.default_tool_name(), descriptor)
