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
import os
import typing
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .target_spec import TargetSpec, find_target_spec

__all__ = ["TargetInfo", "DeclaredTargetInfo", "InferredTargetInfo", "TargetDescriptor", "FREESTANDING_OS",
           "SOFT_FLOAT_FEATURE"]

FREESTANDING_OS = "none"
SOFT_FLOAT_FEATURE = "+soft-float"


class TargetInfo(ABC):
    """Answers capability queries for a target, either from a spec file or from the target name"""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def architecture_is(self, arch: str) -> bool: ...

    @abstractmethod
    def operating_system_is(self, os_name: str) -> bool: ...

    @abstractmethod
    def cpu(self) -> Optional[str]: ...

    @abstractmethod
    def features(self) -> Optional[str]: ...

    @abstractmethod
    def canonical_low_level_name(self) -> str: ...

    @property
    def spec(self) -> Optional[TargetSpec]:
        return None


class DeclaredTargetInfo(TargetInfo):
    def __init__(self, name: str, spec: TargetSpec) -> None:
        super().__init__(name)
        self._spec = spec

    @property
    def spec(self) -> TargetSpec:
        return self._spec

    def architecture_is(self, arch: str) -> bool:
        return self._spec.arch == arch

    def operating_system_is(self, os_name: str) -> bool:
        return self._spec.os == os_name

    def cpu(self) -> Optional[str]:
        return self._spec.cpu

    def features(self) -> Optional[str]:
        return self._spec.features

    def canonical_low_level_name(self) -> str:
        # Spec files for custom targets normally set llvm-target, but fall back to the name if they don't
        llvm_target = self._spec.llvm_target
        return llvm_target if llvm_target is not None else self.name


class InferredTargetInfo(TargetInfo):
    """Fallback for targets without a spec file: all queries are substring checks on the target name"""

    def architecture_is(self, arch: str) -> bool:
        return arch in self.name

    def operating_system_is(self, os_name: str) -> bool:
        return os_name in self.name

    def cpu(self) -> Optional[str]:
        return None  # can't be inferred from the triple

    def features(self) -> Optional[str]:
        return None

    def canonical_low_level_name(self) -> str:
        # TODO: handle built-in targets whose LLVM triple differs from the name (e.g. aarch64-apple-ios -> arm64-...)
        return self.name


class TargetDescriptor:
    def __init__(self, name: str, spec: "Optional[TargetSpec]" = None) -> None:
        self.name = name
        self.info: TargetInfo = DeclaredTargetInfo(name, spec) if spec is not None else InferredTargetInfo(name)

    @classmethod
    def from_name(cls, name: str, *, search_path: "Optional[Path]" = None,
                  cwd: "Optional[Path]" = None) -> "TargetDescriptor":
        """
        Look for <name>.json in the working directory first and then in search_path (usually $RUST_TARGET_PATH).
        Raises TargetSpecError if a spec file exists but cannot be parsed.
        """
        if cwd is None:
            cwd = Path(os.getcwd())
        return cls(name, find_target_spec(name, [cwd, search_path]))

    @property
    def spec(self) -> Optional[TargetSpec]:
        return self.info.spec

    @property
    def has_spec(self) -> bool:
        return self.info.spec is not None

    def architecture_is(self, arch: str) -> bool:
        return self.info.architecture_is(arch)

    def operating_system_is(self, os_name: str) -> bool:
        return self.info.operating_system_is(os_name)

    def is_freestanding(self) -> bool:
        return self.operating_system_is(FREESTANDING_OS)

    def cpu(self) -> Optional[str]:
        return self.info.cpu()

    def features(self) -> Optional[str]:
        return self.info.features()

    def has_feature(self, feature: str) -> bool:
        features = self.features()
        return features is not None and feature in features

    def requests_soft_float(self) -> bool:
        return self.has_feature(SOFT_FLOAT_FEATURE)

    def canonical_low_level_name(self) -> str:
        return self.info.canonical_low_level_name()

    def linker(self) -> Optional[str]:
        spec = self.info.spec
        return spec.linker if spec is not None else None

    def __repr__(self) -> str:
        kind = "declared" if self.has_spec else "inferred"
        return f"<{self.__class__.__name__} {self.name} ({kind})>"

    def __eq__(self, other: typing.Any) -> bool:
        if not isinstance(other, TargetDescriptor):
            return NotImplemented
        return self.name == other.name and self.spec == other.spec

    def __hash__(self) -> int:
        return hash(self.name)
