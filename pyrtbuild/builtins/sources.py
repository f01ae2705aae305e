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
from typing import Optional

from .catalog import (
    ARM_SOURCES,
    ARMV6M_BLACKLIST,
    GENERIC_SOURCES,
    OS_NONE_BLACKLIST,
    SOFT_FLOAT_BLACKLIST,
    SP_FPU_BLACKLIST,
    THUMB_BLACKLIST,
)
from ..config.target_info import TargetDescriptor

__all__ = ["SoftFloatPolicy", "SourceSet", "ExclusionReason", "compose_sources", "compose_source_groups",
           "arch_source_exclusion", "generic_source_exclusion", "THUMB_PREFIX", "ARMV6M_PREFIX", "ARMV7EM_PREFIX",
           "HARD_FLOAT_SUFFIX", "SINGLE_PRECISION_FPU_CPU"]

THUMB_PREFIX = "thumb"
ARMV6M_PREFIX = "thumbv6m"
ARMV7EM_PREFIX = "thumbv7em"
HARD_FLOAT_SUFFIX = "hf"
# Cortex-M4F only has a single precision FPU (fpv4-sp-d16)
SINGLE_PRECISION_FPU_CPU = "cortex-m4"


class SoftFloatPolicy(Enum):
    """
    Decides whether an ARM target has to do floating point in software and therefore can't use the VFP routines.

    The two policies disagree for Thumb targets without an explicit CPU (e.g. thumbv7em-none-eabihf without a spec
    file), so the caller has to pick one.
    """

    # Only thumbv7em* targets are checked: soft float if +soft-float is requested or no CPU is known.
    PER_SUBVARIANT = "per-subvariant"
    # Any target whose LLVM triple does not end in "hf" (or that requests +soft-float) uses soft float.
    HARD_FLOAT_SUFFIX = "hard-float-suffix"

    def uses_soft_float(self, descriptor: TargetDescriptor) -> bool:
        llvm_target = descriptor.canonical_low_level_name()
        if self is SoftFloatPolicy.PER_SUBVARIANT:
            if not llvm_target.startswith(ARMV7EM_PREFIX):
                return False
            return descriptor.requests_soft_float() or descriptor.cpu() is None
        elif self is SoftFloatPolicy.HARD_FLOAT_SUFFIX:
            return descriptor.requests_soft_float() or not llvm_target.endswith(HARD_FLOAT_SUFFIX)
        else:
            raise NotImplementedError(self)


class ExclusionReason(Enum):
    FREESTANDING_OS = "requires a hosted operating system"
    THUMB = "not supported in Thumb mode"
    ARMV6M = "not supported on ARMv6-M"
    SOFT_FLOAT = "requires a hardware FPU"
    SINGLE_PRECISION_FPU = "requires a double precision FPU"


class SourceSet(typing.NamedTuple):
    generic: "tuple[str, ...]"
    arch_specific: "tuple[str, ...]"

    def all(self) -> "tuple[str, ...]":
        return self.generic + self.arch_specific


def generic_source_exclusion(descriptor: TargetDescriptor, source: str) -> Optional[ExclusionReason]:
    if descriptor.is_freestanding() and source in OS_NONE_BLACKLIST:
        return ExclusionReason.FREESTANDING_OS
    return None


def arch_source_exclusion(descriptor: TargetDescriptor, source: str,
                          policy: SoftFloatPolicy = SoftFloatPolicy.PER_SUBVARIANT) -> Optional[ExclusionReason]:
    """
    :return: The first reason why the ARM source file must not be compiled for descriptor or None if it can be used
    """
    llvm_target = descriptor.canonical_low_level_name()
    if llvm_target.startswith(THUMB_PREFIX) and source in THUMB_BLACKLIST:
        return ExclusionReason.THUMB
    if llvm_target.startswith(ARMV6M_PREFIX) and source in ARMV6M_BLACKLIST:
        return ExclusionReason.ARMV6M
    if source in SOFT_FLOAT_BLACKLIST and policy.uses_soft_float(descriptor):
        return ExclusionReason.SOFT_FLOAT
    if descriptor.cpu() == SINGLE_PRECISION_FPU_CPU and source in SP_FPU_BLACKLIST:
        return ExclusionReason.SINGLE_PRECISION_FPU
    return None


def compose_source_groups(descriptor: TargetDescriptor,
                          policy: SoftFloatPolicy = SoftFloatPolicy.PER_SUBVARIANT) -> SourceSet:
    generic = tuple(s for s in GENERIC_SOURCES if generic_source_exclusion(descriptor, s) is None)
    if descriptor.architecture_is("arm"):
        arch_specific = tuple(s for s in ARM_SOURCES if arch_source_exclusion(descriptor, s, policy) is None)
    else:
        arch_specific = tuple()
    return SourceSet(generic=generic, arch_specific=arch_specific)


def compose_sources(descriptor: TargetDescriptor,
                    policy: SoftFloatPolicy = SoftFloatPolicy.PER_SUBVARIANT) -> "tuple[str, ...]":
    """All builtins sources to compile for descriptor (generic ones first, each group in catalog order)"""
    return compose_source_groups(descriptor, policy).all()
