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
from .sources import SINGLE_PRECISION_FPU_CPU, THUMB_PREFIX
from ..config.target_info import TargetDescriptor

__all__ = ["compose_flags", "ARCH_FLAGS", "SINGLE_PRECISION_FPU_FLAG", "THUMB_FLAG"]

# Checked independently, every marker contained in the LLVM triple adds its -march flag
ARCH_FLAGS = (
    ("v6m", "-march=armv6-m"),
    ("v7m", "-march=armv7-m"),
    ("v7em", "-march=armv7e-m"),
)
THUMB_FLAG = "-mthumb"
SINGLE_PRECISION_FPU_FLAG = "-mfpu=fpv4-sp-d16"


def compose_flags(descriptor: TargetDescriptor) -> "tuple[str, ...]":
    llvm_target = descriptor.canonical_low_level_name()
    cpu = descriptor.cpu()
    result = []
    # ARM arch optimization
    if descriptor.architecture_is("arm"):
        result.extend(flag for marker, flag in ARCH_FLAGS if marker in llvm_target)
    # CPU optimization
    if cpu is not None:
        result.append("-mcpu=" + cpu)
    if llvm_target.startswith(THUMB_PREFIX):
        result.append(THUMB_FLAG)
    # FPU
    if cpu == SINGLE_PRECISION_FPU_CPU and not descriptor.requests_soft_float():
        result.append(SINGLE_PRECISION_FPU_FLAG)
    return tuple(result)
