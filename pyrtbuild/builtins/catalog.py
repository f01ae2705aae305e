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
"""
The compiler-rt builtins sources (relative to lib/builtins) that are compiled into libcompiler-rt.a.

This list matches the builtins manifest of the compiler-rt revision we fetch. When updating the
revision, update these lists rather than trying to discover the files at build time.
"""

__all__ = ["GENERIC_SOURCES", "ARM_SOURCES", "THUMB_BLACKLIST", "ARMV6M_BLACKLIST", "OS_NONE_BLACKLIST",
           "SOFT_FLOAT_BLACKLIST", "SP_FPU_BLACKLIST", "BUILTINS_SUBDIRECTORY"]

BUILTINS_SUBDIRECTORY = "lib/builtins"

# atomic.c is not listed: it may only be compiled if the compiler understands _Atomic
GENERIC_SOURCES = (
    "absvdi2.c",
    "absvsi2.c",
    "absvti2.c",
    "adddf3.c",
    "addsf3.c",
    "addtf3.c",
    "addvdi3.c",
    "addvsi3.c",
    "addvti3.c",
    "apple_versioning.c",
    "ashldi3.c",
    "ashlti3.c",
    "ashrdi3.c",
    "ashrti3.c",
    "clear_cache.c",
    "clzdi2.c",
    "clzsi2.c",
    "clzti2.c",
    "cmpdi2.c",
    "cmpti2.c",
    "comparedf2.c",
    "comparesf2.c",
    "ctzdi2.c",
    "ctzsi2.c",
    "ctzti2.c",
    "divdc3.c",
    "divdf3.c",
    "divdi3.c",
    "divmoddi4.c",
    "divmodsi4.c",
    "divsc3.c",
    "divsf3.c",
    "divsi3.c",
    "divtc3.c",
    "divti3.c",
    "divtf3.c",
    "divxc3.c",
    "enable_execute_stack.c",
    "eprintf.c",
    "extendsfdf2.c",
    "extendhfsf2.c",
    "ffsdi2.c",
    "ffsti2.c",
    "fixdfdi.c",
    "fixdfsi.c",
    "fixdfti.c",
    "fixsfdi.c",
    "fixsfsi.c",
    "fixsfti.c",
    "fixunsdfdi.c",
    "fixunsdfsi.c",
    "fixunsdfti.c",
    "fixunssfdi.c",
    "fixunssfsi.c",
    "fixunssfti.c",
    "fixunsxfdi.c",
    "fixunsxfsi.c",
    "fixunsxfti.c",
    "fixxfdi.c",
    "fixxfti.c",
    "floatdidf.c",
    "floatdisf.c",
    "floatdixf.c",
    "floatsidf.c",
    "floatsisf.c",
    "floattidf.c",
    "floattisf.c",
    "floattixf.c",
    "floatundidf.c",
    "floatundisf.c",
    "floatundixf.c",
    "floatunsidf.c",
    "floatunsisf.c",
    "floatuntidf.c",
    "floatuntisf.c",
    "floatuntixf.c",
    "int_util.c",
    "lshrdi3.c",
    "lshrti3.c",
    "moddi3.c",
    "modsi3.c",
    "modti3.c",
    "muldc3.c",
    "muldf3.c",
    "muldi3.c",
    "mulodi4.c",
    "mulosi4.c",
    "muloti4.c",
    "mulsc3.c",
    "mulsf3.c",
    "multi3.c",
    "multf3.c",
    "mulvdi3.c",
    "mulvsi3.c",
    "mulvti3.c",
    "mulxc3.c",
    "negdf2.c",
    "negdi2.c",
    "negsf2.c",
    "negti2.c",
    "negvdi2.c",
    "negvsi2.c",
    "negvti2.c",
    "paritydi2.c",
    "paritysi2.c",
    "parityti2.c",
    "popcountdi2.c",
    "popcountsi2.c",
    "popcountti2.c",
    "powidf2.c",
    "powisf2.c",
    "powitf2.c",
    "powixf2.c",
    "subdf3.c",
    "subsf3.c",
    "subvdi3.c",
    "subvsi3.c",
    "subvti3.c",
    "subtf3.c",
    "trampoline_setup.c",
    "truncdfhf2.c",
    "truncdfsf2.c",
    "truncsfhf2.c",
    "ucmpdi2.c",
    "ucmpti2.c",
    "udivdi3.c",
    "udivmoddi4.c",
    "udivmodsi4.c",
    "udivmodti4.c",
    "udivsi3.c",
    "udivti3.c",
    "umoddi3.c",
    "umodsi3.c",
    "umodti3.c",
)

ARM_SOURCES = (
    "arm/adddf3vfp.S",
    "arm/addsf3vfp.S",
    "arm/aeabi_cdcmp.S",
    "arm/aeabi_cdcmpeq_check_nan.c",
    "arm/aeabi_cfcmp.S",
    "arm/aeabi_cfcmpeq_check_nan.c",
    "arm/aeabi_dcmp.S",
    "arm/aeabi_div0.c",
    "arm/aeabi_drsub.c",
    "arm/aeabi_fcmp.S",
    "arm/aeabi_frsub.c",
    "arm/aeabi_idivmod.S",
    "arm/aeabi_ldivmod.S",
    "arm/aeabi_memcmp.S",
    "arm/aeabi_memcpy.S",
    "arm/aeabi_memmove.S",
    "arm/aeabi_memset.S",
    "arm/aeabi_uidivmod.S",
    "arm/aeabi_uldivmod.S",
    "arm/bswapdi2.S",
    "arm/bswapsi2.S",
    "arm/clzdi2.S",
    "arm/clzsi2.S",
    "arm/comparesf2.S",
    "arm/divdf3vfp.S",
    "arm/divmodsi4.S",
    "arm/divsf3vfp.S",
    "arm/divsi3.S",
    "arm/eqdf2vfp.S",
    "arm/eqsf2vfp.S",
    "arm/extendsfdf2vfp.S",
    "arm/fixdfsivfp.S",
    "arm/fixsfsivfp.S",
    "arm/fixunsdfsivfp.S",
    "arm/fixunssfsivfp.S",
    "arm/floatsidfvfp.S",
    "arm/floatsisfvfp.S",
    "arm/floatunssidfvfp.S",
    "arm/floatunssisfvfp.S",
    "arm/gedf2vfp.S",
    "arm/gesf2vfp.S",
    "arm/gtdf2vfp.S",
    "arm/gtsf2vfp.S",
    "arm/ledf2vfp.S",
    "arm/lesf2vfp.S",
    "arm/ltdf2vfp.S",
    "arm/ltsf2vfp.S",
    "arm/modsi3.S",
    "arm/muldf3vfp.S",
    "arm/mulsf3vfp.S",
    "arm/nedf2vfp.S",
    "arm/negdf2vfp.S",
    "arm/negsf2vfp.S",
    "arm/nesf2vfp.S",
    "arm/restore_vfp_d8_d15_regs.S",
    "arm/save_vfp_d8_d15_regs.S",
    "arm/subdf3vfp.S",
    "arm/subsf3vfp.S",
    "arm/switch16.S",
    "arm/switch32.S",
    "arm/switch8.S",
    "arm/switchu8.S",
    "arm/sync_fetch_and_add_4.S",
    "arm/sync_fetch_and_add_8.S",
    "arm/sync_fetch_and_and_4.S",
    "arm/sync_fetch_and_and_8.S",
    "arm/sync_fetch_and_max_4.S",
    "arm/sync_fetch_and_max_8.S",
    "arm/sync_fetch_and_min_4.S",
    "arm/sync_fetch_and_min_8.S",
    "arm/sync_fetch_and_nand_4.S",
    "arm/sync_fetch_and_nand_8.S",
    "arm/sync_fetch_and_or_4.S",
    "arm/sync_fetch_and_or_8.S",
    "arm/sync_fetch_and_sub_4.S",
    "arm/sync_fetch_and_sub_8.S",
    "arm/sync_fetch_and_umax_4.S",
    "arm/sync_fetch_and_umax_8.S",
    "arm/sync_fetch_and_umin_4.S",
    "arm/sync_fetch_and_umin_8.S",
    "arm/sync_fetch_and_xor_4.S",
    "arm/sync_fetch_and_xor_8.S",
    "arm/sync_synchronize.S",
    "arm/truncdfsf2vfp.S",
    "arm/udivmodsi4.S",
    "arm/udivsi3.S",
    "arm/umodsi3.S",
    "arm/unorddf2vfp.S",
    "arm/unordsf2vfp.S",
)

# ARM mode only, not supported when compiling for Thumb
THUMB_BLACKLIST = frozenset([
    "arm/aeabi_cdcmp.S",
    "arm/aeabi_cfcmp.S",
    "arm/eqdf2vfp.S",
    "arm/gedf2vfp.S",
    "arm/gtdf2vfp.S",
    "arm/ledf2vfp.S",
    "arm/ltdf2vfp.S",
    "arm/ltsf2vfp.S",
    "arm/nedf2vfp.S",
    "arm/nesf2vfp.S",
    "arm/unorddf2vfp.S",
    "arm/unordsf2vfp.S",
])

# ARMv6-M only implements a subset of Thumb-2
ARMV6M_BLACKLIST = frozenset([
    "arm/aeabi_dcmp.S",
    "arm/aeabi_fcmp.S",
    "arm/aeabi_ldivmod.S",
    "arm/aeabi_uldivmod.S",
    "arm/clzdi2.S",
    "arm/clzsi2.S",
    "arm/comparesf2.S",
    "arm/divmodsi4.S",
    "arm/divsi3.S",
    "arm/modsi3.S",
    "arm/negdf2vfp.S",
    "arm/negsf2vfp.S",
    "arm/switch16.S",
    "arm/switch32.S",
    "arm/switch8.S",
    "arm/switchu8.S",
    "arm/sync_fetch_and_add_4.S",
    "arm/sync_fetch_and_and_4.S",
    "arm/sync_fetch_and_max_4.S",
    "arm/sync_fetch_and_min_4.S",
    "arm/sync_fetch_and_nand_4.S",
    "arm/sync_fetch_and_or_4.S",
    "arm/sync_fetch_and_sub_4.S",
    "arm/sync_fetch_and_umax_4.S",
    "arm/sync_fetch_and_umin_4.S",
    "arm/sync_fetch_and_xor_4.S",
    "arm/udivmodsi4.S",
    "arm/udivsi3.S",
    "arm/umodsi3.S",
])

# Needs a hosting OS (mprotect/VirtualProtect)
OS_NONE_BLACKLIST = frozenset([
    "enable_execute_stack.c",
])

# VFP routines that can't be used without a hardware FPU
SOFT_FLOAT_BLACKLIST = frozenset([
    "arm/adddf3vfp.S",
    "arm/addsf3vfp.S",
    "arm/divdf3vfp.S",
    "arm/divsf3vfp.S",
    "arm/eqdf2vfp.S",
    "arm/eqsf2vfp.S",
    "arm/extendsfdf2vfp.S",
    "arm/fixdfsivfp.S",
    "arm/fixsfsivfp.S",
    "arm/fixunsdfsivfp.S",
    "arm/fixunssfsivfp.S",
    "arm/floatsidfvfp.S",
    "arm/floatsisfvfp.S",
    "arm/floatunssidfvfp.S",
    "arm/floatunssisfvfp.S",
    "arm/gedf2vfp.S",
    "arm/gesf2vfp.S",
    "arm/gtdf2vfp.S",
    "arm/gtsf2vfp.S",
    "arm/ledf2vfp.S",
    "arm/lesf2vfp.S",
    "arm/ltdf2vfp.S",
    "arm/ltsf2vfp.S",
    "arm/muldf3vfp.S",
    "arm/mulsf3vfp.S",
    "arm/nedf2vfp.S",
    "arm/nesf2vfp.S",
    "arm/restore_vfp_d8_d15_regs.S",
    "arm/save_vfp_d8_d15_regs.S",
    "arm/subdf3vfp.S",
    "arm/subsf3vfp.S",
    "arm/truncdfsf2vfp.S",
    "arm/unorddf2vfp.S",
    "arm/unordsf2vfp.S",
])

# These intrinsics require a double precision FPU
SP_FPU_BLACKLIST = frozenset([
    "arm/adddf3vfp.S",
    "arm/divdf3vfp.S",
    "arm/eqsf2vfp.S",
    "arm/extendsfdf2vfp.S",
    "arm/fixdfsivfp.S",
    "arm/fixunsdfsivfp.S",
    "arm/floatsidfvfp.S",
    "arm/floatunssidfvfp.S",
    "arm/gesf2vfp.S",
    "arm/gtsf2vfp.S",
    "arm/lesf2vfp.S",
    "arm/muldf3vfp.S",
    "arm/subdf3vfp.S",
    "arm/truncdfsf2vfp.S",
])
