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
from enum import Enum
from pathlib import Path
from typing import Optional

from .computed_default_value import ComputedDefaultValue
from .loader import ConfigLoader, ConfigOption
from ..builtins.sources import SoftFloatPolicy
from ..utils import ConfigBase, ConfigurationError, DoNotUseInIfStmt

__all__ = ["RtBuildAction", "RtBuildConfig", "DEFAULT_REPOSITORY_URL", "DEFAULT_ARCHIVE_NAME"]

DEFAULT_REPOSITORY_URL = "https://github.com/llvm-mirror/compiler-rt"
DEFAULT_ARCHIVE_NAME = "libcompiler-rt.a"


class RtBuildAction(Enum):
    BUILD = ("--build", "Fetch compiler-rt and build the builtins archive for the target (default)")
    LIST_SOURCES = ("--list-sources", "Print the builtins sources that would be compiled for the target and exit")
    PRINT_FLAGS = ("--print-flags", "Print the compiler flags that would be used for the target and exit")
    DUMP_CONFIGURATION = ("--dump-configuration", "Print the current configuration as JSON. This can be saved to "
                                                  "~/.config/rtbuild.json to make it persistent")

    def __init__(self, option_name, help_message) -> None:
        self.option_name = option_name
        self.help_message = help_message


class RtBuildConfig(ConfigBase):
    def __init__(self, loader: ConfigLoader) -> None:
        super().__init__(pretend=DoNotUseInIfStmt(), verbose=DoNotUseInIfStmt(), quiet=DoNotUseInIfStmt())
        loader.config = self
        self.loader = loader
        # All lookups of environment variables (e.g. CC_<target>) go through this mapping
        self.environment: "typing.Mapping[str, str]" = loader.environment

        self.pretend = loader.add_commandline_only_option("pretend", "p", type=bool, default=False,
                                                          help="Only print the commands instead of running them")
        self.action = loader.add_commandline_only_option("action", type=RtBuildAction, default=RtBuildAction.BUILD,
                                                         group=loader.action_group, metavar="ACTION",
                                                         help="The action to perform")
        for action in RtBuildAction:
            loader.action_group.add_argument(action.option_name, help=action.help_message, dest="action",
                                             action="store_const", const=action)

        self.verbose = loader.add_bool_option("verbose", "v", help="Print all commands that are executed")
        self.quiet = loader.add_bool_option("quiet", "q", help="Don't show stdout of the commands that are executed")

        # target selection
        self.target: Optional[str] = loader.add_option("target", "t", env_var="TARGET", group=loader.target_group,
                                                       help="The target to build the builtins for")
        self.host: Optional[str] = loader.add_option("host", env_var="HOST", group=loader.target_group,
                                                     help="The host triple, used to decide whether this is a cross "
                                                          "build")
        self.target_path: Optional[Path] = loader.add_optional_path_option(
            "target-path", env_var="RUST_TARGET_PATH", group=loader.target_group,
            help="Additional directory to search for <target>.json specification files (the current working "
                 "directory is always searched first)")
        self.soft_float_policy: SoftFloatPolicy = loader.add_enum_option(
            "soft-float-policy", enum_type=SoftFloatPolicy, default=SoftFloatPolicy.PER_SUBVARIANT,
            group=loader.target_group,
            help="How to decide whether an ARM target lacks a hardware FPU: 'per-subvariant' only checks thumbv7em "
                 "targets (no explicit CPU or +soft-float means soft float), 'hard-float-suffix' treats every triple "
                 "that does not end in 'hf' as soft float")

        # paths
        self.source_dir: Optional[Path] = loader.add_optional_path_option(
            "source-dir", group=loader.path_group,
            help="The compiler-rt checkout to use (default: clone into a temporary directory)")
        self.output_dir: Path = loader.add_path_option(
            "output-dir", env_var="OUT_DIR", group=loader.path_group,
            default=ComputedDefaultValue(lambda c, _: Path(os.getcwd(), "rtbuild-output"),
                                         as_string="$PWD/rtbuild-output"),
            help="The directory where the builtins archive is written")
        self.build_dir: Path = loader.add_path_option(
            "build-dir", group=loader.path_group,
            default=ComputedDefaultValue(lambda c, _: c.output_dir / "obj", as_string="<OUTPUT_DIR>/obj"),
            help="The directory for the object files (default: '<OUTPUT_DIR>/obj')")
        self.archive_name: str = loader.add_option("archive-name", default=DEFAULT_ARCHIVE_NAME,
                                                   group=loader.path_group, help="File name of the generated archive")

        # sources and toolchain
        self.repository_url: str = loader.add_option("repository-url", default=DEFAULT_REPOSITORY_URL,
                                                     group=loader.toolchain_group,
                                                     help="The compiler-rt repository to clone")
        self.skip_clone = loader.add_bool_option("skip-clone", group=loader.toolchain_group,
                                                 help="Don't clone compiler-rt, the sources in --source-dir must "
                                                      "already exist")

    def load(self, args: "Optional[list[str]]" = None) -> None:
        self.loader.load(args)
        if self.verbose and self.quiet:
            raise ConfigurationError("--verbose and --quiet are mutually exclusive")

    def __getattribute__(self, item) -> "typing.Any":
        v = object.__getattribute__(self, item)
        if isinstance(v, ConfigOption):
            return v.__get__(self, self.__class__)
        return v

    @property
    def required_target(self) -> str:
        target = self.target
        if not target:
            raise ConfigurationError("TARGET not set", fixit_hint="Pass --target or set the TARGET environment "
                                                                  "variable")
        return target

    @property
    def is_cross_compiling(self) -> bool:
        host = self.host
        if not host:
            raise ConfigurationError("HOST not set", fixit_hint="Pass --host or set the HOST environment variable")
        return self.required_target != host

    @property
    def archive_path(self) -> Path:
        return self.output_dir / self.archive_name
