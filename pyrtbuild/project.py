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
import tempfile
import typing
from pathlib import Path
from typing import Optional

from .builtins.catalog import BUILTINS_SUBDIRECTORY
from .builtins.flags import compose_flags
from .builtins.sources import compose_sources
from .config.rtconfig import RtBuildConfig
from .config.target_info import TargetDescriptor
from .filesystemutils import FileSystemUtils
from .processutils import run_command
from .repository import GitRepository
from .toolchain import ToolchainResolver, ToolRole
from .utils import add_error_context, status_update, warning_message

__all__ = ["BuildCompilerRtBuiltins", "NATIVE_TOOLS"]

# Used when building for the host and neither CC nor AR is set
NATIVE_TOOLS = {ToolRole.CC: "cc", ToolRole.AR: "ar"}


class BuildCompilerRtBuiltins:
    """Fetches compiler-rt and builds the builtins library for one target into a single static archive."""

    target = "compiler-rt-builtins"

    def __init__(self, config: RtBuildConfig, descriptor: "Optional[TargetDescriptor]" = None) -> None:
        self.config = config
        if descriptor is None:
            descriptor = TargetDescriptor.from_name(config.required_target, search_path=config.target_path)
        self.descriptor = descriptor
        self.repository = GitRepository(config.repository_url)
        self._fs = FileSystemUtils(config)

    def info(self, *args, **kwargs) -> None:
        if not self.config.quiet:
            status_update(*args, **kwargs)

    def warning(self, *args, **kwargs) -> None:
        warning_message(*args, **kwargs)

    def run_cmd(self, *args, **kwargs):
        return run_command(*args, config=self.config, **kwargs)

    @property
    def sources(self) -> "tuple[str, ...]":
        return compose_sources(self.descriptor, self.config.soft_float_policy)

    @property
    def flags(self) -> "tuple[str, ...]":
        return compose_flags(self.descriptor)

    def tool(self, role: ToolRole) -> str:
        if self.config.is_cross_compiling:
            return ToolchainResolver(self.config.environment).resolve_default(role, self.descriptor)
        return self.config.environment.get(role.value, NATIVE_TOOLS[role])

    @staticmethod
    def object_file_name(source: str) -> str:
        # arm/divsi3.S -> arm/divsi3.o
        return str(Path(source).with_suffix(".o"))

    def compile(self, src_dir: Path) -> "list[Path]":
        cc = self.tool(ToolRole.CC)
        flags = self.flags
        builtins_dir = src_dir / BUILTINS_SUBDIRECTORY
        objects = []
        for source in self.sources:
            obj = self.config.build_dir / self.object_file_name(source)
            self._fs.makedirs(obj.parent)
            self.run_cmd([cc, *flags, "-c", "-o", obj, builtins_dir / source], print_verbose_only=True)
            objects.append(obj)
        return objects

    def archive(self, objects: "typing.Sequence[Path]") -> Path:
        ar = self.tool(ToolRole.AR)
        archive = self.config.archive_path
        self._fs.makedirs(archive.parent)
        # `ar crs` appends to an existing archive so stale members would survive a rebuild
        self._fs.delete_file(archive, print_verbose_only=True)
        self.run_cmd([ar, "crs", archive, *objects])
        return archive

    def build(self, src_dir: Path) -> Path:
        with add_error_context("fetching compiler-rt"):
            self.repository.ensure_cloned(src_dir, config=self.config, skip_clone=self.config.skip_clone)
        self.info("Compiling", len(self.sources), "builtins sources for", self.descriptor.name)
        with add_error_context("compiling " + self.descriptor.name + " builtins"):
            objects = self.compile(src_dir)
            archive = self.archive(objects)
        self.info("Wrote", archive)
        return archive

    def process(self) -> Path:
        if not self.descriptor.has_spec and self.config.verbose:
            self.warning("No target specification found for", self.descriptor.name,
                         "- inferring its properties from the name")
        if self.config.source_dir is not None:
            return self.build(self.config.source_dir)
        with tempfile.TemporaryDirectory(prefix="compiler-rt") as td:
            return self.build(Path(td))
