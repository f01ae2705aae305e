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
from pathlib import Path

from .processutils import print_command
from .utils import ConfigBase, warning_message

__all__ = ["FileSystemUtils"]


class FileSystemUtils:
    """Filesystem operations that are only printed (and not executed) with --pretend"""

    def __init__(self, config: ConfigBase) -> None:
        self.config = config

    def makedirs(self, path: Path) -> None:
        print_command("mkdir", "-p", path, print_verbose_only=True, config=self.config)
        if not self.config.pretend and not path.is_dir():
            path.mkdir(parents=True, exist_ok=True)

    def delete_file(self, file: Path, print_verbose_only=False, warn_if_missing=False) -> None:
        print_command("rm", "-f", file, print_verbose_only=print_verbose_only, config=self.config)
        if not file.is_file() and not file.is_symlink():
            if warn_if_missing:
                warning_message("Expected", file, "to exist but is missing!")
            return
        if self.config.pretend:
            return
        file.unlink()
