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
import shutil
import subprocess
from pathlib import Path

from .processutils import run_command
from .utils import ConfigBase, FetchError, status_update

__all__ = ["GitRepository"]


class GitRepository:
    """A remote git repository that is fetched as a shallow clone of the default branch"""

    def __init__(self, url: str) -> None:
        self.url = url

    @staticmethod
    def is_checkout(src_dir: Path) -> bool:
        # git-worktree creates a .git file instead of a .git directory so we can't use .is_dir()
        return (src_dir / ".git").exists()

    def ensure_cloned(self, src_dir: Path, *, config: ConfigBase, skip_clone=False) -> None:
        if self.is_checkout(src_dir):
            return
        if skip_clone:
            raise FetchError(f"Sources for {src_dir} missing!", fixit_hint="Remove --skip-clone or pass a "
                                                                           "--source-dir containing a checkout")
        assert not self.url.startswith("<"), "Invalid URL " + self.url
        if not config.pretend and shutil.which("git") is None:
            raise FetchError("Cannot clone " + self.url + ": git is not installed")
        if not config.quiet:
            status_update("Cloning", self.url, "into", src_dir)
        clone_cmd = ["git", "clone", "--depth", "1", self.url, src_dir]
        try:
            run_command(clone_cmd, cwd="/", config=config)
        except subprocess.CalledProcessError as e:
            raise FetchError(f"Failed to clone {self.url}: git exited with code {e.returncode}") from e
