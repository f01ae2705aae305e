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
import shlex
import subprocess
import tempfile
import typing
from pathlib import Path
from subprocess import CompletedProcess
from typing import Union

from .colour import AnsiColour, coloured
from .utils import ConfigBase

__all__ = ["print_command", "run_command", "commandline_to_str", "popen_handle_noexec"]  # no-combine


def print_command(arg1: "Union[str, typing.Sequence[typing.Any]]", *remaining_args, cwd=None,
                  print_verbose_only=False, config: ConfigBase) -> None:
    if config.quiet or (print_verbose_only and not config.verbose):
        return
    # also allow passing a single string
    if not isinstance(arg1, str):
        all_args = arg1
        arg1 = all_args[0]
        remaining_args = all_args[1:]
    prefix = ("cd", shlex.quote(str(cwd)), "&&") if cwd else tuple()
    # comma in tuple is required otherwise it creates a tuple of string chars
    new_args = (shlex.quote(str(arg1)), *tuple(map(shlex.quote, map(str, remaining_args))))
    # Avoid a space before the actual command if there is no prefix:
    if not prefix:
        print(coloured(AnsiColour.yellow, new_args), flush=True)
    else:
        print(coloured(AnsiColour.yellow, prefix), coloured(AnsiColour.yellow, new_args), flush=True)


def _make_called_process_error(retcode, args, *, stdout=None, stderr=None, cwd=None) -> subprocess.CalledProcessError:
    err = subprocess.CalledProcessError(retcode, args, output=stdout, stderr=stderr)
    err.cwd = cwd
    return err


def popen_handle_noexec(cmdline: "list[str]", **kwargs) -> subprocess.Popen:
    try:
        return subprocess.Popen(cmdline, **kwargs)
    except (PermissionError, FileNotFoundError) as e:
        raise _make_called_process_error(e.errno, cmdline, cwd=kwargs.get("cwd", None),
                                         stderr=str(e).encode("utf-8")) from e


def run_command(*args, print_verbose_only=False, config: ConfigBase, **kwargs) -> "CompletedProcess[bytes]":
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        cmdline = args[0]  # list with parameters was passed
    else:
        cmdline = args
    cmdline = list(map(str, cmdline))  # ensure it's all strings so that subprocess can handle it
    print_command(cmdline, cwd=kwargs.get("cwd"), print_verbose_only=print_verbose_only, config=config)
    if "cwd" in kwargs:
        kwargs["cwd"] = str(kwargs["cwd"])
    else:
        # os.getcwd() raises an exception if the cwd was deleted
        try:
            kwargs["cwd"] = os.getcwd()
        except FileNotFoundError:
            kwargs["cwd"] = tempfile.gettempdir()
    if config.pretend:
        return CompletedProcess(args=cmdline, returncode=0, stdout=b"", stderr=b"")
    if config.quiet and "stdout" not in kwargs:
        kwargs["stdout"] = subprocess.DEVNULL
    with popen_handle_noexec(cmdline, **kwargs) as process:
        stdout, stderr = process.communicate()
        retcode = process.poll()
        if retcode != 0:
            raise _make_called_process_error(retcode, process.args, stdout=stdout, stderr=stderr, cwd=kwargs["cwd"])
        return CompletedProcess(process.args, retcode, stdout, stderr)


def _quote(s) -> str:
    return shlex.quote(str(s))


def commandline_to_str(args: "typing.Iterable[Union[str, Path]]") -> str:
    return " ".join(_quote(s) for s in args)
