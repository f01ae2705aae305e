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
import contextlib
import sys
import typing

from .colour import AnsiColour, coloured

# reduce the number of import statements per module
__all__ = ["typing", "status_update", "fatal_error", "coloured", "AnsiColour",  # no-combine
           "warning_message", "error_message", "fixit_message", "ConfigBase", "DoNotUseInIfStmt",  # no-combine
           "add_error_context", "RtBuildError", "ConfigurationError", "TargetSpecError", "FetchError"]  # no-combine

if sys.version_info < (3, 8, 0):
    sys.exit("This script requires at least Python 3.8.0")


class RtBuildError(Exception):
    """Base class for all errors that should abort the build with a readable message"""

    def __init__(self, message: str, *, fixit_hint: "typing.Optional[str]" = None) -> None:
        super().__init__(message)
        self.fixit_hint = fixit_hint


class ConfigurationError(RtBuildError):
    """A required setting (environment variable, option, toolchain binary) is missing or invalid"""


class TargetSpecError(ConfigurationError):
    """The JSON target specification could not be parsed or lacks a required field"""


class FetchError(RtBuildError):
    """Fetching the upstream compiler-rt sources failed"""


# Placeholder until config has been initialized.
class DoNotUseInIfStmt(bool if typing.TYPE_CHECKING else object):
    def __bool__(self) -> "typing.NoReturn":
        raise ValueError("Should not be used")

    def __len__(self) -> "typing.NoReturn":
        raise ValueError("Should not be used")


class ConfigBase:
    def __init__(self, *, pretend: bool, verbose: bool, quiet: bool) -> None:
        self.quiet = quiet
        self.verbose = verbose
        self.pretend = pretend


def maybe_add_space(msg, sep) -> tuple:
    if sep == "":
        return msg, " "
    return msg,


def status_update(*args, sep=" ", **kwargs) -> None:
    print(coloured(AnsiColour.cyan, *args, sep=sep), **kwargs)


def fixit_message(*args, sep=" ") -> None:
    print(coloured(AnsiColour.blue, maybe_add_space("Possible solution:", sep) + args, sep=sep), file=sys.stderr,
          flush=True)


def warning_message(*args, sep=" ", fixit_hint=None) -> None:
    print(coloured(AnsiColour.magenta, maybe_add_space("Warning:", sep) + args, sep=sep), file=sys.stderr, flush=True)
    if fixit_hint:
        fixit_message(fixit_hint)


_ERROR_CONTEXT: "list[str]" = []


@contextlib.contextmanager
def add_error_context(context: str):
    _ERROR_CONTEXT.append(context)
    yield
    # We don't pop the error context if there is an exception so that we can print the context in the
    # except clause of main()
    _ERROR_CONTEXT.pop()


def _add_error_context(prefix, args, sep) -> str:
    if _ERROR_CONTEXT:
        # _ERROR_CONTEXT might contain escape sequences so we have to reset to red afterwards
        return coloured(AnsiColour.red, maybe_add_space(prefix + " " + _ERROR_CONTEXT[-1] + ":", sep) + args, sep=sep)
    return coloured(AnsiColour.red, maybe_add_space(prefix + ":", sep) + args, sep=sep)


def error_message(*args, sep=" ", fixit_hint=None) -> None:
    print(_add_error_context("Error", args, sep=sep), file=sys.stderr, flush=True)
    if fixit_hint:
        fixit_message(fixit_hint)


def fatal_error(*args, sep=" ", fixit_hint=None, exit_code=3) -> "typing.NoReturn":
    print(_add_error_context("Fatal error", args, sep=sep), file=sys.stderr, flush=True)
    if fixit_hint:
        fixit_message(fixit_hint)
    sys.exit(exit_code)

