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
import subprocess
import sys
import traceback
import typing
from typing import Optional

from .config.loader import ConfigLoader
from .config.rtconfig import RtBuildAction, RtBuildConfig
from .processutils import commandline_to_str
from .project import BuildCompilerRtBuiltins
from .utils import RtBuildError, add_error_context, fatal_error


def run_action(config: RtBuildConfig) -> None:
    if config.action is RtBuildAction.DUMP_CONFIGURATION:
        config.loader.print_configuration()
        return
    with add_error_context("resolving target " + config.required_target):
        project = BuildCompilerRtBuiltins(config)
    if config.action is RtBuildAction.LIST_SOURCES:
        for source in project.sources:
            print(source)
    elif config.action is RtBuildAction.PRINT_FLAGS:
        print(commandline_to_str(project.flags))
    else:
        assert config.action is RtBuildAction.BUILD, "Unknown action " + str(config.action)
        project.process()


def real_main(args: "Optional[list[str]]" = None, environment: "Optional[typing.Mapping[str, str]]" = None) -> None:
    config_loader = ConfigLoader(environment=environment, prog="rtbuild")
    config = RtBuildConfig(config_loader)
    # load them from JSON/cmd line
    config.load(args)
    run_action(config)


def main() -> None:
    try:
        real_main()
    except KeyboardInterrupt:
        sys.exit("Exiting due to Ctrl+C")
    except RtBuildError as e:
        fatal_error(str(e), fixit_hint=e.fixit_hint)
    except subprocess.CalledProcessError as err:
        extra_msg = (". Working directory was ", err.cwd) if hasattr(err, "cwd") else ()
        if err.stderr is not None:
            extra_msg += ("\nStandard error was:\n", err.stderr.decode("utf-8"))
        fatal_error("Command ", "`" + commandline_to_str(err.cmd) + "` failed with non-zero exit code ",
                    err.returncode, *extra_msg, sep="", exit_code=err.returncode)
    except Exception as e:
        # If we are currently debugging, raise the exception to allow e.g. PyCharm's
        # "break on exception that terminates execution" feature works.
        debugger_attached = getattr(sys, "gettrace", lambda: None)() is not None
        if debugger_attached:
            raise e
        else:
            traceback.print_exc()
            fatal_error("Unhandled exception:", e)


if __name__ == "__main__":
    main()
