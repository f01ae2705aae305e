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
import argparse
import builtins
import json
import os
import typing
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Union

try:
    import argcomplete
except ImportError:
    argcomplete: Optional[Any] = None

from .computed_default_value import ComputedDefaultValue
from ..colour import AnsiColour, coloured
from ..utils import ConfigBase, ConfigurationError, error_message, status_update

__all__ = ["ConfigLoader", "ConfigOption", "ComputedDefaultValue", "MyJsonEncoder", "argcomplete"]

T = typing.TypeVar("T")
EnumTy = typing.TypeVar("EnumTy", bound=Enum)


class _LoadedConfigValue:
    """A wrapper around loaded config values that remembers where a value was loaded from"""

    def __init__(self, value, loaded_from: "Optional[Union[Path, str]]") -> None:
        self.value = value
        self.loaded_from = loaded_from

    def __repr__(self) -> str:
        return f"{self.value} (from {self.loaded_from})"


# From https://bugs.python.org/issue25061
class _EnumArgparseType(typing.Generic[EnumTy]):
    """Factory for creating enum object types"""

    def __init__(self, enumclass: "type[EnumTy]"):
        self.enums: "type[EnumTy]" = enumclass

    def __call__(self, astring: "Union[str, EnumTy]") -> EnumTy:
        if isinstance(astring, self.enums):
            return typing.cast(EnumTy, astring)  # Allow passing an enum instance
        name = self.enums.__name__
        for e in self.enums:
            if e.value == astring:
                return e
        try:
            # convert the passed value to the enum name
            return self.enums[astring.upper().replace("-", "_")]
        except KeyError:
            msg = ", ".join([str(t.value) for t in self.enums])
            raise argparse.ArgumentTypeError(f"{name}: use one of {{{msg}}}") from None

    def __repr__(self) -> str:
        return "%s(%s)" % (self.enums.__name__, ", ".join([str(t.value) for t in self.enums]))


# custom encoder to handle pathlib.Path and enum objects
class MyJsonEncoder(json.JSONEncoder):
    def default(self, o) -> Any:
        if isinstance(o, Path):
            return str(o)
        if isinstance(o, _LoadedConfigValue):
            return o.value
        if isinstance(o, Enum):
            return o.value
        return super().default(o)


# Based on Python 3.9 BooleanOptionalAction
class BooleanNegatableAction(argparse.Action):
    # noinspection PyShadowingBuiltins
    def __init__(self, option_strings: "list[str]", dest, default=None, type=None, choices=None, required=False,
                 help=None, metavar=None):
        all_option_strings = []
        self._negated_option_strings = []
        for opt in option_strings:
            all_option_strings.append(opt)
            if opt.startswith("--"):
                negated_opt = "--no-" + opt[2:]
                all_option_strings.append(negated_opt)
                self._negated_option_strings.append(negated_opt)
        super().__init__(option_strings=all_option_strings, dest=dest, nargs=0,
                         default=default, type=type, choices=choices, required=required, help=help, metavar=metavar)

    def __call__(self, parser, namespace, values, option_string=None) -> None:
        if option_string in self.option_strings:
            setattr(namespace, self.dest, option_string not in self._negated_option_strings)

    def format_usage(self) -> str:
        return " | ".join(self.option_strings)


class ConfigOption(typing.Generic[T]):
    """
    A lazily loaded config option. The value is taken from the first source that provides it:
    command line, JSON config file, environment variable, default value.
    """

    def __init__(self, name: str, shortname: Optional[str], default,
                 value_type: "Union[type[T], Callable[[typing.Any], T]]", *, loader: "ConfigLoader",
                 env_var: "Optional[str]" = None, command_line_only=False) -> None:
        self.name = name
        self.shortname = shortname
        self.default = default
        self.value_type = value_type
        self.env_var = env_var
        self.command_line_only = command_line_only
        self._loader = loader
        self._cached: "Optional[T]" = None
        self._loaded = False
        self.loaded_from: "Optional[Union[Path, str]]" = None

    @property
    def full_option_name(self) -> str:
        return self.name

    @property
    def dest(self) -> str:
        return self.name.replace("-", "_")

    def load_option(self, config: "ConfigBase") -> T:
        result = self._loader.load_from_command_line(self)
        if result is None and not self.command_line_only:
            result = self._loader.load_from_json(self)
        if result is None and self.env_var is not None:
            env_value = self._loader.environment.get(self.env_var)
            if env_value is not None:
                result = _LoadedConfigValue(env_value, "$" + self.env_var)
        if result is None:  # If no option is set fall back to the default
            default = self._get_default_value(config)
            if default is not None:
                result = _LoadedConfigValue(default, None)
        self.loaded_from = result.loaded_from if result is not None else None
        # Now convert it to the right type
        try:
            return self._convert_type(result)
        except (ValueError, argparse.ArgumentTypeError) as e:
            raise ConfigurationError(f"Invalid value for option '{self.full_option_name}': could not convert "
                                     f"'{result.value}': {e}") from e

    def _get_default_value(self, config: "ConfigBase"):
        if callable(self.default):
            return self.default(config, None)
        return self.default

    def _convert_type(self, loaded_result: "Optional[_LoadedConfigValue]") -> "Optional[T]":
        # check for None to make sure we don't call str(None) which would result in "None"
        if loaded_result is None or loaded_result.value is None:
            return None
        result = loaded_result.value
        if self.value_type is bool and isinstance(result, str):
            if result.lower() in ("1", "true", "yes", "on"):
                return typing.cast(T, True)
            if result.lower() in ("0", "false", "no", "off", ""):
                return typing.cast(T, False)
            raise ValueError("not a boolean value")
        if isinstance(self.value_type, type) and issubclass(self.value_type, Path):
            expanded = os.path.expanduser(os.path.expandvars(str(result)))
            if isinstance(loaded_result.loaded_from, Path):
                # Make paths relative to the config file
                return typing.cast(T, Path(os.path.normpath(str(loaded_result.loaded_from.parent / expanded))))
            # Note: os.path.abspath also performs the normpath changes
            return typing.cast(T, Path(os.path.abspath(expanded)))
        return self.value_type(result)  # make sure it has the right type (e.g. int, bool, str, enum)

    def __get__(self, instance, owner) -> T:
        if not self._loaded:
            self._cached = self.load_option(self._loader.config)
            self._loaded = True
        return typing.cast(T, self._cached)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.name}) type={self.value_type} cached={self._cached}>"


class ConfigLoader:
    is_completing_arguments: bool = "_ARGCOMPLETE" in os.environ

    def __init__(self, argparser_class: "type[argparse.ArgumentParser]" = argparse.ArgumentParser, *,
                 environment: "Optional[typing.Mapping[str, str]]" = None, prog: "Optional[str]" = None) -> None:
        self.environment: "typing.Mapping[str, str]" = dict(os.environ) if environment is None else environment
        self.options: "dict[str, ConfigOption]" = dict()
        self.config: "Optional[ConfigBase]" = None
        self._parser = argparser_class(prog=prog,
                                       description="Compile the compiler-rt builtins for a target")
        self._parsed_args: "Optional[argparse.Namespace]" = None
        self._json: "dict[str, _LoadedConfigValue]" = {}
        self._config_path: "Optional[Path]" = None
        self.action_group = self._parser.add_argument_group("Actions to be performed")
        self.target_group = self._parser.add_argument_group("Target selection")
        self.path_group = self._parser.add_argument_group("Configuration of default paths")
        self.toolchain_group = self._parser.add_argument_group("Toolchain and source selection")
        configdir = self.environment.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
        self.default_config_path = Path(configdir, "rtbuild.json")
        self.path_group.add_argument("--config-file", metavar="FILE", type=str, default=None,
                                     help="The config file that is used to load the default settings (default: '" +
                                          str(self.default_config_path) + "')")

    # noinspection PyShadowingBuiltins
    def add_option(self, name: str, shortname=None, *, type: "Union[type[T], Callable[[str], T]]" = str,
                   default: "Union[ComputedDefaultValue[T], Optional[T], Callable[[ConfigBase, typing.Any], T]]" = None,
                   env_var: "Optional[str]" = None, group=None, help: "Optional[str]" = None,
                   command_line_only=False, **kwargs) -> T:
        option = ConfigOption(name, shortname, default, type, loader=self, env_var=env_var,
                              command_line_only=command_line_only)
        assert name not in self.options, "Duplicate option " + name
        self.options[name] = option
        if help is not None and env_var is not None:
            help += " (fallback: $" + env_var + ")"
        names = ["--" + name]
        if shortname:
            names.append("-" + shortname)
        parser = group if group is not None else self._parser
        argparse_type = type
        if isinstance(type, builtins.type) and issubclass(type, Enum):
            argparse_type = _EnumArgparseType(type)
            kwargs.setdefault("metavar", "{" + ",".join(str(e.value) for e in type) + "}")
        if type is bool:
            parser.add_argument(*names, dest=option.dest, action=BooleanNegatableAction, default=None, help=help,
                                **kwargs)
        else:
            if isinstance(type, builtins.type) and issubclass(type, Path):
                argparse_type = str
            parser.add_argument(*names, dest=option.dest, type=argparse_type, default=None, help=help, **kwargs)
        return typing.cast(T, option)

    def add_commandline_only_option(self, *args, **kwargs) -> Any:
        return self.add_option(*args, command_line_only=True, **kwargs)

    def add_bool_option(self, name: str, shortname=None, default=False, **kwargs) -> bool:
        return self.add_option(name, shortname, default=default, type=bool, **kwargs)

    def add_path_option(self, name: str, *, default: "Union[ComputedDefaultValue[Path], Path, Callable]",
                        shortname=None, **kwargs) -> Path:
        return typing.cast(Path, self.add_option(name, shortname, type=Path, default=default, **kwargs))

    def add_optional_path_option(self, name: str, *, default: "Optional[Path]" = None, shortname=None,
                                 **kwargs) -> Optional[Path]:
        return self.add_option(name, shortname, type=Path, default=default, **kwargs)

    def add_enum_option(self, name: str, *, enum_type: "type[EnumTy]", default: EnumTy, **kwargs) -> EnumTy:
        return self.add_option(name, type=enum_type, default=default, **kwargs)

    def load_from_command_line(self, option: ConfigOption) -> "Optional[_LoadedConfigValue]":
        assert self._parsed_args is not None, "load() must be called first"
        value = getattr(self._parsed_args, option.dest, None)
        if value is None:
            return None
        return _LoadedConfigValue(value, "command line")

    def load_from_json(self, option: ConfigOption) -> "Optional[_LoadedConfigValue]":
        return self._json.get(option.full_option_name)

    def debug_msg(self, *args, sep=" ", **kwargs) -> None:
        if self._parsed_args and getattr(self._parsed_args, "verbose", None) is True:
            status_update(*args, sep=sep, **kwargs)

    def _load_json_with_comments(self, config_path: Path) -> "dict[str, _LoadedConfigValue]":
        """
        Loads a JSON file ignoring any lines that start with '#' or '//'
        :param config_path: path to the json file
        :return: a parsed json dict
        """
        json_lines = []
        try:
            with config_path.open("r", encoding="utf-8") as f:
                for line in f.readlines():
                    stripped = line.strip()
                    if not stripped.startswith("#") and not stripped.startswith("//"):
                        json_lines.append(line)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Could not read config file {config_path}: {e}") from e
        if not json_lines:
            status_update("JSON config file", config_path, "was empty.")
            return dict()
        try:
            parsed = json.loads("".join(json_lines))
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Could not load config file {config_path}: {e}") from e
        if not isinstance(parsed, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a JSON object")
        result = {k: _LoadedConfigValue(v, config_path) for k, v in parsed.items()}
        self.debug_msg("Parsed", config_path, "as", coloured(AnsiColour.cyan, json.dumps(result, cls=MyJsonEncoder)))
        return result

    def _load_json_config_file(self) -> None:
        self._json = {}
        given_path = self._parsed_args.config_file
        if given_path:
            self._config_path = Path(os.path.expanduser(given_path)).absolute()
            if not self._config_path.exists():
                raise ConfigurationError(f"Configuration file {self._config_path} does not exist",
                                         fixit_hint="Pass an existing file to --config-file or omit it to use "
                                                    + str(self.default_config_path))
        else:
            self._config_path = self.default_config_path.absolute()
            if not self._config_path.exists():
                return
        self._json = self._load_json_with_comments(self._config_path)
        self._validate_config_file()

    def _validate_config_file(self) -> None:
        for key in self._json:
            option = self.options.get(key)
            if option is None:
                error_message("Unknown config option '", key, "' in ", self._config_path, sep="")
            elif option.command_line_only:
                raise ConfigurationError("Option '" + key + "' cannot be used in the config file " +
                                         str(self._config_path),
                                         fixit_hint="Pass --" + key + " on the command line instead")

    def load(self, args: "Optional[list[str]]" = None) -> None:
        if argcomplete and self.is_completing_arguments:
            argcomplete.autocomplete(self._parser)
        self._parsed_args = self._parser.parse_args(args)
        self._load_json_config_file()

    def dump_options(self) -> "dict[str, typing.Any]":
        assert self.config is not None
        return {name: option.__get__(self.config, self.config.__class__) for name, option in self.options.items()}

    def print_configuration(self) -> None:
        print(json.dumps(self.dump_options(), sort_keys=True, cls=MyJsonEncoder, indent=4))

