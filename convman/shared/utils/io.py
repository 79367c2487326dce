# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   io.py

@Time    :   2021/4/2 5:23 下午

@Desc    :

"""
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Text, Type, Union
import warnings

from ruamel import yaml
from ruamel.yaml.error import YAMLError

from convman.shared.exceptions import (
    FileIOException,
    FileNotFoundException,
    YamlSyntaxException
)

DEFAULT_ENCODING = 'utf-8'  # 默认用utf-8，打开文件时用


def read_file(filename: Union[Text, Path], encoding: Text = DEFAULT_ENCODING) -> Any:
    """Read text from a file."""

    try:
        with open(filename, encoding=encoding) as f:
            return f.read()
    except FileNotFoundError:
        raise FileNotFoundException(
            f"Failed to read file, " f"'{os.path.abspath(filename)}' does not exist."
        )
    except UnicodeDecodeError:
        raise FileIOException(
            f"Failed to read file '{os.path.abspath(filename)}', "
            f"could not read the file using {encoding} to decode "
            f"it. Please make sure the file is stored with this "
            f"encoding."
        )


def read_json_file(filename: Union[Text, Path]) -> Any:
    """Read json from a file."""
    content = read_file(filename)
    try:
        return json.loads(content)
    except ValueError as e:
        raise FileIOException(
            f"Failed to read json from '{os.path.abspath(filename)}'. Error: {e}"
        )


def read_yaml(content: Text, reader_type: Union[Text, List[Text]] = "safe") -> Any:
    """
    Parses yaml from a text.
    解析yaml文件, json也是合法的yaml
    Args:
        content: A text containing yaml content.
        reader_type: Reader type to use. By default "safe" will be used

    Raises:
        ruamel.yaml.error.YAMLError: If there was an error when parsing the YAML.
    """
    yaml_parser = yaml.YAML(typ=reader_type)
    yaml_parser.preserve_quotes = True

    return yaml_parser.load(content) or {}


def read_config_file(filename: Union[Path, Text]) -> Dict[Text, Any]:
    """Parses a yaml (or json) configuration file. Content needs to be a dictionary

    Args:
        filename: The path to the file which should be read.
    """
    content = read_file(filename)
    try:
        content = read_yaml(content)
    except YAMLError as e:
        raise YamlSyntaxException(filename, e)

    if content is None:
        return {}
    elif isinstance(content, dict):
        return content
    else:
        raise YamlSyntaxException(
            filename,
            ValueError(
                f"Tried to load configuration file '{filename}'. "
                f"Expected a key value mapping but found a {type(content).__name__}"
            ),
        )


def json_to_string(obj: Any, **kwargs: Any) -> Text:
    """Dumps a JSON-serializable object to string.

    Args:
        obj: JSON-serializable object.
        kwargs: serialization options. Defaults to 2 space indentation
                and disable escaping of non-ASCII characters.
    """
    indent = kwargs.pop("indent", 2)
    ensure_ascii = kwargs.pop("ensure_ascii", False)
    return json.dumps(obj, indent=indent, ensure_ascii=ensure_ascii, **kwargs)


def raise_warning(
    message: Text,
    category: Optional[Type[Warning]] = None,
    docs: Optional[Text] = None,
    **kwargs: Any,
) -> None:
    """Emit a `warnings.warn` with sensible defaults.

    Args:
        message: The warning message.
        category: The warning category, `UserWarning` when unset.
        docs: Optional URL pointing to related documentation.
        kwargs: Any additional arguments to pass to `warnings.warn`, e.g.
            `stacklevel`.
    """
    if docs:
        message = f"{message}\n  More info at {docs}"

    if "stacklevel" not in kwargs:
        # the caller of `raise_warning` is the interesting frame
        kwargs["stacklevel"] = 3

    warnings.warn(message, category=category or UserWarning, **kwargs)
