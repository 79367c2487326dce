# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   exceptions.py

@Time    :   2021/4/15 3:50 下午

@Desc    :   公共异常定义

"""

from typing import Text


class ConvmanException(Exception):
    """Base exception class for all errors raised by convman.

    Every error convman reports to the caller, from the CLI or the webhook
    server, derives from it.
    """


class FileIOException(ConvmanException):
    """Raised if there is an error while doing file IO."""


class FileNotFoundException(ConvmanException, FileNotFoundError):
    """Raised when a file, expected to exist, doesn't exist."""


class YamlSyntaxException(ConvmanException):
    """Raised when a YAML file can not be parsed properly due to a syntax error."""

    def __init__(self, filename: Text, underlying_yaml_exception: Exception) -> None:
        self.filename = filename
        self.underlying_yaml_exception = underlying_yaml_exception
        super(YamlSyntaxException, self).__init__()

    def __str__(self) -> Text:
        return (
            f"Failed to read '{self.filename}'. "
            f"{self.underlying_yaml_exception}"
        )


class InvalidConfigException(ConvmanException, ValueError):
    """Raised if the configuration file is invalid."""


class ConnectionException(ConvmanException):
    """Raised when a connection to a 3rd party service fails.

    Raised by the mongo conversation repository when the database fails, and
    by the Wit client when the intents can't be fetched.
    """


class BackendNotFound(ConvmanException):
    """Raised when no factory is registered under the requested backend name."""

    def __init__(self, name: Text) -> None:
        self.name = name
        super(BackendNotFound, self).__init__()

    def __str__(self) -> Text:
        return f"Backend not found: '{self.name}'"


class InvalidOrMissingParam(ConvmanException):
    """Raised by a backend factory when a parameter is absent or has the wrong type."""

    def __init__(self, key: Text) -> None:
        self.key = key
        super(InvalidOrMissingParam, self).__init__()

    def __str__(self) -> Text:
        return f"Invalid or missing parameter: '{self.key}'"


class NluParsingException(ConvmanException):
    """Base class for errors raised while normalizing NLU backend output."""


class MalformedPayload(NluParsingException):
    """Raised when the raw NLU payload is not a JSON object."""


class MissingKey(NluParsingException):
    """Raised when a candidate lacks a required key."""

    def __init__(self, key: Text) -> None:
        self.key = key
        super(MissingKey, self).__init__()

    def __str__(self) -> Text:
        return f"Missing key: {self.key}"


class CannotCastValue(NluParsingException):
    """Raised when a key is present but its value has the wrong type."""

    def __init__(self, key: Text, expected_type: Text) -> None:
        self.key = key
        self.expected_type = expected_type
        super(CannotCastValue, self).__init__()

    def __str__(self) -> Text:
        return f"Could not cast {self.key} to {self.expected_type}"


class UnhandledDataType(NluParsingException):
    """Raised when the dispatch table names a type that has no extractor."""

    def __init__(self, data_type: Text) -> None:
        self.data_type = data_type
        super(UnhandledDataType, self).__init__()

    def __str__(self) -> Text:
        return f"Unhandled data type {self.data_type}"
