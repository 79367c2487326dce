# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   registry.py

@Time    :   2021/4/16 10:12 上午

@Desc    :   可插拔后端的注册与构造

"""

import logging
import threading
from typing import Any, Callable, Dict, Generic, List, Optional, Text, Type, TypeVar

from convman.shared.exceptions import BackendNotFound, InvalidOrMissingParam
from convman.shared.utils.io import raise_warning

logger = logging.getLogger(__name__)

T = TypeVar("T")

BackendFactory = Callable[[Dict[Text, Any]], T]


class DuplicateBackendWarning(UserWarning):
    """Emitted when a backend name is registered a second time."""


class BackendRegistry(Generic[T]):
    """
    Name keyed registry of backend factories.

    One registry holds one kind of backend (nlu parser, conversation
    repository, messaging api ...). Registries of different kinds do not share
    names, so the same name can be used by a backend of each kind.
    """

    def __init__(self, kind: Text) -> None:
        self.kind = kind
        self._factories: Dict[Text, BackendFactory] = {}
        self._lock = threading.Lock()

    def register(self, name: Text, factory: BackendFactory) -> None:
        """Registers `factory` under `name`.

        Registering a name twice keeps the latest factory and emits a
        `DuplicateBackendWarning`.
        """
        with self._lock:
            if name in self._factories:
                logger.warning(
                    f"The {self.kind} backend '{name}' is already registered, "
                    f"the new factory replaces the previous one."
                )
                raise_warning(
                    f"The {self.kind} backend '{name}' has been registered twice.",
                    category=DuplicateBackendWarning,
                )
            self._factories[name] = factory

    def create(self, name: Text, params: Optional[Dict[Text, Any]] = None) -> T:
        """Creates the backend registered under `name`.

        Args:
            name: Name the backend factory was registered with.
            params: Configuration handed to the factory.

        Returns:
            Whatever the factory builds.

        Raises:
            BackendNotFound: if nothing is registered under `name`.
        """
        with self._lock:
            factory = self._factories.get(name)

        if factory is None:
            raise BackendNotFound(name)

        logger.debug(f"Creating {self.kind} backend '{name}'.")
        return factory(params if params is not None else {})

    def names(self) -> List[Text]:
        with self._lock:
            return sorted(self._factories)

    def __contains__(self, name: Text) -> bool:
        with self._lock:
            return name in self._factories


def get_param(
    params: Dict[Text, Any], key: Text, expected_type: Optional[Type] = None
) -> Any:
    """Fetches `key` from a backend configuration bag.

    Raises:
        InvalidOrMissingParam: if the key is absent or not an `expected_type`.
    """
    if key not in params:
        raise InvalidOrMissingParam(key)

    value = params[key]
    if expected_type is not None and not isinstance(value, expected_type):
        raise InvalidOrMissingParam(key)

    return value
