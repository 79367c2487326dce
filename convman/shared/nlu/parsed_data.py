# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   parsed_data.py

@Time    :   2021/4/16 11:20 上午

@Desc    :   nlu解析结果，与具体的nlu服务无关

"""

from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, NamedTuple, Optional, Text, Tuple, Type, Union

from dateutil import parser

from convman.shared.exceptions import CannotCastValue, MissingKey
from convman.shared.nlu.constants import (
    ENTITIES,
    ENTITY_ATTRIBUTE_TYPE,
    INTENT,
    INTENT_NAME_KEY,
)


class EntityType(Enum):
    """Normalized type of a field found in an NLU payload."""

    INT = "int"
    INTENT = "intent"
    DATETIME = "datetime"
    SCALAR = "scalar"


# raw field key -> normalized type, owned by one backend and never mutated
DataTypeMap = Mapping[Text, EntityType]


def freeze_data_type_map(data_type_map: Dict[Text, EntityType]) -> DataTypeMap:
    return MappingProxyType(dict(data_type_map))


class ParsedIntent(NamedTuple):
    name: Text

    def as_dict(self) -> Dict[Text, Any]:
        return {INTENT_NAME_KEY: self.name}


class ScalarEntity(NamedTuple):
    name: Text
    confidence: float
    value: Text

    type_name = "scalar"

    def as_dict(self) -> Dict[Text, Any]:
        return {ENTITY_ATTRIBUTE_TYPE: self.type_name, **self._asdict()}

    @classmethod
    def _from_parameters(cls, parameters: Dict[Text, Any]) -> "ScalarEntity":
        return cls(parameters["name"], parameters["confidence"], parameters["value"])


class IntEntity(NamedTuple):
    name: Text
    confidence: float
    value: int
    role: Text = ""

    type_name = "int"

    def as_dict(self) -> Dict[Text, Any]:
        return {ENTITY_ATTRIBUTE_TYPE: self.type_name, **self._asdict()}

    @classmethod
    def _from_parameters(cls, parameters: Dict[Text, Any]) -> "IntEntity":
        return cls(
            parameters["name"],
            parameters["confidence"],
            parameters["value"],
            parameters.get("role", ""),
        )


class SingleDateTimeEntity(NamedTuple):
    name: Text
    confidence: float
    instant: datetime
    granularity: Text

    type_name = "datetime"

    def as_dict(self) -> Dict[Text, Any]:
        return {
            ENTITY_ATTRIBUTE_TYPE: self.type_name,
            "name": self.name,
            "confidence": self.confidence,
            "instant": self.instant.isoformat(),
            "granularity": self.granularity,
        }

    @classmethod
    def _from_parameters(cls, parameters: Dict[Text, Any]) -> "SingleDateTimeEntity":
        return cls(
            parameters["name"],
            parameters["confidence"],
            _parse_stored_time(parameters, "instant"),
            parameters["granularity"],
        )


class DateTimeIntervalEntity(NamedTuple):
    """Date/time range, both ends carry their own granularity."""

    name: Text
    confidence: float
    from_: datetime
    from_granularity: Text
    to: datetime
    to_granularity: Text
    role: Text = ""

    type_name = "datetime_interval"

    def as_dict(self) -> Dict[Text, Any]:
        return {
            ENTITY_ATTRIBUTE_TYPE: self.type_name,
            "name": self.name,
            "confidence": self.confidence,
            "from": self.from_.isoformat(),
            "from_granularity": self.from_granularity,
            "to": self.to.isoformat(),
            "to_granularity": self.to_granularity,
            "role": self.role,
        }

    @classmethod
    def _from_parameters(
        cls, parameters: Dict[Text, Any]
    ) -> "DateTimeIntervalEntity":
        return cls(
            parameters["name"],
            parameters["confidence"],
            _parse_stored_time(parameters, "from"),
            parameters["from_granularity"],
            _parse_stored_time(parameters, "to"),
            parameters["to_granularity"],
            parameters.get("role", ""),
        )


ParsedEntity = Union[ScalarEntity, IntEntity, SingleDateTimeEntity, DateTimeIntervalEntity]

ENTITY_CLASSES: Mapping[Text, Type] = MappingProxyType(
    {
        cls.type_name: cls
        for cls in (ScalarEntity, IntEntity, SingleDateTimeEntity, DateTimeIntervalEntity)
    }
)


def _parse_stored_time(parameters: Dict[Text, Any], key: Text) -> datetime:
    try:
        return parser.isoparse(parameters[key])
    except (TypeError, ValueError):
        raise CannotCastValue(key, "ISO-8601 timestamp")


def entity_from_parameters(parameters: Dict[Text, Any]) -> ParsedEntity:
    """Rebuilds an entity from its `as_dict` form, dispatching on its type tag."""
    type_name = parameters.get(ENTITY_ATTRIBUTE_TYPE)
    if type_name is None:
        raise MissingKey(ENTITY_ATTRIBUTE_TYPE)

    entity_class = ENTITY_CLASSES.get(type_name)
    if entity_class is None:
        raise CannotCastValue(ENTITY_ATTRIBUTE_TYPE, "entity type")

    try:
        return entity_class._from_parameters(parameters)
    except KeyError as e:
        raise MissingKey(e.args[0])


class ParsedData(NamedTuple):
    """
    Provider-agnostic result of one normalization: at most one intent, and the
    entities in the order their fields appeared in the payload.
    """

    intent: Optional[ParsedIntent] = None
    entities: Tuple[ParsedEntity, ...] = ()

    def is_empty(self) -> bool:
        return self.intent is None and not self.entities

    def as_dict(self) -> Dict[Text, Any]:
        return {
            INTENT: self.intent.as_dict() if self.intent else None,
            ENTITIES: [entity.as_dict() for entity in self.entities],
        }

    @classmethod
    def from_parameters(cls, parameters: Optional[Dict[Text, Any]]) -> "ParsedData":
        if not parameters:
            return cls()

        intent = parameters.get(INTENT)
        return cls(
            ParsedIntent(intent[INTENT_NAME_KEY]) if intent else None,
            tuple(
                entity_from_parameters(entity)
                for entity in parameters.get(ENTITIES) or []
            ),
        )
