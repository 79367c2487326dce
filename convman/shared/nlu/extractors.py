# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   extractors.py

@Time    :   2021/4/16 2:41 下午

@Desc    :   按实体类型把单个候选值转换为实体

"""

from datetime import datetime
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Text, Tuple

from dateutil import parser, tz

from convman.shared.exceptions import CannotCastValue, MissingKey
from convman.shared.nlu.constants import (
    ENTITY_ATTRIBUTE_CONFIDENCE,
    ENTITY_ATTRIBUTE_FROM,
    ENTITY_ATTRIBUTE_GRAIN,
    ENTITY_ATTRIBUTE_ROLE,
    ENTITY_ATTRIBUTE_TO,
    ENTITY_ATTRIBUTE_VALUE,
)
from convman.shared.nlu.parsed_data import (
    DateTimeIntervalEntity,
    EntityType,
    IntEntity,
    ParsedEntity,
    ScalarEntity,
    SingleDateTimeEntity,
)

# (field name, candidate object, already validated confidence) -> entity
EntityExtractor = Callable[[Text, Dict[Text, Any], float], ParsedEntity]

TIMESTAMP_FORMAT = "ISO-8601 timestamp"


def _is_number(value: Any) -> bool:
    # json true/false are decoded as bools, which are ints for python
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def extract_confidence(candidate: Dict[Text, Any]) -> float:
    """Returns the candidate's confidence as a float within [0, 1]."""
    confidence = candidate.get(ENTITY_ATTRIBUTE_CONFIDENCE)

    if not _is_number(confidence) or not 0.0 <= confidence <= 1.0:
        raise CannotCastValue(ENTITY_ATTRIBUTE_CONFIDENCE, "float")

    return float(confidence)


def extract_role(candidate: Dict[Text, Any]) -> Text:
    role = candidate.get(ENTITY_ATTRIBUTE_ROLE, "")
    if role is None:
        return ""
    if not isinstance(role, str):
        raise CannotCastValue(ENTITY_ATTRIBUTE_ROLE, "str")
    return role


def extract_int_entity(
    name: Text, candidate: Dict[Text, Any], confidence: float
) -> IntEntity:
    if ENTITY_ATTRIBUTE_VALUE not in candidate:
        raise MissingKey(ENTITY_ATTRIBUTE_VALUE)

    value = candidate[ENTITY_ATTRIBUTE_VALUE]
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or isinstance(value, bool):
        raise CannotCastValue(ENTITY_ATTRIBUTE_VALUE, "int")

    return IntEntity(name, confidence, value, extract_role(candidate))


def extract_scalar_entity(
    name: Text, candidate: Dict[Text, Any], confidence: float
) -> ScalarEntity:
    if ENTITY_ATTRIBUTE_VALUE not in candidate:
        raise MissingKey(ENTITY_ATTRIBUTE_VALUE)

    value = candidate[ENTITY_ATTRIBUTE_VALUE]
    if not isinstance(value, str):
        raise CannotCastValue(ENTITY_ATTRIBUTE_VALUE, "str")

    return ScalarEntity(name, confidence, value)


def parse_timestamp(value: Text) -> datetime:
    """Parses an ISO-8601 timestamp, e.g. `2024-03-01T10:00:00.000-07:00`.

    Timestamps without an offset are taken as UTC.
    """
    try:
        instant = parser.isoparse(value)
    except (ValueError, OverflowError):
        raise CannotCastValue(ENTITY_ATTRIBUTE_VALUE, TIMESTAMP_FORMAT)

    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=tz.UTC)
    return instant


def extract_datetime_information(obj: Dict[Text, Any]) -> Tuple[datetime, Text]:
    """Reads the `value` timestamp and its `grain` from a date/time object.

    The granularity is kept verbatim, whatever the backend sent.
    """
    if ENTITY_ATTRIBUTE_VALUE not in obj:
        raise MissingKey(ENTITY_ATTRIBUTE_VALUE)

    value = obj[ENTITY_ATTRIBUTE_VALUE]
    if not isinstance(value, str):
        raise CannotCastValue(ENTITY_ATTRIBUTE_VALUE, "str")

    if ENTITY_ATTRIBUTE_GRAIN not in obj:
        raise MissingKey(ENTITY_ATTRIBUTE_GRAIN)

    grain = obj[ENTITY_ATTRIBUTE_GRAIN]
    if not isinstance(grain, str):
        raise CannotCastValue(ENTITY_ATTRIBUTE_GRAIN, "str")

    return parse_timestamp(value), grain


def _interval_bound(candidate: Dict[Text, Any], key: Text) -> Tuple[datetime, Text]:
    if key not in candidate:
        raise MissingKey(key)

    bound = candidate[key]
    if not isinstance(bound, dict):
        raise CannotCastValue(key, "object")

    return extract_datetime_information(bound)


def extract_datetime_entity(
    name: Text, candidate: Dict[Text, Any], confidence: float
) -> ParsedEntity:
    """Builds a single date/time or a date/time interval entity.

    Both shapes come under the same field name: a candidate carrying a
    `value` is a single instant, one without it must hold `from` and `to`.
    """
    if ENTITY_ATTRIBUTE_VALUE in candidate:
        instant, granularity = extract_datetime_information(candidate)
        return SingleDateTimeEntity(name, confidence, instant, granularity)

    from_time, from_granularity = _interval_bound(candidate, ENTITY_ATTRIBUTE_FROM)
    to_time, to_granularity = _interval_bound(candidate, ENTITY_ATTRIBUTE_TO)

    return DateTimeIntervalEntity(
        name,
        confidence,
        from_time,
        from_granularity,
        to_time,
        to_granularity,
        extract_role(candidate),
    )


ENTITY_EXTRACTORS: Mapping[EntityType, EntityExtractor] = MappingProxyType(
    {
        EntityType.INT: extract_int_entity,
        EntityType.DATETIME: extract_datetime_entity,
        EntityType.SCALAR: extract_scalar_entity,
    }
)
