# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   normalizer.py

@Time    :   2021/4/16 3:35 下午

@Desc    :   把nlu服务返回的原始json转换为ParsedData

"""

import json
import logging
from typing import Any, List, Mapping, Optional, Text, Union

from convman.shared.exceptions import (
    CannotCastValue,
    MalformedPayload,
    MissingKey,
    NluParsingException,
    UnhandledDataType,
)
from convman.shared.nlu.constants import ENTITY_ATTRIBUTE_VALUE
from convman.shared.nlu.extractors import (
    ENTITY_EXTRACTORS,
    EntityExtractor,
    extract_confidence,
)
from convman.shared.nlu.parsed_data import (
    DataTypeMap,
    EntityType,
    ParsedData,
    ParsedEntity,
    ParsedIntent,
)

logger = logging.getLogger(__name__)


def normalize(
    raw: Union[bytes, Text],
    data_type_map: DataTypeMap,
    extractors: Mapping[EntityType, EntityExtractor] = ENTITY_EXTRACTORS,
) -> ParsedData:
    """Converts the raw output of an NLU backend into `ParsedData`.

    Every top level key is looked up in `data_type_map`; unknown keys are
    skipped. A field, or a single candidate of a field, which can't be
    converted is logged and left out, the rest of the payload is still used.

    Args:
        raw: The backend response body, a JSON object.
        data_type_map: Raw key to entity type mapping of the backend.
        extractors: Entity extractor to use for each entity type.

    Returns:
        The intent and the entities found in the payload.

    Raises:
        MalformedPayload: if `raw` is not a JSON object.
    """
    data = _load_json_object(raw)

    intent: Optional[ParsedIntent] = None
    entities: List[ParsedEntity] = []

    for key, value in data.items():
        data_type = data_type_map.get(key)

        if data_type is None:
            logger.debug(f"Data type is not handled: '{key}'.")
            continue

        if data_type == EntityType.INTENT:
            try:
                intent = to_intent(key, value)
            except NluParsingException as e:
                logger.warning(
                    f"Could not convert '{key}' to an intent ({data_type.value}): {e}"
                )
            continue

        entities.extend(to_entities(key, value, data_type, extractors))

    return ParsedData(intent, tuple(entities))


def _load_json_object(raw: Union[bytes, Text]) -> dict:
    try:
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8")
        data = json.loads(raw)
    except (UnicodeDecodeError, TypeError, ValueError, RecursionError) as e:
        logger.info(f"Could not parse JSON: {e}")
        raise MalformedPayload("Could not parse JSON")

    if not isinstance(data, dict):
        logger.info(f"Expected a JSON object but found a {type(data).__name__}.")
        raise MalformedPayload("Could not parse object from JSON")

    return data


def to_intent(key: Text, value: Any) -> ParsedIntent:
    """Keeps the first intent candidate, in the order sent by the backend."""
    if not isinstance(value, list):
        raise CannotCastValue(key, "array")

    if not value or not isinstance(value[0], dict):
        raise MissingKey(ENTITY_ATTRIBUTE_VALUE)

    name = value[0].get(ENTITY_ATTRIBUTE_VALUE)
    if not isinstance(name, str):
        raise MissingKey(ENTITY_ATTRIBUTE_VALUE)

    return ParsedIntent(name)


def to_entities(
    key: Text,
    value: Any,
    data_type: EntityType,
    extractors: Mapping[EntityType, EntityExtractor],
) -> List[ParsedEntity]:
    """Extracts one entity per valid candidate of the field `key`."""
    extractor = extractors.get(data_type)

    try:
        if extractor is None:
            raise UnhandledDataType(data_type.value)
        if not isinstance(value, list):
            raise CannotCastValue(key, "array")
    except NluParsingException as e:
        logger.warning(
            f"Could not convert '{key}' to entities ({data_type.value}): {e}"
        )
        return []

    entities = []
    for index, candidate in enumerate(value):
        try:
            if not isinstance(candidate, dict):
                raise CannotCastValue(key, "object")

            confidence = extract_confidence(candidate)
            entities.append(extractor(key, candidate, confidence))
        except NluParsingException as e:
            logger.warning(
                f"Could not convert candidate {index} of '{key}' to an entity "
                f"({data_type.value}): {e}"
            )

    return entities
