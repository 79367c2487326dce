# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   interpreter.py

@Time    :   2021/4/6 4:39 下午

@Desc    :   nlu解析器

"""

from typing import Any, Dict, List, NamedTuple, Text, Union

from convman.shared.nlu.normalizer import normalize
from convman.shared.nlu.parsed_data import DataTypeMap, ParsedData


class Intent(NamedTuple):
    """An intent known by the NLU backend."""

    id: Text
    name: Text

    def as_dict(self) -> Dict[Text, Any]:
        return dict(self._asdict())


class NaturalLanguageParser:
    """
    Turns the output of an NLU backend into `ParsedData`.

    Subclasses only need to provide the data type map of their backend.
    """

    @property
    def data_type_map(self) -> DataTypeMap:
        raise NotImplementedError(
            "Parser needs to define which raw fields map to which entity types."
        )

    def parse_nlu_data(self, raw: Union[bytes, Text]) -> ParsedData:
        """Normalizes a raw backend payload.

        Raises:
            MalformedPayload: if `raw` is not a JSON object.
        """
        return normalize(raw, self.data_type_map)


class NluRepository:
    """Gives access to the data stored by an NLU backend."""

    async def get_intents(self) -> List[Intent]:
        """Returns all of the intents the backend knows about."""
        raise NotImplementedError()
