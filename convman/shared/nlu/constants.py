# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   constants.py

@Time    :   2021/4/16 11:03 上午

@Desc    :   nlu相关的字段名

"""

INTENT = "intent"
ENTITIES = "entities"

ENTITY_ATTRIBUTE_TYPE = "type"
ENTITY_ATTRIBUTE_VALUE = "value"
ENTITY_ATTRIBUTE_CONFIDENCE = "confidence"
ENTITY_ATTRIBUTE_ROLE = "role"
ENTITY_ATTRIBUTE_GRAIN = "grain"
ENTITY_ATTRIBUTE_FROM = "from"
ENTITY_ATTRIBUTE_TO = "to"

INTENT_NAME_KEY = "name"
