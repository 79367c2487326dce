# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   dialogue_config.py

@Time    :   2021/4/16 9:30 上午

@Desc    :   默认配置项

"""

DEFAULT_CONFIG_PATH = "config.yml"

DEFAULT_SERVER_PORT = 5005

DEFAULT_REQUEST_TIMEOUT = 60 * 5  # 5 minutes

DEFAULT_NLU_BACKEND = "wit"

DEFAULT_REPOSITORY = "memory"

DEFAULT_MESSAGING_API = "facebook"

DEFAULT_DB_HOST = "localhost"

DEFAULT_DB_NAME = "conversation_management"

FB_GRAPH_API_URL = "https://graph.facebook.com"

DEFAULT_FB_API_VERSION = "v8.0"

WIT_API_URL = "https://api.wit.ai"

DEFAULT_WIT_API_VERSION = "20200513"
