# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   endpoints.py

@Time    :   2021/4/6 3:48 下午

@Desc    :   外部端口信息, wit和facebook的http接口都通过它访问

"""

import logging
from typing import Any, Dict, Optional, Text, Tuple

import aiohttp
from aiohttp.client_exceptions import ContentTypeError

from convman.shared.dialogue_config import DEFAULT_REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


def concat_url(base: Text, subpath: Optional[Text]) -> Text:
    """Append a subpath to a base url.

    A leading slash of the subpath does not replace the path of `base`,
    unlike `urljoin`: the subpath is always appended.
    """
    if not subpath:
        return base

    return base.rstrip("/") + "/" + subpath.lstrip("/")


class ClientResponseError(aiohttp.ClientError):
    """Raised when an endpoint answers with a 4xx or 5xx status."""

    def __init__(self, status: int, message: Text, text: Text) -> None:
        self.status = status
        self.message = message
        self.text = text
        super().__init__(f"{status}, {message}, body='{text}'")


class EndpointConfig:
    """
    外部端点配置, 一个实例对应一个http服务

    Args:
        url: Base url of the service.
        params: Query parameters sent with every request.
        headers: Headers sent with every request.
        token: Token sent as the `token_name` query parameter.
        token_name: Name of the query parameter holding `token`.
        bearer_token: Token sent in the `Authorization` header.
        timeout: Total timeout of a request, in seconds.
    """

    def __init__(
        self,
        url: Text,
        params: Optional[Dict[Text, Any]] = None,
        headers: Optional[Dict[Text, Any]] = None,
        token: Optional[Text] = None,
        token_name: Text = "token",
        bearer_token: Optional[Text] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self.url = url
        self.params = dict(params or {})
        self.headers = dict(headers or {})
        self.token = token
        self.token_name = token_name
        self.timeout = timeout

        if bearer_token:
            self.headers["Authorization"] = f"Bearer {bearer_token}"

    def _identity(self) -> Tuple[Any, ...]:
        return (
            self.url,
            self.params,
            self.headers,
            self.token,
            self.token_name,
            self.timeout,
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, EndpointConfig):
            return False
        return self._identity() == other._identity()

    def session(self) -> aiohttp.ClientSession:
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        return aiohttp.ClientSession(headers=self.headers, timeout=timeout)

    def combine_parameters(
        self, kwargs: Optional[Dict[Text, Any]] = None
    ) -> Dict[Text, Any]:
        """Query parameters of a request: the endpoint's, its token, then the
        `params` of the call, which is popped from `kwargs`."""
        combined = dict(self.params)

        if self.token:
            combined[self.token_name] = self.token

        if kwargs:
            combined.update(kwargs.pop("params", None) or {})

        return combined

    async def request(
        self,
        method: Text = "post",
        subpath: Optional[Text] = None,
        content_type: Optional[Text] = "application/json",
        **kwargs: Any,
    ) -> Optional[Any]:
        """Sends a request to the endpoint and returns the decoded json body,
        `None` when the answer is not json.

        Extra keyword arguments (`json`, `data`, `params`...) are handed to
        `aiohttp.ClientSession.request`.

        Raises:
            ClientResponseError: if the endpoint answers with an error status.
        """
        request_headers = {"Content-Type": content_type} if content_type else {}
        request_headers.update(kwargs.pop("headers", {}))
        query = self.combine_parameters(kwargs)

        url = concat_url(self.url, subpath)
        logger.debug(f"Sending {method.upper()} request to '{url}'.")

        async with self.session() as session:
            async with session.request(
                method, url, headers=request_headers, params=query, **kwargs
            ) as resp:
                if resp.status >= 400:
                    body = await resp.text()
                    raise ClientResponseError(resp.status, resp.reason, body)

                try:
                    return await resp.json()
                except ContentTypeError:
                    logger.debug(f"'{url}' did not answer with json.")
                    return None
