from __future__ import annotations

import logging

import requests

from buildfeed_core.errors import ConfigurationError, TransportError
from buildfeed_core.transport.base import BaseTransport

logger = logging.getLogger(__name__)

SHORTEN_URL = "https://api.weibo.com/2/short_url/shorten.json"
STATUS_UPDATE_URL = "https://api.weibo.com/2/statuses/update.json"


class WeiboTransport(BaseTransport):
    """Posts statuses to Sina Weibo using an OAuth2 access token."""

    def __init__(self, access_token: str | None, session: requests.Session | None = None, timeout: float = 10):
        if not access_token:
            raise ConfigurationError("Please set your weibo access token (WEIBO_ACCESS_TOKEN).")
        self._access_token = access_token
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    def shorten(self, url: str) -> str:
        try:
            response = self._session.get(
                SHORTEN_URL,
                params={"access_token": self._access_token, "url_long": url},
                timeout=self._timeout,
            )
            response.raise_for_status()
            return response.json()["urls"][0]["url_short"]
        except requests.RequestException as e:
            raise TransportError("shorten", str(e)) from e
        except (ValueError, KeyError, IndexError, TypeError) as e:
            # ValueError covers a non-JSON body
            raise TransportError("shorten", f"unexpected response: {e!r}") from e

    def post(self, message: str) -> None:
        try:
            response = self._session.post(
                STATUS_UPDATE_URL,
                data={"access_token": self._access_token, "status": message},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransportError("post", str(e)) from e
        logger.debug("Weibo status posted (HTTP %d)", response.status_code)

    def close(self) -> None:
        self._session.close()
