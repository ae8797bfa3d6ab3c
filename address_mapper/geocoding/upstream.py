import logging
from typing import Optional, Dict, Any

import requests

from address_mapper import config

# Get logger
logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Raised when a third-party API answers with a non-2xx status."""

    def __init__(self, service: str, status_code: int, body: str):
        self.service = service
        self.status_code = status_code
        self.body = body
        super().__init__(f"{service} upstream error {status_code}: {body}")


def default_headers(extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    headers = {
        "User-Agent": config.USER_AGENT,
        "Accept": "application/json",
    }
    if extra:
        headers.update(extra)
    return headers


def _check(service: str, response: requests.Response) -> Any:
    if not response.ok:
        logger.warning(f"{service} answered HTTP {response.status_code}")
        raise UpstreamError(service, response.status_code, response.text)
    return response.json()


def get_json(service: str, url: str, params: Optional[Dict[str, Any]] = None,
             headers: Optional[Dict[str, str]] = None) -> Any:
    response = requests.get(
        url,
        params=params,
        headers=default_headers(headers),
        timeout=config.REQUEST_TIMEOUT
    )
    return _check(service, response)


def post_form(service: str, url: str, data: Dict[str, Any],
              headers: Optional[Dict[str, str]] = None) -> Any:
    extra = {"Content-Type": "application/x-www-form-urlencoded"}
    if headers:
        extra.update(headers)
    response = requests.post(
        url,
        data=data,
        headers=default_headers(extra),
        timeout=config.REQUEST_TIMEOUT
    )
    return _check(service, response)
