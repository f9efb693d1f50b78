"""Request/response plumbing shared by every Nova Poshta operation."""

import logging
from typing import Any

import requests

from nova_poshta.config import ClientConfig
from nova_poshta.result import UNKNOWN_ERROR, Err, Ok, Result

logger = logging.getLogger(__name__)

API_URL = "https://api.novaposhta.ua/v2.0/json/"


def _error_list(errors: Any) -> list[str]:
    if errors is None:
        return [UNKNOWN_ERROR]
    if isinstance(errors, dict):
        errors = list(errors.values())
    elif isinstance(errors, (str, bytes)) or not isinstance(errors, list):
        errors = [errors]
    # The provider sends "errors": [] next to an empty "data".
    return [str(e) for e in errors] or [UNKNOWN_ERROR]


def normalize_response(payload: Any) -> Result[list]:
    """Turn a decoded provider body into Ok/Err.

    Only ``success: true`` with a non-empty ``data`` list counts as Ok; an
    empty result set is reported as an error like any other.
    """
    if not isinstance(payload, dict) or "success" not in payload:
        return Err([UNKNOWN_ERROR])

    data = payload.get("data")
    if payload["success"] is True and isinstance(data, list) and data:
        return Ok(data)
    return Err(_error_list(payload.get("errors")))


class JsonApiClient:
    """Posts ``{apiKey, modelName, calledMethod, methodProperties}`` envelopes.

    The session is injected so the embedding application owns its retry,
    timeout and TLS policy.
    """

    def __init__(self, config: ClientConfig, session: requests.Session | None = None):
        self.config = config
        if session is None:
            session = requests.Session()
            session.headers.update({"Content-Type": "application/json"})
        self.session = session

    def execute(
        self,
        model_name: str,
        called_method: str,
        method_properties: dict | None = None,
    ) -> Result[list]:
        """Call one remote method.

        Args:
            model_name: Provider model, e.g. "Address".
            called_method: Method on that model, e.g. "getCities".
            method_properties: Method arguments. None values are sent as null.

        Returns:
            Ok with the response's data rows, or Err with error messages.
        """
        envelope = {
            "apiKey": self.config.api_key,
            "modelName": model_name,
            "calledMethod": called_method,
            "methodProperties": method_properties or {},
        }
        logger.debug("POST %s.%s", model_name, called_method)

        try:
            resp = self.session.post(
                API_URL,
                json=envelope,
                headers={"Content-Type": "application/json"},
            )
        except requests.RequestException as exc:
            logger.warning("%s.%s transport failure: %s", model_name, called_method, exc)
            return Err([f"API request failed: {exc}"])

        try:
            payload = resp.json()
        except ValueError:
            if not resp.ok:
                logger.warning("%s.%s returned HTTP %s", model_name, called_method, resp.status_code)
                return Err([f"API request failed: HTTP {resp.status_code} {resp.reason or ''}".rstrip()])
            logger.warning("%s.%s returned a non-JSON body", model_name, called_method)
            return Err([UNKNOWN_ERROR])

        result = normalize_response(payload)
        if isinstance(result, Err):
            logger.warning("%s.%s rejected: %s", model_name, called_method, "; ".join(result.errors))
        return result

    def fetch_binary(self, url: str) -> bytes | None:
        """GET a binary document; the body on HTTP 200, otherwise None."""
        # The URL embeds the API key, so it is never logged.
        try:
            with self.session.get(url, stream=True) as resp:
                if resp.status_code != 200:
                    logger.warning("Binary download returned HTTP %s", resp.status_code)
                    return None
                return resp.content
        except requests.RequestException as exc:
            logger.warning("Binary download failed: %s", type(exc).__name__)
            return None
