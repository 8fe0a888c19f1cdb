"""HTTP adapter for the model-serving classification service."""
from __future__ import annotations

from typing import Dict, Mapping, Optional, Union

import httpx
from pydantic import BaseModel, StrictFloat, StrictInt, StrictStr, ValidationError

from tweet_sentiment.errors import (
    ClassificationRejectedError,
    ClassificationTimeoutError,
    ServiceUnavailableError,
    UnknownLabelError,
)
from tweet_sentiment.labels import Label
from tweet_sentiment.log_utils import get_logger

LOGGER = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
# Statuses that mean the whole run is misconfigured, not that one tweet was refused.
FATAL_STATUS_CODES = frozenset({401, 403, 404})


class ClassifyRequest(BaseModel):
    model: str
    text: str


class ClassifyResponse(BaseModel):
    # Strict types: a JSON boolean must not pass as 1.0.
    label: Union[StrictInt, StrictFloat, StrictStr]


class HttpClassifier:
    """Callable ``classify(model_name, text) -> Label`` backed by HTTP services.

    Each model is served from its own base URL. A single ``httpx.Client``
    is shared between worker threads; it keeps no per-request state.
    """

    def __init__(
        self,
        service_urls: Mapping[str, str],
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.service_urls: Dict[str, str] = {name: url.rstrip("/") for name, url in service_urls.items()}
        self.timeout = timeout
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def __call__(self, model_name: str, text: str) -> Label:
        url = f"{self.service_urls[model_name]}/classify"
        payload = ClassifyRequest(model=model_name, text=text).model_dump()
        try:
            response = self._client.post(url, json=payload)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ClassificationTimeoutError(f"{model_name} timed out after {self.timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status >= 500:
                raise ServiceUnavailableError(f"{model_name} answered {status}") from exc
            if status < 400 or status in FATAL_STATUS_CODES:
                raise
            raise ClassificationRejectedError(f"{model_name} rejected the text with {status}", status) from exc
        except httpx.TransportError as exc:
            raise ServiceUnavailableError(f"{model_name} is unreachable at {url}: {exc}") from exc

        try:
            parsed = ClassifyResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ServiceUnavailableError(f"Invalid classifier response from {model_name}: {exc}") from exc

        try:
            return Label.from_value(parsed.label)
        except UnknownLabelError:
            LOGGER.error("Model %s returned an unknown label %r", model_name, parsed.label)
            raise

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpClassifier":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = ["HttpClassifier", "ClassifyRequest", "ClassifyResponse", "DEFAULT_TIMEOUT_SECONDS"]
