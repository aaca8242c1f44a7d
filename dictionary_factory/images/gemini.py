"""Gemini image generation client and error classification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from google.genai import errors as genai_errors
from google.genai import types

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.config_manager.constants import (
    DEFAULT_IMAGE_MODEL,
    DEFAULT_IMAGE_SIZE,
    DEFAULT_IMAGE_TIMEOUT_SECONDS,
)
from dictionary_factory.errors import (
    ImageGenerationError,
    ProviderError,
    ProviderTimeoutError,
)
from dictionary_factory.gemini_client import (
    TRANSPORT_ERRORS,
    first_inline_data,
    status_code_of,
)
from dictionary_factory.guards import call_with_timeout

logger = log_mgr.get_logger().getChild("images.gemini")

CATEGORY_QUOTA = "quota"
CATEGORY_REGION = "region"
CATEGORY_PERMISSION = "permission"
CATEGORY_NOT_FOUND = "not_found"
CATEGORY_TIMEOUT = "timeout"
CATEGORY_GENERIC = "generic"

CATEGORY_MESSAGES = {
    CATEGORY_QUOTA: "Daily Image Quota Exceeded (429).",
    CATEGORY_REGION: "Region Not Supported (400). Use a supported region or VPN.",
    CATEGORY_PERMISSION: "Access Denied (403). Check API Key.",
    CATEGORY_NOT_FOUND: "Image Model Not Found (404).",
    CATEGORY_TIMEOUT: "Image generation timed out.",
    CATEGORY_GENERIC: "Image generation failed.",
}


def _category_for(status: Optional[int], message: str) -> str:
    lowered = message.lower()
    if status == 429 or "quota" in lowered or "resource_exhausted" in lowered:
        return CATEGORY_QUOTA
    if "region" in lowered or "location is not supported" in lowered:
        return CATEGORY_REGION
    if status in (401, 403) or "permission" in lowered or "api key" in lowered:
        return CATEGORY_PERMISSION
    if status == 404 or "not found" in lowered:
        return CATEGORY_NOT_FOUND
    if status == 400 and "failed_precondition" in lowered:
        return CATEGORY_REGION
    return CATEGORY_GENERIC


def classify_image_error(exc: BaseException) -> ImageGenerationError:
    """Return an :class:`ImageGenerationError` with a stable category message."""

    if isinstance(exc, ImageGenerationError):
        return exc
    if isinstance(exc, ProviderTimeoutError):
        category = CATEGORY_TIMEOUT
    else:
        status = exc.status_code if isinstance(exc, ProviderError) else status_code_of(exc)
        category = _category_for(status, str(exc))
    return ImageGenerationError(category, CATEGORY_MESSAGES[category])


@dataclass(frozen=True, slots=True)
class GeminiImageRequest:
    """Payload used to request a single illustration."""

    prompt: str
    image_size: str = DEFAULT_IMAGE_SIZE
    aspect_ratio: str = "16:9"

    def as_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_modalities=["IMAGE"],
            image_config=types.ImageConfig(
                image_size=self.image_size,
                aspect_ratio=self.aspect_ratio,
            ),
        )


class GeminiImageClient:
    """Minimal wrapper over ``client.models.generate_content`` for images."""

    def __init__(
        self,
        client: Any,
        *,
        model: str = DEFAULT_IMAGE_MODEL,
        timeout_seconds: Optional[float] = DEFAULT_IMAGE_TIMEOUT_SECONDS,
    ) -> None:
        self._client = client
        self.model = model
        self.timeout_seconds = timeout_seconds

    def generate(self, request: GeminiImageRequest) -> bytes:
        """Return raw image bytes or raise :class:`ImageGenerationError`."""

        def _call() -> Any:
            return self._client.models.generate_content(
                model=self.model,
                contents=request.prompt,
                config=request.as_config(),
            )

        try:
            response = call_with_timeout(
                _call, self.timeout_seconds, label=f"Gemini image ({self.model})"
            )
        except (ProviderError, genai_errors.APIError, *TRANSPORT_ERRORS) as exc:
            classified = classify_image_error(exc)
            logger.warning(
                "Image request failed: %s",
                exc,
                extra={
                    "event": "image.provider.failed",
                    "category": classified.category,
                    "console_suppress": True,
                },
            )
            raise classified from exc

        data = first_inline_data(response)
        if not data:
            raise ImageGenerationError(
                CATEGORY_GENERIC, "Image generation failed: no image data returned."
            )
        return data


__all__ = [
    "CATEGORY_GENERIC",
    "CATEGORY_MESSAGES",
    "CATEGORY_NOT_FOUND",
    "CATEGORY_PERMISSION",
    "CATEGORY_QUOTA",
    "CATEGORY_REGION",
    "CATEGORY_TIMEOUT",
    "GeminiImageClient",
    "GeminiImageRequest",
    "classify_image_error",
]
