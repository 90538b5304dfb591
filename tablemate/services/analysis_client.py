"""External language/vision model access.

The orchestration services never talk to OpenAI directly. They depend on
an ``AnalysisClient`` with a single ``analyze`` coroutine so that tests
and alternative providers can substitute their own implementation.

``OpenAIAnalysisClient`` sends one chat completion per call. JSON
requests use ``response_format={"type": "json_object"}`` and the decoded
object is returned as-is; validation, defaulting and clamping of the
fields is the caller's job. Plain text requests come back as
``{"text": ...}``. The client makes a single attempt (``max_retries=0``)
because every caller has a local fallback.
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from tablemate.core.config import settings
from tablemate.core.observability import sentry_breadcrumb

logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """Base class for failures of the external analysis service."""


class AnalysisUnavailableError(AnalysisError):
    """No analysis provider is configured."""


class MalformedAnalysisError(AnalysisError):
    """The provider answered with something other than the requested shape."""


@dataclass
class AnalysisRequest:
    """One structured prompt for the external model."""

    instructions: str
    text: str
    image: Optional[bytes] = None
    expect_json: bool = True
    max_tokens: int = 1000


class AnalysisClient(ABC):
    """Capability to run one analysis against an external model."""

    @abstractmethod
    async def analyze(self, request: AnalysisRequest) -> Dict[str, Any]:
        """Return the structured result for ``request``.

        Must raise ``AnalysisError`` (or any exception) on failure; callers
        treat every exception as "unavailable" and fall back.
        """


class OpenAIAnalysisClient(AnalysisClient):
    """``AnalysisClient`` backed by the OpenAI chat completions API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        api_key = api_key or settings.OPENAI_API_KEY
        if not api_key:
            raise AnalysisUnavailableError("OpenAI API key not configured")
        self.model = model or settings.OPENAI_MODEL
        self.client = AsyncOpenAI(
            api_key=api_key,
            timeout=timeout or settings.ANALYSIS_TIMEOUT_SECONDS,
            max_retries=0,
        )

    def _build_messages(self, request: AnalysisRequest) -> List[Dict[str, Any]]:
        if request.image is None:
            user_content: Any = request.text
        else:
            b64 = base64.b64encode(request.image).decode("utf-8")
            user_content = [
                {"type": "text", "text": request.text},
                {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{b64}"}},
            ]
        return [
            {"role": "system", "content": request.instructions},
            {"role": "user", "content": user_content},
        ]

    async def analyze(self, request: AnalysisRequest) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = dict(
            model=self.model,
            messages=self._build_messages(request),
            max_tokens=request.max_tokens,
        )
        if request.expect_json:
            kwargs["response_format"] = {"type": "json_object"}
        response = await self.client.chat.completions.create(**kwargs)
        content = response.choices[0].message.content or ""
        logger.debug("[analysis] model=%s chars=%d", self.model, len(content))

        if not request.expect_json:
            if not content.strip():
                raise MalformedAnalysisError("empty completion")
            return {"text": content.strip()}

        try:
            data = json.loads(content or "{}")
        except json.JSONDecodeError as exc:
            raise MalformedAnalysisError(f"response is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise MalformedAnalysisError("response JSON is not an object")
        return data


def build_default_client() -> Optional[AnalysisClient]:
    """Return the OpenAI client when a key is configured, else ``None``."""
    if not settings.OPENAI_API_KEY:
        logger.info("OPENAI_API_KEY not set; analysis will use local fallbacks")
        return None
    return OpenAIAnalysisClient()


async def run_analysis(
    client: Optional[AnalysisClient],
    request: AnalysisRequest,
    operation: str,
    timeout: Optional[float] = None,
) -> Optional[Dict[str, Any]]:
    """Run ``request`` once, returning ``None`` when the caller should fall back.

    Unconfigured clients, provider errors, malformed answers and timeouts
    are all logged and reported as ``None``; nothing propagates.
    """
    if client is None:
        _record_fallback(operation, "analysis client not configured")
        return None
    try:
        return await asyncio.wait_for(
            client.analyze(request),
            timeout=timeout if timeout is not None else settings.ANALYSIS_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        _record_fallback(operation, "timed out")
    except Exception as exc:
        _record_fallback(operation, f"{type(exc).__name__}: {exc}")
    return None


def _record_fallback(operation: str, reason: str) -> None:
    logger.warning("%s failed, using fallback: %s", operation, reason)
    sentry_breadcrumb(
        category="analysis",
        message=f"{operation}.fallback",
        level="warning",
        data={"reason": reason[:200]},
    )
