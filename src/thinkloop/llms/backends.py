"""
Concrete LLM backends.

We support four back-ends out of the box:

1. **Vertex AI** text models via the REST ``:predict`` endpoint (bearer token).
2. **Hugging Face Text-Generation-Inference (TGI)** for self-hosted models.
3. **OpenAI** and **Anthropic** via their official SDKs (requires env keys).

Additional providers can be added by subclassing :class:`thinkloop.llms.LLM` and registering via
:func:`thinkloop.llms.register_llm`.
"""

from __future__ import annotations

import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Optional,
)

import httpx

from thinkloop.core.context import RunContext
from thinkloop.llms import (
    LLM,
    LLMBackendError,
    LLMParams,
    register_llm,
)

if TYPE_CHECKING:
    from thinkloop.config import Settings

logger = logging.getLogger(__name__)

_VERTEX_DEFAULT_MODEL = "text-bison@001"


def _timeout(ctx: RunContext, default: float) -> float:
    """Per-request timeout: the backend default, capped by what is left of the run's deadline."""
    remaining = ctx.remaining()
    if remaining is None:
        return default
    return min(default, remaining)


def _as_params(params: Any) -> LLMParams:
    if params is None:
        return LLMParams()
    if isinstance(params, LLMParams):
        return params
    return LLMParams.model_validate(params)


# ---------------------------------------------------------------------------
# HTTP backends
# ---------------------------------------------------------------------------
@register_llm("vertex")
class VertexLLM(LLM):
    """Vertex AI text model (``publishers/google/models/<model>:predict``)."""

    def __init__(
        self,
        api_endpoint: str,
        project_id: str,
        api_key: Optional[str] = None,
        location: str = "us-central1",
        request_timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        if not project_id:
            raise ValueError("a GCP project ID is required for the vertex backend")
        self.api_endpoint = api_endpoint
        self.project_id = project_id
        self.api_key = api_key
        self.location = location
        self.request_timeout = request_timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: "Settings") -> "VertexLLM":
        return cls(
            api_endpoint=settings.API_ENDPOINT,
            project_id=settings.GCP_PROJECT_ID or "",
            api_key=settings.API_KEY,
            request_timeout=settings.REQUEST_TIMEOUT,
        )

    def url(self, model: str) -> str:
        return (
            f"https://{self.api_endpoint}/v1/projects/{self.project_id}/locations/"
            f"{self.location}/publishers/google/models/{model}:predict"
        )

    def generate(self, ctx: RunContext, prompt: str, params: Any) -> str:
        p = _as_params(params)
        model = p.model or _VERTEX_DEFAULT_MODEL
        payload = {
            "instances": [{"content": prompt}],
            "parameters": {
                "temperature": p.temperature,
                "maxOutputTokens": p.max_tokens,
                "topK": p.top_k,
                "topP": p.top_p,
            },
        }
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        ctx.raise_if_cancelled()
        data = _post_json(
            self._client,
            self.url(model),
            payload,
            headers=headers,
            timeout=_timeout(ctx, self.request_timeout),
        )
        predictions = data.get("predictions") or []
        if not predictions:
            raise LLMBackendError("no predictions returned")
        content = predictions[0].get("content", "")
        logger.debug("Vertex response: %s", content)
        return str(content)


@register_llm("tgi")
class TGILLM(LLM):
    """Text-Generation-Inference endpoint reached with an httpx client."""

    def __init__(
        self,
        endpoint: str,
        request_timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self.endpoint = endpoint
        self.request_timeout = request_timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TGILLM":
        return cls(endpoint=settings.TGI_ENDPOINT, request_timeout=settings.REQUEST_TIMEOUT)

    def generate(self, ctx: RunContext, prompt: str, params: Any) -> str:
        p = _as_params(params)
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": p.max_tokens,
                "temperature": p.temperature,
                "top_k": p.top_k,
                "top_p": p.top_p,
            },
        }
        ctx.raise_if_cancelled()
        data = _post_json(
            self._client, self.endpoint, payload, timeout=_timeout(ctx, self.request_timeout)
        )
        try:
            content = data["generated_text"]
        except (KeyError, TypeError) as exc:
            raise LLMBackendError(f"unexpected TGI response: {data!r}") from exc
        logger.debug("TGI response: %s", content)
        return str(content)


def _post_json(
    client: Optional[httpx.Client],
    url: str,
    payload: Dict[str, Any],
    *,
    timeout: float,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    """POST *payload* and decode the JSON body, turning transport/status failures into errors."""
    try:
        if client is not None:
            resp = client.post(url, json=payload, headers=headers, timeout=timeout)
        else:
            with httpx.Client(timeout=timeout) as c:
                resp = c.post(url, json=payload, headers=headers)
    except httpx.HTTPError as exc:
        raise LLMBackendError(f"failed to send request: {exc}") from exc

    if resp.status_code != httpx.codes.OK:
        raise LLMBackendError(
            f"request failed with status code {resp.status_code}: {resp.text}"
        )
    try:
        return resp.json()
    except ValueError as exc:
        raise LLMBackendError(f"failed to decode response: {exc}") from exc


# ---------------------------------------------------------------------------
# SDK backends
# ---------------------------------------------------------------------------
@register_llm("openai")
class OpenAILLM(LLM):
    """OpenAI chat-completions backend."""

    DEFAULT_MODEL = "gpt-4o-mini"

    def __init__(self, api_key: Optional[str] = None, request_timeout: float = 30.0):
        self.api_key = api_key
        self.request_timeout = request_timeout
        self._client: Any = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "OpenAILLM":
        return cls(api_key=settings.OPENAI_API_KEY, request_timeout=settings.REQUEST_TIMEOUT)

    @property
    def client(self) -> Any:
        if self._client is None:
            import openai  # pylint: disable=import-outside-toplevel

            self._client = openai.OpenAI(api_key=self.api_key)
        return self._client

    def generate(self, ctx: RunContext, prompt: str, params: Any) -> str:
        p = _as_params(params)
        ctx.raise_if_cancelled()
        resp = self.client.chat.completions.create(
            model=p.model or self.DEFAULT_MODEL,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=p.max_tokens,
            temperature=p.temperature,
            top_p=p.top_p,
            timeout=_timeout(ctx, self.request_timeout),
        )
        content = resp.choices[0].message.content
        if not content:
            raise LLMBackendError("empty response from OpenAI")
        logger.debug("OpenAI response: %s", content)
        return content


@register_llm("anthropic")
class AnthropicLLM(LLM):
    """Anthropic messages backend."""

    DEFAULT_MODEL = "claude-3-5-haiku-latest"

    def __init__(self, api_key: Optional[str] = None, request_timeout: float = 30.0):
        self.api_key = api_key
        self.request_timeout = request_timeout
        self._client: Any = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "AnthropicLLM":
        return cls(api_key=settings.ANTHROPIC_API_KEY, request_timeout=settings.REQUEST_TIMEOUT)

    @property
    def client(self) -> Any:
        if self._client is None:
            import anthropic  # pylint: disable=import-outside-toplevel

            self._client = anthropic.Anthropic(api_key=self.api_key)
        return self._client

    def generate(self, ctx: RunContext, prompt: str, params: Any) -> str:
        p = _as_params(params)
        ctx.raise_if_cancelled()
        response = self.client.messages.create(
            model=p.model or self.DEFAULT_MODEL,
            max_tokens=p.max_tokens,
            messages=[{"role": "user", "content": prompt}],
            temperature=p.temperature,
            top_k=p.top_k,
            top_p=p.top_p,
            timeout=_timeout(ctx, self.request_timeout),
        )

        # Concatenate the text blocks; other block types carry no completion text.
        text = "".join(block.text for block in response.content if block.type == "text")
        logger.debug("Anthropic response: %s", text)
        return text
