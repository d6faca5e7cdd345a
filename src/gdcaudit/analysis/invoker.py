"""Single, timeout-bounded call to the hosted model.

No retry and no breaker: a failed call goes straight back to the
analyzer, which answers from the simulation table instead.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import litellm
from litellm.exceptions import APIConnectionError as LitellmConnectionError
from litellm.exceptions import Timeout as LitellmTimeout

from gdcaudit.config import AnalysisConfig
from gdcaudit.constants import (
    CREDENTIAL_MIN_LENGTH,
    CREDENTIAL_PREFIX,
    ERROR_TRUNCATION_CHARS,
    KEY_PREVIEW_CHARS,
    DegradedReason,
)
from gdcaudit.resilience.errors import (
    CredentialError,
    UpstreamError,
    degraded_reason_for,
)

logger = logging.getLogger(__name__)

# litellm stubs have partially unknown types; typed alias
if TYPE_CHECKING:
    _acompletion: Callable[..., Coroutine[Any, Any, Any]]
else:
    _acompletion = litellm.acompletion


@dataclass(frozen=True)
class ModelReply:
    """Raw completion text with token metadata."""

    text: str
    model: str
    input_tokens: int
    output_tokens: int


def check_credential(credential: str | None) -> str:
    """Return the credential if it looks like an Anthropic key.

    Raises ``CredentialError`` otherwise; never touches the network.
    """
    if not credential:
        raise CredentialError(
            DegradedReason.CREDENTIAL_MISSING,
            "No model credential configured",
        )
    if (
        not credential.startswith(CREDENTIAL_PREFIX)
        or len(credential) < CREDENTIAL_MIN_LENGTH
    ):
        raise CredentialError(
            DegradedReason.CREDENTIAL_MALFORMED,
            f"Credential must start with {CREDENTIAL_PREFIX!r} and be "
            f"at least {CREDENTIAL_MIN_LENGTH} characters",
        )
    return credential


@dataclass(frozen=True)
class CredentialStatus:
    """Presence and shape of the credential, without the secret."""

    configured: bool
    well_formed: bool
    key_preview: str
    key_length: int


def describe_credential(credential: str | None) -> CredentialStatus:
    """Report on the credential, exposing at most a short prefix."""
    if not credential:
        return CredentialStatus(
            configured=False,
            well_formed=False,
            key_preview="none",
            key_length=0,
        )
    try:
        check_credential(credential)
        well_formed = True
    except CredentialError:
        well_formed = False
    # Short keys would be revealed almost whole by the fixed-width preview
    visible = min(KEY_PREVIEW_CHARS, len(credential) // 4)
    return CredentialStatus(
        configured=True,
        well_formed=well_formed,
        key_preview=credential[:visible] + "...",
        key_length=len(credential),
    )


def _extract_text(response: Any) -> str:
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError) as exc:
        raise UpstreamError(
            DegradedReason.UPSTREAM_MALFORMED_BODY,
            f"Response has no completion choices: {exc}",
        ) from exc
    if not isinstance(content, str) or not content.strip():
        raise UpstreamError(
            DegradedReason.UPSTREAM_MALFORMED_BODY,
            "Response completion text is empty",
        )
    return content


async def invoke_model(prompt: str, config: AnalysisConfig) -> ModelReply:
    """Send one user-role prompt and return the first completion's text.

    Raises ``CredentialError`` before any I/O when the credential is
    missing or malformed, and ``UpstreamError`` for timeouts, HTTP
    errors, connection failures and unusable bodies. Cancellation of
    the awaiting task propagates and aborts the in-flight request.
    """
    api_key = check_credential(config.credential)

    try:
        response: Any = await asyncio.wait_for(
            _acompletion(
                model=config.model_identifier,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=config.max_output_length,
                temperature=config.temperature,
                timeout=config.request_timeout,
                api_key=api_key,
            ),
            timeout=config.request_timeout,
        )
    except (TimeoutError, LitellmTimeout) as exc:
        raise UpstreamError(
            DegradedReason.UPSTREAM_TIMEOUT,
            f"Model call exceeded {config.request_timeout}s",
        ) from exc
    except LitellmConnectionError as exc:
        raise UpstreamError(
            DegradedReason.UPSTREAM_CONNECTIVITY,
            str(exc)[:ERROR_TRUNCATION_CHARS],
        ) from exc
    except Exception as exc:
        raise UpstreamError(
            degraded_reason_for(exc),
            str(exc)[:ERROR_TRUNCATION_CHARS],
        ) from exc

    text = _extract_text(response)
    usage: Any = getattr(response, "usage", None)
    input_tokens: int = getattr(usage, "prompt_tokens", 0) or 0
    output_tokens: int = getattr(usage, "completion_tokens", 0) or 0

    logger.info(
        "event=model_call_ok model=%s input_tokens=%d output_tokens=%d",
        config.model_identifier,
        input_tokens,
        output_tokens,
    )

    return ModelReply(
        text=text,
        model=str(getattr(response, "model", None) or config.model_identifier),
        input_tokens=input_tokens,
        output_tokens=output_tokens,
    )
