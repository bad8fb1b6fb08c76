"""HTTP call helper shared by LLM-backed providers: bounded timeout and retry"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from loan_finder.providers.base import ProviderConfig
from loan_finder.providers.errors import ProviderError, ProviderErrorKind, classify_exception

logger = logging.getLogger(__name__)


async def post_json(
    config: ProviderConfig,
    path: str,
    headers: Dict[str, str],
    payload: Dict[str, Any],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    POST a JSON payload to the provider and return the decoded JSON body.

    Retry strategy:
    - Only transient failures (timeouts, network errors, 5xx) are retried
    - At most config.max_retries extra attempts
    - Exponential backoff: backoff_base * 2^(attempt-1)

    Raises:
        ProviderError: classified failure after the retry budget is spent
    """
    url = f"{config.base_url.rstrip('/')}/{path.lstrip('/')}"
    attempt = 0

    async with httpx.AsyncClient(timeout=config.timeout, transport=transport) as client:
        while True:
            try:
                response = await client.post(url, headers=headers, json=payload)
                response.raise_for_status()
                try:
                    return response.json()
                except ValueError as e:
                    raise ProviderError(
                        ProviderErrorKind.UNKNOWN,
                        config.type.value,
                        config.model,
                        detail="response body is not JSON",
                    ) from e

            except ProviderError:
                raise

            except Exception as e:
                error = classify_exception(e, config.type.value, config.model)
                if not error.transient or attempt >= config.max_retries:
                    raise error from e

                attempt += 1
                backoff = config.backoff_base * (2 ** (attempt - 1))
                logger.warning(
                    f"{config.type.value} call failed, retrying",
                    extra={
                        "provider": config.type.value,
                        "error_type": error.kind.value,
                        "attempt": attempt,
                        "backoff_seconds": backoff,
                    },
                )
                await asyncio.sleep(backoff)
