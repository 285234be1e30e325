"""Grocery categorization providers: the external AI service and the rule fallback."""

import asyncio
import logging
from typing import Any, Iterable, Protocol, runtime_checkable

import httpx
from pydantic import ValidationError
from rapidfuzz import fuzz, process
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from grocerylist.config import get_settings
from grocerylist.logging_config import get_logger
from grocerylist.plan.categories import canonical_category, categorize
from grocerylist.schemas import CategorizeRequest, CategorizeResponse

logger = get_logger(__name__)

CATEGORIZE_ENDPOINT = "grocery/categorize-ingredients"


class CategorizerError(Exception):
    """Raised when the external categorizer cannot produce categories."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


@runtime_checkable
class CategoryProvider(Protocol):
    """Anything that maps ingredient names to grocery categories."""

    async def categorize(self, names: list[str]) -> dict[str, str]: ...


class RuleBasedCategoryProvider:
    """Category provider backed by the keyword rules."""

    @property
    def name(self) -> str:
        return "rules"

    async def categorize(self, names: list[str]) -> dict[str, str]:
        return {n: categorize(n) for n in names}


class HttpCategoryProvider:
    """
    Client for the external AI categorizer.

    POSTs {"ingredients": [...]} to <base_url>/grocery/categorize-ingredients
    and expects {"categories": {...}} back, keyed either by ingredient name or
    by category. Returned names are matched back to the requested ones, since
    the service may echo them with different casing or wording.
    """

    BACKOFF_BASE = 1
    BACKOFF_MAX = 10
    MATCH_SCORE_CUTOFF = 85.0

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.categorizer_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.categorizer_api_key
        self.timeout = timeout or settings.categorizer_timeout
        self.max_retries = max_retries or settings.categorizer_max_retries
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        """Return provider name."""
        return "http"

    async def __aenter__(self) -> "HttpCategoryProvider":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {
                "Accept": "application/json",
                "User-Agent": "GroceryList/1.0",
            }
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout), headers=headers)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a payload with retry logic and return the decoded JSON body."""
        if not self.base_url:
            raise CategorizerError("No categorizer URL configured")

        url = f"{self.base_url}/{CATEGORIZE_ENDPOINT}"
        client = await self._get_client()

        @retry(
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.BACKOFF_BASE, max=self.BACKOFF_MAX),
            reraise=True,
        )
        async def _do_request() -> httpx.Response:
            return await client.post(url, json=payload)

        try:
            response = await _do_request()
        except (RetryError, httpx.TimeoutException, httpx.NetworkError) as e:
            logger.error(f"Request failed after {self.max_retries} attempts: {url}")
            raise CategorizerError(
                f"Request failed after {self.max_retries} attempts",
                response=str(e),
            ) from e

        if response.status_code >= 400:
            error_detail = response.text[:500] if response.text else "No details"
            logger.error(f"Categorizer error {response.status_code} for {url}: {error_detail}")
            raise CategorizerError(
                f"Categorizer request failed with status {response.status_code}",
                status_code=response.status_code,
                response=error_detail,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CategorizerError(
                "Categorizer returned invalid JSON",
                status_code=response.status_code,
                response=response.text[:500],
            ) from e

        if not isinstance(data, dict):
            raise CategorizerError(
                "Categorizer returned an unexpected payload",
                status_code=response.status_code,
                response=str(data)[:500],
            )
        return data

    async def categorize(self, names: list[str]) -> dict[str, str]:
        """
        Categorize ingredient names with the external service.

        Returns:
            Mapping of requested name -> category for every name the service
            answered with a known category. Names it skipped are absent.

        Raises:
            CategorizerError: On transport errors, HTTP errors or a malformed body.
        """
        if not names:
            return {}

        request = CategorizeRequest(ingredients=list(names))
        data = await self._request(request.model_dump())

        try:
            response = CategorizeResponse.model_validate(data)
        except ValidationError as e:
            raise CategorizerError("Categorizer response failed validation", response=str(e)) from e

        pairs = list(_iter_pairs(response.categories))
        result = self._reconcile(request.ingredients, pairs)
        logger.info(f"Categorizer answered {len(result)}/{len(request.ingredients)} ingredients")
        return result

    def _reconcile(
        self, requested: list[str], pairs: Iterable[tuple[str, str]]
    ) -> dict[str, str]:
        """Map returned (name, label) pairs onto the requested names."""
        lowered = {name.lower().strip(): name for name in requested}
        result: dict[str, str] = {}

        for returned_name, label in pairs:
            category = canonical_category(label)
            if category is None:
                logger.debug(f"Dropping unknown category {label!r} for {returned_name!r}")
                continue

            target = returned_name if returned_name in requested else None
            if target is None:
                target = lowered.get(returned_name.lower().strip())
            if target is None:
                candidates = [n for n in requested if n not in result]
                match = process.extractOne(
                    returned_name,
                    candidates,
                    scorer=fuzz.token_sort_ratio,
                    processor=str.lower,
                    score_cutoff=self.MATCH_SCORE_CUTOFF,
                )
                if match is None:
                    logger.debug(f"No requested ingredient matches {returned_name!r}")
                    continue
                target = match[0]

            result.setdefault(target, category)
        return result


def _iter_pairs(categories: dict[str, str | list[str]]) -> Iterable[tuple[str, str]]:
    """Yield (ingredient, category) from either response shape."""
    for key, value in categories.items():
        if isinstance(value, list):
            for name in value:
                yield name, key
        else:
            yield key, value


async def categorize_with_fallback(
    names: Iterable[str],
    provider: CategoryProvider | None = None,
    timeout: float | None = None,
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> dict[str, str]:
    """
    Categorize names with a provider, filling every gap with the keyword rules.

    Provider failures and timeouts are logged and never raised. Names the
    provider skips, or answers with a label outside the known categories,
    are categorized by the rules.
    """
    log = log if log is not None else logger
    requested = list(dict.fromkeys(n for n in names if isinstance(n, str)))
    provided: dict[str, str] = {}

    if provider is not None and requested:
        try:
            if timeout is not None and timeout > 0:
                provided = await asyncio.wait_for(provider.categorize(requested), timeout=timeout)
            else:
                provided = await provider.categorize(requested)
        except asyncio.TimeoutError:
            log.warning(f"Categorizer timed out after {timeout}s, using keyword rules")
            provided = {}
        except CategorizerError as e:
            log.warning(f"Categorizer failed, using keyword rules: {e}")
            provided = {}
        except Exception as e:
            log.warning(f"Unexpected categorizer failure, using keyword rules: {e}")
            provided = {}

    result: dict[str, str] = {}
    fallback_count = 0
    for name in requested:
        category = canonical_category(provided.get(name)) if isinstance(provided, dict) else None
        if category is None:
            category = categorize(name)
            fallback_count += 1
        result[name] = category

    if provider is not None and fallback_count:
        log.info(f"Categorized {fallback_count}/{len(requested)} ingredients with keyword rules")
    return result
