"""Tests for the categorization providers and the rule fallback."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from grocerylist.services.categorization import (
    CategorizerError,
    CategoryProvider,
    HttpCategoryProvider,
    RuleBasedCategoryProvider,
    categorize_with_fallback,
)


@pytest.fixture
def provider():
    """Create an HTTP provider pointing at a fake service."""
    return HttpCategoryProvider(
        base_url="http://categorizer.test/api/",
        api_key="test-key",
        timeout=1.0,
        max_retries=2,
    )


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestHttpCategoryProviderInit:
    """Tests for HttpCategoryProvider initialization."""

    def test_explicit_arguments(self, provider):
        """Test explicit arguments win over settings."""
        assert provider.base_url == "http://categorizer.test/api"
        assert provider.api_key == "test-key"
        assert provider.timeout == 1.0
        assert provider.max_retries == 2
        assert provider.name == "http"

    def test_defaults_from_settings(self, monkeypatch):
        """Test settings supply the defaults."""
        monkeypatch.setenv("CATEGORIZER_URL", "http://from-env.test")
        monkeypatch.setenv("CATEGORIZER_TIMEOUT", "4.5")

        provider = HttpCategoryProvider()

        assert provider.base_url == "http://from-env.test"
        assert provider.timeout == 4.5
        assert provider.max_retries == 3

    def test_is_category_provider(self, provider):
        """Test both providers satisfy the protocol."""
        assert isinstance(provider, CategoryProvider)
        assert isinstance(RuleBasedCategoryProvider(), CategoryProvider)


class TestHttpCategoryProviderCategorize:
    """Tests for HttpCategoryProvider.categorize."""

    @pytest.mark.asyncio
    async def test_name_to_category_response(self, provider):
        """Test the name -> category response shape."""
        with patch.object(provider, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = {
                "categories": {"onion": "Produce", "olive oil": "Pantry"},
            }

            result = await provider.categorize(["onion", "olive oil"])

            assert result == {"onion": "Produce", "olive oil": "Pantry"}
            mock_request.assert_called_once_with({"ingredients": ["onion", "olive oil"]})

    @pytest.mark.asyncio
    async def test_category_to_names_response(self, provider):
        """Test the category -> names response shape."""
        with patch.object(provider, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = {
                "categories": {"Produce": ["onion", "garlic"], "Dairy & Eggs": ["milk"]},
            }

            result = await provider.categorize(["onion", "garlic", "milk"])

            assert result == {"onion": "Produce", "garlic": "Produce", "milk": "Dairy & Eggs"}

    @pytest.mark.asyncio
    async def test_reconciles_returned_names(self, provider):
        """Test returned names are matched back to the requested names."""
        with patch.object(provider, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = {
                "categories": {
                    "Onion": "Produce",
                    "olive oil.": "Pantry",
                    "unrelated thing": "Snacks",
                },
            }

            result = await provider.categorize(["onion", "olive oil", "salt"])

            assert result == {"onion": "Produce", "olive oil": "Pantry"}

    @pytest.mark.asyncio
    async def test_unknown_labels_dropped(self, provider):
        """Test labels outside the known categories are dropped; known ones canonicalized."""
        with patch.object(provider, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = {
                "categories": {"milk": "Deli", "garlic powder": "spices & herbs"},
            }

            result = await provider.categorize(["milk", "garlic powder"])

            assert result == {"garlic powder": "Spices & Herbs"}

    @pytest.mark.asyncio
    async def test_invalid_response_body(self, provider):
        """Test a body that fails validation raises CategorizerError."""
        with patch.object(provider, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = {"categories": "oops"}

            with pytest.raises(CategorizerError):
                await provider.categorize(["milk"])

    @pytest.mark.asyncio
    async def test_empty_names(self, provider):
        """Test no request is made for an empty list."""
        with patch.object(provider, "_request", new_callable=AsyncMock) as mock_request:
            assert await provider.categorize([]) == {}
            mock_request.assert_not_called()


class TestHttpCategoryProviderRequest:
    """Tests for HttpCategoryProvider._request over a mock transport."""

    @pytest.mark.asyncio
    async def test_posts_to_endpoint(self, provider):
        """Test the URL, method and body of the request."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"categories": {"onion": "Produce"}})

        provider._client = _mock_client(handler)

        result = await provider.categorize(["onion"])

        assert result == {"onion": "Produce"}
        assert str(seen[0].url) == "http://categorizer.test/api/grocery/categorize-ingredients"
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {"ingredients": ["onion"]}
        await provider.close()

    @pytest.mark.asyncio
    async def test_http_error(self, provider):
        """Test HTTP errors raise CategorizerError with the status code."""
        provider._client = _mock_client(lambda request: httpx.Response(503, text="unavailable"))

        with pytest.raises(CategorizerError) as exc_info:
            await provider._request({"ingredients": ["onion"]})

        assert exc_info.value.status_code == 503
        assert exc_info.value.response == "unavailable"

    @pytest.mark.asyncio
    async def test_invalid_json(self, provider):
        """Test a non-JSON body raises CategorizerError."""
        provider._client = _mock_client(lambda request: httpx.Response(200, text="not json"))

        with pytest.raises(CategorizerError, match="invalid JSON"):
            await provider._request({"ingredients": ["onion"]})

    @pytest.mark.asyncio
    async def test_non_object_json(self, provider):
        """Test a JSON body that is not an object raises CategorizerError."""
        provider._client = _mock_client(lambda request: httpx.Response(200, json=["onion"]))

        with pytest.raises(CategorizerError, match="unexpected payload"):
            await provider._request({"ingredients": ["onion"]})

    @pytest.mark.asyncio
    async def test_retries_timeouts(self, provider):
        """Test timeouts are retried, then reported as CategorizerError."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectTimeout("timed out", request=request)

        provider.BACKOFF_BASE = 0
        provider._client = _mock_client(handler)

        with pytest.raises(CategorizerError, match="after 2 attempts"):
            await provider._request({"ingredients": ["onion"]})

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_missing_url(self):
        """Test a provider without a URL fails fast."""
        provider = HttpCategoryProvider(base_url="")

        with pytest.raises(CategorizerError, match="No categorizer URL"):
            await provider._request({"ingredients": ["onion"]})

    @pytest.mark.asyncio
    async def test_client_lifecycle(self, provider):
        """Test the client is created lazily and closed on exit."""
        async with provider:
            client = await provider._get_client()
            assert client.headers["Authorization"] == "Bearer test-key"
            assert await provider._get_client() is client

        assert provider._client is None


class TestCategorizeWithFallback:
    """Tests for categorize_with_fallback function."""

    @pytest.mark.asyncio
    async def test_no_provider_uses_rules(self):
        """Test the keyword rules are used without a provider."""
        result = await categorize_with_fallback(["garlic powder", "garlic"])

        assert result == {"garlic powder": "Spices & Herbs", "garlic": "Produce"}

    @pytest.mark.asyncio
    async def test_provider_answers_win(self):
        """Test provider answers are used and gaps filled by rules."""
        provider = AsyncMock()
        provider.categorize = AsyncMock(return_value={"garlic": "Pantry"})

        result = await categorize_with_fallback(["garlic", "milk"], provider=provider)

        assert result == {"garlic": "Pantry", "milk": "Dairy & Eggs"}
        provider.categorize.assert_awaited_once_with(["garlic", "milk"])

    @pytest.mark.asyncio
    async def test_invalid_provider_labels_fall_back(self):
        """Test unknown labels from a provider fall back to rules."""
        provider = AsyncMock()
        provider.categorize = AsyncMock(return_value={"onion": "Deli", "rice": "pantry"})

        result = await categorize_with_fallback(["onion", "rice"], provider=provider)

        assert result == {"onion": "Produce", "rice": "Pantry"}

    @pytest.mark.asyncio
    async def test_provider_error_falls_back(self):
        """Test CategorizerError is logged and never raised."""
        provider = AsyncMock()
        provider.categorize = AsyncMock(side_effect=CategorizerError("boom", status_code=500))
        log = MagicMock()

        result = await categorize_with_fallback(["onion"], provider=provider, log=log)

        assert result == {"onion": "Produce"}
        assert log.warning.called

    @pytest.mark.asyncio
    async def test_unexpected_error_falls_back(self):
        """Test any provider exception falls back to rules."""
        provider = AsyncMock()
        provider.categorize = AsyncMock(side_effect=RuntimeError("bad"))

        result = await categorize_with_fallback(["onion"], provider=provider)

        assert result == {"onion": "Produce"}

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self):
        """Test a slow provider is abandoned after the timeout."""

        async def slow(names):
            await asyncio.sleep(5)
            return {name: "Other" for name in names}

        provider = AsyncMock()
        provider.categorize = slow
        log = MagicMock()

        result = await categorize_with_fallback(["onion"], provider=provider, timeout=0.05, log=log)

        assert result == {"onion": "Produce"}
        assert "timed out" in log.warning.call_args[0][0]

    @pytest.mark.asyncio
    async def test_deduplicates_names(self):
        """Test duplicate and non-string names are dropped."""
        result = await categorize_with_fallback(["milk", "milk", None, "egg"])

        assert list(result) == ["milk", "egg"]

    @pytest.mark.asyncio
    async def test_rule_based_provider(self):
        """Test the rule provider through the fallback path."""
        provider = RuleBasedCategoryProvider()

        assert await provider.categorize(["garlic powder"]) == {"garlic powder": "Spices & Herbs"}
        assert await categorize_with_fallback(["salmon"], provider=provider) == {
            "salmon": "Meat & Seafood"
        }
