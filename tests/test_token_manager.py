import asyncio
import base64
import unittest
from urllib.parse import parse_qs

import httpx

from proxy.errors import NetworkError, UpstreamAuthError
from proxy.token_manager import (
    TOKEN_URL,
    CachedCredential,
    Credentials,
    TokenCache,
    exchange_authorization_code,
    get_valid_token,
)

NOW = 1_700_000_000
CREDENTIALS = Credentials(client_id="cid", client_secret="csecret", refresh_token="rt-123")


class TokenManagerTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.calls: list[httpx.Request] = []
        self.status = 200
        self.body = {"access_token": "fresh-token", "token_type": "Bearer", "expires_in": 3600}
        self.cache = TokenCache(clock=lambda: NOW)

    def _handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status, json=self.body)
        return httpx.Response(self.status, text=self.body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._handler))

    async def get_token(self) -> str:
        async with self.client() as client:
            return await get_valid_token(CREDENTIALS, self.cache, client)


class TestCacheHit(TokenManagerTestCase):
    async def test_fresh_token_is_returned_without_network(self):
        self.cache.credential = CachedCredential(token="cached", expires_at=NOW + 301)
        self.assertEqual(await self.get_token(), "cached")
        self.assertEqual(self.calls, [])
        self.assertEqual(self.cache.credential, CachedCredential(token="cached", expires_at=NOW + 301))

    async def test_repeated_calls_refresh_once(self):
        self.assertEqual(await self.get_token(), "fresh-token")
        self.assertEqual(await self.get_token(), "fresh-token")
        self.assertEqual(len(self.calls), 1)


class TestRefresh(TokenManagerTestCase):
    async def test_empty_cache_refreshes_and_stores(self):
        self.assertEqual(await self.get_token(), "fresh-token")
        self.assertEqual(len(self.calls), 1)
        self.assertEqual(self.cache.credential, CachedCredential(token="fresh-token", expires_at=NOW + 3600))

    async def test_token_inside_margin_is_refreshed(self):
        self.cache.credential = CachedCredential(token="old", expires_at=NOW + 300)
        self.assertEqual(await self.get_token(), "fresh-token")
        self.assertEqual(len(self.calls), 1)
        self.assertEqual(self.cache.credential.expires_at, NOW + 3600)

    async def test_expired_token_is_refreshed(self):
        self.cache.credential = CachedCredential(token="old", expires_at=NOW - 10)
        self.assertEqual(await self.get_token(), "fresh-token")
        self.assertEqual(len(self.calls), 1)

    async def test_zero_lifetime_is_stale_immediately(self):
        self.body = {"access_token": "short-lived", "expires_in": 0}
        self.assertEqual(await self.get_token(), "short-lived")
        self.assertEqual(self.cache.credential, CachedCredential(token="short-lived", expires_at=NOW))
        await self.get_token()
        self.assertEqual(len(self.calls), 2)

    async def test_missing_lifetime_defaults_to_an_hour(self):
        self.body = {"access_token": "no-expiry"}
        await self.get_token()
        self.assertEqual(self.cache.credential, CachedCredential(token="no-expiry", expires_at=NOW + 3600))
        await self.get_token()
        self.assertEqual(len(self.calls), 1)

    async def test_refresh_request_shape(self):
        await self.get_token()
        request = self.calls[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(str(request.url), TOKEN_URL)
        expected = base64.b64encode(b"cid:csecret").decode()
        self.assertEqual(request.headers["Authorization"], f"Basic {expected}")
        self.assertEqual(request.headers["Content-Type"], "application/x-www-form-urlencoded")
        form = parse_qs(request.content.decode())
        self.assertEqual(form, {"grant_type": ["refresh_token"], "refresh_token": ["rt-123"]})

    async def test_concurrent_misses_share_one_refresh(self):
        async with self.client() as client:
            tokens = await asyncio.gather(
                get_valid_token(CREDENTIALS, self.cache, client),
                get_valid_token(CREDENTIALS, self.cache, client),
                get_valid_token(CREDENTIALS, self.cache, client),
            )
        self.assertEqual(tokens, ["fresh-token"] * 3)
        self.assertEqual(len(self.calls), 1)


class TestRefreshFailure(TokenManagerTestCase):
    async def test_rejected_refresh_raises_description_and_keeps_cache(self):
        previous = CachedCredential(token="old", expires_at=NOW + 100)
        self.cache.credential = previous
        self.status = 400
        self.body = {"error": "invalid_grant", "error_description": "Invalid refresh token"}

        with self.assertRaises(UpstreamAuthError) as ctx:
            await self.get_token()
        self.assertEqual(str(ctx.exception), "Invalid refresh token")
        self.assertIs(self.cache.credential, previous)

    async def test_rejected_refresh_without_json_uses_fallback(self):
        self.status = 502
        self.body = "<html>Bad Gateway</html>"
        with self.assertRaises(UpstreamAuthError) as ctx:
            await self.get_token()
        self.assertEqual(str(ctx.exception), "Failed to refresh token")
        self.assertIsNone(self.cache.credential)

    async def test_network_failure_raises_network_error(self):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(unreachable)) as client:
            with self.assertRaises(NetworkError):
                await get_valid_token(CREDENTIALS, self.cache, client)
        self.assertIsNone(self.cache.credential)


class TestAuthorizationCodeExchange(TokenManagerTestCase):
    async def test_exchange_posts_code_and_returns_payload(self):
        self.body = {"access_token": "at", "refresh_token": "long-lived", "expires_in": 3600}
        async with self.client() as client:
            data = await exchange_authorization_code(CREDENTIALS, client, "the-code", "http://127.0.0.1:8767/callback")
        self.assertEqual(data["refresh_token"], "long-lived")
        form = parse_qs(self.calls[0].content.decode())
        self.assertEqual(form["grant_type"], ["authorization_code"])
        self.assertEqual(form["code"], ["the-code"])
        self.assertEqual(form["redirect_uri"], ["http://127.0.0.1:8767/callback"])
        self.assertIsNone(self.cache.credential)

    async def test_exchange_failure(self):
        self.status = 400
        self.body = {"error": "invalid_grant", "error_description": "Invalid authorization code"}
        async with self.client() as client:
            with self.assertRaisesRegex(UpstreamAuthError, "Invalid authorization code"):
                await exchange_authorization_code(CREDENTIALS, client, "bad", "http://127.0.0.1:8767/callback")


if __name__ == "__main__":
    unittest.main(verbosity=2)
