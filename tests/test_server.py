"""HTTP-level tests for the measurement endpoint (server.app)."""

import base64
import unittest
from unittest import mock

from aiohttp.test_utils import AioHTTPTestCase

from server.app import ECHOED_HEADERS, ServerConfig, create_app, describe_routes
from server.errors import GenerationError


class EndpointTestCase(AioHTTPTestCase):
    async def get_application(self):
        return create_app(ServerConfig())


class TestPing(EndpointTestCase):
    async def test_pong(self):
        resp = await self.client.get("/api/ping")
        self.assertEqual(resp.status, 200)
        body = await resp.json()
        self.assertEqual(body["message"], "pong")
        self.assertIsInstance(body["timestamp"], int)


class TestDownload(EndpointTestCase):
    async def test_requested_size(self):
        resp = await self.client.get("/api/download/50")
        self.assertEqual(resp.status, 200)
        body = await resp.json()
        self.assertEqual(body["size"], 50)
        self.assertEqual(len(base64.b64decode(body["data"])), 50 * 1024)
        self.assertIn("timestamp", body)

    async def test_clamped_size(self):
        with mock.patch("server.app.generate_test_data", return_value="") as gen:
            resp = await self.client.get("/api/download/999999")
            body = await resp.json()
        self.assertEqual(body["size"], 10240)
        gen.assert_called_once_with(10240)

    async def test_non_numeric_defaults_to_100(self):
        resp = await self.client.get("/api/download/abc")
        body = await resp.json()
        self.assertEqual(body["size"], 100)

    async def test_missing_defaults_to_100(self):
        resp = await self.client.get("/api/download")
        body = await resp.json()
        self.assertEqual(body["size"], 100)

    async def test_negative_size_is_server_error(self):
        resp = await self.client.get("/api/download/-5")
        self.assertEqual(resp.status, 500)
        body = await resp.json()
        self.assertEqual(body["error"], "Failed to generate test data")
        self.assertIn("message", body)

    async def test_generation_failure(self):
        err = GenerationError("Failed to generate test data", "out of entropy")
        with mock.patch("server.app.generate_test_data", side_effect=err):
            resp = await self.client.get("/api/download/10")
        self.assertEqual(resp.status, 500)
        self.assertEqual(
            await resp.json(),
            {"error": "Failed to generate test data", "message": "out of entropy"},
        )

    async def test_unexpected_failure_is_structured(self):
        with mock.patch("server.app.generate_test_data", side_effect=RuntimeError("boom")):
            resp = await self.client.get("/api/download/10")
        self.assertEqual(resp.status, 500)
        self.assertEqual(await resp.json(), {"error": "Internal server error"})


class TestUpload(EndpointTestCase):
    async def test_transfer_time(self):
        t = 1_700_000_000_000
        with mock.patch("server.app.now_ms", return_value=t + 250):
            resp = await self.client.post(
                "/api/upload", json={"data": "AAAA", "timestamp": t, "size": 4}
            )
        self.assertEqual(resp.status, 200)
        body = await resp.json()
        self.assertEqual(body["transferTime"], 250)
        self.assertEqual(body["received"], t + 250)
        self.assertEqual(body["clientTimestamp"], t)
        self.assertEqual(body["dataSize"], 4)

    async def test_missing_field(self):
        for missing in ("data", "timestamp", "size"):
            payload = {"data": "AAAA", "timestamp": 1, "size": 4}
            del payload[missing]
            resp = await self.client.post("/api/upload", json=payload)
            self.assertEqual(resp.status, 400)
            body = await resp.json()
            self.assertIn("Missing required fields", body["error"])
            self.assertNotIn("transferTime", body)

    async def test_invalid_json(self):
        resp = await self.client.post(
            "/api/upload", data="not json", headers={"Content-Type": "application/json"}
        )
        self.assertEqual(resp.status, 400)
        body = await resp.json()
        self.assertEqual(body["error"], "Invalid JSON body")


class TestUploadBodyLimit(AioHTTPTestCase):
    async def get_application(self):
        return create_app(ServerConfig(max_body_bytes=1024))

    async def test_oversized_body(self):
        payload = {"data": "A" * 4096, "timestamp": 1, "size": 4}
        resp = await self.client.post("/api/upload", json=payload)
        self.assertEqual(resp.status, 413)
        self.assertIn("error", await resp.json())


class TestNetworkInfo(EndpointTestCase):
    async def test_socket_address(self):
        resp = await self.client.get("/api/network-info")
        body = await resp.json()
        self.assertEqual(body["clientIP"], "127.0.0.1")
        self.assertIsInstance(body["serverTime"], int)

    async def test_forwarded_for_preferred(self):
        resp = await self.client.get(
            "/api/network-info",
            headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
        )
        body = await resp.json()
        self.assertEqual(body["clientIP"], "203.0.113.7")

    async def test_only_whitelisted_headers(self):
        resp = await self.client.get(
            "/api/network-info",
            headers={
                "User-Agent": "probe/1.0",
                "Authorization": "Bearer secret",
                "Cookie": "session=abc",
                "X-Custom": "1",
            },
        )
        body = await resp.json()
        self.assertEqual(set(body["headers"]), set(ECHOED_HEADERS))
        self.assertEqual(body["headers"]["user-agent"], "probe/1.0")
        self.assertNotIn("secret", str(body))
        self.assertNotIn("session=abc", str(body))


class TestHealth(EndpointTestCase):
    async def test_healthy(self):
        resp = await self.client.get("/api/health")
        body = await resp.json()
        self.assertEqual(body["status"], "healthy")
        self.assertGreaterEqual(body["uptime"], 0)
        self.assertIn("timestamp", body)


class TestErrors(EndpointTestCase):
    async def test_unknown_route_is_json(self):
        resp = await self.client.get("/api/nope")
        self.assertEqual(resp.status, 404)
        self.assertEqual(await resp.json(), {"error": "Not Found"})

    async def test_wrong_method_is_json(self):
        resp = await self.client.get("/api/upload")
        self.assertEqual(resp.status, 405)
        self.assertIn("error", await resp.json())


class TestServerConfig(unittest.TestCase):
    def test_port_from_env(self):
        with mock.patch.dict("os.environ", {"PORT": "8080"}):
            self.assertEqual(ServerConfig().port, 8080)

    def test_default_port(self):
        with mock.patch.dict("os.environ", {}, clear=True):
            self.assertEqual(ServerConfig().port, 3001)

    def test_from_env_body_limit(self):
        with mock.patch.dict("os.environ", {"SPEEDTEST_MAX_BODY_MB": "100"}):
            self.assertEqual(ServerConfig.from_env().max_body_bytes, 100 * 1024 * 1024)

    def test_describe_routes(self):
        text = describe_routes()
        self.assertIn("/api/download/:sizeKB", text)
        self.assertIn("/api/health", text)


if __name__ == "__main__":
    unittest.main()
