from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from _testutil import ensure_repo_on_path

ensure_repo_on_path()

import requests  # noqa: E402

from tasksdk.credentials import FederatedCredential  # noqa: E402
from tasksdk.errors import ClientRequestError  # noqa: E402
from tasksdk.webapi import HttpClientBase  # noqa: E402


def _response(status: int, payload=None, text: str = "") -> mock.Mock:
    r = mock.Mock()
    r.status_code = status
    r.content = b"{}" if payload is not None else b""
    r.json.return_value = payload
    r.text = text
    return r


class TestHttpClientBase(unittest.TestCase):
    def setUp(self) -> None:
        self.creds = FederatedCredential(kind="rest", access_token="tok-123")

    def test_session_carries_bearer_token(self) -> None:
        client = HttpClientBase("https://dev.example.test/org/", self.creds)
        self.assertIsInstance(client.session, requests.Session)
        self.assertEqual(client.headers["Authorization"], "Bearer tok-123")
        self.assertEqual(client.headers["Accept"], "application/json")
        self.assertNotIn("Authorization", client.session.headers)
        self.assertEqual(client.url_for("/_apis/projects"), "https://dev.example.test/org/_apis/projects")
        client.close()

    def test_send_returns_json(self) -> None:
        session = mock.Mock()
        session.headers = {}
        session.request.return_value = _response(200, {"count": 0})
        client = HttpClientBase("https://dev.example.test/org", self.creds, session=session, timeout=5)

        out = client.send("GET", "_apis/projects", params={"api-version": "7.1"})

        self.assertEqual(out, {"count": 0})
        session.request.assert_called_once_with(
            "GET",
            "https://dev.example.test/org/_apis/projects",
            params={"api-version": "7.1"},
            json=None,
            headers=client.headers,
            timeout=5,
        )

    def test_send_raises_on_error_status(self) -> None:
        session = mock.Mock()
        session.headers = {}
        session.request.return_value = _response(401, text="unauthorized")
        client = HttpClientBase("https://dev.example.test/org", self.creds, session=session)

        with self.assertRaises(ClientRequestError) as ctx:
            client.send("GET", "_apis/projects")
        self.assertEqual(ctx.exception.status_code, 401)

    def test_empty_body(self) -> None:
        session = mock.Mock()
        session.headers = {}
        session.request.return_value = _response(204)
        client = HttpClientBase("https://dev.example.test/org", self.creds, session=session)
        self.assertIsNone(client.send("DELETE", "_apis/things/1"))

    def test_caller_session_is_left_unchanged(self) -> None:
        shared = requests.Session()
        self.addCleanup(shared.close)
        before = dict(shared.headers)

        client = HttpClientBase("https://dev.example.test/org", self.creds, session=shared)
        client.close()

        self.assertEqual(dict(shared.headers), before)
        self.assertNotIn("Authorization", shared.headers)
        # The caller still owns the session; close() leaves its adapters mounted.
        self.assertTrue(shared.adapters)


class TestClientFactoryEndToEnd(unittest.TestCase):
    def test_vendor_client_built_with_host_defaults(self) -> None:
        from _testutil import purge_modules, write_module

        from tasksdk.clients import ClientFactory
        from tasksdk.config import SdkProfile
        from tasksdk.host import StaticHost
        from tasksdk.models import EndpointDescriptor

        with tempfile.TemporaryDirectory() as td:
            d = Path(td)
            self.addCleanup(purge_modules, ["vss", "E2etest"])
            write_module(d, "vss.common", "class VssCredentials:\n    def __init__(self, inner):\n        self.inner = inner\n")
            write_module(d, "vss.oauth", "class VssOAuthAccessTokenCredential:\n    def __init__(self, token):\n        self.token = token\n")
            write_module(
                d,
                "E2etest.Build.WebApi",
                """
                from tasksdk.webapi import HttpClientBase

                class BuildHttpClient(HttpClientBase):
                    user_agent = "e2e-build-client"
                """,
            )
            host = StaticHost(
                variables={"System.TeamFoundationCollectionUri": "https://dev.example.test/org/"},
                endpoints={
                    "SystemVssConnection": EndpointDescriptor(
                        name="SystemVssConnection",
                        url="https://dev.example.test/org/",
                        auth_parameters={"AccessToken": "tok-456"},
                    )
                },
            )

            client = ClientFactory(host=host, profile=SdkProfile()).construct(
                "E2etest.Build.WebApi.BuildHttpClient", directory=d
            )

        self.assertEqual(client.base_url, "https://dev.example.test/org")
        self.assertEqual(client.credentials.kind, "rest")
        self.assertEqual(client.headers["Authorization"], "Bearer tok-456")
        self.assertEqual(client.headers["User-Agent"], "e2e-build-client")
        client.close()


if __name__ == "__main__":
    unittest.main()
