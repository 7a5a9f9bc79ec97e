from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from _testutil import ensure_repo_on_path, purge_modules, write_module

ensure_repo_on_path()

from tasksdk.config import SdkProfile  # noqa: E402
from tasksdk.credentials import CredentialFactory  # noqa: E402
from tasksdk.errors import CredentialError, CredentialNotImplementedError, MissingEndpointError  # noqa: E402
from tasksdk.host import StaticHost  # noqa: E402
from tasksdk.models import EndpointDescriptor  # noqa: E402
from tasksdk.runtime.type_registry import TypeRegistry  # noqa: E402

EXTENDED_SDK = """
class TfsClientCredentials:
    def __init__(self, token):
        self.token = token
"""

REST_SDK = """
class VssCredentials:
    def __init__(self, federated):
        self.federated = federated
"""

OAUTH_SDK = """
class VssOAuthAccessTokenCredential:
    def __init__(self, token):
        self.token = token
"""


def _host(token: str = "tok-123") -> StaticHost:
    auth = {"AccessToken": token} if token else {}
    return StaticHost(
        endpoints={
            "SystemVssConnection": EndpointDescriptor(
                name="SystemVssConnection", url="https://dev.example.test/org/", auth_parameters=auth
            )
        }
    )


class TestCredentialFactory(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.addCleanup(self._td.cleanup)
        self.dir = Path(self._td.name)
        self.addCleanup(purge_modules, ["vss"])
        self.profile = SdkProfile()

    def _factory(self, host=None, registry=None) -> CredentialFactory:
        return CredentialFactory(host=host or _host(), registry=registry or TypeRegistry(), profile=self.profile)

    def test_missing_endpoint_fails_before_type_resolution(self) -> None:
        registry = mock.Mock(spec=TypeRegistry)
        registry.resolve.side_effect = AssertionError("type resolution attempted")
        f = self._factory(host=StaticHost(), registry=registry)

        with self.assertRaises(MissingEndpointError):
            f.get_rest_credentials(self.dir)
        with self.assertRaises(MissingEndpointError):
            f.get_extended_client_credentials(self.dir)
        registry.resolve.assert_not_called()

    def test_missing_access_token(self) -> None:
        f = self._factory(host=_host(token=""))
        with self.assertRaises(CredentialError):
            f.get_extended_client_credentials(self.dir)

    def test_extended_credentials_from_fallback_module(self) -> None:
        write_module(self.dir, "vss.client", EXTENDED_SDK)
        cred = self._factory().get_extended_client_credentials(self.dir)

        self.assertEqual(cred.kind, "extended")
        self.assertEqual(cred.native.token, "tok-123")
        self.assertFalse(cred.allow_interactive)
        self.assertFalse(cred.use_default_credentials)
        self.assertEqual(cred.authorization_header(), "Bearer tok-123")

    def test_extended_credentials_type_unavailable(self) -> None:
        with self.assertRaises(CredentialError):
            self._factory().get_extended_client_credentials(self.dir)

    def test_rest_credentials_wrap_oauth_token_credential(self) -> None:
        write_module(self.dir, "vss.common", REST_SDK)
        write_module(self.dir, "vss.oauth", OAUTH_SDK)
        cred = self._factory().get_rest_credentials(self.dir)

        self.assertEqual(cred.kind, "rest")
        self.assertEqual(type(cred.native).__name__, "VssCredentials")
        self.assertEqual(cred.native.federated.token, "tok-123")

    def test_rest_credentials_without_oauth_type_is_not_implemented(self) -> None:
        write_module(self.dir, "vss.common", REST_SDK)
        with self.assertRaises(CredentialNotImplementedError):
            self._factory().get_rest_credentials(self.dir)

    def test_rest_credentials_type_unavailable(self) -> None:
        with self.assertRaises(CredentialError) as ctx:
            self._factory().get_rest_credentials(self.dir)
        self.assertNotIsInstance(ctx.exception, CredentialNotImplementedError)

    def test_repr_does_not_leak_token(self) -> None:
        write_module(self.dir, "vss.client", EXTENDED_SDK)
        cred = self._factory().get_extended_client_credentials(self.dir)
        self.assertNotIn("tok-123", repr(cred))


if __name__ == "__main__":
    unittest.main()
