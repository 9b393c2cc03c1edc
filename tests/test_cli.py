import contextlib
import io
import json
import os
import tempfile
import unittest
from unittest import mock

from resource_client import cli
from resource_client.credentials import default_credential_store
from tests.helpers import FakeSession, make_response


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self._cwd = os.getcwd()
        os.chdir(self._tmp.name)
        env = {k: v for k, v in os.environ.items()
               if k not in ("API_URL", "VITE_API_URL", "CREDENTIAL_BACKEND")}
        self._env = mock.patch.dict(os.environ, env, clear=True)
        self._env.start()

    def tearDown(self) -> None:
        default_credential_store.remove_item("authToken")
        self._env.stop()
        os.chdir(self._cwd)
        self._tmp.cleanup()

    def run_cli(self, argv, *outcomes):
        session = FakeSession(*outcomes)
        out, err = io.StringIO(), io.StringIO()
        with mock.patch("resource_client.fetching.accessor.requests.Session", return_value=session), \
                contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = cli.main(argv)
        return code, out.getvalue(), err.getvalue(), session

    def test_fetch_prints_payload_and_sends_token(self) -> None:
        code, out, _, session = self.run_cli(
            ["--token", "abc", "fetch", "42"],
            make_response(200, {"id": "42", "name": "Widget"}),
        )

        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), {"id": "42", "name": "Widget"})
        self.assertEqual(session.calls[0]["url"], "http://localhost:3000/endpoint/42")
        self.assertEqual(session.calls[0]["headers"]["Authorization"], "Bearer abc")
        self.assertTrue(session.closed)

    def test_fetch_http_error_exits_nonzero(self) -> None:
        code, _, err, session = self.run_cli(
            ["--base-url", "http://api.test", "fetch", "missing"],
            make_response(404, {"detail": "missing"}),
        )

        self.assertEqual(code, 1)
        self.assertIn("HTTP error! status: 404", err)
        self.assertEqual(session.calls[0]["url"], "http://api.test/endpoint/missing")

    def test_create_posts_payload(self) -> None:
        code, out, _, session = self.run_cli(
            ["create", '{"name": "Gizmo"}'],
            make_response(201, {"id": "43", "name": "Gizmo"}),
        )

        self.assertEqual(code, 0)
        self.assertEqual(session.calls[0]["method"], "POST")
        self.assertEqual(session.calls[0]["json"], {"name": "Gizmo"})
        self.assertEqual(json.loads(out)["id"], "43")

    def test_create_rejects_invalid_json(self) -> None:
        with self.assertRaises(SystemExit):
            self.run_cli(["create", "{not json"], make_response(201, {}))

    def test_watch_prints_transitions(self) -> None:
        code, out, _, _ = self.run_cli(
            ["watch", "1", "2"],
            make_response(200, {"id": "1"}),
            make_response(500, {}),
        )

        self.assertEqual(code, 1)
        self.assertEqual(out.strip().splitlines(), [
            "loading",
            'resolved: {"id": "1"}',
            'loading: {"id": "1"}',
            "failed: HTTP error! status: 500",
        ])


if __name__ == "__main__":
    unittest.main()
