import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from resource_client.config.system_settings import load_system_settings


class SystemSettingsTests(unittest.TestCase):
    def setUp(self) -> None:
        # Isolate from the developer's environment and any .env in the cwd
        self._tmp = tempfile.TemporaryDirectory()
        self._cwd = os.getcwd()
        os.chdir(self._tmp.name)
        env = {k: v for k, v in os.environ.items()
               if k not in ("API_URL", "VITE_API_URL", "CACHE_MAX_ENTRIES", "CACHE_TTL_SECONDS")}
        self._env = mock.patch.dict(os.environ, env, clear=True)
        self._env.start()

    def tearDown(self) -> None:
        self._env.stop()
        os.chdir(self._cwd)
        self._tmp.cleanup()

    def test_defaults_when_environment_is_empty(self) -> None:
        settings = load_system_settings()

        self.assertEqual(settings.API_URL, "http://localhost:3000")
        self.assertEqual(settings.RESOURCE_ENDPOINT, "endpoint")
        self.assertEqual(settings.AUTH_TOKEN_KEY, "authToken")
        self.assertIsNone(settings.REQUEST_TIMEOUT_SECONDS)
        self.assertIsNone(settings.CACHE_TTL_SECONDS)

    def test_api_url_read_from_environment(self) -> None:
        os.environ["API_URL"] = "https://api.example.org"

        self.assertEqual(load_system_settings().API_URL, "https://api.example.org")

    def test_vite_alias_accepted(self) -> None:
        os.environ["VITE_API_URL"] = "https://vite.example.org"

        self.assertEqual(load_system_settings().API_URL, "https://vite.example.org")

    def test_env_file_is_read(self) -> None:
        Path(".env").write_text("API_URL=https://dotenv.example.org\nCACHE_MAX_ENTRIES=5\n")

        settings = load_system_settings()

        self.assertEqual(settings.API_URL, "https://dotenv.example.org")
        self.assertEqual(settings.CACHE_MAX_ENTRIES, 5)

    def test_resolved_at_construction(self) -> None:
        first = load_system_settings()
        os.environ["API_URL"] = "https://later.example.org"

        self.assertEqual(first.API_URL, "http://localhost:3000")
        self.assertEqual(load_system_settings().API_URL, "https://later.example.org")


if __name__ == "__main__":
    unittest.main()
