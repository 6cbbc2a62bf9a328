from typing import Callable, List

import httpx
import pytest
from typer.testing import CliRunner

from neatsuite.core.client import NetSuiteClient
from neatsuite.domain.models.http import ClientConfig, OAuthConfig
from neatsuite.infrastructure.config import settings
from neatsuite.infrastructure.http.transport import HttpxTransport
from neatsuite.infrastructure.resilience.api_retry import RetryController

ACCOUNT_ID = "1234567"
REALM = "1234567_SB1"


class RecordingSleep:
    """Async stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def oauth_config() -> OAuthConfig:
    return OAuthConfig(
        consumer_key="ck",
        consumer_secret="cs",
        token_key="tk",
        token_secret="ts",
        realm=REALM,
    )


@pytest.fixture
def client_config(oauth_config: OAuthConfig) -> ClientConfig:
    return ClientConfig(oauth=oauth_config, account_id=ACCOUNT_ID)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_client(oauth_config: OAuthConfig, recording_sleep: RecordingSleep) -> Callable[..., NetSuiteClient]:
    """Factory for clients whose HTTP traffic is served by ``handler``.

    Backoff sleeps go to ``recording_sleep`` so retry tests run instantly.
    """

    def factory(handler, logger=None, retries: int = 3, **config_kwargs) -> NetSuiteClient:
        config = ClientConfig(oauth=oauth_config, account_id=ACCOUNT_ID, retries=retries, **config_kwargs)
        transport = HttpxTransport(
            timeout_ms=config.timeout,
            headers=config.headers,
            transport=httpx.MockTransport(handler),
        )
        retry_controller = RetryController(
            max_retries=retries,
            initial_delay_ms=1000,
            max_delay_ms=3000,
            sleep=recording_sleep,
        )
        return NetSuiteClient(config, logger=logger, transport=transport, retry_controller=retry_controller)

    return factory


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keeps configuration tests independent of the machine's environment.

    Clears NETSUITE_* variables, points the default YAML file at a path that
    does not exist and disables the .env search.
    """
    for env_var in settings.ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.setattr(settings, "DEFAULT_CONFIG_FILE", tmp_path / "missing-config.yaml")
    monkeypatch.setattr(settings, "find_dotenv_path", lambda: None)
    settings.reset_configuration()
    settings.clear_test_config()
    yield
    settings.reset_configuration()
    settings.clear_test_config()
