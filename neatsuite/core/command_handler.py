"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), builds a client
through the injected factory and reports results and failures through the
user interface. Each handler returns True on success so the entry point can
choose the exit code.
"""

import logging
from typing import Any, Callable, Dict, Optional

from neatsuite.core.client import NetSuiteClient
from neatsuite.domain.interfaces.user_interface import UserInterface
from neatsuite.domain.models.errors import ConfigurationError, NetSuiteError
from neatsuite.domain.models.http import ClientResponse, RequestOptions, RestletParams
from neatsuite.infrastructure.config.settings import build_config_dict, load_configuration
from neatsuite.utils.helpers import validate_config

logger = logging.getLogger(__name__)


class CommandHandler:
    """Handles incoming commands and delegates to the NetSuite client."""

    def __init__(self, client_factory: Callable[[], NetSuiteClient], ui: UserInterface):
        """Initializes the CommandHandler.

        Args:
            client_factory: Builds a configured client; called once per command.
            ui: Where results and errors are shown.
        """
        self.client_factory = client_factory
        self.ui = ui

    def handle_validate_config(self) -> bool:
        """Handles the 'validate-config' command."""
        load_configuration()
        errors = validate_config(build_config_dict())
        if errors:
            logger.info(f"Configuration invalid: {len(errors)} problem(s)")
            self.ui.display_validation_errors(errors)
            return False
        self.ui.display_info("Configuration is valid.")
        return True

    async def handle_restlet(
        self,
        script: str,
        deploy: str,
        params: Optional[Dict[str, str]] = None,
        method: str = "GET",
        body: Any = None,
    ) -> bool:
        """Handles the 'restlet' command."""
        logger.info(f"Handling 'restlet' command: script={script}, deploy={deploy}, method={method}")
        restlet_params = RestletParams(script=script, deploy=deploy, params=params or {})
        return await self._run(lambda client: client.restlet(restlet_params, method=method.upper(), body=body))

    async def handle_request(self, method: str, url: str, body: Any = None) -> bool:
        """Handles the 'request' command."""
        logger.info(f"Handling 'request' command: {method.upper()} {url}")
        options = RequestOptions(url=url, method=method.upper(), body=body)
        return await self._run(lambda client: client.request(options))

    async def _run(self, call: Callable[[NetSuiteClient], Any]) -> bool:
        try:
            client = self.client_factory()
        except ConfigurationError as e:
            self.ui.display_validation_errors(e.errors)
            return False

        async with client:
            try:
                response: ClientResponse = await call(client)
            except NetSuiteError as e:
                logger.error(f"NetSuite call failed: {e!r}")
                self.ui.display_error(f"NetSuite API error (status={e.status}, code={e.code}): {e.message}")
                if e.details:
                    self.ui.display_response(e.details, e.status or 0, 0.0, title="Error details")
                return False

        self.ui.display_response(response.data, response.status, response.duration)
        return True
