"""OAuth 1.0a request signer for NetSuite token based authentication.

Produces the ``Authorization`` header for a URL and HTTP verb using
HMAC-SHA256 and the account realm. Signing happens locally; nothing is
sent over the network.
"""

import logging
from typing import Dict

from oauthlib.oauth1 import SIGNATURE_HMAC_SHA256, SIGNATURE_TYPE_AUTH_HEADER, Client

from neatsuite.domain.models.http import OAuthConfig

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "Authorization"


class OAuthSigner:
    """Signs requests with the consumer and token credentials of one account."""

    def __init__(self, oauth: OAuthConfig):
        self._oauth = oauth

    def _client(self) -> Client:
        # A fresh client per request so every signature gets its own nonce and timestamp
        return Client(
            client_key=self._oauth.consumer_key,
            client_secret=self._oauth.consumer_secret,
            resource_owner_key=self._oauth.token_key,
            resource_owner_secret=self._oauth.token_secret,
            signature_method=SIGNATURE_HMAC_SHA256,
            signature_type=SIGNATURE_TYPE_AUTH_HEADER,
            realm=self._oauth.realm,
        )

    def sign(self, url: str, method: str) -> Dict[str, str]:
        """Returns the authorization headers for one request.

        Query parameters in ``url`` are part of the signature base string, so
        the URL must be signed exactly as it will be sent.

        Args:
            url: Absolute request URL including its query string.
            method: HTTP verb.

        Returns:
            A mapping holding the ``Authorization`` header.
        """
        _, headers, _ = self._client().sign(url, http_method=method.upper())
        logger.debug(f"Signed {method.upper()} {url}")
        return {AUTHORIZATION_HEADER: headers[AUTHORIZATION_HEADER]}
