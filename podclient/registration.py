"""
Registration of this application with remote pods.

The handshake is a single signed request. The application joins its own
base URL, the pod's URL, the current time and a random nonce into a
``;``-delimited string, signs it with its private key, and POSTs both to
the pod's token endpoint:

.. code-block:: json

   {"type": "client_associate",
    "signed_string": "<base64>",
    "signature": "<base64>"}

The pod answers with OAuth2 client credentials (``client_id`` and
``client_secret``), which are stored in the :class:`.PodRegistry`.
"""

from base64 import b64encode
from typing import Any, Dict, NamedTuple, Optional
import logging

import requests
from authlib.integrations.requests_client import OAuth2Session

from . import urls
from .domain import PodRegistration, SignablePayload
from .exceptions import RegistrationError
from .locks import HostLocks
from .services.datastore import PodRegistry
from .settings import ClientConfig

logger = logging.getLogger(__name__)

REGISTRATION_TYPE = 'client_associate'
FAILURE_MESSAGE = 'Failed to connect to pod server: '


class PodAPIClient(NamedTuple):
    """An OAuth2 session for a registered pod, and the root of its API."""

    session: OAuth2Session
    api_route: str

    def url_for(self, path: str) -> str:
        """Get the full URL of an API ``path``."""
        return self.api_route.rstrip('/') + '/' + path.lstrip('/')


class RegistrationProtocol(object):
    """Obtains OAuth2 client credentials from pods."""

    def __init__(self, config: ClientConfig, registry: PodRegistry,
                 session: Optional[requests.Session] = None) -> None:
        self.config = config
        self.registry = registry
        self.session = session or requests.Session()
        self._locks = HostLocks()

    def full_host(self, host: str) -> str:
        """Get the pod's URL, with scheme and port."""
        return urls.full_host(host, self.config.scheme)

    def token_endpoint(self, host: str) -> str:
        return urls.token_endpoint(host, self.config.scheme)

    def api_route(self, host: str) -> str:
        return urls.api_route(host, self.config.scheme)

    def signable_payload(self, host: str) -> SignablePayload:
        """Create a fresh payload binding this application to ``host``."""
        return SignablePayload.fresh(self.config.application_base_url,
                                     self.full_host(host))

    def build_register_body(self, host: str) -> Dict[str, str]:
        """
        Construct the body of a registration request.

        Parameters
        ----------
        host : str
            The pod to register with.

        Returns
        -------
        dict
            With ``type``, and the base64-encoded ``signed_string`` and
            ``signature``.

        """
        signable = self.signable_payload(host).signable_string()
        signature = self.config.keypair.sign(signable.encode('utf-8'))
        return {
            'type': REGISTRATION_TYPE,
            'signed_string': b64encode(signable.encode('utf-8'))
            .decode('ascii'),
            'signature': b64encode(signature).decode('ascii')
        }

    def register(self, host: str) -> PodRegistration:
        """
        Register with the pod at ``host`` and store the issued credentials.

        Concurrent calls for the same host are handled one at a time. A
        call that waited while another registered the same host returns
        the stored registration instead of registering again.

        Raises
        ------
        :class:`.RegistrationError`
            If the pod cannot be reached, times out, or does not respond
            with a success status.
        ValueError
            If the pod's success response is not a JSON object.

        """
        if self._locks.waiting(host):
            logger.debug('Waiting on another registration with %s', host)
        with self._locks.hold(host) as turn:
            if turn.superseded:
                logger.info('Registered with %s while waiting', host)
                return self.registry.get(host)
            pod = self.registry.upsert_by_host(host)
            if pod.is_registered:
                logger.info('Replacing existing credentials for %s', host)
            endpoint = self.token_endpoint(host)
            logger.info('Registering with %s', endpoint)
            try:
                response = self.session.post(
                    endpoint,
                    json=self.build_register_body(host),
                    timeout=self.config.timeout
                )
            except requests.RequestException as e:
                logger.warning('Could not reach %s: %s', endpoint, e)
                raise RegistrationError(FAILURE_MESSAGE + str(e)) from e

            if not 200 <= response.status_code < 300:
                logger.warning('Registration with %s failed with status %i',
                               endpoint, response.status_code)
                message = FAILURE_MESSAGE
                if response.text:
                    message += response.text
                raise RegistrationError(message)

            data: Any = response.json()
            if not isinstance(data, dict):
                raise ValueError(f'Expected a JSON object from {endpoint}')
            pod = self.registry.upsert_by_host(host, data)
            turn.complete()
        logger.info('Registered with %s', host)
        return pod

    def client(self, pod: PodRegistration) -> PodAPIClient:
        """Get an OAuth2 client for a registered pod, without any I/O."""
        if not pod.is_registered:
            raise RegistrationError(f'Not registered with {pod.host}')
        session = OAuth2Session(
            client_id=pod.client_id,
            client_secret=pod.client_secret,
            token_endpoint=self.token_endpoint(pod.host)
        )
        return PodAPIClient(session, self.api_route(pod.host))
