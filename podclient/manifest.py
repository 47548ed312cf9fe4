"""
Signed application manifests.

The manifest declares the application's identity (its base URL and
free-form fields such as ``name`` and ``icon_url``) and the permissions it
requests. It is published as a JSON document:

.. code-block:: json

   {"jwt": "<RS256 token carrying the manifest claims>",
    "public_key": "<PEM>"}

The public key is also carried inside the token, so relying parties can
verify the manifest without a separate key lookup. No time-based claims
are added, so packaging an unchanged configuration yields identical text.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import json
import logging
import os
import tempfile

import jwt

from .domain import ManifestDocument
from .exceptions import ManifestOutOfDate
from .settings import ClientConfig

logger = logging.getLogger(__name__)

ALGORITHM = 'RS256'


class ManifestStore(ABC):
    """Where the published manifest lives."""

    @abstractmethod
    def read(self) -> Optional[str]:
        """Read the published manifest, or ``None`` if there is none."""

    @abstractmethod
    def write(self, text: str) -> None:
        """Publish a manifest."""


class FileManifestStore(ManifestStore):
    """Keeps the published manifest in a file."""

    def __init__(self, path: str) -> None:
        self.path = path

    def read(self) -> Optional[str]:
        if not os.path.exists(self.path):
            return None
        with open(self.path, encoding='utf-8') as f:
            return f.read()

    def write(self, text: str) -> None:
        """Replace the manifest file in one step."""
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.manifest-')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(text)
            os.replace(tmp_path, self.path)
        except Exception:
            os.unlink(tmp_path)
            raise


class ManifestService(object):
    """Builds, publishes and checks the manifest for a configuration."""

    def __init__(self, config: ClientConfig,
                 store: Optional[ManifestStore] = None) -> None:
        self.config = config
        self.store = store

    def generate_manifest(self) -> ManifestDocument:
        """Assemble the manifest from the current configuration."""
        return ManifestDocument(
            application_base_url=self.config.application_base_url,
            fields=dict(self.config.manifest_fields),
            permissions={_type.value: access.value for _type, access
                         in self.config.permissions.items()},
            public_key=self.config.keypair.public_key_pem
        )

    def package_manifest(self) -> str:
        """Sign the manifest and serialize it for publication."""
        claims = self.generate_manifest().to_claims()
        token = jwt.encode(claims, self.config.keypair.private_key,
                           algorithm=ALGORITHM)
        return json.dumps({
            'jwt': token,
            'public_key': self.config.keypair.public_key_pem
        }, sort_keys=True)

    def read_manifest(self) -> Optional[str]:
        if self.store is None:
            raise RuntimeError('No manifest store is configured')
        return self.store.read()

    def write_manifest(self) -> str:
        """Publish the current manifest, and return it."""
        if self.store is None:
            raise RuntimeError('No manifest store is configured')
        packaged = self.package_manifest()
        self.store.write(packaged)
        logger.info('Published manifest for %s',
                    self.config.application_base_url)
        return packaged

    def verify_manifest(self) -> bool:
        """
        Check whether the published manifest matches the configuration.

        This is an exact comparison of the published text with a freshly
        packaged manifest. A missing manifest does not match.
        """
        published = self.read_manifest()
        if published is None:
            logger.debug('No published manifest')
            return False
        return published == self.package_manifest()

    def check_on_startup(self) -> bool:
        """
        Verify the published manifest if the configuration asks for it.

        Returns ``True`` if a check was made, ``False`` if it was skipped
        (in test mode, or with ``verify_on_startup`` off).

        Raises
        ------
        :class:`.ManifestOutOfDate`
            If the published manifest has drifted from the configuration.

        """
        if self.config.test_mode or not self.config.verify_on_startup:
            return False
        if not self.verify_manifest():
            logger.error('The published manifest does not match the current'
                         ' configuration; publish it again with'
                         ' write_manifest()')
            raise ManifestOutOfDate('Manifest is out of date')
        return True


def decode_manifest(packaged: str) -> Dict[str, Any]:
    """
    Verify a packaged manifest with its own public key and get its claims.

    Raises :class:`jwt.exceptions.InvalidTokenError` if the token was not
    signed by the embedded key, or if the key in the token differs.
    """
    data = json.loads(packaged)
    claims: Dict[str, Any] = jwt.decode(data['jwt'], data['public_key'],
                                        algorithms=[ALGORITHM])
    if claims.get('public_key') != data['public_key']:
        raise jwt.exceptions.InvalidTokenError('Public key mismatch')
    return claims
