"""
Immutable client configuration, and the builder used to assemble it.

Manifest fields and permissions are declared once at process start:

.. code-block:: python

   conf = Configurator(load_keypair('private.pem', 'public.pem'))
   conf.application_base_url = 'chubbi.es'
   conf.manifest_field('name', 'Chubbies')
   conf.permission('profile', 'read')
   config = conf.build()

Unsupported permissions are rejected by :meth:`Configurator.permission`,
before anything is built.
"""

from types import MappingProxyType
from typing import Any, Dict, Mapping, NamedTuple, Optional

from .domain import AccessLevel, Permission, PermissionType, \
    MANIFEST_CLAIMS, REGISTERED_CLAIMS
from .keys import KeyPair
from .urls import normalize_base_url

DEFAULT_TIMEOUT = 10.0


def scheme_for(test_mode: bool) -> str:
    """Get the URL scheme used to reach pods."""
    return 'http' if test_mode else 'https'


class ClientConfig(NamedTuple):
    """Everything the registration and manifest services need to know."""

    application_base_url: str
    """Normalized base URL of this application, e.g. ``https://a.b:443/``."""

    keypair: KeyPair
    manifest_fields: Mapping[str, str]
    permissions: Mapping[PermissionType, AccessLevel]
    test_mode: bool = False

    verify_on_startup: bool = False
    """Check the published manifest for drift when the client starts."""

    timeout: float = DEFAULT_TIMEOUT
    """Seconds to wait on each registration request."""

    @property
    def scheme(self) -> str:
        return scheme_for(self.test_mode)


class Configurator(object):
    """Collects configuration and builds a :class:`.ClientConfig`."""

    def __init__(self, keypair: Optional[KeyPair] = None) -> None:
        self.keypair = keypair
        self.application_base_url: Optional[str] = None
        self.test_mode = False
        self.verify_on_startup = False
        self.timeout = DEFAULT_TIMEOUT
        self._manifest_fields: Dict[str, str] = {}
        self._permissions: Dict[PermissionType, AccessLevel] = {}

    @property
    def scheme(self) -> str:
        return scheme_for(self.test_mode)

    @property
    def manifest_fields(self) -> Mapping[str, str]:
        return MappingProxyType(self._manifest_fields)

    @property
    def permissions(self) -> Mapping[PermissionType, AccessLevel]:
        return MappingProxyType(self._permissions)

    def manifest_field(self, name: str, value: str) -> None:
        """
        Declare a manifest field, such as ``name`` or ``icon_url``.

        Raises ``ValueError`` for names that would collide with the claims
        the manifest token already carries.
        """
        name = str(name)
        if name in MANIFEST_CLAIMS:
            raise ValueError(f'{name} is set from the configuration')
        if name in REGISTERED_CLAIMS:
            raise ValueError(f'{name} is a registered JWT claim')
        self._manifest_fields[name] = value

    def permission(self, resource_type: Any, access: Any) -> Permission:
        """
        Request ``access`` to a type of resource.

        Raises :class:`.WrongPermissionType` or
        :class:`.WrongPermissionAccessType` for unsupported values.
        """
        permission = Permission.create(resource_type, access)
        self._permissions[permission.type] = permission.access
        return permission

    def build(self) -> ClientConfig:
        """Build the :class:`.ClientConfig`."""
        if self.keypair is None:
            raise ValueError('A key pair is required')
        if not self.application_base_url:
            raise ValueError('An application base URL is required')
        return ClientConfig(
            application_base_url=normalize_base_url(
                self.application_base_url, self.scheme
            ),
            keypair=self.keypair,
            manifest_fields=MappingProxyType(dict(self._manifest_fields)),
            permissions=MappingProxyType(dict(self._permissions)),
            test_mode=self.test_mode,
            verify_on_startup=self.verify_on_startup,
            timeout=self.timeout
        )
