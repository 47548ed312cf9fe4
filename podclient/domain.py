"""Core domain classes for pod registration and application manifests."""

from typing import Any, Dict, NamedTuple, Optional
from base64 import b64encode
from enum import Enum
import secrets
import time

from .exceptions import WrongPermissionType, WrongPermissionAccessType

NONCE_BYTES = 32
SIGNABLE_DELIMITER = ';'

MANIFEST_CLAIMS = frozenset(['application_base_url', 'public_key',
                             'permissions'])
"""Claims set from the configuration rather than from manifest fields."""

REGISTERED_CLAIMS = frozenset(['iss', 'sub', 'aud', 'exp', 'nbf', 'iat',
                               'jti'])
"""JWT claims (RFC 7519) that token libraries validate on decode."""


class PodRegistration(NamedTuple):
    """An OAuth2 client registration with a remote pod."""

    host: str
    """Bare hostname of the pod, optionally with a port. Unique."""

    client_id: Optional[str] = None
    """Public identifier issued by the pod."""

    client_secret: Optional[str] = None
    """Secret issued by the pod."""

    extra: Optional[Dict[str, Any]] = None
    """Any other fields the pod returned on registration."""

    @property
    def is_registered(self) -> bool:
        """Indicate whether the pod has issued credentials."""
        return bool(self.client_id) and bool(self.client_secret)

    @property
    def is_pending(self) -> bool:
        """Indicate whether registration has yet to succeed."""
        return not self.client_id and not self.client_secret


class SignablePayload(NamedTuple):
    """The plaintext signed during a registration handshake."""

    application_base_url: str
    full_host: str
    timestamp: int
    """Seconds since the UNIX epoch."""

    nonce: str
    """Base64-encoded random bytes."""

    @classmethod
    def fresh(cls, application_base_url: str,
              full_host: str) -> 'SignablePayload':
        """Create a payload for the current moment with a new nonce."""
        nonce = b64encode(secrets.token_bytes(NONCE_BYTES)).decode('ascii')
        return cls(application_base_url, full_host, int(time.time()), nonce)

    def signable_string(self) -> str:
        """Join the payload components into the canonical string."""
        return SIGNABLE_DELIMITER.join(str(o) for o in self)


class PermissionType(str, Enum):
    """Resources an application may request access to."""

    PROFILE = 'profile'
    CONTACTS = 'contacts'
    POSTS = 'posts'
    COMMENTS = 'comments'
    PHOTOS = 'photos'
    AS_PHOTOS = 'as_photos'


class AccessLevel(str, Enum):
    """Levels of access that may be requested for a resource."""

    READ = 'read'
    WRITE = 'write'


class Permission(NamedTuple):
    """A requested grant of ``access`` to resources of ``type``."""

    type: PermissionType
    access: AccessLevel

    @classmethod
    def create(cls, resource_type: Any, access: Any) -> 'Permission':
        """
        Validate and build a :class:`.Permission`.

        Parameters
        ----------
        resource_type : str or :class:`.PermissionType`
        access : str or :class:`.AccessLevel`

        Raises
        ------
        :class:`.WrongPermissionType`
            If ``resource_type`` is not a :class:`.PermissionType`.
        :class:`.WrongPermissionAccessType`
            If ``access`` is not an :class:`.AccessLevel`.

        """
        try:
            _type = PermissionType(resource_type)
        except ValueError as e:
            raise WrongPermissionType(
                f'Unsupported permission type: {resource_type}'
            ) from e
        try:
            _access = AccessLevel(access)
        except ValueError as e:
            raise WrongPermissionAccessType(
                f'Unsupported access level for {_type.value}: {access}'
            ) from e
        return cls(_type, _access)


class ManifestDocument(NamedTuple):
    """The declared identity and requested permissions of an application."""

    application_base_url: str
    fields: Dict[str, str]
    """Free-form manifest fields, e.g. ``name`` and ``icon_url``."""

    permissions: Dict[str, str]
    """Access level, keyed by resource type."""

    public_key: str
    """PEM-encoded public key of the application."""

    def to_claims(self) -> Dict[str, Any]:
        """Render the manifest as a claim set with a stable key order."""
        claims: Dict[str, Any] = dict(self.fields)
        claims['application_base_url'] = self.application_base_url
        claims['public_key'] = self.public_key
        claims['permissions'] = [
            {'access': access, 'type': _type}
            for _type, access in sorted(self.permissions.items())
        ]
        return {key: claims[key] for key in sorted(claims)}

