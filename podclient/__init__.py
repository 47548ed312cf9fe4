"""
Client-side registration with federated network pods.

An application registers itself with a pod by signing a short-lived
challenge string with its RSA key (:mod:`.registration`), and publishes a
signed manifest describing its identity and requested permissions
(:mod:`.manifest`). Registrations are kept in a :class:`.PodRegistry`.
"""

from .domain import PodRegistration, Permission, PermissionType, \
    AccessLevel, ManifestDocument, SignablePayload
from .exceptions import RegistrationError, WrongPermissionType, \
    WrongPermissionAccessType, NoSuchRegistration, ManifestOutOfDate
from .settings import ClientConfig, Configurator
from .registration import RegistrationProtocol
from .manifest import ManifestService
