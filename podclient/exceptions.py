"""Exceptions."""


class RegistrationError(RuntimeError):
    """A pod could not be reached or refused to register the application."""


class WrongPermissionType(ValueError):
    """A permission was requested for an unsupported resource type."""


class WrongPermissionAccessType(ValueError):
    """A permission was requested with an unsupported access level."""


class NoSuchRegistration(RuntimeError):
    """No registration exists for the requested host."""


class ManifestOutOfDate(RuntimeError):
    """The published manifest does not match the current configuration."""
