"""Helpers for building pod and application URLs from loose host strings."""

from urllib.parse import urlsplit, urlunsplit

DEFAULT_PORTS = {'http': 80, 'https': 443}
TOKEN_PATH = '/oauth/token'
API_PATH = '/api/v0'


def full_host(host: str, scheme: str) -> str:
    """
    Get ``host`` as a URL with a scheme and an explicit port.

    ``host`` may be a bare hostname (``pod.example``), include a port
    (``localhost:3000``) or already carry a scheme. When no port is given,
    the default port for the scheme is filled in.
    """
    url = host.strip()
    if '://' not in url:
        url = f'{scheme}://{url}'
    parts = urlsplit(url)
    if not parts.hostname:
        raise ValueError(f'Cannot parse a host from {host!r}')
    hostname = parts.hostname
    if ':' in hostname:     # IPv6 literal
        hostname = f'[{hostname}]'
    port = parts.port or DEFAULT_PORTS.get(parts.scheme)
    netloc = f'{hostname}:{port}' if port else hostname
    return urlunsplit((parts.scheme, netloc, parts.path, '', ''))


def with_path(url: str, path: str) -> str:
    """Replace the path of ``url``."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, path, '', ''))


def normalize_base_url(url: str, scheme: str) -> str:
    """Get a full application base URL, with port and at least ``/``."""
    normalized = full_host(url, scheme)
    if not urlsplit(normalized).path:
        normalized = with_path(normalized, '/')
    return normalized


def token_endpoint(host: str, scheme: str) -> str:
    """Get the OAuth2 token endpoint of a pod."""
    return with_path(full_host(host, scheme), TOKEN_PATH)


def api_route(host: str, scheme: str) -> str:
    """Get the root of a pod's API."""
    return with_path(full_host(host, scheme), API_PATH)
