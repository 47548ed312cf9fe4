"""Tests for :mod:`podclient.urls`."""

from unittest import TestCase

from .. import urls


class TestFullHost(TestCase):
    """Tests for :func:`urls.full_host`."""

    def test_bare_host(self):
        """The scheme and its default port are filled in."""
        self.assertEqual(urls.full_host('pod.example', 'https'),
                         'https://pod.example:443')
        self.assertEqual(urls.full_host('pod.example', 'http'),
                         'http://pod.example:80')

    def test_explicit_port(self):
        """An explicit port is kept."""
        self.assertEqual(urls.full_host('localhost:3000', 'http'),
                         'http://localhost:3000')

    def test_with_scheme(self):
        """A host that already has a scheme keeps it."""
        self.assertEqual(urls.full_host('http://pod.example', 'https'),
                         'http://pod.example:80')

    def test_ipv6(self):
        """IPv6 literals stay bracketed."""
        self.assertEqual(urls.full_host('[::1]:3000', 'http'),
                         'http://[::1]:3000')

    def test_unparseable(self):
        """An empty host is not a host."""
        with self.assertRaises(ValueError):
            urls.full_host('', 'https')


class TestRoutes(TestCase):
    """Tests for the pod endpoints."""

    def test_token_endpoint(self):
        self.assertEqual(urls.token_endpoint('pod.example', 'https'),
                         'https://pod.example:443/oauth/token')

    def test_api_route(self):
        self.assertEqual(urls.api_route('localhost:3000', 'http'),
                         'http://localhost:3000/api/v0')


class TestNormalizeBaseURL(TestCase):
    """Tests for :func:`urls.normalize_base_url`."""

    def test_localhost(self):
        """Works with localhost and an explicit port."""
        self.assertEqual(urls.normalize_base_url('localhost:6924', 'https'),
                         'https://localhost:6924/')

    def test_bare_domain(self):
        """A bare domain gets the scheme, default port and a path."""
        self.assertEqual(urls.normalize_base_url('google.com', 'https'),
                         'https://google.com:443/')

    def test_path_is_kept(self):
        self.assertEqual(
            urls.normalize_base_url('http://localhost:4000/app/', 'https'),
            'http://localhost:4000/app/'
        )
