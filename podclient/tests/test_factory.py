"""Tests for :mod:`podclient.factory`."""

import os
import tempfile
from unittest import TestCase, mock

from cryptography.hazmat.primitives import serialization

from .. import factory
from ..exceptions import ManifestOutOfDate
from .util import generate_keypair, make_config


class TestCreateClientConfig(TestCase):
    """Tests for :func:`factory.create_client_config`."""

    def setUp(self):
        keypair = generate_keypair()
        self.workdir = tempfile.mkdtemp()
        self.private_path = os.path.join(self.workdir, 'private.pem')
        with open(self.private_path, 'wb') as f:
            f.write(keypair.private_key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption()
            ))

    def test_from_environment(self):
        """Settings come from :mod:`.config`; the callback declares more."""
        def declare(conf):
            conf.manifest_field('name', 'Chubbies')
            conf.permission('profile', 'read')

        with mock.patch.multiple(factory.config,
                                 PRIVATE_KEY_PATH=self.private_path,
                                 PUBLIC_KEY_PATH=None,
                                 APPLICATION_BASE_URL='localhost:6924',
                                 TEST_MODE=False,
                                 VERIFY_MANIFEST_ON_STARTUP=True,
                                 REGISTRATION_TIMEOUT=3.0):
            config = factory.create_client_config(declare)

        self.assertEqual(config.application_base_url,
                         'https://localhost:6924/')
        self.assertTrue(config.verify_on_startup)
        self.assertEqual(config.timeout, 3.0)
        self.assertEqual(config.manifest_fields['name'], 'Chubbies')
        self.assertEqual(len(config.permissions), 1)
        self.assertEqual(config.keypair.public_key_pem,
                         generate_keypair().public_key_pem)


class TestCreatePodClient(TestCase):
    """Tests for :func:`factory.create_pod_client`."""

    def setUp(self):
        self.manifest_path = os.path.join(tempfile.mkdtemp(), 'manifest.json')

    def test_create(self):
        """The services share the configuration and registry."""
        client = factory.create_pod_client(make_config(), 'sqlite://',
                                           self.manifest_path)
        self.assertIs(client.registration.registry, client.registry)
        self.assertIs(client.manifest.config, client.config)
        self.assertEqual(client.registry.all(), [])

    def test_drifted_manifest(self):
        """A stale manifest stops startup when verification is on."""
        with self.assertRaises(ManifestOutOfDate):
            factory.create_pod_client(make_config(verify_on_startup=True),
                                      'sqlite://', self.manifest_path)

    def test_published_manifest(self):
        config = make_config(verify_on_startup=True)
        client = factory.create_pod_client(make_config(), 'sqlite://',
                                           self.manifest_path)
        client.manifest.write_manifest()
        client = factory.create_pod_client(config, 'sqlite://',
                                           self.manifest_path)
        self.assertTrue(client.manifest.verify_manifest())
