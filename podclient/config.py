"""Process configuration, read from the environment."""

import os

TEST_MODE = bool(int(os.environ.get('POD_CLIENT_TEST_MODE', '0')))
"""If 1, pods are reached over plain HTTP and the manifest is not checked."""

APPLICATION_BASE_URL = os.environ.get('APPLICATION_BASE_URL', 'localhost')
"""Public URL of this application. Bare hostnames are accepted."""

PRIVATE_KEY_PATH = os.environ.get('PRIVATE_KEY_PATH', '/config/private.pem')
PUBLIC_KEY_PATH = os.environ.get('PUBLIC_KEY_PATH', '/config/public.pem')

MANIFEST_PATH = os.environ.get('MANIFEST_PATH', '/config/manifest.json')
"""Where the published manifest is written and read back."""

VERIFY_MANIFEST_ON_STARTUP = \
    bool(int(os.environ.get('VERIFY_MANIFEST_ON_STARTUP', '1')))

REGISTRY_DATABASE_URI = os.environ.get('REGISTRY_DATABASE_URI', 'sqlite://')
"""SQLAlchemy URI for the pod registration table."""

REGISTRATION_TIMEOUT = float(os.environ.get('REGISTRATION_TIMEOUT', '10'))
"""Seconds to wait for a pod to answer a registration request."""

LOGLEVEL = int(os.environ.get('LOGLEVEL', 20))
