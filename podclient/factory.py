"""Wiring for a configured pod client."""

from typing import Callable, NamedTuple, Optional
import logging

from . import config
from .app_logging import setup_logger
from .keys import load_keypair
from .manifest import FileManifestStore, ManifestService
from .registration import RegistrationProtocol
from .services.datastore import SQLPodRegistry
from .settings import ClientConfig, Configurator

logger = logging.getLogger(__name__)


class PodClient(NamedTuple):
    """The services of a configured application."""

    config: ClientConfig
    registry: SQLPodRegistry
    registration: RegistrationProtocol
    manifest: ManifestService


def create_client_config(
        declare: Optional[Callable[[Configurator], None]] = None) \
        -> ClientConfig:
    """
    Build a :class:`.ClientConfig` from :mod:`.config`.

    ``declare`` is called with the :class:`.Configurator` before it is
    built, to add manifest fields and permissions.
    """
    conf = Configurator(load_keypair(config.PRIVATE_KEY_PATH,
                                     config.PUBLIC_KEY_PATH))
    conf.application_base_url = config.APPLICATION_BASE_URL
    conf.test_mode = config.TEST_MODE
    conf.verify_on_startup = config.VERIFY_MANIFEST_ON_STARTUP
    conf.timeout = config.REGISTRATION_TIMEOUT
    if declare is not None:
        declare(conf)
    return conf.build()


def create_pod_client(client_config: ClientConfig,
                      database_uri: Optional[str] = None,
                      manifest_path: Optional[str] = None) -> PodClient:
    """
    Set up the registry and services for ``client_config``.

    The published manifest is checked here when the configuration asks
    for it; see :meth:`.ManifestService.check_on_startup`.
    """
    setup_logger()
    registry = SQLPodRegistry(database_uri or config.REGISTRY_DATABASE_URI)
    registry.create_all()
    manifest = ManifestService(
        client_config,
        FileManifestStore(manifest_path or config.MANIFEST_PATH)
    )
    logger.info('Application base URL: %s',
                client_config.application_base_url)
    if client_config.test_mode:
        logger.warning('Test mode is on; pods are reached over plain HTTP')
    manifest.check_on_startup()
    return PodClient(
        config=client_config,
        registry=registry,
        registration=RegistrationProtocol(client_config, registry),
        manifest=manifest
    )
