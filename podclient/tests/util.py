"""Testing helpers."""

from functools import lru_cache
from typing import Iterable, Optional, Tuple

from cryptography.hazmat.primitives.asymmetric import rsa

from ..keys import KeyPair
from ..settings import ClientConfig, Configurator


@lru_cache(maxsize=None)
def generate_keypair(name: str = 'default') -> KeyPair:
    """Generate an RSA key pair, once per ``name``."""
    return KeyPair(rsa.generate_private_key(public_exponent=65537,
                                            key_size=2048))


def make_config(base_url: str = 'http://localhost:4000/',
                keypair: Optional[KeyPair] = None,
                fields: Optional[dict] = None,
                permissions: Iterable[Tuple[str, str]] = (
                    ('profile', 'read'), ('as_photos', 'write')
                ),
                **kwargs) -> ClientConfig:
    """Build a :class:`.ClientConfig` like the one a chubbies app uses."""
    conf = Configurator(keypair or generate_keypair())
    conf.application_base_url = base_url
    if fields is None:
        fields = {
            'name': 'Chubbies',
            'description': 'The best way to chub.',
            'icon_url': '#',
            'permissions_overview':
                'Chubbi.es wants to post photos to your stream.'
        }
    for name, value in fields.items():
        conf.manifest_field(name, value)
    for resource_type, access in permissions:
        conf.permission(resource_type, access)
    for key, value in kwargs.items():
        setattr(conf, key, value)
    return conf.build()
