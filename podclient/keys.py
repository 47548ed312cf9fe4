"""RSA key material used to sign registration requests and manifests."""

from typing import Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa


class KeyPair(object):
    """
    An application's RSA private key and the matching public key.

    Instances are read-only; to rotate keys, load a new :class:`.KeyPair`
    and build a new configuration from it.
    """

    def __init__(self, private_key: rsa.RSAPrivateKey,
                 public_key: Optional[rsa.RSAPublicKey] = None) -> None:
        """Initialize with a loaded private key (and optional public key)."""
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise TypeError('An RSA private key is required')
        self._private_key = private_key
        self._public_key = public_key or private_key.public_key()

    @classmethod
    def from_pem(cls, private_pem: Union[str, bytes],
                 public_pem: Optional[Union[str, bytes]] = None) -> 'KeyPair':
        """Load a :class:`.KeyPair` from PEM-encoded keys."""
        if isinstance(private_pem, str):
            private_pem = private_pem.encode('utf-8')
        private_key = serialization.load_pem_private_key(private_pem,
                                                         password=None)
        public_key = None
        if public_pem is not None:
            if isinstance(public_pem, str):
                public_pem = public_pem.encode('utf-8')
            public_key = serialization.load_pem_public_key(public_pem)
        return cls(private_key, public_key)   # type: ignore

    @property
    def private_key(self) -> rsa.RSAPrivateKey:
        """The private key, e.g. for use with :func:`jwt.encode`."""
        return self._private_key

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        return self._public_key

    @property
    def public_key_pem(self) -> str:
        """The public key as PEM (SubjectPublicKeyInfo) text."""
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo
        ).decode('ascii')

    def sign(self, data: bytes) -> bytes:
        """Sign ``data`` using PKCS#1 v1.5 with SHA-256."""
        return self._private_key.sign(data, padding.PKCS1v15(),
                                      hashes.SHA256())

    def verify(self, data: bytes, signature: bytes) -> bool:
        """Check a signature produced by :meth:`.sign`."""
        try:
            self._public_key.verify(signature, data, padding.PKCS1v15(),
                                    hashes.SHA256())
        except InvalidSignature:
            return False
        return True


def load_keypair(private_key_path: str,
                 public_key_path: Optional[str] = None) -> KeyPair:
    """Read a :class:`.KeyPair` from PEM files."""
    with open(private_key_path, 'rb') as f:
        private_pem = f.read()
    public_pem = None
    if public_key_path:
        with open(public_key_path, 'rb') as f:
            public_pem = f.read()
    return KeyPair.from_pem(private_pem, public_pem)
