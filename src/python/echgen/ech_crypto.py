"""Key generation and ECHConfig construction.

The HPKE key pair is produced by pyhpke's DeriveKeyPair from fresh random
bytes; the python cryptography library later serializes the same private
key as PKCS#8 (see ech_pem).
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from random import Random
from secrets import SystemRandom
from typing import override

import pyhpke

from echgen.config import DEFAULT_MAXIMUM_NAME_LENGTH
from echgen.ech_common import *
from echgen.ech_pem import package_ech_pem
from echgen.ech_spec import (
    HpkeKemId,
    HpkeKdfId,
    HpkeAeadId,
    ECHConfig,
    ECHConfigList,
)
from echgen.util import pformat

DEFAULT_KEM = HpkeKemId.DHKEM_X25519_HKDF_SHA256

# Order is part of the encoded record; keep it fixed.
DEFAULT_HPKE_CSUITES: tuple[tuple[HpkeKdfId,HpkeAeadId],...] = (
    (HpkeKdfId.HKDF_SHA256, HpkeAeadId.AES_128_GCM),
    (HpkeKdfId.HKDF_SHA256, HpkeAeadId.AES_256_GCM),
    (HpkeKdfId.HKDF_SHA256, HpkeAeadId.CHACHA20_POLY1305),
)


@dataclass(frozen=True)
class EchKeyPair:
    private: bytes = field(repr=False)
    public: bytes


class KeyEncaps(ABC):
    public_key_size: int

    @abstractmethod
    def gen_keypair(self, rgen: Random) -> EchKeyPair: ...

class _Pyhpke_Kem(KeyEncaps):
    def __init__(self, kem_id: pyhpke.KEMId, public_key_size: int):
        self._kem = pyhpke.CipherSuite.new(
            kem_id, pyhpke.KDFId.HKDF_SHA256, pyhpke.AEADId.AES128_GCM).kem
        self.public_key_size = public_key_size

    @override
    def gen_keypair(self, rgen: Random) -> EchKeyPair:
        try:
            ikm = rgen.randbytes(64)
            keypair = self._kem.derive_key_pair(ikm)
        except (OSError, NotImplementedError, ValueError) as e:
            raise KeyGenError(f"failed to generate ECH key: {e}") from e
        pair = EchKeyPair(
            private = keypair.private_key.to_private_bytes(),
            public = keypair.public_key.to_public_bytes(),
        )
        if len(pair.public) != self.public_key_size:
            raise KeyGenError(f"expected {self.public_key_size}-byte public key, got {len(pair.public)}")
        return pair

def get_kem_alg(kem_id: HpkeKemId) -> KeyEncaps:
    """Given a kem_id, returns an object to generate key pairs for it."""
    match kem_id:
        case HpkeKemId.DHKEM_X25519_HKDF_SHA256:
            return _Pyhpke_Kem(pyhpke.KEMId.DHKEM_X25519_HKDF_SHA256, 32)
    raise InputError(f"unsupported KEM {kem_id}")


def gen_ech_keypair(rgen: Random|None = None, kem_id: HpkeKemId = DEFAULT_KEM) -> EchKeyPair:
    """Generates a fresh HPKE key pair for ECH.

    rgen defaults to SystemRandom; pass a seeded Random only for tests."""
    if rgen is None:
        rgen = SystemRandom()
    return get_kem_alg(kem_id).gen_keypair(rgen)

def check_config_id(config_id: int) -> None:
    if isinstance(config_id, bool) or not isinstance(config_id, int):
        raise InputError(f"ID must be an integer, got {config_id!r}")
    if not 0 <= config_id < 2**8:
        raise InputError(f"ID must be a uint8 (0-255), got {config_id}")

def check_public_name(public_name: str) -> None:
    # argv bytes that are not utf8 arrive as surrogate escapes; keep them raw
    try:
        length = len(public_name.encode('utf8', 'surrogateescape'))
    except UnicodeEncodeError as e:
        raise InputError(f"public name {public_name!r} cannot be encoded: {e}") from e
    if not 0 < length < 2**8:
        raise InputError(f"public name must be 1 to 255 bytes, got {length}")

def gen_ech_config(
    config_id: int,
    public_key: bytes,
    public_name: str,
    maximum_name_length: int = DEFAULT_MAXIMUM_NAME_LENGTH,
    kem_id: HpkeKemId = DEFAULT_KEM,
    cipher_suites: Iterable[tuple[HpkeKdfId,HpkeAeadId]] = DEFAULT_HPKE_CSUITES,
) -> ECHConfig:
    """Builds one ECHConfig record around an existing public key.

    All inputs are checked before anything is encoded."""
    check_config_id(config_id)
    check_public_name(public_name)
    expected = get_kem_alg(kem_id).public_key_size
    if len(public_key) != expected:
        raise InputError(f"public key must be {expected} bytes for {kem_id}, got {len(public_key)}")
    if not 0 <= maximum_name_length < 2**8:
        raise InputError(f"maximum name length must be a uint8, got {maximum_name_length}")
    cipher_suites = tuple(cipher_suites)
    if not cipher_suites:
        raise InputError("at least one cipher suite is required")

    return ECHConfig.draft24(
        config_id = config_id,
        kem_id = kem_id,
        public_key = public_key,
        cipher_suites = cipher_suites,
        maximum_name_length = maximum_name_length,
        public_name = public_name,
    )

def gen_ech_config_list(configs: Iterable[ECHConfig]) -> ECHConfigList:
    configs = list(configs)
    if not configs:
        raise InputError("ECHConfigList needs at least one ECHConfig")
    return ECHConfigList(configs)

def gen_ech_pem(
    config_id: int|None,
    public_name: str,
    rgen: Random|None = None, # default, SystemRandom
) -> bytes:
    """Generates a new ECH key and config for public_name.

    Returns the PEM private key followed by the ECHCONFIG block.
    If config_id is None, one is chosen uniformly at random."""
    if rgen is None:
        rgen = SystemRandom()
    if config_id is None:
        config_id = rgen.randrange(2**8)
    check_config_id(config_id)
    check_public_name(public_name)

    keypair = gen_ech_keypair(rgen)
    config = gen_ech_config(config_id, keypair.public, public_name)
    logger.info(f'generated ECHConfig id {config_id} for {public_name}')
    logger.debug(f'ECHConfig:\n{pformat(config.jsonify())}')
    return package_ech_pem(keypair.private, gen_ech_config_list([config]))
