"""PEM text envelopes for the generated private key and ECHConfigList.

The output file holds two blocks back to back: a standard PKCS#8
"PRIVATE KEY" block, then a non-standard "ECHCONFIG" block whose body
is the base64 of the ECHConfigList, all on one line.
"""

from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PrivateFormat, NoEncryption

from echgen.config import ECHCONFIG_LABEL
from echgen.ech_common import *
from echgen.ech_spec import ECHConfigList
from echgen.spec import PackError
from echgen.util import b64enc


def private_key_pem(private_key: bytes) -> bytes:
    """PKCS#8-encodes a raw X25519 private key as PEM."""
    try:
        prikey = X25519PrivateKey.from_private_bytes(private_key)
    except ValueError as e:
        raise KeyGenError(f"not a usable X25519 private key: {e}") from e
    return prikey.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption())

def pem_block(label: str, raw: bytes) -> bytes:
    return (f"-----BEGIN {label}-----\n"
            f"{b64enc(raw)}\n"
            f"-----END {label}-----\n").encode('ascii')

def package_ech_pem(private_key: bytes, config_list: ECHConfigList) -> bytes:
    key_pem = private_key_pem(private_key)
    try:
        raw_list = config_list.pack()
    except PackError as e:
        raise EncodingError(f"could not encode ECHConfigList: {e}") from e
    return key_pem + pem_block(ECHCONFIG_LABEL, raw_list)
