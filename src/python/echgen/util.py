"""Various small utility or helper stuff not ECH specific."""

from typing import Any
import base64
import pprint

type _Pretty = str | list[_Pretty] | dict[str, _Pretty]

def _pretty_prep(obj: Any, byteslen: int|None=None) -> _Pretty :
    if isinstance(obj, bytes) or isinstance(obj, bytearray):
        if byteslen is not None and len(obj) > byteslen:
            return f"{obj[:byteslen//2].hex()}...{obj[-byteslen//2:].hex()}"
        else:
            return obj.hex()
    elif isinstance(obj, tuple) or isinstance(obj, list):
        return [_pretty_prep(value, byteslen) for value in obj]
    elif isinstance(obj, dict):
        return {str(key): _pretty_prep(value, byteslen) for key,value in obj.items()}
    else:
        return str(obj)

def pformat(obj:Any, byteslen:int=32, **kwargs: Any) -> str:
    return pprint.pformat(_pretty_prep(obj, byteslen), sort_dicts=False, **kwargs)

def b64enc(raw_bytes: bytes) -> str:
    return base64.b64encode(raw_bytes).decode('ascii')

def b64dec(b64_str: str) -> bytes:
    return base64.b64decode(b64_str, validate=True)
