"""Declarative binary encodings for TLS presentation-language structures.

A Spec knows how to serialize itself and how to describe itself as
json for logging. Composite encodings are built by combining the pieces
here (see ech_spec for the concrete ECH types):

    class B16Raw(_Bounded, Raw):
        _LENGTH_TYPE = Uint16
"""

from typing import Self, ClassVar, override
from dataclasses import dataclass, fields

type Json = int | str | list[Json] | dict[str, Json]


class PackError(ValueError):
    """A value has no encoding, e.g. its length overflows a length prefix."""
    pass


class Spec:
    def jsonify(self) -> Json:
        raise NotImplementedError

    def pack(self) -> bytes:
        raise NotImplementedError

    def packed_size(self) -> int:
        return len(self.pack())


class _Integral(Spec, int):
    _BYTE_LENGTH: ClassVar[int]

    def __new__(cls, value: int) -> Self:
        bound = 1 << (8 * cls._BYTE_LENGTH)
        if not 0 <= value < bound:
            raise ValueError(f"{cls.__name__} needs 0 <= value < {bound}, got {value}")
        return super().__new__(cls, value)

    @override
    def jsonify(self) -> Json:
        return int(self)

    @override
    def pack(self) -> bytes:
        return int(self).to_bytes(self._BYTE_LENGTH, 'big')

    @override
    def packed_size(self) -> int:
        return self._BYTE_LENGTH


class _NamedConst(Spec):
    """Mixin giving an IntEnum a fixed-width wire encoding.

    class Color(_NamedConst, IntEnum) packs each member as its value,
    big-endian in _BYTE_LENGTH bytes.
    """
    _BYTE_LENGTH: ClassVar[int]

    @override
    def jsonify(self) -> Json:
        return {'name': self.name, 'value': int(self)} # type: ignore

    @override
    def pack(self) -> bytes:
        return int(self).to_bytes(self._BYTE_LENGTH, 'big') # type: ignore[call-overload]

    @override
    def packed_size(self) -> int:
        return self._BYTE_LENGTH


class Raw(Spec, bytes):
    @override
    def jsonify(self) -> Json:
        return self.hex()

    @override
    def pack(self) -> bytes:
        return bytes(self)

    @override
    def packed_size(self) -> int:
        return len(self)


class String(Spec, str):
    # surrogateescape lets names decoded from raw argv bytes go out unchanged
    @override
    def jsonify(self) -> Json:
        return str(self)

    def encoded(self) -> bytes:
        try:
            return self.encode('utf8', 'surrogateescape')
        except UnicodeEncodeError as e:
            raise PackError(f"cannot encode {self!r}: {e}") from e

    @override
    def pack(self) -> bytes:
        return self.encoded()

    @override
    def packed_size(self) -> int:
        return len(self.encoded())


class _Sequence[T: Spec](Spec, tuple[T,...]):
    @override
    def jsonify(self) -> Json:
        return [item.jsonify() for item in self]

    @override
    def pack(self) -> bytes:
        return b''.join(item.pack() for item in self)

    @override
    def packed_size(self) -> int:
        return sum(item.packed_size() for item in self)


class _Bounded(Spec):
    """Mixin that puts a length prefix in front of what the next class packs."""
    _LENGTH_TYPE: ClassVar[type[_Integral]]

    @override
    def pack(self) -> bytes:
        body = super().pack()
        try:
            prefix = self._LENGTH_TYPE(len(body))
        except ValueError as e:
            raise PackError(f"{type(self).__name__} is {len(body)} bytes, too long for "
                            f"its {self._LENGTH_TYPE._BYTE_LENGTH}-byte length") from e
        return prefix.pack() + body

    @override
    def packed_size(self) -> int:
        return self._LENGTH_TYPE._BYTE_LENGTH + super().packed_size()


@dataclass(frozen=True)
class _Struct(Spec):
    """Dataclass whose fields are Specs, packed in declaration order."""

    def __post_init__(self) -> None:
        for fld in fields(self):
            value = getattr(self, fld.name)
            if not isinstance(value, fld.type): # type: ignore[arg-type]
                raise TypeError(f"{type(self).__name__}.{fld.name} must be {fld.type}, got {value!r}")

    def members(self) -> list[tuple[str, Spec]]:
        return [(fld.name, getattr(self, fld.name)) for fld in fields(self)]

    @override
    def jsonify(self) -> Json:
        return {name: value.jsonify() for name, value in self.members()}

    @override
    def pack(self) -> bytes:
        return b''.join(value.pack() for _, value in self.members())

    @override
    def packed_size(self) -> int:
        return sum(value.packed_size() for _, value in self.members())
