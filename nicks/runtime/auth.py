"""
nicks.runtime.auth — origin checks and account lookup.

`AuthorizationGate` is the protocol the service consumes:

  resolve_signed(origin)       -> account id, or NotSigned
  resolve_privileged(origin)   -> None, or NotAuthorized
  resolve_target(descriptor)   -> account id, or BadTarget

`StaticAuthorizationGate` only accepts signed origins whose account id has the
configured length, so every signer stays addressable as a target. Root is
always privileged, and signed origins from a fixed set of delegates are too. Target descriptors may be
a raw account id, a 0x-hex string, or an integer index / alias registered with
`register_alias` (the equivalent of an account-index lookup).
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Iterable, Optional, Protocol, Union, runtime_checkable

from ..config import ACCOUNT_ID_LENGTH
from ..errors import BadTarget, NotAuthorized, NotSigned
from ..types.origin import Origin, Root, Signed

Descriptor = Union[bytes, str, int]


@runtime_checkable
class AuthorizationGate(Protocol):
    def resolve_signed(self, origin: Origin) -> bytes:
        ...

    def resolve_privileged(self, origin: Origin) -> None:
        ...

    def resolve_target(self, descriptor: Any) -> bytes:
        ...


class StaticAuthorizationGate:
    def __init__(
        self,
        delegates: Iterable[bytes] = (),
        *,
        aliases: Optional[Dict[Union[int, str], bytes]] = None,
        id_length: int = ACCOUNT_ID_LENGTH,
    ) -> None:
        self.delegates: FrozenSet[bytes] = frozenset(bytes(d) for d in delegates)
        self.id_length = id_length
        self._aliases: Dict[Union[int, str], bytes] = {}
        for k, v in (aliases or {}).items():
            self.register_alias(k, v)

    def register_alias(self, alias: Union[int, str], account: bytes) -> None:
        if len(account) != self.id_length:
            raise ValueError(f"account id must be {self.id_length} bytes")
        self._aliases[alias] = bytes(account)

    # ----------------------- AuthorizationGate ---------------------------- #

    def resolve_signed(self, origin: Origin) -> bytes:
        if isinstance(origin, Signed) and len(origin.who) == self.id_length:
            return origin.who
        raise NotSigned()

    def resolve_privileged(self, origin: Origin) -> None:
        if isinstance(origin, Root):
            return
        if isinstance(origin, Signed) and origin.who in self.delegates:
            return
        raise NotAuthorized()

    def resolve_target(self, descriptor: Any) -> bytes:
        if isinstance(descriptor, (bytes, bytearray)):
            b = bytes(descriptor)
            if len(b) == self.id_length:
                return b
            raise BadTarget(descriptor)
        if isinstance(descriptor, bool):
            raise BadTarget(descriptor)
        if isinstance(descriptor, int):
            if descriptor in self._aliases:
                return self._aliases[descriptor]
            raise BadTarget(descriptor)
        if isinstance(descriptor, str):
            if descriptor in self._aliases:
                return self._aliases[descriptor]
            h = descriptor.strip()
            if h.startswith(("0x", "0X")):
                h = h[2:]
            try:
                b = bytes.fromhex(h)
            except ValueError:
                raise BadTarget(descriptor) from None
            if len(b) == self.id_length:
                return b
        raise BadTarget(descriptor)


__all__ = ["AuthorizationGate", "StaticAuthorizationGate", "Descriptor"]
