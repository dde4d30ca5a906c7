"""
nicks.runtime — the name service, its authorization gate and the call dispatcher.
"""

from .auth import AuthorizationGate, StaticAuthorizationGate
from .dispatcher import (Call, ClearName, DispatchError, ForceName, KillName,
                         SetName, decode_call, dispatch)
from .service import DepositDrift, NameService

__all__ = [
    "AuthorizationGate",
    "StaticAuthorizationGate",
    "NameService",
    "DepositDrift",
    "Call",
    "SetName",
    "ClearName",
    "KillName",
    "ForceName",
    "DispatchError",
    "decode_call",
    "dispatch",
]
