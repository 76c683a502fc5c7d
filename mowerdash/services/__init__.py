"""Service layer: token lifecycle, session storage and the device API."""

from .amc import AutomowerClient, Mower, MowerAction
from .errors import (
    AuthExchangeError,
    AuthorizationExpired,
    ClientStateError,
    MowerdashError,
    OperationError,
    ReauthenticationRequired,
    RemoteError,
)
from .mower import MowerService
from .store import TokenStore
from .tokens import Credential, TokenManager, TokenRecord

__all__ = [
    "AuthExchangeError",
    "AuthorizationExpired",
    "AutomowerClient",
    "ClientStateError",
    "Credential",
    "Mower",
    "MowerAction",
    "MowerService",
    "MowerdashError",
    "OperationError",
    "ReauthenticationRequired",
    "RemoteError",
    "TokenManager",
    "TokenRecord",
    "TokenStore",
]
