from .client import BitcoindClient
from .config import BitcoindClientConfig, split_url
from .exceptions import (
    BitcoindConfigurationError,
    BitcoindConnectionError,
    BitcoindError,
    BitcoindRemoteCallError,
)
from .handler import SUPPRESS, ExceptionHandler, exception_handler, reset_exception_handler
from .responses import BitcoindResponse
from .transport import HttpTransport
from .units import to_bitcoin, to_fixed, to_mbtc, to_satoshi, to_ubtc

__all__ = [
    "BitcoindClient",
    "BitcoindClientConfig",
    "BitcoindConfigurationError",
    "BitcoindConnectionError",
    "BitcoindError",
    "BitcoindRemoteCallError",
    "BitcoindResponse",
    "ExceptionHandler",
    "HttpTransport",
    "SUPPRESS",
    "exception_handler",
    "reset_exception_handler",
    "split_url",
    "to_bitcoin",
    "to_fixed",
    "to_mbtc",
    "to_satoshi",
    "to_ubtc",
]
