"""Core configuration, validation and path-safety logic."""

from .cancel import CancelToken
from .config import AssetLink, ConfigError, Configuration, load_document, normalize
from .credentials import CredentialSource, EnvCredentials, StaticCredentials, resolve_token
from .errors import ErrorCode
from .paths import PathError, resolve_asset_path
from .result import Err, Ok, Result
from .validation import ValidationError, ValidationResult, validate

__all__ = [
    # cancel
    "CancelToken",
    # config
    "AssetLink",
    "ConfigError",
    "Configuration",
    "load_document",
    "normalize",
    # credentials
    "CredentialSource",
    "EnvCredentials",
    "StaticCredentials",
    "resolve_token",
    # errors
    "ErrorCode",
    # paths
    "PathError",
    "resolve_asset_path",
    # result
    "Err",
    "Ok",
    "Result",
    # validation
    "ValidationError",
    "ValidationResult",
    "validate",
]
