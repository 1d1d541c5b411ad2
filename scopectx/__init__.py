"""
scopectx - scoped acquire/use/release contexts.

Subclass ScopedContext, implement setup() and cleanup(), then run a
single operation with with_ref() or with_mut_ref(). Cleanup is
guaranteed once setup succeeds.
"""

__version__ = "0.1.0"

from .context import FunctionContext, ScopedContext, ScopeState, scoped
from .views import ReadOnlyView, read_only, unwrap_view
from .resources import CreateFile, FileContext, OpenFile
from .errors import (
    ConfigurationError,
    ContextReleasedError,
    ErrorCategory,
    ErrorSeverity,
    OwnerConsumedError,
    ReadOnlyContextError,
    ScopeError,
)
from .config import ScopectxConfig, configure_logging, get_config, reset_config

__all__ = [
    "__version__",
    "ScopedContext",
    "ScopeState",
    "FunctionContext",
    "scoped",
    "ReadOnlyView",
    "read_only",
    "unwrap_view",
    "FileContext",
    "CreateFile",
    "OpenFile",
    "ScopeError",
    "OwnerConsumedError",
    "ReadOnlyContextError",
    "ConfigurationError",
    "ContextReleasedError",
    "ErrorCategory",
    "ErrorSeverity",
    "ScopectxConfig",
    "configure_logging",
    "get_config",
    "reset_config",
]
