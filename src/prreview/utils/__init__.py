"""PR Review Helper utility modules.

- logging: Standardized logging with human/verbose/JSON modes
- preflight: Credential and package availability checks
"""

from prreview.utils.logging import get_logger, setup_logging
from prreview.utils.preflight import (
    CredentialMissing,
    PreflightChecker,
    PreflightResult,
    ensure_llm_credentials,
)

__all__ = [
    "CredentialMissing",
    "PreflightChecker",
    "PreflightResult",
    "ensure_llm_credentials",
    "get_logger",
    "setup_logging",
]
