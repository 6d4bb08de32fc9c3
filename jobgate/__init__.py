"""jobgate: job definition verification and coordinator action queries."""

from .config import JobGateConfig, load_config
from .db import CoordinatorDB, get_database
from .errors import ErrorCode, JobGateError, ParameterVerifierError, QueryExecutionError
from .executor import CoordJobGetActionsSubset, parse_status_filter
from .verifier import ParameterVerifier, verify_parameters
from .views import CoordinatorActionView, project_action

__version__ = "0.1.0"
__all__ = [
    "CoordJobGetActionsSubset",
    "CoordinatorActionView",
    "CoordinatorDB",
    "ErrorCode",
    "JobGateConfig",
    "JobGateError",
    "ParameterVerifier",
    "ParameterVerifierError",
    "QueryExecutionError",
    "get_database",
    "load_config",
    "parse_status_filter",
    "project_action",
    "verify_parameters",
]
