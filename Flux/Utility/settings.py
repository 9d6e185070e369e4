"""Runtime settings read from the environment."""
import os
from typing import Optional

from Flux.Exception.FluxError import FluxConfigError

LISTENER_ERRORS_ENV = "FLUX_LISTENER_ERRORS"

# raise: a failing listener aborts the emit and propagates to the caller.
# log: the failure is logged and the remaining listeners still run.
ERROR_POLICY_RAISE = "raise"
ERROR_POLICY_LOG = "log"
ERROR_POLICIES = (ERROR_POLICY_RAISE, ERROR_POLICY_LOG)


def normalize_error_policy(value: str, key: str = "error_policy") -> str:
    policy = str(value).strip().lower()
    if policy not in ERROR_POLICIES:
        raise FluxConfigError(
            key, value, f"{key} must be one of {', '.join(ERROR_POLICIES)} (got {value!r})"
        )
    return policy


def get_listener_error_policy(default: str = ERROR_POLICY_RAISE) -> str:
    raw: Optional[str] = os.environ.get(LISTENER_ERRORS_ENV)
    if raw is None or not raw.strip():
        return default
    return normalize_error_policy(raw, LISTENER_ERRORS_ENV)
