"""dcfail - data-call fail cause classification.

Resolves the integer failure code reported for a failed packet-data
connection into a named cause and answers the connection manager's policy
questions about it.
"""

from dcfail.core.fail_cause import (
    FailCause,
    FailCauseCategory,
    FailCauseReport,
    classify,
    code_of,
    is_event_loggable,
    is_permanent,
    is_retryable,
    requires_radio_restart,
    resolve,
)

__version__ = "1.0.0"
__all__ = [
    "__version__",
    "FailCause",
    "FailCauseCategory",
    "FailCauseReport",
    "classify",
    "code_of",
    "is_event_loggable",
    "is_permanent",
    "is_retryable",
    "requires_radio_restart",
    "resolve",
]
