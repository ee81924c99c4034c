"""
Data-Call Fail Causes and Their Classification.

This module turns the integer failure code reported for a failed packet-data
connection into a named FailCause, and answers the policy questions the
connection manager asks about it: is the failure permanent, should the radio
be restarted, is it worth a diagnostic event.

Architecture Context
--------------------
    radio interface / framework
            │  int wire code
            ▼
    resolve(code) ──→ FailCause ──→ is_permanent()
                                    is_event_loggable()
                                    requires_radio_restart(flag)
            │
            ▼
    connection manager (retry, backoff, radio restart, diagnostics)

The connection manager owns retry scheduling and radio restarts; this module
only classifies.

Code Ranges
-----------
**Standard** (0x00-0xFFFE)
    Causes defined by the radio-interface standard (3GPP session management).

**Vendor** (negative values and 0xFFFF)
    Local errors synthesized by the vendor radio layer.

**Framework** (0x10000 and above)
    Errors synthesized by the framework when no radio code applies.

Usage
-----
    from dcfail.core.fail_cause import FailCause, resolve, is_permanent

    cause = resolve(0x08)
    assert cause is FailCause.OPERATOR_BARRED
    assert is_permanent(cause)

    resolve(999999)  # FailCause.UNKNOWN, never raises

Design Decisions
----------------
1. **Total lookup**: Unrecognized codes resolve to UNKNOWN so teardown and
   retry logic always runs to completion.
2. **One policy entry per cause**: FAIL_CAUSE_POLICIES must name every
   member; the table is checked at import.
3. **Restart policy is a parameter**: Whether REGULAR_DEACTIVATION restarts
   the radio is platform configuration, passed in by the caller.
4. **Immutable tables**: Built once at import, exposed as read-only views.
"""

from dataclasses import dataclass
from enum import Enum, unique
from types import MappingProxyType
from typing import FrozenSet, Mapping

from dcfail.core.exceptions import FailCauseTableError

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

VENDOR_UNSPECIFIED_CODE = 0xFFFF
FRAMEWORK_CODE_BASE = 0x10000


class FailCauseCategory(str, Enum):
    """Origin of a wire code."""

    STANDARD = "standard"
    VENDOR = "vendor"
    FRAMEWORK = "framework"


@unique
class FailCause(Enum):
    """Reason a data connection failed, valued by its wire code."""

    NONE = 0

    # Defined by the radio-interface standard
    OPERATOR_BARRED = 0x08
    INSUFFICIENT_RESOURCES = 0x1A
    MISSING_UNKNOWN_APN = 0x1B
    UNKNOWN_PDP_ADDRESS_TYPE = 0x1C
    USER_AUTHENTICATION = 0x1D
    ACTIVATION_REJECT_GGSN = 0x1E
    ACTIVATION_REJECT_UNSPECIFIED = 0x1F
    SERVICE_OPTION_NOT_SUPPORTED = 0x20
    SERVICE_OPTION_NOT_SUBSCRIBED = 0x21
    SERVICE_OPTION_OUT_OF_ORDER = 0x22
    NSAPI_IN_USE = 0x23
    REGULAR_DEACTIVATION = 0x24
    ONLY_IPV4_ALLOWED = 0x32
    ONLY_IPV6_ALLOWED = 0x33
    ONLY_SINGLE_BEARER_ALLOWED = 0x34
    PROTOCOL_ERRORS = 0x6F

    # Local errors from the vendor radio layer
    REGISTRATION_FAIL = -1
    GPRS_REGISTRATION_FAIL = -2
    SIGNAL_LOST = -3
    PREF_RADIO_TECH_CHANGED = -4
    RADIO_POWER_OFF = -5
    TETHERED_CALL_ACTIVE = -6
    ERROR_UNSPECIFIED = 0xFFFF

    # Synthesized by the framework
    UNKNOWN = 0x10000
    RADIO_NOT_AVAILABLE = 0x10001
    UNACCEPTABLE_NETWORK_PARAMETER = 0x10002
    CONNECTION_TO_DATACONNECTIONAC_BROKEN = 0x10003
    LOST_CONNECTION = 0x10004
    RESET_BY_FRAMEWORK = 0x10005

    @property
    def code(self) -> int:
        """Wire code bound to this cause."""
        return self.value

    @property
    def category(self) -> FailCauseCategory:
        """Which layer defines this cause's code."""
        if self.value >= FRAMEWORK_CODE_BASE:
            return FailCauseCategory.FRAMEWORK
        if self.value < 0 or self.value == VENDOR_UNSPECIFIED_CODE:
            return FailCauseCategory.VENDOR
        return FailCauseCategory.STANDARD

    @classmethod
    def from_code(cls, code: int) -> "FailCause":
        """Resolve a wire code; see resolve()."""
        return resolve(code)


@dataclass(frozen=True)
class FailPolicy:
    """How the connection manager should treat a cause."""

    permanent: bool = False
    event_loggable: bool = False


# Every FailCause needs an entry here; _check_policy_table() enforces it.
FAIL_CAUSE_POLICIES: Mapping[FailCause, FailPolicy] = MappingProxyType(
    {
        FailCause.NONE: FailPolicy(),
        FailCause.OPERATOR_BARRED: FailPolicy(permanent=True, event_loggable=True),
        FailCause.INSUFFICIENT_RESOURCES: FailPolicy(event_loggable=True),
        FailCause.MISSING_UNKNOWN_APN: FailPolicy(permanent=True),
        FailCause.UNKNOWN_PDP_ADDRESS_TYPE: FailPolicy(
            permanent=True, event_loggable=True
        ),
        FailCause.USER_AUTHENTICATION: FailPolicy(permanent=True, event_loggable=True),
        FailCause.ACTIVATION_REJECT_GGSN: FailPolicy(
            permanent=True, event_loggable=True
        ),
        FailCause.ACTIVATION_REJECT_UNSPECIFIED: FailPolicy(event_loggable=True),
        FailCause.SERVICE_OPTION_NOT_SUPPORTED: FailPolicy(
            permanent=True, event_loggable=True
        ),
        FailCause.SERVICE_OPTION_NOT_SUBSCRIBED: FailPolicy(
            permanent=True, event_loggable=True
        ),
        FailCause.SERVICE_OPTION_OUT_OF_ORDER: FailPolicy(event_loggable=True),
        FailCause.NSAPI_IN_USE: FailPolicy(permanent=True, event_loggable=True),
        # Radio restart is decided by requires_radio_restart()
        FailCause.REGULAR_DEACTIVATION: FailPolicy(),
        FailCause.ONLY_IPV4_ALLOWED: FailPolicy(permanent=True, event_loggable=True),
        FailCause.ONLY_IPV6_ALLOWED: FailPolicy(permanent=True, event_loggable=True),
        FailCause.ONLY_SINGLE_BEARER_ALLOWED: FailPolicy(),
        FailCause.PROTOCOL_ERRORS: FailPolicy(permanent=True, event_loggable=True),
        FailCause.REGISTRATION_FAIL: FailPolicy(),
        FailCause.GPRS_REGISTRATION_FAIL: FailPolicy(),
        FailCause.SIGNAL_LOST: FailPolicy(event_loggable=True),
        FailCause.PREF_RADIO_TECH_CHANGED: FailPolicy(),
        FailCause.RADIO_POWER_OFF: FailPolicy(permanent=True, event_loggable=True),
        FailCause.TETHERED_CALL_ACTIVE: FailPolicy(
            permanent=True, event_loggable=True
        ),
        FailCause.ERROR_UNSPECIFIED: FailPolicy(),
        FailCause.UNKNOWN: FailPolicy(),
        FailCause.RADIO_NOT_AVAILABLE: FailPolicy(permanent=True),
        FailCause.UNACCEPTABLE_NETWORK_PARAMETER: FailPolicy(
            permanent=True, event_loggable=True
        ),
        FailCause.CONNECTION_TO_DATACONNECTIONAC_BROKEN: FailPolicy(),
        FailCause.LOST_CONNECTION: FailPolicy(),
        FailCause.RESET_BY_FRAMEWORK: FailPolicy(),
    }
)


def _check_policy_table() -> None:
    """Fail the import if any cause lacks a policy entry."""
    missing = [cause.name for cause in FailCause if cause not in FAIL_CAUSE_POLICIES]
    if missing:
        raise FailCauseTableError(missing)


_check_policy_table()

_CODE_TO_CAUSE: Mapping[int, FailCause] = MappingProxyType(
    {cause.value: cause for cause in FailCause}
)

PERMANENT_FAIL_CAUSES: FrozenSet[FailCause] = frozenset(
    cause for cause, policy in FAIL_CAUSE_POLICIES.items() if policy.permanent
)
EVENT_LOGGABLE_FAIL_CAUSES: FrozenSet[FailCause] = frozenset(
    cause for cause, policy in FAIL_CAUSE_POLICIES.items() if policy.event_loggable
)


def resolve(code: int) -> FailCause:
    """
    Map a wire code to its FailCause.

    Args:
        code: Failure code from the radio layer or the framework.

    Returns:
        The declared cause for ``code``, or FailCause.UNKNOWN when no cause
        declares it. Never raises.
    """
    return _CODE_TO_CAUSE.get(code, FailCause.UNKNOWN)


def code_of(cause: FailCause) -> int:
    """Return the wire code bound to ``cause``."""
    return cause.value


def is_permanent(cause: FailCause) -> bool:
    """True when retrying the same request cannot succeed."""
    return FAIL_CAUSE_POLICIES[cause].permanent


def is_retryable(cause: FailCause) -> bool:
    """True for every cause that is not permanent, UNKNOWN included."""
    return not is_permanent(cause)


def is_event_loggable(cause: FailCause) -> bool:
    """True when the failure should be surfaced to diagnostics."""
    return FAIL_CAUSE_POLICIES[cause].event_loggable


def requires_radio_restart(
    cause: FailCause, restart_on_regular_deactivation: bool
) -> bool:
    """
    Decide whether the radio should be restarted after ``cause``.

    A regular deactivation may be a benign network teardown or, on some
    platforms, a sign the radio stack needs a restart. The platform decides
    through ``restart_on_regular_deactivation``; every other cause never
    requires a restart.
    """
    return cause is FailCause.REGULAR_DEACTIVATION and bool(
        restart_on_regular_deactivation
    )


@dataclass(frozen=True)
class FailCauseReport:
    """Everything the connection manager needs to know about one failure."""

    code: int
    cause: FailCause
    category: FailCauseCategory
    permanent: bool
    retryable: bool
    event_loggable: bool
    restart_radio: bool

    @property
    def recognized(self) -> bool:
        """False when ``code`` fell back to UNKNOWN without declaring it."""
        return self.cause is not FailCause.UNKNOWN or self.code == self.cause.value

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "cause": self.cause.name,
            "category": self.category.value,
            "permanent": self.permanent,
            "retryable": self.retryable,
            "event_loggable": self.event_loggable,
            "restart_radio": self.restart_radio,
        }


def classify(code: int, restart_on_regular_deactivation: bool = False) -> FailCauseReport:
    """
    Resolve ``code`` and evaluate every predicate in one call.

    Args:
        code: Wire code as received.
        restart_on_regular_deactivation: Platform restart policy.

    Returns:
        FailCauseReport keeping the received code alongside the cause.
    """
    cause = resolve(code)
    return FailCauseReport(
        code=code,
        cause=cause,
        category=cause.category,
        permanent=is_permanent(cause),
        retryable=is_retryable(cause),
        event_loggable=is_event_loggable(cause),
        restart_radio=requires_radio_restart(cause, restart_on_regular_deactivation),
    )
