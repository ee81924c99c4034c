"""
Unit tests for the fail_cause module.

Tests the FailCause enum, the code lookup, the policy table and the
classification predicates.

Organization
------------
- TestFailCauseEnum: declared members, codes and categories
- TestResolve: code -> cause lookup and its UNKNOWN fallback
- TestPolicyTable: completeness of FAIL_CAUSE_POLICIES
- TestPermanentAndLoggable: is_permanent / is_event_loggable sets
- TestRequiresRadioRestart: restart gating by the platform flag
- TestClassify: FailCauseReport scenarios
"""

import pytest

from dcfail.core.exceptions import FailCauseTableError
from dcfail.core.fail_cause import (
    EVENT_LOGGABLE_FAIL_CAUSES,
    FAIL_CAUSE_POLICIES,
    INT32_MAX,
    INT32_MIN,
    PERMANENT_FAIL_CAUSES,
    FailCause,
    FailCauseCategory,
    FailPolicy,
    _check_policy_table,
    classify,
    code_of,
    is_event_loggable,
    is_permanent,
    is_retryable,
    requires_radio_restart,
    resolve,
)

EXPECTED_PERMANENT = {
    FailCause.OPERATOR_BARRED,
    FailCause.MISSING_UNKNOWN_APN,
    FailCause.UNKNOWN_PDP_ADDRESS_TYPE,
    FailCause.USER_AUTHENTICATION,
    FailCause.ACTIVATION_REJECT_GGSN,
    FailCause.SERVICE_OPTION_NOT_SUPPORTED,
    FailCause.SERVICE_OPTION_NOT_SUBSCRIBED,
    FailCause.NSAPI_IN_USE,
    FailCause.ONLY_IPV4_ALLOWED,
    FailCause.ONLY_IPV6_ALLOWED,
    FailCause.PROTOCOL_ERRORS,
    FailCause.RADIO_POWER_OFF,
    FailCause.TETHERED_CALL_ACTIVE,
    FailCause.RADIO_NOT_AVAILABLE,
    FailCause.UNACCEPTABLE_NETWORK_PARAMETER,
}

EXPECTED_LOGGABLE = {
    FailCause.OPERATOR_BARRED,
    FailCause.INSUFFICIENT_RESOURCES,
    FailCause.UNKNOWN_PDP_ADDRESS_TYPE,
    FailCause.USER_AUTHENTICATION,
    FailCause.ACTIVATION_REJECT_GGSN,
    FailCause.ACTIVATION_REJECT_UNSPECIFIED,
    FailCause.SERVICE_OPTION_NOT_SUBSCRIBED,
    FailCause.SERVICE_OPTION_NOT_SUPPORTED,
    FailCause.SERVICE_OPTION_OUT_OF_ORDER,
    FailCause.NSAPI_IN_USE,
    FailCause.ONLY_IPV4_ALLOWED,
    FailCause.ONLY_IPV6_ALLOWED,
    FailCause.PROTOCOL_ERRORS,
    FailCause.SIGNAL_LOST,
    FailCause.RADIO_POWER_OFF,
    FailCause.TETHERED_CALL_ACTIVE,
    FailCause.UNACCEPTABLE_NETWORK_PARAMETER,
}


class TestFailCauseEnum:
    """Test FailCause enum."""

    def test_member_count(self) -> None:
        """Given FailCause, when counting members, then all 30 causes exist."""
        assert len(list(FailCause)) == 30

    def test_codes_are_unique(self) -> None:
        """Given all FailCause codes, when checking, then no code repeats."""
        # Given
        all_codes = [cause.code for cause in FailCause]

        # Then
        assert len(all_codes) == len(set(all_codes))

    def test_codes_fit_int32(self) -> None:
        """Given all FailCause codes, when checking range, then all are int32."""
        for cause in FailCause:
            assert INT32_MIN <= cause.code <= INT32_MAX, cause.name

    @pytest.mark.parametrize(
        "cause, code",
        [
            (FailCause.NONE, 0),
            (FailCause.OPERATOR_BARRED, 0x08),
            (FailCause.REGULAR_DEACTIVATION, 0x24),
            (FailCause.PROTOCOL_ERRORS, 0x6F),
            (FailCause.TETHERED_CALL_ACTIVE, -6),
            (FailCause.ERROR_UNSPECIFIED, 0xFFFF),
            (FailCause.UNKNOWN, 0x10000),
            (FailCause.RESET_BY_FRAMEWORK, 0x10005),
        ],
    )
    def test_declared_codes(self, cause: FailCause, code: int) -> None:
        """Given a cause, when reading its code, then it matches the wire value."""
        assert cause.code == code
        assert code_of(cause) == code

    @pytest.mark.parametrize(
        "cause, category",
        [
            (FailCause.NONE, FailCauseCategory.STANDARD),
            (FailCause.PROTOCOL_ERRORS, FailCauseCategory.STANDARD),
            (FailCause.REGISTRATION_FAIL, FailCauseCategory.VENDOR),
            (FailCause.RADIO_POWER_OFF, FailCauseCategory.VENDOR),
            (FailCause.ERROR_UNSPECIFIED, FailCauseCategory.VENDOR),
            (FailCause.UNKNOWN, FailCauseCategory.FRAMEWORK),
            (FailCause.LOST_CONNECTION, FailCauseCategory.FRAMEWORK),
        ],
    )
    def test_category(self, cause: FailCause, category: FailCauseCategory) -> None:
        """Given a cause, when reading its category, then it matches its range."""
        assert cause.category is category

    def test_causes_compare_by_identity_not_int(self) -> None:
        """Given a cause, when compared with its raw code, then they differ."""
        assert FailCause.OPERATOR_BARRED != 0x08


class TestResolve:
    """Test resolve() lookup."""

    def test_round_trip_for_every_cause(self) -> None:
        """Given every declared cause, when resolving its code, then it returns."""
        for cause in FailCause:
            assert resolve(code_of(cause)) is cause

    @pytest.mark.parametrize(
        "code",
        [999999, 1, 0x6E, -7, 0xFFFE, 0x10006, INT32_MIN, INT32_MAX, 2**40],
    )
    def test_undeclared_code_resolves_to_unknown(self, code: int) -> None:
        """Given an undeclared code, when resolving, then UNKNOWN without error."""
        assert resolve(code) is FailCause.UNKNOWN

    def test_from_code_matches_resolve(self) -> None:
        """Given FailCause.from_code, when called, then it behaves like resolve."""
        assert FailCause.from_code(-5) is FailCause.RADIO_POWER_OFF
        assert FailCause.from_code(123456) is FailCause.UNKNOWN


class TestPolicyTable:
    """Test FAIL_CAUSE_POLICIES registry."""

    def test_all_causes_have_policies(self) -> None:
        """Given all FailCause members, when checking registry, then all have entries."""
        for cause in FailCause:
            assert cause in FAIL_CAUSE_POLICIES
            assert isinstance(FAIL_CAUSE_POLICIES[cause], FailPolicy)

    def test_table_is_read_only(self) -> None:
        """Given the policy table, when assigning, then it refuses."""
        with pytest.raises(TypeError):
            FAIL_CAUSE_POLICIES[FailCause.NONE] = FailPolicy(permanent=True)  # type: ignore[index]

    def test_missing_policy_is_reported(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Given a table without one cause, when checked, then the cause is named."""
        # Given
        partial = {
            cause: policy
            for cause, policy in FAIL_CAUSE_POLICIES.items()
            if cause is not FailCause.SIGNAL_LOST
        }
        monkeypatch.setattr(
            "dcfail.core.fail_cause.FAIL_CAUSE_POLICIES", partial
        )

        # When/Then
        with pytest.raises(FailCauseTableError) as exc_info:
            _check_policy_table()
        assert exc_info.value.missing == ["SIGNAL_LOST"]

    def test_derived_sets_match_table(self) -> None:
        """Given the derived frozensets, when compared, then they mirror the table."""
        assert PERMANENT_FAIL_CAUSES == frozenset(EXPECTED_PERMANENT)
        assert EVENT_LOGGABLE_FAIL_CAUSES == frozenset(EXPECTED_LOGGABLE)


class TestPermanentAndLoggable:
    """Test is_permanent(), is_retryable() and is_event_loggable()."""

    def test_permanent_set_is_exact(self) -> None:
        """Given every cause, when checking permanence, then only listed ones are."""
        for cause in FailCause:
            assert is_permanent(cause) == (cause in EXPECTED_PERMANENT), cause.name

    def test_loggable_set_is_exact(self) -> None:
        """Given every cause, when checking loggability, then only listed ones are."""
        for cause in FailCause:
            assert is_event_loggable(cause) == (cause in EXPECTED_LOGGABLE), cause.name

    def test_retryable_is_complement_of_permanent(self) -> None:
        """Given every cause, when checking retryable, then it negates permanent."""
        for cause in FailCause:
            assert is_retryable(cause) is not is_permanent(cause)

    def test_protocol_errors_in_both_sets(self) -> None:
        assert is_permanent(FailCause.PROTOCOL_ERRORS)
        assert is_event_loggable(FailCause.PROTOCOL_ERRORS)

    def test_loggable_only_causes(self) -> None:
        """Given transient but noteworthy causes, then loggable and not permanent."""
        for cause in (FailCause.INSUFFICIENT_RESOURCES, FailCause.SIGNAL_LOST):
            assert is_event_loggable(cause)
            assert not is_permanent(cause)

    def test_permanent_only_causes(self) -> None:
        """Given causes that are futile but quiet, then permanent and not loggable."""
        for cause in (FailCause.MISSING_UNKNOWN_APN, FailCause.RADIO_NOT_AVAILABLE):
            assert is_permanent(cause)
            assert not is_event_loggable(cause)

    def test_unknown_in_neither_set(self) -> None:
        assert not is_permanent(FailCause.UNKNOWN)
        assert not is_event_loggable(FailCause.UNKNOWN)
        assert is_retryable(FailCause.UNKNOWN)


class TestRequiresRadioRestart:
    """Test requires_radio_restart() gating."""

    def test_regular_deactivation_with_flag(self) -> None:
        assert requires_radio_restart(FailCause.REGULAR_DEACTIVATION, True) is True

    def test_regular_deactivation_without_flag(self) -> None:
        assert requires_radio_restart(FailCause.REGULAR_DEACTIVATION, False) is False

    def test_other_causes_never_restart(self) -> None:
        """Given any other cause, when the flag is set, then no restart."""
        for cause in FailCause:
            if cause is FailCause.REGULAR_DEACTIVATION:
                continue
            assert requires_radio_restart(cause, True) is False, cause.name
            assert requires_radio_restart(cause, False) is False, cause.name


class TestClassify:
    """Test classify() reports for concrete wire codes."""

    def test_operator_barred(self) -> None:
        """Given 0x08, when classified, then permanent and loggable."""
        report = classify(0x08)

        assert report.cause is FailCause.OPERATOR_BARRED
        assert report.permanent is True
        assert report.event_loggable is True
        assert report.retryable is False

    def test_insufficient_resources(self) -> None:
        """Given 0x1A, when classified, then loggable but retryable."""
        report = classify(0x1A)

        assert report.cause is FailCause.INSUFFICIENT_RESOURCES
        assert report.permanent is False
        assert report.event_loggable is True

    def test_radio_power_off_ignores_restart_flag(self) -> None:
        """Given -5, when classified with either flag, then no restart."""
        for flag in (True, False):
            report = classify(-5, restart_on_regular_deactivation=flag)

            assert report.cause is FailCause.RADIO_POWER_OFF
            assert report.permanent is True
            assert report.restart_radio is False

    def test_undeclared_code(self) -> None:
        """Given 999999, when classified, then UNKNOWN, retryable, quiet."""
        report = classify(999999)

        assert report.cause is FailCause.UNKNOWN
        assert report.code == 999999
        assert report.permanent is False
        assert report.event_loggable is False
        assert report.recognized is False

    def test_declared_unknown_code_is_recognized(self) -> None:
        """Given 0x10000 itself, when classified, then it counts as recognized."""
        assert classify(0x10000).recognized is True

    def test_regular_deactivation_follows_flag(self) -> None:
        """Given 0x24, when classified, then restart follows the flag."""
        assert classify(0x24, restart_on_regular_deactivation=True).restart_radio
        assert not classify(0x24, restart_on_regular_deactivation=False).restart_radio
        assert not classify(0x24).restart_radio

    def test_to_dict(self) -> None:
        """Given a report, when serialized, then names replace enum members."""
        data = classify(-3).to_dict()

        assert data == {
            "code": -3,
            "cause": "SIGNAL_LOST",
            "category": "vendor",
            "permanent": False,
            "retryable": True,
            "event_loggable": True,
            "restart_radio": False,
        }

    def test_report_is_frozen(self) -> None:
        report = classify(0x08)

        with pytest.raises(AttributeError):
            report.permanent = False  # type: ignore[misc]
