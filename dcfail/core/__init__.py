"""
Core of dcfail.

Components
----------
**Fail causes (fail_cause.py)**
    The FailCause enumeration, its per-cause policy table, the code lookup
    and the classification predicates. Pure and total.

**Configuration (config.py)**
    Nested dataclasses loaded from YAML with environment overrides. Supplies
    the restart-on-regular-deactivation policy to callers.

**Logging (logging.py)**
    Structured logging with context binding, plus FailCauseLogger for
    recording classified failures.

**Exceptions (exceptions.py)**
    DcFailError hierarchy for the configuration and input layers.
"""
