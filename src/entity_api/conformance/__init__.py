"""
Conformance harness

Discovers every registered entity and runs each one through the same
create/get/delete lifecycle and negative-path checks.
"""

from entity_api.conformance.checks import (
    ConformanceChecker,
    ConformanceFailure,
    ConformanceReport,
    ConformanceSkipped,
    ConformanceState,
    expect_api_exception,
)
from entity_api.conformance.discovery import (
    DEFAULT_OVERRIDES,
    PROVIDER_MISMATCH_MESSAGE,
    ManualOverrides,
    describe_provider_mismatch,
    get_entities_hitech,
    get_entities_lotech,
    to_data_provider_array,
)
from entity_api.conformance.param_provider import CreationParameterProvider
