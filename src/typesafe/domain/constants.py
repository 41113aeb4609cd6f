"""
Typesafe Rule Constants: codes, symbols, wrapper entry points, file conventions.
"""

import re

TYPESAFE_PREFIX: str = "typesafe."

# Sentinel label used when no concrete value shape can be determined.
UNKNOWN_LABEL: str = "T"
ANONYMOUS_FUNCTION: str = "anonymous"

OPTIONAL_RULE_NAME: str = "optional-usage"
RESULT_RULE_NAME: str = "result-usage"

# Runtime entry points. Keys are the dotted callee names recognised at call sites.
OPTIONAL_MODULE: str = "optional"
RESULT_MODULE: str = "result"
WRAP: str = "wrap"
WRAP_ASYNC: str = "wrap_async"
FROM_NULLABLE: str = "from_nullable"
CAPTURE_ERROR: str = f"{RESULT_MODULE}.error"
MAKE_ERROR: str = "Exception"

OPTIONAL_THUNK_CALLEES: frozenset[str] = frozenset(
    {
        f"{OPTIONAL_MODULE}.{WRAP}",
        f"{OPTIONAL_MODULE}.{WRAP_ASYNC}",
        f"typesafe.{OPTIONAL_MODULE}.{WRAP}",
        f"typesafe.{OPTIONAL_MODULE}.{WRAP_ASYNC}",
    }
)
OPTIONAL_VALUE_CALLEES: frozenset[str] = frozenset(
    {
        f"{OPTIONAL_MODULE}.{FROM_NULLABLE}",
        f"typesafe.{OPTIONAL_MODULE}.{FROM_NULLABLE}",
    }
)
RESULT_THUNK_CALLEES: frozenset[str] = frozenset(
    {
        f"{RESULT_MODULE}.{WRAP}",
        f"{RESULT_MODULE}.{WRAP_ASYNC}",
        f"typesafe.{RESULT_MODULE}.{WRAP}",
        f"typesafe.{RESULT_MODULE}.{WRAP_ASYNC}",
    }
)

# Names generated by the guarded-block rewrite.
GUARDED_THUNK_NAME: str = "_guarded"
GUARDED_OUTCOME_NAME: str = "outcome"

# test_*.py, *_test.py, conftest.py, or anything under a test/ or tests/ directory.
TEST_FILE_PATTERN: re.Pattern[str] = re.compile(
    r"(?:^|/)test_[^/]*\.py$|_test\.py$|(?:^|/)conftest\.py$|(?:^|/)tests?/"
)

# Rule codes per (family, violation symbol). Registry keys are TYPESAFE_PREFIX + code.
OPTIONAL_CODES: dict[str, str] = {
    "no-nullable-return": "W9501",
    "no-nullable-union": "W9502",
    "use-wrap-sync": "W9503",
    "use-wrap-async": "W9504",
}
RESULT_CODES: dict[str, str] = {
    "no-throw-statement": "W9511",
    "no-try-catch-block": "W9512",
    "use-wrap-sync": "W9513",
    "use-wrap-async": "W9514",
}

VIOLATION_MESSAGES: dict[str, str] = {
    "no-nullable-return": (
        "Functions should return Optional[{label}] instead of {label} | None. "
        "Change the return type and return optional.some(value) or optional.none()."
    ),
    "no-nullable-union": (
        "Annotations admitting None should use Optional[{label}] instead of {label} | None. "
        "Change the annotation and initialize with optional.some(value) or optional.none()."
    ),
    "optional.use-wrap-sync": (
        "Calls that may return None should be wrapped with optional.wrap()."
    ),
    "optional.use-wrap-async": (
        "Async calls that may return None should be wrapped with optional.wrap_async()."
    ),
    "no-throw-statement": (
        "Use result.error() instead of raise for functional error handling."
    ),
    "no-try-catch-block": (
        "Use result.wrap() or result.wrap_async() instead of try/except blocks."
    ),
    "result.use-wrap-sync": (
        "Calls to functions that may raise should be wrapped with result.wrap()."
    ),
    "result.use-wrap-async": (
        "Calls to async functions that may raise should be wrapped with result.wrap_async()."
    ),
}
