"""Retry policy for remote model invocation.

Retry strategy:
    - Fixed attempt budget (`max_attempts`, default 3).
    - Exponential backoff: `base_delay * 2 ** (attempt - 1)` seconds, giving
      1s and 2s between three attempts with the default base.
    - Classification is a single predicate, `is_transient`, so the matching
      rule can change without touching the service loop.

Classification rules (first match wins):
    1. `ModelRefusal` is never transient.
    2. `TransientModelError` is always transient.
    3. An error carrying a numeric `code` attribute of 500 is transient.
    4. Error text containing `"code":500` or the `INTERNAL` status marker is
       transient.

Determinism:
    Pure functions of their inputs; no clocks or randomness.
"""

import re
from dataclasses import dataclass

from decadegen.image.errors import ModelRefusal, TransientModelError

TRANSIENT_STATUS_CODE = 500
_CODE_500_PATTERN = re.compile(r'"code"\s*:\s*500\b')
_INTERNAL_MARKER = "INTERNAL"


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget and backoff base (seconds) for one invocation."""

    max_attempts: int = 3
    base_delay: float = 1.0

    def backoff(self, attempt: int) -> float:
        """Delay to wait after a transient failure on 1-based `attempt`."""
        return self.base_delay * (2 ** (attempt - 1))


def is_transient(error: BaseException) -> bool:
    """Return whether `error` is a transient server-side model failure."""
    if isinstance(error, ModelRefusal):
        return False
    if isinstance(error, TransientModelError):
        return True

    code = getattr(error, "code", None)
    if isinstance(code, int) and code == TRANSIENT_STATUS_CODE:
        return True

    message = str(error)
    return bool(_CODE_500_PATTERN.search(message)) or _INTERNAL_MARKER in message
