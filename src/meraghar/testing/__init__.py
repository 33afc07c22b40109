"""Public test-support utilities for meraghar.

Re-exports test doubles and factories so that test suites can import
everything from ``meraghar.testing``:

- :class:`MockHttpClient` — scriptable HTTP double that records requests.
- :class:`NullHttpClient` — always-200 adapter without network I/O.
- :class:`FakeClock` — deterministic clock for latency assertions.
- :func:`make_settings` — ``Settings`` factory that ignores the environment.
"""

from meraghar._http import MockHttpClient, NullHttpClient
from meraghar.testing._clock import FakeClock
from meraghar.testing._settings import make_settings

__all__ = [
    "FakeClock",
    "MockHttpClient",
    "NullHttpClient",
    "make_settings",
]
