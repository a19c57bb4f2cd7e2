"""
Progress sink port.

A progress sink receives human-readable status lines during a scan.
It may be a plain function or a coroutine function. Delivery is best
effort: the scan logs and ignores sink failures.
"""

from typing import Awaitable, Callable, Union

ProgressSink = Callable[[str], Union[Awaitable[None], None]]
