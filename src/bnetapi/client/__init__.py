"""Request execution for bnetapi.

Provides :class:`RequestExecutor`, which resolves URLs and namespaces,
applies the cache-eligibility policy, attaches bearer tokens, dispatches
GET requests and decodes responses, and :func:`decode_payload`, which
turns raw bodies into the configured response format.

Example::

    from bnetapi.client import RequestExecutor
    from bnetapi.config import load_config

    executor = RequestExecutor(load_config(), region="us")
    index = executor.execute(
        f"{executor.base_url('game_data')}/realm/index", namespace="dynamic"
    )
"""

from bnetapi.client.executor import RequestExecutor, http_date
from bnetapi.client.response import decode_payload

__all__ = ["RequestExecutor", "decode_payload", "http_date"]
