"""
Bounded-timeout HTTP probes used for advisory health checks.
"""
from typing import Callable, Optional
from urllib.request import urlopen, Request
from http.client import HTTPException
from urllib.error import URLError

from tenacity import Retrying, stop_after_attempt, wait_exponential, retry_if_result


def probe(url: str, timeout: float = 5.0, opener: Optional[Callable] = None) -> bool:
    """
    Issues a single GET request.

    :param url: The URL to request.
    :param timeout: Seconds allowed for the request.
    :param opener: Callable with the ``urlopen(request, timeout=...)`` signature.
    :return: True on a 2xx response, False on any other status or error.
    """
    opener = opener or urlopen
    try:
        with opener(Request(url), timeout=timeout) as response:
            return 200 <= response.status < 300
    except (URLError, HTTPException, OSError, ValueError):
        return False


def probe_with_retries(url: str,
                       timeout: float = 5.0,
                       attempts: int = 3,
                       backoff: float = 1.0,
                       backoff_max: float = 8.0,
                       opener: Optional[Callable] = None) -> bool:
    """
    Probes a URL until it answers with 2xx or the attempts are used up.

    :return: The outcome of the last attempt.
    """
    retrying = Retrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=backoff, max=backoff_max),
        retry=retry_if_result(lambda ok: not ok),
        retry_error_callback=lambda state: state.outcome.result(),
    )
    return retrying(probe, url, timeout=timeout, opener=opener)
