"""Request handlers written against the cache layer's emission callback.

Handlers receive a RequestDescriptor and an ``emit(status_code, body)``
callback, call the callback exactly once, and know nothing about caching.
"""

import logging
import re

from readthrough.api.validation import ErrorResponse, UsersResponse
from readthrough.cache.interceptor import Emit, Handler, RequestDescriptor
from readthrough.core.exceptions import UpstreamError
from readthrough.upstream.randomuser import MAX_RESULTS, RandomUserClient

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"\d+")


def parse_amount(raw: str) -> int | None:
    """Parse the ``amount`` query parameter.

    Returns:
        The amount, or None if it is not an integer in 1..MAX_RESULTS
    """
    if not _DIGITS.fullmatch(raw):
        return None
    amount = int(raw)
    if not 1 <= amount <= MAX_RESULTS:
        return None
    return amount


def make_users_handler(provider: RandomUserClient) -> Handler:
    """Build the handler for GET /api/v1/users.

    Behavior:
        - no ``amount``: one user, ``{"amount": 1, "users": [...]}``
        - valid ``amount``: that many users
        - invalid ``amount``: 400 Bad request
        - upstream failure: 500
    """

    async def users_handler(request: RequestDescriptor, emit: Emit) -> None:
        raw_amount = request.query_params.get("amount")

        if raw_amount is None:
            amount = 1
        else:
            parsed = parse_amount(raw_amount)
            if parsed is None:
                logger.info(f"Rejected amount={raw_amount!r}")
                await emit(400, ErrorResponse(message="Bad request").model_dump())
                return
            amount = parsed

        try:
            users = await provider.fetch_users(amount)
        except UpstreamError as e:
            logger.error(f"Fetching {amount} users failed: {e}")
            await emit(500, ErrorResponse(message="Something is wrong!").model_dump())
            return

        await emit(200, UsersResponse(amount=amount, users=users).model_dump())

    return users_handler
