"""Uniform result envelope returned by every public service operation."""

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, ParamSpec, TypeVar

from pydantic import BaseModel

from readcircle.domain.errors import ExpectedError

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")


class ServiceResult(BaseModel, Generic[T]):
    """
    ``succeeded`` is the only field callers should branch on.

    ``error_message`` is human-readable and informational; it is not a
    stable code.
    """

    succeeded: bool
    result: T | None = None
    error_message: str | None = None

    @classmethod
    def success(cls, result: T) -> "ServiceResult[T]":
        return cls(succeeded=True, result=result)

    @classmethod
    def failure(cls, message: str) -> "ServiceResult[T]":
        return cls(succeeded=False, error_message=message)


def enveloped(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[ServiceResult[T]]]:
    """Wrap a coroutine's return value in a ServiceResult.

    ``ExpectedError`` becomes a failed result; any other exception propagates.
    """

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> ServiceResult[T]:
        try:
            value = await func(*args, **kwargs)
        except ExpectedError as exc:
            logger.info("%s failed: %s", func.__qualname__, exc)
            return ServiceResult.failure(str(exc))
        return ServiceResult.success(value)

    return wrapper
