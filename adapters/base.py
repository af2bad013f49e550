"""
Shared plumbing for adapters wrapping blocking storage SDKs.
"""

import asyncio
from typing import Any, Callable, Optional

from core.logger import logger
from domain.exceptions import BackendUnavailable, MediabaseError
from ports.storage import StoragePort


class BlockingStorageAdapter(StoragePort):
    """
    Base for adapters whose SDK is synchronous.

    Each call runs in the default executor and is bounded by ``timeout`` so a
    cancelled or slow request never waits on the backend indefinitely.
    """

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    async def _run(
        self,
        operation: str,
        call: Callable[[], Any],
        bucket_name: Optional[str] = None,
        object_key: Optional[str] = None,
    ) -> Any:
        """
        Run a blocking SDK call off the event loop.

        Args:
            operation: Operation name, carried into errors and logs
            call: Zero-argument callable performing the SDK call
            bucket_name: Bucket the call targets, for error context
            object_key: Object key the call targets, for error context

        Raises:
            BackendUnavailable: on timeout or any SDK failure
        """
        loop = asyncio.get_running_loop()

        try:
            return await asyncio.wait_for(
                loop.run_in_executor(None, call), timeout=self.timeout
            )
        except MediabaseError:
            raise
        except asyncio.TimeoutError as e:
            logger.error(
                f"Storage {operation} timed out after {self.timeout}s: "
                f"bucket={bucket_name}, key={object_key}"
            )
            raise BackendUnavailable(
                f"Storage {operation} timed out after {self.timeout}s",
                operation=operation,
                bucket=bucket_name,
                key=object_key,
            ) from e
        except Exception as e:
            logger.error(
                f"Storage {operation} failed: bucket={bucket_name}, key={object_key}: {e}"
            )
            raise BackendUnavailable(
                f"Storage {operation} failed: {e}",
                operation=operation,
                bucket=bucket_name,
                key=object_key,
            ) from e
