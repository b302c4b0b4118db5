"""
Service wrapper extending flexitest.service.ProcService with standardized methods.
"""

import logging
from typing import Any

import flexitest

from common.wait import wait_until


class RpcService(flexitest.service.ProcService):
    """
    Extends ProcService with RPC capabilities and standardized methods for test services.

    Subclasses must implement create_rpc() and _rpc_health_check().
    """

    def __init__(
        self,
        props: dict[str, Any],
        cmd: list[str],
        stdout: str | None = None,
        name: str | None = None,
    ):
        """
        Initialize service wrapper.

        Args:
            props: Service properties (ports, URLs, etc.)
            cmd: Command and arguments to execute
            stdout: Path to log file for stdout/stderr
            name: Service name for logging
        """
        super().__init__(props, cmd, stdout)
        self._name = name or cmd[0]
        self._logger = logging.getLogger(f"service.{self._name}")

    @property
    def name(self) -> str:
        return self._name

    def create_rpc(self):
        raise NotImplementedError("Subclass must implement create_rpc()")

    def _rpc_health_check(self, rpc: Any) -> None:
        """
        Perform RPC call to verify service health. Raises if the service is unhealthy.
        """
        raise NotImplementedError("Subclass must implement _rpc_health_check()")

    def check_health(self) -> bool:
        if not self.check_status():
            return False

        try:
            rpc = self.create_rpc()
            self._rpc_health_check(rpc)
            return True
        except Exception:
            return False

    def wait_for_ready(self, timeout: int = 30, interval: float = 0.5) -> None:
        """
        Wait until service is healthy and ready.

        Raises:
            AssertionError: If service doesn't become ready within timeout
        """
        wait_until(
            self.check_health,
            error_with=f"Service '{self._name}' not ready",
            timeout=timeout,
            step=interval,
        )
