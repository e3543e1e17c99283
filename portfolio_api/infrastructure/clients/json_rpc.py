from __future__ import annotations

from dataclasses import dataclass
from itertools import count
import logging
import time
from typing import Any

import httpx


logger = logging.getLogger(__name__)


class JsonRpcError(RuntimeError):
    pass


@dataclass(frozen=True)
class JsonRpcClientSettings:
    rpc_url: str
    timeout_seconds: float
    max_retries: int = 1


class JsonRpcClient:
    """Minimal JSON-RPC 2.0 over HTTP POST, shared by the EVM and Solana clients."""

    def __init__(
        self,
        settings: JsonRpcClientSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport
        self._ids = count(1)

    @property
    def rpc_url(self) -> str:
        return self._settings.rpc_url

    def call(self, method: str, params: list | None = None) -> Any:
        if not self._settings.rpc_url:
            raise JsonRpcError(f"RPC URL is not configured for {method}.")

        attempts = max(1, self._settings.max_retries)
        delay = 0.25
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            body = {
                "jsonrpc": "2.0",
                "id": next(self._ids),
                "method": method,
                "params": params or [],
            }
            try:
                with httpx.Client(
                    timeout=self._settings.timeout_seconds,
                    transport=self._transport,
                ) as client:
                    response = client.post(self._settings.rpc_url, json=body)
                    response.raise_for_status()
                    payload = response.json()

                if not isinstance(payload, dict):
                    raise JsonRpcError(f"Malformed JSON-RPC response for {method}.")
                error = payload.get("error")
                if error:
                    message = error.get("message", error) if isinstance(error, dict) else error
                    raise JsonRpcError(f"{method}: {message}")
                if "result" not in payload:
                    raise JsonRpcError(f"{method}: response has no result.")
                return payload["result"]
            except (httpx.HTTPError, JsonRpcError, ValueError) as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                logger.warning(
                    "json_rpc: retry method=%s attempt=%s/%s error=%s",
                    method,
                    attempt,
                    attempts,
                    exc,
                )
                time.sleep(delay)
                delay *= 2

        if isinstance(last_exc, JsonRpcError):
            raise last_exc
        raise JsonRpcError(f"{method} failed: {last_exc}") from last_exc
