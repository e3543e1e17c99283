from __future__ import annotations

from decimal import Decimal, InvalidOperation

from portfolio_api.domain.entities.chain import KnownToken
from portfolio_api.infrastructure.clients.json_rpc import JsonRpcClient, JsonRpcError


LAMPORTS_PER_SOL = Decimal(10) ** 9


def _parse_decimal(value, *, field: str) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise JsonRpcError(f"Unexpected {field} value: {value!r}")
    try:
        parsed = Decimal(str(value))
    except InvalidOperation as exc:
        raise JsonRpcError(f"Unexpected {field} value: {value!r}") from exc
    if not parsed.is_finite():
        raise JsonRpcError(f"Unexpected {field} value: {value!r}")
    return parsed


def _token_amount(account: dict) -> Decimal:
    try:
        amount = account["account"]["data"]["parsed"]["info"]["tokenAmount"]
    except (KeyError, TypeError) as exc:
        raise JsonRpcError("Unexpected token account layout.") from exc
    if not isinstance(amount, dict):
        raise JsonRpcError(f"Unexpected tokenAmount value: {amount!r}")

    if amount.get("uiAmountString") is not None:
        return _parse_decimal(amount["uiAmountString"], field="uiAmountString")
    if amount.get("uiAmount") is not None:
        return _parse_decimal(amount["uiAmount"], field="uiAmount")
    raw = amount.get("amount")
    decimals = amount.get("decimals")
    if raw is None or decimals is None:
        return Decimal("0")
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise JsonRpcError(f"Unexpected decimals value: {decimals!r}")
    return _parse_decimal(raw, field="amount") / (Decimal(10) ** decimals)


class SolanaRpcClient:
    def __init__(self, rpc: JsonRpcClient):
        self._rpc = rpc

    def get_native_balance(self, *, address: str) -> Decimal:
        result = self._rpc.call("getBalance", [address])
        if not isinstance(result, dict) or "value" not in result:
            raise JsonRpcError("getBalance: response has no value.")
        lamports = result["value"]
        if isinstance(lamports, bool) or not isinstance(lamports, (int, str)):
            raise JsonRpcError(f"getBalance: unexpected value {lamports!r}.")
        return _parse_decimal(lamports, field="getBalance") / LAMPORTS_PER_SOL

    def get_token_balance(self, *, address: str, token: KnownToken) -> Decimal:
        result = self._rpc.call(
            "getTokenAccountsByOwner",
            [address, {"mint": token.address}, {"encoding": "jsonParsed"}],
        )
        accounts = result.get("value") if isinstance(result, dict) else None
        if not accounts:
            return Decimal("0")
        if not isinstance(accounts, list):
            raise JsonRpcError("getTokenAccountsByOwner: value is not a list.")
        return sum((_token_amount(account) for account in accounts), Decimal("0"))

    def is_healthy(self) -> bool:
        return self._rpc.call("getHealth", []) == "ok"
