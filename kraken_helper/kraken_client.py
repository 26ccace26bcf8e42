from __future__ import annotations
import base64, hashlib, hmac, logging, threading, time
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional
from urllib.parse import urlencode
import requests

from .errors import RemoteCallError
from .execution.types import OrderIntent, WithdrawalIntent

logger = logging.getLogger(__name__)

API_VERSION = "0"
PUBLIC_METHODS = frozenset({"Time", "Assets", "AssetPairs", "Ticker", "Depth", "OHLC", "Spread"})

_nonce_lock = threading.Lock()
_last_nonce = 0

def _nonce() -> int:
    # Kraken rejects a nonce that is not larger than the previous one for the key
    global _last_nonce
    with _nonce_lock:
        n = max(time.time_ns() // 1000, _last_nonce + 1)
        _last_nonce = n
        return n

def _b64_hmac_sha512(secret_b64: str, message: bytes) -> str:
    digest = hmac.new(base64.b64decode(secret_b64), message, hashlib.sha512).digest()
    return base64.b64encode(digest).decode()

def _to_decimal(method: str, value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise RemoteCallError(method, f"not a number: {value!r}")

@dataclass(frozen=True)
class KrakenCredentials:
    api_key: str
    api_secret: str

class KrakenClient:
    def __init__(self, creds: KrakenCredentials, base_url: str = "https://api.kraken.com", timeout: float = 10.0):
        self.creds = creds
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.s = requests.Session()

    def sign(self, path: str, nonce: int, postdata: str) -> str:
        # HMAC-SHA512 of (URI path + SHA256(nonce + POST data)), keyed by the decoded secret
        sha = hashlib.sha256((str(nonce) + postdata).encode()).digest()
        return _b64_hmac_sha512(self.creds.api_secret, path.encode() + sha)

    def request(
        self,
        method: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Call a Kraken API method and return its `result` object.

        Public methods are sent as GET, private ones as signed form POSTs.
        Any transport failure, HTTP error or non-empty `error` list raises
        RemoteCallError.
        """
        timeout = timeout or self.timeout
        params = dict(params or {})

        try:
            if method in PUBLIC_METHODS:
                path = f"/{API_VERSION}/public/{method}"
                resp = self.s.get(f"{self.base_url}{path}", params=params, timeout=timeout)
            else:
                path = f"/{API_VERSION}/private/{method}"
                params["nonce"] = _nonce()
                postdata = urlencode(params)
                headers = {
                    "API-Key": self.creds.api_key,
                    "API-Sign": self.sign(path, params["nonce"], postdata),
                    "Content-Type": "application/x-www-form-urlencoded; charset=utf-8",
                }
                resp = self.s.post(f"{self.base_url}{path}", data=postdata, headers=headers, timeout=timeout)
        except requests.RequestException as e:
            raise RemoteCallError(method, e) from e

        try:
            payload = resp.json()
        except ValueError:
            raise RemoteCallError(method, f"Non-JSON response (status={resp.status_code}): {resp.text[:500]}")

        if resp.status_code >= 400:
            raise RemoteCallError(method, f"HTTP {resp.status_code}: {payload}")

        errors = payload.get("error") or []
        if errors:
            raise RemoteCallError(method, ", ".join(str(e) for e in errors))

        logger.debug("Kraken %s ok", method)
        return payload.get("result", {})

    def get_ask_price(self, pair: str) -> Decimal:
        result = self.request("Ticker", {"pair": pair})
        if not result:
            raise RemoteCallError("Ticker", f"no ticker returned for {pair}")
        # Kraken answers with its own pair name (XBTEUR -> XXBTZEUR)
        ticker = result.get(pair) or next(iter(result.values()))
        try:
            ask = ticker["a"][0]
        except (KeyError, IndexError, TypeError):
            raise RemoteCallError("Ticker", f"unexpected ticker payload: {ticker}")
        return _to_decimal("Ticker", ask)

    def get_balances(self) -> Dict[str, Decimal]:
        result = self.request("Balance")
        return {asset: _to_decimal("Balance", amount) for asset, amount in result.items()}

    def add_limit_buy(self, order: OrderIntent, *, validate: bool = False) -> Dict[str, Any]:
        params = order.as_params()
        if validate:
            params["validate"] = "true"
        logger.info("AddOrder %s %s %s @ %s (validate=%s)", order.side, order.volume, order.pair, order.price, validate)
        return self.request("AddOrder", params)

    def withdraw(self, intent: WithdrawalIntent) -> Dict[str, Any]:
        logger.info("Withdraw %s %s to key %s", intent.amount, intent.asset, intent.key)
        return self.request("Withdraw", intent.as_params())
