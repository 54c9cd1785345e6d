"""
Hyperliquid Market Data
=======================

Looks up live prices for a symbol on Hyperliquid's spot or perpetual
futures markets.

The info endpoint answers both request types with the same shape, a
two-element JSON array:

    POST https://api.hyperliquid.xyz/info  {"type": "metaAndAssetCtxs"}
    → [ {"universe": [PerpMarket, ...]}, [PerpAssetContext, ...] ]

    POST https://api.hyperliquid.xyz/info  {"type": "spotMetaAndAssetCtxs"}
    → [ {"tokens": [SpotToken, ...], "universe": [SpotMarket, ...]},
        [SpotAssetContext, ...] ]

Joining metadata to contexts:
- Perp: the i-th context belongs to the i-th market in ``universe``. The
  two lists must be the same length; a mismatch means the payload is
  corrupt and every lookup fails with InvalidResponse.
- Spot: symbol → token (by name, uppercased) → market whose base token is
  that token ("PURR/USDC" has base "PURR") → context whose ``coin`` is the
  market name. The market and context lists must also be the same length.

Every call is a fresh upstream read; nothing is cached between calls.
"""

import enum
import json
from dataclasses import dataclass

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from askbot.errors import (
    InvalidResponse,
    SymbolNotFound,
    TransportError,
    UpstreamStatusError,
)
from askbot.utils.logger import Logger

logger = Logger("MarketData")

HYPERLIQUID_INFO_URL = "https://api.hyperliquid.xyz/info"


class MarketKind(str, enum.Enum):
    """Market type; the value is the info request type."""
    SPOT = "spotMetaAndAssetCtxs"
    PERP = "metaAndAssetCtxs"


# ==============================================================================
# Payload models
# ==============================================================================
# Hyperliquid sends prices and sizes as decimal strings. Numbers are
# accepted too and kept as strings so nothing is lost to float rounding.

class _Payload(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )


class SpotToken(_Payload):
    name: str
    sz_decimals: int | None = Field(None, alias="szDecimals")
    wei_decimals: int | None = Field(None, alias="weiDecimals")
    index: int | None = None
    token_id: str | None = Field(None, alias="tokenId")
    is_canonical: bool | None = Field(None, alias="isCanonical")
    evm_contract: dict | str | None = Field(None, alias="evmContract")
    full_name: str | None = Field(None, alias="fullName")


class SpotMarket(_Payload):
    name: str
    tokens: list[int] = Field(default_factory=list)
    index: int | None = None
    is_canonical: bool | None = Field(None, alias="isCanonical")

    @property
    def base_name(self) -> str:
        """Text before the "/" of a composite name ("PURR/USDC" → "PURR")."""
        return self.name.split("/", 1)[0]


class SpotMeta(_Payload):
    tokens: list[SpotToken]
    universe: list[SpotMarket]


class SpotAssetContext(_Payload):
    coin: str
    mark_px: str = Field(alias="markPx")
    mid_px: str | None = Field(None, alias="midPx")
    prev_day_px: str = Field(alias="prevDayPx")
    day_ntl_vlm: str = Field(alias="dayNtlVlm")
    day_base_vlm: str | None = Field(None, alias="dayBaseVlm")
    circulating_supply: str | None = Field(None, alias="circulatingSupply")
    total_supply: str | None = Field(None, alias="totalSupply")


class PerpMarket(_Payload):
    name: str
    sz_decimals: int | None = Field(None, alias="szDecimals")
    max_leverage: int | None = Field(None, alias="maxLeverage")
    only_isolated: bool | None = Field(None, alias="onlyIsolated")


class PerpMeta(_Payload):
    universe: list[PerpMarket]


class PerpAssetContext(_Payload):
    mark_px: str = Field(alias="markPx")
    mid_px: str | None = Field(None, alias="midPx")
    oracle_px: str | None = Field(None, alias="oraclePx")
    prev_day_px: str = Field(alias="prevDayPx")
    day_ntl_vlm: str = Field(alias="dayNtlVlm")
    day_base_vlm: str | None = Field(None, alias="dayBaseVlm")
    open_interest: str | None = Field(None, alias="openInterest")
    funding: str | None = None
    premium: str | None = None
    impact_pxs: list[str] | None = Field(None, alias="impactPxs")


# ==============================================================================
# Resolved record
# ==============================================================================

@dataclass(frozen=True)
class ResolvedMarketRecord:
    """
    A symbol joined with its live context.

    Attributes:
        kind: Spot or perp
        name: Display name (token name for spot, market name for perp)
        market: The market metadata entry
        context: The asset context for that market
        token: The spot token (None for perp)
    """
    kind: MarketKind
    name: str
    market: SpotMarket | PerpMarket
    context: SpotAssetContext | PerpAssetContext
    token: SpotToken | None = None

    def format(self) -> str:
        """
        Render the record as text for the model.

        Field order is fixed; optional fields only appear when the upstream
        sent them, so the same data always produces the same text.
        """
        ctx = self.context
        title = "Perpetual Futures" if self.kind is MarketKind.PERP else "Spot"

        lines = [f"**{self.name}** {title} Information:", ""]
        lines.append(f"Mark Price: ${ctx.mark_px}")
        if ctx.mid_px is not None:
            lines.append(f"Mid Price: ${ctx.mid_px}")
        lines.append(f"Previous Day Price: ${ctx.prev_day_px}")
        lines.append(f"24h Volume: ${ctx.day_ntl_vlm}")
        if ctx.day_base_vlm is not None:
            lines.append(f"24h Base Volume: {ctx.day_base_vlm}")

        if self.kind is MarketKind.PERP:
            lines.extend(self._perp_lines())
        else:
            lines.extend(self._spot_lines())

        return "\n".join(lines) + "\n"

    def _perp_lines(self) -> list[str]:
        ctx = self.context
        market = self.market
        lines = []
        if ctx.oracle_px is not None:
            lines.append(f"Oracle Price: ${ctx.oracle_px}")
        if ctx.open_interest is not None:
            lines.append(f"Open Interest: {ctx.open_interest}")
        if ctx.funding is not None:
            lines.append(f"Current Funding Rate: {ctx.funding}")
        if ctx.premium is not None:
            lines.append(f"Premium: {ctx.premium}")
        if ctx.impact_pxs is not None and len(ctx.impact_pxs) >= 2:
            lines.append(
                f"Impact Prices (Buy/Sell): ${ctx.impact_pxs[0]} / ${ctx.impact_pxs[1]}"
            )
        if market.max_leverage is not None:
            lines.append(f"Max Leverage: {market.max_leverage}x")
        if market.sz_decimals is not None:
            lines.append(f"Size Decimals: {market.sz_decimals}")
        if market.only_isolated is not None:
            lines.append(f"Isolated Only: {str(market.only_isolated).lower()}")
        return lines

    def _spot_lines(self) -> list[str]:
        ctx = self.context
        lines = []
        if ctx.circulating_supply is not None:
            lines.append(f"Circulating Supply: {ctx.circulating_supply}")
        if ctx.total_supply is not None:
            lines.append(f"Total Supply: {ctx.total_supply}")
        if self.token is not None and self.token.full_name:
            lines.append(f"Full Name: {self.token.full_name}")
        return lines


# ==============================================================================
# Resolver
# ==============================================================================

class MarketDataResolver:
    """
    Resolves a symbol to its market metadata and live context.

    The resolver keeps no per-request state, so one instance is shared by
    every tool and every concurrent request.

    Example:
        resolver = MarketDataResolver()

        record = await resolver.resolve(MarketKind.PERP, "BTC")
        print(record.context.mark_px)

        text = await resolver.lookup(MarketKind.SPOT, "purr")
    """

    def __init__(
        self,
        api_url: str = HYPERLIQUID_INFO_URL,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None
    ):
        """
        Args:
            api_url: Hyperliquid info endpoint
            timeout: Per-request timeout in seconds
            client: Shared HTTP client; a short-lived one is used per call if None
        """
        self.api_url = api_url
        self.timeout = timeout
        self._client = client

    async def lookup(self, kind: MarketKind, symbol: str) -> str:
        """Resolve a symbol and return its formatted text."""
        record = await self.resolve(kind, symbol)
        return record.format()

    async def resolve(self, kind: MarketKind, symbol: str) -> ResolvedMarketRecord:
        """
        Fetch metadata and contexts, then join them for the symbol.

        Raises:
            TransportError: The request could not be sent
            UpstreamStatusError: The endpoint answered with a non-2xx status
            InvalidResponse: The payload was not [metadata, contexts]
            SymbolNotFound: The symbol is not listed
        """
        logger.debug(f"Resolving {kind.name.lower()} symbol {symbol!r}")

        metadata, contexts = await self._fetch_pair(kind)

        if kind is MarketKind.PERP:
            return self._resolve_perp(metadata, contexts, symbol)
        return self._resolve_spot(metadata, contexts, symbol)

    async def _fetch_pair(self, kind: MarketKind) -> tuple[object, object]:
        payload = await self._post({"type": kind.value})

        if not isinstance(payload, list) or len(payload) != 2:
            raise InvalidResponse("expected a [metadata, contexts] pair")

        return payload[0], payload[1]

    async def _post(self, body: dict) -> object:
        try:
            if self._client is not None:
                response = await self._client.post(self.api_url, json=body, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.api_url, json=body)
        except httpx.HTTPError as e:
            logger.warning(f"Hyperliquid request failed: {e}")
            raise TransportError(str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.warning(f"Hyperliquid returned {response.status_code}")
            raise UpstreamStatusError(response.status_code, response.text)

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidResponse("body is not valid JSON") from e

    def _resolve_perp(
        self,
        raw_meta: object,
        raw_contexts: object,
        symbol: str
    ) -> ResolvedMarketRecord:
        meta = _decode(PerpMeta, raw_meta, "perp metadata")
        contexts = _decode_list(PerpAssetContext, raw_contexts, "perp contexts")

        if len(meta.universe) != len(contexts):
            raise InvalidResponse(
                f"{len(meta.universe)} perp markets but {len(contexts)} contexts"
            )

        # First listing wins if the upstream ever repeats a name
        by_name: dict[str, tuple[PerpMarket, PerpAssetContext]] = {}
        for market, context in zip(meta.universe, contexts):
            by_name.setdefault(market.name, (market, context))

        if symbol not in by_name:
            raise SymbolNotFound(symbol)

        market, context = by_name[symbol]
        return ResolvedMarketRecord(
            kind=MarketKind.PERP,
            name=market.name,
            market=market,
            context=context
        )

    def _resolve_spot(
        self,
        raw_meta: object,
        raw_contexts: object,
        symbol: str
    ) -> ResolvedMarketRecord:
        meta = _decode(SpotMeta, raw_meta, "spot metadata")
        contexts = _decode_list(SpotAssetContext, raw_contexts, "spot contexts")

        if len(meta.universe) != len(contexts):
            raise InvalidResponse(
                f"{len(meta.universe)} spot markets but {len(contexts)} contexts"
            )

        wanted = symbol.upper()
        token = next((t for t in meta.tokens if t.name == wanted), None)
        if token is None:
            raise SymbolNotFound(symbol)

        market = next((m for m in meta.universe if m.base_name == token.name), None)
        if market is None:
            raise SymbolNotFound(symbol)

        context = next((c for c in contexts if c.coin == market.name), None)
        if context is None:
            raise SymbolNotFound(symbol)

        return ResolvedMarketRecord(
            kind=MarketKind.SPOT,
            name=token.name,
            market=market,
            context=context,
            token=token
        )


def _decode(model: type[BaseModel], raw: object, what: str):
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise InvalidResponse(f"could not decode {what}: {e.error_count()} errors") from e


def _decode_list(model: type[BaseModel], raw: object, what: str) -> list:
    if not isinstance(raw, list):
        raise InvalidResponse(f"{what} is not a list")
    return [_decode(model, item, what) for item in raw]
