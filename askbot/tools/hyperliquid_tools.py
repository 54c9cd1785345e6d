"""
Hyperliquid Tools
=================

Two tools backed by the same MarketDataResolver:

- search_hyperliquid_perp: perpetual futures (majors like BTC, ETH, SOL)
- search_hyperliquid_spot: spot tokens native to Hyperliquid (PURR, HYPE, ...)

Perp symbols are matched exactly as given; spot symbols are uppercased
before the lookup.
"""

from pydantic import BaseModel, Field

from askbot.tools import Tool
from askbot.tools.market_data import MarketDataResolver, MarketKind


class PerpSearchArgs(BaseModel):
    symbol: str = Field(
        ...,
        min_length=1,
        description="Trading symbol to search for (e.g., 'BTC', 'ETH')"
    )


class SpotSearchArgs(BaseModel):
    symbol: str = Field(
        ...,
        min_length=1,
        description="Token symbol to search for (e.g., 'PURR', 'HYPE')"
    )


class HyperliquidPerpSearchTool(Tool[PerpSearchArgs]):
    name = "search_hyperliquid_perp"
    description = (
        "Search for perpetual futures prices and data on the Hyperliquid exchange. "
        "Most major coins trade here."
    )
    args_model = PerpSearchArgs

    def __init__(self, resolver: MarketDataResolver):
        self.resolver = resolver

    async def invoke(self, args: PerpSearchArgs) -> str:
        return await self.resolver.lookup(MarketKind.PERP, args.symbol)


class HyperliquidSpotSearchTool(Tool[SpotSearchArgs]):
    name = "search_hyperliquid_spot"
    description = (
        "Search for spot prices on the Hyperliquid exchange. "
        "Only tokens native to the Hyperliquid platform are listed here."
    )
    args_model = SpotSearchArgs

    def __init__(self, resolver: MarketDataResolver):
        self.resolver = resolver

    async def invoke(self, args: SpotSearchArgs) -> str:
        return await self.resolver.lookup(MarketKind.SPOT, args.symbol)
