"""Shared fixtures: Hyperliquid info payloads."""

import pytest


# ==============================================================================
# Hyperliquid payloads
# ==============================================================================

@pytest.fixture
def perp_payload():
    return [
        {"universe": [
            {"name": "BTC", "szDecimals": 5, "maxLeverage": 50},
            {"name": "ETH", "szDecimals": 4, "maxLeverage": 25, "onlyIsolated": False},
        ]},
        [
            {
                "markPx": "65000.5",
                "midPx": "65000.0",
                "oraclePx": "64990.1",
                "prevDayPx": "64000.0",
                "dayNtlVlm": "1000000.0",
                "dayBaseVlm": "15.3",
                "openInterest": "1234.5",
                "funding": "0.0000125",
                "premium": "0.0001",
                "impactPxs": ["64999.0", "65001.0"],
            },
            {
                "markPx": "3100.2",
                "prevDayPx": "3000.0",
                "dayNtlVlm": "500000.0",
                "openInterest": "9876.0",
                "funding": "-0.00001",
            },
        ],
    ]


@pytest.fixture
def spot_payload():
    return [
        {
            "tokens": [
                {"name": "USDC", "szDecimals": 8, "weiDecimals": 8, "index": 0},
                {"name": "PURR", "szDecimals": 0, "weiDecimals": 5, "index": 1, "fullName": "Purr"},
                {"name": "HYPE", "szDecimals": 2, "weiDecimals": 8, "index": 150},
                {"name": "LONELY", "szDecimals": 0, "weiDecimals": 5},
            ],
            "universe": [
                {"name": "PURR/USDC", "tokens": [1, 0], "index": 0, "isCanonical": True},
                {"name": "@107", "tokens": [150, 0], "index": 107, "isCanonical": False},
            ],
        },
        [
            {
                "coin": "PURR/USDC",
                "markPx": "0.2",
                "midPx": "0.21",
                "prevDayPx": "0.19",
                "dayNtlVlm": "5000.0",
                "dayBaseVlm": "25000.0",
                "circulatingSupply": "600000000",
                "totalSupply": "1000000000",
            },
            {
                "coin": "@107",
                "markPx": "24.5",
                "prevDayPx": "23.0",
                "dayNtlVlm": "9000000.0",
            },
        ],
    ]
