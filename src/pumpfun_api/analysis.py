from typing import Any, Dict

# 20% daily volume to market cap counts as excellent liquidity
LIQUIDITY_RATIO_CAP = 0.2
# a 20% daily move counts as highly volatile
VOLATILITY_CHANGE_CAP = 20.0
VOLUME_BENCHMARK_SHARE = 0.1


def _number(coin: Dict[str, Any], key: str) -> float:
    value = coin.get(key)
    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


def liquidity_score(coin: Dict[str, Any]) -> int:
    market_cap = _number(coin, "market_cap")
    if market_cap <= 0:
        return 0
    ratio = _number(coin, "volume_24h") / market_cap
    return round(min(ratio / LIQUIDITY_RATIO_CAP, 1) * 100)


def volatility_score(coin: Dict[str, Any]) -> int:
    change = abs(_number(coin, "price_change_24h"))
    return round(min(change / VOLATILITY_CHANGE_CAP, 1) * 100)


def trend_indicator(coin: Dict[str, Any]) -> str:
    change = _number(coin, "price_change_24h")
    volume = _number(coin, "volume_24h")
    heavy_volume = volume > _number(coin, "market_cap") * VOLUME_BENCHMARK_SHARE

    if change > 5 and heavy_volume:
        return "Strongly Bullish"
    if change > 2 or (change > 0 and heavy_volume):
        return "Bullish"
    if change < -5 and heavy_volume:
        return "Strongly Bearish"
    if change < -2 or (change < 0 and heavy_volume):
        return "Bearish"
    return "Neutral"


def analyze_coin(mint: str, coin: Dict[str, Any]) -> Dict[str, Any]:
    """Summarize a coin's market figures into liquidity, volatility and trend.

    Missing figures count as zero; this leniency applies to analysis only.
    """
    return {
        "mintAddress": mint,
        "totalSupply": coin.get("total_supply"),
        "priceChange24h": coin.get("price_change_24h"),
        "volume24h": coin.get("volume_24h"),
        "marketCap": coin.get("market_cap"),
        "liquidityScore": liquidity_score(coin),
        "volatilityScore": volatility_score(coin),
        "trendIndicator": trend_indicator(coin),
    }
