"""
Prompt template for the stock analysis request.
Keeping the prompt in the application layer keeps it close to the business rules
it encodes, while remaining independent from any infrastructure SDK.
"""

from typing import Optional, Sequence

from src.domain.entities.stock_price import CompanyInfo

PROMPT_PRICE_WINDOW = 10

ANALYSIS_PROMPT = """Analyze the stock {symbol} for investment purposes. Here's the data:

Current Price: ${current_price}
30-Day Price Change: {price_change:.2f}%
30-Day Volatility: {volatility:.2f}%
Company: {company_name}
Sector: {sector}
Market Cap: {market_cap}

Recent price trend (last 10 days): {recent_prices}

Based on this data, provide:
1. Investment recommendation (BUY/HOLD/SELL)
2. Confidence level (0-100)
3. Risk assessment (LOW/MEDIUM/HIGH)
4. 3-5 key points for investors
5. Brief analysis (2-3 paragraphs)

Format your response as JSON with keys: recommendation, confidence, riskLevel, keyPoints (array), analysis (string).
Do NOT include any personal data or make guarantees about future performance. This is for educational purposes only."""


def build_analysis_prompt(
    symbol: str,
    current_price: float,
    price_change_30d: float,
    volatility: float,
    recent_prices: Sequence[float],
    company: Optional[CompanyInfo] = None,
) -> str:
    company = company or CompanyInfo()
    return ANALYSIS_PROMPT.format(
        symbol=symbol,
        current_price=current_price,
        price_change=price_change_30d,
        volatility=volatility,
        company_name=company.name or "Unknown",
        sector=company.sector or "Unknown",
        market_cap=company.market_capitalization or "Unknown",
        recent_prices=", ".join(f"{p:.2f}" for p in recent_prices[-PROMPT_PRICE_WINDOW:]),
    )
