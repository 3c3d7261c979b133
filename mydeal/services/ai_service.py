import asyncio
import aiohttp
import json
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from mydeal.schemas.ai import BidSuggestion, SpecificationResult
from mydeal.models.requests import PriceRange
from mydeal.core.logging_config import logger
from mydeal.core.config import settings

ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING", "description": "A concise, professional title for the product request."},
        "category": {"type": "STRING", "description": "The general category of the item."},
        "specs": {
            "type": "OBJECT",
            "description": "Key technical specifications extracted or inferred from the user input.",
            "properties": {
                "brand": {"type": "STRING"},
                "modelYear": {"type": "STRING"},
                "capacity": {"type": "STRING"},
                "features": {"type": "STRING"},
                "condition": {"type": "STRING", "description": "New or Used"},
            },
        },
        "estimatedMarketPrice": {
            "type": "OBJECT",
            "properties": {
                "min": {"type": "NUMBER", "description": "Minimum realistic market price."},
                "max": {"type": "NUMBER", "description": "Maximum realistic market price."},
            },
            "required": ["min", "max"],
        },
        "suggestedMaxBudget": {"type": "NUMBER", "description": "A recommended maximum budget cap for the user."},
    },
    "required": ["title", "category", "specs", "estimatedMarketPrice", "suggestedMaxBudget"],
}

SUGGESTION_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "suggestedPrice": {"type": "NUMBER", "description": "The recommended bid amount."},
        "reasoning": {"type": "STRING", "description": "Why this price is recommended."},
        "winProbability": {"type": "STRING", "description": "High, Medium or Low."},
    },
    "required": ["suggestedPrice", "reasoning", "winProbability"],
}

ANALYSIS_INSTRUCTION = (
    "You are a helpful procurement assistant. Your goal is to turn vague buyer requests into structured, "
    "professional Request for Quotations (RFQs) that sellers can easily bid on. Be realistic with price estimates."
)

SUGGESTION_INSTRUCTION = (
    "You are a strategic pricing AI assistant for sellers. Analyze the competition and market data "
    "to suggest a winning bid price."
)


async def _generate_json(prompt: str, schema: dict, system_instruction: str) -> Dict[str, Any] | None:
    if not settings.AI_API_TOKEN:
        logger.error("AI_API_TOKEN is not configured")
        return None

    url = f"{settings.AI_API_BASE_URL}/models/{settings.AI_MODEL}:generateContent"
    headers = {"x-goog-api-key": settings.AI_API_TOKEN, "Content-Type": "application/json"}
    payload = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "systemInstruction": {"parts": [{"text": system_instruction}]},
        "generationConfig": {"responseMimeType": "application/json", "responseSchema": schema},
    }

    try:
        timeout = aiohttp.ClientTimeout(total=settings.AI_TIMEOUT_SECONDS)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(url, headers=headers, json=payload) as resp:
                if resp.status != 200:
                    logger.error(f"AI request failed: {resp.status}, response: {await resp.text()}")
                    return None
                data = await resp.json()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"Error calling AI service: {e}")
        return None

    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
        return json.loads(text)
    except (KeyError, IndexError, TypeError, json.JSONDecodeError) as e:
        logger.error(f"Unexpected AI response format: {e}")
        return None


async def analyze_requirement(user_input: str, category: str | None = None) -> SpecificationResult | None:
    if not user_input.strip():
        return None
    enriched = f"Category: {category}. Details: {user_input}" if category else user_input
    prompt = (
        "The user wants to buy a product but might not know the technical details or best price.\n"
        f'Analyze this input: "{enriched}".\n'
        "Extract specifications, infer missing standard details for a good purchase, "
        "and estimate current market price in INR."
    )

    raw = await _generate_json(prompt, ANALYSIS_SCHEMA, ANALYSIS_INSTRUCTION)
    if raw is None:
        return None

    try:
        result = SpecificationResult(
            title=raw.get("title", ""),
            category=raw.get("category", ""),
            specs=raw.get("specs") or {},
            estimated_market_price=raw.get("estimatedMarketPrice"),
            suggested_max_budget=raw.get("suggestedMaxBudget"),
        )
    except (ValidationError, AttributeError) as e:
        logger.error(f"AI analysis did not match the expected schema: {e}")
        return None

    if not result.is_plausible():
        logger.warning(
            f"AI analysis rejected: price range {result.estimated_market_price.min}-"
            f"{result.estimated_market_price.max}, budget {result.suggested_max_budget}"
        )
        return None

    logger.info(f"AI analysis produced '{result.title}' ({result.category})")
    return result


async def get_bid_suggestion(
    title: str,
    market_price: PriceRange,
    current_bids: List[int],
) -> BidSuggestion | None:
    bids = sorted(current_bids)
    competitors = ", ".join(f"₹{b}" for b in bids) if bids else "No bids yet"
    prompt = (
        "I am a seller on a reverse auction platform.\n"
        f'Product: "{title}"\n'
        f"Estimated Market Price Range: ₹{market_price.min} - ₹{market_price.max}\n"
        f"Current Competitor Bids (lowest first): {competitors}\n\n"
        "Suggest an optimal bid price that maximizes my chance of winning while maintaining a reasonable margin."
    )

    raw = await _generate_json(prompt, SUGGESTION_SCHEMA, SUGGESTION_INSTRUCTION)
    if raw is None:
        return None

    try:
        suggestion = BidSuggestion(
            suggested_price=raw.get("suggestedPrice"),
            reasoning=raw.get("reasoning", ""),
            win_probability=raw.get("winProbability", ""),
        )
    except (ValidationError, AttributeError) as e:
        logger.error(f"AI bid suggestion did not match the expected schema: {e}")
        return None

    if suggestion.suggested_price <= 0:
        logger.warning(f"AI bid suggestion rejected: non-positive price {suggestion.suggested_price}")
        return None

    logger.info(f"AI suggested {suggestion.suggested_price} for '{title}' ({suggestion.win_probability})")
    return suggestion
