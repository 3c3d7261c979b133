from pydantic import BaseModel, Field
from typing import Dict, Optional
from mydeal.models.requests import PriceRange, SpecValue


class AnalyzeRequest(BaseModel):
    text: str = Field(..., min_length=1, description="Описание товара в свободной форме")
    category: Optional[str] = None


class SpecificationResult(BaseModel):
    title: str
    category: str
    specs: Dict[str, SpecValue] = {}
    estimated_market_price: PriceRange
    suggested_max_budget: float

    def is_plausible(self) -> bool:
        return (
            bool(self.title.strip())
            and self.estimated_market_price.is_plausible()
            and self.suggested_max_budget > 0
        )


class BidSuggestion(BaseModel):
    suggested_price: float
    reasoning: str
    win_probability: str
