"""
Pydantic models for API request/response schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any


class ImageSize(BaseModel):
    """Pixel size of the image that was sent to OCR."""
    width: float = 0
    height: float = 0


class ReceiptLinesRequest(BaseModel):
    """Request model for line reconstruction endpoint."""
    annotation: Dict[str, Any] = Field(
        default_factory=dict,
        description="fullTextAnnotation from a DOCUMENT_TEXT_DETECTION response"
    )
    image_size: Optional[ImageSize] = None


class ReceiptLinesResponse(BaseModel):
    lines: List[str]


class TotalAmountRequest(BaseModel):
    """Request model for total extraction - lines, or newline-separated text."""
    lines: Optional[List[str]] = None
    text: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "lines": ["스타벅스", "아메리카노 4,500", "합계 12,000"]
            }
        }


class TotalAmountResponse(BaseModel):
    amount: int
    evidence: str


class ReceiptAnalyzeRequest(BaseModel):
    """Request model for full receipt analysis: annotation or raw provider response."""
    annotation: Optional[Dict[str, Any]] = None
    response: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Raw images:annotate response ({responses: [{fullTextAnnotation}]})"
    )
    image_size: Optional[ImageSize] = None


class ItemModel(BaseModel):
    """Cost item. ``assignees`` empty means split among all participants."""
    id: Optional[str] = None
    name: str = ""
    amount: Any = 0
    assignees: List[str] = Field(default_factory=list)
    is_total: bool = False
    initial_amount: Any = 0


class ReceiptAnalyzeResponse(BaseModel):
    lines: List[str]
    raw_text: str
    amount: int
    evidence: str
    items: List[ItemModel]


class ItemLinesRequest(BaseModel):
    text: str = ""


class ParsedItemModel(BaseModel):
    name: str
    amount: int


class ItemLinesResponse(BaseModel):
    items: List[ParsedItemModel]


class SettlementRequest(BaseModel):
    """Request model for settlement endpoint."""
    items: List[ItemModel] = Field(default_factory=list)
    participants: List[str] = Field(default_factory=list)
    payer: str = ""

    class Config:
        json_schema_extra = {
            "example": {
                "items": [{"name": "합계", "amount": 30000, "assignees": []}],
                "participants": ["A", "B", "C"],
                "payer": "A"
            }
        }


class SettlementRowModel(BaseModel):
    person: str
    owed: int
    pay_to_payer: int


class SettlementResponse(BaseModel):
    total: int
    rows: List[SettlementRowModel]


class RecalcRequest(BaseModel):
    items: List[ItemModel] = Field(default_factory=list)


class RecalcResponse(BaseModel):
    items: List[ItemModel]


class RoundModel(BaseModel):
    """One settlement round."""
    id: Optional[str] = None
    name: str = ""
    items: List[ItemModel] = Field(default_factory=list)
    payer: str = ""


class RoundSummaryRequest(BaseModel):
    rounds: List[RoundModel] = Field(default_factory=list)
    participants: List[str] = Field(default_factory=list)


class PersonSummaryModel(BaseModel):
    person: str
    paid: int
    owed: int
    net: int


class RoundSummaryResponse(BaseModel):
    rows: List[PersonSummaryModel]
