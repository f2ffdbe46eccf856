"""
FastAPI application for receipt scanning and bill settlement.

Run instructions:
1. Install the project:
   pip install -e .

2. Copy and configure environment:
   cp backend/.env.example backend/.env

3. Run server:
   python backend/run_backend.py
   # or: uvicorn receipt_settle.main:app --reload --port 8000 --app-dir backend

Example curl request:
curl -X POST "http://127.0.0.1:8000/api/settlement" \
  -H "Content-Type: application/json" \
  -d '{"items": [{"amount": 30000}], "participants": ["A", "B", "C"], "payer": "A"}'
"""
from dataclasses import asdict
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .models import (
    ReceiptLinesRequest, ReceiptLinesResponse,
    TotalAmountRequest, TotalAmountResponse,
    ReceiptAnalyzeRequest, ReceiptAnalyzeResponse,
    ItemLinesRequest, ItemLinesResponse,
    SettlementRequest, SettlementResponse,
    RecalcRequest, RecalcResponse,
    RoundSummaryRequest, RoundSummaryResponse,
)
from .processors.geometry.line_clusterer import extract_lines_by_geometry
from .processors.totals.total_amount_extractor import extract_total_amount
from .processors.text.item_line_parser import parse_receipt_lines
from .processors.pipeline import analyze_receipt
from .services.settlement import compute_settlement, recalc_total_row, summarize_rounds

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Receipt Settle",
    description="Receipt line reconstruction, total extraction and bill settlement",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _image_size(model):
    return model.model_dump() if model is not None else None


@app.get("/health", tags=["System"])
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


# ==================== Receipt Endpoints ====================

@app.post("/api/receipt/lines", response_model=ReceiptLinesResponse, tags=["Receipts"])
async def receipt_lines(request: ReceiptLinesRequest):
    """Rebuild text lines (top to bottom) from OCR word geometry."""
    lines = extract_lines_by_geometry(request.annotation, _image_size(request.image_size))
    return {"lines": lines}


@app.post("/api/receipt/total", response_model=TotalAmountResponse, tags=["Receipts"])
async def receipt_total(request: TotalAmountRequest):
    """
    Pick the grand total from receipt lines.

    Returns amount 0 and empty evidence when no amount is found.
    """
    source = request.lines if request.lines is not None else (request.text or "")
    result = extract_total_amount(source)
    return asdict(result)


@app.post("/api/receipt/analyze", response_model=ReceiptAnalyzeResponse, tags=["Receipts"])
async def receipt_analyze(request: ReceiptAnalyzeRequest):
    """
    Full scan pipeline: annotation -> lines -> total -> seeded total row.

    - Accepts either ``annotation`` (fullTextAnnotation) or the raw provider ``response``
    """
    if request.annotation is None and request.response is None:
        raise HTTPException(
            status_code=400,
            detail="Either 'annotation' or 'response' is required."
        )

    analysis = analyze_receipt(
        annotation=request.annotation,
        image_size=_image_size(request.image_size),
        response=request.response,
    )
    return asdict(analysis)


@app.post("/api/receipt/items", response_model=ItemLinesResponse, tags=["Receipts"])
async def receipt_items(request: ItemLinesRequest):
    """Parse simple "name ... price" item lines from receipt text."""
    items = parse_receipt_lines(request.text)
    return {"items": [asdict(it) for it in items]}


# ==================== Settlement Endpoints ====================

@app.post("/api/settlement", response_model=SettlementResponse, tags=["Settlement"])
async def settlement(request: SettlementRequest):
    """
    Split a round's items between participants.

    The payer absorbs the rounding remainder so owed amounts add up to the total.
    """
    result = compute_settlement(
        [it.model_dump() for it in request.items],
        request.participants,
        request.payer,
    )
    logger.info(f"Settled {len(request.items)} items for {len(result.rows)} participants, total={result.total}")
    return asdict(result)


@app.post("/api/settlement/recalc", response_model=RecalcResponse, tags=["Settlement"])
async def settlement_recalc(request: RecalcRequest):
    """Recompute the total row as the remainder after the other items."""
    items = recalc_total_row([it.model_dump() for it in request.items])
    return {"items": [asdict(it) for it in items]}


@app.post("/api/settlement/summary", response_model=RoundSummaryResponse, tags=["Settlement"])
async def settlement_summary(request: RoundSummaryRequest):
    """Net paid/owed per person across all rounds."""
    rows = summarize_rounds([r.model_dump() for r in request.rounds], request.participants)
    return {"rows": [asdict(r) for r in rows]}
