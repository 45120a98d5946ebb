import logging
from fastapi import APIRouter, HTTPException
from typing import List, Optional
from pydantic import BaseModel, Field

from speccheck.config import settings
from speccheck.analysis.claim_parser import parse_claim
from speccheck.analysis.verdict import analyze_claim, format_verdict_for_share, to_analyze_response
from speccheck.analysis.schemas_speccheck import (
    AnalyzeResponse,
    ChainConfig,
    Claim,
    ComponentWithSpecs,
    ConstraintChain,
    Verdict,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class AnalyzeRequest(BaseModel):
    claim: Optional[Claim] = None
    claim_text: Optional[str] = None   # parsed when no structured claim is given
    source: str = "user_input"
    components: List[ComponentWithSpecs] = Field(default_factory=list)
    product_category: Optional[str] = None
    config: Optional[ChainConfig] = None

class VerdictResponse(BaseModel):
    verdict: Verdict
    chain: ConstraintChain
    share_text: str

def _resolve_claim(request: AnalyzeRequest) -> Claim:
    if request.claim is not None:
        return request.claim
    if request.claim_text:
        claim = parse_claim(request.claim_text, request.source)
        if claim is not None:
            return claim
        raise HTTPException(422, f"Could not understand claim: {request.claim_text!r}")
    raise HTTPException(422, "Either claim or claim_text is required")

def _resolve_config(request: AnalyzeRequest) -> ChainConfig:
    config = request.config or ChainConfig(product_category=settings.default_product_category)
    if request.product_category:
        config = config.model_copy(update={"product_category": request.product_category})
    return config

@router.post("/claim", response_model=AnalyzeResponse)
def analyze(request: AnalyzeRequest):
    """Judge a claim against the identified components.

    The response has the same shape as the LLM-backed analysis so clients
    can switch between the two.
    """
    claim = _resolve_claim(request)
    try:
        chain, verdict = analyze_claim(claim, request.components, _resolve_config(request))
        return to_analyze_response(chain, verdict)
    except Exception as e:
        logger.error(f"Claim analysis failed: {e}")
        raise HTTPException(500, f"Claim analysis failed: {str(e)}")

@router.post("/verdict", response_model=VerdictResponse)
def verdict(request: AnalyzeRequest):
    """Full verdict with the constraint chain and shareable text"""
    claim = _resolve_claim(request)
    try:
        chain, result = analyze_claim(claim, request.components, _resolve_config(request))
        return VerdictResponse(verdict=result, chain=chain, share_text=format_verdict_for_share(result))
    except Exception as e:
        logger.error(f"Verdict generation failed: {e}")
        raise HTTPException(500, f"Verdict generation failed: {str(e)}")

@router.get("/config")
def get_default_config():
    """Default efficiency and confidence configuration"""
    return ChainConfig(product_category=settings.default_product_category).model_dump()
