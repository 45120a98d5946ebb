from fastapi import APIRouter, HTTPException
from typing import List
from pydantic import BaseModel

from speccheck.analysis.claim_parser import (
    format_claim_value,
    parse_claim,
    parse_multiple_claims,
    validate_claim,
)
from speccheck.analysis.schemas_speccheck import Claim, ClaimValidation

router = APIRouter()

class ParseRequest(BaseModel):
    text: str
    source: str = "user_input"

@router.post("/parse", response_model=Claim)
def parse(request: ParseRequest):
    """Parse a single claim like "10,000 lumens" """
    claim = parse_claim(request.text, request.source)
    if claim is None:
        raise HTTPException(422, f"Could not understand claim: {request.text!r}")
    return claim

@router.post("/parse-multiple", response_model=List[Claim])
def parse_multiple(request: ParseRequest):
    return parse_multiple_claims(request.text, request.source)

@router.post("/validate", response_model=ClaimValidation)
def validate(claim: Claim):
    return validate_claim(claim)

@router.get("/format")
def format_value(value: float, unit: str):
    return {"formatted": format_claim_value(value, unit)}
