from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal, Dict

from .efficiency import LedDroopModel

MatchStatus = Literal["confident", "partial", "unknown"]
ConstraintType = Literal["max_output", "max_current", "max_discharge", "efficiency", "voltage_limit"]
VerdictResult = Literal["plausible", "impossible", "uncertain"]
VerdictConfidence = Literal["high", "medium", "low"]

class Claim(BaseModel):
    category: str              # lumens, mah, wh, watts, amps, volts; anything else gets an uncertain chain
    value: float = Field(gt=0)
    unit: str                  # canonical: lm, mAh, Wh, W, A, V
    source: str = "user_input"  # opaque, never interpreted
    original_text: str = ""

class ClaimValidation(BaseModel):
    valid: bool
    warning: Optional[str] = None

class SpecValue(BaseModel):
    value: float
    unit: str
    conditions: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    typical: Optional[float] = None

class ComponentSpecs(BaseModel):
    part_number: str
    manufacturer: str
    category: str              # led, led_driver, battery_cell, usb_pd, dc_dc, ...
    specs: Dict[str, SpecValue] = Field(default_factory=dict)

class MatchedComponent(BaseModel):
    region_id: str
    status: MatchStatus
    part_number: Optional[str] = None
    manufacturer: Optional[str] = None
    category: str = "unknown"
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    datasheet_id: Optional[str] = None
    alternatives: List[str] = Field(default_factory=list)

class ComponentWithSpecs(BaseModel):
    match: MatchedComponent
    specs: Optional[ComponentSpecs] = None
    error: Optional[str] = None  # why specs are missing

class ChainLink(BaseModel):
    component: ComponentWithSpecs
    constraint_type: ConstraintType
    max_value: float
    unit: str
    is_bottleneck: bool = False
    explanation: str
    source_spec: str

class ConstraintChain(BaseModel):
    claim: Claim
    links: List[ChainLink] = Field(default_factory=list)
    bottleneck: Optional[ChainLink] = None
    max_possible: float = 0
    unit: str
    verdict: VerdictResult
    confidence: VerdictConfidence

class Verdict(BaseModel):
    result: VerdictResult
    confidence: VerdictConfidence
    claimed: float
    max_possible: float
    unit: str
    bottleneck: Optional[str] = None  # part number
    explanation: str
    details: List[str] = Field(default_factory=list)
    analyzed_at: datetime

# Response shape shared with the LLM-backed analysis service

class ChainLinkSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    component: str
    constraint_type: str
    max_value: float
    unit: str
    is_bottleneck: bool
    explanation: str

class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    verdict: VerdictResult
    max_possible: float
    unit: str
    reasoning: str
    chain: List[ChainLinkSummary] = Field(default_factory=list)

# Tunable analysis policy

class ProductProfile(BaseModel):
    overall_efficiency: float = Field(0.85, gt=0.0, le=1.0)
    # No cell topology is detected; this is an assumption, not a measurement.
    battery_topology: Literal["series", "parallel"] = "series"

def _default_profiles() -> Dict[str, ProductProfile]:
    return {"power_bank": ProductProfile(overall_efficiency=0.85, battery_topology="series")}

class ChainConfig(BaseModel):
    product_category: str = "power_bank"
    profiles: Dict[str, ProductProfile] = Field(default_factory=_default_profiles)
    led_model: LedDroopModel = Field(default_factory=LedDroopModel)
    default_forward_voltage: float = 3.0
    high_quality_confidence: float = 0.9

    def profile(self) -> ProductProfile:
        return self.profiles.get(self.product_category) or ProductProfile()
