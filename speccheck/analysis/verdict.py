import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from .claim_parser import format_claim_value
from .engine import ConstraintChainBuilder
from .schemas_speccheck import (
    AnalyzeResponse,
    ChainConfig,
    ChainLinkSummary,
    Claim,
    ComponentWithSpecs,
    ConstraintChain,
    Verdict,
)

logger = logging.getLogger(__name__)

NO_COMPONENTS_DETAILS = [
    "No relevant components were identified.",
    "Manual verification is recommended.",
]

VERDICT_COLORS = {
    "plausible": "#22C55E",
    "impossible": "#EF4444",
    "uncertain": "#EAB308",
}
VERDICT_ICONS = {
    "plausible": "✓",
    "impossible": "✗",
    "uncertain": "?",
}
VERDICT_LABELS = {
    "plausible": "PLAUSIBLE",
    "impossible": "IMPOSSIBLE",
    "uncertain": "UNCERTAIN",
}
CONFIDENCE_DESCRIPTIONS = {
    "high": "All key components identified",
    "medium": "Most components identified",
    "low": "Limited component identification",
}


def _bottleneck_part_number(chain: ConstraintChain) -> Optional[str]:
    if chain.bottleneck is None or chain.bottleneck.component.specs is None:
        return None
    return chain.bottleneck.component.specs.part_number or None


def _explanation(chain: ConstraintChain) -> str:
    claimed = format_claim_value(chain.claim.value, chain.claim.unit)
    max_str = format_claim_value(chain.max_possible, chain.unit)

    if chain.verdict == "uncertain":
        return (f"Cannot verify the {claimed} claim. Not enough components were "
                f"identified to complete the analysis.")

    if chain.verdict == "plausible":
        return (f"The {claimed} claim is physically plausible. The identified "
                f"components can support up to {max_str}.")

    part_number = _bottleneck_part_number(chain)
    if part_number:
        return f"The {claimed} claim is physically impossible. The {part_number} limits output to {max_str}."
    return (f"The {claimed} claim exceeds the physical limits of the identified "
            f"components. Maximum possible: {max_str}.")


def _details(chain: ConstraintChain) -> List[str]:
    if not chain.links:
        return list(NO_COMPONENTS_DETAILS)

    details = []
    if chain.verdict == "impossible" and chain.claim.value > 0:
        percent = int(chain.max_possible / chain.claim.value * 100 + 0.5)
        details.append(f"Maximum possible output is {percent}% of the claimed value.")

    for link in chain.links:
        prefix = "⚠️" if link.is_bottleneck else "•"
        details.append(f"{prefix} {link.explanation}")

    if chain.confidence == "low":
        details.append("⚠️ Low confidence: Some key components may not have been identified.")
    elif chain.confidence == "medium":
        details.append("ℹ️ Medium confidence: Analysis based on partial component identification.")

    return details


def generate_verdict(chain: ConstraintChain, now: Optional[datetime] = None) -> Verdict:
    """Turn a finalized constraint chain into a user-facing verdict."""
    return Verdict(
        result=chain.verdict,
        confidence=chain.confidence,
        claimed=chain.claim.value,
        max_possible=chain.max_possible,
        unit=chain.claim.unit,
        bottleneck=_bottleneck_part_number(chain),
        explanation=_explanation(chain),
        details=_details(chain),
        analyzed_at=now or datetime.now(timezone.utc),
    )


def get_verdict_color(verdict: str) -> str:
    return VERDICT_COLORS.get(verdict, "#6B7280")


def get_verdict_icon(verdict: str) -> str:
    return VERDICT_ICONS.get(verdict, "•")


def get_verdict_label(verdict: str) -> str:
    return VERDICT_LABELS.get(verdict, "UNKNOWN")


def get_confidence_description(confidence: str) -> str:
    return CONFIDENCE_DESCRIPTIONS.get(confidence, "")


def format_verdict_for_share(verdict: Verdict) -> str:
    """Plain-text summary suitable for copy/paste or a share sheet"""
    lines = [
        "SpecCheck Analysis",
        "==================",
        "",
        f"Claimed: {format_claim_value(verdict.claimed, verdict.unit)}",
        f"Maximum Possible: {format_claim_value(verdict.max_possible, verdict.unit)}",
        f"Verdict: {get_verdict_label(verdict.result)}",
        "",
        verdict.explanation,
    ]

    if verdict.details:
        lines.append("")
        lines.append("Details:")
        lines.extend(verdict.details)

    lines.append("")
    lines.append(f"Analyzed: {verdict.analyzed_at.isoformat()}")
    return "\n".join(lines)


def to_analyze_response(chain: ConstraintChain, verdict: Optional[Verdict] = None) -> AnalyzeResponse:
    """Express a chain in the same shape the LLM analysis service returns."""
    verdict = verdict or generate_verdict(chain)
    summaries = []
    for link in chain.links:
        specs = link.component.specs
        part_number = (specs.part_number if specs else None) or link.component.match.part_number or "unknown"
        summaries.append(ChainLinkSummary(
            component=part_number,
            constraint_type=link.constraint_type,
            max_value=link.max_value,
            unit=link.unit,
            is_bottleneck=link.is_bottleneck,
            explanation=link.explanation,
        ))

    return AnalyzeResponse(
        verdict=chain.verdict,
        max_possible=chain.max_possible,
        unit=chain.unit,
        reasoning=verdict.explanation,
        chain=summaries,
    )


def analyze_claim(claim: Claim,
                  components: List[ComponentWithSpecs],
                  config: Optional[ChainConfig] = None) -> Tuple[ConstraintChain, Verdict]:
    chain = ConstraintChainBuilder(config).build(claim, components)
    verdict = generate_verdict(chain)
    logger.info(f"Analyzed {claim.value}{claim.unit} claim: {verdict.result} ({verdict.confidence} confidence)")
    return chain, verdict
