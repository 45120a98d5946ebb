import logging
from typing import Callable, Dict, List, Optional

from .efficiency import LedEfficiencyModel
from .schemas_speccheck import (
    ChainConfig,
    ChainLink,
    Claim,
    ComponentWithSpecs,
    ConstraintChain,
    SpecValue,
)

logger = logging.getLogger(__name__)

# Per-component current specs, most specific first
CURRENT_SPEC_PRIORITY = ["max_output_current", "max_current", "max_continuous_discharge"]


def _current_ma(spec: SpecValue) -> float:
    return spec.value * 1000 if spec.unit.strip().lower() == "a" else spec.value


def _current_a(spec: SpecValue) -> float:
    return spec.value / 1000 if spec.unit.strip().lower() == "ma" else spec.value


def _capacity_mah(spec: SpecValue) -> float:
    return spec.value * 1000 if spec.unit.strip().lower() == "ah" else spec.value


def _fmt(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


class ConstraintChainBuilder:
    """Builds the chain of per-component limits for a claim and picks the weakest link.

    The builder only holds configuration, so one instance can evaluate any
    number of claims.
    """

    def __init__(self, config: Optional[ChainConfig] = None, efficiency_model: Optional[LedEfficiencyModel] = None):
        self.config = config or ChainConfig()
        self.efficiency_model = efficiency_model or self.config.led_model
        self._builders: Dict[str, Callable[[Claim, List[ComponentWithSpecs]], List[ChainLink]]] = {
            "lumens": self._lumens_links,
            "mah": self._capacity_links,
            "wh": self._energy_links,
            "watts": self._power_links,
            "amps": self._current_links,
            "volts": self._voltage_links,
        }

    def build(self, claim: Claim, components: List[ComponentWithSpecs]) -> ConstraintChain:
        builder = self._builders.get(claim.category)
        if builder is None:
            # Unknown categories are answered with an uncertain chain, not an error
            logger.debug(f"No chain builder for claim category {claim.category!r}")
            builder = self._generic_links
        return self.finalize(claim, builder(claim, components))

    # ------------------------------------------------------------------
    # Component lookup

    def _with_specs(self, components: List[ComponentWithSpecs], category: str) -> List[ComponentWithSpecs]:
        found = []
        for component in components:
            if component.specs is None:
                if component.error:
                    logger.debug(f"Skipping {component.match.region_id}: {component.error}")
                continue
            if component.specs.category == category:
                found.append(component)
        return found

    def _first(self, components: List[ComponentWithSpecs], category: str) -> Optional[ComponentWithSpecs]:
        found = self._with_specs(components, category)
        return found[0] if found else None

    # ------------------------------------------------------------------
    # Category builders

    def _lumens_links(self, claim: Claim, components: List[ComponentWithSpecs]) -> List[ChainLink]:
        links = []

        led = self._first(components, "led")
        if led is None:
            return links

        led_specs = led.specs.specs
        flux = led_specs.get("luminous_flux")
        if flux:
            max_lumens = flux.max or flux.value
            links.append(ChainLink(
                component=led,
                constraint_type="max_output",
                max_value=max_lumens,
                unit="lm",
                explanation=f"{led.specs.part_number} LED outputs max {_fmt(max_lumens)} lumens",
                source_spec="luminous_flux",
            ))

        led_max_current = led_specs.get("max_current")
        if not (flux and led_max_current):
            return links

        max_lumens = flux.max or flux.value
        led_max_ma = _current_ma(led_max_current)

        driver = self._first(components, "led_driver")
        if driver:
            driver_current = driver.specs.specs.get("max_output_current")
            if driver_current:
                drive_ma = min(_current_ma(driver_current), led_max_ma)
                lumens = round(self.efficiency_model.lumens_at_current(drive_ma, led_max_ma, max_lumens))
                links.append(ChainLink(
                    component=driver,
                    constraint_type="max_current",
                    max_value=lumens,
                    unit="lm",
                    explanation=(f"{driver.specs.part_number} driver limits current to "
                                 f"{_fmt(_current_ma(driver_current))}mA → ~{lumens} lumens"),
                    source_spec="max_output_current",
                ))

        battery = self._first(components, "battery_cell")
        if battery:
            discharge = battery.specs.specs.get("max_continuous_discharge")
            if discharge:
                forward = led_specs.get("forward_voltage")
                forward_voltage = forward.value if forward and forward.value > 0 else self.config.default_forward_voltage
                available_ma = _current_a(discharge) * 1000 / forward_voltage
                drive_ma = min(available_ma, led_max_ma)
                lumens = round(self.efficiency_model.lumens_at_current(drive_ma, led_max_ma, max_lumens))
                links.append(ChainLink(
                    component=battery,
                    constraint_type="max_discharge",
                    max_value=lumens,
                    unit="lm",
                    explanation=(f"{battery.specs.part_number} max discharge "
                                 f"{_fmt(_current_a(discharge))}A → ~{lumens} lumens"),
                    source_spec="max_continuous_discharge",
                ))

        return links

    def _capacity_links(self, claim: Claim, components: List[ComponentWithSpecs]) -> List[ChainLink]:
        links = []
        total_mah = 0.0
        first_cell = None

        for battery in self._with_specs(components, "battery_cell"):
            capacity = battery.specs.specs.get("nominal_capacity")
            if not capacity:
                continue
            mah = _capacity_mah(capacity)
            total_mah += mah
            first_cell = first_cell or battery
            links.append(ChainLink(
                component=battery,
                constraint_type="max_output",
                max_value=mah,
                unit="mAh",
                explanation=f"{battery.specs.part_number} cell: {_fmt(mah)}mAh",
                source_spec="nominal_capacity",
            ))

        if total_mah > 0:
            efficiency = self.config.profile().overall_efficiency
            deliverable = round(total_mah * efficiency)
            links.append(ChainLink(
                component=first_cell,
                constraint_type="efficiency",
                max_value=deliverable,
                unit="mAh",
                explanation=(f"Total {_fmt(total_mah)}mAh × {_fmt(round(efficiency * 100, 1))}% "
                             f"efficiency = {deliverable}mAh deliverable"),
                source_spec="efficiency",
            ))

        return links

    def _energy_links(self, claim: Claim, components: List[ComponentWithSpecs]) -> List[ChainLink]:
        links = []
        for battery in self._with_specs(components, "battery_cell"):
            capacity = battery.specs.specs.get("nominal_capacity")
            voltage = battery.specs.specs.get("nominal_voltage")
            if not (capacity and voltage):
                continue
            mah = _capacity_mah(capacity)
            wh = mah * voltage.value / 1000
            links.append(ChainLink(
                component=battery,
                constraint_type="max_output",
                max_value=wh,
                unit="Wh",
                explanation=f"{battery.specs.part_number}: {_fmt(mah)}mAh × {_fmt(voltage.value)}V = {wh:.1f}Wh",
                source_spec="nominal_capacity",
            ))
        return links

    def _power_links(self, claim: Claim, components: List[ComponentWithSpecs]) -> List[ChainLink]:
        links = []

        pd_controller = self._first(components, "usb_pd")
        if pd_controller:
            max_power = pd_controller.specs.specs.get("max_power")
            if max_power:
                links.append(ChainLink(
                    component=pd_controller,
                    constraint_type="max_output",
                    max_value=max_power.value,
                    unit="W",
                    explanation=f"{pd_controller.specs.part_number} PD controller: max {_fmt(max_power.value)}W",
                    source_spec="max_power",
                ))

        dcdc = self._first(components, "dc_dc")
        if dcdc:
            max_current = dcdc.specs.specs.get("max_output_current")
            max_voltage = dcdc.specs.specs.get("max_output_voltage")
            if max_current and max_voltage:
                amps = _current_a(max_current)
                watts = amps * max_voltage.value
                links.append(ChainLink(
                    component=dcdc,
                    constraint_type="max_output",
                    max_value=watts,
                    unit="W",
                    explanation=(f"{dcdc.specs.part_number}: {_fmt(amps)}A × "
                                 f"{_fmt(max_voltage.value)}V = {_fmt(watts)}W"),
                    source_spec="max_output_current",
                ))

        return links

    def _current_links(self, claim: Claim, components: List[ComponentWithSpecs]) -> List[ChainLink]:
        links = []
        for component in components:
            if component.specs is None:
                continue
            for spec_key in CURRENT_SPEC_PRIORITY:
                spec = component.specs.specs.get(spec_key)
                if spec is None:
                    continue
                amps = _current_a(spec)
                links.append(ChainLink(
                    component=component,
                    constraint_type="max_current",
                    max_value=amps,
                    unit="A",
                    explanation=f"{component.specs.part_number}: max {_fmt(amps)}A",
                    source_spec=spec_key,
                ))
                break
        return links

    def _voltage_links(self, claim: Claim, components: List[ComponentWithSpecs]) -> List[ChainLink]:
        links = []

        dcdc = self._first(components, "dc_dc")
        if dcdc:
            max_voltage = dcdc.specs.specs.get("max_output_voltage")
            if max_voltage:
                links.append(ChainLink(
                    component=dcdc,
                    constraint_type="voltage_limit",
                    max_value=max_voltage.value,
                    unit="V",
                    explanation=f"{dcdc.specs.part_number}: max output {_fmt(max_voltage.value)}V",
                    source_spec="max_output_voltage",
                ))

        pd_controller = self._first(components, "usb_pd")
        if pd_controller:
            supported = pd_controller.specs.specs.get("supported_voltages")
            if supported:
                highest = supported.max or supported.value
                links.append(ChainLink(
                    component=pd_controller,
                    constraint_type="voltage_limit",
                    max_value=highest,
                    unit="V",
                    explanation=f"{pd_controller.specs.part_number} PD controller: up to {_fmt(highest)}V",
                    source_spec="supported_voltages",
                ))

        cells = [(b, b.specs.specs["nominal_voltage"].value)
                 for b in self._with_specs(components, "battery_cell")
                 if "nominal_voltage" in b.specs.specs]
        if cells:
            # Cell topology is not detected; the product profile decides it
            topology = self.config.profile().battery_topology
            if topology == "series":
                pack_voltage = sum(v for _, v in cells)
                breakdown = " + ".join(f"{_fmt(v)}V" for _, v in cells)
            else:
                pack_voltage = max(v for _, v in cells)
                breakdown = f"highest cell {_fmt(pack_voltage)}V"
            links.append(ChainLink(
                component=cells[0][0],
                constraint_type="voltage_limit",
                max_value=pack_voltage,
                unit="V",
                explanation=f"{len(cells)} cell(s) assumed in {topology}: {breakdown} = {pack_voltage:.1f}V",
                source_spec="nominal_voltage",
            ))

        for component in components:
            if component.specs is None:
                continue
            output_voltage = component.specs.specs.get("output_voltage")
            if output_voltage:
                links.append(ChainLink(
                    component=component,
                    constraint_type="voltage_limit",
                    max_value=output_voltage.value,
                    unit="V",
                    explanation=f"{component.specs.part_number}: output {_fmt(output_voltage.value)}V",
                    source_spec="output_voltage",
                ))

        return links

    def _generic_links(self, claim: Claim, components: List[ComponentWithSpecs]) -> List[ChainLink]:
        return []

    # ------------------------------------------------------------------

    def _is_high_quality(self, link: ChainLink) -> bool:
        component = link.component
        return (component.specs is not None
                and component.match.status == "confident"
                and component.match.confidence >= self.config.high_quality_confidence)

    def finalize(self, claim: Claim, links: List[ChainLink]) -> ConstraintChain:
        """Pick the bottleneck, verdict and confidence for a set of links.

        Ties on the minimum go to the link emitted first. Earlier flags are
        cleared and the winning link is flagged in place, so links must not be
        shared between chains.
        """
        if not links:
            return ConstraintChain(
                claim=claim,
                links=[],
                bottleneck=None,
                max_possible=0,
                unit=claim.unit,
                verdict="uncertain",
                confidence="low",
            )

        for link in links:
            link.is_bottleneck = False

        bottleneck = links[0]
        for link in links[1:]:
            if link.max_value < bottleneck.max_value:
                bottleneck = link
        bottleneck.is_bottleneck = True

        max_possible = bottleneck.max_value
        verdict = "plausible" if max_possible >= claim.value else "impossible"

        high_quality = sum(1 for link in links if self._is_high_quality(link))
        if high_quality >= 3:
            confidence = "high"
        elif high_quality >= 2 or len(links) >= 3:
            confidence = "medium"
        else:
            confidence = "low"

        logger.debug(f"{claim.category} claim {claim.value}{claim.unit}: {verdict} "
                     f"(max {max_possible}, {len(links)} links, {high_quality} high quality)")

        return ConstraintChain(
            claim=claim,
            links=links,
            bottleneck=bottleneck,
            max_possible=max_possible,
            unit=claim.unit,
            verdict=verdict,
            confidence=confidence,
        )


def build_constraint_chain(claim: Claim, components: List[ComponentWithSpecs],
                           config: Optional[ChainConfig] = None) -> ConstraintChain:
    return ConstraintChainBuilder(config).build(claim, components)


def finalize_chain(claim: Claim, links: List[ChainLink], config: Optional[ChainConfig] = None) -> ConstraintChain:
    return ConstraintChainBuilder(config).finalize(claim, links)
