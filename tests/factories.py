"""
Builders for claims and components used across the test suite.
"""

from speccheck.analysis.schemas_speccheck import (
    Claim,
    ComponentSpecs,
    ComponentWithSpecs,
    MatchedComponent,
    SpecValue,
)


def spec(value, unit, max=None, typical=None, min=None, conditions=None):
    return SpecValue(value=value, unit=unit, min=min, max=max, typical=typical, conditions=conditions)


def make_component(part_number, manufacturer, category, specs, status="confident", confidence=0.95):
    return ComponentWithSpecs(
        match=MatchedComponent(
            region_id=f"region_{part_number}",
            status=status,
            part_number=part_number,
            manufacturer=manufacturer,
            category=category,
            confidence=confidence,
            datasheet_id=part_number.lower(),
        ),
        specs=ComponentSpecs(
            part_number=part_number,
            manufacturer=manufacturer,
            category=category,
            specs=specs,
        ),
        error=None,
    )


def make_claim(value, category="lumens", unit="lm"):
    return Claim(category=category, value=value, unit=unit, original_text=f"{value} {unit}")


def make_led(lumens=1052, max_current=3000, **match):
    return make_component("XM-L2", "Cree", "led", {
        "luminous_flux": spec(lumens, "lm", max=lumens, typical=lumens, conditions="at max current"),
        "max_current": spec(max_current, "mA", max=max_current),
        "forward_voltage": spec(3.1, "V", typical=3.1),
    }, **match)


def make_driver(max_current=1500, **match):
    return make_component("PT4115", "PowTech", "led_driver", {
        "max_output_current": spec(max_current, "mA", max=max_current),
    }, **match)


def make_battery(capacity=3500, voltage=3.6, max_discharge=8, **match):
    return make_component("INR18650-35E", "Samsung SDI", "battery_cell", {
        "nominal_capacity": spec(capacity, "mAh", typical=capacity),
        "nominal_voltage": spec(voltage, "V", typical=voltage),
        "max_continuous_discharge": spec(max_discharge, "A", max=max_discharge),
    }, **match)


def make_pd_controller(max_power=100, max_voltage=20, **match):
    return make_component("IP2312", "Injoinic", "usb_pd", {
        "max_power": spec(max_power, "W", max=max_power),
        "supported_voltages": spec(max_voltage, "V", min=5, max=max_voltage, conditions="max"),
    }, **match)


def make_dcdc(max_current=3, max_voltage=12, **match):
    return make_component("LM2596", "Texas Instruments", "dc_dc", {
        "max_output_current": spec(max_current, "A", max=max_current),
        "max_output_voltage": spec(max_voltage, "V", max=max_voltage),
    }, **match)
