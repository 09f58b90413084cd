import math

from roofquote.pricing.models import MaterialQuantity

SQUARE_FEET_PER_SQUARE = 100
DEFAULT_WASTE = 0.1

BUNDLES_PER_SQUARE = 3
UNDERLAYMENT_SF_PER_ROLL = 400
STARTER_LF_PER_BUNDLE = 100
HIP_RIDGE_LF_PER_BUNDLE = 20
DRIP_EDGE_LF_PER_PIECE = 10
ICE_WATER_COURSES = 3  # ice & water runs three feet up from the eave
ICE_WATER_LF_PER_ROLL = 65
VALLEY_METAL_LF_PER_PIECE = 10
NAILS_SF_PER_COIL = 120


def _whole_units(value: float) -> int:
    # round first so float noise like 66.00000000000001 does not buy an extra unit
    return math.ceil(round(value, 6))


def calculate_material_quantities(
    *,
    total_area: float,
    ridge: float = 0.0,
    hip: float = 0.0,
    valley: float = 0.0,
    eave: float = 0.0,
    rake: float = 0.0,
    waste: float = DEFAULT_WASTE,
) -> dict[str, MaterialQuantity]:
    """Purchasable quantities for a roof of ``total_area`` square feet.

    Lengths are linear feet. ``waste`` only inflates the shingle count.
    """
    squares_with_waste = total_area / SQUARE_FEET_PER_SQUARE * (1 + waste)
    return {
        "shingles": MaterialQuantity(_whole_units(squares_with_waste * BUNDLES_PER_SQUARE), "bundle"),
        "underlayment": MaterialQuantity(_whole_units(total_area / UNDERLAYMENT_SF_PER_ROLL), "roll"),
        "starter": MaterialQuantity(_whole_units(eave / STARTER_LF_PER_BUNDLE), "bundle"),
        "hip_ridge": MaterialQuantity(_whole_units((ridge + hip) / HIP_RIDGE_LF_PER_BUNDLE), "bundle"),
        "drip_edge": MaterialQuantity(_whole_units((eave + rake) / DRIP_EDGE_LF_PER_PIECE), "piece"),
        "ice_water": MaterialQuantity(
            _whole_units(eave * ICE_WATER_COURSES / ICE_WATER_LF_PER_ROLL), "roll"
        ),
        "valley_metal": MaterialQuantity(_whole_units(valley / VALLEY_METAL_LF_PER_PIECE), "piece"),
        "nails": MaterialQuantity(_whole_units(total_area / NAILS_SF_PER_COIL), "coil"),
    }
