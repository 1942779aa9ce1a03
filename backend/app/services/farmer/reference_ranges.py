# backend/app/services/farmer/reference_ranges.py

"""
Reference Range Table (static)

Holds, per measurable quantity:
 - the optimal ("green") band, label and unit for soil nutrients
 - the optimal band for irrigation-water chemistry
 - spray-safety weather thresholds
 - advisory text keyed by parameter and direction (deficiency / excess)

Lookups never raise: unknown keys simply return None / "".
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import enum


@dataclass(frozen=True)
class ParameterDefinition:
    key: str
    label: str
    unit: str
    green: Tuple[float, float]


class Family(str, enum.Enum):
    soil = "soil"
    water = "water"


class Direction(str, enum.Enum):
    deficiency = "deficiency"
    excess = "excess"


def _table(*defs: ParameterDefinition) -> Dict[str, ParameterDefinition]:
    return {d.key: d for d in defs}


# -------------------------------------------------------------
# SOIL (lab entry keys)
# -------------------------------------------------------------
SOIL_PARAMETERS: Dict[str, ParameterDefinition] = _table(
    ParameterDefinition("soil_ph", "Soil pH", "", (6.0, 7.5)),
    ParameterDefinition("ec", "EC (dS/m)", "", (0.2, 1.0)),
    ParameterDefinition("nitrogen", "Nitrogen (N)", "kg/ha", (280.0, 450.0)),
    ParameterDefinition("phosphorus", "Phosphorus (P)", "kg/ha", (20.0, 40.0)),
    ParameterDefinition("potassium", "Potassium (K)", "kg/ha", (120.0, 250.0)),
    ParameterDefinition("zn", "Zinc (Zn)", "mg/kg", (0.6, 1.2)),
    ParameterDefinition("fe", "Iron (Fe)", "mg/kg", (4.5, 8.0)),
    ParameterDefinition("mn", "Manganese (Mn)", "mg/kg", (2.0, 5.0)),
    ParameterDefinition("cu", "Copper (Cu)", "mg/kg", (0.2, 0.5)),
    ParameterDefinition("b", "Boron (B)", "mg/kg", (0.5, 1.0)),
    ParameterDefinition("oc", "Organic Carbon (OC)", "%", (0.75, 1.5)),
    ParameterDefinition("s", "Sulphur (S)", "mg/kg", (10.0, 20.0)),
    ParameterDefinition("lime_requirement", "Lime Requirement", "t/ha", (0.0, 2.0)),
    ParameterDefinition("gypsum_requirement", "Gypsum Requirement", "t/ha", (0.0, 2.0)),
)

# -------------------------------------------------------------
# IRRIGATION WATER
# -------------------------------------------------------------
WATER_PARAMETERS: Dict[str, ParameterDefinition] = _table(
    ParameterDefinition("ph", "pH", "", (6.5, 8.4)),
    ParameterDefinition("ec", "EC (dS/m)", "", (0.0, 0.75)),
    ParameterDefinition("tds", "TDS", "mg/L", (0.0, 500.0)),
    ParameterDefinition("hardness", "Hardness", "mg/L", (0.0, 300.0)),
    ParameterDefinition("na", "Sodium (Na⁺)", "mg/L", (0.0, 200.0)),
    ParameterDefinition("ca", "Calcium (Ca²⁺)", "mg/L", (0.0, 200.0)),
    ParameterDefinition("mg", "Magnesium (Mg²⁺)", "mg/L", (0.0, 150.0)),
    ParameterDefinition("sar", "SAR", "", (0.0, 10.0)),
    ParameterDefinition("rsc", "RSC", "meq/L", (0.0, 1.25)),
    ParameterDefinition("hco3", "Bicarbonate (HCO₃⁻)", "mg/L", (0.0, 200.0)),
    ParameterDefinition("co3", "Carbonate (CO₃²⁻)", "mg/L", (0.0, 30.0)),
    ParameterDefinition("cl", "Chloride (Cl⁻)", "mg/L", (0.0, 250.0)),
    ParameterDefinition("so4", "Sulphate (SO₄²⁻)", "mg/L", (0.0, 200.0)),
    ParameterDefinition("boron", "Boron", "mg/L", (0.0, 0.5)),
    ParameterDefinition("no3_n", "Nitrate-N", "mg/L", (0.0, 10.0)),
    ParameterDefinition("fe", "Iron (Fe)", "mg/L", (0.0, 0.3)),
    ParameterDefinition("f", "Fluoride (F⁻)", "mg/L", (0.0, 1.5)),
)

TABLES: Dict[Family, Dict[str, ParameterDefinition]] = {
    Family.soil: SOIL_PARAMETERS,
    Family.water: WATER_PARAMETERS,
}

# analytics rows use short metric codes for the macro-nutrients
ANALYTICS_ALIASES: Dict[str, str] = {
    "N": "nitrogen",
    "P": "phosphorus",
    "K": "potassium",
}


# -------------------------------------------------------------
# SPRAY-SAFETY WEATHER THRESHOLDS
# -------------------------------------------------------------
@dataclass(frozen=True)
class SprayThresholds:
    wind_kmh: float = 15.0          # RED above this
    high_temp_c: float = 32.0       # AMBER at or above
    marginal_rain_pct: float = 40.0 # AMBER at or above
    heavy_rain_pct: float = 70.0    # RED / heavy-rain flag at or above
    frost_temp_c: float = 2.0       # frost flag at or below
    dry_rain_pct: float = 30.0      # "hot & dry" requires rain chance below


SPRAY_THRESHOLDS = SprayThresholds()


# -------------------------------------------------------------
# ADVISORY TEXT
# -------------------------------------------------------------
DEFICIENCY_ADVISORY: Dict[str, str] = {
    "soil_ph": "Apply lime to raise pH or sulfur to lower pH as per recommendation.",
    "nitrogen": "Apply recommended dose of nitrogen fertilizer.",
    "phosphorus": "Apply phosphorus fertilizer as per soil test.",
    "potassium": "Apply potassium fertilizer as per soil test.",
    "zn": "Apply zinc sulphate as soil or foliar application.",
    "b": "Apply borax as a foliar spray before flowering.",
    "oc": "Incorporate farmyard manure or compost to build organic carbon.",
    "s": "Apply a sulphur-bearing fertilizer such as gypsum or SSP.",
}

TOXICITY_ADVISORY: Dict[str, str] = {
    "soil_ph": "Reduce lime application or use acidifying amendments.",
    "nitrogen": "Reduce nitrogen application, avoid over-fertilization.",
    "phosphorus": "Reduce phosphorus application, avoid over-fertilization.",
    "potassium": "Reduce potassium application, avoid over-fertilization.",
    "ec": "Leach salts with good-quality water and improve drainage.",
    "b": "Stop boron sprays; leach the root zone with irrigation.",
}


def get_table(family) -> Dict[str, ParameterDefinition]:
    return TABLES[Family(family)]


def get_parameter(family, key: str) -> Optional[ParameterDefinition]:
    return get_table(family).get(key)


def normalize_metric(metric_type: str) -> str:
    return ANALYTICS_ALIASES.get(metric_type, metric_type)


def advisory_for(key: str, direction) -> str:
    """Static advisory text; unregistered parameters yield an empty string."""
    if Direction(direction) is Direction.deficiency:
        return DEFICIENCY_ADVISORY.get(key, "")
    return TOXICITY_ADVISORY.get(key, "")
