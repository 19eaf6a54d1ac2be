"""Material catalogue, preset airframes and structural mass and load estimates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .vehicle import (
    BodyControlVertices,
    ComponentMaterial,
    ComponentType,
    FinControlVertices,
    FinShape,
    NoseConeShape,
    NoseControlVertices,
    RocketPreset,
    TransitionControlVertices,
    TransitionShape,
    VehicleGeometry,
)

MIN_DYNAMIC_PRESSURE_LIMIT_PA = 8000.0
MAX_DYNAMIC_PRESSURE_LIMIT_PA = 250000.0


@dataclass(frozen=True)
class MaterialDefinition:
    """Mechanical, thermal and cost properties of a construction material."""

    label: str
    density_kg_per_m3: float
    youngs_modulus_gpa: float
    yield_strength_mpa: float
    max_service_temperature_c: float
    relative_cost_index: float
    note: str


@dataclass(frozen=True)
class StructureMassBreakdown:
    """Estimated mass of each structural component."""

    nose_mass_kg: float = 0.0
    body_mass_kg: float = 0.0
    transition_mass_kg: float = 0.0
    fin_mass_kg: float = 0.0
    payload_bay_mass_kg: float = 0.0
    total_mass_kg: float = 0.0


@dataclass(frozen=True)
class StructuralMaterialAssessment:
    """Mass-weighted material properties and the recommended load limit."""

    equivalent_density_kg_per_m3: float = 0.0
    equivalent_modulus_gpa: float = 0.0
    recommended_max_dynamic_pressure_pa: float = 0.0


_MATERIALS: dict[ComponentMaterial, MaterialDefinition] = {
    ComponentMaterial.PLA_CF: MaterialDefinition(
        "PLA-CF", 1240.0, 11.0, 68.0, 55.0, 1.2,
        "Stampa rapida, buona rigidita per ogive e pinne prototipali",
    ),
    ComponentMaterial.ALUMINUM_6061: MaterialDefinition(
        "Alluminio 6061", 2700.0, 68.0, 276.0, 150.0, 2.4,
        "Tubazioni e tail section robuste, penalizza la massa",
    ),
    ComponentMaterial.PVC: MaterialDefinition(
        "PVC", 1400.0, 3.0, 52.0, 60.0, 0.9,
        "Economico ma poco rigido, adatto a supporti e payload leggeri",
    ),
    ComponentMaterial.FIBERGLASS: MaterialDefinition(
        "Fiberglass", 1850.0, 24.0, 210.0, 120.0, 1.8,
        "Buon compromesso fra costo, rigidita e resistenza termica",
    ),
    ComponentMaterial.CARBON_FIBER: MaterialDefinition(
        "Carbon Fiber", 1600.0, 70.0, 600.0, 135.0, 3.6,
        "Molto rigido e leggero, ideale per fusoliere e pinne spinte",
    ),
    ComponentMaterial.BIRCH_PLYWOOD: MaterialDefinition(
        "Betulla Aircraft", 680.0, 10.5, 95.0, 90.0, 1.0,
        "Classico materiale per pinne, leggero e facile da lavorare",
    ),
    ComponentMaterial.PHENOLIC: MaterialDefinition(
        "Phenolic Tube", 1420.0, 16.0, 140.0, 180.0, 1.7,
        "Ottima stabilita termica per body tube e avionics bay",
    ),
}

_NOSE_LABELS = {
    NoseConeShape.CONICAL: "Conical",
    NoseConeShape.TANGENT_OGIVE: "Tangent Ogive",
    NoseConeShape.PARABOLIC: "Parabolic",
    NoseConeShape.LD_HAACK: "LD-Haack",
}

_FIN_LABELS = {
    FinShape.TRAPEZOIDAL: "Trapezoidal",
    FinShape.ELLIPTICAL: "Elliptical",
    FinShape.AIRFOIL: "Airfoil",
}

_TRANSITION_LABELS = {
    TransitionShape.CONICAL: "Conical",
    TransitionShape.CURVED: "Curved",
}

_PRESET_LABELS = {
    RocketPreset.RESEARCH_STARTER: "Research Starter",
    RocketPreset.SPORT_TRAINER: "Sport Trainer",
    RocketPreset.HIGH_ALTITUDE: "High Altitude",
    RocketPreset.MINIMUM_DIAMETER: "Minimum Diameter",
    RocketPreset.HEAVY_LIFT: "Heavy Lift",
}

# Per preset: scalar fields, then nose (mid, shoulder), body (fore, mid, aft),
# transition (mid) and fin (tip_le, tip_te, span, thickness) control values.
_PRESETS: dict[RocketPreset, tuple[dict[str, Any], tuple[float, ...], tuple[float, ...], float, tuple[float, ...]]] = {
    RocketPreset.RESEARCH_STARTER: (
        dict(
            body_length_m=3.0, body_diameter_m=0.104, wall_thickness_m=0.003,
            nose_length_m=0.48, nose_cone_shape=NoseConeShape.LD_HAACK,
            transition_length_m=0.18, transition_aft_diameter_m=0.084,
            transition_shape=TransitionShape.CONICAL,
            fin_front_from_nose_m=2.15, fin_root_chord_m=0.30, fin_tip_chord_m=0.14,
            fin_span_m=0.17, fin_sweep_length_m=0.08, fin_thickness_m=0.006,
            fin_shape=FinShape.TRAPEZOIDAL, fin_count=4,
            payload_length_m=0.20, payload_mass_kg=0.9,
            structure_cg_from_nose_m=1.45, propellant_cg_from_nose_m=2.40,
        ),
        (1.0, 1.0), (1.0, 1.0, 1.0), 1.0, (0.0, 0.0, 1.0, 1.0),
    ),
    RocketPreset.SPORT_TRAINER: (
        dict(
            body_length_m=2.2, body_diameter_m=0.086, wall_thickness_m=0.0025,
            nose_length_m=0.34, nose_cone_shape=NoseConeShape.TANGENT_OGIVE,
            transition_length_m=0.12, transition_aft_diameter_m=0.074,
            transition_shape=TransitionShape.CONICAL,
            fin_front_from_nose_m=1.56, fin_root_chord_m=0.22, fin_tip_chord_m=0.11,
            fin_span_m=0.12, fin_sweep_length_m=0.06, fin_thickness_m=0.005,
            fin_shape=FinShape.TRAPEZOIDAL, fin_count=3,
            payload_length_m=0.12, payload_mass_kg=0.35,
            structure_cg_from_nose_m=1.06, propellant_cg_from_nose_m=1.72,
        ),
        (1.0, 1.0), (1.0, 1.0, 1.0), 1.0, (0.0, 0.0, 1.0, 1.0),
    ),
    RocketPreset.HIGH_ALTITUDE: (
        dict(
            body_length_m=3.7, body_diameter_m=0.098, wall_thickness_m=0.0025,
            nose_length_m=0.62, nose_cone_shape=NoseConeShape.LD_HAACK,
            transition_length_m=0.22, transition_aft_diameter_m=0.072,
            transition_shape=TransitionShape.CURVED,
            fin_front_from_nose_m=2.85, fin_root_chord_m=0.26, fin_tip_chord_m=0.10,
            fin_span_m=0.13, fin_sweep_length_m=0.11, fin_thickness_m=0.005,
            fin_shape=FinShape.AIRFOIL, fin_count=3,
            payload_length_m=0.26, payload_mass_kg=0.7,
            structure_cg_from_nose_m=1.70, propellant_cg_from_nose_m=2.82,
        ),
        (0.94, 1.02), (0.98, 1.0, 1.0), 0.88, (0.03, -0.01, 0.96, 0.92),
    ),
    RocketPreset.MINIMUM_DIAMETER: (
        dict(
            body_length_m=3.5, body_diameter_m=0.075, wall_thickness_m=0.0022,
            nose_length_m=0.61, nose_cone_shape=NoseConeShape.LD_HAACK,
            transition_length_m=0.0, transition_aft_diameter_m=0.075,
            transition_shape=TransitionShape.CONICAL,
            fin_front_from_nose_m=2.78, fin_root_chord_m=0.20, fin_tip_chord_m=0.08,
            fin_span_m=0.11, fin_sweep_length_m=0.10, fin_thickness_m=0.0045,
            fin_shape=FinShape.AIRFOIL, fin_count=3,
            payload_length_m=0.18, payload_mass_kg=0.48,
            structure_cg_from_nose_m=1.54, propellant_cg_from_nose_m=2.60,
        ),
        (0.92, 1.0), (0.98, 1.0, 0.98), 1.0, (0.03, -0.01, 0.94, 0.86),
    ),
    RocketPreset.HEAVY_LIFT: (
        dict(
            body_length_m=3.4, body_diameter_m=0.125, wall_thickness_m=0.0035,
            nose_length_m=0.50, nose_cone_shape=NoseConeShape.TANGENT_OGIVE,
            transition_length_m=0.20, transition_aft_diameter_m=0.094,
            transition_shape=TransitionShape.CONICAL,
            fin_front_from_nose_m=2.35, fin_root_chord_m=0.38, fin_tip_chord_m=0.18,
            fin_span_m=0.22, fin_sweep_length_m=0.07, fin_thickness_m=0.007,
            fin_shape=FinShape.ELLIPTICAL, fin_count=4,
            payload_length_m=0.24, payload_mass_kg=1.2,
            structure_cg_from_nose_m=1.56, propellant_cg_from_nose_m=2.58,
        ),
        (1.05, 1.0), (1.0, 1.03, 0.97), 1.04, (-0.01, 0.02, 1.08, 1.08),
    ),
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def _shell_cylinder_volume_m3(outer_radius_m: float, inner_radius_m: float, length_m: float) -> float:
    return math.pi * max(length_m, 0.0) * max(outer_radius_m**2 - inner_radius_m**2, 0.0)


def _frustum_volume_m3(r0: float, r1: float, length_m: float) -> float:
    return (math.pi * max(length_m, 0.0) / 3.0) * (r0 * r0 + r0 * r1 + r1 * r1)


def _shell_frustum_volume_m3(
    outer_r0_m: float, outer_r1_m: float, inner_r0_m: float, inner_r1_m: float, length_m: float
) -> float:
    return max(
        _frustum_volume_m3(outer_r0_m, outer_r1_m, length_m)
        - _frustum_volume_m3(inner_r0_m, inner_r1_m, length_m),
        0.0,
    )


def material_definition(material: ComponentMaterial) -> MaterialDefinition:
    """Properties of a construction material."""
    return _MATERIALS[material]


def available_component_materials() -> tuple[ComponentMaterial, ...]:
    """Every material a component may be built from, in catalogue order."""
    return tuple(ComponentMaterial)


def nose_cone_shape_label(shape: NoseConeShape) -> str:
    """Display name of a nose cone profile."""
    return _NOSE_LABELS[shape]


def fin_shape_label(shape: FinShape) -> str:
    """Display name of a fin planform."""
    return _FIN_LABELS[shape]


def transition_shape_label(shape: TransitionShape) -> str:
    """Display name of a transition profile."""
    return _TRANSITION_LABELS[shape]


def rocket_preset_label(preset: RocketPreset) -> str:
    """Display name of a preset layout."""
    return _PRESET_LABELS[preset]


def make_preset_geometry(preset: RocketPreset) -> VehicleGeometry:
    """A fresh airframe geometry for a preset layout."""
    scalars, nose, body, transition_mid, fin = _PRESETS[preset]
    return VehicleGeometry(
        **scalars,
        nose_material=ComponentMaterial.PLA_CF,
        transition_material=ComponentMaterial.ALUMINUM_6061,
        body_material=ComponentMaterial.ALUMINUM_6061,
        fin_material=ComponentMaterial.PLA_CF,
        payload_material=ComponentMaterial.PVC,
        nose_controls=NoseControlVertices(*nose),
        body_controls=BodyControlVertices(*body),
        transition_controls=TransitionControlVertices(transition_mid),
        fin_controls=FinControlVertices(*fin),
    )


def estimate_structure_mass_breakdown(geometry: VehicleGeometry) -> StructureMassBreakdown:
    """Shell-volume estimate of each component's mass."""
    outer_radius_m = geometry.body_diameter_m * 0.5
    inner_radius_m = max(outer_radius_m - geometry.wall_thickness_m, 0.0)
    cylindrical_length_m = max(
        geometry.body_length_m - geometry.nose_length_m - geometry.transition_length_m, 0.2
    )

    body_mass_kg = (
        _shell_cylinder_volume_m3(outer_radius_m, inner_radius_m, cylindrical_length_m)
        * material_definition(geometry.body_material).density_kg_per_m3
    )

    nose_mass_kg = (
        _shell_frustum_volume_m3(outer_radius_m, 0.0, inner_radius_m, 0.0, geometry.nose_length_m)
        * material_definition(geometry.nose_material).density_kg_per_m3
        * 0.82
    )

    transition_outer_aft_radius_m = max(geometry.transition_aft_diameter_m * 0.5, 0.0)
    transition_inner_aft_radius_m = max(transition_outer_aft_radius_m - geometry.wall_thickness_m, 0.0)
    transition_mass_kg = (
        _shell_frustum_volume_m3(
            outer_radius_m,
            transition_outer_aft_radius_m,
            inner_radius_m,
            transition_inner_aft_radius_m,
            geometry.transition_length_m,
        )
        * material_definition(geometry.transition_material).density_kg_per_m3
    )

    controls = geometry.fin_controls
    fin_span_m = geometry.fin_span_m * controls.span_scale
    fin_tip_chord_m = max(geometry.fin_tip_chord_m + controls.tip_te_offset_m, 0.04)
    fin_thickness_m = max(geometry.fin_thickness_m * controls.thickness_scale, 0.002)
    fin_area_single_m2 = 0.5 * (geometry.fin_root_chord_m + fin_tip_chord_m) * fin_span_m
    fin_mass_kg = (
        fin_area_single_m2
        * fin_thickness_m
        * float(geometry.fin_count)
        * material_definition(geometry.fin_material).density_kg_per_m3
    )

    payload_shell_radius_m = max(outer_radius_m * 0.88, 0.01)
    payload_shell_thickness_m = _clamp(geometry.wall_thickness_m * 0.6, 0.001, 0.006)
    payload_shell_inner_radius_m = max(payload_shell_radius_m - payload_shell_thickness_m, 0.0)
    payload_bay_mass_kg = (
        _shell_cylinder_volume_m3(
            payload_shell_radius_m,
            payload_shell_inner_radius_m,
            max(geometry.payload_length_m, 0.04),
        )
        * material_definition(geometry.payload_material).density_kg_per_m3
        * 0.42
    )

    return StructureMassBreakdown(
        nose_mass_kg=nose_mass_kg,
        body_mass_kg=body_mass_kg,
        transition_mass_kg=transition_mass_kg,
        fin_mass_kg=fin_mass_kg,
        payload_bay_mass_kg=payload_bay_mass_kg,
        total_mass_kg=body_mass_kg + nose_mass_kg + transition_mass_kg + fin_mass_kg + payload_bay_mass_kg,
    )


def estimate_structure_mass_kg(geometry: VehicleGeometry) -> float:
    """Total estimated structural mass."""
    return estimate_structure_mass_breakdown(geometry).total_mass_kg


def estimate_dry_mass_kg(geometry: VehicleGeometry, avionics_mass_kg: float) -> float:
    """Structure plus payload plus (non-negative) avionics mass."""
    return estimate_structure_mass_kg(geometry) + geometry.payload_mass_kg + max(avionics_mass_kg, 0.0)


def estimate_component_dynamic_pressure_limit_pa(
    component: ComponentType, geometry: VehicleGeometry
) -> float:
    """Dynamic pressure a component tolerates, clamped to a plausible range."""
    body = material_definition(geometry.body_material)
    nose = material_definition(geometry.nose_material)
    transition = material_definition(geometry.transition_material)
    fins = material_definition(geometry.fin_material)
    payload = material_definition(geometry.payload_material)

    wall_ratio = geometry.wall_thickness_m / max(geometry.body_diameter_m, 0.02)
    fin_thickness_m = max(geometry.fin_thickness_m * geometry.fin_controls.thickness_scale, 0.0015)
    fin_span_m = max(geometry.fin_span_m * geometry.fin_controls.span_scale, 0.04)
    fin_slenderness = fin_thickness_m / fin_span_m

    limits = {
        ComponentType.NOSE_CONE: nose.yield_strength_mpa * 1.0e6
        * (geometry.wall_thickness_m / max(geometry.nose_length_m, 0.08)) * 0.22,
        ComponentType.BODY_TUBE: body.yield_strength_mpa * 1.0e6 * wall_ratio * 0.0105,
        ComponentType.TRANSITION: transition.yield_strength_mpa * 1.0e6 * wall_ratio * 0.0095,
        ComponentType.FIN_SET: fins.youngs_modulus_gpa * 1.0e9 * fin_slenderness * fin_slenderness * 0.00032,
        ComponentType.MOTOR_MOUNT: body.yield_strength_mpa * 1.0e6 * wall_ratio * 0.0125,
        ComponentType.PAYLOAD: payload.yield_strength_mpa * 1.0e6
        * (geometry.wall_thickness_m / max(geometry.payload_length_m, 0.06)) * 0.17,
    }
    return _clamp(limits[component], MIN_DYNAMIC_PRESSURE_LIMIT_PA, MAX_DYNAMIC_PRESSURE_LIMIT_PA)


def estimate_recommended_max_dynamic_pressure_pa(geometry: VehicleGeometry) -> float:
    """The lowest dynamic pressure limit over all components."""
    return min(estimate_component_dynamic_pressure_limit_pa(component, geometry) for component in ComponentType)


def estimate_dynamic_pressure_safety_factor(geometry: VehicleGeometry, dynamic_pressure_pa: float) -> float:
    """Recommended limit divided by the given dynamic pressure (at least 1 Pa)."""
    return estimate_recommended_max_dynamic_pressure_pa(geometry) / max(dynamic_pressure_pa, 1.0)


def estimate_structural_material_assessment(geometry: VehicleGeometry) -> StructuralMaterialAssessment:
    """Mass-weighted density and modulus, with the recommended dynamic pressure limit."""
    masses = estimate_structure_mass_breakdown(geometry)
    total_mass = max(masses.total_mass_kg, 1e-6)
    parts = (
        (geometry.nose_material, masses.nose_mass_kg),
        (geometry.body_material, masses.body_mass_kg),
        (geometry.transition_material, masses.transition_mass_kg),
        (geometry.fin_material, masses.fin_mass_kg),
        (geometry.payload_material, masses.payload_bay_mass_kg),
    )
    weighted_density = sum(material_definition(m).density_kg_per_m3 * mass for m, mass in parts)
    weighted_modulus = sum(material_definition(m).youngs_modulus_gpa * mass for m, mass in parts)
    return StructuralMaterialAssessment(
        equivalent_density_kg_per_m3=weighted_density / total_mass,
        equivalent_modulus_gpa=weighted_modulus / total_mass,
        recommended_max_dynamic_pressure_pa=estimate_recommended_max_dynamic_pressure_pa(geometry),
    )