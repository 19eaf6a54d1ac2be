import math
from dataclasses import replace

import pytest

from rocketlab.design import (
    MAX_DYNAMIC_PRESSURE_LIMIT_PA,
    MIN_DYNAMIC_PRESSURE_LIMIT_PA,
    available_component_materials,
    estimate_component_dynamic_pressure_limit_pa,
    estimate_dry_mass_kg,
    estimate_dynamic_pressure_safety_factor,
    estimate_recommended_max_dynamic_pressure_pa,
    estimate_structural_material_assessment,
    estimate_structure_mass_breakdown,
    estimate_structure_mass_kg,
    fin_shape_label,
    make_preset_geometry,
    material_definition,
    nose_cone_shape_label,
    rocket_preset_label,
    transition_shape_label,
)
from rocketlab.vehicle import (
    ComponentMaterial,
    ComponentType,
    FinShape,
    NoseConeShape,
    RocketPreset,
    TransitionShape,
    VehicleGeometry,
)


def test_material_catalogue_values():
    pla = material_definition(ComponentMaterial.PLA_CF)
    assert pla.label == "PLA-CF"
    assert pla.density_kg_per_m3 == 1240.0
    alu = material_definition(ComponentMaterial.ALUMINUM_6061)
    assert alu.yield_strength_mpa == 276.0
    assert material_definition(ComponentMaterial.CARBON_FIBER).youngs_modulus_gpa == 70.0


def test_available_materials_lists_all_seven_in_order():
    materials = available_component_materials()
    assert len(materials) == 7
    assert materials[0] is ComponentMaterial.PLA_CF
    assert materials[-1] is ComponentMaterial.PHENOLIC


def test_labels():
    assert nose_cone_shape_label(NoseConeShape.LD_HAACK) == "LD-Haack"
    assert nose_cone_shape_label(NoseConeShape.TANGENT_OGIVE) == "Tangent Ogive"
    assert fin_shape_label(FinShape.AIRFOIL) == "Airfoil"
    assert transition_shape_label(TransitionShape.CURVED) == "Curved"
    assert rocket_preset_label(RocketPreset.MINIMUM_DIAMETER) == "Minimum Diameter"


def test_preset_geometry_values():
    starter = make_preset_geometry(RocketPreset.RESEARCH_STARTER)
    assert starter.body_length_m == 3.0
    assert starter.fin_count == 4
    assert starter.nose_cone_shape is NoseConeShape.LD_HAACK
    high = make_preset_geometry(RocketPreset.HIGH_ALTITUDE)
    assert high.transition_shape is TransitionShape.CURVED
    assert high.fin_controls.span_scale == 0.96
    assert high.nose_controls.mid_radius_scale == 0.94
    heavy = make_preset_geometry(RocketPreset.HEAVY_LIFT)
    assert heavy.fin_shape is FinShape.ELLIPTICAL
    assert heavy.body_controls.mid_radius_scale == 1.03


def test_preset_geometry_is_fresh_each_call():
    first = make_preset_geometry(RocketPreset.SPORT_TRAINER)
    first.fin_controls.span_scale = 5.0
    second = make_preset_geometry(RocketPreset.SPORT_TRAINER)
    assert second.fin_controls.span_scale == 1.0


@pytest.mark.parametrize("preset", list(RocketPreset))
def test_breakdown_total_is_sum_of_parts(preset):
    masses = estimate_structure_mass_breakdown(make_preset_geometry(preset))
    parts = (
        masses.nose_mass_kg
        + masses.body_mass_kg
        + masses.transition_mass_kg
        + masses.fin_mass_kg
        + masses.payload_bay_mass_kg
    )
    assert masses.total_mass_kg == pytest.approx(parts)
    assert masses.total_mass_kg > 0.0
    assert estimate_structure_mass_kg(make_preset_geometry(preset)) == pytest.approx(masses.total_mass_kg)


def test_zero_length_transition_has_no_mass():
    masses = estimate_structure_mass_breakdown(make_preset_geometry(RocketPreset.MINIMUM_DIAMETER))
    assert masses.transition_mass_kg == 0.0


def test_body_mass_scales_with_density():
    geometry = make_preset_geometry(RocketPreset.RESEARCH_STARTER)
    light = replace(geometry, body_material=ComponentMaterial.CARBON_FIBER)
    ratio = (
        estimate_structure_mass_breakdown(light).body_mass_kg
        / estimate_structure_mass_breakdown(geometry).body_mass_kg
    )
    assert ratio == pytest.approx(1600.0 / 2700.0)


def test_dry_mass_adds_payload_and_clamps_negative_avionics():
    geometry = make_preset_geometry(RocketPreset.RESEARCH_STARTER)
    structure = estimate_structure_mass_kg(geometry)
    assert estimate_dry_mass_kg(geometry, 0.5) == pytest.approx(structure + 0.9 + 0.5)
    assert estimate_dry_mass_kg(geometry, -3.0) == pytest.approx(structure + 0.9)


@pytest.mark.parametrize("preset", list(RocketPreset))
def test_recommended_limit_is_minimum_of_components(preset):
    geometry = make_preset_geometry(preset)
    limits = [estimate_component_dynamic_pressure_limit_pa(c, geometry) for c in ComponentType]
    for limit in limits:
        assert MIN_DYNAMIC_PRESSURE_LIMIT_PA <= limit <= MAX_DYNAMIC_PRESSURE_LIMIT_PA
    assert estimate_recommended_max_dynamic_pressure_pa(geometry) == min(limits)


def test_limits_clamped_for_extreme_geometry():
    thick = VehicleGeometry(body_diameter_m=0.02, wall_thickness_m=0.02)
    assert estimate_component_dynamic_pressure_limit_pa(ComponentType.BODY_TUBE, thick) == 250000.0
    thin = VehicleGeometry(body_diameter_m=1.0, wall_thickness_m=0.0001)
    assert estimate_component_dynamic_pressure_limit_pa(ComponentType.BODY_TUBE, thin) == 8000.0


def test_safety_factor():
    geometry = make_preset_geometry(RocketPreset.HEAVY_LIFT)
    recommended = estimate_recommended_max_dynamic_pressure_pa(geometry)
    assert estimate_dynamic_pressure_safety_factor(geometry, 2000.0) == pytest.approx(recommended / 2000.0)
    assert estimate_dynamic_pressure_safety_factor(geometry, 0.0) == pytest.approx(recommended)


def test_structural_assessment_is_repeatable_on_default_geometry():
    geometry = VehicleGeometry()
    first = estimate_structural_material_assessment(geometry)
    second = estimate_structural_material_assessment(geometry)
    assert math.isclose(first.equivalent_modulus_gpa, second.equivalent_modulus_gpa, abs_tol=1e-9)
    assert math.isclose(first.equivalent_density_kg_per_m3, second.equivalent_density_kg_per_m3, abs_tol=1e-9)
    assert math.isclose(
        first.recommended_max_dynamic_pressure_pa, second.recommended_max_dynamic_pressure_pa, abs_tol=1e-9
    )


def test_default_geometry_assessment_is_payload_material():
    # Only the payload bay has mass on an empty geometry, so its material dominates.
    assessment = estimate_structural_material_assessment(VehicleGeometry())
    assert assessment.equivalent_density_kg_per_m3 == pytest.approx(1400.0)
    assert assessment.equivalent_modulus_gpa == pytest.approx(3.0)


def test_assessment_density_within_material_bounds():
    geometry = make_preset_geometry(RocketPreset.RESEARCH_STARTER)
    assessment = estimate_structural_material_assessment(geometry)
    used = [
        material_definition(m).density_kg_per_m3
        for m in (
            geometry.nose_material,
            geometry.body_material,
            geometry.transition_material,
            geometry.fin_material,
            geometry.payload_material,
        )
    ]
    assert min(used) <= assessment.equivalent_density_kg_per_m3 <= max(used)
    assert assessment.recommended_max_dynamic_pressure_pa == estimate_recommended_max_dynamic_pressure_pa(geometry)