import math

import pytest

from rocketlab.aerodynamics import (
    aerodynamics_cache_stats,
    compute_aerodynamic_frame,
    compute_center_of_gravity_from_nose_m,
    compute_center_of_pressure_from_nose_m,
    compute_current_propellant_mass_kg,
    compute_static_margin_calibers,
)
from rocketlab.design import make_preset_geometry
from rocketlab.state import FlightState
from rocketlab.vectors import Quaternion, Vector3
from rocketlab.vehicle import (
    AerodynamicCoefficients,
    MotorCluster,
    RecoverySystem,
    RocketPreset,
    VehicleGeometry,
    VehicleModel,
)


def make_valid_vehicle(geometry=None):
    return VehicleModel(
        dry_mass_kg=8.0,
        reference_area_m2=0.0085,
        principal_inertia_kgm2=Vector3(1.8, 1.8, 0.08),
        geometry=geometry if geometry is not None else VehicleGeometry(),
        aerodynamic_coefficients=AerodynamicCoefficients(
            drag_coefficient=0.62,
            normal_force_slope_per_rad=3.4,
            rotational_damping_coefficient=1.1,
        ),
        recovery_system=RecoverySystem(),
        cluster=MotorCluster(),
    )


def test_repeated_cp_queries_record_cache_reuse():
    vehicle = make_valid_vehicle()
    before = aerodynamics_cache_stats()
    cp_first = compute_center_of_pressure_from_nose_m(vehicle)
    cp_second = compute_center_of_pressure_from_nose_m(vehicle)
    after = aerodynamics_cache_stats()
    assert cp_first == pytest.approx(cp_second, abs=1e-9)
    assert after.l1_hits + after.l2_hits > before.l1_hits + before.l2_hits


def test_propellant_mass_is_excess_over_dry_mass():
    vehicle = make_valid_vehicle()
    assert compute_current_propellant_mass_kg(FlightState(mass_kg=10.0), vehicle) == pytest.approx(2.0)
    assert compute_current_propellant_mass_kg(FlightState(mass_kg=5.0), vehicle) == 0.0


def test_center_of_gravity_at_dry_mass_is_structure_cg():
    geometry = VehicleGeometry(structure_cg_from_nose_m=1.45, propellant_cg_from_nose_m=2.4)
    vehicle = make_valid_vehicle(geometry)
    cg = compute_center_of_gravity_from_nose_m(FlightState(mass_kg=8.0), vehicle)
    assert cg == pytest.approx(1.45)


def test_center_of_gravity_moves_toward_propellant():
    geometry = VehicleGeometry(structure_cg_from_nose_m=1.0, propellant_cg_from_nose_m=2.0)
    vehicle = make_valid_vehicle(geometry)
    cg = compute_center_of_gravity_from_nose_m(FlightState(mass_kg=10.0), vehicle)
    assert cg == pytest.approx(1.2)


def test_default_geometry_cp_falls_back_to_nose():
    vehicle = make_valid_vehicle()
    assert compute_center_of_pressure_from_nose_m(vehicle) == 0.0


def test_finless_vehicle_cp_is_nose_cp():
    geometry = make_preset_geometry(RocketPreset.RESEARCH_STARTER)
    geometry.fin_count = 0
    vehicle = make_valid_vehicle(geometry)
    cp = compute_center_of_pressure_from_nose_m(vehicle)
    assert cp == pytest.approx(geometry.nose_length_m * 2.0 / 3.0)


def test_preset_cp_lies_between_nose_and_fin_trailing_edge():
    geometry = make_preset_geometry(RocketPreset.RESEARCH_STARTER)
    vehicle = make_valid_vehicle(geometry)
    cp = compute_center_of_pressure_from_nose_m(vehicle)
    assert geometry.nose_length_m * 2.0 / 3.0 < cp
    assert cp < geometry.fin_front_from_nose_m + geometry.fin_root_chord_m


def test_static_margin_matches_cp_and_cg():
    geometry = make_preset_geometry(RocketPreset.RESEARCH_STARTER)
    vehicle = make_valid_vehicle(geometry)
    state = FlightState(mass_kg=8.0)
    margin = compute_static_margin_calibers(state, vehicle)
    cp = compute_center_of_pressure_from_nose_m(vehicle)
    cg = compute_center_of_gravity_from_nose_m(state, vehicle)
    assert margin == pytest.approx((cp - cg) / geometry.body_diameter_m)
    assert margin > 0.0


def test_finless_vehicle_is_unstable():
    geometry = make_preset_geometry(RocketPreset.RESEARCH_STARTER)
    geometry.fin_count = 0
    vehicle = make_valid_vehicle(geometry)
    assert compute_static_margin_calibers(FlightState(mass_kg=8.0), vehicle) < 0.0


def test_frame_defaults_to_reversed_velocity():
    state = FlightState(velocity_mps=Vector3(0.0, 0.0, 10.0))
    frame = compute_aerodynamic_frame(state)
    assert frame.relative_air_velocity_world_mps == Vector3(-0.0, -0.0, -10.0)
    assert frame.speed_mps == pytest.approx(10.0)
    assert frame.angle_of_attack_rad == pytest.approx(math.pi)
    assert frame.lateral_air_direction_world == Vector3()


def test_frame_with_crossflow_has_right_angle():
    frame = compute_aerodynamic_frame(FlightState(), Vector3(3.0, 0.0, 0.0))
    assert frame.angle_of_attack_rad == pytest.approx(math.pi / 2.0)
    assert frame.lateral_air_direction_world.x == pytest.approx(1.0)
    assert frame.body_axis_world.z == pytest.approx(1.0)


def test_frame_at_rest_has_zero_angle():
    frame = compute_aerodynamic_frame(FlightState())
    assert frame.speed_mps == 0.0
    assert frame.angle_of_attack_rad == 0.0


def test_frame_follows_attitude():
    half = math.sqrt(0.5)
    state = FlightState(attitude_body_to_world=Quaternion(half, half, 0.0, 0.0))
    frame = compute_aerodynamic_frame(state, Vector3(0.0, -5.0, 0.0))
    assert frame.body_axis_world.y == pytest.approx(-1.0)
    assert frame.angle_of_attack_rad == pytest.approx(0.0, abs=1e-6)


def test_cache_levels_count_misses_and_hits():
    geometry_a = make_preset_geometry(RocketPreset.SPORT_TRAINER)
    geometry_a.body_length_m = 7.123
    geometry_b = make_preset_geometry(RocketPreset.SPORT_TRAINER)
    geometry_b.body_length_m = 7.456
    vehicle_a = make_valid_vehicle(geometry_a)
    vehicle_b = make_valid_vehicle(geometry_b)

    before = aerodynamics_cache_stats()
    compute_center_of_pressure_from_nose_m(vehicle_a)
    compute_center_of_pressure_from_nose_m(vehicle_a)
    compute_center_of_pressure_from_nose_m(vehicle_b)
    compute_center_of_pressure_from_nose_m(vehicle_a)
    after = aerodynamics_cache_stats()

    assert after.misses - before.misses == 2
    assert after.writes - before.writes == 2
    assert after.l1_hits - before.l1_hits == 1
    assert after.l2_hits - before.l2_hits == 1
    assert after.l2_capacity == 16
    assert 1 <= after.l2_valid_entries <= 16