"""Centre of gravity, centre of pressure, static margin and the aerodynamic frame."""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field
from typing import Optional

from .cache import CacheStats, TwoLevelCache
from .state import FlightState
from .vectors import Vector3, dot, rotate_vector
from .vehicle import VehicleGeometry, VehicleModel

AERODYNAMICS_CACHE_CAPACITY = 16

_BODY_AXIS = Vector3(0.0, 0.0, 1.0)
_NOSE_CN_ALPHA = 2.0


@dataclass
class AerodynamicFrame:
    """Body axis, relative airflow and angle of attack at one instant."""

    body_axis_world: Vector3 = field(default_factory=Vector3)
    relative_air_velocity_world_mps: Vector3 = field(default_factory=Vector3)
    lateral_air_direction_world: Vector3 = field(default_factory=Vector3)
    speed_mps: float = 0.0
    angle_of_attack_rad: float = 0.0


class _CacheHolder(threading.local):
    def __init__(self) -> None:
        self.cache: TwoLevelCache[tuple, float] = TwoLevelCache(AERODYNAMICS_CACHE_CAPACITY)


_local = _CacheHolder()


def _divide(numerator: float, denominator: float) -> float:
    """Floating-point division that yields inf or NaN instead of raising on zero."""
    if denominator == 0.0:
        if numerator == 0.0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _geometry_fingerprint(geometry: VehicleGeometry) -> tuple:
    return (
        geometry.body_length_m,
        geometry.body_diameter_m,
        geometry.nose_length_m,
        geometry.fin_front_from_nose_m,
        geometry.fin_root_chord_m,
        geometry.fin_tip_chord_m,
        geometry.fin_span_m,
        geometry.fin_sweep_length_m,
        geometry.fin_thickness_m,
        float(geometry.fin_count),
        geometry.fin_controls.span_scale,
        geometry.fin_controls.thickness_scale,
        geometry.nose_cone_shape,
        geometry.fin_shape,
    )


def _analyze_center_of_pressure(geometry: VehicleGeometry) -> float:
    radius_m = geometry.body_diameter_m * 0.5
    nose_cp_m = 0.6666666666666666 * geometry.nose_length_m

    root = geometry.fin_root_chord_m
    tip = geometry.fin_tip_chord_m
    chord_sum = root + tip
    fin_mid_chord_m = 0.5 * chord_sum
    fin_planform_area_m2 = 0.5 * chord_sum * geometry.fin_span_m
    semispan_ratio = _divide(geometry.fin_span_m + radius_m, geometry.body_diameter_m)
    chord_ratio = _divide(2.0 * fin_mid_chord_m, chord_sum)
    fin_cn_alpha = (4.0 * float(geometry.fin_count) * semispan_ratio * semispan_ratio) / (
        1.0 + math.sqrt(1.0 + chord_ratio * chord_ratio)
    )

    sweep_le_m = geometry.fin_sweep_length_m + 0.5 * (tip - root)
    fin_cp_relative_to_le_m = (sweep_le_m / 3.0) * _divide(root + 2.0 * tip, chord_sum) + (
        1.0 / 6.0
    ) * _divide(root * root + root * tip + tip * tip, chord_sum)
    fin_cp_m = geometry.fin_front_from_nose_m + fin_cp_relative_to_le_m

    total_cn_alpha = _NOSE_CN_ALPHA + fin_cn_alpha
    if total_cn_alpha <= 0.0 or fin_planform_area_m2 <= 0.0:
        return nose_cp_m
    return (_NOSE_CN_ALPHA * nose_cp_m + fin_cn_alpha * fin_cp_m) / total_cn_alpha


def compute_current_propellant_mass_kg(state: FlightState, vehicle: VehicleModel) -> float:
    """Mass above the dry mass, never negative."""
    return max(0.0, state.mass_kg - vehicle.dry_mass_kg)


def compute_center_of_gravity_from_nose_m(state: FlightState, vehicle: VehicleModel) -> float:
    """Mass-weighted centre of gravity of structure and remaining propellant."""
    propellant_mass_kg = compute_current_propellant_mass_kg(state, vehicle)
    total_mass_kg = max(state.mass_kg, 1e-9)
    geometry = vehicle.geometry
    return (
        vehicle.dry_mass_kg * geometry.structure_cg_from_nose_m
        + propellant_mass_kg * geometry.propellant_cg_from_nose_m
    ) / total_mass_kg


def compute_center_of_pressure_from_nose_m(vehicle: VehicleModel) -> float:
    """Barrowman-style centre of pressure of nose and fins, memoised per geometry."""
    geometry = vehicle.geometry
    return _local.cache.lookup(
        _geometry_fingerprint(geometry), lambda: _analyze_center_of_pressure(geometry)
    )


def compute_static_margin_calibers(state: FlightState, vehicle: VehicleModel) -> float:
    """Distance from centre of gravity to centre of pressure, in body diameters."""
    cp_m = compute_center_of_pressure_from_nose_m(vehicle)
    cg_m = compute_center_of_gravity_from_nose_m(state, vehicle)
    return (cp_m - cg_m) / max(vehicle.geometry.body_diameter_m, 1e-9)


def compute_aerodynamic_frame(
    state: FlightState,
    relative_air_velocity_world_mps: Optional[Vector3] = None,
) -> AerodynamicFrame:
    """Angle of attack and lateral flow direction; airflow defaults to minus the velocity."""
    if relative_air_velocity_world_mps is None:
        relative_air_velocity_world_mps = state.velocity_mps * -1.0

    frame = AerodynamicFrame(
        body_axis_world=rotate_vector(state.attitude_body_to_world, _BODY_AXIS).normalized(),
        relative_air_velocity_world_mps=relative_air_velocity_world_mps,
    )
    frame.speed_mps = relative_air_velocity_world_mps.magnitude()
    if frame.speed_mps <= 1e-6:
        frame.angle_of_attack_rad = 0.0
        return frame

    airflow_direction = relative_air_velocity_world_mps / frame.speed_mps
    alignment = max(-1.0, min(dot(frame.body_axis_world, airflow_direction), 1.0))
    frame.angle_of_attack_rad = math.acos(alignment)

    axial_component = dot(airflow_direction, frame.body_axis_world) * frame.body_axis_world
    frame.lateral_air_direction_world = (airflow_direction - axial_component).normalized()
    return frame


def aerodynamics_cache_stats() -> CacheStats:
    """Usage counters of this thread's centre-of-pressure cache."""
    return _local.cache.stats()