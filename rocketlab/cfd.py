"""Geometry-aware aerodynamic corrections: component bands, areas and CFD augmentation."""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field
from enum import Enum

from .aerodynamics import compute_center_of_gravity_from_nose_m, compute_center_of_pressure_from_nose_m
from .cache import CacheStats, TwoLevelCache
from .environment import Environment
from .state import FlightState
from .vectors import Vector3, dot, rotate_vector
from .vehicle import VehicleGeometry, VehicleModel

CFD_CACHE_CAPACITY = 16

_BODY_AXIS = Vector3(0.0, 0.0, 1.0)


class CfdComponentBand(Enum):
    """Longitudinal regions of the airframe that receive separate pressure loads."""

    NOSE_CONE = 0
    BODY_TUBE = 1
    TRANSITION = 2
    FIN_SET = 3
    PAYLOAD = 4
    MOTOR_MOUNT = 5


def _zero_pressures() -> dict[CfdComponentBand, float]:
    return {band: 0.0 for band in CfdComponentBand}


@dataclass
class CfdAugmentation:
    """Extra force, moment and per-component pressure from the flow model."""

    force_world_n: Vector3 = field(default_factory=Vector3)
    moment_body_nm: Vector3 = field(default_factory=Vector3)
    component_pressure_pa: dict[CfdComponentBand, float] = field(default_factory=_zero_pressures)
    shockwave_intensity: float = 0.0
    aeroelastic_response: float = 0.0


@dataclass(frozen=True)
class _CfdGeometryAnalysis:
    component_area_m2: dict[CfdComponentBand, float]
    band_start_m: dict[CfdComponentBand, float]
    band_end_m: dict[CfdComponentBand, float]
    fin_flexibility_factor: float
    body_slenderness_factor: float
    interest_area_m2: float
    payload_end_m: float
    fin_set_end_m: float
    transition_start_m: float
    motor_mount_start_m: float


class _CacheHolder(threading.local):
    def __init__(self) -> None:
        self.cache: TwoLevelCache[tuple, _CfdGeometryAnalysis] = TwoLevelCache(CFD_CACHE_CAPACITY)


_local = _CacheHolder()


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def _geometry_fingerprint(geometry: VehicleGeometry) -> tuple:
    return (
        geometry.body_length_m,
        geometry.body_diameter_m,
        geometry.nose_length_m,
        geometry.transition_length_m,
        geometry.transition_aft_diameter_m,
        geometry.fin_front_from_nose_m,
        geometry.fin_root_chord_m,
        geometry.fin_tip_chord_m,
        geometry.fin_span_m,
        geometry.fin_sweep_length_m,
        geometry.fin_thickness_m,
        geometry.payload_length_m,
        float(geometry.fin_count),
        geometry.fin_controls.span_scale,
        geometry.fin_controls.thickness_scale,
        geometry.transition_shape,
        geometry.fin_shape,
    )


def _analyze(geometry: VehicleGeometry) -> _CfdGeometryAnalysis:
    length = geometry.body_length_m
    diameter = geometry.body_diameter_m
    nose = geometry.nose_length_m
    transition_length = geometry.transition_length_m
    transition_start = length - transition_length
    motor_mount_start = length - max(transition_length, diameter * 0.35)
    payload_end = nose + geometry.payload_length_m
    fin_set_end = geometry.fin_front_from_nose_m + geometry.fin_root_chord_m

    band_start = {
        CfdComponentBand.NOSE_CONE: 0.0,
        CfdComponentBand.BODY_TUBE: nose,
        CfdComponentBand.TRANSITION: transition_start,
        CfdComponentBand.FIN_SET: geometry.fin_front_from_nose_m,
        CfdComponentBand.PAYLOAD: nose,
        CfdComponentBand.MOTOR_MOUNT: motor_mount_start,
    }
    band_end = {
        CfdComponentBand.NOSE_CONE: nose,
        CfdComponentBand.BODY_TUBE: transition_start,
        CfdComponentBand.TRANSITION: length,
        CfdComponentBand.FIN_SET: fin_set_end,
        CfdComponentBand.PAYLOAD: payload_end,
        CfdComponentBand.MOTOR_MOUNT: length,
    }

    controls = geometry.fin_controls
    thickness = max(geometry.fin_thickness_m * controls.thickness_scale, 0.0015)
    span = max(geometry.fin_span_m * controls.span_scale, 0.02)
    radius = diameter * 0.5
    aft_diameter = geometry.transition_aft_diameter_m

    areas = {
        CfdComponentBand.NOSE_CONE: max(0.02, nose * radius),
        CfdComponentBand.BODY_TUBE: max(0.04, length * diameter),
        CfdComponentBand.TRANSITION: max(0.02, transition_length * aft_diameter),
        CfdComponentBand.FIN_SET: max(
            0.02,
            0.5
            * (geometry.fin_root_chord_m + geometry.fin_tip_chord_m)
            * geometry.fin_span_m
            * controls.span_scale
            * float(max(geometry.fin_count, 1)),
        ),
        CfdComponentBand.PAYLOAD: max(0.02, geometry.payload_length_m * diameter * 0.7),
        CfdComponentBand.MOTOR_MOUNT: max(0.01, aft_diameter * aft_diameter * 0.4),
    }

    return _CfdGeometryAnalysis(
        component_area_m2=areas,
        band_start_m=band_start,
        band_end_m=band_end,
        fin_flexibility_factor=_clamp(span / thickness / 42.0, 0.4, 3.5),
        body_slenderness_factor=_clamp(length / max(diameter, 1e-6), 5.0, 28.0),
        interest_area_m2=(
            areas[CfdComponentBand.BODY_TUBE]
            + areas[CfdComponentBand.FIN_SET]
            + areas[CfdComponentBand.NOSE_CONE]
        ),
        payload_end_m=payload_end,
        fin_set_end_m=fin_set_end,
        transition_start_m=transition_start,
        motor_mount_start_m=motor_mount_start,
    )


def _cached_analysis(geometry: VehicleGeometry) -> _CfdGeometryAnalysis:
    return _local.cache.lookup(_geometry_fingerprint(geometry), lambda: _analyze(geometry))


def classify_band(geometry: VehicleGeometry, station_from_nose_m: float) -> CfdComponentBand:
    """The component band that a station measured from the nose tip falls in."""
    analysis = _cached_analysis(geometry)
    if station_from_nose_m <= analysis.band_end_m[CfdComponentBand.NOSE_CONE]:
        return CfdComponentBand.NOSE_CONE
    if station_from_nose_m <= analysis.payload_end_m:
        return CfdComponentBand.PAYLOAD
    if analysis.band_start_m[CfdComponentBand.FIN_SET] <= station_from_nose_m <= analysis.fin_set_end_m:
        return CfdComponentBand.FIN_SET
    if station_from_nose_m >= analysis.transition_start_m:
        return CfdComponentBand.TRANSITION
    if station_from_nose_m >= analysis.motor_mount_start_m:
        return CfdComponentBand.MOTOR_MOUNT
    return CfdComponentBand.BODY_TUBE


def component_area_estimate(geometry: VehicleGeometry, band: CfdComponentBand) -> float:
    """Wetted-area estimate of one component band."""
    return _cached_analysis(geometry).component_area_m2[band]


def fin_flexibility_factor(geometry: VehicleGeometry) -> float:
    """Span-to-thickness flexibility of the fins, clamped to [0.4, 3.5]."""
    return _cached_analysis(geometry).fin_flexibility_factor


def body_slenderness_factor(geometry: VehicleGeometry) -> float:
    """Length-to-diameter ratio of the body, clamped to [5, 28]."""
    return _cached_analysis(geometry).body_slenderness_factor


def _lateral_air_direction_world(state: FlightState, relative_air_velocity_world_mps: Vector3) -> Vector3:
    air_dir = (
        relative_air_velocity_world_mps.normalized()
        if relative_air_velocity_world_mps.magnitude() > 1e-6
        else Vector3()
    )
    body_axis = rotate_vector(state.attitude_body_to_world, _BODY_AXIS)
    lateral = air_dir - dot(air_dir, body_axis) * body_axis
    return lateral.normalized() if lateral.magnitude() > 1e-6 else Vector3()


def compute_cfd_augmentation(
    state: FlightState,
    vehicle: VehicleModel,
    environment: Environment,
    relative_air_velocity_world_mps: Vector3,
    dynamic_pressure_pa: float,
    mach_number: float,
    angle_of_attack_rad: float,
) -> CfdAugmentation:
    """Transonic, angle-of-attack and aeroelastic corrections to the basic aerodynamics."""
    augmentation = CfdAugmentation()
    speed = relative_air_velocity_world_mps.magnitude()
    if speed <= 1e-6 or dynamic_pressure_pa <= 1e-6:
        return augmentation

    analysis = _cached_analysis(vehicle.geometry)
    aoa_abs = abs(angle_of_attack_rad)
    aoa_clamped = _clamp(angle_of_attack_rad, -0.45, 0.45)
    shockwave = _clamp(1.0 - abs(mach_number - 1.0) / 0.22, 0.0, 1.0)
    aeroelastic = _clamp(
        dynamic_pressure_pa / 42000.0 * analysis.fin_flexibility_factor * (0.14 + shockwave * 0.10),
        0.0,
        0.42,
    )
    drag_gain = 0.035 + shockwave * 0.11 + aoa_abs * 0.09 + aeroelastic * 0.22
    lift_gain = 0.018 + shockwave * 0.05 + aeroelastic * 0.08
    air_dir = relative_air_velocity_world_mps.normalized()
    lateral_dir = _lateral_air_direction_world(state, relative_air_velocity_world_mps)
    reference_area = max(vehicle.reference_area_m2, 1e-4)
    load = dynamic_pressure_pa * reference_area

    augmentation.force_world_n = (
        -air_dir * (load * drag_gain) + -lateral_dir * (load * lift_gain * aoa_clamped)
    )

    cp_to_cg_m = compute_center_of_pressure_from_nose_m(vehicle) - compute_center_of_gravity_from_nose_m(
        state, vehicle
    )
    augmentation.moment_body_nm = Vector3(
        0.0, load * cp_to_cg_m * (0.025 + aeroelastic * 0.09) * aoa_clamped, 0.0
    )

    for band in CfdComponentBand:
        if band is CfdComponentBand.NOSE_CONE:
            local_gain = 1.18 + shockwave * 0.28
        elif band is CfdComponentBand.FIN_SET:
            local_gain = 0.94 + aeroelastic * 0.42 + aoa_abs * 0.35
        elif band in (CfdComponentBand.TRANSITION, CfdComponentBand.MOTOR_MOUNT):
            local_gain = 0.88 + shockwave * 0.12
        else:
            local_gain = 0.82
        area_ratio = _clamp(analysis.component_area_m2[band] / max(reference_area, 1e-6), 0.35, 3.8)
        augmentation.component_pressure_pa[band] = dynamic_pressure_pa * local_gain * area_ratio

    augmentation.shockwave_intensity = shockwave
    augmentation.aeroelastic_response = aeroelastic
    return augmentation


def cfd_cache_stats() -> CacheStats:
    """Usage counters of this thread's CFD geometry cache."""
    return _local.cache.stats()