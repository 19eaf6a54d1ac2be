"""Real-time particle flow field drawn around the vehicle silhouette."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .cfd import CfdComponentBand, classify_band, component_area_estimate, fin_flexibility_factor
from .environment import Environment
from .state import FlightState
from .vectors import Vector3, dot, rotate_vector
from .vehicle import VehicleModel

_BODY_AXIS = Vector3(0.0, 0.0, 1.0)
_DEFAULT_SEED = 0xA341316C
_MASK32 = 0xFFFFFFFF

_GRID_W = 40
_GRID_H = 24

_CENTER_X = 0.48
_CENTER_Y = 0.54
_ROCKET_LENGTH_NORM = 0.62


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _zero_pressures() -> dict[CfdComponentBand, float]:
    return {band: 0.0 for band in CfdComponentBand}


@dataclass(frozen=True)
class CfdParticleRenderSample:
    """One particle as handed to the renderer, in normalised screen coordinates."""

    x_norm: float = 0.0
    y_norm: float = 0.0
    prev_x_norm: float = 0.0
    prev_y_norm: float = 0.0
    kinetic_energy: float = 0.0
    age_s: float = 0.0


@dataclass
class CfdFrameData:
    """Result of one field update: render samples, loads and flow indicators."""

    render_particles: list[CfdParticleRenderSample] = field(default_factory=list)
    component_pressure_pa: dict[CfdComponentBand, float] = field(default_factory=_zero_pressures)
    solver_particle_count: int = 0
    rendered_particle_count: int = 0
    shockwave_intensity: float = 0.0
    aeroelastic_response: float = 0.0


@dataclass(slots=True)
class _Particle:
    x_norm: float = 0.0
    y_norm: float = 0.0
    prev_x_norm: float = 0.0
    prev_y_norm: float = 0.0
    vx_normps: float = 0.0
    vy_normps: float = 0.0
    age_s: float = 0.0
    kinetic_energy: float = 0.0


def _is_recovery_flow(state: FlightState, vehicle: VehicleModel, time_s: float) -> bool:
    recovery = vehicle.recovery_system
    return (
        state.velocity_mps.z < -0.5
        and time_s >= recovery.deployment_delay_s
        and state.position_m.z <= recovery.deployment_altitude_m
    )


class RealTimeCfdField:
    """A deterministic particle field that follows the vehicle's flight condition."""

    def __init__(self, seed: int = _DEFAULT_SEED) -> None:
        self._particles: list[_Particle] = []
        self._frame = CfdFrameData()
        self._random_state = seed & _MASK32

    @property
    def frame(self) -> CfdFrameData:
        """The data produced by the latest update."""
        return self._frame

    def _next_unit_random(self) -> float:
        state = self._random_state
        state ^= (state << 13) & _MASK32
        state ^= state >> 17
        state ^= (state << 5) & _MASK32
        self._random_state = state
        return (state & 0x00FFFFFF) / float(0x01000000)

    def update(
        self,
        state: FlightState,
        vehicle: VehicleModel,
        environment: Environment,
        time_s: float,
        dt_s: float,
    ) -> None:
        """Advance the particle field by one frame for the given flight condition."""
        geometry = vehicle.geometry
        altitude = state.position_m.z
        wind = environment.wind_velocity_world_mps(altitude, time_s)
        relative_air = state.velocity_mps - wind
        air_speed = max(relative_air.magnitude(), 1.0)
        air_density = environment.air_density_kg_per_m3(altitude)
        dynamic_pressure = 0.5 * air_density * air_speed * air_speed
        speed_of_sound = max(environment.speed_of_sound_mps(altitude), 1.0)
        mach = air_speed / speed_of_sound
        recovery = _is_recovery_flow(state, vehicle, time_s)

        body_axis = rotate_vector(state.attitude_body_to_world, _BODY_AXIS)
        aoa_deg = math.degrees(abs(math.asin(_clamp(dot(relative_air.normalized(), body_axis), -1.0, 1.0))))
        interest_area = sum(
            component_area_estimate(geometry, band)
            for band in (CfdComponentBand.BODY_TUBE, CfdComponentBand.FIN_SET, CfdComponentBand.NOSE_CONE)
        )
        flexibility = fin_flexibility_factor(geometry)
        density_scale = _clamp(air_density / 1.225, 0.35, 1.25)
        if recovery:
            scale = _clamp(interest_area * 2.4 + dynamic_pressure / 26000.0 + density_scale * 0.8, 0.7, 3.2)
            target_particles = int(_clamp(_round_half_away(scale * 8000.0), 6000, 28000))
            render_cap = int(_clamp(target_particles // 12, 700, 1800))
        else:
            scale = _clamp(interest_area * 4.0 + dynamic_pressure / 16000.0 + mach * 2.0 + density_scale, 1.0, 10.0)
            target_particles = int(_clamp(_round_half_away(scale * 10000.0), 10000, 100000))
            render_cap = int(_clamp(target_particles // 10, 1200, 5000))

        length_ref = max(geometry.body_length_m, 0.2)
        body_radius = _clamp(geometry.body_diameter_m / length_ref * 2.0, 0.03, 0.16)
        nose_start_x = _CENTER_X - _ROCKET_LENGTH_NORM * 0.45
        body_end_x = _CENTER_X + _ROCKET_LENGTH_NORM * 0.38
        fin_front_x = nose_start_x + (geometry.fin_front_from_nose_m / length_ref) * _ROCKET_LENGTH_NORM
        fin_back_x = fin_front_x + (geometry.fin_root_chord_m / length_ref) * _ROCKET_LENGTH_NORM
        fin_span = _clamp(
            geometry.fin_span_m * geometry.fin_controls.span_scale / length_ref * _ROCKET_LENGTH_NORM * 1.8,
            0.03,
            0.18,
        )
        dt = _clamp(dt_s, 1.0 / 240.0, 1.0 / 30.0)

        particles = self._particles
        if len(particles) > target_particles:
            del particles[target_particles:]
        else:
            particles.extend(_Particle() for _ in range(target_particles - len(particles)))

        frame = self._frame
        pressures = _zero_pressures()
        frame.solver_particle_count = target_particles
        shock = 0.0 if recovery else _clamp(1.0 - abs(mach - 1.0) / 0.22, 0.0, 1.0)
        frame.shockwave_intensity = shock
        frame.aeroelastic_response = _clamp(dynamic_pressure / 42000.0 * flexibility * 0.18, 0.0, 0.35)

        cell_count = _GRID_W * _GRID_H
        cell_counts = [0] * cell_count
        cell_vx = [0.0] * cell_count
        cell_vy = [0.0] * cell_count

        if recovery:
            lane_speed = 0.14 + _clamp(air_speed / 360.0, 0.05, 0.32)
            base_vy = _clamp(aoa_deg / 60.0, -0.18, 0.18) * 0.12
            body_vx_loss = 0.035
            body_vy_gain = 0.09
        else:
            lane_speed = 0.22 + _clamp(air_speed / 280.0, 0.08, 1.1)
            base_vy = _clamp(aoa_deg / 24.0, -0.6, 0.6) * 0.18
            body_vx_loss = 0.08 + shock * 0.05
            body_vy_gain = 0.26 + shock * 0.12
        body_width_sq = max(body_radius * body_radius * 6.0, 1e-6)
        fin_center = body_radius + fin_span * 0.5
        fin_width = max(fin_span, 0.01)
        shock_start = nose_start_x + _ROCKET_LENGTH_NORM * 0.15
        shock_end = nose_start_x + _ROCKET_LENGTH_NORM * 0.32

        def sample_velocity(x: float, y: float) -> tuple[float, float]:
            rel_x = x - _CENTER_X
            rel_y = y - _CENTER_Y
            radial = math.sqrt(rel_x * rel_x + rel_y * rel_y)
            vx = lane_speed
            vy = base_vy
            side = 1.0 if rel_y >= 0.0 else -1.0
            if radial < body_radius * 4.0 and nose_start_x - 0.04 <= x <= body_end_x + 0.06:
                influence = math.exp(-(radial * radial) / body_width_sq)
                vx -= influence * body_vx_loss
                vy += side * influence * body_vy_gain
            if not recovery and fin_front_x <= x <= fin_back_x and abs(rel_y) >= body_radius * 0.7:
                fin_influence = math.exp(-(((abs(rel_y) - fin_center) / fin_width) ** 2))
                vy += side * fin_influence * (0.18 + abs(aoa_deg) / 80.0)
                vx -= fin_influence * 0.04
            if not recovery and shock > 0.02 and shock_start <= x <= shock_end:
                vy += math.sin((y + x * 0.8) * 14.0 + time_s * 2.4) * shock * 0.05
            return vx, vy

        rand = self._next_unit_random
        body_length = geometry.body_length_m
        for particle in particles:
            if particle.age_s <= 0.0 or particle.x_norm > 1.08 or particle.y_norm < -0.08 or particle.y_norm > 1.08:
                if recovery:
                    particle.x_norm = -0.02 - rand() * 0.08
                    particle.y_norm = 0.16 + rand() * 0.68
                else:
                    particle.x_norm = -rand() * 0.24
                    particle.y_norm = 0.08 + rand() * 0.84
                particle.prev_x_norm = particle.x_norm
                particle.prev_y_norm = particle.y_norm
                if recovery:
                    particle.vx_normps = 0.08 + rand() * 0.03
                    particle.vy_normps = (rand() - 0.5) * 0.015
                else:
                    particle.vx_normps = 0.16 + rand() * 0.08
                    particle.vy_normps = (rand() - 0.5) * 0.04
                particle.age_s = 0.2 + rand() * 0.4
                particle.kinetic_energy = 0.0

            particle.prev_x_norm = particle.x_norm
            particle.prev_y_norm = particle.y_norm

            flow_vx, flow_vy = sample_velocity(particle.x_norm, particle.y_norm)
            particle.vx_normps = particle.vx_normps * 0.82 + flow_vx * 0.18
            particle.vy_normps = particle.vy_normps * 0.82 + flow_vy * 0.18
            particle.x_norm += particle.vx_normps * dt
            particle.y_norm += particle.vy_normps * dt
            particle.age_s += dt

            local_rel_y = particle.y_norm - _CENTER_Y
            if nose_start_x <= particle.x_norm <= body_end_x and abs(local_rel_y) <= body_radius:
                sign = 1.0 if local_rel_y >= 0.0 else -1.0
                particle.y_norm = _CENTER_Y + sign * (body_radius + 0.004)
                particle.vy_normps += sign * (0.06 if recovery else 0.18 + shock * 0.08)
                particle.vx_normps *= 0.82 if recovery else 0.72
                station = _clamp(
                    (particle.x_norm - nose_start_x) / max(_ROCKET_LENGTH_NORM, 1e-6), 0.0, 1.0
                ) * body_length
                band = classify_band(geometry, station)
                pressures[band] += dynamic_pressure * (0.6 + 0.5 * rand())

            grid_x = int(_clamp(int(particle.x_norm * _GRID_W), 0, _GRID_W - 1))
            grid_y = int(_clamp(int(particle.y_norm * _GRID_H), 0, _GRID_H - 1))
            index = grid_y * _GRID_W + grid_x
            cell_counts[index] += 1
            cell_vx[index] += particle.vx_normps
            cell_vy[index] += particle.vy_normps
            speed_norm = math.sqrt(particle.vx_normps ** 2 + particle.vy_normps ** 2)
            particle.kinetic_energy = 0.5 * air_density * (speed_norm * air_speed) ** 2

        threshold = 22.0 if recovery else 16.0
        jitter = 0.007 if recovery else 0.015
        drift = 0.0025 if recovery else 0.0055
        for particle in particles:
            grid_x = int(_clamp(int(particle.x_norm * _GRID_W), 0, _GRID_W - 1))
            grid_y = int(_clamp(int(particle.y_norm * _GRID_H), 0, _GRID_H - 1))
            occupancy = 0
            sum_vx = 0.0
            sum_vy = 0.0
            contributing = 0
            for y_offset in (-1, 0, 1):
                neighbor_y = min(max(grid_y + y_offset, 0), _GRID_H - 1)
                for x_offset in (-1, 0, 1):
                    neighbor_x = min(max(grid_x + x_offset, 0), _GRID_W - 1)
                    index = neighbor_y * _GRID_W + neighbor_x
                    occupancy += cell_counts[index]
                    sum_vx += cell_vx[index]
                    sum_vy += cell_vy[index]
                    contributing += 1

            smoothed = occupancy / max(contributing, 1)
            if smoothed > threshold:
                spread = (smoothed - threshold) / threshold
                particle.y_norm += (rand() - 0.5) * jitter * spread
                particle.x_norm -= drift * spread

            if occupancy > 0:
                particle.vx_normps = particle.vx_normps * 0.92 + (sum_vx / occupancy) * 0.08
                particle.vy_normps = particle.vy_normps * 0.92 + (sum_vy / occupancy) * 0.08

        frame.component_pressure_pa = {
            band: value / max(component_area_estimate(geometry, band) * 220.0, 1.0)
            for band, value in pressures.items()
        }

        render_step = max(target_particles / render_cap, 1.0)
        samples: list[CfdParticleRenderSample] = []
        cursor = 0.0
        while len(samples) < render_cap and int(cursor) < len(particles):
            particle = particles[int(cursor)]
            samples.append(
                CfdParticleRenderSample(
                    x_norm=particle.x_norm,
                    y_norm=particle.y_norm,
                    prev_x_norm=particle.prev_x_norm,
                    prev_y_norm=particle.prev_y_norm,
                    kinetic_energy=particle.kinetic_energy,
                    age_s=particle.age_s,
                )
            )
            cursor += render_step
        frame.render_particles = samples
        frame.rendered_particle_count = len(samples)