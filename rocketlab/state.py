"""Rigid-body flight state, its time derivative and a fourth-order Runge-Kutta step."""

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Real
from typing import Callable

from .vectors import Quaternion, Vector3


@dataclass
class FlightState:
    """Position, velocity, attitude, body rates and mass of the vehicle."""

    position_m: Vector3 = field(default_factory=Vector3)
    velocity_mps: Vector3 = field(default_factory=Vector3)
    attitude_body_to_world: Quaternion = field(default_factory=Quaternion)
    angular_velocity_body_radps: Vector3 = field(default_factory=Vector3)
    mass_kg: float = 0.0


@dataclass
class StateDerivative:
    """Time derivative of a FlightState."""

    velocity_mps: Vector3 = field(default_factory=Vector3)
    acceleration_mps2: Vector3 = field(default_factory=Vector3)
    attitude_rate: Quaternion = field(default_factory=lambda: Quaternion(0.0, 0.0, 0.0, 0.0))
    angular_acceleration_body_radps2: Vector3 = field(default_factory=Vector3)
    mass_flow_kgps: float = 0.0

    def __add__(self, other: object) -> StateDerivative:
        if not isinstance(other, StateDerivative):
            return NotImplemented
        return StateDerivative(
            velocity_mps=self.velocity_mps + other.velocity_mps,
            acceleration_mps2=self.acceleration_mps2 + other.acceleration_mps2,
            attitude_rate=self.attitude_rate + other.attitude_rate,
            angular_acceleration_body_radps2=(
                self.angular_acceleration_body_radps2 + other.angular_acceleration_body_radps2
            ),
            mass_flow_kgps=self.mass_flow_kgps + other.mass_flow_kgps,
        )

    def __mul__(self, scalar: object) -> StateDerivative:
        if not isinstance(scalar, Real):
            return NotImplemented
        return StateDerivative(
            velocity_mps=self.velocity_mps * scalar,
            acceleration_mps2=self.acceleration_mps2 * scalar,
            attitude_rate=self.attitude_rate * scalar,
            angular_acceleration_body_radps2=self.angular_acceleration_body_radps2 * scalar,
            mass_flow_kgps=self.mass_flow_kgps * scalar,
        )

    __rmul__ = __mul__

    def __truediv__(self, scalar: object) -> StateDerivative:
        if not isinstance(scalar, Real):
            return NotImplemented
        return StateDerivative(
            velocity_mps=self.velocity_mps / scalar,
            acceleration_mps2=self.acceleration_mps2 / scalar,
            attitude_rate=self.attitude_rate / scalar,
            angular_acceleration_body_radps2=self.angular_acceleration_body_radps2 / scalar,
            mass_flow_kgps=self.mass_flow_kgps / scalar,
        )


StateDerivativeEvaluator = Callable[[FlightState, float], StateDerivative]


def _advance(state: FlightState, derivative: StateDerivative, dt_s: float) -> FlightState:
    return FlightState(
        position_m=state.position_m + derivative.velocity_mps * dt_s,
        velocity_mps=state.velocity_mps + derivative.acceleration_mps2 * dt_s,
        attitude_body_to_world=state.attitude_body_to_world + derivative.attitude_rate * dt_s,
        angular_velocity_body_radps=(
            state.angular_velocity_body_radps + derivative.angular_acceleration_body_radps2 * dt_s
        ),
        mass_kg=state.mass_kg + derivative.mass_flow_kgps * dt_s,
    )


def integrate_rk4_generic(
    current_state: FlightState,
    evaluator: StateDerivativeEvaluator,
    time_s: float,
    dt_s: float,
) -> FlightState:
    """Advance a state by one classical RK4 step using the given derivative evaluator."""
    half_dt = dt_s * 0.5
    k1 = evaluator(current_state, time_s)
    k2 = evaluator(_advance(current_state, k1, half_dt), time_s + half_dt)
    k3 = evaluator(_advance(current_state, k2, half_dt), time_s + half_dt)
    k4 = evaluator(_advance(current_state, k3, dt_s), time_s + dt_s)
    average = (k1 + 2.0 * k2 + 2.0 * k3 + k4) / 6.0
    return _advance(current_state, average, dt_s)