import math

import pytest

from rocketlab.state import FlightState, StateDerivative, integrate_rk4_generic
from rocketlab.vectors import Quaternion, Vector3


def _initial_state():
    return FlightState(
        position_m=Vector3(1.0, -2.0, 100.0),
        velocity_mps=Vector3(3.0, 0.5, 20.0),
        attitude_body_to_world=Quaternion(),
        angular_velocity_body_radps=Vector3(0.1, 0.0, -0.2),
        mass_kg=12.0,
    )


def test_zero_derivative_leaves_state_unchanged():
    state = _initial_state()
    result = integrate_rk4_generic(state, lambda s, t: StateDerivative(), 0.0, 0.25)
    assert result == state


def test_evaluator_is_sampled_at_rk4_times():
    times = []

    def evaluator(state, time_s):
        times.append(time_s)
        return StateDerivative(mass_flow_kgps=time_s)

    result = integrate_rk4_generic(_initial_state(), evaluator, 2.0, 0.5)
    assert times == pytest.approx([2.0, 2.25, 2.25, 2.5])
    # Mass rate equal to time integrates exactly: (2.5**2 - 2.0**2) / 2 = 1.125.
    assert result.mass_kg == pytest.approx(12.0 + 1.125)


def test_constant_acceleration_is_integrated_exactly():
    state = _initial_state()
    accel = Vector3(0.5, -1.0, -9.80665)
    dt = 0.3

    def evaluator(s, t):
        return StateDerivative(velocity_mps=s.velocity_mps, acceleration_mps2=accel)

    result = integrate_rk4_generic(state, evaluator, 0.0, dt)
    expected_position = state.position_m + state.velocity_mps * dt + accel * (0.5 * dt * dt)
    expected_velocity = state.velocity_mps + accel * dt
    assert tuple(result.position_m) == pytest.approx(tuple(expected_position))
    assert tuple(result.velocity_mps) == pytest.approx(tuple(expected_velocity))


def test_exponential_mass_decay_is_close_to_exact_solution():
    state = _initial_state()
    rate = 0.8
    dt = 0.05

    def evaluator(s, t):
        return StateDerivative(mass_flow_kgps=-rate * s.mass_kg)

    result = integrate_rk4_generic(state, evaluator, 0.0, dt)
    assert result.mass_kg == pytest.approx(state.mass_kg * math.exp(-rate * dt), rel=1e-8)


def test_attitude_rate_is_added_componentwise():
    state = _initial_state()
    dt = 0.5
    rate = Quaternion(0.0, 0.0, 0.0, 1.0)
    result = integrate_rk4_generic(
        state, lambda s, t: StateDerivative(attitude_rate=rate), 0.0, dt
    )
    assert result.attitude_body_to_world.w == pytest.approx(state.attitude_body_to_world.w)
    assert result.attitude_body_to_world.z == pytest.approx(dt)


def test_constant_angular_acceleration_and_mass_flow():
    state = _initial_state()
    dt = 0.1
    angular = Vector3(0.0, 2.0, 0.0)
    flow = -0.2

    def evaluator(s, t):
        return StateDerivative(angular_acceleration_body_radps2=angular, mass_flow_kgps=flow)

    result = integrate_rk4_generic(state, evaluator, 0.0, dt)
    assert tuple(result.angular_velocity_body_radps) == pytest.approx(
        tuple(state.angular_velocity_body_radps + angular * dt)
    )
    assert result.mass_kg == pytest.approx(state.mass_kg + flow * dt)


def test_integration_does_not_mutate_input():
    state = _initial_state()
    snapshot = FlightState(**vars(state))
    integrate_rk4_generic(
        state, lambda s, t: StateDerivative(acceleration_mps2=Vector3(0.0, 0.0, -9.8)), 0.0, 0.1
    )
    assert state == snapshot


def test_state_derivative_arithmetic_round_trip():
    d = StateDerivative(
        velocity_mps=Vector3(1.0, 2.0, 3.0),
        acceleration_mps2=Vector3(-1.0, 0.5, 0.0),
        attitude_rate=Quaternion(0.1, 0.2, 0.3, 0.4),
        angular_acceleration_body_radps2=Vector3(0.0, 0.0, 1.0),
        mass_flow_kgps=-0.3,
    )
    total = (d + d) / 2.0
    assert tuple(total.velocity_mps) == pytest.approx(tuple(d.velocity_mps))
    assert total.mass_flow_kgps == pytest.approx(d.mass_flow_kgps)
    assert 3.0 * d == d * 3.0