# rocketlab

Physics building blocks for model and research rockets, in pure Python with no
third-party dependencies.

## Modules

- `rocketlab.vectors`: immutable `Vector3` and `Quaternion` (arithmetic operators,
  `magnitude()`, `normalized()`, `Quaternion.conjugate()`), plus `dot`, `cross` and
  `rotate_vector`, which rotates a vector by a quaternion.
- `rocketlab.state`: `FlightState` (position, velocity, attitude, body rates, mass),
  `StateDerivative`, and `integrate_rk4_generic(current_state, evaluator, time_s, dt_s)`,
  one classical fourth-order Runge-Kutta step for any callable
  `evaluator(state, time_s) -> StateDerivative`.
- `rocketlab.units`: tagged values `Seconds`, `Meters`, `Kilograms`, `Newton`,
  `value_of`, and the helpers `clamp_to_range` (raises `ValueError` for an empty range),
  `clamp_finite` (returns the fallback for NaN or infinity) and `clamp_finite_int`.
- `rocketlab.cache`: `TwoLevelCache`, a one-entry L1 in front of a fixed-size
  round-robin L2, with `lookup(key, compute)`, `stats()` and `clear()`; `CacheStats`
  holds the counters and `hit_rate_percent()`.
- `rocketlab.vehicle`: enums for nose, fin and transition shapes, materials, presets and
  component types; dataclasses for the airframe (`VehicleGeometry`), its control
  vertices, free-vertex edits and topology overrides, `RecoverySystem`, `Motor`,
  `MountedMotor`, `MotorCluster` and `VehicleModel`.
- `rocketlab.environment`: `Environment` above a `LaunchSite` with a `SurfaceWeather`:
  humid lapse-rate atmosphere (`air_temperature_k`, `air_pressure_pa`,
  `air_density_kg_per_m3`, `speed_of_sound_mps`), latitude- and altitude-dependent
  `gravity_mps2`, and a power-law wind profile with gusts (`wind_velocity_world_mps`).
  Samples are cached; assigning `launch_site` or `surface_weather` clears the caches.
  `weather_api_query_url()` returns the query string for the selected
  `WeatherDataSource`, and `cache_stats()` reports atmosphere and wind cache usage.
- `rocketlab.design`: material catalogue (`material_definition`,
  `available_component_materials`), display labels, `make_preset_geometry`, shell-volume
  mass estimates (`estimate_structure_mass_breakdown`, `estimate_structure_mass_kg`,
  `estimate_dry_mass_kg`), per-component and overall dynamic-pressure limits, a safety
  factor, and `estimate_structural_material_assessment`.
- `rocketlab.aerodynamics`: propellant mass, centre of gravity, centre of pressure
  (cached per geometry), static margin in calibers, and `compute_aerodynamic_frame`
  for angle of attack and lateral flow direction; `aerodynamics_cache_stats()`.
- `rocketlab.cfd`: `CfdComponentBand`, `classify_band`, `component_area_estimate`,
  `fin_flexibility_factor`, `body_slenderness_factor` and `compute_cfd_augmentation`,
  a heuristic transonic, angle-of-attack and aeroelastic correction returning a
  `CfdAugmentation`; `cfd_cache_stats()`.
- `rocketlab.cfd_field`: `RealTimeCfdField`, a deterministic particle field around the
  vehicle silhouette; `update(state, vehicle, environment, time_s, dt_s)` fills
  `frame`, a `CfdFrameData` with render samples, per-band pressures and flow indicators.

The centre-of-pressure and CFD geometry caches are kept per thread.

## Installation

Install with pip from the project directory. The `test` extra adds pytest for the test
suite in `tests/`.

## Example

```python
from rocketlab.design import make_preset_geometry, estimate_structural_material_assessment
from rocketlab.environment import Environment
from rocketlab.vehicle import RocketPreset

geometry = make_preset_geometry(RocketPreset.HIGH_ALTITUDE)
assessment = estimate_structural_material_assessment(geometry)
print(assessment.recommended_max_dynamic_pressure_pa)

environment = Environment()
print(environment.air_density_kg_per_m3(1000.0))
print(environment.wind_velocity_world_mps(500.0, 3.0))
print(environment.cache_stats())
```

## What it does not do

- There is no complete flight simulation: no thrust, drag or gravity force model, no
  ready-made derivative evaluator for a vehicle, no trajectory runtime or replay, and no
  input validation. `integrate_rk4_generic` integrates whatever evaluator you supply.
- `MotorCluster` only lists mounted motors; it computes no thrust, moment or mass flow.
- `weather_api_query_url()` builds a query string; nothing is fetched over the network.
- No project files, reports or trajectory exports are read or written.
- No graphical interface, mesh generation or rendering; `RealTimeCfdField` produces
  data for a renderer but draws nothing.
- There is no command-line program.