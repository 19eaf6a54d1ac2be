import pytest

from rocketlab.vectors import Vector3
from rocketlab.vehicle import (
    AerodynamicCoefficients,
    ComponentMaterial,
    ComponentType,
    FreeControlVertex,
    Motor,
    MotorCluster,
    MountedMotor,
    RecoverySystem,
    VehicleGeometry,
    VehicleModel,
)


def make_valid_vehicle():
    return VehicleModel(
        dry_mass_kg=8.0,
        reference_area_m2=0.0085,
        principal_inertia_kgm2=Vector3(1.8, 1.8, 0.08),
        geometry=VehicleGeometry(),
        aerodynamic_coefficients=AerodynamicCoefficients(
            drag_coefficient=0.62,
            normal_force_slope_per_rad=3.4,
            rotational_damping_coefficient=1.1,
        ),
        recovery_system=RecoverySystem(),
        cluster=MotorCluster(),
    )


def test_recovery_system_defaults():
    recovery = RecoverySystem()
    assert recovery.parachute_drag_coefficient == 1.55
    assert recovery.parachute_area_m2 == 0.85
    assert recovery.deployment_altitude_m == 250.0
    assert recovery.deployment_delay_s == 1.2


def test_geometry_defaults():
    geometry = VehicleGeometry()
    assert geometry.wall_thickness_m == 0.003
    assert geometry.payload_length_m == 0.22
    assert geometry.payload_material is ComponentMaterial.PVC
    assert geometry.fin_controls.span_scale == 1.0


@pytest.mark.parametrize("component", list(ComponentType))
def test_vertex_modifiers_are_per_component(component):
    geometry = VehicleGeometry()
    mods = geometry.vertex_modifiers(component)
    assert mods.component_type is component
    mods.modified_vertices.append(FreeControlVertex(vertex_id=3))
    mods.is_active = True
    assert geometry.vertex_modifiers(component).is_active
    others = [geometry.vertex_modifiers(c) for c in ComponentType if c is not component]
    assert all(not other.modified_vertices for other in others)


@pytest.mark.parametrize("component", list(ComponentType))
def test_topology_override_is_stored(component):
    geometry = VehicleGeometry()
    override = geometry.topology_override(component)
    assert override.component_type is component
    override.indices.extend([0, 1, 2])
    assert geometry.topology_override(component).indices == [0, 1, 2]


def test_unknown_component_raises():
    geometry = VehicleGeometry()
    with pytest.raises(KeyError):
        geometry.vertex_modifiers("wing")
    with pytest.raises(KeyError):
        geometry.topology_override("wing")


def test_geometries_do_not_share_modifiers():
    first = VehicleGeometry()
    second = VehicleGeometry()
    first.vertex_modifiers(ComponentType.FIN_SET).is_active = True
    assert not second.vertex_modifiers(ComponentType.FIN_SET).is_active


def test_mounted_motor_defaults_point_along_body_axis():
    mounted = MountedMotor(motor=Motor(max_thrust_n=180.0, burn_time_s=2.4, propellant_mass_kg=0.24))
    assert mounted.thrust_direction_body == Vector3(0.0, 0.0, 1.0)
    assert mounted.failed is False


def test_motor_cluster_is_iterable():
    motors = [MountedMotor(motor=Motor(max_thrust_n=180.0)), MountedMotor(failed=True)]
    cluster = MotorCluster(motors)
    assert len(cluster) == 2
    assert [m.failed for m in cluster] == [False, True]


def test_valid_vehicle_holds_values():
    vehicle = make_valid_vehicle()
    assert vehicle.dry_mass_kg == 8.0
    assert vehicle.principal_inertia_kgm2 == Vector3(1.8, 1.8, 0.08)
    assert len(vehicle.cluster) == 0
    assert vehicle.aerodynamic_coefficients.drag_coefficient == 0.62