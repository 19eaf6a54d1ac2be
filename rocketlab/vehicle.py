"""Vehicle geometry, materials, recovery system and motor cluster description."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from .vectors import Vector3


class NoseConeShape(Enum):
    """Profile of the nose cone."""

    CONICAL = 0
    TANGENT_OGIVE = 1
    PARABOLIC = 2
    LD_HAACK = 3


class FinShape(Enum):
    """Planform of the fins."""

    TRAPEZOIDAL = 0
    ELLIPTICAL = 1
    AIRFOIL = 2


class TransitionShape(Enum):
    """Profile of the aft transition."""

    CONICAL = 0
    CURVED = 1


class ComponentMaterial(Enum):
    """Materials a component can be built from."""

    PLA_CF = 0
    ALUMINUM_6061 = 1
    PVC = 2
    FIBERGLASS = 3
    CARBON_FIBER = 4
    BIRCH_PLYWOOD = 5
    PHENOLIC = 6


class RocketPreset(Enum):
    """Predefined vehicle layouts."""

    RESEARCH_STARTER = 0
    SPORT_TRAINER = 1
    HIGH_ALTITUDE = 2
    MINIMUM_DIAMETER = 3
    HEAVY_LIFT = 4


class ComponentType(Enum):
    """Structural components of the vehicle."""

    NOSE_CONE = 0
    BODY_TUBE = 1
    TRANSITION = 2
    FIN_SET = 3
    MOTOR_MOUNT = 4
    PAYLOAD = 5


@dataclass
class FreeControlVertex:
    """A freely movable control vertex in component-local coordinates."""

    vertex_id: int = 0
    base_position_m: Vector3 = field(default_factory=Vector3)
    offset_m: Vector3 = field(default_factory=Vector3)
    influence_radius_m: float = 0.02
    locked: bool = False


@dataclass
class ComponentVertexModifiers:
    """Free-form vertex edits applied to one component."""

    component_type: ComponentType = ComponentType.NOSE_CONE
    modified_vertices: list[FreeControlVertex] = field(default_factory=list)
    is_active: bool = False


@dataclass
class ComponentTopologyOverride:
    """A persisted replacement mesh for one component."""

    component_type: ComponentType = ComponentType.NOSE_CONE
    vertex_positions_body_m: list[Vector3] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    is_active: bool = False


@dataclass
class NoseControlVertices:
    mid_radius_scale: float = 1.0
    shoulder_radius_scale: float = 1.0


@dataclass
class BodyControlVertices:
    fore_radius_scale: float = 1.0
    mid_radius_scale: float = 1.0
    aft_radius_scale: float = 1.0


@dataclass
class TransitionControlVertices:
    mid_radius_scale: float = 1.0


@dataclass
class FinControlVertices:
    tip_le_offset_m: float = 0.0
    tip_te_offset_m: float = 0.0
    span_scale: float = 1.0
    thickness_scale: float = 1.0


def _default_vertex_mods() -> dict[ComponentType, ComponentVertexModifiers]:
    return {component: ComponentVertexModifiers(component_type=component) for component in ComponentType}


def _default_topology_overrides() -> dict[ComponentType, ComponentTopologyOverride]:
    return {component: ComponentTopologyOverride(component_type=component) for component in ComponentType}


@dataclass
class VehicleGeometry:
    """Dimensions, shapes and materials of the airframe."""

    body_length_m: float = 0.0
    body_diameter_m: float = 0.0
    wall_thickness_m: float = 0.003
    nose_length_m: float = 0.0
    nose_cone_shape: NoseConeShape = NoseConeShape.CONICAL
    nose_material: ComponentMaterial = ComponentMaterial.PLA_CF

    transition_length_m: float = 0.0
    transition_aft_diameter_m: float = 0.0
    transition_shape: TransitionShape = TransitionShape.CONICAL
    transition_material: ComponentMaterial = ComponentMaterial.ALUMINUM_6061

    body_material: ComponentMaterial = ComponentMaterial.ALUMINUM_6061

    fin_front_from_nose_m: float = 0.0
    fin_root_chord_m: float = 0.0
    fin_tip_chord_m: float = 0.0
    fin_span_m: float = 0.0
    fin_sweep_length_m: float = 0.0
    fin_thickness_m: float = 0.0
    fin_shape: FinShape = FinShape.TRAPEZOIDAL
    fin_material: ComponentMaterial = ComponentMaterial.PLA_CF
    fin_count: int = 0

    payload_length_m: float = 0.22
    payload_mass_kg: float = 0.9
    payload_material: ComponentMaterial = ComponentMaterial.PVC

    nose_controls: NoseControlVertices = field(default_factory=NoseControlVertices)
    body_controls: BodyControlVertices = field(default_factory=BodyControlVertices)
    transition_controls: TransitionControlVertices = field(default_factory=TransitionControlVertices)
    fin_controls: FinControlVertices = field(default_factory=FinControlVertices)

    structure_cg_from_nose_m: float = 0.0
    propellant_cg_from_nose_m: float = 0.0

    vertex_mods: dict[ComponentType, ComponentVertexModifiers] = field(default_factory=_default_vertex_mods)
    topology_overrides: dict[ComponentType, ComponentTopologyOverride] = field(
        default_factory=_default_topology_overrides
    )

    def vertex_modifiers(self, component: ComponentType) -> ComponentVertexModifiers:
        """The free-vertex edits of a component; raises KeyError for an unknown component."""
        return self.vertex_mods[component]

    def topology_override(self, component: ComponentType) -> ComponentTopologyOverride:
        """The topology override of a component; raises KeyError for an unknown component."""
        return self.topology_overrides[component]


@dataclass
class AerodynamicCoefficients:
    drag_coefficient: float = 0.0
    normal_force_slope_per_rad: float = 0.0
    rotational_damping_coefficient: float = 0.0


@dataclass
class RecoverySystem:
    """Parachute properties and deployment conditions."""

    parachute_drag_coefficient: float = 1.55
    parachute_area_m2: float = 0.85
    deployment_altitude_m: float = 250.0
    deployment_delay_s: float = 1.2


@dataclass
class Motor:
    max_thrust_n: float = 0.0
    burn_time_s: float = 0.0
    propellant_mass_kg: float = 0.0


@dataclass
class MountedMotor:
    """A motor with its mount position and thrust axis in body coordinates."""

    motor: Motor = field(default_factory=Motor)
    mount_position_m: Vector3 = field(default_factory=Vector3)
    thrust_direction_body: Vector3 = field(default_factory=lambda: Vector3(0.0, 0.0, 1.0))
    failed: bool = False


@dataclass
class MotorCluster:
    """The set of motors mounted on the vehicle."""

    motors: list[MountedMotor] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.motors)

    def __iter__(self) -> Iterator[MountedMotor]:
        return iter(self.motors)


@dataclass
class VehicleModel:
    """Mass properties, geometry, aerodynamics, recovery and propulsion of a vehicle."""

    dry_mass_kg: float = 0.0
    reference_area_m2: float = 0.0
    principal_inertia_kgm2: Vector3 = field(default_factory=Vector3)
    geometry: VehicleGeometry = field(default_factory=VehicleGeometry)
    aerodynamic_coefficients: AerodynamicCoefficients = field(default_factory=AerodynamicCoefficients)
    recovery_system: RecoverySystem = field(default_factory=RecoverySystem)
    cluster: MotorCluster = field(default_factory=MotorCluster)