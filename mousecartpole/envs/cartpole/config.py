"""Mouse-following CartPole configuration."""
import math
from dataclasses import dataclass

from ...config import MCPConfig

INTEGRATORS = ("euler", "semi-implicit-euler")


@dataclass
class MouseCartPoleConfig(MCPConfig):
    """
    Configuration for the mouse-following CartPole environment.

    Extends MCPConfig with CartPole physics, threshold and drawing parameters.

    Physics Parameters:
        gravity: Gravitational acceleration (m/s^2)
        masscart: Mass of the cart (kg)
        masspole: Mass of the pole (kg)
        length: Half-length of the pole (m)
        force_mag: Magnitude of force applied to cart (N)
        tau: Time step between updates (s)
        kinematics_integrator: "euler" or "semi-implicit-euler"
        pole_friction: Damping on the pole's angular velocity

    Thresholds (reported by ``check_thresholds``, never ending an episode):
        x_threshold: Track half-width (m), also the horizontal extent drawn
        theta_threshold_reward: Pole angle bound (radians)
        x_threshold_reward: Cart position band used for reward shaping (m)

    Observation:
        stack_size: Number of most recent states concatenated per observation
    """
    # CartPole physics
    gravity: float = 9.8
    masscart: float = 1.0
    masspole: float = 0.1
    length: float = 0.5  # half-pole length
    force_mag: float = 50.0
    tau: float = 0.02  # seconds between updates
    kinematics_integrator: str = "euler"
    pole_friction: float = 0.1

    # Thresholds
    x_threshold: float = 2.4
    theta_threshold_reward: float = 45 * 2 * math.pi / 360
    x_threshold_reward: float = 0.5

    stack_size: int = 3

    # Drawing (pixels)
    cart_width: float = 60.0
    cart_height: float = 30.0
    cart_corner_radius: float = 5.0
    pole_width: float = 10.0
    pole_height: float = 120.0
    mouse_radius: float = 3.0
    background: str = "#DDDDDD"
    cart_color: str = "BurlyWood"
    pole_color: str = "SaddleBrown"
    mouse_color: str = "red"

    def process_physics(self) -> None:
        if self.kinematics_integrator not in INTEGRATORS:
            raise ValueError(
                f"Unknown kinematics_integrator {self.kinematics_integrator!r}, expected one of {INTEGRATORS}"
            )
        if int(self.stack_size) < 1:
            raise ValueError(f"stack_size must be >= 1, got {self.stack_size}")
        for name in ("masscart", "masspole", "length", "tau"):
            if float(getattr(self, name)) <= 0.0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if float(self.x_threshold) <= 0.0:
            raise ValueError(f"x_threshold must be positive, got {self.x_threshold}")

    def __post_init__(self) -> None:
        super().__post_init__()
        self.process_physics()

    @property
    def total_mass(self) -> float:
        return self.masspole + self.masscart

    @property
    def polemass_length(self) -> float:
        return self.masspole * self.length
