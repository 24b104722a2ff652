"""Mouse-following CartPole environment."""
import logging
import math
import numbers
from typing import Callable, Sequence

import torch
from tensordict import TensorDict

from ...env import MCPEnv
from ...history import StateHistory
from .config import MouseCartPoleConfig
from .renderer import MouseCartPoleRenderer

logger = logging.getLogger(__name__)

STATE_DIM = 5
LEFT, RIGHT = 0, 1
INIT_HALF_RANGE = 0.005

UniformSampler = Callable[[float, float], float]


def normalize_angle(theta: torch.Tensor) -> torch.Tensor:
    """Wrap angles into (-pi, pi]."""
    wrapped = math.pi - torch.remainder(math.pi - theta, 2 * math.pi)
    # remainder can round up to exactly 2*pi for inputs a hair above pi
    return torch.where(wrapped <= -math.pi, wrapped + 2 * math.pi, wrapped)


class MouseCartPoleEnv(MCPEnv):
    """
    CartPole environment with a mouse-following input channel.

    A pole is attached by a damped joint to a cart moving along a track. The
    host feeds the horizontal mouse position in with ``update_mouse_position``;
    it becomes the fifth state component and is carried through the physics
    step untouched.

    State:
        - x: Cart position
        - x_dot: Cart velocity
        - theta: Pole angle (radians, 0 = upright, wrapped into (-pi, pi])
        - theta_dot: Pole angular velocity
        - mouse_x: Horizontal mouse target (set only by the host)

    Observation:
        The last ``stack_size`` states, oldest first, flattened to
        ``stack_size * 5`` values.

    Action Space:
        - 0: Push cart to the left
        - 1: Push cart to the right

    Termination:
        None. Thresholds are only reported by ``check_thresholds``.
    """

    config_cls = MouseCartPoleConfig

    def __init__(
        self,
        renderer: MouseCartPoleRenderer | None = None,
        cfg: MouseCartPoleConfig | dict | None = None,
        sampler: UniformSampler | None = None,
        **cfg_overrides,
    ):
        super().__init__(renderer=renderer, cfg=cfg, **cfg_overrides)
        cfg = self.cfg

        # Physics parameters
        self.gravity = float(cfg.gravity)
        self.masscart = float(cfg.masscart)
        self.masspole = float(cfg.masspole)
        self.total_mass = self.masspole + self.masscart
        self.length = float(cfg.length)
        self.polemass_length = self.masspole * self.length
        self.force_mag = float(cfg.force_mag)
        self.tau = float(cfg.tau)
        self.kinematics_integrator = str(cfg.kinematics_integrator)
        self.pole_friction = float(cfg.pole_friction)

        # Thresholds
        self.x_threshold = float(cfg.x_threshold)
        self.theta_threshold_reward = float(cfg.theta_threshold_reward)
        self.x_threshold_reward = float(cfg.x_threshold_reward)

        self.stack_size = int(cfg.stack_size)
        self.dtype = torch.float64

        self._generator = torch.Generator(device="cpu")
        self.set_seed(cfg.seed)
        self._sampler: UniformSampler = sampler if sampler is not None else self._uniform

        self._state: torch.Tensor | None = None
        self._elapsed_steps = 0
        self.state_history = StateHistory(self.stack_size, STATE_DIM)

        self.set_default_specs(
            direct_obs_dim=self.stack_size * STATE_DIM,
            actions=2,
            discrete_actions=True,
            dtype=self.dtype,
        )

    @property
    def state(self) -> torch.Tensor | None:
        return None if self._state is None else self._state.clone()

    @property
    def elapsed_steps(self) -> int:
        return self._elapsed_steps

    def set_seed(self, seed: int | None) -> None:
        if seed is None:
            self._generator.seed()
        else:
            self._generator.manual_seed(int(seed))

    def _uniform(self, low: float, high: float) -> float:
        sample = torch.empty((), dtype=self.dtype).uniform_(low, high, generator=self._generator)
        return float(sample)

    def _sample_initial_state(self) -> torch.Tensor:
        x = self._sampler(-INIT_HALF_RANGE, INIT_HALF_RANGE)
        theta = self._sampler(-INIT_HALF_RANGE, INIT_HALF_RANGE)
        # mouse_x starts at 0 until the host reports a pointer position
        return torch.tensor([x, 0.0, theta, 0.0, 0.0], dtype=self.dtype, device=self.device)

    def _coerce_state(self, values: Sequence[float] | torch.Tensor) -> torch.Tensor:
        state = torch.as_tensor(values, dtype=self.dtype, device=self.device).flatten().clone()
        if state.numel() == STATE_DIM - 1:
            state = torch.cat([state, state.new_zeros(1)])
        elif state.numel() != STATE_DIM:
            raise ValueError(f"initial_state needs 4 or 5 values, got {state.numel()}")
        return state

    def _resolve_action(self, action) -> int | None:
        if isinstance(action, torch.Tensor):
            if action.numel() != 1 or action.dtype == torch.bool:
                return None
            action = action.item()
        if isinstance(action, bool) or not isinstance(action, numbers.Real):
            return None
        if action == LEFT:
            return LEFT
        if action == RIGHT:
            return RIGHT
        return None

    def _accelerations(self, state: torch.Tensor, action: int) -> tuple[torch.Tensor, torch.Tensor]:
        """Return (xacc, thetaacc) for ``state`` under ``action``."""
        _, _, theta, theta_dot, _ = state.unbind(-1)
        force = self.force_mag if action == RIGHT else -self.force_mag
        costheta = torch.cos(theta)
        sintheta = torch.sin(theta)

        temp = (force + self.polemass_length * theta_dot.pow(2) * sintheta) / self.total_mass
        thetaacc = (
            self.gravity * sintheta
            - costheta * temp
            - self.pole_friction * theta_dot / self.polemass_length
        ) / (self.length * (4.0 / 3.0 - self.masspole * costheta.pow(2) / self.total_mass))
        xacc = temp - self.polemass_length * thetaacc * costheta / self.total_mass
        return xacc, thetaacc

    def _dynamics(self, state: torch.Tensor, action: int) -> torch.Tensor:
        """Advance ``state`` by one step of ``tau``."""
        x, x_dot, theta, theta_dot, mouse_x = state.unbind(-1)
        xacc, thetaacc = self._accelerations(state, action)

        if self.kinematics_integrator == "euler":
            x = x + self.tau * x_dot
            x_dot = x_dot + self.tau * xacc
            theta = theta + self.tau * theta_dot
            theta_dot = theta_dot + self.tau * thetaacc
        else:  # semi-implicit euler
            x_dot = x_dot + self.tau * xacc
            x = x + self.tau * x_dot
            theta_dot = theta_dot + self.tau * thetaacc
            theta = theta + self.tau * theta_dot

        theta = normalize_angle(theta)
        return torch.stack([x, x_dot, theta, theta_dot, mouse_x], dim=-1)

    def _observation(self) -> TensorDict:
        return TensorDict(
            {
                "observation": self.get_stacked_observation(),
                "step_count": torch.tensor(self._elapsed_steps, dtype=torch.long, device=self.device),
            },
            batch_size=torch.Size([]),
        )

    def reset(self, initial_state: Sequence[float] | torch.Tensor | None = None) -> TensorDict:
        """
        Start a new episode.

        Args:
            initial_state: Optional 4 or 5 values to start from instead of
                sampling. A missing mouse target starts at 0.

        Returns:
            TensorDict with the stacked "observation" and "step_count"
        """
        if initial_state is None:
            state = self._sample_initial_state()
        else:
            state = self._coerce_state(initial_state)

        self._state = state
        self._elapsed_steps = 0
        self.state_history.fill(state)
        logger.debug("reset to state %s", state.tolist())
        return self._observation()

    @torch.no_grad()
    def step(self, action) -> TensorDict | None:
        """
        Apply one push and integrate one time step.

        Returns the stacked observation, or None (with an error logged) when
        called before ``reset`` or with an action other than 0 or 1.
        """
        if self._state is None:
            logger.error("Call reset before using step method.")
            return None

        resolved = self._resolve_action(action)
        if resolved is None:
            logger.error("Action %r is not valid, choose 0 for left and 1 for right.", action)
            return None

        self._state = self._dynamics(self._state, resolved)
        self._elapsed_steps += 1
        self.state_history.push(self._state)
        return self._observation()

    def get_stacked_observation(self) -> torch.Tensor:
        if len(self.state_history) == 0:
            return torch.zeros(0, dtype=self.dtype, device=self.device)
        return self.state_history.stacked()

    def update_mouse_position(self, mouse_x: float) -> None:
        """Overwrite the live mouse target. Past history entries keep their values."""
        if self._state is None:
            return
        self._state[4] = float(mouse_x)
        if self._renderer is not None:
            self._renderer.draw_mouse_indicator(float(mouse_x))

    def check_thresholds(self) -> dict[str, bool] | None:
        if self._state is None:
            return None
        x, _, theta = self._state[:3].tolist()
        return {
            "x_out_of_bounds": abs(x) > self.x_threshold,
            "theta_out_of_bounds": abs(theta) > self.theta_threshold_reward,
            "x_in_reward_band": abs(x) <= self.x_threshold_reward,
        }

    def render(self, timestep: float = 20) -> None:
        """Ask the renderer to ease cart and pole to the current state over ``timestep`` ms."""
        if self._state is None or self._renderer is None:
            return
        x, _, theta = self._state[:3].tolist()
        self._renderer.animate_to(x, theta, timestep)

    def close(self) -> None:
        self._state = None
        self.state_history.clear()
        super().close()
