# spawn_settings.py

import logging
import constants

logger = logging.getLogger("simple_space")


class SpawnSettings:
    """
    The radius and mass the host uses for the next spawned body.

    Both values move within a configured [min, max] range, the way a slider
    would. A selection of 0 is raised to 1 since bodies need a positive size
    and mass.

    Data Contract:
    - Inputs: config (dict) - The 'simulation' section of the config file.
    - Invariants: 1 <= radius and 1 <= mass; both stay within their ranges
      (apart from the 0 -> 1 adjustment).
    """
    def __init__(self, config: dict = None):
        config = config or {}
        self.radius_min = config.get('radius_min', constants.DEFAULT_RADIUS_MIN)
        self.radius_max = config.get('radius_max', constants.DEFAULT_RADIUS_MAX)
        self.mass_min = config.get('mass_min', constants.DEFAULT_MASS_MIN)
        self.mass_max = config.get('mass_max', constants.DEFAULT_MASS_MAX)
        self._radius_selected = config.get('radius_default', constants.DEFAULT_RADIUS)
        self._mass_selected = config.get('mass_default', constants.DEFAULT_MASS)

        if not self.radius_min <= self._radius_selected <= self.radius_max:
            raise ValueError(f"Default radius {self._radius_selected} outside [{self.radius_min}, {self.radius_max}]")
        if not self.mass_min <= self._mass_selected <= self.mass_max:
            raise ValueError(f"Default mass {self._mass_selected} outside [{self.mass_min}, {self.mass_max}]")

    @property
    def radius(self) -> int:
        return max(1, int(self._radius_selected))

    @property
    def mass(self) -> float:
        return float(max(1, self._mass_selected))

    @property
    def diameter(self) -> int:
        return self.radius * 2

    def adjust_radius(self, step: int):
        self._radius_selected = min(self.radius_max, max(self.radius_min, self._radius_selected + step))
        logger.debug(f"Spawn radius set to {self.radius}")

    def adjust_mass(self, step: int):
        self._mass_selected = min(self.mass_max, max(self.mass_min, self._mass_selected + step))
        logger.debug(f"Spawn mass set to {self.mass}")

    def summary(self, gravity_enabled: bool):
        """Text lines shown in the settings panel."""
        return [
            f"Radius: {self.radius}",
            f"Mass: {self.mass:g}",
            f"Gravity: {'ON' if gravity_enabled else 'OFF'}",
            "",
            "Up/Down: radius",
            "Left/Right: mass",
            "G: toggle gravity",
            "Esc: hide panel",
        ]
