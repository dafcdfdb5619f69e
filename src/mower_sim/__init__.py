"""Turn-based multi-mower lawn simulation with risk-aware local decisions."""

from .errors import AgentFault, ConfigurationError, InvariantViolation, MowerSimError  # noqa: F401
from .mower import Action, Mower, MowerMove, MowerStrategy, SelfIndex  # noqa: F401
from .policy import ProfileParams, RiskProfile, decide_move, select_profile  # noqa: F401
from .risk import RiskTiers, classify_moves  # noqa: F401
from .scenarios import MowerSpec, ScenarioSpec, load_scenario, parse_scenario, scenario_presets  # noqa: F401
from .simulation import SimConfig, Simulation, SimulationReport  # noqa: F401
from .world import Coordinate, Direction, Lawn, SquareContent  # noqa: F401
