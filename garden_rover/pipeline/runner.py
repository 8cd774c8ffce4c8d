"""
Pipeline Runner Module
======================

Headless mission runner: builds a session per scenario, runs it to
completion and aggregates the results.
"""

import json
import time
import logging
import numpy as np
from pathlib import Path
from typing import Dict, List, Optional, Any, Sequence
from dataclasses import dataclass, field, asdict

from ..config import Config
from ..environment import CoordinateSystem, OccupancyGrid, Coord
from ..exceptions import EmptyPathError
from ..garden import load_template, generate_garden
from ..metrics import (
    TrajectoryMetrics, RunResult, RunStatus, manhattan_length, euclidean_length,
)
from ..motion import MotionModel, Pose
from ..planning import AStarPlanner, MissionSequencer, MissionStatus

logger = logging.getLogger(__name__)


class SimulationSession:
    """
    One independent simulation context.

    Every collaborator gets the same explicitly constructed instances;
    nothing is shared between sessions.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.coordinates = CoordinateSystem.from_config(self.config)
        self.grid = OccupancyGrid(coordinates=self.coordinates)
        self.planner = AStarPlanner(self.grid)
        self.motion_model = MotionModel(self.coordinates, self.config.motion)
        self.sequencer = MissionSequencer(self.grid, self.motion_model, config=self.config)

    def load_template(self, template_id: str) -> List[Coord]:
        """Replace the grid with a template; returns its default route"""
        _, waypoints = load_template(template_id, grid=self.grid)
        return waypoints

    def resize(self, n: int) -> int:
        """Grid resize; the mission pose is left untouched"""
        return self.grid.resize(n)


@dataclass
class ScenarioResult:
    """Result from a single scenario run"""
    name: str
    result: Dict[str, Any] = field(default_factory=dict)
    runtime_s: float = 0.0
    success: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class AggregatedResults:
    """Aggregated results from multiple scenarios"""
    num_scenarios: int = 0
    summary: Dict[str, Any] = field(default_factory=dict)
    failure_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return asdict(self)


class SimulationRunner:
    """
    Runs missions on templates or generated gardens.

    Features:
    - Template routes run as shipped or re-planned around obstacles
    - Seeded random gardens with a planned patrol over every plant
    - Trajectory sampling and JSON export
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize runner.

        Args:
            config: Configuration object (uses default if None)
        """
        self.config = config or Config()

    def new_session(self) -> SimulationSession:
        return SimulationSession(self.config)

    def _verbose(self, verbose: Optional[bool]) -> bool:
        return self.config.verbose if verbose is None else verbose

    def execute(self, session: SimulationSession, waypoints: Sequence[Coord],
                pose: Optional[Pose] = None,
                max_ticks: Optional[int] = None) -> RunResult:
        """Run a mission over ``waypoints`` until it completes or times out"""
        sequencer = session.sequencer
        sequencer.set_path(waypoints)
        if max_ticks is None:
            max_ticks = self.config.mission.max_ticks

        try:
            pose = sequencer.start(pose)
        except EmptyPathError:
            return RunResult(status=RunStatus.EMPTY_PATH)

        trajectory = TrajectoryMetrics(dt=self.config.motion.dt)
        trajectory.add_sample(pose.x, pose.z, pose.velocity)
        for _ in range(max_ticks):
            if sequencer.status != MissionStatus.RUNNING:
                break
            tick = sequencer.tick()
            trajectory.add_sample(pose.x, pose.z, pose.velocity, tick.arrived)

        state = sequencer.state
        status = RunStatus.SUCCESS if state.status == MissionStatus.COMPLETE else RunStatus.TIMEOUT
        return RunResult(
            status=status,
            waypoints=list(sequencer.waypoints),
            ticks=state.tick,
            distance_traveled_m=state.distance_traveled,
            waypoints_reached=state.waypoints_reached,
            scanned=[e.coordinate for e in state.scan_events],
            trajectory=trajectory,
            info={
                'route_cells': manhattan_length(sequencer.waypoints),
                'route_length_m': euclidean_length(sequencer.waypoints,
                                                   self.config.grid.cell_scale),
            },
        )

    def run_template(self, template_id: str, replan: bool = False,
                     verbose: Optional[bool] = None) -> RunResult:
        """
        Run a built-in template.

        Args:
            template_id: Template id
            replan: Route between the template's stops with A* instead of
                driving the shipped waypoint list verbatim
            verbose: Print progress (defaults to config.verbose)
        """
        session = self.new_session()
        waypoints = session.load_template(template_id)

        if replan:
            stops = [w for w in waypoints if session.grid.is_traversable(*w)]
            if len(stops) < len(waypoints):
                logger.warning("Dropped %d template stops on obstacles",
                               len(waypoints) - len(stops))
            waypoints = session.planner.plan_route(stops)
            if not waypoints:
                return RunResult(status=RunStatus.NO_PATH,
                                 info={'template': template_id, 'replan': True})

        if self._verbose(verbose):
            print(f"[{template_id}] {len(waypoints)} waypoints, "
                  f"{len(session.grid.cells_of_type('plant'))} plants")

        result = self.execute(session, waypoints)
        result.info.update({'template': template_id, 'replan': replan,
                            'grid': session.grid.stats()})
        return result

    def run_generated(self, seed: int, grid_size: Optional[int] = None,
                      verbose: Optional[bool] = None) -> RunResult:
        """Generate a garden and patrol every reachable plant in reading order"""
        if grid_size is None:
            grid_size = self.config.grid.grid_size
        garden, start = generate_garden(grid_size, seed)

        session = self.new_session()
        session.grid.load(garden.grid_size, garden.cells)

        route = [start]
        skipped = []
        for plant in garden.plants:
            leg = session.planner.find_path(route[-1], plant)
            if leg:
                route.extend(leg)
            else:
                skipped.append(plant)

        if self._verbose(verbose):
            print(f"[seed {seed}] {len(garden.plants)} plants, "
                  f"{len(skipped)} unreachable, route of {len(route)} cells")

        if len(route) == 1 and garden.plants:
            return RunResult(status=RunStatus.NO_PATH,
                             info={'seed': seed, 'unreachable': [list(p) for p in skipped]})

        result = self.execute(session, route)
        result.info.update({'seed': seed, 'unreachable': [list(p) for p in skipped]})
        return result

    def run_suite(self,
                  num_scenarios: int = 10,
                  seed_base: int = 42,
                  grid_size: Optional[int] = None,
                  output_dir: Optional[str] = None,
                  verbose: Optional[bool] = None) -> AggregatedResults:
        """
        Run a batch of generated gardens.

        Args:
            num_scenarios: Number of scenarios to run
            seed_base: Base seed for reproducibility
            grid_size: Grid size for generated gardens
            output_dir: Directory for per-scenario logs and the summary
            verbose: Print progress (defaults to config.verbose)

        Returns:
            AggregatedResults with all statistics
        """
        scenarios: List[ScenarioResult] = []
        output_path = Path(output_dir) if output_dir else None
        if output_path:
            output_path.mkdir(parents=True, exist_ok=True)

        for i in range(num_scenarios):
            seed = seed_base + i
            scenario = ScenarioResult(name=f'seed_{seed:05d}')
            t0 = time.perf_counter()
            try:
                result = self.run_generated(seed, grid_size)
                scenario.result = result.to_dict()
                scenario.success = result.is_success
            except Exception as e:
                logger.exception("Scenario %s failed", scenario.name)
                scenario.error = str(e)
            scenario.runtime_s = time.perf_counter() - t0
            scenarios.append(scenario)

            if self._verbose(verbose):
                status = "✓" if scenario.success else "✗"
                print(f"[{i + 1}/{num_scenarios}] Seed {seed}: {status} "
                      f"({scenario.runtime_s:.2f}s)")

            if output_path:
                with open(output_path / f'{scenario.name}.json', 'w') as f:
                    json.dump(scenario.to_dict(), f, indent=2, default=str)

        aggregated = self._aggregate_results(scenarios)

        if output_path:
            with open(output_path / 'aggregated_results.json', 'w') as f:
                json.dump(aggregated.to_dict(), f, indent=2, default=str)

        if self._verbose(verbose):
            self._print_summary(aggregated)

        return aggregated

    def _aggregate_results(self, scenarios: List[ScenarioResult]) -> AggregatedResults:
        """Aggregate results from multiple scenarios"""
        agg = AggregatedResults(num_scenarios=len(scenarios))

        distances, ticks, scans, runtimes = [], [], [], []
        failures: Dict[str, int] = {}
        for s in scenarios:
            runtimes.append(s.runtime_s)
            if s.success:
                distances.append(s.result['distance_traveled_m'])
                ticks.append(s.result['ticks'])
                scans.append(s.result['plants_scanned'])
            else:
                key = s.result.get('status', 'error') if s.result else 'error'
                failures[key] = failures.get(key, 0) + 1

        n = len(scenarios)
        agg.summary = {
            'success_rate': len(distances) / n if n > 0 else 0,
            'distance_mean_m': float(np.mean(distances)) if distances else None,
            'distance_std_m': float(np.std(distances)) if distances else None,
            'ticks_mean': float(np.mean(ticks)) if ticks else None,
            'plants_scanned_mean': float(np.mean(scans)) if scans else None,
            'runtime_mean_s': float(np.mean(runtimes)) if runtimes else None,
            'n_success': len(distances),
            'n_total': n,
        }
        agg.failure_counts = failures
        return agg

    def _print_summary(self, agg: AggregatedResults):
        """Print summary table"""
        s = agg.summary
        print("\n" + "=" * 60)
        print("SUITE SUMMARY")
        print("=" * 60)
        print(f"Total scenarios: {agg.num_scenarios}")
        print(f"Success rate:    {s['success_rate'] * 100:.1f}%")
        if s['distance_mean_m'] is not None:
            print(f"Distance:        {s['distance_mean_m']:.2f} ± {s['distance_std_m']:.2f} m")
            print(f"Ticks:           {s['ticks_mean']:.0f}")
            print(f"Plants scanned:  {s['plants_scanned_mean']:.1f}")
        for status, count in agg.failure_counts.items():
            print(f"  {status}: {count}")
        print("=" * 60)
