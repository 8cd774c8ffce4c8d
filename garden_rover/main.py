#!/usr/bin/env python3
"""
Garden Rover Simulation - Main Entry Point
==========================================

Usage:
    # List built-in garden templates
    garden-rover templates

    # Plan a single A* route on a template
    garden-rover plan --template small_home --start=-2,2 --goal=2,-2

    # Drive a template's patrol route to completion
    garden-rover run --template commercial --replan --output run.json

    # Run a batch of seeded random gardens
    garden-rover suite --num_scenarios 20 --seed_base 42 --output results/

From Python:
    from garden_rover import SimulationRunner, Config

    runner = SimulationRunner(Config())
    result = runner.run_template('small_home')
"""

import argparse
import json
import logging
import sys


def run_templates(args):
    """List built-in templates"""
    from garden_rover.garden import all_templates

    print(f"{'Id':<16} {'Name':<26} {'Level':<14} {'Plants':>6} {'Obst.':>6} {'Route':>6}")
    print("-" * 78)
    for template in all_templates():
        s = template.summary()
        print(f"{s['id']:<16} {s['name']:<26} {s['difficulty']:<14} "
              f"{s['plants']:>6} {s['obstacles']:>6} {s['waypoints']:>6}")
    return 0


def run_plan(args):
    """Plan one A* route between two cells of a template"""
    from garden_rover.environment import as_coord
    from garden_rover.garden import load_template
    from garden_rover.metrics import count_turns
    from garden_rover.planning import AStarPlanner

    grid, _ = load_template(args.template)
    planner = AStarPlanner(grid)
    start, goal = as_coord(args.start), as_coord(args.goal)

    path = planner.find_path(start, goal)
    stats = planner.last_stats

    print("\n" + "=" * 60)
    print(f"PLAN {start} -> {goal} on '{args.template}'")
    print("=" * 60)
    if not path:
        print(f"✗ No path ({stats.reason}), {stats.nodes_expanded} nodes expanded")
        print("=" * 60)
        return 1

    print(f"✓ {len(path)} steps, {count_turns([start] + path)} turns, "
          f"{stats.nodes_expanded} nodes expanded")
    print("  " + " ".join(f"({x},{y})" for x, y in path))
    print("=" * 60)
    return 0


def run_mission(args):
    """Run a template's patrol route to completion"""
    from garden_rover import Config, SimulationRunner

    config = Config()
    config.verbose = args.verbose
    if args.speed is not None:
        config.motion.speed_multiplier = args.speed
        config.validate()

    runner = SimulationRunner(config)
    result = runner.run_template(args.template, replan=args.replan)

    print("\n" + "=" * 60)
    print(f"MISSION RESULT ({args.template})")
    print("=" * 60)
    status_icon = "✓" if result.is_success else "✗"
    print(f"{status_icon} Status:     {result.status}")
    print(f"  Waypoints:  {result.waypoints_reached}/{len(result.waypoints)}")
    print(f"  Distance:   {result.distance_traveled_m:.2f} m")
    print(f"  Ticks:      {result.ticks} ({result.ticks * config.motion.dt:.1f} s)")
    print(f"  Scanned:    {len(result.scanned)} plants")
    print("=" * 60)

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(result.to_dict(), f, indent=2, default=str)
        print(f"\nResult saved to: {args.output}")

    return 0 if result.is_success else 1


def run_suite(args):
    """Run a batch of generated gardens"""
    from garden_rover import Config, SimulationRunner

    runner = SimulationRunner(Config(verbose=args.verbose))
    results = runner.run_suite(
        num_scenarios=args.num_scenarios,
        seed_base=args.seed_base,
        grid_size=args.grid_size,
        output_dir=args.output,
        verbose=True,
    )

    if args.output:
        print(f"\nResults saved to: {args.output}")

    return 0 if results.summary.get('n_success') == results.num_scenarios else 1


def main(argv=None):
    from garden_rover.config import Config

    defaults = Config()

    parser = argparse.ArgumentParser(
        description='Garden Rover Simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('templates', help='List built-in garden templates')

    plan_parser = subparsers.add_parser('plan', help='Plan a single A* route')
    plan_parser.add_argument('--template', type=str, default=defaults.mission.default_template,
                             help='Template id')
    plan_parser.add_argument('--start', type=str, required=True, help='Start cell as x,y')
    plan_parser.add_argument('--goal', type=str, required=True, help='Goal cell as x,y')

    run_parser = subparsers.add_parser('run', help='Run a template mission')
    run_parser.add_argument('--template', type=str, default=defaults.mission.default_template,
                            help='Template id')
    run_parser.add_argument('--replan', action='store_true',
                            help='Route between template stops with A*')
    run_parser.add_argument('--speed', type=float, help='Speed multiplier')
    run_parser.add_argument('--output', type=str, help='Write the result as JSON')

    suite_parser = subparsers.add_parser('suite', help='Run generated garden scenarios')
    suite_parser.add_argument('--num_scenarios', type=int, default=10, help='Number of scenarios')
    suite_parser.add_argument('--seed_base', type=int, default=42, help='Base seed')
    suite_parser.add_argument('--grid_size', type=int, help='Grid size')
    suite_parser.add_argument('--output', type=str, help='Output directory')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )

    if args.command is None:
        parser.print_help()
        return 1

    try:
        if args.command == 'templates':
            return run_templates(args)
        elif args.command == 'plan':
            return run_plan(args)
        elif args.command == 'run':
            return run_mission(args)
        elif args.command == 'suite':
            return run_suite(args)
    except (KeyError, ValueError) as e:
        print(f"Error: {e}")
        return 2

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
