#!/usr/bin/env python3
"""
galaxyscope visualization script

Entry point wiring the configuration, the scene lifecycle and the matplotlib
render surface together.

Usage:
    galaxyscope
    galaxyscope --type barred-spiral --stars 80000
    galaxyscope --type supernova --supernova-mode continuous
    galaxyscope --type quasar --headless 120 --snapshot quasar.png
    galaxyscope --list-types
"""

import argparse
import logging
import sys

from . import config
from .core.galaxy_params import ALL_TYPES, ConfigurationError, CosmicEvent, SupernovaMode, preset
from .core.lifecycle import AnimationClock, FrameContext, SceneManager

logger = logging.getLogger(__name__)


def configure_logging(verbose=False):
    """Human-readable log lines on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def parse_arguments(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='galaxyscope - animated galaxy morphologies and cosmic events',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  galaxyscope --type spiral                    # Default spiral preset
  galaxyscope --type collision --stars 100000  # Two colliding galaxies
  galaxyscope --type supernova --period 6      # Faster periodic explosion
  galaxyscope --list-types                     # List available types
        """
    )

    parser.add_argument('--type', '-t', type=str, default='spiral',
                        help='Galaxy type or cosmic event (default: spiral)')
    parser.add_argument('--stars', '-n', type=int, default=None,
                        help=f'Particle count (preset default, max {config.MAX_STARS_COUNT})')
    parser.add_argument('--radius', '-r', type=float, default=None, help='Galaxy radius')
    parser.add_argument('--branches', '-b', type=int, default=None, help='Number of spiral arms')
    parser.add_argument('--spin', type=float, default=None, help='Arm twist in radians per unit radius')
    parser.add_argument('--inside-color', type=str, default=None, help='Core color (e.g. "#ff6030")')
    parser.add_argument('--outside-color', type=str, default=None, help='Rim color (e.g. "#1b3984")')
    parser.add_argument('--supernova-mode', choices=[m.value for m in SupernovaMode],
                        default=config.supernova_mode, help='Supernova simulation mode')
    parser.add_argument('--period', type=float, default=None,
                        help=f'Supernova loop period in seconds (default: {config.SUPERNOVA_PERIOD})')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible scenes')
    parser.add_argument('--headless', type=int, metavar='FRAMES', default=None,
                        help='Run FRAMES frames without opening a window')
    parser.add_argument('--snapshot', type=str, default=None,
                        help='Save the last frame to this image file')
    parser.add_argument('--list-types', '-l', action='store_true',
                        help='List all galaxy types and cosmic events and exit')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    return parser.parse_args(argv)


def build_params(args):
    """Start from the type's preset and apply CLI overrides."""
    overrides = {
        'stars_count': args.stars,
        'radius': args.radius,
        'branches': args.branches,
        'spin': args.spin,
        'inside_color': args.inside_color,
        'outside_color': args.outside_color,
        'period': args.period,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if overrides.get('stars_count', 0) > config.MAX_STARS_COUNT:
        print(f"Note: stars capped at {config.MAX_STARS_COUNT}")
        overrides['stars_count'] = config.MAX_STARS_COUNT
    return preset(args.type, simulation_mode=args.supernova_mode, **overrides)


class _ManualClock(AnimationClock):
    """Clock driven by the headless loop instead of wall time."""

    def __init__(self):
        self.now = 0.0
        super().__init__(time_source=lambda: self.now)


def main(argv=None):
    """Main function orchestrating the galaxyscope visualization."""
    args = parse_arguments(argv)
    configure_logging(args.verbose)
    config.initialize_global_state()
    config.supernova_mode = args.supernova_mode
    config.random_seed = args.seed

    if args.list_types:
        print("\nAvailable types:")
        print("-" * 40)
        for member in ALL_TYPES:
            kind = 'event' if isinstance(member, CosmicEvent) else 'galaxy'
            print(f"  {member.value:<15} ({kind})")
        print("-" * 40)
        return 0

    try:
        params = build_params(args)
    except ConfigurationError as exc:
        print(f"\nError: {exc}")
        print("Use --list-types to see all available types.")
        return 1

    # Importing pyplot is deferred so --list-types works without a display
    if args.headless is not None:
        import matplotlib
        matplotlib.use('Agg')
    from .visualization.render_surface import MatplotlibSurface

    manager = SceneManager(seed=args.seed)
    try:
        manager.apply(params)
    except ConfigurationError as exc:
        print(f"\nError: {exc}")
        return 1

    clock = _ManualClock() if args.headless is not None else AnimationClock()
    surface = MatplotlibSurface(title=f"{config.WINDOW_TITLE} - {params.type.value}")
    context = FrameContext(manager, clock).install(surface)
    try:
        if args.headless is not None:
            frame_step = config.ANIMATION_INTERVAL / 1000.0
            for frame in range(args.headless):
                clock.now += frame_step
                context(frame)
            logger.info("Ran %d headless frames (t=%.2fs)", args.headless, clock.elapsed())
        else:
            surface.start(context)
        if args.snapshot:
            surface.save(args.snapshot)
            print(f"Snapshot saved to {args.snapshot}")
    finally:
        context.teardown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
