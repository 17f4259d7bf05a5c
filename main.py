# main.py
import argparse
import logging

from config import VARIANTS, DEFAULT_VARIANT
from environment import Point
from simulation.session import SimulationSession

def main(argv=None):
    """Runs a colony headless for a fixed number of ticks and prints where everyone ended up."""
    parser = argparse.ArgumentParser(description="Headless AntMaps colony run.")
    parser.add_argument("--variant", choices=sorted(VARIANTS), default=DEFAULT_VARIANT)
    parser.add_argument("--ticks", type=int, default=50)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--goto", type=float, nargs=2, metavar=("X", "Y"), default=None,
                        help="Send the ants to this point before ticking.")
    parser.add_argument("--add-food", type=float, nargs=2, metavar=("X", "Y"), action="append", default=[])
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    session = SimulationSession(args.variant, seed=args.seed)
    for x, y in args.add_food:
        session.add_item("crumb", Point(x, y))
    if args.goto:
        session.navigate_to(Point(*args.goto))

    print(f"--- AntMaps headless run: variant={args.variant}, seed={session.seed} ---")
    print(f"Scenario: {len(session.ants)} ants, {session.stats()['food_count']} food, {session.stats()['obstacle_count']} obstacles.")

    for _ in range(args.ticks):
        session.tick()

    print(f"\n--- After {args.ticks} ticks ---")
    for ant in session.ants:
        status = "moving" if ant.is_moving else "idle"
        target = f" -> {ant.current_target_id}" if ant.current_target_id else ""
        print(f"  {ant.id}: ({ant.x:.6g}, {ant.y:.6g}) {status}{target}, trail {len(ant.trail)}")
    session.dispose()

if __name__ == "__main__":
    main()
