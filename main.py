#!/usr/bin/env python3

import argparse

from immunis.core.data import Side
from immunis.game.combat import CombatEngine, CombatStepper, load_combat_config
from immunis.core.random_source import RandomSource
from immunis.game.entities import UNIT_TEMPLATES, create_roster
from immunis.game.managers import LogManager
from immunis.game.memory import ImmuneMemory


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run a seeded antibody versus pathogen battle from the unit catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py
  python main.py --antibodies lymphocyte_t macrophage --pathogens staphylococcus --seed 7
  python main.py --step --battles 3        # Replay with memory bonuses carried over
  python main.py --list                    # Show catalog keys
        """
    )
    parser.add_argument("--antibodies", nargs="+", default=["lymphocyte_t", "macrophage", "lymphocyte_b"])
    parser.add_argument("--pathogens", nargs="+", default=["influenza", "staphylococcus", "candida"])
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--battles", type=int, default=1, help="Number of consecutive battles")
    parser.add_argument("--config", help="Combat config YAML (default: bundled)")
    parser.add_argument("--step", action="store_true", help="Print the log turn by turn")
    parser.add_argument("--debug", action="store_true", help="Show diagnostic messages")
    parser.add_argument("--save-log", action="store_true", help="Write diagnostics to logs/")
    parser.add_argument("--list", action="store_true", help="List catalog keys and exit")
    return parser.parse_args()


def list_catalog() -> None:
    for key, template in UNIT_TEMPLATES.items():
        print(f"{key:<16} {template.name:<28} {template.kind.name:<15} "
              f"hp={template.max_health} dmg={template.damage} init={template.initiative}")


def main():
    args = parse_args()
    if args.list:
        list_catalog()
        return

    log_manager = LogManager()
    if args.debug:
        log_manager.toggle_debug()

    config = load_combat_config(args.config)
    memory = ImmuneMemory(log_manager)
    rng = RandomSource(args.seed)

    for battle in range(1, args.battles + 1):
        engine = CombatEngine(rng, config, memory, log_manager)
        engine.start_combat(create_roster(args.antibodies), create_roster(args.pathogens))
        stepper = CombatStepper(engine)

        print(f"=== Battle {battle} ===")
        if args.step:
            print(engine.log[0].message)
            for turn in stepper.iter_turns():
                print(f"--- Turn {turn.turn} ---")
                for entry in turn.entries:
                    print(f"  {entry.message}")
                for side in (Side.PLAYER, Side.ENEMY):
                    standing = ", ".join(f"{s.name} {s.hp_current}/{s.hp_max}" for s in engine.living_snapshots(side))
                    print(f"  {side.name.lower()}: {standing or 'none'}")
            result = stepper.finalize_combat()
        else:
            result = stepper.simulate_to_completion()
            for entry in result.log:
                print(f"[T{entry.turn:02d}] {entry.message}")

        print(f"\nOutcome: {result.outcome.name} in {result.turns_elapsed} turns")
        print(f"Rewards: +{result.resources_gained} resources, +{result.research_points_gained} research")
        print(f"Signatures known: {memory.signature_count}, research points: {memory.research_points}")
        if result.significant_events:
            print("Highlights:")
            for event in result.significant_events:
                print(f"  * {event}")
        print()

    for message in log_manager.get_messages():
        print(message.format())

    if args.save_log:
        log_manager.save_log_to_file()


if __name__ == "__main__":
    main()
