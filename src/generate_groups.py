import argparse
import logging
import os
import random
import sys

import yaml

from tourney.config import BASE_DIR, load_settings
from tourney.errors import TournamentError
from tourney.tournament import Tournament


def load_entrants(file_path):
    """Read entrant names from a YAML list (or a mapping with an 'entrants' list)."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or []
    if isinstance(data, dict):
        data = data.get('entrants', [])
    return [str(name) for name in data if name is not None and str(name).strip()]


def create_tournament(names, name='Tournament', mode='solo', settings=None, seed=None):
    tournament = Tournament(name, mode=mode, settings=settings,
                            rng=random.Random(seed) if seed is not None else None)
    for entrant_name in names:
        tournament.add_entrant(entrant_name)
    tournament.start_group_stage()
    return tournament


def format_tournament(tournament):
    """Printable lines: each group with its schedule, or the direct bracket."""
    names = {entrant.id: entrant.name for entrant in tournament.entrants}
    lines = []
    if not tournament.groups:
        for node in tournament.bracket:
            lines.append(f"# {node.label}")
            lines.append(f"{names[node.entrant1_id]} vs {names[node.entrant2_id]}")
        return lines

    first_group = True
    for index, group in enumerate(tournament.groups):
        if not first_group:
            lines.append("")
        lines.append(f"# {group.name or f'Group {index + 1}'}")
        for round_number, matches in tournament.get_group_schedule(group.id).items():
            lines.append(f"Round {round_number}")
            for match in matches:
                lines.append(f"  {names[match.entrant1_id]} vs {names[match.entrant2_id]}")
        first_group = False
    return lines


def main(argv=None):
    parser = argparse.ArgumentParser(description="Split entrants into groups and print the round-robin schedule.")
    parser.add_argument('entrants_file', nargs='?',
                        default=os.path.join(BASE_DIR, 'data', 'entrants.yaml'),
                        help="YAML list of entrant names")
    parser.add_argument('--name', default='Tournament', help="Tournament name")
    parser.add_argument('--mode', default='solo', choices=['solo', 'team'])
    parser.add_argument('--seed', type=int, default=None, help="Seed for a repeatable group draw")
    parser.add_argument('--settings', default=None, help="Settings YAML file")
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    if not os.path.exists(args.entrants_file):
        print(f"Error: entrants file not found: {args.entrants_file}", file=sys.stderr)
        return 1

    names = load_entrants(args.entrants_file)
    try:
        tournament = create_tournament(names, name=args.name, mode=args.mode,
                                       settings=load_settings(args.settings), seed=args.seed)
    except TournamentError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for line in format_tournament(tournament):
        print(line)
    return 0


if __name__ == '__main__':
    sys.exit(main())
