"""
Tournament aggregate: registration, group stage, playoffs.

Every operation checks all of its preconditions before changing
anything, so a failed call leaves the tournament exactly as it was.
A single Tournament is not thread-safe; callers serialize access per
tournament (see repository.py).
"""
import logging
import random
from datetime import datetime
from typing import Dict, List, Optional

from . import advancement
from .brackets import build_bracket, qualifier_count, qualifiers_per_group, seed_qualifiers, select_topology, Topology
from .config import get_default_settings, setting_for_mode, validate_settings
from .errors import (InsufficientEntrantsError, InvalidInputError, InvalidStateError,
                     NotFoundError)
from .groups import BYE_PADDING, build_groups
from .models import (BracketMatch, COMPLETED, Entrant, FINAL, GameResult, Group, GROUP, Match,
                     new_id, PLAYOFFS, REGISTRATION, TOURNAMENT_STATES)
from .ranking import rank_entrants, rank_groups, recompute_stats
from .round_robin import schedule_group

logger = logging.getLogger(__name__)


class Tournament:
    def __init__(self, name, mode='solo', settings=None, rng=None, tournament_id=None):
        self.settings = settings or get_default_settings()
        validate_settings(self.settings)
        # Validates the mode up front
        setting_for_mode(self.settings, 'min_entrants', mode)
        self.id = tournament_id or new_id()
        self.name = name
        self.mode = mode
        self.rng = rng or random.Random()
        self.state = REGISTRATION
        self.entrants: List[Entrant] = []
        self.groups: List[Group] = []
        self.matches: List[Match] = []
        self.bracket: List[BracketMatch] = []
        self.created_at = datetime.now().isoformat(timespec='seconds')
        self.started_at = None
        self.completed_at = None

    def __repr__(self):
        return f"Tournament(name={self.name}, state={self.state}, entrants={len(self.entrants)})"

    # -- lookups ---------------------------------------------------------

    def _require_state(self, *states):
        if self.state not in states:
            raise InvalidStateError(f"Operation requires state {' or '.join(states)}, tournament is {self.state}")

    def get_entrant(self, entrant_id) -> Entrant:
        for entrant in self.entrants:
            if entrant.id == entrant_id:
                return entrant
        raise NotFoundError(f"Entrant not found: {entrant_id}")

    def get_group(self, group_id) -> Group:
        for group in self.groups:
            if group.id == group_id:
                return group
        raise NotFoundError(f"Group not found: {group_id}")

    def get_match(self, match_id) -> Match:
        for match in self.matches:
            if match.id == match_id:
                return match
        raise NotFoundError(f"Match not found: {match_id}")

    def get_bracket_match(self, match_id) -> BracketMatch:
        return advancement.find_bracket_match(self.bracket, match_id)

    @property
    def min_entrants(self) -> int:
        return setting_for_mode(self.settings, 'min_entrants', self.mode)

    @property
    def series_length(self) -> int:
        return setting_for_mode(self.settings, 'series_length', self.mode)

    # -- registration ----------------------------------------------------

    def add_entrant(self, name) -> Entrant:
        self._require_state(REGISTRATION)
        name = (name or '').strip()
        if not name:
            raise InvalidInputError("Name cannot be empty")
        entrant = Entrant(name)
        self.entrants.append(entrant)
        logger.debug(f"Added entrant {name} to {self.name}")
        return entrant

    def remove_entrant(self, entrant_id) -> None:
        self._require_state(REGISTRATION)
        entrant = self.get_entrant(entrant_id)
        self.entrants.remove(entrant)

    def rename_entrant(self, entrant_id, name) -> Entrant:
        name = (name or '').strip()
        if not name:
            raise InvalidInputError("Name cannot be empty")
        entrant = self.get_entrant(entrant_id)
        entrant.name = name
        return entrant

    def rename(self, name) -> None:
        name = (name or '').strip()
        if not name:
            raise InvalidInputError("Tournament name cannot be empty")
        self.name = name

    def rename_group(self, group_id, name) -> Group:
        group = self.get_group(group_id)
        group.name = (name or '').strip() or None
        return group

    # -- group stage -----------------------------------------------------

    def start_group_stage(self) -> None:
        """
        Build groups and their round-robin schedules.

        Two entrants skip the group stage and go straight to a Grand
        Final. 11 and 13 entrants get one bye entrant so the groups
        come out as 3x4 and 2x7.
        """
        self._require_state(REGISTRATION)
        count = len(self.entrants)
        if count < self.min_entrants or count < 2:
            raise InsufficientEntrantsError(
                f"Need at least {max(self.min_entrants, 2)} entrants for a {self.mode} tournament, got {count}")

        started_at = datetime.now().isoformat(timespec='seconds')

        if count == 2:
            bracket = build_bracket(Topology.DIRECT_FINAL, [e.id for e in self.entrants],
                                    best_of=self.series_length)
            self.bracket = bracket
            self.state = PLAYOFFS
            self.started_at = started_at
            logger.info(f"{self.name}: 2 entrants, going straight to the Grand Final")
            return

        entrants = list(self.entrants)
        if count in BYE_PADDING:
            entrants.append(Entrant(self.settings['bye_name'], is_bye=True))

        groups = build_groups(entrants, rng=self.rng)
        matches = []
        for group in groups:
            matches.extend(schedule_group(group))

        self.entrants = entrants
        self.groups = groups
        self.matches = matches
        self.state = GROUP
        self.started_at = started_at
        logger.info(f"{self.name}: group stage started with {len(entrants)} entrants in "
                    f"{len(groups)} groups, {len(matches)} matches")

    def _validate_results(self, match: Match, results: Dict) -> Dict:
        if not isinstance(results, dict) or set(results) != set(match.entrant_ids):
            raise InvalidInputError("Results must contain exactly the two entrants of the match")
        cleaned = {}
        for entrant_id, result in results.items():
            if not isinstance(result, dict):
                raise InvalidInputError(f"Result for {entrant_id} must be a mapping")
            points = result.get('points')
            score = result.get('score')
            if not isinstance(points, int) or isinstance(points, bool):
                raise InvalidInputError(f"Points for {entrant_id} must be an integer")
            if score is not None and (not isinstance(score, int) or isinstance(score, bool)):
                raise InvalidInputError(f"Score for {entrant_id} must be an integer")
            cleaned[entrant_id] = {'points': points, 'score': score}
        return cleaned

    def _recompute_stats(self):
        recompute_stats(self.entrants, self.matches,
                        points_for_win=self.settings['points_for_win'],
                        points_for_draw=self.settings['points_for_draw'])

    def submit_match_result(self, match_id, results, detail=None) -> Match:
        """
        Record a group match result, e.g.
            {entrant1_id: {'points': 3, 'score': 16}, entrant2_id: {'points': 0, 'score': 9}}
        Resubmitting replaces the previous result.
        """
        match = self.get_match(match_id)
        self._require_state(GROUP)
        cleaned = self._validate_results(match, results)

        match.result = cleaned
        match.completed = True
        if detail is not None:
            match.detail = detail
        self._recompute_stats()
        logger.debug(f"Result recorded for match {match_id}: {cleaned}")
        return match

    def reset_group_data(self, group_id) -> Group:
        """Clear a group's results and its entrants' stats, keeping membership."""
        group = self.get_group(group_id)
        self._require_state(GROUP)
        for match in self.matches:
            if match.group_id == group.id:
                match.clear_result()
        self._recompute_stats()
        logger.info(f"{self.name}: reset results for {group.name or group.id}")
        return group

    def get_rankings(self) -> List[Entrant]:
        return rank_entrants(self.entrants, self.matches)

    def get_group_rankings(self, group_id) -> List[Entrant]:
        group = self.get_group(group_id)
        return rank_groups([group], self.entrants, self.matches)[group.id]

    def get_group_schedule(self, group_id) -> Dict[int, List[Match]]:
        """Matches of a group keyed by round number."""
        group = self.get_group(group_id)
        schedule: Dict[int, List[Match]] = {}
        for match in self.matches:
            if match.group_id == group.id:
                schedule.setdefault(match.round_number, []).append(match)
        return dict(sorted(schedule.items()))

    # -- playoffs --------------------------------------------------------

    def generate_brackets(self) -> List[BracketMatch]:
        """Rank the groups, pick and seed the qualifiers and build the bracket."""
        self._require_state(GROUP)
        pending = [m for m in self.matches if not m.completed]
        if pending:
            raise InvalidStateError(f"{len(pending)} group matches still need results")

        total = len(self.entrants)
        group_count = len(self.groups)
        per_group = qualifiers_per_group(group_count, total)
        cap = qualifier_count(group_count, total)

        standings = rank_groups(self.groups, self.entrants, self.matches)
        seeded = seed_qualifiers(standings, per_group, cap=cap)
        topology = select_topology(len(seeded), total, group_count)
        bracket = build_bracket(topology, [entrant.id for entrant, _, _ in seeded],
                                best_of=self.series_length)

        self.bracket = bracket
        self.state = PLAYOFFS
        logger.info(f"{self.name}: {len(seeded)} qualifiers, {topology.value} bracket "
                    f"with {len(bracket)} matches")
        return bracket

    def _after_decision(self):
        if advancement.is_bracket_complete(self.bracket):
            self.state = COMPLETED
            self.completed_at = datetime.now().isoformat(timespec='seconds')
            champion = self.get_champion()
            logger.info(f"{self.name}: completed, champion {champion.name if champion else None}")

    def submit_bracket_winner(self, match_id, winner_id) -> BracketMatch:
        self.get_bracket_match(match_id)
        self._require_state(PLAYOFFS)
        node = advancement.submit_winner(self.bracket, match_id, winner_id)
        self._after_decision()
        return node

    def submit_bracket_game_result(self, match_id, game_result) -> BracketMatch:
        """Record one game of a best-of-N series; accepts a GameResult or a dict."""
        self.get_bracket_match(match_id)
        self._require_state(PLAYOFFS)
        if isinstance(game_result, dict):
            game_result = GameResult.from_dict(game_result)
        node = advancement.record_game(self.bracket, match_id, game_result)
        if node.winner_id is not None:
            self._after_decision()
        return node

    def get_champion(self) -> Optional[Entrant]:
        if self.state != COMPLETED:
            return None
        for node in self.bracket:
            if node.kind == FINAL and node.winner_id:
                return self.get_entrant(node.winner_id)
        return None

    # -- persistence -----------------------------------------------------

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'mode': self.mode,
            'state': self.state,
            'created_at': self.created_at,
            'started_at': self.started_at,
            'completed_at': self.completed_at,
            'entrants': [entrant.to_dict() for entrant in self.entrants],
            'groups': [group.to_dict() for group in self.groups],
            'matches': [match.to_dict() for match in self.matches],
            'bracket': [node.to_dict() for node in self.bracket],
        }

    @classmethod
    def from_dict(cls, data, settings=None, rng=None):
        state = data.get('state', REGISTRATION)
        if state not in TOURNAMENT_STATES:
            raise InvalidInputError(f"Unknown tournament state: {state}")
        tournament = cls(data['name'], mode=data.get('mode', 'solo'), settings=settings,
                         rng=rng, tournament_id=data['id'])
        tournament.state = state
        tournament.created_at = data.get('created_at', tournament.created_at)
        tournament.started_at = data.get('started_at')
        tournament.completed_at = data.get('completed_at')
        tournament.entrants = [Entrant.from_dict(e) for e in data.get('entrants', [])]
        tournament.groups = [Group.from_dict(g) for g in data.get('groups', [])]
        tournament.matches = [Match.from_dict(m) for m in data.get('matches', [])]
        tournament.bracket = [BracketMatch.from_dict(b) for b in data.get('bracket', [])]
        return tournament
