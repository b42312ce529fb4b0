import uuid

REGISTRATION = 'registration'
GROUP = 'group'
PLAYOFFS = 'playoffs'
COMPLETED = 'completed'
TOURNAMENT_STATES = (REGISTRATION, GROUP, PLAYOFFS, COMPLETED)

QUARTERFINAL = 'quarterfinal'
SEMIFINAL = 'semifinal'
FINAL = 'final'
THIRD_PLACE = 'third_place'

PENDING = 'pending'
READY = 'ready'
DECIDED = 'decided'


def new_id():
    return str(uuid.uuid4())


class Entrant:
    """A player or team competing as one bracket unit."""

    def __init__(self, name, entrant_id=None, is_bye=False):
        self.id = entrant_id or new_id()
        self.name = name
        self.is_bye = is_bye
        self.reset_stats()

    def reset_stats(self):
        self.matches_played = 0
        self.wins = 0
        self.draws = 0
        self.losses = 0
        self.points = 0
        self.total_score = 0
        self.score_differential = 0

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'is_bye': self.is_bye,
            'matches_played': self.matches_played,
            'wins': self.wins,
            'draws': self.draws,
            'losses': self.losses,
            'points': self.points,
            'total_score': self.total_score,
            'score_differential': self.score_differential,
        }

    @classmethod
    def from_dict(cls, data):
        entrant = cls(data['name'], entrant_id=data['id'], is_bye=data.get('is_bye', False))
        for field in ('matches_played', 'wins', 'draws', 'losses', 'points',
                      'total_score', 'score_differential'):
            setattr(entrant, field, data.get(field, 0))
        return entrant

    def __repr__(self):
        return (f"Entrant(name={self.name}, points={self.points}, "
                f"W{self.wins} D{self.draws} L{self.losses})")


class Group:
    def __init__(self, entrant_ids, group_id=None, name=None):
        self.id = group_id or new_id()
        self.entrant_ids = tuple(entrant_ids)
        self.name = name

    def __contains__(self, entrant_id):
        return entrant_id in self.entrant_ids

    def __len__(self):
        return len(self.entrant_ids)

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'entrant_ids': list(self.entrant_ids)}

    @classmethod
    def from_dict(cls, data):
        return cls(data['entrant_ids'], group_id=data['id'], name=data.get('name'))

    def __repr__(self):
        return f"Group(id={self.id}, name={self.name}, size={len(self.entrant_ids)})"


class Match:
    """A round-robin group match between two entrants."""

    def __init__(self, group_id, round_number, entrant1_id, entrant2_id, match_id=None):
        self.id = match_id or new_id()
        self.group_id = group_id
        self.round_number = round_number
        self.entrant1_id = entrant1_id
        self.entrant2_id = entrant2_id
        self.completed = False
        self.result = None  # {entrant_id: {'points': int, 'score': int or None}}
        self.detail = None

    @property
    def entrant_ids(self):
        return (self.entrant1_id, self.entrant2_id)

    def involves(self, entrant_id):
        return entrant_id in self.entrant_ids

    def opponent_of(self, entrant_id):
        if entrant_id == self.entrant1_id:
            return self.entrant2_id
        if entrant_id == self.entrant2_id:
            return self.entrant1_id
        return None

    def clear_result(self):
        self.completed = False
        self.result = None
        self.detail = None

    def to_dict(self):
        return {
            'id': self.id,
            'group_id': self.group_id,
            'round_number': self.round_number,
            'entrant1_id': self.entrant1_id,
            'entrant2_id': self.entrant2_id,
            'completed': self.completed,
            'result': self.result,
            'detail': self.detail,
        }

    @classmethod
    def from_dict(cls, data):
        match = cls(data['group_id'], data['round_number'], data['entrant1_id'],
                    data['entrant2_id'], match_id=data['id'])
        match.completed = data.get('completed', False)
        match.result = data.get('result')
        match.detail = data.get('detail')
        return match

    def __repr__(self):
        return (f"Match(round={self.round_number}, {self.entrant1_id} vs {self.entrant2_id}, "
                f"completed={self.completed})")


class GameResult:
    """One game of a best-of-N bracket series."""

    def __init__(self, winner_id, scores=None, detail=None):
        self.winner_id = winner_id
        self.scores = scores
        self.detail = detail

    def to_dict(self):
        return {'winner_id': self.winner_id, 'scores': self.scores, 'detail': self.detail}

    @classmethod
    def from_dict(cls, data):
        return cls(data.get('winner_id'), scores=data.get('scores'), detail=data.get('detail'))

    def __repr__(self):
        return f"GameResult(winner_id={self.winner_id}, scores={self.scores})"


class BracketMatch:
    """A slot in the elimination tree."""

    def __init__(self, kind, label, round_number, entrant1_id=None, entrant2_id=None,
                 next_match_id=None, next_slot=None, best_of=3, match_id=None):
        self.id = match_id or new_id()
        self.kind = kind
        self.label = label
        self.round_number = round_number
        self.entrant1_id = entrant1_id
        self.entrant2_id = entrant2_id
        self.winner_id = None
        self.next_match_id = next_match_id
        self.next_slot = next_slot
        self.best_of = best_of
        self.games = []
        self.entrant1_wins = 0
        self.entrant2_wins = 0

    @property
    def entrant_ids(self):
        return (self.entrant1_id, self.entrant2_id)

    @property
    def status(self):
        if self.winner_id is not None:
            return DECIDED
        if self.entrant1_id is not None and self.entrant2_id is not None:
            return READY
        return PENDING

    @property
    def loser_id(self):
        if self.winner_id is None:
            return None
        return self.entrant2_id if self.winner_id == self.entrant1_id else self.entrant1_id

    def set_slot(self, slot, entrant_id):
        if slot == 1:
            self.entrant1_id = entrant_id
        else:
            self.entrant2_id = entrant_id

    def to_dict(self):
        return {
            'id': self.id,
            'kind': self.kind,
            'label': self.label,
            'round_number': self.round_number,
            'entrant1_id': self.entrant1_id,
            'entrant2_id': self.entrant2_id,
            'winner_id': self.winner_id,
            'next_match_id': self.next_match_id,
            'next_slot': self.next_slot,
            'best_of': self.best_of,
            'games': [game.to_dict() for game in self.games],
            'entrant1_wins': self.entrant1_wins,
            'entrant2_wins': self.entrant2_wins,
        }

    @classmethod
    def from_dict(cls, data):
        node = cls(data['kind'], data['label'], data['round_number'],
                   entrant1_id=data.get('entrant1_id'), entrant2_id=data.get('entrant2_id'),
                   next_match_id=data.get('next_match_id'), next_slot=data.get('next_slot'),
                   best_of=data.get('best_of', 3), match_id=data['id'])
        node.winner_id = data.get('winner_id')
        node.games = [GameResult.from_dict(game) for game in data.get('games', [])]
        node.entrant1_wins = data.get('entrant1_wins', 0)
        node.entrant2_wins = data.get('entrant2_wins', 0)
        return node

    def __repr__(self):
        return (f"BracketMatch(label={self.label}, {self.entrant1_id} vs {self.entrant2_id}, "
                f"winner={self.winner_id})")
