"""
Board Data
Inputs consumed by the analysis: traveller records, boards, event format
and the store of manual overrides. These are assembled by whatever loads
the event (BridgeWebs, Usebio, PBN, ...); the analysis only reads them.
"""

from collections import namedtuple

import duplicate_scoring
from contract import (
    Contract, DOUBLED, REDOUBLED, UNDOUBLED, PASS_CALLS, DOUBLE_CALLS,
    REDOUBLE_CALLS, SEATS, normalize_suit, pair_of, other_pair,
)
from double_dummy import DoubleDummyTable
from logging_config import setup_logger

logger = setup_logger(__name__)

# Players per side of a table in the event
INDIVIDUAL_EVENT = 1
PAIRS_EVENT = 2
TEAMS_EVENT = 4

BIDDING = 'bidding'
PLAY = 'play'
PHASES = [BIDDING, PLAY]

OptimumContract = namedtuple('OptimumContract', ['contract', 'declarer'])


class EventFormat:
    """Scoring type and player format of the event"""

    def __init__(self, score_type=duplicate_scoring.PERCENT, players=PAIRS_EVENT):
        if score_type not in duplicate_scoring.SCORE_TYPES:
            raise ValueError(f"Unknown score type: {score_type!r}")
        if players not in (INDIVIDUAL_EVENT, PAIRS_EVENT, TEAMS_EVENT):
            raise ValueError(f"Unknown player format: {players!r}")
        self.score_type = score_type
        self.players = players

    @property
    def is_teams(self):
        return self.players == TEAMS_EVENT

    @property
    def significant(self):
        return duplicate_scoring.SIGNIFICANT[self.score_type]

    def __repr__(self):
        return f"EventFormat({self.score_type!r}, players={self.players})"


class Traveller:
    """
    One result recorded on a board.

    Args:
        board: Board number
        contract: Contract or contract string ('4S', '3NTX', 'Pass')
        declarer: Declaring seat ('N', 'E', 'S', 'W')
        made: Tricks over (positive) or under (negative) the contract
        ranking_numbers: {'NS': n, 'EW': m} identifying the pairs/teams
        auction: Optional list of calls ('1H', 'P', 'X', ...) from the dealer
        dealer: Dealer seat (defaults to the standard rotation)
        table: Optional table identifier
    """

    def __init__(self, board, contract, declarer=None, made=0, ranking_numbers=None,
                 auction=None, dealer=None, table=None):
        self.board = board
        self.contract = Contract.parse(contract)
        if self.contract.is_pass_out:
            self.declarer = declarer.upper() if declarer else None
            self.made = 0
        else:
            if declarer is None or str(declarer).upper() not in SEATS:
                raise ValueError(f"Traveller needs a declaring seat, got {declarer!r}")
            self.declarer = str(declarer).upper()
            self.made = int(made)
            if not 0 <= self.tricks <= 13:
                raise ValueError(f"Impossible result {self.contract.compact} {self.made:+d}")
        self.ranking_numbers = {pair_of(pair): number for pair, number in (ranking_numbers or {}).items()}
        self.auction = [str(call).strip().upper() for call in (auction or [])]
        self.dealer = dealer.upper() if dealer else SEATS[(board - 1) % 4]
        self.table = table

    @classmethod
    def from_dict(cls, data):
        return cls(
            board=data['board'],
            contract=data['contract'],
            declarer=data.get('declarer'),
            made=data.get('made', 0),
            ranking_numbers=data.get('ranking_numbers'),
            auction=data.get('auction'),
            dealer=data.get('dealer'),
            table=data.get('table'),
        )

    @property
    def declarer_pair(self):
        return None if self.declarer is None else pair_of(self.declarer)

    @property
    def tricks(self):
        """Tricks taken by the declaring side"""
        return 0 if self.contract.is_pass_out else self.contract.tricks + self.made

    def points(self, vulnerability, sitting):
        """Points for the sitting seat/pair"""
        if self.contract.is_pass_out:
            return 0
        return duplicate_scoring.points(self.contract, vulnerability, self.declarer, self.made, sitting)

    def previous_bid(self):
        """
        Last bid by the non-declaring side, carrying any double/redouble of it.

        Returns None if the opponents never bid or no auction was recorded.
        """
        if self.contract.is_pass_out:
            return None
        if not self.auction:
            logger.debug(f"Board {self.board}: no auction recorded")
            return None

        declaring = self.declarer_pair
        dealer_index = SEATS.index(self.dealer)
        calls = [(SEATS[(dealer_index + index) % 4], call) for index, call in enumerate(self.auction)]

        double = UNDOUBLED
        for seat, call in reversed(calls):
            if call in PASS_CALLS:
                continue
            if call in REDOUBLE_CALLS:
                double = max(double, REDOUBLED)
                continue
            if call in DOUBLE_CALLS:
                double = max(double, DOUBLED)
                continue
            if pair_of(seat) != declaring:
                return Contract.parse(call).with_double(double)
            double = UNDOUBLED
        return None

    def __repr__(self):
        return f"Traveller(board={self.board}, {self.contract.compact} by {self.declarer} {self.made:+d})"


class Board:
    """
    All results on one board plus the supplied double dummy information.

    Args:
        number: Board number
        travellers: List of Traveller records
        double_dummy: DoubleDummyTable or None
        vulnerability: Vulnerability (defaults to the standard rotation)
        optimum: OptimumContract (par contract) or None
    """

    def __init__(self, number, travellers=None, double_dummy=None, vulnerability=None, optimum=None):
        self.number = number
        self.travellers = list(travellers or [])
        self.double_dummy = double_dummy
        self.vulnerability = vulnerability or duplicate_scoring.board_vulnerability(number)
        self.optimum = optimum

    @classmethod
    def from_dict(cls, data):
        optimum = data.get('optimum')
        if optimum is not None:
            optimum = OptimumContract(Contract.parse(optimum['contract']), pair_of(optimum['declarer']))
        return cls(
            number=data['board'],
            travellers=[Traveller.from_dict(dict(item, board=data['board'])) for item in data.get('travellers', [])],
            double_dummy=DoubleDummyTable.from_dict(data.get('double_dummy')),
            vulnerability=data.get('vulnerability'),
            optimum=optimum,
        )

    def others(self, traveller):
        """Every result except the given one"""
        return [other for other in self.travellers if other is not traveller]

    def is_head_to_head(self, event_format):
        """Team event with exactly two results on the board"""
        return event_format is not None and event_format.is_teams and len(self.travellers) == 2

    def other_table(self, traveller, sitting):
        """
        The other table's result in a team match: the one where our team
        number appears in the other direction.
        """
        sitting_pair = pair_of(sitting)
        team = traveller.ranking_numbers.get(sitting_pair)
        for other in self.others(traveller):
            if team is not None and other.ranking_numbers.get(other_pair(sitting_pair)) == team:
                return other
        return None

    def field_results(self, suit, declarer, exclude=None):
        """Results in this strain by this declaring partnership"""
        suit = normalize_suit(suit)
        pair = pair_of(declarer)
        return [traveller for traveller in self.travellers
                if traveller is not exclude
                and not traveller.contract.is_pass_out
                and traveller.contract.suit == suit
                and traveller.declarer_pair == pair]


class OverrideStore:
    """
    Manually supplied trick counts and rejected analysis phases.

    Shared and mutable: after any change the caller must refresh the
    analyses that read it (BoardAnalysis.refresh_options or
    AnalysisCache.refresh_board).
    """

    def __init__(self):
        self._tricks = {}
        self._rejected = set()

    @staticmethod
    def _key(board, suit, declarer):
        return (board, normalize_suit(suit), pair_of(declarer))

    def get(self, board, suit, declarer):
        return self._tricks.get(self._key(board, suit, declarer))

    def set(self, board, suit, declarer, tricks):
        if tricks is None:
            self.clear(board, suit, declarer)
            return
        if not 0 <= int(tricks) <= 13:
            raise ValueError(f"Override must be 0-13 tricks, got {tricks!r}")
        self._tricks[self._key(board, suit, declarer)] = int(tricks)

    def clear(self, board, suit, declarer):
        self._tricks.pop(self._key(board, suit, declarer), None)

    def items(self):
        return list(self._tricks.items())

    def reject(self, board, sitting, phase):
        if phase not in PHASES:
            raise ValueError(f"Unknown phase: {phase!r}")
        self._rejected.add((board, pair_of(sitting), phase))

    def accept(self, board, sitting, phase):
        self._rejected.discard((board, pair_of(sitting), phase))

    def is_rejected(self, board, sitting, phase):
        return (board, pair_of(sitting), phase) in self._rejected
