"""
Option Generator
Builds the list of alternative decisions for one board, as seen by the
pair sitting at one table.

Options are appended to one list in generation order: by option type,
then by ascending level. Each primary option is followed directly by the
options linked to it (a double of it, the opponents bidding over it, and
a double of that). The order matters when options are later pruned.
"""

from contract import (
    Contract, DOUBLED, GRAND_SLAM, SMALL_SLAM, SUIT_RANK, UNDOUBLED, first_seat,
    other_pair, pair_of,
)
from logging_config import setup_logger
from trick_estimator import TrickCombination

logger = setup_logger(__name__)

# Option types
ACTUAL = 'actual'
OTHER_TABLE = 'other_table'
DONT_DOUBLE = 'dont_double'
PASS_PREVIOUS = 'pass_previous'
DOUBLE = 'double'
STOP_LOWER = 'stop_lower'
OTHER_SUIT = 'other_suit'
BID_OVER = 'bid_over'
BID_OVER_DOUBLE = 'bid_over_double'
UP_TO_GAME = 'up_to_game'
UP_TO_SLAM = 'up_to_slam'
UP_TO_GRAND = 'up_to_grand'

DECLARING_TYPES = [ACTUAL, OTHER_TABLE, PASS_PREVIOUS, STOP_LOWER, UP_TO_GAME, OTHER_SUIT]
DEFENDING_TYPES = [ACTUAL, OTHER_TABLE, PASS_PREVIOUS, BID_OVER, UP_TO_GAME]
UP_TO_TYPES = [UP_TO_GAME, UP_TO_SLAM, UP_TO_GRAND]

ACTIONS = {
    'no_action': "Stick with actual bidding",
    'other_table': "Bid as on the other table",
    'bid_lower': "Stop bidding at a lower level",
    'bid_to_make': "Overcall to make",
    'sacrifice': "Overcall as a sacrifice",
    'up_to_game': "Bid on to game",
    'up_to_slam': "Bid on to slam",
    'up_to_grand': "Bid on to grand slam",
    'pass_previous': "Pass last bid by opponents",
    'double_previous': "Double last bid by opponents",
    'double_overcall': "Overcall and then double",
    'dont_double': "Don't double opponents",
    'other_suit': "Bid another suit",
}


class Assessment:
    """Tricks, points and comparative score of an option under one method"""

    def __init__(self, tricks, points, score=None):
        self.tricks = tricks
        self.points = points
        self.score = score

    def __eq__(self, other):
        if not isinstance(other, Assessment):
            return NotImplemented
        return (self.tricks, self.points, self.score) == (other.tricks, other.points, other.score)

    def __repr__(self):
        return f"Assessment(tricks={self.tricks}, points={self.points}, score={self.score})"


class AnalysisOption:
    """
    One candidate decision.

    'linked' and 'removed_by' are indexes into the option list the option
    belongs to, so the linked options form a forest over a flat list.
    """

    def __init__(self, index, option_type, board, contract, declarer, decision_by=None,
                 linked=None, double=False, sitting=None):
        self.index = index
        self.type = option_type
        self.board = board
        self.contract = contract
        self.declarer = pair_of(declarer)
        self.decision_by = pair_of(decision_by) if decision_by else self.declarer
        self.linked = linked
        self.double = double
        self.sitting = pair_of(sitting) if sitting else self.decision_by
        self.assessments = {}
        self.mode_fraction = 0.0
        self.removed_by = None
        self.removed_reason = None

    @property
    def removed(self):
        return self.removed_by is not None

    @property
    def allow_remove(self):
        return self.type != ACTUAL

    @property
    def suit(self):
        return self.contract.suit

    @property
    def declaring_seat(self):
        return first_seat(self.declarer)

    @property
    def combination(self):
        return TrickCombination(self.board, self.contract.suit, self.declarer)

    def remove(self, by, reason=None):
        """Mark as removed by another option; the first remover is kept"""
        if not self.allow_remove or self.removed_by is not None:
            return False
        self.removed_by = by.index
        self.removed_reason = reason
        logger.debug(f"{(reason or 'Unknown'):30} - {self.type} {self.contract.compact} "
                     f"removed by {by.type} {by.contract.compact}")
        return True

    def restore(self):
        self.removed_by = None
        self.removed_reason = None

    def makes(self, tricks):
        return tricks is not None and tricks >= self.contract.tricks

    def action(self, method=None):
        """Key into ACTIONS describing this decision"""
        making = False
        if method is not None and method in self.assessments:
            making = self.makes(self.assessments[method].tricks)
        if self.type == ACTUAL:
            return 'no_action'
        if self.type == OTHER_TABLE:
            return 'other_table'
        if self.type == PASS_PREVIOUS:
            return 'pass_previous'
        if self.type == DOUBLE:
            if self.declarer == self.sitting:
                return 'bid_to_make' if making else 'sacrifice'
            return 'double_previous'
        if self.type == DONT_DOUBLE:
            return 'dont_double'
        if self.type == STOP_LOWER:
            return 'bid_lower'
        if self.type == OTHER_SUIT:
            return 'other_suit'
        if self.type == BID_OVER:
            return 'bid_to_make' if making else 'sacrifice'
        if self.type == BID_OVER_DOUBLE:
            return 'double_overcall'
        return self.type

    def description(self, method=None):
        return ACTIONS[self.action(method)]

    @property
    def display_type(self):
        """Up-to types are shown as bid-over when no estimate makes the contract"""
        if self.type in UP_TO_TYPES and self.assessments and \
                not any(self.makes(assessment.tricks) for assessment in self.assessments.values()):
            return BID_OVER
        return self.type

    def __repr__(self):
        return (f"AnalysisOption({self.index}, {self.type}, {self.contract.compact} by {self.declarer}"
                f"{', removed' if self.removed else ''})")


class OptionGenerator:
    """
    Enumerates the options for one table's result on a board.

    Args:
        board: Board being analysed
        traveller: Result at this table
        sitting: Our seat or partnership
        head_to_head: Two-table team match
        other_traveller: Other table's result in a head-to-head match
    """

    def __init__(self, board, traveller, sitting, head_to_head=False, other_traveller=None):
        self.board = board
        self.traveller = traveller
        self.sitting_pair = pair_of(sitting)
        self.head_to_head = head_to_head
        self.other_traveller = other_traveller
        self.options = []

        self.we_declared = traveller.declarer_pair == self.sitting_pair
        previous_bid = traveller.previous_bid()
        if self.we_declared:
            self.our_bid = traveller.contract
            self.their_bid = previous_bid
        else:
            self.our_bid = previous_bid
            self.their_bid = traveller.contract

    def generate(self):
        """Build and return the option list"""
        self.options = []

        if self.traveller.contract.is_pass_out:
            self._add(ACTUAL, self.traveller.contract, self.sitting_pair)
            return self.options

        types = DECLARING_TYPES if self.we_declared else DEFENDING_TYPES
        for option_type in types:
            for primary_type, contract, declarer, decision_by in self._primaries(option_type):
                option = self._add(primary_type, contract, declarer, decision_by)
                self._add_linked(option)

        logger.debug(f"Board {self.board.number}: {len(self.options)} options for {self.sitting_pair}")
        return self.options

    def _add(self, option_type, contract, declarer, decision_by=None, linked=None, double=False):
        option = AnalysisOption(
            index=len(self.options),
            option_type=option_type,
            board=self.board.number,
            contract=contract,
            declarer=declarer,
            decision_by=decision_by,
            linked=None if linked is None else linked.index,
            double=double,
            sitting=self.sitting_pair,
        )
        self.options.append(option)
        return option

    def _primaries(self, option_type):
        """(type, contract, declarer, decision_by) for each primary option of a type"""
        us = self.sitting_pair
        them = other_pair(us)

        if option_type == ACTUAL:
            return [(ACTUAL, self.traveller.contract, self.traveller.declarer_pair, None)]

        if option_type == OTHER_TABLE:
            other = self.other_traveller
            if self.head_to_head and other is not None and not other.contract.is_pass_out \
                    and other.declarer_pair == us and other.contract.outbids(self.their_bid):
                return [(OTHER_TABLE, other.contract, other.declarer_pair, None)]
            return []

        if option_type == PASS_PREVIOUS:
            # Defending, passing their contract is the don't-double option
            if self.their_bid is None or not self.we_declared:
                return []
            return [(PASS_PREVIOUS, self.their_bid.undoubled, them, us)]

        if option_type == STOP_LOWER:
            result = []
            for level in range(1, self.our_bid.level):
                contract = Contract(level, self.our_bid.suit)
                if contract.outbids(self.their_bid):
                    result.append((STOP_LOWER, contract, us, None))
            return result

        if option_type in (BID_OVER, UP_TO_GAME):
            if self.our_bid is None:
                return []
            base = Contract.higher(self.our_bid, self.our_bid.suit)
            ladder = self.ladder(base, above=self.their_bid)
            if not self.we_declared:
                # Defending: below-game overcalls form their own group
                ladder = [(level_type, contract) for level_type, contract in ladder
                          if (level_type == BID_OVER) == (option_type == BID_OVER)]
            return [(level_type, contract, us, None) for level_type, contract in ladder]

        if option_type == OTHER_SUIT:
            result = []
            for suit in self._other_suits():
                bid = Contract.higher(self.their_bid or self.our_bid, suit)
                for level_type, contract in self.ladder(bid, force_type=OTHER_SUIT):
                    result.append((level_type, contract, us, None))
            return result

        return []

    def _other_suits(self):
        """Strains our direction played in elsewhere, plus the par strain"""
        suits = {traveller.contract.suit for traveller in self.board.travellers
                 if not traveller.contract.is_pass_out and traveller.declarer_pair == self.sitting_pair}
        optimum = self.board.optimum
        if optimum is not None and not optimum.contract.is_pass_out \
                and optimum.declarer == self.sitting_pair and optimum.contract.outbids(self.their_bid):
            suits.add(optimum.contract.suit)
        suits.discard(self.our_bid.suit if self.our_bid is not None else None)
        return sorted(suits, key=SUIT_RANK.get)

    def ladder(self, base, above=None, force_type=None):
        """
        One contract per level from 'base' (raised if needed to outbid
        'above') up to grand slam in base's strain, with its option type.
        """
        if base is None or base.is_pass_out:
            return []
        start = base.level
        if above is not None and not base.outbids(above):
            over = Contract.higher(above, base.suit)
            if over is None:
                return []
            start = over.level

        game_level = base.game_level
        result = []
        for level in range(start, GRAND_SLAM + 1):
            contract = Contract(level, base.suit)
            if force_type is not None:
                level_type = force_type
            elif level < game_level:
                level_type = BID_OVER
            elif level == GRAND_SLAM:
                level_type = UP_TO_GRAND
            elif level == SMALL_SLAM:
                level_type = UP_TO_SLAM
            else:
                level_type = UP_TO_GAME
            result.append((level_type, contract))
        return result

    def _add_linked(self, option):
        us = self.sitting_pair
        them = other_pair(us)

        if self.we_declared:
            if option.type == PASS_PREVIOUS:
                # We could have doubled them rather than bid on
                self._add(DOUBLE, option.contract.doubled, option.declarer, us, linked=option, double=True)
            return

        if option.type == ACTUAL and option.declarer == them:
            if option.contract.double != UNDOUBLED:
                self._add(DONT_DOUBLE, option.contract.undoubled, option.declarer, us, linked=option)
            else:
                self._add(DOUBLE, option.contract.doubled, option.declarer, us, linked=option, double=True)
        elif option.declarer == us:
            # We have overbid: they can double us, or bid on and be doubled
            self._add(DOUBLE, option.contract.with_double(DOUBLED), us, them, linked=option, double=True)
            if self.their_bid is not None:
                bid_over = Contract.higher(option.contract, self.their_bid.suit)
                if bid_over is not None:
                    bid_over_option = self._add(BID_OVER, bid_over, them, them, linked=option)
                    self._add(BID_OVER_DOUBLE, bid_over.doubled, them, us, linked=bid_over_option, double=True)
