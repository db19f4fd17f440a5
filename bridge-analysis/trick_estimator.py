"""
Trick Estimator
Estimates how many tricks a declaring partnership would take in a strain,
using each of the available sources of evidence:

- play:         the result actually achieved at this table
- other:        the other table of a head-to-head team match
- median:       median of the rest of the field in the same strain/declarer
- mode:         most common result of the rest of the field
- best:         best result in the field for the declaring side
- double_dummy: the supplied double dummy table
- override:     a trick count entered manually

and picks which of them should be trusted for a given combination.
"""

from collections import Counter, namedtuple

from contract import PAIRS, SUITS, normalize_suit, pair_of
from logging_config import setup_logger

logger = setup_logger(__name__)

PLAY = 'play'
OTHER = 'other'
MEDIAN = 'median'
MODE = 'mode'
BEST = 'best'
DOUBLE_DUMMY = 'double_dummy'
OVERRIDE = 'override'
METHODS = [PLAY, OTHER, MEDIAN, MODE, BEST, DOUBLE_DUMMY, OVERRIDE]

METHOD_SHORT = {
    PLAY: 'Play',
    OTHER: 'Other',
    MEDIAN: 'Med',
    MODE: 'Mode',
    BEST: 'Best',
    DOUBLE_DUMMY: 'DD',
    OVERRIDE: 'Override',
}

# How far an estimate can be relied on when choosing between options
RELIABILITY = {
    OVERRIDE: 9,
    PLAY: 6,
    OTHER: 6,
    MEDIAN: 6,
    MODE: 6,
    DOUBLE_DUMMY: 3,
    BEST: 1,
}

# Share of the field agreeing on one result before the mode is trusted
MODE_FRACTION_THRESHOLD = 0.25

TrickCombination = namedtuple('TrickCombination', ['board', 'suit', 'declarer'])


def reliability(method):
    return RELIABILITY.get(method, 0)


class TrickEstimate:
    """Trick counts by method for one combination"""

    def __init__(self, made=None, mode_fraction=0.0, field=None):
        self.made = dict(made or {})
        self.mode_fraction = mode_fraction
        self.field = list(field or [])

    def get(self, method):
        return self.made.get(method)

    def with_override(self, tricks):
        made = dict(self.made)
        made[OVERRIDE] = tricks
        return TrickEstimate(made, self.mode_fraction, self.field)

    def __repr__(self):
        return f"TrickEstimate({self.made}, mode_fraction={self.mode_fraction:.2f})"


class TrickEstimator:
    """
    Trick estimates for every strain/declaring pair on one board, as seen
    from one table and sitting pair.

    Args:
        board: Board being analysed
        traveller: The result at our table
        sitting: Our seat or partnership
        overrides: OverrideStore (read each time an estimate is requested)
        head_to_head: Two-table team match
        other_traveller: The other table's result in a head-to-head match
        mode_threshold: Minimum mode fraction for the mode to be used
    """

    def __init__(self, board, traveller, sitting, overrides=None, head_to_head=False,
                 other_traveller=None, mode_threshold=MODE_FRACTION_THRESHOLD):
        self.board = board
        self.traveller = traveller
        self.sitting_pair = pair_of(sitting)
        self.overrides = overrides
        self.head_to_head = head_to_head
        self.other_traveller = other_traveller
        self.mode_threshold = mode_threshold
        self._estimates = {}
        self.rebuild()

    def rebuild(self):
        """Recalculate the estimates from the board data"""
        self._estimates = {}
        for pair in PAIRS:
            for suit in SUITS:
                self._estimates[self.combination(suit, pair)] = self._build(suit, pair)
        logger.debug(f"Board {self.board.number}: trick estimates built for {self.sitting_pair}")
        if self.board.double_dummy is not None:
            logger.debug(f"Board {self.board.number} double dummy:\n{self.board.double_dummy.format_table()}")

    def combination(self, suit, declarer):
        return TrickCombination(self.board.number, normalize_suit(suit), pair_of(declarer))

    def _build(self, suit, pair):
        made = {}

        if _matches(self.traveller, suit, pair):
            made[PLAY] = self.traveller.tricks

        if self.head_to_head and _matches(self.other_traveller, suit, pair):
            made[OTHER] = self.other_traveller.tricks

        if self.board.double_dummy is not None:
            double_dummy = self.board.double_dummy.max_tricks(pair, suit)
            if double_dummy is not None:
                made[DOUBLE_DUMMY] = double_dummy

        field = sorted(result.tricks for result in self.board.field_results(suit, pair, exclude=self.traveller))
        mode_fraction = 0.0
        if field:
            made[MEDIAN] = field[len(field) // 2]

            # Ties between equally common results go to the lowest trick count
            counts = Counter(field)
            mode, frequency = min(counts.items(), key=lambda item: (-item[1], item[0]))
            made[MODE] = mode
            mode_fraction = frequency / len(field)

            made[BEST] = field[-1]

        return TrickEstimate(made, mode_fraction, field)

    def override(self, suit, declarer):
        if self.overrides is None:
            return None
        return self.overrides.get(self.board.number, suit, declarer)

    def estimate(self, suit, declarer):
        """TrickEstimate including any current override, or None if unknown"""
        base = self._estimates.get(self.combination(suit, declarer))
        if base is None:
            return None
        override = self.override(suit, declarer)
        return base if override is None else base.with_override(override)

    def estimate_for(self, combination):
        if combination.board != self.board.number:
            return None
        return self.estimate(combination.suit, combination.declarer)

    def made(self, suit, declarer, method):
        estimate = self.estimate(suit, declarer)
        return None if estimate is None else estimate.get(method)

    def use_method(self, suit, declarer, override_regardless=False):
        """
        Choose the method to trust for a combination.

        Actual play (or the other table in a head-to-head match) comes first
        when the strain and declarer match. An override replaces it only when
        requested regardless, or when it is more pessimistic for us than the
        result at the table. Without either, the field mode (if enough of the
        field agrees), then the field median, then double dummy are used.
        """
        estimate = self.estimate(suit, declarer)
        if estimate is None:
            return None
        made = estimate.made
        pair = pair_of(declarer)

        candidate = None
        if PLAY in made:
            candidate = PLAY
        elif self.head_to_head and OTHER in made:
            candidate = OTHER

        if OVERRIDE in made:
            if override_regardless or candidate is None or \
                    self._worse_for_us(made[OVERRIDE], made[candidate], pair):
                return OVERRIDE
            return candidate

        if candidate is not None:
            return candidate

        if not self.head_to_head:
            if MODE in made and estimate.mode_fraction >= self.mode_threshold:
                return MODE
            if MEDIAN in made:
                return MEDIAN

        if DOUBLE_DUMMY in made:
            return DOUBLE_DUMMY
        return None

    def use_method_made(self, suit, declarer, override_regardless=False):
        """(method, tricks) for the chosen method, or None"""
        method = self.use_method(suit, declarer, override_regardless)
        if method is None:
            return None
        return method, self.made(suit, declarer, method)

    def _worse_for_us(self, override, tricks, declarer):
        sign = 1 if declarer == self.sitting_pair else -1
        return (override - tricks) * sign < 0


def _matches(traveller, suit, pair):
    return traveller is not None and not traveller.contract.is_pass_out \
        and traveller.contract.suit == suit and traveller.declarer_pair == pair
