"""
Contract Model
Seats, partnerships, strains and double states for duplicate bridge, plus the
Contract value used throughout the analysis.

Contracts are ordered by (level, strain, double) with strains ranked
clubs < diamonds < hearts < spades < no-trumps. A passed-out board is a
contract at level 0 with no strain.
"""

from functools import total_ordering

TRICK_OFFSET = 6  # Tricks in the "book"
PASS_OUT = 0
SMALL_SLAM = 6
GRAND_SLAM = 7

SUITS = ['C', 'D', 'H', 'S', 'NT']
SUIT_RANK = {suit: rank for rank, suit in enumerate(SUITS)}
GAME_LEVEL = {'C': 5, 'D': 5, 'H': 4, 'S': 4, 'NT': 3}
SUIT_SYMBOLS = {'C': '♣', 'D': '♦', 'H': '♥', 'S': '♠', 'NT': 'NT'}
SUIT_WORDS = {'C': 'Clubs', 'D': 'Diamonds', 'H': 'Hearts', 'S': 'Spades', 'NT': 'No Trumps'}

UNDOUBLED = 0
DOUBLED = 1
REDOUBLED = 2
DOUBLE_SUFFIX = {UNDOUBLED: '', DOUBLED: 'X', REDOUBLED: 'XX'}

SEATS = ['N', 'E', 'S', 'W']
PAIRS = ['NS', 'EW']
PAIR_SEATS = {'NS': ('N', 'S'), 'EW': ('E', 'W')}

PASS_CALLS = ('P', 'PASS')
DOUBLE_CALLS = ('X', 'D', 'DBL')
REDOUBLE_CALLS = ('XX', 'R', 'RDBL')


def normalize_suit(suit):
    """Convert 'N', 'NT', 'n' etc. into one of SUITS"""
    text = str(suit).strip().upper()
    if text == 'N':
        text = 'NT'
    if text not in SUIT_RANK:
        raise ValueError(f"Unknown strain: {suit!r}")
    return text


def pair_of(seat):
    """Partnership ('NS' or 'EW') for a seat; a partnership is returned unchanged"""
    text = str(seat).strip().upper()
    if text in PAIR_SEATS:
        return text
    if text in ('N', 'S'):
        return 'NS'
    if text in ('E', 'W'):
        return 'EW'
    raise ValueError(f"Unknown seat or pair: {seat!r}")


def other_pair(pair):
    """The opposing partnership"""
    return 'EW' if pair_of(pair) == 'NS' else 'NS'


def first_seat(pair):
    """First seat of a partnership, used where any seat of the pair will do"""
    return PAIR_SEATS[pair_of(pair)][0]


def next_seat(seat, steps=1):
    """Seat 'steps' places clockwise from the given seat"""
    return SEATS[(SEATS.index(seat) + steps) % 4]


@total_ordering
class Contract:
    """
    A bridge contract: level, strain and double state.

    Instances are treated as values; use with_level/with_double to derive
    new contracts rather than mutating an existing one.
    """

    def __init__(self, level, suit=None, double=UNDOUBLED):
        if level == PASS_OUT:
            self.level = PASS_OUT
            self.suit = None
            self.double = UNDOUBLED
            return
        if not isinstance(level, int) or not 1 <= level <= GRAND_SLAM:
            raise ValueError(f"Contract level must be 1-{GRAND_SLAM}, got {level!r}")
        if double not in DOUBLE_SUFFIX:
            raise ValueError(f"Unknown double state: {double!r}")
        self.level = level
        self.suit = normalize_suit(suit)
        self.double = double

    @classmethod
    def pass_out(cls):
        return cls(PASS_OUT)

    @classmethod
    def parse(cls, text):
        """
        Parse a contract string.

        Accepts '3NT', '3N', '4S', '4SX', '4S*', '2HXX', '2H**', 'P' and 'Pass'
        (case-insensitive, spaces ignored).
        """
        if isinstance(text, Contract):
            return text
        compact = str(text).replace(' ', '').upper()
        if not compact:
            raise ValueError("Empty contract")
        if compact in PASS_CALLS or compact == 'PASSOUT':
            return cls.pass_out()

        double = UNDOUBLED
        if compact.endswith('XX') or compact.endswith('**'):
            double = REDOUBLED
            compact = compact[:-2]
        elif compact.endswith('X') or compact.endswith('*'):
            double = DOUBLED
            compact = compact[:-1]

        if len(compact) < 2 or not compact[0].isdigit():
            raise ValueError(f"Unparseable contract: {text!r}")
        return cls(int(compact[0]), compact[1:], double)

    @classmethod
    def higher(cls, than, suit):
        """
        Lowest legal undoubled bid in 'suit' that outbids 'than'.

        Returns None if no such bid exists (it would be above grand slam).
        """
        suit = normalize_suit(suit)
        if than is None or than.is_pass_out:
            return cls(1, suit)
        level = than.level if SUIT_RANK[suit] > SUIT_RANK[than.suit] else than.level + 1
        if level > GRAND_SLAM:
            return None
        return cls(level, suit)

    @property
    def is_pass_out(self):
        return self.level == PASS_OUT

    @property
    def tricks(self):
        """Tricks needed to make the contract"""
        return 0 if self.is_pass_out else TRICK_OFFSET + self.level

    @property
    def game_level(self):
        return None if self.is_pass_out else GAME_LEVEL[self.suit]

    @property
    def undoubled(self):
        return self.with_double(UNDOUBLED)

    @property
    def doubled(self):
        return self.with_double(DOUBLED)

    def with_level(self, level):
        return Contract(level, self.suit, self.double)

    def with_double(self, double):
        if self.is_pass_out:
            return self
        return Contract(self.level, self.suit, double)

    def outbids(self, other):
        """True if this is a higher bid than 'other' ignoring doubles"""
        if other is None:
            return True
        return self._bid_key() > other._bid_key()

    def _bid_key(self):
        return (self.level, -1 if self.suit is None else SUIT_RANK[self.suit])

    def _key(self):
        return self._bid_key() + (self.double,)

    def __eq__(self, other):
        if not isinstance(other, Contract):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other):
        if not isinstance(other, Contract):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash(self._key())

    @property
    def compact(self):
        """Short form such as '4SX' or 'Pass Out'"""
        if self.is_pass_out:
            return 'Pass Out'
        return f"{self.level}{self.suit}{DOUBLE_SUFFIX[self.double]}"

    @property
    def display(self):
        """Form with suit symbols, e.g. '4♠*'"""
        if self.is_pass_out:
            return 'Pass Out'
        return f"{self.level}{SUIT_SYMBOLS[self.suit]}{'*' * self.double}"

    def __str__(self):
        return self.compact

    def __repr__(self):
        return f"Contract({self.compact!r})"
