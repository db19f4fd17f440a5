"""
Double Dummy Table
Maximum makeable tricks for each declaring seat in each strain.

The table is supplied from outside the analysis: either stored results
(a plain dict), an endplay DDTable, or a PBN deal solved with endplay's
binding of Bo Haglund's DDS.

Table format (same shape as the stored results):
{
    'N': {'C': 7, 'D': 9, 'H': 10, 'S': 8, 'NT': 9},
    'E': {...},
    'S': {...},
    'W': {...}
}
"""

from endplay.dds import calc_dd_table
from endplay.types import Deal, Denom, Player

from contract import PAIR_SEATS, SEATS, SUITS, normalize_suit, pair_of
from logging_config import setup_logger

logger = setup_logger(__name__)

DENOM_TO_SUIT = {
    Denom.clubs: 'C',
    Denom.diamonds: 'D',
    Denom.hearts: 'H',
    Denom.spades: 'S',
    Denom.nt: 'NT',
}
PLAYER_TO_SEAT = {
    Player.north: 'N',
    Player.east: 'E',
    Player.south: 'S',
    Player.west: 'W',
}


class DoubleDummyTable:
    """Double dummy tricks by declaring seat and strain"""

    def __init__(self, tricks=None):
        self.tricks = {seat: {} for seat in SEATS}
        for seat, suits in (tricks or {}).items():
            seat = str(seat).upper()
            if seat not in self.tricks:
                raise ValueError(f"Unknown seat in double dummy table: {seat!r}")
            for suit, made in suits.items():
                if made is not None:
                    self.tricks[seat][normalize_suit(suit)] = int(made)

    @classmethod
    def from_dict(cls, data):
        if data is None:
            return None
        return cls(data)

    @classmethod
    def from_endplay(cls, table):
        """
        Build from an endplay DDTable (or anything indexable by (Denom, Player)).
        """
        tricks = {seat: {} for seat in SEATS}
        for denom, suit in DENOM_TO_SUIT.items():
            for player, seat in PLAYER_TO_SEAT.items():
                tricks[seat][suit] = int(table[denom, player])
        return cls(tricks)

    @classmethod
    def from_deal(cls, pbn):
        """
        Solve a PBN deal string (e.g. 'N:AKQ2.... ...') with endplay.
        """
        deal = pbn if isinstance(pbn, Deal) else Deal(pbn)
        logger.debug(f"Solving double dummy table for {pbn}")
        return cls.from_endplay(calc_dd_table(deal))

    def tricks_for(self, seat, suit):
        """Tricks for one declaring seat, or None if not known"""
        return self.tricks.get(str(seat).upper(), {}).get(normalize_suit(suit))

    def max_tricks(self, pair, suit):
        """
        Better of the two seats of a partnership.

        Returns None if neither seat has an entry of 0 or more.
        """
        made = [self.tricks_for(seat, suit) for seat in PAIR_SEATS[pair_of(pair)]]
        made = [value for value in made if value is not None and value >= 0]
        return max(made) if made else None

    def is_empty(self):
        return not any(self.tricks[seat] for seat in SEATS)

    def format_table(self):
        """Format the table for logging/display"""
        if self.is_empty():
            return "No double dummy data available"
        lines = ['    ' + ' '.join(f"{suit:>3}" for suit in SUITS)]
        for seat in SEATS:
            values = [self.tricks[seat].get(suit) for suit in SUITS]
            lines.append(f"{seat:>3} " + ' '.join(f"{'-' if value is None else value:>3}" for value in values))
        return '\n'.join(lines)
