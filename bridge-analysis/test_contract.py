"""
Unit tests for the contract model.

Covers parsing, the (level, strain, double) ordering, outbidding and the
lowest legal bid over a contract.
"""

import unittest

from contract import (
    Contract, DOUBLED, REDOUBLED, UNDOUBLED, normalize_suit, other_pair, pair_of,
    next_seat,
)


class TestContractParsing(unittest.TestCase):
    """Contract strings as they appear on travellers"""

    def test_simple_contract(self):
        """'4S' is four spades undoubled needing 10 tricks"""
        contract = Contract.parse('4S')
        self.assertEqual(contract.level, 4)
        self.assertEqual(contract.suit, 'S')
        self.assertEqual(contract.double, UNDOUBLED)
        self.assertEqual(contract.tricks, 10)

    def test_no_trumps_forms(self):
        """'3N' and '3NT' are the same contract"""
        self.assertEqual(Contract.parse('3N'), Contract.parse('3NT'))
        self.assertEqual(Contract.parse('3n').suit, 'NT')

    def test_doubled_forms(self):
        """Doubles can be written with X or *"""
        self.assertEqual(Contract.parse('4SX').double, DOUBLED)
        self.assertEqual(Contract.parse('4S*').double, DOUBLED)
        self.assertEqual(Contract.parse('2HXX').double, REDOUBLED)
        self.assertEqual(Contract.parse('2H**').double, REDOUBLED)

    def test_pass_out(self):
        """Passed out boards have level 0 and take no tricks"""
        contract = Contract.parse('Pass')
        self.assertTrue(contract.is_pass_out)
        self.assertEqual(contract.tricks, 0)
        self.assertTrue(Contract.parse('P').is_pass_out)
        self.assertEqual(contract.compact, 'Pass Out')

    def test_invalid_contracts(self):
        """Malformed contracts are rejected"""
        for text in ['', '8S', '4Z', 'S4', '0X']:
            with self.assertRaises(ValueError):
                Contract.parse(text)

    def test_compact_and_display(self):
        """Short and symbol forms"""
        contract = Contract(4, 'S', DOUBLED)
        self.assertEqual(contract.compact, '4SX')
        self.assertEqual(contract.display, '4♠*')
        self.assertEqual(str(Contract(3, 'NT')), '3NT')


class TestContractOrdering(unittest.TestCase):
    """Contracts are ordered by level, then strain, then double"""

    def test_level_first(self):
        """A higher level always sorts higher"""
        self.assertLess(Contract(3, 'NT'), Contract(4, 'C'))

    def test_strain_second(self):
        """Clubs < diamonds < hearts < spades < no-trumps"""
        ordered = [Contract(2, suit) for suit in ['C', 'D', 'H', 'S', 'NT']]
        self.assertEqual(sorted(reversed(ordered)), ordered)

    def test_double_last(self):
        """Doubled sorts above undoubled at the same level and strain"""
        self.assertLess(Contract(4, 'H'), Contract(4, 'H', DOUBLED))
        self.assertLess(Contract(4, 'H', DOUBLED), Contract(4, 'H', REDOUBLED))

    def test_pass_out_lowest(self):
        """A pass-out is below every bid"""
        self.assertLess(Contract.pass_out(), Contract(1, 'C'))

    def test_equality_and_hash(self):
        """Equal contracts are interchangeable as keys"""
        self.assertEqual(len({Contract(4, 'S'), Contract.parse('4S'), Contract(4, 'S', DOUBLED)}), 2)


class TestBidding(unittest.TestCase):
    """Outbidding and the lowest bid over a contract"""

    def test_outbids_ignores_double(self):
        """4S outbids 4H doubled; 4H doubled does not outbid 4H"""
        self.assertTrue(Contract(4, 'S').outbids(Contract(4, 'H', DOUBLED)))
        self.assertFalse(Contract(4, 'H', DOUBLED).outbids(Contract(4, 'H')))
        self.assertTrue(Contract(1, 'C').outbids(None))

    def test_higher_same_level(self):
        """A higher strain can bid at the same level"""
        self.assertEqual(Contract.higher(Contract(2, 'H'), 'S'), Contract(2, 'S'))

    def test_higher_next_level(self):
        """A lower or equal strain needs the next level"""
        self.assertEqual(Contract.higher(Contract(2, 'S'), 'H'), Contract(3, 'H'))
        self.assertEqual(Contract.higher(Contract(2, 'S'), 'S'), Contract(3, 'S'))

    def test_higher_is_undoubled(self):
        """Bidding over a doubled contract gives an undoubled bid"""
        self.assertEqual(Contract.higher(Contract(3, 'D', DOUBLED), 'H').double, UNDOUBLED)

    def test_higher_over_nothing(self):
        """With nothing to outbid the one level is available"""
        self.assertEqual(Contract.higher(None, 'D'), Contract(1, 'D'))
        self.assertEqual(Contract.higher(Contract.pass_out(), 'NT'), Contract(1, 'NT'))

    def test_no_bid_above_grand_slam(self):
        """Nothing outbids 7NT"""
        self.assertIsNone(Contract.higher(Contract(7, 'NT'), 'C'))
        self.assertEqual(Contract.higher(Contract(7, 'H'), 'S'), Contract(7, 'S'))

    def test_level_beyond_grand_slam(self):
        """Constructing an eight level contract is an error"""
        with self.assertRaises(ValueError):
            Contract(8, 'S')
        with self.assertRaises(ValueError):
            Contract(7, 'S').with_level(8)


class TestSeats(unittest.TestCase):
    """Seat and partnership helpers"""

    def test_pair_of(self):
        self.assertEqual(pair_of('N'), 'NS')
        self.assertEqual(pair_of('w'), 'EW')
        self.assertEqual(pair_of('NS'), 'NS')
        with self.assertRaises(ValueError):
            pair_of('X')

    def test_other_pair(self):
        self.assertEqual(other_pair('NS'), 'EW')
        self.assertEqual(other_pair('E'), 'NS')

    def test_next_seat(self):
        self.assertEqual(next_seat('W'), 'N')
        self.assertEqual(next_seat('N', 2), 'S')

    def test_normalize_suit(self):
        self.assertEqual(normalize_suit('n'), 'NT')
        with self.assertRaises(ValueError):
            normalize_suit('Z')


if __name__ == '__main__':
    unittest.main(verbosity=2)
