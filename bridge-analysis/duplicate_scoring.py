"""
Duplicate Bridge Scoring
Implements the duplicate scoring law used by the analysis:
- Trick points, overtricks, the insult bonus for making doubled contracts
- Part-score / game bonuses (vulnerable and not vulnerable)
- Small and grand slam bonuses
- Undertrick penalties (undoubled, doubled, redoubled)
- Conversion of a board result into the event's comparative score
  (percentage, IMPs, cross-IMPs or aggregate)
"""

from contract import (
    DOUBLED, REDOUBLED, UNDOUBLED, SMALL_SLAM, GRAND_SLAM,
    pair_of,
)
from logging_config import setup_logger

logger = setup_logger(__name__)

# Board score types
PERCENT = 'percent'
IMP = 'imp'
CROSS_IMP = 'cross_imp'
AGGREGATE = 'aggregate'
SCORE_TYPES = [PERCENT, IMP, CROSS_IMP, AGGREGATE]

# Difference in score regarded as significant for each score type
SIGNIFICANT = {PERCENT: 19.5, IMP: 3.5, CROSS_IMP: 3.5, AGGREGATE: 100.0}
SCORE_SUFFIX = {PERCENT: '%', IMP: ' Imps', CROSS_IMP: ' Imps', AGGREGATE: ''}
SCORE_PLACES = {PERCENT: 1, IMP: 0, CROSS_IMP: 2, AGGREGATE: 0}

# Upper bound of the points difference for each IMP step (index = IMPs)
IMP_THRESHOLDS = [10, 40, 80, 120, 160, 210, 260, 310, 360, 420, 490, 590,
                  740, 890, 1090, 1290, 1490, 1740, 1990, 2240, 2490, 2990,
                  3490, 3990]

# Vulnerability
VUL_NONE = 'None'
VUL_NS = 'NS'
VUL_EW = 'EW'
VUL_BOTH = 'Both'
BOARD_VULNERABILITY = [VUL_NONE, VUL_NS, VUL_EW, VUL_BOTH]

FIRST_TRICK = {'C': 20, 'D': 20, 'H': 30, 'S': 30, 'NT': 40}
SUBSEQUENT_TRICK = {'C': 20, 'D': 20, 'H': 30, 'S': 30, 'NT': 30}
MULTIPLIER = {UNDOUBLED: 1, DOUBLED: 2, REDOUBLED: 4}

GAME_POINTS = 100
PART_SCORE_BONUS = 50
INSULT = 50


def board_vulnerability(board):
    """Standard vulnerability rotation for a board number"""
    return BOARD_VULNERABILITY[((board - 1) + ((board - 1) // 4)) % 4]


def is_vulnerable(vulnerability, seat):
    """Is the seat (or partnership) vulnerable under this vulnerability?"""
    return vulnerability == VUL_BOTH or vulnerability == pair_of(seat)


def contract_score(contract, vulnerable, made):
    """
    Score a contract for the declaring side.

    Args:
        contract: Contract that was played
        vulnerable: Is the declaring side vulnerable?
        made: Tricks over (positive) or under (negative) the contract

    Returns:
        dict with the scoring breakdown, 'total' being the declarer's points
    """
    if contract.is_pass_out:
        return {'trick_points': 0, 'overtrick_points': 0, 'insult': 0, 'bonus': 0,
                'slam_bonus': 0, 'penalty': 0, 'total': 0, 'description': 'Passed out'}

    if made < 0:
        penalty = _undertrick_penalty(-made, vulnerable, contract.double)
        return {
            'trick_points': 0,
            'overtrick_points': 0,
            'insult': 0,
            'bonus': 0,
            'slam_bonus': 0,
            'penalty': penalty,
            'total': -penalty,
            'description': f"{contract.compact} down {-made}",
        }

    multiplier = MULTIPLIER[contract.double]
    suit = contract.suit
    trick_points = (FIRST_TRICK[suit] + (contract.level - 1) * SUBSEQUENT_TRICK[suit]) * multiplier

    if contract.double == UNDOUBLED:
        overtrick_points = made * SUBSEQUENT_TRICK[suit]
    else:
        overtrick_value = 200 if vulnerable else 100
        if contract.double == REDOUBLED:
            overtrick_value *= 2
        overtrick_points = made * overtrick_value

    insult = INSULT * contract.double

    if trick_points >= GAME_POINTS:
        bonus = 500 if vulnerable else 300
    else:
        bonus = PART_SCORE_BONUS

    slam_bonus = 0
    if contract.level == SMALL_SLAM:
        slam_bonus = 750 if vulnerable else 500
    elif contract.level == GRAND_SLAM:
        slam_bonus = 1500 if vulnerable else 1000

    total = trick_points + overtrick_points + insult + bonus + slam_bonus
    return {
        'trick_points': trick_points,
        'overtrick_points': overtrick_points,
        'insult': insult,
        'bonus': bonus,
        'slam_bonus': slam_bonus,
        'penalty': 0,
        'total': total,
        'description': f"{contract.compact} made{' +' + str(made) if made > 0 else ''}",
    }


def _undertrick_penalty(undertricks, vulnerable, double):
    """Penalty for going down"""
    if double == UNDOUBLED:
        return undertricks * (100 if vulnerable else 50)

    penalty = 0
    for trick in range(1, undertricks + 1):
        if trick == 1:
            penalty += 200 if vulnerable else 100
        elif trick <= 3:
            penalty += 300 if vulnerable else 200
        else:
            penalty += 300
    if double == REDOUBLED:
        penalty *= 2
    return penalty


def points(contract, vulnerability, declarer, made, for_seat=None):
    """
    Points scored on a board.

    Args:
        contract: Contract played
        vulnerability: One of BOARD_VULNERABILITY
        declarer: Declaring seat or partnership
        made: Tricks over/under the contract (0 = made exactly)
        for_seat: Seat or partnership to score for (defaults to declarer)

    Returns:
        Points from the point of view of for_seat
    """
    result = contract_score(contract, is_vulnerable(vulnerability, declarer), made)['total']
    if for_seat is not None and pair_of(for_seat) != pair_of(declarer):
        result = -result
    return result


def made(contract, vulnerability, declarer, points_scored, for_seat=None):
    """
    Inverse of points(): the over/under trick count that produces the score.

    Returns None if no legal number of tricks gives exactly that score.
    """
    if contract.is_pass_out:
        return 0 if points_scored == 0 else None
    for tricks in range(0, 14):
        candidate = tricks - contract.tricks
        if points(contract, vulnerability, declarer, candidate, for_seat) == points_scored:
            return candidate
    return None


def imps(points_difference):
    """Convert a points difference into IMPs using the standard table"""
    size = abs(points_difference)
    result = len(IMP_THRESHOLDS)
    for index, threshold in enumerate(IMP_THRESHOLDS):
        if threshold >= size:
            result = index
            break
    return -result if points_difference < 0 else result


def score(points_scored, field_points, score_type):
    """
    Comparative score of a result against the rest of the field.

    Args:
        points_scored: Our points on the board
        field_points: Points of every other result, from the same point of view
        score_type: PERCENT, IMP, CROSS_IMP or AGGREGATE

    Returns:
        float score, or None if there is nothing to compare against
    """
    if score_type == AGGREGATE:
        return float(points_scored)

    field_points = list(field_points)
    if not field_points:
        return None

    if score_type == PERCENT:
        # 2 for every result beaten, 1 for every tie
        matchpoints = 0
        for other in field_points:
            if points_scored > other:
                matchpoints += 2
            elif points_scored == other:
                matchpoints += 1
        return matchpoints * 100 / (2 * len(field_points))

    if score_type == IMP:
        average = sum(field_points) / len(field_points)
        return float(imps(points_scored - average))

    if score_type == CROSS_IMP:
        return sum(imps(points_scored - other) for other in field_points) / len(field_points)

    logger.warning(f"Unknown score type {score_type!r} - no score calculated")
    return None


def format_score(value, score_type, verbose=False):
    """Format a score for display, e.g. '62.5%' or '+3 Imps'"""
    if value is None:
        return 'N/A'
    places = SCORE_PLACES.get(score_type, 0) if verbose else 0
    prefix = '+' if score_type in (IMP, CROSS_IMP, AGGREGATE) and value > 0 else ''
    suffix = SCORE_SUFFIX.get(score_type, '')
    if len(suffix) > 1 and not verbose:
        suffix = ''
    return f"{prefix}{value:.{places}f}{suffix}"