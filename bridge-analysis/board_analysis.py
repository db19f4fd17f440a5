"""
Board Analysis
Ties the trick estimates, option generation, scoring and dominance
pruning together for one result on one board, as seen by one pair, and
answers the questions asked by the presentation layer:

- which decision would have been best, and what it was worth
- how the play compares with the other table / field / double dummy
- a good/ok/bad/very bad classification for the bidding and the play

An analysis is built once; after any override or rejection change it has
to be refreshed (refresh_options, or AnalysisCache.refresh_board for every
analysis of a board).
"""

from collections import namedtuple

import duplicate_scoring
from board_data import BIDDING, PLAY as PLAY_PHASE, EventFormat, OverrideStore
from contract import other_pair, pair_of
from logging_config import setup_logger
from option_generator import Assessment, OptionGenerator
from option_reducer import DominanceReducer
from trick_estimator import (
    DOUBLE_DUMMY, MEDIAN, MODE_FRACTION_THRESHOLD, OTHER, OVERRIDE, PLAY,
    TrickEstimator, reliability,
)

logger = setup_logger(__name__)

# A doubled best option this close to making is shown undoubled instead
DOUBLED_MAKING_MARGIN = 1

# Summary status
GOOD = 'good'
OK = 'ok'
BAD = 'bad'
VERY_BAD = 'very_bad'
REJECTED = 'rejected'

Comparison = namedtuple('Comparison', ['method', 'short', 'verbose', 'impact'])
MadeValue = namedtuple('MadeValue', ['method', 'made', 'override'])
AnalysisSummary = namedtuple('AnalysisSummary', ['phase', 'description', 'impact', 'status', 'method'])


def classify(impact, significant):
    """Status for an impact given the event's significant difference"""
    if impact is None:
        return OK
    if impact >= 0:
        return GOOD
    if impact > -significant:
        return OK
    if impact > -2 * significant:
        return BAD
    return VERY_BAD


class BoardAnalysis:
    """
    Analysis of one traveller from the point of view of one pair.

    Args:
        board: Board the traveller belongs to
        traveller: The result being analysed
        sitting: Our seat or partnership
        event_format: EventFormat (defaults to a pairs event scored in percent)
        overrides: Shared OverrideStore
        mode_threshold: Minimum field agreement before the mode is used
        doubled_margin: Tricks short of making within which a double is not recommended
    """

    def __init__(self, board, traveller, sitting, event_format=None, overrides=None,
                 mode_threshold=MODE_FRACTION_THRESHOLD, doubled_margin=DOUBLED_MAKING_MARGIN):
        self.board = board
        self.traveller = traveller
        self.sitting_pair = pair_of(sitting)
        self.event_format = event_format or EventFormat()
        self.overrides = overrides if overrides is not None else OverrideStore()
        self.doubled_margin = doubled_margin

        self.head_to_head = board.is_head_to_head(self.event_format)
        self.other_traveller = self._find_other_table() if self.head_to_head else None

        self.estimator = TrickEstimator(
            board, traveller, self.sitting_pair,
            overrides=self.overrides,
            head_to_head=self.head_to_head,
            other_traveller=self.other_traveller,
            mode_threshold=mode_threshold,
        )
        self.generator = OptionGenerator(
            board, traveller, self.sitting_pair,
            head_to_head=self.head_to_head,
            other_traveller=self.other_traveller,
        )
        self.options = self.generator.generate()
        self._field_points = [other.points(board.vulnerability, self.sitting_pair)
                              for other in board.others(traveller)]
        self._scores = {}
        self._comparisons = {}

        self._build_scores()
        self._reduce()
        logger.debug(f"Board {board.number}: analysis built for {self.sitting_pair} "
                     f"({len(self.surviving_options())} of {len(self.options)} options)")

    def _find_other_table(self):
        other = self.board.other_table(self.traveller, self.sitting_pair)
        if other is None and not self.traveller.ranking_numbers:
            others = self.board.others(self.traveller)
            if len(others) == 1:
                other = others[0]
        return other

    # Scores

    def _score(self, points):
        """Comparative score for a points total; equal totals share one calculation"""
        if points not in self._scores:
            self._scores[points] = duplicate_scoring.score(points, self._field_points,
                                                           self.event_format.score_type)
        return self._scores[points]

    def _points(self, contract, declarer, tricks):
        return duplicate_scoring.points(contract, self.board.vulnerability, declarer,
                                        tricks - contract.tricks, self.sitting_pair)

    def _build_scores(self):
        for option in self.options:
            option.assessments = {}
            if option.contract.is_pass_out:
                option.assessments[PLAY] = Assessment(0, 0, self._score(0))
                continue
            estimate = self.estimator.estimate(option.suit, option.declarer)
            if estimate is None:
                continue
            for method, tricks in estimate.made.items():
                points = self._points(option.contract, option.declarer, tricks)
                option.assessments[method] = Assessment(tricks, points, self._score(points))
            option.mode_fraction = estimate.mode_fraction

    def _reduce(self):
        DominanceReducer(self.options, self.sitting_pair).reduce()

    def refresh_options(self):
        """Rebuild estimates, scores and dominance without regenerating the options"""
        for option in self.options:
            option.restore()
        self._scores = {}
        self._comparisons = {}
        self.estimator.rebuild()
        self._build_scores()
        self._reduce()
        logger.debug(f"Board {self.board.number}: analysis refreshed for {self.sitting_pair}")

    def invalidate_cache(self):
        """Drop memoized results; same as a refresh as everything derived is rebuilt"""
        self.refresh_options()

    # Overrides and rejections

    def set_override(self, suit, declarer, tricks):
        self.overrides.set(self.board.number, suit, declarer, tricks)
        self.refresh_options()

    def clear_override(self, suit, declarer):
        self.overrides.clear(self.board.number, suit, declarer)
        self.refresh_options()

    def reject(self, phase):
        self.overrides.reject(self.board.number, self.sitting_pair, phase)
        self._comparisons = {}

    def accept(self, phase):
        self.overrides.accept(self.board.number, self.sitting_pair, phase)
        self._comparisons = {}

    def is_rejected(self, phase):
        return self.overrides.is_rejected(self.board.number, self.sitting_pair, phase)

    # Method selection

    def use_method(self, suit, declarer, override_regardless=False):
        return self.estimator.use_method(suit, declarer, override_regardless)

    def use_method_made_value(self, combination):
        """
        Trick estimate for a combination using the selected method.

        Returns:
            MadeValue(method, made, override) or None if nothing is known
        """
        estimate = self.estimator.estimate_for(combination)
        if estimate is None:
            return None
        method = self.use_method(combination.suit, combination.declarer)
        if method is None:
            return None
        return MadeValue(method, estimate.get(method), estimate.get(OVERRIDE))

    def option_method(self, option):
        if option.contract.is_pass_out:
            return PLAY
        return self.use_method(option.suit, option.declarer)

    def option_assessment(self, option):
        method = self.option_method(option)
        return None if method is None else option.assessments.get(method)

    def option_reliability(self, option):
        method = self.option_method(option)
        return 0 if method is None else reliability(method)

    # Options

    @property
    def actual_option(self):
        return self.options[0] if self.options else None

    def surviving_options(self):
        return [option for option in self.options if not option.removed]

    def best_option(self):
        """
        Best surviving decision open to the sitting pair: most reliable
        estimate first, then the best score (points when there is no score).
        The actual result is always a candidate, whoever declared it.

        A doubled winner that came within doubled_margin tricks of making
        gives way to the undoubled option it follows from, unless that
        option was pruned.
        """
        actual = self.actual_option
        candidates = [option for option in self.surviving_options()
                      if (option is actual or option.decision_by == self.sitting_pair)
                      and self.option_assessment(option) is not None]
        if not candidates:
            return None

        use_scores = all(self.option_assessment(option).score is not None for option in candidates)

        def rank(option):
            assessment = self.option_assessment(option)
            value = assessment.score if use_scores else assessment.points
            return self.option_reliability(option), value

        best = max(candidates, key=rank)
        if best.double and best.linked is not None and not self.options[best.linked].removed:
            assessment = self.option_assessment(best)
            if assessment.tricks >= best.contract.tricks - self.doubled_margin:
                return self.options[best.linked]
        return best

    def _value(self, assessment):
        return assessment.score if assessment.score is not None else assessment.points

    def option_rows(self):
        """Option details for display, one dict per option in generation order"""
        rows = []
        for option in self.options:
            method = self.option_method(option)
            rows.append({
                'index': option.index,
                'type': option.type,
                'display_type': option.display_type,
                'action': option.description(method),
                'contract': option.contract.compact,
                'declarer': option.declarer,
                'decision_by': option.decision_by,
                'linked': option.linked,
                'method': method,
                'assessments': {
                    key: {'tricks': value.tricks, 'points': value.points, 'score': value.score}
                    for key, value in option.assessments.items()
                },
                'removed_by': option.removed_by,
                'removed_reason': option.removed_reason,
            })
        return rows

    # Comparisons

    def compare(self, combination, other_table=False):
        """
        Compare the play of a combination with the best reference available:
        an override, then the other table of a head-to-head match, then the
        field median, then double dummy.

        With other_table the other table's result is compared, and our own
        table becomes its head-to-head reference.

        Returns:
            Comparison or None if there is no result or no reference
        """
        key = (combination, other_table)
        if key not in self._comparisons:
            self._comparisons[key] = self._compare(combination, other_table)
        return self._comparisons[key]

    def _compare(self, combination, other_table):
        estimate = self.estimator.estimate_for(combination)
        if estimate is None:
            return None
        played_method = OTHER if other_table else PLAY
        # Teammates at the other table sit the other way round
        viewpoint = other_pair(self.sitting_pair) if other_table else self.sitting_pair
        sign = -1 if other_table else 1
        played = estimate.get(played_method)
        contract = self._contract_for(combination, other_table)
        if played is None or contract is None:
            return None

        if not other_table and estimate.get(OVERRIDE) is not None:
            method = OVERRIDE
            reference = estimate.get(OVERRIDE)
            short = f"Override {reference} tricks"
        elif other_table and estimate.get(PLAY) is not None:
            method = PLAY
            reference = estimate.get(PLAY)
            short = f"Our table {reference} tricks"
        elif self.head_to_head and not other_table and estimate.get(OTHER) is not None:
            method = OTHER
            reference = estimate.get(OTHER)
            short = f"Other table {reference} tricks"
        elif estimate.get(MEDIAN) is not None:
            method = MEDIAN
            reference = estimate.get(MEDIAN)
            short = self._field_description(played, estimate.field, combination.declarer, viewpoint)
        elif estimate.get(DOUBLE_DUMMY) is not None:
            method = DOUBLE_DUMMY
            reference = estimate.get(DOUBLE_DUMMY)
            short = f"Double dummy {reference} tricks"
        else:
            return None

        played_points = self._points(contract, combination.declarer, played)
        reference_points = self._points(contract, combination.declarer, reference)
        played_score = self._score(played_points)
        reference_score = self._score(reference_points)
        if played_score is not None and reference_score is not None:
            impact = (played_score - reference_score) * sign
            impact_text = duplicate_scoring.format_score(impact, self.event_format.score_type, verbose=True)
        else:
            impact = float(played_points - reference_points) * sign
            impact_text = f"{impact:+.0f}"
        verbose = f"Made {played} tricks, {short[0].lower()}{short[1:]} ({impact_text})"
        return Comparison(method, short, verbose, impact)

    def _contract_for(self, combination, other_table=False):
        """Contract played in a combination at the table being compared, else the first option in it"""
        traveller = self.other_traveller if other_table else self.traveller
        if traveller is not None and not traveller.contract.is_pass_out and \
                self.estimator.combination(traveller.contract.suit, traveller.declarer_pair) == combination:
            return traveller.contract
        for option in self.options:
            if not option.contract.is_pass_out and option.combination == combination:
                return option.contract
        return None

    def _field_description(self, played, field, declarer, viewpoint):
        """'Better than 60% of field' from the viewpoint pair's side"""
        sign = 1 if pair_of(declarer) == viewpoint else -1
        better = sum(1 for tricks in field if (played - tricks) * sign > 0)
        worse = sum(1 for tricks in field if (played - tricks) * sign < 0)
        if better == 0 and worse == 0:
            return "Same as field"
        if better >= worse:
            return f"Better than {better * 100 // len(field)}% of field"
        return f"Worse than {worse * 100 // len(field)}% of field"

    # Summary

    def summary(self, phase, other_table=False):
        """
        Description, impact and status for the bidding or the play.

        Args:
            phase: BIDDING or PLAY
            other_table: Summarise the other table's play (head-to-head only)
        """
        if phase == BIDDING:
            description, impact, method = self._bidding_summary()
        elif phase == PLAY_PHASE:
            description, impact, method = self._play_summary(other_table)
        else:
            raise ValueError(f"Unknown phase: {phase!r}")

        if self.is_rejected(phase):
            status = REJECTED
        else:
            status = classify(impact, self.event_format.significant)
        return AnalysisSummary(phase, description, impact, status, method)

    def _bidding_summary(self):
        best = self.best_option()
        actual = self.actual_option
        if best is None or actual is None:
            return "No analysis available", None, None
        method = self.option_method(best)
        if best is actual:
            return best.description(method), 0.0, method
        best_assessment = self.option_assessment(best)
        actual_assessment = self.option_assessment(actual)
        impact = None
        if actual_assessment is not None:
            impact = float(self._value(actual_assessment) - self._value(best_assessment))
        return f"{best.description(method)} ({best.contract.display})", impact, method

    def _play_summary(self, other_table):
        traveller = self.other_traveller if other_table else self.traveller
        if traveller is None or traveller.contract.is_pass_out:
            return "No play to analyse", None, None
        combination = self.estimator.combination(traveller.contract.suit, traveller.declarer_pair)
        comparison = self.compare(combination, other_table)
        if comparison is None:
            return "Nothing to compare with", None, None
        return comparison.verbose, comparison.impact, comparison.method


class AnalysisCache:
    """
    Caller-owned store of analyses keyed by (board number, table, sitting pair).

    All analyses share one OverrideStore; after changing it call
    refresh_board for the board concerned.
    """

    def __init__(self, event_format=None, overrides=None, **analysis_options):
        self.event_format = event_format or EventFormat()
        self.overrides = overrides if overrides is not None else OverrideStore()
        self.analysis_options = analysis_options
        self._analyses = {}

    @staticmethod
    def key(board, traveller, sitting):
        """
        Table identifier, else the ranking numbers, else the traveller's
        position on the board.
        """
        table = traveller.table
        if table is None and traveller.ranking_numbers:
            table = tuple(sorted(traveller.ranking_numbers.items()))
        if table is None:
            for position, other in enumerate(board.travellers):
                if other is traveller:
                    table = ('position', position)
                    break
            else:
                raise ValueError(f"{traveller!r} is not on board {board.number} and has no table or ranking numbers")
        return board.number, table, pair_of(sitting)

    def get(self, board, traveller, sitting):
        key = self.key(board, traveller, sitting)
        analysis = self._analyses.get(key)
        if analysis is None:
            analysis = BoardAnalysis(board, traveller, sitting, event_format=self.event_format,
                                     overrides=self.overrides, **self.analysis_options)
            self._analyses[key] = analysis
        return analysis

    def invalidate(self, board_number=None):
        """Forget the analyses for one board, or all of them"""
        if board_number is None:
            self._analyses = {}
        else:
            self._analyses = {key: value for key, value in self._analyses.items() if key[0] != board_number}

    def refresh_board(self, board_number):
        for key, analysis in self._analyses.items():
            if key[0] == board_number:
                analysis.refresh_options()

    def __len__(self):
        return len(self._analyses)

    def __contains__(self, key):
        return key in self._analyses
