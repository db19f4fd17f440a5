"""
Option Reducer
Removes options that can never be better than an option listed before
them, so only genuine alternatives are left for display and for picking
the best decision.

Points in the assessments are always from the sitting pair's point of
view. Each comparison is made from the point of view of whoever takes
the decision, so the comparison is inverted when that is the opponents.
"""

from logging_config import setup_logger
from option_generator import ACTUAL
from trick_estimator import OVERRIDE, PLAY

logger = setup_logger(__name__)


def equal_or_worse(option, compare, invert=False, method=None):
    """
    True if 'option' is never better than 'compare'.

    When both have an override only the overrides are compared, otherwise
    every method assessed on both options (or just 'method' if given) must
    show 'option' no better.
    """
    if OVERRIDE in option.assessments and OVERRIDE in compare.assessments:
        methods = [OVERRIDE]
    elif method is not None:
        methods = [method] if method in option.assessments and method in compare.assessments else []
    else:
        methods = [method for method in option.assessments if method in compare.assessments]
    sign = -1 if invert else 1
    for method in methods:
        if (option.assessments[method].points - compare.assessments[method].points) * sign > 0:
            return False
    return True


class DominanceReducer:
    """
    Prunes a generated option list in place.

    Args:
        options: Option list in generation order
        sitting: Our partnership
    """

    def __init__(self, options, sitting):
        self.options = options
        self.sitting = sitting

    def invert(self, option):
        """Compare from the opponents' point of view?"""
        invert = option.declarer != self.sitting
        if option.decision_by != option.declarer:
            invert = not invert
        return invert

    def restore(self):
        for option in self.options:
            option.restore()

    def reduce(self):
        """Run all passes; returns the surviving options"""
        if len(self.options) >= 2:
            self._remove_pointless_doubles()
            self._remove_dominated()
            self._remove_orphans()
            self._recheck_doubles()
        survivors = [option for option in self.options if not option.removed]
        logger.debug(f"{len(survivors)} of {len(self.options)} options survive")
        return survivors

    def _linked(self, option):
        return None if option.linked is None else self.options[option.linked]

    def _remove_pointless_doubles(self):
        """A double that gains nothing over leaving the contract undoubled"""
        for option in self.options:
            linked = self._linked(option)
            if option.double and not option.removed and linked is not None and not linked.removed:
                if equal_or_worse(option, linked, self.invert(option)):
                    option.remove(linked, "Double no better")

    def _remove_dominated(self):
        """Anything never better than an earlier option, or a lower level beaten by a higher one"""
        for index in range(1, len(self.options)):
            option = self.options[index]
            for compare in self.options[:index]:
                if option.removed:
                    break
                if compare.removed:
                    continue
                method = _against_play(option, compare)
                if equal_or_worse(option, compare, self.invert(option), method):
                    option.remove(compare, "Earlier better")
                elif _same_ladder(option, compare):
                    if equal_or_worse(compare, option, self.invert(compare), method):
                        compare.remove(option, "Later better")
                        break

    def _remove_orphans(self):
        """Options following from an option that has gone"""
        for option in self.options:
            linked = self._linked(option)
            if linked is not None and linked.removed and linked.removed_by != option.index:
                option.remove(linked, "Linked gone")

    def _recheck_doubles(self):
        """
        Drop an undoubled option its double always beats, then check the
        double still makes sense against the earlier options from the
        point of view of the original decision.
        """
        for index, option in enumerate(self.options):
            linked = self._linked(option)
            if not option.double or option.removed or linked is None:
                continue
            if not linked.removed and linked.allow_remove:
                if equal_or_worse(linked, option, self.invert(option)):
                    linked.remove(option, "Worse than double")
            if not linked.removed:
                continue
            for compare in self.options[:index]:
                if compare.removed or compare is linked:
                    continue
                if equal_or_worse(option, compare, self.invert(linked), _against_play(option, compare)):
                    option.remove(compare, "Original bad doubled")
                    for linking in self.options:
                        if linking.linked == linked.index and linking is not option:
                            linking.remove(option, "Linked to bad bid")
                    break


def _against_play(option, compare):
    """Against the actual contract in the same strain only the table result counts"""
    if compare.type == ACTUAL and option.suit == compare.suit and option.declarer == compare.declarer:
        return PLAY
    return None


def _same_ladder(option, compare):
    """Same strain, declarer and type, both undoubled, differing only in level"""
    return option.contract.suit == compare.contract.suit \
        and option.declarer == compare.declarer \
        and option.type == compare.type \
        and not option.contract.double and not compare.contract.double \
        and option.contract.level != compare.contract.level
