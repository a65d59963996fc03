"""Three-valued algebraic comparison of expressions.

The verdict comes from the canonical form of ``p - q``: a zero numerator means
the expressions are the same rational function, a nonzero constant means they
differ by a fixed offset, and anything still mentioning a variable is left
undecided. :func:`find_witnesses` is a randomized cross-check of the last case
and never feeds back into the verdict.
"""

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Dict, Optional
import logging

import numpy as np

from .common import DivisionByZero
from .config import get_settings
from .rational import CanonicalForm

logger = logging.getLogger(__name__)


class Verdict(Enum):
    ALWAYS_EQUAL = "always-equal"
    ALWAYS_UNEQUAL = "always-unequal"
    INDETERMINATE = "indeterminate"


def classify(difference: CanonicalForm) -> Verdict:
    if difference.is_zero():
        return Verdict.ALWAYS_EQUAL
    if difference.is_constant():
        return Verdict.ALWAYS_UNEQUAL
    return Verdict.INDETERMINATE


def compare(p, q) -> Verdict:
    """Verdict for two expressions; DivisionByZero if either is malformed."""
    difference = (p - q).normalize()
    verdict = classify(difference)
    logger.debug("%s vs %s: %s (difference %r)", p, q, verdict.value, difference)
    return verdict


@dataclass(frozen=True)
class Witnesses:
    equal: Optional[Dict[str, Fraction]] = None
    unequal: Optional[Dict[str, Fraction]] = None

    @property
    def complete(self) -> bool:
        return self.equal is not None and self.unequal is not None


def find_witnesses(p, q, trials: Optional[int] = None, bound: Optional[int] = None,
                   seed: Optional[int] = None) -> Witnesses:
    """Search random integer bindings for an agreeing and a disagreeing point.

    The all-zero binding is tried first, then ``trials`` draws from
    ``[-bound, bound]``. Bindings under which either side hits a zero
    denominator are skipped.
    """
    settings = get_settings()
    trials = settings.witness_trials if trials is None else trials
    bound = settings.witness_bound if bound is None else bound
    seed = settings.witness_seed if seed is None else seed
    rng = np.random.default_rng(seed)

    names = sorted(p.variables() | q.variables())
    candidates = [np.zeros(len(names), dtype=np.int64)]
    candidates.extend(rng.integers(-bound, bound, size=(trials, len(names)), endpoint=True))

    equal = unequal = None
    for draw in candidates:
        binding = {name: Fraction(int(v)) for name, v in zip(names, draw)}
        try:
            same = p.substitute(binding) == q.substitute(binding)
        except DivisionByZero:
            continue
        if same and equal is None:
            equal = binding
        elif not same and unequal is None:
            unequal = binding
        if equal is not None and unequal is not None:
            break
    witnesses = Witnesses(equal, unequal)
    if not witnesses.complete:
        logger.debug("witness search for %s vs %s incomplete after %d trials", p, q, trials)
    return witnesses
