"""
Narrative summary of a ``ScoreResult``.

Produces a short, factual paragraph for display next to the score.  Every
sentence is observational: it states what the figures show and never
recommends an action.

Sentence order
--------------
1. Overall band      (score >= 80 / >= 65 / >= 50 / below)
2. Cash flow         (weekly >= 100 / >= 0 / >= -200 / below), if known
3. Uplift and constraints, whichever are known
4. Yield band        (Strong / OK / Weak), if known
5. Missing factors   ("Data for yield and uplift potential was not available ...")
6. Confidence note   (Low / Medium only)
"""

from __future__ import annotations

from deal_scorer.models.result import ScoreResult, SubScore
from deal_scorer.taxonomy.factors import FACTOR_DISPLAY_NAMES, ConfidenceLabel, SubScoreName
from deal_scorer.utils.numbers import round_half_up


def _weekly_amount(sub: SubScore) -> int:
    """Weekly cash position rounded to whole currency units, as displayed."""
    if sub.metric is None:
        return 0
    return round_half_up(sub.metric)


def _overall_sentence(score: int) -> str:
    if score >= 80:
        return "This property scores strongly across multiple metrics."
    if score >= 65:
        return "This property shows moderate scores with variation across metrics."
    if score >= 50:
        return "This property shows mixed results across the scored metrics."
    return "This property scores below average on several metrics."


def _cash_flow_sentence(sub: SubScore) -> str:
    weekly = _weekly_amount(sub)
    if weekly >= 100:
        return (
            f"Cash flow is positive at {sub.detail}, indicating income exceeds "
            "estimated holding costs."
        )
    if weekly >= 0:
        return f"Cash flow is approximately neutral at {sub.detail}."
    if weekly >= -200:
        return (
            f"Cash flow is negative at {sub.detail}, indicating estimated holding "
            "costs exceed rental income."
        )
    return f"Cash flow shows a significant negative position at {sub.detail}."


def _uplift_constraints_sentence(uplift: SubScore, constraints: SubScore) -> str | None:
    if uplift.is_known and constraints.is_known:
        good_uplift = uplift.score >= 70
        few_constraints = constraints.score >= 75
        if good_uplift and few_constraints:
            return (
                f"Uplift scenarios show {uplift.detail.lower()}. "
                "Identified constraints are minimal."
            )
        if good_uplift:
            return (
                f"Uplift scenarios show {uplift.detail.lower()}. "
                "Multiple planning or site constraints have been identified."
            )
        if few_constraints:
            return (
                "Uplift scenarios show limited potential. "
                "Few planning constraints were identified."
            )
        return "Uplift scenarios show limited potential. Multiple constraints have been identified."
    if uplift.is_known:
        return f"Uplift scenarios show {uplift.detail.lower()}. Constraint data is incomplete."
    if constraints.is_known:
        note = (
            "Few constraints identified."
            if constraints.score >= 75
            else "Multiple constraints identified."
        )
        return f"Uplift data is incomplete. {note}"
    return None


def _yield_sentence(sub: SubScore) -> str:
    detail = sub.detail.lower()
    if sub.score >= 75:
        return f"Estimated {detail}, above typical market averages."
    if sub.score >= 45:
        return f"Estimated {detail}, within typical market range."
    return f"Estimated {detail}, below typical market averages."


def build_summary(result: ScoreResult) -> str:
    """Return the factual narrative paragraph for ``result``."""
    cash_flow = result.sub(SubScoreName.CASH_FLOW)
    uplift = result.sub(SubScoreName.UPLIFT)
    constraints = result.sub(SubScoreName.CONSTRAINTS)
    yield_sub = result.sub(SubScoreName.YIELD)

    sentences = [_overall_sentence(result.score)]

    if cash_flow.is_known:
        sentences.append(_cash_flow_sentence(cash_flow))

    if (sentence := _uplift_constraints_sentence(uplift, constraints)) is not None:
        sentences.append(sentence)

    if yield_sub.is_known:
        sentences.append(_yield_sentence(yield_sub))

    unknown = [FACTOR_DISPLAY_NAMES[s.name].lower() for s in result.subs if not s.is_known]
    if unknown:
        sentences.append(f"Data for {' and '.join(unknown)} was not available for this analysis.")

    if result.confidence_label == ConfidenceLabel.LOW:
        sentences.append("Limited data availability affects scoring precision.")
    elif result.confidence_label == ConfidenceLabel.MEDIUM:
        sentences.append("Some data points were unavailable, affecting scoring precision.")

    return " ".join(sentences)
