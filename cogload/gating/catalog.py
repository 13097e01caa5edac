"""Content catalogue - base thresholds and caps per content type.

System 2 thresholds are shifted by the plan's gating modifiers:
- sharpness / readiness thresholds + s2_threshold_modifier
- recovery threshold = max(base, require_rec_for_s2)
- weekly S2 and Insight caps come from the plan
"""

from __future__ import annotations

from cogload.gating.types import CapGroup, CapRule, ContentRequirements, ContentType
from cogload.plans.types import GatingModifiers, TrainingPlan

S1_DAILY_MAX = 3
S2_DAILY_MAX = 1
READING_DAILY_MAX = 2
PODCAST_DAILY_MAX = 2

_S2_TYPES = {ContentType.S2_CT, ContentType.S2_IN}

BASE_REQUIREMENTS: dict[ContentType, ContentRequirements] = {
    ContentType.S1_AE: ContentRequirements(
        content_type=ContentType.S1_AE,
        min_recovery=45,
        caps=(CapRule(scope="DAILY", group=CapGroup.S1, limit=S1_DAILY_MAX),),
    ),
    ContentType.S1_RA: ContentRequirements(
        content_type=ContentType.S1_RA,
        min_recovery=50,
        min_readiness=45,
        caps=(CapRule(scope="DAILY", group=CapGroup.S1, limit=S1_DAILY_MAX),),
    ),
    ContentType.S2_CT: ContentRequirements(
        content_type=ContentType.S2_CT,
        min_recovery=50,
        min_sharpness=65,
        min_readiness=60,
        caps=(CapRule(scope="DAILY", group=CapGroup.S2, limit=S2_DAILY_MAX),),
    ),
    ContentType.S2_IN: ContentRequirements(
        content_type=ContentType.S2_IN,
        min_recovery=55,
        min_sharpness=60,
        min_readiness=50,
        caps=(CapRule(scope="DAILY", group=CapGroup.S2, limit=S2_DAILY_MAX),),
    ),
    ContentType.READING_RECOVERY_SAFE: ContentRequirements(
        content_type=ContentType.READING_RECOVERY_SAFE,
        min_recovery=50,
        caps=(CapRule(scope="DAILY", group=CapGroup.READING, limit=READING_DAILY_MAX),),
    ),
    ContentType.READING_NON_FICTION: ContentRequirements(
        content_type=ContentType.READING_NON_FICTION,
        min_recovery=50,
        min_sharpness=60,
        requires_full_bandwidth=True,
        caps=(CapRule(scope="DAILY", group=CapGroup.READING, limit=READING_DAILY_MAX),),
    ),
    ContentType.READING_BOOK: ContentRequirements(
        content_type=ContentType.READING_BOOK,
        min_recovery=55,
        min_sharpness=65,
        min_readiness=55,
        requires_full_bandwidth=True,
        caps=(CapRule(scope="DAILY", group=CapGroup.READING, limit=READING_DAILY_MAX),),
    ),
    ContentType.PODCAST: ContentRequirements(
        content_type=ContentType.PODCAST,
        caps=(CapRule(scope="DAILY", group=CapGroup.PODCAST, limit=PODCAST_DAILY_MAX),),
    ),
}


def requirements_for(content_type: ContentType, plan: TrainingPlan | None = None) -> ContentRequirements:
    """Resolve the thresholds and caps for a content type under a plan.

    Args:
        content_type: Content type to resolve
        plan: Training plan; None uses default modifiers

    Returns:
        Plan-adjusted ContentRequirements
    """
    base = BASE_REQUIREMENTS[ContentType(content_type)]
    if base.content_type not in _S2_TYPES:
        return base

    modifiers = plan.gating if plan is not None else GatingModifiers()
    caps = list(base.caps)
    if base.content_type == ContentType.S2_IN:
        caps.append(CapRule(scope="WEEKLY", group=CapGroup.INSIGHT, limit=modifiers.insight_max_per_week))
    caps.append(CapRule(scope="WEEKLY", group=CapGroup.S2, limit=modifiers.s2_max_per_week))

    return base.model_copy(
        update={
            "min_recovery": max(base.min_recovery, modifiers.require_rec_for_s2),
            "min_sharpness": base.min_sharpness + modifiers.s2_threshold_modifier,
            # Insight readiness floor is not plan-adjusted
            "min_readiness": (
                base.min_readiness + modifiers.s2_threshold_modifier
                if base.content_type == ContentType.S2_CT
                else base.min_readiness
            ),
            "caps": tuple(caps),
        }
    )
