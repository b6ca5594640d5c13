from typing import List

from study_ai.config import Settings, DEFAULT_MODEL


def resolve_preferred_models(settings: Settings) -> List[str]:
    """Ordered, de-duplicated model ids: the primary first, then fallbacks.

    Rebuilt from ``settings`` on every call so a changed configuration is
    picked up by the next request.
    """
    primary = (settings.openai_model or '').strip() or DEFAULT_MODEL
    fallbacks = [m.strip() for m in (settings.openai_fallback_models or '').split(',')]

    seen = set()
    models = []
    for model in [primary, *fallbacks]:
        if model and model not in seen:
            seen.add(model)
            models.append(model)
    return models
