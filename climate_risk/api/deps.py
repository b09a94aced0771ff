"""
Shared FastAPI dependencies.
"""
import random

from fastapi import Depends

from climate_risk.core.config import Settings, get_settings


def get_random_source(settings: Settings = Depends(get_settings)) -> random.Random:
    """
    Random source for synthetic generators.

    Seeded from RANDOM_SEED when set; tests override this dependency.
    """
    return random.Random(settings.random_seed)
