"""
Tag checks shared by the passes
"""

from typing import Any

from ..config import ExtractionConfig


def is_building(tags: Any, config: ExtractionConfig) -> bool:
    """True if tags carry the building tag and none of the excluded tags"""
    if config.building_tag not in tags:
        return False
    return not any(key in tags for key in config.excluded_tags)
