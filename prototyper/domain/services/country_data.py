"""Country and nationality lists for select controls."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, List

DATA_FILE = Path(__file__).resolve().parent.parent.parent / "data" / "country_data.json"

CHOOSE_VALUE = "choose"


@lru_cache(maxsize=1)
def load_country_data() -> Dict[str, List[str]]:
    with DATA_FILE.open(encoding="utf-8") as f:
        return json.load(f)


def select_items(values: List[str], choose_text: str) -> List[Dict[str, object]]:
    """
    Build select items with a leading placeholder option.

    Raises:
        ValueError: If ``values`` is empty
    """
    if not values:
        raise ValueError("Select data is not available or malformed")
    items: List[Dict[str, object]] = [
        {"selected": True, "text": choose_text, "value": CHOOSE_VALUE}
    ]
    items.extend({"text": value, "value": value} for value in values)
    return items


def country_items() -> List[Dict[str, object]]:
    return select_items(load_country_data()["countries"], "Choose country")


def nationality_items() -> List[Dict[str, object]]:
    return select_items(load_country_data()["nationalities"], "Choose nationality")
