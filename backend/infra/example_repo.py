# backend/infra/example_repo.py
from functools import lru_cache
from typing import Dict, List, Optional

import yaml

from backend.infra.paths import SECTOR_EXAMPLES_PATH


@lru_cache
def load_sector_examples() -> List[Dict[str, str]]:
    """섹터 예시 파일에서 예시 목록(title, icon, tag, text)을 추출"""
    with open(SECTOR_EXAMPLES_PATH, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return data.get("sector_examples", {}).get("examples", [])


def find_sector_example(title: str) -> Optional[Dict[str, str]]:
    """제목(대소문자 무시)으로 예시 하나를 찾는다. 없으면 None."""
    wanted = title.strip().lower()
    for example in load_sector_examples():
        if str(example.get("title", "")).lower() == wanted:
            return example
    return None
