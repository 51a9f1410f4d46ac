# backend/infra/paths.py
from pathlib import Path
from backend.core.config import BASE_DIR

DATA_DIR = BASE_DIR / "backend" / "data"
CONF_DIR = BASE_DIR / "backend" / "conf"

SECTOR_EXAMPLES_PATH = DATA_DIR / "sector_examples.yaml"

PROMPTS_SYSTEM_PATH = CONF_DIR / "instruct" / "analysis-system-prompt.txt"
PROMPTS_USER_PATH = CONF_DIR / "instruct" / "analysis-user-prompt.txt"

KEY_PATH = CONF_DIR / "key-togetherai.txt"
