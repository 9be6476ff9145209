import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("API_KEY", "testkey")
os.environ.setdefault("SECRET_KEY", "secret")
os.environ.setdefault("DB_PATH", ":memory:")
os.environ.setdefault("GEMINI_ENABLED", "false")
