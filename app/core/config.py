"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    OPENAI_API_KEY       — Remote analysis key; unset means local heuristics only
    OPENAI_BASE_URL      — OpenAI-compatible endpoint root (default: api.openai.com/v1)
    OPENAI_MODEL         — Chat model used for narrative insights (default: gpt-4o-mini)
    LLM_TIMEOUT_SECONDS  — Network timeout for the single remote call (default: 30)
    MAX_UPLOAD_BYTES     — Largest accepted defect log upload (default: 5 MiB)
    CSV_DELIMITER        — Field separator for the CSV path (default: ",")
    CSV_QUOTE_CHAR       — Quote character for the CSV path (default: '"')
    DIGEST_SAMPLE_SIZE   — Defects included verbatim in the remote digest (default: 20)
    LOG_DIR              — Directory for the daily log file (default: logs)
    LOG_LEVEL            — Root logging level name (default: INFO)
    LOG_TO_FILE          — "false" disables the daily log file (default: true)

Remote Analysis:
    The remote call is attempted once. Any failure falls back to the local
    heuristic analyzer, so the service is fully usable without a key.
"""
import os
from dotenv import load_dotenv

load_dotenv()

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", 30))

# Upload limits
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", 5 * 1024 * 1024))

# CSV dialect
CSV_DELIMITER = os.getenv("CSV_DELIMITER", ",")
CSV_QUOTE_CHAR = os.getenv("CSV_QUOTE_CHAR", '"')

# Remote digest size
DIGEST_SAMPLE_SIZE = int(os.getenv("DIGEST_SAMPLE_SIZE", 20))

LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() in ("1", "true", "yes")
