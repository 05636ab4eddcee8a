import os
from pathlib import Path

from dotenv import load_dotenv

# ------------------- ENVIRONMENT CONFIGURATION -------------------
SHOULD_DOTENV = os.getenv("SHOULD_DOTENV", "true").lower() == "true"
if SHOULD_DOTENV:
    script_path = Path(os.path.realpath(__file__))
    env_path = script_path.parent.joinpath("configs", ".env")
    load_dotenv(env_path)

HILL_MATRIX_SIZE = int(os.getenv("HILL_MATRIX_SIZE", "3"))
RSA_KEY_BITS = int(os.getenv("RSA_KEY_BITS", "2048"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "encryption.log")

SHOW_METRICS = os.getenv("SHOW_METRICS", "false").lower() == "true"
METRICS_CSV = os.getenv("METRICS_CSV", "")
