"""Configuration: env, API settings, playlist naming, cue placement constants."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of autocue package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so AUTOCUE_* overrides are set
load_dotenv(BASE_DIR / ".env")

# API
API_HOST = os.getenv("AUTOCUE_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("AUTOCUE_API_PORT", "8000"))

LOG_LEVEL = os.getenv("AUTOCUE_LOG_LEVEL", "INFO").upper()

# Output
PLAYLIST_NAME = os.getenv("AUTOCUE_PLAYLIST_NAME", "Autocue Processed Tracks")
# Used when an output path points at a directory
OUTPUT_NAME = os.getenv("AUTOCUE_OUTPUT_NAME", "rekordbox_modified.xml")

# Cue placement
BEATS_PER_BAR = 4
MIN_CUE_DISTANCE_SEC = 0.5
MIN_CUE_START_SEC = 0.025  # anything earlier is treated as the track start
