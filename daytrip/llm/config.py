from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class LLMConfig:
    """Groq settings for the ranking assist; an empty key turns the assist off."""

    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    timeout: float = 30.0
    # Only ids come back, so replies stay short
    max_tokens: int = 256
    temperature: float = 0.3
    # Rows beyond this are left out of the prompt table
    max_candidates: int = 40
    enabled: bool = True


DEFAULT_LLM_CONFIG = LLMConfig()
