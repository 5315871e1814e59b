from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from typing import Any

from groq import Groq

from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a day-trip planner. "
    "Given the traveller's situation and a list of candidate places, "
    "pick the best places for a single day out.\n\n"
    "Selection criteria:\n"
    "1. Prefer higher-rated places.\n"
    "2. Suit the group size and the way they travel.\n"
    "3. Balance food and culture; a restaurant-class food choice must "
    "include restaurants as well as cultural places.\n"
    "4. Keep place types varied (restaurant, cafe, culture, attraction).\n\n"
    "Return ONLY valid JSON in this exact format:\n"
    '{"ids": ["<place_id>", "<place_id>"]}\n'
    "Use only ids from the provided list, best first."
)

_TOKEN_RE = re.compile(r"[A-Za-z0-9_\-]+")


def _build_user_message(
    preferences: dict[str, Any],
    candidates: Sequence[dict[str, Any]],
    limit: int,
) -> str:
    lines = [f"## Pick exactly {limit} places", "", "## Traveller"]
    if preferences.get("people_count"):
        lines.append(f"- Group size: {preferences['people_count']}")
    if preferences.get("transport"):
        lines.append(f"- Transport: {preferences['transport']}")
    if preferences.get("foods"):
        lines.append(f"- Food: {', '.join(preferences['foods'])}")
    if preferences.get("cultures"):
        lines.append(f"- Culture: {', '.join(preferences['cultures'])}")
    if preferences.get("date"):
        lines.append(f"- Date: {preferences['date']}")

    lines.append("\n## Candidate Places")
    lines.append("| ID | Name | Category | Rating | Address |")
    lines.append("|---|---|---|---|---|")
    for c in candidates:
        lines.append(
            f"| {c['id']} | {c['name']} | {c.get('category', '?')} "
            f"| {c.get('rating', 'N/A')} | {c.get('address') or ''} |"
        )

    return "\n".join(lines)


def _json_ids(content: str) -> list[str]:
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError:
        return []
    raw_ids = parsed.get("ids", []) if isinstance(parsed, dict) else parsed
    if not isinstance(raw_ids, list):
        return []
    return [str(rid) for rid in raw_ids if rid is not None]


def parse_ranked_ids(content: str, known_ids: Sequence[str], limit: int) -> list[str]:
    """
    Pull place ids out of a model reply, in order of first appearance.

    Well-formed JSON is read from its ``ids`` list; anything else is scanned
    for tokens matching a known id. Duplicates are dropped and the result is
    capped at ``limit``.
    """
    ordered = _json_ids(content)
    if not ordered:
        known = set(known_ids)
        ordered = [tok for tok in _TOKEN_RE.findall(content) if tok in known]

    seen: set[str] = set()
    result: list[str] = []
    for rid in ordered:
        if rid in seen:
            continue
        seen.add(rid)
        result.append(rid)
        if len(result) >= limit:
            break
    return result


def rank_places(
    preferences: dict[str, Any],
    candidates: Sequence[dict[str, Any]],
    limit: int,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> list[str]:
    """
    Ask the Groq LLM for the best ``limit`` place ids.

    Returns an empty list on any failure (missing key, timeout, bad JSON,
    API error) so callers fall back to pool order.
    """
    if not config.enabled or not config.api_key:
        return []

    if not candidates or limit <= 0:
        return []

    candidates = list(candidates)[: config.max_candidates]
    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": _build_user_message(preferences, candidates, limit),
                },
            ],
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )

        content = response.choices[0].message.content or ""
        ranked = parse_ranked_ids(content, [str(c["id"]) for c in candidates], limit)
        logger.info("LLM ranked %d of %d candidates", len(ranked), len(candidates))
        return ranked

    except Exception:
        logger.warning("Groq LLM call failed, falling back to pool order", exc_info=True)
        return []
