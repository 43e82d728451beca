"""Parse and validate game-master outputs."""
from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from glitch_city.engine.errors import OutcomeValidationError
from glitch_city.models.llm_contract import GameOutcome

logger = logging.getLogger(__name__)


class OutputParser:
    @staticmethod
    def parse_outcome(raw: Any) -> GameOutcome:
        """Validate a decoded payload against the outcome contract.

        Raises OutcomeValidationError when a required field is missing or
        wrongly typed. Optional blocks are defaulted, never rejected.
        """
        if not isinstance(raw, dict):
            raise OutcomeValidationError(f"outcome must be a JSON object, got {type(raw).__name__}")
        try:
            return GameOutcome.model_validate(raw)
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            raise OutcomeValidationError(f"invalid outcome fields: {fields}") from e

    @staticmethod
    def extract_json_from_text(text: str) -> dict[str, Any] | None:
        text = text.strip()
        if "```json" in text:
            start = text.index("```json") + 7
            end = text.find("```", start)
            try:
                parsed = json.loads(text[start:end if end != -1 else len(text)].strip())
                if isinstance(parsed, dict):
                    return parsed
            except json.JSONDecodeError:
                pass
        brace_depth = 0
        start_idx = None
        in_string = False
        escaped = False
        for i, c in enumerate(text):
            if in_string:
                if escaped:
                    escaped = False
                elif c == "\\":
                    escaped = True
                elif c == '"':
                    in_string = False
                continue
            if c == '"' and brace_depth > 0:
                in_string = True
            elif c == "{":
                if brace_depth == 0:
                    start_idx = i
                brace_depth += 1
            elif c == "}" and brace_depth > 0:
                brace_depth -= 1
                if brace_depth == 0 and start_idx is not None:
                    try:
                        return json.loads(text[start_idx : i + 1])
                    except json.JSONDecodeError:
                        logger.debug("Discarding unparseable JSON candidate at %d", start_idx)
                        start_idx = None
        return None
