"""
JSON extraction and repair for Gemini structured output.

Gemini is asked for application/json, but the free-tier models still
occasionally wrap output in markdown fences or stop mid-object. Handles:
code fences, truncated JSON, trailing commas, and literal newlines inside
strings. Both top-level objects and arrays are supported.
"""
import json
import re
import logging
from typing import Any

from .errors import OutputValidationError

logger = logging.getLogger(__name__)


def _repair_truncated_json(text: str) -> str:
    """Repair JSON that was truncated mid-generation by closing open structures.

    Strategy: walk the string tracking open brackets/braces/strings,
    then append the necessary closing tokens.
    """
    text = text.rstrip()
    # Trailing comma is common right before truncation
    text = re.sub(r',\s*$', '', text)

    stack = []
    in_string = False
    i = 0
    while i < len(text):
        c = text[i]
        if c == '\\' and in_string:
            i += 2
            continue
        if c == '"':
            in_string = not in_string
        elif not in_string:
            if c in ('{', '['):
                stack.append(c)
            elif c == '}' and stack and stack[-1] == '{':
                stack.pop()
            elif c == ']' and stack and stack[-1] == '[':
                stack.pop()
        i += 1

    if in_string:
        text += '"'

    for opener in reversed(stack):
        text += ']' if opener == '[' else '}'

    return text


def _fix_newlines_in_json_strings(text: str) -> str:
    """Replace literal newlines inside JSON string values with spaces."""
    result = []
    in_string = False
    i = 0
    while i < len(text):
        c = text[i]
        if c == '\\' and in_string and i + 1 < len(text):
            result.append(c)
            result.append(text[i + 1])
            i += 2
            continue
        if c == '"':
            in_string = not in_string
        if c == '\n' and in_string:
            result.append(' ')
        else:
            result.append(c)
        i += 1
    return ''.join(result)


def _slice_json(text: str) -> str:
    """Cut the text down to the outermost JSON object or array."""
    starts = [pos for pos in (text.find('{'), text.find('[')) if pos != -1]
    if not starts:
        logger.error(f"No JSON found in response: {text[:200]}...")
        raise OutputValidationError("Model response contained no JSON")

    start = min(starts)
    closer = '}' if text[start] == '{' else ']'
    end = text.rfind(closer)
    if end > start:
        return text[start:end + 1]
    # No closing token: truncated output
    return text[start:]


def extract_json(text: str) -> Any:
    """Extract a JSON object or array from model output.

    Raises:
        OutputValidationError: If the text is empty or no repair attempt parses
    """
    if not text or not text.strip():
        raise OutputValidationError("Model returned an empty response")

    fenced = re.search(r'```(?:json)?\s*([\s\S]*?)```', text)
    if fenced:
        text = fenced.group(1)

    text = _slice_json(text)
    text = _fix_newlines_in_json_strings(text)

    # Attempt 1: direct parse
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"JSON parse error (attempt 1 - direct): {e}")

    # Attempt 2: trailing commas before closing brackets
    try:
        return json.loads(re.sub(r',\s*([}\]])', r'\1', text))
    except json.JSONDecodeError as e:
        logger.warning(f"JSON parse error (attempt 2 - comma fix): {e}")

    # Attempt 3: close whatever the model left open
    try:
        repaired = _repair_truncated_json(text)
        repaired = re.sub(r',\s*([}\]])', r'\1', repaired)
        result = json.loads(repaired)
        logger.info("JSON successfully repaired from truncated output")
        return result
    except json.JSONDecodeError as e:
        logger.warning(f"JSON parse error (attempt 3 - truncation repair): {e}")

    logger.error(f"All JSON repair attempts failed. Raw text: {text[:500]}...")
    raise OutputValidationError("Failed to parse model response as JSON")
