import json
from typing import Any, Dict

from core.errors import PlanParseError


def extract_json_object(raw: str) -> Dict[str, Any]:
    # greedy: first "{" through the last "}"
    text = raw or ""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise PlanParseError("No JSON object found in response")

    try:
        data = json.loads(text[start:end + 1])
    except json.JSONDecodeError as exc:
        raise PlanParseError(f"Invalid JSON in response: {exc.msg}") from exc

    if not isinstance(data, dict):
        raise PlanParseError("Response JSON is not an object")
    return data
