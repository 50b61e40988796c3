# routebatch/services/tagger.py

import copy
import json
import math
from typing import Any, Dict, Iterable, List

from routebatch.core.logger import logger
from routebatch.models.directions import TaggedBody, TaggedResult

MALFORMED_JSON_RESPONSE: Dict[str, Any] = {
    "error_message": "Malformed JSON received from server.",
    "routes": [],
    "status": "MALFORMED_JSON",
}


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"non-standard JSON constant {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {text}")
    return value


def tag_response(id: str, body: str) -> TaggedResult:
    """
    Parse `body` as JSON; unparsable bodies get the MALFORMED_JSON placeholder.
    Never raises.
    """
    try:
        response = json.loads(
            body,
            parse_constant=_reject_constant,
            parse_float=_finite_float,
        )
    except ValueError:
        logger.warning("Malformed JSON received for id {}", id)
        response = copy.deepcopy(MALFORMED_JSON_RESPONSE)

    return TaggedResult(id=id, response=response)


def tag_responses(bodies: Iterable[TaggedBody]) -> List[TaggedResult]:
    return [tag_response(item.id, item.body) for item in bodies]
