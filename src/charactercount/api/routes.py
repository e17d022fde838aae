"""
Flask route handlers for the Character Count API.

The count endpoint gives server-rendered forms (and clients without the live
engine) the same count, message and visibility the engine would publish.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from flask import Flask
    from flask_limiter import Limiter

from flask import jsonify, request

from ..constants import BIND_OPTIONS
from ..engine import evaluate
from ..errors import ValidationError

logger = logging.getLogger(__name__)


def _get_count_payload() -> Dict[str, Any]:
    """
    Read and validate the JSON body of a count request.

    Returns:
        Dict with text and the bind options present in the body

    Raises:
        ValidationError: If the body is not a JSON object or text is not a string
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")

    text = data.get("text", "")
    if text is None:
        text = ""
    if not isinstance(text, str):
        raise ValidationError(
            "Field 'text' must be a string.",
            details={"field": "text", "type": type(text).__name__}
        )

    unknown = sorted(set(data) - set(BIND_OPTIONS) - {"text"})
    if unknown:
        raise ValidationError(
            f"Unknown field(s): {', '.join(unknown)}",
            details={"fields": unknown}
        )

    options = {key: data[key] for key in BIND_OPTIONS if key in data}
    return {"text": text, "options": options}


def register_routes(flask_app: 'Flask', limiter_instance: 'Limiter') -> None:
    """
    Register all application routes.

    Args:
        flask_app: Flask application instance
        limiter_instance: Limiter instance for rate limiting
    """
    settings = flask_app.config["CHARACTER_COUNT_SETTINGS"]

    @flask_app.route('/api/health', methods=['GET'])
    def health():
        return jsonify({"status": "ok"})

    @flask_app.route('/api/count', methods=['POST'])
    @limiter_instance.limit(lambda: flask_app.config.get("COUNT_RATE_LIMIT", settings.rate_limit))
    def count_text():
        """
        Count text under the given limits.

        Request body: {"text": str, "maxlength"?: int, "maxwords"?: int,
        "threshold"?: int}
        """
        payload = _get_count_payload()
        response = evaluate(
            payload["text"],
            payload["options"],
            default_threshold=settings.default_threshold,
        )
        logger.info(
            f"Counted {response['count']} {response['mode']} "
            f"(limit={response['limit']}, over={response['is_over_limit']})"
        )
        return jsonify(response)
