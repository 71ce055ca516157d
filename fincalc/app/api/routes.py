"""HTTP routes for the Flask API."""

from http import HTTPStatus
from typing import Any, Optional

from flask import Blueprint, current_app, jsonify, request
from pydantic import BaseModel, ConfigDict, ValidationError

from fincalc.core.errors import ErrorKind
from fincalc.core.ping import build_ping
from fincalc.core.registry import CALCULATORS, evaluate
from fincalc.schemas.history import HistoryResponse

api_bp = Blueprint("api", __name__)


class CalcQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    clamp: bool = False


class HistoryQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    calculator: Optional[str] = None


def _error(message: str, kind: str, status: HTTPStatus, **extra: Any):
    return jsonify({"error": message, "kind": kind, **extra}), status


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return _error(
        "invalid request parameters",
        ErrorKind.INVALID_INPUT.value,
        HTTPStatus.UNPROCESSABLE_ENTITY,
        detail=exc.errors(include_url=False, include_context=False),
    )


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = build_ping(current_app.extensions["fincalc.settings"])
    return jsonify(response.model_dump())


@api_bp.get("/calculators")
def calculators() -> Any:
    return jsonify(
        [{"name": calc.name, "description": calc.description} for calc in CALCULATORS.values()]
    )


@api_bp.post("/calc/<name>")
def calculate(name: str) -> Any:
    """Run one calculator on the raw JSON fields in the request body."""
    if name not in CALCULATORS:
        return _error(f"unknown calculator '{name}'", "not_found", HTTPStatus.NOT_FOUND)

    query = CalcQuery.model_validate(request.args.to_dict())
    raw_payload = request.get_json(silent=True)
    if raw_payload is None:
        raw_payload = {}
    if not isinstance(raw_payload, dict):
        return _error("request body must be a JSON object", ErrorKind.INVALID_INPUT.value, HTTPStatus.BAD_REQUEST)

    evaluation = evaluate(name, raw_payload, clamp=query.clamp, ctx=current_app.extensions["fincalc.context"])
    if not evaluation.ok:
        status = (
            HTTPStatus.UNPROCESSABLE_ENTITY
            if evaluation.kind == ErrorKind.INVALID_INPUT
            else HTTPStatus.BAD_REQUEST
        )
        return _error("; ".join(evaluation.errors), evaluation.kind.value, status, errors=evaluation.errors)

    current_app.extensions["fincalc.history"].add(name, evaluation.inputs, evaluation.result)
    return jsonify(evaluation.result.model_dump(mode="json"))


@api_bp.get("/history")
def history() -> Any:
    query = HistoryQuery.model_validate(request.args.to_dict())
    entries = current_app.extensions["fincalc.history"].entries(query.calculator)
    return jsonify(HistoryResponse(entries=entries).model_dump(mode="json"))


@api_bp.delete("/history")
def clear_history() -> Any:
    current_app.extensions["fincalc.history"].clear()
    return "", HTTPStatus.NO_CONTENT
