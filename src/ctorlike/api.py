"""FastAPI REST API for ctorlike analysis."""

import dataclasses
from typing import Any, Optional

from fastapi import Body, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import __version__
from .analysis import ConstructorLikeFinder, Validation
from .config import load_config
from .errors import (
    ConfigError,
    CtorlikeError,
    InvalidSchemaVersionError,
    MalformedTreeError,
    TreeFormatError,
    TreeNotFoundError,
)
from .report import result_to_dict
from .tree_loader import tree_from_dict


# --- Pydantic Schemas ---


class ConstructorSchema(BaseModel):
    ref: str
    name: str
    helper: Optional[str] = None
    pattern: str  # "invoke" | "named"
    source_sets: list[str]
    generics: list[str]


class TargetConstructorsSchema(BaseModel):
    target: str
    functions: list[ConstructorSchema]


class RejectionSchema(BaseModel):
    ref: str
    name: str
    reason: str
    message: str
    source_sets: list[str]


class AnalysisResponse(BaseModel):
    schema_version: int
    generated_at: str
    module: str
    constructors: list[TargetConstructorsSchema]
    rejected: list[RejectionSchema]


class ReasonSchema(BaseModel):
    reason: str
    message: str


class ReasonListResponse(BaseModel):
    reasons: list[ReasonSchema]
    count: int


class ErrorResponse(BaseModel):
    detail: str
    error_type: str


# --- App Setup ---


app = FastAPI(
    title="ctorlike API",
    description="Find factory functions that should be documented as constructors",
    version=__version__,
)


# --- Global Exception Handler ---


# Map exception types to HTTP status codes
ERROR_STATUS_CODES: dict[type, int] = {
    TreeFormatError: 400,
    InvalidSchemaVersionError: 400,
    MalformedTreeError: 422,
    TreeNotFoundError: 404,
    ConfigError: 500,
}


@app.exception_handler(CtorlikeError)
async def ctorlike_error_handler(request: Request, exc: CtorlikeError) -> JSONResponse:
    """Map CtorlikeError subclasses to appropriate HTTP responses."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error_type": type(exc).__name__},
    )


# --- Endpoints ---


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


@app.get("/api/reasons", response_model=ReasonListResponse)
def list_reasons():
    """List every rejection reason with its message."""
    reasons = [
        ReasonSchema(reason=v.name, message=v.message)
        for v in Validation
        if v is not Validation.VALID
    ]
    return ReasonListResponse(reasons=reasons, count=len(reasons))


@app.post(
    "/api/analyze",
    response_model=AnalysisResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def analyze(
    tree: dict[str, Any] = Body(..., description="Declaration tree document"),
    annotation: Optional[str] = Query(
        default=None, description="Qualified name of the marker annotation"
    ),
):
    """Analyze a declaration tree and return accepted and rejected candidates."""
    config = load_config()
    if annotation:
        config = dataclasses.replace(config, annotation=annotation)
    module = tree_from_dict(tree, config)
    result = ConstructorLikeFinder(config).find(module)
    return result_to_dict(result, config)
