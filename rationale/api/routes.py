"""
Explanation endpoints.

Provides REST endpoints for:
- Explaining a whole run
- Explaining a single step of a run

The host application supplies an explainer factory (tenant id -> Explainer)
through create_app() or by setting app.state.explainer_factory. Callers are
assumed to be authorized for the tenant named in the X-Tenant-ID header.
"""

from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Query, Request

from rationale.explain.service import Explainer
from rationale.models import DecisionExplanation, ExplainerOptions, RunExplanation

router = APIRouter(prefix="/runs", tags=["explain"])

ExplainerFactory = Callable[[str], Explainer]


def get_explainer(request: Request, x_tenant_id: str = Header(..., alias="X-Tenant-ID")) -> Explainer:
    """Build a tenant-scoped explainer for this request."""
    factory: ExplainerFactory | None = getattr(request.app.state, "explainer_factory", None)
    if factory is None:
        raise HTTPException(
            status_code=503,
            detail={"error": "explainer_unavailable", "message": "No explainer configured", "details": {}},
        )
    return factory(x_tenant_id)


def _options(max_content_length: int, resolve_entities: bool) -> ExplainerOptions:
    return ExplainerOptions(max_content_length=max_content_length, resolve_entities=resolve_entities)


@router.get("/{run_id}/explain", response_model=RunExplanation)
async def explain_run(
    run_id: str,
    max_content_length: int = Query(500, ge=3),
    resolve_entities: bool = False,
    explainer: Explainer = Depends(get_explainer),
):
    """Explain every decision in a run.

    Raises:
        404: The run has no decision traces.
    """
    explanation = await explainer.explain_run(run_id, _options(max_content_length, resolve_entities))
    if explanation is None:
        raise HTTPException(
            status_code=404,
            detail={
                "error": "run_not_found",
                "message": f"No decision traces for run '{run_id}'",
                "details": {"run_id": run_id},
            },
        )
    return explanation


@router.get("/{run_id}/steps/{step_id}/explain", response_model=DecisionExplanation)
async def explain_step(
    run_id: str,
    step_id: str,
    max_content_length: int = Query(500, ge=3),
    resolve_entities: bool = False,
    explainer: Explainer = Depends(get_explainer),
):
    """Explain one step of a run.

    Raises:
        404: No decision trace has this step id in the run.
    """
    explanation = await explainer.explain_step(run_id, step_id, _options(max_content_length, resolve_entities))
    if explanation is None:
        raise HTTPException(
            status_code=404,
            detail={
                "error": "step_not_found",
                "message": f"Step '{step_id}' not found in run '{run_id}'",
                "details": {"run_id": run_id, "step_id": step_id},
            },
        )
    return explanation


def create_app(explainer_factory: ExplainerFactory) -> FastAPI:
    """Standalone app serving the explanation endpoints."""
    app = FastAPI(title="rationale")
    app.state.explainer_factory = explainer_factory
    app.include_router(router)
    return app
