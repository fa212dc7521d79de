"""FastAPI application entrypoint for docmap service mode."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigError
from ..loaders import CorpusError
from ..models import CategorizedTestCase, CoverageAnalysis, EntityKind, ExportRecord, export_key
from ..orchestrator import Orchestrator, RunOutcome
from ..postproc.links import LinkResolver, RelatedLink


class HealthResponse(BaseModel):
    status: str


class EntitySummary(BaseModel):
    key: str
    kind: str
    module: str
    name: str
    path: str
    status: Optional[str] = None
    coverage_score: Optional[int] = None


class LinkModel(BaseModel):
    name: str
    module: Optional[str] = None
    href: Optional[str] = None


class CaseRefModel(BaseModel):
    name: str
    describe: str
    file: str
    line: int
    category: str
    summary: str


class CoverageModel(BaseModel):
    has_test: bool
    total_tests: int
    coverage_score: int
    status: str
    by_category: Dict[str, List[CaseRefModel]]
    missing_patterns: List[str]
    recommendations: List[str]


class EntityDetail(BaseModel):
    key: str
    kind: str
    module: str
    name: str
    path: str
    description: str
    route: Optional[str] = None
    app: Optional[str] = None
    related: Dict[str, List[LinkModel]]
    coverage: Optional[CoverageModel] = None


def create_app(run_factory: Callable[[], RunOutcome]) -> FastAPI:
    """Create the FastAPI application serving one assembled run.

    ``run_factory`` is called on the first request; its outcome is reused
    for every later request.
    """
    app = FastAPI(title="DocMap Service", version="1.0.0")
    state: Dict[str, RunOutcome] = {}
    lock = threading.Lock()

    def get_outcome() -> RunOutcome:
        # FastAPI runs sync dependencies in its threadpool.
        with lock:
            if "outcome" not in state:
                state["outcome"] = run_factory()
        return state["outcome"]

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/entities", response_model=List[EntitySummary])
    async def list_entities(
        kind: Optional[EntityKind] = None,
        module: Optional[str] = None,
        outcome: RunOutcome = Depends(get_outcome),
    ) -> List[EntitySummary]:
        records = outcome.context.export.values()
        return [
            _summary(record)
            for record in records
            if (kind is None or record.kind is kind) and (module is None or record.module == module)
        ]

    @app.get("/entities/{kind}/{module}/{name}", response_model=EntityDetail)
    async def entity_detail(
        kind: EntityKind,
        module: str,
        name: str,
        outcome: RunOutcome = Depends(get_outcome),
    ) -> EntityDetail:
        record = outcome.context.export.get(export_key(kind, module, name))
        if record is None:
            raise HTTPException(status_code=404, detail=f"No {kind.value} named {module}/{name}")
        resolver = LinkResolver(outcome.context.registry)
        related = {
            group.key: [_link(link) for link in group.links]
            for group in resolver.related_groups(record)
        }
        return EntityDetail(
            key=record.key,
            kind=record.kind.value,
            module=record.module,
            name=record.name,
            path=record.path,
            description=record.description,
            route=record.route,
            app=record.app,
            related=related,
            coverage=_coverage(record.coverage) if record.coverage else None,
        )

    @app.get("/links/{kind}/{name}", response_model=LinkModel)
    async def resolve_link(
        kind: EntityKind,
        name: str,
        outcome: RunOutcome = Depends(get_outcome),
    ) -> LinkModel:
        return _link(LinkResolver(outcome.context.registry).resolve(kind, name))

    @app.get("/modules/{kind}/{module}/tests", response_model=List[CaseRefModel])
    async def module_tests(
        kind: EntityKind,
        module: str,
        outcome: RunOutcome = Depends(get_outcome),
    ) -> List[CaseRefModel]:
        cases = outcome.context.module_tests.get(f"{kind.value}/{module}")
        if cases is None:
            raise HTTPException(status_code=404, detail=f"No {kind.value} module named {module}")
        return [_test_ref(case) for case in cases]

    @app.exception_handler(CorpusError)
    async def corpus_error_handler(
        _: Any, exc: CorpusError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(
        _: Any, exc: ConfigError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    return app


def _summary(record: ExportRecord) -> EntitySummary:
    coverage = record.coverage
    return EntitySummary(
        key=record.key,
        kind=record.kind.value,
        module=record.module,
        name=record.name,
        path=record.path,
        status=coverage.status if coverage else None,
        coverage_score=coverage.coverage_score if coverage else None,
    )


def _link(link: RelatedLink) -> LinkModel:
    return LinkModel(name=link.name, module=link.module, href=link.href)


def _test_ref(case: CategorizedTestCase) -> CaseRefModel:
    return CaseRefModel(
        name=case.case.it,
        describe=case.case.describe,
        file=case.case.file,
        line=case.case.line,
        category=case.category.value,
        summary=case.display_summary,
    )


def _coverage(analysis: CoverageAnalysis) -> CoverageModel:
    return CoverageModel(
        has_test=analysis.has_test,
        total_tests=analysis.total_tests,
        coverage_score=analysis.coverage_score,
        status=analysis.status,
        by_category={
            category.value: [_test_ref(case) for case in cases]
            for category, cases in analysis.by_category.items()
        },
        missing_patterns=list(analysis.missing_patterns),
        recommendations=list(analysis.recommendations),
    )


def run_service(
    path: str | Path = ".", host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    def _build() -> RunOutcome:
        return Orchestrator().build(path)

    uvicorn.run(create_app(_build), host=host, port=port)


__all__ = ["create_app", "run_service"]
