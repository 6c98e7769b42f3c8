"""FastAPI application entrypoint for rulegen service mode."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..classifier.comment import CommentClassifier
from ..config import ConfigError, RuleGenConfig, load_config
from ..corpus.tree import LocalFileTree
from ..llm.base import build_text_generator
from ..models import Comment, RepositoryRef
from ..pipeline import SINGLE, ConversionPipeline

PipelineFactory = Callable[[LocalFileTree, RuleGenConfig], ConversionPipeline]


class ClassifyRequest(BaseModel):
    text: str


class ClassifyResponse(BaseModel):
    is_convention: bool
    keywords: List[str]
    category: str
    code_examples: List[str]
    suggested_file_name: str


class ConvertRequest(BaseModel):
    path: str
    comments: List[Dict[str, Any]]
    mode: str = SINGLE
    dry_run: bool = True
    owner: str = "local"
    repo: Optional[str] = None
    branch: str = "main"
    pr_number: Optional[int] = None


class GeneratedFile(BaseModel):
    project_type: str
    file_path: str
    content: str
    is_update: bool


class FailureDetail(BaseModel):
    comment_id: str
    stage: str
    message: str


class ConvertResponse(BaseModel):
    results: List[GeneratedFile] = Field(default_factory=list)
    rejected: List[str] = Field(default_factory=list)
    failures: List[FailureDetail] = Field(default_factory=list)
    dry_run: bool


class HealthResponse(BaseModel):
    status: str


def _default_pipeline(tree: LocalFileTree, config: RuleGenConfig) -> ConversionPipeline:
    return ConversionPipeline(tree, config, llm=build_text_generator(config.llm, config.root))


def create_app(pipeline_factory: PipelineFactory = _default_pipeline) -> FastAPI:
    """Create the FastAPI application exposing rulegen operations."""
    app = FastAPI(title="RuleGen Service", version="0.1.0")
    classifier = CommentClassifier()

    async def get_factory() -> PipelineFactory:
        return pipeline_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/classify", response_model=ClassifyResponse)
    async def classify(payload: ClassifyRequest) -> ClassifyResponse:
        parsed = classifier.classify(payload.text)
        fields = asdict(parsed)
        fields.pop("content")
        return ClassifyResponse(
            is_convention=classifier.is_convention_comment(payload.text),
            **fields,
        )

    @app.post("/convert", response_model=ConvertResponse)
    async def convert(
        payload: ConvertRequest,
        factory: PipelineFactory = Depends(get_factory),
    ) -> ConvertResponse:
        root = Path(payload.path).expanduser().resolve()
        if not root.is_dir():
            raise FileNotFoundError(f"Repository path not found: {payload.path}")
        config = load_config(root)
        tree = LocalFileTree(root)
        pipeline = factory(tree, config)
        repository = RepositoryRef(
            owner=payload.owner,
            name=payload.repo or root.name,
            branch=payload.branch,
            pr_number=payload.pr_number,
        )
        comments = [Comment.from_dict(item) for item in payload.comments]
        report = await pipeline.convert(comments, repository, payload.mode)
        if not payload.dry_run:
            for result in report.results:
                await tree.write_file(result.file_path, result.content)
        return ConvertResponse(
            results=[GeneratedFile(**asdict(result)) for result in report.results],
            rejected=list(report.rejected),
            failures=[FailureDetail(**asdict(failure)) for failure in report.failures],
            dry_run=payload.dry_run,
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]
