"""
Ablation API: FastAPI web service for the tumor ablation pipeline.

Provides background job submission, status polling, and result retrieval
for ablation analyses.
"""

import threading
import traceback
import uuid
from datetime import datetime, timezone
from enum import Enum

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from tumor_ablation import __version__, config
from tumor_ablation.agent import DISCLAIMER, STAGES, AblationAgent
from tumor_ablation.data.loader import DATASET_REGISTRY
from tumor_ablation.models.trainer import MODEL_CONFIGS


# ---------------------------------------------------------------------------
# Job store (in-memory, per process)
# ---------------------------------------------------------------------------
class JobStatus(str, Enum):
    pending = "pending"
    running = "running"
    completed = "completed"
    failed = "failed"


_jobs: dict[str, dict] = {}
_jobs_lock = threading.Lock()

WDBC_COLUMNS = [
    f"{family}_{variant}"
    for family in config.FEATURE_FAMILIES
    for variant in config.FEATURE_VARIANTS
]


def _update_job(job_id: str, **fields):
    with _jobs_lock:
        _jobs[job_id].update(fields)


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class AblationRequest(BaseModel):
    dataset: str = Field(
        default="breast_cancer",
        description="Bundled dataset name to analyse",
    )
    families: list[str] | None = Field(
        default=None,
        description="Feature-family prefixes to ablate (null = all ten)",
    )
    models: list[str] | None = Field(
        default=None,
        description="Models to compare (null = all)",
    )
    cost: float | None = Field(
        default=None, gt=0.0,
        description="Fixed linear SVM cost (null = tune by grid search)",
    )
    test_size: float = Field(default=config.DEFAULT_TEST_SIZE, gt=0.0, lt=1.0)
    cv_folds: int = Field(default=config.DEFAULT_CV_FOLDS, ge=2, le=20)
    random_state: int = Field(default=config.RANDOM_STATE, ge=0)


class JobOut(BaseModel):
    job_id: str
    status: JobStatus
    created_at: str
    message: str


class JobResult(BaseModel):
    job_id: str
    status: JobStatus
    created_at: str
    completed_at: str | None = None
    stage: str | None = None
    stage_number: int | None = None
    total_stages: int | None = None
    progress_pct: int | None = None
    report: dict | None = None
    error: str | None = None


# ---------------------------------------------------------------------------
# Background runner
# ---------------------------------------------------------------------------
def _make_progress_callback(job_id: str):
    """Return a callback that records the job's current stage."""
    def on_progress(stage_index: int, total: int, stage_name: str):
        _update_job(
            job_id,
            stage=stage_name,
            stage_number=stage_index,
            total_stages=total,
            progress_pct=int(((stage_index - 1) / total) * 100),
        )
    return on_progress


def _run_job(job_id: str, request: AblationRequest):
    """Execute an analysis; runs on a background thread."""
    _update_job(job_id, status=JobStatus.running)
    try:
        agent = AblationAgent(
            dataset=request.dataset,
            families=request.families,
            models=request.models,
            cost=request.cost,
            test_size=request.test_size,
            cv_folds=request.cv_folds,
            random_state=request.random_state,
            on_progress=_make_progress_callback(job_id),
        )
        report = agent.run()
        _update_job(
            job_id,
            status=JobStatus.completed,
            completed_at=datetime.now(timezone.utc).isoformat(),
            report=report,
            progress_pct=100,
        )
    except Exception:
        _update_job(
            job_id,
            status=JobStatus.failed,
            completed_at=datetime.now(timezone.utc).isoformat(),
            error=traceback.format_exc(),
        )


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(run_in_background: bool = True) -> FastAPI:
    """
    Build the API application.

    With ``run_in_background=False`` jobs run inline inside the request,
    which keeps tests deterministic.
    """
    app = FastAPI(
        title="Tumor Ablation",
        description=(
            "Feature-family ablation analyses for tumor measurement data. "
            f"\n\n**{DISCLAIMER}**"
        ),
        version=__version__,
    )

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": "tumor-ablation", "version": __version__}

    # -----------------------------------------------------------------------
    # Available resources
    # -----------------------------------------------------------------------
    @app.get("/api/v1/datasets")
    async def list_datasets():
        return {
            name: {"description": info["description"]}
            for name, info in DATASET_REGISTRY.items()
        }

    @app.get("/api/v1/families")
    async def list_families():
        return {
            "families": config.FEATURE_FAMILIES,
            "variants": config.FEATURE_VARIANTS,
        }

    @app.get("/api/v1/models")
    async def list_models():
        return {
            name: {"class": cls.__name__, "params": kwargs}
            for name, (cls, kwargs) in MODEL_CONFIGS.items()
        }

    # -----------------------------------------------------------------------
    # Submit ablation job
    # -----------------------------------------------------------------------
    @app.post("/api/v1/ablation", response_model=JobOut, status_code=202)
    def submit_ablation(request: AblationRequest):
        if request.dataset not in DATASET_REGISTRY:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown dataset: {request.dataset}. "
                       f"Available: {list(DATASET_REGISTRY.keys())}",
            )
        if request.models:
            unknown = set(request.models) - set(MODEL_CONFIGS.keys())
            if unknown:
                raise HTTPException(
                    status_code=400,
                    detail=f"Unknown models: {sorted(unknown)}. "
                           f"Available: {list(MODEL_CONFIGS.keys())}",
                )
        if request.families is not None:
            if not request.families:
                raise HTTPException(status_code=400, detail="families must not be empty")
            if len(set(request.families)) != len(request.families):
                raise HTTPException(status_code=400, detail="Duplicate feature families")
            unmatched = [
                f for f in request.families
                if not any(c.startswith(f) for c in WDBC_COLUMNS)
            ]
            if unmatched:
                raise HTTPException(
                    status_code=400,
                    detail=f"No matching columns for families: {unmatched}",
                )

        job_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc).isoformat()

        with _jobs_lock:
            _jobs[job_id] = {
                "status": JobStatus.pending,
                "created_at": now,
                "completed_at": None,
                "stage": None,
                "stage_number": 0,
                "total_stages": len(STAGES),
                "progress_pct": 0,
                "report": None,
                "error": None,
                "request": request.model_dump(),
            }

        if run_in_background:
            thread = threading.Thread(target=_run_job, args=(job_id, request), daemon=True)
            thread.start()
        else:
            _run_job(job_id, request)

        with _jobs_lock:
            status = _jobs[job_id]["status"]

        return JobOut(
            job_id=job_id,
            status=status,
            created_at=now,
            message="Ablation job submitted. Poll /api/v1/jobs/{job_id} for status.",
        )

    # -----------------------------------------------------------------------
    # Job status & results
    # -----------------------------------------------------------------------
    @app.get("/api/v1/jobs/{job_id}", response_model=JobResult)
    async def get_job(job_id: str):
        with _jobs_lock:
            if job_id not in _jobs:
                raise HTTPException(status_code=404, detail="Job not found")
            job = dict(_jobs[job_id])

        return JobResult(
            job_id=job_id,
            status=job["status"],
            created_at=job["created_at"],
            completed_at=job["completed_at"],
            stage=job.get("stage"),
            stage_number=job.get("stage_number"),
            total_stages=job.get("total_stages"),
            progress_pct=job.get("progress_pct"),
            report=job["report"] if job["status"] == JobStatus.completed else None,
            error=job["error"] if job["status"] == JobStatus.failed else None,
        )

    @app.get("/api/v1/jobs")
    async def list_jobs(
        status: JobStatus | None = Query(default=None),
        limit: int = Query(default=20, ge=1, le=100),
    ):
        with _jobs_lock:
            snapshot = sorted(
                _jobs.items(), key=lambda x: x[1]["created_at"], reverse=True
            )
            total = len(_jobs)

        items = []
        for jid, job in snapshot:
            if status and job["status"] != status:
                continue
            items.append({
                "job_id": jid,
                "status": job["status"],
                "created_at": job["created_at"],
                "completed_at": job["completed_at"],
                "stage": job.get("stage"),
                "progress_pct": job.get("progress_pct"),
                "dataset": job["request"]["dataset"],
            })
            if len(items) >= limit:
                break
        return {"jobs": items, "total": total}

    return app
