#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
API server for programme milestone analysis

FastAPI application: schedule upload, text analysis and compliance checks.
Persistence of the returned milestones is the caller's concern.
"""

import os
import logging
import tempfile
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, File, Form, UploadFile, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from programme_compliance import __version__
from programme_compliance.analyzer import ProgrammeAnalyzer
from programme_compliance.exceptions import FormatError, UnsupportedFormatError
from programme_compliance.models import ComplianceReport, Milestone, ProgrammeAnalysis
from programme_compliance.utils import ScheduleParserFactory

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MAX_UPLOAD_SIZE_MB = int(os.getenv("PROGRAMME_MAX_UPLOAD_MB", "50"))

NOT_A_SCHEDULE = "File is not a recognized schedule document"
NO_MILESTONES = "No milestones found"
INVALID_PROJECT_ID = "Invalid or missing project ID"

app = FastAPI(
    title="Programme Compliance API",
    description="Milestone extraction and NEC4 compliance analysis of MS Project programmes",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

analyzer = ProgrammeAnalyzer(config={"max_file_size_mb": MAX_UPLOAD_SIZE_MB})


# ===================== Pydantic Models =====================

class AnalysisRequest(BaseModel):
    """Schedule document passed as text"""
    text: str


class UploadResponse(BaseModel):
    project_id: int
    file_name: str
    milestones: List[Milestone]
    report: ComplianceReport
    warnings: List[str] = []
    message: str


# ===================== API Endpoints =====================

@app.get("/health")
async def health_check():
    """Health check"""
    return {
        "status": "healthy",
        "service": "programme-compliance",
        "version": __version__,
        "supported_formats": ScheduleParserFactory.get_supported_formats(),
    }


@app.post("/api/v1/programme/analyze", response_model=ProgrammeAnalysis)
async def analyze_text(request: AnalysisRequest):
    """
    Analyze MS Project XML passed as text
    """
    logger.info(f"Analysis request received (length: {len(request.text)} characters)")
    try:
        return analyzer.analyze_text(request.text)
    except FormatError as e:
        logger.error(f"Analysis failed: {e}")
        raise HTTPException(status_code=422, detail=f"{NOT_A_SCHEDULE}: {e}")


@app.post("/api/v1/programme/upload", response_model=UploadResponse)
async def upload_programme(
    file: UploadFile = File(...),
    project_id: Optional[str] = Form(None),
):
    """
    Upload a programme file and extract its milestones

    Supports: MS Project XML. Binary .mpp files are rejected.
    """
    try:
        project_number = int(project_id)
    except (TypeError, ValueError):
        project_number = 0
    if project_number <= 0:
        raise HTTPException(status_code=400, detail=INVALID_PROJECT_ID)

    file_name = file.filename or "unknown"
    suffix = Path(file_name).suffix.lower()
    logger.info(f"Programme upload for project {project_number}: {file_name}")

    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if len(content) > MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise HTTPException(status_code=413, detail=f"File exceeds {MAX_UPLOAD_SIZE_MB} MB")

    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        tmp.write(content)
        tmp_path = tmp.name

    try:
        analysis = analyzer.analyze_file(tmp_path)
    except UnsupportedFormatError as e:
        raise HTTPException(status_code=415, detail=str(e))
    except FormatError as e:
        logger.error(f"Upload rejected: {e}")
        raise HTTPException(status_code=422, detail=f"{NOT_A_SCHEDULE}: {e}")
    finally:
        Path(tmp_path).unlink(missing_ok=True)

    return UploadResponse(
        project_id=project_number,
        file_name=file_name,
        milestones=analysis.milestones,
        report=analysis.report,
        warnings=analysis.warnings,
        message=NO_MILESTONES if not analysis.milestones else f"{len(analysis.milestones)} milestone(s) extracted",
    )


@app.post("/api/v1/programme/compliance", response_model=ComplianceReport)
async def check_compliance(milestones: List[Milestone]):
    """
    Compliance check of an existing milestone list
    """
    return analyzer.analyze_compliance(milestones)


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("API_HOST", "127.0.0.1")
    port = int(os.getenv("API_PORT", "8000"))

    uvicorn.run(app, host=host, port=port)
