from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class DocumentJobRecord:
    """Represents a row from the document_jobs queue table."""

    id: int
    document_id: str
    organization_id: str
    status: str
    attempts: int
    error_message: str | None = None
    locked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class DocumentRecord:
    """Represents a row from the documents table."""

    id: str
    organization_id: str
    job_id: str
    name: str
    s3_key: str
    mime_type: str | None
    file_size: int
    processing_status: str
    type: str | None = None
    sub_type: str | None = None
    ocr_text: str | None = None
    ocr_provider: str | None = None
    ocr_confidence: float | None = None
    extracted_data: dict[str, Any] | None = None
    validation_errors: dict[str, Any] | None = None
    processing_error: str | None = None
    processed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class JobRecord:
    """Represents a row from the jobs table (a roofing claim, not a queue entry)."""

    id: str
    organization_id: str
    job_number: str | None = None
    customer_name: str | None = None
    total_rcv: float | None = None
    total_acv: float | None = None
    deductible: float | None = None
    insurance_company: str | None = None
    policy_number: str | None = None
    claim_number: str | None = None
    estimated_profit: float | None = None
    profit_margin: float | None = None


@dataclass
class EstimateRecord:
    """Represents a row from the estimates table."""

    id: str
    job_id: str
    type: str
    status: str
    material_cost: float
    labor_cost: float
    overhead: float
    profit: float
    total_price: float
    supplier_used: str
    line_items: list[dict[str, Any]]
    price_date: datetime | None = None
    sent_at: datetime | None = None
    created_at: datetime | None = None
