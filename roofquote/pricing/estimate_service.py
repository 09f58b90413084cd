from dataclasses import asdict, dataclass

from roofquote.database.models import EstimateRecord
from roofquote.database.repositories.estimate_repository import EstimateRepository
from roofquote.database.repositories.job_repository import JobRepository
from roofquote.logging.logger import Log
from roofquote.pricing.calculator import PricingCalculator
from roofquote.pricing.exceptions import (
    EstimateNotFoundError,
    InvalidEstimateStatusError,
    InvalidEstimateTypeError,
    JobNotFoundError,
)
from roofquote.pricing.models import EstimateOptions, EstimateResult

ESTIMATE_TYPES = frozenset({"consumer", "contractor", "material_only"})
ESTIMATE_STATUSES = frozenset({"draft", "sent", "accepted", "declined"})


@dataclass(frozen=True)
class EstimateTotals:
    material_cost: float
    labor_cost: float
    overhead_amount: float
    profit: float
    total_price: float
    profit_margin: float


def estimate_totals(result: EstimateResult, overhead: float) -> EstimateTotals:
    """Overhead is charged on cost; margin is profit as a percentage of price."""
    material_cost = result.total_material_cost
    labor_cost = result.total_labor_cost
    overhead_amount = (material_cost + labor_cost) * overhead
    total_price = material_cost + labor_cost + overhead_amount + result.profit
    profit_margin = result.profit / total_price * 100 if total_price > 0 else 0.0
    return EstimateTotals(
        material_cost=material_cost,
        labor_cost=labor_cost,
        overhead_amount=overhead_amount,
        profit=result.profit,
        total_price=total_price,
        profit_margin=profit_margin,
    )


class EstimateService:
    """Creates priced estimates for jobs and moves them through their statuses."""

    def __init__(
        self,
        job_repo: JobRepository,
        estimate_repo: EstimateRepository,
        calculator: PricingCalculator,
    ) -> None:
        self._job_repo = job_repo
        self._estimate_repo = estimate_repo
        self._calculator = calculator

    def generate_estimate(
        self,
        job_id: str,
        organization_id: str,
        estimate_type: str,
        options: EstimateOptions | None = None,
    ) -> EstimateRecord:
        """Price the job's line items and store the result as a draft estimate.

        Raises:
            InvalidEstimateTypeError: for an unknown ``estimate_type``.
            JobNotFoundError: if the job is not in the organization.
        """
        if estimate_type not in ESTIMATE_TYPES:
            raise InvalidEstimateTypeError(f"Unknown estimate type '{estimate_type}'")
        job = self._job_repo.find_by_id(job_id, organization_id)
        if job is None:
            raise JobNotFoundError(f"Job {job_id} not found")

        options = options or EstimateOptions()
        line_items = self._job_repo.list_line_items(job.id)
        result = self._calculator.calculate_estimate(line_items, organization_id, options)
        totals = estimate_totals(result, options.overhead)

        estimate = self._estimate_repo.create(
            job_id=job.id,
            estimate_type=estimate_type,
            material_cost=totals.material_cost,
            labor_cost=totals.labor_cost,
            overhead=totals.overhead_amount,
            profit=totals.profit,
            total_price=totals.total_price,
            supplier_used=result.primary_supplier,
            line_items=[asdict(item) for item in result.items],
        )
        self._job_repo.update_profitability(job.id, totals.profit, totals.profit_margin)
        Log.info(
            f"Estimate {estimate.id} generated for job {job.id}: "
            f"total={totals.total_price:.2f} margin={totals.profit_margin:.1f}%"
        )
        return estimate

    def update_estimate_status(
        self, estimate_id: str, organization_id: str, status: str
    ) -> EstimateRecord:
        if status not in ESTIMATE_STATUSES:
            raise InvalidEstimateStatusError(
                f"Invalid estimate status '{status}'. Choose from: {sorted(ESTIMATE_STATUSES)}"
            )
        if self._estimate_repo.find_by_id(estimate_id, organization_id) is None:
            raise EstimateNotFoundError(f"Estimate {estimate_id} not found")
        estimate = self._estimate_repo.update_status(estimate_id, status)
        Log.info(f"Estimate {estimate_id} moved to {status}")
        return estimate
