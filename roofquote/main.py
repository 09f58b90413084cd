import argparse

from roofquote.config.settings import Settings
from roofquote.database.connection import close_pool, init_pool
from roofquote.database.repositories.catalog_repository import CatalogRepository
from roofquote.database.repositories.document_job_repository import DocumentJobRepository
from roofquote.database.repositories.estimate_repository import EstimateRepository
from roofquote.database.repositories.job_repository import JobRepository
from roofquote.logging.logger import Log
from roofquote.pricing.calculator import PricingCalculator
from roofquote.pricing.estimate_service import EstimateService
from roofquote.pricing.models import LOWEST_PRICE, EstimateOptions
from roofquote.processor.processor import build_processor
from roofquote.worker.job_runner import JobRunner
from roofquote.worker.worker import Worker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="roofquote")
    commands = parser.add_subparsers(dest="command")

    commands.add_parser("worker", help="poll the document queue (default)")

    reprocess = commands.add_parser("reprocess", help="reset and re-run one document")
    reprocess.add_argument("document_id")
    reprocess.add_argument("organization_id")

    estimate = commands.add_parser("estimate", help="price a job into a draft estimate")
    estimate.add_argument("job_id")
    estimate.add_argument("organization_id")
    estimate.add_argument("--type", default="contractor", dest="estimate_type")
    estimate.add_argument("--supplier", default=LOWEST_PRICE)
    estimate.add_argument("--labor-markup", type=float, default=0.35)
    estimate.add_argument("--material-markup", type=float, default=0.25)
    estimate.add_argument("--overhead", type=float, default=0.1)
    return parser


def build_estimate_service() -> EstimateService:
    return EstimateService(
        job_repo=JobRepository(),
        estimate_repo=EstimateRepository(),
        calculator=PricingCalculator(CatalogRepository()),
    )


def run_worker(settings: Settings) -> None:
    processor = build_processor(settings)
    job_repo = DocumentJobRepository(settings.max_job_attempts)
    job_runner = JobRunner(processor, job_repo, settings)
    Worker(job_repo, job_runner, settings).run()


def run_reprocess(settings: Settings, args: argparse.Namespace) -> int:
    result = build_processor(settings).reprocess(args.document_id, args.organization_id)
    if not result.success:
        Log.error(f"Reprocessing document {args.document_id} failed: {result.error}")
        return 1
    Log.info(f"Document {args.document_id} reprocessed as {result.document_type}")
    return 0


def run_estimate(args: argparse.Namespace) -> int:
    options = EstimateOptions(
        preferred_supplier=args.supplier,
        labor_markup=args.labor_markup,
        material_markup=args.material_markup,
        overhead=args.overhead,
    )
    estimate = build_estimate_service().generate_estimate(
        args.job_id, args.organization_id, args.estimate_type, options
    )
    Log.info(f"Estimate {estimate.id} created: total {estimate.total_price:.2f}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point: initialize pool -> build dependencies -> run the command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        if args.command == "reprocess":
            return run_reprocess(settings, args)
        if args.command == "estimate":
            return run_estimate(args)
        run_worker(settings)
        return 0
    finally:
        close_pool()


if __name__ == "__main__":
    raise SystemExit(main())
