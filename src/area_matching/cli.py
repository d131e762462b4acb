"""
CLI interface for area suggestions.

Reads purchase, area and hospital CSV extracts, suggests an existing or new
area for every purchase, and writes area_suggestions.csv.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd
from pydantic import ValidationError

from schemas.areas import AreaRecord, HospitalRecord, PurchaseRecord
from schemas.validator import (
    SchemaValidationError,
    ensure_valid,
    read_validated_csv,
    validated_df_to_csv,
)
from src.area_matching.customer_ref import parse_customer_ref
from src.area_matching.suggest import suggest_areas_dataframe
from src.config.settings import settings
from src.utils.logger import configure_logging

logger = logging.getLogger(__name__)

TEXT_COL = 'raw_area_text'
CUSTOMER_REF_COL = 'customer_ref'


def setup_logging(verbose: bool = False, log_dir: Optional[Path] = None) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    if log_dir:
        package_logger = configure_logging('src.area_matching', log_dir=log_dir, console=False)
        package_logger.setLevel(level)


def derive_area_text(purchases_df: pd.DataFrame) -> pd.DataFrame:
    """
    Fill raw_area_text from customer_ref where it is missing.

    Purchases exported straight from the order system only carry the full
    customer reference; the area part is parsed out of it.
    """
    df = purchases_df.copy()
    if TEXT_COL not in df.columns:
        df[TEXT_COL] = None

    if CUSTOMER_REF_COL not in df.columns:
        return df

    text = df[TEXT_COL].astype(object)
    blank = text.isna() | (text.astype(str).str.strip() == '')
    derived = df.loc[blank, CUSTOMER_REF_COL].apply(
        lambda ref: parse_customer_ref(ref) if isinstance(ref, str) else None
    )
    text.loc[blank] = derived
    df[TEXT_COL] = text

    logger.info(f"Derived area text from {CUSTOMER_REF_COL} for {int(derived.notna().sum())} of {int(blank.sum())} rows")
    return df


def load_purchases(purchases_csv: Path) -> pd.DataFrame:
    """Load the purchases extract, deriving area text before validation."""
    purchases_csv = Path(purchases_csv)
    if not purchases_csv.exists():
        raise FileNotFoundError(f"File not found: {purchases_csv}")

    df = derive_area_text(pd.read_csv(purchases_csv))
    ensure_valid(df, PurchaseRecord, purchases_csv.name)
    return df


def run_suggest(
    purchases_csv: Path,
    areas_csv: Path,
    hospitals_csv: Path,
    output_csv: Path,
    dry_run: bool = False,
) -> pd.DataFrame:
    """
    Run area suggestion over CSV extracts.

    Returns:
        The purchases frame with suggestion columns added

    Raises:
        FileNotFoundError: If an input file doesn't exist
        SchemaValidationError: If an input or the output fails validation
    """
    purchases_df = load_purchases(purchases_csv)
    areas_df = read_validated_csv(areas_csv, schema=AreaRecord)
    hospitals_df = read_validated_csv(hospitals_csv, schema=HospitalRecord)

    logger.info(
        f"Loaded {len(purchases_df)} purchases, {len(areas_df)} areas, "
        f"{len(hospitals_df)} hospitals"
    )

    result = suggest_areas_dataframe(purchases_df, areas_df, hospitals_df, text_col=TEXT_COL)

    if dry_run:
        logger.info("Dry run - not writing output")
        preview_cols = ['id', TEXT_COL, 'suggestion_type', 'suggested_area_name', 'confidence']
        print(result[preview_cols].head(20).to_string(index=False))
        return result

    validated_df_to_csv(result, output_csv, index=False)
    logger.info(f"Wrote {len(result)} suggestions to {output_csv}")
    return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Suggest existing or new hospital areas for purchases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default file locations under DATA_DIR
  python -m src.area_matching.cli

  # Explicit files
  python -m src.area_matching.cli --purchases orders.csv --areas areas.csv \\
      --hospitals hospitals.csv --output area_suggestions.csv

  # Preview without writing
  python -m src.area_matching.cli --dry-run --verbose
""",
    )

    parser.add_argument(
        "--purchases",
        type=Path,
        default=settings.default_input_path(settings.PURCHASES_FILE),
        help="Purchases CSV (id, hospital_id, raw_area_text and/or customer_ref)",
    )
    parser.add_argument(
        "--areas",
        type=Path,
        default=settings.default_input_path(settings.AREAS_FILE),
        help="Existing areas CSV (id, name, hospital_id)",
    )
    parser.add_argument(
        "--hospitals",
        type=Path,
        default=settings.default_input_path(settings.HOSPITALS_FILE),
        help="Hospitals CSV (id, name)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=settings.default_output_path(),
        help="Output CSV path (default: processed/area_suggestions.csv)",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        help="Also write a rotating log file to this directory",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print a preview instead of writing the output file",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.log_dir)

    try:
        run_suggest(
            purchases_csv=args.purchases,
            areas_csv=args.areas,
            hospitals_csv=args.hospitals,
            output_csv=args.output,
            dry_run=args.dry_run,
        )
    except (FileNotFoundError, SchemaValidationError, ValidationError) as e:
        logging.error(f"Area suggestion failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
