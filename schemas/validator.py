"""
Schema validation utilities for the area suggestion CSV files.

Checks columns and column types of input extracts before they are matched,
and of the suggestions file before it is written.

Validation Rules:
  - Every schema column must be present (aliases name the CSV column)
  - Column types must be compatible with the schema type
  - Extra columns are allowed unless strict
"""

from pathlib import Path
from typing import Type, List, Optional, Dict, Tuple
import logging

import pandas as pd
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class SchemaValidationError(Exception):
    """Raised when a DataFrame does not match its schema."""

    def __init__(
        self,
        message: str,
        missing_columns: Optional[List[str]] = None,
        type_mismatches: Optional[Dict[str, Tuple[str, str]]] = None,
        extra_columns: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.missing_columns = missing_columns or []
        self.type_mismatches = type_mismatches or {}
        self.extra_columns = extra_columns or []


def pandas_dtype_to_python_type(dtype) -> str:
    """Convert pandas dtype to a simplified type string."""
    dtype_str = str(dtype)

    if dtype_str.startswith(('int', 'Int')):
        return 'int'
    elif dtype_str.startswith(('float', 'Float')):
        return 'float'
    elif dtype_str in ('object', 'string', 'str'):
        return 'str'
    elif dtype_str in ('bool', 'boolean'):
        return 'bool'
    return dtype_str


def pydantic_type_to_string(field_type) -> str:
    """Convert a Pydantic annotation (Optional or not) to a simplified type string."""
    type_str = str(field_type).lower()

    for name in ('bool', 'int', 'float', 'str'):
        if name in type_str:
            return name
    return type_str


def types_compatible(pandas_type: str, pydantic_type: str) -> bool:
    """
    Check if a pandas column type can hold the schema type.

    Lenient, because CSV type inference is imprecise:
    - all-empty columns come back as float64
    - nullable integer columns come back as float64
    - object columns may hold numbers mixed with blanks
    """
    if pandas_type == pydantic_type:
        return True

    if pandas_type == 'float' and pydantic_type in ('int', 'str'):
        return True

    if pandas_type in ('int', 'float') and pydantic_type in ('int', 'float'):
        return True

    if pandas_type == 'str' and pydantic_type in ('int', 'float'):
        return True

    return False


def get_column_name(field_name: str, field_info) -> str:
    """CSV column name for a field: its alias if it has one."""
    if getattr(field_info, 'alias', None):
        return field_info.alias
    return field_name


def _compare(
    df: pd.DataFrame,
    schema: Type[BaseModel],
    strict: bool,
) -> Tuple[List[str], List[str], Dict[str, Tuple[str, str]]]:
    field_to_column = {
        name: get_column_name(name, info)
        for name, info in schema.model_fields.items()
    }
    column_to_field = {column: name for name, column in field_to_column.items()}
    expected = set(field_to_column.values())
    actual = set(df.columns)

    missing = sorted(expected - actual)
    extra = sorted(actual - expected) if strict else []

    mismatches: Dict[str, Tuple[str, str]] = {}
    for column in sorted(expected & actual):
        pandas_type = pandas_dtype_to_python_type(df[column].dtype)
        field_info = schema.model_fields[column_to_field[column]]
        pydantic_type = pydantic_type_to_string(field_info.annotation)
        if not types_compatible(pandas_type, pydantic_type):
            mismatches[column] = (pandas_type, pydantic_type)

    return missing, extra, mismatches


def validate_dataframe(
    df: pd.DataFrame,
    schema: Type[BaseModel],
    strict: bool = False,
) -> List[str]:
    """
    Validate a DataFrame against a Pydantic schema.

    Args:
        df: DataFrame to validate
        schema: Pydantic model class defining expected columns
        strict: If True, fail on extra columns not in schema

    Returns:
        List of validation error messages (empty if valid)

    Note:
        This validates columns and types, not individual row values.
    """
    missing, extra, mismatches = _compare(df, schema, strict)

    errors = []
    if missing:
        errors.append(f"Missing required columns: {missing}")
    if extra:
        errors.append(f"Unexpected columns (strict mode): {extra}")
    if mismatches:
        mismatch_strs = [
            f"{col}: got {got}, expected {expected}"
            for col, (got, expected) in mismatches.items()
        ]
        errors.append(f"Type mismatches: {'; '.join(mismatch_strs)}")
    return errors


def ensure_valid(
    df: pd.DataFrame,
    schema: Type[BaseModel],
    label: str,
    strict: bool = False,
) -> None:
    """
    Raise SchemaValidationError if df does not match schema.

    Args:
        df: DataFrame to check
        schema: Pydantic model class
        label: File name used in the error message
        strict: If True, fail on extra columns
    """
    missing, extra, mismatches = _compare(df, schema, strict)
    if not (missing or extra or mismatches):
        return

    errors = validate_dataframe(df, schema, strict=strict)
    error_msg = (
        f"Schema validation failed for '{label}':\n"
        + "\n".join(f"  - {e}" for e in errors)
    )
    raise SchemaValidationError(
        error_msg,
        missing_columns=missing,
        type_mismatches=mismatches,
        extra_columns=extra,
    )


def read_validated_csv(
    file_path: Path,
    schema: Optional[Type[BaseModel]] = None,
    strict: bool = False,
    **read_csv_kwargs,
) -> pd.DataFrame:
    """
    Read an input CSV file and validate it against its schema.

    Args:
        file_path: Path to CSV file (filename determines schema via registry
            when schema is not given)
        schema: Pydantic model class, overriding the registry lookup
        strict: If True, fail on extra columns
        **read_csv_kwargs: Additional arguments passed to pd.read_csv()

    Returns:
        The loaded DataFrame

    Raises:
        FileNotFoundError: If file doesn't exist
        SchemaValidationError: If validation fails
        KeyError: If no schema is given or registered for this file
    """
    from .registry import get_schema_for_file

    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    if schema is None:
        schema = get_schema_for_file(file_path.name)
        if schema is None:
            raise KeyError(f"No schema registered for '{file_path.name}'")

    df = pd.read_csv(file_path, **read_csv_kwargs)
    ensure_valid(df, schema, file_path.name, strict=strict)
    logger.debug(f"Read {len(df)} rows from {file_path}")
    return df


def validated_df_to_csv(
    df: pd.DataFrame,
    file_path: Path,
    schema: Optional[Type[BaseModel]] = None,
    strict: bool = False,
    **to_csv_kwargs,
) -> None:
    """
    Validate a DataFrame against its schema and write to CSV.

    Args:
        df: DataFrame to write
        file_path: Output path (filename determines schema via registry when
            schema is not given)
        schema: Pydantic model class, overriding the registry lookup
        strict: If True, fail on extra columns not in schema
        **to_csv_kwargs: Additional arguments passed to df.to_csv()

    Raises:
        SchemaValidationError: If validation fails
        KeyError: If no schema is given or registered for this file

    Example:
        validated_df_to_csv(df, output_dir / 'area_suggestions.csv', index=False)
    """
    from .registry import get_schema_for_file

    file_path = Path(file_path)

    if schema is None:
        schema = get_schema_for_file(file_path.name)
        if schema is None:
            raise KeyError(f"No schema registered for '{file_path.name}'")

    ensure_valid(df, schema, file_path.name, strict=strict)

    file_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(file_path, **to_csv_kwargs)
    logger.debug(f"Wrote {len(df)} rows to {file_path}")
