"""
Data validation module for coin market payloads.

Provides validation including:
- Schema validation
- Identity checks (id, symbol, name present)
- Duplicate coin ids
- Value ranges
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of a single validation check."""
    name: str
    passed: bool
    message: str
    details: Any = None


@dataclass
class ValidationReport:
    """Complete validation report with the rows that survived it."""
    timestamp: datetime
    data_type: str
    row_count: int
    column_count: int
    results: List[ValidationResult] = field(default_factory=list)
    records: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def all_passed(self) -> bool:
        """Check if all validations passed."""
        return all(r.passed for r in self.results)

    @property
    def critical_passed(self) -> bool:
        """Check if critical validations passed."""
        critical_checks = ['payload', 'schema']
        return all(
            r.passed for r in self.results
            if r.name in critical_checks
        )

    def summary(self) -> str:
        """Generate summary string."""
        lines = [
            f"Validation Report - {self.timestamp}",
            f"Data type: {self.data_type}",
            f"Shape: {self.row_count} rows × {self.column_count} columns",
            f"Kept: {len(self.records)} rows",
            f"Overall: {'PASSED' if self.all_passed else 'FAILED'}",
            "",
            "Results:"
        ]

        for result in self.results:
            status = "✓" if result.passed else "✗"
            lines.append(f"  {status} {result.name}: {result.message}")

        return "\n".join(lines)


class MarketDataValidator:
    """
    Validation for ``/coins/markets`` rows.

    Rows failing identity or range checks are dropped; the first row
    wins when a coin id repeats.
    """

    REQUIRED_COLUMNS = ['id', 'symbol', 'name']

    # Columns that must be non-negative when present
    NON_NEGATIVE_COLUMNS = ['current_price', 'market_cap', 'total_volume']

    def validate_payload(self, rows: Any) -> ValidationResult:
        """Check that the payload is a list of JSON objects."""
        if not isinstance(rows, list):
            return ValidationResult(
                name="payload",
                passed=False,
                message=f"Expected a list, got {type(rows).__name__}"
            )

        bad = [i for i, row in enumerate(rows) if not isinstance(row, dict)]
        if bad:
            return ValidationResult(
                name="payload",
                passed=False,
                message=f"{len(bad)} rows are not objects",
                details={'rows': bad}
            )

        return ValidationResult(
            name="payload",
            passed=True,
            message=f"{len(rows)} rows"
        )

    def validate_schema(self, df: pd.DataFrame) -> ValidationResult:
        """
        Validate that DataFrame has required columns.

        Args:
            df: DataFrame to validate

        Returns:
            ValidationResult
        """
        missing = [col for col in self.REQUIRED_COLUMNS if col not in df.columns]

        if missing:
            return ValidationResult(
                name="schema",
                passed=False,
                message=f"Missing columns: {missing}",
                details={'missing_columns': missing}
            )

        return ValidationResult(
            name="schema",
            passed=True,
            message="All required columns present"
        )

    def validate_identity(self, df: pd.DataFrame) -> ValidationResult:
        """Flag rows with an empty id, symbol or name."""
        identity = df[self.REQUIRED_COLUMNS]
        invalid = identity.isnull().any(axis=1) | (identity.astype(str).apply(
            lambda col: col.str.strip() == ''
        )).any(axis=1)
        count = int(invalid.sum())

        return ValidationResult(
            name="identity",
            passed=count == 0,
            message=f"{count} rows without id/symbol/name" if count else "All rows identified",
            details={'invalid': invalid}
        )

    def validate_duplicates(
        self,
        df: pd.DataFrame,
        exclude: Optional[pd.Series] = None
    ) -> ValidationResult:
        """
        Flag repeated coin ids after the first occurrence.

        Rows in ``exclude`` are already dropped and never shadow a later
        row with the same id.
        """
        candidates = df if exclude is None else df[~exclude]
        duplicated = (
            candidates['id'].duplicated(keep='first') & candidates['id'].notnull()
        ).reindex(df.index, fill_value=False)
        count = int(duplicated.sum())

        return ValidationResult(
            name="duplicates",
            passed=count == 0,
            message=f"{count} duplicate coin ids" if count else "Coin ids unique",
            details={'invalid': duplicated}
        )

    def validate_value_ranges(self, df: pd.DataFrame) -> ValidationResult:
        """
        Validate that values are within expected ranges.

        Args:
            df: DataFrame to validate

        Returns:
            ValidationResult
        """
        invalid = pd.Series(False, index=df.index)
        issues = []

        for col in self.NON_NEGATIVE_COLUMNS:
            if col in df.columns:
                values = pd.to_numeric(df[col], errors='coerce')
                negative = values < 0
                if negative.any():
                    issues.append(f"{col}: {int(negative.sum())} negative values")
                invalid |= negative

        if issues:
            return ValidationResult(
                name="value_ranges",
                passed=False,
                message=f"Range issues: {issues}",
                details={'invalid': invalid}
            )

        return ValidationResult(
            name="value_ranges",
            passed=True,
            message="All values within expected ranges",
            details={'invalid': invalid}
        )

    def validate(self, rows: Any, data_type: str = "coin_markets") -> ValidationReport:
        """
        Run all validation checks and keep the rows that pass.

        Args:
            rows: Decoded ``/coins/markets`` payload
            data_type: Label used in the report

        Returns:
            ValidationReport whose ``records`` are the clean rows
        """
        logger.debug(f"Running validation for {data_type} data...")

        payload_result = self.validate_payload(rows)
        if not payload_result.passed:
            logger.warning(f"  payload: {payload_result.message}")
            return ValidationReport(
                timestamp=datetime.now(),
                data_type=data_type,
                row_count=0,
                column_count=0,
                results=[payload_result]
            )

        df = pd.DataFrame(rows)
        report = ValidationReport(
            timestamp=datetime.now(),
            data_type=data_type,
            row_count=len(df),
            column_count=len(df.columns),
            results=[payload_result]
        )

        if not rows:
            return report

        schema_result = self.validate_schema(df)
        report.results.append(schema_result)
        if not schema_result.passed:
            logger.warning(f"  schema: {schema_result.message}")
            return report

        drop = pd.Series(False, index=df.index)
        validations = [
            ('identity', lambda: self.validate_identity(df)),
            ('value_ranges', lambda: self.validate_value_ranges(df)),
            ('duplicates', lambda: self.validate_duplicates(df, exclude=drop))
        ]

        for name, validation_func in validations:
            result = validation_func()
            drop |= result.details['invalid']
            result.details = {'dropped': int(result.details['invalid'].sum())}
            report.results.append(result)

            log_level = logging.DEBUG if result.passed else logging.WARNING
            logger.log(log_level, f"  {name}: {result.message}")

        report.records = [rows[i] for i in df.index[(~drop).to_numpy()]]

        status = "PASSED" if report.all_passed else "FAILED"
        logger.debug(f"Validation {status}: kept {len(report.records)}/{len(rows)} rows")

        return report
