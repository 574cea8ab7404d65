"""Cardinality-checked panel merges.

Every merge declares its expected relationship (``1:1``, ``m:1``,
``1:m``) and reports how many rows matched, came only from the left
panel, or came only from the right panel.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

logger = logging.getLogger(__name__)

CARDINALITY = {
    "1:1": "one_to_one",
    "m:1": "many_to_one",
    "1:m": "one_to_many",
    "m:m": "many_to_many",
}

OUTCOMES = ("left_only", "right_only", "both")


class MergeCardinalityError(ValueError):
    """Raised when a merge violates its declared cardinality or outcomes."""


@dataclass
class MergeReport:
    """Row counts by merge outcome.

    Attributes
    ----------
    left_only : int
        Rows from the left panel without a match.
    right_only : int
        Rows from the right panel without a match.
    both : int
        Matched rows.
    """

    left_only: int = 0
    right_only: int = 0
    both: int = 0

    @property
    def total(self) -> int:
        return self.left_only + self.right_only + self.both

    def outcomes(self) -> set[str]:
        """Outcomes that occurred at least once."""
        return {name for name in OUTCOMES if getattr(self, name) > 0}

    def summary(self) -> str:
        return (
            f"matched={self.both}, left only={self.left_only}, "
            f"right only={self.right_only}"
        )


def assert_match(report: MergeReport, allowed: set[str] | list[str] | tuple[str, ...]) -> None:
    """
    Raise if the merge produced an outcome outside ``allowed``.

    Parameters
    ----------
    report : MergeReport
        Report returned by :func:`merge_panels`.
    allowed : set[str]
        Permitted outcomes among ``left_only``, ``right_only``, ``both``.

    Raises
    ------
    MergeCardinalityError
        If a disallowed outcome occurred.
    ValueError
        If ``allowed`` names an unknown outcome.
    """
    allowed = set(allowed)
    unknown = allowed - set(OUTCOMES)
    if unknown:
        raise ValueError(f"Unknown merge outcomes: {unknown}")

    unexpected = report.outcomes() - allowed
    if unexpected:
        raise MergeCardinalityError(
            f"Merge produced unexpected outcomes {sorted(unexpected)} ({report.summary()})"
        )


def merge_panels(
    left: pd.DataFrame,
    right: pd.DataFrame,
    on: str | list[str],
    how: str = "left",
    validate: str = "1:1",
    keep: set[str] | list[str] | None = None,
    indicator: bool = False,
) -> tuple[pd.DataFrame, MergeReport]:
    """
    Merge two panels and enforce the declared cardinality.

    Parameters
    ----------
    left, right : pd.DataFrame
        Panels to merge.
    on : str | list[str]
        Key columns, e.g. ``["country", "year"]``.
    how : {"left", "right", "inner", "outer"}
        Join type.
    validate : {"1:1", "m:1", "1:m", "m:m"}
        Expected relationship between left and right keys.
    keep : set[str] | None
        Outcomes to retain among ``left_only``, ``right_only``, ``both``.
        None retains whatever ``how`` produces.
    indicator : bool, default False
        Keep the ``_merge`` outcome column in the result.

    Returns
    -------
    tuple[pd.DataFrame, MergeReport]
        Merged panel and outcome counts. Counts cover both panels
        whatever ``how`` is, so a left merge still reports ``right_only``
        rows it dropped. They are taken before ``keep`` is applied.

    Raises
    ------
    MergeCardinalityError
        If keys violate ``validate``.
    ValueError
        If ``validate`` or a key column is invalid.

    Examples
    --------
    >>> merged, report = merge_panels(country_panel, weo, on=["country", "year"])
    >>> report.summary()
    'matched=412, left only=3, right only=7'
    """
    if validate not in CARDINALITY:
        raise ValueError(f"validate must be one of {list(CARDINALITY)}, got '{validate}'")

    keys = [on] if isinstance(on, str) else list(on)
    for name, frame in (("left", left), ("right", right)):
        missing = set(keys) - set(frame.columns)
        if missing:
            raise ValueError(f"Key columns {missing} not found in {name} panel")

    try:
        merged = pd.merge(
            left,
            right,
            on=keys,
            how=how,
            validate=CARDINALITY[validate],
            indicator="_merge",
        )
    except pd.errors.MergeError as exc:
        raise MergeCardinalityError(f"Merge on {keys} is not {validate}: {exc}") from exc

    # Outcomes are counted over both panels whatever the join type
    if how == "outer":
        counts = merged["_merge"].value_counts()
    else:
        counts = pd.merge(left[keys], right[keys], on=keys, how="outer", indicator="_merge")[
            "_merge"
        ].value_counts()
    report = MergeReport(
        left_only=int(counts.get("left_only", 0)),
        right_only=int(counts.get("right_only", 0)),
        both=int(counts.get("both", 0)),
    )

    logger.info(f"Merged on {keys} ({validate}, {how}): {report.summary()}")

    if keep is not None:
        keep = set(keep)
        unknown = keep - set(OUTCOMES)
        if unknown:
            raise ValueError(f"Unknown merge outcomes: {unknown}")
        merged = merged[merged["_merge"].isin(keep)]

    if not indicator:
        merged = merged.drop(columns="_merge")

    return merged.reset_index(drop=True), report
