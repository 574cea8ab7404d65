"""econpanel Aggregate Package - Country-year aggregation.

Public API:
- collapse: One row per group with mean/median/sum/count/sd/percentiles
- count_entities: Distinct entities per group
- merge_panels: Merge with declared cardinality and outcome report
- assert_match: Fail on unexpected merge outcomes
- MergeReport, MergeCardinalityError
"""

from .collapse import collapse, count_entities
from .merge import MergeCardinalityError, MergeReport, assert_match, merge_panels

__all__ = [
    "collapse",
    "count_entities",
    "merge_panels",
    "assert_match",
    "MergeReport",
    "MergeCardinalityError",
]
