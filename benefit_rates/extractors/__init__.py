"""
Per-benefit rate extractors.

Extractors handle the extraction phase - turning one GOV.UK page (plus
optional secondary pages) into a partial mapping of rate key -> value.

Extractors:
- AttendanceAllowanceExtractor: rates table with prose fallback
- PensionCreditExtractor: prose patterns
- CarersAllowanceExtractor: prose patterns
- ChildBenefitExtractor: rates table + optional tax charge page
- PIPExtractor: component table (row headers)
- UniversalCreditExtractor: several tables + prose
- MaternityAllowanceExtractor: prose patterns
- MarriageAllowanceExtractor: prose patterns
- BereavementSupportExtractor: lump sum / monthly table
- StatePensionExtractor: prose, root-level key
"""

from typing import Iterable, Optional

from .attendance_allowance import AttendanceAllowanceExtractor
from .base import RateExtractor
from .bereavement_support import BereavementSupportExtractor
from .carers_allowance import CarersAllowanceExtractor
from .child_benefit import ChildBenefitExtractor
from .marriage_allowance import MarriageAllowanceExtractor
from .maternity_allowance import MaternityAllowanceExtractor
from .pension_credit import PensionCreditExtractor
from .pip import PIPExtractor
from .state_pension import StatePensionExtractor
from .universal_credit import UniversalCreditExtractor

# Extractor registry, in the order results are reported
EXTRACTORS: dict[str, type[RateExtractor]] = {
    cls.benefit_id: cls
    for cls in (
        AttendanceAllowanceExtractor,
        PensionCreditExtractor,
        CarersAllowanceExtractor,
        ChildBenefitExtractor,
        PIPExtractor,
        UniversalCreditExtractor,
        MaternityAllowanceExtractor,
        MarriageAllowanceExtractor,
        BereavementSupportExtractor,
        StatePensionExtractor,
    )
}


def get_extractors(benefit_ids: Optional[Iterable[str]] = None) -> list[RateExtractor]:
    """
    Instantiate extractors in registry order.

    Args:
        benefit_ids: Benefit ids to include (None = all)

    Returns:
        List of extractor instances

    Raises:
        ValueError: If an unknown benefit id is requested
    """
    if benefit_ids is None:
        return [cls() for cls in EXTRACTORS.values()]

    wanted = set(benefit_ids)
    unknown = sorted(wanted - EXTRACTORS.keys())
    if unknown:
        raise ValueError(
            f"Unknown benefit id(s): {', '.join(unknown)}. "
            f"Known: {', '.join(EXTRACTORS)}"
        )
    return [cls() for benefit_id, cls in EXTRACTORS.items() if benefit_id in wanted]


__all__ = [
    "EXTRACTORS",
    "get_extractors",
    "RateExtractor",
    "AttendanceAllowanceExtractor",
    "PensionCreditExtractor",
    "CarersAllowanceExtractor",
    "ChildBenefitExtractor",
    "PIPExtractor",
    "UniversalCreditExtractor",
    "MaternityAllowanceExtractor",
    "MarriageAllowanceExtractor",
    "BereavementSupportExtractor",
    "StatePensionExtractor",
]
