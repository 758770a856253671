"""Services layer - aggregation and reporting logic"""

from siteprogress.services.last_activity import LastActivityResolver
from siteprogress.services.progress_aggregator import ProgressAggregator
from siteprogress.services.section_checklist import SectionChecklist
from siteprogress.services.site_summary import SiteSummaryService
from siteprogress.services.status import derive_site_status

__all__ = [
    "ProgressAggregator",
    "LastActivityResolver",
    "SectionChecklist",
    "SiteSummaryService",
    "derive_site_status",
]
