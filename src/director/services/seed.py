"""Demo data so a fresh dashboard has something to show."""

from src.director.models import Automation, Frequency, Platform
from src.director.schemas import AutomationCreate
from src.director.services.automation_service import AutomationService

DEMO_AUTOMATION = AutomationCreate(
    name="Creator Growth Sprint",
    persona="Hybrid storyteller blending data-proven hooks with cinematic editing cues.",
    target_audience="Bootstrapped SaaS founders scaling demand gen with video-first content.",
    primary_platform=Platform.YOUTUBE,
    cross_post=[Platform.TIKTOK, Platform.LINKEDIN],
    frequency=Frequency.WEEKLY,
    cadence_description="Long-form on Tuesdays, shorts cut-downs through the week",
)


async def seed_demo_data(service: AutomationService) -> Automation | None:
    """Create the demo automation unless the store already has automations."""
    if service.list_automations():
        return None
    return await service.create(DEMO_AUTOMATION)
