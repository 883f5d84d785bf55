"""Load a ProjectConfig snapshot from the messenger_settings table."""

import logging
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from messenger.config import Settings
from messenger.entities import ProjectRef
from messenger.models.messenger_setting import MessengerSetting
from messenger.project_config import ProjectConfig, ProjectSettingValues

logger = logging.getLogger(__name__)


async def load_project_config(
    db: AsyncSession,
    projects: Iterable[ProjectRef],
    defaults: Optional[Settings] = None,
) -> ProjectConfig:
    """
    Snapshot the settings for the given projects and all their ancestors.

    The returned ProjectConfig is detached from the session, so settings
    changed afterwards do not affect notifications already being composed.
    """
    project_ids = {node.id for project in projects for node in project.lineage()}
    if not project_ids:
        return ProjectConfig(defaults)

    result = await db.execute(
        select(MessengerSetting).where(MessengerSetting.project_id.in_(project_ids))
    )
    overrides = {
        row.project_id: ProjectSettingValues.from_row(row)
        for row in result.scalars().all()
    }
    logger.debug("Loaded messenger settings for %d of %d projects", len(overrides), len(project_ids))
    return ProjectConfig(defaults, overrides)
