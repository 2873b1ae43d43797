from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..core.resources import Site
from ..types.events import site_production

if TYPE_CHECKING:
    from ..core.world import World

logger = logging.getLogger(__name__)


def update_site(world: World, site: Site) -> int:
    """Turn a completed work quota into fresh food. Returns the number of food spawned."""
    resources = world._config.resources
    quota = resources.work_quota
    if site.work_done == 0 or site.work_done % quota != 0:
        return 0

    config = world._config
    for _ in range(quota):
        point = world._rng.next_point(config.arena_width, config.arena_height)
        world.spawn_food(point.x, point.y)
    site.work_done = 0
    if not resources.site_infinite:
        site.utility -= 1
    world._emit(site_production(site.position.x, site.position.y, site.size, resources.max_utility))
    logger.debug("site %d produced %d food (utility=%d)", site.id, quota, site.utility)
    return quota
