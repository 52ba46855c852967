"""Navigation links between climb pages and between grid cells.

Within a grid, up/down walk the hours of a day and wrap onto the previous or
next day; left/right move between days at the same hour. A link to the cell
holding the current snapshot points at the ``current`` page instead.
"""

from __future__ import annotations

from collections.abc import Sequence

from windsock.forecast.models import ClimbGrid, Navigation, ScoredCondition
from windsock.forecast.slugs import CURRENT_SLUG


def climb_up(slugs: Sequence[str], k: int) -> str:
    if k - 1 < 0:
        return ""
    return slugs[k - 1]


def climb_down(slugs: Sequence[str], k: int, hidden: int) -> str:
    if k + 1 >= hidden:
        return ""
    return slugs[k + 1]


def climb_navigation(slugs: Sequence[str], k: int, hidden: int) -> Navigation:
    """Sequence links for the k-th climb page; climbs past ``hidden`` get none."""
    if k >= hidden:
        return Navigation()
    up = climb_up(slugs, k)
    down = climb_down(slugs, k, hidden)
    return Navigation(up=up, down=down, left=up, right=down)


def cell_slug(grid: ClimbGrid, cell: ScoredCondition | None) -> str:
    if cell is None:
        return ""
    if grid.is_current(cell):
        return CURRENT_SLUG
    return cell.day_time_slug()


def day_time_up(grid: ClimbGrid, j: int, k: int) -> str:
    if k - 1 < 0:
        return day_time_left(grid, j, len(grid.days[j].conditions) - 1)
    return cell_slug(grid, grid.days[j].conditions[k - 1])


def day_time_down(grid: ClimbGrid, j: int, k: int) -> str:
    if k + 1 >= len(grid.days[j].conditions):
        return day_time_right(grid, j, 0)
    return cell_slug(grid, grid.days[j].conditions[k + 1])


def day_time_left(grid: ClimbGrid, j: int, k: int) -> str:
    if j - 1 < 0:
        return ""
    return cell_slug(grid, grid.days[j - 1].conditions[k])


def day_time_right(grid: ClimbGrid, j: int, k: int) -> str:
    if j + 1 >= len(grid.days):
        return ""
    return cell_slug(grid, grid.days[j + 1].conditions[k])


def grid_navigation(grid: ClimbGrid, j: int, k: int) -> Navigation:
    """Links for the cell at day ``j``, hour slot ``k`` of a validated grid."""
    return Navigation(
        up=day_time_up(grid, j, k),
        down=day_time_down(grid, j, k),
        left=day_time_left(grid, j, k),
        right=day_time_right(grid, j, k),
    )
