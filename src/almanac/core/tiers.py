"""Tier resolution and swimlane packing - pure functions, no I/O."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .events import Project, Tier

UNASSIGNED_TIER_ID = "unassigned"


@dataclass(frozen=True)
class LayoutSettings:
    """Pixel metrics shared by the packer and the position mapper."""

    lane_height: float = 28.0
    lane_start_offset: float = 12.0
    category_gap: float = 10.0
    axis_bar_height: float = 24.0
    min_height: float = 240.0
    holiday_lane_height: float = 18.0


@dataclass(frozen=True)
class TierResolution:
    """Tier configuration with every category assigned to exactly one tier."""

    tiers: tuple[Tier, ...]
    category_tier: dict[str, int]

    def tier_of(self, category: str) -> int:
        return self.category_tier[category]


@dataclass(frozen=True)
class LaneInfo:
    tier_index: int
    lane_index: int
    top_offset: float


@dataclass(frozen=True)
class CategoryLayout:
    top: float
    height: float
    tier_index: int


@dataclass(frozen=True)
class TierLayout:
    index: int
    id: str
    name: str
    categories: tuple[str, ...]
    lane_count: int
    height: float


@dataclass(frozen=True)
class TierPacking:
    """Result of packing projects into tiers and lanes."""

    tier_layouts: tuple[TierLayout, ...]
    category_layouts: dict[str, CategoryLayout]
    lane_info: dict[int, LaneInfo]
    total_height: float
    content_height: float
    padding_top: float = 0.0
    padding_bottom: float = 0.0
    settings: LayoutSettings = field(default_factory=LayoutSettings)

    @property
    def axis_bar_count(self) -> int:
        return axis_bar_count(len(self.tier_layouts))


def axis_bar_count(tier_count: int) -> int:
    """One axis bar between adjacent tiers; a lone tier still gets one."""
    if tier_count <= 0:
        return 0
    return max(1, tier_count - 1)


def resolve_tiers(tier_config: list[Tier], categories: Iterable[str]) -> TierResolution:
    """
    Assign every category to exactly one tier.

    Pass 1 collects explicit assignments; the first tier listing a category
    wins. Pass 2 folds the unassigned remainder, sorted, into the last tier,
    or into a synthesized "Unassigned" tier when the configuration is empty.
    The caller's Tier objects are not mutated.
    """
    tiers = [Tier(id=t.id, name=t.name, categories=[]) for t in tier_config]
    if not tiers:
        tiers = [Tier(id=UNASSIGNED_TIER_ID, name="Unassigned")]

    category_tier: dict[str, int] = {}
    for index, tier in enumerate(tier_config):
        for category in tier.categories:
            if category not in category_tier:
                category_tier[category] = index
                tiers[index].categories.append(category)

    fallback = len(tiers) - 1
    for category in sorted(set(categories) - set(category_tier)):
        category_tier[category] = fallback
        tiers[fallback].categories.append(category)

    return TierResolution(tiers=tuple(tiers), category_tier=category_tier)


def group_projects_by_category(
    projects: Iterable[Project],
    visible_categories: Iterable[str] | None = None,
) -> dict[str, list[Project]]:
    """Group projects by category, keeping only visible categories (all if None)."""
    visible = set(visible_categories) if visible_categories is not None else None
    grouped: dict[str, list[Project]] = {}
    for project in projects:
        if visible is not None and project.category not in visible:
            continue
        grouped.setdefault(project.category, []).append(project)
    return grouped


def pack_tiers(
    tier_config: list[Tier],
    all_categories: Iterable[str],
    visible_projects_by_category: Mapping[str, Iterable[Project]],
    settings: LayoutSettings = LayoutSettings(),
) -> TierPacking:
    """
    Pack visible projects into tiers and lanes.

    Pure function - no I/O. Within a tier, categories are walked in sorted
    order and projects by ascending id; each project takes the next lane.
    A category gap is inserted once per category boundary.

    Args:
        tier_config: Ordered tiers, possibly empty or partial
        all_categories: The category enumeration to resolve
        visible_projects_by_category: Already-filtered projects per category
        settings: Pixel metrics

    Returns:
        TierPacking with per-tier, per-category and per-project geometry
    """
    visible = {
        category: sorted(projects, key=lambda p: p.id)
        for category, projects in visible_projects_by_category.items()
    }
    resolution = resolve_tiers(tier_config, set(all_categories) | set(visible))

    tier_layouts = []
    category_layouts: dict[str, CategoryLayout] = {}
    lane_info: dict[int, LaneInfo] = {}

    for tier_index, tier in enumerate(resolution.tiers):
        populated = sorted(c for c in tier.categories if visible.get(c))
        lane = 0
        for ordinal, category in enumerate(populated):
            projects = visible[category]
            category_top = settings.lane_start_offset + lane * settings.lane_height + ordinal * settings.category_gap
            for project in projects:
                lane_info[project.id] = LaneInfo(
                    tier_index=tier_index,
                    lane_index=lane,
                    top_offset=settings.lane_start_offset
                    + lane * settings.lane_height
                    + ordinal * settings.category_gap,
                )
                lane += 1
            category_layouts[category] = CategoryLayout(
                top=category_top,
                height=len(projects) * settings.lane_height,
                tier_index=tier_index,
            )

        height = (
            lane * settings.lane_height
            + max(0, len(populated) - 1) * settings.category_gap
            + 2 * settings.lane_start_offset
        )
        tier_layouts.append(
            TierLayout(
                index=tier_index,
                id=tier.id,
                name=tier.name,
                categories=tuple(sorted(tier.categories)),
                lane_count=lane,
                height=height,
            )
        )

    content_height = sum(t.height for t in tier_layouts) + axis_bar_count(len(tier_layouts)) * settings.axis_bar_height
    total_height = max(settings.min_height, content_height)
    padding = (total_height - content_height) / 2

    return TierPacking(
        tier_layouts=tuple(tier_layouts),
        category_layouts=dict(sorted(category_layouts.items())),
        lane_info=dict(sorted(lane_info.items())),
        total_height=total_height,
        content_height=content_height,
        padding_top=padding,
        padding_bottom=padding,
        settings=settings,
    )
