"""
Shape raw Supabase rows into display rows and dashboard aggregates.

Everything here is pure: endpoints fetch rows through SupabaseService and pass
them in, so the joins (project -> account, update -> project/author) and the
pipeline maths can be tested without a database.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from iris_crm.models.account import AccountInDB
from iris_crm.models.profile import profile_display_name
from iris_crm.models.project import CLOSED_LOST, CLOSED_STATUSES, CLOSED_WON, ProjectInDB
from iris_crm.models.update import UpdateInDB
from iris_crm.schemas.account import AccountResponse, ClientOverviewResponse, ClientSummary
from iris_crm.schemas.dashboard import (
    ActivityItem,
    DashboardStats,
    StatusBucket,
    UserFrequency,
)
from iris_crm.schemas.project import AccountRef, ProjectResponse
from iris_crm.schemas.update import UpdateResponse

Row = dict[str, Any]

RECENT_DAYS = 7
MONTH_DAYS = 30
LOW_ACTIVITY_THRESHOLD = 5
WIN_RATE_AVERAGE = 50.0

NO_AUTHOR_NAME = "System"
UNKNOWN_USER_NAME = "Unknown User"

DEFAULT_INSIGHTS = [
    "Start adding accounts and projects to see AI insights",
    "Regular updates help improve forecast accuracy",
]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_ts(value: Any) -> Optional[datetime]:
    """Parse a Supabase timestamp (ISO 8601, possibly with Z) into an aware datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def format_currency(value: float) -> str:
    """USD, whole dollars, thousands separators: 1234567.8 -> $1,234,568."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def matches_search(q: Optional[str], *fields: Optional[str]) -> bool:
    """Case-insensitive substring match against any of the given fields. Empty query matches all."""
    if not q or not q.strip():
        return True
    needle = q.strip().lower()
    return any(f and needle in f.lower() for f in fields)


def index_by_id(rows: Iterable[Row]) -> dict[str, Row]:
    return {str(r["id"]): r for r in rows if r.get("id") is not None}


def _within_days(ts: Optional[datetime], now: datetime, days: int) -> bool:
    return ts is not None and ts > now - timedelta(days=days)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

def project_counts(projects: Iterable[Row]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for p in projects:
        aid = p.get("account_id")
        if aid:
            counts[str(aid)] = counts.get(str(aid), 0) + 1
    return counts


def account_response(row: Row, project_count: int = 0) -> AccountResponse:
    account = AccountInDB.model_validate(row)
    return AccountResponse(**account.model_dump(), project_count=project_count)


def account_responses(
    accounts: list[Row],
    projects: list[Row],
    q: Optional[str] = None,
) -> list[AccountResponse]:
    """Accounts list (input order kept) with project counts, filtered on name or type."""
    counts = project_counts(projects)
    return [
        account_response(a, counts.get(str(a["id"]), 0))
        for a in accounts
        if matches_search(q, a.get("name"), a.get("type"))
    ]


def client_overview(
    accounts: list[Row],
    projects: list[Row],
    q: Optional[str] = None,
) -> ClientOverviewResponse:
    """
    Won value vs. open pipeline per account. Closed Lost projects count towards
    total_projects but contribute to neither value. Grand totals cover every
    account; q only narrows the client list.
    """
    by_account: dict[str, list[ProjectInDB]] = {}
    for row in projects:
        p = ProjectInDB.model_validate(row)
        by_account.setdefault(p.account_id, []).append(p)

    clients: list[ClientSummary] = []
    completed_total = 0.0
    pipeline_total = 0.0
    for row in accounts:
        account = AccountInDB.model_validate(row)
        own = by_account.get(account.id, [])
        completed = sum(p.amount for p in own if p.status == CLOSED_WON)
        pipeline = sum(p.amount for p in own if not p.is_closed)
        completed_total += completed
        pipeline_total += pipeline
        if not matches_search(q, account.name, account.type):
            continue
        clients.append(
            ClientSummary(
                id=account.id,
                name=account.name,
                type=account.type,
                status=account.status,
                total_projects=len(own),
                completed_value=completed,
                pipeline_value=pipeline,
                total_value=completed + pipeline,
            )
        )
    return ClientOverviewResponse(
        clients=clients,
        total_clients=len(accounts),
        completed_value=completed_total,
        pipeline_value=pipeline_total,
        total_value=completed_total + pipeline_total,
    )


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

def project_response(row: Row, accounts_by_id: dict[str, Row]) -> ProjectResponse:
    project = ProjectInDB.model_validate(row)
    account = accounts_by_id.get(project.account_id)
    ref = None
    if account:
        ref = AccountRef(id=str(account["id"]), name=account.get("name") or "", type=account.get("type"))
    return ProjectResponse(**project.model_dump(), account=ref)


def project_responses(
    projects: list[Row],
    accounts_by_id: dict[str, Row],
    q: Optional[str] = None,
    status: str = "all",
) -> list[ProjectResponse]:
    """Projects (input order kept) with account refs; q matches project or account name."""
    out: list[ProjectResponse] = []
    for row in projects:
        if status != "all" and row.get("status") != status:
            continue
        account_name = (accounts_by_id.get(str(row.get("account_id"))) or {}).get("name")
        if not matches_search(q, row.get("name"), account_name):
            continue
        out.append(project_response(row, accounts_by_id))
    return out


# ---------------------------------------------------------------------------
# Updates
# ---------------------------------------------------------------------------

def author_name(profile: Optional[Row], missing: str = NO_AUTHOR_NAME) -> str:
    if not profile:
        return missing
    return profile_display_name(profile.get("name"), profile.get("pin"))


def update_response(
    row: Row,
    projects_by_id: dict[str, Row],
    accounts_by_id: dict[str, Row],
    profiles_by_id: dict[str, Row],
) -> UpdateResponse:
    update = UpdateInDB.model_validate(row)
    project = projects_by_id.get(update.project_id) or {}
    account = accounts_by_id.get(str(project.get("account_id"))) or {}
    return UpdateResponse(
        id=update.id,
        project_id=update.project_id,
        created_by=update.created_by,
        content=update.content,
        type=update.type,
        date=update.date,
        created_at=update.created_at,
        project_name=project.get("name"),
        account_name=account.get("name"),
        author_name=author_name(profiles_by_id.get(update.created_by)),
    )


def update_responses(
    updates: list[Row],
    projects_by_id: dict[str, Row],
    accounts_by_id: dict[str, Row],
    profiles_by_id: dict[str, Row],
    q: Optional[str] = None,
) -> list[UpdateResponse]:
    """Updates (input order kept); q matches content, project name or account name."""
    out: list[UpdateResponse] = []
    for row in updates:
        item = update_response(row, projects_by_id, accounts_by_id, profiles_by_id)
        if matches_search(q, item.content, item.project_name, item.account_name):
            out.append(item)
    return out


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def projects_by_status(projects: list[Row]) -> list[StatusBucket]:
    """One bucket per status present, in order of first appearance."""
    buckets: dict[str, StatusBucket] = {}
    for row in projects:
        p = ProjectInDB.model_validate(row)
        bucket = buckets.get(p.status)
        if bucket is None:
            bucket = buckets[p.status] = StatusBucket(status=p.status, count=0, value=0.0)
        bucket.count += 1
        bucket.value += p.amount
    return list(buckets.values())


def recent_updates_count(updates: list[Row], now: Optional[datetime] = None) -> int:
    """Updates created within the last RECENT_DAYS."""
    now = now or utcnow()
    return sum(1 for u in updates if _within_days(parse_ts(u.get("created_at")), now, RECENT_DAYS))


def active_user_count(updates: list[Row], now: Optional[datetime] = None) -> int:
    """Distinct authors with at least one update in the last MONTH_DAYS."""
    now = now or utcnow()
    return len(
        {
            u.get("created_by")
            for u in updates
            if u.get("created_by") and _within_days(parse_ts(u.get("created_at")), now, MONTH_DAYS)
        }
    )


def dashboard_stats(
    total_accounts: int,
    projects: list[Row],
    updates: list[Row],
    now: Optional[datetime] = None,
) -> DashboardStats:
    now = now or utcnow()
    return DashboardStats(
        total_accounts=total_accounts,
        total_projects=len(projects),
        total_pipeline_value=sum((p.get("value") or 0) for p in projects),
        active_users=active_user_count(updates, now),
        recent_updates_count=recent_updates_count(updates, now),
    )


def win_rate(projects: list[Row]) -> float:
    """Won / (won + lost) as a percentage; 0 while nothing is closed."""
    won = sum(1 for p in projects if p.get("status") == CLOSED_WON)
    lost = sum(1 for p in projects if p.get("status") == CLOSED_LOST)
    if won + lost == 0:
        return 0.0
    return won / (won + lost) * 100


def generate_insights(
    projects: list[Row],
    updates: list[Row],
    now: Optional[datetime] = None,
) -> list[str]:
    """Rule-based pipeline hints shown on the dashboard."""
    now = now or utcnow()
    insights: list[str] = []

    rate = win_rate(projects)
    if rate > 0:
        position = "above" if rate > WIN_RATE_AVERAGE else "below"
        insights.append(f"Current win rate is {rate:.1f}% - {position} average")

    if recent_updates_count(updates, now) < LOW_ACTIVITY_THRESHOLD:
        insights.append("Low activity detected - consider reaching out to prospects")

    need_analysis = sum(1 for p in projects if p.get("status") == "Need Analysis")
    proposal = sum(1 for p in projects if p.get("status") == "Proposal")
    if need_analysis > proposal * 2:
        insights.append("Many projects in analysis stage - focus on moving to proposal")

    active_value = sum(
        (p.get("value") or 0)
        for p in projects
        if p.get("status") not in CLOSED_STATUSES
    )
    if active_value > 0 and rate > 0:
        forecast = active_value * (rate / 100)
        insights.append(
            f"Potential revenue forecast: {format_currency(forecast)} based on current pipeline"
        )

    if not insights:
        insights.extend(DEFAULT_INSIGHTS)
    return insights


def recent_activity(
    updates: list[Row],
    projects_by_id: dict[str, Row],
    accounts_by_id: dict[str, Row],
    profiles_by_id: dict[str, Row],
    limit: int = 10,
) -> list[ActivityItem]:
    """Feed of the newest updates by created_at."""
    ordered = sorted(
        updates,
        key=lambda u: parse_ts(u.get("created_at")) or datetime.min.replace(tzinfo=timezone.utc),
        reverse=True,
    )
    items: list[ActivityItem] = []
    for row in ordered[:limit]:
        u = update_response(row, projects_by_id, accounts_by_id, profiles_by_id)
        items.append(
            ActivityItem(
                id=u.id,
                description=u.content,
                date=u.created_at,
                project_name=u.project_name,
                account_name=u.account_name,
                created_by=u.author_name or NO_AUTHOR_NAME,
                update_type=u.type,
            )
        )
    return items


def update_frequency(
    updates: list[Row],
    profiles_by_id: dict[str, Row],
    now: Optional[datetime] = None,
) -> list[UserFrequency]:
    """
    Update counts per author name: all time, last 7 and last 30 days (whole days
    elapsed). Profiles without a name are pooled under "Unknown User".
    """
    now = now or utcnow()
    stats: dict[str, UserFrequency] = {}
    for u in updates:
        profile = profiles_by_id.get(str(u.get("created_by"))) or {}
        name = (profile.get("name") or "").strip() or UNKNOWN_USER_NAME
        entry = stats.get(name)
        if entry is None:
            entry = stats[name] = UserFrequency(user_name=name)
        entry.updates_count += 1
        created = parse_ts(u.get("created_at"))
        if created is None:
            continue
        days = (now - created) // timedelta(days=1)
        if days <= RECENT_DAYS:
            entry.last_7_days += 1
        if days <= MONTH_DAYS:
            entry.last_30_days += 1
    return list(stats.values())
