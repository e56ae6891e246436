"""Read-only access to subscription records kept by the billing integration."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator, Optional, Sequence, Tuple

import psycopg2
import psycopg2.extras
from psycopg2.extensions import connection as PgConnection
from psycopg2.extensions import cursor as PgCursor

from ..entitlements.models import PlanKey, Subscription, SubscriptionStatus, UnknownPlanError
from ..entitlements.status import coerce_status

try:  # pragma: no cover - resolve connection helper when imported from FastAPI app
    from saaskit.app_context import get_conn
except ModuleNotFoundError as exc:  # pragma: no cover
    if exc.name != "saaskit":
        raise
    from ...app_context import get_conn  # type: ignore[no-redef]


CURRENT_STATUSES: Tuple[SubscriptionStatus, ...] = (
    SubscriptionStatus.ACTIVE,
    SubscriptionStatus.TRIALING,
    SubscriptionStatus.PAST_DUE,
)


@contextmanager
def managed_connection(conn: Optional[PgConnection] = None) -> Iterator[PgConnection]:
    """Yield ``conn`` untouched, or a fresh connection closed afterwards."""

    if conn is not None:
        yield conn
        return

    connection = get_conn()
    try:
        yield connection
    finally:
        connection.close()


def _row_to_subscription(row: dict) -> Subscription:
    try:
        plan = PlanKey(row["plan"])
    except ValueError as exc:
        raise UnknownPlanError(f"Unknown plan key in subscription row: {row['plan']!r}") from exc

    return Subscription(
        plan=plan,
        status=coerce_status(row["status"]),
        current_period_start=row.get("periodStart"),
        current_period_end=row.get("periodEnd"),
        trial_end=row.get("trialEnd"),
        cancel_at_period_end=bool(row.get("cancelAtPeriodEnd")),
        provider_subscription_id=row.get("stripeSubscriptionId"),
    )


class PostgresSubscriptionRepository:
    """Loads the current subscription for a user from PostgreSQL."""

    def __init__(
        self,
        *,
        conn: Optional[PgConnection] = None,
        statuses: Sequence[SubscriptionStatus] = CURRENT_STATUSES,
    ) -> None:
        self._conn = conn
        self._statuses = tuple(statuses)

    @contextmanager
    def _cursor(self) -> Iterable[PgCursor]:
        with managed_connection(self._conn) as connection:
            cursor = connection.cursor(cursor_factory=psycopg2.extras.RealDictCursor)
            try:
                yield cursor
            finally:
                cursor.close()

    def get_current_subscription(self, user_id: str) -> Optional[Subscription]:
        """Return the newest subscription in a current status, if any."""

        with self._cursor() as cursor:
            cursor.execute(
                """
                SELECT "plan", "status", "periodStart", "periodEnd", "trialEnd",
                       "cancelAtPeriodEnd", "stripeSubscriptionId"
                FROM subscription
                WHERE "referenceId" = %s
                  AND "status" = ANY(%s)
                ORDER BY "id" DESC
                LIMIT 1
                """,
                (user_id, [status.value for status in self._statuses]),
            )
            row = cursor.fetchone()
        return _row_to_subscription(dict(row)) if row else None


def connect(database_url: str, *, connect_timeout: int = 5) -> PgConnection:
    """Open a PostgreSQL connection for the configured database URL."""

    return psycopg2.connect(database_url, connect_timeout=connect_timeout)
