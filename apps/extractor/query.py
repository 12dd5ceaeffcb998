"""
Query Builder - Rolling Window Filter

Builds the OpenFEMA query string selecting open declaration areas designated
after a cutoff derived from "now minus N years" (a year counted as 365 days).
"""

from datetime import datetime, timedelta, timezone

SELECT_FIELDS = (
    "disasterNumber",
    "programTypeCode",
    "programTypeDescription",
    "stateCode",
    "placeCode",
    "placeName",
    "designatedDate",
    "entryDate",
    "updateDate",
    "hash",
    "lastRefresh",
)


def compute_cutoff(now: datetime, years: int) -> datetime:
    """Earliest acceptable designated date."""
    return now - timedelta(days=years * 365)


def format_cutoff(cutoff: datetime) -> str:
    """Render a timestamp as UTC ISO-8601 with millisecond precision, e.g. 2023-10-19T08:15:30.123Z."""
    if cutoff.tzinfo is None:
        cutoff = cutoff.replace(tzinfo=timezone.utc)
    utc = cutoff.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def build_query(cutoff: datetime) -> str:
    """
    Build the query string for declaration areas designated after `cutoff`
    that have no closeout date.
    """
    return (
        "$inlinecount=allpages"
        f"&$select={','.join(SELECT_FIELDS)}"
        f"&$filter=designatedDate gt'{format_cutoff(cutoff)}' and closeoutDate eq null"
    )
