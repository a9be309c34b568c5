# pickeasy/utils/audit.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from pickeasy.models.log import Log

logger = logging.getLogger(__name__)

AUDIT_SUCCESS = "SUCCESS"
AUDIT_FAIL = "FAIL"


def write_log(
    db: Session,
    *,
    user_id: Optional[str],
    action: str,
    resource: str,
    status: str = AUDIT_SUCCESS,
    ip: Optional[str] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> Log:
    """Persist an audit entry and mirror it to the application log.

    Failed events are logged at WARNING so rejected sign-ins and ownership
    violations show up without querying the ``logs`` table.
    """
    entry = Log(user_id=user_id, action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    db.commit()

    level = logging.INFO if status == AUDIT_SUCCESS else logging.WARNING
    logger.log(level, "audit %s/%s %s user=%s ip=%s", resource, action, status, user_id, ip)
    return entry
