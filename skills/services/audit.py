import logging
from typing import Optional, Any, Dict

audit_logger = logging.getLogger('skills.audit')


def log_action(*, principal: Any = None, action: str, object_type: Optional[str] = None,
               object_id: Optional[str] = None, detail: Optional[Dict[str, Any]] = None) -> None:
    audit_logger.info(
        "%s %s:%s by %s %s",
        action, object_type or '-', object_id or '-',
        getattr(principal, 'role', None) or 'anonymous',
        detail or {},
    )
