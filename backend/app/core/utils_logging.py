import uuid
from typing import Any, Dict, Optional
from urllib.parse import parse_qs

def generate_request_id() -> str:
    return str(uuid.uuid4())

def query_context(scope: Dict[str, Any]) -> Dict[str, str]:
    """
    Pull ``user_id`` / ``field_id`` out of the query string so request logs
    can be correlated with consultation sessions.
    """
    raw = scope.get("query_string") or b""
    params = parse_qs(raw.decode("latin-1"))
    ctx = {}
    for key in ("user_id", "field_id"):
        if params.get(key):
            ctx[key] = params[key][0]
    return ctx

def log_extra(request_id: Optional[str], **fields) -> Dict[str, Any]:
    extra = {"request_id": request_id}
    extra.update({k: v for k, v in fields.items() if v is not None})
    return extra
