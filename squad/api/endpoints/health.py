from datetime import datetime, timezone


def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


def preflight():
    # CORSMiddleware answers real preflights; this covers bare OPTIONS requests
    return {}
