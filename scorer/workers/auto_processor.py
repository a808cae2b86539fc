"""Polls the batch endpoint so submissions left pending by a transient failure get retried."""

import time
import requests

from scorer.utils.config import HOST, PORT, AUTO_PROCESS_INTERVAL, backend_api_key
from scorer.utils.logger import get_logger


logger = get_logger("auto-processor")


API = f"http://{'127.0.0.1' if HOST == '0.0.0.0' else HOST}:{PORT}/process-pending"


def run_once(session: requests.Session | None = None) -> dict | None:
    http = session or requests
    headers = {"Authorization": f"Bearer {backend_api_key() or ''}"}
    try:
        r = http.post(API, json={}, headers=headers, timeout=180)
        if r.status_code != 200:
            logger.warning("process-pending unexpected: %s %s", r.status_code, r.text)
            return None
        j = r.json()
    except (requests.RequestException, ValueError) as e:
        logger.error("process-pending error: %s", e)
        return None
    if not isinstance(j, dict):
        logger.warning("process-pending returned non-object body: %r", j)
        return None
    logger.info("process-pending → %s (%s processed)", j.get("status"), j.get("count", 0))
    return j


def main():
    logger.info("Auto-processor polling %s every %ss", API, AUTO_PROCESS_INTERVAL)
    with requests.Session() as session:
        while True:
            try:
                run_once(session)
            except Exception:
                logger.exception("process-pending poll failed")
            time.sleep(AUTO_PROCESS_INTERVAL)


if __name__ == "__main__":
    main()
