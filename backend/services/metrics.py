"""In-memory counter of static file server hits."""

import threading

METRICS_TEMPLATE = """<html>
  <body>
    <h1>Welcome, Chirpy Admin</h1>
    <p>Chirpy has been visited {hits} times!</p>
  </body>
</html>"""


class HitCounter:
    def __init__(self):
        self._lock = threading.Lock()
        self._hits = 0

    def increment(self) -> int:
        with self._lock:
            self._hits += 1
            return self._hits

    def reset(self) -> None:
        with self._lock:
            self._hits = 0

    @property
    def value(self) -> int:
        with self._lock:
            return self._hits


def render_metrics_page(hits: int) -> str:
    return METRICS_TEMPLATE.format(hits=hits)


# Process-wide counter shared by the /app middleware and the admin endpoints
fileserver_hits = HitCounter()
