# =============================================
# File: app/utils/metrics.py
# Purpose: In-process counters & histograms for /metrics
# =============================================
from __future__ import annotations
from contextlib import contextmanager
from typing import Dict, Any, Iterator, List
import threading
import time

_lock = threading.Lock()

# Counters
_counters: Dict[str, int] = {
    "requests_total": 0,
    "ai_calls_total": 0,
    "ai_errors_total": 0,
}

# Labeled counters
_model_usage: Dict[str, int] = {}   # model -> count

# Fixed-bucket histogram for request latency (milliseconds)
# Buckets: <=50,100,200,500,1000,2000,5000,10000, +inf
_latency_buckets: List[int] = [50, 100, 200, 500, 1000, 2000, 5000, 10000]
_latency_counts: List[int] = [0 for _ in _latency_buckets] + [0]  # last is +inf (overflow)

# Per-endpoint latency samples (bounded) and counters for avg/p95
_MAX_SAMPLES: int = 1000
_endpoint_latency: Dict[str, List[float]] = {}   # key: "METHOD /path" -> [ms]
_endpoint_counts: Dict[str, int] = {}            # key: "METHOD /path" -> count

# AI call latency samples per model
_ai_latency: Dict[str, List[float]] = {}

def _avg(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0

def _p95(values: List[float]) -> float:
    if not values:
        return 0.0
    xs = sorted(values)
    idx = int(0.95 * (len(xs) - 1))
    return xs[idx]

def _bounded_append(buf: List[float], value: float) -> None:
    buf.append(value)
    if len(buf) > _MAX_SAMPLES:
        del buf[: len(buf) - _MAX_SAMPLES]

def _observe_latency_ms(ms: int) -> None:
    idx = len(_latency_buckets)  # default overflow
    for i, thr in enumerate(_latency_buckets):
        if ms <= thr:
            idx = i
            break
    _latency_counts[idx] += 1

def record_request(method: str, path: str, latency_ms: float) -> None:
    key = f"{method.upper()} {path}"
    with _lock:
        _counters["requests_total"] += 1
        _observe_latency_ms(int(latency_ms))
        _endpoint_counts[key] = _endpoint_counts.get(key, 0) + 1
        _bounded_append(_endpoint_latency.setdefault(key, []), float(latency_ms))

def record_ai_call(model: str, latency_ms: float, ok: bool) -> None:
    with _lock:
        _counters["ai_calls_total"] += 1
        if not ok:
            _counters["ai_errors_total"] += 1
        _model_usage[model] = _model_usage.get(model, 0) + 1
        _bounded_append(_ai_latency.setdefault(model, []), float(latency_ms))

@contextmanager
def ai_call(model: str) -> Iterator[None]:
    """Time one outbound model call and count it, failed or not."""
    t0 = time.perf_counter()
    ok = False
    try:
        yield
        ok = True
    finally:
        record_ai_call(model, (time.perf_counter() - t0) * 1000, ok)


def snapshot() -> Dict[str, Any]:
    with _lock:
        perf: Dict[str, Dict[str, float]] = {}
        for key, buf in _endpoint_latency.items():
            perf[key] = {
                "count": float(_endpoint_counts.get(key, 0)),
                "avg_latency_ms": _avg(buf),
                "p95_latency_ms": _p95(buf),
            }
        ai: Dict[str, Dict[str, float]] = {}
        for model, buf in _ai_latency.items():
            ai[model] = {
                "avg_latency_ms": _avg(buf),
                "p95_latency_ms": _p95(buf),
            }
        return {
            "counters": dict(_counters),
            "model_usage": dict(_model_usage),
            "latency_ms": {
                "buckets": list(_latency_buckets) + ["+Inf"],
                "counts": list(_latency_counts),
            },
            "performance": {
                "endpoints": perf,
                "ai_models": ai,
                "generated_at": time.time(),
            },
        }

def reset() -> None:
    with _lock:
        for k in _counters:
            _counters[k] = 0
        _model_usage.clear()
        _endpoint_latency.clear()
        _endpoint_counts.clear()
        _ai_latency.clear()
        for i in range(len(_latency_counts)):
            _latency_counts[i] = 0
