"""
Operator Metrics and Logging.

Process-wide counters and gauges for operator contexts, labelled by the
context uuid, plus a logger that appends key=value fields to messages.

Every series carrying a context label belongs to one logical operator.
``OperatorContext.close`` drops them through ``discard_context`` once the
operator is gone, so the collector holds series only for live operators.
"""

import json
import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Mapping, Optional


logger = logging.getLogger(__name__)

Labels = Mapping[str, str]

PLANS_ADDED = "cep_plans_added_total"
PLANS_REMOVED = "cep_plans_removed_total"
PLANS_REGISTERED = "cep_plans_registered"
ENGINE_MANAGERS_CREATED = "cep_engine_managers_created_total"
PLANS_ASSEMBLED = "cep_plans_assembled_total"


class MetricsCollector:
    """
    Shared store of operator counters and gauges.
    
    Series:
        cep_plans_added_total{context}          plan inserts and overwrites
        cep_plans_removed_total{context}        effective plan removals
        cep_plans_registered{context}           plans currently registered
        cep_engine_managers_created_total{context}
        cep_plans_assembled_total{context,mode} mode is "all" or "one"
    
    Example:
        metrics = get_metrics()
        metrics.record_plan_added(ctx.uuid, len(ctx.plans))
        metrics.discard_context(ctx.uuid)
    """
    
    _instance: Optional["MetricsCollector"] = None
    
    def __new__(cls) -> "MetricsCollector":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance
    
    def __init__(self):
        if self._initialized:
            return
        
        self._counters: Dict[str, float] = {}
        self._gauges: Dict[str, float] = {}
        self._names: Dict[str, str] = {}
        self._labels: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()
        self._initialized = True
    
    @classmethod
    def reset(cls) -> None:
        """Forget the shared instance; the next call builds an empty one."""
        cls._instance = None
    
    # -------------------------------------------------------------------------
    # Series
    # -------------------------------------------------------------------------
    
    def increment_counter(self, name: str, value: float = 1.0, labels: Optional[Labels] = None) -> None:
        key = self._make_key(name, labels)
        with self._lock:
            self._counters[key] = self._counters.get(key, 0.0) + value
            self._track(key, name, labels)
    
    def get_counter(self, name: str, labels: Optional[Labels] = None) -> float:
        key = self._make_key(name, labels)
        with self._lock:
            return self._counters.get(key, 0.0)
    
    def set_gauge(self, name: str, value: float, labels: Optional[Labels] = None) -> None:
        key = self._make_key(name, labels)
        with self._lock:
            self._gauges[key] = value
            self._track(key, name, labels)
    
    def get_gauge(self, name: str, labels: Optional[Labels] = None) -> float:
        key = self._make_key(name, labels)
        with self._lock:
            return self._gauges.get(key, 0.0)
    
    def remove_series(self, labels: Labels) -> int:
        """
        Drop every counter and gauge whose labels include all of ``labels``.
        
        Returns:
            Number of series removed
        """
        wanted = dict(labels)
        with self._lock:
            keys = [
                key for key, series_labels in self._labels.items()
                if wanted.items() <= series_labels.items()
            ]
            for key in keys:
                self._counters.pop(key, None)
                self._gauges.pop(key, None)
                self._names.pop(key, None)
                del self._labels[key]
        
        if keys:
            logger.debug(f"Removed {len(keys)} metric series for {wanted}")
        return len(keys)
    
    def _track(self, key: str, name: str, labels: Optional[Labels]) -> None:
        self._names[key] = name
        self._labels[key] = dict(labels or {})
    
    @staticmethod
    def _make_key(name: str, labels: Optional[Labels] = None) -> str:
        # Prometheus sample syntax, labels sorted: name{a="1",b="2"}
        if not labels:
            return name
        rendered = ",".join(f'{k}="{v}"' for k, v in sorted(labels.items()))
        return f"{name}{{{rendered}}}"
    
    # -------------------------------------------------------------------------
    # Operator events
    # -------------------------------------------------------------------------
    
    def record_plan_added(self, context_id: str, registered: int) -> None:
        labels = {"context": context_id}
        self.increment_counter(PLANS_ADDED, labels=labels)
        self.set_gauge(PLANS_REGISTERED, registered, labels)
    
    def record_plan_removed(self, context_id: str, registered: int) -> None:
        labels = {"context": context_id}
        self.increment_counter(PLANS_REMOVED, labels=labels)
        self.set_gauge(PLANS_REGISTERED, registered, labels)
    
    def record_engine_created(self, context_id: str) -> None:
        self.increment_counter(ENGINE_MANAGERS_CREATED, labels={"context": context_id})
    
    def record_assembly(self, context_id: str, mode: str) -> None:
        self.increment_counter(PLANS_ASSEMBLED, labels={"context": context_id, "mode": mode})
    
    def discard_context(self, context_id: str) -> int:
        """Drop all series of one operator context."""
        return self.remove_series({"context": context_id})
    
    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------
    
    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "counters": dict(self._counters),
                "gauges": dict(self._gauges),
                "collected_at": datetime.now().isoformat(),
            }
    
    def to_prometheus(self) -> str:
        """
        Text exposition format, one TYPE line per metric name.
        
        Example output:
            # TYPE cep_plans_registered gauge
            cep_plans_registered{context="..."} 2
        """
        lines: List[str] = []
        with self._lock:
            for kind, samples in (("counter", self._counters), ("gauge", self._gauges)):
                families: Dict[str, List[str]] = {}
                for key, value in samples.items():
                    families.setdefault(self._names.get(key, key), []).append(f"{key} {value}")
                for name, family in families.items():
                    lines.append(f"# TYPE {name} {kind}")
                    lines.extend(family)
        return "\n".join(lines)
    
    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


class StructuredLogger:
    """
    Logger appending ``key=value`` fields to each message.
    
    Fields bound with ``context`` apply to the current thread only, so
    workers sharing a logger do not see each other's fields.
    
    Example:
        log = get_logger(__name__)
        with log.context(context=ctx.uuid):
            log.info("Execution plan stored", plan_id=plan_id)
    """
    
    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self._scope = threading.local()
    
    @property
    def _fields(self) -> Dict[str, Any]:
        return getattr(self._scope, "fields", {})
    
    @contextmanager
    def context(self, **fields) -> Iterator[None]:
        previous = self._fields
        self._scope.fields = {**previous, **fields}
        try:
            yield
        finally:
            self._scope.fields = previous
    
    def _format_message(self, message: str, **fields) -> str:
        merged = {**self._fields, **fields}
        if not merged:
            return message
        rendered = " ".join(
            f"{k}={json.dumps(v) if isinstance(v, (dict, list)) else v}" for k, v in merged.items()
        )
        return f"{message} | {rendered}"
    
    def _log(self, level: int, message: str, **fields) -> None:
        if self.logger.isEnabledFor(level):
            self.logger.log(level, self._format_message(message, **fields))
    
    def debug(self, message: str, **fields) -> None:
        self._log(logging.DEBUG, message, **fields)
    
    def info(self, message: str, **fields) -> None:
        self._log(logging.INFO, message, **fields)
    
    def warning(self, message: str, **fields) -> None:
        self._log(logging.WARNING, message, **fields)
    
    def error(self, message: str, **fields) -> None:
        self._log(logging.ERROR, message, **fields)


def get_metrics() -> MetricsCollector:
    return MetricsCollector()


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)
