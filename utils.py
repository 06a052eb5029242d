"""
Utility functions for Array Transform

Helpers for configuring logging, building pipelines from declarative
operation specs, and measuring the cost of terminal operations.
"""

import gc
import logging
import sys
import time
import tracemalloc
from typing import Any, Dict, List, Optional, Sequence, Union

from lazy import ArrayTransform
from models import OperationSpec, PerformanceReport, PipelineSettings, StageKind


def setup_logging(settings: Optional[PipelineSettings] = None) -> logging.Logger:
    """Setup structured logging for the pipeline"""
    settings = settings or PipelineSettings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    return logging.getLogger('array_transform')


logger = logging.getLogger(__name__)


# Global performance tracking
_performance_metrics = {
    "operations": [],
    "total_time_ms": 0.0,
    "total_memory_mb": 0.0,
    "operation_count": 0
}


def build_pipeline(source: Sequence[Any],
                   operations: List[Union[OperationSpec, Dict[str, Any]]]) -> ArrayTransform:
    """
    Build a pipeline from a list of operation specs, applied in list order.

    Plain dicts are validated into ``OperationSpec`` first, so a malformed
    entry raises pydantic's ``ValidationError`` before any stage is added.
    """
    specs = [op if isinstance(op, OperationSpec) else OperationSpec.model_validate(op)
             for op in operations]

    pipeline = ArrayTransform(source)
    for spec in specs:
        if spec.type is StageKind.MAP:
            pipeline.map(spec.function, spec.context)
        else:
            pipeline.filter(spec.function, spec.context)

    logger.debug(f"Built pipeline with {len(specs)} stages: {[s.type.value for s in specs]}")
    return pipeline


def _record(report: PerformanceReport) -> None:
    _performance_metrics["operations"].append(report)
    _performance_metrics["total_time_ms"] += report.execution_time_ms
    _performance_metrics["total_memory_mb"] += report.memory_usage_mb or 0.0
    _performance_metrics["operation_count"] += 1


def measure_performance(operation_name: str, func, *args,
                        settings: Optional[PipelineSettings] = None, **kwargs) -> PerformanceReport:
    """Measure a function call, optionally tracking peak memory"""
    settings = settings or PipelineSettings()

    if settings.track_memory:
        tracemalloc.start()
        gc.collect()

    memory_mb = None
    start_time = time.perf_counter()
    try:
        result = func(*args, **kwargs)
    except Exception as e:
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        report = PerformanceReport(
            operation=operation_name,
            execution_time_ms=execution_time_ms,
            memory_usage_mb=_peak_memory_mb() if tracemalloc.is_tracing() else None,
            success=False,
            error=str(e)
        )
        _record(report)
        logger.error(f"{operation_name} failed after {execution_time_ms:.2f}ms: {e}")
        raise
    finally:
        if settings.track_memory and tracemalloc.is_tracing():
            memory_mb = _peak_memory_mb()
            tracemalloc.stop()

    report = PerformanceReport(
        operation=operation_name,
        execution_time_ms=(time.perf_counter() - start_time) * 1000,
        memory_usage_mb=memory_mb,
        success=True,
        result_size=len(result) if hasattr(result, "__len__") else None
    )
    _record(report)
    logger.info(f"{operation_name} completed in {report.execution_time_ms:.2f}ms")
    return report


def _peak_memory_mb() -> float:
    current, peak = tracemalloc.get_traced_memory()
    return peak / 1024 / 1024


def get_performance_summary() -> Dict[str, Any]:
    """Get summary of all performance metrics"""
    count = _performance_metrics["operation_count"]
    if count == 0:
        return {
            "total_operations": 0,
            "total_time_ms": 0.0,
            "total_memory_mb": 0.0,
            "avg_time_ms": 0.0,
            "avg_memory_mb": 0.0
        }

    return {
        "total_operations": count,
        "total_time_ms": _performance_metrics["total_time_ms"],
        "total_memory_mb": _performance_metrics["total_memory_mb"],
        "avg_time_ms": _performance_metrics["total_time_ms"] / count,
        "avg_memory_mb": _performance_metrics["total_memory_mb"] / count
    }


def clear_performance_metrics():
    """Clear all performance metrics"""
    global _performance_metrics
    _performance_metrics = {
        "operations": [],
        "total_time_ms": 0.0,
        "total_memory_mb": 0.0,
        "operation_count": 0
    }
