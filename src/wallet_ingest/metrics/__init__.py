from .registry import MetricsRegistry, metrics_registry, serve_metrics

__all__ = ["MetricsRegistry", "metrics_registry", "serve_metrics"]
