"""Composition of instance filters into sequential pipelines."""

from instance_filters.pipeline.pipeline import FilterPipeline

__all__ = [
    "FilterPipeline",
]
