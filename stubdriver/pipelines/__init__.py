"""
Pipelines: the base pipeline contract and the generation run.
"""

from stubdriver.pipelines.base_pipeline import Pipeline, PipelineResult
from stubdriver.pipelines.generation import GenerationPipeline

__all__ = ['Pipeline', 'PipelineResult', 'GenerationPipeline']
