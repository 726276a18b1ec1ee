from coinscout.data import ResearchReport
from coinscout.pipeline.research import ResearchPipeline, SearchEngine

__all__ = [
    "ResearchPipeline",
    "ResearchReport",
    "SearchEngine",
]
