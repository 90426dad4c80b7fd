"""Signal pipelines: alpha aggregation and twitter launch decisions."""

from launchgate.pipeline.aggregator import AlphaAggregator, SignalHandler
from launchgate.pipeline.twitter_pipeline import TwitterLaunchPipeline

__all__ = [
    "AlphaAggregator",
    "SignalHandler",
    "TwitterLaunchPipeline",
]
