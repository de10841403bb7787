"""Signal processing over decoded sample matrices."""

from wavparser.processing.generate import add_silence
from wavparser.processing.merge import MergeAlgorithm, merge, merge_samples
from wavparser.processing.rational import RateRatio, build_step_table, least_common_multiple
from wavparser.processing.resample import change_sample_rate, resample_channel
from wavparser.processing.volume import change_volume, db_to_gain

__all__ = [
    "MergeAlgorithm",
    "RateRatio",
    "add_silence",
    "build_step_table",
    "change_sample_rate",
    "change_volume",
    "db_to_gain",
    "least_common_multiple",
    "merge",
    "merge_samples",
    "resample_channel",
]
