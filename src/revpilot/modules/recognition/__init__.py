from revpilot.modules.recognition.engine import (
    BucketReport,
    DeferredReport,
    RecognitionBucket,
    RecognitionFlag,
    RecognitionReport,
    RevenueRecognitionEngine,
    index_properties,
    merge_flags,
)

__all__ = [
    "BucketReport",
    "DeferredReport",
    "RecognitionBucket",
    "RecognitionFlag",
    "RecognitionReport",
    "RevenueRecognitionEngine",
    "index_properties",
    "merge_flags",
]
