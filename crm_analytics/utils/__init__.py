"""
Utility functions module.

Calendar helpers shared by the window filter and the time-bucket
aggregations.

Time Semantics:
- Every timestamp in the pipeline is an aware UTC datetime
- "now" is injected by the caller and defaults to wall-clock UTC
- Month arithmetic is calendar based and clamps the day of month
"""
