"""Recommendation engine — per-inspector report-writing advice.

Modules:
    config          Centralized thresholds and configuration
    errors          Error taxonomy (InvalidKey, SourceUnavailable, ...)
    record_source   Newest-first report window per inspector
    analyzer        Prompt assembly, bounded LLM call, response interpretation
    state           Persisted actor state and its encoding
    state_store     Redis / database / in-memory state storage
    actor           Staleness detection, regeneration and dismissal
    registry        Key validation and per-key serialized execution

Pipeline:
    ActorRegistry.submit → RecommendationActor
    → RecordSource.fetch_recent → ReportAnalyzer.analyze → StateStore.put
"""
