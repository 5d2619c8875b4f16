"""
Core Package.

Contains the conversion pipeline:
- Data model (file units, Definition Index)
- Ingestion and shader chunk merging
- Module Rewriter and aggregate entry point
- Dependency graph export and tracing
- The orchestrating engine
"""
