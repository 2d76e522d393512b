"""Reporting engine.

Filters record collections with a `FilterSpec`, rolls them up into KPIs and
per-group breakdowns, and buckets dated records into zero-filled daily
trends. Every function here is pure; `ReportSession` re-runs them whenever
the filter state changes.
"""
