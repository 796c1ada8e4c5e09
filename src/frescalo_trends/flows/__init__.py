"""
Prefect flows for the analysis pipeline.

Flows (all in ``analysis.py``):
- classify-occurrences: classify records into epochs, write audit tables
- frescalo-analysis: classify, run Frescalo, summarize trends, render report
- build-report: re-render the report from an existing run directory

Usage (local):
    frescalo-trends run records.csv weights.txt --epoch 1600-1959 --epoch 1960-1999

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    python -m frescalo_trends.flows.analysis records.csv epochs.csv weights.txt runs/latest
"""
