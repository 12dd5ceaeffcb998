"""
Extractor Module Entry Point

Allows execution via: python -m apps.extractor

Delegates to scheduler for all execution modes (RUN_ONCE and scheduled).
"""

from apps.extractor.scheduler import run

if __name__ == "__main__":
    run()
