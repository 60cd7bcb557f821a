"""
Benefit Rates Updater - keeps the benefit rate store in line with GOV.UK.

Architecture:
- core/: Stable foundation (models, HTTP client, normalizers, merge, validation)
- extractors/: One rate extractor per benefit page
- aggregator: Runs all extractors concurrently
- orchestrator: fetch -> merge -> validate -> persist
- config/: YAML-driven settings
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
