"""Scenarios for generating statement files with a known reconciliation outcome."""

from cfonb_recon.scenarios.reconciliation import ReconciliationScenario, ScenarioData

__all__ = ["ReconciliationScenario", "ScenarioData"]
