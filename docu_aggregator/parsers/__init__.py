"""Documentation entity parsers."""

from docu_aggregator.parsers.base_parser import BaseParser
from docu_aggregator.parsers.entity_parsers import (
    BranchParser,
    BuildParser,
    ScenarioParser,
    UseCaseParser,
)
from docu_aggregator.parsers.step_parser import StepParser

__all__ = [
    'BaseParser', 'BranchParser', 'BuildParser',
    'UseCaseParser', 'ScenarioParser', 'StepParser',
]
