#!/usr/bin/env python3
"""
Query planning: free text to a typed plan.
"""

from .arguments import FilterArgs, PlanArguments, ScopeArgs, UrlArgs, decode_arguments
from .planner import QueryPlanner

__all__ = ['QueryPlanner', 'UrlArgs', 'FilterArgs', 'ScopeArgs', 'PlanArguments', 'decode_arguments']
