#!/usr/bin/env python3
"""
Query planner.

Turns a natural-language query into a Plan with a single deterministic
generation call.
"""

import logging

from core.exceptions import GenerationError, PlanningError
from core.json_validator import JSONValidationError, parse_json_object
from core.llm.port import TextGenerationPort
from core.models.chat import Plan
from core.prompts import AssistantPrompts

logger = logging.getLogger(__name__)


class QueryPlanner:
    """Maps free text to {command, args} via the text-generation port."""

    def __init__(self, generator: TextGenerationPort):
        self.generator = generator

    def plan(self, query: str) -> Plan:
        """
        Produce a plan for the query.

        Args:
            query: User question

        Returns:
            Plan with a non-empty command and an args object

        Raises:
            PlanningError: If the query is blank, generation fails, or the
                output is not a valid plan after one cleanup pass
        """
        if not query or not query.strip():
            raise PlanningError("Query must not be empty")

        try:
            raw = self.generator.generate(
                AssistantPrompts.planner(query.strip()),
                temperature=0.0,
                max_tokens=AssistantPrompts.PLANNER_MAX_TOKENS
            )
        except GenerationError as e:
            raise PlanningError(f"Planner generation failed: {e.message}", original_error=e) from e

        try:
            data = parse_json_object(raw)
        except JSONValidationError as e:
            raise PlanningError("Planner output is not valid JSON", raw_output=raw, original_error=e) from e

        plan = self._validate(data, raw)
        logger.info(f"Planned command '{plan.command}' with args {plan.args}")
        return plan

    @staticmethod
    def _validate(data: dict, raw: str) -> Plan:
        command = data.get('command')
        if not isinstance(command, str) or not command.strip():
            raise PlanningError("Planner output has no command", raw_output=raw)

        args = data.get('args')
        if args is None:
            args = {}
        if not isinstance(args, dict):
            raise PlanningError("Planner output args must be an object", raw_output=raw)

        return Plan(command=command.strip(), args=args)
