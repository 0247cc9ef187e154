"""
Execution Planner.

Enriches a single execution plan with the definitions of the registered
input streams it actually reads from, so a worker can run that plan on
its own engine without carrying every stream of the operator.
"""

import re
from typing import List, Optional, Protocol, Set, runtime_checkable

from .exceptions import UndefinedExecutionPlanError, UndefinedStreamError, check_not_none
from .schema_registry import SchemaRegistry


@runtime_checkable
class Planner(Protocol):
    """
    Turns a raw plan body into a runnable program text.
    
    body is None when no plan is registered under plan_id; the planner
    reports that as an undefined execution plan.
    """
    
    def enrich(self, schemas: SchemaRegistry, body: Optional[str], plan_id: Optional[str] = None) -> str:
        ...


class ExecutionPlanner:
    """
    Default planner based on lightweight scanning of the query text.
    
    Input streams are the sources named in ``from`` clauses (plain,
    joined and pattern/sequence sources) and in ``partition with``
    blocks. Streams, tables and windows the plan defines itself, and
    streams it produces with ``insert into``, are not treated as inputs.
    
    Example:
        planner = ExecutionPlanner()
        program = planner.enrich(schemas, "from StockStream select symbol insert into Out;")
    """
    
    KEYWORDS = {
        "every", "join", "left", "right", "full", "outer", "inner",
        "unidirectional", "and", "or", "not", "for", "as", "on", "within",
    }
    
    # Innermost [...] group, applied until stable: [price > e1[0].price]
    FILTER_PATTERN = re.compile(r"\[[^\[\]]*\]")
    
    # Removed in order after filters, before source names are collected
    NOISE_PATTERNS = [
        re.compile(r"#[\w:.]+\s*\([^)]*\)"),             # windows/functions: #window.time(1 min)
        re.compile(r"[()]"),                             # pattern grouping: every (e1=A -> e2=B)
        re.compile(r"\bon\b.*?(?=\b(?:join|left|right|full|inner)\b|$)", re.IGNORECASE | re.DOTALL),
        re.compile(r"\bwithin\b.*$", re.IGNORECASE | re.DOTALL),
        re.compile(r"\bfor\s+\d[\w.]*\s*\w*", re.IGNORECASE),  # absence: not X for 5 sec
        re.compile(r"\b\w+\s*="),                        # pattern event aliases: e1=
        re.compile(r"\bas\s+\w+", re.IGNORECASE),        # stream aliases: as a
        re.compile(r"<[^>]*>"),                          # counts: <2:5>
        re.compile(r"\b\d[\w.]*"),                       # numbers and durations
    ]
    
    COMMENT_PATTERN = re.compile(r"--[^\n]*|/\*.*?\*/", re.DOTALL)
    FROM_PATTERN = re.compile(
        r"\bfrom\b(.*?)(?=\b(?:select|insert|delete|update|return|output)\b|$)",
        re.IGNORECASE | re.DOTALL,
    )
    PARTITION_PATTERN = re.compile(r"\bpartition\s+with\s*\((.*?)\)\s*begin", re.IGNORECASE | re.DOTALL)
    PARTITION_SOURCE_PATTERN = re.compile(r"\bof\s+(\w+)", re.IGNORECASE)
    DEFINE_PATTERN = re.compile(
        r"\bdefine\s+(?:stream|table|window|trigger|aggregation)\s+(\w+)", re.IGNORECASE
    )
    INSERT_PATTERN = re.compile(r"\binsert\s+(?:\w+\s+events\s+)?into\s+(#?\w+)", re.IGNORECASE)
    NAME_PATTERN = re.compile(r"#?[A-Za-z_]\w*")
    
    def enrich(self, schemas: SchemaRegistry, body: Optional[str], plan_id: Optional[str] = None) -> str:
        """
        Prefix the plan body with the definitions of its input streams.
        
        Args:
            schemas: Registered input stream schemas
            body: Raw plan text, None if plan_id is not registered
            plan_id: Id the body was looked up under, if any
            
        Returns:
            Stream definitions (registry order) followed by the plan body
            
        Raises:
            NullArgumentError: If schemas is None, or body is None without a plan_id
            UndefinedExecutionPlanError: If body is None for a looked up plan_id
            UndefinedStreamError: If the plan reads from a stream that is
                neither registered nor produced by the plan itself
        """
        check_not_none(schemas, "inputStreamSchemas")
        if body is None and plan_id is not None:
            raise UndefinedExecutionPlanError(plan_id)
        check_not_none(body, "executionPlan")
        
        required = self.input_streams(body)
        for stream_id in required:
            if stream_id not in schemas:
                raise UndefinedStreamError(stream_id)
        
        definitions = "".join(
            schema.render_definition(stream_id)
            for stream_id, schema in schemas.items()
            if stream_id in required
        )
        return definitions + body
    
    def input_streams(self, body: str) -> List[str]:
        """
        Stream ids the plan reads from but does not define or produce.
        
        Returns:
            Stream ids in order of first reference
        """
        text = self.COMMENT_PATTERN.sub(" ", body)
        local = self._local_streams(text)
        
        seen: Set[str] = set()
        result: List[str] = []
        for name in self._referenced_streams(text):
            if name in local or name in seen:
                continue
            seen.add(name)
            result.append(name)
        return result
    
    def _local_streams(self, text: str) -> Set[str]:
        local = set(self.DEFINE_PATTERN.findall(text))
        local.update(self.INSERT_PATTERN.findall(text))
        return local
    
    def _referenced_streams(self, text: str) -> List[str]:
        names: List[str] = []
        
        for clause in self.PARTITION_PATTERN.findall(text):
            names.extend(self.PARTITION_SOURCE_PATTERN.findall(clause))
        
        for statement in text.split(";"):
            for clause in self.FROM_PATTERN.findall(statement):
                names.extend(self._sources(clause))
        return names
    
    def _sources(self, clause: str) -> List[str]:
        stripped = self.FILTER_PATTERN.sub(" ", clause)
        while stripped != clause:
            clause = stripped
            stripped = self.FILTER_PATTERN.sub(" ", clause)
        
        for pattern in self.NOISE_PATTERNS:
            clause = pattern.sub(" ", clause)
        
        return [
            name for name in self.NAME_PATTERN.findall(clause)
            if not name.startswith("#") and name.lower() not in self.KEYWORDS
        ]


def enrich_plan(
    schemas: SchemaRegistry,
    body: Optional[str],
    planner: Optional[Planner] = None,
    plan_id: Optional[str] = None,
) -> str:
    """Enrich a plan body with the default planner unless one is given."""
    return (planner or ExecutionPlanner()).enrich(schemas, body, plan_id=plan_id)
